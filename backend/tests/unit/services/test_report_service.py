"""
Unit tests for ReportService.

Covers submission (submitter snapshot and metrics), lookups, remarks with
participant notifications, and administrator-only deletion.
"""

from datetime import date

import pytest

from backend.src.models import Notification, Report, ReportRemark
from backend.src.models.user import UserRole
from backend.src.services.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from backend.src.services.report_service import ReportService


class TestCreateReport:
    """Tests for report submission."""

    def test_copies_submitter_details(self, test_db_session, sample_user):
        user = sample_user(display_name="Ravi Kumar", regions=["North", "East"])

        report = ReportService(test_db_session).create_report(
            user,
            "ASC-7",
            metrics={"good_inventory": 42, "outstanding_amount": 1250.5},
            region="East",
        )

        assert report.guid.startswith("rpt_")
        assert report.submitted_by_name == "Ravi Kumar"
        assert report.submitted_by_role == "User"
        assert report.submitted_by_region == "East"
        assert report.report_date == date.today()
        assert report.good_inventory == 42
        assert report.outstanding_amount == 1250.5
        assert report.defective_inventory == 0

    def test_region_less_submitter(self, test_db_session, sample_user):
        admin = sample_user(role=UserRole.ADMIN)

        report = ReportService(test_db_session).create_report(admin, "HQ Review")

        assert report.submitted_by_region is None
        assert report.submitted_by_role == "Admin"

    def test_explicit_report_date(self, test_db_session, sample_user):
        report = ReportService(test_db_session).create_report(
            sample_user(), "ASC-7", report_date=date(2026, 10, 1)
        )
        assert report.report_date == date(2026, 10, 1)

    def test_single_region_used_by_default(self, test_db_session, sample_user):
        user = sample_user(regions=["South"])

        report = ReportService(test_db_session).create_report(user, "ASC-7")

        assert report.submitted_by_region == "South"

    def test_region_required_for_multi_region_submitter(self, test_db_session, sample_user):
        user = sample_user(regions=["North", "South"])

        with pytest.raises(ValidationError) as exc_info:
            ReportService(test_db_session).create_report(user, "ASC-7")

        assert exc_info.value.field == "region"
        assert test_db_session.query(Report).count() == 0

    def test_unassigned_region_rejected(self, test_db_session, sample_user):
        user = sample_user(regions=["North"])

        with pytest.raises(ValidationError) as exc_info:
            ReportService(test_db_session).create_report(user, "ASC-7", region="South")

        assert exc_info.value.field == "region"

    def test_region_less_submitter_cannot_pick_region(self, test_db_session, sample_user):
        admin = sample_user(role=UserRole.ADMIN)

        with pytest.raises(ValidationError):
            ReportService(test_db_session).create_report(admin, "HQ Review", region="HQ")

    def test_opening_remark_saved_with_report(self, test_db_session, sample_user):
        user = sample_user(display_name="Ravi Kumar", regions=["North"])

        report = ReportService(test_db_session).create_report(
            user, "ASC-7", remarks="  Two units pending pickup.  "
        )

        assert len(report.remarks) == 1
        remark = report.remarks[0]
        assert remark.text == "Two units pending pickup."
        assert remark.author_id == user.id
        assert remark.author_name == "Ravi Kumar"
        assert remark.guid.startswith("rmk_")
        assert test_db_session.query(Notification).count() == 0

    def test_blank_opening_remark_ignored(self, test_db_session, sample_user):
        report = ReportService(test_db_session).create_report(
            sample_user(), "ASC-7", remarks="   "
        )

        assert report.remarks == []
        assert test_db_session.query(ReportRemark).count() == 0

    def test_unknown_metric_rejected(self, test_db_session, sample_user):
        with pytest.raises(ValidationError) as exc_info:
            ReportService(test_db_session).create_report(
                sample_user(), "ASC-7", metrics={"profit": 1}
            )
        assert exc_info.value.field == "metrics"


class TestGetAndListReports:
    """Tests for report lookups."""

    def test_get_by_guid(self, test_db_session, sample_user, sample_report):
        report = sample_report(sample_user())

        found = ReportService(test_db_session).get_report(report.guid)

        assert found.id == report.id

    def test_get_malformed_guid(self, test_db_session):
        with pytest.raises(NotFoundError):
            ReportService(test_db_session).get_report("not-a-guid")

    def test_get_unknown_guid(self, test_db_session):
        with pytest.raises(NotFoundError):
            ReportService(test_db_session).get_report("rpt_01hgw2bbg0000000000000000")

    def test_list_filters(self, test_db_session, sample_user, sample_report):
        north_user = sample_user(regions=["North"])
        south_user = sample_user(regions=["South"])
        sample_report(north_user)
        sample_report(north_user)
        sample_report(south_user)
        service = ReportService(test_db_session)

        all_reports, total = service.list_reports()
        north, north_total = service.list_reports(region="North")
        mine, mine_total = service.list_reports(submitted_by_id=south_user.id)

        assert total == 3 and len(all_reports) == 3
        assert north_total == 2
        assert all(r.submitted_by_region == "North" for r in north)
        assert mine_total == 1

    def test_list_pagination(self, test_db_session, sample_user, sample_report):
        user = sample_user()
        for i in range(5):
            sample_report(user, location_name=f"ASC-{i}")

        page, total = ReportService(test_db_session).list_reports(limit=2, offset=2)

        assert total == 5
        assert len(page) == 2


class TestRemarks:
    """Tests for remarks and participant notifications."""

    def test_remark_notifies_submitter(self, test_db_session, sample_user, sample_report):
        submitter = sample_user(display_name="Ravi Kumar")
        manager = sample_user(role=UserRole.RSM, display_name="Priya Shah")
        report = sample_report(submitter, location_name="ASC-7")

        remark = ReportService(test_db_session).add_remark(report.guid, manager, "  Good work  ")

        assert remark.guid.startswith("rmk_")
        assert remark.text == "Good work"
        assert remark.author_name == "Priya Shah"

        notifications = test_db_session.query(Notification).all()
        assert len(notifications) == 1
        assert notifications[0].user_id == submitter.id
        assert notifications[0].message == 'Priya Shah commented on the report for "ASC-7"'
        assert notifications[0].report_id == report.id

    def test_remark_notifies_earlier_commenters_not_author(
        self, test_db_session, sample_user, sample_report
    ):
        submitter = sample_user(display_name="Ravi Kumar")
        manager = sample_user(role=UserRole.RSM, display_name="Priya Shah")
        admin = sample_user(role=UserRole.ADMIN, display_name="Head Office")
        report = sample_report(submitter)
        service = ReportService(test_db_session)

        service.add_remark(report.guid, manager, "First")
        service.add_remark(report.guid, admin, "Second")

        latest = (
            test_db_session.query(Notification)
            .filter(Notification.message.like(f"{admin.display_name}%"))
            .all()
        )
        assert {n.user_id for n in latest} == {submitter.id, manager.id}

    def test_submitter_replying_notifies_others_only(
        self, test_db_session, sample_user, sample_report
    ):
        submitter = sample_user()
        manager = sample_user(role=UserRole.RSM)
        report = sample_report(submitter)
        service = ReportService(test_db_session)
        service.add_remark(report.guid, manager, "Question")

        service.add_remark(report.guid, submitter, "Answer")

        recipients = [n.user_id for n in test_db_session.query(Notification).order_by(Notification.id)]
        assert recipients == [submitter.id, manager.id]

    def test_remarks_ordered_on_report(self, test_db_session, sample_user, sample_report):
        submitter = sample_user()
        report = sample_report(submitter)
        service = ReportService(test_db_session)

        service.add_remark(report.guid, submitter, "one")
        service.add_remark(report.guid, submitter, "two")

        assert [r.text for r in service.get_report(report.guid).remarks] == ["one", "two"]

    def test_blank_remark_rejected(self, test_db_session, sample_user, sample_report):
        report = sample_report(sample_user())

        with pytest.raises(ValidationError):
            ReportService(test_db_session).add_remark(report.guid, sample_user(), "   ")

    def test_remark_on_unknown_report(self, test_db_session, sample_user):
        with pytest.raises(NotFoundError):
            ReportService(test_db_session).add_remark(
                "rpt_01hgw2bbg0000000000000000", sample_user(), "Hello"
            )


class TestDeleteReport:
    """Tests for administrator-only deletion."""

    def test_admin_deletes_report_and_remarks(self, test_db_session, sample_user, sample_report):
        submitter = sample_user()
        admin = sample_user(role=UserRole.ADMIN)
        report = sample_report(submitter)
        service = ReportService(test_db_session)
        service.add_remark(report.guid, admin, "Duplicate report")
        guid = report.guid

        service.delete_report(guid, actor=admin)

        assert test_db_session.query(Report).count() == 0
        assert test_db_session.query(ReportRemark).count() == 0
        assert test_db_session.query(Notification).count() == 0

    @pytest.mark.parametrize("role", [UserRole.USER, UserRole.RSM, UserRole.ASM])
    def test_non_admin_cannot_delete(self, test_db_session, sample_user, sample_report, role):
        report = sample_report(sample_user())

        with pytest.raises(PermissionDeniedError):
            ReportService(test_db_session).delete_report(report.guid, actor=sample_user(role=role))
        assert test_db_session.query(Report).count() == 1

    def test_delete_unknown_report(self, test_db_session, sample_user):
        with pytest.raises(NotFoundError):
            ReportService(test_db_session).delete_report(
                "rpt_01hgw2bbg0000000000000000", actor=sample_user(role=UserRole.ADMIN)
            )
