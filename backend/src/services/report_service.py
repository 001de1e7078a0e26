"""
Report service for daily activity report submission and review.

Provides business logic for:
- Submitting reports (submitter snapshot, chosen region, optional opening remark)
- Retrieving and listing reports
- Appending remarks, with in-app notifications for discussion participants
- Administrator-only deletion
"""

from datetime import date
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from backend.src.models.notification import NotificationType
from backend.src.models.report import Report, ReportRemark
from backend.src.models.user import User
from backend.src.services.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from backend.src.services.notification_service import NotificationService
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


REPORT_METRIC_FIELDS = (
    "outstanding_amount",
    "oow_collection",
    "good_inventory",
    "defective_inventory",
    "agreement_dispatch",
    "sd_collection",
    "multibrand_stn_dispatched",
    "multibrand_pending_stns",
)


class ReportService:
    """Service for report lifecycle operations."""

    def __init__(self, db: Session):
        self.db = db

    def create_report(
        self,
        submitter: User,
        location_name: str,
        report_date: Optional[date] = None,
        metrics: Optional[Dict[str, float]] = None,
        region: Optional[str] = None,
        remarks: Optional[str] = None,
    ) -> Report:
        """
        Submit a daily report.

        The submitter's display name and role are copied onto the report,
        along with the region it is filed under. Staff without a region
        produce region-less reports.

        Args:
            submitter: Submitting user
            location_name: Visited location name
            report_date: Business day covered (default: today)
            metrics: Business metric values keyed by REPORT_METRIC_FIELDS
            region: Region the report is for. Must be one of the submitter's
                regions; required when the submitter has more than one.
            remarks: Opening remark, stored as the report's first remark

        Returns:
            Created Report instance

        Raises:
            ValidationError: If a metric name is unknown or the region is
                missing or not assigned to the submitter
        """
        metrics = metrics or {}
        unknown = set(metrics) - set(REPORT_METRIC_FIELDS)
        if unknown:
            raise ValidationError(
                f"Unknown report metric(s): {', '.join(sorted(unknown))}",
                field="metrics",
            )

        report = Report(
            report_date=report_date or date.today(),
            submitted_by_id=submitter.id,
            submitted_by_name=submitter.display_name,
            submitted_by_role=submitter.role.value,
            submitted_by_region=self._report_region(submitter, region),
            location_name=location_name,
            **{name: value for name, value in metrics.items() if value is not None},
        )
        self.db.add(report)

        opening_remark = (remarks or "").strip()
        if opening_remark:
            report.remarks.append(
                ReportRemark(
                    author_id=submitter.id,
                    author_name=submitter.display_name,
                    text=opening_remark,
                )
            )

        self.db.commit()
        self.db.refresh(report)

        logger.info(
            "Created report",
            extra={
                "guid": report.guid,
                "user_id": submitter.id,
                "region": report.submitted_by_region,
                "with_remark": bool(opening_remark),
            },
        )
        return report

    @staticmethod
    def _report_region(submitter: User, region: Optional[str]) -> Optional[str]:
        assigned = submitter.regions
        if region:
            if region not in assigned:
                raise ValidationError(
                    f"Region '{region}' is not assigned to this user",
                    field="region",
                )
            return region
        if len(assigned) > 1:
            raise ValidationError(
                "Region is required for users assigned to several regions",
                field="region",
            )
        return assigned[0] if assigned else None

    def get_report(self, guid: str) -> Report:
        """
        Get a report by GUID.

        Raises:
            NotFoundError: If the GUID is malformed or unknown
        """
        try:
            uuid_value = Report.parse_guid(guid)
        except ValueError:
            raise NotFoundError("Report", guid)

        report = self.db.query(Report).filter(Report.uuid == uuid_value).first()
        if not report:
            raise NotFoundError("Report", guid)
        return report

    def list_reports(
        self,
        limit: int = 50,
        offset: int = 0,
        region: Optional[str] = None,
        submitted_by_id: Optional[int] = None,
    ) -> Tuple[List[Report], int]:
        """
        List reports, newest first.

        Args:
            limit: Maximum results
            offset: Number to skip
            region: Only reports from this region
            submitted_by_id: Only reports from this user

        Returns:
            Tuple of (reports, total count)
        """
        query = self.db.query(Report)
        if region:
            query = query.filter(Report.submitted_by_region == region)
        if submitted_by_id is not None:
            query = query.filter(Report.submitted_by_id == submitted_by_id)

        total = query.count()
        reports = (
            query.order_by(Report.created_at.desc(), Report.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return reports, total

    def add_remark(self, guid: str, author: User, text: str) -> ReportRemark:
        """
        Append a remark to a report.

        Everyone taking part in the report's discussion (the submitter and
        all earlier remark authors) gets an in-app notification, except the
        author of the new remark.

        Raises:
            NotFoundError: If the report does not exist
            ValidationError: If the remark text is blank
        """
        text = (text or "").strip()
        if not text:
            raise ValidationError("Remark text cannot be empty", field="text")

        report = self.get_report(guid)
        remark = ReportRemark(
            report_id=report.id,
            author_id=author.id,
            author_name=author.display_name,
            text=text,
        )
        self.db.add(remark)

        participants = {report.submitted_by_id}
        participants.update(existing.author_id for existing in report.remarks)
        participants.discard(author.id)

        message = (
            f'{author.display_name or author.email} commented on the report for '
            f'"{report.location_name or "a location"}"'
        )
        notifications = NotificationService(self.db)
        for user_id in sorted(participants):
            notifications.create_notification(
                user_id=user_id,
                message=message,
                notification_type=NotificationType.COMMENT,
                report_id=report.id,
                commit=False,
            )

        self.db.commit()
        self.db.refresh(remark)
        self.db.refresh(report)

        logger.info(
            "Added remark",
            extra={
                "report_guid": report.guid,
                "user_id": author.id,
                "notified": len(participants),
            },
        )
        return remark

    def delete_report(self, guid: str, actor: User) -> None:
        """
        Delete a report with its remarks.

        Raises:
            PermissionDeniedError: If the actor is not an administrator
            NotFoundError: If the report does not exist
        """
        if not actor.is_admin:
            raise PermissionDeniedError("Only administrators can delete reports")

        report = self.get_report(guid)
        self.db.delete(report)
        self.db.commit()
        logger.info("Deleted report", extra={"guid": guid, "user_id": actor.id})
