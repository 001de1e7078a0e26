"""
Report model for daily activity submissions.

A report is created once by field staff, accumulates remarks from
managers afterwards, and is only ever deleted by an administrator.
Submitter name, role and region are copied onto the report at submission
time so later profile edits do not rewrite history.
"""

from datetime import date, datetime

from sqlalchemy import (
    Column, Date, DateTime, Float, ForeignKey, Integer, String, Text,
)
from sqlalchemy.orm import relationship

from backend.src.models import Base
from backend.src.models.mixins import GuidMixin


class Report(Base, GuidMixin):
    """
    Daily activity report.

    Attributes:
        report_date: Business day the report covers
        created_at: Submission timestamp
        submitted_by_id: FK to the submitting user
        submitted_by_name: Submitter display name at submission time
        submitted_by_role: Submitter role value at submission time
        submitted_by_region: Submitter region, None for region-less staff
        location_name: Visited service-centre name
        outstanding_amount .. multibrand_pending_stns: Business metrics

    Relationships:
        submitted_by: Submitting User (many-to-one)
        remarks: ReportRemark rows ordered by creation time
    """

    __tablename__ = "reports"
    GUID_PREFIX = "rpt"

    id = Column(Integer, primary_key=True, autoincrement=True)

    report_date = Column(Date, default=date.today, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)

    submitted_by_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    submitted_by_name = Column(String(255), nullable=True)
    submitted_by_role = Column(String(20), nullable=False)
    submitted_by_region = Column(String(50), nullable=True, index=True)

    location_name = Column(String(255), nullable=True)

    # Business metrics
    outstanding_amount = Column(Float, default=0, nullable=False)
    oow_collection = Column(Float, default=0, nullable=False)
    good_inventory = Column(Integer, default=0, nullable=False)
    defective_inventory = Column(Integer, default=0, nullable=False)
    agreement_dispatch = Column(Integer, default=0, nullable=False)
    sd_collection = Column(Float, default=0, nullable=False)
    multibrand_stn_dispatched = Column(Integer, default=0, nullable=False)
    multibrand_pending_stns = Column(Integer, default=0, nullable=False)

    submitted_by = relationship("User", lazy="joined")
    remarks = relationship(
        "ReportRemark",
        back_populates="report",
        cascade="all, delete-orphan",
        order_by="ReportRemark.created_at",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Report(id={self.id}, location='{self.location_name}')>"


class ReportRemark(Base, GuidMixin):
    """Timestamped remark appended to a report."""

    __tablename__ = "report_remarks"
    GUID_PREFIX = "rmk"

    id = Column(Integer, primary_key=True, autoincrement=True)
    report_id = Column(
        Integer,
        ForeignKey("reports.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    author_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    author_name = Column(String(255), nullable=True)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    report = relationship("Report", back_populates="remarks")
    author = relationship("User")
