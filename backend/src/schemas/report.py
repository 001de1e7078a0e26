"""
Pydantic schemas for report API request/response validation.

Provides data validation and serialization for:
- Report submission
- Report detail and list responses
- Remark creation and responses
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer

from backend.src.models.report import Report, ReportRemark
from backend.src.models.user import Region


class ReportMetrics(BaseModel):
    """Business metrics captured on a daily report. All values are non-negative."""

    outstanding_amount: float = Field(default=0, ge=0)
    oow_collection: float = Field(default=0, ge=0)
    good_inventory: int = Field(default=0, ge=0)
    defective_inventory: int = Field(default=0, ge=0)
    agreement_dispatch: int = Field(default=0, ge=0)
    sd_collection: float = Field(default=0, ge=0)
    multibrand_stn_dispatched: int = Field(default=0, ge=0)
    multibrand_pending_stns: int = Field(default=0, ge=0)


class ReportCreate(ReportMetrics):
    """
    Schema for submitting a report.

    Required:
        location_name: Visited location

    Optional:
        report_date: Business day covered (default: today)
        region: Region the report is for; required when the submitter
            has several regions
        remarks: Opening remark stored with the report
        metric fields (default: 0)
    """

    location_name: str = Field(..., min_length=1, max_length=255)
    report_date: Optional[date] = None
    region: Optional[Region] = None
    remarks: Optional[str] = Field(default=None, max_length=2000)

    def metrics(self) -> dict:
        return self.model_dump(include=set(ReportMetrics.model_fields))

    model_config = {
        "json_schema_extra": {
            "example": {
                "location_name": "ASC-7",
                "region": "North",
                "outstanding_amount": 12500.0,
                "oow_collection": 3400.0,
                "good_inventory": 42,
                "defective_inventory": 3,
            }
        }
    }


class RemarkCreate(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)


class RemarkResponse(BaseModel):
    """Response schema for a report remark."""

    guid: str = Field(..., description="Remark GUID (rmk_xxx)")
    author_guid: Optional[str] = None
    author_name: Optional[str] = None
    text: str
    created_at: datetime

    @field_serializer("created_at")
    @classmethod
    def serialize_datetime_utc(cls, v: datetime) -> str:
        """Serialize datetime as ISO 8601 with explicit UTC timezone."""
        return v.isoformat() + "Z"

    @classmethod
    def from_remark(cls, remark: ReportRemark) -> "RemarkResponse":
        return cls(
            guid=remark.guid,
            author_guid=remark.author.guid if remark.author else None,
            author_name=remark.author_name,
            text=remark.text,
            created_at=remark.created_at,
        )


class ReportResponse(ReportMetrics):
    """Response schema for a report with its remarks timeline."""

    guid: str = Field(..., description="Report GUID (rpt_xxx)")
    report_date: date
    created_at: datetime
    submitted_by_guid: str
    submitted_by_name: Optional[str] = None
    submitted_by_role: str
    submitted_by_region: Optional[str] = None
    location_name: Optional[str] = None
    remarks: List[RemarkResponse] = Field(default_factory=list)

    @field_serializer("created_at")
    @classmethod
    def serialize_datetime_utc(cls, v: datetime) -> str:
        """Serialize datetime as ISO 8601 with explicit UTC timezone."""
        return v.isoformat() + "Z"

    @classmethod
    def from_report(cls, report: Report) -> "ReportResponse":
        metrics = {name: getattr(report, name) for name in ReportMetrics.model_fields}
        return cls(
            guid=report.guid,
            report_date=report.report_date,
            created_at=report.created_at,
            submitted_by_guid=report.submitted_by.guid,
            submitted_by_name=report.submitted_by_name,
            submitted_by_role=report.submitted_by_role,
            submitted_by_region=report.submitted_by_region,
            location_name=report.location_name,
            remarks=[RemarkResponse.from_remark(remark) for remark in report.remarks],
            **metrics,
        )


class ReportListResponse(BaseModel):
    items: List[ReportResponse]
    total: int
    limit: int
    offset: int
