"""
Pydantic schemas for the report-created webhook.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from backend.src.services.report_events import ReportCreatedEvent


class ReportCreatedPayload(BaseModel):
    """
    Fields of a newly created report, as sent by an external event source.

    Only report_id and submitted_by are required; missing names fall back
    to generic wording in the notification text.
    """

    report_id: str = Field(..., min_length=1)
    submitted_by: str = Field(..., min_length=1)
    submitted_by_name: Optional[str] = None
    submitted_by_role: Optional[str] = None
    submitted_by_region: Optional[str] = None
    location_name: Optional[str] = None

    def to_event(self) -> ReportCreatedEvent:
        return ReportCreatedEvent(
            report_id=self.report_id,
            submitted_by=self.submitted_by,
            submitted_by_name=self.submitted_by_name,
            submitted_by_role=self.submitted_by_role,
            submitted_by_region=self.submitted_by_region or None,
            location_name=self.location_name,
        )


class FailedTokenResponse(BaseModel):
    token: str
    error: Optional[str] = None


class PipelineOutcomeResponse(BaseModel):
    """Summary of one notification pipeline run."""

    report_id: str
    state: str
    recipient_count: int
    token_count: int
    success_count: int
    failure_count: int
    failed_tokens: List[FailedTokenResponse] = Field(default_factory=list)
    error: Optional[str] = None
