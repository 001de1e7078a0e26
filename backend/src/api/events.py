"""
Event intake API for external report-created triggers.

Lets an external event source (database trigger, queue consumer, another
service) hand a newly created report to the notification pipeline. The
pipeline runs inline and its outcome is returned for the caller's logs.
"""

import hmac
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from backend.src.config.settings import get_settings
from backend.src.db.database import get_db
from backend.src.schemas.events import (
    FailedTokenResponse,
    PipelineOutcomeResponse,
    ReportCreatedPayload,
)
from backend.src.services.report_notification_service import (
    PipelineOutcome,
    ReportNotificationService,
)
from backend.src.utils.logging_config import get_logger
from backend.src.utils.rate_limiter import limiter


logger = get_logger("api")

router = APIRouter(
    prefix="/events",
    tags=["Events"],
)


def get_report_notification_service(
    db: Session = Depends(get_db),
) -> ReportNotificationService:
    """Create the report notification pipeline with database session and settings."""
    return ReportNotificationService.from_settings(db)


def verify_webhook_secret(
    x_webhook_secret: Optional[str] = Header(default=None),
) -> None:
    """
    Check the shared webhook secret.

    Raises:
        HTTPException 503: If no secret is configured (webhook disabled)
        HTTPException 401: If the header is missing or wrong
    """
    settings = get_settings()
    if not settings.webhook_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Event webhook is not configured",
        )
    if not x_webhook_secret or not hmac.compare_digest(
        x_webhook_secret, settings.event_webhook_secret
    ):
        logger.warning("Rejected report-created webhook call: bad secret")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook secret",
        )


def _to_response(outcome: PipelineOutcome) -> PipelineOutcomeResponse:
    failed = outcome.summary.failed if outcome.summary else []
    return PipelineOutcomeResponse(
        report_id=outcome.report_id,
        state=outcome.state.value,
        recipient_count=outcome.recipient_count,
        token_count=outcome.token_count,
        success_count=outcome.success_count,
        failure_count=outcome.failure_count,
        failed_tokens=[
            FailedTokenResponse(token=failure.token, error=failure.error)
            for failure in failed
        ],
        error=outcome.error,
    )


@router.post(
    "/report-created",
    response_model=PipelineOutcomeResponse,
    summary="Notify recipients about a newly created report",
    dependencies=[Depends(verify_webhook_secret)],
)
@limiter.limit("120/minute")
async def report_created(
    request: Request,
    body: ReportCreatedPayload,
    service: ReportNotificationService = Depends(get_report_notification_service),
):
    """
    Run the report notification pipeline for the given report.

    Always answers 200 once the payload is valid: delivery problems are
    reported in the outcome, never as an HTTP error.
    """
    outcome = await service.notify_report_created(body.to_event())
    return _to_response(outcome)
