"""
Report-created event and the trigger entry point for report notifications.

The notification pipeline only ever sees a ReportCreatedEvent, so it can be
driven by any event source: a background task after an API submission, a
webhook call, or a message-queue consumer. run_report_created_pipeline is
the single function those triggers call.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from sqlalchemy.orm import Session

from backend.src.utils.logging_config import get_logger


logger = get_logger("push")


@dataclass(frozen=True)
class ReportCreatedEvent:
    """
    Fields of a newly created report that the notification pipeline needs.

    Attributes:
        report_id: Report GUID (rpt_xxx), used for the deep link
        submitted_by: Submitter account GUID (usr_xxx)
        submitted_by_name: Submitter display name, if known
        submitted_by_role: Submitter role value
        submitted_by_region: Submitter region; None for region-less reports
        location_name: Visited location name, if known
    """

    report_id: str
    submitted_by: str
    submitted_by_name: Optional[str] = None
    submitted_by_role: Optional[str] = None
    submitted_by_region: Optional[str] = None
    location_name: Optional[str] = None

    @classmethod
    def from_report(cls, report: Any) -> "ReportCreatedEvent":
        """Build the event from a persisted Report row."""
        return cls(
            report_id=report.guid,
            submitted_by=report.submitted_by.guid,
            submitted_by_name=report.submitted_by_name,
            submitted_by_role=report.submitted_by_role,
            submitted_by_region=report.submitted_by_region or None,
            location_name=report.location_name,
        )


async def run_report_created_pipeline(
    event: ReportCreatedEvent,
    session_factory: Optional[Callable[[], Session]] = None,
):
    """
    Run the report notification pipeline in its own database session.

    Used as a fire-and-forget background task, so it never raises: every
    failure ends up in the push log.

    Args:
        event: The report-created event
        session_factory: Session factory (defaults to SessionLocal)

    Returns:
        PipelineOutcome, or None if the pipeline could not be built
    """
    # Import here to avoid circular imports
    from backend.src.services.report_notification_service import ReportNotificationService

    if session_factory is None:
        from backend.src.db.database import SessionLocal
        session_factory = SessionLocal

    db = session_factory()
    try:
        service = ReportNotificationService.from_settings(db)
        return await service.notify_report_created(event)
    except Exception as e:
        logger.error(
            f"Report notification pipeline could not run: {e}",
            extra={"report_id": event.report_id},
            exc_info=True,
        )
        return None
    finally:
        db.close()
