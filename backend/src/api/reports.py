"""
Reports API endpoints.

Provides endpoints for:
- Submitting a report (schedules the report notification pipeline)
- Listing and retrieving reports
- Appending remarks
- Deleting reports (administrators only)
"""

from typing import Awaitable, Callable, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from backend.src.db.database import get_db
from backend.src.middleware.auth import get_current_user
from backend.src.models.user import User
from backend.src.schemas.report import (
    RemarkCreate,
    RemarkResponse,
    ReportCreate,
    ReportListResponse,
    ReportResponse,
)
from backend.src.services.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from backend.src.services.report_events import ReportCreatedEvent, run_report_created_pipeline
from backend.src.services.report_service import ReportService
from backend.src.utils.logging_config import get_logger


logger = get_logger("api")

router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
)


ReportEventHandler = Callable[[ReportCreatedEvent], Awaitable[object]]


# ============================================================================
# Dependencies
# ============================================================================


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    """Create ReportService instance with database session."""
    return ReportService(db=db)


def get_report_event_handler() -> ReportEventHandler:
    """Handler invoked in the background for every newly created report."""
    return run_report_created_pipeline


# ============================================================================
# Endpoints
# ============================================================================


@router.post(
    "",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a daily report",
)
async def create_report(
    body: ReportCreate,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
    on_report_created: ReportEventHandler = Depends(get_report_event_handler),
):
    """
    Submit a report as the authenticated user.

    Administrators and the regional managers of the report's region are
    notified by push once the response has been sent.
    """
    try:
        report = service.create_report(
            submitter=user,
            location_name=body.location_name,
            report_date=body.report_date,
            metrics=body.metrics(),
            region=body.region.value if body.region else None,
            remarks=body.remarks,
        )
    except ValidationError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=err.message,
        ) from err

    background_tasks.add_task(on_report_created, ReportCreatedEvent.from_report(report))
    return ReportResponse.from_report(report)


@router.get(
    "",
    response_model=ReportListResponse,
    summary="List reports",
)
async def list_reports(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    region: Optional[str] = Query(None, description="Filter by submitter region"),
    mine: bool = Query(False, description="Only reports submitted by the caller"),
    user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    """List reports newest first."""
    reports, total = service.list_reports(
        limit=limit,
        offset=offset,
        region=region,
        submitted_by_id=user.id if mine else None,
    )
    return ReportListResponse(
        items=[ReportResponse.from_report(report) for report in reports],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/{guid}",
    response_model=ReportResponse,
    summary="Get a report",
)
async def get_report(
    guid: str,
    user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    try:
        report = service.get_report(guid)
    except NotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Report not found",
        ) from err
    return ReportResponse.from_report(report)


@router.post(
    "/{guid}/remarks",
    response_model=RemarkResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a remark to a report",
)
async def add_remark(
    guid: str,
    body: RemarkCreate,
    user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    """
    Append a remark. Other participants in the discussion receive an in-app
    notification.
    """
    try:
        remark = service.add_remark(guid, author=user, text=body.text)
    except NotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Report not found",
        ) from err
    except ValidationError as err:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=err.message,
        ) from err
    return RemarkResponse.from_remark(remark)


@router.delete(
    "/{guid}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a report",
)
async def delete_report(
    guid: str,
    user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    """Delete a report and its remarks. Administrators only."""
    try:
        service.delete_report(guid, actor=user)
    except PermissionDeniedError as err:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=err.message,
        ) from err
    except NotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Report not found",
        ) from err
