"""
Report endpoints - API routes for report submission, listing and status changes.
"""

from typing import List, Optional
from fastapi import APIRouter, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool
import logging

from app.models.priority import PriorityResponse
from app.models.report import (
    ReportCreate,
    ReportListResponse,
    ReportResponse,
    ReportUpdateResponse,
    StatusUpdateRequest,
)
from app.services.geo_features.base import FeatureFetchError
from app.services.priority_scoring import get_priority_scoring_service
from app.services.report_service import (
    ReportNotFoundError,
    create_report,
    get_report_by_id,
    list_reports,
    list_reports_by_status,
    update_report_status,
)
from app.services.status_workflow import InvalidStatusTransitionError, ReportStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def submit_report(report: ReportCreate):
    """
    Submit a new geotagged report.

    Missing or malformed fields are rejected with 422 before anything is stored.
    """
    try:
        logger.info(f"📝 POST /reports - Creating report for user={report.user_id}")
        result = await create_report(report)
        logger.info(f"✅ Report created successfully: {result.id}")
        return result
    except Exception as e:
        logger.error(f"❌ POST /reports - Report creation failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Report creation failed: {str(e)}"
        )


@router.get("", response_model=List[ReportResponse])
async def get_reports(user_id: Optional[str] = Query(None, description="Only reports submitted by this user")):
    try:
        return await list_reports(user_id=user_id)
    except Exception as e:
        logger.error(f"Failed to retrieve reports: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrieve reports: {str(e)}",
        )


async def _reports_in_status(report_status: ReportStatus) -> ReportListResponse:
    try:
        reports = await list_reports_by_status(report_status)
    except Exception as e:
        logger.error(f"Failed to retrieve {report_status.value} reports: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error.",
        )

    if not reports:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No {report_status.value} reports found.",
        )

    return ReportListResponse(
        message=f"{report_status.value.capitalize()} reports retrieved successfully.",
        reports=reports,
    )


@router.get("/status/{report_status}", response_model=ReportListResponse)
async def get_reports_by_status(report_status: ReportStatus):
    """
    List reports in one status. Returns 404 when none match.
    """
    return await _reports_in_status(report_status)


@router.get("/pending", response_model=ReportListResponse)
async def get_pending_reports():
    """Reports that nobody has started working on yet."""
    return await _reports_in_status(ReportStatus.REPORTED)


@router.get("/resolved", response_model=ReportListResponse)
async def get_resolved_reports():
    return await _reports_in_status(ReportStatus.RESOLVED)


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(report_id: str):
    try:
        return await get_report_by_id(report_id)
    except ReportNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to retrieve report {report_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrieve report: {str(e)}",
        )


async def _change_status(report_id: str, new_status: ReportStatus) -> ReportUpdateResponse:
    try:
        updated_report = await update_report_status(report_id, new_status)
    except ReportNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except InvalidStatusTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating report {report_id} status: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error.",
        )

    return ReportUpdateResponse(
        message=f"Report status updated to {new_status.value}.",
        report=updated_report,
    )


@router.patch("/{report_id}/status", response_model=ReportUpdateResponse)
async def change_status(report_id: str, request: StatusUpdateRequest):
    """
    Change report status.

    Appends the change time to the report's timestamp history.

    Errors:
        404: Report not found
        409: Transition rejected (only when strict transitions are enabled)
    """
    return await _change_status(report_id, request.status)


@router.post("/{report_id}/in-progress", response_model=ReportUpdateResponse)
async def mark_in_progress(report_id: str):
    return await _change_status(report_id, ReportStatus.IN_PROGRESS)


@router.post("/{report_id}/resolve", response_model=ReportUpdateResponse)
async def mark_resolved(report_id: str):
    return await _change_status(report_id, ReportStatus.RESOLVED)


@router.get("/{report_id}/priority", response_model=PriorityResponse)
async def get_report_priority(report_id: str):
    """
    Priority score for a stored report's location. Computed on every call.
    """
    try:
        report = await get_report_by_id(report_id)
        return await run_in_threadpool(
            get_priority_scoring_service().score_location, report.latitude, report.longitude
        )
    except ReportNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except FeatureFetchError as e:
        logger.error(f"Priority scoring for report {report_id} failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch data or calculate score",
        )
