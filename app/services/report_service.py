"""
Report service - Business logic for citizen report handling.
Handles Firestore CRUD operations for reports.

Store contract used here:
- insert one report
- find reports by filter (user_id, status)
- find one report by id
- update one report's status and append a timestamp
"""

from app.config.firebase import get_db
from app.core.settings import settings
from app.models.report import ReportCreate, ReportResponse
from app.services.status_workflow import StatusWorkflowEngine, ReportStatus
from app.utils.firestore_helpers import run_in_transaction, where_filter
from datetime import datetime, timezone
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

REPORTS_COLLECTION = "reports"


class ReportNotFoundError(LookupError):
    """Raised when a report id does not resolve to a stored report."""

    def __init__(self, report_id: str):
        self.report_id = report_id
        super().__init__(f"Report {report_id} not found")


def _to_response(doc_id: str, data: Dict) -> ReportResponse:
    return ReportResponse(
        id=doc_id,
        user_id=data["user_id"],
        photo_url=data["photo_url"],
        latitude=data["latitude"],
        longitude=data["longitude"],
        comment=data.get("comment"),
        status=data.get("status", ReportStatus.REPORTED.value),
        timestamps=data.get("timestamps") or [],
        created_at=data.get("created_at"),
    )


def _sort_newest_first(reports: List[ReportResponse]) -> List[ReportResponse]:
    epoch = datetime.min.replace(tzinfo=timezone.utc)

    def _key(report: ReportResponse):
        created_at = report.created_at
        if created_at is None:
            return epoch
        if created_at.tzinfo is None:
            return created_at.replace(tzinfo=timezone.utc)
        return created_at

    return sorted(reports, key=_key, reverse=True)


async def create_report(report_data: ReportCreate) -> ReportResponse:
    """
    Create a new citizen report and store it in Firestore.

    The report starts as `reported` and its timestamp history holds the
    creation time.

    Args:
        report_data: Validated report data from POST request

    Returns:
        ReportResponse: The created report with generated ID and timestamps
    """
    db = get_db()

    now = datetime.now(timezone.utc)
    doc_ref = db.collection(REPORTS_COLLECTION).document()
    report_dict = {
        "user_id": report_data.user_id,
        "photo_url": report_data.photo_url,
        "latitude": report_data.latitude,
        "longitude": report_data.longitude,
        "comment": report_data.comment,
        "status": ReportStatus.REPORTED.value,
        "timestamps": [now],
        "created_at": now,
    }

    try:
        doc_ref.set(report_dict)
        logger.info(f"Report saved to Firestore: {doc_ref.id} (user={report_data.user_id})")
    except Exception as e:
        logger.error(f"Failed to save report to Firestore: {e}", exc_info=True)
        raise

    return _to_response(doc_ref.id, report_dict)


async def list_reports(user_id: Optional[str] = None) -> List[ReportResponse]:
    """
    Retrieve reports, optionally only those submitted by one user.
    Sorted by created_at in descending order (newest first).
    """
    db = get_db()

    query = db.collection(REPORTS_COLLECTION)
    if user_id:
        query = where_filter(query, "user_id", "==", user_id)

    # Sorted in Python so the user filter does not need a composite index
    reports = [_to_response(doc.id, doc.to_dict()) for doc in query.stream()]
    reports = _sort_newest_first(reports)

    logger.info(f"Retrieved {len(reports)} reports (user_id={user_id})")
    return reports


async def list_reports_by_status(status: ReportStatus) -> List[ReportResponse]:
    """
    Retrieve all reports currently in the given status, newest first.
    An empty list means nothing matched; callers decide how to surface it.
    """
    db = get_db()

    status_value = ReportStatus(status).value
    query = where_filter(db.collection(REPORTS_COLLECTION), "status", "==", status_value)
    reports = _sort_newest_first([_to_response(doc.id, doc.to_dict()) for doc in query.stream()])

    logger.info(f"Retrieved {len(reports)} reports with status={status_value}")
    return reports


async def get_report_by_id(report_id: str) -> ReportResponse:
    """
    Retrieve a single report by ID.

    Raises:
        ReportNotFoundError: no report with this ID
    """
    db = get_db()

    doc = db.collection(REPORTS_COLLECTION).document(report_id).get()
    if not doc.exists:
        raise ReportNotFoundError(report_id)

    return _to_response(doc.id, doc.to_dict())


async def update_report_status(
    report_id: str,
    new_status: ReportStatus,
    strict: Optional[bool] = None,
) -> ReportResponse:
    """
    Move a report to a new status and append the change time to its history.

    Args:
        report_id: Firestore document ID
        new_status: Target status
        strict: Enforce the lifecycle order (defaults to STRICT_STATUS_TRANSITIONS)

    Returns:
        ReportResponse: The updated report

    Raises:
        ReportNotFoundError: no report with this ID
        InvalidStatusTransitionError: strict mode rejected the transition
    """
    db = get_db()
    workflow = StatusWorkflowEngine(
        strict=settings.STRICT_STATUS_TRANSITIONS if strict is None else strict
    )
    new_status_value = ReportStatus(new_status).value
    doc_ref = db.collection(REPORTS_COLLECTION).document(report_id)

    def _apply(transaction, doc_ref):
        # Reads must go through the transaction
        doc = doc_ref.get(transaction=transaction)
        if not doc.exists:
            raise ReportNotFoundError(report_id)

        current_data = doc.to_dict()
        current_status = current_data.get("status", ReportStatus.REPORTED.value)
        workflow.validate_transition(current_status, new_status_value)

        timestamps = current_data.get("timestamps", [])
        if not isinstance(timestamps, list):
            timestamps = []
        timestamps.append(workflow.transition_timestamp())

        changes = {"status": new_status_value, "timestamps": timestamps}
        transaction.update(doc_ref, changes)
        logger.info(f"Report {report_id} status updated {current_status} → {new_status_value}")
        return {**current_data, **changes}

    updated_data = run_in_transaction(db, _apply, doc_ref)
    return _to_response(report_id, updated_data)
