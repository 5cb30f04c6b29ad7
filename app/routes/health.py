"""
Health check endpoints.

/health          liveness plus the active scoring configuration
/health/db       report store reachability (reads one report)
/health/scoring  scoring configuration sanity (503 if scores cannot be computed)
"""

from fastapi import APIRouter, HTTPException
from app.config.firebase import get_db
from app.config.mock_firestore import MockFirestore
from app.core.settings import settings
from app.services.priority_scoring import PriorityScoringService
from app.services.report_service import REPORTS_COLLECTION
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


def _scoring_config() -> dict:
    return {
        "feature_source": settings.OVERPASS_URL,
        "feature_classes": [feature_class.value for feature_class in PriorityScoringService.FEATURE_CLASSES],
        "radius_meters": settings.PRIORITY_SEARCH_RADIUS_METERS,
        "raw_score_range": [settings.PRIORITY_MIN_RAW_SCORE, settings.PRIORITY_MAX_RAW_SCORE],
        "strict_status_transitions": settings.STRICT_STATUS_TRANSITIONS,
    }


def _scoring_problems() -> list:
    problems = []
    if settings.PRIORITY_SEARCH_RADIUS_METERS <= 0:
        problems.append("PRIORITY_SEARCH_RADIUS_METERS must be positive")
    if settings.PRIORITY_MAX_RAW_SCORE <= settings.PRIORITY_MIN_RAW_SCORE:
        problems.append("PRIORITY_MAX_RAW_SCORE must be greater than PRIORITY_MIN_RAW_SCORE")
    if settings.OVERPASS_TIMEOUT_SECONDS <= 0:
        problems.append("OVERPASS_TIMEOUT_SECONDS must be positive")
    return problems


@router.get("")
async def health_check():
    """
    Liveness check. Returns 200 while the process is serving requests.
    """
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "scoring": _scoring_config(),
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/db")
async def database_health():
    """
    Report store check: the store is initialized and the reports
    collection can be read.
    """
    try:
        db = get_db()
        sample = list(db.collection(REPORTS_COLLECTION).limit(1).stream())
    except Exception as e:
        logger.error(f"Report store health check failed: {e}")
        raise HTTPException(
            status_code=503,
            detail=f"Report store unavailable: {str(e)}"
        )

    if isinstance(db, MockFirestore):
        store = {"backend": "mock", "path": db.path or "memory"}
    else:
        store = {"backend": "firestore", "project_id": settings.FIREBASE_PROJECT_ID}

    return {
        "status": "healthy",
        "connected": True,
        "store": store,
        "collection": REPORTS_COLLECTION,
        "has_reports": bool(sample),
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/scoring")
async def scoring_health():
    """
    Scoring configuration check. Does not call the feature source.
    """
    problems = _scoring_problems()
    if problems:
        raise HTTPException(status_code=503, detail={"status": "misconfigured", "problems": problems})

    return {"status": "healthy", **_scoring_config()}
