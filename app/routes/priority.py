"""
Priority score endpoint - urgency of a location from nearby infrastructure.
"""

from fastapi import APIRouter, HTTPException, status
from fastapi.concurrency import run_in_threadpool
import logging

from app.models.priority import PriorityRequest, PriorityResponse
from app.services.geo_features.base import FeatureFetchError
from app.services.priority_scoring import get_priority_scoring_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/priority-score", tags=["Priority"])


@router.post("", response_model=PriorityResponse)
async def calculate_priority_score(request: PriorityRequest):
    """
    Score a coordinate by its proximity to hospitals, schools and roads.

    The score is in [0, 1]. Nothing is stored.

    Errors:
        502: The map-data service failed; no partial score is returned
    """
    logger.info(f"POST /priority-score - ({request.latitude}, {request.longitude})")

    try:
        return await run_in_threadpool(
            get_priority_scoring_service().score_location,
            latitude=request.latitude,
            longitude=request.longitude,
            radius_meters=request.radius_meters,
            weights=request.weights,
        )
    except FeatureFetchError as e:
        logger.error(f"Priority scoring failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch data or calculate score",
        )
