import logging
from typing import Optional

from app.core.settings import settings
from .base import FeatureFetcher
from .overpass_provider import OverpassFeatureFetcher

logger = logging.getLogger(__name__)

_fetcher_instance: Optional[FeatureFetcher] = None


def get_feature_fetcher() -> FeatureFetcher:
    """
    Resolve the active feature fetcher.

    Currently always Overpass, configured from settings.
    """
    global _fetcher_instance
    if _fetcher_instance is not None:
        return _fetcher_instance

    _fetcher_instance = OverpassFeatureFetcher(
        base_url=settings.OVERPASS_URL,
        timeout=settings.OVERPASS_TIMEOUT_SECONDS,
        user_agent=settings.OVERPASS_USER_AGENT,
    )
    logger.info(f"Feature fetcher initialized: overpass ({settings.OVERPASS_URL})")
    return _fetcher_instance


def set_feature_fetcher(fetcher: Optional[FeatureFetcher]) -> None:
    """Replace the active fetcher (None resets to the configured default)."""
    global _fetcher_instance
    _fetcher_instance = fetcher
