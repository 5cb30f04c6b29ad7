from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List
import logging

logger = logging.getLogger(__name__)


class FeatureClass(str, Enum):
    """
    Classes of nearby infrastructure that feed the priority score.
    """
    HOSPITAL = "hospital"
    SCHOOL = "school"
    HIGHWAY = "highway"


class FeatureFetchError(Exception):
    """Raised when the map-data service is unreachable or returns malformed data."""

    def __init__(self, feature_class: str, message: str):
        self.feature_class = feature_class
        super().__init__(f"Failed to fetch {feature_class} features: {message}")


class FeatureFetcher(ABC):
    """
    Abstract nearby-feature provider.

    Contract:
    - Input: latitude, longitude, search radius in meters, feature class
    - Output: list of raw map elements; each element carries either
      `center: {lat, lon}` or top-level `lat`/`lon`, plus a `tags` dict
    - MUST raise FeatureFetchError on transport or format failures.
      No retries and no partial results.
    """

    @abstractmethod
    def fetch(
        self,
        latitude: float,
        longitude: float,
        radius_meters: float,
        feature_class: FeatureClass,
    ) -> List[Dict]:
        raise NotImplementedError
