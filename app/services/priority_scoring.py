"""
Priority Scoring Service - proximity-based urgency for a coordinate.

DESIGN PRINCIPLES:
- Priority is SYSTEM-DERIVED, NOT user-editable
- Priority is recomputed per request and never stored
- Priority score: 0.0-1.0 (higher = more urgent)

Pipeline:
1. Fetch hospitals, schools and roads around the coordinate (concurrently)
2. Reduce every element to (type, distance)
3. Sum weight(type) * (1 - distance / radius)
4. Rescale the raw sum into [0, 1]
"""

from concurrent.futures import ThreadPoolExecutor
from collections import Counter
from typing import Dict, Iterable, List, Optional
import logging

from app.core.settings import settings
from app.models.priority import GeoFeature, PriorityWeights
from app.services.geo_features.base import FeatureClass, FeatureFetcher
from app.services.geo_features.resolver import get_feature_fetcher
from app.utils.geo import element_coordinates, haversine_meters

logger = logging.getLogger(__name__)


def calculate_raw_score(
    features: Iterable[GeoFeature],
    weights: PriorityWeights,
    max_radius: float,
) -> float:
    """
    Sum the proximity-decayed weight of every feature.

    A feature at distance 0 contributes its full weight; at or beyond
    max_radius it contributes nothing. Unknown types use weights.default.

    Raises:
        ValueError: max_radius is not positive
    """
    if max_radius <= 0:
        raise ValueError(f"max_radius must be positive, got {max_radius}")

    weight_by_type = weights.as_mapping()
    default_weight = float(weights.default)

    score = 0.0
    for feature in features:
        decay = 1 - feature.distance / max_radius
        decay = max(0.0, min(1.0, decay))
        score += weight_by_type.get(feature.type, default_weight) * decay
    return score


def normalize_score(raw_score: float, min_score: float, max_score: float) -> float:
    """
    Linearly rescale raw_score from [min_score, max_score] into [0, 1], clamped.

    Raises:
        ValueError: max_score is not greater than min_score
    """
    if max_score <= min_score:
        raise ValueError(f"max_score ({max_score}) must be greater than min_score ({min_score})")

    normalized = (raw_score - min_score) / (max_score - min_score)
    return max(0.0, min(1.0, normalized))


def features_from_elements(
    elements: Iterable[Dict],
    feature_class: FeatureClass,
    latitude: float,
    longitude: float,
) -> List[GeoFeature]:
    """
    Turn raw map elements into GeoFeatures.

    Hospitals and schools are typed by their class; roads by their
    `highway` tag (primary, residential, ...). Elements without a
    coordinate or without a road class are skipped.
    """
    features = []
    for element in elements:
        coordinates = element_coordinates(element)
        if coordinates is None:
            continue

        if feature_class == FeatureClass.HIGHWAY:
            feature_type = (element.get("tags") or {}).get("highway")
            if not feature_type:
                continue
        else:
            feature_type = feature_class.value

        distance = haversine_meters(latitude, longitude, coordinates[0], coordinates[1])
        features.append(GeoFeature(type=feature_type, distance=distance))
    return features


class PriorityScoringService:
    """
    Scores a coordinate from the infrastructure around it.

    The fetcher, radius and normalization bounds default to settings and can
    be overridden for tests or per deployment.
    """

    FEATURE_CLASSES = (FeatureClass.HOSPITAL, FeatureClass.HIGHWAY, FeatureClass.SCHOOL)

    def __init__(
        self,
        fetcher: Optional[FeatureFetcher] = None,
        radius_meters: Optional[float] = None,
        min_score: Optional[float] = None,
        max_score: Optional[float] = None,
        weights: Optional[PriorityWeights] = None,
    ):
        self.fetcher = fetcher or get_feature_fetcher()
        self.radius_meters = radius_meters if radius_meters is not None else settings.PRIORITY_SEARCH_RADIUS_METERS
        self.min_score = min_score if min_score is not None else settings.PRIORITY_MIN_RAW_SCORE
        self.max_score = max_score if max_score is not None else settings.PRIORITY_MAX_RAW_SCORE
        self.weights = weights or PriorityWeights()

    def fetch_features(self, latitude: float, longitude: float, radius_meters: float) -> List[GeoFeature]:
        """
        Fetch all feature classes in parallel and join before returning.

        Any fetch failure propagates; no partial feature set is scored.
        """
        with ThreadPoolExecutor(max_workers=len(self.FEATURE_CLASSES)) as pool:
            futures = {
                feature_class: pool.submit(self.fetcher.fetch, latitude, longitude, radius_meters, feature_class)
                for feature_class in self.FEATURE_CLASSES
            }
            elements_by_class = {feature_class: future.result() for feature_class, future in futures.items()}

        features = []
        for feature_class in self.FEATURE_CLASSES:
            features.extend(
                features_from_elements(elements_by_class[feature_class], feature_class, latitude, longitude)
            )
        return features

    def score_location(
        self,
        latitude: float,
        longitude: float,
        radius_meters: Optional[float] = None,
        weights: Optional[PriorityWeights] = None,
    ) -> Dict:
        """
        Calculate the priority score for a coordinate.

        Returns:
            Dict with normalized_score, raw_score, radius_meters, feature_count
            and feature_counts (per type)

        Raises:
            FeatureFetchError: the map-data service failed
        """
        radius = radius_meters or self.radius_meters
        weights = weights or self.weights

        features = self.fetch_features(latitude, longitude, radius)
        raw_score = calculate_raw_score(features, weights, radius)
        normalized = normalize_score(raw_score, self.min_score, self.max_score)

        logger.info(
            f"Priority for ({latitude}, {longitude}) r={radius}m: "
            f"raw={raw_score:.2f} normalized={normalized:.3f} from {len(features)} features"
        )

        return {
            "normalized_score": normalized,
            "raw_score": raw_score,
            "radius_meters": radius,
            "feature_count": len(features),
            "feature_counts": dict(Counter(feature.type for feature in features)),
        }


# Global service instance (singleton pattern)
_priority_service = None


def get_priority_scoring_service() -> PriorityScoringService:
    """
    Get or create PriorityScoringService singleton instance.
    """
    global _priority_service
    if _priority_service is None:
        _priority_service = PriorityScoringService()
    return _priority_service


def reset_priority_scoring_service() -> None:
    global _priority_service
    _priority_service = None
