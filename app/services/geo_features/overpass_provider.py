import logging
from typing import Any, Dict, List, Optional

import requests

from .base import FeatureClass, FeatureFetcher, FeatureFetchError

logger = logging.getLogger(__name__)


class OverpassFeatureFetcher(FeatureFetcher):
    """
    OpenStreetMap Overpass API feature provider.

    - No API key required.
    - Sends a User-Agent header as asked by the Overpass usage policy.
    - Every element is returned with a center coordinate (`out center`).
    - Raises FeatureFetchError on any failure; scoring never runs on partial data.
    """

    DEFAULT_URL = "https://overpass-api.de/api/interpreter"

    def __init__(
        self,
        base_url: str = DEFAULT_URL,
        timeout: float = 25.0,
        user_agent: str = "civic-report-hub/0.1",
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    @staticmethod
    def build_query(latitude: float, longitude: float, radius_meters: float, feature_class: FeatureClass) -> str:
        around = f"(around:{radius_meters:g},{latitude},{longitude})"

        if feature_class == FeatureClass.HIGHWAY:
            return f'[out:json];way["highway"]{around};out center;'

        amenity = f'["amenity"="{feature_class.value}"]'
        return (
            "[out:json];("
            f"node{amenity}{around};"
            f"way{amenity}{around};"
            f"relation{amenity}{around};"
            ");out center;"
        )

    def fetch(
        self,
        latitude: float,
        longitude: float,
        radius_meters: float,
        feature_class: FeatureClass,
    ) -> List[Dict]:
        feature_class = FeatureClass(feature_class)
        query = self.build_query(latitude, longitude, radius_meters, feature_class)

        try:
            resp = self.session.post(self.base_url, data={"data": query}, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Overpass request for {feature_class.value} failed: {e}")
            raise FeatureFetchError(feature_class.value, str(e)) from e

        if resp.status_code != 200:
            logger.error(f"Overpass query for {feature_class.value} failed with status {resp.status_code}")
            raise FeatureFetchError(feature_class.value, f"HTTP {resp.status_code}")

        try:
            data: Dict[str, Any] = resp.json()
        except ValueError as e:
            logger.error(f"Overpass returned non-JSON body for {feature_class.value}")
            raise FeatureFetchError(feature_class.value, "response is not valid JSON") from e

        elements = data.get("elements") if isinstance(data, dict) else None
        if not isinstance(elements, list):
            raise FeatureFetchError(feature_class.value, "response has no 'elements' list")

        logger.info(f"Overpass returned {len(elements)} {feature_class.value} elements around ({latitude}, {longitude})")
        return elements
