"""
Pytest configuration and fixtures.

Every test runs against an in-memory report store and a stub feature
fetcher, so nothing touches Firestore or the Overpass API.
"""

from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from app.config import firebase
from app.config.mock_firestore import MockFirestore
from app.services import priority_scoring
from app.services.geo_features import resolver
from app.services.geo_features.base import FeatureClass, FeatureFetcher, FeatureFetchError

REPORT_LAT = 18.5204
REPORT_LON = 73.8567


class StubFeatureFetcher(FeatureFetcher):
    """Returns canned elements per feature class and records every call."""

    def __init__(self, elements: Optional[Dict[FeatureClass, List[Dict]]] = None, fail_on: Optional[FeatureClass] = None):
        self.elements = elements or {}
        self.fail_on = fail_on
        self.calls = []

    def fetch(self, latitude, longitude, radius_meters, feature_class):
        self.calls.append((latitude, longitude, radius_meters, FeatureClass(feature_class)))
        if self.fail_on == feature_class:
            raise FeatureFetchError(feature_class.value, "service unavailable")
        return list(self.elements.get(feature_class, []))


def node(lat: float, lon: float, **tags) -> Dict:
    return {"type": "node", "lat": lat, "lon": lon, "tags": tags}


def way(lat: float, lon: float, **tags) -> Dict:
    return {"type": "way", "center": {"lat": lat, "lon": lon}, "tags": tags}


@pytest.fixture
def mock_db(monkeypatch):
    store = MockFirestore()
    monkeypatch.setattr(firebase, "db", store)
    return store


@pytest.fixture
def stub_fetcher():
    fetcher = StubFeatureFetcher({
        FeatureClass.HOSPITAL: [way(REPORT_LAT, REPORT_LON, amenity="hospital")],
        FeatureClass.SCHOOL: [node(REPORT_LAT, REPORT_LON, amenity="school")],
        FeatureClass.HIGHWAY: [way(REPORT_LAT, REPORT_LON, highway="primary")],
    })
    resolver.set_feature_fetcher(fetcher)
    priority_scoring.reset_priority_scoring_service()
    yield fetcher
    resolver.set_feature_fetcher(None)
    priority_scoring.reset_priority_scoring_service()


@pytest.fixture
def client(mock_db, stub_fetcher):
    from app.main import app
    return TestClient(app)


@pytest.fixture
def report_payload():
    return {
        "user_id": "user-1",
        "photo_url": "https://example.com/photos/pothole.jpg",
        "latitude": REPORT_LAT,
        "longitude": REPORT_LON,
        "comment": "Deep pothole near the bus stop",
    }
