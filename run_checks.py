"""
End-to-end smoke check against an in-memory store and canned map features.

Walks one report through the API: create, score, move through the status
lifecycle, list by status. Nothing touches Firestore or the Overpass API.

    python run_checks.py
"""

import sys

from fastapi.testclient import TestClient

from app.config.firebase import reset_db
from app.core.settings import settings
from app.services.geo_features.base import FeatureClass, FeatureFetcher
from app.services.geo_features.resolver import set_feature_fetcher
from app.services.priority_scoring import reset_priority_scoring_service

LATITUDE = 18.5204
LONGITUDE = 73.8567


class CannedFeatureFetcher(FeatureFetcher):
    """One hospital, one school and one primary road at the report location."""

    ELEMENTS = {
        FeatureClass.HOSPITAL: [{"type": "way", "center": {"lat": LATITUDE, "lon": LONGITUDE}, "tags": {"amenity": "hospital"}}],
        FeatureClass.SCHOOL: [{"type": "node", "lat": LATITUDE, "lon": LONGITUDE, "tags": {"amenity": "school"}}],
        FeatureClass.HIGHWAY: [{"type": "way", "center": {"lat": LATITUDE, "lon": LONGITUDE}, "tags": {"highway": "primary"}}],
    }

    def fetch(self, latitude, longitude, radius_meters, feature_class):
        return list(self.ELEMENTS[FeatureClass(feature_class)])


def check(label, resp, expected_status):
    ok = resp.status_code == expected_status
    print(f"[{'OK' if ok else 'FAIL'}] {label}: {resp.status_code}")
    if not ok:
        print(f"       {resp.text}")
    return ok


def main() -> int:
    settings.USE_MOCK_DB = True
    settings.MOCK_DB_PATH = ""
    reset_db()
    set_feature_fetcher(CannedFeatureFetcher())
    reset_priority_scoring_service()

    from app.main import app

    results = []
    with TestClient(app) as client:
        results.append(check("GET /health", client.get("/health"), 200))
        results.append(check("GET /health/db", client.get("/health/db"), 200))
        results.append(check("GET /health/scoring", client.get("/health/scoring"), 200))

        resp = client.post("/reports", json={
            "user_id": "smoke-check",
            "photo_url": "https://example.com/photos/pothole.jpg",
            "latitude": LATITUDE,
            "longitude": LONGITUDE,
            "comment": "Pothole by the bus stop",
        })
        results.append(check("POST /reports", resp, 201))
        report_id = resp.json().get("id")

        results.append(check("POST /reports (missing photo)", client.post("/reports", json={"user_id": "smoke-check"}), 422))

        resp = client.post("/priority-score", json={"latitude": LATITUDE, "longitude": LONGITUDE})
        results.append(check("POST /priority-score", resp, 200))
        print(f"       {resp.json()}")

        results.append(check("GET /reports/{id}/priority", client.get(f"/reports/{report_id}/priority"), 200))
        results.append(check("POST /reports/{id}/in-progress", client.post(f"/reports/{report_id}/in-progress"), 200))

        resp = client.post(f"/reports/{report_id}/resolve")
        results.append(check("POST /reports/{id}/resolve", resp, 200))
        print(f"       timestamps: {len(resp.json()['report']['timestamps'])}")

        results.append(check("GET /reports/resolved", client.get("/reports/resolved"), 200))
        results.append(check("GET /reports/pending (none left)", client.get("/reports/pending"), 404))

    set_feature_fetcher(None)
    print(f"\n{sum(results)}/{len(results)} checks passed")
    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(main())
