"""
Core settings and environment variables for Civic Report Hub.
Uses pydantic-settings for type-safe environment variable loading.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Create a .env file in the root directory to configure these.
    """

    # Application
    APP_NAME: str = "Civic Report Hub"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # CORS - Frontend URLs allowed to access this API (comma-separated)
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173"

    # Firebase/Firestore
    FIREBASE_PROJECT_ID: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: Optional[str] = None  # Path to service account JSON

    # Mock DB mode for local development without Firebase credentials
    USE_MOCK_DB: bool = False
    MOCK_DB_PATH: str = "./mock_db.json"

    # Overpass (OpenStreetMap) feature lookups for priority scoring
    OVERPASS_URL: str = "https://overpass-api.de/api/interpreter"
    OVERPASS_TIMEOUT_SECONDS: float = 25.0
    OVERPASS_USER_AGENT: str = "civic-report-hub/0.1"

    # Priority scoring
    # - Features are searched within PRIORITY_SEARCH_RADIUS_METERS of the report
    # - Raw scores are rescaled from [MIN, MAX] into [0, 1]
    PRIORITY_SEARCH_RADIUS_METERS: float = 500.0
    PRIORITY_MIN_RAW_SCORE: float = 0.0
    PRIORITY_MAX_RAW_SCORE: float = 50.0

    # Status workflow: when False any transition is accepted
    STRICT_STATUS_TRANSITIONS: bool = False

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"


# Global settings instance
settings = Settings()
