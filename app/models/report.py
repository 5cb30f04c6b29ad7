"""
Pydantic models for citizen reports.
These models handle validation for report submission and responses.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List

from app.services.status_workflow import ReportStatus


class ReportCreate(BaseModel):
    """
    Model for creating a new report (incoming POST request).
    These are the fields citizens provide when submitting a report.
    """
    user_id: str = Field(..., min_length=1, max_length=128, description="Identifier of the submitting user")
    photo_url: str = Field(..., min_length=1, max_length=2048, description="Reference to the uploaded photo")
    latitude: float = Field(..., ge=-90, le=90, description="Latitude coordinate")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude coordinate")
    comment: Optional[str] = Field(None, max_length=1000, description="Optional description of the problem")

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": "user-42",
                "photo_url": "https://example.com/photos/pothole.jpg",
                "latitude": 18.5204,
                "longitude": 73.8567,
                "comment": "Deep pothole in front of the bus stop",
            }
        }
        extra = "ignore"


class StatusUpdateRequest(BaseModel):
    """Request to move a report to another status."""
    status: ReportStatus = Field(..., description="Target status")


class ReportResponse(BaseModel):
    """
    Model for report responses (what API returns).
    Includes system-generated fields like ID and timestamps.
    """
    id: str = Field(..., description="Document ID")
    user_id: str
    photo_url: str
    latitude: float
    longitude: float
    comment: Optional[str] = None
    status: ReportStatus = Field(default=ReportStatus.REPORTED, description="Lifecycle status")
    timestamps: List[datetime] = Field(default_factory=list, description="Status change times, oldest first")
    created_at: Optional[datetime] = Field(default=None, description="When report was created")

    class Config:
        json_schema_extra = {
            "example": {
                "id": "abc123",
                "user_id": "user-42",
                "photo_url": "https://example.com/photos/pothole.jpg",
                "latitude": 18.5204,
                "longitude": 73.8567,
                "comment": "Deep pothole in front of the bus stop",
                "status": "in-progress",
                "timestamps": ["2024-01-15T10:30:00Z", "2024-01-16T09:00:00Z"],
                "created_at": "2024-01-15T10:30:00Z",
            }
        }


class ReportListResponse(BaseModel):
    message: str
    reports: List[ReportResponse] = Field(default_factory=list)


class ReportUpdateResponse(BaseModel):
    message: str
    report: ReportResponse
