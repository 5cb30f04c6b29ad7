"""
Pydantic models for priority scoring.
"""

import math

from pydantic import BaseModel, Field, model_validator
from typing import Dict, Optional


class PriorityWeights(BaseModel):
    """
    Weight per nearby feature type.

    Road classes are OSM `highway=*` values. Extra keys are accepted so callers
    can weight other road classes (e.g. "trunk": 5) without a code change;
    they must be non-negative numbers like the declared ones.
    Types with no entry use `default`.
    """
    hospital: float = Field(5, ge=0)
    school: float = Field(4, ge=0)
    primary: float = Field(5, ge=0)
    secondary: float = Field(3, ge=0)
    tertiary: float = Field(1, ge=0)
    residential: float = Field(2, ge=0)
    default: float = Field(0, ge=0, description="Weight for feature types without an entry")

    class Config:
        extra = "allow"

    @model_validator(mode="after")
    def validate_extra_weights(self):
        extra = self.model_extra or {}
        for feature_type, weight in extra.items():
            if isinstance(weight, bool) or not isinstance(weight, (int, float)):
                raise ValueError(f"Weight for '{feature_type}' must be a number, got {weight!r}")
            if not math.isfinite(weight) or weight < 0:
                raise ValueError(f"Weight for '{feature_type}' must be a non-negative number, got {weight}")
            extra[feature_type] = float(weight)
        return self

    def as_mapping(self) -> Dict[str, float]:
        values = self.model_dump()
        values.pop("default", None)
        return {feature_type: float(weight) for feature_type, weight in values.items()}

    def weight_for(self, feature_type: str) -> float:
        return self.as_mapping().get(feature_type, float(self.default))


class GeoFeature(BaseModel):
    """A nearby feature reduced to what scoring needs."""
    type: str
    distance: float = Field(..., ge=0, description="Distance from the report in meters")


class PriorityRequest(BaseModel):
    """Coordinate to score, with optional per-call overrides."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    radius_meters: Optional[float] = Field(None, gt=0, le=5000, description="Search radius (defaults to settings)")
    weights: Optional[PriorityWeights] = Field(None, description="Override the default feature weights")

    class Config:
        json_schema_extra = {
            "example": {
                "latitude": 18.5204,
                "longitude": 73.8567,
            }
        }


class PriorityResponse(BaseModel):
    normalized_score: float = Field(..., ge=0, le=1, description="Priority in [0, 1], higher is more urgent")
    raw_score: float = Field(..., ge=0)
    radius_meters: float
    feature_count: int
    feature_counts: Dict[str, int] = Field(default_factory=dict, description="Number of features per type")
