"""
Geographic helpers: great-circle distance and Overpass element coordinates.
"""

import math
from typing import Dict, Optional, Tuple

EARTH_RADIUS_METERS = 6371000.0


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two coordinates, in meters.

    Symmetric, zero for identical points, pi * R for antipodal points.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    # Rounding can push a slightly outside [0, 1] near antipodes
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def element_coordinates(element: Dict) -> Optional[Tuple[float, float]]:
    """
    Coordinates of an Overpass element.

    Ways and relations queried with `out center` carry a `center` object;
    nodes carry lat/lon on the element itself. Returns None when neither is present.
    """
    center = element.get("center")
    if isinstance(center, dict) and center.get("lat") is not None and center.get("lon") is not None:
        return float(center["lat"]), float(center["lon"])

    if element.get("lat") is not None and element.get("lon") is not None:
        return float(element["lat"]), float(element["lon"])

    return None
