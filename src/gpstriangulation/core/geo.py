from __future__ import annotations
from dataclasses import dataclass
from math import atan2, cos, radians, sin, sqrt

"""
Geospatial helpers.

We keep a tiny spherical-earth layer here so the matcher can score candidate pairs
quickly. Ellipsoidal (Vincenty) distances live in `gpstriangulation.core.geodesic`.
"""

# Mean Earth radius (6371 km) expressed in feet.
EARTH_RADIUS_FT = 20_902_231.52
FEET_PER_METER = 3.28084


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


def haversine_ft(a: GeoPoint, b: GeoPoint) -> float:
    """Compute great-circle distance in feet between two points."""
    lat1 = radians(a.lat)
    lon1 = radians(a.lon)
    lat2 = radians(b.lat)
    lon2 = radians(b.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push h just past 1 for antipodal pairs.
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_FT * 2 * atan2(sqrt(h), sqrt(1 - h))


def meters_to_feet(meters: float) -> float:
    return meters * FEET_PER_METER
