from __future__ import annotations

from math import asin, cos, radians, sin, sqrt
from typing import Protocol

"""
Geospatial helpers.

We keep a tiny geometry layer here so ordering code can do distance calculations
without pulling in heavier GIS dependencies.
"""

EARTH_RADIUS_M = 6_371_000


class LatLon(Protocol):
    """Anything with `lat`/`lon` attributes in decimal degrees."""

    @property
    def lat(self) -> float: ...

    @property
    def lon(self) -> float: ...


def validate_coordinate(lat: float, lon: float) -> None:
    """Raise `ValueError` if (lat, lon) is outside valid degree ranges."""
    if not -90 <= lat <= 90:
        raise ValueError(f"latitude out of range: {lat}")
    if not -180 <= lon <= 180:
        raise ValueError(f"longitude out of range: {lon}")


def haversine_m(a: LatLon, b: LatLon) -> float:
    """Compute great-circle distance in meters between two points."""
    lat1 = radians(a.lat)
    lon1 = radians(a.lon)
    lat2 = radians(b.lat)
    lon2 = radians(b.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push h slightly outside [0, 1] for identical or antipodal points.
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_M * asin(sqrt(h))


def distance_m(a: LatLon, b: LatLon) -> float:
    """Symmetric distance between two coordinates; exactly 0.0 for equal points."""
    if a.lat == b.lat and a.lon == b.lon:
        return 0.0
    return haversine_m(a, b)
