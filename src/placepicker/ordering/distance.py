"""
Distance ordering.

Ranks catalog places by great-circle distance to the observer. Python's `sorted`
is stable, so places at the same distance keep their catalog order.
"""

from __future__ import annotations

from typing import Sequence

from placepicker.core.geo import distance_m
from placepicker.domain.models import Coordinate, Place


def order_by_distance(catalog: Sequence[Place], observer: Coordinate) -> list[Place]:
    """Return a new list of all places, nearest first."""
    return sorted(catalog, key=lambda place: distance_m(place.coordinate, observer))


def distances_from(catalog: Sequence[Place], observer: Coordinate) -> dict[str, float]:
    """Map place id -> distance in meters (used for display)."""
    return {place.id: distance_m(place.coordinate, observer) for place in catalog}
