import pytest

from placepicker.core.storage import MemoryKeyValueStorage
from placepicker.domain.models import Coordinate, Place


def make_place(place_id: str, lat: float, lon: float, name: str | None = None) -> Place:
    return Place(
        id=place_id,
        name=name or f"Place {place_id}",
        image_src=f"images/{place_id}.jpg",
        coordinate=Coordinate(lat=lat, lon=lon),
    )


@pytest.fixture
def catalog() -> list[Place]:
    # Along the prime meridian so distances from (0, 0) are easy to reason about.
    return [
        make_place("p1", 0.10, 0.0),
        make_place("p2", 0.05, 0.0),
        make_place("p3", 1.00, 0.0),
    ]


@pytest.fixture
def storage() -> MemoryKeyValueStorage:
    return MemoryKeyValueStorage()
