"""
Place catalog loader.

The catalog is a local JSON file (default: `data/catalogs/places.json`) holding the
id/name/image/coordinate records users pick from. We validate it into typed Pydantic
models so the ordering and selection code can assume a consistent shape.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from placepicker.core.env import resolve_project_path
from placepicker.core.errors import CatalogError
from placepicker.domain.models import Place

logger = logging.getLogger(__name__)

_PLACES_ADAPTER = TypeAdapter(list[Place])


def validate_places(payload: object) -> list[Place]:
    """Validate raw catalog data; ids must be unique."""
    try:
        places = _PLACES_ADAPTER.validate_python(payload)
    except ValidationError as e:
        raise CatalogError(f"invalid place catalog: {e}") from e

    seen: set[str] = set()
    for place in places:
        if place.id in seen:
            raise CatalogError(f"duplicate place id in catalog: '{place.id}'")
        seen.add(place.id)
    return places


def load_places(path: str | Path) -> list[Place]:
    """Load and validate a place catalog JSON file."""
    resolved = resolve_project_path(path)
    try:
        payload = json.loads(resolved.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"cannot read place catalog {resolved}: {e}") from e
    places = validate_places(payload)
    logger.debug("Loaded %d places from %s", len(places), resolved)
    return places


def index_by_id(places: list[Place]) -> dict[str, Place]:
    return {p.id: p for p in places}
