"""
API routes.

Endpoints (all JSON):
- GET  `/api/state`: picked places, ranked places (or "unresolved"), removal flow state.
- GET  `/api/places/picked`, GET `/api/places/available`, GET `/api/catalog`.
- POST `/api/places/{place_id}/pick`: add a place to the picked list.
- POST `/api/removal/{place_id}`: ask to remove a picked place (arms the confirmation).
- POST `/api/removal/confirm`, POST `/api/removal/cancel`: resolve the pending removal.
- POST `/api/position`: report the observer coordinate (client position mode, once).
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, HTTPException

from placepicker.config.settings import get_settings
from placepicker.domain.models import AvailablePlaces, Coordinate, Place, RemovalState
from placepicker.selection.session import Session, start_session
from placepicker.sensors.position import PendingPositionSensor

router = APIRouter()


@lru_cache
def _session() -> Session:
    return start_session(get_settings())


def _state_payload() -> dict:
    settings = get_settings()
    snapshot = _session().controller.snapshot()
    return {
        **snapshot.model_dump(mode="json"),
        "ui": settings.ui.model_dump(mode="json"),
    }


@router.get("/api/state")
def get_state() -> dict:
    """Return everything a renderer needs in one payload."""
    return _state_payload()


@router.get("/api/catalog", response_model=list[Place])
def get_catalog() -> list[Place]:
    return _session().controller.catalog


@router.get("/api/places/picked", response_model=list[Place])
def get_picked_places() -> list[Place]:
    return _session().controller.picked_places


@router.get("/api/places/available", response_model=AvailablePlaces)
def get_available_places() -> AvailablePlaces:
    """Ranked places, or `status="unresolved"` while the position is unknown."""
    return _session().controller.available_places


@router.post("/api/places/{place_id}/pick")
def post_pick(place_id: str) -> dict:
    controller = _session().controller
    if not any(p.id == place_id for p in controller.catalog):
        raise HTTPException(
            status_code=404,
            detail={"code": "UNKNOWN_PLACE", "message": f"No place with id '{place_id}'"},
        )
    added = controller.pick(place_id)
    return {"added": added, **_state_payload()}


@router.post("/api/removal/confirm")
def post_confirm_removal() -> dict:
    removed = _session().controller.confirm_removal()
    return {"removed": removed, **_state_payload()}


@router.post("/api/removal/cancel", response_model=RemovalState)
def post_cancel_removal() -> RemovalState:
    controller = _session().controller
    controller.cancel_removal()
    return controller.removal_state


@router.post("/api/removal/{place_id}", response_model=RemovalState)
def post_request_removal(place_id: str) -> RemovalState:
    controller = _session().controller
    controller.request_removal(place_id)
    return controller.removal_state


@router.post("/api/position", response_model=AvailablePlaces)
def post_position(position: Coordinate) -> AvailablePlaces:
    """Accept the observer coordinate from the client (only when no server-side sensor is configured)."""
    session = _session()
    if not isinstance(session.sensor, PendingPositionSensor):
        raise HTTPException(
            status_code=409,
            detail={"code": "POSITION_NOT_ACCEPTED", "message": "Position is provided by the server sensor"},
        )
    if not session.sensor.report(position):
        raise HTTPException(
            status_code=409,
            detail={"code": "POSITION_ALREADY_RESOLVED", "message": "Position was already reported"},
        )
    return session.controller.available_places
