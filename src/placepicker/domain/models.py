"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- catalog entities (`Place`, `Coordinate`)
- derived views consumed by a renderer (`AvailablePlaces`, `RemovalState`)
- the combined payload served to API/CLI (`SelectionSnapshot`)

Catalog models are frozen: places are shared read-only by every component.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    """A geographic point in decimal degrees."""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)


class Place(BaseModel):
    """One catalog entry a user can pick."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    image_src: str
    image_alt: str | None = None
    coordinate: Coordinate
    description: str = ""


class AvailablePlaces(BaseModel):
    """The ranked catalog, or an explicit marker that the observer is not known yet."""

    status: Literal["unresolved", "resolved"]
    places: list[Place] = Field(default_factory=list)
    observer: Coordinate | None = None

    @property
    def resolved(self) -> bool:
        return self.status == "resolved"


class RemovalState(BaseModel):
    status: Literal["idle", "armed"]
    pending_id: str | None = None


class SelectionSnapshot(BaseModel):
    """Everything a renderer needs for one frame."""

    picked: list[Place]
    available: AvailablePlaces
    removal: RemovalState
    position_error: str | None = None
    warnings: list[str] = Field(default_factory=list)
