"""
Session wiring.

Builds a ready-to-use `SelectionController` from settings: loads the catalog, opens
the durable store, and subscribes to the configured position sensor once.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Sequence

from placepicker.catalog.loader import load_places
from placepicker.config.settings import Settings, get_settings
from placepicker.core.env import resolve_project_path
from placepicker.core.storage import FileKeyValueStorage, KeyValueStorage
from placepicker.domain.models import Coordinate, Place
from placepicker.selection.controller import SelectionController
from placepicker.selection.store import SelectionStore
from placepicker.sensors.position import PositionSensor, build_position_sensor

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """A controller plus the sensor that feeds it and the single reading it asked for."""

    controller: SelectionController
    sensor: PositionSensor
    position: Future[Coordinate]


def build_storage(settings: Settings) -> FileKeyValueStorage:
    return FileKeyValueStorage(resolve_project_path(settings.selection.storage_dir))


def start_session(
    settings: Settings | None = None,
    *,
    catalog: Sequence[Place] | None = None,
    storage: KeyValueStorage | None = None,
    sensor: PositionSensor | None = None,
) -> Session:
    settings = settings or get_settings()
    if catalog is None:
        catalog = load_places(settings.catalog.path)
    if storage is None:
        storage = build_storage(settings)
    if sensor is None:
        sensor = build_position_sensor(settings)

    store = SelectionStore(storage, key=settings.selection.storage_key)
    controller = SelectionController(catalog, store)
    position = sensor.request_current_position()
    controller.subscribe_position(position)
    logger.debug(
        "Session started: %d places, %d picked, position mode=%s",
        len(controller.catalog),
        len(controller.picked_ids),
        settings.position.mode,
    )
    return Session(controller=controller, sensor=sensor, position=position)
