from __future__ import annotations

# This module is the orchestrator for the place picker.
# It reconciles:
# - the static catalog (list[Place])
# - the durable selection (SelectionStore)
# - the two-step removal flow (RemovalConfirmationFlow)
# - the observer position, which arrives once and possibly late
#
# Renderers only read the derived views and send intents back; recoverable problems
# become state (empty selection, unresolved ranking, warnings), never exceptions.

import logging
import threading
from concurrent.futures import Future
from typing import Sequence

from placepicker.catalog.loader import index_by_id
from placepicker.core.errors import StorageWriteError
from placepicker.domain.models import (
    AvailablePlaces,
    Coordinate,
    Place,
    RemovalState,
    SelectionSnapshot,
)
from placepicker.ordering.distance import order_by_distance
from placepicker.selection.confirmation import RemovalConfirmationFlow
from placepicker.selection.store import SelectionStore

logger = logging.getLogger(__name__)


class SelectionController:
    """Single source of truth for picked places, ranked places and the removal flow."""

    def __init__(
        self,
        catalog: Sequence[Place],
        store: SelectionStore,
        confirmation: RemovalConfirmationFlow | None = None,
    ):
        self._catalog = list(catalog)
        self._by_id = index_by_id(self._catalog)
        self._store = store
        self._confirmation = confirmation or RemovalConfirmationFlow()
        # Position callbacks may fire on a sensor thread.
        self._lock = threading.RLock()

        self._observer: Coordinate | None = None
        self._ranked: list[Place] = []
        self._position_error: str | None = None
        self._warnings: list[str] = []

        self._picked = self._resolve_stored(store.load())
        # Stale ids must not be written back by later picks/removals.
        try:
            store.retain([p.id for p in self._picked])
        except StorageWriteError as e:
            logger.warning("Could not prune stale selected ids: %s", e)
            self._warnings.append(str(e))

    def _resolve_stored(self, ids: list[str]) -> list[Place]:
        picked: list[Place] = []
        for place_id in ids:
            place = self._by_id.get(place_id)
            if place is None:
                logger.debug("Dropping stale selected id '%s' (not in catalog)", place_id)
                continue
            picked.append(place)
        return picked

    @property
    def catalog(self) -> list[Place]:
        return list(self._catalog)

    @property
    def picked_places(self) -> list[Place]:
        with self._lock:
            return list(self._picked)

    @property
    def picked_ids(self) -> list[str]:
        with self._lock:
            return [p.id for p in self._picked]

    @property
    def available_places(self) -> AvailablePlaces:
        with self._lock:
            if self._observer is None:
                return AvailablePlaces(status="unresolved")
            return AvailablePlaces(status="resolved", places=list(self._ranked), observer=self._observer)

    @property
    def removal_state(self) -> RemovalState:
        with self._lock:
            return self._confirmation.state()

    @property
    def position_error(self) -> str | None:
        return self._position_error

    @property
    def warnings(self) -> list[str]:
        with self._lock:
            return list(self._warnings)

    def snapshot(self) -> SelectionSnapshot:
        with self._lock:
            return SelectionSnapshot(
                picked=list(self._picked),
                available=self.available_places,
                removal=self._confirmation.state(),
                position_error=self._position_error,
                warnings=list(self._warnings),
            )

    def is_picked(self, place_id: str) -> bool:
        with self._lock:
            return any(p.id == place_id for p in self._picked)

    def pick(self, place_id: str) -> bool:
        """Add a catalog place to the front of the picked list. Returns True if it was added."""
        with self._lock:
            if self.is_picked(place_id):
                return False
            place = self._by_id.get(place_id)
            if place is None:
                logger.warning("Ignoring pick of unknown place id '%s'", place_id)
                return False
            self._picked.insert(0, place)
            self._write(self._store.add, place_id)
            logger.info("Picked place '%s'", place_id)
            return True

    def request_removal(self, place_id: str) -> None:
        with self._lock:
            self._confirmation.arm(place_id)

    def confirm_removal(self) -> str | None:
        """Remove the pending place, if any. Returns the removed id."""
        with self._lock:
            place_id = self._confirmation.confirm()
            if place_id is None:
                return None
            self._picked = [p for p in self._picked if p.id != place_id]
            self._write(self._store.remove, place_id)
            logger.info("Removed place '%s'", place_id)
            return place_id

    def cancel_removal(self) -> None:
        with self._lock:
            self._confirmation.cancel()

    def _write(self, op, place_id: str) -> None:
        try:
            op(place_id)
        except StorageWriteError as e:
            logger.warning("Selection change for '%s' was not persisted: %s", place_id, e)
            self._warnings.append(str(e))

    def resolve_position(self, observer: Coordinate) -> bool:
        """Rank the catalog for the observer. Only the first call has an effect."""
        with self._lock:
            if self._observer is not None:
                logger.debug("Observer position already resolved; ignoring %s", observer)
                return False
            self._ranked = order_by_distance(self._catalog, observer)
            self._observer = observer
            self._position_error = None
            logger.info("Ranked %d places for observer (%.4f, %.4f)", len(self._ranked), observer.lat, observer.lon)
            return True

    def fail_position(self, reason: str) -> None:
        """Record a sensor failure; the available view stays unresolved."""
        with self._lock:
            if self._observer is not None or self._position_error == reason:
                return
            self._position_error = reason
            logger.warning("Position unavailable: %s", reason)

    def subscribe_position(self, future: Future[Coordinate]) -> None:
        """Attach to a single-fire position result."""
        future.add_done_callback(self.accept_position_result)

    def accept_position_result(self, future: Future[Coordinate]) -> None:
        """Apply a completed position future (safe to call more than once)."""
        if future.cancelled():
            self.fail_position("position request was cancelled")
            return
        exc = future.exception()
        if exc is not None:
            self.fail_position(str(exc) or type(exc).__name__)
            return
        self.resolve_position(future.result())
