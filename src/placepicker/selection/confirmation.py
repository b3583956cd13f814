"""
Two-step removal confirmation.

`Idle` -> `arm(id)` -> `Armed(id)` -> `confirm()` or `cancel()` -> `Idle`.
Arming while armed replaces the target; requests are not queued.
"""

from __future__ import annotations

from placepicker.domain.models import RemovalState


class RemovalConfirmationFlow:
    def __init__(self) -> None:
        self._pending_id: str | None = None

    @property
    def pending_id(self) -> str | None:
        return self._pending_id

    @property
    def is_armed(self) -> bool:
        return self._pending_id is not None

    def arm(self, place_id: str) -> None:
        self._pending_id = place_id

    def confirm(self) -> str | None:
        """Hand the pending id to the caller and return to idle (None when nothing was armed)."""
        place_id, self._pending_id = self._pending_id, None
        return place_id

    def cancel(self) -> None:
        self._pending_id = None

    def state(self) -> RemovalState:
        if self._pending_id is None:
            return RemovalState(status="idle")
        return RemovalState(status="armed", pending_id=self._pending_id)
