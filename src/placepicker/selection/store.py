"""
Durable selection store.

Holds the ordered set of selected place ids (most recently added first) and mirrors
it into a key-value storage under a single key as a JSON array of strings, e.g.
`["p3","p1"]`.

Rules:
- Reads fail closed: a missing, unparsable, or wrongly-shaped value loads as empty.
- Every mutating call writes the full sequence before returning.
- `add`/`remove` are idempotent; a no-op call does not touch storage.
"""

from __future__ import annotations

import json
import logging

from placepicker.core.errors import StorageWriteError
from placepicker.core.storage import KeyValueStorage

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "selectedPlaces"


def parse_selected_ids(raw: str | None) -> list[str] | None:
    """Decode a stored value into a list of ids, or None if it is not a valid id array."""
    if raw is None:
        return None
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError):
        return None
    if not isinstance(data, list) or not all(isinstance(x, str) for x in data):
        return None
    # Collapse duplicates, keeping the most recent (first) occurrence.
    return list(dict.fromkeys(data))


def serialize_selected_ids(ids: list[str]) -> str:
    return json.dumps(ids, ensure_ascii=False)


class SelectionStore:
    """Ordered, unique, durable set of selected place ids."""

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_STORAGE_KEY):
        self._storage = storage
        self._key = key
        self._ids: list[str] = []

    @property
    def key(self) -> str:
        return self._key

    @property
    def ids(self) -> list[str]:
        return list(self._ids)

    def load(self) -> list[str]:
        """(Re)read the durable value; corrupt or absent data loads as an empty selection."""
        try:
            raw = self._storage.read(self._key)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read selection '%s' (%s); starting empty", self._key, e)
            raw = None

        ids = parse_selected_ids(raw)
        if ids is None:
            if raw is not None:
                logger.warning("Ignoring malformed selection data under '%s'", self._key)
            ids = []
        self._ids = ids
        return list(ids)

    def add(self, place_id: str) -> bool:
        """Prepend `place_id` unless already present. Returns True if the selection changed.

        If the write fails, `StorageWriteError` is raised and the id stays in memory;
        the next successful write persists it.
        """
        if place_id in self._ids:
            return False
        self._ids.insert(0, place_id)
        self._persist()
        return True

    def remove(self, place_id: str) -> bool:
        """Drop `place_id` if present. Returns True if the selection changed.

        Like `add`, a failed write keeps the in-memory change for the next write.
        """
        if place_id not in self._ids:
            return False
        self._ids = [i for i in self._ids if i != place_id]
        self._persist()
        return True

    def retain(self, place_ids: list[str]) -> bool:
        """Keep only ids in `place_ids`, preserving order. Writes only if something was dropped."""
        keep = set(place_ids)
        kept = [i for i in self._ids if i in keep]
        if kept == self._ids:
            return False
        self._ids = kept
        self._persist()
        return True

    def _persist(self) -> None:
        try:
            self._storage.write(self._key, serialize_selected_ids(self._ids))
        except OSError as e:
            raise StorageWriteError(self._key, e) from e
