from __future__ import annotations

from hashlib import sha256
from pathlib import Path
from typing import Protocol

"""
Key-value string storage.

This is the durable medium behind the selection store, shaped like browser
local storage: one string value per key, read-by-key and write-by-key.

- `FileKeyValueStorage` keeps one file per key under a base directory.
  Writes go through a temporary file + atomic replace, so a reader never sees a
  half-written value.
- `MemoryKeyValueStorage` is an in-process dict (tests, throwaway sessions).
"""


class KeyValueStorage(Protocol):
    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...


class FileKeyValueStorage:
    """A filesystem-backed string store keyed by name."""

    def __init__(self, base_dir: Path):
        self._base_dir = base_dir

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def _key_path(self, key: str) -> Path:
        """Return the file path for a key (hash-based, avoids filesystem path issues)."""
        digest = sha256(key.encode("utf-8")).hexdigest()[:16]
        return self._base_dir / f"{digest}.json"

    def read(self, key: str) -> str | None:
        """Return the stored value, or None if the key was never written."""
        path = self._key_path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, key: str, value: str) -> None:
        path = self._key_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)


class MemoryKeyValueStorage:
    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self._data.get(key)

    def write(self, key: str, value: str) -> None:
        self._data[key] = value
