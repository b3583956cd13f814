"""Exception types shared across layers."""

from __future__ import annotations


class PlacePickerError(Exception):
    """Base class for errors raised by this package."""


class CatalogError(PlacePickerError):
    """The place catalog could not be loaded or is inconsistent."""


class StorageWriteError(PlacePickerError):
    """The durable selection could not be written."""

    def __init__(self, key: str, cause: Exception):
        super().__init__(f"failed to persist '{key}': {cause}")
        self.key = key
        self.cause = cause


class PositionUnavailableError(PlacePickerError):
    """The position sensor could not produce a coordinate."""
