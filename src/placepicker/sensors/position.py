"""
Position sensors.

A sensor answers one question, once: "where is the user right now?". The answer is a
`concurrent.futures.Future[Coordinate]` that completes exactly once with either a
coordinate or an exception. Nothing here retries or streams updates.

Implementations:
- `FixedPositionSensor`: a configured coordinate (resolves immediately).
- `IpGeolocationSensor`: looks the caller up via an IP geolocation JSON endpoint on a
  background thread.
- `PendingPositionSensor`: completed later by a client (e.g. a browser posting its
  geolocation to the API).
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, InvalidStateError
from typing import Any, Callable, Protocol

from pydantic import ValidationError

from placepicker.config.settings import Settings
from placepicker.core.errors import PositionUnavailableError
from placepicker.core.http import get_json
from placepicker.domain.models import Coordinate

logger = logging.getLogger(__name__)


class PositionSensor(Protocol):
    def request_current_position(self) -> Future[Coordinate]: ...


class FixedPositionSensor:
    def __init__(self, coordinate: Coordinate):
        self._coordinate = coordinate

    def request_current_position(self) -> Future[Coordinate]:
        future: Future[Coordinate] = Future()
        future.set_result(self._coordinate)
        return future


class PendingPositionSensor:
    """A sensor whose single reading is supplied from outside via `report`/`report_failure`."""

    def __init__(self) -> None:
        self._future: Future[Coordinate] = Future()

    @property
    def done(self) -> bool:
        return self._future.done()

    def request_current_position(self) -> Future[Coordinate]:
        return self._future

    def report(self, coordinate: Coordinate) -> bool:
        """Complete the reading. Returns False if it was already completed."""
        try:
            self._future.set_result(coordinate)
        except InvalidStateError:
            return False
        return True

    def report_failure(self, reason: str) -> bool:
        try:
            self._future.set_exception(PositionUnavailableError(reason))
        except InvalidStateError:
            return False
        return True


def parse_ip_geolocation(payload: Any) -> Coordinate:
    """Extract a coordinate from common IP-geolocation response shapes.

    Accepts `{"latitude": .., "longitude": ..}` (ipapi.co, ipwho.is) and
    `{"lat": .., "lon": ..}` (ip-api.com).
    """
    if not isinstance(payload, dict):
        raise PositionUnavailableError("geolocation response is not a JSON object")
    if payload.get("error") or payload.get("status") == "fail" or payload.get("success") is False:
        reason = payload.get("reason") or payload.get("message") or "lookup failed"
        raise PositionUnavailableError(f"geolocation lookup failed: {reason}")

    lat = payload.get("latitude", payload.get("lat"))
    lon = payload.get("longitude", payload.get("lon"))
    if lat is None or lon is None:
        raise PositionUnavailableError("geolocation response has no coordinates")
    try:
        return Coordinate(lat=float(lat), lon=float(lon))
    except (TypeError, ValueError, ValidationError) as e:
        raise PositionUnavailableError(f"invalid coordinates in geolocation response: {e}") from e


class IpGeolocationSensor:
    """Resolves the position from the public IP address (coarse, city-level)."""

    def __init__(
        self,
        settings: Settings,
        *,
        fetch: Callable[..., Any] = get_json,
        background: bool = True,
    ):
        self._url = settings.position.ip_url
        self._timeout_seconds = settings.app.http_timeout_seconds
        self._fetch = fetch
        self._background = background

    def _lookup(self, future: Future[Coordinate]) -> None:
        try:
            payload = self._fetch(self._url, timeout_seconds=self._timeout_seconds)
            coordinate = parse_ip_geolocation(payload)
        except Exception as e:
            logger.warning("IP geolocation via %s failed: %s", self._url, e)
            future.set_exception(e)
        else:
            future.set_result(coordinate)

    def request_current_position(self) -> Future[Coordinate]:
        future: Future[Coordinate] = Future()
        if self._background:
            threading.Thread(target=self._lookup, args=(future,), name="ip-geolocation", daemon=True).start()
        else:
            self._lookup(future)
        return future


def build_position_sensor(settings: Settings) -> PositionSensor:
    """Pick the sensor configured under `position.mode`."""
    mode = settings.position.mode
    if mode == "fixed":
        coordinate = Coordinate(lat=settings.position.fixed_lat, lon=settings.position.fixed_lon)
        return FixedPositionSensor(coordinate)
    if mode == "ip":
        return IpGeolocationSensor(settings)
    return PendingPositionSensor()
