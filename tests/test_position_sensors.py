import httpx
import pytest

from placepicker.config.settings import Settings
from placepicker.core.errors import PositionUnavailableError
from placepicker.domain.models import Coordinate
from placepicker.sensors.position import (
    FixedPositionSensor,
    IpGeolocationSensor,
    PendingPositionSensor,
    build_position_sensor,
    parse_ip_geolocation,
)


def test_fixed_sensor_resolves_immediately():
    future = FixedPositionSensor(Coordinate(lat=1, lon=2)).request_current_position()
    assert future.done()
    assert future.result() == Coordinate(lat=1, lon=2)


def test_pending_sensor_fires_once():
    sensor = PendingPositionSensor()
    future = sensor.request_current_position()
    assert not future.done()
    assert sensor.report(Coordinate(lat=1, lon=2)) is True
    assert sensor.report(Coordinate(lat=3, lon=4)) is False
    assert sensor.report_failure("late") is False
    assert future.result() == Coordinate(lat=1, lon=2)


def test_parse_ip_geolocation_shapes():
    assert parse_ip_geolocation({"latitude": 25.03, "longitude": 121.56}) == Coordinate(lat=25.03, lon=121.56)
    assert parse_ip_geolocation({"status": "success", "lat": 1.5, "lon": "2.5"}) == Coordinate(lat=1.5, lon=2.5)
    with pytest.raises(PositionUnavailableError, match="lookup failed"):
        parse_ip_geolocation({"status": "fail", "message": "reserved range"})
    with pytest.raises(PositionUnavailableError, match="no coordinates"):
        parse_ip_geolocation({"city": "Nowhere"})
    with pytest.raises(PositionUnavailableError):
        parse_ip_geolocation({"lat": 500, "lon": 0})


def test_ip_sensor_uses_fetch(monkeypatch):
    calls = []

    def fake_fetch(url, *, timeout_seconds):
        calls.append((url, timeout_seconds))
        return {"latitude": 10.0, "longitude": 20.0}

    sensor = IpGeolocationSensor(Settings(), fetch=fake_fetch, background=False)
    future = sensor.request_current_position()
    assert future.result(timeout=1) == Coordinate(lat=10.0, lon=20.0)
    assert calls == [("https://ipapi.co/json/", 5)]


def test_ip_sensor_failure_completes_future_with_exception():
    def fake_fetch(url, *, timeout_seconds):
        raise httpx.ConnectError("offline")

    future = IpGeolocationSensor(Settings(), fetch=fake_fetch, background=False).request_current_position()
    assert isinstance(future.exception(timeout=1), httpx.ConnectError)


def test_build_position_sensor_by_mode():
    fixed = Settings.model_validate({"position": {"mode": "fixed", "fixed_lat": 1, "fixed_lon": 2}})
    assert isinstance(build_position_sensor(fixed), FixedPositionSensor)
    assert isinstance(build_position_sensor(Settings.model_validate({"position": {"mode": "ip"}})), IpGeolocationSensor)
    assert isinstance(build_position_sensor(Settings()), PendingPositionSensor)


def test_pending_sensor_second_report_loses_race():
    sensor = PendingPositionSensor()
    future = sensor.request_current_position()
    # Both callers see "not done" before either completes the future.
    future.done = lambda: False
    assert sensor.report(Coordinate(lat=1, lon=2)) is True
    assert sensor.report(Coordinate(lat=3, lon=4)) is False
    assert sensor.report_failure("late") is False
    assert future.result() == Coordinate(lat=1, lon=2)
