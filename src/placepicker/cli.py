"""
PlacePicker CLI entrypoint.

This CLI is intended for quick local use and debugging without a frontend.
It drives the same `SelectionController` the API uses, against the same durable store.
"""

from __future__ import annotations

import argparse
import json
from concurrent.futures import wait
from typing import Any

from placepicker.config.settings import get_settings
from placepicker.core.geo import validate_coordinate
from placepicker.core.logging import configure_logging
from placepicker.domain.models import Coordinate, Place
from placepicker.ordering.distance import distances_from
from placepicker.selection.controller import SelectionController
from placepicker.selection.session import start_session
from placepicker.sensors.position import FixedPositionSensor, PendingPositionSensor, PositionSensor


def _observer_sensor(args: argparse.Namespace) -> PositionSensor | None:
    """Build a fixed sensor from --lat/--lon; None means "use the configured sensor"."""
    lat = getattr(args, "lat", None)
    lon = getattr(args, "lon", None)
    if lat is None and lon is None:
        return None
    if lat is None or lon is None:
        raise ValueError("--lat and --lon must be given together")
    validate_coordinate(lat, lon)
    return FixedPositionSensor(Coordinate(lat=float(lat), lon=float(lon)))


def _controller(args: argparse.Namespace, *, wait_for_position: bool = False) -> SelectionController:
    settings = get_settings()
    session = start_session(settings, sensor=_observer_sensor(args))
    if wait_for_position and not isinstance(session.sensor, PendingPositionSensor):
        wait([session.position], timeout=settings.app.http_timeout_seconds + 1)
        if session.position.done():
            session.controller.accept_position_result(session.position)
    return session.controller


def _print_places(places: list[Place], distances: dict[str, float] | None = None) -> None:
    for i, place in enumerate(places, start=1):
        suffix = ""
        if distances is not None:
            suffix = f"  ({distances[place.id] / 1000:.1f} km)"
        print(f"{i:>2}. [{place.id}] {place.name}{suffix}")


def _cmd_places(args: argparse.Namespace) -> int:
    """Handle the `places` subcommand (catalog ranked by distance)."""
    settings = get_settings()
    controller = _controller(args, wait_for_position=True)
    available = controller.available_places

    if args.json:
        print(json.dumps(available.model_dump(mode="json"), ensure_ascii=False, indent=2))
        return 0

    print(settings.ui.available_title)
    if not available.resolved:
        print(f"  {settings.ui.available_fallback_text}")
        if controller.position_error:
            print(f"  (position unavailable: {controller.position_error})")
        return 0
    _print_places(available.places, distances_from(available.places, available.observer))
    return 0


def _cmd_picked(args: argparse.Namespace) -> int:
    settings = get_settings()
    controller = _controller(args)
    picked = controller.picked_places

    if args.json:
        print(json.dumps([p.model_dump(mode="json") for p in picked], ensure_ascii=False, indent=2))
        return 0

    print(settings.ui.picked_title)
    if not picked:
        print(f"  {settings.ui.picked_fallback_text}")
        return 0
    _print_places(picked)
    return 0


def _cmd_pick(args: argparse.Namespace) -> int:
    controller = _controller(args)
    if not any(p.id == args.place_id for p in controller.catalog):
        print(f"Unknown place id: {args.place_id}")
        return 1
    if controller.pick(args.place_id):
        print(f"Added {args.place_id}.")
    else:
        print(f"{args.place_id} is already picked.")
    for warning in controller.warnings:
        print(f"warning: {warning}")
    return 0


def _cmd_remove(args: argparse.Namespace) -> int:
    controller = _controller(args)
    if not controller.is_picked(args.place_id):
        print(f"{args.place_id} is not picked.")
        return 0

    controller.request_removal(args.place_id)
    if not args.yes:
        answer = input(f"Do you really want to remove {args.place_id}? [y/N] ").strip().lower()
        if answer not in {"y", "yes"}:
            controller.cancel_removal()
            print("Kept.")
            return 0

    removed = controller.confirm_removal()
    print(f"Removed {removed}.")
    for warning in controller.warnings:
        print(f"warning: {warning}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the PlacePicker CLI."""
    parser = argparse.ArgumentParser(prog="placepicker")
    parser.add_argument("--log-level", type=str, default=None)
    sub = parser.add_subparsers(dest="command", required=True)

    places = sub.add_parser("places", help="List available places, nearest first.")
    places.add_argument("--lat", type=float, default=None, help="Observer latitude (overrides configured sensor)")
    places.add_argument("--lon", type=float, default=None, help="Observer longitude (overrides configured sensor)")
    places.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    places.set_defaults(func=_cmd_places)

    picked = sub.add_parser("picked", help="List the places you would like to visit.")
    picked.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    picked.set_defaults(func=_cmd_picked)

    pick = sub.add_parser("pick", help="Add a place to your list.")
    pick.add_argument("place_id")
    pick.set_defaults(func=_cmd_pick)

    remove = sub.add_parser("remove", help="Remove a place from your list (asks for confirmation).")
    remove.add_argument("place_id")
    remove.add_argument("--yes", "-y", action="store_true", help="Skip the confirmation prompt")
    remove.set_defaults(func=_cmd_remove)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m placepicker.cli`."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        _observer_sensor(args)
    except ValueError as e:
        parser.error(str(e))
    configure_logging(args.log_level)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
