import json

import pytest

from placepicker import cli
from placepicker.core.storage import MemoryKeyValueStorage
from placepicker.selection import session as session_module


@pytest.fixture
def cli_env(monkeypatch, catalog):
    # One shared in-memory store across CLI invocations, like the file store between runs.
    storage = MemoryKeyValueStorage()
    real_start = session_module.start_session

    def fake_start(settings=None, *, sensor=None, **_kwargs):
        return real_start(settings, catalog=catalog, storage=storage, sensor=sensor)

    monkeypatch.setattr(cli, "start_session", fake_start)
    return storage


def test_places_with_observer_lists_nearest_first(cli_env, capsys):
    assert cli.main(["places", "--lat", "0", "--lon", "0", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["status"] == "resolved"
    assert [p["id"] for p in data["places"]] == ["p2", "p1", "p3"]


def test_places_without_observer_shows_fallback(cli_env, capsys):
    assert cli.main(["places"]) == 0
    assert "Sorting places by distance..." in capsys.readouterr().out


def test_pick_then_remove_with_confirmation(cli_env, capsys, monkeypatch):
    assert cli.main(["pick", "p3"]) == 0
    assert cli.main(["pick", "p3"]) == 0
    assert "already picked" in capsys.readouterr().out
    assert json.loads(cli_env.read("selectedPlaces")) == ["p3"]

    monkeypatch.setattr("builtins.input", lambda _prompt: "n")
    cli.main(["remove", "p3"])
    assert json.loads(cli_env.read("selectedPlaces")) == ["p3"]

    monkeypatch.setattr("builtins.input", lambda _prompt: "y")
    cli.main(["remove", "p3"])
    assert json.loads(cli_env.read("selectedPlaces")) == []


def test_pick_unknown_place_fails(cli_env, capsys):
    assert cli.main(["pick", "zzz"]) == 1
    assert "Unknown place id" in capsys.readouterr().out


@pytest.mark.parametrize(
    "argv",
    [
        ["places", "--lat", "91", "--lon", "0"],
        ["places", "--lat", "10"],
    ],
)
def test_places_rejects_bad_observer_arguments(cli_env, capsys, argv):
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    assert exc.value.code == 2
    assert "error:" in capsys.readouterr().err
