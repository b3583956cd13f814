import pytest
from pydantic import ValidationError

from placepicker.config.settings import Settings, _apply_env_overrides, get_settings


def test_packaged_defaults_load():
    settings = get_settings()
    assert settings.selection.storage_key == "selectedPlaces"
    assert settings.catalog.path == "data/catalogs/places.json"
    assert settings.ui.available_fallback_text == "Sorting places by distance..."


def test_env_overrides_are_applied(monkeypatch):
    monkeypatch.setenv("PLACEPICKER_STORAGE_DIR", "/tmp/pp")
    monkeypatch.setenv("PLACEPICKER_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("PLACEPICKER_POSITION_MODE", "ip")
    data = _apply_env_overrides({"app": {"name": "x"}})
    settings = Settings.model_validate(data)
    assert settings.selection.storage_dir == "/tmp/pp"
    assert settings.app.log_level == "DEBUG"
    assert settings.position.mode == "ip"


def test_external_config_file(monkeypatch, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("selection:\n  storage_key: mine\n", encoding="utf-8")
    monkeypatch.setenv("PLACEPICKER_CONFIG_PATH", str(path))
    get_settings.cache_clear()
    try:
        assert get_settings().selection.storage_key == "mine"
    finally:
        get_settings.cache_clear()


def test_fixed_position_requires_coordinates():
    with pytest.raises(ValidationError, match="fixed_lat"):
        Settings.model_validate({"position": {"mode": "fixed"}})
