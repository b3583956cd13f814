import os

from placepicker.core.env import get_project_root, load_dotenv_if_present, resolve_project_path


def test_project_root_override(monkeypatch, tmp_path):
    monkeypatch.setenv("PLACEPICKER_PROJECT_ROOT", str(tmp_path))
    get_project_root.cache_clear()
    try:
        assert get_project_root() == tmp_path.resolve()
        assert resolve_project_path("data/x.json") == (tmp_path / "data" / "x.json").resolve()
        assert resolve_project_path("/abs/x.json").as_posix() == "/abs/x.json"
    finally:
        get_project_root.cache_clear()


def test_explicit_env_file_is_loaded_without_overriding(monkeypatch, tmp_path):
    env_file = tmp_path / "custom.env"
    env_file.write_text("PLACEPICKER_TEST_FROM_DOTENV=yes\nPLACEPICKER_TEST_PRESET=from-file\n", encoding="utf-8")
    monkeypatch.setenv("PLACEPICKER_ENV_FILE", str(env_file))
    monkeypatch.setenv("PLACEPICKER_TEST_PRESET", "from-process")
    monkeypatch.delenv("PLACEPICKER_TEST_FROM_DOTENV", raising=False)
    load_dotenv_if_present.cache_clear()
    get_project_root.cache_clear()
    try:
        assert load_dotenv_if_present() == env_file.resolve()
        assert os.environ["PLACEPICKER_TEST_FROM_DOTENV"] == "yes"
        assert os.environ["PLACEPICKER_TEST_PRESET"] == "from-process"
        # The env file's directory doubles as the project root.
        assert get_project_root() == tmp_path.resolve()
    finally:
        os.environ.pop("PLACEPICKER_TEST_FROM_DOTENV", None)
        load_dotenv_if_present.cache_clear()
        get_project_root.cache_clear()


def test_missing_explicit_env_file_is_ignored(monkeypatch, tmp_path):
    monkeypatch.setenv("PLACEPICKER_ENV_FILE", str(tmp_path / "nope.env"))
    load_dotenv_if_present.cache_clear()
    try:
        assert load_dotenv_if_present() is None
    finally:
        load_dotenv_if_present.cache_clear()
