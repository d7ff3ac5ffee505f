"""
Unit tests for settings resolution.
"""

from pathlib import Path

import pytest

from config import DEFAULT_STORAGE_KEY, DEFAULT_STORAGE_PATH, get_settings, read_env_file, truthy_env


pytestmark = pytest.mark.unit


def test_defaults_without_env():
    settings = get_settings(environ={}, env_file=None)

    assert settings.storage_path == DEFAULT_STORAGE_PATH
    assert settings.storage_key == DEFAULT_STORAGE_KEY
    assert settings.seed_on_first_run is True
    assert settings.alt_screen is True
    assert settings.log_level == "WARNING"
    assert settings.palette == {}


def test_environment_values(tmp_path):
    env = {
        "TODO_STORAGE_PATH": str(tmp_path / "s.json"),
        "TODO_STORAGE_KEY": "tasks",
        "TODO_SEED": "0",
        "TODO_ALT_SCREEN": "off",
        "TODO_LOG_LEVEL": "debug",
        "TODO_HIGH": "ff0000",
        "TODO_LOW": "not-a-color",
    }

    settings = get_settings(environ=env, env_file=None)

    assert settings.storage_path == tmp_path / "s.json"
    assert settings.storage_key == "tasks"
    assert settings.seed_on_first_run is False
    assert settings.alt_screen is False
    assert settings.log_level == "DEBUG"
    assert settings.palette == {"TODO_HIGH": "#ff0000"}


def test_env_file_fills_gaps_and_environment_wins(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\n"
        "TODO_STORAGE_KEY=from_file\n"
        "TODO_SEED=no\n"
        "TODO_DONE='#00ff00'\n"
        "UNRELATED=1\n"
        "garbage line\n",
        encoding="utf-8",
    )

    settings = get_settings(environ={"TODO_STORAGE_KEY": "from_env"}, env_file=env_file)

    assert settings.storage_key == "from_env"
    assert settings.seed_on_first_run is False
    assert settings.palette == {"TODO_DONE": "#00ff00"}


def test_read_env_file_missing(tmp_path):
    assert read_env_file(tmp_path / "absent.env") == {}


@pytest.mark.parametrize("value, expected", [
    (None, True), ("1", True), ("yes", True), ("0", False), ("false", False), ("OFF", False), ("", False),
])
def test_truthy_env(value, expected):
    assert truthy_env(value) is expected


def test_storage_path_expands_user():
    settings = get_settings(environ={"TODO_STORAGE_PATH": "~/todo.json"}, env_file=None)

    assert settings.storage_path == Path("~/todo.json").expanduser()
