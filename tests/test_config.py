"""Tests for engine settings and their persistence."""

import json

import pytest

from iRetouch.config import (
    SETTINGS_ENV_VAR,
    EngineSettings,
    default_settings,
    load_settings,
    save_settings,
)
from iRetouch.errors import SettingsError
from iRetouch.utils import jsonio
from iRetouch.utils.jsonio import atomic_write_text


def test_defaults_match_engine_limits() -> None:
    settings = EngineSettings()

    assert settings.history_capacity == 20
    assert settings.max_blur_radius == 10
    assert settings.max_blur_passes == 3
    assert settings.preview_max_size == 1200
    assert settings.jpeg_quality is None


def test_from_mapping_ignores_unknown_keys() -> None:
    settings = EngineSettings.from_mapping({"history_capacity": "5", "theme": "dark"})

    assert settings.history_capacity == 5


@pytest.mark.parametrize(
    "data",
    [
        {"history_capacity": 0},
        {"jpeg_quality": 200},
        {"compression_level": 12},
        {"max_blur_passes": "lots"},
    ],
)
def test_invalid_values_raise(data) -> None:
    with pytest.raises(SettingsError):
        EngineSettings.from_mapping(data)


def test_save_and_load_round_trip(tmp_path) -> None:
    path = tmp_path / "engine.json"
    settings = EngineSettings(history_capacity=7, jpeg_quality=80)

    save_settings(path, settings)

    assert json.loads(path.read_text(encoding="utf-8"))["history_capacity"] == 7
    assert load_settings(path) == settings


def test_missing_file_raises(tmp_path) -> None:
    with pytest.raises(SettingsError):
        load_settings(tmp_path / "missing.json")


def test_non_object_json_raises(tmp_path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(SettingsError):
        load_settings(path)


def test_default_settings_reads_environment(tmp_path, monkeypatch) -> None:
    path = tmp_path / "engine.json"
    path.write_text(json.dumps({"preview_max_size": 640}), encoding="utf-8")
    monkeypatch.setenv(SETTINGS_ENV_VAR, str(path))

    assert default_settings().preview_max_size == 640


def test_default_settings_without_environment(monkeypatch) -> None:
    monkeypatch.delenv(SETTINGS_ENV_VAR, raising=False)

    assert default_settings() == EngineSettings()


def test_atomic_write_replaces_content_without_leftovers(tmp_path) -> None:
    path = tmp_path / "nested" / "engine.json"

    atomic_write_text(path, "first")
    atomic_write_text(path, "second")

    assert path.read_text(encoding="utf-8") == "second"
    assert [entry.name for entry in path.parent.iterdir()] == ["engine.json"]


def test_atomic_write_keeps_old_content_when_replace_fails(tmp_path, monkeypatch) -> None:
    path = tmp_path / "engine.json"
    path.write_text("old", encoding="utf-8")

    def _locked(_src, _dst):
        raise PermissionError("file in use")

    monkeypatch.setattr(jsonio.os, "replace", _locked)
    monkeypatch.setattr(jsonio.time, "sleep", lambda _seconds: None)

    with pytest.raises(PermissionError):
        atomic_write_text(path, "new")

    assert path.read_text(encoding="utf-8") == "old"
    assert [entry.name for entry in tmp_path.iterdir()] == ["engine.json"]
