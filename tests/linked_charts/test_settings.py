from __future__ import annotations

import json

import pytest

from linked_charts.settings import Settings, load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("UI_TITLE", "DEFAULT_GROUP", "TRANSITION_DURATION", "MIN_WIDTH", "MIN_HEIGHT", "LOG_FORMAT"):
        monkeypatch.delenv(f"LINKED_CHARTS_{name}", raising=False)


def test_load_settings_defaults():
    settings = load_settings()

    assert settings == Settings()
    assert settings.chart_defaults() == {"transition_duration": 750, "min_width": 200, "min_height": 200}


def test_load_settings_from_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"ui_title": "Sales", "min_width": 320, "unknown": True}))

    settings = load_settings(path)

    assert settings.ui_title == "Sales"
    assert settings.min_width == 320
    assert settings.min_height == 200


def test_environment_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"transition_duration": 100}))
    monkeypatch.setenv("LINKED_CHARTS_TRANSITION_DURATION", "0")
    monkeypatch.setenv("LINKED_CHARTS_DEFAULT_GROUP", "sales")

    settings = load_settings(path)

    assert settings.transition_duration == 0
    assert settings.default_group == "sales"


def test_missing_settings_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.json")
