"""Tests for config loading, environment overrides and validation."""

import json

import pytest

import config as app_config_module

ENVIRONMENT_NAMES = (
    "LANEBEAT_CONFIG_PATH",
    "LANEBEAT_PLAYBACK_RATE",
    "LANEBEAT_CHART_PATH",
    "LANEBEAT_LOG_LEVEL",
    "LANEBEAT_JUDGEMENT_LOG",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    for name in ENVIRONMENT_NAMES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def _write_config(tmp_path, payload):
    config_path = tmp_path / "custom_config.json"
    config_path.write_text(json.dumps(payload), encoding="utf-8")
    return config_path


def test_empty_file_gives_defaults(tmp_path):
    config, resolved_path = app_config_module.load_config(_write_config(tmp_path, {}))
    assert resolved_path == tmp_path / "custom_config.json"
    assert config.gameplay.playback_rate == 1.0
    assert config.gameplay.timing_window_seconds == 0.2
    assert config.gameplay.hold_grace_seconds == 0.3
    assert config.keys.key_aliases == {"KeyZ": "ArrowLeft", "KeyX": "ArrowRight"}
    assert config.logging.level == "INFO"
    assert config.logging.judgement_log is False


def test_working_directory_config_is_found(tmp_path):
    (tmp_path / "lanebeat_config.json").write_text('{"chart": {"path": "songs/a.json"}}', encoding="utf-8")
    config, resolved_path = app_config_module.load_config()
    assert resolved_path == tmp_path / "lanebeat_config.json"
    assert config.chart.path == "songs/a.json"


def test_explicit_path_environment_variable(tmp_path, monkeypatch):
    config_path = _write_config(tmp_path, {"gameplay": {"playback_rate": 0.5}})
    monkeypatch.setenv("LANEBEAT_CONFIG_PATH", str(config_path))
    config, resolved_path = app_config_module.load_config()
    assert resolved_path == config_path
    assert config.gameplay.playback_rate == 0.5


def test_environment_overrides_win(tmp_path, monkeypatch):
    config_path = _write_config(tmp_path, {"gameplay": {"playback_rate": 0.5}, "logging": {"level": "DEBUG"}})
    monkeypatch.setenv("LANEBEAT_PLAYBACK_RATE", "1.5")
    monkeypatch.setenv("LANEBEAT_CHART_PATH", "other.json")
    monkeypatch.setenv("LANEBEAT_LOG_LEVEL", "warn")
    monkeypatch.setenv("LANEBEAT_JUDGEMENT_LOG", "yes")
    config, _resolved_path = app_config_module.load_config(config_path)
    assert config.gameplay.playback_rate == 1.5
    assert config.chart.path == "other.json"
    assert config.logging.level == "WARNING"
    assert config.logging.judgement_log is True


def test_unparseable_environment_rate_is_ignored(tmp_path, monkeypatch):
    monkeypatch.setenv("LANEBEAT_PLAYBACK_RATE", "fast")
    config, _resolved_path = app_config_module.load_config(_write_config(tmp_path, {}))
    assert config.gameplay.playback_rate == 1.0


@pytest.mark.parametrize(
    "payload",
    [
        {"gameplay": {"playback_rate": 0}},
        {"gameplay": {"perfect_seconds": 0.2, "great_seconds": 0.1}},
        {"gameplay": {"min_hold_ratio": 1.5}},
        {"keys": {"key_to_lane": {"KeyA": "middle"}}},
        {"keys": {"key_to_lane": {"ArrowLeft": "left"}, "key_aliases": {"KeyZ": "ArrowLeft"}}},
        {"logging": {"level": "LOUD"}},
    ],
)
def test_invalid_values_raise_value_error(tmp_path, payload):
    with pytest.raises(ValueError):
        app_config_module.load_config(_write_config(tmp_path, payload))


def test_non_object_root_is_rejected(tmp_path):
    config_path = tmp_path / "list.json"
    config_path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        app_config_module.load_config(config_path)


def test_to_json_round_trips(tmp_path):
    config, _resolved_path = app_config_module.load_config(_write_config(tmp_path, {"gameplay": {"playback_rate": 1.25}}))
    again = app_config_module.AppConfig.model_validate(json.loads(app_config_module.to_json(config)))
    assert again == config
