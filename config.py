"""
config.py

Typed configuration loading and validation for Lanebeat.

Design goals
- Load at most one UTF-8 JSON config file
- Validate with pydantic (defaults included)
- Support environment variable overrides
- No other I/O beyond reading the config file (no directory creation)

Config file location
- If LANEBEAT_CONFIG_PATH is set, that file is used.
- Otherwise Lanebeat searches these paths in order and uses the first one that exists:
  1) ./lanebeat_config.json (current working directory)
  2) <user config dir>/Lanebeat/Lanebeat/lanebeat_config.json
- If none exists, the built in defaults are used.

Example config file (lanebeat_config.json)
{
  "gameplay": {
    "playback_rate": 1.0,
    "timing_window_seconds": 0.2,
    "perfect_seconds": 0.05,
    "great_seconds": 0.10,
    "good_seconds": 0.15,
    "hold_grace_seconds": 0.3,
    "min_hold_ratio": 0.7,
    "feedback_lifetime_seconds": 0.5
  },
  "keys": {
    "key_to_lane": {"ArrowLeft": "left", "ArrowRight": "right", "KeyZ": "left", "KeyX": "right"},
    "key_aliases": {"KeyZ": "ArrowLeft", "KeyX": "ArrowRight"}
  },
  "chart": {
    "path": "assets/keyTimings.json"
  },
  "logging": {
    "level": "INFO",
    "judgement_log": false
  }
}
"""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

import lane_registry


class GameplayConfig(BaseModel):
    playback_rate: float = Field(default=1.0, gt=0.0, description="Song time per wall clock second.")
    timing_window_seconds: float = Field(default=0.2, gt=0.0, description="Widest distance that still judges a note.")
    perfect_seconds: float = Field(default=0.05, gt=0.0)
    great_seconds: float = Field(default=0.10, gt=0.0)
    good_seconds: float = Field(default=0.15, gt=0.0)
    long_note_threshold_seconds: float = Field(default=0.2, ge=0.0, description="release - press above this is a long note.")
    hold_grace_seconds: float = Field(default=0.3, ge=0.0, description="Time after release before a hold is finalized.")
    min_hold_ratio: float = Field(default=0.7, ge=0.0, le=1.0, description="Releasing before this fraction breaks combo.")
    hold_trickle_points: float = Field(default=1.0, ge=0.0, description="Points per tick while a hold is kept.")
    feedback_lifetime_seconds: float = Field(default=0.5, gt=0.0)

    @model_validator(mode="after")
    def validate_window_order(self) -> "GameplayConfig":
        if not (self.perfect_seconds <= self.great_seconds <= self.good_seconds):
            raise ValueError("judgement windows must satisfy perfect <= great <= good")
        return self


def _default_key_to_lane() -> Dict[str, str]:
    return dict(lane_registry.default_key_binding().key_to_lane)


def _default_key_aliases() -> Dict[str, str]:
    return dict(lane_registry.default_key_binding().key_aliases)


class KeysConfig(BaseModel):
    key_to_lane: Dict[str, str] = Field(default_factory=_default_key_to_lane)
    key_aliases: Dict[str, str] = Field(default_factory=_default_key_aliases)

    @field_validator("key_to_lane")
    @classmethod
    def validate_lanes(cls, value: Dict[str, str]) -> Dict[str, str]:
        normalized: Dict[str, str] = {}
        for key, lane in value.items():
            lane_name = (lane or "").strip().lower()
            if lane_name not in lane_registry.LANE_NAMES:
                raise ValueError(f"lane for {key} must be one of: {', '.join(lane_registry.LANE_NAMES)}")
            normalized[str(key)] = lane_name
        return normalized

    @model_validator(mode="after")
    def validate_aliases(self) -> "KeysConfig":
        for key in self.key_aliases:
            if key not in self.key_to_lane:
                raise ValueError(f"alias source key {key} has no lane in key_to_lane")
        return self


class ChartConfig(BaseModel):
    path: str = Field(default="", description="Chart JSON file. Empty uses assets/keyTimings.json.")


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    judgement_log: bool = Field(default=False, description="Keep and log every judgement of a session.")

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        normalized = (value or "").strip().upper()
        if normalized == "WARN":
            normalized = "WARNING"
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalized not in allowed:
            raise ValueError("level must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return normalized


class AppConfig(BaseModel):
    gameplay: GameplayConfig = Field(default_factory=GameplayConfig)
    keys: KeysConfig = Field(default_factory=KeysConfig)
    chart: ChartConfig = Field(default_factory=ChartConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _default_config_candidates() -> List[Path]:
    config_directory = Path(user_config_dir("Lanebeat", "Lanebeat"))
    return [
        Path.cwd() / "lanebeat_config.json",
        config_directory / "lanebeat_config.json",
    ]


def _resolve_config_path() -> Optional[Path]:
    explicit_path_text = os.environ.get("LANEBEAT_CONFIG_PATH", "").strip()
    if explicit_path_text:
        return Path(explicit_path_text)

    for candidate_path in _default_config_candidates():
        if candidate_path.exists():
            return candidate_path

    return None


def _read_json_file_utf8(config_path: Path) -> Dict[str, Any]:
    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except OSError as exception:
        raise OSError(f"Failed to read config file: {config_path}. Error: {exception}") from exception

    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as exception:
        raise ValueError(f"Config file is not valid JSON: {config_path}. Error: {exception}") from exception

    if not isinstance(parsed, dict):
        raise ValueError(f"Config file root must be a JSON object: {config_path}")

    return parsed


def _apply_environment_overrides(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Environment overrides are optional. The config file is the primary source of truth.

    Override variables:
    - LANEBEAT_PLAYBACK_RATE
    - LANEBEAT_CHART_PATH
    - LANEBEAT_LOG_LEVEL
    - LANEBEAT_JUDGEMENT_LOG
    """
    def ensure_nested(config_root: Dict[str, Any], section_name: str) -> Dict[str, Any]:
        section = config_root.get(section_name)
        if isinstance(section, dict):
            return section
        section = {}
        config_root[section_name] = section
        return section

    updated_config = dict(config_dict)

    gameplay_section = ensure_nested(updated_config, "gameplay")
    chart_section = ensure_nested(updated_config, "chart")
    logging_section = ensure_nested(updated_config, "logging")

    def override_string(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "")
        if value_text.strip():
            target_dict[key_name] = value_text.strip()

    def override_float(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "").strip()
        if not value_text:
            return
        try:
            target_dict[key_name] = float(value_text)
        except ValueError:
            return

    def override_bool(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "").strip().lower()
        if not value_text:
            return
        truthy = {"1", "true", "yes", "on"}
        falsy = {"0", "false", "no", "off"}
        if value_text in truthy:
            target_dict[key_name] = True
        elif value_text in falsy:
            target_dict[key_name] = False

    override_float("LANEBEAT_PLAYBACK_RATE", gameplay_section, "playback_rate")
    override_string("LANEBEAT_CHART_PATH", chart_section, "path")
    override_string("LANEBEAT_LOG_LEVEL", logging_section, "level")
    override_bool("LANEBEAT_JUDGEMENT_LOG", logging_section, "judgement_log")

    return updated_config


def load_config(config_path: Optional[Path] = None) -> Tuple[AppConfig, Optional[Path]]:
    resolved_path = config_path if config_path is not None else _resolve_config_path()
    json_dict: Dict[str, Any] = {}
    if resolved_path is not None:
        json_dict = _read_json_file_utf8(resolved_path)
    json_dict = _apply_environment_overrides(json_dict)

    try:
        config = AppConfig.model_validate(json_dict)
    except ValidationError as exception:
        source_text = str(resolved_path) if resolved_path is not None else "defaults and environment"
        raise ValueError(f"Config validation failed for {source_text}:\n{exception}") from exception

    return config, resolved_path


@lru_cache(maxsize=1)
def get_config() -> Tuple[AppConfig, Optional[Path]]:
    return load_config()


def to_json(config: AppConfig) -> str:
    return json.dumps(config.model_dump(), ensure_ascii=False, indent=2)


def main() -> int:
    try:
        config, resolved_path = load_config()
    except Exception as exception:
        error_payload = {"ok": False, "error": str(exception)}
        print(json.dumps(error_payload, ensure_ascii=False, indent=2))
        return 2

    output_payload = {
        "ok": True,
        "config_path": str(resolved_path) if resolved_path is not None else None,
        "config": json.loads(to_json(config)),
    }
    print(json.dumps(output_payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
