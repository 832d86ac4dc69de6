"""
config.py

Typed configuration loading and validation for Notefall.

Design goals
- Load at most one UTF-8 JSON config file
- Validate with pydantic (defaults included)
- Support environment variable overrides
- No other I/O beyond reading the config file (no directory creation)

Config file location
- If NOTEFALL_CONFIG_PATH is set, that file is used and must exist.
- Otherwise Notefall searches these paths in order and uses the first one that exists:
  1) ./notefall_config.json (current working directory)
  2) <user config dir>/Notefall/Notefall/notefall_config.json
- If none exists, built-in defaults are used.

Example config file (notefall_config.json)
{
  "gameplay": {
    "tick_rate_ms": 10,
    "judgement_line": 350,
    "step_size": 2,
    "interval_duration": 10,
    "tolerance": 20,
    "sustain_width": 15,
    "long_note_threshold_seconds": 1.0
  },
  "viewport": {
    "canvas_width": 200,
    "canvas_height": 400,
    "note_radius_ratio": 0.07
  },
  "schedule": {
    "path": "assets/RockinRobin.csv",
    "song_name": "RockinRobin"
  },
  "logging": {
    "level": "INFO"
  }
}
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

import gameplay_models


class GameplayConfig(BaseModel):
    tick_rate_ms: int = Field(default=10, ge=1, description="Milliseconds between Tick actions.")
    judgement_line: float = Field(default=350.0, gt=0, description="Vertical position of the judgement line.")
    step_size: float = Field(default=2.0, gt=0, description="Distance an entity falls per tick.")
    interval_duration: float = Field(default=10.0, gt=0, description="Scale from note seconds to tail length.")
    tolerance: float = Field(default=20.0, ge=0, description="Hit window around the judgement line.")
    sustain_width: float = Field(default=15.0, gt=0, description="Width of a sustain tail.")
    long_note_threshold_seconds: float = Field(
        default=1.0, ge=0, description="Notes longer than this spawn a sustain tail."
    )


class ViewportConfig(BaseModel):
    canvas_width: int = Field(default=200, ge=1)
    canvas_height: int = Field(default=400, ge=1)
    note_radius_ratio: float = Field(default=0.07, gt=0, le=1, description="Marker radius as a share of width.")


class ScheduleConfig(BaseModel):
    path: Optional[str] = Field(default=None, description="CSV schedule to play. Demo schedule when unset.")
    song_name: str = Field(default="RockinRobin")

    @field_validator("path")
    @classmethod
    def normalize_optional_path(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        trimmed = value.strip()
        return trimmed or None


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="DEBUG, INFO, WARNING, ERROR or CRITICAL")

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        normalized = (value or "").strip().upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalized not in allowed:
            raise ValueError("level must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return normalized


class AppConfig(BaseModel):
    gameplay: GameplayConfig = Field(default_factory=GameplayConfig)
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def check_line_inside_canvas(self) -> "AppConfig":
        if self.gameplay.judgement_line > self.viewport.canvas_height:
            raise ValueError("gameplay.judgement_line must lie inside viewport.canvas_height")
        return self

    def gameplay_constants(self) -> gameplay_models.GameplayConstants:
        return gameplay_models.GameplayConstants(
            judgement_line=float(self.gameplay.judgement_line),
            step_size=float(self.gameplay.step_size),
            interval_duration=float(self.gameplay.interval_duration),
            tolerance=float(self.gameplay.tolerance),
            sustain_width=float(self.gameplay.sustain_width),
            note_radius=round(float(self.viewport.note_radius_ratio) * float(self.viewport.canvas_width), 6),
            long_note_threshold_seconds=float(self.gameplay.long_note_threshold_seconds),
        )


def _default_config_candidates() -> List[Path]:
    config_directory = Path(user_config_dir("Notefall", "Notefall"))
    return [
        Path.cwd() / "notefall_config.json",
        config_directory / "notefall_config.json",
    ]


def _resolve_config_path() -> Optional[Path]:
    explicit_path_text = os.environ.get("NOTEFALL_CONFIG_PATH", "").strip()
    if explicit_path_text:
        explicit_path = Path(explicit_path_text)
        if not explicit_path.exists():
            raise FileNotFoundError(f"NOTEFALL_CONFIG_PATH points at a missing file: {explicit_path}")
        return explicit_path

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
    - NOTEFALL_TICK_RATE_MS
    - NOTEFALL_JUDGEMENT_LINE
    - NOTEFALL_STEP_SIZE
    - NOTEFALL_TOLERANCE
    - NOTEFALL_SCHEDULE_PATH
    - NOTEFALL_SONG_NAME
    - NOTEFALL_LOG_LEVEL
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
    schedule_section = ensure_nested(updated_config, "schedule")
    logging_section = ensure_nested(updated_config, "logging")

    def override_string(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "")
        if value_text.strip():
            target_dict[key_name] = value_text.strip()

    def override_int(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "").strip()
        if not value_text:
            return
        try:
            target_dict[key_name] = int(value_text)
        except ValueError:
            return

    def override_float(env_name: str, target_dict: Dict[str, Any], key_name: str) -> None:
        value_text = os.environ.get(env_name, "").strip()
        if not value_text:
            return
        try:
            target_dict[key_name] = float(value_text)
        except ValueError:
            return

    override_int("NOTEFALL_TICK_RATE_MS", gameplay_section, "tick_rate_ms")
    override_float("NOTEFALL_JUDGEMENT_LINE", gameplay_section, "judgement_line")
    override_float("NOTEFALL_STEP_SIZE", gameplay_section, "step_size")
    override_float("NOTEFALL_TOLERANCE", gameplay_section, "tolerance")

    override_string("NOTEFALL_SCHEDULE_PATH", schedule_section, "path")
    override_string("NOTEFALL_SONG_NAME", schedule_section, "song_name")

    override_string("NOTEFALL_LOG_LEVEL", logging_section, "level")

    return updated_config


def load_config(config_path: Optional[Path] = None) -> Tuple[AppConfig, Optional[Path]]:
    resolved_path = config_path if config_path is not None else _resolve_config_path()
    json_dict = _read_json_file_utf8(resolved_path) if resolved_path is not None else {}
    json_dict = _apply_environment_overrides(json_dict)

    try:
        config = AppConfig.model_validate(json_dict)
    except ValidationError as exception:
        source_text = str(resolved_path) if resolved_path is not None else "defaults"
        raise ValueError(f"Config validation failed for {source_text}:\n{exception}") from exception

    return config, resolved_path


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
