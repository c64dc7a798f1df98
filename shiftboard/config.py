"""Configuration loading (JSON or YAML)."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path

import yaml


DEFAULT_DB_URL = "sqlite:///shiftboard.db"

# Core-hours reference marks used to classify shifts
OPENING_MARK = "13:00"
CLOSING_MARK = "18:00"

# Break thresholds in hours
ADULT_BREAK_THRESHOLD = 8.0
MINOR_BREAK_THRESHOLD = 5.0
BREAK_DEDUCTION = 0.5

OVERTIME_THRESHOLD = 40.0
ADVANCE_NOTICE_DAYS = 14


@dataclass
class ShiftboardConfig:
    database_url: str = DEFAULT_DB_URL
    opening_mark: str = OPENING_MARK
    closing_mark: str = CLOSING_MARK
    adult_break_threshold_hours: float = ADULT_BREAK_THRESHOLD
    minor_break_threshold_hours: float = MINOR_BREAK_THRESHOLD
    break_deduction_hours: float = BREAK_DEDUCTION
    overtime_threshold_hours: float = OVERTIME_THRESHOLD
    advance_notice_days: int = ADVANCE_NOTICE_DAYS
    log_level: str = "INFO"
    log_json: bool = False

    def break_threshold(self, is_minor: bool) -> float:
        return self.minor_break_threshold_hours if is_minor else self.adult_break_threshold_hours


def load_config(path: str | Path | None = None) -> ShiftboardConfig:
    """
    Load configuration from a JSON or YAML file.

    Args:
        path: Config file path. ``None`` or a missing file yields defaults.

    Returns:
        ShiftboardConfig with file values applied, then environment overrides

    Raises:
        ValueError: If the file contains keys the config does not define
    """
    data: dict = {}
    if path is not None and Path(path).exists():
        with open(path, "r", encoding="utf-8") as fh:
            # YAML is a superset of JSON, so one loader covers both formats
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping at top level")

    known = {f.name for f in fields(ShiftboardConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    cfg = ShiftboardConfig(**data)

    env_db = os.environ.get("SHIFTBOARD_DATABASE_URL")
    if env_db:
        cfg.database_url = env_db
    return cfg
