"""Tests for configuration loading and logging setup."""

import logging

import pytest
import structlog
from structlog.testing import capture_logs

from shiftboard.config import DEFAULT_DB_URL, ShiftboardConfig, load_config
from shiftboard.logging_config import setup_logging


def test_defaults_without_file(monkeypatch):
    monkeypatch.delenv("SHIFTBOARD_DATABASE_URL", raising=False)
    cfg = load_config(None)
    assert cfg == ShiftboardConfig()
    assert cfg.database_url == DEFAULT_DB_URL
    assert cfg.break_threshold(is_minor=True) == 5.0
    assert cfg.break_threshold(is_minor=False) == 8.0


def test_missing_file_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("SHIFTBOARD_DATABASE_URL", raising=False)
    assert load_config(tmp_path / "nope.yaml") == ShiftboardConfig()


def test_yaml_file(tmp_path, monkeypatch):
    monkeypatch.delenv("SHIFTBOARD_DATABASE_URL", raising=False)
    path = tmp_path / "shiftboard.yaml"
    path.write_text("opening_mark: '12:00'\nadvance_notice_days: 21\nlog_json: true\n")

    cfg = load_config(path)
    assert cfg.opening_mark == "12:00"
    assert cfg.advance_notice_days == 21
    assert cfg.log_json is True
    assert cfg.closing_mark == "18:00"


def test_json_file(tmp_path, monkeypatch):
    monkeypatch.delenv("SHIFTBOARD_DATABASE_URL", raising=False)
    path = tmp_path / "shiftboard.json"
    path.write_text('{"overtime_threshold_hours": 35, "database_url": "sqlite:///x.db"}')

    cfg = load_config(path)
    assert cfg.overtime_threshold_hours == 35
    assert cfg.database_url == "sqlite:///x.db"


def test_env_overrides_database_url(tmp_path, monkeypatch):
    path = tmp_path / "shiftboard.yaml"
    path.write_text("database_url: sqlite:///file.db\n")
    monkeypatch.setenv("SHIFTBOARD_DATABASE_URL", "sqlite:///env.db")

    assert load_config(path).database_url == "sqlite:///env.db"


def test_unknown_keys_rejected(tmp_path):
    path = tmp_path / "shiftboard.yaml"
    path.write_text("opening_mark: '12:00'\nsolver_timeout: 30\n")

    with pytest.raises(ValueError, match="solver_timeout"):
        load_config(path)


def test_non_mapping_rejected(tmp_path):
    path = tmp_path / "shiftboard.yaml"
    path.write_text("- one\n- two\n")

    with pytest.raises(ValueError, match="mapping"):
        load_config(path)


def test_setup_logging_routes_through_structlog():
    setup_logging("DEBUG")
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    with capture_logs() as logs:
        structlog.get_logger("shiftboard.test").info("hello", worker_id="w1")

    assert logs == [{"event": "hello", "worker_id": "w1", "log_level": "info"}]
