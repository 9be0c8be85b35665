"""Tests for environment-driven settings."""

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from dungeon_crawler.config import Settings, configure_logging, load_settings

VARS = ("DUNGEON_DATA_DIR", "DUNGEON_LEVEL", "DUNGEON_PLAYER_NAME", "DUNGEON_SEED",
        "DUNGEON_LOG_LEVEL", "DUNGEON_LOG_FILE", "NO_COLOR")


@pytest.fixture(autouse=True)
def clean_env():
    """Drop game variables; anything load_dotenv adds is undone afterwards."""
    with patch.dict(os.environ):
        for var in VARS:
            os.environ.pop(var, None)
        yield


def test_defaults(tmp_path):
    settings = load_settings(tmp_path / "missing.env")
    assert settings == Settings()
    assert settings.data_dir == Path("data")
    assert settings.dungeon_level == 1
    assert settings.seed is None
    assert settings.color is True


def test_reads_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("DUNGEON_LEVEL", "3")
    monkeypatch.setenv("DUNGEON_SEED", "42")
    monkeypatch.setenv("DUNGEON_PLAYER_NAME", "Ada")
    monkeypatch.setenv("NO_COLOR", "1")
    settings = load_settings(tmp_path / "missing.env")
    assert settings.dungeon_level == 3
    assert settings.seed == 42
    assert settings.player_name == "Ada"
    assert settings.color is False


def test_reads_dotenv_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("DUNGEON_DATA_DIR=saves-here\nDUNGEON_LOG_LEVEL=DEBUG\n")
    settings = load_settings(env_file)
    assert settings.data_dir == Path("saves-here")
    assert settings.log_level == "DEBUG"


def test_environment_wins_over_dotenv(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("DUNGEON_LEVEL=5\n")
    monkeypatch.setenv("DUNGEON_LEVEL", "2")
    assert load_settings(env_file).dungeon_level == 2


def test_negative_level_rejected(monkeypatch, tmp_path):
    monkeypatch.setenv("DUNGEON_LEVEL", "-1")
    with pytest.raises(ValidationError):
        load_settings(tmp_path / "missing.env")


def test_configure_logging_to_file(tmp_path):
    log_file = tmp_path / "logs" / "game.log"
    root = logging.getLogger()
    saved, saved_level = root.handlers[:], root.level
    root.handlers.clear()
    try:
        configure_logging(Settings(log_level="info", log_file=log_file))
        logging.getLogger("dungeon_crawler.test").info("hello log")
        for handler in root.handlers:
            handler.flush()
        assert "hello log" in log_file.read_text()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved
        root.setLevel(saved_level)
