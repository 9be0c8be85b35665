"""Runtime settings read from the environment (and an optional .env file)."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

ROOT = Path(__file__).parent.parent
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings(BaseModel):
    data_dir: Path = Path("data")
    dungeon_level: int = Field(default=1, ge=0)
    player_name: str = Field(default="Hero", min_length=1)
    seed: int | None = None
    log_level: str = "WARNING"
    log_file: Path | None = None
    color: bool = True


def load_settings(env_file: Path | None = None) -> Settings:
    """Build Settings from DUNGEON_* environment variables.

    A ``.env`` file (default: the one next to main.py) is loaded first but
    never overrides variables already set in the environment.
    """
    load_dotenv(env_file or ROOT / ".env")
    values: dict = {"color": not os.getenv("NO_COLOR")}
    for field, var in (
        ("data_dir", "DUNGEON_DATA_DIR"),
        ("dungeon_level", "DUNGEON_LEVEL"),
        ("player_name", "DUNGEON_PLAYER_NAME"),
        ("seed", "DUNGEON_SEED"),
        ("log_level", "DUNGEON_LOG_LEVEL"),
        ("log_file", "DUNGEON_LOG_FILE"),
    ):
        value = os.getenv(var)
        if value:
            values[field] = value
    return Settings(**values)


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level.upper(), logging.WARNING)
    if settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(level=level, format=LOG_FORMAT, filename=settings.log_file)
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)
