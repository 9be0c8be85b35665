"""JSON file storage for saved games.

Each save is one flat JSON file holding the whole Game snapshot. There is no
database; reads and writes go through pydantic's JSON dump and validate.

Directory layout:

    {base}/
      saves/
        {save_id}.json      ← Game snapshot (player, dungeon, turn, ...)
"""

from __future__ import annotations

import json
import logging
import re
import unicodedata
import uuid
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, ValidationError

from dungeon_crawler.errors import PersistenceFailure
from dungeon_crawler.models import Game

logger = logging.getLogger(__name__)


def slugify(title: str) -> str:
    """Convert a save name to a filesystem-safe id.

    "Before the Dragon" → "before-the-dragon"
    """
    text = unicodedata.normalize("NFKD", title)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower()
    text = re.sub(r"['\"]", "", text)  # strip apostrophes/quotes before hyphenation
    text = re.sub(r"[^a-z0-9]+", "-", text)
    text = text.strip("-")
    return text or "untitled"


class SaveInfo(BaseModel):
    """Summary of one save file, for listings."""

    save_id: str
    player_name: str
    turn: int
    saved_at: datetime


class Storage:
    def __init__(self, base_path: Path) -> None:
        self._saves = base_path / "saves"
        self._saves.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Internal path helpers
    # ------------------------------------------------------------------

    def _save_file(self, save_id: str) -> Path:
        return self._saves / f"{slugify(save_id)}.json"

    # ------------------------------------------------------------------
    # Saves
    # ------------------------------------------------------------------

    def save(self, game: Game, save_id: str | None = None) -> str:
        """Write *game* and return its save id.

        The id is the slugified *save_id*, else the game's existing id, else
        a fresh ``save-xxxxxxxx`` id. The game's ``save_id`` is only
        updated once the file is written.
        """
        sid = slugify(save_id) if save_id else game.save_id or f"save-{uuid.uuid4().hex[:8]}"
        snapshot = game.model_copy(update={"save_id": sid})
        try:
            self._save_file(sid).write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            raise PersistenceFailure(f"Failed to save game {sid!r}: {e}") from e
        game.save_id = sid
        logger.info("saved game save_id=%s turn=%d", sid, game.turn)
        return sid

    def load(self, save_id: str) -> Game | None:
        """Read a save back, or ``None`` if there is no such save."""
        path = self._save_file(save_id)
        if not path.exists():
            return None
        try:
            game = Game.model_validate_json(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise PersistenceFailure(f"Failed to read save {save_id!r}: {e}") from e
        except (UnicodeDecodeError, ValidationError) as e:
            raise PersistenceFailure(f"Invalid save file format: {save_id!r}") from e
        logger.info("loaded game save_id=%s turn=%d", game.save_id, game.turn)
        return game

    def delete(self, save_id: str) -> bool:
        path = self._save_file(save_id)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as e:
            raise PersistenceFailure(f"Failed to delete save {save_id!r}: {e}") from e
        return True

    def list_saves(self) -> list[SaveInfo]:
        """All readable saves, newest first. Unreadable files are skipped."""
        saves: list[SaveInfo] = []
        for path in self._saves.glob("*.json"):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                saves.append(SaveInfo(
                    save_id=path.stem,
                    player_name=data["player"]["name"],
                    turn=data.get("turn", 1),
                    saved_at=datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc),
                ))
            except (OSError, UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError, ValidationError):
                logger.warning("Skipping unreadable save file %s", path.name)
        saves.sort(key=lambda s: s.saved_at, reverse=True)
        return saves
