"""Terminal front end: the blocking read / dispatch / render loop."""

from __future__ import annotations

import argparse
import logging
import random
from collections.abc import Callable
from pathlib import Path

from pydantic import ValidationError

from dungeon_crawler.config import Settings, configure_logging, load_settings
from dungeon_crawler.engine import TERMINAL, GameEngine, new_game
from dungeon_crawler.render import render_events, render_status
from dungeon_crawler.storage import Storage
from dungeon_crawler.treasure import TreasureGenerator

logger = logging.getLogger(__name__)

PROMPT = "> "


def run(
    engine: GameEngine,
    *,
    read: Callable[[str], str] | None = None,
    write: Callable[[str], None] | None = None,
    color: bool = True,
) -> None:
    """Play until the engine stops running. End of input counts as ``quit``."""
    read = read or input
    write = write or print
    write(render_events(engine.start(), color))
    while engine.running:
        if engine.status not in TERMINAL:
            write(render_status(engine.game))
        try:
            line = read(PROMPT)
        except EOFError:
            line = "quit"
        write(render_events(engine.handle_line(line), color))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Dungeon Crawler: a text adventure")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Directory for saved games (default: ./data)")
    parser.add_argument("--level", type=int, default=None,
                        help="Dungeon level, 0 or deeper (default: 1)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for a reproducible dungeon")
    parser.add_argument("--name", default=None, help="Your adventurer's name")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colours")
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
        overrides = {
            "data_dir": args.data_dir,
            "dungeon_level": args.level,
            "seed": args.seed,
            "player_name": args.name,
        }
        settings = Settings.model_validate({
            **settings.model_dump(),
            **{k: v for k, v in overrides.items() if v is not None},
            **({"color": False} if args.no_color else {}),
        })
    except ValidationError as e:
        parser.error(str(e))

    configure_logging(settings)
    logger.info("starting level=%d seed=%s data_dir=%s",
                settings.dungeon_level, settings.seed, settings.data_dir)

    rng = random.Random(settings.seed)
    treasure = TreasureGenerator(rng)
    storage = Storage(settings.data_dir)

    def fresh_game():
        return new_game(settings.player_name, settings.dungeon_level, treasure, rng)

    engine = GameEngine(fresh_game(), storage, treasure=treasure, new_game_factory=fresh_game)
    try:
        run(engine, color=settings.color)
    except KeyboardInterrupt:
        print("\nFarewell, adventurer.")
    return 0
