"""Text command parsing.

The first word of a line is the command (case-insensitive); the rest of the
line is its argument. Bare direction words are shorthand for ``move``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from dungeon_crawler.errors import InvalidCommand
from dungeon_crawler.models import Direction

CommandName = Literal[
    "move",
    "attack",
    "look",
    "inventory",
    "take",
    "use",
    "map",
    "save",
    "load",
    "help",
    "restart",
    "quit",
]


class Command(BaseModel):
    name: CommandName
    argument: str | None = None


_ALIASES: dict[str, CommandName] = {
    "move": "move", "go": "move",
    "attack": "attack", "a": "attack",
    "look": "look", "l": "look",
    "inventory": "inventory", "i": "inventory",
    "take": "take", "t": "take",
    "use": "use", "u": "use",
    "map": "map", "m": "map",
    "save": "save",
    "load": "load",
    "help": "help", "h": "help",
    "restart": "restart", "r": "restart",
    "quit": "quit", "q": "quit",
}

# (usage, description) in the order the help screen lists them.
HELP_ENTRIES: tuple[tuple[str, str], ...] = (
    ("north, n", "Move north"),
    ("south, s", "Move south"),
    ("east, e", "Move east"),
    ("west, w", "Move west"),
    ("move <dir>", "Move in a direction"),
    ("attack, a", "Attack the monster in this room"),
    ("look, l", "Describe the room again"),
    ("take [item]", "Pick up treasure lying here"),
    ("use <item>", "Drink a potion or equip a weapon"),
    ("inventory, i", "List what you carry"),
    ("map, m", "Show the dungeon map"),
    ("save [name]", "Save the game"),
    ("load [name]", "Load a saved game"),
    ("restart, r", "Start a new game"),
    ("help, h", "Show this help"),
    ("quit, q", "Leave the game"),
)


def parse_command(line: str) -> Command:
    """Turn one line of player input into a Command.

    Raises InvalidCommand for empty input or an unknown command word.
    Direction arguments are validated later, when the move is executed.
    """
    parts = line.strip().split(maxsplit=1)
    if not parts:
        raise InvalidCommand("Please enter a command. Type 'help' for a list.")

    token = parts[0].lower()
    argument = parts[1].strip() if len(parts) > 1 else None

    for direction in Direction:
        if token in (direction.value, direction.value[0]):
            return Command(name="move", argument=direction.value)

    name = _ALIASES.get(token)
    if name is None:
        raise InvalidCommand(f"Unknown command: {parts[0]!r}. Type 'help' for a list.")
    return Command(name=name, argument=argument)
