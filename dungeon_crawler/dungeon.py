"""Dungeon layout and map view.

The layout is a fixed 3x3 ring around a solid centre:

    [E]--[G]--[ ]
     |         |
    [T]       [D]
     |         |
    [ ]--[O]--[X]

E entrance (0,0), X exit (2,2), G goblin, T common treasure, O orc guarding
uncommon treasure, D boss dragon (level 3 and deeper). From level 2 the
north-east corner gets a wandering monster chosen by depth.
"""

from __future__ import annotations

import random

from dungeon_crawler.models import Direction, Dungeon, Position, Room
from dungeon_crawler.monsters import (
    create_dragon,
    create_goblin,
    create_orc,
    monster_for_difficulty,
)
from dungeon_crawler.treasure import Rarity, TreasureGenerator

N, S, E, W = Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST

ROOM_DESCRIPTIONS = (
    "A dimly lit chamber with stone walls covered in moss.",
    "A spacious hall with ancient pillars reaching to the ceiling.",
    "A narrow corridor with flickering torches on the walls.",
    "A circular room with mysterious symbols etched into the floor.",
    "A cold chamber with the sound of dripping water echoing.",
    "A dusty room filled with cobwebs and shadows.",
    "A vault with a high ceiling lost in darkness.",
    "A cramped space with rough-hewn walls.",
    "An abandoned guard post with rusted weapons on the walls.",
    "A natural cavern with stalactites hanging from above.",
    "A forgotten library with crumbling shelves and scattered pages.",
    "A ritual chamber with a broken altar at its center.",
    "A storage room with broken crates and barrels.",
    "A sleeping quarters with rotted beds and torn tapestries.",
    "A throne room, its glory long faded into decay.",
)

EXIT_DESCRIPTION = "The exit chamber! A bright light shines from the doorway ahead."

_RING_LAYOUT: dict[tuple[int, int], tuple[Direction, ...]] = {
    (0, 0): (E, S),
    (1, 0): (W, E),
    (2, 0): (W, S),
    (0, 1): (N, S),
    (2, 1): (N, S),
    (0, 2): (N, E),
    (1, 2): (W, E),
    (2, 2): (W, N),
}
_ENTRANCE = (0, 0)
_EXIT = (2, 2)

BOSS_LEVEL = 3
WANDERER_LEVEL = 2


def describe_room(x: int, y: int) -> str:
    """Stable description for the room at (x, y)."""
    return ROOM_DESCRIPTIONS[abs(x * 7 + y * 13) % len(ROOM_DESCRIPTIONS)]


def build_dungeon(
    level: int = 1,
    treasure: TreasureGenerator | None = None,
    rng: random.Random | None = None,
) -> Dungeon:
    """Build the ring dungeon populated for *level*."""
    treasure = treasure or TreasureGenerator()
    rng = rng or random.Random()

    rooms: dict[str, Room] = {}
    for (x, y), exits in _RING_LAYOUT.items():
        position = Position(x=x, y=y)
        is_exit = (x, y) == _EXIT
        rooms[position.key] = Room(
            position=position,
            description=EXIT_DESCRIPTION if is_exit else describe_room(x, y),
            exits=list(exits),
            is_exit=is_exit,
            visited=(x, y) == _ENTRANCE,
        )

    rooms["1,0"].monster = create_goblin()
    rooms["0,1"].treasures.append(treasure.create_by_rarity(Rarity.COMMON))
    rooms["1,2"].monster = create_orc()
    rooms["1,2"].treasures.append(treasure.create_by_rarity(Rarity.UNCOMMON))
    if level >= WANDERER_LEVEL:
        rooms["2,0"].monster = monster_for_difficulty(level, rng)
    if level >= BOSS_LEVEL:
        rooms["2,1"].monster = create_dragon()

    return Dungeon(
        rooms=rooms,
        entrance=Position(x=_ENTRANCE[0], y=_ENTRANCE[1]),
        exit=Position(x=_EXIT[0], y=_EXIT[1]),
        width=3,
        height=3,
        level=level,
    )


def _near_visited(dungeon: Dungeon, position: Position) -> bool:
    for direction in Direction:
        neighbour = dungeon.room_at(position.move(direction))
        if neighbour is not None and neighbour.visited:
            return True
    return False


def map_cells(dungeon: Dungeon, player_position: Position) -> list[list[str]]:
    """Grid of cell kinds for the map view, row by row from the north.

    Kinds: player, exit, monster, treasure, visited, adjacent, hidden, empty.
    Rooms stay hidden until visited or next to a visited room; monsters and
    treasure only show in rooms the player has been in.
    """
    rows: list[list[str]] = []
    for y in range(dungeon.height):
        row: list[str] = []
        for x in range(dungeon.width):
            position = Position(x=x, y=y)
            room = dungeon.room_at(position)
            if room is None:
                row.append("empty")
            elif not (room.visited or _near_visited(dungeon, position)):
                row.append("hidden")
            elif position == player_position:
                row.append("player")
            elif room.is_exit:
                row.append("exit")
            elif room.visited and room.has_monster:
                row.append("monster")
            elif room.visited and room.treasures:
                row.append("treasure")
            elif room.visited:
                row.append("visited")
            else:
                row.append("adjacent")
        rows.append(row)
    return rows
