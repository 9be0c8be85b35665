"""Core domain models.

Every entity in a running game is one of these types. Pydantic is used for
validation and serialisation so the whole Game snapshot can be written to
and read back from a save file without hand-written mapping code.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dungeon_crawler.errors import InvalidInput, InvalidState


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------

class Health(BaseModel):
    """Immutable hit points. Damage and healing return a new instance."""

    model_config = ConfigDict(frozen=True)

    current: int = Field(ge=0)
    max: int = Field(ge=1)

    @model_validator(mode="after")
    def check_current_within_max(self) -> Health:
        if self.current > self.max:
            raise ValueError("current health cannot exceed max health")
        return self

    @classmethod
    def full(cls, maximum: int) -> Health:
        return cls(current=maximum, max=maximum)

    def reduce(self, damage: int) -> Health:
        if damage < 0:
            raise InvalidInput("Damage cannot be negative")
        return Health(current=max(0, self.current - damage), max=self.max)

    def heal(self, amount: int) -> Health:
        if amount < 0:
            raise InvalidInput("Heal amount cannot be negative")
        return Health(current=min(self.max, self.current + amount), max=self.max)

    @property
    def is_dead(self) -> bool:
        return self.current == 0

    @property
    def is_full(self) -> bool:
        return self.current == self.max

    @property
    def percentage(self) -> float:
        return self.current / self.max * 100

    def __str__(self) -> str:
        return f"{self.current}/{self.max}"


class Direction(str, Enum):
    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    @classmethod
    def parse(cls, text: str) -> Direction:
        """Accept a full direction name or its one-letter alias."""
        token = text.strip().lower()
        for direction in cls:
            if token in (direction.value, direction.value[0]):
                return direction
        raise InvalidInput(f"Invalid direction: {text.strip()!r}")

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]


_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}

_DELTAS = {
    Direction.NORTH: (0, -1),
    Direction.SOUTH: (0, 1),
    Direction.EAST: (1, 0),
    Direction.WEST: (-1, 0),
}


class Position(BaseModel):
    """Grid coordinate of a room. North is towards y = 0."""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int

    def move(self, direction: Direction) -> Position:
        dx, dy = _DELTAS[direction]
        return Position(x=self.x + dx, y=self.y + dy)

    @property
    def key(self) -> str:
        return f"{self.x},{self.y}"


# ---------------------------------------------------------------------------
# Treasure
# ---------------------------------------------------------------------------

class TreasureType(str, Enum):
    GOLD = "gold"
    HEALTH_POTION = "health_potion"
    WEAPON = "weapon"
    ARTIFACT = "artifact"


class Treasure(BaseModel):
    """A piece of loot. Never changes once rolled."""

    model_config = ConfigDict(frozen=True)

    type: TreasureType
    name: str
    value: int = Field(ge=0)
    description: str = ""


def weapon_bonus(weapon: Treasure) -> int:
    """Attack power granted by an equipped weapon."""
    return max(2, weapon.value // 5)


# ---------------------------------------------------------------------------
# Combatants
# ---------------------------------------------------------------------------

class Monster(BaseModel):
    name: str = Field(min_length=1)
    health: Health
    attack_power: int = Field(gt=0)
    experience_reward: int = Field(default=10, ge=0)
    is_boss: bool = False

    @property
    def is_alive(self) -> bool:
        return not self.health.is_dead

    def take_damage(self, damage: int) -> None:
        self.health = self.health.reduce(damage)


class Player(BaseModel):
    """The adventurer. Mutated by combat, pickups and item use."""

    name: str = Field(default="Hero", min_length=1)
    health: Health = Field(default_factory=lambda: Health.full(100))
    attack_power: int = Field(default=20, gt=0)
    experience: int = Field(default=0, ge=0)
    inventory: list[Treasure] = Field(default_factory=list)
    position: Position = Field(default_factory=lambda: Position(x=0, y=0))
    equipped_weapon: Treasure | None = None

    @property
    def is_alive(self) -> bool:
        return not self.health.is_dead

    @property
    def treasure_value(self) -> int:
        return sum(t.value for t in self.inventory)

    def take_damage(self, damage: int) -> None:
        self.health = self.health.reduce(damage)

    def heal(self, amount: int) -> None:
        self.health = self.health.heal(amount)

    def gain_experience(self, points: int) -> None:
        if points < 0:
            raise InvalidInput("Experience points cannot be negative")
        self.experience += points

    def add_item(self, item: Treasure) -> None:
        self.inventory.append(item)

    def find_item(self, query: str) -> Treasure | None:
        """First inventory item whose name contains *query*, ignoring case."""
        needle = query.strip().lower()
        for item in self.inventory:
            if needle in item.name.lower():
                return item
        return None

    def remove_item(self, item: Treasure) -> None:
        # Identity match so that duplicate loot only loses one copy.
        for i, held in enumerate(self.inventory):
            if held is item:
                del self.inventory[i]
                return
        self.inventory.remove(item)

    def equip(self, weapon: Treasure) -> Treasure | None:
        """Equip *weapon*, returning the weapon it replaced (if any)."""
        previous = self.equipped_weapon
        if previous is not None:
            self.attack_power -= weapon_bonus(previous)
        self.attack_power += weapon_bonus(weapon)
        self.equipped_weapon = weapon
        return previous


# ---------------------------------------------------------------------------
# Dungeon
# ---------------------------------------------------------------------------

class Room(BaseModel):
    position: Position
    description: str
    monster: Monster | None = None
    treasures: list[Treasure] = Field(default_factory=list)
    exits: list[Direction] = Field(default_factory=list)
    is_exit: bool = False
    visited: bool = False

    @property
    def name(self) -> str:
        if self.is_exit:
            return "Exit Room"
        words = self.description.split()
        if not words:
            return f"Room at [{self.position.x},{self.position.y}]"
        return " ".join(words[:3]) + "..."

    @property
    def has_monster(self) -> bool:
        return self.monster is not None and self.monster.is_alive


class Dungeon(BaseModel):
    """Room graph keyed by ``Position.key``."""

    rooms: dict[str, Room]
    entrance: Position
    exit: Position
    width: int = Field(ge=1)
    height: int = Field(ge=1)
    level: int = Field(default=1, ge=0)

    def room_at(self, position: Position) -> Room | None:
        return self.rooms.get(position.key)


class Game(BaseModel):
    """Complete snapshot of a session. Saved and loaded wholesale."""

    version: int = 1
    player: Player
    dungeon: Dungeon
    turn: int = Field(default=1, ge=1)
    save_id: str | None = None
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def current_room(self) -> Room:
        room = self.dungeon.room_at(self.player.position)
        if room is None:
            raise InvalidState(f"No room at {self.player.position.key}")
        return room


# ---------------------------------------------------------------------------
# Renderer boundary
# ---------------------------------------------------------------------------

EventKind = Literal[
    "welcome",
    "room",
    "encounter",
    "combat",
    "loot",
    "take",
    "use",
    "inventory",
    "map",
    "help",
    "info",
    "error",
    "system",
    "victory",
    "defeat",
]


class Event(BaseModel):
    """One piece of structured output handed to the renderer."""

    kind: EventKind
    data: dict[str, Any] = Field(default_factory=dict)
