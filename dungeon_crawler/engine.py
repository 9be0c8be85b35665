"""Game engine: dispatches player commands and tracks the session state.

States:

    EXPLORING ──move into monster room──▶ IN_COMBAT
        ▲                                    │
        └────────────attack (victory)────────┤
                                             │ attack (defeat)
    EXPLORING ──move into exit room──▶ WON   ▼
                                            LOST

WON and LOST are terminal: only ``quit`` and ``restart`` are accepted.

``execute`` raises on an invalid command and leaves the state untouched.
``handle_line`` is the loop boundary: it turns player-facing errors into an
``error`` event so the loop can keep going.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from enum import Enum

from dungeon_crawler.combat import resolve_round
from dungeon_crawler.commands import HELP_ENTRIES, Command, parse_command
from dungeon_crawler.dungeon import build_dungeon, map_cells
from dungeon_crawler.errors import InvalidCommand, InvalidInput, PersistenceFailure
from dungeon_crawler.models import (
    Direction,
    Event,
    Game,
    Player,
    Room,
    Treasure,
    TreasureType,
    weapon_bonus,
)
from dungeon_crawler.storage import Storage, slugify
from dungeon_crawler.treasure import TreasureGenerator

logger = logging.getLogger(__name__)


class GameStatus(str, Enum):
    EXPLORING = "exploring"
    IN_COMBAT = "in_combat"
    WON = "won"
    LOST = "lost"


TERMINAL = (GameStatus.WON, GameStatus.LOST)


def new_game(
    player_name: str = "Hero",
    level: int = 1,
    treasure: TreasureGenerator | None = None,
    rng: random.Random | None = None,
) -> Game:
    dungeon = build_dungeon(level, treasure, rng)
    player = Player(name=player_name, position=dungeon.entrance)
    return Game(player=player, dungeon=dungeon)


def status_for(game: Game) -> GameStatus:
    """Derive the state a freshly started or loaded game is in."""
    room = game.current_room
    if not game.player.is_alive:
        return GameStatus.LOST
    if room.has_monster:
        return GameStatus.IN_COMBAT
    if room.is_exit:
        return GameStatus.WON
    return GameStatus.EXPLORING


def _treasure_data(treasure: Treasure) -> dict:
    return treasure.model_dump(mode="json")


class GameEngine:
    """Owns the single in-memory Game and applies one command at a time.

    Args:
        game:      The game to play.
        storage:   Save/load collaborator.
        treasure:  Loot generator; its random source drives every drop.
        new_game_factory: Builds the replacement game for ``restart``.
                   Defaults to a fresh dungeon at the current level.
    """

    def __init__(
        self,
        game: Game,
        storage: Storage,
        *,
        treasure: TreasureGenerator | None = None,
        new_game_factory: Callable[[], Game] | None = None,
    ) -> None:
        self.game = game
        self.storage = storage
        self.treasure = treasure or TreasureGenerator()
        self._new_game = new_game_factory or self._default_new_game
        self.status = status_for(game)
        self.running = True
        self._handlers: dict[str, Callable[[str | None], list[Event]]] = {
            "move": self._move,
            "attack": self._attack,
            "look": self._look,
            "inventory": self._inventory,
            "take": self._take,
            "use": self._use,
            "map": self._map,
            "save": self._save,
            "load": self._load,
            "help": self._help,
            "restart": self._restart,
            "quit": self._quit,
        }

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def start(self) -> list[Event]:
        """Opening events for a new session."""
        return [
            Event(kind="welcome", data={"player": self.game.player.name, "level": self.game.dungeon.level}),
            *self._describe_current(),
        ]

    def handle_line(self, line: str) -> list[Event]:
        """Parse and execute one line, reporting recoverable errors as events."""
        try:
            return self.execute(parse_command(line))
        except (InvalidInput, InvalidCommand, PersistenceFailure) as e:
            logger.warning("command %r rejected: %s", line.strip(), e)
            return [Event(kind="error", data={"message": str(e)})]

    def execute(self, command: Command) -> list[Event]:
        if self.status in TERMINAL and command.name not in ("quit", "restart"):
            raise InvalidCommand(
                "The game is over. Type 'restart' to play again or 'quit' to leave."
            )
        return self._handlers[command.name](command.argument)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _default_new_game(self) -> Game:
        return new_game(self.game.player.name, self.game.dungeon.level, self.treasure)

    def _transition(self, status: GameStatus) -> None:
        if status != self.status:
            logger.info("state %s -> %s", self.status.value, status.value)
        self.status = status

    def _room_data(self, room: Room) -> dict:
        monster = room.monster if room.has_monster else None
        return {
            "name": room.name,
            "description": room.description,
            "is_exit": room.is_exit,
            "exits": [d.value for d in room.exits],
            "monster": None if monster is None else {
                "name": monster.name,
                "health": str(monster.health),
                "attack_power": monster.attack_power,
            },
            "treasures": [_treasure_data(t) for t in room.treasures],
        }

    def _describe_current(self) -> list[Event]:
        room = self.game.current_room
        events = [Event(kind="room", data=self._room_data(room))]
        if self.status is GameStatus.IN_COMBAT and room.monster is not None:
            events.append(Event(kind="encounter", data={
                "monster": room.monster.name,
                "health": str(room.monster.health),
                "is_boss": room.monster.is_boss,
            }))
        return events

    def _outcome_data(self) -> dict:
        player = self.game.player
        return {
            "player": player.name,
            "experience": player.experience,
            "treasure_value": player.treasure_value,
            "turns": self.game.turn,
        }

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _move(self, argument: str | None) -> list[Event]:
        if self.status is GameStatus.IN_COMBAT:
            monster = self.game.current_room.monster
            raise InvalidCommand(f"The {monster.name} blocks your path! Defeat it first.")
        if not argument:
            raise InvalidInput("Move where? Try 'north', 'south', 'east' or 'west'.")
        direction = Direction.parse(argument)

        here = self.game.current_room
        if direction not in here.exits:
            return [Event(kind="info", data={"message": f"You can't go {direction.value} from here."})]

        target = self.game.dungeon.room_at(self.game.player.position.move(direction))
        if target is None:
            return [Event(kind="info", data={"message": f"You can't go {direction.value} from here."})]

        events: list[Event] = []
        if here.treasures:
            logger.info("abandoning %d treasure(s) at %s", len(here.treasures), here.position.key)
            events.append(Event(kind="info", data={
                "message": "You leave behind: " + ", ".join(t.name for t in here.treasures),
            }))
            here.treasures.clear()

        self.game.player.position = target.position
        target.visited = True
        self.game.turn += 1
        logger.info("moved %s to %s turn=%d", direction.value, target.position.key, self.game.turn)

        if target.has_monster:
            self._transition(GameStatus.IN_COMBAT)
        elif target.is_exit:
            self._transition(GameStatus.WON)

        events.extend(self._describe_current())
        if self.status is GameStatus.WON:
            events.append(Event(kind="victory", data=self._outcome_data()))
        return events

    def _attack(self, argument: str | None) -> list[Event]:
        room = self.game.current_room
        if self.status is not GameStatus.IN_COMBAT or room.monster is None:
            raise InvalidCommand("There is nothing to attack here.")

        monster = room.monster
        result = resolve_round(self.game.player, monster)
        events = [Event(kind="combat", data=result.model_dump(mode="json"))]

        if result.outcome == "victory":
            room.monster = None
            loot = (
                self.treasure.create_boss_treasure()
                if monster.is_boss
                else self.treasure.roll_for_difficulty(self.game.dungeon.level)
            )
            if loot is not None:
                room.treasures.append(loot)
                events.append(Event(kind="loot", data={"monster": monster.name, "treasure": _treasure_data(loot)}))
            self._transition(GameStatus.EXPLORING)
        elif result.outcome == "defeat":
            self._transition(GameStatus.LOST)
            events.append(Event(kind="defeat", data={**self._outcome_data(), "monster": monster.name}))
        return events

    def _look(self, argument: str | None) -> list[Event]:
        return self._describe_current()

    def _inventory(self, argument: str | None) -> list[Event]:
        player = self.game.player
        # Mark only the first equal copy; a loaded game holds a copy, not the same object.
        marked = False
        items = []
        for t in player.inventory:
            is_equipped = not marked and t == player.equipped_weapon
            marked = marked or is_equipped
            items.append({**_treasure_data(t), "equipped": is_equipped})
        return [Event(kind="inventory", data={
            "items": items,
            "total_value": player.treasure_value,
            "health": str(player.health),
            "attack_power": player.attack_power,
            "experience": player.experience,
        })]

    def _take(self, argument: str | None) -> list[Event]:
        room = self.game.current_room
        if self.status is GameStatus.IN_COMBAT:
            raise InvalidCommand(f"The {room.monster.name} won't let you near the loot!")
        if not room.treasures:
            raise InvalidCommand("There is nothing here to take.")

        if argument and argument.lower() != "all":
            needle = argument.lower()
            taken = [t for t in room.treasures if needle in t.name.lower()][:1]
            if not taken:
                raise InvalidInput(f"There is no {argument!r} here.")
        else:
            taken = list(room.treasures)

        for item in taken:
            room.treasures.remove(item)
            self.game.player.add_item(item)
        return [Event(kind="take", data={"items": [_treasure_data(t) for t in taken]})]

    def _use(self, argument: str | None) -> list[Event]:
        if not argument:
            raise InvalidInput("Use what? Name an item from your inventory.")
        player = self.game.player
        item = player.find_item(argument)
        if item is None:
            raise InvalidInput(f"You don't have {argument!r} in your inventory.")

        if item.type is TreasureType.HEALTH_POTION:
            before = player.health.current
            player.heal(item.value)
            player.remove_item(item)
            return [Event(kind="use", data={
                "action": "drink",
                "item": item.name,
                "healed": player.health.current - before,
                "health": str(player.health),
            })]

        if item.type is TreasureType.WEAPON:
            previous = player.equip(item)
            return [Event(kind="use", data={
                "action": "equip",
                "item": item.name,
                "bonus": weapon_bonus(item),
                "replaced": previous.name if previous is not None else None,
                "attack_power": player.attack_power,
            })]

        raise InvalidCommand(f"You can't use {item.name}. It's not a usable item.")

    def _map(self, argument: str | None) -> list[Event]:
        return [Event(kind="map", data={
            "rows": map_cells(self.game.dungeon, self.game.player.position),
        })]

    def _save(self, argument: str | None) -> list[Event]:
        save_id = self.storage.save(self.game, argument)
        return [Event(kind="system", data={"message": f"Game saved as '{save_id}'."})]

    def _load(self, argument: str | None) -> list[Event]:
        if argument:
            save_id = slugify(argument)
        elif self.game.save_id:
            save_id = self.game.save_id
        else:
            saves = self.storage.list_saves()
            if not saves:
                raise PersistenceFailure("No saved games found.")
            save_id = saves[0].save_id

        game = self.storage.load(save_id)
        if game is None:
            raise PersistenceFailure(f"Save not found: {save_id}")
        self.game = game
        self._transition(status_for(game))
        return [
            Event(kind="system", data={"message": f"Loaded '{save_id}' (turn {game.turn})."}),
            *self._describe_current(),
        ]

    def _help(self, argument: str | None) -> list[Event]:
        return [Event(kind="help", data={
            "commands": [{"usage": u, "description": d} for u, d in HELP_ENTRIES],
        })]

    def _restart(self, argument: str | None) -> list[Event]:
        self.game = self._new_game()
        self._transition(status_for(self.game))
        return self.start()

    def _quit(self, argument: str | None) -> list[Event]:
        self.running = False
        logger.info("session ended turn=%d status=%s", self.game.turn, self.status.value)
        return [Event(kind="system", data={"message": "Farewell, adventurer."})]
