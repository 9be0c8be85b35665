"""Tests for dungeon_crawler.models."""

import pytest
from pydantic import ValidationError

from dungeon_crawler.errors import InvalidInput, InvalidState
from dungeon_crawler.models import (
    Direction,
    Dungeon,
    Game,
    Health,
    Monster,
    Player,
    Position,
    Room,
    Treasure,
    TreasureType,
    weapon_bonus,
)


def _sword(value: int = 50) -> Treasure:
    return Treasure(type=TreasureType.WEAPON, name="Steel Sword", value=value)


def _potion(value: int = 25) -> Treasure:
    return Treasure(type=TreasureType.HEALTH_POTION, name="Minor Health Potion", value=value)


class TestHealth:
    def test_full(self) -> None:
        h = Health.full(100)
        assert h.current == 100
        assert h.max == 100
        assert h.is_full

    def test_reduce_returns_new_instance(self) -> None:
        h = Health.full(30)
        reduced = h.reduce(10)
        assert reduced.current == 20
        assert h.current == 30

    def test_reduce_floors_at_zero(self) -> None:
        assert Health(current=5, max=30).reduce(50).current == 0

    def test_floor_holds_for_any_damage(self) -> None:
        for damage in range(0, 200, 7):
            h = Health(current=30, max=30).reduce(damage)
            assert h.current == max(0, 30 - damage)

    def test_heal_caps_at_max(self) -> None:
        assert Health(current=90, max=100).heal(50).current == 100

    def test_negative_damage_rejected(self) -> None:
        with pytest.raises(InvalidInput):
            Health.full(10).reduce(-1)

    def test_negative_heal_rejected(self) -> None:
        with pytest.raises(InvalidInput):
            Health.full(10).heal(-1)

    def test_current_above_max_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Health(current=11, max=10)

    def test_zero_max_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Health(current=0, max=0)

    def test_is_dead(self) -> None:
        assert Health(current=0, max=10).is_dead
        assert not Health(current=1, max=10).is_dead

    def test_percentage_and_str(self) -> None:
        h = Health(current=25, max=50)
        assert h.percentage == 50.0
        assert str(h) == "25/50"

    def test_frozen(self) -> None:
        h = Health.full(10)
        with pytest.raises(ValidationError):
            h.current = 3


class TestDirection:
    def test_parse_full_word(self) -> None:
        assert Direction.parse("north") is Direction.NORTH

    def test_parse_alias_and_case(self) -> None:
        assert Direction.parse(" E ") is Direction.EAST
        assert Direction.parse("West") is Direction.WEST

    def test_parse_invalid(self) -> None:
        with pytest.raises(InvalidInput):
            Direction.parse("up")

    def test_invalid_input_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            Direction.parse("")

    def test_opposite(self) -> None:
        assert Direction.NORTH.opposite is Direction.SOUTH
        assert Direction.EAST.opposite is Direction.WEST


class TestPosition:
    def test_move(self) -> None:
        p = Position(x=1, y=1)
        assert p.move(Direction.NORTH) == Position(x=1, y=0)
        assert p.move(Direction.SOUTH) == Position(x=1, y=2)
        assert p.move(Direction.EAST) == Position(x=2, y=1)
        assert p.move(Direction.WEST) == Position(x=0, y=1)

    def test_key(self) -> None:
        assert Position(x=2, y=0).key == "2,0"


class TestTreasure:
    def test_negative_value_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Treasure(type=TreasureType.GOLD, name="Debt", value=-1)

    def test_weapon_bonus(self) -> None:
        assert weapon_bonus(_sword(50)) == 10
        assert weapon_bonus(_sword(5)) == 2


class TestMonster:
    def test_take_damage(self) -> None:
        m = Monster(name="Goblin", health=Health.full(30), attack_power=10)
        m.take_damage(20)
        assert m.health.current == 10
        assert m.is_alive
        m.take_damage(20)
        assert not m.is_alive

    def test_attack_power_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Monster(name="Slime", health=Health.full(5), attack_power=0)

    def test_default_experience(self) -> None:
        m = Monster(name="Rat", health=Health.full(5), attack_power=1)
        assert m.experience_reward == 10
        assert not m.is_boss


class TestPlayer:
    def test_defaults(self) -> None:
        p = Player()
        assert p.name == "Hero"
        assert str(p.health) == "100/100"
        assert p.attack_power == 20
        assert p.experience == 0
        assert p.inventory == []
        assert p.position == Position(x=0, y=0)

    def test_gain_experience(self) -> None:
        p = Player()
        p.gain_experience(15)
        p.gain_experience(25)
        assert p.experience == 40

    def test_negative_experience_rejected(self) -> None:
        with pytest.raises(InvalidInput):
            Player().gain_experience(-5)

    def test_treasure_value(self) -> None:
        p = Player()
        p.add_item(_sword(50))
        p.add_item(_potion(25))
        assert p.treasure_value == 75

    def test_find_item_is_case_insensitive_substring(self) -> None:
        p = Player()
        sword = _sword()
        p.add_item(_potion())
        p.add_item(sword)
        assert p.find_item("STEEL") is sword
        assert p.find_item("axe") is None

    def test_remove_item_removes_one_copy(self) -> None:
        p = Player()
        first, second = _potion(), _potion()
        p.add_item(first)
        p.add_item(second)
        p.remove_item(second)
        assert len(p.inventory) == 1
        assert p.inventory[0] is first

    def test_equip_adds_bonus(self) -> None:
        p = Player()
        assert p.equip(_sword(50)) is None
        assert p.attack_power == 30

    def test_equip_replaces_previous_bonus(self) -> None:
        p = Player()
        dagger = Treasure(type=TreasureType.WEAPON, name="Iron Dagger", value=20)
        p.equip(dagger)
        assert p.attack_power == 24
        previous = p.equip(_sword(50))
        assert previous is dagger
        assert p.attack_power == 30


class TestRoomAndDungeon:
    def test_room_name_from_description(self) -> None:
        room = Room(position=Position(x=0, y=0), description="A dusty room filled with cobwebs.")
        assert room.name == "A dusty room..."

    def test_exit_room_name(self) -> None:
        room = Room(position=Position(x=2, y=2), description="Light!", is_exit=True)
        assert room.name == "Exit Room"

    def test_has_monster_requires_living_monster(self) -> None:
        room = Room(position=Position(x=0, y=0), description="x")
        assert not room.has_monster
        room.monster = Monster(name="Goblin", health=Health(current=0, max=30), attack_power=10)
        assert not room.has_monster

    def test_current_room_missing_raises(self) -> None:
        dungeon = Dungeon(
            rooms={"0,0": Room(position=Position(x=0, y=0), description="x")},
            entrance=Position(x=0, y=0),
            exit=Position(x=0, y=0),
            width=1,
            height=1,
        )
        game = Game(player=Player(position=Position(x=5, y=5)), dungeon=dungeon)
        with pytest.raises(InvalidState):
            game.current_room

    def test_game_json_roundtrip(self) -> None:
        dungeon = Dungeon(
            rooms={"0,0": Room(position=Position(x=0, y=0), description="x", treasures=[_potion()])},
            entrance=Position(x=0, y=0),
            exit=Position(x=0, y=0),
            width=1,
            height=1,
        )
        game = Game(player=Player(name="Ada"), dungeon=dungeon, turn=4)
        restored = Game.model_validate_json(game.model_dump_json())
        assert restored == game
