"""Monster stat presets.

All balance numbers for monsters live here so a tuning change is one edit.
"""

from __future__ import annotations

import random
from typing import NamedTuple

from dungeon_crawler.errors import InvalidInput
from dungeon_crawler.models import Health, Monster


class MonsterPreset(NamedTuple):
    name: str
    health: int
    attack_power: int
    experience_reward: int
    is_boss: bool = False


MONSTER_PRESETS: dict[str, MonsterPreset] = {
    "goblin": MonsterPreset("Goblin", 30, 10, 15),
    "orc": MonsterPreset("Orc", 50, 15, 25),
    "dragon": MonsterPreset("Dragon", 100, 30, 100, is_boss=True),
}


def create_monster(species: str) -> Monster:
    preset = MONSTER_PRESETS.get(species.strip().lower())
    if preset is None:
        raise InvalidInput(f"Unknown monster: {species}")
    return Monster(
        name=preset.name,
        health=Health.full(preset.health),
        attack_power=preset.attack_power,
        experience_reward=preset.experience_reward,
        is_boss=preset.is_boss,
    )


def create_goblin() -> Monster:
    return create_monster("goblin")


def create_orc() -> Monster:
    return create_monster("orc")


def create_dragon() -> Monster:
    return create_monster("dragon")


def monster_for_difficulty(dungeon_level: int, rng: random.Random) -> Monster:
    """Pick a species for a room at *dungeon_level*.

    Shallow levels are mostly goblins, middle levels mostly orcs, and from
    level 5 a dragon can appear.
    """
    roll = rng.randint(1, 100)
    if dungeon_level <= 2:
        return create_goblin() if roll <= 70 else create_orc()
    if dungeon_level <= 4:
        return create_goblin() if roll <= 40 else create_orc()
    if roll <= 10:
        return create_dragon()
    if roll <= 50:
        return create_goblin()
    return create_orc()
