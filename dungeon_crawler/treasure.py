"""Treasure rarity tables and the loot generator.

Loot is rolled in two steps:

  1. Drop chance:  treasure_chance(level) = min(60 + 5*level, 80). A d100 roll
     above the chance means no loot this encounter.
  2. Rarity:       d100 + 2*level, classified by fixed thresholds
                   (<=40 common, <=70 uncommon, <=90 rare, <=105 epic, else
                   legendary). Deeper levels shift the roll upward, so rarer
                   tiers become more likely while the d100 floor of 1 keeps
                   the lower tiers reachable at modest depths.

A template is then picked uniformly from the tier's pool and given a random
flavour line from its type's description pool.

The random source is injected so tests can supply a seeded ``random.Random``
or a scripted stand-in.
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import NamedTuple

from dungeon_crawler.errors import InvalidInput
from dungeon_crawler.models import Treasure, TreasureType

logger = logging.getLogger(__name__)


class Rarity(str, Enum):
    """Loot quality bands, weakest first."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"

    @classmethod
    def parse(cls, name: str | Rarity) -> Rarity:
        if isinstance(name, Rarity):
            return name
        if not isinstance(name, str):
            raise InvalidInput(f"Unknown rarity: {name!r}")
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise InvalidInput(f"Unknown rarity: {name}") from None


class TreasureTemplate(NamedTuple):
    type: TreasureType
    name: str
    value: int


_G = TreasureType.GOLD
_P = TreasureType.HEALTH_POTION
_W = TreasureType.WEAPON
_A = TreasureType.ARTIFACT

TREASURE_DEFINITIONS: dict[Rarity, tuple[TreasureTemplate, ...]] = {
    Rarity.COMMON: (
        TreasureTemplate(_G, "Copper Coins", 5),
        TreasureTemplate(_G, "Small Gold Pile", 10),
        TreasureTemplate(_G, "Silver Coins", 15),
        TreasureTemplate(_P, "Weak Health Potion", 15),
        TreasureTemplate(_P, "Minor Health Potion", 25),
    ),
    Rarity.UNCOMMON: (
        TreasureTemplate(_G, "Gold Purse", 30),
        TreasureTemplate(_G, "Large Gold Pile", 50),
        TreasureTemplate(_P, "Health Potion", 50),
        TreasureTemplate(_W, "Iron Dagger", 20),
        TreasureTemplate(_W, "Rusty Sword", 25),
    ),
    Rarity.RARE: (
        TreasureTemplate(_G, "Treasure Chest", 75),
        TreasureTemplate(_P, "Greater Health Potion", 75),
        TreasureTemplate(_W, "Steel Sword", 50),
        TreasureTemplate(_W, "Battle Axe", 60),
    ),
    Rarity.EPIC: (
        TreasureTemplate(_G, "Royal Treasury", 100),
        TreasureTemplate(_W, "Enchanted Blade", 75),
        TreasureTemplate(_W, "Mithril Sword", 85),
        TreasureTemplate(_A, "Crystal Orb", 90),
    ),
    Rarity.LEGENDARY: (
        TreasureTemplate(_A, "Ancient Relic", 100),
        TreasureTemplate(_A, "Dragon Scale", 150),
        TreasureTemplate(_A, "Crown of Kings", 200),
        TreasureTemplate(_W, "Excalibur", 175),
    ),
}

DESCRIPTIONS: dict[TreasureType, tuple[str, ...]] = {
    TreasureType.GOLD: (
        "Gleaming in the torchlight.",
        "Scattered across the cold stone floor.",
        "Hidden in a dusty corner.",
        "Piled neatly in an ancient container.",
    ),
    TreasureType.HEALTH_POTION: (
        "The liquid inside glows with healing energy.",
        "A faint warmth emanates from the bottle.",
        "Carefully preserved in a padded container.",
        "The cork is sealed with wax bearing a healer's mark.",
    ),
    TreasureType.WEAPON: (
        "Despite its age, the edge remains sharp.",
        "Intricate runes are carved along the blade.",
        "The weapon feels perfectly balanced in your hands.",
        "It hums with barely contained power.",
    ),
    TreasureType.ARTIFACT: (
        "Ancient power thrums within this mysterious object.",
        "The artifact seems to bend light around itself.",
        "Touching it sends shivers down your spine.",
        "Lost for centuries, spoken of only in legends.",
    ),
}

BOSS_SUFFIX = " (Boss Reward)"
BOSS_FLAVOUR = " This treasure radiates power from defeating a mighty foe."

# (upper bound inclusive, tier); anything above the last bound is legendary.
_RARITY_THRESHOLDS: tuple[tuple[int, Rarity], ...] = (
    (40, Rarity.COMMON),
    (70, Rarity.UNCOMMON),
    (90, Rarity.RARE),
    (105, Rarity.EPIC),
)


def _check_level(dungeon_level: int) -> None:
    if dungeon_level < 0:
        raise InvalidInput(f"Dungeon level cannot be negative: {dungeon_level}")


def treasure_chance(dungeon_level: int) -> int:
    """Percent chance that an encounter at *dungeon_level* drops loot."""
    _check_level(dungeon_level)
    return min(60 + 5 * dungeon_level, 80)


def rarity_for_roll(roll: int) -> Rarity:
    """Classify an already level-adjusted rarity roll."""
    for upper, rarity in _RARITY_THRESHOLDS:
        if roll <= upper:
            return rarity
    return Rarity.LEGENDARY


class TreasureGenerator:
    """Rolls loot from the static rarity tables.

    Args:
        rng: Random source exposing ``randint`` and ``choice``. Defaults to
             a fresh ``random.Random()``.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    def roll_for_difficulty(self, dungeon_level: int) -> Treasure | None:
        """Roll for loot at *dungeon_level*; ``None`` means nothing dropped."""
        chance = treasure_chance(dungeon_level)
        roll = self._rng.randint(1, 100)
        logger.debug("loot drop roll=%d chance=%d level=%d", roll, chance, dungeon_level)
        if roll > chance:
            return None
        return self.create_by_rarity(self.determine_rarity(dungeon_level))

    def determine_rarity(self, dungeon_level: int) -> Rarity:
        _check_level(dungeon_level)
        roll = self._rng.randint(1, 100) + 2 * dungeon_level
        rarity = rarity_for_roll(roll)
        logger.debug("rarity roll=%d level=%d -> %s", roll, dungeon_level, rarity.value)
        return rarity

    def create_by_rarity(self, rarity: str | Rarity) -> Treasure:
        tier = Rarity.parse(rarity)
        return self._instantiate(self._rng.choice(TREASURE_DEFINITIONS[tier]))

    def create_boss_treasure(self) -> Treasure:
        """Epic or legendary loot worth half again its usual value."""
        pool = TREASURE_DEFINITIONS[Rarity.EPIC] + TREASURE_DEFINITIONS[Rarity.LEGENDARY]
        template = self._rng.choice(pool)
        return Treasure(
            type=template.type,
            name=template.name + BOSS_SUFFIX,
            value=template.value * 3 // 2,
            description=self._describe(template) + BOSS_FLAVOUR,
        )

    def create_random(self) -> Treasure:
        pool = tuple(t for tier in Rarity for t in TREASURE_DEFINITIONS[tier])
        return self._instantiate(self._rng.choice(pool))

    def _instantiate(self, template: TreasureTemplate) -> Treasure:
        return Treasure(
            type=template.type,
            name=template.name,
            value=template.value,
            description=self._describe(template),
        )

    def _describe(self, template: TreasureTemplate) -> str:
        return f"{template.name} {self._rng.choice(DESCRIPTIONS[template.type])}"
