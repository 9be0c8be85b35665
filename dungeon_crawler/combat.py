"""Combat resolver: one full exchange per player attack.

Round order:
  1. The player strikes for their attack power.
  2. If the monster drops to 0 it is defeated at once and never strikes back;
     the player gains its experience reward.
  3. Otherwise the monster strikes back for its attack power.
  4. If the player drops to 0 the round ends in defeat, else combat continues
     and the caller resolves another round on the next attack command.

Damage is deterministic: no randomness is consumed here, so the same inputs
always give the same round.
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel

from dungeon_crawler.errors import InvalidState
from dungeon_crawler.models import Health, Monster, Player

logger = logging.getLogger(__name__)

RoundOutcome = Literal["continue", "victory", "defeat"]


class CombatRound(BaseModel):
    """What happened in one exchange, for the caller and the renderer."""

    outcome: RoundOutcome
    monster_name: str
    damage_dealt: int
    damage_taken: int = 0
    monster_retaliated: bool = False
    experience_gained: int = 0
    player_health: Health
    monster_health: Health


def resolve_round(player: Player, monster: Monster) -> CombatRound:
    """Resolve one round, mutating both combatants' health in place."""
    if not player.is_alive:
        raise InvalidState("A defeated player cannot fight")
    if not monster.is_alive:
        raise InvalidState(f"The {monster.name} is already defeated")

    dealt = player.attack_power
    monster.take_damage(dealt)
    logger.debug("player hits %s for %d (%s)", monster.name, dealt, monster.health)

    if not monster.is_alive:
        player.gain_experience(monster.experience_reward)
        return CombatRound(
            outcome="victory",
            monster_name=monster.name,
            damage_dealt=dealt,
            experience_gained=monster.experience_reward,
            player_health=player.health,
            monster_health=monster.health,
        )

    taken = monster.attack_power
    player.take_damage(taken)
    logger.debug("%s hits player for %d (%s)", monster.name, taken, player.health)

    return CombatRound(
        outcome="continue" if player.is_alive else "defeat",
        monster_name=monster.name,
        damage_dealt=dealt,
        damage_taken=taken,
        monster_retaliated=True,
        player_health=player.health,
        monster_health=monster.health,
    )
