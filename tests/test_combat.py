"""Tests for the combat resolver."""

import pytest

from dungeon_crawler.combat import resolve_round
from dungeon_crawler.errors import InvalidState
from dungeon_crawler.models import Health, Monster, Player
from dungeon_crawler.monsters import create_goblin, create_orc


class TestResolveRound:
    def test_exchange_when_both_survive(self) -> None:
        player = Player()
        goblin = create_goblin()
        result = resolve_round(player, goblin)
        assert result.outcome == "continue"
        assert result.damage_dealt == 20
        assert result.damage_taken == 10
        assert result.monster_retaliated
        assert goblin.health.current == 10
        assert player.health.current == 90

    def test_goblin_falls_in_two_rounds_without_final_retaliation(self) -> None:
        player = Player()
        goblin = create_goblin()
        resolve_round(player, goblin)
        result = resolve_round(player, goblin)
        assert result.outcome == "victory"
        assert not result.monster_retaliated
        assert result.damage_taken == 0
        assert player.health.current == 90
        assert player.experience == 15

    def test_weak_player_needs_three_rounds(self) -> None:
        player = Player(attack_power=10)
        goblin = create_goblin()
        outcomes = [resolve_round(player, goblin).outcome for _ in range(3)]
        assert outcomes == ["continue", "continue", "victory"]
        # two retaliations, none on the killing blow
        assert player.health.current == 80
        assert player.experience == 15

    def test_one_shot_kill_leaves_player_untouched(self) -> None:
        player = Player(attack_power=50)
        goblin = create_goblin()
        result = resolve_round(player, goblin)
        assert result.outcome == "victory"
        assert goblin.health.current == 0
        assert player.health.current == 100
        assert result.experience_gained == 15

    def test_defeat(self) -> None:
        player = Player(health=Health(current=10, max=100))
        orc = create_orc()
        result = resolve_round(player, orc)
        assert result.outcome == "defeat"
        assert player.health.current == 0
        assert not player.is_alive
        assert player.experience == 0

    def test_dead_monster_rejected(self) -> None:
        dead = Monster(name="Goblin", health=Health(current=0, max=30), attack_power=10)
        with pytest.raises(InvalidState):
            resolve_round(Player(), dead)

    def test_dead_player_rejected(self) -> None:
        player = Player(health=Health(current=0, max=100))
        with pytest.raises(InvalidState):
            resolve_round(player, create_goblin())

    def test_deterministic(self) -> None:
        a = resolve_round(Player(), create_orc())
        b = resolve_round(Player(), create_orc())
        assert a == b
