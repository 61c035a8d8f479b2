"""
Tests for the built-in cards.

Tests:
- Prompting effects offer a choice and act on the selection
- Destroy triggers (Pyrosnail, Voracious Anteater)
- Cast triggers (Binary Starfish, Scrapyard Raven, Deep-Sea Wyrm, Vigilant Lynx)
- Battle triggers (Diamond Porcupine, Volcanic Wyrm, Toxic)
"""

import pytest

from ..engine_core.action import Action, ActionType
from ..engine_core.commands import DestroyCard
from ..engine_core.config import DebugFlags
from ..engine_core.environment import Environment
from ..engine_core.log import LogKind
from ..engine_core.shards import Color
from ..engine_core.zones import ZoneKind
from .conftest import make_profile, put_card


@pytest.fixture
def debug_env(catalog) -> Environment:
    """Match with debug commands enabled."""
    return Environment(make_profile(debug=DebugFlags.DEBUG_COMMAND), catalog)


def cast(env: Environment, player: int, card) -> None:
    report = env.process(player, Action.cast_card(card.timed_id))
    assert report.ok, report.error
    env.run_until_input()


def field_ids(env: Environment, player: int) -> list[str]:
    return [card.archetype.id for card in env.state.players.get(player).field]


def attack_unblocked(env: Environment, attacker) -> None:
    env.process(0, Action.attack([attacker.timed_id]))
    env.process(1, Action.block([]))
    env.run_until_input()


class TestPrompts:
    """Tests for effects that ask their controller to choose a card."""

    def test_eagle_ray_returns_selected_card(self, free_env):
        """Airborne Eagle Ray bounces the chosen card to its owner's hand."""
        ray = put_card(free_env, 0, "airb")
        bamb = put_card(free_env, 1, "bamb", ZoneKind.FIELD)
        free_env.run_until_input()
        cast(free_env, 0, ray)

        offer = free_env.available_actions()
        assert offer.player == 0
        select = offer.get(ActionType.SELECT_CARD)
        assert bamb.timed_id in select.cards

        report = free_env.process(0, Action.select_card(bamb.timed_id))
        assert report.ok
        assert any(log.kind == LogKind.CARD_TARGETED for log in report.logs)
        assert free_env.state.find_card(bamb.id).zone.kind == ZoneKind.HAND
        assert free_env.state.find_card(bamb.id).zone.player == 1

    def test_prompt_rejects_other_actions(self, free_env):
        """While a choice is pending only the selection is accepted."""
        ray = put_card(free_env, 0, "airb")
        put_card(free_env, 1, "bamb", ZoneKind.FIELD)
        free_env.run_until_input()
        cast(free_env, 0, ray)

        report = free_env.process(0, Action.end_turn())
        assert not report.ok
        assert free_env.available_actions().get(ActionType.SELECT_CARD) is not None

    def test_mire_alligator_devours_own_card(self, free_env):
        """Mire Alligator destroys a chosen own card without leaving a shard."""
        gecko = put_card(free_env, 0, "moon", ZoneKind.FIELD)
        mire = put_card(free_env, 0, "mire")
        free_env.run_until_input()
        cast(free_env, 0, mire)

        select = free_env.available_actions().get(ActionType.SELECT_CARD)
        assert gecko.timed_id in select.cards
        free_env.process(0, Action.select_card(gecko.timed_id))

        assert free_env.state.find_card(gecko.id).zone.kind == ZoneKind.GRAVEYARD
        assert free_env.state.players.get(0).shards.is_empty


class TestDestroyTriggers:
    """Tests for effects that fire when their card is destroyed."""

    def test_pyrosnail_burns_opponent(self, debug_env):
        """A destroyed Pyrosnail deals 100 to its controller's opponent."""
        bamb = put_card(debug_env, 0, "bamb", ZoneKind.FIELD)
        pyro = put_card(debug_env, 1, "pyro", ZoneKind.FIELD)
        debug_env.run_until_input()

        debug_env.process(0, Action.debug_command([DestroyCard(bamb.id, pyro.timed_id)]))
        debug_env.run_until_input()

        assert debug_env.state.players.get(0).life == 1900
        assert debug_env.state.players.get(1).shards.is_empty

    def test_anteater_leaves_token(self, debug_env):
        """A destroyed Voracious Anteater leaves an Ant token behind."""
        bamb = put_card(debug_env, 0, "bamb", ZoneKind.FIELD)
        vora = put_card(debug_env, 1, "vora", ZoneKind.FIELD)
        debug_env.run_until_input()

        debug_env.process(0, Action.debug_command([DestroyCard(bamb.id, vora.timed_id)]))
        debug_env.run_until_input()

        field = list(debug_env.state.players.get(1).field)
        assert [card.archetype.id for card in field] == ["ant"]
        assert field[0].is_token
        assert debug_env.state.players.get(1).shards.get(Color.COLORLESS) == 1


class TestCastTriggers:
    """Tests for effects that fire on cast."""

    def test_binary_starfish_copies_itself(self, free_env):
        """Casting Binary Starfish from hand adds one non-token copy."""
        starfish = put_card(free_env, 0, "bina")
        free_env.run_until_input()
        cast(free_env, 0, starfish)

        copies = [card for card in free_env.state.players.get(0).field if card.archetype.id == "bina"]
        assert len(copies) == 2
        assert not any(card.is_token for card in copies)

    def test_scrapyard_raven_without_shards(self, free_env):
        """Scrapyard Raven grants a green shard to a player with none."""
        raven = put_card(free_env, 0, "scra")
        free_env.run_until_input()
        cast(free_env, 0, raven)
        assert free_env.state.players.get(0).shards.get(Color.GREEN) == 1

    def test_scrapyard_raven_with_shards(self, free_env):
        """Scrapyard Raven does nothing when the player holds shards."""
        raven = put_card(free_env, 0, "scra")
        free_env.state.players.get(0).shards.add(Color.RED, 1)
        free_env.run_until_input()
        cast(free_env, 0, raven)
        assert free_env.state.players.get(0).shards.get(Color.GREEN) == 0

    def test_deep_sea_wyrm_clears_weaker_cards(self, free_env):
        """Deep-Sea Wyrm shuffles every weaker card into its owner's deck."""
        put_card(free_env, 0, "moon", ZoneKind.FIELD)
        put_card(free_env, 1, "bamb", ZoneKind.FIELD)
        wyrm = put_card(free_env, 0, "deep")
        free_env.run_until_input()
        deck_before = len(free_env.state.players.get(1).deck)
        cast(free_env, 0, wyrm)

        assert field_ids(free_env, 0) == ["deep"]
        assert field_ids(free_env, 1) == []
        assert len(free_env.state.players.get(1).deck) == deck_before + 1

    def test_vigilant_lynx_reacts_to_opponent(self, env):
        """Vigilant Lynx gains 100 power for the turn when the opponent casts."""
        lynx = put_card(env, 1, "vigi", ZoneKind.FIELD)
        env.run_until_input()
        gecko = next(iter(env.state.players.get(0).hand))
        cast(env, 0, gecko)

        assert env.state.find_card(lynx.id).computed.current_power == 200

        env.process(0, Action.end_turn())
        env.run_until_input()
        assert env.state.find_card(lynx.id).computed.current_power == 100


class TestBattleTriggers:
    """Tests for effects and keywords that act during battle."""

    def test_diamond_porcupine_earns_shard(self, env):
        """Battle damage to a player grants Diamond Porcupine's controller a red shard."""
        porcupine = put_card(env, 0, "diam", ZoneKind.FIELD)
        env.run_until_input()
        attack_unblocked(env, porcupine)

        assert env.state.players.get(1).life == 1900
        assert env.state.players.get(0).shards.get(Color.RED) == 1

    def test_volcanic_wyrm_attack(self, env):
        """Volcanic Wyrm adds 200 damage to its 500 power attack."""
        wyrm = put_card(env, 0, "volc", ZoneKind.FIELD)
        env.run_until_input()
        attack_unblocked(env, wyrm)

        assert env.state.players.get(1).life == 1300
        assert env.state.players.get(0).life == 2000

    def test_toxic_destroys_blocker(self, env):
        """A Toxic attacker destroys its blocker regardless of power."""
        scorpion = put_card(env, 0, "copp", ZoneKind.FIELD)
        lynx = put_card(env, 1, "vigi", ZoneKind.FIELD)
        env.run_until_input()
        env.process(0, Action.attack([scorpion.timed_id]))
        env.process(1, Action.block([(scorpion.timed_id, lynx.timed_id)]))
        env.run_until_input()

        assert env.state.find_card(scorpion.id).zone.kind == ZoneKind.GRAVEYARD
        assert env.state.find_card(lynx.id).zone.kind == ZoneKind.GRAVEYARD
