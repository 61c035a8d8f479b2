"""
Tests for the per-player view of a match.

Tests:
- Hidden zones are reduced to counts
- Draw logs are redacted for the opponent
- Offers are only shown to the player who must act
"""

from ..engine_core.local import LocalEnvironment
from ..engine_core.log import LogKind
from ..engine_core.shards import Color
from ..engine_core.zones import ZoneKind
from .conftest import put_card


def draw_logs(view: LocalEnvironment, owner: int):
    return [
        log for log in view.logs
        if log.kind == LogKind.CARD_MOVED and log.card.owner == owner and log.data["reason"] == "draw"
    ]


class TestLocalView:
    """Tests for LocalEnvironment."""

    def test_opponent_hand_is_hidden(self, env):
        """The viewer sees their own hand and only the size of the opponent's."""
        env.run_until_input()
        view = LocalEnvironment.from_env(env, viewer=1)

        me, opponent = view.player(1), view.player(0)
        assert len(me.hand) == 4
        assert opponent.hand is None
        assert opponent.hand_count == 5
        assert opponent.deck_count == 15
        assert opponent.to_dict()["hand"] is None

    def test_public_zones_are_shown(self, env):
        """Field cards and shards are visible to both players."""
        bamb = put_card(env, 0, "bamb", ZoneKind.FIELD)
        env.state.players.get(0).shards.add(Color.RED, 2)
        env.run_until_input()
        view = LocalEnvironment.from_env(env, viewer=1)

        field = view.player(0).field
        assert [card.id for card in field] == [bamb.id]
        assert field[0].name == "Bambooster"
        assert view.player(0).shards == {"Red": 2}

    def test_draws_are_redacted(self, env):
        """Opponent draws keep the card id but hide its identity."""
        env.run_until_input()
        view = LocalEnvironment.from_env(env, viewer=1)

        hidden = draw_logs(view, owner=0)
        assert hidden
        assert all(log.card.name is None and log.card.archetype_id is None for log in hidden)
        own = draw_logs(view, owner=1)
        assert all(log.card.name == "Moonlit Gecko" for log in own)

    def test_offer_only_for_viewer(self, env):
        """Only the player who must act sees the offer."""
        env.run_until_input()
        assert LocalEnvironment.from_env(env, viewer=0).available_actions is not None
        assert LocalEnvironment.from_env(env, viewer=1).available_actions is None

    def test_log_offset(self, env):
        """Logs before the offset are skipped."""
        env.run_until_input()
        total = len(env.logs)
        view = LocalEnvironment.from_env(env, viewer=0, log_offset=total - 2)
        assert len(view.logs) == 2
        assert view.turn == 1
        assert view.phase == "main"
        assert not view.ended
