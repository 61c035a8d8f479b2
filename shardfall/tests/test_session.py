"""
Tests for sessions and the game loop.

Tests:
- Session creation, lookup and ending
- Bounded action queue raises SessionBusyError when full
- Draining queued client actions
- Bot seats are played automatically
"""

import pytest

from ..bots import FirstLegalPolicy, SimpleBot
from ..engine_core.action import Action, ActionType
from ..session import GameLoop, LoopState, SessionBusyError, SessionManager, SessionState
from .conftest import make_profile


@pytest.fixture
def manager(catalog) -> SessionManager:
    return SessionManager(catalog, queue_size=2, submit_timeout=0.01)


class TestSessionManager:
    """Tests for SessionManager."""

    def test_create_and_get(self, manager):
        """Created sessions can be looked up by id."""
        session = manager.create_session(make_profile())
        assert manager.get_session(session.session_id) is session
        assert session.is_active()
        assert sorted(session.human_players()) == [0, 1]
        assert session.session_id in manager.list_active_sessions()

    def test_bot_seats(self, manager):
        """Bots are registered per seat."""
        session = manager.create_session(make_profile(), bots={1: SimpleBot()})
        assert session.is_bot_seat(1)
        assert not session.is_bot_seat(0)
        assert session.human_players() == [0]

    def test_full_queue_is_busy(self, manager):
        """Submitting to a full queue raises instead of dropping input."""
        session = manager.create_session(make_profile())
        manager.submit(session.session_id, 0, Action.end_turn())
        manager.submit(session.session_id, 0, Action.end_turn())
        with pytest.raises(SessionBusyError) as excinfo:
            manager.submit(session.session_id, 0, Action.end_turn())
        assert excinfo.value.error_code == "SESSION_BUSY"
        assert session.inbox.qsize() == 2

    def test_unknown_session(self, manager):
        """Submitting to an unknown session raises KeyError."""
        with pytest.raises(KeyError):
            manager.submit("missing", 0, Action.end_turn())

    def test_end_session(self, manager):
        """Ended sessions are dropped and their queue discarded."""
        session = manager.create_session(make_profile())
        manager.submit(session.session_id, 0, Action.end_turn())
        manager.end_session(session.session_id)
        assert manager.get_session(session.session_id) is None
        assert session.state == SessionState.ABANDONED
        assert session.inbox.empty()

    def test_cleanup_keeps_active_sessions(self, manager):
        """Only finished sessions past the age limit are removed."""
        active = manager.create_session(make_profile())
        finished = manager.create_session(make_profile())
        finished.state = SessionState.GAME_OVER
        manager.cleanup_stale_sessions(max_age_seconds=-1)
        assert manager.get_session(active.session_id) is active
        assert manager.get_session(finished.session_id) is None


class TestGameLoop:
    """Tests for GameLoop."""

    def test_advance_waits_for_client(self, manager):
        """The loop stops at the first client decision."""
        session = manager.create_session(make_profile())
        result = GameLoop(session).advance()
        assert result.loop_state == LoopState.WAITING_INPUT
        assert result.available_actions.player == 0
        assert result.logs

    def test_drain_applies_queued_actions(self, manager):
        """Queued actions are applied in order and rejections reported."""
        session = manager.create_session(make_profile())
        loop = GameLoop(session)
        loop.advance()

        manager.submit(session.session_id, 1, Action.end_turn())
        manager.submit(session.session_id, 0, Action.end_turn())
        result = loop.drain()

        assert not result.success
        assert result.errors[0]["error_code"] == "ILLEGAL_ACTION"
        assert session.env.state.players.player_in_turn_id == 1
        assert result.available_actions.player == 1
        assert session.inbox.empty()

    def test_bot_answers_its_offers(self, manager):
        """Offers to a bot seat are answered before returning."""
        session = manager.create_session(make_profile(), bots={1: FirstLegalPolicy()})
        loop = GameLoop(session)
        loop.advance()

        manager.submit(session.session_id, 0, Action.end_turn())
        result = loop.drain()

        assert result.success
        assert result.bot_actions
        assert result.available_actions.player == 0
        assert session.env.state.turn == 3

    def test_bots_play_to_the_end(self, manager, starter_profile):
        """A match between two bots finishes inside one advance."""
        session = manager.create_session(
            starter_profile,
            bots={0: SimpleBot(), 1: FirstLegalPolicy()},
        )
        result = GameLoop(session, max_bot_actions=5000).advance()
        assert result.loop_state == LoopState.GAME_OVER
        assert session.state == SessionState.GAME_OVER
        assert result.available_actions is None
        assert result.winner in (0, 1, None)

    def test_offer_kinds_for_client(self, manager):
        """The returned offer is the engine's offer for the client."""
        session = manager.create_session(make_profile())
        result = GameLoop(session).advance()
        kinds = {a.action_type for a in result.available_actions.actions}
        assert ActionType.END_TURN in kinds
