"""
Game Loop - Drives one session between client inputs.

The loop:
1. Apply queued client actions in order
2. Advance the match until someone must choose
3. Let bots answer every offer made to a bot seat
4. Stop when a client must act or the game ends

The engine itself is single-threaded; the session lock keeps one
loop iteration at a time per session.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any
import logging
import queue

from .manager import SessionState

if TYPE_CHECKING:
    from ..engine_core.action import PlayerAvailableActions
    from ..engine_core.log import GameLog
    from .manager import Session

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the game loop."""
    WAITING_INPUT = "waiting_input"
    RUNNING_BOTS = "running_bots"
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of one loop iteration.

    Contains the offer for the client who must act next,
    the log produced along the way and any rejected inputs.
    """
    success: bool
    loop_state: LoopState

    available_actions: PlayerAvailableActions | None = None
    logs: list[GameLog] = field(default_factory=list)

    # Bot actions taken, described
    bot_actions: list[str] = field(default_factory=list)

    # Rejected client actions
    errors: list[dict[str, Any]] = field(default_factory=list)

    winner: int | None = None


class GameLoop:
    """
    The session driver.

    Usage:
        loop = GameLoop(session)
        result = loop.advance()

        manager.submit(session.session_id, player, action)
        result = loop.drain()
    """

    def __init__(self, session: Session, max_bot_actions: int = 1000):
        self.session = session
        self.max_bot_actions = max_bot_actions
        self.state = LoopState.WAITING_INPUT

    def drain(self) -> TurnResult:
        """Apply every queued client action, then advance."""
        with self.session.lock:
            env = self.session.env
            logs: list[GameLog] = []
            errors: list[dict[str, Any]] = []
            while True:
                try:
                    queued = self.session.inbox.get_nowait()
                except queue.Empty:
                    break
                report = env.process(queued.player, queued.action)
                logs.extend(report.logs)
                if report.error is not None:
                    errors.append(report.error.to_dict())
                    continue
                logs.extend(env.run_until_input())
            result = self._advance()
        result.logs = logs + result.logs
        result.errors = errors
        result.success = not errors
        return result

    def advance(self) -> TurnResult:
        """Run the match forward without new client input."""
        with self.session.lock:
            return self._advance()

    def _advance(self) -> TurnResult:
        session = self.session
        env = session.env
        logs = env.run_until_input()
        bot_actions: list[str] = []

        self.state = LoopState.RUNNING_BOTS
        for _ in range(self.max_bot_actions):
            offer = env.available_actions()
            if env.condition.is_ended or offer is None or not session.is_bot_seat(offer.player):
                break
            bot = session.bots[offer.player]
            decision = bot.select_action(env, offer.player)
            report = env.process(offer.player, decision.action)
            logs.extend(report.logs)
            if report.error is not None:
                # A bot choosing outside its offer is a bot bug; stop instead of looping.
                logger.error("%s action rejected: %s", bot.get_name(), report.error.message)
                break
            bot_actions.append(f"player {offer.player}: {decision.action.describe()}")
            logs.extend(env.run_until_input())
        else:
            logger.warning("Session %s hit the bot action limit", session.session_id)

        if env.condition.is_ended:
            self.state = LoopState.GAME_OVER
            session.state = SessionState.GAME_OVER
        else:
            self.state = LoopState.WAITING_INPUT

        return TurnResult(
            success=True,
            loop_state=self.state,
            available_actions=env.available_actions(),
            logs=logs,
            bot_actions=bot_actions,
            winner=env.condition.winner,
        )
