"""
Session Manager - Creates and manages in-memory matches.

LIFECYCLE:
1. A client creates a session from a GameProfile
2. Seats may be taken by bots; the rest are driven by clients
3. Client actions are queued per session and applied in order
4. Game ends → the session is kept until ended or cleaned up

PERSISTENCE RULES:
- NO database for gameplay
- Sessions live in memory only
- A match can be replayed from its profile (seeded RNG)

BACKPRESSURE:
- Each session has a bounded action queue
- A full queue blocks the submitter up to a timeout, then raises
  SessionBusyError; input is never dropped silently
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any
import logging
import queue
import threading
import time
import uuid

from ..engine_core.environment import Environment
from ..engine_core.errors import GameError

if TYPE_CHECKING:
    from ..bots import BotPolicy
    from ..catalog.registry import Catalog
    from ..engine_core.action import Action
    from ..engine_core.config import GameProfile

logger = logging.getLogger(__name__)


class SessionBusyError(GameError):
    """The session's action queue stayed full for the whole timeout."""
    error_code = "SESSION_BUSY"

    def __init__(self, session_id: str, timeout: float | None):
        super().__init__(
            f"Session {session_id} is busy",
            {"session_id": session_id, "timeout": timeout},
        )


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Game completed
    ABANDONED = "abandoned"  # Ended before the game finished


@dataclass
class QueuedAction:
    player: int
    action: Action


@dataclass
class Session:
    """
    An in-memory match.

    Contains:
    - The running Environment
    - Bots for the automated seats
    - The bounded queue of client actions
    """
    session_id: str
    env: Environment
    created_at: float
    inbox: queue.Queue

    state: SessionState = SessionState.ACTIVE
    bots: dict[int, BotPolicy] = field(default_factory=dict)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    metadata: dict[str, Any] = field(default_factory=dict)

    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE

    def is_bot_seat(self, player: int) -> bool:
        return player in self.bots

    def human_players(self) -> list[int]:
        return [p.id for p in self.env.state.players if p.id not in self.bots]


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions from game profiles
    - Queue client actions per session
    - Clean up ended sessions
    """

    def __init__(self, catalog: Catalog | None = None, queue_size: int = 16, submit_timeout: float | None = 1.0):
        if catalog is None:
            from ..catalog import default_catalog
            catalog = default_catalog()
        self.catalog = catalog
        self.queue_size = queue_size
        self.submit_timeout = submit_timeout
        self._sessions: dict[str, Session] = {}

    def create_session(self, profile: GameProfile, bots: dict[int, BotPolicy] | None = None) -> Session:
        """
        Create a new game session.

        Args:
            profile: Players, decks and match configuration
            bots: Bot policies keyed by seat (player id)

        Returns:
            New Session; nothing has been dealt yet
        """
        session = Session(
            session_id=str(uuid.uuid4()),
            env=Environment(profile, self.catalog),
            created_at=time.time(),
            inbox=queue.Queue(maxsize=self.queue_size),
            bots=dict(bots or {}),
        )
        self._sessions[session.session_id] = session
        logger.info("Created session %s with %d bot(s)", session.session_id, len(session.bots))
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def submit(self, session_id: str, player: int, action: Action, timeout: float | None = None):
        """
        Queue a client action.

        Blocks while the queue is full; raises SessionBusyError after timeout
        (the manager's submit_timeout when not given).
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(session_id)
        timeout = self.submit_timeout if timeout is None else timeout
        try:
            session.inbox.put(QueuedAction(player, action), block=True, timeout=timeout)
        except queue.Full:
            logger.warning("Session %s queue full, rejecting action from player %d", session_id, player)
            raise SessionBusyError(session_id, timeout) from None

    def end_session(self, session_id: str, reason: str = "completed"):
        """
        End a session and drop it from memory.

        Queued actions that were never applied are discarded.
        """
        session = self._sessions.pop(session_id, None)
        if session:
            if session.env.condition.is_ended:
                session.state = SessionState.GAME_OVER
            else:
                session.state = SessionState.ABANDONED
            while not session.inbox.empty():
                session.inbox.get_nowait()
            logger.info("Ended session %s (%s)", session_id, reason)

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600):
        """
        Drop finished sessions older than max_age.

        Called periodically to free memory.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds and not session.is_active()
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
