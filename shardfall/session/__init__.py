"""
Session Module - Manages in-memory matches.

A session represents one match:
- Created from a GameProfile
- Holds the running Environment and the bots for automated seats
- Queues client actions with backpressure
- Dropped when ended; nothing is persisted
"""

from .manager import SessionManager, Session, SessionState, SessionBusyError
from .game_loop import GameLoop, LoopState, TurnResult

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "SessionBusyError",
    "GameLoop",
    "LoopState",
    "TurnResult",
]
