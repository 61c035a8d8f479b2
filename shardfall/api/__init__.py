"""
API Module - Client interface.

Exposes matches over a REST API:
1. Create a match (starter decks or deck lists, optional bot seats)
2. Read a per-player snapshot
3. Submit actions
4. Read the redacted game log

All state is in memory. No persistent user accounts.
"""

from .schemas import (
    # Requests
    CreateMatchRequest,
    SeatRequest,
    ActionRequest,
    # Responses
    MatchResponse,
    SnapshotResponse,
    ActionResponse,
    LogResponse,
    ErrorResponse,
    # Enums
    ActionKind,
    ErrorCode,
    MatchStatus,
)
from .service import MatchService, to_engine_action
from .app import create_app

__all__ = [
    # Requests
    "CreateMatchRequest",
    "SeatRequest",
    "ActionRequest",
    # Responses
    "MatchResponse",
    "SnapshotResponse",
    "ActionResponse",
    "LogResponse",
    "ErrorResponse",
    # Enums
    "ActionKind",
    "ErrorCode",
    "MatchStatus",
    # Service
    "MatchService",
    "to_engine_action",
    "create_app",
]
