"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between clients and the match service.
Snapshots are always taken from one player's point of view: the
opponent's hand and both decks are reported as counts only.

Error Codes:
- MATCH_NOT_FOUND: Match does not exist or has been ended
- INVALID_DECK: A deck list failed to parse or broke the regulation
- INVALID_ACTION: The engine rejected the submitted action
- SESSION_BUSY: Too many queued actions for the match
- VALIDATION_ERROR: Request body could not be converted
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class MatchStatus(str, Enum):
    """Match status values."""
    WAITING_INPUT = "waiting_input"
    GAME_OVER = "game_over"


class ActionKind(str, Enum):
    """Action types a client may submit."""
    CONCEDE = "concede"
    CAST_CARD = "cast_card"
    SELECT_CARD = "select_card"
    ATTACK = "attack"
    BLOCK = "block"
    END_TURN = "end_turn"
    CONTINUE = "continue"


class ErrorCode(str, Enum):
    """Structured error codes."""
    MATCH_NOT_FOUND = "MATCH_NOT_FOUND"
    INVALID_DECK = "INVALID_DECK"
    INVALID_ACTION = "INVALID_ACTION"
    SESSION_BUSY = "SESSION_BUSY"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CardRef(BaseModel):
    """A card identity as observed at one generation."""
    id: int
    timestamp: int


class CardInfo(BaseModel):
    """Card information for display; name is None when hidden."""
    id: int
    timestamp: int
    archetype_id: Optional[str] = None
    name: Optional[str] = None
    owner: int
    zone: str
    power: Optional[int] = None
    cost: Optional[int] = None
    field_state: Optional[str] = None
    is_token: bool = False

    model_config = {"from_attributes": True}


class PlayerInfo(BaseModel):
    """One player as seen by the viewer."""
    id: int
    name: str
    life: int
    shards: dict[str, int] = Field(default_factory=dict)
    deck_count: int = 0
    hand_count: int = 0
    hand: Optional[list[CardInfo]] = Field(None, description="None unless the viewer owns the hand")
    field: list[CardInfo] = Field(default_factory=list)
    graveyard: list[CardInfo] = Field(default_factory=list)
    colony: list[CardInfo] = Field(default_factory=list)
    is_bot: bool = False


class StackItemInfo(BaseModel):
    source: int
    id: str


class AvailableActionInfo(BaseModel):
    """One offered action kind with its candidate cards."""
    action_type: ActionKind
    cards: list[CardRef] = Field(default_factory=list)
    attackers: list[CardRef] = Field(default_factory=list, description="block only")


class OfferInfo(BaseModel):
    """The actions offered to the viewer."""
    player: int
    actions: list[AvailableActionInfo] = Field(default_factory=list)
    instructions: Optional[str] = None


class LogEntry(BaseModel):
    kind: str
    player: Optional[int] = None
    card: Optional[CardInfo] = None
    target: Optional[CardInfo] = None
    data: dict[str, Any] = Field(default_factory=dict)
    message: str = ""


# =============================================================================
# Request Models
# =============================================================================

class SeatRequest(BaseModel):
    """
    One seat of a new match.

    deck is either a starter deck name or deck-list text
    ("<card name> <count>" per line).
    """
    name: str = ""
    deck: str
    bot: Optional[str] = Field(
        None, description="simple, random, or a personality name for the lookahead bot",
    )


class CreateMatchRequest(BaseModel):
    """
    Request to start a match.

    POST /api/v1/matches
    """
    seats: list[SeatRequest] = Field(min_length=2, max_length=2)
    seed: Optional[int] = None
    no_deck_shuffle: bool = False
    no_player_shuffle: bool = False


class ActionRequest(BaseModel):
    """
    Request to submit an action.

    POST /api/v1/matches/{match_id}/actions
    """
    player: int
    action_type: ActionKind
    card: Optional[CardRef] = None
    attackers: list[CardRef] = Field(default_factory=list)
    pairs: list[tuple[CardRef, CardRef]] = Field(
        default_factory=list, description="(attacker, blocker) pairs",
    )


# =============================================================================
# Response Models
# =============================================================================

class SnapshotResponse(BaseModel):
    """The match from one player's point of view."""
    match_id: str
    viewer: int
    status: MatchStatus
    turn: int
    phase: str
    player_in_turn: int
    players: list[PlayerInfo]
    stack: list[StackItemInfo] = Field(default_factory=list)
    available_actions: Optional[OfferInfo] = None
    winner: Optional[int] = None


class MatchResponse(BaseModel):
    """Response after creating a match."""
    match_id: str
    status: MatchStatus
    players: list[int]
    bots: list[int] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class ActionResponse(BaseModel):
    """Response after an accepted action."""
    match_id: str
    status: MatchStatus
    logs: list[LogEntry] = Field(default_factory=list)
    bot_actions: list[str] = Field(default_factory=list)
    winner: Optional[int] = None


class LogResponse(BaseModel):
    match_id: str
    offset: int
    entries: list[LogEntry] = Field(default_factory=list)


class CatalogEntry(BaseModel):
    id: str
    name: str
    color: str
    cost: int
    power: Optional[int] = None
    text: str = ""


class MatchListResponse(BaseModel):
    matches: list[str]
    count: int


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    environment: str
