"""
Errors - Exception taxonomy for the rules engine.

Families:
1. Action legality errors (raised before any mutation)
2. Command lowering errors (a referenced card vanished or changed)
3. Setup errors (catalog lookups, deck validation)
4. Expression errors (card-text templates; local to one evaluation)

Every error carries an error_code so callers can report it the same way
ActionResult-style failures are reported.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .ids import TimedObjectId
    from .shards import Color


class GameError(Exception):
    """Base class for all rules-engine errors."""
    error_code = "GAME_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


# =============================================================================
# Action legality
# =============================================================================

class ActionError(GameError):
    """An action cannot be performed in the current state."""
    error_code = "INVALID_ACTION"


class InsufficientShardsError(ActionError):
    error_code = "INSUFFICIENT_SHARDS"

    def __init__(self, color: Color, amount: int):
        super().__init__(
            f"Insufficient shards: {amount} {color.display_name} required",
            {"color": int(color), "amount": amount},
        )
        self.color = color
        self.amount = amount


class CreatureAlreadyFreeCastedError(ActionError):
    error_code = "ALREADY_FREE_CASTED"

    def __init__(self):
        super().__init__("A free creature has already been cast this turn")


class CardNotFoundError(ActionError):
    error_code = "CARD_NOT_FOUND"

    def __init__(self, card_id: int):
        super().__init__(f"Card {card_id} not found", {"id": card_id})
        self.card_id = card_id


class KeyNotFoundError(ActionError):
    error_code = "KEY_NOT_FOUND"

    def __init__(self, key: str):
        super().__init__(f"Key not found: {key}", {"key": key})
        self.key = key


class InvalidValueTypeError(ActionError):
    error_code = "INVALID_VALUE_TYPE"


class IllegalActionError(ActionError):
    """The action is not among the currently offered actions."""
    error_code = "ILLEGAL_ACTION"


class PlayerNotFoundError(ActionError):
    error_code = "PLAYER_NOT_FOUND"

    def __init__(self, player: int):
        super().__init__(f"Player {player} not found", {"player": player})
        self.player = player


# =============================================================================
# Lowering / zones
# =============================================================================

class TargetLostError(GameError):
    """A targeted card left its zone or was renewed since it was chosen."""
    error_code = "TARGET_LOST"

    def __init__(self, target: TimedObjectId):
        super().__init__(
            f"Target lost: {target}",
            {"id": target.id, "timestamp": target.timestamp},
        )
        self.target = target


class ZoneCapacityError(GameError):
    error_code = "ZONE_FULL"

    def __init__(self, zone: str, capacity: int):
        super().__init__(
            f"Zone {zone} is full (capacity {capacity})",
            {"zone": zone, "capacity": capacity},
        )
        self.zone = zone
        self.capacity = capacity


# =============================================================================
# Setup
# =============================================================================

class UnknownArchetypeError(GameError):
    error_code = "UNKNOWN_ARCHETYPE"

    def __init__(self, key: str):
        super().__init__(f"Unknown card archetype: {key}", {"key": key})
        self.key = key


class DeckValidationError(GameError):
    """Raised when a deck list fails regulation checks."""
    error_code = "INVALID_DECK"

    def __init__(self, errors: list[str]):
        super().__init__(f"Deck validation failed with {len(errors)} error(s)")
        self.errors = errors
        self.details = {"errors": errors}


# =============================================================================
# Expressions
# =============================================================================

class ExpressionError(GameError):
    """A card-text expression could not be evaluated."""
    error_code = "EXPRESSION_ERROR"


class ExpressionSyntaxError(ExpressionError):
    error_code = "EXPRESSION_SYNTAX"


class ExpressionDivisionByZeroError(ExpressionError):
    error_code = "DIVISION_BY_ZERO"


class ExpressionOverflowError(ExpressionError):
    error_code = "EXPRESSION_OVERFLOW"


class UndefinedVariableError(ExpressionError):
    error_code = "UNDEFINED_VARIABLE"

    def __init__(self, name: str):
        super().__init__(f"Undefined variable: {name}", {"name": name})
        self.name = name


class StepLimitExceededError(ExpressionError):
    error_code = "STEP_LIMIT_EXCEEDED"

    def __init__(self, limit: int):
        super().__init__(f"Expression exceeded {limit} evaluation steps", {"limit": limit})
        self.limit = limit
