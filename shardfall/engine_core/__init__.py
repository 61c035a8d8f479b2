"""
Engine Core - Deterministic card-game state and rules.

The engine is the runtime that:
1. Builds a GameState from a GameProfile and a catalog
2. Offers the legal actions for the player who must act
3. Lowers actions and effect commands into opcode batches
4. Applies batches atomically and records the game log
5. Resolves the effect stack and recomputes continuous effects
"""

from .action import Action, ActionType, AvailableAction, PlayerAvailableActions
from .card import Card, CardArchetype, CardAttribute, CardSnapshot
from .config import DebugFlags, GameConfig, GameProfile, PlayerConfig, Regulation
from .environment import Environment, ProcessReport
from .errors import GameError
from .ids import ObjectId, TimedObjectId
from .local import LocalEnvironment
from .log import GameLog, LogKind
from .state import GameCondition, GameState, Phase

__all__ = [
    "Action",
    "ActionType",
    "AvailableAction",
    "PlayerAvailableActions",
    "Card",
    "CardArchetype",
    "CardAttribute",
    "CardSnapshot",
    "DebugFlags",
    "GameConfig",
    "GameProfile",
    "PlayerConfig",
    "Regulation",
    "Environment",
    "ProcessReport",
    "GameError",
    "ObjectId",
    "TimedObjectId",
    "LocalEnvironment",
    "GameLog",
    "LogKind",
    "GameCondition",
    "GameState",
    "Phase",
]
