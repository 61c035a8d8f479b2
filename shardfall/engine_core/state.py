"""
Game State - The complete, deep-cloneable match state.

Design principles:
- Plain value: clone() yields a fully independent copy, so speculative
  simulation never aliases the live match
- Deterministic: the RNG lives in the state and is cloned with it
- Everything an opcode can touch is here (zones, stack, continuous list,
  id and generation counters)
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator
import random

from .card import Card
from .config import GameConfig, Regulation
from .continuous import ContinuousEffectList
from .effect import Stack
from .errors import CardNotFoundError
from .ids import GenerationCounter, ObjectId, ObjectIdCounter
from .player import EndgameReason, PlayerList


class Phase(Enum):
    """Turn phases, in order."""
    STANDBY = "standby"
    DRAW = "draw"
    MAIN = "main"
    BLOCK = "block"
    BATTLE = "battle"
    END = "end"


class GameStatus(Enum):
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass(frozen=True)
class GameCondition:
    """In progress, or finished with a winner (None for a draw)."""
    status: GameStatus = GameStatus.IN_PROGRESS
    winner: int | None = None
    reason: EndgameReason | None = None

    @classmethod
    def in_progress(cls) -> GameCondition:
        return cls()

    @classmethod
    def finished(cls, winner: int | None, reason: EndgameReason) -> GameCondition:
        return cls(GameStatus.FINISHED, winner, reason)

    @property
    def is_ended(self) -> bool:
        return self.status == GameStatus.FINISHED

    @property
    def is_draw(self) -> bool:
        return self.is_ended and self.winner is None


@dataclass
class GameState:
    players: PlayerList = field(default_factory=PlayerList)
    regulation: Regulation = field(default_factory=Regulation)
    config: GameConfig = field(default_factory=GameConfig)
    turn: int = 0
    phase: Phase = Phase.STANDBY
    stack: Stack = field(default_factory=Stack)
    continuous: ContinuousEffectList = field(default_factory=ContinuousEffectList)
    ids: ObjectIdCounter = field(default_factory=ObjectIdCounter)
    generations: GenerationCounter = field(default_factory=GenerationCounter)
    rng: random.Random = field(default_factory=random.Random)
    condition: GameCondition = field(default_factory=GameCondition)
    timestamp: int = 0

    def find_card(self, card_id: ObjectId) -> Card | None:
        for player in self.players.players:
            card = player.find_card(card_id)
            if card is not None:
                return card
        return None

    def get_card(self, card_id: ObjectId) -> Card:
        card = self.find_card(card_id)
        if card is None:
            raise CardNotFoundError(card_id)
        return card

    def all_cards(self) -> Iterator[Card]:
        for player in self.players.players:
            yield from player.all_cards()

    def field_cards(self) -> Iterator[Card]:
        for player in self.players:
            yield from player.field

    def clone(self) -> GameState:
        """Deep copy; archetypes are shared, everything else is copied."""
        return deepcopy(self)
