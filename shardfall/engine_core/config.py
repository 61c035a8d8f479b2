"""
Match configuration.

GameConfig holds the knobs that change how a match is simulated (seed,
shuffling, debug flags). Regulation holds the rules of deck construction
and the numbers the turn controller uses (life, hand sizes, field size).
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntFlag
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..catalog.registry import Catalog
    from ..rules.deck import DeckList
    from ..rules.validation import ValidationResult


class DebugFlags(IntFlag):
    NONE = 0
    DEBUG_COMMAND = 1 << 0
    IGNORE_COST = 1 << 1


@dataclass
class GameConfig:
    rng_seed: int | None = None
    no_deck_shuffle: bool = False
    no_player_shuffle: bool = False
    debug: DebugFlags = DebugFlags.NONE


@dataclass(frozen=True)
class Regulation:
    max_deck_size: int = 20
    min_deck_size: int = 20
    max_same_cards: int = 4
    initial_hand_size: int = 4
    initial_life: int = 2000
    max_hand_size: int = 6
    field_size: int = 3

    @classmethod
    def standard(cls) -> Regulation:
        return cls()

    def verify(self, deck: DeckList, catalog: Catalog | None = None) -> ValidationResult:
        from ..rules.validation import validate_deck
        return validate_deck(deck, self, catalog)


@dataclass
class PlayerConfig:
    deck: DeckList
    name: str = ""


@dataclass
class GameProfile:
    """Everything needed to start a match."""
    players: list[PlayerConfig] = field(default_factory=list)
    config: GameConfig = field(default_factory=GameConfig)
    regulation: Regulation = field(default_factory=Regulation)
