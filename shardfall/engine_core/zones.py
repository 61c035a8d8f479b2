"""
Zones - Containers that hold cards.

Two container shapes:
- CardList: ordered sequence (deck, hand, graveyard, colony, limbo).
  The end of the list is the top of the deck.
- CardSlot: fixed number of slots (field). New cards take the first empty
  slot; a full slot container raises ZoneCapacityError instead of dropping.

Removing an id that is not present returns None; absence is a normal
outcome, not a fault.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterator
import random

from .errors import ZoneCapacityError

if TYPE_CHECKING:
    from .card import Card
    from .ids import ObjectId


class ZoneKind(Enum):
    DECK = "deck"
    HAND = "hand"
    FIELD = "field"
    COLONY = "colony"
    GRAVEYARD = "graveyard"
    LIMBO = "limbo"


class MoveReason(Enum):
    DRAW = "draw"
    CASTED = "casted"
    DESTROYED = "destroyed"
    DISCARDED = "discarded"
    MOVE = "move"


@dataclass(frozen=True)
class Zone:
    """A zone owned by a specific player."""
    player: int
    kind: ZoneKind

    def __str__(self) -> str:
        return f"{self.kind.value}[{self.player}]"


@dataclass
class CardList:
    """Ordered card container."""
    cards: list[Card] = field(default_factory=list)

    def push(self, card: Card):
        """Add a card on top."""
        self.cards.append(card)

    def push_bottom(self, card: Card):
        self.cards.insert(0, card)

    def pop_top(self) -> Card | None:
        return self.cards.pop() if self.cards else None

    def remove(self, card_id: ObjectId) -> Card | None:
        for index, card in enumerate(self.cards):
            if card.id == card_id:
                return self.cards.pop(index)
        return None

    def get(self, card_id: ObjectId) -> Card | None:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def contains(self, card_id: ObjectId) -> bool:
        return self.get(card_id) is not None

    def shuffle(self, rng: random.Random):
        rng.shuffle(self.cards)

    @property
    def top(self) -> Card | None:
        return self.cards[-1] if self.cards else None

    @property
    def is_empty(self) -> bool:
        return not self.cards

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __reversed__(self) -> Iterator[Card]:
        return reversed(self.cards)

    def __len__(self) -> int:
        return len(self.cards)


@dataclass
class CardSlot:
    """Fixed-capacity card container."""
    capacity: int = 3
    slots: list[Card | None] = field(default_factory=list)
    name: str = "field"

    def __post_init__(self):
        if not self.slots:
            self.slots = [None] * self.capacity

    def push(self, card: Card):
        for index, slot in enumerate(self.slots):
            if slot is None:
                self.slots[index] = card
                return
        raise ZoneCapacityError(self.name, self.capacity)

    def remove(self, card_id: ObjectId) -> Card | None:
        for index, slot in enumerate(self.slots):
            if slot is not None and slot.id == card_id:
                self.slots[index] = None
                return slot
        return None

    def get(self, card_id: ObjectId) -> Card | None:
        for slot in self.slots:
            if slot is not None and slot.id == card_id:
                return slot
        return None

    def contains(self, card_id: ObjectId) -> bool:
        return self.get(card_id) is not None

    def has_space(self) -> bool:
        return any(slot is None for slot in self.slots)

    @property
    def is_empty(self) -> bool:
        return all(slot is None for slot in self.slots)

    def __iter__(self) -> Iterator[Card]:
        return (slot for slot in self.slots if slot is not None)

    def __reversed__(self) -> Iterator[Card]:
        return (slot for slot in reversed(self.slots) if slot is not None)

    def __len__(self) -> int:
        return sum(1 for slot in self.slots if slot is not None)
