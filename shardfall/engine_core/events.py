"""
Card events and the filter mask effects use to subscribe to them.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, IntFlag

from .zones import Zone


class EventReason(Enum):
    BATTLE = "battle"
    EFFECT = "effect"


class EventFilter(IntFlag):
    NONE = 0
    CASTED = 1 << 0
    DESTROYED = 1 << 1
    RETURNED_TO_HAND = 1 << 2
    RETURNED_TO_DECK = 1 << 3
    DEALT_DAMAGE = 1 << 4
    ATTACKING = 1 << 5
    BLOCKING = 1 << 6
    ATTACKED = 1 << 7
    ANY_CASTED = 1 << 8


class EventKind(Enum):
    CASTED = "casted"
    DESTROYED = "destroyed"
    RETURNED_TO_HAND = "returned_to_hand"
    RETURNED_TO_DECK = "returned_to_deck"
    DEALT_DAMAGE = "dealt_damage"
    ATTACKING = "attacking"
    BLOCKING = "blocking"
    ATTACKED = "attacked"
    ANY_CASTED = "any_casted"

    @property
    def filter(self) -> EventFilter:
        return EventFilter[self.name]


@dataclass(frozen=True)
class CardEvent:
    """
    A concrete event delivered to an effect's activate().

    Only the fields relevant to the kind are set.
    """
    kind: EventKind
    from_zone: Zone | None = None
    reason: EventReason | None = None
    player: int | None = None
    amount: int = 0

    @property
    def filter(self) -> EventFilter:
        return self.kind.filter

    @classmethod
    def casted(cls, from_zone: Zone) -> CardEvent:
        return cls(EventKind.CASTED, from_zone=from_zone)

    @classmethod
    def destroyed(cls, from_zone: Zone, reason: EventReason) -> CardEvent:
        return cls(EventKind.DESTROYED, from_zone=from_zone, reason=reason)

    @classmethod
    def returned_to_hand(cls, reason: EventReason) -> CardEvent:
        return cls(EventKind.RETURNED_TO_HAND, reason=reason)

    @classmethod
    def returned_to_deck(cls) -> CardEvent:
        return cls(EventKind.RETURNED_TO_DECK)

    @classmethod
    def dealt_damage(cls, player: int, amount: int, reason: EventReason) -> CardEvent:
        return cls(EventKind.DEALT_DAMAGE, player=player, amount=amount, reason=reason)

    @classmethod
    def attacking(cls) -> CardEvent:
        return cls(EventKind.ATTACKING)

    @classmethod
    def blocking(cls) -> CardEvent:
        return cls(EventKind.BLOCKING)

    @classmethod
    def attacked(cls) -> CardEvent:
        return cls(EventKind.ATTACKED)

    @classmethod
    def any_casted(cls) -> CardEvent:
        return cls(EventKind.ANY_CASTED)
