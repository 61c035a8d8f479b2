"""
Field - The slotted battle zone and per-card battle bookkeeping.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterator

from .zones import CardSlot

if TYPE_CHECKING:
    from .card import Card
    from .ids import ObjectId, TimedObjectId


class FieldState(Enum):
    ACTIVE = "active"
    EXHAUSTED = "exhausted"


class BattleRole(Enum):
    ATTACKING = "attacking"
    BLOCKING = "blocking"
    ATTACKED = "attacked"


@dataclass(frozen=True)
class FieldBattleState:
    role: BattleRole
    attacker: TimedObjectId | None = None

    @classmethod
    def attacking(cls) -> FieldBattleState:
        return cls(BattleRole.ATTACKING)

    @classmethod
    def blocking(cls, attacker: TimedObjectId) -> FieldBattleState:
        return cls(BattleRole.BLOCKING, attacker)

    @classmethod
    def attacked(cls) -> FieldBattleState:
        return cls(BattleRole.ATTACKED)


class Field(CardSlot):
    """CardSlot with battle queries."""

    def active_cards(self) -> Iterator[Card]:
        return (card for card in self if card.field_state == FieldState.ACTIVE)

    def attacking_cards(self) -> Iterator[Card]:
        return (
            card for card in self
            if card.battle is not None and card.battle.role == BattleRole.ATTACKING
        )

    def find_blocker(self, attacker: TimedObjectId) -> Card | None:
        for card in self:
            battle = card.battle
            if battle is not None and battle.role == BattleRole.BLOCKING and battle.attacker == attacker:
                return card
        return None

    def set_card_field_state(self, card_id: ObjectId, state: FieldState) -> bool:
        card = self.get(card_id)
        if card is None:
            return False
        card.field_state = state
        return True

    def set_card_battle_state(self, card_id: ObjectId, battle: FieldBattleState | None) -> bool:
        card = self.get(card_id)
        if card is None:
            return False
        card.battle = battle
        return True

    def reset_battle_state(self):
        """Untap cards that sat out the battle, then clear all battle roles."""
        for card in self:
            if card.battle is None:
                card.field_state = FieldState.ACTIVE
            card.battle = None
