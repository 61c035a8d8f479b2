"""
Continuous effects - Modifiers reapplied on every recompute pass.

Each registered item is checked every pass:
- its condition must hold (e.g. "only during turn T", "while on field")
- its apply hook returns False once it is spent

An item that fails either check never affects the pass it failed in and
is dropped from the list by update().
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .abilities import AbilityList
from .computed import ComputedAttribute, ModifierTarget
from .ids import ObjectId
from .linear import Modifier
from .zones import ZoneKind

if TYPE_CHECKING:
    from .card import Card
    from .state import GameState


# =============================================================================
# Conditions
# =============================================================================

class Condition:
    def is_met(self, state: GameState) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class Always(Condition):
    def is_met(self, state: GameState) -> bool:
        return True


@dataclass(frozen=True)
class OnField(Condition):
    card: ObjectId

    def is_met(self, state: GameState) -> bool:
        card = state.find_card(self.card)
        return card is not None and card.zone.kind == ZoneKind.FIELD


@dataclass(frozen=True)
class InTurn(Condition):
    turn: int

    def is_met(self, state: GameState) -> bool:
        return state.turn == self.turn


@dataclass(frozen=True)
class AnyOf(Condition):
    conditions: tuple[Condition, ...]

    def is_met(self, state: GameState) -> bool:
        return any(c.is_met(state) for c in self.conditions)


@dataclass(frozen=True)
class AllOf(Condition):
    conditions: tuple[Condition, ...]

    def is_met(self, state: GameState) -> bool:
        return all(c.is_met(state) for c in self.conditions)


# =============================================================================
# Effects
# =============================================================================

@dataclass
class ContinuousCardContext:
    state: GameState
    source: ObjectId
    target: Card
    computed: ComputedAttribute


@dataclass
class ContinuousPlayerContext:
    state: GameState
    source: ObjectId
    player: int
    abilities: AbilityList


class ContinuousEffect:
    """
    Base class for continuous modifiers.

    Both hooks return True while the effect should stay registered.
    """

    def apply_card(self, ctx: ContinuousCardContext) -> bool:
        return True

    def apply_player(self, ctx: ContinuousPlayerContext) -> bool:
        return True


@dataclass
class PowerBoost(ContinuousEffect):
    """Adds a flat amount to the source card's power."""
    amount: int

    def apply_card(self, ctx: ContinuousCardContext) -> bool:
        if ctx.target.id == ctx.source:
            ctx.computed.apply_modifier(ModifierTarget.POWER, Modifier.add(self.amount))
        return True


class ShieldBroken(ContinuousEffect):
    """Removes one shield from the source card."""

    def apply_card(self, ctx: ContinuousCardContext) -> bool:
        if ctx.target.id == ctx.source:
            ctx.computed.apply_modifier(ModifierTarget.SHIELDS, Modifier.sub(1))
        return True


@dataclass
class ContinuousItem:
    source: ObjectId
    effect: ContinuousEffect
    condition: Condition = field(default_factory=Always)
    timestamp: int = 0
    active: bool = True

    def is_live(self, state: GameState) -> bool:
        return self.active and self.condition.is_met(state)


@dataclass
class ContinuousEffectList:
    items: list[ContinuousItem] = field(default_factory=list)

    def add(self, item: ContinuousItem):
        self.items.append(item)
        self.items.sort(key=lambda i: i.timestamp)

    def extend(self, items: list[ContinuousItem]):
        for item in items:
            self.add(item)

    def update(self, state: GameState):
        """Drop spent items and items whose condition no longer holds."""
        self.items = [item for item in self.items if item.is_live(state)]

    def apply_card(self, state: GameState, card: Card) -> ComputedAttribute:
        computed = ComputedAttribute.from_attribute(card.archetype.attribute)
        for item in self.items:
            if not item.is_live(state):
                continue
            ctx = ContinuousCardContext(state=state, source=item.source, target=card, computed=computed)
            if not item.effect.apply_card(ctx):
                item.active = False
        return computed

    def apply_player(self, state: GameState, player: int) -> AbilityList:
        abilities = AbilityList()
        for item in self.items:
            if not item.is_live(state):
                continue
            ctx = ContinuousPlayerContext(state=state, source=item.source, player=player, abilities=abilities)
            if not item.effect.apply_player(ctx):
                item.active = False
        return abilities

    def __len__(self) -> int:
        return len(self.items)
