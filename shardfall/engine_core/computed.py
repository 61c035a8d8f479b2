"""
Computed attributes.

A card's effective stats. Rebuilt from the archetype's base attributes on
every recompute pass; continuous effects then fold their layers on top.
Nothing outside a recompute pass writes to a ComputedAttribute.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from .abilities import AbilityList, AnonymousAbility, KeywordAbility
from .linear import Linear, Modifier
from .shards import Color

if TYPE_CHECKING:
    from .card import CardAttribute


class CardType(Enum):
    CREATURE = "creature"
    HEX = "hex"


class CreatureType(Enum):
    MUTANT = "mutant"
    CYBORG = "cyborg"
    ROBOT = "robot"
    GHOST = "ghost"
    PROGRAM = "program"


class ModifierTarget(Enum):
    COST = "cost"
    POWER = "power"
    SHIELDS = "shields"


@dataclass
class ComputedAttribute:
    color: Color
    cost: Linear
    card_type: CardType
    creature_type: CreatureType | None = None
    abilities: AbilityList = field(default_factory=AbilityList)
    anon_abilities: AbilityList = field(default_factory=AbilityList)
    power: Linear | None = None
    shields: Linear | None = None

    @classmethod
    def from_attribute(cls, attr: CardAttribute) -> ComputedAttribute:
        return cls(
            color=attr.color,
            cost=Linear(attr.cost),
            card_type=attr.card_type,
            creature_type=attr.creature_type,
            abilities=AbilityList.of(attr.abilities),
            anon_abilities=AbilityList.of(attr.anon_abilities),
            power=Linear(attr.power) if attr.power is not None else None,
            shields=Linear(attr.shields) if attr.shields else None,
        )

    @property
    def current_power(self) -> int:
        return self.power.value() if self.power is not None else 0

    @property
    def current_shields(self) -> int:
        return self.shields.value() if self.shields is not None else 0

    @property
    def is_creature(self) -> bool:
        return self.card_type == CardType.CREATURE

    @property
    def is_hex(self) -> bool:
        return self.card_type == CardType.HEX

    @property
    def is_targetable(self) -> bool:
        return KeywordAbility.STEALTH not in self.abilities

    def has(self, ability: KeywordAbility | AnonymousAbility) -> bool:
        if isinstance(ability, AnonymousAbility):
            return ability in self.anon_abilities
        return ability in self.abilities

    def apply_modifier(self, target: ModifierTarget, modifier: Modifier):
        if target == ModifierTarget.COST:
            self.cost.apply(modifier)
        elif target == ModifierTarget.POWER and self.power is not None:
            self.power.apply(modifier)
        elif target == ModifierTarget.SHIELDS and self.shields is not None:
            self.shields.apply(modifier)
