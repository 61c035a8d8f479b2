"""
Ability algebra.

Three ability families share one algebra:
- merge(other): same kind combines (or collapses), different kinds are both kept
- cancel(other): same kind is removed, different kinds are untouched

AbilityList relies only on these two operations, so granting and removing
abilities composes without special cases per pair.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Iterator, TypeVar


class _EnumAbility(Enum):
    """Flag-like abilities: no payload, same kind collapses to one."""

    @property
    def kind(self):
        return self

    @property
    def sort_key(self) -> tuple[int, int]:
        return (list(type(self)).index(self), 0)

    def merge(self, other):
        if other.kind == self.kind:
            return self, None
        return self, other

    def cancel(self, other):
        if other.kind == self.kind:
            return None
        return self


class KeywordAbility(_EnumAbility):
    TOXIC = "toxic"
    VOLATILE = "volatile"
    PIERCING = "piercing"
    DEVOUR = "devour"
    STEALTH = "stealth"

    @property
    def score(self) -> int:
        return {
            KeywordAbility.TOXIC: 1,
            KeywordAbility.VOLATILE: -1,
            KeywordAbility.PIERCING: 1,
            KeywordAbility.DEVOUR: 0,
            KeywordAbility.STEALTH: 1,
        }[self]


class AnonymousAbility(_EnumAbility):
    """Abilities that modify rules but are not printed as keywords."""
    DEFENDER = "defender"

    @property
    def score(self) -> int:
        return -1


@dataclass(frozen=True)
class PlayerAbility:
    """Numeric player-level abilities. Same kinds sum and vanish at zero."""
    name: str
    amount: int = 0

    @classmethod
    def propagate(cls, amount: int) -> PlayerAbility:
        return cls("propagate", amount)

    @classmethod
    def draw(cls, amount: int) -> PlayerAbility:
        return cls("draw", amount)

    @property
    def kind(self) -> str:
        return self.name

    @property
    def sort_key(self) -> tuple[str, int]:
        return (self.name, self.amount)

    @property
    def score(self) -> int:
        return self.amount

    def merge(self, other: PlayerAbility):
        if other.kind != self.kind:
            return self, other
        total = self.amount + other.amount
        if total == 0:
            return None, None
        return PlayerAbility(self.name, total), None

    def cancel(self, other: PlayerAbility):
        if other.kind == self.kind:
            return None
        return self


A = TypeVar("A")


@dataclass
class AbilityList(Generic[A]):
    """
    Sorted, deduplicated set of abilities.

    Removals are remembered: once a kind has been removed, later adds of
    that kind are cancelled too.
    """
    items: list = field(default_factory=list)
    removed: list = field(default_factory=list)

    @classmethod
    def of(cls, abilities) -> AbilityList:
        result = cls()
        for ability in abilities:
            result.add(ability)
        return result

    def add(self, ability: A):
        merged = []
        pending = ability
        for existing in self.items:
            if pending is None:
                merged.append(existing)
                continue
            first, second = existing.merge(pending)
            if second is None:
                pending = None
                if first is not None:
                    merged.append(first)
            else:
                merged.append(existing)
        if pending is not None:
            merged.append(pending)
        self.items = sorted(merged, key=lambda a: a.sort_key)
        self._apply_removed()

    def remove(self, ability: A):
        self.removed.append(ability)
        self._apply_removed()

    def _apply_removed(self):
        for removed in self.removed:
            self.items = [a for a in self.items if a.cancel(removed) is not None]

    def contains(self, kind) -> bool:
        return any(a.kind == kind for a in self.items)

    def __contains__(self, kind) -> bool:
        return self.contains(kind)

    def score(self) -> int:
        return sum(a.score for a in self.items)

    def __iter__(self) -> Iterator[A]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __eq__(self, other) -> bool:
        if not isinstance(other, AbilityList):
            return NotImplemented
        return self.items == other.items
