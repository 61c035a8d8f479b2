"""
Colors and the shard ledger.

Shards are the resource spent to cast cards. The ledger never stores a
color with a zero count and consume() is all-or-nothing.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntFlag

from .errors import InsufficientShardsError


class Color(IntFlag):
    """Card and shard colors."""
    COLORLESS = 0
    RED = 1
    YELLOW = 2
    GREEN = 4
    BLUE = 8

    @property
    def display_name(self) -> str:
        if self == Color.COLORLESS:
            return "Colorless"
        names = [c.name.title() for c in (Color.RED, Color.YELLOW, Color.GREEN, Color.BLUE) if c in self]
        return "+".join(names)


@dataclass
class ShardList:
    """Mapping of Color to a positive shard count."""
    entries: dict[Color, int] = field(default_factory=dict)

    def get(self, color: Color) -> int:
        return self.entries.get(color, 0)

    def add(self, color: Color, amount: int):
        if amount <= 0:
            return
        self.entries[color] = self.entries.get(color, 0) + amount

    def consume(self, color: Color, amount: int):
        """Deduct amount shards of color, or raise and leave the ledger unchanged."""
        if amount <= 0:
            return
        current = self.entries.get(color, 0)
        if current < amount:
            raise InsufficientShardsError(color, amount)
        if current == amount:
            del self.entries[color]
        else:
            self.entries[color] = current - amount

    def payment_plan(self, amount: int, prefer: Color = Color.COLORLESS) -> list[tuple[Color, int]]:
        """
        Split a generic cost across colors.

        Shards of the preferred color are used first, then colorless, then the
        remaining colors in flag order. Raises when the total is too small.
        """
        if amount <= 0:
            return []
        if len(self) < amount:
            raise InsufficientShardsError(prefer, amount)
        order = [prefer, Color.COLORLESS, Color.RED, Color.YELLOW, Color.GREEN, Color.BLUE]
        plan = []
        remaining = amount
        for color in dict.fromkeys(order):
            available = self.entries.get(color, 0)
            take = min(available, remaining)
            if take:
                plan.append((color, take))
                remaining -= take
            if remaining == 0:
                break
        # Multi-color keys are not in the preference order.
        for color, available in sorted(self.entries.items()):
            if remaining == 0:
                break
            if color in order:
                continue
            take = min(available, remaining)
            plan.append((color, take))
            remaining -= take
        return plan

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def items(self) -> list[tuple[Color, int]]:
        return sorted(self.entries.items())

    def __len__(self) -> int:
        return sum(self.entries.values())

    def to_dict(self) -> dict[str, int]:
        return {color.display_name: count for color, count in self.items()}
