"""
Layered numeric values.

A Linear keeps its base value and the layers folded onto it during a
recompute pass; the effective value is derived on read:

    value = (assign if set else base) * mul + add, clamped to [minimum, maximum]
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class ModifierOp(Enum):
    ASSIGN = "assign"
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"


@dataclass(frozen=True)
class Modifier:
    """A single numeric layer."""
    op: ModifierOp
    amount: int

    @classmethod
    def assign(cls, amount: int) -> Modifier:
        return cls(ModifierOp.ASSIGN, amount)

    @classmethod
    def add(cls, amount: int) -> Modifier:
        return cls(ModifierOp.ADD, amount)

    @classmethod
    def sub(cls, amount: int) -> Modifier:
        return cls(ModifierOp.SUB, amount)

    @classmethod
    def mul(cls, amount: int) -> Modifier:
        return cls(ModifierOp.MUL, amount)

    @classmethod
    def div(cls, amount: int) -> Modifier:
        return cls(ModifierOp.DIV, amount)


@dataclass
class Linear:
    base: int
    assigned: int | None = None
    mul_factor: int = 1
    add_amount: int = 0
    minimum: int = 0
    maximum: int | None = None

    def value(self) -> int:
        start = self.base if self.assigned is None else self.assigned
        result = start * self.mul_factor + self.add_amount
        if result < self.minimum:
            result = self.minimum
        if self.maximum is not None and result > self.maximum:
            result = self.maximum
        return result

    @property
    def is_modified(self) -> bool:
        return self.assigned is not None or self.mul_factor != 1 or self.add_amount != 0

    def assign(self, amount: int):
        """Override the value; earlier layers are discarded."""
        self.assigned = amount
        self.mul_factor = 1
        self.add_amount = 0

    def add(self, amount: int):
        self.add_amount += amount

    def sub(self, amount: int):
        self.add_amount -= amount

    def mul(self, amount: int):
        self.mul_factor *= amount
        self.add_amount *= amount

    def div(self, amount: int):
        # Collapse to the current value so integer division stays exact.
        if amount == 0:
            raise ZeroDivisionError("Linear division by zero")
        self.assign(self.value() // amount)

    def apply(self, modifier: Modifier):
        handlers = {
            ModifierOp.ASSIGN: self.assign,
            ModifierOp.ADD: self.add,
            ModifierOp.SUB: self.sub,
            ModifierOp.MUL: self.mul,
            ModifierOp.DIV: self.div,
        }
        handlers[modifier.op](modifier.amount)

    def __int__(self) -> int:
        return self.value()
