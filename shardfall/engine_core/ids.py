"""
Object identity.

Every card instance gets an ObjectId that stays the same while it moves
between zones. A TimedObjectId pairs it with a generation so references
captured earlier can be detected as stale.
"""

from __future__ import annotations
from dataclasses import dataclass

ObjectId = int

# Ids up to this value are never handed out to cards.
MAX_RESERVED_ID = 100


@dataclass(frozen=True, order=True)
class TimedObjectId:
    """An ObjectId plus the generation it was observed at."""
    id: ObjectId
    timestamp: int

    def __str__(self) -> str:
        return f"{self.id}@{self.timestamp}"


@dataclass
class ObjectIdCounter:
    """Issues fresh ObjectIds; never reuses one within a match."""
    last: int = MAX_RESERVED_ID

    def allocate(self) -> ObjectId:
        self.last += 1
        return self.last


@dataclass
class GenerationCounter:
    """Match-wide monotonic generation source."""
    last: int = 0

    def next(self) -> int:
        self.last += 1
        return self.last
