"""
Deck lists.

Text format, one entry per line:

    # comments and blank lines are ignored
    Bambooster 4
    Diamond Porcupine 3

The card may be given by name or by archetype id; the count is the last
whitespace-separated field.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator

from ..engine_core.errors import DeckValidationError

if TYPE_CHECKING:
    from ..catalog.registry import Catalog


@dataclass(frozen=True)
class DeckItem:
    archetype_id: str
    count: int


@dataclass
class DeckList:
    items: list[DeckItem] = field(default_factory=list)
    name: str = ""

    @classmethod
    def of(cls, counts: dict[str, int], name: str = "") -> DeckList:
        return cls([DeckItem(archetype_id, count) for archetype_id, count in counts.items()], name)

    @classmethod
    def parse(cls, text: str, catalog: Catalog, name: str = "") -> DeckList:
        """Parse a deck list; malformed lines raise DeckValidationError."""
        errors = []
        counts: dict[str, int] = {}
        for lineno, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            card_name, _, count_text = line.rpartition(" ")
            card_name = card_name.strip()
            if not card_name or not count_text.isdigit():
                errors.append(f"line {lineno}: expected '<name> <count>', got {line!r}")
                continue
            archetype = catalog.find(card_name)
            if archetype is None:
                errors.append(f"line {lineno}: unknown card {card_name!r}")
                continue
            counts[archetype.id] = counts.get(archetype.id, 0) + int(count_text)
        if errors:
            raise DeckValidationError(errors)
        return cls.of(counts, name)

    def archetype_ids(self) -> list[str]:
        """One entry per card, in list order."""
        ids = []
        for item in self.items:
            ids.extend([item.archetype_id] * item.count)
        return ids

    def to_text(self, catalog: Catalog) -> str:
        return "\n".join(f"{catalog.get(item.archetype_id).name} {item.count}" for item in self.items)

    def __iter__(self) -> Iterator[DeckItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return sum(item.count for item in self.items)
