"""
Catalog - The closed registry of card archetypes.

Archetypes are looked up by short id ("bamb") or by safe name
("bambooster"). The registry is built once and shared by reference:
deep-copying a state or an environment never copies the catalog.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterator

from ..engine_core.card import CardArchetype, safe_name
from ..engine_core.errors import UnknownArchetypeError
from ..engine_core.expression import render

if TYPE_CHECKING:
    from ..engine_core.effect import Effect


@dataclass
class Catalog:
    archetypes: dict[str, CardArchetype] = field(default_factory=dict)
    _by_name: dict[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    def of(cls, archetypes: list[CardArchetype]) -> Catalog:
        catalog = cls()
        for archetype in archetypes:
            catalog.register(archetype)
        return catalog

    def register(self, archetype: CardArchetype):
        if archetype.id in self.archetypes:
            raise ValueError(f"Duplicate archetype id: {archetype.id}")
        self.archetypes[archetype.id] = archetype
        self._by_name[archetype.safe_name] = archetype.id

    def find(self, key: str) -> CardArchetype | None:
        if key in self.archetypes:
            return self.archetypes[key]
        archetype_id = self._by_name.get(safe_name(key))
        return self.archetypes.get(archetype_id) if archetype_id else None

    def get(self, key: str) -> CardArchetype:
        archetype = self.find(key)
        if archetype is None:
            raise UnknownArchetypeError(key)
        return archetype

    def handler(self, key: str) -> Effect:
        """Fresh effect instance for resolving a stack item of this archetype."""
        return self.get(key).new_effect()

    def describe(self, key: str) -> str:
        """Card text with its {placeholders} filled from the base attributes."""
        archetype = self.get(key)
        return render(archetype.text, _text_variables(archetype))

    def __contains__(self, key: str) -> bool:
        return self.find(key) is not None

    def __iter__(self) -> Iterator[CardArchetype]:
        return iter(self.archetypes.values())

    def __len__(self) -> int:
        return len(self.archetypes)

    def __deepcopy__(self, memo):
        return self


def _text_variables(archetype: CardArchetype) -> dict[str, Any]:
    attr = archetype.attribute
    return {
        "name": archetype.name,
        "cost": attr.cost,
        "power": attr.power if attr.power is not None else 0,
        "shields": attr.shields,
    }


_DEFAULT: Catalog | None = None


def default_catalog() -> Catalog:
    """The built-in card set, built on first use."""
    global _DEFAULT
    if _DEFAULT is None:
        from .cards import ALL_CARDS
        _DEFAULT = Catalog.of(ALL_CARDS)
    return _DEFAULT
