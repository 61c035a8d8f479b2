"""
Catalog - Card archetypes, their effects and starter decks.

The catalog is a closed registry compiled together with the engine:
archetype id -> CardArchetype (attributes + effect factory).
"""

from .registry import Catalog, default_catalog
from .decks import STARTER_DECKS, starter_deck

__all__ = [
    "Catalog",
    "default_catalog",
    "STARTER_DECKS",
    "starter_deck",
]
