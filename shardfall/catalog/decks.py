"""
Starter decks, as deck-list text.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ..rules.deck import DeckList

if TYPE_CHECKING:
    from .registry import Catalog


CRIMSON_RUSH = """
# Aggressive red
Bambooster 4
Orepecker 4
Diamond Porcupine 3
Pyrosnail 3
Wind-Up Spider 3
Coppermine Scorpion 3
"""

TIDAL_GROVE = """
# Green and blue tempo
Vigilant Lynx 3
Moonlit Gecko 3
Scrapyard Raven 3
Voracious Anteater 2
Airborne Eagle Ray 3
Binary Starfish 2
Soundless Owl 2
Electric Clione 2
"""

STARTER_DECKS = {
    "crimson-rush": CRIMSON_RUSH,
    "tidal-grove": TIDAL_GROVE,
}


def starter_deck(name: str, catalog: Catalog) -> DeckList:
    if name not in STARTER_DECKS:
        raise KeyError(f"Unknown starter deck: {name}")
    return DeckList.parse(STARTER_DECKS[name], catalog, name=name)
