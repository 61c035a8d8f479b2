"""
Pytest fixtures for Shardfall tests.
"""

import pytest

from ..catalog import default_catalog, starter_deck
from ..engine_core.card import Card
from ..engine_core.config import DebugFlags, GameConfig, GameProfile, PlayerConfig, Regulation
from ..engine_core.environment import Environment
from ..engine_core.zones import ZoneKind
from ..rules.deck import DeckList


# Draws come off the end of the list, so the filler is drawn last.
FILLER_DECK = {"moon": 20}


def make_profile(
    decks=(FILLER_DECK, FILLER_DECK),
    seed: int = 7,
    debug: DebugFlags = DebugFlags.NONE,
    shuffle: bool = False,
) -> GameProfile:
    """Two-player profile; player 0 goes first unless shuffle is set."""
    return GameProfile(
        players=[
            PlayerConfig(deck=DeckList.of(dict(deck)), name=f"P{i}")
            for i, deck in enumerate(decks)
        ],
        config=GameConfig(
            rng_seed=seed,
            no_deck_shuffle=not shuffle,
            no_player_shuffle=not shuffle,
            debug=debug,
        ),
        regulation=Regulation.standard(),
    )


def put_card(env: Environment, player: int, archetype_id: str, zone_kind: ZoneKind = ZoneKind.HAND) -> Card:
    """Create a card directly in a zone, bypassing the rules."""
    state = env.state
    archetype = env.catalog.get(archetype_id)
    card = Card.new(state.ids, state.generations, archetype, player, zone_kind)
    state.players.get(player).zone(zone_kind).push(card)
    return card


@pytest.fixture
def catalog():
    """The built-in card catalog."""
    return default_catalog()


@pytest.fixture
def env(catalog) -> Environment:
    """Fresh unshuffled match, nothing dealt yet."""
    return Environment(make_profile(), catalog)


@pytest.fixture
def free_env(catalog) -> Environment:
    """Fresh match where casting costs nothing."""
    return Environment(make_profile(debug=DebugFlags.IGNORE_COST), catalog)


@pytest.fixture
def starter_profile(catalog) -> GameProfile:
    """Shuffled match between the two starter decks."""
    return GameProfile(
        players=[
            PlayerConfig(deck=starter_deck("crimson-rush", catalog), name="Crimson"),
            PlayerConfig(deck=starter_deck("tidal-grove", catalog), name="Tidal"),
        ],
        config=GameConfig(rng_seed=1234),
    )
