"""
Players - Per-player zones, resources and end-game status.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterator

from .abilities import AbilityList
from .errors import PlayerNotFoundError
from .field import Field
from .shards import ShardList
from .zones import CardList, ZoneKind

if TYPE_CHECKING:
    from .card import Card
    from .ids import ObjectId


class EndgameReason(Enum):
    CONCEDE = "concede"
    LIFE_ZERO = "life_zero"
    DECK_OUT = "deck_out"
    SIMULTANEOUS_END = "simultaneous_end"


@dataclass(frozen=True)
class PlayerEndgameState:
    won: bool
    reason: EndgameReason

    @classmethod
    def win(cls, reason: EndgameReason) -> PlayerEndgameState:
        return cls(True, reason)

    @classmethod
    def lose(cls, reason: EndgameReason) -> PlayerEndgameState:
        return cls(False, reason)


@dataclass
class PlayerCounters:
    draw: int = 0
    free_casted: int = 0


@dataclass
class Player:
    id: int
    life: int = 2000
    deck: CardList = field(default_factory=CardList)
    hand: CardList = field(default_factory=CardList)
    graveyard: CardList = field(default_factory=CardList)
    colony: CardList = field(default_factory=CardList)
    limbo: CardList = field(default_factory=CardList)
    shards: ShardList = field(default_factory=ShardList)
    counters: PlayerCounters = field(default_factory=PlayerCounters)
    endgame: PlayerEndgameState | None = None
    abilities: AbilityList = field(default_factory=AbilityList)
    name: str = ""
    # Last: the attribute name shadows dataclasses.field in the class body.
    field: Field = field(default_factory=Field)

    def zone(self, kind: ZoneKind):
        return {
            ZoneKind.DECK: self.deck,
            ZoneKind.HAND: self.hand,
            ZoneKind.FIELD: self.field,
            ZoneKind.COLONY: self.colony,
            ZoneKind.GRAVEYARD: self.graveyard,
            ZoneKind.LIMBO: self.limbo,
        }[kind]

    def zones(self):
        return [self.deck, self.hand, self.field, self.colony, self.graveyard, self.limbo]

    def find_card(self, card_id: ObjectId) -> Card | None:
        for zone in self.zones():
            card = zone.get(card_id)
            if card is not None:
                return card
        return None

    def all_cards(self) -> Iterator[Card]:
        for zone in self.zones():
            yield from zone

    def reset_counters(self):
        self.counters = PlayerCounters()


@dataclass
class PlayerList:
    """Players in seating order, with the player in turn tracked."""
    players: list[Player] = field(default_factory=list)
    player_in_turn_id: int = 0

    def get(self, player_id: int) -> Player:
        for player in self.players:
            if player.id == player_id:
                return player
        raise PlayerNotFoundError(player_id)

    @property
    def player_in_turn(self) -> Player:
        return self.get(self.player_in_turn_id)

    def set_player_in_turn(self, player_id: int):
        self.get(player_id)
        self.player_in_turn_id = player_id

    def next_id(self, player_id: int) -> int:
        ids = [p.id for p in self.players]
        if player_id not in ids:
            raise PlayerNotFoundError(player_id)
        return ids[(ids.index(player_id) + 1) % len(ids)]

    def next_player(self, player_id: int) -> Player:
        return self.get(self.next_id(player_id))

    def __iter__(self) -> Iterator[Player]:
        """Iterate starting from the player in turn."""
        if not self.players:
            return iter(())
        ids = [p.id for p in self.players]
        start = ids.index(self.player_in_turn_id) if self.player_in_turn_id in ids else 0
        return iter(self.players[start:] + self.players[:start])

    def __len__(self) -> int:
        return len(self.players)
