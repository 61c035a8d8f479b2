"""
Local view - What one player is allowed to see of a match.

Decks of both players and the opponent's hand are reduced to counts.
Cards in public zones (field, graveyard, colony) are shown in full.
Available actions are included only when they belong to the viewer.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .card import CardSnapshot
from .effect import LocalStackItem

if TYPE_CHECKING:
    from .action import PlayerAvailableActions
    from .environment import Environment
    from .log import GameLog
    from .player import Player


@dataclass
class LocalPlayer:
    id: int
    name: str
    life: int
    shards: dict[str, int]
    deck_count: int
    hand_count: int
    hand: list[CardSnapshot] | None
    field: list[CardSnapshot]
    graveyard: list[CardSnapshot]
    colony: list[CardSnapshot]

    @classmethod
    def from_player(cls, player: Player, viewer: int) -> LocalPlayer:
        visible_hand = player.id == viewer
        return cls(
            id=player.id,
            name=player.name,
            life=player.life,
            shards=player.shards.to_dict(),
            deck_count=len(player.deck),
            hand_count=len(player.hand),
            hand=[card.snapshot() for card in player.hand] if visible_hand else None,
            field=[card.snapshot() for card in player.field],
            graveyard=[card.snapshot() for card in player.graveyard],
            colony=[card.snapshot() for card in player.colony],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "life": self.life,
            "shards": dict(self.shards),
            "deck_count": self.deck_count,
            "hand_count": self.hand_count,
            "hand": [c.to_dict() for c in self.hand] if self.hand is not None else None,
            "field": [c.to_dict() for c in self.field],
            "graveyard": [c.to_dict() for c in self.graveyard],
            "colony": [c.to_dict() for c in self.colony],
        }


@dataclass
class LocalEnvironment:
    viewer: int
    turn: int
    phase: str
    player_in_turn: int
    players: list[LocalPlayer]
    stack: list[LocalStackItem]
    available_actions: PlayerAvailableActions | None = None
    logs: list[GameLog] = field(default_factory=list)
    winner: int | None = None
    ended: bool = False

    @classmethod
    def from_env(cls, env: Environment, viewer: int, log_offset: int = 0) -> LocalEnvironment:
        state = env.state
        offer = env.available_actions()
        if offer is not None and offer.player != viewer:
            offer = None
        return cls(
            viewer=viewer,
            turn=state.turn,
            phase=state.phase.value,
            player_in_turn=state.players.player_in_turn_id,
            players=[LocalPlayer.from_player(p, viewer) for p in state.players.players],
            stack=state.stack.local(),
            available_actions=offer,
            logs=[entry.redacted(viewer) for entry in env.logs[log_offset:]],
            winner=state.condition.winner,
            ended=state.condition.is_ended,
        )

    def player(self, player_id: int) -> LocalPlayer | None:
        for player in self.players:
            if player.id == player_id:
                return player
        return None
