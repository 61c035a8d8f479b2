"""
Game log - One entry per observable effect of an opcode.

The log is the replay/audit surface: it is what clients animate and what
determinism checks compare.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .card import CardSnapshot


class LogKind(Enum):
    GAME_STARTED = "game_started"
    GAME_ENDED = "game_ended"
    TURN_CHANGED = "turn_changed"
    PHASE_CHANGED = "phase_changed"
    ATTACK_DECLARED = "attack_declared"
    CREATURE_ATTACKED_CREATURE = "creature_attacked_creature"
    CREATURE_ATTACKED_PLAYER = "creature_attacked_player"
    LIFE_CHANGED = "life_changed"
    DAMAGE_TAKEN = "damage_taken"
    SHARDS_EARNED = "shards_earned"
    SHARDS_SPENT = "shards_spent"
    CARD_MOVED = "card_moved"
    CARD_TOKEN_GENERATED = "card_token_generated"
    CARD_TOKEN_DESTROYED = "card_token_destroyed"
    DECK_SHUFFLED = "deck_shuffled"
    EFFECT_ACTIVATED = "effect_activated"
    CARD_TARGETED = "card_targeted"
    SHIELD_BROKEN = "shield_broken"


_TEMPLATES = {
    LogKind.GAME_STARTED: "Game started",
    LogKind.GAME_ENDED: "Game ended: winner {winner} ({reason})",
    LogKind.TURN_CHANGED: "Turn {turn}: player {player}",
    LogKind.PHASE_CHANGED: "Phase: {phase}",
    LogKind.ATTACK_DECLARED: "{card} declares an attack",
    LogKind.CREATURE_ATTACKED_CREATURE: "{card} attacks {target}",
    LogKind.CREATURE_ATTACKED_PLAYER: "{card} attacks player {player}",
    LogKind.LIFE_CHANGED: "Player {player} life is now {life}",
    LogKind.DAMAGE_TAKEN: "Player {player} takes {amount} damage",
    LogKind.SHARDS_EARNED: "Player {player} earns {amount} {color} shard(s) from {card}",
    LogKind.SHARDS_SPENT: "Player {player} spends {amount} {color} shard(s) on {card}",
    LogKind.CARD_MOVED: "{card} moves from {from_zone} to {to_zone} ({reason})",
    LogKind.CARD_TOKEN_GENERATED: "{card} token is generated",
    LogKind.CARD_TOKEN_DESTROYED: "{card} token is destroyed",
    LogKind.DECK_SHUFFLED: "Player {player} shuffles their deck",
    LogKind.EFFECT_ACTIVATED: "{card} activates {effect_id}",
    LogKind.CARD_TARGETED: "{card} targets {target}",
    LogKind.SHIELD_BROKEN: "{card} loses a shield",
}


@dataclass(frozen=True)
class GameLog:
    kind: LogKind
    player: int | None = None
    card: CardSnapshot | None = None
    target: CardSnapshot | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def describe(self) -> str:
        values = dict(self.data)
        values["player"] = self.player
        values["card"] = self.card.name if self.card and self.card.name else "a card"
        values["target"] = self.target.name if self.target and self.target.name else "a card"
        return _TEMPLATES[self.kind].format(**values)

    def redacted(self, viewer: int) -> GameLog:
        """Hide card identities the viewer is not allowed to see."""
        if self.kind != LogKind.CARD_MOVED or self.card is None:
            return self
        hidden = {"deck", "hand"}
        from_kind = self.data.get("from_zone", "").split("[")[0]
        to_kind = self.data.get("to_zone", "").split("[")[0]
        if self.card.owner != viewer and from_kind in hidden and to_kind in hidden:
            return GameLog(self.kind, self.player, self.card.redacted(), self.target, self.data)
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "player": self.player,
            "card": self.card.to_dict() if self.card else None,
            "target": self.target.to_dict() if self.target else None,
            "data": dict(self.data),
            "message": self.describe(),
        }

    # -------------------------------------------------------------------------
    # Factories
    # -------------------------------------------------------------------------

    @classmethod
    def game_started(cls) -> GameLog:
        return cls(LogKind.GAME_STARTED)

    @classmethod
    def game_ended(cls, winner: int | None, reason: str) -> GameLog:
        return cls(LogKind.GAME_ENDED, data={"winner": winner, "reason": reason})

    @classmethod
    def turn_changed(cls, turn: int, player: int) -> GameLog:
        return cls(LogKind.TURN_CHANGED, player=player, data={"turn": turn})

    @classmethod
    def phase_changed(cls, phase: str) -> GameLog:
        return cls(LogKind.PHASE_CHANGED, data={"phase": phase})

    @classmethod
    def attack_declared(cls, attacker: CardSnapshot) -> GameLog:
        return cls(LogKind.ATTACK_DECLARED, card=attacker)

    @classmethod
    def creature_attacked_creature(cls, attacker: CardSnapshot, blocker: CardSnapshot) -> GameLog:
        return cls(LogKind.CREATURE_ATTACKED_CREATURE, card=attacker, target=blocker)

    @classmethod
    def creature_attacked_player(cls, attacker: CardSnapshot, player: int) -> GameLog:
        return cls(LogKind.CREATURE_ATTACKED_PLAYER, player=player, card=attacker)

    @classmethod
    def life_changed(cls, player: int, life: int) -> GameLog:
        return cls(LogKind.LIFE_CHANGED, player=player, data={"life": life})

    @classmethod
    def damage_taken(cls, player: int, amount: int) -> GameLog:
        return cls(LogKind.DAMAGE_TAKEN, player=player, data={"amount": amount})

    @classmethod
    def shards_earned(cls, player: int, source: CardSnapshot, color: str, amount: int) -> GameLog:
        return cls(LogKind.SHARDS_EARNED, player=player, card=source, data={"color": color, "amount": amount})

    @classmethod
    def shards_spent(cls, player: int, source: CardSnapshot, color: str, amount: int) -> GameLog:
        return cls(LogKind.SHARDS_SPENT, player=player, card=source, data={"color": color, "amount": amount})

    @classmethod
    def card_moved(cls, player: int, card: CardSnapshot, from_zone: str, to_zone: str, reason: str) -> GameLog:
        return cls(
            LogKind.CARD_MOVED,
            player=player,
            card=card,
            data={"from_zone": from_zone, "to_zone": to_zone, "reason": reason},
        )

    @classmethod
    def card_token_generated(cls, card: CardSnapshot) -> GameLog:
        return cls(LogKind.CARD_TOKEN_GENERATED, player=card.owner, card=card)

    @classmethod
    def card_token_destroyed(cls, card: CardSnapshot) -> GameLog:
        return cls(LogKind.CARD_TOKEN_DESTROYED, player=card.owner, card=card)

    @classmethod
    def deck_shuffled(cls, player: int) -> GameLog:
        return cls(LogKind.DECK_SHUFFLED, player=player)

    @classmethod
    def effect_activated(cls, source: CardSnapshot, effect_id: str) -> GameLog:
        return cls(LogKind.EFFECT_ACTIVATED, card=source, data={"effect_id": effect_id})

    @classmethod
    def card_targeted(cls, source: CardSnapshot, target: CardSnapshot) -> GameLog:
        return cls(LogKind.CARD_TARGETED, card=source, target=target)

    @classmethod
    def shield_broken(cls, card: CardSnapshot) -> GameLog:
        return cls(LogKind.SHIELD_BROKEN, card=card)
