"""
Action System - Player actions and the sets of actions on offer.

Actions represent:
1. Player decisions (cast, attack, block, select, end turn)
2. Prompt answers while a stack item waits for a choice
3. Debug commands (only honored with the DEBUG_COMMAND flag)

The controller offers a PlayerAvailableActions for one player at a time;
anything outside that set is rejected before touching the state.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .ids import TimedObjectId


class ActionType(Enum):
    """Types of actions a player can submit."""
    CONCEDE = "concede"
    CAST_CARD = "cast_card"
    SELECT_CARD = "select_card"
    ATTACK = "attack"
    BLOCK = "block"
    END_TURN = "end_turn"
    CONTINUE = "continue"
    DEBUG_COMMAND = "debug_command"


@dataclass(frozen=True)
class Action:
    """
    A complete action submitted to the controller.

    Different action types use different fields; the factories below are the
    intended way to build them.
    """
    action_type: ActionType
    card: TimedObjectId | None = None
    attackers: tuple[TimedObjectId, ...] = ()
    pairs: tuple[tuple[TimedObjectId, TimedObjectId], ...] = ()
    commands: tuple[Any, ...] = ()

    @classmethod
    def concede(cls) -> Action:
        return cls(ActionType.CONCEDE)

    @classmethod
    def cast_card(cls, card: TimedObjectId) -> Action:
        return cls(ActionType.CAST_CARD, card=card)

    @classmethod
    def select_card(cls, card: TimedObjectId) -> Action:
        return cls(ActionType.SELECT_CARD, card=card)

    @classmethod
    def attack(cls, attackers: list[TimedObjectId] | tuple[TimedObjectId, ...] = ()) -> Action:
        return cls(ActionType.ATTACK, attackers=tuple(attackers))

    @classmethod
    def block(cls, pairs: list[tuple[TimedObjectId, TimedObjectId]] | tuple = ()) -> Action:
        """pairs are (attacker, blocker)."""
        return cls(ActionType.BLOCK, pairs=tuple(tuple(p) for p in pairs))

    @classmethod
    def end_turn(cls) -> Action:
        return cls(ActionType.END_TURN)

    @classmethod
    def continue_(cls) -> Action:
        return cls(ActionType.CONTINUE)

    @classmethod
    def debug_command(cls, commands: list[Any]) -> Action:
        return cls(ActionType.DEBUG_COMMAND, commands=tuple(commands))

    def describe(self) -> str:
        if self.action_type == ActionType.CAST_CARD:
            return f"cast {self.card}"
        if self.action_type == ActionType.SELECT_CARD:
            return f"select {self.card}"
        if self.action_type == ActionType.ATTACK:
            return "attack with " + (", ".join(str(a) for a in self.attackers) or "nothing")
        if self.action_type == ActionType.BLOCK:
            return "block " + (", ".join(f"{a}<-{b}" for a, b in self.pairs) or "nothing")
        return self.action_type.value


# Offer order; also the order default_action() scans.
_AVAILABLE_ORDER = [
    ActionType.SELECT_CARD,
    ActionType.ATTACK,
    ActionType.BLOCK,
    ActionType.CAST_CARD,
    ActionType.END_TURN,
    ActionType.CONTINUE,
]


@dataclass(frozen=True)
class AvailableAction:
    """
    One offered action kind.

    cards holds the candidates: castable cards, selectable cards,
    possible attackers or possible blockers depending on the type.
    attackers is only used by BLOCK.
    """
    action_type: ActionType
    cards: tuple[TimedObjectId, ...] = ()
    attackers: tuple[TimedObjectId, ...] = ()

    @classmethod
    def cast_card(cls, cards: list[TimedObjectId]) -> AvailableAction:
        return cls(ActionType.CAST_CARD, cards=tuple(cards))

    @classmethod
    def select_card(cls, cards: list[TimedObjectId]) -> AvailableAction:
        return cls(ActionType.SELECT_CARD, cards=tuple(cards))

    @classmethod
    def attack(cls, attackers: list[TimedObjectId]) -> AvailableAction:
        return cls(ActionType.ATTACK, cards=tuple(attackers))

    @classmethod
    def block(cls, blockers: list[TimedObjectId], attackers: list[TimedObjectId]) -> AvailableAction:
        return cls(ActionType.BLOCK, cards=tuple(blockers), attackers=tuple(attackers))

    @classmethod
    def end_turn(cls) -> AvailableAction:
        return cls(ActionType.END_TURN)

    @classmethod
    def continue_(cls) -> AvailableAction:
        return cls(ActionType.CONTINUE)

    def allows(self, action: Action) -> bool:
        if action.action_type != self.action_type:
            return False
        if self.action_type in (ActionType.CAST_CARD, ActionType.SELECT_CARD):
            return action.card in self.cards
        if self.action_type == ActionType.ATTACK:
            return (
                len(set(action.attackers)) == len(action.attackers)
                and all(a in self.cards for a in action.attackers)
            )
        if self.action_type == ActionType.BLOCK:
            blockers = [b for _, b in action.pairs]
            return (
                len(set(blockers)) == len(blockers)
                and all(b in self.cards for b in blockers)
                and all(a in self.attackers for a, _ in action.pairs)
            )
        return True

    def default_action(self) -> Action | None:
        if self.action_type == ActionType.SELECT_CARD and self.cards:
            return Action.select_card(min(self.cards, key=lambda c: c.timestamp))
        if self.action_type == ActionType.ATTACK:
            return Action.attack([])
        if self.action_type == ActionType.BLOCK:
            return Action.block([])
        if self.action_type == ActionType.END_TURN:
            return Action.end_turn()
        if self.action_type == ActionType.CONTINUE:
            return Action.continue_()
        return None


@dataclass
class PlayerAvailableActions:
    """The actions currently offered to one player."""
    player: int
    actions: list[AvailableAction] = field(default_factory=list)
    instructions: str | None = None

    def __post_init__(self):
        self.actions = sorted(self.actions, key=lambda a: _AVAILABLE_ORDER.index(a.action_type))

    def validate(self, player: int, action: Action) -> bool:
        if player != self.player:
            return False
        return any(available.allows(action) for available in self.actions)

    def get(self, action_type: ActionType) -> AvailableAction | None:
        for available in self.actions:
            if available.action_type == action_type:
                return available
        return None

    def default_action(self) -> Action | None:
        """Action an automated caller can submit without choosing."""
        for available in self.actions:
            action = available.default_action()
            if action is not None:
                return action
        return None

    @property
    def is_empty(self) -> bool:
        return not self.actions
