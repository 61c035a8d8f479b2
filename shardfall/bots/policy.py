"""
Bot Policy - Interface for bot decision-making.

A BotPolicy looks at a running match and the actions offered to its
player and returns a BotDecision. Prompts raised by effects (choose a
card) are offered the same way as turn actions, so one entry point
covers both.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from itertools import combinations, product
from typing import TYPE_CHECKING, Any
import random

from ..engine_core.action import Action, ActionType

if TYPE_CHECKING:
    from ..engine_core.action import PlayerAvailableActions
    from ..engine_core.environment import Environment


@dataclass
class BotDecision:
    """
    A decision made by a bot.

    Contains:
    - The action to take
    - Explanation (for logs and the CLI)
    - Evaluation details (for debugging)
    """
    action: Action
    explanation: str = ""
    confidence: float = 1.0
    evaluated_actions: int = 0
    best_score: int = 0
    evaluation_details: dict[str, Any] = field(default_factory=dict)


def enumerate_actions(offer: PlayerAvailableActions) -> list[Action]:
    """Every concrete action allowed by an offer, in offer order."""
    actions: list[Action] = []
    for available in offer.actions:
        kind = available.action_type
        if kind == ActionType.CAST_CARD:
            actions.extend(Action.cast_card(card) for card in available.cards)
        elif kind == ActionType.SELECT_CARD:
            actions.extend(Action.select_card(card) for card in available.cards)
        elif kind == ActionType.ATTACK:
            for size in range(len(available.cards) + 1):
                actions.extend(Action.attack(combo) for combo in combinations(available.cards, size))
        elif kind == ActionType.BLOCK:
            choices = [None, *available.attackers]
            for assignment in product(choices, repeat=len(available.cards)):
                blocked = [a for a in assignment if a is not None]
                if len(set(blocked)) != len(blocked):
                    continue
                pairs = [(a, b) for b, a in zip(available.cards, assignment) if a is not None]
                actions.append(Action.block(pairs))
        else:
            action = available.default_action()
            if action is not None:
                actions.append(action)
    return actions


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    A policy defines how a bot selects actions.
    """

    @abstractmethod
    def select_action(self, env: Environment, player: int) -> BotDecision:
        """
        Select an action from the actions currently offered to player.

        Raises ValueError when nothing is offered to player.
        """

    def get_name(self) -> str:
        return self.__class__.__name__


def offer_for(env: Environment, player: int) -> PlayerAvailableActions:
    offer = env.available_actions()
    if offer is None or offer.player != player:
        raise ValueError(f"No actions offered to player {player}")
    return offer


class RandomPolicy(BotPolicy):
    """
    Random policy - selects actions uniformly at random.

    Used for:
    - Testing
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_action(self, env: Environment, player: int) -> BotDecision:
        actions = enumerate_actions(offer_for(env, player))
        if not actions:
            raise ValueError("No legal actions available")
        action = self.rng.choice(actions)
        return BotDecision(
            action=action,
            explanation="Selected randomly",
            confidence=1.0 / len(actions),
            evaluated_actions=len(actions),
        )


class FirstLegalPolicy(BotPolicy):
    """
    First-legal policy - always selects the first legal action.

    Used for:
    - Deterministic testing
    - Baseline comparison
    """

    def select_action(self, env: Environment, player: int) -> BotDecision:
        actions = enumerate_actions(offer_for(env, player))
        if not actions:
            raise ValueError("No legal actions available")
        return BotDecision(
            action=actions[0],
            explanation="Selected first legal action",
            evaluated_actions=1,
        )


class DefaultPolicy(BotPolicy):
    """Submits the offer's default action; used to play out simulations."""

    def select_action(self, env: Environment, player: int) -> BotDecision:
        offer = offer_for(env, player)
        action = offer.default_action()
        if action is None:
            return FirstLegalPolicy().select_action(env, player)
        return BotDecision(action=action, explanation="Default action")
