"""
Heuristic Evaluator - Scores game states for bot decision-making.

The evaluator assigns an integer score to a state from one side's
point of view, built from:
- Life (own life counts once, the opponent's twice)
- Material (shards, cards in hand at half value, cards on the field)
- Player abilities
- Danger (a penalty when close to losing) and terminal outcomes

Weights can be adjusted to create different personalities.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..engine_core.player import Player
    from ..engine_core.state import GameState


@dataclass
class EvaluationWeights:
    """
    Weights for the heuristic evaluator.

    Life is scored in units of life_unit; everything else is a count.
    """
    life_unit: int = 100
    opponent_life_factor: int = 2
    shard_value: int = 1
    hand_divisor: int = 2
    field_value: int = 1
    ability_value: int = 1

    # Below this share of the initial life the position counts as lost-ish
    danger_threshold: float = 0.2
    danger_penalty: int = 100

    win_bonus: int = 1000
    loss_penalty: int = 1000
    draw_penalty: int = 500


@dataclass
class StateEvaluation:
    """
    Result of evaluating a game state.
    """
    total: int
    player_scores: dict[int, int] = field(default_factory=dict)
    feature_breakdown: dict[str, int] = field(default_factory=dict)


class HeuristicEvaluator:
    """
    Evaluates game states using weighted heuristics.

    Used by bots for 1-ply lookahead:
    1. Enumerate the offered actions
    2. Apply each action to a clone of the match
    3. Evaluate the resulting states
    4. Select the action leading to the best state
    """

    def __init__(self, weights: EvaluationWeights | None = None):
        self.weights = weights or EvaluationWeights()

    def evaluate(self, state: GameState, side: int) -> StateEvaluation:
        """
        Evaluate a game state from side's perspective.

        Positive totals are good for side.
        """
        w = self.weights
        player = state.players.get(side)
        opponent = state.players.next_player(side)

        features = {
            "life": player.life // w.life_unit - opponent.life // w.life_unit * w.opponent_life_factor,
            "shards": (len(player.shards) - len(opponent.shards)) * w.shard_value,
            "hand": self._hand(player) - self._hand(opponent),
            "field": self._field(player) - self._field(opponent),
            "abilities": (player.abilities.score() - opponent.abilities.score()) * w.ability_value,
        }

        if player.life < state.regulation.initial_life * w.danger_threshold:
            features["danger"] = -w.danger_penalty

        condition = state.condition
        if condition.is_ended:
            if condition.winner is None:
                features["outcome"] = -w.draw_penalty
            elif condition.winner == side:
                features["outcome"] = w.win_bonus
            else:
                features["outcome"] = -w.loss_penalty

        return StateEvaluation(
            total=sum(features.values()),
            player_scores={p.id: self._material(p) for p in state.players.players},
            feature_breakdown=features,
        )

    def _hand(self, player: Player) -> int:
        return sum(card.score() for card in player.hand) // self.weights.hand_divisor

    def _field(self, player: Player) -> int:
        return sum(card.score() for card in player.field) * self.weights.field_value

    def _material(self, player: Player) -> int:
        return self._hand(player) + self._field(player) + len(player.shards)
