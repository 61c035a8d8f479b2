"""
Bot Personalities - Configurable play styles.

Personalities adjust:
- Evaluation weights (what the bot values)
- Risk tolerance (how far down the ranking the bot may pick)
- Randomness (probability of an unevaluated random action)
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any
import random

from .evaluator import EvaluationWeights


@dataclass
class Personality:
    """
    A bot personality that defines play style.
    """
    name: str
    description: str = ""

    # Evaluation weights
    weights: EvaluationWeights = field(default_factory=EvaluationWeights)

    # Behavioral parameters
    risk_tolerance: float = 0.0  # 0 = always the best, 1 = any evaluated action
    randomness: float = 0.0  # Probability of random action

    # Action preferences (multipliers on positive scores, by action type value)
    action_preferences: dict[str, float] = field(default_factory=dict)

    metadata: dict[str, Any] = field(default_factory=dict)


# ============================================================================
# Predefined Personalities
# ============================================================================

BALANCED = Personality(
    name="Balanced",
    description="Plays the best evaluated action",
)


AGGRESSIVE = Personality(
    name="Aggressive",
    description="Values hurting the opponent over protecting itself",
    weights=EvaluationWeights(opponent_life_factor=3, danger_penalty=50),
    risk_tolerance=0.2,
    action_preferences={"attack": 1.3},
)


DEFENSIVE = Personality(
    name="Defensive",
    description="Keeps blockers back and avoids low life",
    weights=EvaluationWeights(opponent_life_factor=1, field_value=2, danger_penalty=200),
    action_preferences={"block": 1.3},
)


CHAOTIC = Personality(
    name="Chaotic",
    description="Unpredictable play with high randomness",
    risk_tolerance=0.8,
    randomness=0.4,
)


# All predefined personalities
PERSONALITIES: dict[str, Personality] = {
    "balanced": BALANCED,
    "aggressive": AGGRESSIVE,
    "defensive": DEFENSIVE,
    "chaotic": CHAOTIC,
}


def create_random_personality(
    name: str = "Random",
    base: Personality | None = None,
    variance: float = 0.3,
    seed: int | None = None,
) -> Personality:
    """
    Create a personality with random variations.

    Args:
        name: Name for the personality
        base: Base personality to vary from (default: BALANCED)
        variance: How much to vary (0-1)
        seed: Random seed for reproducibility
    """
    rng = random.Random(seed)
    base = base or BALANCED

    def vary(value: int) -> int:
        delta = value * variance * (rng.random() * 2 - 1)
        return max(1, round(value + delta))

    weights = replace(
        base.weights,
        opponent_life_factor=vary(base.weights.opponent_life_factor),
        field_value=vary(base.weights.field_value),
        danger_penalty=vary(base.weights.danger_penalty),
    )
    return Personality(
        name=name,
        description=f"Randomly varied from {base.name}",
        weights=weights,
        risk_tolerance=max(0.0, min(1.0, base.risk_tolerance + variance * rng.random())),
        randomness=max(0.0, min(1.0, base.randomness + variance * 0.5 * rng.random())),
        action_preferences=base.action_preferences.copy(),
        metadata={"base": base.name, "variance": variance, "seed": seed},
    )
