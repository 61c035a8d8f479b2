"""
Lookahead Bot - One-ply search over the offered actions.

For each candidate action the bot:
1. Clones the match (clones are fully independent)
2. Submits the action to the clone
3. Plays the clone to the end of the next round with DefaultPolicy
4. Scores the result with HeuristicEvaluator

Candidates can be evaluated on a thread pool since they share nothing.
The bot does NOT search deeper than one decision of its own.
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING
import logging
import random

from ..engine_core.action import Action
from ..engine_core.state import Phase
from .evaluator import HeuristicEvaluator
from .personality import BALANCED, Personality
from .policy import BotDecision, BotPolicy, DefaultPolicy, enumerate_actions, offer_for

if TYPE_CHECKING:
    from ..engine_core.environment import Environment

logger = logging.getLogger(__name__)

# Scores for candidates the match rejects.
REJECTED_SCORE = -10 ** 9


def play_out_round(env: Environment, policy: BotPolicy | None = None, max_steps: int = 2000) -> Environment:
    """
    Advance env (in place) until the end phase of a later turn, or the end of the game.
    """
    policy = policy or DefaultPolicy()
    start_turn = env.state.turn
    for _ in range(max_steps):
        state = env.state
        if state.condition.is_ended:
            break
        if state.turn > start_turn and state.phase == Phase.END:
            break
        offer = env.available_actions()
        if offer is None:
            env.process(state.players.player_in_turn_id, Action.continue_())
            continue
        decision = policy.select_action(env, offer.player)
        report = env.process(offer.player, decision.action)
        if not report.ok:
            logger.debug("Play-out action rejected: %s", report.error.message)
            break
    return env


@dataclass
class LookaheadBot(BotPolicy):
    """
    Evaluating bot.

    Usage:
        bot = LookaheadBot(personality=AGGRESSIVE, seed=7)
        decision = bot.select_action(env, player)
    """
    personality: Personality = None  # type: ignore
    evaluator: HeuristicEvaluator = None  # type: ignore
    seed: int | None = None
    max_workers: int = 1
    max_candidates: int = 32

    def __post_init__(self):
        if self.personality is None:
            self.personality = BALANCED
        if self.evaluator is None:
            self.evaluator = HeuristicEvaluator(weights=self.personality.weights)
        self.rng = random.Random(self.seed)

    def select_action(self, env: Environment, player: int) -> BotDecision:
        """
        Select the best action using 1-ply lookahead.

        Process:
        1. Check for random action (personality.randomness)
        2. Evaluate each candidate action
        3. Apply personality preferences
        4. Select best (or near-best, with risk tolerance)
        """
        candidates = enumerate_actions(offer_for(env, player))[:self.max_candidates]
        if not candidates:
            raise ValueError("No legal actions available")

        if self.rng.random() < self.personality.randomness:
            action = self.rng.choice(candidates)
            return BotDecision(
                action=action,
                explanation=f"Random action (personality: {self.personality.name})",
            )

        if self.max_workers > 1 and len(candidates) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                scores = list(pool.map(lambda a: self.evaluate_action(env, player, a), candidates))
        else:
            scores = [self.evaluate_action(env, player, action) for action in candidates]

        scored = []
        for action, score in zip(candidates, scores):
            preference = self.personality.action_preferences.get(action.action_type.value, 1.0)
            scored.append((action, int(score * preference) if score > 0 else score))
        scored.sort(key=lambda item: item[1], reverse=True)

        action, best = self._select_with_variance(scored)
        return BotDecision(
            action=action,
            explanation=f"Selected {action.describe()} (score: {best}, personality: {self.personality.name})",
            confidence=min(1.0, len(scored) / 10),
            evaluated_actions=len(scored),
            best_score=best,
            evaluation_details={a.describe(): s for a, s in scored},
        )

    def evaluate_action(self, env: Environment, player: int, action: Action) -> int:
        """Score of the state one round after taking action."""
        sim = env.clone()
        report = sim.process(player, action)
        if not report.ok:
            return REJECTED_SCORE
        play_out_round(sim)
        return self.evaluator.evaluate(sim.state, player).total

    def _select_with_variance(self, scored: list[tuple[Action, int]]) -> tuple[Action, int]:
        """
        Pick among the top actions.

        risk_tolerance 0 = only the best, 1 = any candidate.
        """
        if len(scored) == 1 or self.personality.risk_tolerance <= 0:
            return scored[0]
        top_n = max(1, int(len(scored) * self.personality.risk_tolerance))
        return self.rng.choice(scored[:top_n])

    def get_name(self) -> str:
        return f"LookaheadBot({self.personality.name})"
