"""
Bots module - Automated players.

Provides:
- BotPolicy: Interface for bot decision-making
- HeuristicEvaluator: Scores game states
- SimpleBot: Rule-of-thumb play
- LookaheadBot: One-ply search with personalities
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy, DefaultPolicy, enumerate_actions
from .evaluator import HeuristicEvaluator, EvaluationWeights, StateEvaluation
from .personality import Personality, PERSONALITIES
from .simple_bot import SimpleBot
from .lookahead_bot import LookaheadBot, play_out_round

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "DefaultPolicy",
    "enumerate_actions",
    "HeuristicEvaluator",
    "EvaluationWeights",
    "StateEvaluation",
    "Personality",
    "PERSONALITIES",
    "SimpleBot",
    "LookaheadBot",
    "play_out_round",
]
