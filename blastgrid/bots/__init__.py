"""
Bots module - Automated opponents.

Provides:
- BotPolicy: Interface for building a turn command
- HeuristicEvaluator: Scores candidate moves
- GreedyBot: One-move-lookahead opponent
- RandomPolicy / IdlePolicy: Baselines for tests and simulations
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, IdlePolicy
from .evaluator import HeuristicEvaluator, EvaluationWeights
from .greedy_bot import GreedyBot

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "IdlePolicy",
    "HeuristicEvaluator",
    "EvaluationWeights",
    "GreedyBot",
]
