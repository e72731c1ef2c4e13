"""
Bot Policy - Interface for automated opponents.

A BotPolicy looks at the committed state and builds a full turn
command for its player. Policies only ever read the state through the
projection helper; they never call the reducer themselves.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
import random

from ..engine_core.action import Command
from ..engine_core.projection import candidate_moves, project
from ..engine_core.rules import RuleSet, DEFAULT_RULES

if TYPE_CHECKING:
    from ..engine_core.state import GameState, PlayerId


@dataclass
class BotDecision:
    """
    A command chosen by a bot.

    Contains:
    - The command to submit
    - Explanation (for UI/debugging)
    - How many candidate moves were looked at
    """
    command: Command
    explanation: str = ""
    evaluated_moves: int = 0
    evaluation_details: dict[str, Any] = field(default_factory=dict)


class BotPolicy(ABC):
    """
    Abstract base class for bot policies.

    Implementations range from random walks to heuristic search.
    """

    @abstractmethod
    def select_command(self, state: GameState, player_id: PlayerId) -> BotDecision:
        """
        Build a command for player_id.

        Args:
            state: Committed game state (not modified)
            player_id: The player this bot controls

        Returns:
            BotDecision with the command to submit
        """
        pass

    def get_name(self) -> str:
        """Get the bot's name/identifier."""
        return self.__class__.__name__


class IdlePolicy(BotPolicy):
    """Submits the empty command every turn. Used for scenarios and tests."""

    def select_command(self, state: GameState, player_id: PlayerId) -> BotDecision:
        return BotDecision(command=Command(), explanation="Idle")


class RandomPolicy(BotPolicy):
    """
    Random policy - wanders through moves that currently succeed.

    Used for:
    - Testing
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None, bomb_chance: float = 0.3, rules: RuleSet = DEFAULT_RULES):
        self.rng = random.Random(seed)
        self.bomb_chance = bomb_chance
        self.rules = rules

    def select_command(self, state: GameState, player_id: PlayerId) -> BotDecision:
        command = Command()
        evaluated = 0
        for _ in range(self.rules.bot_max_moves):
            projection = project(state, player_id, command, self.rules)
            moves = candidate_moves(state, player_id, projection)
            evaluated += len(moves)
            if not moves or self.rng.random() < 0.25:
                break
            direction, _ = self.rng.choice(moves)
            command = command.with_move(direction)

        if self.rng.random() < self.bomb_chance:
            step = self.rng.randint(0, len(command.moves))
            command = command.with_bomb_at(step)

        return BotDecision(
            command=command,
            explanation="Selected randomly",
            evaluated_moves=evaluated,
        )
