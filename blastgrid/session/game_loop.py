"""
Game Loop - Plays a whole match between two bot policies.

The loop:
1. Each policy builds a command from the committed state
2. The reducer resolves both commands together
3. Repeat until the match is decided or the turn limit is hit

Matches are reproducible: same seed and same policies give the same
sequence of states.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..engine_core.reducer import Reducer
from ..engine_core.state import GameState, MatchStatus, PlayerId

if TYPE_CHECKING:
    from ..bots import BotPolicy
    from ..engine_core.action import Command


class LoopState(Enum):
    """How the loop stopped."""
    RUNNING = "running"
    GAME_OVER = "game_over"
    TURN_LIMIT = "turn_limit"


@dataclass
class TurnRecord:
    """Commands submitted for one turn."""
    turn: int
    p1_command: Command
    p2_command: Command


@dataclass
class LoopResult:
    """Result of running the loop."""
    loop_state: LoopState
    final_state: GameState
    turns_played: int = 0
    records: list[TurnRecord] = field(default_factory=list)

    @property
    def winner(self) -> PlayerId | None:
        if self.final_state.status is MatchStatus.P1_WIN:
            return PlayerId.P1
        if self.final_state.status is MatchStatus.P2_WIN:
            return PlayerId.P2
        return None


class GameLoop:
    """
    Bot-vs-bot match driver.

    Usage:
        loop = GameLoop(GreedyBot(), RandomPolicy(seed=1))
        result = loop.run(create_initial_state(seed=42))
        print(result.final_state.status)
    """

    def __init__(self, p1_policy: BotPolicy, p2_policy: BotPolicy, reducer: Reducer | None = None):
        self.policies = {PlayerId.P1: p1_policy, PlayerId.P2: p2_policy}
        self.reducer = reducer or Reducer()
        self.loop_state = LoopState.RUNNING

    def run(self, state: GameState, max_turns: int = 100) -> LoopResult:
        """Play from state until the match ends or max_turns turns are resolved."""
        records: list[TurnRecord] = []
        while not state.is_over and len(records) < max_turns:
            p1_command = self.policies[PlayerId.P1].select_command(state, PlayerId.P1).command
            p2_command = self.policies[PlayerId.P2].select_command(state, PlayerId.P2).command
            records.append(TurnRecord(turn=state.turn, p1_command=p1_command, p2_command=p2_command))
            state = self.reducer.resolve(state, p1_command, p2_command)

        self.loop_state = LoopState.GAME_OVER if state.is_over else LoopState.TURN_LIMIT
        return LoopResult(
            loop_state=self.loop_state,
            final_state=state,
            turns_played=len(records),
            records=records,
        )
