"""
Heuristic Evaluator - Scores candidate moves for bot decision-making.

A candidate move is scored on:
- Approach (how much closer it gets to the opponent)
- Danger (ending inside a blast that goes off this turn)
- Opportunity (items, soft walls next to the cell)
- Wandering (stepping back onto recently visited cells)

Weights can be adjusted to create different play styles.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..engine_core.state import Cell, Direction, Position

if TYPE_CHECKING:
    from ..engine_core.state import GameState, Player
    from ..engine_core.projection import Projection


@dataclass
class EvaluationWeights:
    """
    Weights for the heuristic evaluator.

    Higher values = more importance.
    """
    approach: float = 2.0
    danger: float = -20.0
    item: float = 5.0
    soft_wall_adjacent: float = 0.6
    backtrack: float = -4.0
    revisit: float = -1.2
    revisit_window: int = 3


@dataclass
class MoveEvaluation:
    """Result of scoring one candidate move."""
    total_score: float
    feature_breakdown: dict[str, float] = field(default_factory=dict)


def count_adjacent_soft_walls(state: GameState, position: Position) -> int:
    count = 0
    for direction in Direction:
        neighbour = position.step(direction)
        if state.in_bounds(neighbour) and state.cell_at(neighbour) is Cell.SOFT_WALL:
            count += 1
    return count


def bomb_can_reach(state: GameState, origin: Position, target: Position, reach: int) -> bool:
    """True when a bomb at origin would hit target through open floor."""
    if origin.x != target.x and origin.y != target.y:
        return False
    distance = origin.manhattan(target)
    if distance == 0 or distance > reach:
        return False
    dx = (target.x > origin.x) - (target.x < origin.x)
    dy = (target.y > origin.y) - (target.y < origin.y)
    for step in range(1, distance + 1):
        cell = state.cell_at(Position(origin.x + dx * step, origin.y + dy * step))
        if cell is not Cell.FLOOR:
            return False
    return True


class HeuristicEvaluator:
    """
    Evaluates candidate moves using weighted heuristics.

    Used by the greedy bot:
    1. Project the command so far
    2. Project the command plus each candidate move
    3. Score the resulting positions
    4. Keep the best one
    """

    def __init__(self, weights: EvaluationWeights | None = None):
        self.weights = weights or EvaluationWeights()

    def evaluate_move(
        self,
        state: GameState,
        player: Player,
        opponent: Player,
        before: Projection,
        after: Projection,
        danger: set[Position],
    ) -> MoveEvaluation:
        """Score moving from before.position to after.position."""
        w = self.weights
        features: dict[str, float] = {}
        position = after.position

        gained = before.position.manhattan(opponent.position) - position.manhattan(opponent.position)
        features["approach"] = gained * w.approach
        if position in danger:
            features["danger"] = w.danger
        if state.items_at(position):
            features["item"] = w.item
        features["soft_walls"] = count_adjacent_soft_walls(state, position) * w.soft_wall_adjacent
        features["wandering"] = self._wandering_penalty(player, before, position)

        return MoveEvaluation(
            total_score=sum(features.values()),
            feature_breakdown=features,
        )

    def _wandering_penalty(self, player: Player, before: Projection, position: Position) -> float:
        w = self.weights
        traversed = [player.position] + before.steps
        penalty = 0.0
        if len(traversed) >= 2 and traversed[-2] == position:
            penalty += w.backtrack
        recent = traversed[max(0, len(traversed) - 1 - w.revisit_window):-1]
        if position in recent:
            penalty += w.revisit
        return penalty

    def should_place_bomb(self, state: GameState, player: Player, opponent: Player, position: Position) -> bool:
        """Bomb when the opponent is in reach or enough soft walls are around."""
        if not opponent.alive:
            return False
        if bomb_can_reach(state, position, opponent.position, player.fire_power):
            return True
        soft_walls = count_adjacent_soft_walls(state, position)
        if soft_walls >= 2:
            return True
        return soft_walls >= 1 and position.manhattan(opponent.position) <= 2
