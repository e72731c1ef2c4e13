"""
Greedy Bot - The automated opponent.

The bot builds its command one move at a time:
- Projects the command built so far
- Lists the moves that would still succeed
- Prefers moves that stay out of next-tick blasts
- Scores each with the heuristic evaluator and keeps the best
- Finally decides whether to drop a bomb where it ends up

The bot does NOT:
- See the opponent's plan for this turn
- Search deeper than one move ahead
- Chain-predict explosions
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .policy import BotPolicy, BotDecision
from .evaluator import HeuristicEvaluator
from ..engine_core.action import Command
from ..engine_core.projection import candidate_moves, danger_cells, project
from ..engine_core.rules import RuleSet, DEFAULT_RULES

if TYPE_CHECKING:
    from ..engine_core.state import GameState, PlayerId


@dataclass
class GreedyBot(BotPolicy):
    """
    Greedy one-move-lookahead opponent.

    Usage:
        bot = GreedyBot()
        decision = bot.select_command(state, PlayerId.P2)
        next_state = resolve(state, p1_command, decision.command)
    """
    rules: RuleSet = DEFAULT_RULES
    evaluator: HeuristicEvaluator = None  # type: ignore

    def __post_init__(self):
        if self.evaluator is None:
            self.evaluator = HeuristicEvaluator()

    def select_command(self, state: GameState, player_id: PlayerId) -> BotDecision:
        player = state.players[player_id]
        opponent = state.players[player_id.opponent]
        command = Command()
        evaluated = 0
        scores: list[float] = []

        for _ in range(self.rules.bot_max_moves):
            projection = project(state, player_id, command, self.rules)
            moves = candidate_moves(state, player_id, projection)
            if not moves:
                break

            danger = danger_cells(state, projection.projected_bombs)
            safe_moves = [move for move in moves if move[1] not in danger]
            pool = safe_moves or moves

            best_direction = None
            best_score = float("-inf")
            for direction, _ in pool:
                candidate = command.with_move(direction)
                after = project(state, player_id, candidate, self.rules)
                after_danger = danger_cells(state, after.projected_bombs)
                evaluation = self.evaluator.evaluate_move(
                    state, player, opponent, projection, after, after_danger
                )
                evaluated += 1
                if evaluation.total_score > best_score:
                    best_score = evaluation.total_score
                    best_direction = direction

            if best_direction is None:
                break
            command = command.with_move(best_direction)
            scores.append(best_score)

        final = project(state, player_id, command, self.rules)
        final_danger = danger_cells(state, final.projected_bombs)
        placed = (
            final.can_place_bomb
            and final.position not in final_danger
            and self.evaluator.should_place_bomb(state, player, opponent, final.position)
        )
        if placed:
            command = command.with_bomb_at(len(command.moves))

        return BotDecision(
            command=command,
            explanation=self._explain(command, placed),
            evaluated_moves=evaluated,
            evaluation_details={"move_scores": scores},
        )

    def _explain(self, command: Command, placed: bool) -> str:
        path = " ".join(direction.label for direction in command.moves) or "stay"
        if placed:
            return f"{path}, then bomb"
        return path
