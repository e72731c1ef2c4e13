"""
Tests for the automated opponents.
"""

import pytest

from ..bots import GreedyBot, HeuristicEvaluator, IdlePolicy, RandomPolicy
from ..bots.evaluator import bomb_can_reach, count_adjacent_soft_walls
from ..engine_core.action import Command, normalize_command
from ..engine_core.projection import danger_cells, project
from ..engine_core.state import Cell, PlayerId, Position

P1 = PlayerId.P1
P2 = PlayerId.P2


class TestGreedyBot:
    """Tests for GreedyBot."""

    def test_escapes_own_bomb(self, make_floor_state, bomb_factory):
        """Standing on a bomb about to go off, the bot ends outside its blast."""
        state = make_floor_state(p1=(0, 0), p2=(3, 3))
        state.bombs = [bomb_factory("b1", P2, 3, 3, timer=1)]

        decision = GreedyBot().select_command(state, P2)
        final = project(state, P2, decision.command)

        assert final.position not in danger_cells(state)
        assert len(decision.command.moves) == 3

    def test_command_is_normalized(self, initial_state):
        decision = GreedyBot().select_command(initial_state, P2)

        assert normalize_command(decision.command) == decision.command
        assert len(decision.command.moves) <= 3
        assert decision.explanation

    def test_deterministic(self, initial_state):
        bot = GreedyBot()
        first = bot.select_command(initial_state, P1)
        second = bot.select_command(initial_state, P1)
        assert first.command == second.command

    def test_does_not_touch_state(self, initial_state):
        before = initial_state.clone()
        GreedyBot().select_command(initial_state, P2)
        assert initial_state == before

    def test_approaches_opponent(self, make_floor_state):
        state = make_floor_state(p1=(0, 3), p2=(6, 3))

        decision = GreedyBot().select_command(state, P2)
        final = project(state, P2, decision.command)

        assert final.position.manhattan(Position(0, 3)) < 6

    def test_boxed_in_stays(self, make_floor_state):
        state = make_floor_state(p1=(6, 6), p2=(0, 0))
        state.board[0][1] = Cell.SOLID_WALL
        state.board[1][0] = Cell.SOLID_WALL

        decision = GreedyBot().select_command(state, P2)

        assert decision.command.moves == ()
        assert decision.evaluated_moves == 0


class TestEvaluator:
    """Tests for the heuristic evaluator."""

    def test_bomb_can_reach(self, floor_state):
        assert bomb_can_reach(floor_state, Position(1, 1), Position(3, 1), 2)
        assert not bomb_can_reach(floor_state, Position(1, 1), Position(4, 1), 2)
        assert not bomb_can_reach(floor_state, Position(1, 1), Position(2, 2), 5)
        assert not bomb_can_reach(floor_state, Position(1, 1), Position(1, 1), 5)

    def test_bomb_reach_blocked_by_wall(self, floor_state):
        floor_state.board[1][2] = Cell.SOFT_WALL
        assert not bomb_can_reach(floor_state, Position(1, 1), Position(3, 1), 2)

    def test_count_adjacent_soft_walls(self, floor_state):
        floor_state.board[1][2] = Cell.SOFT_WALL
        floor_state.board[2][1] = Cell.SOFT_WALL
        floor_state.board[0][1] = Cell.SOLID_WALL
        assert count_adjacent_soft_walls(floor_state, Position(1, 1)) == 2

    def test_should_place_when_opponent_in_reach(self, make_floor_state):
        state = make_floor_state(p1=(1, 3), p2=(2, 3))
        evaluator = HeuristicEvaluator()
        player, opponent = state.players[P1], state.players[P2]

        assert evaluator.should_place_bomb(state, player, opponent, Position(1, 3))
        assert not evaluator.should_place_bomb(state, player, opponent, Position(1, 1))

    def test_should_place_near_soft_walls(self, floor_state):
        floor_state.board[1][2] = Cell.SOFT_WALL
        floor_state.board[2][1] = Cell.SOFT_WALL
        evaluator = HeuristicEvaluator()
        player, opponent = floor_state.players[P1], floor_state.players[P2]

        assert evaluator.should_place_bomb(floor_state, player, opponent, Position(1, 1))

    def test_backtrack_penalized(self, floor_state):
        evaluator = HeuristicEvaluator()
        player, opponent = floor_state.players[P1], floor_state.players[P2]
        before = project(floor_state, P1, {"moves": ["right"]})
        after = project(floor_state, P1, {"moves": ["right", "left"]})

        evaluation = evaluator.evaluate_move(floor_state, player, opponent, before, after, set())

        assert evaluation.feature_breakdown["wandering"] == pytest.approx(-5.2)
        assert evaluation.feature_breakdown["approach"] == pytest.approx(-2.0)
        assert evaluation.total_score == pytest.approx(-7.2)

    def test_danger_dominates(self, floor_state):
        evaluator = HeuristicEvaluator()
        player, opponent = floor_state.players[P1], floor_state.players[P2]
        before = project(floor_state, P1, {})
        after = project(floor_state, P1, {"moves": ["right"]})

        safe = evaluator.evaluate_move(floor_state, player, opponent, before, after, set())
        risky = evaluator.evaluate_move(floor_state, player, opponent, before, after, {Position(2, 1)})

        assert risky.total_score == pytest.approx(safe.total_score - 20.0)


class TestBaselinePolicies:
    """Tests for IdlePolicy and RandomPolicy."""

    def test_idle(self, initial_state):
        assert IdlePolicy().select_command(initial_state, P1).command == Command()

    def test_random_is_seeded(self, initial_state):
        first = RandomPolicy(seed=3).select_command(initial_state, P1)
        second = RandomPolicy(seed=3).select_command(initial_state, P1)
        assert first.command == second.command

    def test_random_commands_are_normalized(self, initial_state):
        policy = RandomPolicy(seed=11, bomb_chance=1.0)
        for _ in range(10):
            command = policy.select_command(initial_state, P2).command
            assert normalize_command(command) == command
            assert command.places_bomb
