"""
Tests for single-player projection and danger cells.
"""

from ..engine_core.projection import candidate_moves, danger_cells, project
from ..engine_core.reducer import resolve
from ..engine_core.state import Cell, Direction, PlayerId, Position

P1 = PlayerId.P1
P2 = PlayerId.P2


class TestProject:
    """Tests for project()."""

    def test_empty_command(self, floor_state):
        projection = project(floor_state, P1, {})

        assert projection.position == Position(1, 1)
        assert projection.steps == []
        assert projection.ap_start == 3
        assert projection.ap_remaining == 3
        assert projection.can_move_more
        assert projection.can_place_bomb

    def test_moves_and_ap(self, floor_state):
        projection = project(floor_state, P1, {"moves": ["right", "down"]})

        assert projection.position == Position(2, 2)
        assert projection.steps == [Position(2, 1), Position(2, 2)]
        assert projection.ap_remaining == 1

    def test_blocked_move_costs_ap(self, floor_state):
        floor_state.board[1][2] = Cell.SOFT_WALL

        projection = project(floor_state, P1, {"moves": ["right"]})

        assert projection.position == Position(1, 1)
        assert projection.ap_remaining == 2

    def test_opponent_blocks(self, make_floor_state):
        state = make_floor_state(p1=(2, 3), p2=(3, 3))

        projection = project(state, P1, {"moves": ["right"]})

        assert projection.position == Position(2, 3)

    def test_planned_bomb(self, floor_state):
        floor_state.players[P1].fire_power = 2

        projection = project(floor_state, P1, {"moves": ["right"], "placeBombStep": 0})

        assert projection.planned_bomb is not None
        assert projection.planned_bomb.position == Position(1, 1)
        assert projection.planned_bomb.range == 2
        assert projection.planned_bomb.timer == 2
        assert not projection.can_place_bomb
        assert projection.ap_remaining == 1

    def test_out_of_ap(self, floor_state):
        projection = project(floor_state, P1, {"moves": ["right", "right", "right", "down"]})

        assert projection.position == Position(4, 1)
        assert projection.ap_remaining == 0
        assert not projection.can_move_more
        assert not projection.can_place_bomb

    def test_boots_bonus(self, floor_state):
        floor_state.players[P1].boots_turns = 2

        projection = project(floor_state, P1, {"moves": ["right"] * 4})

        assert projection.position == Position(5, 1)
        assert not projection.can_move_more

    def test_penalty_reduces_ap(self, floor_state):
        floor_state.players[P1].ap_end = 2
        floor_state.players[P1].ap_penalty_next = True

        assert project(floor_state, P1, {}).ap_start == 4

    def test_kick_moves_projected_bomb_only(self, floor_state, bomb_factory):
        floor_state.players[P1].kick = True
        floor_state.bombs = [bomb_factory("b1", P2, 2, 1, timer=3)]

        projection = project(floor_state, P1, {"moves": ["right"]})

        assert projection.position == Position(2, 1)
        assert projection.bomb_at(Position(3, 1)) is not None
        assert floor_state.bombs[0].position == Position(2, 1)

    def test_bomb_blocks_without_kick(self, floor_state, bomb_factory):
        floor_state.bombs = [bomb_factory("b1", P2, 2, 1, timer=3)]

        projection = project(floor_state, P1, {"moves": ["right"]})

        assert projection.position == Position(1, 1)

    def test_staged_bomb_blocks_return(self, make_floor_state):
        """Walking back onto the bomb just placed fails, as in the resolver."""
        state = make_floor_state(p1=(2, 2), p2=(6, 6))
        command = {"moves": ["right", "left"], "placeBombStep": 0}

        projection = project(state, P1, command)

        assert projection.position == Position(3, 2)
        assert projection.position == resolve(state, command, {}).players[P1].position

    def test_staged_bomb_can_be_kicked(self, make_floor_state):
        state = make_floor_state(p1=(2, 2), p2=(6, 6))
        state.players[P1].kick = True
        command = {"moves": ["right", "left"], "placeBombStep": 0}

        projection = project(state, P1, command)
        resolved = resolve(state, command, {})

        assert projection.position == Position(2, 2)
        assert projection.planned_bomb.position == Position(1, 2)
        assert projection.position == resolved.players[P1].position
        assert [bomb.position for bomb in resolved.bombs] == [projection.planned_bomb.position]

    def test_does_not_mutate_state(self, floor_state):
        project(floor_state, P1, {"moves": ["right"], "placeBomb": True})

        assert floor_state.players[P1].position == Position(1, 1)
        assert floor_state.bombs == []
        assert floor_state.turn == 1


class TestCandidateMoves:
    """Tests for candidate_moves()."""

    def test_corner(self, make_floor_state):
        state = make_floor_state(p1=(0, 0), p2=(6, 6))
        projection = project(state, P1, {})

        moves = dict(candidate_moves(state, P1, projection))

        assert moves == {Direction.DOWN: Position(0, 1), Direction.RIGHT: Position(1, 0)}

    def test_none_when_out_of_ap(self, floor_state):
        projection = project(floor_state, P1, {"moves": ["right"] * 3})
        assert candidate_moves(floor_state, P1, projection) == []

    def test_excludes_opponent_cell(self, make_floor_state):
        state = make_floor_state(p1=(3, 3), p2=(4, 3))
        projection = project(state, P1, {})

        directions = [direction for direction, _ in candidate_moves(state, P1, projection)]

        assert Direction.RIGHT not in directions
        assert len(directions) == 3


class TestDangerCells:
    """Tests for danger_cells()."""

    def test_only_timer_one(self, floor_state, bomb_factory):
        floor_state.bombs = [
            bomb_factory("b1", P1, 3, 3, timer=1),
            bomb_factory("b2", P2, 5, 1, timer=2),
        ]

        cells = danger_cells(floor_state)

        assert cells == {
            Position(3, 3), Position(3, 2), Position(3, 4), Position(2, 3), Position(4, 3),
        }

    def test_walls_limit_danger(self, floor_state, bomb_factory):
        floor_state.board[3][4] = Cell.SOLID_WALL
        floor_state.board[2][3] = Cell.SOFT_WALL
        floor_state.bombs = [bomb_factory("b1", P1, 3, 3, timer=1, range=2)]

        cells = danger_cells(floor_state)

        assert Position(4, 3) not in cells
        assert Position(3, 2) in cells
        assert Position(3, 1) not in cells
        assert Position(3, 5) in cells

    def test_explicit_bombs(self, floor_state, bomb_factory):
        bombs = [bomb_factory("x", P1, 0, 0, timer=1)]
        assert danger_cells(floor_state, bombs) == {Position(0, 0), Position(1, 0), Position(0, 1)}
