"""
Tests for command normalization and action sequences.
"""

import pytest

from ..engine_core.action import (
    ActionType, Command, EMPTY_COMMAND, build_action_sequence, normalize_command,
)
from ..engine_core.state import Direction
from ..schemas import RawCommand


UP, DOWN, LEFT, RIGHT = Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT


class TestNormalizeCommand:
    """Tests for normalize_command."""

    def test_plain_moves(self):
        command = normalize_command({"moves": ["up", "left"]})
        assert command == Command(moves=(UP, LEFT), place_bomb_step=None)

    def test_unknown_directions_dropped(self):
        command = normalize_command({"moves": ["up", "north", 3, None, "Down", "right"]})
        assert command.moves == (UP, RIGHT)

    def test_legacy_flag_places_after_moves(self):
        command = normalize_command({"moves": ["up", "up"], "placeBomb": True})
        assert command.place_bomb_step == 2

    def test_explicit_step_wins_over_flag(self):
        command = normalize_command({"moves": ["up", "up"], "placeBomb": True, "placeBombStep": 1})
        assert command.place_bomb_step == 1

    @pytest.mark.parametrize("step,expected", [(-4, 0), (0, 0), (2, 2), (9, 2), (1.0, 1)])
    def test_step_clamped(self, step, expected):
        command = normalize_command({"moves": ["left", "left"], "placeBombStep": step})
        assert command.place_bomb_step == expected

    def test_step_clamped_after_dropping_moves(self):
        command = normalize_command({"moves": ["up", "sideways"], "placeBombStep": 2})
        assert command.place_bomb_step == 1

    @pytest.mark.parametrize("raw", [None, "up", 42, ["up"], {"moves": "up"}, {}])
    def test_junk_is_empty(self, raw):
        assert normalize_command(raw) == EMPTY_COMMAND

    def test_boolean_step_ignored(self):
        assert normalize_command({"placeBombStep": True}).place_bomb_step is None

    def test_snake_case_keys(self):
        command = normalize_command({"moves": ["down"], "place_bomb_step": 0})
        assert command.place_bomb_step == 0

    def test_accepts_raw_model(self):
        raw = RawCommand(moves=["right"], placeBomb=True)
        assert normalize_command(raw) == Command(moves=(RIGHT,), place_bomb_step=1)

    def test_command_is_idempotent(self):
        command = normalize_command({"moves": ["up"], "placeBombStep": 5})
        assert normalize_command(command) == command

    def test_to_raw_round_trip(self):
        command = Command(moves=(DOWN, LEFT), place_bomb_step=1)
        assert command.to_raw() == {"moves": ["down", "left"], "placeBombStep": 1}
        assert normalize_command(command.to_raw()) == command


class TestCommandBuilders:
    """Tests for the immutable builder helpers."""

    def test_with_move(self):
        command = EMPTY_COMMAND.with_move(UP).with_move(RIGHT)
        assert command.moves == (UP, RIGHT)
        assert EMPTY_COMMAND.moves == ()

    def test_with_bomb_at_clamps(self):
        command = Command(moves=(UP,)).with_bomb_at(7)
        assert command.place_bomb_step == 1
        assert command.places_bomb

    def test_with_bomb_at_none_clears(self):
        command = Command(moves=(UP,), place_bomb_step=0).with_bomb_at(None)
        assert not command.places_bomb


class TestActionSequence:
    """Tests for build_action_sequence."""

    def test_moves_only(self):
        actions = build_action_sequence(Command(moves=(UP, DOWN)))
        assert [a.action_type for a in actions] == [ActionType.MOVE, ActionType.MOVE]
        assert [a.direction for a in actions] == [UP, DOWN]

    def test_place_first(self):
        actions = build_action_sequence(Command(moves=(UP, DOWN), place_bomb_step=0))
        assert [a.action_type for a in actions] == [ActionType.PLACE, ActionType.MOVE, ActionType.MOVE]

    def test_place_between(self):
        actions = build_action_sequence(Command(moves=(UP, DOWN), place_bomb_step=1))
        assert [a.action_type for a in actions] == [ActionType.MOVE, ActionType.PLACE, ActionType.MOVE]

    def test_place_last(self):
        actions = build_action_sequence(Command(moves=(UP,), place_bomb_step=1))
        assert [a.action_type for a in actions] == [ActionType.MOVE, ActionType.PLACE]

    def test_place_only(self):
        actions = build_action_sequence(Command(place_bomb_step=0))
        assert len(actions) == 1
        assert actions[0].action_type is ActionType.PLACE

    def test_empty(self):
        assert build_action_sequence(EMPTY_COMMAND) == []
