"""
Pytest fixtures for BlastGrid tests.
"""

import pytest

from ..engine_core.board import create_floor_state, create_initial_state
from ..engine_core.reducer import Reducer
from ..engine_core.state import Bomb, GameState, Position


@pytest.fixture
def reducer() -> Reducer:
    return Reducer()


@pytest.fixture
def initial_state() -> GameState:
    """Generated 7x7 board with the default seed."""
    return create_initial_state()


@pytest.fixture
def make_floor_state():
    """
    Factory for open 7x7 floor boards.

    Usage:
        state = make_floor_state(p1=(2, 3), p2=(4, 3))
    """
    def _make(p1=(1, 1), p2=(5, 5), turn=1, seed=42, size=7) -> GameState:
        return create_floor_state(
            size=size,
            turn=turn,
            seed=seed,
            p1_spawn=Position(*p1),
            p2_spawn=Position(*p2),
        )
    return _make


@pytest.fixture
def floor_state(make_floor_state) -> GameState:
    return make_floor_state()


def make_bomb(bomb_id, owner, x, y, timer=2, range=1) -> Bomb:
    return Bomb(bomb_id=bomb_id, owner=owner, x=x, y=y, timer=timer, range=range)


@pytest.fixture
def bomb_factory():
    """Factory for bombs: bomb_factory("b1", PlayerId.P1, 3, 3, timer=1)."""
    return make_bomb
