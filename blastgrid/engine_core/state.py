"""
Game State - The committed state of a match between two turns.

Design principles:
- Copy-on-write: the reducer clones before mutating, callers keep
  their reference to the previous turn untouched
- Deterministic: the PRNG seed lives in the state, nothing else is random
- Two players only, keyed by a fixed PlayerId
"""

from __future__ import annotations
from dataclasses import dataclass, field
from copy import deepcopy
from enum import Enum


class Cell(Enum):
    """Terrain of a single board cell."""
    FLOOR = "Floor"
    SOLID_WALL = "SolidWall"
    SOFT_WALL = "SoftWall"
    VOID = "Void"

    @property
    def blocks_movement(self) -> bool:
        return self is not Cell.FLOOR

    @property
    def stops_blast(self) -> bool:
        """Solid walls and Void stop a blast before it reaches them."""
        return self in (Cell.SOLID_WALL, Cell.VOID)


class ItemType(Enum):
    """Power-ups dropped from destroyed soft walls."""
    FIRE_UP = "FireUp"
    BOOTS = "Boots"
    KICK = "Kick"


class PlayerId(Enum):
    """The two fixed player identities."""
    P1 = "P1"
    P2 = "P2"

    @property
    def opponent(self) -> PlayerId:
        return PlayerId.P2 if self is PlayerId.P1 else PlayerId.P1


PLAYER_ORDER = (PlayerId.P1, PlayerId.P2)


class MatchStatus(Enum):
    """Outcome of the match so far."""
    ONGOING = "ongoing"
    P1_WIN = "p1_win"
    P2_WIN = "p2_win"
    DRAW = "draw"


class Direction(Enum):
    """Cardinal move directions. Value is the (dx, dy) offset."""
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @classmethod
    def parse(cls, raw: object) -> Direction | None:
        """Map a raw direction name ("up", "down", "left", "right") to a Direction."""
        if isinstance(raw, Direction):
            return raw
        for direction in cls:
            if direction.label == raw:
                return direction
        return None

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Position:
    """A board coordinate. x grows right, y grows down."""
    x: int
    y: int

    def step(self, direction: Direction, distance: int = 1) -> Position:
        dx, dy = direction.value
        return Position(self.x + dx * distance, self.y + dy * distance)

    def manhattan(self, other: Position) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)


@dataclass
class Player:
    """
    State for a single player.

    AP bookkeeping:
    - ap_start: AP granted this turn
    - ap_end: AP left over after the action phase (next turn's carry input)
    - ap_penalty_next: next turn's ap_start is reduced (self-blast)
    """
    player_id: PlayerId
    x: int
    y: int
    alive: bool = True
    fire_power: int = 1
    kick: bool = False
    boots_turns: int = 0
    ap_start: int = 0
    ap_end: int = 0
    ap_penalty_next: bool = False

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)

    def move_to(self, position: Position) -> None:
        self.x = position.x
        self.y = position.y

    def apply_item(self, item_type: ItemType, boots_duration: int = 2) -> None:
        """Apply the effect of a collected item."""
        if item_type is ItemType.FIRE_UP:
            self.fire_power += 1
        elif item_type is ItemType.BOOTS:
            self.boots_turns += boots_duration
        elif item_type is ItemType.KICK:
            self.kick = True


@dataclass
class Bomb:
    """A placed bomb. Range is fixed at placement time."""
    bomb_id: str
    owner: PlayerId
    x: int
    y: int
    timer: int
    range: int

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)


@dataclass
class Item:
    """An item lying on the board."""
    item_id: str
    item_type: ItemType
    x: int
    y: int

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)


def _zero_spawn_counts() -> dict[ItemType, int]:
    return {item_type: 0 for item_type in ItemType}


@dataclass
class GameState:
    """
    Complete match state at the start of a turn.

    The board is indexed board[y][x]. All state changes go through the
    reducer, which works on a clone.
    """
    size: int
    board: list[list[Cell]]
    players: dict[PlayerId, Player]

    turn: int = 1
    bombs: list[Bomb] = field(default_factory=list)
    items: list[Item] = field(default_factory=list)
    status: MatchStatus = MatchStatus.ONGOING

    # Determinism
    rng_seed: int = 0
    next_bomb_id: int = 1
    next_item_id: int = 1
    item_spawn_counts: dict[ItemType, int] = field(default_factory=_zero_spawn_counts)

    @property
    def is_over(self) -> bool:
        return self.status is not MatchStatus.ONGOING

    def in_bounds(self, position: Position) -> bool:
        return 0 <= position.x < self.size and 0 <= position.y < self.size

    def cell_at(self, position: Position) -> Cell:
        return self.board[position.y][position.x]

    def set_cell(self, position: Position, cell: Cell) -> None:
        self.board[position.y][position.x] = cell

    def bomb_at(self, position: Position) -> Bomb | None:
        for bomb in self.bombs:
            if bomb.x == position.x and bomb.y == position.y:
                return bomb
        return None

    def items_at(self, position: Position) -> list[Item]:
        return [item for item in self.items if item.x == position.x and item.y == position.y]

    def clone(self) -> GameState:
        """Deep copy the state."""
        return deepcopy(self)
