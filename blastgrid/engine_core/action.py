"""
Action System - Commands, action sequences, and turn results.

A turn is driven by two Commands, one per player:
1. The raw command is normalized (unknown directions dropped,
   placement step clamped)
2. The command expands to an ordered action sequence: moves with
   at most one bomb placement interleaved
3. The reducer consumes both sequences step by step

Illegal actions never raise. Each step records a StepOutcome so
renderers can show what happened and why.
"""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TYPE_CHECKING

from pydantic import ValidationError

from ..schemas import RawCommand
from .state import Direction, Item, PlayerId, Position

if TYPE_CHECKING:
    from .state import GameState


class ActionType(Enum):
    """Types of actions in a sequence."""
    MOVE = "move"
    PLACE = "place"


@dataclass(frozen=True)
class Action:
    """One entry of an action sequence."""
    action_type: ActionType
    direction: Direction | None = None

    @classmethod
    def move(cls, direction: Direction) -> Action:
        return cls(action_type=ActionType.MOVE, direction=direction)

    @classmethod
    def place(cls) -> Action:
        return cls(action_type=ActionType.PLACE)


@dataclass(frozen=True)
class Command:
    """
    A normalized player command.

    place_bomb_step is an index in [0, len(moves)]: the bomb is placed
    before the move at that index, or after all moves when it equals
    len(moves). None means no placement.
    """
    moves: tuple[Direction, ...] = ()
    place_bomb_step: int | None = None

    @property
    def places_bomb(self) -> bool:
        return self.place_bomb_step is not None

    def with_move(self, direction: Direction) -> Command:
        """Return a new command with one more move appended."""
        return Command(moves=self.moves + (direction,), place_bomb_step=self.place_bomb_step)

    def with_bomb_at(self, step: int | None) -> Command:
        return normalize_command(Command(moves=self.moves, place_bomb_step=step))

    def to_raw(self) -> dict[str, Any]:
        return {
            "moves": [direction.label for direction in self.moves],
            "placeBombStep": self.place_bomb_step,
        }


EMPTY_COMMAND = Command()


def _parse_raw(raw: Any) -> RawCommand | None:
    if raw is None:
        return None
    if isinstance(raw, RawCommand):
        return raw
    if isinstance(raw, Mapping):
        try:
            return RawCommand.model_validate(dict(raw))
        except ValidationError:
            return None
    return None


def normalize_command(raw: Any) -> Command:
    """
    Normalize any submitted command into a canonical Command.

    Accepts a Command, a RawCommand or a mapping with "moves",
    "placeBombStep" and the legacy "placeBomb" flag. Anything else
    normalizes to the empty command.
    """
    if isinstance(raw, Command):
        moves = [direction for direction in raw.moves if isinstance(direction, Direction)]
        step = raw.place_bomb_step
    else:
        parsed = _parse_raw(raw)
        if parsed is None:
            return EMPTY_COMMAND
        moves = [d for d in (Direction.parse(m) for m in parsed.moves) if d is not None]
        step = parsed.place_bomb_step
        if step is None and parsed.place_bomb:
            step = len(moves)

    if step is not None:
        step = max(0, min(len(moves), step))
    return Command(moves=tuple(moves), place_bomb_step=step)


def build_action_sequence(command: Command) -> list[Action]:
    """Expand a normalized command into its ordered action sequence."""
    actions: list[Action] = []
    for index in range(len(command.moves) + 1):
        if command.place_bomb_step == index:
            actions.append(Action.place())
        if index < len(command.moves):
            actions.append(Action.move(command.moves[index]))
    return actions


class StepOutcome(Enum):
    """What happened to one player's action in one step."""
    IDLE = "idle"
    MOVED = "moved"
    KICKED = "kicked"
    NO_AP = "no_ap"
    OUT_OF_BOUNDS = "out_of_bounds"
    BLOCKED_TERRAIN = "blocked_terrain"
    BLOCKED_BOMB = "blocked_bomb"
    CONFLICT = "conflict"
    OPPONENT_CELL = "opponent_cell"
    KICK_OUT_OF_BOUNDS = "kick_out_of_bounds"
    KICK_BLOCKED_TERRAIN = "kick_blocked_terrain"
    KICK_BLOCKED_BOMB = "kick_blocked_bomb"
    KICK_BLOCKED_PLAYER = "kick_blocked_player"
    KICK_CONFLICT = "kick_conflict"
    PLACED = "placed"
    PLACE_BLOCKED = "place_blocked"
    PLACE_CONFLICT = "place_conflict"

    @property
    def succeeded(self) -> bool:
        return self in (StepOutcome.MOVED, StepOutcome.KICKED, StepOutcome.PLACED)


@dataclass
class StepRecord:
    """One player's action at one step of the action phase."""
    step: int
    player_id: PlayerId
    action: Action | None
    outcome: StepOutcome
    position: Position


@dataclass
class TurnReport:
    """
    Visual hints describing how a turn resolved.

    Produced alongside the new state so renderers can animate the
    turn without re-running any rule.
    """
    turn: int
    steps: list[StepRecord] = field(default_factory=list)
    blast_cells: dict[Position, set[PlayerId]] = field(default_factory=dict)
    exploded_bomb_ids: list[str] = field(default_factory=list)
    destroyed_walls: list[Position] = field(default_factory=list)
    dropped_items: list[Item] = field(default_factory=list)
    shrink_layer: int = 0
    skipped: bool = False

    def outcomes_for(self, player_id: PlayerId) -> list[StepOutcome]:
        return [record.outcome for record in self.steps if record.player_id == player_id]


@dataclass
class TurnResult:
    """Result of resolving one turn."""
    state: GameState
    report: TurnReport
