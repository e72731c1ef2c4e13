"""
Engine Core - Deterministic turn resolution for a two-player bomb grid.

The engine:
1. Generates the starting board from a seed
2. Normalizes each player's command
3. Resolves both commands simultaneously via the reducer
4. Projects a single player's command for previews and bots
"""

from .state import (
    Cell, Direction, GameState, Item, ItemType, MatchStatus, Player, PlayerId,
    Position, Bomb, PLAYER_ORDER,
)
from .rules import RuleSet, DEFAULT_RULES
from .rng import next_seed, next_value
from .board import GeneratedBoard, generate_board, create_initial_state, create_floor_state
from .action import (
    Action, ActionType, Command, StepOutcome, StepRecord, TurnReport, TurnResult,
    build_action_sequence, normalize_command,
)
from .reducer import Reducer, resolve
from .projection import PlannedBomb, Projection, project, candidate_moves, danger_cells

__all__ = [
    "Cell",
    "Direction",
    "GameState",
    "Item",
    "ItemType",
    "MatchStatus",
    "Player",
    "PlayerId",
    "Position",
    "Bomb",
    "PLAYER_ORDER",
    "RuleSet",
    "DEFAULT_RULES",
    "next_seed",
    "next_value",
    "GeneratedBoard",
    "generate_board",
    "create_initial_state",
    "create_floor_state",
    "Action",
    "ActionType",
    "Command",
    "StepOutcome",
    "StepRecord",
    "TurnReport",
    "TurnResult",
    "build_action_sequence",
    "normalize_command",
    "Reducer",
    "resolve",
    "PlannedBomb",
    "Projection",
    "project",
    "candidate_moves",
    "danger_cells",
]
