"""
Board Setup - Creates the initial board and match state.

This module handles:
- The fixed solid-wall skeleton (border + even grid)
- Spawn corridors that are always walkable
- Seeded soft-wall fill
- Initial GameState construction
"""

from __future__ import annotations
from dataclasses import dataclass

from .rng import next_value
from .rules import RuleSet, DEFAULT_RULES
from .state import Cell, GameState, Player, PlayerId, Position


@dataclass
class GeneratedBoard:
    """A freshly generated board and the seed left after generating it."""
    board: list[list[Cell]]
    seed: int


def default_spawns(size: int) -> tuple[Position, Position]:
    """P1 starts top-left, P2 bottom-right."""
    return Position(1, 1), Position(size - 2, size - 2)


def _empty_board(size: int) -> list[list[Cell]]:
    return [[Cell.FLOOR for _ in range(size)] for _ in range(size)]


def _carve_solid_walls(board: list[list[Cell]]) -> None:
    size = len(board)
    for y in range(size):
        for x in range(size):
            is_border = x == 0 or y == 0 or x == size - 1 or y == size - 1
            is_grid = x % 2 == 0 and y % 2 == 0
            if is_border or is_grid:
                board[y][x] = Cell.SOLID_WALL


def _clear_spawn_corridor(board: list[list[Cell]], spawn: Position) -> None:
    size = len(board)
    corridor = [
        (spawn.x, spawn.y),
        (spawn.x + 1, spawn.y),
        (spawn.x - 1, spawn.y),
        (spawn.x, spawn.y + 1),
        (spawn.x, spawn.y - 1),
    ]
    for x, y in corridor:
        if 0 <= x < size and 0 <= y < size:
            board[y][x] = Cell.FLOOR


def _place_soft_walls(board: list[list[Cell]], seed: int, soft_wall_ratio: float) -> int:
    size = len(board)
    for y in range(size):
        for x in range(size):
            if board[y][x] is not Cell.FLOOR:
                continue
            value, seed = next_value(seed)
            if value < soft_wall_ratio:
                board[y][x] = Cell.SOFT_WALL
    return seed


def generate_board(
    size: int = DEFAULT_RULES.board_size,
    seed: int = DEFAULT_RULES.default_seed,
    soft_wall_ratio: float = DEFAULT_RULES.soft_wall_ratio,
    p1_spawn: Position | None = None,
    p2_spawn: Position | None = None,
) -> GeneratedBoard:
    """
    Generate the starting board.

    Args:
        size: Board edge length (odd, at least 5)
        seed: PRNG seed; one value is drawn per fillable floor cell
        soft_wall_ratio: Probability a fillable cell becomes a soft wall
        p1_spawn: Spawn cell for P1 (defaults to (1, 1))
        p2_spawn: Spawn cell for P2 (defaults to (size-2, size-2))

    Returns:
        GeneratedBoard with the board and the advanced seed
    """
    if size < 5 or size % 2 == 0:
        raise ValueError(f"Board size must be odd and at least 5, got {size}")

    default_p1, default_p2 = default_spawns(size)
    p1_spawn = p1_spawn or default_p1
    p2_spawn = p2_spawn or default_p2
    for spawn in (p1_spawn, p2_spawn):
        if not (0 <= spawn.x < size and 0 <= spawn.y < size):
            raise ValueError(f"Spawn {spawn} is outside a {size}x{size} board")

    board = _empty_board(size)
    _carve_solid_walls(board)
    _clear_spawn_corridor(board, p1_spawn)
    _clear_spawn_corridor(board, p2_spawn)

    seed = _place_soft_walls(board, seed % 2 ** 32, soft_wall_ratio)

    # Soft walls must never block a spawn
    _clear_spawn_corridor(board, p1_spawn)
    _clear_spawn_corridor(board, p2_spawn)
    board[p1_spawn.y][p1_spawn.x] = Cell.FLOOR
    board[p2_spawn.y][p2_spawn.x] = Cell.FLOOR

    return GeneratedBoard(board=board, seed=seed)


def _players_at(p1_spawn: Position, p2_spawn: Position) -> dict[PlayerId, Player]:
    return {
        PlayerId.P1: Player(player_id=PlayerId.P1, x=p1_spawn.x, y=p1_spawn.y),
        PlayerId.P2: Player(player_id=PlayerId.P2, x=p2_spawn.x, y=p2_spawn.y),
    }


def create_initial_state(
    seed: int | None = None,
    rules: RuleSet = DEFAULT_RULES,
    size: int | None = None,
    p1_spawn: Position | None = None,
    p2_spawn: Position | None = None,
) -> GameState:
    """
    Set up a new match.

    Args:
        seed: PRNG seed for the whole match (defaults to rules.default_seed)
        rules: Rule set providing board size and soft-wall ratio
        size: Overrides rules.board_size
        p1_spawn: Overrides P1's default spawn
        p2_spawn: Overrides P2's default spawn

    Returns:
        Turn-1 GameState ready for the reducer
    """
    if size is None:
        size = rules.board_size
    seed = rules.default_seed if seed is None else seed
    default_p1, default_p2 = default_spawns(size)
    p1_spawn = p1_spawn or default_p1
    p2_spawn = p2_spawn or default_p2

    generated = generate_board(size, seed, rules.soft_wall_ratio, p1_spawn, p2_spawn)
    return GameState(
        size=size,
        board=generated.board,
        players=_players_at(p1_spawn, p2_spawn),
        rng_seed=generated.seed,
    )


def create_floor_state(
    size: int = DEFAULT_RULES.board_size,
    turn: int = 1,
    seed: int = 1234,
    p1_spawn: Position | None = None,
    p2_spawn: Position | None = None,
) -> GameState:
    """Open all-floor board with no walls. Used for scenarios and tests."""
    default_p1, default_p2 = default_spawns(size)
    p1_spawn = p1_spawn or default_p1
    p2_spawn = p2_spawn or default_p2
    return GameState(
        size=size,
        board=_empty_board(size),
        players=_players_at(p1_spawn, p2_spawn),
        turn=turn,
        rng_seed=seed % 2 ** 32,
    )
