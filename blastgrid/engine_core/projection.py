"""
Projection - Read-only preview of a single player's command.

Answers "where would I end up, and what could I still do" for one
player's in-progress command without knowing the opponent's plan.
The opponent is held still and only matters as an obstacle in its
current cell.

Used by input layers (candidate cells, AP display) and by bots
(search over candidate moves). Never mutates the committed state,
never places or ticks bombs.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any, Iterable

from .action import ActionType, build_action_sequence, normalize_command
from .explosion import blast_footprint
from .rules import RuleSet, DEFAULT_RULES
from .state import Bomb, Direction, GameState, PlayerId, Position


@dataclass(frozen=True)
class PlannedBomb:
    """A bomb the command would place."""
    position: Position
    owner: PlayerId
    timer: int
    range: int


@dataclass
class Projection:
    """Result of projecting one player's command."""
    position: Position
    steps: list[Position] = field(default_factory=list)
    ap_start: int = 0
    ap_remaining: int = 0
    bonus_moves_remaining: int = 0
    can_move_more: bool = False
    can_place_bomb: bool = False
    planned_bomb: PlannedBomb | None = None
    projected_bombs: list[Bomb] = field(default_factory=list)
    place_bomb_step: int | None = None

    def bomb_at(self, position: Position) -> Bomb | None:
        for bomb in self.projected_bombs:
            if bomb.position == position:
                return bomb
        return None

    def occupied_by_bomb(self, position: Position) -> bool:
        if self.planned_bomb is not None and self.planned_bomb.position == position:
            return True
        return self.bomb_at(position) is not None


def _copy_bombs(bombs: Iterable[Bomb]) -> list[Bomb]:
    return [
        Bomb(bomb_id=b.bomb_id, owner=b.owner, x=b.x, y=b.y, timer=b.timer, range=b.range)
        for b in bombs
    ]


def _can_enter(state: GameState, player_id: PlayerId, projection: Projection, direction: Direction) -> tuple[Position, Bomb | PlannedBomb | None] | None:
    """
    Check a move from the projected position.

    The staged bomb counts like any other bomb once placed.
    Returns (target, bomb to push) when the move would succeed,
    None otherwise.
    """
    player = state.players[player_id]
    opponent = state.players[player_id.opponent]
    target = projection.position.step(direction)
    if not state.in_bounds(target) or state.cell_at(target).blocks_movement:
        return None
    if opponent.alive and opponent.position == target:
        return None

    bomb: Bomb | PlannedBomb | None = projection.bomb_at(target)
    if bomb is None and projection.planned_bomb is not None and projection.planned_bomb.position == target:
        bomb = projection.planned_bomb
    if bomb is None:
        return target, None
    if not player.kick:
        return None

    push_to = target.step(direction)
    if not state.in_bounds(push_to) or state.cell_at(push_to).blocks_movement:
        return None
    if projection.occupied_by_bomb(push_to):
        return None
    if opponent.alive and opponent.position == push_to:
        return None
    return target, bomb


def project(state: GameState, player_id: PlayerId, command: Any, rules: RuleSet = DEFAULT_RULES) -> Projection:
    """
    Simulate one player's command alone.

    Args:
        state: Committed state (not modified)
        player_id: Whose command this is
        command: Raw or normalized command
        rules: Rule set for AP and bomb constants

    Returns:
        Projection with the resulting position, visited cells,
        leftover resources and the staged bomb, if any
    """
    normalized = normalize_command(command)
    player = state.players[player_id]
    ap_start = rules.ap_start_for(player.ap_end, player.ap_penalty_next)

    projection = Projection(
        position=player.position,
        ap_start=ap_start,
        ap_remaining=ap_start,
        bonus_moves_remaining=rules.boots_bonus_moves if player.boots_turns > 0 else 0,
        projected_bombs=_copy_bombs(state.bombs),
        place_bomb_step=normalized.place_bomb_step,
    )

    for action in build_action_sequence(normalized):
        if action.action_type is ActionType.MOVE:
            if projection.ap_remaining >= rules.move_cost:
                projection.ap_remaining -= rules.move_cost
            elif projection.bonus_moves_remaining > 0:
                projection.bonus_moves_remaining -= 1
            else:
                continue

            entered = _can_enter(state, player_id, projection, action.direction)
            if entered is None:
                continue
            target, pushed = entered
            if isinstance(pushed, PlannedBomb):
                projection.planned_bomb = replace(pushed, position=target.step(action.direction))
            elif pushed is not None:
                push_to = target.step(action.direction)
                pushed.x = push_to.x
                pushed.y = push_to.y
            projection.position = target
            projection.steps.append(target)
            continue

        if projection.ap_remaining < rules.place_cost:
            continue
        projection.ap_remaining -= rules.place_cost
        if projection.occupied_by_bomb(projection.position):
            continue
        projection.planned_bomb = PlannedBomb(
            position=projection.position,
            owner=player_id,
            timer=rules.bomb_timer,
            range=player.fire_power,
        )

    projection.can_move_more = projection.ap_remaining > 0 or projection.bonus_moves_remaining > 0
    projection.can_place_bomb = (
        projection.ap_remaining >= rules.place_cost
        and projection.planned_bomb is None
        and not projection.occupied_by_bomb(projection.position)
    )
    return projection


def candidate_moves(state: GameState, player_id: PlayerId, projection: Projection) -> list[tuple[Direction, Position]]:
    """Directions that would still succeed from the projected position."""
    if not projection.can_move_more:
        return []
    result = []
    for direction in Direction:
        entered = _can_enter(state, player_id, projection, direction)
        if entered is not None:
            result.append((direction, entered[0]))
    return result


def danger_cells(state: GameState, bombs: Iterable[Bomb] | None = None) -> set[Position]:
    """
    Cells hit by bombs that detonate on the next timer tick.

    Only bombs whose timer is exactly 1 count. Each contributes its own
    blast footprint; chain reactions are not followed.
    """
    if bombs is None:
        bombs = state.bombs
    cells: set[Position] = set()
    for bomb in bombs:
        if bomb.timer != 1:
            continue
        cells.update(blast_footprint(state, bomb))
    return cells
