"""
Explosions - Blast propagation and chain reactions.

Blast walk, per direction, up to the bomb's range:
- Out of bounds, SolidWall or Void: stop, the cell is not hit
- SoftWall: hit, marked destroyed, stop
- Floor: hit; a live bomb there joins the chain and the walk goes on

Chains are resolved with an explicit worklist over indices into the
bomb list, so depth is bounded by the number of bombs, not the stack.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable

from .state import Bomb, Cell, Direction, GameState, PlayerId, Position


@dataclass
class ExplosionResult:
    """Everything the explosion phase decided."""
    blast_owners: dict[Position, set[PlayerId]] = field(default_factory=dict)
    destroyed_walls: dict[Position, None] = field(default_factory=dict)
    exploded_ids: list[str] = field(default_factory=list)

    def hit(self, position: Position, owner: PlayerId) -> None:
        self.blast_owners.setdefault(position, set()).add(owner)


def _walk(state: GameState, origin: Position, direction: Direction, reach: int) -> Iterable[tuple[Position, Cell]]:
    """Yield the cells a blast reaches in one direction, in order."""
    for distance in range(1, reach + 1):
        position = origin.step(direction, distance)
        if not state.in_bounds(position):
            return
        cell = state.cell_at(position)
        if cell.stops_blast:
            return
        yield position, cell
        if cell is Cell.SOFT_WALL:
            return


def blast_footprint(state: GameState, bomb: Bomb) -> list[Position]:
    """Cells a single bomb would hit, ignoring chain reactions."""
    cells = [bomb.position]
    for direction in Direction:
        cells.extend(position for position, _ in _walk(state, bomb.position, direction, bomb.range))
    return cells


def resolve_explosions(state: GameState) -> ExplosionResult:
    """
    Detonate every bomb whose timer ran out, plus everything they chain into.

    Exploded bombs are removed from state.bombs. The board is left as is;
    destroyed walls are returned for the caller to clear.
    """
    result = ExplosionResult()
    bombs = state.bombs
    index_at = {bomb.position: index for index, bomb in enumerate(bombs)}
    exploded: set[str] = set()

    worklist = [index for index, bomb in enumerate(bombs) if bomb.timer <= 0]
    while worklist:
        bomb = bombs[worklist.pop()]
        if bomb.bomb_id in exploded:
            continue
        exploded.add(bomb.bomb_id)
        result.exploded_ids.append(bomb.bomb_id)
        result.hit(bomb.position, bomb.owner)

        for direction in Direction:
            for position, cell in _walk(state, bomb.position, direction, bomb.range):
                result.hit(position, bomb.owner)
                if cell is Cell.SOFT_WALL:
                    result.destroyed_walls[position] = None
                    continue
                chained = index_at.get(position)
                if chained is not None and bombs[chained].bomb_id not in exploded:
                    worklist.append(chained)

    state.bombs = [bomb for bomb in bombs if bomb.bomb_id not in exploded]
    return result
