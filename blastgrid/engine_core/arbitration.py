"""
Move Arbitration - Resolves both players' moves of one step together.

Pipeline:
1. Build each player's intent from the pre-step state (pure)
2. Run the veto rules in order; every rule judges both intents against
   the same snapshot before any verdict is applied, so the result does
   not depend on which player is looked at first
3. Commit the surviving intents: kicked bombs first, then players
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Optional

from .action import StepOutcome
from .state import Cell, Direction, GameState, Player, PlayerId, Position, PLAYER_ORDER


@dataclass
class MoveIntent:
    """A player's tentative move for this step."""
    player_id: PlayerId
    origin: Position
    target: Position
    direction: Direction
    outcome: StepOutcome = StepOutcome.MOVED
    kick_bomb_id: str | None = None
    push_to: Position | None = None

    @property
    def valid(self) -> bool:
        return self.outcome.succeeded

    @property
    def is_kick(self) -> bool:
        return self.kick_bomb_id is not None

    def veto(self, outcome: StepOutcome) -> None:
        if self.valid:
            self.outcome = outcome


@dataclass
class ArbitrationContext:
    state: GameState
    sources: dict[PlayerId, Position]


VetoRule = Callable[[MoveIntent, Optional[MoveIntent], ArbitrationContext], Optional[StepOutcome]]


def build_intent(state: GameState, player: Player, direction: Direction) -> MoveIntent:
    """Work out where a move would go, before looking at the opponent."""
    origin = player.position
    target = origin.step(direction)
    intent = MoveIntent(
        player_id=player.player_id,
        origin=origin,
        target=target,
        direction=direction,
    )
    if not state.in_bounds(target):
        intent.outcome = StepOutcome.OUT_OF_BOUNDS
        return intent
    if state.cell_at(target).blocks_movement:
        intent.outcome = StepOutcome.BLOCKED_TERRAIN
        return intent

    bomb = state.bomb_at(target)
    if bomb is not None:
        if not player.kick:
            intent.outcome = StepOutcome.BLOCKED_BOMB
            return intent
        intent.outcome = StepOutcome.KICKED
        intent.kick_bomb_id = bomb.bomb_id
        intent.push_to = target.step(direction)
    return intent


def _collision(mine: MoveIntent, theirs: MoveIntent | None, ctx: ArbitrationContext) -> StepOutcome | None:
    """Same target cell, or a head-on swap: both fail."""
    if theirs is None or not theirs.valid:
        return None
    if mine.target == theirs.target:
        return StepOutcome.CONFLICT
    if mine.target == theirs.origin and theirs.target == mine.origin:
        return StepOutcome.CONFLICT
    return None


def _kick_path(mine: MoveIntent, theirs: MoveIntent | None, ctx: ArbitrationContext) -> StepOutcome | None:
    """The pushed bomb needs a free floor cell with no player standing on it."""
    if not mine.is_kick:
        return None
    push_to = mine.push_to
    if not ctx.state.in_bounds(push_to):
        return StepOutcome.KICK_OUT_OF_BOUNDS
    if ctx.state.cell_at(push_to) is not Cell.FLOOR:
        return StepOutcome.KICK_BLOCKED_TERRAIN
    if any(bomb.position == push_to and bomb.bomb_id != mine.kick_bomb_id for bomb in ctx.state.bombs):
        return StepOutcome.KICK_BLOCKED_BOMB
    if push_to in ctx.sources.values():
        return StepOutcome.KICK_BLOCKED_PLAYER
    return None


def _contested_kick(mine: MoveIntent, theirs: MoveIntent | None, ctx: ArbitrationContext) -> StepOutcome | None:
    """Two kicks on the same bomb or into the same cell: both fail."""
    if not mine.is_kick or theirs is None or not theirs.valid or not theirs.is_kick:
        return None
    if mine.kick_bomb_id == theirs.kick_bomb_id or mine.push_to == theirs.push_to:
        return StepOutcome.KICK_CONFLICT
    return None


def _kick_into_mover(mine: MoveIntent, theirs: MoveIntent | None, ctx: ArbitrationContext) -> StepOutcome | None:
    if not mine.is_kick or theirs is None or not theirs.valid:
        return None
    if theirs.target == mine.push_to:
        return StepOutcome.KICK_CONFLICT
    return None


def _occupied_cell(mine: MoveIntent, theirs: MoveIntent | None, ctx: ArbitrationContext) -> StepOutcome | None:
    """Moving into the opponent's cell only works if the opponent leaves it."""
    opponent_id = mine.player_id.opponent
    if not ctx.state.players[opponent_id].alive:
        return None
    if mine.target != ctx.sources[opponent_id]:
        return None
    if theirs is not None and theirs.valid:
        return None
    return StepOutcome.OPPONENT_CELL


VETO_RULES: list[VetoRule] = [
    _collision,
    _kick_path,
    _contested_kick,
    _kick_into_mover,
    _occupied_cell,
]


def arbitrate(state: GameState, intents: dict[PlayerId, MoveIntent]) -> None:
    """Apply every veto rule to the intent pair, in order."""
    ctx = ArbitrationContext(
        state=state,
        sources={player_id: state.players[player_id].position for player_id in PLAYER_ORDER},
    )
    for rule in VETO_RULES:
        verdicts: dict[PlayerId, StepOutcome] = {}
        for player_id, intent in intents.items():
            if not intent.valid:
                continue
            verdict = rule(intent, intents.get(player_id.opponent), ctx)
            if verdict is not None:
                verdicts[player_id] = verdict
        for player_id, verdict in verdicts.items():
            intents[player_id].veto(verdict)


def commit_moves(state: GameState, intents: dict[PlayerId, MoveIntent]) -> None:
    """Move kicked bombs, then players, for every surviving intent."""
    for intent in intents.values():
        if not intent.valid or not intent.is_kick:
            continue
        for bomb in state.bombs:
            if bomb.bomb_id == intent.kick_bomb_id:
                bomb.x = intent.push_to.x
                bomb.y = intent.push_to.y
                break

    for player_id, intent in intents.items():
        if intent.valid:
            state.players[player_id].move_to(intent.target)
