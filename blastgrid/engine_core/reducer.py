"""
Reducer - Resolves one simultaneous turn.

The reducer is the single point of state mutation.
All state changes must go through resolve().

Design principles:
- Pure function: (state, p1_command, p2_command) -> new_state
- Works on a clone; the caller's state is never touched
- Never raises on bad input: illegal actions are no-ops that still
  spend what they would have cost
- Terminal states are fixed points

Phases, strictly in order:
1. Resource init      4. Explosions          7. Shrink
2. Action steps       5. Damage / penalty    8. Status
3. Bomb timers        6. Walls and drops     9. Finalize
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any

from .action import (
    Action, ActionType, Command, StepOutcome, StepRecord, TurnReport, TurnResult,
    build_action_sequence, normalize_command,
)
from .arbitration import MoveIntent, arbitrate, build_intent, commit_moves
from .explosion import ExplosionResult, resolve_explosions
from .rng import next_value
from .rules import RuleSet, DEFAULT_RULES
from .state import (
    Bomb, Cell, GameState, Item, ItemType, MatchStatus, PlayerId, Position, PLAYER_ORDER,
)

logger = logging.getLogger(__name__)


@dataclass
class TurnResources:
    """AP and bonus moves a player has left during the action phase."""
    ap_remaining: int = 0
    bonus_moves_remaining: int = 0

    def consume_move(self, cost: int = 1) -> bool:
        """Pay for a move from AP first, then from bonus moves."""
        if self.ap_remaining >= cost:
            self.ap_remaining -= cost
            return True
        if self.bonus_moves_remaining > 0:
            self.bonus_moves_remaining -= 1
            return True
        return False

    def consume_ap(self, cost: int = 1) -> bool:
        if self.ap_remaining < cost:
            return False
        self.ap_remaining -= cost
        return True


def item_type_from_value(value: float) -> ItemType:
    """Split [0, 1) into equal thirds: FireUp, Boots, Kick."""
    if value < 1 / 3:
        return ItemType.FIRE_UP
    if value < 2 / 3:
        return ItemType.BOOTS
    return ItemType.KICK


@dataclass
class Reducer:
    """
    Reducer resolves turns.

    Stateless - all state is in GameState.
    Rules provide every constant.
    """
    rules: RuleSet = DEFAULT_RULES

    def resolve(self, state: GameState, p1_command: Any = None, p2_command: Any = None) -> GameState:
        """Advance the match by exactly one turn and return the new state."""
        return self.resolve_turn(state, p1_command, p2_command).state

    def resolve_turn(self, state: GameState, p1_command: Any = None, p2_command: Any = None) -> TurnResult:
        """
        Advance the match by one turn.

        Returns TurnResult with the new state and a report of every step,
        blast and drop for presentation.
        """
        if state.is_over:
            return TurnResult(state=state, report=TurnReport(turn=state.turn, skipped=True))

        next_state = state.clone()
        report = TurnReport(turn=state.turn)
        commands = {
            PlayerId.P1: normalize_command(p1_command),
            PlayerId.P2: normalize_command(p2_command),
        }
        logger.debug("Resolving turn %d", state.turn)

        resources = self._init_resources(next_state)
        self._resolve_action_phase(next_state, resources, commands, report)
        self._resolve_timers(next_state)
        explosion = resolve_explosions(next_state)
        self._record_explosion(explosion, report)
        self._resolve_damage(next_state, explosion)
        self._resolve_walls_and_drops(next_state, explosion, report)
        self._resolve_shrink(next_state, report)
        self._resolve_status(next_state)
        self._finalize(next_state, resources)

        if next_state.is_over:
            logger.info("Match decided on turn %d: %s", state.turn, next_state.status.value)
        return TurnResult(state=next_state, report=report)

    # -------------------------------------------------------------------------
    # Phase 1: resources
    # -------------------------------------------------------------------------

    def _init_resources(self, state: GameState) -> dict[PlayerId, TurnResources]:
        resources: dict[PlayerId, TurnResources] = {}
        for player_id in PLAYER_ORDER:
            player = state.players[player_id]
            if not player.alive:
                player.ap_start = 0
                player.ap_end = 0
                resources[player_id] = TurnResources()
                continue

            player.ap_start = self.rules.ap_start_for(player.ap_end, player.ap_penalty_next)
            player.ap_penalty_next = False

            bonus = 0
            if player.boots_turns > 0:
                bonus = self.rules.boots_bonus_moves
                player.boots_turns -= 1
            resources[player_id] = TurnResources(
                ap_remaining=player.ap_start,
                bonus_moves_remaining=bonus,
            )
        return resources

    # -------------------------------------------------------------------------
    # Phase 2: actions
    # -------------------------------------------------------------------------

    def _resolve_action_phase(
        self,
        state: GameState,
        resources: dict[PlayerId, TurnResources],
        commands: dict[PlayerId, Command],
        report: TurnReport,
    ) -> None:
        sequences = {
            player_id: build_action_sequence(command)
            for player_id, command in commands.items()
        }
        total_steps = max(len(sequence) for sequence in sequences.values())
        for step in range(total_steps):
            actions = {
                player_id: sequence[step] if step < len(sequence) else None
                for player_id, sequence in sequences.items()
            }
            outcomes: dict[PlayerId, StepOutcome] = {}
            self._resolve_movement_step(state, resources, actions, outcomes)
            self._resolve_placement_step(state, resources, actions, outcomes)

            for player_id in PLAYER_ORDER:
                report.steps.append(StepRecord(
                    step=step,
                    player_id=player_id,
                    action=actions[player_id],
                    outcome=outcomes.get(player_id, StepOutcome.IDLE),
                    position=state.players[player_id].position,
                ))

    def _resolve_movement_step(
        self,
        state: GameState,
        resources: dict[PlayerId, TurnResources],
        actions: dict[PlayerId, Action | None],
        outcomes: dict[PlayerId, StepOutcome],
    ) -> None:
        intents: dict[PlayerId, MoveIntent] = {}
        for player_id in PLAYER_ORDER:
            player = state.players[player_id]
            action = actions[player_id]
            if not player.alive or action is None or action.action_type is not ActionType.MOVE:
                continue
            if not resources[player_id].consume_move(self.rules.move_cost):
                outcomes[player_id] = StepOutcome.NO_AP
                continue
            intents[player_id] = build_intent(state, player, action.direction)

        if intents:
            arbitrate(state, intents)
            commit_moves(state, intents)
            for player_id, intent in intents.items():
                outcomes[player_id] = intent.outcome

        self._collect_items(state)

    def _collect_items(self, state: GameState) -> None:
        """
        Living players pick up whatever lies under them.

        Claims are gathered before anything is removed, so two players on
        the same item cell each get their own copy.
        """
        claims: list[tuple[PlayerId, Item]] = []
        for player_id in PLAYER_ORDER:
            player = state.players[player_id]
            if not player.alive:
                continue
            for item in state.items_at(player.position):
                claims.append((player_id, item))

        if not claims:
            return

        collected_ids = set()
        for player_id, item in claims:
            state.players[player_id].apply_item(item.item_type, self.rules.boots_duration)
            collected_ids.add(item.item_id)
            logger.debug("%s collected %s", player_id.value, item.item_type.value)
        state.items = [item for item in state.items if item.item_id not in collected_ids]

    def _resolve_placement_step(
        self,
        state: GameState,
        resources: dict[PlayerId, TurnResources],
        actions: dict[PlayerId, Action | None],
        outcomes: dict[PlayerId, StepOutcome],
    ) -> None:
        candidates: list[Bomb] = []
        for player_id in PLAYER_ORDER:
            player = state.players[player_id]
            action = actions[player_id]
            if not player.alive or action is None or action.action_type is not ActionType.PLACE:
                continue
            if not resources[player_id].consume_ap(self.rules.place_cost):
                outcomes[player_id] = StepOutcome.NO_AP
                continue
            if state.bomb_at(player.position) is not None:
                outcomes[player_id] = StepOutcome.PLACE_BLOCKED
                continue

            candidates.append(Bomb(
                bomb_id=f"b{state.next_bomb_id}",
                owner=player_id,
                x=player.x,
                y=player.y,
                timer=self.rules.bomb_timer,
                range=player.fire_power,
            ))
            state.next_bomb_id += 1

        if len(candidates) == 2 and candidates[0].position == candidates[1].position:
            for bomb in candidates:
                outcomes[bomb.owner] = StepOutcome.PLACE_CONFLICT
            return

        for bomb in candidates:
            outcomes[bomb.owner] = StepOutcome.PLACED
        state.bombs.extend(candidates)

    # -------------------------------------------------------------------------
    # Phases 3-6: timers, explosions, damage, drops
    # -------------------------------------------------------------------------

    def _resolve_timers(self, state: GameState) -> None:
        for bomb in state.bombs:
            bomb.timer -= 1

    def _record_explosion(self, explosion: ExplosionResult, report: TurnReport) -> None:
        if not explosion.exploded_ids:
            return
        logger.debug(
            "Exploded %s, %d cells hit",
            ", ".join(explosion.exploded_ids),
            len(explosion.blast_owners),
        )
        report.blast_cells = {
            position: set(owners) for position, owners in explosion.blast_owners.items()
        }
        report.exploded_bomb_ids = list(explosion.exploded_ids)
        report.destroyed_walls = list(explosion.destroyed_walls)

    def _resolve_damage(self, state: GameState, explosion: ExplosionResult) -> None:
        """Enemy blast kills; a purely self-owned blast costs AP next turn."""
        self_hit: list[PlayerId] = []
        for player_id in PLAYER_ORDER:
            player = state.players[player_id]
            if not player.alive:
                continue
            owners = explosion.blast_owners.get(player.position)
            if not owners:
                continue
            if player_id.opponent in owners:
                player.alive = False
                logger.debug("%s killed at (%d, %d)", player_id.value, player.x, player.y)
            elif player_id in owners:
                self_hit.append(player_id)

        for player_id in self_hit:
            state.players[player_id].ap_penalty_next = True

    def _next_guaranteed_item(self, state: GameState) -> ItemType | None:
        for item_type, minimum in self.rules.item_guaranteed_minimums:
            if state.item_spawn_counts.get(item_type, 0) < minimum:
                return item_type
        return None

    def _draw(self, state: GameState) -> float:
        value, state.rng_seed = next_value(state.rng_seed)
        return value

    def _resolve_walls_and_drops(self, state: GameState, explosion: ExplosionResult, report: TurnReport) -> None:
        for position in explosion.destroyed_walls:
            state.set_cell(position, Cell.FLOOR)
            if len(state.items) >= self.rules.item_max_on_board:
                continue

            item_type = self._next_guaranteed_item(state)
            if item_type is None:
                if self._draw(state) >= self.rules.item_drop_rate:
                    continue
                item_type = item_type_from_value(self._draw(state))

            item = Item(
                item_id=f"i{state.next_item_id}",
                item_type=item_type,
                x=position.x,
                y=position.y,
            )
            state.next_item_id += 1
            state.item_spawn_counts[item_type] = state.item_spawn_counts.get(item_type, 0) + 1
            state.items.append(item)
            report.dropped_items.append(item)
            logger.debug("Dropped %s at (%d, %d)", item_type.value, position.x, position.y)

    # -------------------------------------------------------------------------
    # Phases 7-9: shrink, status, finalize
    # -------------------------------------------------------------------------

    def _resolve_shrink(self, state: GameState, report: TurnReport) -> None:
        layer = self.rules.shrink_layer_for_turn(state.turn, state.size)
        report.shrink_layer = layer
        if layer <= 0:
            return
        logger.debug("Shrink layer %d on turn %d", layer, state.turn)

        last = state.size - 1
        for y in range(state.size):
            for x in range(state.size):
                if min(x, y, last - x, last - y) < layer:
                    state.board[y][x] = Cell.VOID

        def on_void(position: Position) -> bool:
            return state.cell_at(position) is Cell.VOID

        state.items = [item for item in state.items if not on_void(item.position)]
        state.bombs = [bomb for bomb in state.bombs if not on_void(bomb.position)]
        for player in state.players.values():
            if player.alive and on_void(player.position):
                player.alive = False
                logger.debug("%s fell into the void", player.player_id.value)

    def _resolve_status(self, state: GameState) -> None:
        p1_alive = state.players[PlayerId.P1].alive
        p2_alive = state.players[PlayerId.P2].alive
        if not p1_alive and not p2_alive:
            state.status = MatchStatus.DRAW
        elif not p1_alive:
            state.status = MatchStatus.P2_WIN
        elif not p2_alive:
            state.status = MatchStatus.P1_WIN
        else:
            state.status = MatchStatus.ONGOING

    def _finalize(self, state: GameState, resources: dict[PlayerId, TurnResources]) -> None:
        for player_id in PLAYER_ORDER:
            player = state.players[player_id]
            player.ap_end = resources[player_id].ap_remaining if player.alive else 0
        state.turn += 1


def resolve(state: GameState, p1_command: Any = None, p2_command: Any = None, rules: RuleSet = DEFAULT_RULES) -> GameState:
    """
    Convenience function to resolve a turn.

    Creates a Reducer and resolves one turn.
    """
    reducer = Reducer(rules=rules)
    return reducer.resolve(state, p1_command, p2_command)
