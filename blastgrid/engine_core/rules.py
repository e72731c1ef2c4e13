"""
Rule Set - Every tunable constant of the match.

The reducer, the projection helper and the bots all read their numbers
from here instead of hard-coding them.
"""

from __future__ import annotations
from dataclasses import dataclass

from .state import ItemType


@dataclass(frozen=True)
class RuleSet:
    """Configuration for one match."""
    # Board
    board_size: int = 7
    soft_wall_ratio: float = 0.45
    default_seed: int = 0x1F2E3D4C

    # Action point economy
    base_ap: int = 3
    max_carry_ap: int = 2
    max_ap: int = 5
    min_ap: int = 1
    self_hit_penalty: int = 1
    boots_bonus_moves: int = 1
    boots_duration: int = 2

    # Bombs
    bomb_timer: int = 2
    move_cost: int = 1
    place_cost: int = 1

    # Items
    item_drop_rate: float = 0.3
    item_max_on_board: int = 3
    # Drops forced before any roll, checked in this order
    item_guaranteed_minimums: tuple[tuple[ItemType, int], ...] = (
        (ItemType.FIRE_UP, 2),
        (ItemType.BOOTS, 1),
        (ItemType.KICK, 1),
    )

    # Endgame
    shrink_start_turn: int = 15
    shrink_interval: int = 3

    # Automated opponent
    bot_max_moves: int = 8

    def shrink_layer_for_turn(self, turn: int, size: int) -> int:
        """Ring depth that has turned to Void by the end of `turn`."""
        if turn < self.shrink_start_turn:
            return 0
        layer = 1 + (turn - self.shrink_start_turn) // self.shrink_interval
        return min(layer, size // 2)

    def ap_start_for(self, ap_end: int, penalized: bool) -> int:
        """AP granted at the start of a turn given last turn's leftover."""
        carry = min(self.max_carry_ap, max(0, ap_end))
        ap_start = min(self.max_ap, carry + self.base_ap)
        if penalized:
            ap_start -= self.self_hit_penalty
        return max(self.min_ap, ap_start)


DEFAULT_RULES = RuleSet()
