"""
Pydantic Schemas - Boundary models for commands and state snapshots.

RawCommand is the lenient shape accepted from input layers and bots.
It never rejects a plausible command: junk fields are coerced to their
empty form so the normalizer can always produce a canonical Command.

GameStateSnapshot is the read-only, JSON-friendly view a renderer or
overlay consumes.
"""

from __future__ import annotations
from typing import Any, Optional, TYPE_CHECKING
from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from .engine_core.state import GameState


# =============================================================================
# Commands
# =============================================================================

class RawCommand(BaseModel):
    """A player command as submitted, before normalization."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    moves: list[Any] = Field(default_factory=list)
    place_bomb_step: Optional[int] = Field(default=None, alias="placeBombStep")
    place_bomb: bool = Field(
        default=False,
        alias="placeBomb",
        description="Legacy flag: place after all moves",
    )

    @field_validator("moves", mode="before")
    @classmethod
    def _coerce_moves(cls, value: Any) -> list[Any]:
        if isinstance(value, (list, tuple)):
            return list(value)
        return []

    @field_validator("place_bomb_step", mode="before")
    @classmethod
    def _coerce_step(cls, value: Any) -> int | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return None

    @field_validator("place_bomb", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return bool(value)


# =============================================================================
# State snapshots
# =============================================================================

class PlayerInfo(BaseModel):
    """Player information for display."""
    player_id: str
    x: int
    y: int
    alive: bool
    fire_power: int
    kick: bool
    boots_turns: int
    ap_start: int
    ap_end: int
    ap_penalty_next: bool


class BombInfo(BaseModel):
    bomb_id: str
    owner: str
    x: int
    y: int
    timer: int
    range: int


class ItemInfo(BaseModel):
    item_id: str
    item_type: str
    x: int
    y: int


class GameStateSnapshot(BaseModel):
    """Serializable view of a GameState."""
    turn: int
    size: int
    status: str
    board: list[list[str]] = Field(description="Rows of cell names, indexed [y][x]")
    players: list[PlayerInfo] = Field(default_factory=list)
    bombs: list[BombInfo] = Field(default_factory=list)
    items: list[ItemInfo] = Field(default_factory=list)
    rng_seed: int = 0

    @classmethod
    def from_state(cls, state: GameState) -> GameStateSnapshot:
        return cls(
            turn=state.turn,
            size=state.size,
            status=state.status.value,
            board=[[cell.value for cell in row] for row in state.board],
            players=[
                PlayerInfo(
                    player_id=player.player_id.value,
                    x=player.x,
                    y=player.y,
                    alive=player.alive,
                    fire_power=player.fire_power,
                    kick=player.kick,
                    boots_turns=player.boots_turns,
                    ap_start=player.ap_start,
                    ap_end=player.ap_end,
                    ap_penalty_next=player.ap_penalty_next,
                )
                for player in state.players.values()
            ],
            bombs=[
                BombInfo(
                    bomb_id=bomb.bomb_id,
                    owner=bomb.owner.value,
                    x=bomb.x,
                    y=bomb.y,
                    timer=bomb.timer,
                    range=bomb.range,
                )
                for bomb in state.bombs
            ],
            items=[
                ItemInfo(
                    item_id=item.item_id,
                    item_type=item.item_type.value,
                    x=item.x,
                    y=item.y,
                )
                for item in state.items
            ],
            rng_seed=state.rng_seed,
        )
