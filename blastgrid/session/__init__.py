"""
Session Module - Manages ephemeral matches.

A session represents one match:
- Created from a seed
- Holds the committed state and its history
- Runs CPU turns through bot policies
- Dropped when the match ends

GameLoop plays full bot-vs-bot matches for simulations.
"""

from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, LoopState, LoopResult, TurnRecord

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "LoopState",
    "LoopResult",
    "TurnRecord",
]
