"""
Session Manager - Creates and manages match sessions.

A session is one match in memory:
- Created with a seed, which fixes the board and every item drop
- Holds the committed state and every previous state
- Fills in commands for CPU-controlled players
- Ends when the match is decided or the caller abandons it

Sessions are EPHEMERAL: nothing is persisted.
"""

from __future__ import annotations
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..bots import BotPolicy, GreedyBot
from ..engine_core.action import TurnReport, TurnResult
from ..engine_core.board import create_initial_state
from ..engine_core.projection import Projection, project
from ..engine_core.reducer import Reducer
from ..engine_core.rules import RuleSet, DEFAULT_RULES
from ..engine_core.state import GameState, PlayerId, PLAYER_ORDER

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a match session."""
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


@dataclass
class Session:
    """
    An in-memory match.

    history[i] is the state at the start of turn i + 1; game_state is
    always history[-1].
    """
    session_id: str
    seed: int
    created_at: float
    reducer: Reducer
    history: list[GameState] = field(default_factory=list)
    reports: list[TurnReport] = field(default_factory=list)
    bots: dict[PlayerId, BotPolicy] = field(default_factory=dict)
    state: SessionState = SessionState.ACTIVE

    @property
    def game_state(self) -> GameState:
        return self.history[-1]

    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    def is_cpu(self, player_id: PlayerId) -> bool:
        return player_id in self.bots

    def preview(self, player_id: PlayerId, command: Any) -> Projection:
        """Project a human player's in-progress command."""
        return project(self.game_state, player_id, command, self.reducer.rules)

    def play_turn(self, commands: dict[PlayerId, Any] | None = None) -> TurnResult:
        """
        Resolve one turn.

        Commands for CPU players are built by their bots; a missing
        command for a human player counts as the empty command.
        """
        commands = dict(commands or {})
        current = self.game_state
        for player_id in PLAYER_ORDER:
            bot = self.bots.get(player_id)
            if bot is not None and player_id not in commands:
                commands[player_id] = bot.select_command(current, player_id).command

        result = self.reducer.resolve_turn(
            current,
            commands.get(PlayerId.P1),
            commands.get(PlayerId.P2),
        )
        if result.report.skipped:
            return result

        self.history.append(result.state)
        self.reports.append(result.report)
        if result.state.is_over:
            self.state = SessionState.GAME_OVER
        return result


class SessionManager:
    """
    Manages match sessions.

    Responsibilities:
    - Create sessions from a seed
    - Track active sessions
    - Clean up finished sessions
    """

    def __init__(self, rules: RuleSet = DEFAULT_RULES):
        self.rules = rules
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        seed: int | None = None,
        cpu_players: tuple[PlayerId, ...] = (PlayerId.P2,),
        bots: dict[PlayerId, BotPolicy] | None = None,
    ) -> Session:
        """
        Create a new match session.

        Args:
            seed: Match seed (random if not given)
            cpu_players: Players controlled by the default GreedyBot
            bots: Explicit bot per player, overrides cpu_players

        Returns:
            New Session at turn 1
        """
        if seed is None:
            seed = uuid.uuid4().int % 2 ** 32
        if bots is None:
            bots = {player_id: GreedyBot(rules=self.rules) for player_id in cpu_players}

        session = Session(
            session_id=str(uuid.uuid4()),
            seed=seed,
            created_at=time.time(),
            reducer=Reducer(rules=self.rules),
            history=[create_initial_state(seed=seed, rules=self.rules)],
            bots=dict(bots),
        )
        self._sessions[session.session_id] = session
        logger.info("Created session %s with seed %d", session.session_id, seed)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed"):
        """End a session and drop it from memory."""
        session = self._sessions.pop(session_id, None)
        if session:
            if reason == "completed" and session.game_state.is_over:
                session.state = SessionState.GAME_OVER
            else:
                session.state = SessionState.ABANDONED
            logger.info("Ended session %s (%s)", session_id, reason)

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600):
        """Drop finished sessions older than max_age."""
        current_time = time.time()
        to_remove = [
            session_id
            for session_id, session in self._sessions.items()
            if current_time - session.created_at > max_age_seconds and not session.is_active()
        ]
        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
