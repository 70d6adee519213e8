"""
Session Manager - Creates and hosts in-memory games.

A session represents one play-through:
- Created with a seed and standard-game options
- Holds the live engine
- Records every applied action and every published event
- Can be replayed from seed + action log to the same final state

Sessions are EPHEMERAL: nothing is persisted.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import random
import time
import uuid

from ..engine_core.action import Action, ActionResult
from ..engine_core.engine import GameEngine
from ..engine_core.events import EventBus, GameEvent
from ..games.standard import create_standard_game

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Someone won
    ENDED = "ended"  # Closed before completion


@dataclass
class Session:
    """
    A hosted game.

    action_log holds every action submitted through the session, in order;
    failed actions are kept too since they never change state.
    """
    session_id: str
    seed: int
    options: dict[str, Any]
    engine: GameEngine
    created_at: float
    state: SessionState = SessionState.ACTIVE
    action_log: list[Action] = field(default_factory=list)
    event_log: list[GameEvent] = field(default_factory=list)

    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE

    def events_since(self, cursor: int = 0) -> list[GameEvent]:
        return self.event_log[max(cursor, 0):]

    def replay(self) -> GameEngine:
        """
        Rebuild the game from its seed and action log.

        The returned engine's state equals the live engine's state.
        """
        engine = create_standard_game(seed=self.seed, **self.options)
        for action in self.action_log:
            engine.apply_action(action)
        return engine


class SessionManager:
    """
    Creates, tracks, and ends sessions.

    Usage:
        manager = SessionManager()
        session = manager.create_session(seed=7)
        result = manager.apply_action(session.session_id, create_end_turn_action("player-1"))
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def create_session(self, seed: int | None = None, **options: Any) -> Session:
        """Create a standard game; options are passed to create_standard_game."""
        if seed is None:
            seed = random.getrandbits(32)

        event_log: list[GameEvent] = []
        bus = EventBus()
        bus.subscribe_all(event_log.append)
        engine = create_standard_game(seed=seed, event_bus=bus, **options)

        session = Session(
            session_id=str(uuid.uuid4()),
            seed=seed,
            options=dict(options),
            engine=engine,
            created_at=time.time(),
            event_log=event_log,
        )
        self._sessions[session.session_id] = session
        logger.info(f"Session {session.session_id} created with seed {seed}")
        return session

    def get_session(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def list_sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def apply_action(self, session_id: str, action: Action) -> ActionResult:
        """
        Apply an action to a session's engine.

        Raises KeyError for an unknown session; engine errors propagate.
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session not found: {session_id}")

        result = session.engine.apply_action(action)
        session.action_log.append(action)
        if result.ok and result.state.is_over:
            session.state = SessionState.GAME_OVER
            logger.info(f"Session {session_id} finished; winner {result.state.winner_id}")
        return result

    def end_session(self, session_id: str) -> bool:
        """Remove a session. Returns False if it did not exist."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        if session.state == SessionState.ACTIVE:
            session.state = SessionState.ENDED
        return True
