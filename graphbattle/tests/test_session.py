"""
Tests for session management.

Tests:
- Session lifecycle
- Action and event logs
- Replay from seed and action log
"""

import pytest

from ..engine_core.action import create_end_turn_action
from ..engine_core.events import EventType
from ..session import SessionManager, SessionState
from .conftest import first_legal_attack


@pytest.fixture
def manager():
    return SessionManager()


def drive(manager, session, max_actions=40):
    for _ in range(max_actions):
        state = session.engine.get_state()
        if state.is_over:
            break
        action = first_legal_attack(session.engine) or create_end_turn_action(
            state.turn.active_player_id
        )
        manager.apply_action(session.session_id, action)


class TestSessionLifecycle:
    """Create, look up, end."""

    def test_create_session(self, manager):
        session = manager.create_session(seed=5)
        assert session.seed == 5
        assert session.is_active()
        assert manager.get_session(session.session_id) is session

    def test_random_seed_when_omitted(self, manager):
        session = manager.create_session()
        assert isinstance(session.seed, int)

    def test_options_forwarded(self, manager):
        session = manager.create_session(
            seed=5, players=["a", "b"], rows=4, columns=4, nodes_per_player=3
        )
        assert len(session.engine.get_state().board.nodes) == 6

    def test_list_sessions(self, manager):
        manager.create_session(seed=1)
        manager.create_session(seed=2)
        assert len(manager.list_sessions()) == 2

    def test_end_session(self, manager):
        session = manager.create_session(seed=1)
        assert manager.end_session(session.session_id)
        assert session.state == SessionState.ENDED
        assert manager.get_session(session.session_id) is None
        assert not manager.end_session(session.session_id)

    def test_unknown_session_action(self, manager):
        with pytest.raises(KeyError):
            manager.apply_action("missing", create_end_turn_action("player-1"))


class TestSessionLogs:
    """Action and event recording."""

    def test_event_log_starts_with_game_started(self, manager):
        session = manager.create_session(seed=9)
        assert [e.type for e in session.event_log] == [
            EventType.GAME_STARTED,
            EventType.TURN_STARTED,
        ]

    def test_actions_logged(self, manager):
        session = manager.create_session(seed=9)
        manager.apply_action(session.session_id, create_end_turn_action("player-2"))
        manager.apply_action(session.session_id, create_end_turn_action("player-1"))
        assert len(session.action_log) == 2

    def test_events_since(self, manager):
        session = manager.create_session(seed=9)
        cursor = len(session.event_log)
        manager.apply_action(session.session_id, create_end_turn_action("player-1"))
        newer = session.events_since(cursor)
        assert newer[0].type == EventType.TURN_ENDED
        assert newer[-1].type == EventType.TURN_STARTED


class TestReplay:
    """Seed plus action log reproduces the game."""

    def test_replay_matches_live_state(self, manager):
        session = manager.create_session(seed=21)
        drive(manager, session)
        replayed = session.replay()
        assert replayed.get_state() == session.engine.get_state()

    def test_replay_with_options(self, manager):
        session = manager.create_session(
            seed=21, players=["a", "b"], rows=4, columns=4, nodes_per_player=4,
            strength_per_player=10,
        )
        drive(manager, session)
        assert session.replay().get_state() == session.engine.get_state()

    def test_game_over_marks_session(self, manager):
        session = manager.create_session(
            seed=3, players=["a", "b"], rows=2, columns=2, nodes_per_player=1,
            strength_per_player=6,
        )
        drive(manager, session, max_actions=200)
        over = session.engine.get_state().is_over
        assert session.state == (SessionState.GAME_OVER if over else SessionState.ACTIVE)
