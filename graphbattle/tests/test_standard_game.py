"""
Tests for standard game setup.

Tests:
- Default players and board
- Option validation
- Seeded reproducibility
"""

from collections import Counter

import pytest

from ..config import BoardDefaults, GameDefaults
from ..engine_core.events import EventBus, EventType
from ..engine_core.rng import Mulberry32
from ..games.standard import build_default_players, create_standard_game


class TestDefaultPlayers:
    """Tests for build_default_players."""

    def test_five_players(self):
        players = build_default_players()
        assert [p["id"] for p in players] == [f"player-{i}" for i in range(1, 6)]
        assert [p["color"] for p in players] == ["red", "blue", "green", "yellow", "purple"]

    def test_at_least_one(self):
        assert len(build_default_players(0)) == 1


class TestCreateStandardGame:
    """Tests for create_standard_game."""

    def test_defaults(self):
        engine = create_standard_game(seed=1)
        state = engine.get_state()
        assert len(state.players) == 5
        assert len(state.board.nodes) == 30
        assert state.board.dimensions.rows == 8
        assert state.board.dimensions.columns == 6
        assert state.turn.active_player_id == "player-1"

    def test_game_grid_differs_from_generator_grid(self):
        # Both defaults are intended; a bare generator is 6x8
        assert (GameDefaults.ROWS, GameDefaults.COLUMNS) == (8, 6)
        assert (BoardDefaults.ROWS, BoardDefaults.COLUMNS) == (6, 8)

    def test_balanced_start(self):
        state = create_standard_game(seed=4).get_state()
        counts = Counter(n.owner_id for n in state.board.nodes.values())
        strengths = Counter()
        for node in state.board.nodes.values():
            strengths[node.owner_id] += node.strength
        assert set(counts.values()) == {6}
        assert set(strengths.values()) == {12}

    def test_custom_players(self):
        engine = create_standard_game(
            players=["alice", "bob", "carol"], rows=4, columns=4, nodes_per_player=4, seed=2
        )
        state = engine.get_state()
        assert [p.id for p in state.players] == ["alice", "bob", "carol"]
        assert len(state.board.nodes) == 12

    def test_seed_reproduces_board(self):
        a = create_standard_game(seed=42).get_state().board
        b = create_standard_game(seed=42).get_state().board
        assert a.to_dict() == b.to_dict()

    def test_explicit_rng(self):
        a = create_standard_game(rng=Mulberry32(42)).get_state().board
        b = create_standard_game(seed=42).get_state().board
        assert a.to_dict() == b.to_dict()

    def test_event_bus_sees_start(self):
        bus = EventBus()
        seen = []
        bus.subscribe(EventType.GAME_STARTED, seen.append)
        create_standard_game(seed=3, event_bus=bus)
        assert len(seen) == 1

    def test_win_probability_passed_through(self):
        engine = create_standard_game(seed=3, attack_win_probability=0.7)
        assert engine.attack_win_probability == 0.7


class TestValidation:
    """Rejected options."""

    def test_exceeds_grid(self):
        with pytest.raises(ValueError, match="grid capacity"):
            create_standard_game(rows=2, columns=2, seed=1)

    def test_exceeds_max_nodes(self):
        with pytest.raises(ValueError, match="max_nodes"):
            create_standard_game(max_nodes=20, seed=1)

    @pytest.mark.parametrize("option", ["rows", "columns", "nodes_per_player"])
    def test_non_positive(self, option):
        with pytest.raises(ValueError):
            create_standard_game(seed=1, **{option: 0})

    def test_strength_pool_too_small(self):
        with pytest.raises(ValueError):
            create_standard_game(strength_per_player=3, seed=1)

    def test_bad_win_probability(self):
        with pytest.raises(ValueError):
            create_standard_game(attack_win_probability=0, seed=1)
