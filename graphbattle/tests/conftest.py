"""
Pytest fixtures for Graph Battle tests.
"""

import pytest

from ..engine_core.action import Action, create_attack_action
from ..engine_core.combat import can_attack
from ..engine_core.engine import GameEngine
from ..engine_core.events import EventBus, GameEvent
from ..engine_core.rng import Mulberry32
from ..engine_core.state import Board, create_board, create_node


class ScriptedRandom:
    """Random source that returns a fixed list of draws, then fails loudly."""

    def __init__(self, draws):
        self._draws = list(draws)
        self.consumed = 0

    def next(self) -> float:
        if self.consumed >= len(self._draws):
            raise AssertionError(f"Scripted draws exhausted after {self.consumed}")
        value = self._draws[self.consumed]
        self.consumed += 1
        return value

    def split(self, key):
        # Sub-streams share the script so a test controls every draw
        return self


class PlainRandom:
    """Wraps a seeded generator but offers only next()."""

    def __init__(self, seed):
        self._inner = Mulberry32(seed)

    def next(self) -> float:
        return self._inner.next()


class FixedBoardGenerator:
    """Returns a prebuilt board regardless of players and rng."""

    def __init__(self, board: Board):
        self.board = board

    def generate(self, players, rng) -> Board:
        return self.board


def build_board(nodes, edges=()) -> Board:
    """nodes are (id, owner_id, strength) tuples."""
    return create_board([create_node(*spec) for spec in nodes], edges)


def first_legal_attack(engine: GameEngine) -> Action | None:
    """The active player's first legal attack in node order, if any."""
    state = engine.get_state()
    player_id = state.turn.active_player_id
    for node in state.board.nodes_owned_by(player_id):
        for neighbor_id in sorted(state.board.neighbors(node.id)):
            if can_attack(state.board, player_id, node.id, neighbor_id).ok:
                return create_attack_action(player_id, node.id, neighbor_id)
    return None


@pytest.fixture
def scripted_rng():
    """Factory: scripted_rng([0.9, 0.1])."""
    return ScriptedRandom


@pytest.fixture
def event_log():
    """An EventBus plus the list of every event it publishes."""
    bus = EventBus()
    events: list[GameEvent] = []
    bus.subscribe_all(events.append)
    return bus, events


@pytest.fixture
def make_engine():
    """
    Factory for engines on a hand-built board.

    Usage:
        engine = make_engine(
            nodes=[("a", "p1", 3), ("b", "p2", 1)],
            edges=[("a", "b")],
            draws=[0.9],
        )
    """
    def _make(nodes, edges=(), players=("p1", "p2"), draws=(), event_bus=None, **kwargs):
        return GameEngine(
            players=list(players),
            board_generator=FixedBoardGenerator(build_board(nodes, edges)),
            rng=ScriptedRandom(draws),
            event_bus=event_bus,
            **kwargs,
        )
    return _make


@pytest.fixture
def chain_board() -> Board:
    """
    p1 holds a chain n1-n2-n3 with enemy nodes at both ends.

    Border nodes are n1 and n3; the territory is 3 nodes, so each border
    node gets 1 and one of them gets the remainder.
    """
    return build_board(
        nodes=[
            ("n1", "p1", 1),
            ("n2", "p1", 1),
            ("n3", "p1", 1),
            ("e1", "p2", 1),
            ("e2", "p2", 1),
        ],
        edges=[("n1", "n2"), ("n2", "n3"), ("n1", "e1"), ("n3", "e2")],
    )
