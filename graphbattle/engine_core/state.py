"""
Game State - Immutable domain entities.

Design principles:
- Frozen: every entity is a frozen dataclass; mutations return new values
- Validated: the create_* factories reject malformed input with ValueError
- Serializable: to_dict() on every entity for views and the API
- Stable ids: a changed node replaces the old one under the same id
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable, Mapping

from ..config import GameDefaults
from .graph_utils import build_adjacency_map

DEFAULT_PLAYER_COLORS = GameDefaults.PLAYER_COLORS


class GameStatus(Enum):
    """High-level game status."""
    ACTIVE = "active"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Player:
    """A participant. Created once at game start."""
    id: str
    color: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "color": self.color, "name": self.name}


@dataclass(frozen=True)
class Position:
    """Grid cell a node was carved from."""
    row: int
    column: int

    def to_dict(self) -> dict[str, int]:
        return {"row": self.row, "column": self.column}


@dataclass(frozen=True)
class Dimensions:
    """Size of the grid a board was carved from."""
    rows: int
    columns: int

    def to_dict(self) -> dict[str, int]:
        return {"rows": self.rows, "columns": self.columns}


@dataclass(frozen=True)
class Node:
    """
    A graph vertex with an owner and an integer strength.

    owner_id is None for unowned nodes; strength is never negative.
    """
    id: str
    owner_id: str | None = None
    strength: int = 0
    position: Position | None = None

    def with_strength(self, strength: int) -> Node:
        return create_node(self.id, self.owner_id, strength, self.position)

    def with_owner(self, owner_id: str | None, strength: int) -> Node:
        return create_node(self.id, owner_id, strength, self.position)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "strength": self.strength,
            "position": self.position.to_dict() if self.position else None,
        }


@dataclass(frozen=True)
class Board:
    """
    Nodes plus the undirected edges between them.

    adjacency is always the symmetric closure of edges and has an entry
    (possibly empty) for every node. The node set never changes after
    generation; only owners and strengths do.
    """
    nodes: Mapping[str, Node]
    adjacency: Mapping[str, frozenset[str]]
    edges: tuple[tuple[str, str], ...] = ()
    dimensions: Dimensions | None = None

    def get_node(self, node_id: str) -> Node | None:
        return self.nodes.get(node_id)

    def neighbors(self, node_id: str) -> frozenset[str]:
        return self.adjacency.get(node_id, frozenset())

    def are_adjacent(self, a: str, b: str) -> bool:
        return b in self.neighbors(a)

    def nodes_owned_by(self, player_id: str) -> list[Node]:
        return [n for n in self.nodes.values() if n.owner_id == player_id]

    def owns_any(self, player_id: str) -> bool:
        return any(n.owner_id == player_id for n in self.nodes.values())

    def with_nodes(self, *updated: Node) -> Board:
        """Return a new board with the given nodes replaced by id."""
        new_nodes = dict(self.nodes)
        for node in updated:
            if node.id not in new_nodes:
                raise ValueError(f"Cannot add node {node.id}: the node set is fixed")
            new_nodes[node.id] = node
        return replace(self, nodes=new_nodes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes.values()],
            "edges": [list(e) for e in self.edges],
            "dimensions": self.dimensions.to_dict() if self.dimensions else None,
        }


@dataclass(frozen=True)
class Turn:
    """Whose turn it is. Wrapping order_index to 0 starts a new turn number."""
    number: int
    order_index: int
    active_player_id: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "number": self.number,
            "order_index": self.order_index,
            "active_player_id": self.active_player_id,
        }


@dataclass(frozen=True)
class Allocation:
    """Reinforcement units assigned to one node."""
    node_id: str
    amount: int

    def to_dict(self) -> dict[str, Any]:
        return {"node_id": self.node_id, "amount": self.amount}


@dataclass(frozen=True)
class ReinforcementSummary:
    """
    Result of evaluating reinforcements for a player.

    Produced both as a preview and as the committed award; for the same
    player and turn number the two are equal.
    """
    player_id: str
    total: int
    territory_node_ids: tuple[str, ...] = ()
    eligible_node_ids: tuple[str, ...] = ()
    base_amount: int = 0
    remainder: int = 0
    allocations: tuple[Allocation, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_id": self.player_id,
            "total": self.total,
            "territory_node_ids": list(self.territory_node_ids),
            "eligible_node_ids": list(self.eligible_node_ids),
            "base_amount": self.base_amount,
            "remainder": self.remainder,
            "allocations": [a.to_dict() for a in self.allocations],
        }


@dataclass(frozen=True)
class GameState:
    """
    Complete game state at a point in time.

    This is the canonical state the engine operates on. Once winner_id is
    set the state is terminal.
    """
    board: Board
    players: tuple[Player, ...]
    turn: Turn
    last_reinforcements: ReinforcementSummary | None = None
    winner_id: str | None = None

    @property
    def status(self) -> GameStatus:
        return GameStatus.COMPLETE if self.winner_id is not None else GameStatus.ACTIVE

    @property
    def is_over(self) -> bool:
        return self.winner_id is not None

    @property
    def current_player(self) -> Player:
        return self.players[self.turn.order_index]

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)


# ===== Validating factories =====

def _require_id(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{what} must be a non-empty string")
    return value


def _require_int(value: Any, what: str, minimum: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < minimum:
        raise ValueError(f"{what} must be an integer >= {minimum}")
    return value


def create_player(
    id: str,
    color: str | None = None,
    name: str | None = None,
    index: int = 0,
) -> Player:
    """Create a player; color defaults to the palette entry for index."""
    _require_id(id, "Player id")
    if color is None:
        color = DEFAULT_PLAYER_COLORS[index % len(DEFAULT_PLAYER_COLORS)]
    return Player(id=id, color=color, name=name or id)


def create_node(
    id: str,
    owner_id: str | None = None,
    strength: int = 0,
    position: Position | None = None,
) -> Node:
    _require_id(id, "Node id")
    if owner_id is not None:
        _require_id(owner_id, "owner_id")
    _require_int(strength, "strength", 0)
    return Node(id=id, owner_id=owner_id, strength=strength, position=position)


def create_board(
    nodes: Iterable[Node],
    edges: Iterable[tuple[str, str]] = (),
    dimensions: Dimensions | None = None,
) -> Board:
    """
    Build a board from nodes and undirected edges.

    Raises ValueError on duplicate node ids, self-loops, or edges that
    reference unknown nodes.
    """
    node_map: dict[str, Node] = {}
    for node in nodes:
        if node.id in node_map:
            raise ValueError(f"Duplicate node id detected: {node.id}")
        node_map[node.id] = create_node(node.id, node.owner_id, node.strength, node.position)

    edge_list: list[tuple[str, str]] = []
    for edge in edges:
        a, b = edge
        if a not in node_map or b not in node_map:
            raise ValueError(f"Edge references unknown node: {a}, {b}")
        if a == b:
            raise ValueError(f"Self-loop on node {a} is not allowed")
        edge_list.append((a, b))

    linked = build_adjacency_map(edge_list)
    adjacency = {
        node_id: frozenset(linked.get(node_id, ()))
        for node_id in node_map
    }
    return Board(
        nodes=node_map,
        adjacency=adjacency,
        edges=tuple(edge_list),
        dimensions=dimensions,
    )


def create_turn(active_player_id: str, number: int = 1, order_index: int = 0) -> Turn:
    _require_id(active_player_id, "active_player_id")
    _require_int(number, "Turn number", 1)
    _require_int(order_index, "order_index", 0)
    return Turn(number=number, order_index=order_index, active_player_id=active_player_id)


def create_game_state(
    board: Board,
    players: Iterable[Player],
    turn: Turn | None = None,
) -> GameState:
    """Compose the initial state; the first player starts turn 1."""
    if board is None:
        raise ValueError("GameState requires a board")
    player_list = tuple(players)
    if not player_list:
        raise ValueError("GameState requires at least one player")
    seen: set[str] = set()
    for p in player_list:
        if p.id in seen:
            raise ValueError(f"Duplicate player id detected: {p.id}")
        seen.add(p.id)
    if turn is None:
        turn = create_turn(player_list[0].id)
    return GameState(board=board, players=player_list, turn=turn)


def advance_turn(turn: Turn, players: tuple[Player, ...] | list[Player]) -> Turn:
    """Move to the next player in fixed rotation."""
    if not players:
        raise ValueError("players must be a non-empty sequence")
    next_index = (turn.order_index + 1) % len(players)
    number = turn.number + 1 if next_index == 0 else turn.number
    return create_turn(players[next_index].id, number=number, order_index=next_index)
