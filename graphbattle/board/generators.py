"""
Board generators.

Any object with generate(players, rng) -> Board can build the initial board
for an engine. Two are provided:

- EmptyBoardGenerator: N disconnected, unowned, zero-strength nodes
- StandardBoardGenerator: a connected region carved out of a grid, split
  evenly between players with a fixed strength pool each
"""

from __future__ import annotations
from typing import Iterable, Protocol, Sequence, runtime_checkable
import logging

from ..config import BoardDefaults
from ..engine_core.graph_utils import flood_fill, is_connected
from ..engine_core.rng import RandomSource, random_index, shuffle
from ..engine_core.state import (
    Board,
    Dimensions,
    Node,
    Player,
    Position,
    create_board,
    create_node,
)

logger = logging.getLogger(__name__)

Cell = tuple[int, int]

_DIRECTIONS = [
    (d_row, d_column)
    for d_row in (-1, 0, 1)
    for d_column in (-1, 0, 1)
    if (d_row, d_column) != (0, 0)
]


@runtime_checkable
class BoardGenerator(Protocol):
    """Builds the initial board for a set of players."""

    def generate(self, players: Sequence[Player], rng: RandomSource) -> Board:
        ...


def _node_id(index: int) -> str:
    return f"node-{index + 1}"


class EmptyBoardGenerator:
    """Produces node_count isolated, unowned nodes. Useful for engine tests."""

    def __init__(self, node_count: int = 0):
        if not isinstance(node_count, int) or isinstance(node_count, bool) or node_count < 0:
            raise ValueError("node_count must be a non-negative integer")
        self.node_count = node_count

    def generate(self, players: Sequence[Player], rng: RandomSource) -> Board:
        nodes = [create_node(_node_id(i)) for i in range(self.node_count)]
        return create_board(nodes)


class StandardBoardGenerator:
    """
    Carves a connected set of grid cells and deals them out to players.

    Steps:
    1. Start from every cell of a rows x columns grid (8-neighborhood)
    2. Remove random cells that do not disconnect the rest, until
       target_node_count remain or max_carve_passes passes are used up
    3. Otherwise fall back to the first target_node_count cells of a
       randomized BFS, which is connected by construction
    4. Shuffle the cells and hand out equal contiguous chunks per player
    5. Give each player's nodes 1 strength, then drop the rest of the
       player's pool on uniformly random nodes (repeats allowed)
    6. Link every pair of selected cells that touch, once per pair
    """

    def __init__(
        self,
        rows: int = BoardDefaults.ROWS,
        columns: int = BoardDefaults.COLUMNS,
        target_node_count: int = BoardDefaults.TARGET_NODE_COUNT,
        player_count: int = BoardDefaults.REQUIRED_PLAYER_COUNT,
        strength_per_player: int = BoardDefaults.STRENGTH_PER_PLAYER,
        max_carve_passes: int = BoardDefaults.MAX_CARVE_PASSES,
    ):
        for name, value in (
            ("rows", rows),
            ("columns", columns),
            ("player_count", player_count),
            ("max_carve_passes", max_carve_passes),
        ):
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"{name} must be a positive integer")

        max_nodes = rows * columns
        if (
            not isinstance(target_node_count, int)
            or isinstance(target_node_count, bool)
            or target_node_count <= 0
            or target_node_count > max_nodes
        ):
            raise ValueError("target_node_count must be a positive integer not exceeding rows * columns")
        if target_node_count % player_count != 0:
            raise ValueError("target_node_count must be divisible by the number of players")

        nodes_per_player = target_node_count // player_count
        min_pool = nodes_per_player * BoardDefaults.MIN_STRENGTH_PER_NODE
        if not isinstance(strength_per_player, int) or strength_per_player < min_pool:
            raise ValueError(f"strength_per_player must be an integer >= {min_pool}")

        self.rows = rows
        self.columns = columns
        self.target_node_count = target_node_count
        self.player_count = player_count
        self.nodes_per_player = nodes_per_player
        self.strength_per_player = strength_per_player
        self.max_carve_passes = max_carve_passes

    def generate(self, players: Sequence[Player], rng: RandomSource) -> Board:
        if rng is None:
            raise ValueError("StandardBoardGenerator requires a random source")
        if len(players) != self.player_count:
            raise ValueError(
                f"StandardBoardGenerator requires exactly {self.player_count} players, got {len(players)}"
            )

        cells = self._carve(rng)
        if cells is None:
            logger.warning(
                f"Carving did not reach {self.target_node_count} cells in "
                f"{self.max_carve_passes} passes; using BFS selection"
            )
            cells = self._traversal_order(rng)[: self.target_node_count]

        cells = sorted(cells)
        positions = [Position(row=r, column=c) for r, c in cells]
        nodes = self._assign_ownership(positions, players, rng)
        edges = self._build_edges(cells)
        return create_board(nodes, edges, Dimensions(rows=self.rows, columns=self.columns))

    # =========================================================================
    # Grid geometry
    # =========================================================================

    def _all_cells(self) -> list[Cell]:
        return [(r, c) for r in range(self.rows) for c in range(self.columns)]

    def _neighbors(self, cell: Cell) -> list[Cell]:
        """8-neighborhood, clipped at the grid edge (no wraparound)."""
        row, column = cell
        result = []
        for d_row, d_column in _DIRECTIONS:
            r, c = row + d_row, column + d_column
            if 0 <= r < self.rows and 0 <= c < self.columns:
                result.append((r, c))
        return result

    # =========================================================================
    # Cell selection
    # =========================================================================

    def _carve(self, rng: RandomSource) -> set[Cell] | None:
        """Remove non-cut cells at random; None if the target was not reached."""
        active = set(self._all_cells())
        for _ in range(self.max_carve_passes):
            if len(active) == self.target_node_count:
                break
            for cell in shuffle(sorted(active), rng):
                if len(active) == self.target_node_count:
                    break
                active.discard(cell)
                if not is_connected(active, self._neighbors):
                    active.add(cell)
        if len(active) != self.target_node_count:
            return None
        return active

    def _traversal_order(self, rng: RandomSource) -> list[Cell]:
        """Randomized BFS over the whole grid from a random start cell."""
        all_cells = self._all_cells()
        start = all_cells[random_index(rng, len(all_cells))]
        return flood_fill(
            start,
            lambda cell: shuffle(self._neighbors(cell), rng),
            lambda cell: True,
        )

    # =========================================================================
    # Ownership and strength
    # =========================================================================

    def _assign_ownership(
        self,
        positions: list[Position],
        players: Sequence[Player],
        rng: RandomSource,
    ) -> list[Node]:
        """
        Deal shuffled nodes out in equal chunks.

        Chunks ignore geography, so a player's starting nodes can be
        scattered across the board.
        """
        index_of = {pos: i for i, pos in enumerate(positions)}
        dealt = shuffle(positions, rng)
        nodes = []
        for p_index, player in enumerate(players):
            chunk = dealt[p_index * self.nodes_per_player:(p_index + 1) * self.nodes_per_player]
            strengths = self._distribute_strength(rng)
            for pos, strength in zip(chunk, strengths):
                nodes.append(create_node(_node_id(index_of[pos]), player.id, strength, pos))
        nodes.sort(key=lambda n: index_of[n.position])
        return nodes

    def _distribute_strength(self, rng: RandomSource) -> list[int]:
        """
        Split one player's pool over their nodes.

        Simple random allocation: each extra point goes to an independently
        drawn node, so the split is not an exact uniform partition.
        """
        strengths = [BoardDefaults.MIN_STRENGTH_PER_NODE] * self.nodes_per_player
        remaining = self.strength_per_player - sum(strengths)
        while remaining > 0:
            strengths[random_index(rng, self.nodes_per_player)] += 1
            remaining -= 1
        return strengths

    def _build_edges(self, cells: Iterable[Cell]) -> list[tuple[str, str]]:
        cell_list = list(cells)
        ids = {cell: _node_id(i) for i, cell in enumerate(cell_list)}
        seen: set[frozenset[str]] = set()
        edges = []
        for cell in cell_list:
            origin = ids[cell]
            for neighbor in self._neighbors(cell):
                neighbor_id = ids.get(neighbor)
                if neighbor_id is None:
                    continue
                key = frozenset((origin, neighbor_id))
                if key in seen:
                    continue
                seen.add(key)
                edges.append((origin, neighbor_id))
        return edges
