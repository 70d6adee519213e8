"""
Tests for board generators.

Tests:
- Empty board generation
- Standard board shape (connected, exact size, balanced)
- Strength pools
- Seed determinism
- Constructor validation
"""

from collections import Counter

import pytest

from ..board.generators import (
    BoardGenerator,
    EmptyBoardGenerator,
    StandardBoardGenerator,
)
from ..engine_core.graph_utils import is_connected
from ..engine_core.rng import Mulberry32
from ..engine_core.state import create_player


def five_players():
    return [create_player(f"p{i + 1}", index=i) for i in range(5)]


@pytest.fixture
def standard_board():
    return StandardBoardGenerator().generate(five_players(), Mulberry32(2024))


class TestEmptyBoardGenerator:
    """Tests for the trivial generator."""

    def test_default_is_empty(self):
        board = EmptyBoardGenerator().generate(five_players(), Mulberry32(1))
        assert board.nodes == {}
        assert board.edges == ()

    def test_isolated_unowned_nodes(self):
        board = EmptyBoardGenerator(3).generate(five_players(), Mulberry32(1))
        assert list(board.nodes) == ["node-1", "node-2", "node-3"]
        for node in board.nodes.values():
            assert node.owner_id is None
            assert node.strength == 0
            assert board.neighbors(node.id) == frozenset()

    def test_rejects_negative_count(self):
        with pytest.raises(ValueError):
            EmptyBoardGenerator(-1)

    def test_satisfies_protocol(self):
        assert isinstance(EmptyBoardGenerator(), BoardGenerator)
        assert isinstance(StandardBoardGenerator(), BoardGenerator)


class TestStandardBoardShape:
    """Structural properties of a standard board."""

    def test_exact_node_count(self, standard_board):
        assert len(standard_board.nodes) == 30

    def test_connected(self, standard_board):
        assert is_connected(standard_board.nodes, standard_board.neighbors)

    def test_node_ids_follow_row_major_order(self, standard_board):
        nodes = list(standard_board.nodes.values())
        assert [n.id for n in nodes] == [f"node-{i + 1}" for i in range(30)]
        cells = [(n.position.row, n.position.column) for n in nodes]
        assert cells == sorted(cells)

    def test_positions_within_grid(self, standard_board):
        for node in standard_board.nodes.values():
            assert 0 <= node.position.row < 6
            assert 0 <= node.position.column < 8
        assert standard_board.dimensions.rows == 6
        assert standard_board.dimensions.columns == 8

    def test_edges_link_touching_cells_once(self, standard_board):
        seen = set()
        for a, b in standard_board.edges:
            pa = standard_board.nodes[a].position
            pb = standard_board.nodes[b].position
            assert max(abs(pa.row - pb.row), abs(pa.column - pb.column)) == 1
            key = frozenset((a, b))
            assert key not in seen
            seen.add(key)

    def test_every_touching_pair_is_linked(self, standard_board):
        by_cell = {
            (n.position.row, n.position.column): n.id
            for n in standard_board.nodes.values()
        }
        for (row, column), node_id in by_cell.items():
            for d_row in (-1, 0, 1):
                for d_column in (-1, 0, 1):
                    other = by_cell.get((row + d_row, column + d_column))
                    if other is None or other == node_id:
                        continue
                    assert standard_board.are_adjacent(node_id, other)

    def test_full_grid_target(self):
        """Target equal to the grid size keeps every cell."""
        generator = StandardBoardGenerator(rows=2, columns=5, target_node_count=10)
        board = generator.generate(five_players(), Mulberry32(5))
        assert len(board.nodes) == 10
        assert is_connected(board.nodes, board.neighbors)


class TestStandardBoardOwnership:
    """Ownership and strength distribution."""

    def test_equal_node_counts(self, standard_board):
        counts = Counter(n.owner_id for n in standard_board.nodes.values())
        assert counts == {f"p{i + 1}": 6 for i in range(5)}

    def test_strength_pool_per_player(self, standard_board):
        totals = Counter()
        for node in standard_board.nodes.values():
            totals[node.owner_id] += node.strength
        assert all(total == 12 for total in totals.values())

    def test_minimum_strength(self, standard_board):
        assert all(n.strength >= 1 for n in standard_board.nodes.values())

    def test_custom_player_count(self):
        players = [create_player("a"), create_player("b")]
        generator = StandardBoardGenerator(
            rows=4, columns=4, target_node_count=8, player_count=2, strength_per_player=10
        )
        board = generator.generate(players, Mulberry32(17))
        counts = Counter(n.owner_id for n in board.nodes.values())
        assert counts == {"a": 4, "b": 4}


class TestDeterminism:
    """Same seed, same board."""

    def test_same_seed_same_board(self):
        a = StandardBoardGenerator().generate(five_players(), Mulberry32(77))
        b = StandardBoardGenerator().generate(five_players(), Mulberry32(77))
        assert a.to_dict() == b.to_dict()

    def test_different_seeds_differ(self):
        a = StandardBoardGenerator().generate(five_players(), Mulberry32(1))
        b = StandardBoardGenerator().generate(five_players(), Mulberry32(2))
        assert a.to_dict() != b.to_dict()


class TestTraversalFallback:
    """The BFS selection used when carving stalls."""

    def test_traversal_visits_every_cell(self):
        generator = StandardBoardGenerator()
        order = generator._traversal_order(Mulberry32(9))
        assert sorted(order) == generator._all_cells()

    def test_traversal_prefix_is_connected(self):
        generator = StandardBoardGenerator()
        prefix = generator._traversal_order(Mulberry32(9))[:30]
        assert is_connected(prefix, generator._neighbors)

    def test_neighbors_clip_at_edges(self):
        generator = StandardBoardGenerator()
        assert len(generator._neighbors((0, 0))) == 3
        assert len(generator._neighbors((0, 3))) == 5
        assert len(generator._neighbors((2, 3))) == 8


class TestValidation:
    """Constructor and generate() argument checks."""

    def test_wrong_player_count(self):
        with pytest.raises(ValueError, match="exactly 5 players"):
            StandardBoardGenerator().generate(five_players()[:4], Mulberry32(1))

    def test_requires_rng(self):
        with pytest.raises(ValueError):
            StandardBoardGenerator().generate(five_players(), None)

    def test_target_exceeds_grid(self):
        with pytest.raises(ValueError):
            StandardBoardGenerator(rows=2, columns=2, target_node_count=5)

    def test_target_not_divisible(self):
        with pytest.raises(ValueError, match="divisible"):
            StandardBoardGenerator(target_node_count=31)

    def test_pool_too_small(self):
        with pytest.raises(ValueError, match="strength_per_player"):
            StandardBoardGenerator(strength_per_player=5)

    @pytest.mark.parametrize("field", ["rows", "columns", "player_count", "max_carve_passes"])
    def test_non_positive_dimensions(self, field):
        with pytest.raises(ValueError):
            StandardBoardGenerator(**{field: 0})
