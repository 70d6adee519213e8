"""
Reinforcement allocation.

At the end of a turn the player's largest connected territory earns one
unit per node. The units are spread over the territory's border nodes
(those touching a node the player does not own): every border node gets
an equal share and the remainder goes one unit each to a random subset.

Randomness is needed to break ties between equally large territories and
to pick the remainder nodes. ReinforcementPlanner pins those draws per
(player, turn number) so a preview shown before the turn ends replays the
exact draws the committed award will use.
"""

from __future__ import annotations
import logging

from .graph_utils import connected_components
from .rng import Mulberry32, RandomSource, RecordedRandom, derive_seed, random_index, shuffle
from .state import Allocation, Board, ReinforcementSummary

logger = logging.getLogger(__name__)


def find_territories(board: Board, player_id: str) -> list[list[str]]:
    """
    All maximal connected components of nodes owned by player_id.

    Neighbors are visited in sorted order so component order does not
    depend on set iteration order.
    """
    owned = [n.id for n in board.nodes_owned_by(player_id)]
    return connected_components(owned, lambda node_id: sorted(board.neighbors(node_id)))


def select_territory(components: list[list[str]], rng: RandomSource) -> list[str]:
    """The largest component; one draw picks among ties."""
    if not components:
        return []
    largest = max(len(c) for c in components)
    tied = [c for c in components if len(c) == largest]
    if len(tied) == 1:
        return tied[0]
    return tied[random_index(rng, len(tied))]


def find_border_nodes(board: Board, player_id: str, territory: list[str]) -> list[str]:
    """Territory nodes adjacent to at least one node the player does not own."""
    border = []
    for node_id in territory:
        for neighbor_id in board.neighbors(node_id):
            neighbor = board.get_node(neighbor_id)
            if neighbor is not None and neighbor.owner_id != player_id:
                border.append(node_id)
                break
    return border


def evaluate_reinforcements(board: Board, player_id: str, rng: RandomSource) -> ReinforcementSummary:
    """
    Compute the reinforcement summary for player_id without touching the board.

    Draws from rng only for a territory tie-break and for the remainder
    shuffle; a unique territory with no remainder consumes nothing.
    """
    if not isinstance(player_id, str) or not player_id:
        raise ValueError("playerId is required to evaluate reinforcements")

    territory = select_territory(find_territories(board, player_id), rng)
    eligible = find_border_nodes(board, player_id, territory) if territory else []

    if not eligible:
        return ReinforcementSummary(
            player_id=player_id,
            total=0,
            territory_node_ids=tuple(territory),
        )

    total = len(territory)
    base_amount, remainder = divmod(total, len(eligible))
    amounts = {node_id: base_amount for node_id in eligible}
    if remainder:
        for node_id in shuffle(eligible, rng)[:remainder]:
            amounts[node_id] += 1

    return ReinforcementSummary(
        player_id=player_id,
        total=total,
        territory_node_ids=tuple(territory),
        eligible_node_ids=tuple(eligible),
        base_amount=base_amount,
        remainder=remainder,
        allocations=tuple(
            Allocation(node_id=node_id, amount=amount)
            for node_id, amount in amounts.items()
            if amount > 0
        ),
    )


class ReinforcementPlanner:
    """
    Caches reinforcement draws per (player, turn number).

    Every (player, turn) key gets its own sub-generator split from a base
    stream that is pinned once, the first time the planner is used. The key's
    draws therefore do not depend on when it is first evaluated, so a preview
    taken at any point before the award replays the award's draws, and
    previews never shift the main sequence used by combat.

    Sources without split() give up a single draw when the base is pinned;
    that draw seeds a private Mulberry32.

    Usage:
        planner = ReinforcementPlanner(rng)
        planner.begin_turn("p1", 1)
        preview = planner.evaluate(board, "p1", 1)
        award = planner.evaluate(board, "p1", 1)   # same draws as preview
        planner.forget("p1", 1)
    """

    def __init__(self, rng: RandomSource):
        self._rng = rng
        self._base: RandomSource | None = None
        self._streams: dict[tuple[str, int], tuple[list[float], RandomSource]] = {}

    def _base_source(self) -> RandomSource:
        if self._base is None:
            split = getattr(self._rng, "split", None)
            if callable(split):
                self._base = split("reinforcements")
            else:
                self._base = Mulberry32(derive_seed(self._rng))
        return self._base

    def _source_for(self, player_id: str, turn_number: int) -> RandomSource:
        base = self._base_source()
        split = getattr(base, "split", None)
        if callable(split):
            return split(f"{player_id}:{turn_number}")
        return base

    def _stream(self, player_id: str, turn_number: int) -> tuple[list[float], RandomSource]:
        key = (player_id, turn_number)
        if key not in self._streams:
            self._streams[key] = ([], self._source_for(player_id, turn_number))
        return self._streams[key]

    def begin_turn(self, player_id: str, turn_number: int) -> None:
        """Drop keys from earlier turns and pin the starting player's stream."""
        stale = [key for key in self._streams if key[1] < turn_number]
        for key in stale:
            del self._streams[key]
        self._stream(player_id, turn_number)

    def evaluate(self, board: Board, player_id: str, turn_number: int) -> ReinforcementSummary:
        draws, source = self._stream(player_id, turn_number)
        summary = evaluate_reinforcements(board, player_id, RecordedRandom(draws, source))
        logger.debug(
            f"Reinforcements for {player_id} turn {turn_number}: "
            f"total={summary.total} eligible={len(summary.eligible_node_ids)} draws={len(draws)}"
        )
        return summary

    def forget(self, player_id: str, turn_number: int) -> None:
        self._streams.pop((player_id, turn_number), None)

    def cached_keys(self) -> list[tuple[str, int]]:
        return list(self._streams)
