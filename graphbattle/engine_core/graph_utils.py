"""
Graph utilities shared by board generation and reinforcement detection.
"""

from __future__ import annotations
from collections import deque
from typing import Callable, Hashable, Iterable, TypeVar

K = TypeVar("K", bound=Hashable)


def build_adjacency_map(edges: Iterable[tuple[str, str]]) -> dict[str, set[str]]:
    """
    Build a symmetric neighbor map from undirected edges.

    Only ids that appear in at least one edge get an entry.
    """
    adjacency: dict[str, set[str]] = {}
    for edge in edges:
        if not isinstance(edge, (tuple, list)) or len(edge) != 2:
            raise ValueError("edges must be (from_id, to_id) pairs")
        from_id, to_id = edge
        if not isinstance(from_id, str) or not from_id:
            raise ValueError("Edge endpoints must be non-empty strings")
        if not isinstance(to_id, str) or not to_id:
            raise ValueError("Edge endpoints must be non-empty strings")
        adjacency.setdefault(from_id, set()).add(to_id)
        adjacency.setdefault(to_id, set()).add(from_id)
    return adjacency


def flood_fill(
    start: K,
    neighbors: Callable[[K], Iterable[K]],
    include: Callable[[K], bool],
) -> list[K]:
    """BFS from start over neighbors accepted by include; returns visit order."""
    visited = {start}
    order: list[K] = []
    queue = deque([start])
    while queue:
        current = queue.popleft()
        order.append(current)
        for neighbor in neighbors(current):
            if neighbor in visited or not include(neighbor):
                continue
            visited.add(neighbor)
            queue.append(neighbor)
    return order


def connected_components(
    members: Iterable[K],
    neighbors: Callable[[K], Iterable[K]],
) -> list[list[K]]:
    """
    Maximal connected components of the induced subgraph on members.

    Components come out in the order their first member appears in members.
    """
    member_list = list(members)
    member_set = set(member_list)
    seen: set[K] = set()
    components: list[list[K]] = []
    for member in member_list:
        if member in seen:
            continue
        component = flood_fill(member, neighbors, member_set.__contains__)
        seen.update(component)
        components.append(component)
    return components


def is_connected(
    members: Iterable[K],
    neighbors: Callable[[K], Iterable[K]],
) -> bool:
    """True when members form a single component (an empty set counts as connected)."""
    member_set = set(members)
    if not member_set:
        return True
    start = next(iter(member_set))
    return len(flood_fill(start, neighbors, member_set.__contains__)) == len(member_set)
