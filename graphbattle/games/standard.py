"""
Standard Game Setup - Wires a standard board, a seeded RNG and an engine.

This module handles:
- Default players (player-1 .. player-N with palette colors)
- Validating the grid against the requested node count
- Seeding the RNG so a game is replayable from its seed
"""

from __future__ import annotations
import random
from typing import Any, Iterable

from ..config import GameDefaults
from ..board.generators import StandardBoardGenerator
from ..engine_core.engine import GameEngine, normalize_players
from ..engine_core.events import EventBus
from ..engine_core.rng import Mulberry32, RandomSource


def build_default_players(count: int = GameDefaults.PLAYER_COUNT) -> list[dict[str, str]]:
    count = max(1, count)
    colors = GameDefaults.PLAYER_COLORS
    return [
        {"id": f"player-{i + 1}", "color": colors[i % len(colors)]}
        for i in range(count)
    ]


def create_standard_game(
    rows: int = GameDefaults.ROWS,
    columns: int = GameDefaults.COLUMNS,
    nodes_per_player: int = GameDefaults.NODES_PER_PLAYER,
    strength_per_player: int = GameDefaults.STRENGTH_PER_PLAYER,
    attack_win_probability: float = GameDefaults.ATTACK_WIN_PROBABILITY,
    max_nodes: int | None = None,
    players: Iterable[Any] | None = None,
    seed: int | None = None,
    rng: RandomSource | None = None,
    event_bus: EventBus | None = None,
) -> GameEngine:
    """
    Create an engine for a standard game.

    Args:
        rows, columns: Grid the board is carved from
        nodes_per_player: Starting nodes dealt to each player
        strength_per_player: Starting strength pool per player
        attack_win_probability: Chance the attacker wins a combat round
        max_nodes: Optional cap on the total node count
        players: Player objects, dicts or ids (defaults to five players)
        seed: Seed for a Mulberry32 RNG; ignored when rng is given
        rng: Explicit random source
        event_bus: Bus to publish on (subscribe before creating the game
            to receive game_started)

    Returns:
        A GameEngine with the first player to act
    """
    for name, value in (("nodes_per_player", nodes_per_player), ("rows", rows), ("columns", columns)):
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise ValueError(f"{name} must be a positive integer")

    player_list = normalize_players(players if players is not None else build_default_players())
    if not player_list:
        raise ValueError("create_standard_game requires at least one player")

    requested_nodes = nodes_per_player * len(player_list)
    if max_nodes is not None:
        if not isinstance(max_nodes, int) or max_nodes <= 0:
            raise ValueError("max_nodes must be a positive integer when provided")
        if requested_nodes > max_nodes:
            raise ValueError("Requested nodes exceed the max_nodes constraint")
    if requested_nodes > rows * columns:
        raise ValueError("Requested nodes exceed available grid capacity")

    if rng is None:
        rng = Mulberry32(seed if seed is not None else random.getrandbits(32))

    generator = StandardBoardGenerator(
        rows=rows,
        columns=columns,
        target_node_count=requested_nodes,
        player_count=len(player_list),
        strength_per_player=strength_per_player,
    )
    return GameEngine(
        players=player_list,
        board_generator=generator,
        event_bus=event_bus,
        rng=rng,
        attack_win_probability=attack_win_probability,
    )
