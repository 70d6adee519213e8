"""
Engine Core - Deterministic game state management and rule resolution.

The engine is the runtime that:
1. Builds the initial board through a board generator
2. Manages the immutable GameState
3. Validates and applies actions
4. Resolves combat and reinforcements
5. Publishes events for UI and bot collaborators
"""

from .rng import Mulberry32, RandomSource, RecordedRandom, derive_seed, random_index, shuffle
from .errors import GraphBattleError, MissingNodeError
from .state import (
    Allocation,
    Board,
    Dimensions,
    GameState,
    GameStatus,
    Node,
    Player,
    Position,
    ReinforcementSummary,
    Turn,
    advance_turn,
    create_board,
    create_game_state,
    create_node,
    create_player,
    create_turn,
)
from .action import (
    Action,
    ActionError,
    ActionResult,
    ActionType,
    ErrorCode,
    create_attack_action,
    create_end_turn_action,
    validate_action,
)
from .events import EventBus, EventType, GameEvent
from .combat import AttackEvaluation, AttackIneligibility, AttackOutcome, CombatRound, can_attack, resolve_attack
from .reinforcements import ReinforcementPlanner, evaluate_reinforcements
from .engine import GameEngine, GameView

__all__ = [
    "Mulberry32",
    "RandomSource",
    "RecordedRandom",
    "derive_seed",
    "random_index",
    "shuffle",
    "GraphBattleError",
    "MissingNodeError",
    "Allocation",
    "Board",
    "Dimensions",
    "GameState",
    "GameStatus",
    "Node",
    "Player",
    "Position",
    "ReinforcementSummary",
    "Turn",
    "advance_turn",
    "create_board",
    "create_game_state",
    "create_node",
    "create_player",
    "create_turn",
    "Action",
    "ActionError",
    "ActionResult",
    "ActionType",
    "ErrorCode",
    "create_attack_action",
    "create_end_turn_action",
    "validate_action",
    "EventBus",
    "EventType",
    "GameEvent",
    "AttackEvaluation",
    "AttackIneligibility",
    "AttackOutcome",
    "CombatRound",
    "can_attack",
    "resolve_attack",
    "ReinforcementPlanner",
    "evaluate_reinforcements",
    "GameEngine",
    "GameView",
]
