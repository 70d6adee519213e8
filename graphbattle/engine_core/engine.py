"""
Game Engine - Owns the game state and applies actions to it.

The engine is the single point of state mutation:
1. Validates the action shape (malformed actions raise)
2. Checks turn order and game-over (rule failures are results)
3. Runs combat or end-of-turn reinforcement
4. Advances the turn, skipping players who own nothing
5. Detects victory and publishes events along the way

Every transition builds a new frozen GameState; a failed action leaves the
state untouched.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable, TYPE_CHECKING
import logging
import random

from . import events
from .action import Action, ActionResult, ActionType, ErrorCode, validate_action
from .combat import (
    DEFAULT_WIN_PROBABILITY,
    CombatRound,
    apply_attack_outcome,
    can_attack,
    resolve_attack,
    validate_win_probability,
)
from .events import EventBus
from .reinforcements import ReinforcementPlanner
from .rng import Mulberry32, RandomSource
from .state import (
    Board,
    Dimensions,
    GameState,
    GameStatus,
    Node,
    Player,
    ReinforcementSummary,
    Turn,
    advance_turn,
    create_game_state,
    create_player,
)

if TYPE_CHECKING:
    from ..board.generators import BoardGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameView:
    """Read model for UI and bot collaborators."""
    current_player_id: str
    turn_number: int
    status: GameStatus
    winner_id: str | None
    players: tuple[Player, ...]
    nodes: tuple[Node, ...]
    edges: tuple[tuple[str, str], ...]
    dimensions: Dimensions | None
    preview: ReinforcementSummary | None
    last_awarded: ReinforcementSummary | None

    def nodes_owned_by(self, player_id: str) -> list[Node]:
        return [n for n in self.nodes if n.owner_id == player_id]

    def to_dict(self) -> dict[str, Any]:
        dimensions = self.dimensions
        return {
            "current_player_id": self.current_player_id,
            "turn_number": self.turn_number,
            "status": self.status.value,
            "winner_id": self.winner_id,
            "players": [p.to_dict() for p in self.players],
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [list(e) for e in self.edges],
            "grid": dimensions.to_dict() if dimensions else None,
            "reinforcements": {
                "preview": self.preview.to_dict() if self.preview else None,
                "last_awarded": self.last_awarded.to_dict() if self.last_awarded else None,
            },
        }


def normalize_players(players: Iterable[Any]) -> list[Player]:
    """Accept Player instances, {"id", "color", "name"} dicts, or bare ids."""
    normalized = []
    for index, player in enumerate(players):
        if isinstance(player, Player):
            normalized.append(player)
        elif isinstance(player, dict):
            normalized.append(create_player(
                player.get("id"), player.get("color"), player.get("name"), index=index
            ))
        else:
            normalized.append(create_player(player, index=index))
    return normalized


class GameEngine:
    """
    Runs one game from the initial board to victory.

    Usage:
        engine = GameEngine(players=["p1", "p2"], board_generator=gen, rng=Mulberry32(7))
        result = engine.apply_action(create_attack_action("p1", "node-1", "node-2"))
        if result.ok:
            view = engine.get_view()
    """

    def __init__(
        self,
        players: Iterable[Any],
        board_generator: BoardGenerator | None = None,
        event_bus: EventBus | None = None,
        rng: RandomSource | None = None,
        attack_win_probability: float = DEFAULT_WIN_PROBABILITY,
    ):
        player_list = normalize_players(players or [])
        if not player_list:
            raise ValueError("GameEngine requires at least one player")

        self.event_bus = event_bus if event_bus is not None else EventBus()
        if board_generator is None:
            from ..board.generators import EmptyBoardGenerator
            board_generator = EmptyBoardGenerator()
        self.board_generator = board_generator
        self.rng = rng if rng is not None else Mulberry32(random.getrandbits(32))
        self.attack_win_probability = validate_win_probability(attack_win_probability)
        self._planner = ReinforcementPlanner(self.rng)

        board = self.board_generator.generate(player_list, self.rng)
        self._state = create_game_state(board, player_list)
        self._planner.begin_turn(self._state.turn.active_player_id, self._state.turn.number)

        logger.info(
            f"Game created with {len(player_list)} players and {len(board.nodes)} nodes"
        )
        self.event_bus.publish(events.game_started(self._state.players))
        self.event_bus.publish(events.turn_started(self._state.turn))

    # =========================================================================
    # Queries
    # =========================================================================

    def get_state(self) -> GameState:
        return self._state

    @property
    def state(self) -> GameState:
        return self._state

    def evaluate_reinforcements(self, player_id: str | None = None) -> ReinforcementSummary:
        """
        Preview the reinforcements player_id would receive this turn.

        Defaults to the active player. For a given player and turn number
        the preview equals the summary end_turn applies, even when combat
        happens in between.
        """
        turn = self._state.turn
        player_id = player_id or turn.active_player_id
        return self._planner.evaluate(self._state.board, player_id, turn.number)

    def get_view(self) -> GameView:
        state = self._state
        preview = None if state.is_over else self.evaluate_reinforcements()
        return GameView(
            current_player_id=state.turn.active_player_id,
            turn_number=state.turn.number,
            status=state.status,
            winner_id=state.winner_id,
            players=state.players,
            nodes=tuple(state.board.nodes.values()),
            edges=tuple(state.board.edges),
            dimensions=state.board.dimensions,
            preview=preview,
            last_awarded=state.last_reinforcements,
        )

    # =========================================================================
    # Actions
    # =========================================================================

    def apply_action(self, action: Action) -> ActionResult:
        """
        Apply an action.

        Raises on malformed actions or references to nodes that do not
        exist. Returns a failed ActionResult for rule violations.
        """
        validate_action(action)

        rejection = self._check_turn(action)
        if rejection is not None:
            return rejection

        if action.action_type == ActionType.ATTACK:
            return self._handle_attack(action)
        if action.action_type == ActionType.END_TURN:
            return self._handle_end_turn(action)
        raise ValueError(f"Unsupported action type: {action.action_type}")

    def _check_turn(self, action: Action) -> ActionResult | None:
        state = self._state
        if state.is_over:
            return ActionResult.failure(
                ErrorCode.GAME_OVER,
                f"The game is over; {state.winner_id} has won.",
            )
        if action.player_id != state.turn.active_player_id:
            return ActionResult.failure(
                ErrorCode.OUT_OF_TURN,
                "It is not this player's turn.",
                {"active_player_id": state.turn.active_player_id},
            )
        return None

    def _handle_attack(self, action: Action) -> ActionResult:
        state = self._state
        evaluation = can_attack(state.board, action.player_id, action.attacker_id, action.defender_id)
        if not evaluation.ok:
            return ActionResult.failure(
                ErrorCode.INVALID_ATTACK,
                evaluation.message,
                {"reason": evaluation.reason.value},
            )

        attacker, defender = evaluation.attacker, evaluation.defender

        def publish_round(combat_round: CombatRound) -> None:
            self.event_bus.publish(events.attack_iteration(
                attacker_id=attacker.id,
                defender_id=defender.id,
                winner=combat_round.winner,
                attacker_strength=combat_round.attacker_strength,
                defender_strength=combat_round.defender_strength,
                index=combat_round.index,
            ))

        outcome = resolve_attack(
            attacker.strength,
            defender.strength,
            self.rng,
            self.attack_win_probability,
            on_round=publish_round,
        )
        new_attacker, new_defender = apply_attack_outcome(attacker, defender, outcome)
        new_state = state._copy_with(board=state.board.with_nodes(new_attacker, new_defender))

        logger.debug(
            f"{action.player_id} attacked {defender.id} from {attacker.id}: "
            f"{'captured' if outcome.success else 'repelled'} after {len(outcome.rounds)} rounds"
        )
        self.event_bus.publish(events.attack_resolved(
            player_id=action.player_id,
            attacker_id=attacker.id,
            defender_id=defender.id,
            success=outcome.success,
            rounds=[r.to_dict() for r in outcome.rounds],
            attacker_strength=new_attacker.strength,
            defender_strength=new_defender.strength,
            new_owner_id=new_defender.owner_id,
        ))

        self._state = self._check_victory(new_state)
        return ActionResult.success_with_state(self._state)

    def _handle_end_turn(self, action: Action) -> ActionResult:
        state = self._state
        turn = state.turn
        self.event_bus.publish(events.turn_ended(turn))

        summary = self._planner.evaluate(state.board, action.player_id, turn.number)
        self._planner.forget(action.player_id, turn.number)
        board = self._apply_reinforcements(state.board, summary)
        new_state = self._check_victory(
            state._copy_with(board=board, last_reinforcements=summary)
        )
        if new_state.is_over:
            self._state = new_state
            return ActionResult.success_with_state(new_state)

        next_turn = self._next_active_turn(new_state)
        new_state = new_state._copy_with(turn=next_turn)
        self._planner.begin_turn(next_turn.active_player_id, next_turn.number)

        self._state = new_state
        self.event_bus.publish(events.turn_started(next_turn))
        return ActionResult.success_with_state(new_state)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _apply_reinforcements(self, board: Board, summary: ReinforcementSummary) -> Board:
        """Add reinforcements one unit at a time, publishing a step per unit."""
        total_steps = sum(a.amount for a in summary.allocations)
        step = 0
        for allocation in summary.allocations:
            for _ in range(allocation.amount):
                node = board.nodes[allocation.node_id]
                node = node.with_strength(node.strength + 1)
                board = board.with_nodes(node)
                step += 1
                self.event_bus.publish(events.reinforcement_step(
                    player_id=summary.player_id,
                    node_id=node.id,
                    strength=node.strength,
                    step=step,
                    total_steps=total_steps,
                ))
        self.event_bus.publish(events.reinforcements_awarded(summary))
        self.event_bus.publish(events.reinforcements_complete(summary.player_id))
        return board

    def _is_eliminated(self, board: Board, player_id: str) -> bool:
        # Nobody is eliminated on a board where no node is owned yet
        if all(n.owner_id is None for n in board.nodes.values()):
            return False
        return not board.owns_any(player_id)

    def _next_active_turn(self, state: GameState) -> Turn:
        """Advance the rotation, skipping players that own no nodes."""
        next_turn = advance_turn(state.turn, state.players)
        for _ in range(len(state.players) - 1):
            if not self._is_eliminated(state.board, next_turn.active_player_id):
                break
            self.event_bus.publish(events.turn_skipped(next_turn))
            next_turn = advance_turn(next_turn, state.players)
        return next_turn

    def _check_victory(self, state: GameState) -> GameState:
        if state.is_over or not state.board.nodes:
            return state
        owners = {n.owner_id for n in state.board.nodes.values()}
        if len(owners) != 1 or None in owners:
            return state
        winner_id = owners.pop()
        logger.info(f"{winner_id} won on turn {state.turn.number}")
        won = state._copy_with(winner_id=winner_id)
        self.event_bus.publish(events.game_won(winner_id, state.turn))
        return won
