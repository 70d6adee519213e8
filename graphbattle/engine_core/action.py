"""
Action System - Actions, error codes, and results.

Actions represent the two things a player can do on their turn:
1. Attack an adjacent enemy node
2. End the turn (triggering reinforcements)

All state changes flow through actions. Malformed actions raise;
rule violations come back as failed ActionResults.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from .state import GameState


class ActionType(Enum):
    """Types of actions in the system."""
    ATTACK = "attack"
    END_TURN = "end_turn"


class ErrorCode(str, Enum):
    """Game-rule failure codes."""
    OUT_OF_TURN = "OUT_OF_TURN"
    INVALID_ATTACK = "INVALID_ATTACK"
    GAME_OVER = "GAME_OVER"


@dataclass(frozen=True)
class Action:
    """
    A complete action to be applied to the game state.

    Actions are:
    - Immutable once built
    - Logged for replay
    - Validated before application
    """
    action_type: ActionType
    player_id: str
    attacker_id: str | None = None
    defender_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.action_type.value, "player_id": self.player_id}
        if self.action_type == ActionType.ATTACK:
            data["attacker_id"] = self.attacker_id
            data["defender_id"] = self.defender_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Action:
        """Build an action from its wire form; missing ids raise ValueError."""
        try:
            action_type = ActionType(data.get("type"))
        except ValueError:
            raise ValueError(f"Unsupported action type: {data.get('type')}")
        if action_type == ActionType.ATTACK:
            return create_attack_action(
                data.get("player_id"), data.get("attacker_id"), data.get("defender_id")
            )
        return create_end_turn_action(data.get("player_id"))


def _require_id(value: Any, what: str) -> None:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{what} is required and must be a non-empty string")


def create_end_turn_action(player_id: str) -> Action:
    _require_id(player_id, "playerId for end turn action")
    return Action(action_type=ActionType.END_TURN, player_id=player_id)


def create_attack_action(player_id: str, attacker_id: str, defender_id: str) -> Action:
    _require_id(player_id, "playerId for attack action")
    _require_id(attacker_id, "attackerId for attack action")
    _require_id(defender_id, "defenderId for attack action")
    return Action(
        action_type=ActionType.ATTACK,
        player_id=player_id,
        attacker_id=attacker_id,
        defender_id=defender_id,
    )


def validate_action(action: Any) -> None:
    """
    Raise if action is not a well-formed Action.

    This checks shape only; whether the action is legal right now is the
    engine's business.
    """
    if not isinstance(action, Action):
        raise TypeError(f"Action must be an Action instance, got {type(action).__name__}")
    if not isinstance(action.action_type, ActionType):
        raise ValueError(f"Unsupported action type: {action.action_type}")
    _require_id(action.player_id, "playerId")
    if action.action_type == ActionType.ATTACK:
        _require_id(action.attacker_id, "attackerId")
        _require_id(action.defender_id, "defenderId")


@dataclass(frozen=True)
class ActionError:
    """Why an action was rejected."""
    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.value, "message": self.message, "details": dict(self.details)}


@dataclass(frozen=True)
class ActionResult:
    """
    Result of applying an action.

    Callers must check ok before trusting state. A failed result never
    carries a new state; the engine's state is unchanged.
    """
    ok: bool
    state: GameState | None = None
    error: ActionError | None = None

    @classmethod
    def failure(
        cls,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> ActionResult:
        """Create a failure result."""
        return cls(ok=False, error=ActionError(code=code, message=message, details=details or {}))

    @classmethod
    def success_with_state(cls, state: GameState) -> ActionResult:
        """Create a success result with new state."""
        return cls(ok=True, state=state)
