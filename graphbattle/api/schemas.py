"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between HTTP clients (UI, bots,
simulators) and the engine. They mirror GameView; clients never see the
engine's internal adjacency map.

Error Codes:
- GAME_NOT_FOUND: Game does not exist or has been ended
- VALIDATION_ERROR: Request was malformed or referenced unknown nodes
- OUT_OF_TURN / INVALID_ATTACK / GAME_OVER: Game-rule failures
"""

from enum import Enum
from typing import Any, Literal, Optional
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class GameStatus(str, Enum):
    """Game status values."""
    ACTIVE = "active"
    COMPLETE = "complete"


class ErrorCode(str, Enum):
    """Structured error codes."""
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    OUT_OF_TURN = "OUT_OF_TURN"
    INVALID_ATTACK = "INVALID_ATTACK"
    GAME_OVER = "GAME_OVER"


# =============================================================================
# Shared Models
# =============================================================================

class PositionInfo(BaseModel):
    """Grid cell of a node."""
    row: int
    column: int


class GridInfo(BaseModel):
    """Grid the board was carved from."""
    rows: int
    columns: int


class NodeInfo(BaseModel):
    """Node information for display."""
    id: str
    owner_id: Optional[str] = None
    strength: int = Field(0, ge=0)
    position: Optional[PositionInfo] = None

    model_config = {"from_attributes": True}


class PlayerInfo(BaseModel):
    """Player information for display."""
    id: str
    color: str
    name: str
    node_count: int = 0
    total_strength: int = 0
    is_current_turn: bool = False
    is_eliminated: bool = False

    model_config = {"from_attributes": True}


class AllocationInfo(BaseModel):
    node_id: str
    amount: int


class ReinforcementInfo(BaseModel):
    """A reinforcement preview or award."""
    player_id: str
    total: int
    territory_node_ids: list[str] = Field(default_factory=list)
    eligible_node_ids: list[str] = Field(default_factory=list)
    base_amount: int = 0
    remainder: int = 0
    allocations: list[AllocationInfo] = Field(default_factory=list)


class ReinforcementsInfo(BaseModel):
    preview: Optional[ReinforcementInfo] = Field(
        None, description="What the active player will receive on ending the turn"
    )
    last_awarded: Optional[ReinforcementInfo] = None


class ActionErrorInfo(BaseModel):
    code: ErrorCode
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class EventInfo(BaseModel):
    """One published engine event."""
    index: int = Field(..., description="Position in the game's event log")
    type: str
    payload: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Request Models
# =============================================================================

class PlayerSpec(BaseModel):
    """A player to seat in a new game."""
    id: str = Field(..., min_length=1)
    color: Optional[str] = None
    name: Optional[str] = None


class CreateGameRequest(BaseModel):
    """Create a standard game."""
    seed: Optional[int] = Field(None, ge=0, description="Seed for a reproducible game")
    rows: int = Field(8, ge=1, le=50)
    columns: int = Field(6, ge=1, le=50)
    nodes_per_player: int = Field(6, ge=1)
    strength_per_player: int = Field(12, ge=1)
    attack_win_probability: float = Field(0.5, gt=0.0, lt=1.0)
    players: Optional[list[PlayerSpec]] = Field(
        None, description="Seated players in turn order (defaults to five players)"
    )


class ActionRequest(BaseModel):
    """Submit an action for the active player."""
    type: Literal["attack", "end_turn"]
    player_id: str = Field(..., min_length=1)
    attacker_id: Optional[str] = Field(None, description="Required for attack")
    defender_id: Optional[str] = Field(None, description="Required for attack")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class GameViewResponse(BaseModel):
    """Read model of one game."""
    game_id: str
    seed: int
    current_player_id: str
    turn_number: int
    status: GameStatus
    winner_id: Optional[str] = None
    players: list[PlayerInfo] = Field(default_factory=list)
    nodes: list[NodeInfo] = Field(default_factory=list)
    edges: list[tuple[str, str]] = Field(default_factory=list)
    grid: Optional[GridInfo] = None
    reinforcements: ReinforcementsInfo = Field(default_factory=ReinforcementsInfo)


class ActionResponse(BaseModel):
    """Outcome of an action. Rule failures have ok=false and an error."""
    ok: bool
    error: Optional[ActionErrorInfo] = None
    game: GameViewResponse
    events: list[EventInfo] = Field(
        default_factory=list, description="Events published while applying the action"
    )


class GameSummary(BaseModel):
    game_id: str
    seed: int
    status: GameStatus
    turn_number: int
    current_player_id: str
    winner_id: Optional[str] = None
    created_at: float


class GameListResponse(BaseModel):
    games: list[GameSummary] = Field(default_factory=list)
    count: int = 0


class EventLogResponse(BaseModel):
    game_id: str
    events: list[EventInfo] = Field(default_factory=list)
    next_cursor: int = Field(0, description="Pass as ?since= to fetch only newer events")


class EndGameResponse(BaseModel):
    success: bool
    game_id: str


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    environment: str
