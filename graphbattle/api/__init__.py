"""
API Module - HTTP interface for UI, bot and simulator clients.

Exposes hosted games via a REST API:
1. Create a seeded game
2. Read the game view (board, turn, reinforcement preview)
3. Submit actions for the active player
4. Read the event log to animate combat and reinforcements

All state is session-scoped and in memory.
"""

from .schemas import (
    # Requests
    CreateGameRequest,
    ActionRequest,
    PlayerSpec,
    # Responses
    GameViewResponse,
    ActionResponse,
    EventLogResponse,
    GameListResponse,
    EndGameResponse,
    ErrorResponse,
    HealthResponse,
    # Shared
    ErrorCode,
    GameStatus,
    NodeInfo,
    PlayerInfo,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateGameRequest",
    "ActionRequest",
    "PlayerSpec",
    # Responses
    "GameViewResponse",
    "ActionResponse",
    "EventLogResponse",
    "GameListResponse",
    "EndGameResponse",
    "ErrorResponse",
    "HealthResponse",
    # Shared
    "ErrorCode",
    "GameStatus",
    "NodeInfo",
    "PlayerInfo",
    # Service
    "APIService",
    "create_app",
]
