"""
FastAPI Application - REST API over hosted games.

Endpoints:
    GET    /api/v1/health                 Liveness check
    POST   /api/v1/games                  Create a standard game
    GET    /api/v1/games                  List games
    GET    /api/v1/games/{id}             Get the game view
    DELETE /api/v1/games/{id}             End a game
    POST   /api/v1/games/{id}/actions     Submit an attack or end_turn
    GET    /api/v1/games/{id}/events      Event log (?since= cursor)

Rule failures (wrong turn, illegal attack, game over) are ordinary 200
responses with ok=false. Malformed requests are 422, unknown games 404.
"""

from typing import Annotated, Union

from .. import __version__
from ..config import ALLOWED_ORIGINS, GRAPHBATTLE_ENV, configure_logging


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from ..engine_core.errors import MissingNodeError
    from .service import APIService
    from .schemas import (
        ActionRequest,
        ActionResponse,
        CreateGameRequest,
        EndGameResponse,
        ErrorCode,
        ErrorResponse,
        EventLogResponse,
        GameListResponse,
        GameViewResponse,
        HealthResponse,
    )

    configure_logging()

    app = FastAPI(
        title="Graph Battle Engine API",
        description="""
Territory-conquest game engine.

## Flow

1. `POST /games` to create a seeded game
2. `GET /games/{id}` to read the board and the reinforcement preview
3. `POST /games/{id}/actions` with `attack` or `end_turn`
4. `GET /games/{id}/events?since=N` to animate what happened

## Error Codes

| Code | Description |
|------|-------------|
| `GAME_NOT_FOUND` | Game does not exist |
| `VALIDATION_ERROR` | Malformed request or unknown node id |
| `OUT_OF_TURN` | Action submitted for a player who is not active |
| `INVALID_ATTACK` | Attack breaks the combat rules |
| `GAME_OVER` | The game already has a winner |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: dict | None = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def not_found(response: ErrorResponse) -> JSONResponse:
        return make_error_response(response.error_code, response.error, status_code=404)

    # =========================================================================
    # Health
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["System"])
    async def health() -> HealthResponse:
        return HealthResponse(version=__version__, environment=GRAPHBATTLE_ENV)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/games",
        response_model=GameViewResponse,
        status_code=201,
        responses={422: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Create a standard game",
    )
    async def create_game(request: CreateGameRequest) -> Union[GameViewResponse, JSONResponse]:
        """Create a new game. The same seed and options always produce the same board."""
        try:
            return api_service.create_game(request)
        except ValueError as e:
            return make_error_response(ErrorCode.VALIDATION_ERROR, str(e), status_code=422)

    @app.get(
        "/api/v1/games",
        response_model=GameListResponse,
        tags=["Games"],
        summary="List games",
    )
    async def list_games() -> GameListResponse:
        return api_service.list_games()

    @app.get(
        "/api/v1/games/{game_id}",
        response_model=GameViewResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Games"],
        summary="Get the game view",
    )
    async def get_game(game_id: str) -> Union[GameViewResponse, JSONResponse]:
        response = api_service.get_game(game_id)
        if isinstance(response, ErrorResponse):
            return not_found(response)
        return response

    @app.delete(
        "/api/v1/games/{game_id}",
        response_model=EndGameResponse,
        tags=["Games"],
        summary="End a game",
    )
    async def end_game(game_id: str) -> EndGameResponse:
        return EndGameResponse(success=api_service.end_game(game_id), game_id=game_id)

    @app.post(
        "/api/v1/games/{game_id}/actions",
        response_model=ActionResponse,
        responses={
            404: {"model": ErrorResponse, "description": "Game not found"},
            422: {"model": ErrorResponse, "description": "Malformed action"},
        },
        tags=["Game Loop"],
        summary="Submit an action for the active player",
    )
    async def apply_action(game_id: str, request: ActionRequest) -> Union[ActionResponse, JSONResponse]:
        try:
            response = api_service.apply_action(game_id, request)
        except MissingNodeError as e:
            return make_error_response(
                ErrorCode.VALIDATION_ERROR, str(e), status_code=422,
                details={"node_ids": e.node_ids},
            )
        except ValueError as e:
            return make_error_response(ErrorCode.VALIDATION_ERROR, str(e), status_code=422)
        if isinstance(response, ErrorResponse):
            return not_found(response)
        return response

    @app.get(
        "/api/v1/games/{game_id}/events",
        response_model=EventLogResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game Loop"],
        summary="Read the event log",
    )
    async def get_events(
        game_id: str,
        since: Annotated[int, Query(ge=0, description="Return events from this index on")] = 0,
    ) -> Union[EventLogResponse, JSONResponse]:
        response = api_service.get_events(game_id, since)
        if isinstance(response, ErrorResponse):
            return not_found(response)
        return response

    return app


# For running directly: uvicorn graphbattle.api.app:app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass
