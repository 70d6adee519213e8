"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Manages sessions
3. Formats engine views and events as response models

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..engine_core.action import Action
from ..engine_core.engine import GameView
from ..engine_core.events import GameEvent
from ..engine_core.state import ReinforcementSummary
from ..session import Session, SessionManager
from .schemas import (
    ActionErrorInfo,
    ActionRequest,
    ActionResponse,
    AllocationInfo,
    CreateGameRequest,
    ErrorCode,
    ErrorResponse,
    EventInfo,
    EventLogResponse,
    GameListResponse,
    GameStatus,
    GameSummary,
    GameViewResponse,
    GridInfo,
    NodeInfo,
    PlayerInfo,
    PositionInfo,
    ReinforcementInfo,
    ReinforcementsInfo,
)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        game = service.create_game(CreateGameRequest(seed=7))
        response = service.apply_action(game.game_id, ActionRequest(type="end_turn", player_id="player-1"))

    Raises ValueError (and MissingNodeError) for requests the engine rejects
    as malformed; the HTTP layer maps those to VALIDATION_ERROR.
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    def create_game(self, request: CreateGameRequest) -> GameViewResponse:
        options = {
            "rows": request.rows,
            "columns": request.columns,
            "nodes_per_player": request.nodes_per_player,
            "strength_per_player": request.strength_per_player,
            "attack_win_probability": request.attack_win_probability,
        }
        if request.players:
            options["players"] = [p.model_dump() for p in request.players]

        session = self.session_manager.create_session(seed=request.seed, **options)
        return self._game_to_response(session)

    def get_game(self, game_id: str) -> GameViewResponse | ErrorResponse:
        session = self.session_manager.get_session(game_id)
        if session is None:
            return self._not_found(game_id)
        return self._game_to_response(session)

    def list_games(self) -> GameListResponse:
        games = []
        for session in self.session_manager.list_sessions():
            state = session.engine.get_state()
            games.append(GameSummary(
                game_id=session.session_id,
                seed=session.seed,
                status=GameStatus(state.status.value),
                turn_number=state.turn.number,
                current_player_id=state.turn.active_player_id,
                winner_id=state.winner_id,
                created_at=session.created_at,
            ))
        return GameListResponse(games=games, count=len(games))

    def end_game(self, game_id: str) -> bool:
        return self.session_manager.end_session(game_id)

    def apply_action(self, game_id: str, request: ActionRequest) -> ActionResponse | ErrorResponse:
        session = self.session_manager.get_session(game_id)
        if session is None:
            return self._not_found(game_id)

        action = self._build_action(request)
        cursor = len(session.event_log)
        result = self.session_manager.apply_action(game_id, action)

        error = None
        if not result.ok:
            error = ActionErrorInfo(
                code=ErrorCode(result.error.code.value),
                message=result.error.message,
                details=dict(result.error.details),
            )
        return ActionResponse(
            ok=result.ok,
            error=error,
            game=self._game_to_response(session),
            events=self._events_to_info(session.events_since(cursor), cursor),
        )

    def get_events(self, game_id: str, since: int = 0) -> EventLogResponse | ErrorResponse:
        session = self.session_manager.get_session(game_id)
        if session is None:
            return self._not_found(game_id)
        since = max(since, 0)
        return EventLogResponse(
            game_id=game_id,
            events=self._events_to_info(session.events_since(since), since),
            next_cursor=len(session.event_log),
        )

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    def _build_action(self, request: ActionRequest) -> Action:
        return Action.from_dict(request.model_dump())

    def _not_found(self, game_id: str) -> ErrorResponse:
        return ErrorResponse(
            error=f"Game not found: {game_id}",
            error_code=ErrorCode.GAME_NOT_FOUND,
        )

    def _game_to_response(self, session: Session) -> GameViewResponse:
        view = session.engine.get_view()
        return GameViewResponse(
            game_id=session.session_id,
            seed=session.seed,
            current_player_id=view.current_player_id,
            turn_number=view.turn_number,
            status=GameStatus(view.status.value),
            winner_id=view.winner_id,
            players=self._players_to_info(view),
            nodes=[
                NodeInfo(
                    id=node.id,
                    owner_id=node.owner_id,
                    strength=node.strength,
                    position=(
                        PositionInfo(row=node.position.row, column=node.position.column)
                        if node.position else None
                    ),
                )
                for node in view.nodes
            ],
            edges=[(a, b) for a, b in view.edges],
            grid=(
                GridInfo(rows=view.dimensions.rows, columns=view.dimensions.columns)
                if view.dimensions else None
            ),
            reinforcements=ReinforcementsInfo(
                preview=self._summary_to_info(view.preview),
                last_awarded=self._summary_to_info(view.last_awarded),
            ),
        )

    def _players_to_info(self, view: GameView) -> list[PlayerInfo]:
        anything_owned = any(n.owner_id is not None for n in view.nodes)
        players = []
        for player in view.players:
            owned = view.nodes_owned_by(player.id)
            players.append(PlayerInfo(
                id=player.id,
                color=player.color,
                name=player.name,
                node_count=len(owned),
                total_strength=sum(n.strength for n in owned),
                is_current_turn=player.id == view.current_player_id,
                is_eliminated=anything_owned and not owned,
            ))
        return players

    def _summary_to_info(self, summary: ReinforcementSummary | None) -> ReinforcementInfo | None:
        if summary is None:
            return None
        return ReinforcementInfo(
            player_id=summary.player_id,
            total=summary.total,
            territory_node_ids=list(summary.territory_node_ids),
            eligible_node_ids=list(summary.eligible_node_ids),
            base_amount=summary.base_amount,
            remainder=summary.remainder,
            allocations=[
                AllocationInfo(node_id=a.node_id, amount=a.amount)
                for a in summary.allocations
            ],
        )

    def _events_to_info(self, events: list[GameEvent], start: int) -> list[EventInfo]:
        return [
            EventInfo(index=start + offset, type=event.type.value, payload=event.payload)
            for offset, event in enumerate(events)
        ]
