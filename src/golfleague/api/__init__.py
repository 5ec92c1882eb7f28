"""REST API for the golf league service."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response

from golfleague.api.auth import StaticTokenVerifier, TokenVerifier, require_principal
from golfleague.api.schemas import (
    PlayerCreateRequest,
    PlayerResponse,
    PlayerUpdateRequest,
    ScheduleEntryPayload,
    SwapCreateRequest,
    SwapDecisionRequest,
    SwapResponse,
)
from golfleague.config import LeagueSettings
from golfleague.errors import (
    ConflictError,
    DependencyFailure,
    InvalidStateError,
    LeagueError,
    NotFoundError,
    ValidationError,
)
from golfleague.models import SwapStatus
from golfleague.notifications import NotificationGateway, build_gateway
from golfleague.persistence import LeagueStore
from golfleague.scheduling import ScheduleService
from golfleague.swaps import SwapCoordinator


logger = logging.getLogger("uvicorn.error")

_STATUS_BY_ERROR: list[tuple[type[LeagueError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (InvalidStateError, 409),
    (ConflictError, 409),
    (DependencyFailure, 503),
]


def error_status(exc: LeagueError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


def error_body(exc: LeagueError) -> dict:
    body: dict = {"detail": str(exc), "error": type(exc).__name__}
    if isinstance(exc, DependencyFailure):
        body["stage"] = exc.operation
        body["partial"] = exc.partial
        if "swap_id" in exc.context:
            body["swapId"] = exc.context["swap_id"]
    return body


def create_app(
    settings: Optional[LeagueSettings] = None,
    *,
    store: Optional[LeagueStore] = None,
    notifier: Optional[NotificationGateway] = None,
    token_verifier: Optional[TokenVerifier] = None,
) -> FastAPI:
    settings = settings or LeagueSettings.from_env()
    store = store or LeagueStore(settings.db_path)
    notifier = notifier or build_gateway(settings, store.players)
    coordinator = SwapCoordinator(
        store.swaps,
        store.schedule,
        store.players,
        notifier,
        swap_mode=settings.swap_mode,
        notify_rejections=settings.notify_rejections,
    )
    schedule_service = ScheduleService(store.schedule, store.players, notifier)

    app = FastAPI(title="golf league manager")
    app.state.settings = settings
    app.state.store = store
    app.state.notifier = notifier
    app.state.coordinator = coordinator
    app.state.token_verifier = token_verifier or StaticTokenVerifier(settings.api_tokens)
    auth = [Depends(require_principal)]

    @app.exception_handler(LeagueError)
    async def league_error_handler(request: Request, exc: LeagueError) -> JSONResponse:
        status_code = error_status(exc)
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status_code, content=error_body(exc))

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    def _fetch_player_or_404(player_id: str):
        player = store.players.get(player_id)
        if player is None:
            raise NotFoundError(f"Player {player_id} not found")
        return player

    @app.get("/players", response_model=list[PlayerResponse], dependencies=auth)
    async def list_players():
        return [PlayerResponse.from_record(player) for player in store.players.list_all()]

    @app.get("/players/{player_id}", response_model=PlayerResponse, dependencies=auth)
    async def get_player(player_id: str):
        return PlayerResponse.from_record(_fetch_player_or_404(player_id))

    @app.post("/players", response_model=PlayerResponse, status_code=201, dependencies=auth)
    async def create_player(payload: PlayerCreateRequest):
        player = store.players.put(payload.to_record())
        return PlayerResponse.from_record(player)

    @app.put("/players/{player_id}", response_model=PlayerResponse, dependencies=auth)
    async def update_player(player_id: str, payload: PlayerUpdateRequest):
        existing = _fetch_player_or_404(player_id)
        player = store.players.put(payload.apply(existing))
        return PlayerResponse.from_record(player)

    @app.delete("/players/{player_id}", status_code=204, dependencies=auth)
    async def delete_player(player_id: str):
        store.players.delete(player_id)
        return Response(status_code=204)

    @app.get("/schedule", response_model=list[ScheduleEntryPayload], dependencies=auth)
    async def list_schedule():
        return [ScheduleEntryPayload.from_entry(entry) for entry in store.schedule.list_all()]

    @app.get("/schedule/{week_id}", response_model=list[ScheduleEntryPayload], dependencies=auth)
    async def get_week(week_id: str):
        return [ScheduleEntryPayload.from_entry(entry) for entry in store.schedule.query_by_week(week_id)]

    @app.post("/schedule", response_model=ScheduleEntryPayload, status_code=201, dependencies=auth)
    async def create_schedule_entry(payload: ScheduleEntryPayload):
        entry = await schedule_service.assign(payload.to_entry())
        return ScheduleEntryPayload.from_entry(entry)

    @app.get("/swaps", response_model=list[SwapResponse], dependencies=auth)
    async def list_swaps():
        return [SwapResponse.from_record(request) for request in coordinator.list_pending()]

    @app.get("/swaps/{swap_id}", response_model=SwapResponse, dependencies=auth)
    async def get_swap(swap_id: str):
        return SwapResponse.from_record(coordinator.get(swap_id))

    @app.post("/swaps", response_model=SwapResponse, status_code=201, dependencies=auth)
    async def create_swap(payload: SwapCreateRequest):
        created = await coordinator.create_swap_request(
            payload.week_id,
            payload.requesting_player_id,
            payload.target_player_id,
        )
        return SwapResponse.from_record(created)

    @app.put("/swaps/{swap_id}/approve", response_model=SwapResponse, dependencies=auth)
    async def approve_swap(swap_id: str):
        return SwapResponse.from_record(await coordinator.decide(swap_id, SwapStatus.APPROVED))

    @app.put("/swaps/{swap_id}/reject", response_model=SwapResponse, dependencies=auth)
    async def reject_swap(swap_id: str):
        return SwapResponse.from_record(await coordinator.decide(swap_id, SwapStatus.REJECTED))

    @app.put("/swaps/{swap_id}", response_model=SwapResponse, dependencies=auth)
    async def decide_swap(swap_id: str, payload: SwapDecisionRequest):
        return SwapResponse.from_record(await coordinator.decide(swap_id, payload.status))

    return app
