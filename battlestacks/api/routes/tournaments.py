from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Query, Request

from battlestacks.db.session import SessionLocal
from battlestacks.tournaments.errors import TournamentError
from battlestacks.tournaments.service import (
    get_tournament_snapshot,
    list_player_wins,
    list_tournaments_by_status,
    register_team,
)

from .helpers import require_user_id, tournament_http_error
from .tournaments_models import (
    RegistrationCreateRequest,
    RegistrationResponse,
    TournamentListResponse,
    TournamentResponse,
    WinnerLogListResponse,
    registration_response,
    tournament_response,
    winner_log_response,
)

router = APIRouter(tags=["tournaments"])


@router.get("/tournaments", response_model=TournamentListResponse)
async def list_tournaments(
    status: str = Query(default="Upcoming", min_length=1, max_length=16),
    limit: int = Query(default=50, ge=1, le=200),
) -> TournamentListResponse:
    try:
        async with SessionLocal.begin() as session:
            snapshots = await list_tournaments_by_status(session, status=status, limit=limit)
    except TournamentError as exc:
        raise tournament_http_error(exc) from exc
    return TournamentListResponse(items=[tournament_response(item) for item in snapshots])


@router.get("/tournaments/{tournament_id}", response_model=TournamentResponse)
async def get_tournament(tournament_id: UUID) -> TournamentResponse:
    try:
        async with SessionLocal.begin() as session:
            snapshot = await get_tournament_snapshot(session, tournament_id=tournament_id)
    except TournamentError as exc:
        raise tournament_http_error(exc) from exc
    return tournament_response(snapshot)


@router.post(
    "/tournaments/{tournament_id}/registrations",
    response_model=RegistrationResponse,
    status_code=201,
)
async def create_registration(
    tournament_id: UUID,
    payload: RegistrationCreateRequest,
    request: Request,
) -> RegistrationResponse:
    user_id = require_user_id(request)
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            snapshot = await register_team(
                session,
                tournament_id=tournament_id,
                user_id=user_id,
                team_name=payload.team_name,
                game_ids=payload.game_ids,
                upi_id=payload.upi_id,
                now_utc=now_utc,
            )
    except TournamentError as exc:
        raise tournament_http_error(exc) from exc
    return registration_response(snapshot)


@router.get("/players/{user_id}/wins", response_model=WinnerLogListResponse)
async def list_wins(
    user_id: UUID,
    limit: int = Query(default=20, ge=1, le=100),
) -> WinnerLogListResponse:
    async with SessionLocal.begin() as session:
        wins = await list_player_wins(session, user_id=user_id, limit=limit)
    return WinnerLogListResponse(items=[winner_log_response(item) for item in wins])
