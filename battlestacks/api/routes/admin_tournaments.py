from __future__ import annotations

from datetime import datetime, timezone
from functools import partial
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, Request

from battlestacks.db.session import SessionLocal
from battlestacks.economy.wallet.errors import WalletError
from battlestacks.tournaments.errors import BracketError, TournamentError
from battlestacks.tournaments.service import (
    advance_bracket_winner,
    change_status,
    create_tournament,
    declare_winner,
    ensure_bracket,
    list_tournament_registrations,
    place_bracket_team,
    remove_team,
    reset_tournament_bracket,
)

from .helpers import assert_admin_access, run_tournament_transaction, tournament_http_error
from .tournaments_models import (
    BracketPlacementRequest,
    BracketWinnerRequest,
    RegistrationListResponse,
    TeamRemovalResponse,
    TournamentCreateRequest,
    TournamentResponse,
    TournamentStatusUpdateRequest,
    WinnerDeclarationResponse,
    registration_response,
    team_response,
    tournament_response,
)

router = APIRouter(tags=["admin", "tournaments"])


@router.post("/admin/tournaments", response_model=TournamentResponse, status_code=201)
async def create_tournament_route(
    payload: TournamentCreateRequest,
    request: Request,
) -> TournamentResponse:
    await assert_admin_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            snapshot = await create_tournament(
                session,
                title=payload.title,
                game=payload.game,
                team_type=payload.team_type,
                registration_deadline=payload.registration_deadline,
                start_date=payload.start_date,
                entry_fee=payload.entry_fee,
                prize_pool=payload.prize_pool,
                slots_total=payload.slots_total,
                rules=payload.rules,
                now_utc=now_utc,
            )
    except TournamentError as exc:
        raise tournament_http_error(exc) from exc
    return tournament_response(snapshot)


@router.get(
    "/admin/tournaments/{tournament_id}/registrations",
    response_model=RegistrationListResponse,
)
async def list_registrations_route(
    tournament_id: UUID,
    request: Request,
    payment_status: str | None = Query(default=None, min_length=1, max_length=16),
) -> RegistrationListResponse:
    await assert_admin_access(request)

    try:
        async with SessionLocal.begin() as session:
            snapshots = await list_tournament_registrations(
                session,
                tournament_id=tournament_id,
                payment_status=payment_status,
            )
    except TournamentError as exc:
        raise tournament_http_error(exc) from exc
    return RegistrationListResponse(items=[registration_response(item) for item in snapshots])


@router.post("/admin/tournaments/{tournament_id}/status", response_model=TournamentResponse)
async def change_status_route(
    tournament_id: UUID,
    payload: TournamentStatusUpdateRequest,
    request: Request,
) -> TournamentResponse:
    await assert_admin_access(request)

    try:
        snapshot = await run_tournament_transaction(
            partial(
                change_status,
                tournament_id=tournament_id,
                status=payload.status,
                admin_override=payload.admin_override,
            )
        )
    except TournamentError as exc:
        raise tournament_http_error(exc) from exc
    return tournament_response(snapshot)


@router.post("/admin/tournaments/{tournament_id}/bracket", response_model=TournamentResponse)
async def ensure_bracket_route(tournament_id: UUID, request: Request) -> TournamentResponse:
    await assert_admin_access(request)

    try:
        snapshot = await run_tournament_transaction(
            partial(ensure_bracket, tournament_id=tournament_id)
        )
    except (TournamentError, BracketError) as exc:
        raise tournament_http_error(exc) from exc
    return tournament_response(snapshot)


@router.post(
    "/admin/tournaments/{tournament_id}/bracket/reset",
    response_model=TournamentResponse,
)
async def reset_bracket_route(tournament_id: UUID, request: Request) -> TournamentResponse:
    await assert_admin_access(request)

    try:
        snapshot = await run_tournament_transaction(
            partial(reset_tournament_bracket, tournament_id=tournament_id)
        )
    except (TournamentError, BracketError) as exc:
        raise tournament_http_error(exc) from exc
    return tournament_response(snapshot)


@router.post(
    "/admin/tournaments/{tournament_id}/bracket/winners",
    response_model=TournamentResponse,
)
async def advance_winner_route(
    tournament_id: UUID,
    payload: BracketWinnerRequest,
    request: Request,
) -> TournamentResponse:
    await assert_admin_access(request)

    try:
        snapshot = await run_tournament_transaction(
            partial(
                advance_bracket_winner,
                tournament_id=tournament_id,
                round_index=payload.round_index,
                matchup_index=payload.matchup_index,
                team_name=payload.team_name,
            )
        )
    except (TournamentError, BracketError) as exc:
        raise tournament_http_error(exc) from exc
    return tournament_response(snapshot)


@router.post(
    "/admin/tournaments/{tournament_id}/bracket/placements",
    response_model=TournamentResponse,
)
async def place_team_route(
    tournament_id: UUID,
    payload: BracketPlacementRequest,
    request: Request,
) -> TournamentResponse:
    await assert_admin_access(request)

    try:
        snapshot = await run_tournament_transaction(
            partial(
                place_bracket_team,
                tournament_id=tournament_id,
                matchup_index=payload.matchup_index,
                slot=payload.slot,
                team_name=payload.team_name,
            )
        )
    except (TournamentError, BracketError) as exc:
        raise tournament_http_error(exc) from exc
    return tournament_response(snapshot)


@router.delete(
    "/admin/tournaments/{tournament_id}/teams/{team_name}",
    response_model=TeamRemovalResponse,
)
async def remove_team_route(
    tournament_id: UUID,
    team_name: str,
    request: Request,
) -> TeamRemovalResponse:
    await assert_admin_access(request)

    try:
        result = await run_tournament_transaction(
            partial(remove_team, tournament_id=tournament_id, team_name=team_name)
        )
    except (TournamentError, BracketError) as exc:
        raise tournament_http_error(exc) from exc
    return TeamRemovalResponse(
        tournament=tournament_response(result.snapshot),
        removed_team=team_response(result.removed_team),
        registration_deleted=result.registration_deleted,
    )


@router.post(
    "/admin/tournaments/{tournament_id}/winner",
    response_model=WinnerDeclarationResponse,
)
async def declare_winner_route(tournament_id: UUID, request: Request) -> WinnerDeclarationResponse:
    await assert_admin_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        result = await run_tournament_transaction(
            partial(declare_winner, tournament_id=tournament_id, now_utc=now_utc)
        )
    except (TournamentError, BracketError) as exc:
        raise tournament_http_error(exc) from exc
    except WalletError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_USER_NOT_FOUND"}) from exc
    return WinnerDeclarationResponse(
        tournament=tournament_response(result.snapshot),
        winner_log_id=result.winner_log_id,
        user_id=result.user_id,
        prize_money=result.prize_money,
    )
