from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from battlestacks.db.models.winner_logs import WinnerLog
from battlestacks.db.repo.registrations_repo import RegistrationsRepo
from battlestacks.db.repo.tournaments_repo import TournamentsRepo
from battlestacks.db.repo.winner_logs_repo import WinnerLogsRepo
from battlestacks.tournaments.constants import TOURNAMENT_STATUS_ORDER
from battlestacks.tournaments.errors import TournamentNotFoundError, TournamentValidationError
from battlestacks.tournaments.internal import (
    as_utc,
    build_registration_snapshot,
    build_tournament_snapshot,
)
from battlestacks.tournaments.types import (
    RegistrationSnapshot,
    TournamentSnapshot,
    WinnerLogSnapshot,
)


def _winner_log_snapshot(row: WinnerLog) -> WinnerLogSnapshot:
    return WinnerLogSnapshot(
        winner_log_id=row.id,
        tournament_id=row.tournament_id,
        tournament_title=row.tournament_title,
        user_id=row.user_id,
        user_name=row.user_name,
        team_name=row.team_name,
        prize_money=int(row.prize_money),
        won_at=as_utc(row.won_at),
    )


async def get_tournament_snapshot(
    session: AsyncSession,
    *,
    tournament_id: UUID,
) -> TournamentSnapshot:
    tournament = await TournamentsRepo.get_by_id(session, tournament_id)
    if tournament is None:
        raise TournamentNotFoundError
    return build_tournament_snapshot(tournament)


async def list_tournaments_by_status(
    session: AsyncSession,
    *,
    status: str,
    limit: int = 50,
) -> list[TournamentSnapshot]:
    if status not in TOURNAMENT_STATUS_ORDER:
        raise TournamentValidationError(f"unknown status {status!r}")
    tournaments = await TournamentsRepo.list_by_status(session, status=status, limit=limit)
    return [build_tournament_snapshot(tournament) for tournament in tournaments]


async def list_tournament_registrations(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    payment_status: str | None = None,
) -> list[RegistrationSnapshot]:
    tournament = await TournamentsRepo.get_by_id(session, tournament_id)
    if tournament is None:
        raise TournamentNotFoundError
    registrations = await RegistrationsRepo.list_for_tournament(
        session,
        tournament_id=tournament.id,
        payment_status=payment_status,
    )
    return [build_registration_snapshot(registration) for registration in registrations]


async def list_player_wins(
    session: AsyncSession,
    *,
    user_id: UUID,
    limit: int = 20,
) -> list[WinnerLogSnapshot]:
    rows = await WinnerLogsRepo.list_for_user(session, user_id=user_id, limit=limit)
    return [_winner_log_snapshot(row) for row in rows]
