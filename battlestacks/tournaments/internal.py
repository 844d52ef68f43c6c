from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from battlestacks.db.models.registrations import Registration
from battlestacks.db.models.tournaments import Tournament
from battlestacks.db.repo.tournaments_repo import TournamentsRepo
from battlestacks.tournaments.bracket import bracket_from_payload, team_from_payload, team_to_payload
from battlestacks.tournaments.constants import TOURNAMENT_STATUS_UPCOMING
from battlestacks.tournaments.errors import (
    TournamentNotFoundError,
    TournamentTransactionConflictError,
)
from battlestacks.tournaments.types import (
    BracketTeam,
    RegistrationSnapshot,
    TournamentSnapshot,
    TournamentWinner,
)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def roster_from_payload(payload: Iterable[Mapping[str, object]] | None) -> list[BracketTeam]:
    roster: list[BracketTeam] = []
    for raw_team in payload or ():
        team = team_from_payload(raw_team)
        if team is not None:
            roster.append(team)
    return roster


def roster_to_payload(roster: Sequence[BracketTeam]) -> list[dict[str, object]]:
    return [payload for payload in (team_to_payload(team) for team in roster) if payload]


def team_from_registration(registration: Registration) -> BracketTeam:
    return BracketTeam(
        team_name=registration.team_name or "",
        game_ids=tuple(str(game_id) for game_id in registration.game_ids or ()),
    )


def build_winner(payload: Mapping[str, object] | None) -> TournamentWinner | None:
    if not payload:
        return None
    return TournamentWinner(
        user_id=UUID(str(payload["user_id"])),
        team_name=str(payload["team_name"]),
        prize_money=int(payload["prize_money"]),  # type: ignore[call-overload]
    )


def build_tournament_snapshot(tournament: Tournament) -> TournamentSnapshot:
    return TournamentSnapshot(
        tournament_id=tournament.id,
        title=tournament.title,
        game=tournament.game,
        team_type=tournament.team_type,
        registration_deadline=as_utc(tournament.registration_deadline),
        start_date=tournament.start_date,
        entry_fee=int(tournament.entry_fee),
        prize_pool=int(tournament.prize_pool),
        slots_total=int(tournament.slots_total),
        slots_allotted=int(tournament.slots_allotted),
        status=tournament.status,
        rules=tuple(tournament.rules or ()),
        confirmed_teams=tuple(roster_from_payload(tournament.confirmed_teams)),
        bracket=tuple(bracket_from_payload(tournament.bracket)),
        winner=build_winner(tournament.winner),
        series_id=tournament.series_id,
        series_number=tournament.series_number,
        created_at=as_utc(tournament.created_at),
    )


def build_registration_snapshot(registration: Registration) -> RegistrationSnapshot:
    return RegistrationSnapshot(
        registration_id=registration.id,
        tournament_id=registration.tournament_id,
        user_id=registration.user_id,
        team_name=registration.team_name,
        game_ids=tuple(registration.game_ids or ()),
        upi_id=registration.upi_id,
        payment_status=registration.payment_status,
        registered_at=as_utc(registration.registered_at),
    )


def build_series_clone(tournament: Tournament, *, now_utc: datetime) -> Tournament:
    return Tournament(
        id=uuid4(),
        title=tournament.title,
        game=tournament.game,
        team_type=tournament.team_type,
        registration_deadline=tournament.registration_deadline,
        start_date=tournament.start_date,
        entry_fee=tournament.entry_fee,
        prize_pool=tournament.prize_pool,
        slots_total=tournament.slots_total,
        slots_allotted=0,
        status=TOURNAMENT_STATUS_UPCOMING,
        rules=list(tournament.rules or ()),
        confirmed_teams=[],
        bracket=[],
        winner=None,
        series_id=tournament.series_id or tournament.id,
        series_number=(tournament.series_number or 1) + 1,
        created_at=now_utc,
    )


async def load_tournament_fresh(session: AsyncSession, tournament_id: UUID) -> Tournament:
    tournament = await TournamentsRepo.get_by_id_fresh(session, tournament_id)
    if tournament is None:
        raise TournamentNotFoundError
    return tournament


async def flush_tournament_changes(session: AsyncSession) -> None:
    try:
        await session.flush()
    except StaleDataError as exc:
        raise TournamentTransactionConflictError from exc
