from __future__ import annotations

from datetime import datetime
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from battlestacks.db.models.registrations import Registration
from battlestacks.db.models.tournaments import Tournament
from battlestacks.db.repo.outbox_events_repo import OutboxEventsRepo
from battlestacks.db.repo.registrations_repo import RegistrationsRepo
from battlestacks.db.repo.tournaments_repo import TournamentsRepo
from battlestacks.tournaments.constants import (
    OUTBOX_EVENT_REGISTRATION_CONFIRMED,
    OUTBOX_STATUS_NEW,
    PAYMENT_STATUS_CONFIRMED,
    PAYMENT_STATUS_PENDING,
    TOURNAMENT_STATUS_ONGOING,
)
from battlestacks.tournaments.errors import (
    RegistrationNotFoundError,
    TeamNotFoundError,
    TournamentFullError,
    TournamentTeamNameTakenError,
)
from battlestacks.tournaments.internal import (
    build_series_clone,
    build_tournament_snapshot,
    flush_tournament_changes,
    load_tournament_fresh,
    roster_from_payload,
    roster_to_payload,
    team_from_registration,
)
from battlestacks.tournaments.types import PaymentConfirmResult, PaymentPendingResult

logger = structlog.get_logger(__name__)


async def _load_registration(session: AsyncSession, registration_id: UUID) -> Registration:
    registration = await RegistrationsRepo.get_by_id_for_update(session, registration_id)
    if registration is None:
        raise RegistrationNotFoundError
    return registration


async def _spawn_series_successor(
    session: AsyncSession,
    *,
    tournament: Tournament,
    now_utc: datetime,
) -> UUID | None:
    clone = build_series_clone(tournament, now_utc=now_utc)
    existing = await TournamentsRepo.get_series_member(
        session,
        series_id=clone.series_id,
        series_number=clone.series_number,
    )
    if existing is not None:
        logger.info(
            "tournament_series_successor_exists",
            tournament_id=str(tournament.id),
            successor_id=str(existing.id),
        )
        return None
    await TournamentsRepo.create(session, tournament=clone)
    logger.info(
        "tournament_series_cloned",
        tournament_id=str(tournament.id),
        clone_id=str(clone.id),
        series_id=str(clone.series_id),
        series_number=clone.series_number,
    )
    return clone.id


async def confirm_payment(
    session: AsyncSession,
    *,
    registration_id: UUID,
    now_utc: datetime,
) -> PaymentConfirmResult:
    """Confirm a pending registration and give its team a slot.

    Runs inside the caller's transaction and makes a single attempt; a
    concurrent change to the tournament surfaces as
    TournamentTransactionConflictError when the tournament row is flushed.
    """
    registration = await _load_registration(session, registration_id)
    tournament = await load_tournament_fresh(session, registration.tournament_id)

    if registration.payment_status == PAYMENT_STATUS_CONFIRMED:
        return PaymentConfirmResult(
            snapshot=build_tournament_snapshot(tournament),
            registration_id=registration.id,
            confirmed_now=False,
        )

    team = team_from_registration(registration)
    roster = roster_from_payload(tournament.confirmed_teams)
    if team not in roster:
        if any(member.team_name == team.team_name for member in roster):
            raise TournamentTeamNameTakenError
        if len(roster) + 1 > int(tournament.slots_total):
            raise TournamentFullError
        roster.append(team)

    registration.payment_status = PAYMENT_STATUS_CONFIRMED
    tournament.confirmed_teams = roster_to_payload(roster)
    tournament.slots_allotted = len(roster)

    filled_up = tournament.slots_allotted == int(tournament.slots_total)
    if filled_up:
        tournament.status = TOURNAMENT_STATUS_ONGOING
    await flush_tournament_changes(session)

    series_clone_id: UUID | None = None
    if filled_up:
        series_clone_id = await _spawn_series_successor(
            session,
            tournament=tournament,
            now_utc=now_utc,
        )

    await OutboxEventsRepo.create(
        session,
        event_type=OUTBOX_EVENT_REGISTRATION_CONFIRMED,
        payload={
            "registration_id": str(registration.id),
            "tournament_id": str(tournament.id),
            "user_id": str(registration.user_id),
            "team_name": registration.team_name,
        },
        status=OUTBOX_STATUS_NEW,
        created_at=now_utc,
    )

    logger.info(
        "tournament_payment_confirmed",
        tournament_id=str(tournament.id),
        registration_id=str(registration.id),
        slots_allotted=tournament.slots_allotted,
        slots_total=tournament.slots_total,
    )
    return PaymentConfirmResult(
        snapshot=build_tournament_snapshot(tournament),
        registration_id=registration.id,
        confirmed_now=True,
        series_clone_id=series_clone_id,
    )


async def mark_pending(
    session: AsyncSession,
    *,
    registration_id: UUID,
    now_utc: datetime,
) -> PaymentPendingResult:
    registration = await _load_registration(session, registration_id)
    tournament = await load_tournament_fresh(session, registration.tournament_id)

    if registration.payment_status == PAYMENT_STATUS_PENDING:
        return PaymentPendingResult(
            snapshot=build_tournament_snapshot(tournament),
            registration_id=registration.id,
            pending_now=False,
        )

    team = team_from_registration(registration)
    roster = roster_from_payload(tournament.confirmed_teams)
    if team not in roster:
        raise TeamNotFoundError
    roster.remove(team)

    registration.payment_status = PAYMENT_STATUS_PENDING
    tournament.confirmed_teams = roster_to_payload(roster)
    tournament.slots_allotted = len(roster)
    await flush_tournament_changes(session)

    logger.info(
        "tournament_payment_marked_pending",
        tournament_id=str(tournament.id),
        registration_id=str(registration.id),
        slots_allotted=tournament.slots_allotted,
        unconfirmed_at=now_utc.isoformat(),
    )
    return PaymentPendingResult(
        snapshot=build_tournament_snapshot(tournament),
        registration_id=registration.id,
        pending_now=True,
    )
