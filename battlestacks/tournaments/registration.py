from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from battlestacks.db.models.registrations import Registration
from battlestacks.db.repo.registrations_repo import RegistrationsRepo
from battlestacks.db.repo.users_repo import UsersRepo
from battlestacks.services.admin_access import USER_STATUS_ACTIVE
from battlestacks.tournaments.constants import (
    GAME_ID_MAX_DIGITS,
    GAME_ID_MIN_DIGITS,
    PAYMENT_STATUS_PENDING,
    TEAM_NAME_MAX_LENGTH,
    TEAM_NAME_MIN_LENGTH,
    TEAM_SIZE_BY_TYPE,
    TOURNAMENT_STATUS_UPCOMING,
)
from battlestacks.tournaments.errors import (
    PlayerBannedError,
    PlayerNotFoundError,
    TournamentAlreadyRegisteredError,
    TournamentClosedError,
    TournamentError,
    TournamentFullError,
    TournamentTeamNameTakenError,
    TournamentValidationError,
)
from battlestacks.tournaments.internal import (
    as_utc,
    build_registration_snapshot,
    load_tournament_fresh,
)
from battlestacks.tournaments.types import RegistrationSnapshot

logger = structlog.get_logger(__name__)


def normalize_team_name(team_name: str) -> str:
    normalized = team_name.strip()
    if not TEAM_NAME_MIN_LENGTH <= len(normalized) <= TEAM_NAME_MAX_LENGTH:
        raise TournamentValidationError(
            f"team name must have {TEAM_NAME_MIN_LENGTH}-{TEAM_NAME_MAX_LENGTH} characters"
        )
    return normalized


def normalize_game_ids(game_ids: Sequence[str], *, team_type: str) -> list[str]:
    expected_total = TEAM_SIZE_BY_TYPE[team_type]
    normalized = [str(game_id).strip() for game_id in game_ids]
    if len(normalized) != expected_total:
        raise TournamentValidationError(
            f"{team_type} teams register exactly {expected_total} game id(s)"
        )
    for game_id in normalized:
        if not game_id.isdigit() or not GAME_ID_MIN_DIGITS <= len(game_id) <= GAME_ID_MAX_DIGITS:
            raise TournamentValidationError(
                f"game id must have {GAME_ID_MIN_DIGITS}-{GAME_ID_MAX_DIGITS} digits"
            )
    return normalized


def normalize_upi_id(upi_id: str) -> str:
    normalized = upi_id.strip()
    if "@" not in normalized:
        raise TournamentValidationError("UPI id must contain '@'")
    return normalized


def _registration_conflict(exc: IntegrityError) -> TournamentError | None:
    message = str(exc.orig)
    if "uq_registrations_tournament_team" in message or "registrations.team_name" in message:
        return TournamentTeamNameTakenError()
    if "uq_registrations_tournament_user" in message or "registrations.user_id" in message:
        return TournamentAlreadyRegisteredError()
    return None


async def register_team(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    user_id: UUID,
    team_name: str,
    game_ids: Sequence[str],
    upi_id: str,
    now_utc: datetime,
) -> RegistrationSnapshot:
    """Create a pending registration; the team only takes a slot once its payment is confirmed."""
    tournament = await load_tournament_fresh(session, tournament_id)
    if tournament.status != TOURNAMENT_STATUS_UPCOMING:
        raise TournamentClosedError
    if as_utc(tournament.registration_deadline) <= now_utc:
        raise TournamentClosedError
    if int(tournament.slots_allotted) >= int(tournament.slots_total):
        raise TournamentFullError

    normalized_team_name = normalize_team_name(team_name)
    normalized_game_ids = normalize_game_ids(game_ids, team_type=tournament.team_type)
    normalized_upi_id = normalize_upi_id(upi_id)

    user = await UsersRepo.get_by_id(session, user_id)
    if user is None:
        raise PlayerNotFoundError
    if user.status != USER_STATUS_ACTIVE:
        raise PlayerBannedError

    existing = await RegistrationsRepo.get_by_tournament_user(
        session,
        tournament_id=tournament.id,
        user_id=user_id,
    )
    if existing is not None:
        raise TournamentAlreadyRegisteredError
    same_team = await RegistrationsRepo.get_by_tournament_team(
        session,
        tournament_id=tournament.id,
        team_name=normalized_team_name,
    )
    if same_team is not None:
        raise TournamentTeamNameTakenError

    try:
        registration = await RegistrationsRepo.create(
            session,
            registration=Registration(
                id=uuid4(),
                tournament_id=tournament.id,
                user_id=user_id,
                team_name=normalized_team_name,
                game_ids=normalized_game_ids,
                upi_id=normalized_upi_id,
                payment_status=PAYMENT_STATUS_PENDING,
                registered_at=now_utc,
            ),
        )
    except IntegrityError as exc:
        conflict = _registration_conflict(exc)
        if conflict is None:
            raise
        raise conflict from exc

    logger.info(
        "tournament_team_registered",
        tournament_id=str(tournament.id),
        registration_id=str(registration.id),
        user_id=str(user_id),
        team_name=normalized_team_name,
    )
    return build_registration_snapshot(registration)
