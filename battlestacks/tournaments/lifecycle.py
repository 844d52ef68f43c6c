from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from battlestacks.db.models.tournaments import Tournament
from battlestacks.db.repo.tournaments_repo import TournamentsRepo
from battlestacks.tournaments.constants import (
    SUPPORTED_GAMES,
    TEAM_SIZE_BY_TYPE,
    TOURNAMENT_STATUS_ORDER,
    TOURNAMENT_STATUS_UPCOMING,
)
from battlestacks.tournaments.errors import (
    TournamentStatusTransitionError,
    TournamentValidationError,
)
from battlestacks.tournaments.internal import (
    build_tournament_snapshot,
    flush_tournament_changes,
    load_tournament_fresh,
)
from battlestacks.tournaments.types import TournamentSnapshot

logger = structlog.get_logger(__name__)


def _validate_template(
    *,
    title: str,
    game: str,
    team_type: str,
    entry_fee: int,
    prize_pool: int,
    slots_total: int,
) -> str:
    normalized_title = title.strip()
    if not normalized_title:
        raise TournamentValidationError("title is required")
    if game not in SUPPORTED_GAMES:
        raise TournamentValidationError(f"unsupported game {game!r}")
    if team_type not in TEAM_SIZE_BY_TYPE:
        raise TournamentValidationError(f"unsupported team type {team_type!r}")
    if slots_total < 1:
        raise TournamentValidationError("slot count must be positive")
    if entry_fee < 0 or prize_pool < 0:
        raise TournamentValidationError("entry fee and prize pool cannot be negative")
    return normalized_title


async def create_tournament(
    session: AsyncSession,
    *,
    title: str,
    game: str,
    team_type: str,
    registration_deadline: datetime,
    entry_fee: int,
    prize_pool: int,
    slots_total: int,
    now_utc: datetime,
    start_date: date | None = None,
    rules: Sequence[str] = (),
) -> TournamentSnapshot:
    normalized_title = _validate_template(
        title=title,
        game=game,
        team_type=team_type,
        entry_fee=entry_fee,
        prize_pool=prize_pool,
        slots_total=slots_total,
    )
    tournament_id = uuid4()
    tournament = await TournamentsRepo.create(
        session,
        tournament=Tournament(
            id=tournament_id,
            title=normalized_title,
            game=game,
            team_type=team_type,
            registration_deadline=registration_deadline,
            start_date=start_date,
            entry_fee=entry_fee,
            prize_pool=prize_pool,
            slots_total=slots_total,
            slots_allotted=0,
            status=TOURNAMENT_STATUS_UPCOMING,
            rules=[rule.strip() for rule in rules if rule.strip()],
            confirmed_teams=[],
            bracket=[],
            winner=None,
            series_id=tournament_id,
            series_number=1,
            created_at=now_utc,
        ),
    )
    logger.info(
        "tournament_created",
        tournament_id=str(tournament.id),
        game=game,
        team_type=team_type,
        slots_total=slots_total,
    )
    return build_tournament_snapshot(tournament)


async def change_status(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    status: str,
    admin_override: bool = False,
) -> TournamentSnapshot:
    if status not in TOURNAMENT_STATUS_ORDER:
        raise TournamentValidationError(f"unknown status {status!r}")

    tournament = await load_tournament_fresh(session, tournament_id)
    if tournament.status == status:
        return build_tournament_snapshot(tournament)

    current_index = TOURNAMENT_STATUS_ORDER.index(tournament.status)
    target_index = TOURNAMENT_STATUS_ORDER.index(status)
    if target_index != current_index + 1 and not admin_override:
        raise TournamentStatusTransitionError(f"{tournament.status} -> {status} is not allowed")

    previous_status = tournament.status
    tournament.status = status
    await flush_tournament_changes(session)

    logger.info(
        "tournament_status_changed",
        tournament_id=str(tournament.id),
        from_status=previous_status,
        to_status=status,
        admin_override=admin_override,
    )
    return build_tournament_snapshot(tournament)
