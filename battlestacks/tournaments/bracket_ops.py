from __future__ import annotations

import random
from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from battlestacks.db.models.tournaments import Tournament
from battlestacks.db.models.winner_logs import WinnerLog
from battlestacks.db.repo.registrations_repo import RegistrationsRepo
from battlestacks.db.repo.users_repo import UsersRepo
from battlestacks.db.repo.winner_logs_repo import WinnerLogsRepo
from battlestacks.economy.wallet.service import WalletService
from battlestacks.tournaments.bracket import (
    advance_winner,
    bracket_from_payload,
    bracket_to_payload,
    final_winner,
    generate_bracket,
    place_team,
    reset_bracket,
)
from battlestacks.tournaments.constants import TOURNAMENT_STATUS_COMPLETED
from battlestacks.tournaments.errors import (
    BracketFinalPendingError,
    RegistrationNotFoundError,
    TeamNotFoundError,
    TournamentAlreadyCompletedError,
)
from battlestacks.tournaments.internal import (
    build_tournament_snapshot,
    flush_tournament_changes,
    load_tournament_fresh,
    roster_from_payload,
    roster_to_payload,
)
from battlestacks.tournaments.types import (
    BracketTeam,
    TeamRemovalResult,
    TournamentSnapshot,
    WinnerDeclarationResult,
)

logger = structlog.get_logger(__name__)


def _ensure_bracket_open(tournament: Tournament) -> None:
    if tournament.status == TOURNAMENT_STATUS_COMPLETED or tournament.winner:
        raise TournamentAlreadyCompletedError


def _find_roster_team(tournament: Tournament, team_name: str) -> BracketTeam:
    for team in roster_from_payload(tournament.confirmed_teams):
        if team.team_name == team_name:
            return team
    raise TeamNotFoundError


async def ensure_bracket(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    rng: random.Random | None = None,
) -> TournamentSnapshot:
    tournament = await load_tournament_fresh(session, tournament_id)
    _ensure_bracket_open(tournament)
    if tournament.bracket:
        return build_tournament_snapshot(tournament)

    bracket = generate_bracket(
        teams=roster_from_payload(tournament.confirmed_teams),
        slots_total=int(tournament.slots_total),
        rng=rng,
    )
    tournament.bracket = bracket_to_payload(bracket)
    await flush_tournament_changes(session)

    logger.info(
        "tournament_bracket_generated",
        tournament_id=str(tournament.id),
        rounds_total=len(bracket),
    )
    return build_tournament_snapshot(tournament)


async def reset_tournament_bracket(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    rng: random.Random | None = None,
) -> TournamentSnapshot:
    tournament = await load_tournament_fresh(session, tournament_id)
    _ensure_bracket_open(tournament)
    bracket = reset_bracket(
        teams=roster_from_payload(tournament.confirmed_teams),
        slots_total=int(tournament.slots_total),
        rng=rng,
    )
    tournament.bracket = bracket_to_payload(bracket)
    await flush_tournament_changes(session)

    logger.info("tournament_bracket_reset", tournament_id=str(tournament.id))
    return build_tournament_snapshot(tournament)


async def advance_bracket_winner(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    round_index: int,
    matchup_index: int,
    team_name: str,
) -> TournamentSnapshot:
    tournament = await load_tournament_fresh(session, tournament_id)
    _ensure_bracket_open(tournament)
    bracket = advance_winner(
        bracket=bracket_from_payload(tournament.bracket),
        round_index=round_index,
        matchup_index=matchup_index,
        team_name=team_name,
    )
    tournament.bracket = bracket_to_payload(bracket)
    await flush_tournament_changes(session)

    logger.info(
        "tournament_bracket_winner_advanced",
        tournament_id=str(tournament.id),
        round_index=round_index,
        matchup_index=matchup_index,
        team_name=team_name,
    )
    return build_tournament_snapshot(tournament)


async def place_bracket_team(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    matchup_index: int,
    slot: str,
    team_name: str | None,
) -> TournamentSnapshot:
    """Put a confirmed team into a first-round slot, or clear the slot with None."""
    tournament = await load_tournament_fresh(session, tournament_id)
    _ensure_bracket_open(tournament)
    team = _find_roster_team(tournament, team_name) if team_name is not None else None
    bracket = place_team(
        bracket=bracket_from_payload(tournament.bracket),
        matchup_index=matchup_index,
        slot=slot,
        team=team,
    )
    tournament.bracket = bracket_to_payload(bracket)
    await flush_tournament_changes(session)

    logger.info(
        "tournament_bracket_team_placed",
        tournament_id=str(tournament.id),
        matchup_index=matchup_index,
        slot=slot,
        team_name=team_name,
    )
    return build_tournament_snapshot(tournament)


async def remove_team(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    team_name: str,
    rng: random.Random | None = None,
) -> TeamRemovalResult:
    """Drop a team from the roster, its bracket position and its registration.

    The slot counter is rebuilt from the remaining roster. A bracket that was
    already drawn is drawn again without the removed team.
    """
    tournament = await load_tournament_fresh(session, tournament_id)
    _ensure_bracket_open(tournament)
    removed_team = _find_roster_team(tournament, team_name)
    roster = [
        team
        for team in roster_from_payload(tournament.confirmed_teams)
        if team.team_name != team_name
    ]

    tournament.confirmed_teams = roster_to_payload(roster)
    tournament.slots_allotted = len(roster)
    if tournament.bracket:
        tournament.bracket = bracket_to_payload(
            generate_bracket(teams=roster, slots_total=int(tournament.slots_total), rng=rng)
        )
    await flush_tournament_changes(session)

    registration = await RegistrationsRepo.get_by_tournament_team(
        session,
        tournament_id=tournament.id,
        team_name=team_name,
    )
    if registration is not None:
        await RegistrationsRepo.delete(session, registration=registration)

    logger.info(
        "tournament_team_removed",
        tournament_id=str(tournament.id),
        team_name=team_name,
        slots_allotted=tournament.slots_allotted,
        registration_deleted=registration is not None,
    )
    return TeamRemovalResult(
        snapshot=build_tournament_snapshot(tournament),
        removed_team=removed_team,
        registration_deleted=registration is not None,
    )


async def declare_winner(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    now_utc: datetime,
) -> WinnerDeclarationResult:
    tournament = await load_tournament_fresh(session, tournament_id)
    if tournament.winner:
        raise TournamentAlreadyCompletedError
    if await WinnerLogsRepo.get_by_tournament_id(session, tournament.id) is not None:
        raise TournamentAlreadyCompletedError

    champion = final_winner(bracket_from_payload(tournament.bracket))
    if champion is None:
        raise BracketFinalPendingError

    registration = await RegistrationsRepo.get_by_tournament_team(
        session,
        tournament_id=tournament.id,
        team_name=champion.team_name,
    )
    if registration is None:
        raise RegistrationNotFoundError

    prize_money = int(tournament.prize_pool)
    tournament.status = TOURNAMENT_STATUS_COMPLETED
    tournament.winner = {
        "user_id": str(registration.user_id),
        "team_name": champion.team_name,
        "prize_money": prize_money,
    }
    await flush_tournament_changes(session)

    await WalletService.credit_prize(
        session,
        user_id=registration.user_id,
        prize_money=prize_money,
    )
    user = await UsersRepo.get_by_id(session, registration.user_id)
    winner_log = await WinnerLogsRepo.create(
        session,
        winner_log=WinnerLog(
            id=uuid4(),
            tournament_id=tournament.id,
            tournament_title=tournament.title,
            user_id=registration.user_id,
            user_name=user.name if user is not None else champion.team_name,
            team_name=champion.team_name,
            prize_money=prize_money,
            won_at=now_utc,
        ),
    )

    logger.info(
        "tournament_winner_declared",
        tournament_id=str(tournament.id),
        user_id=str(registration.user_id),
        team_name=champion.team_name,
        prize_money=prize_money,
    )
    return WinnerDeclarationResult(
        snapshot=build_tournament_snapshot(tournament),
        winner_log_id=winner_log.id,
        user_id=registration.user_id,
        prize_money=prize_money,
    )
