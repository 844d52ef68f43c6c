from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar
from uuid import UUID

import structlog
from fastapi import HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from battlestacks.core.config import get_settings
from battlestacks.db.repo.users_repo import UsersRepo
from battlestacks.db.session import SessionLocal
from battlestacks.services.admin_access import (
    is_admin_user,
    is_valid_internal_token,
    parse_user_id,
)
from battlestacks.tournaments.errors import (
    BracketError,
    BracketFinalPendingError,
    BracketInvalidWinnerError,
    BracketMatchupIncompleteError,
    BracketPositionError,
    BracketTeamAlreadyPlacedError,
    InvalidSlotCountError,
    PlayerBannedError,
    PlayerNotFoundError,
    RegistrationNotFoundError,
    TeamNotFoundError,
    TournamentAlreadyCompletedError,
    TournamentAlreadyRegisteredError,
    TournamentClosedError,
    TournamentError,
    TournamentFullError,
    TournamentNotFoundError,
    TournamentStatusTransitionError,
    TournamentTeamNameTakenError,
    TournamentTransactionConflictError,
    TournamentValidationError,
)
from battlestacks.tournaments.retry import run_with_conflict_retry

logger = structlog.get_logger(__name__)

T = TypeVar("T")

_TOURNAMENT_ERROR_RESPONSES: dict[type[Exception], tuple[int, str]] = {
    TournamentNotFoundError: (404, "E_TOURNAMENT_NOT_FOUND"),
    RegistrationNotFoundError: (404, "E_REGISTRATION_NOT_FOUND"),
    PlayerNotFoundError: (404, "E_USER_NOT_FOUND"),
    PlayerBannedError: (403, "E_USER_BANNED"),
    TeamNotFoundError: (404, "E_TEAM_NOT_FOUND"),
    TournamentValidationError: (422, "E_TOURNAMENT_INVALID"),
    TournamentClosedError: (409, "E_TOURNAMENT_CLOSED"),
    TournamentFullError: (409, "E_TOURNAMENT_FULL"),
    TournamentAlreadyRegisteredError: (409, "E_ALREADY_REGISTERED"),
    TournamentTeamNameTakenError: (409, "E_TEAM_NAME_TAKEN"),
    TournamentStatusTransitionError: (409, "E_STATUS_TRANSITION_INVALID"),
    TournamentAlreadyCompletedError: (409, "E_TOURNAMENT_COMPLETED"),
    InvalidSlotCountError: (422, "E_BRACKET_SLOTS_INVALID"),
    BracketPositionError: (422, "E_BRACKET_POSITION_INVALID"),
    BracketInvalidWinnerError: (422, "E_BRACKET_WINNER_INVALID"),
    BracketMatchupIncompleteError: (409, "E_BRACKET_MATCHUP_INCOMPLETE"),
    BracketTeamAlreadyPlacedError: (409, "E_BRACKET_TEAM_ALREADY_PLACED"),
    BracketFinalPendingError: (409, "E_BRACKET_FINAL_PENDING"),
}


def tournament_http_error(exc: TournamentError | BracketError) -> HTTPException:
    if isinstance(exc, TournamentTransactionConflictError):
        return HTTPException(
            status_code=503,
            detail={"code": "E_TRANSACTION_CONFLICT", "retryable": True},
            headers={"Retry-After": "1"},
        )
    status_code, code = _TOURNAMENT_ERROR_RESPONSES.get(type(exc), (400, "E_TOURNAMENT_ERROR"))
    return HTTPException(status_code=status_code, detail={"code": code})


def require_user_id(request: Request) -> UUID:
    user_id = parse_user_id(request.headers.get("X-User-Id"))
    if user_id is None:
        raise HTTPException(status_code=401, detail={"code": "E_USER_REQUIRED"})
    return user_id


async def assert_admin_access(request: Request) -> None:
    settings = get_settings()
    if is_valid_internal_token(
        expected_token=settings.internal_api_token,
        received_token=request.headers.get("X-Internal-Token"),
    ):
        return

    user_id = parse_user_id(request.headers.get("X-User-Id"))
    if user_id is not None:
        async with SessionLocal() as session:
            user = await UsersRepo.get_by_id(session, user_id)
        if is_admin_user(user):
            return

    logger.warning(
        "admin_auth_failed",
        path=request.url.path,
        user_id=str(user_id) if user_id is not None else None,
    )
    raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"})


async def run_tournament_transaction(operation: Callable[[AsyncSession], Awaitable[T]]) -> T:
    """Run ``operation`` in its own transaction, retrying it on tournament write conflicts."""
    settings = get_settings()

    async def _attempt() -> T:
        async with SessionLocal.begin() as session:
            return await operation(session)

    return await run_with_conflict_retry(
        _attempt,
        attempts=settings.transaction_retry_attempts,
        base_delay_seconds=settings.transaction_retry_base_delay_ms / 1000,
    )
