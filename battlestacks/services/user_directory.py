from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from battlestacks.db.models.users import User
from battlestacks.db.repo.users_repo import UsersRepo
from battlestacks.services.admin_access import USER_STATUSES

logger = structlog.get_logger(__name__)

LEADERBOARD_DEFAULT_LIMIT = 10


class UserDirectoryError(Exception):
    pass


class UserNotFoundError(UserDirectoryError):
    pass


class UserStatusValidationError(UserDirectoryError):
    pass


@dataclass(slots=True, frozen=True)
class PlayerStanding:
    rank: int
    user_id: UUID
    name: str
    team_name: str | None
    total_earnings: int
    matches_won: int


@dataclass(slots=True, frozen=True)
class UserStatusResult:
    user_id: UUID
    name: str
    role: str
    status: str
    changed: bool


class UserDirectoryService:
    @staticmethod
    def _as_status_result(user: User, *, changed: bool) -> UserStatusResult:
        return UserStatusResult(
            user_id=user.id,
            name=user.name,
            role=user.role,
            status=user.status,
            changed=changed,
        )

    @staticmethod
    async def list_leaderboard(
        session: AsyncSession,
        *,
        limit: int = LEADERBOARD_DEFAULT_LIMIT,
    ) -> list[PlayerStanding]:
        users = await UsersRepo.list_top_earners(session, limit=limit)
        return [
            PlayerStanding(
                rank=index,
                user_id=user.id,
                name=user.name,
                team_name=user.team_name,
                total_earnings=int(user.total_earnings),
                matches_won=int(user.matches_won),
            )
            for index, user in enumerate(users, start=1)
        ]

    @staticmethod
    async def set_user_status(
        session: AsyncSession,
        *,
        user_id: UUID,
        status: str,
    ) -> UserStatusResult:
        """Ban or reinstate an account. Setting the current status again changes nothing."""
        if status not in USER_STATUSES:
            raise UserStatusValidationError(f"unknown user status: {status}")

        user = await UsersRepo.get_by_id_for_update(session, user_id)
        if user is None:
            raise UserNotFoundError
        if user.status == status:
            return UserDirectoryService._as_status_result(user, changed=False)

        previous_status = user.status
        user.status = status
        await session.flush()

        logger.info(
            "user_status_changed",
            user_id=str(user.id),
            previous_status=previous_status,
            status=status,
        )
        return UserDirectoryService._as_status_result(user, changed=True)
