from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from battlestacks.db.models.users import User


class UsersRepo:
    @staticmethod
    async def create(session: AsyncSession, *, user: User) -> User:
        session.add(user)
        await session.flush()
        return user

    @staticmethod
    async def get_by_id(session: AsyncSession, user_id: UUID) -> User | None:
        return await session.get(User, user_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, user_id: UUID) -> User | None:
        stmt = (
            select(User)
            .where(User.id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_top_earners(session: AsyncSession, *, limit: int = 10) -> list[User]:
        resolved_limit = max(1, int(limit))
        stmt = (
            select(User)
            .order_by(User.total_earnings.desc(), User.matches_won.desc(), User.created_at.asc())
            .limit(resolved_limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
