from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from battlestacks.db.models.winner_logs import WinnerLog


class WinnerLogsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, winner_log: WinnerLog) -> WinnerLog:
        session.add(winner_log)
        await session.flush()
        return winner_log

    @staticmethod
    async def get_by_tournament_id(
        session: AsyncSession,
        tournament_id: UUID,
    ) -> WinnerLog | None:
        stmt = select(WinnerLog).where(WinnerLog.tournament_id == tournament_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_for_user(
        session: AsyncSession,
        *,
        user_id: UUID,
        limit: int = 20,
    ) -> list[WinnerLog]:
        resolved_limit = max(1, int(limit))
        stmt = (
            select(WinnerLog)
            .where(WinnerLog.user_id == user_id)
            .order_by(WinnerLog.won_at.desc())
            .limit(resolved_limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
