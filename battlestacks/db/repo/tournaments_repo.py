from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from battlestacks.db.models.tournaments import Tournament


class TournamentsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, tournament: Tournament) -> Tournament:
        session.add(tournament)
        await session.flush()
        return tournament

    @staticmethod
    async def get_by_id(session: AsyncSession, tournament_id: UUID) -> Tournament | None:
        return await session.get(Tournament, tournament_id)

    @staticmethod
    async def get_by_id_fresh(session: AsyncSession, tournament_id: UUID) -> Tournament | None:
        # Overwrites any identity-map copy so counters are read from the row itself.
        stmt = (
            select(Tournament)
            .where(Tournament.id == tournament_id)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_series_member(
        session: AsyncSession,
        *,
        series_id: UUID,
        series_number: int,
    ) -> Tournament | None:
        stmt = select(Tournament).where(
            Tournament.series_id == series_id,
            Tournament.series_number == series_number,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_by_status(
        session: AsyncSession,
        *,
        status: str,
        limit: int = 50,
    ) -> list[Tournament]:
        resolved_limit = max(1, int(limit))
        stmt = (
            select(Tournament)
            .where(Tournament.status == status)
            .order_by(Tournament.registration_deadline.asc())
            .limit(resolved_limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
