from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from battlestacks.db.models.registrations import Registration


class RegistrationsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, registration: Registration) -> Registration:
        session.add(registration)
        await session.flush()
        return registration

    @staticmethod
    async def get_by_id(session: AsyncSession, registration_id: UUID) -> Registration | None:
        return await session.get(Registration, registration_id)

    @staticmethod
    async def get_by_id_for_update(
        session: AsyncSession,
        registration_id: UUID,
    ) -> Registration | None:
        stmt = (
            select(Registration)
            .where(Registration.id == registration_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_tournament_user(
        session: AsyncSession,
        *,
        tournament_id: UUID,
        user_id: UUID,
    ) -> Registration | None:
        stmt = select(Registration).where(
            Registration.tournament_id == tournament_id,
            Registration.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_tournament_team(
        session: AsyncSession,
        *,
        tournament_id: UUID,
        team_name: str,
    ) -> Registration | None:
        stmt = (
            select(Registration)
            .where(
                Registration.tournament_id == tournament_id,
                Registration.team_name == team_name,
            )
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_for_tournament(
        session: AsyncSession,
        *,
        tournament_id: UUID,
        payment_status: str | None = None,
    ) -> list[Registration]:
        stmt = select(Registration).where(Registration.tournament_id == tournament_id)
        if payment_status is not None:
            stmt = stmt.where(Registration.payment_status == payment_status)
        stmt = stmt.order_by(Registration.registered_at.asc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def delete(session: AsyncSession, *, registration: Registration) -> None:
        await session.delete(registration)
        await session.flush()
