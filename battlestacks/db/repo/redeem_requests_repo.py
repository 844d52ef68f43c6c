from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from battlestacks.db.models.redeem_requests import RedeemRequest


class RedeemRequestsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, redeem_request: RedeemRequest) -> RedeemRequest:
        session.add(redeem_request)
        await session.flush()
        return redeem_request

    @staticmethod
    async def get_by_id_for_update(
        session: AsyncSession,
        request_id: UUID,
    ) -> RedeemRequest | None:
        stmt = (
            select(RedeemRequest)
            .where(RedeemRequest.id == request_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_by_status(
        session: AsyncSession,
        *,
        status: str,
        limit: int = 100,
    ) -> list[RedeemRequest]:
        resolved_limit = max(1, int(limit))
        stmt = (
            select(RedeemRequest)
            .where(RedeemRequest.status == status)
            .order_by(RedeemRequest.requested_at.desc())
            .limit(resolved_limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
