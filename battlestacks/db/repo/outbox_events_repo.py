from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from battlestacks.db.models.outbox_events import OutboxEvent


class OutboxEventsRepo:
    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        event_type: str,
        payload: dict[str, object],
        status: str,
        created_at: datetime,
    ) -> OutboxEvent:
        event = OutboxEvent(
            id=uuid4(),
            event_type=event_type,
            payload=payload,
            status=status,
            created_at=created_at,
        )
        session.add(event)
        await session.flush()
        return event

