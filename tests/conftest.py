from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import StaticPool

from battlestacks.db.models import (  # noqa: F401
    OutboxEvent,
    RedeemRequest,
    Registration,
    Tournament,
    User,
    WinnerLog,
)
from battlestacks.db.models.base import Base

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# PostgreSQL column types rendered for the in-memory SQLite schema.
@compiles(PG_UUID, "sqlite")
def _compile_uuid_sqlite(type_, compiler, **kw) -> str:
    return "CHAR(36)"


@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_, compiler, **kw) -> str:
    return "JSON"


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
