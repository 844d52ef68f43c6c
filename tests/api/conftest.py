from __future__ import annotations

from collections.abc import AsyncGenerator
from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient

from battlestacks.api.routes import admin_tournaments, helpers, tournaments, users, wallet
from battlestacks.main import app
from tests.tournament_fixtures import INTERNAL_TOKEN



@pytest.fixture
async def api_client(session_factory, monkeypatch) -> AsyncGenerator[AsyncClient, None]:
    for module in (admin_tournaments, helpers, tournaments, users, wallet):
        monkeypatch.setattr(module, "SessionLocal", session_factory)
    monkeypatch.setattr(
        helpers,
        "get_settings",
        lambda: SimpleNamespace(
            internal_api_token=INTERNAL_TOKEN,
            transaction_retry_attempts=3,
            transaction_retry_base_delay_ms=0,
        ),
    )

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
