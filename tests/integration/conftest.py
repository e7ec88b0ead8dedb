"""Integration-test fixtures.

Requires PostgreSQL + Redis with the schema migrated:

    alembic upgrade head
    RUN_INTEGRATION=1 pytest tests/integration

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and Redis pool (both created at import time)
remain valid across the entire test session.
"""

import os
import uuid
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

from src.main import app
from src.tp_common.database import async_session_factory

_INTEGRATION_DIR = Path(__file__).parent


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if os.environ.get("RUN_INTEGRATION") == "1":
        return
    skip = pytest.mark.skip(reason="set RUN_INTEGRATION=1 with PostgreSQL + Redis running")
    for item in items:
        if _INTEGRATION_DIR in item.path.parents:
            item.add_marker(skip)


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _create_account(cash_balance: Decimal) -> uuid.UUID:
    account_id = uuid.uuid4()
    async with async_session_factory() as session:
        await session.execute(
            text("""
                INSERT INTO accounts (account_id, client_id, cash_balance, currency)
                VALUES (:account_id, :client_id, :cash_balance, 'EUR')
            """),
            {
                "account_id": account_id,
                "client_id": uuid.uuid4(),
                "cash_balance": cash_balance,
            },
        )
        await session.commit()
    return account_id


@pytest_asyncio.fixture(loop_scope="session")
async def funded_account() -> uuid.UUID:
    """A fresh account with 50,000.00 EUR and no positions."""
    return await _create_account(Decimal("50000.00"))


@pytest_asyncio.fixture(loop_scope="session")
async def low_balance_account() -> uuid.UUID:
    """A fresh account with 1,000.00 EUR: room for one 5 x AAPL fill only."""
    return await _create_account(Decimal("1000.00"))
