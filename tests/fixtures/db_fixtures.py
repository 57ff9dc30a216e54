"""Fixtures for mocked asyncpg pools and connections used by repository tests."""

from unittest.mock import AsyncMock
from unittest.mock import MagicMock

import pytest


class FakeTransaction:
    """Async context manager standing in for ``conn.transaction()``."""

    def __init__(self):
        self.entered = False
        self.exited_with = None

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.exited_with = exc_type
        return False


class FakeAcquire:
    """Async context manager standing in for ``pool.acquire()``."""

    def __init__(self, conn):
        self.conn = conn

    async def __aenter__(self):
        return self.conn

    async def __aexit__(self, exc_type, exc, tb):
        return False


@pytest.fixture
def mock_conn():
    """asyncpg connection with awaitable query methods; rows are plain dicts."""
    conn = MagicMock()
    conn.fetch = AsyncMock(return_value=[])
    conn.fetchrow = AsyncMock(return_value=None)
    conn.fetchval = AsyncMock(return_value=None)
    conn.execute = AsyncMock(return_value="SELECT 1")
    conn.executemany = AsyncMock(return_value=None)
    conn.transactions = []

    def _transaction():
        transaction = FakeTransaction()
        conn.transactions.append(transaction)
        return transaction

    conn.transaction = MagicMock(side_effect=_transaction)
    return conn


@pytest.fixture
def mock_pool(mock_conn):
    """asyncpg pool whose ``acquire()`` always yields ``mock_conn``."""
    pool = MagicMock()
    pool.acquire = MagicMock(side_effect=lambda: FakeAcquire(mock_conn))
    pool.close = AsyncMock(return_value=None)
    return pool
