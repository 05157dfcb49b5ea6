# tests/integration/conftest.py
import asyncio
import time

import psycopg
import pytest
import pytest_asyncio
from psycopg_pool import AsyncConnectionPool

from passreset.infrastructure.db.pool import close_pool, get_pool
from passreset.infrastructure.db.schema import ensure_schema
from passreset.settings import get_settings


def _database_reachable() -> bool:
    try:
        with psycopg.connect(get_settings().database_url, connect_timeout=2):
            return True
    except psycopg.Error:
        return False


def pytest_collection_modifyitems(config, items):
    if _database_reachable():
        return
    skip = pytest.mark.skip(reason="PostgreSQL at DATABASE_URL is not reachable")
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(skip)


async def _wait_pool_ready(p: AsyncConnectionPool, timeout: float = 30.0) -> None:
    """Retry simple SELECT until Postgres accepts connections."""
    deadline = time.monotonic() + timeout
    last_exc: Exception | None = None
    while time.monotonic() < deadline:
        try:
            async with p.connection(timeout=1) as conn:
                await conn.execute("SELECT 1;")
            return
        except psycopg.Error as e:
            last_exc = e
            await asyncio.sleep(0.5)
    if last_exc:
        raise last_exc
    raise TimeoutError("database not ready")


@pytest_asyncio.fixture
async def pool():
    p = get_pool()
    await p.open()
    await _wait_pool_ready(p)
    await ensure_schema(p)
    try:
        yield p
    finally:
        await close_pool()


@pytest_asyncio.fixture
async def clean_tables(pool):
    # before each test
    async with pool.connection() as conn:
        await conn.execute("TRUNCATE passcodes, request_log RESTART IDENTITY;")
    yield
    # after each test
    async with pool.connection() as conn:
        await conn.execute("TRUNCATE passcodes, request_log RESTART IDENTITY;")
