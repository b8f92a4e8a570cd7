"""Tests for the aiosqlite connection pool."""

from pathlib import Path

import pytest

from entityhub.core.exceptions import DatabaseError
from entityhub.infrastructure.storage.sqlite import ConnectionPool, close_pool, get_pool


@pytest.fixture
async def pool(tmp_path: Path):
    pool = ConnectionPool(tmp_path / "pool.db", pool_size=2)
    await pool.initialize()
    async with pool.transaction() as conn:
        await conn.execute("CREATE TABLE items (id INTEGER PRIMARY KEY, name TEXT NOT NULL)")
    yield pool
    await pool.close()


class TestConnectionPool:
    async def test_initialize_opens_connections(self, pool):
        assert pool.initialized
        async with pool.acquire() as conn:
            cursor = await conn.execute("PRAGMA foreign_keys")
            assert (await cursor.fetchone())[0] == 1

    async def test_transaction_commits(self, pool):
        async with pool.transaction() as conn:
            await conn.execute("INSERT INTO items (name) VALUES ('a')")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM items")
            assert (await cursor.fetchone())[0] == 1

    async def test_transaction_rolls_back_on_error(self, pool):
        with pytest.raises(RuntimeError):
            async with pool.transaction() as conn:
                await conn.execute("INSERT INTO items (name) VALUES ('a')")
                raise RuntimeError("boom")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM items")
            assert (await cursor.fetchone())[0] == 0

    async def test_operational_error_becomes_database_error(self, pool):
        with pytest.raises(DatabaseError) as exc_info:
            async with pool.transaction() as conn:
                await conn.execute("INSERT INTO missing_table VALUES (1)")

        assert exc_info.value.code == "DATABASE_ERROR"

    async def test_close_resets_pool(self, pool):
        await pool.close()
        assert not pool.initialized

        # Reopens lazily
        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")


class TestGlobalPool:
    async def test_get_pool_is_singleton(self):
        first = await get_pool()
        second = await get_pool()
        try:
            assert first is second
            assert first.db_path.name == "entityhub.db"
        finally:
            await close_pool()

        assert await get_pool() is not first
        await close_pool()
