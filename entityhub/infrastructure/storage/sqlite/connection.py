"""
Pooled aiosqlite connections for the compliance stores.

Reads borrow a connection with acquire(). Writes use transaction(), which
commits one unit of work or rolls it back. Stores never hold a connection
across a batch, so one slow filing cannot starve the scheduler.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from entityhub.config import get_logger, get_settings
from entityhub.core.exceptions import DatabaseError

logger = get_logger(__name__)

# foreign_keys backs ON DELETE SET NULL on filing_tasks.filing_id
CONNECTION_PRAGMAS = (
    "journal_mode=WAL",
    "synchronous=NORMAL",
    "foreign_keys=ON",
)


class ConnectionPool:
    """A fixed number of connections to one SQLite file, handed out in turn."""

    def __init__(self, db_path: Path, pool_size: int = 5, busy_timeout: int = 30000):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout
        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue()
        self._opened: list[aiosqlite.Connection] = []
        self._startup = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return bool(self._opened)

    async def initialize(self) -> None:
        async with self._startup:
            if self._opened:
                return
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            for _ in range(self.pool_size):
                conn = await self._connect()
                self._opened.append(conn)
                self._idle.put_nowait(conn)
            logger.info("sqlite_pool_opened", db_path=str(self.db_path), size=self.pool_size)

    async def _connect(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self.db_path)
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        for pragma in CONNECTION_PRAGMAS:
            await conn.execute(f"PRAGMA {pragma}")
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        if not self.initialized:
            await self.initialize()
        conn = await self._idle.get()
        try:
            yield conn
        finally:
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        One committed write unit.

        A locked or missing database (sqlite3.OperationalError) is raised as
        DatabaseError so the scheduler can retry the item; anything else
        propagates unchanged after the rollback.
        """
        async with self.acquire() as conn:
            try:
                yield conn
            except aiosqlite.OperationalError as e:
                await conn.rollback()
                raise DatabaseError("transaction", str(e)) from e
            except BaseException:
                await conn.rollback()
                raise
            try:
                await conn.commit()
            except aiosqlite.OperationalError as e:
                await conn.rollback()
                raise DatabaseError("commit", str(e)) from e

    async def close(self) -> None:
        async with self._startup:
            opened, self._opened = self._opened, []
            self._idle = asyncio.Queue()
            for conn in opened:
                await conn.close()
            if opened:
                logger.info("sqlite_pool_closed", db_path=str(self.db_path))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Process-wide pool built from STORAGE_* settings."""
    global _pool
    if _pool is None:
        storage = get_settings().storage
        _pool = ConnectionPool(storage.db_path, storage.pool_size, storage.busy_timeout)
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    global _pool
    pool, _pool = _pool, None
    if pool is not None:
        await pool.close()


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    async with (await get_pool()).acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    async with (await get_pool()).transaction() as conn:
        yield conn
