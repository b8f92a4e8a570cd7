"""
SQLite implementation of the entity and recipient directory.
"""

from datetime import datetime

import aiosqlite

from entityhub.config import get_logger
from entityhub.core.entities.directory import Entity, Recipient
from entityhub.core.interfaces.storage import IDirectory
from entityhub.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from entityhub.infrastructure.storage.sqlite.rows import parse_datetime

logger = get_logger(__name__)


class SQLiteDirectory(IDirectory):
    """Entity names and reminder recipients."""

    async def create_entity(self, entity: Entity) -> Entity:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO entities (name, fiscal_year_end, created_at)
                VALUES (?, ?, ?)
                """,
                (entity.name, entity.fiscal_year_end, entity.created_at.isoformat()),
            )
            entity.id = cursor.lastrowid
            logger.info("entity_created", entity_id=entity.id)
            return entity

    async def get_entity(self, entity_id: int) -> Entity | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM entities WHERE id = ?", (entity_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return Entity(
                id=row["id"],
                name=row["name"],
                fiscal_year_end=row["fiscal_year_end"],
                created_at=parse_datetime(row["created_at"], datetime.utcnow()),
            )

    async def get_entity_names(self, entity_ids: list[int]) -> dict[int, str]:
        ids = sorted(set(entity_ids))
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT id, name FROM entities WHERE id IN ({placeholders})",
                ids,
            )
            rows = await cursor.fetchall()
            return {row["id"]: row["name"] for row in rows}

    async def upsert_recipient(self, recipient: Recipient) -> Recipient:
        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO recipients (id, name, email, role, is_active)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    email = excluded.email,
                    role = excluded.role,
                    is_active = excluded.is_active
                """,
                (
                    recipient.id,
                    recipient.name,
                    recipient.email,
                    recipient.role,
                    1 if recipient.is_active else 0,
                ),
            )
            logger.info("recipient_saved", recipient_id=recipient.id)
            return recipient

    async def get_recipient(self, recipient_id: str) -> Recipient | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM recipients WHERE id = ?", (recipient_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_recipient(row) if row else None

    async def list_recipients(self, include_inactive: bool = False) -> list[Recipient]:
        """Recipients ordered by id; active only unless include_inactive."""
        query = "SELECT * FROM recipients"
        if not include_inactive:
            query += " WHERE is_active = 1"
        query += " ORDER BY id ASC"
        async with get_connection() as conn:
            cursor = await conn.execute(query)
            rows = await cursor.fetchall()
            return [self._row_to_recipient(row) for row in rows]

    @staticmethod
    def _row_to_recipient(row: aiosqlite.Row) -> Recipient:
        return Recipient(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            role=row["role"] or "admin",
            is_active=bool(row["is_active"]),
        )
