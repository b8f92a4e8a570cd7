"""
SQLite implementation of the filing type catalog.
"""

from datetime import datetime

import aiosqlite

from entityhub.config import get_logger
from entityhub.core.entities.filing import FilingCategory, FilingFrequency, FilingType
from entityhub.core.exceptions import FilingTypeInUseError, ValidationError
from entityhub.core.interfaces.storage import IFilingTypeStore
from entityhub.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from entityhub.infrastructure.storage.sqlite.rows import parse_datetime

logger = get_logger(__name__)


class SQLiteFilingTypeStore(IFilingTypeStore):
    """SQLite implementation of filing type storage."""

    async def create(self, filing_type: FilingType) -> FilingType:
        """Create a filing type; codes are unique."""
        filing_type.updated_at = datetime.utcnow()
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO filing_types (
                        code, name, default_frequency, category,
                        description, auto_generate_tasks,
                        created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        filing_type.code,
                        filing_type.name,
                        filing_type.default_frequency.value,
                        filing_type.category.value,
                        filing_type.description,
                        1 if filing_type.auto_generate_tasks else 0,
                        filing_type.created_at.isoformat(),
                        filing_type.updated_at.isoformat(),
                    ),
                )
                filing_type.id = cursor.lastrowid
        except aiosqlite.IntegrityError:
            raise ValidationError("code", "filing type code already exists", filing_type.code)

        logger.info("filing_type_created", filing_type_id=filing_type.id, code=filing_type.code)
        return filing_type

    async def get(self, filing_type_id: int) -> FilingType | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM filing_types WHERE id = ?", (filing_type_id,)
            )
            row = await cursor.fetchone()
            return self._row_to_entity(row) if row else None

    async def get_by_code(self, code: str) -> FilingType | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM filing_types WHERE code = ?", (code,)
            )
            row = await cursor.fetchone()
            return self._row_to_entity(row) if row else None

    async def update(self, filing_type: FilingType) -> FilingType:
        filing_type.updated_at = datetime.utcnow()
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    """
                    UPDATE filing_types SET
                        code = ?, name = ?, default_frequency = ?,
                        category = ?, description = ?,
                        auto_generate_tasks = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        filing_type.code,
                        filing_type.name,
                        filing_type.default_frequency.value,
                        filing_type.category.value,
                        filing_type.description,
                        1 if filing_type.auto_generate_tasks else 0,
                        filing_type.updated_at.isoformat(),
                        filing_type.id,
                    ),
                )
        except aiosqlite.IntegrityError:
            raise ValidationError("code", "filing type code already exists", filing_type.code)

        logger.info("filing_type_updated", filing_type_id=filing_type.id)
        return filing_type

    async def delete(self, filing_type_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM entity_filings WHERE filing_type_id = ?",
                (filing_type_id,),
            )
            in_use = (await cursor.fetchone())[0]
            if in_use:
                raise FilingTypeInUseError(filing_type_id, in_use)

            cursor = await conn.execute(
                "DELETE FROM filing_types WHERE id = ?", (filing_type_id,)
            )
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("filing_type_deleted", filing_type_id=filing_type_id)
            return deleted

    async def list_types(self, limit: int = 100, offset: int = 0) -> list[FilingType]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM filing_types ORDER BY name ASC LIMIT ? OFFSET ?",
                (limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> FilingType:
        try:
            frequency = FilingFrequency(row["default_frequency"])
        except ValueError:
            frequency = FilingFrequency.ANNUAL
        try:
            category = FilingCategory(row["category"])
        except ValueError:
            category = FilingCategory.OTHER

        now = datetime.utcnow()
        return FilingType(
            id=row["id"],
            code=row["code"],
            name=row["name"],
            default_frequency=frequency,
            category=category,
            description=row["description"],
            auto_generate_tasks=bool(row["auto_generate_tasks"]),
            created_at=parse_datetime(row["created_at"], now),
            updated_at=parse_datetime(row["updated_at"], now),
        )
