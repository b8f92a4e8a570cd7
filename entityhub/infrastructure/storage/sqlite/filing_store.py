"""
SQLite implementation of entity filing storage.

Handles CRUD, the recurrence candidate query and the conditional
advancement update.
"""

from datetime import date, datetime

import aiosqlite

from entityhub.config import get_logger
from entityhub.core.entities.filing import EntityFiling, FilingFrequency, FilingStatus
from entityhub.core.exceptions import FilingHasTasksError
from entityhub.core.interfaces.storage import IFilingStore
from entityhub.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from entityhub.infrastructure.storage.sqlite.rows import iso, parse_date, parse_datetime

logger = get_logger(__name__)


class SQLiteFilingStore(IFilingStore):
    """SQLite implementation of entity filing storage."""

    async def create(self, filing: EntityFiling) -> EntityFiling:
        """Create a new filing."""
        filing.updated_at = datetime.utcnow()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO entity_filings (
                    entity_id, filing_type_id, title, jurisdiction,
                    due_date, due_day, filing_date, frequency, amount,
                    confirmation_number, filed_by, notes, status,
                    reminder_days, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    filing.entity_id,
                    filing.filing_type_id,
                    filing.title,
                    filing.jurisdiction,
                    iso(filing.due_date),
                    filing.due_day,
                    iso(filing.filing_date),
                    filing.frequency.value if filing.frequency else None,
                    filing.amount,
                    filing.confirmation_number,
                    filing.filed_by,
                    filing.notes,
                    filing.status.value,
                    filing.reminder_days,
                    filing.created_at.isoformat(),
                    filing.updated_at.isoformat(),
                ),
            )
            filing.id = cursor.lastrowid
            logger.info("filing_created", filing_id=filing.id, entity_id=filing.entity_id)
            return filing

    async def get(self, filing_id: int) -> EntityFiling | None:
        """Get filing by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM entity_filings WHERE id = ?", (filing_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entity(row)

    async def update(self, filing: EntityFiling) -> EntityFiling:
        """Update an existing filing."""
        filing.updated_at = datetime.utcnow()
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE entity_filings SET
                    entity_id = ?, filing_type_id = ?, title = ?,
                    jurisdiction = ?, due_date = ?, due_day = ?,
                    filing_date = ?, frequency = ?, amount = ?,
                    confirmation_number = ?, filed_by = ?, notes = ?,
                    status = ?, reminder_days = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    filing.entity_id,
                    filing.filing_type_id,
                    filing.title,
                    filing.jurisdiction,
                    iso(filing.due_date),
                    filing.due_day,
                    iso(filing.filing_date),
                    filing.frequency.value if filing.frequency else None,
                    filing.amount,
                    filing.confirmation_number,
                    filing.filed_by,
                    filing.notes,
                    filing.status.value,
                    filing.reminder_days,
                    filing.updated_at.isoformat(),
                    filing.id,
                ),
            )
            logger.info("filing_updated", filing_id=filing.id)
            return filing

    async def delete(self, filing_id: int) -> bool:
        """Delete a filing that no task references."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM filing_tasks WHERE filing_id = ?", (filing_id,)
            )
            task_count = (await cursor.fetchone())[0]
            if task_count:
                raise FilingHasTasksError(filing_id, task_count)

            cursor = await conn.execute(
                "DELETE FROM entity_filings WHERE id = ?", (filing_id,)
            )
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("filing_deleted", filing_id=filing_id)
            return deleted

    async def list_filings(
        self,
        entity_id: int | None = None,
        status: FilingStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[EntityFiling]:
        """List filings with optional entity and persisted status filters."""
        clauses: list[str] = []
        params: list = []
        if entity_id is not None:
            clauses.append("entity_id = ?")
            params.append(entity_id)
        if status is not None:
            clauses.append("status = ?")
            params.append(status.value)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM entity_filings
                {where}
                ORDER BY due_date ASC, id ASC
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    async def list_advanceable(self, limit: int | None = None) -> list[EntityFiling]:
        """
        Filed filings that recur, every one of them unless limit is given.

        Rows with a missing or unrecognised frequency, or an unreadable due
        date, are included so the advancer can report them.
        """
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM entity_filings
                WHERE status = ?
                  AND (frequency IS NULL OR frequency != ?)
                ORDER BY due_date ASC, id ASC
                LIMIT ?
                """,
                (FilingStatus.FILED.value, FilingFrequency.ONE_TIME.value, -1 if limit is None else limit),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    async def advance_if_filed(
        self,
        filing_id: int,
        expected_due_date: date,
        new_due_date: date,
    ) -> bool:
        """Conditional single-row update; False when another run got there first."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE entity_filings SET
                    due_date = ?, status = ?, filing_date = NULL,
                    confirmation_number = NULL, updated_at = ?
                WHERE id = ? AND status = ? AND due_date = ?
                """,
                (
                    new_due_date.isoformat(),
                    FilingStatus.PENDING.value,
                    datetime.utcnow().isoformat(),
                    filing_id,
                    FilingStatus.FILED.value,
                    expected_due_date.isoformat(),
                ),
            )
            return cursor.rowcount == 1

    async def mark_filed(
        self,
        filing_id: int,
        filing_date: date,
        confirmation_number: str | None = None,
        filed_by: str | None = None,
    ) -> EntityFiling | None:
        """Record completion of the current cycle."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE entity_filings SET
                    status = ?, filing_date = ?, confirmation_number = ?,
                    filed_by = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    FilingStatus.FILED.value,
                    filing_date.isoformat(),
                    confirmation_number,
                    filed_by,
                    datetime.utcnow().isoformat(),
                    filing_id,
                ),
            )
            if cursor.rowcount == 0:
                return None

        logger.info("filing_marked_filed", filing_id=filing_id, filing_date=filing_date.isoformat())
        return await self.get(filing_id)

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> EntityFiling:
        """Convert a database row to an EntityFiling entity."""
        due_date = parse_date(row["due_date"])
        if due_date is None:
            logger.warning("filing_due_date_unreadable", filing_id=row["id"], due_date=row["due_date"])

        frequency: FilingFrequency | None = None
        if row["frequency"]:
            try:
                frequency = FilingFrequency(row["frequency"])
            except ValueError:
                logger.warning(
                    "filing_unknown_frequency",
                    filing_id=row["id"],
                    frequency=row["frequency"],
                )

        now = datetime.utcnow()
        return EntityFiling(
            id=row["id"],
            entity_id=row["entity_id"],
            filing_type_id=row["filing_type_id"],
            title=row["title"],
            jurisdiction=row["jurisdiction"],
            due_date=due_date,
            due_day=row["due_day"],
            filing_date=parse_date(row["filing_date"]),
            frequency=frequency,
            amount=row["amount"] or 0.0,
            confirmation_number=row["confirmation_number"],
            filed_by=row["filed_by"],
            notes=row["notes"],
            status=row["status"] or FilingStatus.PENDING.value,
            reminder_days=row["reminder_days"] or 30,
            created_at=parse_datetime(row["created_at"], now),
            updated_at=parse_datetime(row["updated_at"], now),
        )
