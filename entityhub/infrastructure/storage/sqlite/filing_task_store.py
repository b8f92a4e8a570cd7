"""
SQLite implementation of filing task storage.

Handles CRUD, the reminder due-window query and the auto-task lookup.
"""

from datetime import date, datetime

import aiosqlite

from entityhub.config import get_logger
from entityhub.core.entities.reminder import ReminderItem
from entityhub.core.entities.task import (
    OPEN_TASK_STATUSES,
    FilingTask,
    TaskPriority,
    TaskStatus,
)
from entityhub.core.interfaces.storage import IFilingTaskStore
from entityhub.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from entityhub.infrastructure.storage.sqlite.rows import iso, parse_date, parse_datetime

logger = get_logger(__name__)


class SQLiteFilingTaskStore(IFilingTaskStore):
    """SQLite implementation of filing task storage."""

    async def create(self, task: FilingTask) -> FilingTask:
        """Create a new task."""
        task.updated_at = datetime.utcnow()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO filing_tasks (
                    entity_id, filing_id, title, description, due_date,
                    priority, status, assigned_to, is_auto_generated,
                    completed_at, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    task.entity_id,
                    task.filing_id,
                    task.title,
                    task.description,
                    task.due_date.isoformat(),
                    task.priority.value,
                    task.status.value,
                    task.assigned_to,
                    1 if task.is_auto_generated else 0,
                    iso(task.completed_at),
                    task.created_at.isoformat(),
                    task.updated_at.isoformat(),
                ),
            )
            task.id = cursor.lastrowid
            logger.info(
                "task_created",
                task_id=task.id,
                filing_id=task.filing_id,
                auto=task.is_auto_generated,
            )
            return task

    async def get(self, task_id: int) -> FilingTask | None:
        """Get task by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM filing_tasks WHERE id = ?", (task_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entity(row)

    async def update(self, task: FilingTask) -> FilingTask:
        """Update an existing task."""
        task.updated_at = datetime.utcnow()
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE filing_tasks SET
                    entity_id = ?, filing_id = ?, title = ?, description = ?,
                    due_date = ?, priority = ?, status = ?, assigned_to = ?,
                    is_auto_generated = ?, completed_at = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    task.entity_id,
                    task.filing_id,
                    task.title,
                    task.description,
                    task.due_date.isoformat(),
                    task.priority.value,
                    task.status.value,
                    task.assigned_to,
                    1 if task.is_auto_generated else 0,
                    iso(task.completed_at),
                    task.updated_at.isoformat(),
                    task.id,
                ),
            )
            logger.info("task_updated", task_id=task.id, status=task.status.value)
            return task

    async def delete(self, task_id: int) -> bool:
        """Delete a task by ID."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM filing_tasks WHERE id = ?", (task_id,)
            )
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("task_deleted", task_id=task_id)
            return deleted

    async def list_tasks(
        self,
        entity_id: int | None = None,
        filing_id: int | None = None,
        status: TaskStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[FilingTask]:
        """List tasks with optional filters, soonest first."""
        clauses: list[str] = []
        params: list = []
        if entity_id is not None:
            clauses.append("entity_id = ?")
            params.append(entity_id)
        if filing_id is not None:
            clauses.append("filing_id = ?")
            params.append(filing_id)
        if status is not None:
            clauses.append("status = ?")
            params.append(status.value)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM filing_tasks
                {where}
                ORDER BY due_date ASC, id ASC
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [task for task in map(self._row_to_entity, rows) if task is not None]

    async def list_due_between(
        self,
        start: date,
        end: date,
        statuses: tuple[TaskStatus, ...] = OPEN_TASK_STATUSES,
    ) -> list[ReminderItem]:
        """Tasks due in [start, end] joined with entity name and filing title."""
        if not statuses:
            return []
        placeholders = ", ".join("?" for _ in statuses)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT t.*,
                       e.name AS entity_name,
                       f.title AS filing_title,
                       f.reminder_days AS filing_reminder_days
                FROM filing_tasks t
                LEFT JOIN entities e ON e.id = t.entity_id
                LEFT JOIN entity_filings f ON f.id = t.filing_id
                WHERE t.due_date >= ? AND t.due_date <= ?
                  AND t.status IN ({placeholders})
                ORDER BY t.due_date ASC, t.id ASC
                """,
                (start.isoformat(), end.isoformat(), *(s.value for s in statuses)),
            )
            rows = await cursor.fetchall()
            items = []
            for row in rows:
                task = self._row_to_entity(row)
                if task is None:
                    continue
                items.append(
                    ReminderItem(
                        task=task,
                        entity_name=row["entity_name"],
                        filing_title=row["filing_title"],
                        filing_reminder_days=row["filing_reminder_days"],
                    )
                )
            return items

    async def find_auto_task(self, filing_id: int, due_date: date) -> FilingTask | None:
        """Non-completed auto task for a filing cycle, if any."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT * FROM filing_tasks
                WHERE filing_id = ? AND due_date = ?
                  AND is_auto_generated = 1
                  AND status != ?
                ORDER BY id ASC
                LIMIT 1
                """,
                (filing_id, due_date.isoformat(), TaskStatus.COMPLETED.value),
            )
            row = await cursor.fetchone()
            return self._row_to_entity(row) if row else None

    async def count_for_filing(self, filing_id: int) -> int:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM filing_tasks WHERE filing_id = ?", (filing_id,)
            )
            return (await cursor.fetchone())[0]

    async def unlink_filing(self, filing_id: int) -> int:
        """Clear filing_id on every task pointing at the filing."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE filing_tasks SET filing_id = NULL, updated_at = ?
                WHERE filing_id = ?
                """,
                (datetime.utcnow().isoformat(), filing_id),
            )
            unlinked = cursor.rowcount
        if unlinked:
            logger.info("tasks_unlinked", filing_id=filing_id, count=unlinked)
        return unlinked

    @staticmethod
    def _row_to_entity(row: aiosqlite.Row) -> FilingTask | None:
        """Convert a database row to a FilingTask entity, or None if its due date is unreadable."""
        due_date = parse_date(row["due_date"])
        if due_date is None:
            logger.warning("task_due_date_unreadable", task_id=row["id"], due_date=row["due_date"])
            return None
        try:
            priority = TaskPriority(row["priority"])
        except ValueError:
            priority = TaskPriority.MEDIUM
        try:
            status = TaskStatus(row["status"])
        except ValueError:
            status = TaskStatus.PENDING

        now = datetime.utcnow()
        return FilingTask(
            id=row["id"],
            entity_id=row["entity_id"],
            filing_id=row["filing_id"],
            title=row["title"],
            description=row["description"],
            due_date=due_date,
            priority=priority,
            status=status,
            assigned_to=row["assigned_to"],
            is_auto_generated=bool(row["is_auto_generated"]),
            completed_at=parse_datetime(row["completed_at"]),
            created_at=parse_datetime(row["created_at"], now),
            updated_at=parse_datetime(row["updated_at"], now),
        )
