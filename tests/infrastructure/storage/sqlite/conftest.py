"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from datetime import date
from pathlib import Path

import pytest

from entityhub.config import get_settings
from entityhub.core.entities.directory import Entity
from entityhub.core.entities.filing import EntityFiling, FilingFrequency, FilingType
from entityhub.core.entities.task import FilingTask
from entityhub.infrastructure.storage.sqlite import (
    SQLiteDirectory,
    SQLiteFilingStore,
    SQLiteFilingTaskStore,
    SQLiteFilingTypeStore,
    close_pool,
)
from entityhub.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
async def initialized_db() -> AsyncGenerator[Path, None]:
    """Migrate a temporary database and close the pool afterwards."""
    results = await initialize_database(create_backup_before=False)
    assert results and all(r.success for r in results)
    yield get_settings().storage.db_path
    await close_pool()


@pytest.fixture
def filing_store(initialized_db: Path) -> SQLiteFilingStore:
    return SQLiteFilingStore()


@pytest.fixture
def task_store(initialized_db: Path) -> SQLiteFilingTaskStore:
    return SQLiteFilingTaskStore()


@pytest.fixture
def type_store(initialized_db: Path) -> SQLiteFilingTypeStore:
    return SQLiteFilingTypeStore()


@pytest.fixture
def directory(initialized_db: Path) -> SQLiteDirectory:
    return SQLiteDirectory()


@pytest.fixture
async def entity(directory: SQLiteDirectory) -> Entity:
    """A stored entity named Acme Holdings LLC."""
    return await directory.create_entity(Entity(name="Acme Holdings LLC", fiscal_year_end="12-31"))


@pytest.fixture
async def filing_type(type_store: SQLiteFilingTypeStore) -> FilingType:
    return await type_store.create(
        FilingType(code="941", name="Quarterly Payroll", default_frequency=FilingFrequency.QUARTERLY)
    )


@pytest.fixture
async def filing(filing_store: SQLiteFilingStore, entity: Entity, filing_type: FilingType) -> EntityFiling:
    """A pending quarterly filing due Mar 31, 2025."""
    return await filing_store.create(
        EntityFiling(
            entity_id=entity.id,
            filing_type_id=filing_type.id,
            title="Form 941",
            due_date=date(2025, 3, 31),
            due_day=31,
            frequency=FilingFrequency.QUARTERLY,
        )
    )


@pytest.fixture
def make_task(entity: Entity):
    """Factory for unsaved tasks of the stored entity."""

    def _make(filing_id: int | None = None, **overrides) -> FilingTask:
        data = {
            "entity_id": entity.id,
            "filing_id": filing_id,
            "title": "Submit Form 941",
            "due_date": date(2025, 3, 25),
        }
        data.update(overrides)
        return FilingTask(**data)

    return _make
