"""Tests for SQLiteFilingTypeStore and SQLiteDirectory."""

import aiosqlite
import pytest

from entityhub.core.entities.directory import Entity, Recipient
from entityhub.core.entities.filing import EntityFiling, FilingCategory, FilingType
from entityhub.core.exceptions import FilingTypeInUseError, ValidationError


class TestSQLiteFilingTypeStore:
    async def test_create_and_lookup(self, type_store, filing_type):
        assert (await type_store.get(filing_type.id)).name == "Quarterly Payroll"
        assert (await type_store.get_by_code("941")).id == filing_type.id
        assert await type_store.get_by_code("1120") is None

    async def test_code_is_unique(self, type_store, filing_type):
        with pytest.raises(ValidationError):
            await type_store.create(FilingType(code="941", name="Duplicate"))

    async def test_update(self, type_store, filing_type):
        filing_type.category = FilingCategory.FEDERAL
        filing_type.auto_generate_tasks = False
        await type_store.update(filing_type)

        loaded = await type_store.get(filing_type.id)
        assert loaded.category == FilingCategory.FEDERAL
        assert loaded.auto_generate_tasks is False

    async def test_list_types_by_name(self, type_store, filing_type):
        annual = await type_store.create(FilingType(code="AR", name="Annual Report"))
        assert [t.id for t in await type_store.list_types()] == [annual.id, filing_type.id]

    async def test_delete_in_use_is_refused(self, type_store, filing):
        with pytest.raises(FilingTypeInUseError):
            await type_store.delete(filing.filing_type_id)

    async def test_delete_unused(self, type_store, filing_type):
        assert await type_store.delete(filing_type.id) is True
        assert await type_store.get(filing_type.id) is None


class TestSQLiteDirectory:
    async def test_entities(self, directory, entity):
        other = await directory.create_entity(Entity(name="Beta Corp"))

        assert (await directory.get_entity(entity.id)).fiscal_year_end == "12-31"
        assert await directory.get_entity(999) is None
        names = await directory.get_entity_names([entity.id, other.id, entity.id, 999])
        assert names == {entity.id: "Acme Holdings LLC", other.id: "Beta Corp"}
        assert await directory.get_entity_names([]) == {}

    async def test_upsert_recipient(self, directory):
        await directory.upsert_recipient(Recipient(id="u1", name="Ada", email="ada@example.com"))
        await directory.upsert_recipient(Recipient(id="u1", name="Ada L.", email="ada@corp.example"))

        loaded = await directory.get_recipient("u1")
        assert loaded.name == "Ada L."
        assert loaded.email == "ada@corp.example"

    async def test_list_recipients(self, directory):
        await directory.upsert_recipient(Recipient(id="u2", email="b@example.com"))
        await directory.upsert_recipient(Recipient(id="u1", email="a@example.com"))
        await directory.upsert_recipient(Recipient(id="u3", email="c@example.com", is_active=False))

        assert [r.id for r in await directory.list_recipients()] == ["u1", "u2"]
        assert [r.id for r in await directory.list_recipients(include_inactive=True)] == ["u1", "u2", "u3"]

    async def test_deleting_entity_cascades(self, directory, filing_store, entity, initialized_db):
        filing = await filing_store.create(
            EntityFiling(entity_id=entity.id, title="Annual Report", due_date="2025-04-15")
        )
        async with aiosqlite.connect(initialized_db) as conn:
            await conn.execute("PRAGMA foreign_keys=ON")
            await conn.execute("DELETE FROM entities WHERE id = ?", (entity.id,))
            await conn.commit()

        assert await filing_store.get(filing.id) is None
