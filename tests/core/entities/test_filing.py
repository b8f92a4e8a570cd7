"""Tests for filing type and entity filing entities."""

from datetime import date

from entityhub.core.entities.filing import (
    DisplayStatus,
    EntityFiling,
    FilingCategory,
    FilingFrequency,
    FilingStatus,
    FilingType,
)


class TestFilingFrequency:
    def test_one_time_is_not_recurring(self):
        assert FilingFrequency.ONE_TIME.is_recurring is False

    def test_periodic_frequencies_recur(self):
        for freq in (FilingFrequency.MONTHLY, FilingFrequency.QUARTERLY, FilingFrequency.ANNUAL):
            assert freq.is_recurring is True

    def test_wire_values(self):
        assert FilingFrequency("one-time") is FilingFrequency.ONE_TIME
        assert FilingFrequency("quarterly") is FilingFrequency.QUARTERLY


class TestFilingType:
    def test_defaults(self):
        filing_type = FilingType(code="AR", name="Annual Report")
        assert filing_type.id is None
        assert filing_type.default_frequency == FilingFrequency.ANNUAL
        assert filing_type.category == FilingCategory.OTHER
        assert filing_type.auto_generate_tasks is True


class TestEntityFiling:
    """Tests for EntityFiling entity."""

    def test_create_minimal(self):
        filing = EntityFiling(entity_id=1, title="Delaware Franchise Tax", due_date=date(2025, 3, 1))
        assert filing.status == FilingStatus.PENDING
        assert filing.frequency == FilingFrequency.ANNUAL
        assert filing.reminder_days == 30
        assert filing.filing_date is None
        assert filing.is_recurring is True
        assert filing.is_filed is False

    def test_persisted_overdue_is_coerced_to_pending(self):
        filing = EntityFiling(
            entity_id=1,
            title="Legacy row",
            due_date=date(2024, 1, 1),
            status="overdue",
        )
        assert filing.status == FilingStatus.PENDING

    def test_display_overdue_enum_is_coerced(self):
        filing = EntityFiling(
            entity_id=1,
            title="Legacy row",
            due_date=date(2024, 1, 1),
            status=DisplayStatus.OVERDUE,
        )
        assert filing.status == FilingStatus.PENDING

    def test_filed(self):
        filing = EntityFiling(
            entity_id=1,
            title="Q1 Payroll",
            due_date=date(2025, 3, 31),
            status=FilingStatus.FILED,
            frequency=FilingFrequency.QUARTERLY,
        )
        assert filing.is_filed is True
        assert filing.is_recurring is True

    def test_missing_frequency_is_not_recurring(self):
        filing = EntityFiling(entity_id=1, title="x", due_date=date(2025, 1, 1), frequency=None)
        assert filing.is_recurring is False
