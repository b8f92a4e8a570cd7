"""Tests for recurrence date math."""

from datetime import UTC, date, datetime

import pytest

from entityhub.core.entities.filing import EntityFiling, FilingFrequency, FilingStatus
from entityhub.core.exceptions import (
    ConfigurationError,
    InvalidDueDateError,
    InvalidDueDayError,
    InvalidFrequencyError,
    RecurrenceNotApplicableError,
)
from entityhub.core.services.recurrence import (
    add_months,
    advance_due_date,
    advance_filing,
    last_day_of_month,
)


def _make_filing(**overrides) -> EntityFiling:
    data = {
        "id": 1,
        "entity_id": 10,
        "title": "Quarterly Payroll Return",
        "due_date": date(2025, 3, 31),
        "frequency": FilingFrequency.QUARTERLY,
        "status": FilingStatus.FILED,
        "filing_date": date(2025, 3, 20),
        "confirmation_number": "CONF-1",
    }
    data.update(overrides)
    return EntityFiling(**data)


class TestAddMonths:
    def test_simple_shift(self):
        assert add_months(date(2025, 1, 15), 1) == date(2025, 2, 15)

    def test_year_rollover(self):
        assert add_months(date(2025, 11, 30), 3) == date(2026, 2, 28)

    def test_anchor_31_clamps_to_month_end(self):
        assert add_months(date(2025, 1, 31), 1, anchor_day=31) == date(2025, 2, 28)
        assert add_months(date(2024, 1, 31), 1, anchor_day=31) == date(2024, 2, 29)
        assert add_months(date(2025, 3, 31), 1, anchor_day=31) == date(2025, 4, 30)

    def test_anchor_restores_after_short_month(self):
        # Feb 28 with a 31st anchor goes back to Mar 31, not Mar 28
        assert add_months(date(2025, 2, 28), 1, anchor_day=31) == date(2025, 3, 31)

    @pytest.mark.parametrize("anchor", range(1, 32))
    def test_every_anchor_yields_valid_dates(self, anchor):
        start = date(2024, 1, min(anchor, 31))
        for months in range(1, 25):
            result = add_months(start, months, anchor_day=anchor)
            assert result.day == min(anchor, last_day_of_month(result.year, result.month))

    @pytest.mark.parametrize("bad", [0, 32, -1, True, "15"])
    def test_invalid_anchor(self, bad):
        with pytest.raises(InvalidDueDayError):
            add_months(date(2025, 1, 1), 1, anchor_day=bad)

    def test_shift_past_year_9999_is_a_configuration_error(self):
        with pytest.raises(InvalidDueDateError) as exc:
            add_months(date(9999, 12, 15), 12)
        assert isinstance(exc.value, ConfigurationError)
        assert exc.value.code == "INVALID_DUE_DATE"


class TestAdvanceDueDate:
    def test_monthly(self):
        assert advance_due_date(date(2025, 1, 31), FilingFrequency.MONTHLY, 31) == date(2025, 2, 28)

    def test_quarterly(self):
        assert advance_due_date(date(2025, 3, 31), "quarterly") == date(2025, 6, 30)

    def test_annual_leap_day(self):
        assert advance_due_date(date(2024, 2, 29), FilingFrequency.ANNUAL) == date(2025, 2, 28)

    def test_one_time_not_applicable(self):
        with pytest.raises(RecurrenceNotApplicableError):
            advance_due_date(date(2025, 1, 1), FilingFrequency.ONE_TIME)

    @pytest.mark.parametrize("freq", [None, "weekly", ""])
    def test_unknown_frequency(self, freq):
        with pytest.raises(InvalidFrequencyError):
            advance_due_date(date(2025, 1, 1), freq)


class TestAdvanceFiling:
    def test_quarterly_filed_filing(self):
        """A quarterly filing due Mar 31 filed on Mar 20 rolls to Jun 30."""
        filing = _make_filing()

        advanced = advance_filing(filing, datetime(2025, 3, 21, tzinfo=UTC))

        assert advanced.due_date == date(2025, 6, 30)
        assert advanced.status == FilingStatus.PENDING
        assert advanced.filing_date is None
        assert advanced.confirmation_number is None
        assert advanced.updated_at == datetime(2025, 3, 21)

    def test_input_is_not_mutated(self):
        filing = _make_filing()
        advance_filing(filing)
        assert filing.due_date == date(2025, 3, 31)
        assert filing.status == FilingStatus.FILED

    def test_due_day_anchor_is_used(self):
        filing = _make_filing(due_date=date(2025, 2, 28), due_day=31, frequency="monthly")
        assert advance_filing(filing).due_date == date(2025, 3, 31)

    def test_pending_filing_is_rejected(self):
        with pytest.raises(RecurrenceNotApplicableError):
            advance_filing(_make_filing(status=FilingStatus.PENDING))

    def test_one_time_is_rejected(self):
        with pytest.raises(RecurrenceNotApplicableError) as exc:
            advance_filing(_make_filing(frequency=FilingFrequency.ONE_TIME))
        assert exc.value.details["filing_id"] == 1

    def test_missing_frequency(self):
        with pytest.raises(InvalidFrequencyError) as exc:
            advance_filing(_make_filing(frequency=None))
        assert exc.value.details["filing_id"] == 1

    def test_bad_anchor_carries_filing_id(self):
        with pytest.raises(InvalidDueDayError) as exc:
            advance_filing(_make_filing(due_day=40))
        assert exc.value.details == {"due_day": 40, "filing_id": 1}

    def test_out_of_range_next_cycle_carries_filing_id(self):
        filing = _make_filing(due_date=date(9999, 12, 15), frequency=FilingFrequency.ANNUAL)
        with pytest.raises(InvalidDueDateError) as exc:
            advance_filing(filing)
        assert exc.value.details["filing_id"] == 1
        assert exc.value.details["due_date"] == "9999-12-15"

    def test_unreadable_due_date_is_rejected(self):
        with pytest.raises(InvalidDueDateError) as exc:
            advance_filing(_make_filing(due_date=None))
        assert exc.value.details["filing_id"] == 1
        assert exc.value.details["due_date"] is None
