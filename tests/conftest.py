"""Pytest configuration and fixtures."""

from collections.abc import Generator
from datetime import UTC, date, datetime
from pathlib import Path

import pytest

from entityhub.config import reset_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point settings at a temporary data dir and the log transport."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("NOTIFY_PROVIDER", "log")
    monkeypatch.delenv("NOTIFY_API_KEY", raising=False)
    monkeypatch.setenv("SCHEDULER_RETRY_DELAY", "0")
    monkeypatch.setenv("SCHEDULER_REMINDER_HORIZON_DAYS", "7")
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def now() -> datetime:
    """Fixed point in time used as the cycle clock."""
    return datetime(2025, 3, 20, 9, 30, tzinfo=UTC)


@pytest.fixture
def today(now: datetime) -> date:
    return now.date()
