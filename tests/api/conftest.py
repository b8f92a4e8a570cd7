"""Shared fixtures for API tests."""

from datetime import UTC, datetime

import pytest

from entityhub.api.dependencies import get_now
from entityhub.api.main import app

API_NOW = datetime(2025, 3, 20, 9, 30, tzinfo=UTC)


@pytest.fixture(autouse=True)
def fixed_clock():
    """Pin the request clock so derived statuses are stable."""
    app.dependency_overrides[get_now] = lambda: API_NOW
    yield API_NOW
    app.dependency_overrides.pop(get_now, None)
