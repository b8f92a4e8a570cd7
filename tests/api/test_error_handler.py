"""Tests for the API error mapping."""

import importlib
import warnings

import pytest

from entityhub.api.middleware import error_handler
from entityhub.core.exceptions import (
    DatabaseError,
    FilingHasTasksError,
    FilingNotFoundError,
    InvalidDueDateError,
    InvalidDueDayError,
    TransportError,
)


@pytest.mark.parametrize(
    "exc,expected",
    [
        (InvalidDueDayError(40), 422),
        (InvalidDueDateError(None, "stored due date is missing or unreadable"), 422),
        (FilingHasTasksError(1, 2), 409),
        (FilingNotFoundError(1), 404),
        (TransportError("resend", "timeout"), 503),
        (DatabaseError("select", "database is locked"), 500),
    ],
)
def test_status_for(exc, expected):
    assert error_handler.status_for(exc) == expected


def test_import_emits_no_deprecation_warning():
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        importlib.reload(error_handler)

    assert error_handler.status_for(InvalidDueDayError(0)) == 422
