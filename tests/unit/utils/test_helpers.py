"""Unit tests for helper utilities in helpers.py

Test coverage includes:

1. add_months()
   - Ensures calendar months are added, across year boundaries too.
   - Ensures the day of month is clamped to the target month's length.
   - Ensures time of day and tzinfo are preserved.

2. require_environment() decorator behavior
   - Ensures the wrapped function runs when every variable is set.
   - Confirms missing or empty variables raise MissingEnvironmentVariableError.
"""

from datetime import datetime, UTC

import pytest

from urlshortener.utils.helpers import add_months, require_environment
from urlshortener.exceptions import MissingEnvironmentVariableError


# -------------------------------
# 1. add_months()
# -------------------------------


@pytest.mark.parametrize(
    'moment, months, expected',
    [
        (datetime(2025, 10, 15, tzinfo=UTC), 1, datetime(2025, 11, 15, tzinfo=UTC)),
        (datetime(2025, 12, 15, tzinfo=UTC), 1, datetime(2026, 1, 15, tzinfo=UTC)),
        (datetime(2025, 1, 31, tzinfo=UTC), 1, datetime(2025, 2, 28, tzinfo=UTC)),
        (datetime(2024, 1, 31, tzinfo=UTC), 1, datetime(2024, 2, 29, tzinfo=UTC)),
        (datetime(2025, 3, 31, tzinfo=UTC), -1, datetime(2025, 2, 28, tzinfo=UTC)),
        (datetime(2025, 1, 15, tzinfo=UTC), 12, datetime(2026, 1, 15, tzinfo=UTC)),
    ],
)
def test_add_months(moment, months, expected):
    assert add_months(moment, months) == expected


def test_add_months_preserves_time_and_tzinfo():
    result = add_months(datetime(2025, 10, 15, 13, 45, 30, 123, tzinfo=UTC), 1)
    assert result == datetime(2025, 11, 15, 13, 45, 30, 123, tzinfo=UTC)
    assert result.tzinfo is UTC


# -------------------------------
# 2.1. require_environment() happy path
# -------------------------------


def test_require_environment_happy_path(monkeypatch):
    """Ensure the decorated function runs when all required env vars are set."""
    monkeypatch.setenv('ENV1', 'value1')
    monkeypatch.setenv('ENV2', 'value2')

    @require_environment('ENV1', 'ENV2')
    def dummy(x):
        return x * 2

    assert dummy(21) == 42


# -------------------------------
# 2.2. require_environment() missing or empty env vars
# -------------------------------


@pytest.mark.parametrize(
    'env_setup, missing_names',
    [
        ({'ENV1': None, 'ENV2': 'value2'}, ["'ENV1'"]),
        ({'ENV1': 'value1', 'ENV2': ''}, ["'ENV2'"]),
        ({'ENV1': None, 'ENV2': None}, ["'ENV1'", "'ENV2'"]),
    ],
)
def test_require_environment_missing_or_empty(monkeypatch, env_setup, missing_names):
    """Ensure MissingEnvironmentVariableError lists every missing or empty variable."""
    for name, value in env_setup.items():
        if value is None:
            monkeypatch.delenv(name, raising=False)
        else:
            monkeypatch.setenv(name, value)

    @require_environment('ENV1', 'ENV2')
    def dummy():
        return 'should not run'

    with pytest.raises(MissingEnvironmentVariableError) as exc_info:
        dummy()

    assert str(exc_info.value) == f'Missing required environment variables: {", ".join(missing_names)}'
