"""Helper utilities.

Functions:
    add_months(moment: datetime, months: int) -> datetime
        Shift a datetime by whole calendar months, clamping the day of month
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
"""

import os
import calendar
import functools
from datetime import datetime
from collections.abc import Callable

from urlshortener.exceptions import MissingEnvironmentVariableError


def add_months(moment: datetime, months: int) -> datetime:
    """Shift a datetime by whole calendar months.

    The day of month is clamped to the length of the target month, so one
    month after January 31st is the last day of February.

    Args:
        moment (datetime):
            Starting point (time of day and tzinfo are preserved).
        months (int):
            Number of months to add (may be negative).

    Returns:
        datetime:
            The shifted datetime.

    Example:
        >>> add_months(datetime(2025, 1, 31, 12, 0, tzinfo=UTC), 1)
        datetime.datetime(2025, 2, 28, 12, 0, tzinfo=datetime.timezone.utc)
    """
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('SHORTENER_USERNAME', 'SHORTENER_PASSWORD')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'SHORTENER_USERNAME', 'SHORTENER_PASSWORD'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator
