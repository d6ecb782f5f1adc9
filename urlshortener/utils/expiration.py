"""Expiration directive parsing

A create request may carry one of these query parameters:

    month              expire one calendar month after creation
    week               expire 7 days after creation
    day                expire 1 day after creation
    expires_after=N    expire N seconds after creation (signed 32-bit integer)

Only the presence of `month`, `week` and `day` matters, their values are
ignored. When several are given, the first one in the order above wins and the
rest are ignored, even if they are malformed. Without any of them the short
URL never expires.

Example:
    >>> directive = parse_expiration({'week': '', 'expires_after': 'soon'})
    >>> directive.kind
    'week'
    >>> directive.expires_at(datetime(2025, 10, 15, tzinfo=UTC))
    datetime.datetime(2025, 10, 22, 0, 0, tzinfo=datetime.timezone.utc)
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta

from urlshortener.constants import Expiration
from urlshortener.exceptions import InvalidExpirationError
from urlshortener.types import QueryParams
from urlshortener.utils.helpers import add_months


INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_INTEGER = re.compile(r'[+-]?[0-9]+')


@dataclass(frozen=True)
class ExpirationDirective:
    """Resolved expiration directive of a create request.

    Attributes:
        kind (str | None):
            One of Expiration.PRECEDENCE, or None for "never expires".
        seconds (int):
            Lifetime in seconds, only meaningful for Expiration.EXPIRES_AFTER.
    """

    kind: str | None = None
    seconds: int = 0

    def expires_at(self, created_at: datetime) -> datetime | None:
        if self.kind == Expiration.MONTH:
            return add_months(created_at, 1)
        elif self.kind == Expiration.WEEK:
            return created_at + timedelta(weeks=1)
        elif self.kind == Expiration.DAY:
            return created_at + timedelta(days=1)
        elif self.kind == Expiration.EXPIRES_AFTER:
            return created_at + timedelta(seconds=self.seconds)
        else:
            return None


NEVER = ExpirationDirective()


def parse_expiration(params: QueryParams) -> ExpirationDirective:
    """Pick the expiration directive honored for a create request

    Args:
        params (QueryParams):
            The request's query parameters (last value per name).

    Returns:
        ExpirationDirective:
            The winning directive, NEVER if none is present.

    Raises:
        InvalidExpirationError:
            If `expires_after` wins but isn't a signed 32-bit integer.
    """
    for kind in Expiration.PRECEDENCE:
        if kind not in params:
            continue
        if kind != Expiration.EXPIRES_AFTER:
            return ExpirationDirective(kind=kind)

        value = params[kind]
        if not _INTEGER.fullmatch(value or ''):
            raise InvalidExpirationError(f"'{Expiration.EXPIRES_AFTER}' must be an integer number of seconds (given value: {value!r}).")
        seconds = int(value)
        if not INT32_MIN <= seconds <= INT32_MAX:
            raise InvalidExpirationError(f"'{Expiration.EXPIRES_AFTER}' is out of range (given value: {value!r}).")
        return ExpirationDirective(kind=kind, seconds=seconds)

    return NEVER
