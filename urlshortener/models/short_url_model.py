from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ShortURLModel:
    """Represent one version of a shortcode's URL mapping.

    Every (re)assignment of a shortcode produces a new ShortURLModel. Older
    versions stay in the shortcode's history, so instances are never updated.

    Attributes:
        shortcode (str):
            The short identifier (path segment) being resolved.
        target (str):
            The original long URL that the short code redirects to.
        created_at (datetime):
            Moment this version was created (timezone-aware, UTC).
        expires_at (Optional[datetime]):
            Moment after which this version no longer resolves.
            None means the version never expires.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> now = datetime.now(UTC)
        >>> url = ShortURLModel(
        ...     shortcode="abc",
        ...     target="https://example.com/article/123",
        ...     created_at=now,
        ...     expires_at=now + timedelta(weeks=1),
        ... )
        >>> url.is_expired(now)
        False
        >>> url.is_expired(now + timedelta(weeks=2))
        True
    """
    shortcode: str
    target: str
    created_at: datetime
    expires_at: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        """Return True unless expires_at is unset or strictly after `now`."""
        return self.expires_at is not None and self.expires_at <= now
