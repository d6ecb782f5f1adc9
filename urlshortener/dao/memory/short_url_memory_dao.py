"""Data Access Object (DAO) implementation keeping versioned short URLs in memory

This module provides the in-process, authoritative implementation of
ShortURLBaseDAO used by the running server. A durable copy (if any) lives in
ShortURLRedisDAO and is replayed into this DAO at startup via load().

Responsibilities:
    - Append versions to per-shortcode histories;
    - Derive the current version of a shortcode and enforce lazy expiration;
    - List every resolvable shortcode for a single point in time.

Classes:
    ShortURLMemoryDAO:
        DAO storing ShortURLModel histories in a plain dict of lists.

NOTE:
    The DAO itself is not thread-safe. Callers must hold the shared mode of
    a ConcurrencyGuard for reads and its exclusive mode for insert()/load().
"""

from collections.abc import Iterable, Iterator
from datetime import datetime, UTC

from beartype import beartype

from urlshortener.models import ShortURLModel
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.exceptions import ShortURLNotFoundError


class ShortURLMemoryDAO(ShortURLBaseDAO):
    """In-memory Data Access Object (DAO) for versioned short URL mappings

    Attributes:
        _histories (dict[str, list[ShortURLModel]]):
            shortcode -> versions, oldest first. A key exists only once its
            shortcode has at least one version.

    Example:
        >>> dao = ShortURLMemoryDAO()
        >>> dao.insert(ShortURLModel(shortcode='abc', target='https://example.com', created_at=now))
        <ShortURLMemoryDAO>
        >>> dao.get('abc').target
        'https://example.com'
    """

    def __init__(self):
        self._histories: dict[str, list[ShortURLModel]] = {}

    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLMemoryDAO':
        """Append a version to its shortcode's history

        Raises:
            ValueError:
                If the version was created before the shortcode's latest version.
                Histories are ordered by creation time; callers sample the clock
                while holding the exclusive lock to keep it that way.
        """
        history = self._histories.get(short_url.shortcode)
        if history and short_url.created_at < history[-1].created_at:
            raise ValueError(
                f"Short URL with code '{short_url.shortcode}' can't go back in time "
                f'({short_url.created_at.isoformat()} < {history[-1].created_at.isoformat()}).'
            )
        self._histories.setdefault(short_url.shortcode, []).append(short_url)
        return self

    @beartype
    def get(self, shortcode: str, now: datetime | None = None, **kwargs) -> ShortURLModel:
        now = now or datetime.now(UTC)
        history = self._histories.get(shortcode)
        if not history:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")

        # Only the latest version counts, older unexpired versions are history
        current = history[-1]
        if current.is_expired(now):
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found (expired).")
        return current

    @beartype
    def history(self, shortcode: str, **kwargs) -> list[ShortURLModel]:
        history = self._histories.get(shortcode)
        if not history:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return list(history)

    @beartype
    def list_current(self, now: datetime | None = None, **kwargs) -> dict[str, str]:
        now = now or datetime.now(UTC)
        return {
            shortcode: history[-1].target
            for shortcode, history in sorted(self._histories.items())
            if not history[-1].is_expired(now)
        }

    def latest(self, shortcode: str) -> ShortURLModel | None:
        """Return the latest version regardless of expiration, None if unknown."""
        history = self._histories.get(shortcode)
        return history[-1] if history else None

    def records(self, **kwargs) -> Iterator[ShortURLModel]:
        for history in self._histories.values():
            yield from history

    def load(self, records: Iterable[ShortURLModel]) -> 'ShortURLMemoryDAO':
        """Replay versions (e.g. from ShortURLRedisDAO.records()) in the given order

        Returns:
            ShortURLMemoryDAO: self (for method chaining)
        """
        for short_url in records:
            self.insert(short_url)
        return self

    def __len__(self) -> int:
        return len(self._histories)

    def __repr__(self) -> str:
        return '<ShortURLMemoryDAO>'
