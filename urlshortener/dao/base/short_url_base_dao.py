"""Abstract base class for versioned ShortURL data access objects (DAOs).

This class establishes a consistent contract for all ShortURL DAO implementations,
regardless of the underlying storage mechanism (e.g., in-memory, Redis).

Every shortcode owns an append-only history of ShortURLModel versions. The
"current" version is always the most recently inserted one; expiration is a
read-time predicate evaluated against that version only.

Responsibilities:
    - Append new versions and expose the full, ordered history per shortcode.
    - Resolve shortcodes against their latest, unexpired version.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from datetime import datetime, UTC
        >>> from urlshortener.models import ShortURLModel
        >>> from urlshortener.dao import ShortURLMemoryDAO

        >>> dao = ShortURLMemoryDAO()
        >>> now = datetime.now(UTC)

        >>> dao.insert(ShortURLModel(shortcode="abc", target="https://example.com/v1", created_at=now))
        >>> dao.insert(ShortURLModel(shortcode="abc", target="https://example.com/v2", created_at=now))

        >>> dao.get("abc", now=now).target
        'https://example.com/v2'

        >>> len(dao.history("abc"))
        2
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from datetime import datetime

from urlshortener.models import ShortURLModel


class ShortURLBaseDAO(ABC):
    """Interface for versioned ShortURL data access objects (DAOs).

    Methods:
        insert(short_url: ShortURLModel, **kwargs) -> ShortURLBaseDAO:
            Append a new version to the shortcode's history.
            Raises DataStoreError on connection or write failure.

        get(shortcode: str, now: datetime | None, **kwargs) -> ShortURLModel:
            Retrieve the current (latest) version if it hasn't expired.
            Raises ShortURLNotFoundError if unknown or expired.

        history(shortcode: str, **kwargs) -> list[ShortURLModel]:
            Retrieve every version in insertion order, expired ones included.
            Raises ShortURLNotFoundError if the shortcode was never created.

        list_current(now: datetime | None, **kwargs) -> dict[str, str]:
            Map every resolvable shortcode to its current target, sorted by shortcode.

        records(**kwargs) -> Iterator[ShortURLModel]:
            Yield every stored version, grouped by shortcode, in insertion order.

    Subclassing:
        Datastore-specific implementations (e.g., ShortURLMemoryDAO or
        ShortURLRedisDAO) must extend this class and implement all
        abstract methods.

    NOTE:
        - Versions are never deleted. Expired versions stay in the history.
        - Implementations don't coordinate concurrent callers themselves;
          see urlshortener.concurrency.ConcurrencyGuard.
    """

    @abstractmethod
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLBaseDAO':
        """Append a ShortURLModel to its shortcode's history.

        Overwriting a shortcode that currently resolves is a regular operation.

        Args:
            short_url (ShortURLModel):
                The version to append.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLBaseDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, now: datetime | None = None, **kwargs) -> ShortURLModel:
        """Retrieve the current version of a shortcode.

        Args:
            shortcode (str):
                The shortcode to resolve.

            now (datetime | None):
                Moment the expiration check is evaluated against.
                Defaults to the current UTC time.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortURLModel: The latest version of the shortcode.

        Raises:
            ShortURLNotFoundError:
                If the shortcode is unknown or its latest version expired.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def history(self, shortcode: str, **kwargs) -> list[ShortURLModel]:
        """Retrieve every version of a shortcode, oldest first.

        Args:
            shortcode (str):
                The shortcode whose history is requested.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            list[ShortURLModel]: Non-empty list of versions in insertion order.

        Raises:
            ShortURLNotFoundError:
                If the shortcode was never created.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def list_current(self, now: datetime | None = None, **kwargs) -> dict[str, str]:
        """Map every resolvable shortcode to its current target URL.

        Args:
            now (datetime | None):
                Moment every expiration check is evaluated against.
                Defaults to the current UTC time.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            dict[str, str]: shortcode -> target, ordered by shortcode.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def records(self, **kwargs) -> Iterator[ShortURLModel]:
        """Yield every stored version, grouped by shortcode, oldest first.

        Replaying the yielded versions through insert() reproduces the data
        store's state exactly.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
