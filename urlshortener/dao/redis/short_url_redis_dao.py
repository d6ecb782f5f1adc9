"""Data Access Object (DAO) implementation for journaling versioned short URLs in Redis

This module provides a Redis-based implementation of ShortURLBaseDAO. The
server keeps its authoritative state in ShortURLMemoryDAO and uses this DAO as
a write-ahead journal: every new version is appended here first, and the
in-memory store is rebuilt from records() at startup.

Key layout (see RedisKeySchema):
    <prefix>:links:<shortcode>:history   LIST of JSON-encoded versions, oldest first
    <prefix>:links:codes                 SET of every shortcode with a history

Classes:
    ShortURLRedisDAO:
        DAO for appending and reading ShortURLModel histories in a Redis datastore.

Example:
    >>> from urlshortener.models import ShortURLModel
    >>> from urlshortener.dao.redis import ShortURLRedisDAO

    >>> dao = ShortURLRedisDAO(prefix="app:dev")
    >>> dao.insert(ShortURLModel(shortcode="abc", target="https://example.com/page", created_at=now))
    <ShortURLRedisDAO>

    >>> [version.target for version in dao.history("abc")]
    ['https://example.com/page']
"""

from collections.abc import Iterator
from datetime import datetime, UTC

import redis
from beartype import beartype

from urlshortener.models import ShortURLModel
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.redis.redis_key_schema import RedisKeySchema
from urlshortener.dao.redis.helpers import (
    handle_redis_connection_error,
    redis_location,
    as_text,
    serialize_short_url,
    deserialize_short_url,
)
from urlshortener.dao.exceptions import DataStoreError, ShortURLNotFoundError


class ShortURLRedisDAO(ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for versioned short URL mappings

    This class implements the ShortURLBaseDAO interface using Redis as a data store.

    Attributes:
        redis (redis.Redis):
            Client talking to the journal's Redis database.
        keys (RedisKeySchema):
            Namespaced key names for histories and the shortcode registry.

    Methods:
        insert(short_url: ShortURLModel, **kwargs) -> ShortURLRedisDAO:
            RPUSH the encoded version and register its shortcode atomically.
        get(shortcode: str, now: datetime | None, **kwargs) -> ShortURLModel:
            Read the latest version (LINDEX -1) and check its expiration.
        history(shortcode: str, **kwargs) -> list[ShortURLModel]:
            Read every version (LRANGE 0 -1).
        list_current(now: datetime | None, **kwargs) -> dict[str, str]:
            Read the latest version of every registered shortcode in one pipeline.
        records(**kwargs) -> Iterator[ShortURLModel]:
            Yield every version, shortcode by shortcode.

    All methods raise DataStoreError on connectivity issues with Redis.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        *,
        prefix: str | None = None,
        redis_host: str = 'localhost',
        redis_port: int | str = 6379,
        redis_db: int | str = 0,
        redis_username: str | None = None,
        redis_password: str | None = None,
    ):
        """Connect the journal and check Redis is reachable

        Shortcodes and documents are read back as text. A pre-built client
        may return bytes; replies are decoded either way.

        Args:
            redis_client (redis.Redis | None):
                Pre-built client. If None, one is built from the redis_* settings.
            prefix (str | None):
                Key namespace, e.g. 'urlshortener:prod' (see app_prefix()).

        Raises:
            DataStoreError:
                If Redis doesn't answer PING.
        """
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                username=redis_username,
                password=redis_password,
                decode_responses=True,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)
        self.ping()

    def ping(self) -> None:
        try:
            self.redis.ping()
        except redis.exceptions.ConnectionError as e:
            raise DataStoreError(
                f"Can't connect to Redis at {redis_location(self.redis)}. Check the journal's Redis settings."
            ) from e

    def _shortcodes(self) -> list[str]:
        return sorted(as_text(shortcode) for shortcode in self.redis.smembers(self.keys.shortcodes_key()))

    @handle_redis_connection_error
    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLRedisDAO':
        """Append a version to the shortcode's history list

        The RPUSH and SADD are executed in a single Redis transaction, so a
        history list never exists without its shortcode being registered.

        Args:
            short_url (ShortURLModel):
                The version to append.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLRedisDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If a Redis connection issue occurs during the transaction.
        """
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.rpush(self.keys.link_history_key(short_url.shortcode), serialize_short_url(short_url))
            pipe.sadd(self.keys.shortcodes_key(), short_url.shortcode)
            pipe.execute()
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, now: datetime | None = None, **kwargs) -> ShortURLModel:
        now = now or datetime.now(UTC)
        document = self.redis.lindex(self.keys.link_history_key(shortcode), -1)
        if document is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")

        current = deserialize_short_url(document)
        if current.is_expired(now):
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found (expired).")
        return current

    @handle_redis_connection_error
    @beartype
    def history(self, shortcode: str, **kwargs) -> list[ShortURLModel]:
        documents = self.redis.lrange(self.keys.link_history_key(shortcode), 0, -1)
        if not documents:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return [deserialize_short_url(document) for document in documents]

    @handle_redis_connection_error
    @beartype
    def list_current(self, now: datetime | None = None, **kwargs) -> dict[str, str]:
        now = now or datetime.now(UTC)
        shortcodes = self._shortcodes()

        with self.redis.pipeline(transaction=True) as pipe:
            for shortcode in shortcodes:
                pipe.lindex(self.keys.link_history_key(shortcode), -1)
            documents = pipe.execute()

        current = {}
        for shortcode, document in zip(shortcodes, documents):
            if document is None:  # pragma: no cover
                continue
            short_url = deserialize_short_url(document)
            if not short_url.is_expired(now):
                current[shortcode] = short_url.target
        return current

    @handle_redis_connection_error
    def records(self, **kwargs) -> Iterator[ShortURLModel]:
        # NOTE: must stay eager, a generator would escape handle_redis_connection_error
        shortcodes = self._shortcodes()
        records = []
        for shortcode in shortcodes:
            documents = self.redis.lrange(self.keys.link_history_key(shortcode), 0, -1)
            records.extend(deserialize_short_url(document) for document in documents)
        return iter(records)

    def __repr__(self) -> str:
        return '<ShortURLRedisDAO>'
