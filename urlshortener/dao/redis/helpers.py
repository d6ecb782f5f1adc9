import json
import functools
from datetime import datetime
from typing import TypeVar, Any
from collections.abc import Callable

import redis

from urlshortener.models import ShortURLModel
from urlshortener.dao.exceptions import DataStoreError


__all__ = []

F = TypeVar('F', bound=Callable[..., Any])


def handle_redis_connection_error[F](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection errors

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise redis.exceptions.ConnectionError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on connectivity issues with Redis.

    Example:
        >>> @handle_redis_connection_error
        ... def history(self, shortcode):
        ...     return self.redis.lrange(shortcode, 0, -1)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except redis.exceptions.ConnectionError as e:
            raise DataStoreError(f"Can't connect to Redis at {redis_location(self.redis)}.") from e

    return wrapper


def redis_location(client: redis.Redis) -> str:
    """Return '<host>:<port>/<db>' of a Redis client, for error messages."""
    info = client.connection_pool.connection_kwargs
    return f'{info.get("host")}:{info.get("port")}/{info.get("db")}'


def as_text(value: str | bytes) -> str:
    """Decode a Redis reply to str (clients built without decode_responses return bytes)."""
    return value.decode('utf-8') if isinstance(value, bytes) else value


def serialize_short_url(short_url: ShortURLModel) -> str:
    """Encode a ShortURLModel as a compact JSON document

    Example:
        >>> serialize_short_url(ShortURLModel('abc', 'https://example.com', datetime(2025, 10, 15, tzinfo=UTC)))
        '{"shortcode":"abc","target":"https://example.com","created_at":"2025-10-15T00:00:00+00:00","expires_at":null}'
    """
    # fmt: off
    return json.dumps(
        {
            'shortcode': short_url.shortcode,
            'target': short_url.target,
            'created_at': short_url.created_at.isoformat(),
            'expires_at': short_url.expires_at.isoformat() if short_url.expires_at else None,
        },
        separators=(',', ':'),
    )
    # fmt: on


def deserialize_short_url(document: str | bytes) -> ShortURLModel:
    """Decode a JSON document produced by serialize_short_url()

    Raises:
        DataStoreError:
            If the document is not a valid encoded ShortURLModel.
    """
    try:
        data = json.loads(document)
        expires_at = data['expires_at']
        return ShortURLModel(
            shortcode=data['shortcode'],
            target=data['target'],
            created_at=datetime.fromisoformat(data['created_at']),
            expires_at=datetime.fromisoformat(expires_at) if expires_at else None,
        )
    except (ValueError, KeyError, TypeError) as e:
        raise DataStoreError(f'Malformed short URL document in Redis: {document!r}.') from e
