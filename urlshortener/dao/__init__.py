from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.memory import ShortURLMemoryDAO
from urlshortener.dao.redis import ShortURLRedisDAO


__all__ = [
    'ShortURLBaseDAO',
    'ShortURLMemoryDAO',
    'ShortURLRedisDAO',
]
