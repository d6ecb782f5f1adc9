from urlshortener.dao.redis.redis_key_schema import RedisKeySchema
from urlshortener.dao.redis.short_url_redis_dao import ShortURLRedisDAO


__all__ = [
    'RedisKeySchema',
    'ShortURLRedisDAO',
]
