from shortlinks.dao.redis.redis_key_schema import RedisKeySchema
from shortlinks.dao.redis.link_redis_dao import LinkRedisDAO
from shortlinks.dao.redis.mixins import RedisClientMixin


__all__ = [
    'RedisKeySchema',
    'LinkRedisDAO',
    'RedisClientMixin',
]
