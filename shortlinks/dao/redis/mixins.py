"""Shared Redis client setup for Redis-backed DAOs.

A DAO either receives a ready client (tests, scripts sharing a connection) or
the `redis_*` connection parameters, which are the keys of a Lambda's AppConfig
`redis` section prefixed with `redis_`:

    >>> redis_config = {f'redis_{k}': v for k, v in load_config('redirect_url')['redis'].items()}
    >>> dao = LinkRedisDAO(**redis_config, prefix='shortlinks:prod')

The server is PINGed once at construction so misconfiguration surfaces before
the first real command.
"""

import redis

from shortlinks.dao.redis.redis_key_schema import RedisKeySchema
from shortlinks.dao.redis.helpers import redis_address
from shortlinks.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Attach `redis` (client) and `keys` (RedisKeySchema) to a DAO

    Raises:
        DataStoreError:
            If the server doesn't answer the construction-time PING.
    """

    def __init__(
        self,
        redis_host: str = 'localhost',
        redis_port: int | str = 6379,
        redis_db: int | str = 0,
        redis_decode_responses: bool = True,
        redis_username: str | None = None,
        redis_password: str | None = None,
        redis_socket_timeout: float | None = None,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ):
        # AppConfig documents may carry port/db as strings
        self.redis = redis_client or redis.Redis(
            host=redis_host,
            port=int(redis_port),
            db=int(redis_db),
            decode_responses=redis_decode_responses,
            username=redis_username,
            password=redis_password,
            socket_timeout=redis_socket_timeout,
        )
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING the server; return False or raise DataStoreError when it's unreachable."""
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if not raise_error:
                return False
            raise DataStoreError(
                f"Can't connect to Redis at {redis_address(self.redis)}. Check the provided configuration parameters."
            ) from e
        return True
