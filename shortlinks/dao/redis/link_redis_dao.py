"""Data Access Object (DAO) implementation for managing links in Redis

This module provides a Redis-based implementation of LinkBaseDAO.

Responsibilities:
    - Reserve slugs and insert links atomically (WATCH/MULTI on the slug key);
    - Retrieve links by slug and list them newest first;
    - Increment click counters server-side;
    - Overwrite expiry and delete links by id without resurrecting deleted records;
    - Translate Redis failures into DAO exceptions.

Data layout (see RedisKeySchema):
    links:counter           STRING      id counter
    links:slug:<slug>       HASH        id, slug, original_url, created_at, clicks, [expires_at]
    links:ids               HASH        <id> -> <slug>
    links:created           ZSET        member <slug>, score created_at (epoch seconds)

Classes:
    LinkRedisDAO:
        DAO for storing and retrieving LinkModel in a Redis datastore.

Example:
    >>> from shortlinks.dao.redis import LinkRedisDAO

    >>> dao = LinkRedisDAO(prefix="shortlinks:dev")
    >>> link = dao.insert(slug="abc123", original_url="https://example.com/page")
    >>> link.clicks
    0
    >>> dao.hit("abc123")
    1
    >>> dao.get("abc123").clicks
    1
"""

from datetime import datetime

import redis
from beartype import beartype

from shortlinks.models import LinkModel
from shortlinks.dao.base import LinkBaseDAO
from shortlinks.dao.redis.mixins import RedisClientMixin
from shortlinks.dao.redis.helpers import handle_redis_errors
from shortlinks.dao.redis.scripts import HIT_LINK, UPDATE_EXPIRY, DELETE_LINK
from shortlinks.dao.exceptions import SlugAlreadyExistsError, LinkNotFoundError
from shortlinks.utils.helpers import utcnow, as_utc, format_timestamp, parse_timestamp


class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing links

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(slug, original_url, expires_at=None, created_at=None, **kwargs) -> LinkModel:
            Reserve a slug and store a new link with zero clicks.
            Raises SlugAlreadyExistsError when the slug is taken or a concurrent insert wins.

        get(slug: str, **kwargs) -> LinkModel:
            Retrieve a link by slug.
            Raises LinkNotFoundError when the slug doesn't exist.

        exists(slug: str, **kwargs) -> bool:
            Check whether a slug is taken.

        hit(slug: str, link_id: int | None = None, **kwargs) -> int:
            Increment the click counter, return the new count.
            Raises LinkNotFoundError when the slug doesn't exist.

        list_all(**kwargs) -> list[LinkModel]:
            Return all links ordered by creation time, newest first.

        update_expiry(link_id: int, expires_at: datetime | None, **kwargs) -> LinkRedisDAO:
            Overwrite or clear a link's expiry. Unknown ids are ignored.

        delete(link_id: int, **kwargs) -> LinkRedisDAO:
            Remove a link and its index entries. Unknown ids are ignored.

        All methods raise DataStoreError on connectivity issues, timeouts or rejected commands.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self._hit_script = self.redis.register_script(HIT_LINK)
        self._update_expiry_script = self.redis.register_script(UPDATE_EXPIRY)
        self._delete_script = self.redis.register_script(DELETE_LINK)

    @handle_redis_errors
    @beartype
    def insert(
        self,
        slug: str,
        original_url: str,
        expires_at: datetime | None = None,
        created_at: datetime | None = None,
        **kwargs,
    ) -> LinkModel:
        """Reserve a slug and insert a new link into Redis

        The existence check and the write run as one optimistic transaction:
        the slug key is WATCHed before the check, so if another client creates
        the same slug before EXEC the transaction is aborted and the insert
        reports a conflict instead of overwriting.

        Args:
            slug (str):
                Slug to reserve.
            original_url (str):
                Canonical destination URL.
            expires_at (datetime | None):
                Expiry instant, None for permanent links.
            created_at (datetime | None):
                Creation instant, defaults to now (UTC).
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            LinkModel: the stored link.

        Raises:
            SlugAlreadyExistsError:
                If a link with the same slug already exists.
            DataStoreError:
                If a Redis connection issue occurs during the transaction.

        Example:
            >>> dao.insert(slug='abc123', original_url='https://example.com/')
            LinkModel(id=1, slug='abc123', original_url='https://example.com/', ...)
        """
        created_at = utcnow() if created_at is None else as_utc(created_at)
        expires_at = None if expires_at is None else as_utc(expires_at)
        link_key = self.keys.link_key(slug)

        with self.redis.pipeline() as pipe:
            try:
                pipe.watch(link_key)
                if pipe.exists(link_key):
                    raise SlugAlreadyExistsError(f"Link with slug '{slug}' already exists.")

                link_id = int(self.redis.incr(self.keys.counter_key()))
                record = {
                    'id': link_id,
                    'slug': slug,
                    'original_url': original_url,
                    'created_at': format_timestamp(created_at),
                    'clicks': 0,
                }
                if expires_at is not None:
                    record['expires_at'] = format_timestamp(expires_at)

                pipe.multi()
                pipe.hset(link_key, mapping=record)
                pipe.hset(self.keys.ids_key(), str(link_id), slug)
                pipe.zadd(self.keys.created_index_key(), {slug: created_at.timestamp()})
                pipe.execute()
            except redis.exceptions.WatchError as e:
                raise SlugAlreadyExistsError(f"Link with slug '{slug}' was created concurrently.") from e

        return LinkModel(
            id=link_id,
            slug=slug,
            original_url=original_url,
            created_at=created_at,
            clicks=0,
            expires_at=expires_at,
        )

    @handle_redis_errors
    @beartype
    def get(self, slug: str, **kwargs) -> LinkModel:
        """Retrieve a stored link by slug

        Raises:
            LinkNotFoundError:
                If the link does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('abc123')
            LinkModel(id=1, slug='abc123', original_url='https://example.com/', ...)
        """
        record = self.redis.hgetall(self.keys.link_key(slug))
        if not record:
            raise LinkNotFoundError(f"Link with slug '{slug}' not found.")
        return self._to_model(record)

    @handle_redis_errors
    @beartype
    def exists(self, slug: str, **kwargs) -> bool:
        return bool(self.redis.exists(self.keys.link_key(slug)))

    @handle_redis_errors
    @beartype
    def hit(self, slug: str, link_id: int | None = None, **kwargs) -> int:
        """Increment the click counter of a link

        NOTE: HINCRBY runs inside a Lua script that first checks the stored id.
              A hit racing with a delete can't recreate the hash as {clicks: 1},
              nor count towards a record reallocated under the same slug.

        Args:
            slug (str):
                Slug of the link.
            link_id (int | None):
                Id of the record the caller read. None accepts any record under the slug.

        Returns:
            int: click count after the increment.

        Raises:
            LinkNotFoundError:
                If no link with the given slug exists.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.hit('abc123')
            43
        """
        expected_id = '' if link_id is None else str(link_id)
        clicks = self._hit_script(keys=[self.keys.link_key(slug)], args=[expected_id])
        if clicks is None:
            raise LinkNotFoundError(f"Link with slug '{slug}' not found.")
        return int(clicks)

    @handle_redis_errors
    def list_all(self, **kwargs) -> list[LinkModel]:
        """Return every link ordered by created_at, newest first

        Links deleted between reading the index and reading their hashes are skipped.
        """
        slugs = self.redis.zrevrange(self.keys.created_index_key(), 0, -1)
        if not slugs:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for slug in slugs:
                pipe.hgetall(self.keys.link_key(slug))
            records = pipe.execute()

        return [self._to_model(record) for record in records if record]

    @handle_redis_errors
    @beartype
    def update_expiry(self, link_id: int, expires_at: datetime | None, **kwargs) -> 'LinkRedisDAO':
        """Overwrite a link's expiry (None clears it)

        Unknown ids are ignored. The script re-checks the record's id so a slug
        deleted and re-allocated in the meantime is left alone.
        """
        slug = self.redis.hget(self.keys.ids_key(), str(link_id))
        if slug is None:
            return self

        self._update_expiry_script(
            keys=[self.keys.link_key(slug)],
            args=[str(link_id), format_timestamp(expires_at) or ''],
        )
        return self

    @handle_redis_errors
    @beartype
    def delete(self, link_id: int, **kwargs) -> 'LinkRedisDAO':
        """Remove a link together with its id and creation index entries

        Deleting an unknown id is a no-op.
        """
        slug = self.redis.hget(self.keys.ids_key(), str(link_id))
        if slug is None:
            return self

        self._delete_script(
            keys=[self.keys.ids_key(), self.keys.created_index_key(), self.keys.link_key(slug)],
            args=[str(link_id), slug],
        )
        return self

    @staticmethod
    def _to_model(record: dict) -> LinkModel:
        return LinkModel(
            id=int(record['id']),
            slug=record['slug'],
            original_url=record['original_url'],
            created_at=parse_timestamp(record['created_at']),
            clicks=int(record.get('clicks', 0)),
            expires_at=parse_timestamp(record.get('expires_at')),
        )
