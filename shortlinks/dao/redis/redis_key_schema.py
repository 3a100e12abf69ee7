__all__ = ['RedisKeySchema']


class RedisKeySchema:
    """Names of the Redis keys backing the link store.

        links:slug:<slug>   hash      one link record
        links:ids           hash      id -> slug
        links:created       zset      slug scored by creation time
        links:counter       string    last issued link id

    Every key is namespaced by the optional prefix, e.g. "shortlinks:prod",
    so several apps and environments can share a Redis instance. Slugs never
    contain ':', so a link key can't collide with the index keys.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    def _namespaced(self, *parts: str) -> str:
        key = ':'.join(('links', *parts))
        return key if self.prefix is None else f'{self.prefix}:{key}'

    def link_key(self, slug: str) -> str:
        return self._namespaced('slug', slug)

    def ids_key(self) -> str:
        return self._namespaced('ids')

    def created_index_key(self) -> str:
        return self._namespaced('created')

    def counter_key(self) -> str:
        return self._namespaced('counter')
