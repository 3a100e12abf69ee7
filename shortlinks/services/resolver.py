"""Slug resolution

Maps a slug to a Resolution outcome and counts the click on success.

Example:
    >>> resolver = LinkResolver(dao)
    >>> resolver.resolve('q3ZkT0')
    Redirect(destination='https://example.com/blog/article-123')
    >>> resolver.resolve('favicon.ico')
    NotFound(slug='favicon.ico')
"""

from datetime import datetime
from collections.abc import Callable

from shortlinks.models import Resolution, Redirect, NotFound, Expired
from shortlinks.dao.base import LinkBaseDAO
from shortlinks.dao.exceptions import LinkNotFoundError
from shortlinks.utils.helpers import utcnow, as_utc
from shortlinks.utils.validators import is_slug


class LinkResolver:
    def __init__(self, dao: LinkBaseDAO, *, clock: Callable[[], datetime] | None = None):
        self.dao = dao
        self.clock = clock if clock is not None else utcnow

    def resolve(self, slug: str, now: datetime | None = None) -> Resolution:
        """Resolve a slug into a redirect, a miss or an expiry

        Only a Redirect touches the store for writing: the click counter is
        incremented atomically by the DAO. Expired links keep their counters.

        Args:
            slug (str):
                Slug from the request path.
            now (datetime | None):
                Evaluation instant. Defaults to the resolver's clock.

        Returns:
            Redirect | NotFound | Expired

        Raises:
            DataStoreError:
                If the link store fails.
        """
        if not is_slug(slug):
            return NotFound(slug=slug)

        try:
            link = self.dao.get(slug)
        except LinkNotFoundError:
            return NotFound(slug=slug)

        now = self.clock() if now is None else as_utc(now)
        if link.is_expired(now):
            return Expired(slug=slug, expired_at=link.expires_at)

        try:
            self.dao.hit(slug, link_id=link.id)
        except LinkNotFoundError:
            # Deleted, possibly reallocated, between get and hit
            return NotFound(slug=slug)

        return Redirect(destination=link.original_url)
