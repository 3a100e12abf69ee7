"""Abstract base class for Link data access objects (DAOs).

This class establishes a consistent contract for all Link DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, PostgreSQL).

Responsibilities:
    - Provide an interface for reserving, retrieving and mutating LinkModel objects.
    - Make the data store the final arbiter of slug uniqueness.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from shortlinks.dao.redis import LinkRedisDAO

        >>> dao = LinkRedisDAO(...)

        >>> link = dao.insert(slug="a1b2c3", original_url="https://example.com/blog/article-123")
        >>> link.id
        1

        >>> dao.hit("a1b2c3")
        1

        >>> dao.get("a1b2c3").clicks
        1
"""

from abc import ABC, abstractmethod
from datetime import datetime

from shortlinks.models import LinkModel


class LinkBaseDAO(ABC):
    """Interface for Link data access objects (DAOs).

    Methods:
        insert(slug, original_url, expires_at, created_at, **kwargs) -> LinkModel:
            Atomically reserve a slug and store a new link under it.
            Raises SlugAlreadyExistsError if the slug is taken (including a concurrent insert).

        get(slug: str, **kwargs) -> LinkModel:
            Retrieve a LinkModel by slug.
            Raises LinkNotFoundError if the entry does not exist.

        exists(slug: str, **kwargs) -> bool:
            Check whether a slug is taken.

        hit(slug: str, link_id: int | None = None, **kwargs) -> int:
            Atomically increment the click counter and return the new value.
            Raises LinkNotFoundError if the entry does not exist.

        list_all(**kwargs) -> list[LinkModel]:
            Return every link, newest first.

        update_expiry(link_id: int, expires_at: datetime | None, **kwargs) -> LinkBaseDAO:
            Overwrite a link's expiry. Unknown ids are ignored.

        delete(link_id: int, **kwargs) -> LinkBaseDAO:
            Remove a link entirely. Unknown ids are ignored.

    Every method raises DataStoreError on connection, timeout or command failure.

    NOTE:
        - Records never expire in the data store. Expiry is evaluated at read
          time by the caller, and expired records are kept.
    """

    @abstractmethod
    def insert(
        self,
        slug: str,
        original_url: str,
        expires_at: datetime | None = None,
        created_at: datetime | None = None,
        **kwargs,
    ) -> LinkModel:
        """Reserve a slug and store a new link under it.

        Args:
            slug (str):
                The slug to reserve.

            original_url (str):
                Canonical destination URL.

            expires_at (datetime | None):
                Instant from which the link resolves as expired. None for permanent links.

            created_at (datetime | None):
                Creation instant. Defaults to the current time in UTC.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            LinkModel: the stored link, with its newly assigned id and zero clicks.

        Raises:
            SlugAlreadyExistsError:
                If a link with the same slug already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, slug: str, **kwargs) -> LinkModel:
        """Retrieve a LinkModel from the data store by its slug.

        Raises:
            LinkNotFoundError:
                If no link with the given slug exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def exists(self, slug: str, **kwargs) -> bool:
        pass

    @abstractmethod
    def hit(self, slug: str, link_id: int | None = None, **kwargs) -> int:
        """Increment the click counter of a link by exactly one.

        When `link_id` is given, only the record with that id is counted; a
        different record now stored under the slug is treated as missing.

        The increment is performed by the data store itself; implementations
        must never read, add and write back the counter in application memory.

        Returns:
            int: the click count after the increment.

        Raises:
            LinkNotFoundError:
                If no link with the given slug exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def list_all(self, **kwargs) -> list[LinkModel]:
        pass

    @abstractmethod
    def update_expiry(self, link_id: int, expires_at: datetime | None, **kwargs) -> 'LinkBaseDAO':
        pass

    @abstractmethod
    def delete(self, link_id: int, **kwargs) -> 'LinkBaseDAO':
        pass
