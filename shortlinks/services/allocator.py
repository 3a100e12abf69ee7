"""Slug allocation

Turns a destination URL (and optionally a requested slug) into a stored link
with a unique slug. The data store is the final arbiter of uniqueness: the
allocator never checks-then-writes on its own, it asks the DAO to reserve a
slug and reacts to SlugAlreadyExistsError.

Functions:
    generate_candidate(alphabet, length, rng) -> str
        Draw one random slug candidate.
    try_allocate(reserve, candidates, max_attempts) -> LinkModel
        Reserve the first candidate that doesn't collide, within a budget.

Classes:
    SlugAllocator:
        Validate input and allocate a requested or generated slug.

Example:
    >>> allocator = SlugAllocator(dao)
    >>> link = allocator.allocate('https://example.com/blog/article-123')
    >>> link.slug
    'q3ZkT0'
    >>> allocator.allocate('https://example.com', requested_slug='q3ZkT0')
    Traceback (most recent call last):
        ...
    shortlinks.exceptions.SlugConflictError: Slug 'q3ZkT0' is already taken.
"""

import random
import secrets
import itertools
from datetime import datetime
from collections.abc import Callable, Iterator

from shortlinks.models import LinkModel
from shortlinks.constants import Allocation, Slug
from shortlinks.dao.base import LinkBaseDAO
from shortlinks.dao.exceptions import SlugAlreadyExistsError
from shortlinks.exceptions import SlugConflictError, AllocationExhaustedError
from shortlinks.utils.helpers import utcnow, as_utc
from shortlinks.utils.validators import validate_slug, is_reserved, normalize_destination


def generate_candidate(alphabet: str, length: int, rng: random.Random) -> str:
    return ''.join(rng.choice(alphabet) for _ in range(length))


def try_allocate(
    reserve: Callable[[str], LinkModel],
    candidates: Iterator[str],
    max_attempts: int,
) -> LinkModel:
    """Reserve the first non-colliding candidate

    Each SlugAlreadyExistsError raised by `reserve` consumes one attempt.
    Any other exception propagates untouched.

    Args:
        reserve (Callable[[str], LinkModel]):
            Atomically stores a link under the given slug.
        candidates (Iterator[str]):
            Source of slug candidates.
        max_attempts (int):
            Number of candidates to try before giving up.

    Raises:
        AllocationExhaustedError:
            If every attempted candidate collided.
    """
    for slug in itertools.islice(candidates, max_attempts):
        try:
            return reserve(slug)
        except SlugAlreadyExistsError:
            continue
    raise AllocationExhaustedError(f'Could not allocate a unique slug after {max_attempts} attempts.')


class SlugAllocator:
    """Allocate slugs for destination URLs

    Attributes:
        dao (LinkBaseDAO):
            Link store performing the atomic reservation.
        slug_length (int):
            Length of generated slugs, within the requested slug length bounds.
        max_attempts (int):
            Collision budget for generated slugs.
        rng (random.Random):
            Randomness source for generated slugs (secrets.SystemRandom by default).
        clock (Callable[[], datetime]):
            Source of creation timestamps.
    """

    def __init__(
        self,
        dao: LinkBaseDAO,
        *,
        slug_length: int = Allocation.SLUG_LENGTH,
        max_attempts: int = Allocation.MAX_ATTEMPTS,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        if not Slug.MIN_LENGTH <= slug_length <= Slug.MAX_LENGTH:
            raise ValueError(f'Slug length must be between {Slug.MIN_LENGTH} and {Slug.MAX_LENGTH} (given value: {slug_length}).')
        if max_attempts < 1:
            raise ValueError(f'Max attempts must be positive (given value: {max_attempts}).')

        self.dao = dao
        self.slug_length = slug_length
        self.max_attempts = max_attempts
        self.rng = rng if rng is not None else secrets.SystemRandom()
        self.clock = clock if clock is not None else utcnow

    def allocate(
        self,
        destination: str,
        requested_slug: str | None = None,
        expires_at: datetime | None = None,
    ) -> LinkModel:
        """Store a new link for `destination`

        A requested slug gets exactly one reservation attempt and is never
        replaced by a generated one. Without a requested slug, random
        candidates are tried until one is free or the budget runs out.

        Args:
            destination (str):
                URL to shorten. Stored in canonical form.
            requested_slug (str | None):
                Custom slug chosen by the caller.
            expires_at (datetime | None):
                Instant from which the link resolves as expired.

        Returns:
            LinkModel: the stored link, with zero clicks.

        Raises:
            InvalidDestinationError:
                If the destination isn't an absolute http(s) URL.
            InvalidSlugFormatError:
                If the requested slug doesn't match the slug pattern.
            ReservedSlugError:
                If the requested slug is an application route.
            SlugConflictError:
                If the requested slug is already taken.
            AllocationExhaustedError:
                If every generated candidate collided.
            DataStoreError:
                If the link store fails.
        """
        original_url = normalize_destination(destination)
        if requested_slug is not None:
            validate_slug(requested_slug)
        if expires_at is not None:
            expires_at = as_utc(expires_at)

        def reserve(slug: str) -> LinkModel:
            return self.dao.insert(
                slug=slug,
                original_url=original_url,
                expires_at=expires_at,
                created_at=self.clock(),
            )

        if requested_slug is not None:
            try:
                return reserve(requested_slug)
            except SlugAlreadyExistsError as e:
                raise SlugConflictError(f"Slug '{requested_slug}' is already taken.") from e

        return try_allocate(reserve, self._candidates(), self.max_attempts)

    def _candidates(self) -> Iterator[str]:
        while True:
            candidate = generate_candidate(Allocation.ALPHABET, self.slug_length, self.rng)
            if not is_reserved(candidate):
                yield candidate
