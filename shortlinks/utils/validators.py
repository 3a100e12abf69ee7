"""Validation of user-supplied slugs and destination URLs.

Functions:
    is_slug(value) -> bool
        True if value is syntactically a slug
    is_reserved(slug) -> bool
        True if slug shadows an application route
    validate_slug(slug) -> str
        Raise InvalidSlugFormatError / ReservedSlugError for unusable requested slugs
    normalize_destination(url) -> str
        Canonical form of an http(s) URL, or InvalidDestinationError

Example:
    >>> normalize_destination(' HTTPS://Example.COM ')
    'https://example.com/'
    >>> validate_slug('my-link')
    'my-link'
    >>> validate_slug('a')
    Traceback (most recent call last):
        ...
    shortlinks.exceptions.InvalidSlugFormatError: Slug must match [A-Za-z0-9_-]{2,50} (given value: 'a').
"""

import re
from urllib.parse import urlsplit, urlunsplit

from shortlinks.constants import Slug, Destination
from shortlinks.exceptions import InvalidSlugFormatError, InvalidDestinationError, ReservedSlugError


SLUG_RE = re.compile(Slug.PATTERN)


def is_slug(value: object) -> bool:
    return isinstance(value, str) and SLUG_RE.fullmatch(value) is not None


def is_reserved(slug: str) -> bool:
    """Return True if the slug shadows an application route (case-insensitive)."""
    return slug.lower() in Slug.RESERVED


def validate_slug(slug: str) -> str:
    if not is_slug(slug):
        raise InvalidSlugFormatError(f'Slug must match {Slug.PATTERN} (given value: {slug!r}).')
    if is_reserved(slug):
        raise ReservedSlugError(f"Slug '{slug}' is reserved by the application.")
    return slug


def normalize_destination(url: str) -> str:
    """Validate a destination URL and return its canonical serialization

    Canonical form: surrounding whitespace stripped, lowercase scheme and host,
    empty path written as '/'. Userinfo, port, query and fragment are kept.

    Raises:
        InvalidDestinationError:
            If the URL is not a string, is too long, can't be parsed, has no host,
            or uses a scheme other than http/https.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidDestinationError('Destination URL is required.')

    url = url.strip()
    if len(url) > Destination.MAX_LENGTH:
        raise InvalidDestinationError(f'Destination URL is too long (max {Destination.MAX_LENGTH} characters).')

    try:
        parts = urlsplit(url)
        hostname = parts.hostname
        parts.port  # raises ValueError on a malformed port
    except ValueError as e:
        raise InvalidDestinationError(f'Invalid destination URL {url!r}: {e}') from e

    scheme = parts.scheme.lower()
    if scheme not in Destination.SCHEMES:
        raise InvalidDestinationError(f'Destination URL must use http or https (given value: {url!r}).')
    if not hostname:
        raise InvalidDestinationError(f'Destination URL must have a host (given value: {url!r}).')
    if any(ch.isspace() for ch in url):
        raise InvalidDestinationError(f'Destination URL must not contain whitespace (given value: {url!r}).')

    userinfo, _, hostport = parts.netloc.rpartition('@')
    netloc = f'{userinfo}@{hostport.lower()}' if userinfo else hostport.lower()
    return urlunsplit((scheme, netloc, parts.path or '/', parts.query, parts.fragment))
