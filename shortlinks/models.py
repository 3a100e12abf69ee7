from dataclasses import dataclass
from datetime import datetime


# fmt: off
@dataclass(frozen=True)
class LinkModel:
    id: int                             # Store-assigned, monotonically increasing identifier
    slug: str                           # Unique short identifier of the link
    original_url: str                   # Canonical destination URL
    created_at: datetime                # Creation instant (UTC)
    clicks: int = 0                     # Number of successful resolutions
    expires_at: datetime | None = None  # Instant from which the link resolves as expired, None = permanent

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and now >= self.expires_at


@dataclass(frozen=True)
class Redirect:
    destination: str                    # Where the visitor is sent


@dataclass(frozen=True)
class NotFound:
    slug: str                           # Slug with no record behind it


@dataclass(frozen=True)
class Expired:
    slug: str                           # Slug whose record is past its expiry
    expired_at: datetime                # The record's expires_at
# fmt: on


type Resolution = Redirect | NotFound | Expired
