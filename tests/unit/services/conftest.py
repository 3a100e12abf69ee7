from datetime import datetime, UTC
from typing import cast
from unittest.mock import MagicMock

import pytest

from shortlinks.models import LinkModel
from shortlinks.dao.base import LinkBaseDAO


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def dao(now: datetime) -> LinkBaseDAO:
    """Mock link store whose insert echoes back the stored link."""
    mock = cast(LinkBaseDAO, MagicMock(spec=LinkBaseDAO))

    def insert(slug, original_url, expires_at=None, created_at=None, **kwargs):
        return LinkModel(id=1, slug=slug, original_url=original_url, created_at=created_at or now, expires_at=expires_at)

    mock.insert.side_effect = insert
    return mock
