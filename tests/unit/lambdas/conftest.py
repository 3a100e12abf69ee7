from datetime import datetime, UTC
from typing import cast
from unittest.mock import MagicMock

import pytest

from shortlinks.types import LambdaContext, LambdaConfiguration
from shortlinks.models import LinkModel
from shortlinks.dao.base import LinkBaseDAO


@pytest.fixture
def config() -> LambdaConfiguration:
    return cast(LambdaConfiguration, {'redis': {'host': 'redis.test', 'port': 6379, 'db': 0}})


@pytest.fixture
def link_dao() -> LinkBaseDAO:
    """Mock link store whose insert echoes back the stored link."""
    dao = cast(LinkBaseDAO, MagicMock(spec=LinkBaseDAO))

    def insert(slug, original_url, expires_at=None, created_at=None, **kwargs):
        return LinkModel(
            id=1,
            slug=slug,
            original_url=original_url,
            created_at=created_at or datetime(2025, 10, 15, tzinfo=UTC),
            expires_at=expires_at,
        )

    dao.insert.side_effect = insert
    return dao


@pytest.fixture(autouse=True)
def deployed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    # Unexpected errors become 500 responses only outside local runs
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)
    monkeypatch.setenv('APP_NAME', 'shortlinks')
