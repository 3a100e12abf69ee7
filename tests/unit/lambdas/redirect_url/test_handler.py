import json
from datetime import datetime, timedelta, UTC
from typing import cast
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch
from freezegun import freeze_time

from shortlinks.types import LambdaEvent, LambdaContext, LambdaConfiguration
from shortlinks.models import LinkModel
from shortlinks.lambdas.redirect_url import app
from shortlinks.dao.base import LinkBaseDAO
from shortlinks.dao.exceptions import LinkNotFoundError, DataStoreError


def make_event(slug: str | None) -> LambdaEvent:
    return cast(
        LambdaEvent,
        {
            'resource': '/{slug}',
            'path': f'/{slug}',
            'httpMethod': 'GET',
            'headers': {'User-Agent': 'pytest'},
            'pathParameters': None if slug is None else {'slug': slug},
            'requestContext': {
                'resourcePath': '/{slug}',
                'httpMethod': 'GET',
                'domainName': 'abc123.execute-api.us-east-1.amazonaws.com',
                'stage': 'Prod',
            },
        },
    )


class TestRedirectUrlHandler:
    @pytest.fixture(autouse=True)
    def frozen_clock(self):
        with freeze_time('2025-10-15 12:00:00'):
            yield

    @pytest.fixture
    def context(self) -> LambdaContext:
        return cast(LambdaContext, {'function_name': 'redirect_url'})

    @pytest.fixture
    def link(self) -> LinkModel:
        return LinkModel(
            id=7,
            slug='q3ZkT0',
            original_url='https://example.com/blog/article-123',
            created_at=datetime(2025, 10, 1, tzinfo=UTC),
            clicks=41,
            expires_at=datetime(2025, 10, 16, tzinfo=UTC),
        )

    @pytest.fixture(autouse=True)
    def setup(
        self,
        monkeypatch: MonkeyPatch,
        context: LambdaContext,
        config: LambdaConfiguration,
        link_dao: LinkBaseDAO,
        link: LinkModel,
    ) -> None:
        link_dao.get.return_value = link
        link_dao.hit.return_value = 42

        # Patch Lambda dependencies
        self.dao_factory = MagicMock(return_value=link_dao)
        monkeypatch.setattr(app, 'load_config', lambda *a, **kw: config)
        monkeypatch.setattr(app, 'LinkRedisDAO', self.dao_factory)

        self.context = context
        self.link_dao = link_dao
        self.link = link

    def test_redirect(self):
        response = app.lambda_handler(make_event('q3ZkT0'), self.context)

        assert response['statusCode'] == 302
        assert response['headers']['Location'] == 'https://example.com/blog/article-123'
        self.link_dao.get.assert_called_once_with('q3ZkT0')
        self.link_dao.hit.assert_called_once_with('q3ZkT0')

    def test_redirect_not_found(self):
        self.link_dao.get.side_effect = LinkNotFoundError("Link with slug 'nope42' not found.")

        response = app.lambda_handler(make_event('nope42'), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 404
        assert body['errorCode'] == 'LINK_NOT_FOUND'
        assert body['message'] == (
            "Not Found (short url https://abc123.execute-api.us-east-1.amazonaws.com/Prod/nope42 doesn't exist)"
        )
        self.link_dao.hit.assert_not_called()

    @pytest.mark.parametrize('slug', [None, '', 'favicon.ico'])
    def test_redirect_non_slug_path(self, slug: str | None):
        response = app.lambda_handler(make_event(slug), self.context)

        assert response['statusCode'] == 404
        self.link_dao.get.assert_not_called()

    def test_redirect_expired(self, link: LinkModel):
        self.link_dao.get.return_value = LinkModel(
            id=link.id,
            slug=link.slug,
            original_url=link.original_url,
            created_at=link.created_at,
            clicks=link.clicks,
            expires_at=datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC),
        )

        response = app.lambda_handler(make_event('q3ZkT0'), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 410
        assert body['errorCode'] == 'LINK_EXPIRED'
        assert body['expiredAt'] == '2025-10-15T12:00:00+00:00'
        self.link_dao.hit.assert_not_called()

    def test_redirect_data_store_error(self):
        self.link_dao.get.side_effect = DataStoreError("Can't connect to Redis at redis.test:6379/0.")

        response = app.lambda_handler(make_event('q3ZkT0'), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 500
        assert body['errorCode'] == 'DATA_STORE_ERROR'

    def test_redirect_unexpected_error(self):
        self.link_dao.hit.side_effect = RuntimeError('boom')

        response = app.lambda_handler(make_event('q3ZkT0'), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 500
        assert body['errorCode'] == 'UNKNOWN_INTERNAL_SERVER_ERROR'

    def test_redirect_just_before_expiry(self):
        with freeze_time(self.link.expires_at - timedelta(seconds=1)):
            response = app.lambda_handler(make_event('q3ZkT0'), self.context)

        assert response['statusCode'] == 302
