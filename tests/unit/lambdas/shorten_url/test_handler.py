import json
from datetime import datetime, UTC
from typing import cast
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch

from shortlinks.types import LambdaEvent, LambdaContext, LambdaConfiguration, HttpHeaders
from shortlinks.lambdas.shorten_url import app
from shortlinks.dao.base import LinkBaseDAO
from shortlinks.dao.exceptions import SlugAlreadyExistsError, DataStoreError
from shortlinks.exceptions import (
    InvalidDestinationError,
    InvalidSlugFormatError,
    SlugConflictError,
    ReservedSlugError,
    AllocationExhaustedError,
)


def make_event(body: str | dict) -> LambdaEvent:
    return cast(
        LambdaEvent,
        {
            'body': body if isinstance(body, str) else json.dumps(body),
            'resource': '/shorten',
            'headers': {'User-Agent': 'pytest', 'Content-Type': 'application/json'},
            'httpMethod': 'POST',
            'path': '/shorten',
            'requestContext': {
                'resourcePath': '/shorten',
                'httpMethod': 'POST',
                'domainName': 'testhost:1000',
                'stage': 'test',
            },
        },
    )


class TestShortenUrlHandler:
    @pytest.fixture
    def context(self) -> LambdaContext:
        return cast(LambdaContext, {'function_name': 'shorten_url'})

    @pytest.fixture(autouse=True)
    def setup(
        self,
        monkeypatch: MonkeyPatch,
        context: LambdaContext,
        config: LambdaConfiguration,
        link_dao: LinkBaseDAO,
    ) -> None:
        # Patch Lambda dependencies
        self.dao_factory = MagicMock(return_value=link_dao)
        monkeypatch.setattr(app, 'load_config', lambda *a, **kw: self.config)
        monkeypatch.setattr(app, 'LinkRedisDAO', self.dao_factory)

        self.context = context
        self.config = config
        self.link_dao = link_dao

    def invoke(self, body: str | dict) -> tuple[int, dict, HttpHeaders]:
        response = app.lambda_handler(make_event(body), self.context)
        return response['statusCode'], json.loads(response['body']), response['headers']

    def assert_has_cors_headers(self, headers: HttpHeaders) -> None:
        assert headers['Access-Control-Allow-Origin'] == '*'
        assert headers['Access-Control-Allow-Headers'] == 'Authorization,Content-Type'
        assert headers['Access-Control-Allow-Methods'] == 'OPTIONS,POST,GET'

    def test_shorten_with_generated_slug(self):
        status, body, headers = self.invoke({'url': 'https://Example.com/blog/chuck-norris-is-awesome'})

        assert status == 200
        assert body['success'] is True
        assert len(body['slug']) == 6
        assert body['short_url'] == f'https://testhost:1000/{body["slug"]}'
        assert body['original_url'] == 'https://example.com/blog/chuck-norris-is-awesome'
        assert body['expires_at'] is None
        self.assert_has_cors_headers(headers)

        # Assert DAO was built from AppConfig's Redis section with the app prefix
        self.dao_factory.assert_called_once_with(
            redis_host='redis.test',
            redis_port=6379,
            redis_db=0,
            prefix='shortlinks:test',
        )
        self.link_dao.insert.assert_called_once()

    def test_shorten_with_custom_slug_and_expiry(self):
        status, body, _ = self.invoke(
            {'url': 'https://example.com', 'customSlug': 'my-link', 'expiresAt': '2025-12-31T23:59:59Z'}
        )

        assert status == 200
        assert body['slug'] == 'my-link'
        assert body['short_url'] == 'https://testhost:1000/my-link'
        assert body['original_url'] == 'https://example.com/'
        assert body['expires_at'] == '2025-12-31T23:59:59+00:00'

        kwargs = self.link_dao.insert.call_args.kwargs
        assert kwargs['slug'] == 'my-link'
        assert kwargs['expires_at'] == datetime(2025, 12, 31, 23, 59, 59, tzinfo=UTC)

    def test_empty_custom_slug_means_generated(self):
        status, body, _ = self.invoke({'url': 'https://example.com', 'customSlug': ''})

        assert status == 200
        assert len(body['slug']) == 6

    def test_invalid_json(self):
        status, body, headers = self.invoke('{"invalid_json": true')

        assert status == 400
        assert body['message'] == 'Bad Request (invalid JSON body)'
        assert body['errorCode'] == 'INVALID_JSON'
        self.assert_has_cors_headers(headers)

    def test_non_object_json(self):
        status, body, _ = self.invoke('["https://example.com"]')

        assert status == 400
        assert body['errorCode'] == 'INVALID_JSON'

    def test_missing_url(self):
        status, body, _ = self.invoke({'target': 'https://example.com'})

        assert status == 400
        assert body['message'] == "Bad Request (missing 'url' in JSON body)"
        assert body['errorCode'] == 'MISSING_URL'
        self.link_dao.insert.assert_not_called()

    def test_invalid_destination(self):
        status, body, _ = self.invoke({'url': 'ftp://example.com'})

        assert status == 400
        assert body['errorCode'] == 'INVALID_DESTINATION'
        self.link_dao.insert.assert_not_called()

    def test_invalid_slug_format(self):
        status, body, _ = self.invoke({'url': 'https://example.com', 'customSlug': 'no spaces allowed'})

        assert status == 400
        assert body['errorCode'] == 'INVALID_SLUG_FORMAT'
        self.link_dao.insert.assert_not_called()

    @pytest.mark.parametrize('expires_at', ['next tuesday', 12345, '2025-13-01T00:00:00Z'])
    def test_invalid_expires_at(self, expires_at):
        status, body, _ = self.invoke({'url': 'https://example.com', 'expiresAt': expires_at})

        assert status == 400
        assert body['errorCode'] == 'INVALID_EXPIRES_AT'

    def test_slug_conflict(self):
        self.link_dao.insert.side_effect = SlugAlreadyExistsError("Link with slug 'my-link' already exists.")

        status, body, headers = self.invoke({'url': 'https://example.com', 'customSlug': 'my-link'})

        assert status == 409
        assert body['message'] == "Conflict (Slug 'my-link' is already taken.)"
        assert body['errorCode'] == 'SLUG_CONFLICT'
        self.assert_has_cors_headers(headers)

    def test_reserved_slug(self):
        status, body, _ = self.invoke({'url': 'https://example.com', 'customSlug': 'dashboard'})

        assert status == 409
        assert body['errorCode'] == 'RESERVED_SLUG'
        self.link_dao.insert.assert_not_called()

    def test_allocation_exhausted(self):
        self.link_dao.insert.side_effect = SlugAlreadyExistsError('taken')

        status, body, _ = self.invoke({'url': 'https://example.com'})

        assert status == 500
        assert body['errorCode'] == 'ALLOCATION_EXHAUSTED'
        assert self.link_dao.insert.call_count == 5

    def test_data_store_error(self):
        self.dao_factory.side_effect = DataStoreError("Can't connect to Redis at redis.test:6379/0.")

        status, body, _ = self.invoke({'url': 'https://example.com'})

        assert status == 500
        assert body['message'] == 'Internal Server Error (link store unavailable)'
        assert body['errorCode'] == 'DATA_STORE_ERROR'

    def test_unexpected_error_becomes_500(self, monkeypatch: MonkeyPatch):
        monkeypatch.setattr(app, 'load_config', MagicMock(side_effect=RuntimeError('Something goes wrong')))

        response = app.lambda_handler(make_event({'url': 'https://example.com'}), self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 500
        assert body == {'message': 'Internal Server Error', 'errorCode': 'UNKNOWN_INTERNAL_SERVER_ERROR'}

    def test_unexpected_error_is_raised_locally(self, monkeypatch: MonkeyPatch):
        monkeypatch.setenv('APP_ENV', 'local')
        monkeypatch.setattr(app, 'load_config', MagicMock(side_effect=RuntimeError('Something goes wrong')))

        with pytest.raises(RuntimeError, match='Something goes wrong'):
            app.lambda_handler(make_event({'url': 'https://example.com'}), self.context)

    @pytest.mark.parametrize(
        'error, status',
        [
            (InvalidDestinationError('Destination URL is required.'), 400),
            (InvalidSlugFormatError('Slug must match'), 400),
            (SlugConflictError("Slug 'my-link' is already taken."), 409),
            (ReservedSlugError("Slug 'api' is reserved by the application."), 409),
            (AllocationExhaustedError('Could not allocate a unique slug after 5 attempts.'), 500),
        ],
    )
    def test_allocation_errors_respond_with_their_error_code(self, monkeypatch: MonkeyPatch, error: Exception, status: int):
        monkeypatch.setattr(app.SlugAllocator, 'allocate', MagicMock(side_effect=error))

        response_status, body, _ = self.invoke({'url': 'https://example.com'})

        assert response_status == status
        assert body['errorCode'] == type(error).error_code
