import json
import logging

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.models import Redirect, Expired
from shortlinks.dao.redis import LinkRedisDAO
from shortlinks.dao.exceptions import DataStoreError
from shortlinks.services import LinkResolver
from shortlinks.utils import load_config, get_short_url, app_prefix
from shortlinks.utils.helpers import guarantee_500_response, format_timestamp
from shortlinks.lambdas.redirect_url.constants import (
    LINK_NOT_FOUND,
    LINK_EXPIRED,
    DATA_STORE_ERROR,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)


def response_302(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 302,
        'headers': {
            'Location': location,
            'Cache-Control': 'no-store',
        },
        'body': json.dumps({}),  # no body needed for redirects
    }


def response_404(*, message: str, error_code: str) -> LambdaResponse:
    return {
        'statusCode': 404,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps({'message': f'Not Found ({message})', 'errorCode': error_code}),
    }


def response_410(*, message: str, error_code: str, expired_at: str) -> LambdaResponse:
    return {
        'statusCode': 410,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps({'message': f'Gone ({message})', 'errorCode': error_code, 'expiredAt': expired_at}),
    }


def response_500(*, message: str, error_code: str) -> LambdaResponse:
    return {
        'statusCode': 500,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps({'message': f'Internal Server Error ({message})', 'errorCode': error_code}),
    }


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect short URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract slug from request path
    - Step 2: Resolve slug (lookup, expiry check, click count)
    - Step 3: Redirect client to destination URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: destination URL
        404: No link behind the slug (or not a slug at all)
        410: Link expired
            expiredAt: ISO-8601 expiry instant
        500: Link store unavailable or unexpected error

    Example:
        >>> event = {'pathParameters': {'slug': 'q3ZkT0'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/blog/article-123'
    """
    # 1- Extract slug from request's path
    slug = (event.get('pathParameters') or {}).get('slug') or ''
    logger.debug('Client requested short URL %s.', get_short_url(slug, event))

    # 2- Resolve slug
    try:
        app_config = load_config('redirect_url')
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
        resolver = LinkResolver(LinkRedisDAO(**redis_config, prefix=app_prefix()))
        resolution = resolver.resolve(slug)
    except DataStoreError:
        logger.exception('Link store unavailable. Responding with 500.', extra={'slug': slug, 'event': DATA_STORE_ERROR})
        return response_500(message='link store unavailable', error_code=DATA_STORE_ERROR)

    if isinstance(resolution, Expired):
        logger.info('Link expired. Responding with 410.', extra={'slug': slug, 'event': LINK_EXPIRED})
        return response_410(
            message=f'short url {get_short_url(slug, event)} has expired',
            error_code=LINK_EXPIRED,
            expired_at=format_timestamp(resolution.expired_at),
        )
    if not isinstance(resolution, Redirect):
        logger.info('Link not found. Responding with 404.', extra={'slug': slug, 'event': LINK_NOT_FOUND})
        return response_404(
            message=f"short url {get_short_url(slug, event)} doesn't exist",
            error_code=LINK_NOT_FOUND,
        )

    # 3- Redirect client to destination URL
    logger.info(
        'Redirecting client to destination URL. Responding with 302.',
        extra={'slug': slug, 'event': REDIRECT_SUCCESS},
    )
    return response_302(location=resolution.destination)
