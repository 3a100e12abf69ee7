import json
import logging

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse, ResponseBody
from shortlinks.dao.redis import LinkRedisDAO
from shortlinks.dao.exceptions import DataStoreError
from shortlinks.services import SlugAllocator
from shortlinks.exceptions import (
    InvalidDestinationError,
    InvalidSlugFormatError,
    SlugConflictError,
    AllocationExhaustedError,
)
from shortlinks.utils import load_config, get_short_url, app_prefix
from shortlinks.utils.helpers import guarantee_500_response, parse_timestamp, format_timestamp
from shortlinks.lambdas.shorten_url.constants import (
    INVALID_JSON,
    MISSING_URL,
    INVALID_EXPIRES_AT,
    DATA_STORE_ERROR,
    SHORTEN_SUCCESS,
)


logger = logging.getLogger(__name__)

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Authorization,Content-Type',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET',
}


def response(status_code: int, body: ResponseBody) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS},
        'body': json.dumps(body),
    }


def response_400(message: str, error_code: str) -> LambdaResponse:
    return response(400, {'message': f'Bad Request ({message})', 'errorCode': error_code})


def response_409(message: str, error_code: str) -> LambdaResponse:
    return response(409, {'message': f'Conflict ({message})', 'errorCode': error_code})


def response_500(message: str, error_code: str) -> LambdaResponse:
    return response(500, {'message': f'Internal Server Error ({message})', 'errorCode': error_code})


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Parse destination URL, custom slug and expiry from request body
    - Step 2: Load application config and connect to the link store
    - Step 3: Allocate a slug (custom or generated) and store the link
    - Step 4: Respond to user with 200 success

    HTTP responses:
        200: Successful URL shortening
            success: true
            short_url: newly generated short url
            slug: slug of the new link
            original_url: canonical destination url
            expires_at: ISO-8601 expiry or null
        400: Bad client request
            invalid JSON, missing url, invalid destination, invalid slug or invalid expiresAt
        409: Conflict
            custom slug already taken or reserved by the application
        500: Internal server error
            slug space exhausted, link store unavailable or unexpected error

    Example:
        >>> event = {'body': '{"url": "https://example.com", "customSlug": "my-link"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['short_url']
        'http://localhost:3000/my-link'
    """
    # 1- Parse request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON in request body. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400('invalid JSON body', INVALID_JSON)
    if not isinstance(request_body, dict):
        logger.info('Request body is not a JSON object. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400('invalid JSON body', INVALID_JSON)

    url = request_body.get('url')
    if not url:
        logger.info("Missing 'url' in request body. Responding with 400.", extra={'event': MISSING_URL})
        return response_400("missing 'url' in JSON body", MISSING_URL)

    custom_slug = request_body.get('customSlug') or None

    try:
        expires_at = parse_timestamp(request_body.get('expiresAt'))
    except ValueError:
        logger.info('Unparsable expiresAt in request body. Responding with 400.', extra={'event': INVALID_EXPIRES_AT})
        return response_400("'expiresAt' must be an ISO-8601 timestamp", INVALID_EXPIRES_AT)

    # 2- Connect to the link store & 3- allocate a slug
    try:
        app_config = load_config('shorten_url')
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
        allocator = SlugAllocator(LinkRedisDAO(**redis_config, prefix=app_prefix()))
        link = allocator.allocate(url, requested_slug=custom_slug, expires_at=expires_at)
    except (InvalidDestinationError, InvalidSlugFormatError) as e:
        logger.info('Rejected shortening request. Responding with 400.', extra={'event': e.error_code, 'reason': str(e)})
        return response_400(str(e), e.error_code)
    except SlugConflictError as e:
        # Also covers ReservedSlugError
        logger.info('Custom slug unavailable. Responding with 409.', extra={'event': e.error_code, 'slug': custom_slug})
        return response_409(str(e), e.error_code)
    except AllocationExhaustedError as e:
        logger.error('Slug allocation exhausted. Responding with 500.', extra={'event': e.error_code})
        return response_500(str(e), e.error_code)
    except DataStoreError:
        logger.exception('Link store unavailable. Responding with 500.', extra={'event': DATA_STORE_ERROR})
        return response_500('link store unavailable', DATA_STORE_ERROR)

    # 4- Return successful response to user
    short_url = get_short_url(link.slug, event)
    logger.info(
        'Shortened %s to %s. Responding with 200.',
        link.original_url,
        short_url,
        extra={'event': SHORTEN_SUCCESS, 'slug': link.slug, 'linkId': link.id},
    )
    return response(
        200,
        {
            'success': True,
            'short_url': short_url,
            'slug': link.slug,
            'original_url': link.original_url,
            'expires_at': format_timestamp(link.expires_at),
        },
    )
