import json
import logging

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse, ResponseBody
from shortlinks.models import LinkModel
from shortlinks.dao.redis import LinkRedisDAO
from shortlinks.dao.exceptions import DataStoreError
from shortlinks.services import AdminContext, LinkAdministrator
from shortlinks.utils import load_config, get_short_url, app_prefix
from shortlinks.utils.helpers import guarantee_500_response, parse_timestamp, format_timestamp
from shortlinks.utils.runtime import get_admin_id
from shortlinks.lambdas.admin_links.constants import (
    UNAUTHORIZED,
    METHOD_NOT_ALLOWED,
    INVALID_LINK_ID,
    INVALID_JSON,
    INVALID_EXPIRES_AT,
    DATA_STORE_ERROR,
    LIST_SUCCESS,
    UPDATE_EXPIRY_SUCCESS,
    DELETE_SUCCESS,
)


logger = logging.getLogger(__name__)

ALLOWED_METHODS = ('GET', 'PATCH', 'DELETE')


def response(status_code: int, body: ResponseBody, headers: dict | None = None) -> LambdaResponse:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json', **(headers or {})},
        'body': json.dumps(body),
    }


def response_error(status_code: int, reason: str, message: str, error_code: str) -> LambdaResponse:
    headers = {'Allow': ','.join(ALLOWED_METHODS)} if status_code == 405 else None
    return response(status_code, {'message': f'{reason} ({message})', 'errorCode': error_code}, headers=headers)


def serialize_link(link: LinkModel, event: LambdaEvent) -> ResponseBody:
    return {
        'id': link.id,
        'slug': link.slug,
        'short_url': get_short_url(link.slug, event),
        'original_url': link.original_url,
        'created_at': format_timestamp(link.created_at),
        'clicks': link.clicks,
        'expires_at': format_timestamp(link.expires_at),
    }


def parse_link_id(event: LambdaEvent) -> int | None:
    raw = (event.get('pathParameters') or {}).get('id')
    # isdigit() alone accepts digits int() can't parse, e.g. '²'
    if not isinstance(raw, str) or not (raw.isascii() and raw.isdigit()):
        return None
    return int(raw)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle administrative API Gateway requests for links

    Routes:
        GET    /api/admin/urls          list every link, newest first
        PATCH  /api/admin/urls/{id}     overwrite expiry, body {"expires_at": <ISO-8601> | null}
        DELETE /api/admin/urls/{id}     delete a link

    Session validation happens in the API Gateway authorizer. This handler
    only reads the authorizer's decision from `requestContext.authorizer`.

    HTTP responses:
        200: Success
            GET: {"links": [...]}
            PATCH / DELETE: {"success": true, "id": <id>}
        400: Bad link id, invalid JSON body or unparsable expires_at
        401: No authorized administrator on the request
        405: Method not allowed
        500: Link store unavailable or unexpected error
    """
    # 1- Check authorizer decision
    admin_id = get_admin_id(event)
    if admin_id is None:
        logger.info('Missing administrator identity. Responding with 401.', extra={'event': UNAUTHORIZED})
        return response_error(401, 'Unauthorized', 'missing administrator identity', UNAUTHORIZED)
    admin_context = AdminContext(authorized=True, actor=admin_id)

    # 2- Validate request
    method = (event.get('httpMethod') or '').upper()
    if method not in ALLOWED_METHODS:
        logger.info('Method %s not allowed. Responding with 405.', method, extra={'event': METHOD_NOT_ALLOWED})
        return response_error(405, 'Method Not Allowed', f'{method or "unknown"} method', METHOD_NOT_ALLOWED)

    link_id = None
    if method != 'GET':
        link_id = parse_link_id(event)
        if link_id is None:
            logger.info('Invalid link id in path. Responding with 400.', extra={'event': INVALID_LINK_ID})
            return response_error(400, 'Bad Request', "'id' must be a non-negative integer", INVALID_LINK_ID)

    expires_at = None
    if method == 'PATCH':
        try:
            request_body = json.loads(event.get('body') or '{}')
        except json.JSONDecodeError:
            logger.info('Invalid JSON in request body. Responding with 400.', extra={'event': INVALID_JSON})
            return response_error(400, 'Bad Request', 'invalid JSON body', INVALID_JSON)
        if not isinstance(request_body, dict) or 'expires_at' not in request_body:
            logger.info("Missing 'expires_at' in request body. Responding with 400.", extra={'event': INVALID_EXPIRES_AT})
            return response_error(400, 'Bad Request', "missing 'expires_at' in JSON body", INVALID_EXPIRES_AT)
        try:
            expires_at = parse_timestamp(request_body['expires_at'])
        except ValueError:
            logger.info('Unparsable expires_at in request body. Responding with 400.', extra={'event': INVALID_EXPIRES_AT})
            return response_error(400, 'Bad Request', "'expires_at' must be an ISO-8601 timestamp or null", INVALID_EXPIRES_AT)

    # 3- Run the administrative operation
    try:
        app_config = load_config('admin_links')
        redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
        administrator = LinkAdministrator(LinkRedisDAO(**redis_config, prefix=app_prefix()))

        if method == 'GET':
            links = administrator.list_all(admin_context)
        elif method == 'PATCH':
            administrator.update_expiry(admin_context, link_id, expires_at)
        else:
            administrator.delete(admin_context, link_id)
    except DataStoreError:
        logger.exception('Link store unavailable. Responding with 500.', extra={'event': DATA_STORE_ERROR})
        return response_error(500, 'Internal Server Error', 'link store unavailable', DATA_STORE_ERROR)

    # 4- Respond to administrator
    if method == 'GET':
        logger.info('Listed %d links.', len(links), extra={'event': LIST_SUCCESS, 'adminId': admin_id})
        return response(200, {'links': [serialize_link(link, event) for link in links]})

    event_code = UPDATE_EXPIRY_SUCCESS if method == 'PATCH' else DELETE_SUCCESS
    logger.info(
        '%s link %d. Responding with 200.',
        'Updated expiry of' if method == 'PATCH' else 'Deleted',
        link_id,
        extra={'event': event_code, 'adminId': admin_id, 'linkId': link_id},
    )
    return response(200, {'success': True, 'id': link_id})
