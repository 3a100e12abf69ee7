"""Helper utilities for AWS lambda functions.

Functions:
    utcnow() -> datetime
        Current instant as a tz-aware UTC datetime
    as_utc(dt: datetime) -> datetime
        Normalize a datetime to tz-aware UTC (naive values are taken as UTC)
    parse_timestamp(value: str | None) -> datetime | None
        Parse an ISO-8601 timestamp into a tz-aware UTC datetime
    format_timestamp(dt: datetime | None) -> str | None
        Serialize a datetime as ISO-8601 in UTC
    base_url(event) -> str
        Extract correct public base URL from API Gateway event
    get_short_url(slug, event) -> str
        Get string representation of short URL for a given slug
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Turn unexpected handler exceptions into a 500 response

Example:
    Typical usage inside a Lambda handler:

        >>> from shortlinks.utils.helpers import base_url
        >>> event = {
        ...     "requestContext": {
        ...         "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
        ...         "stage": "Prod"
        ...     }
        ... }
        >>> base_url(event)
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'

        >>> base_url({})
        'http://localhost:3000'
"""

import os
import json
import logging
import functools
from datetime import datetime, UTC
from collections.abc import Callable

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from shortlinks.exceptions import MissingEnvironmentVariableError
from shortlinks.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp into a tz-aware UTC datetime.

    Accepts a trailing 'Z' (as produced by JavaScript's Date.toISOString()).

    Args:
        value (str | None): timestamp string. None and '' mean "no timestamp".

    Returns:
        datetime | None: parsed UTC datetime, or None.

    Raises:
        ValueError: if the value is not a valid ISO-8601 timestamp.

    Example:
        >>> parse_timestamp('2025-10-15T12:00:00Z')
        datetime.datetime(2025, 10, 15, 12, 0, tzinfo=datetime.timezone.utc)
    """
    if value is None or value == '':
        return None
    if not isinstance(value, str):
        raise ValueError(f'Timestamp must be a string (given type: {type(value)}).')
    if value.endswith(('Z', 'z')):
        value = f'{value[:-1]}+00:00'
    return as_utc(datetime.fromisoformat(value))


def format_timestamp(dt: datetime | None) -> str | None:
    return None if dt is None else as_utc(dt).isoformat()


def base_url(event: LambdaEvent) -> str:
    """Extract public base URL from API Gateway event

    Works with both custom and default AWS API Gateway domains.
    If a custom domain is configured, the stage name is omitted.
    If using the default AWS execute-api domain, the stage name is included.
    Local hosts (SAM CLI) are served over plain HTTP.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: Base URL, e.g.:
             - "https://sho.rt"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    request_context = event.get('requestContext', {})
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain.split(':')[0] in {'localhost', '127.0.0.1'}:
        return f'http://{domain}'
    elif domain and 'execute-api' not in domain:
        # Custom domain, skip stage
        return f'https://{domain}'
    elif domain:
        # AWS default domain, include stage
        return f'https://{domain}/{stage}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return 'http://localhost:3000'


def get_short_url(slug: str, event: LambdaEvent) -> str:
    return f'{base_url(event).rstrip("/")}/{slug}'


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable[[LambdaEvent, LambdaContext], LambdaResponse]) -> Callable:
    """Decorator: respond with 500 instead of crashing the Lambda on unexpected errors.

    When running locally the exception is re-raised so it shows up in SAM output.
    """

    @functools.wraps(handler)
    def wrapper(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled exception in Lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return {
                'statusCode': 500,
                'body': json.dumps(
                    {
                        'message': 'Internal Server Error',
                        'errorCode': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper
