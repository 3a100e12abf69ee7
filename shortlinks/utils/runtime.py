import os

from shortlinks.types import LambdaEvent
from shortlinks.constants import ENV


def running_locally() -> bool:
    """Return True if running in SAM local invoke/api, False otherwise."""
    env = os.getenv(ENV.App.APP_ENV, '').lower()
    return env == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'


def get_admin_id(event: LambdaEvent) -> str | None:
    """Return the identity the API Gateway authorizer approved, if any.

    Session validation happens in the authorizer in front of the admin API.
    Cognito user pool authorizers populate `claims.sub`; Lambda (REQUEST)
    authorizers populate `principalId`.
    """
    authorizer = (event.get('requestContext') or {}).get('authorizer') or {}
    claims = authorizer.get('claims') or {}
    return claims.get('sub') or authorizer.get('principalId') or None
