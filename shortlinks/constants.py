import string
from enum import StrEnum


class Allocation:
    """Slug allocation policy."""

    # Generated slugs: 62 symbols at length 6 (~5.6 * 10^10 combinations)
    ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
    SLUG_LENGTH = 6
    # Collision budget for generated slugs
    MAX_ATTEMPTS = 5


class Slug:
    """Requested slug constraints."""

    MIN_LENGTH = 2
    MAX_LENGTH = 50
    PATTERN = rf'[A-Za-z0-9_-]{{{MIN_LENGTH},{MAX_LENGTH}}}'
    # Paths served by the application itself
    RESERVED = frozenset({'api', 'auth', 'dashboard', 'login', 'logout', 'shorten'})


class Destination:
    """Destination URL constraints."""

    SCHEMES = frozenset({'http', 'https'})
    MAX_LENGTH = 2048


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
