"""Application exceptions

Each class carries the `error_code` the HTTP layer returns as `errorCode`
when the exception surfaces to a client.
"""


class ShortLinksError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'SHORTLINKS_ERROR'


class AllocationError(ShortLinksError):
    """Base exception for all slug allocation failures."""

    error_code = 'ALLOCATION_ERROR'


class InvalidDestinationError(AllocationError):
    """Raised when the destination is malformed or uses a disallowed scheme."""

    error_code = 'INVALID_DESTINATION'


class InvalidSlugFormatError(AllocationError):
    """Raised when a requested slug doesn't match the slug pattern."""

    error_code = 'INVALID_SLUG_FORMAT'


class SlugConflictError(AllocationError):
    """Raised when a requested slug is already taken."""

    error_code = 'SLUG_CONFLICT'


class ReservedSlugError(SlugConflictError):
    """Raised when a requested slug collides with an application route."""

    error_code = 'RESERVED_SLUG'


class AllocationExhaustedError(AllocationError):
    """Raised when every generated slug candidate collided."""

    error_code = 'ALLOCATION_EXHAUSTED'


class UnauthorizedError(ShortLinksError):
    """Raised when an administrative operation is attempted without authorization."""

    error_code = 'UNAUTHORIZED'


class ConfigurationError(ShortLinksError):
    """Base exception for all configuration errors."""

    error_code = 'CONFIGURATION_ERROR'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'MISSING_ENVIRONMENT_VARIABLE'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'BAD_CONFIGURATION'


class InfrastructureError(ShortLinksError):
    """Base exception for all infrastructure (AWS) errors."""

    error_code = 'INFRASTRUCTURE_ERROR'


class AppConfigError(InfrastructureError):
    """Raised when AppConfig responds with erroneous data."""

    error_code = 'APPCONFIG_ERROR'
