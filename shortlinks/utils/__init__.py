from shortlinks.utils.config import app_env, app_name, project_root, app_prefix, load_config
from shortlinks.utils.helpers import base_url, get_short_url, require_environment, guarantee_500_response
from shortlinks.utils.validators import is_slug, is_reserved, validate_slug, normalize_destination
from shortlinks.utils.logging import initialize_logging


__all__ = [
    'app_env',
    'app_name',
    'app_prefix',
    'project_root',
    'load_config',
    'base_url',
    'get_short_url',
    'require_environment',
    'guarantee_500_response',
    'is_slug',
    'is_reserved',
    'validate_slug',
    'normalize_destination',
    'initialize_logging',
]
