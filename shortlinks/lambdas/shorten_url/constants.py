# Error codes
# NOTE: allocation failures respond with their exception's error_code
INVALID_JSON = 'INVALID_JSON'
MISSING_URL = 'MISSING_URL'
INVALID_EXPIRES_AT = 'INVALID_EXPIRES_AT'
DATA_STORE_ERROR = 'DATA_STORE_ERROR'

# Events
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
