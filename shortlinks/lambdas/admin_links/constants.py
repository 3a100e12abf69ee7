from shortlinks.exceptions import UnauthorizedError


# Error codes
UNAUTHORIZED = UnauthorizedError.error_code
METHOD_NOT_ALLOWED = 'METHOD_NOT_ALLOWED'
INVALID_LINK_ID = 'INVALID_LINK_ID'
INVALID_JSON = 'INVALID_JSON'
INVALID_EXPIRES_AT = 'INVALID_EXPIRES_AT'
DATA_STORE_ERROR = 'DATA_STORE_ERROR'

# Events
LIST_SUCCESS = 'LIST_SUCCESS'
UPDATE_EXPIRY_SUCCESS = 'UPDATE_EXPIRY_SUCCESS'
DELETE_SUCCESS = 'DELETE_SUCCESS'
