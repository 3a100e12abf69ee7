# Error codes
LINK_NOT_FOUND = 'LINK_NOT_FOUND'
LINK_EXPIRED = 'LINK_EXPIRED'
DATA_STORE_ERROR = 'DATA_STORE_ERROR'

# Events
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
