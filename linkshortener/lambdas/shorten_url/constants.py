# Error codes & log events
MISSING_URL = 'MISSING_URL'
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
INVALID_URL_FORMAT = 'INVALID_URL_FORMAT'
INVALID_VALIDITY_PERIOD = 'INVALID_VALIDITY_PERIOD'
INVALID_SHORTCODE_FORMAT = 'INVALID_FORMAT'
DUPLICATE_SHORTCODE = 'DUPLICATE_CODE'
GENERATION_EXHAUSTED = 'GENERATION_EXHAUSTED'
PERSISTENCE_ERROR = 'PERSISTENCE_ERROR'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
