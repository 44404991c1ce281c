# Error codes & log events
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
STATS_SUCCESS = 'STATS_SUCCESS'
