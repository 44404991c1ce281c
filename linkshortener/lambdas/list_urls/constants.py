# Error codes & log events
CONFIGURATION_ERROR = 'CONFIGURATION_ERROR'
LIST_SUCCESS = 'LIST_SUCCESS'
