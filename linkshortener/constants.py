from enum import StrEnum


class Defaults:
    """Default values for shortcode generation and link lifetime."""

    SHORTCODE_LENGTH = 6  # 62**6 ~ 56.8 billion codes
    MAX_GENERATION_ATTEMPTS = 10
    VALIDITY_MINUTES = 30
    SERVICE_NAME = 'URL Shortener Backend'


class Limits:
    """Inclusive bounds for user-supplied values."""

    MIN_VALIDITY_MINUTES = 1
    MAX_VALIDITY_MINUTES = 10_080  # 1 week
    MIN_SHORTCODE_LENGTH = 3
    MAX_SHORTCODE_LENGTH = 20


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

    class LogSink(StrEnum):
        URL = 'LOG_SINK_URL'
        CLIENT_ID = 'LOG_SINK_CLIENT_ID'
        CLIENT_SECRET = 'LOG_SINK_CLIENT_SECRET'  # noqa: S105


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
