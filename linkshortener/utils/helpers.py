"""Helper utilities for AWS lambda functions.

Functions:
    base_url() -> str
        Extract correct public base URL from API Gateway event
    isoformat() -> str
        Render a datetime as an ISO-8601 UTC string with millisecond precision
    parse_isoformat() -> datetime
        Parse a string produced by isoformat() back into an aware datetime
    header() -> str | None
        Case-insensitive request header lookup
    client_ip() -> str
        Best-effort client IP address of the request
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler) -> Callable
        Decorator: Convert unexpected handler exceptions into a generic 500 response

Example:
    Typical usage inside a Lambda handler:

        >>> from linkshortener.utils.helpers import base_url
        >>> event = {
        ...     "requestContext": {
        ...         "domainName": "abc123.execute-api.us-east-1.amazonaws.com",
        ...         "stage": "Prod"
        ...     }
        ... }
        >>> base_url(event)
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'

        >>> base_url({})
        'http://localhost:3000'
"""

import os
import logging
import functools
from datetime import datetime, UTC
from typing import Any
from collections.abc import Callable

from linkshortener.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from linkshortener.utils.runtime import running_locally
from linkshortener.utils.responses import response_500


logger = logging.getLogger(__name__)


def base_url(event: dict[str, Any]) -> str:
    """Extract public base URL from API Gateway event

    Works with both custom and default AWS API Gateway domains.
    If a custom domain is configured, the stage name is omitted.
    If using the default AWS execute-api domain, the stage name is included.

    Args:
        event (dict): API Gateway event object passed to Lambda handler

    Returns:
        str: Base URL, e.g.:
             - "https://sho.rt"
             - "https://abc123.execute-api.us-east-1.amazonaws.com/Prod"
    """
    request_context = event.get('requestContext', {})
    domain = request_context.get('domainName', '')
    stage = request_context.get('stage', '')

    if domain and 'execute-api' not in domain:
        # If the domain is a custom domain (no execute-api), skip stage
        return f'https://{domain}'
    elif domain:
        # Otherwise include the stage (for AWS default domains)
        return f'https://{domain}/{stage}'
    else:
        # Fallback: local invocation (SAM CLI, tests, etc.)
        return 'http://localhost:3000'


def isoformat(dt: datetime) -> str:
    """Render a datetime as UTC with millisecond precision and a trailing Z.

    Example:
        >>> isoformat(datetime(2025, 10, 15, 12, 0, tzinfo=UTC))
        '2025-10-15T12:00:00.000Z'
    """
    # fmt: off
    return dt.astimezone(UTC) \
             .isoformat(timespec='milliseconds') \
             .replace('+00:00', 'Z')
    # fmt: on


def parse_isoformat(value: str) -> datetime:
    """Parse an ISO-8601 string into an aware UTC datetime.

    Naive timestamps are assumed to be UTC.
    """
    dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
    return dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt.astimezone(UTC)


def header(event: dict[str, Any], name: str) -> str | None:
    """Case-insensitive lookup of a request header in an API Gateway event."""
    headers = event.get('headers') or {}
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value or None
    return None


def client_ip(event: dict[str, Any]) -> str:
    """Best-effort client IP extraction

    Prefers the first hop of X-Forwarded-For, then the API Gateway source IP.

    Returns:
        str: client IP address, 'unknown' when unavailable.
    """
    forwarded_for = header(event, 'X-Forwarded-For')
    if forwarded_for:
        return forwarded_for.split(',')[0].strip()

    source_ip = event.get('requestContext', {}).get('identity', {}).get('sourceIp')
    return source_ip or 'unknown'


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        KeyError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('AWS_ACCESS_KEY_ID', 'AWS_SECRET_ACCESS_KEY')
        ... def my_function():
        ...     pass
        >>> my_function()
        KeyError: Missing required environment variables: 'AWS_ACCESS_KEY_ID', 'AWS_SECRET_ACCESS_KEY'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise KeyError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with a generic 500 when a Lambda handler blows up

    Running locally, the original exception is re-raised to ease debugging.
    Nothing about the failure is leaked to the client.
    """

    @functools.wraps(handler)
    def wrapper(event, context, *args, **kwargs):
        try:
            return handler(event, context, *args, **kwargs)
        except Exception:
            logger.exception('Unhandled exception in lambda handler. Responding with 500.')
            if running_locally():
                raise
            return response_500(
                message='An unexpected error occurred. Please try again.',
                error_code=UNKNOWN_INTERNAL_SERVER_ERROR,
            )

    return wrapper
