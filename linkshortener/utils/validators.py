"""Input validation for shorten requests.

Pure functions, safe to call concurrently.

Functions:
    validate_url(url) -> bool
    validate_shortcode(shortcode) -> bool
    validate_validity_period(raw) -> int
"""

import re
from typing import Any
from urllib.parse import urlparse

import validators

from linkshortener.constants import Limits
from linkshortener.exceptions import InvalidValidityPeriodError, ValidityError


ALLOWED_SCHEMES = frozenset({'http', 'https'})
SHORTCODE_PATTERN = re.compile(rf'^[A-Za-z0-9]{{{Limits.MIN_SHORTCODE_LENGTH},{Limits.MAX_SHORTCODE_LENGTH}}}$')
INTEGER_PATTERN = re.compile(r'^[+-]?\d+$')


def validate_url(url: Any) -> bool:
    """Check that url is an absolute http(s) URL with an explicit scheme.

    Syntax only: no DNS resolution, no network access.

    Example:
        >>> validate_url('https://example.com/page')
        True
        >>> validate_url('example.com/page')
        False
        >>> validate_url('ftp://example.com/file')
        False
    """
    if not isinstance(url, str) or not url:
        return False
    if urlparse(url).scheme.lower() not in ALLOWED_SCHEMES:
        return False
    # validators.url() returns a falsy ValidationError instead of raising
    return bool(validators.url(url))


def validate_shortcode(shortcode: Any) -> bool:
    """True iff shortcode is 3-20 alphanumeric characters."""
    return isinstance(shortcode, str) and SHORTCODE_PATTERN.fullmatch(shortcode) is not None


def validate_validity_period(raw: Any) -> int:
    """Parse a validity period in minutes and check its bounds.

    Args:
        raw (Any):
            int, integral float or a string holding a base-10 integer.

    Returns:
        int: validity period in minutes, within [1, 10080].

    Raises:
        InvalidValidityPeriodError:
            reason NOT_A_NUMBER if raw can't be parsed,
            reason TOO_SHORT if below 1 minute,
            reason TOO_LONG if above 10080 minutes (1 week).

    Example:
        >>> validate_validity_period('60')
        60
        >>> validate_validity_period(0)
        Traceback (most recent call last):
            ...
        linkshortener.exceptions.InvalidValidityPeriodError: Validity must be at least 1 minute
    """
    minutes = _parse_minutes(raw)
    if minutes is None:
        raise InvalidValidityPeriodError(ValidityError.NOT_A_NUMBER)
    if minutes < Limits.MIN_VALIDITY_MINUTES:
        raise InvalidValidityPeriodError(ValidityError.TOO_SHORT)
    if minutes > Limits.MAX_VALIDITY_MINUTES:
        raise InvalidValidityPeriodError(ValidityError.TOO_LONG)
    return minutes


def _parse_minutes(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    if isinstance(raw, str) and INTEGER_PATTERN.fullmatch(raw.strip()):
        return int(raw.strip())
    return None
