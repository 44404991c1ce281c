"""Application-specific exceptions.

Client input errors derive from `ValidationError` and are detected before any
datastore write. `GenerationExhaustedError` and `PersistenceError` are
server-side faults; their messages must not reach API clients verbatim.

Example:
    >>> from linkshortener.exceptions import InvalidValidityPeriodError, ValidityError
    >>> err = InvalidValidityPeriodError(ValidityError.TOO_LONG)
    >>> err.reason
    <ValidityError.TOO_LONG: 'too_long'>
    >>> str(err)
    'Validity cannot exceed 10080 minutes (1 week)'
"""

from datetime import datetime
from enum import StrEnum

from linkshortener.constants import Limits


class LinkShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:link_shortener_error'


class ConfigurationError(LinkShortenerError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:configuration_error'


class ValidationError(LinkShortenerError):
    """Base exception for rejected client input."""

    error_code = 'validation:validation_error'


class MissingUrlError(ValidationError):
    """Raised when a shorten request carries no URL."""

    error_code = 'validation:missing_url'


class InvalidUrlFormatError(ValidationError):
    """Raised when a URL is not an absolute http(s) URL."""

    error_code = 'validation:invalid_url_format'


class ValidityError(StrEnum):
    NOT_A_NUMBER = 'not_a_number'
    TOO_SHORT = 'too_short'
    TOO_LONG = 'too_long'


class InvalidValidityPeriodError(ValidationError):
    """Raised when a validity period is unparsable or out of bounds."""

    error_code = 'validation:invalid_validity_period'

    MESSAGES = {
        ValidityError.NOT_A_NUMBER: 'Validity must be a number',
        ValidityError.TOO_SHORT: f'Validity must be at least {Limits.MIN_VALIDITY_MINUTES} minute',
        ValidityError.TOO_LONG: f'Validity cannot exceed {Limits.MAX_VALIDITY_MINUTES} minutes (1 week)',
    }

    def __init__(self, reason: ValidityError):
        self.reason = reason
        super().__init__(self.MESSAGES[reason])


class InvalidShortcodeFormatError(ValidationError):
    """Raised when a custom shortcode is not 3-20 alphanumeric characters."""

    error_code = 'validation:invalid_shortcode_format'


class DuplicateShortcodeError(LinkShortenerError):
    """Raised when a custom shortcode is already taken."""

    error_code = 'shortener:duplicate_shortcode'


class GenerationExhaustedError(LinkShortenerError):
    """Raised when no unique shortcode was found within the attempt budget."""

    error_code = 'shortener:generation_exhausted'


class PersistenceError(LinkShortenerError):
    """Raised when a short URL record could not be written."""

    error_code = 'shortener:persistence_error'


class ShortURLExpiredError(LinkShortenerError):
    """Raised when a redirect targets a short URL past its expiry."""

    error_code = 'shortener:short_url_expired'

    def __init__(self, shortcode: str, expired_at: datetime):
        self.shortcode = shortcode
        self.expired_at = expired_at
        super().__init__(f"Short URL with code '{shortcode}' expired at {expired_at.isoformat()}.")
