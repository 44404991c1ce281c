"""Shortcode uniqueness resolution

The resolver's existence checks are an optimization only: they are point
reads without locking, so two concurrent creators can both see a code as
free. The data store's insert-if-absent (ShortURLBaseDAO.insert) is the
actual uniqueness guarantee.

Example:
    >>> resolver = UniquenessResolver(short_url_dao)
    >>> resolver.resolve_unique_code()
    'q7FemO'
    >>> resolver.reserve_custom_code('promo2025')
"""

import logging
from collections.abc import Callable

from linkshortener.constants import Defaults
from linkshortener.dao.base import ShortURLBaseDAO
from linkshortener.dao.exceptions import DataStoreError
from linkshortener.exceptions import (
    ConfigurationError,
    DuplicateShortcodeError,
    GenerationExhaustedError,
    InvalidShortcodeFormatError,
)
from linkshortener.utils.shortener import generate_shortcode
from linkshortener.utils.validators import validate_shortcode


logger = logging.getLogger(__name__)


def _require_positive_int(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigurationError(f'{name} must be a positive integer (given value: {value!r}).')


class UniquenessResolver:
    """Check shortcodes against the data store and find free ones.

    Attributes:
        short_url_dao (ShortURLBaseDAO):
            Data store holding the existing short URLs.
        length (int):
            Length of generated candidates.
        max_attempts (int):
            Default attempt budget of resolve_unique_code().
        generator (Callable[[int], str]):
            Candidate generator, generate_shortcode() by default.
    """

    def __init__(
        self,
        short_url_dao: ShortURLBaseDAO,
        length: int = Defaults.SHORTCODE_LENGTH,
        max_attempts: int = Defaults.MAX_GENERATION_ATTEMPTS,
        generator: Callable[[int], str] = generate_shortcode,
    ):
        _require_positive_int('max_attempts', max_attempts)
        _require_positive_int('length', length)

        self.short_url_dao = short_url_dao
        self.length = length
        self.max_attempts = max_attempts
        self.generator = generator

    def is_unique(self, shortcode: str) -> bool:
        """True iff no record with exactly this shortcode exists.

        Raises:
            DataStoreError: if the data store can't be queried.
        """
        return not self.short_url_dao.exists(shortcode)

    def resolve_unique_code(self, max_attempts: int | None = None) -> str:
        """Generate candidates until one is free.

        A candidate whose existence check fails with a DataStoreError counts
        as a spent attempt, so an unreachable data store exhausts the budget
        instead of looping.

        Args:
            max_attempts (int | None):
                Attempt budget. Defaults to self.max_attempts.

        Returns:
            str: a shortcode not present in the data store at check time.

        Raises:
            GenerationExhaustedError: after max_attempts consecutive failures.
            ConfigurationError: if max_attempts is not a positive integer.
        """
        if max_attempts is None:
            max_attempts = self.max_attempts
        _require_positive_int('max_attempts', max_attempts)

        for attempt in range(1, max_attempts + 1):
            candidate = self.generator(self.length)
            try:
                if self.is_unique(candidate):
                    return candidate
            except DataStoreError:
                logger.warning(
                    'Uniqueness check failed for candidate shortcode.',
                    exc_info=True,
                    extra={'shortcode': candidate, 'attempt': attempt},
                )
            else:
                logger.debug('Candidate shortcode collided.', extra={'shortcode': candidate, 'attempt': attempt})

        logger.error('Failed to generate unique shortcode after %s attempts.', max_attempts)
        raise GenerationExhaustedError(f'Failed to generate unique shortcode after {max_attempts} attempts.')

    def reserve_custom_code(self, shortcode: str) -> None:
        """Check a user-supplied shortcode is well-formed and free.

        Raises:
            InvalidShortcodeFormatError: if shortcode is not 3-20 alphanumeric characters.
            DuplicateShortcodeError: if shortcode is already taken.
            DataStoreError: if the data store can't be queried.
        """
        if not validate_shortcode(shortcode):
            raise InvalidShortcodeFormatError('Shortcode must be 3-20 characters long and contain only letters and numbers')
        if not self.is_unique(shortcode):
            raise DuplicateShortcodeError(f"Shortcode '{shortcode}' is already in use.")
