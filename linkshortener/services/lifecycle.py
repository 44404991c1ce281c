"""Shortcode lifecycle management

A short URL is created exactly once and never updated. Its state is derived
from the wall clock:

    Active   while now <  expires_at
    Expired  once  now >= expires_at

Expired records are never deleted: they stop redirecting but stay available
to analytics.

Example:
    >>> manager = ShortcodeLifecycleManager(short_url_dao, click_dao, base_url='https://sho.rt')
    >>> created = manager.create('https://example.com', validity=60)
    >>> created.short_link
    'https://sho.rt/q7FemO'
    >>> manager.fetch_for_redirect('q7FemO').target
    'https://example.com'
"""

import logging
from datetime import datetime, UTC
from typing import Any

from linkshortener.constants import Defaults
from linkshortener.dao.base import ShortURLBaseDAO, ClickBaseDAO
from linkshortener.dao.exceptions import DAOError, DataStoreError, ShortURLAlreadyExistsError
from linkshortener.exceptions import (
    DuplicateShortcodeError,
    InvalidShortcodeFormatError,
    InvalidUrlFormatError,
    InvalidValidityPeriodError,
    MissingUrlError,
    PersistenceError,
    ShortURLExpiredError,
)
from linkshortener.models import (
    UNKNOWN_IP_ADDRESS,
    ClickEventModel,
    CreatedShortURL,
    ShortURLModel,
    ShortURLStatsModel,
)
from linkshortener.services.analytics import AnalyticsReader
from linkshortener.services.resolver import UniquenessResolver
from linkshortener.utils.validators import validate_url, validate_validity_period


logger = logging.getLogger(__name__)


class ShortcodeLifecycleManager:
    """Create short URLs, authorize redirects and record clicks.

    The data stores are injected; the manager holds no other shared state
    and is safe to use from concurrent requests.

    Args:
        short_url_dao (ShortURLBaseDAO): short URL records.
        click_dao (ClickBaseDAO): click events.
        base_url (str): public base URL used to render short links.
        resolver (UniquenessResolver | None): defaults to a resolver over short_url_dao.
        default_validity (int): validity in minutes when a request carries none.
    """

    def __init__(
        self,
        short_url_dao: ShortURLBaseDAO,
        click_dao: ClickBaseDAO,
        base_url: str,
        resolver: UniquenessResolver | None = None,
        default_validity: int = Defaults.VALIDITY_MINUTES,
    ):
        self.short_url_dao = short_url_dao
        self.click_dao = click_dao
        self.resolver = resolver or UniquenessResolver(short_url_dao)
        self.analytics = AnalyticsReader(short_url_dao, click_dao, base_url)
        self.default_validity = default_validity

    def short_link(self, shortcode: str) -> str:
        return self.analytics.short_link(shortcode)

    def create(self, url: Any, validity: Any = None, shortcode: str | None = None) -> CreatedShortURL:
        """Validate a shorten request and persist the new short URL.

        Args:
            url (Any):
                Long URL to shorten. Must be an absolute http(s) URL.
            validity (Any):
                Validity period in minutes, defaults to self.default_validity.
            shortcode (str | None):
                Optional custom shortcode. Empty strings count as absent.

        Returns:
            CreatedShortURL: the persisted record and its short link.

        Raises:
            MissingUrlError, InvalidUrlFormatError, InvalidValidityPeriodError,
            InvalidShortcodeFormatError:
                Rejected input. Nothing has been written.
            DuplicateShortcodeError:
                The custom shortcode is taken, including when a concurrent
                request claimed it between the check and the insert.
            GenerationExhaustedError:
                No free shortcode found within the attempt budget.
            PersistenceError:
                The record could not be written.
        """
        if url is None or (isinstance(url, str) and not url.strip()):
            logger.warning('URL shortening attempt without URL.')
            raise MissingUrlError('Please provide a valid URL to shorten')

        if not validate_url(url):
            logger.warning('Invalid URL format attempted: %s', url)
            raise InvalidUrlFormatError('Please provide a valid URL (including http:// or https://)')

        raw_validity = self.default_validity if validity is None else validity
        try:
            minutes = validate_validity_period(raw_validity)
        except InvalidValidityPeriodError:
            logger.warning('Invalid validity period: %s', raw_validity)
            raise

        custom = bool(shortcode)
        try:
            if custom:
                self.resolver.reserve_custom_code(shortcode)
            else:
                shortcode = self.resolver.resolve_unique_code()
        except DataStoreError as e:
            logger.exception('Data store failure while checking shortcode uniqueness.')
            raise PersistenceError('Could not check shortcode uniqueness.') from e
        except (InvalidShortcodeFormatError, DuplicateShortcodeError):
            logger.warning('Shortcode rejected: %s', shortcode, extra={'shortcode': shortcode})
            raise

        short_url = ShortURLModel(
            target=url,
            shortcode=shortcode,
            created_at=self._now(),
            validity_minutes=minutes,
        )

        try:
            self.short_url_dao.insert(short_url=short_url)
        except ShortURLAlreadyExistsError as e:
            # The pre-check lost a race against a concurrent creator
            if custom:
                logger.warning('Shortcode already exists: %s', shortcode, extra={'shortcode': shortcode})
                raise DuplicateShortcodeError(f"Shortcode '{shortcode}' is already in use.") from e
            logger.error('Generated shortcode collided at insert time.', extra={'shortcode': shortcode})
            raise PersistenceError(f"Generated shortcode '{shortcode}' collided at insert time.") from e
        except DAOError as e:
            logger.exception('Failed to persist short URL.', extra={'shortcode': shortcode})
            raise PersistenceError('Failed to persist short URL.') from e

        logger.info('URL shortened successfully: %s -> %s', url, shortcode, extra={'shortcode': shortcode})
        return CreatedShortURL(short_url=short_url, short_link=self.short_link(shortcode))

    def fetch_for_redirect(self, shortcode: str) -> ShortURLModel:
        """Return the short URL if it may still be redirected.

        Raises:
            ShortURLNotFoundError: if the shortcode is unknown.
            ShortURLExpiredError: if now >= expires_at, carrying expires_at.
            DataStoreError: if the data store can't be queried.
        """
        short_url = self.short_url_dao.get(shortcode=shortcode)
        if short_url.is_expired(self._now()):
            logger.info('Redirect attempted for expired shortcode: %s', shortcode, extra={'shortcode': shortcode})
            raise ShortURLExpiredError(shortcode, short_url.expires_at)
        return short_url

    def record_click(
        self,
        shortcode: str,
        referrer: str | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> ClickEventModel | None:
        """Record one click of an authorized redirect. Best-effort.

        A failure is logged and None is returned; the redirect proceeds.
        """
        click = ClickEventModel(
            shortcode=shortcode,
            clicked_at=self._now(),
            referrer=referrer or None,
            ip_address=ip_address or UNKNOWN_IP_ADDRESS,
            user_agent=user_agent or None,
        )
        try:
            return self.click_dao.insert(click=click)
        except Exception:
            logger.exception('Failed to record click.', extra={'shortcode': shortcode})
            return None

    def fetch_statistics(self, shortcode: str) -> ShortURLStatsModel:
        """See AnalyticsReader.statistics()."""
        return self.analytics.statistics(shortcode)

    @staticmethod
    def _now() -> datetime:
        # Millisecond precision, so that stored ISO-8601 timestamps round-trip exactly
        now = datetime.now(UTC)
        return now.replace(microsecond=now.microsecond // 1000 * 1000)
