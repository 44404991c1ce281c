"""Read-side analytics over short URLs and their click events.

Every call recomputes its result from the data store. Nothing is cached.
"""

import logging
from datetime import datetime, UTC

from linkshortener.dao.base import ShortURLBaseDAO, ClickBaseDAO
from linkshortener.models import ShortURLStatsModel, ShortURLSummaryModel


logger = logging.getLogger(__name__)


class AnalyticsReader:
    """Compute per-shortcode statistics and the all-shortcodes summary.

    Args:
        short_url_dao (ShortURLBaseDAO): short URL records.
        click_dao (ClickBaseDAO): click events.
        base_url (str): public base URL used to render short links.
    """

    def __init__(self, short_url_dao: ShortURLBaseDAO, click_dao: ClickBaseDAO, base_url: str):
        self.short_url_dao = short_url_dao
        self.click_dao = click_dao
        self.base_url = base_url.rstrip('/')

    def short_link(self, shortcode: str) -> str:
        return f'{self.base_url}/{shortcode}'

    def statistics(self, shortcode: str) -> ShortURLStatsModel:
        """Short URL metadata, click count, clicks (most recent first) and expiry status.

        Raises:
            ShortURLNotFoundError: if the shortcode is unknown.
            DataStoreError: if the data store can't be queried.
        """
        short_url = self.short_url_dao.get(shortcode=shortcode)
        clicks = self.click_dao.get(shortcode=shortcode)
        # Most recent first, whatever order the engine returned
        clicks = sorted(clicks, key=lambda click: click.clicked_at, reverse=True)

        return ShortURLStatsModel(
            short_url=short_url,
            clicks=tuple(clicks),
            is_expired=short_url.is_expired(),
        )

    def list_all(self) -> list[ShortURLSummaryModel]:
        """One summary per short URL, newest first, with a grouped click count."""
        now = datetime.now(UTC)
        short_urls = self.short_url_dao.all()
        totals = self.click_dao.counts([short_url.shortcode for short_url in short_urls])

        logger.debug('Computed summary of %s short URLs.', len(short_urls))
        return [
            ShortURLSummaryModel(
                short_url=short_url,
                total_clicks=totals.get(short_url.shortcode, 0),
                is_expired=short_url.is_expired(now),
                short_link=self.short_link(short_url.shortcode),
            )
            for short_url in short_urls
        ]
