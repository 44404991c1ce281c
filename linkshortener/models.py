"""Data models for short URL mappings, click events and analytics views.

Every model is an immutable dataclass. `to_dict()` renders the JSON shape
served by the HTTP handlers.

Example:
    >>> from datetime import datetime, UTC
    >>> url = ShortURLModel(
    ...     target='https://example.com/article/123',
    ...     shortcode='abc123',
    ...     created_at=datetime(2025, 10, 15, 12, 0, tzinfo=UTC),
    ...     validity_minutes=60,
    ... )
    >>> url.expires_at
    datetime.datetime(2025, 10, 15, 13, 0, tzinfo=datetime.timezone.utc)
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, UTC
from typing import Any

from linkshortener.utils.helpers import isoformat


DIRECT_REFERRER = 'Direct'
UNKNOWN_IP_ADDRESS = 'unknown'


@dataclass(frozen=True)
class ShortURLModel:
    """Represent a shortened URL mapping.

    Attributes:
        target (str):
            The original long URL that the shortcode redirects to.
        shortcode (str):
            The unique short identifier representing the shortened URL.
        created_at (datetime):
            Moment the mapping was created (UTC).
        validity_minutes (int):
            Minutes from creation until the mapping stops redirecting.

    NOTE:
        `expires_at` is always derived from `created_at` + `validity_minutes`
        and never stored on its own.
    """

    target: str
    shortcode: str
    created_at: datetime
    validity_minutes: int

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(minutes=self.validity_minutes)

    def is_expired(self, now: datetime | None = None) -> bool:
        """Active while now < expires_at, expired from expires_at onwards."""
        now = now or datetime.now(UTC)
        return now >= self.expires_at


@dataclass(frozen=True)
class ClickEventModel:
    # fmt: off
    shortcode: str                              # Weak reference to ShortURLModel.shortcode
    clicked_at: datetime                        # Moment of the redirect (UTC)
    referrer: str | None = None                 # Referer header, None for direct traffic
    ip_address: str = UNKNOWN_IP_ADDRESS        # Best-effort client address
    user_agent: str | None = None               # User-Agent header
    # fmt: on

    def to_dict(self) -> dict[str, Any]:
        return {
            'timestamp': isoformat(self.clicked_at),
            'referrer': self.referrer or DIRECT_REFERRER,
            'ipAddress': self.ip_address,
            'userAgent': self.user_agent,
        }


@dataclass(frozen=True)
class CreatedShortURL:
    """A freshly persisted short URL together with its public short link."""

    short_url: ShortURLModel
    short_link: str

    def to_dict(self) -> dict[str, Any]:
        return {
            'shortLink': self.short_link,
            'expiry': isoformat(self.short_url.expires_at),
            'shortcode': self.short_url.shortcode,
            'originalUrl': self.short_url.target,
            'validityMinutes': self.short_url.validity_minutes,
        }


@dataclass(frozen=True)
class ShortURLStatsModel:
    """Detailed per-shortcode statistics (short URL metadata + full click list).

    Attributes:
        short_url (ShortURLModel):
            The short URL mapping the statistics belong to.
        clicks (tuple[ClickEventModel, ...]):
            Click events, most recent first.
        is_expired (bool):
            Expiry status computed at read time.
    """

    short_url: ShortURLModel
    clicks: tuple[ClickEventModel, ...] = field(default_factory=tuple)
    is_expired: bool = False

    @property
    def total_clicks(self) -> int:
        return len(self.clicks)

    def to_dict(self) -> dict[str, Any]:
        return {
            'shortcode': self.short_url.shortcode,
            'originalUrl': self.short_url.target,
            'createdAt': isoformat(self.short_url.created_at),
            'expiresAt': isoformat(self.short_url.expires_at),
            'validityMinutes': self.short_url.validity_minutes,
            'totalClicks': self.total_clicks,
            'isExpired': self.is_expired,
            'clickDetails': [click.to_dict() for click in self.clicks],
        }


@dataclass(frozen=True)
class ShortURLSummaryModel:
    """Lightweight entry of the all-shortcodes listing (aggregate count only)."""

    short_url: ShortURLModel
    total_clicks: int
    is_expired: bool
    short_link: str

    def to_dict(self) -> dict[str, Any]:
        # Keys follow the column names served by the original listing endpoint
        return {
            'shortcode': self.short_url.shortcode,
            'original_url': self.short_url.target,
            'created_at': isoformat(self.short_url.created_at),
            'expires_at': isoformat(self.short_url.expires_at),
            'validity_minutes': self.short_url.validity_minutes,
            'total_clicks': self.total_clicks,
            'isExpired': self.is_expired,
            'shortLink': self.short_link,
        }
