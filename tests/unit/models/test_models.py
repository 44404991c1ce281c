"""Unit tests for the dataclasses in models.py.

Test coverage includes:

1. ShortURLModel
   - Derived expiry and the expiry boundary.
   - Equality and immutability.

2. ClickEventModel
   - Defaults and JSON rendering.

3. Rendered views
   - CreatedShortURL, ShortURLStatsModel and ShortURLSummaryModel.
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, UTC

import pytest
from freezegun import freeze_time

from linkshortener.models import (
    ClickEventModel,
    CreatedShortURL,
    ShortURLModel,
    ShortURLStatsModel,
    ShortURLSummaryModel,
)


CREATED_AT = datetime(2025, 10, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def short_url():
    return ShortURLModel(
        target='https://example.com/article/123',
        shortcode='abc123',
        created_at=CREATED_AT,
        validity_minutes=30,
    )


# -------------------------------------------------
# 1. ShortURLModel
# -------------------------------------------------


def test_expires_at_is_derived(short_url):
    assert short_url.expires_at == datetime(2025, 10, 15, 12, 30, tzinfo=UTC)


@pytest.mark.parametrize(
    'offset, expected',
    [
        (timedelta(minutes=29, seconds=59, microseconds=999000), False),
        (timedelta(minutes=30), True),
        (timedelta(days=365), True),
        (timedelta(0), False),
    ],
)
def test_is_expired_boundary(short_url, offset, expected):
    """Active while now < expires_at, expired from expires_at onwards."""
    assert short_url.is_expired(CREATED_AT + offset) is expected


@freeze_time('2025-10-15 12:30:00')
def test_is_expired_defaults_to_now(short_url):
    assert short_url.is_expired() is True


def test_short_url_model_equality(short_url):
    assert short_url == ShortURLModel('https://example.com/article/123', 'abc123', CREATED_AT, 30)
    assert short_url != ShortURLModel('https://example.com/article/123', 'ABC123', CREATED_AT, 30)


@pytest.mark.parametrize(
    'field, new_value',
    [
        ('target', 'https://example.com/article/456'),
        ('shortcode', 'def456'),
        ('created_at', datetime(2027, 1, 1, tzinfo=UTC)),
        ('validity_minutes', 60),
    ],
)
def test_short_url_model_immutability(short_url, field, new_value):
    """Attempting to modify fields should raise FrozenInstanceError."""
    with pytest.raises(FrozenInstanceError):
        setattr(short_url, field, new_value)


# -------------------------------------------------
# 2. ClickEventModel
# -------------------------------------------------


def test_click_event_defaults():
    click = ClickEventModel(shortcode='abc123', clicked_at=CREATED_AT)

    assert click.referrer is None
    assert click.ip_address == 'unknown'
    assert click.user_agent is None


def test_click_event_to_dict():
    click = ClickEventModel(
        shortcode='abc123',
        clicked_at=CREATED_AT,
        referrer='https://ref.example.com',
        ip_address='203.0.113.7',
        user_agent='pytest/8.0',
    )

    assert click.to_dict() == {
        'timestamp': '2025-10-15T12:00:00.000Z',
        'referrer': 'https://ref.example.com',
        'ipAddress': '203.0.113.7',
        'userAgent': 'pytest/8.0',
    }


def test_click_event_without_referrer_is_direct():
    assert ClickEventModel(shortcode='abc123', clicked_at=CREATED_AT).to_dict()['referrer'] == 'Direct'


# -------------------------------------------------
# 3. Rendered views
# -------------------------------------------------


def test_created_short_url_to_dict(short_url):
    assert CreatedShortURL(short_url=short_url, short_link='https://sho.rt/abc123').to_dict() == {
        'shortLink': 'https://sho.rt/abc123',
        'expiry': '2025-10-15T12:30:00.000Z',
        'shortcode': 'abc123',
        'originalUrl': 'https://example.com/article/123',
        'validityMinutes': 30,
    }


def test_stats_total_clicks_matches_click_list(short_url):
    clicks = tuple(ClickEventModel(shortcode='abc123', clicked_at=CREATED_AT + timedelta(seconds=i)) for i in range(3))
    stats = ShortURLStatsModel(short_url=short_url, clicks=clicks)

    assert stats.total_clicks == 3
    assert stats.to_dict()['totalClicks'] == len(stats.to_dict()['clickDetails'])


def test_stats_defaults(short_url):
    stats = ShortURLStatsModel(short_url=short_url)

    assert stats.clicks == ()
    assert stats.is_expired is False


def test_summary_to_dict(short_url):
    summary = ShortURLSummaryModel(short_url=short_url, total_clicks=4, is_expired=True, short_link='https://sho.rt/abc123')

    assert summary.to_dict() == {
        'shortcode': 'abc123',
        'original_url': 'https://example.com/article/123',
        'created_at': '2025-10-15T12:00:00.000Z',
        'expires_at': '2025-10-15T12:30:00.000Z',
        'validity_minutes': 30,
        'total_clicks': 4,
        'isExpired': True,
        'shortLink': 'https://sho.rt/abc123',
    }
