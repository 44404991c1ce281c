"""In-memory data stores for service-level tests.

Both DAOs honour the base DAO contracts, including the atomic
insert-if-absent of ShortURLBaseDAO.insert(), so that the services can be
exercised end to end (and concurrently) without Redis.
"""

import threading
from collections import defaultdict

import pytest

from linkshortener.dao.base import ShortURLBaseDAO, ClickBaseDAO
from linkshortener.dao.exceptions import ShortURLAlreadyExistsError, ShortURLNotFoundError


class InMemoryShortURLDAO(ShortURLBaseDAO):
    def __init__(self):
        self.records = {}
        self.lock = threading.Lock()

    def insert(self, short_url, **kwargs):
        with self.lock:
            if short_url.shortcode in self.records:
                raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.")
            self.records[short_url.shortcode] = short_url
        return self

    def get(self, shortcode, **kwargs):
        try:
            return self.records[shortcode]
        except KeyError:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.") from None

    def exists(self, shortcode, **kwargs):
        return shortcode in self.records

    def all(self, **kwargs):
        return sorted(self.records.values(), key=lambda short_url: short_url.created_at, reverse=True)


class InMemoryClickDAO(ClickBaseDAO):
    def __init__(self):
        self.clicks = defaultdict(list)
        self.lock = threading.Lock()

    def insert(self, click, **kwargs):
        with self.lock:
            self.clicks[click.shortcode].append(click)
        return click

    def get(self, shortcode, **kwargs):
        return sorted(self.clicks[shortcode], key=lambda click: click.clicked_at, reverse=True)

    def counts(self, shortcodes, **kwargs):
        return {shortcode: len(self.clicks[shortcode]) for shortcode in shortcodes}


@pytest.fixture
def short_url_dao():
    return InMemoryShortURLDAO()


@pytest.fixture
def click_dao():
    return InMemoryClickDAO()


@pytest.fixture
def base_url():
    return 'https://sho.rt'
