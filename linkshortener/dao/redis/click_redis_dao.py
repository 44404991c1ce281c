"""Data Access Object (DAO) implementation for click events in Redis

Storage layout (see RedisKeySchema):
    <prefix>:links:<shortcode>:clicks   ZSET   JSON click payload scored by click epoch

Every payload carries a random id so that two identical clicks within the
same millisecond are kept as separate members.

Example:
    >>> dao = ClickRedisDAO(prefix="app:dev")
    >>> dao.insert(ClickEventModel(shortcode='abc123', clicked_at=datetime.now(UTC), ip_address='203.0.113.7'))
    >>> dao.counts(['abc123'])
    {'abc123': 1}
"""

import json
import uuid
from collections.abc import Iterable

from beartype import beartype

from linkshortener.models import ClickEventModel, UNKNOWN_IP_ADDRESS
from linkshortener.dao.base import ClickBaseDAO
from linkshortener.dao.redis.mixins import RedisClientMixin
from linkshortener.dao.redis.helpers import handle_redis_connection_error
from linkshortener.utils.helpers import isoformat, parse_isoformat


class ClickRedisDAO(RedisClientMixin, ClickBaseDAO):
    """Redis-based Data Access Object (DAO) for click events

    Methods:
        insert(click: ClickEventModel, **kwargs) -> ClickEventModel:
            Append a click event with a single ZADD.
        get(shortcode: str, **kwargs) -> list[ClickEventModel]:
            Click events of a shortcode, most recent first (ZREVRANGE).
        counts(shortcodes: Iterable[str], **kwargs) -> dict[str, int]:
            Pipelined ZCARD for many shortcodes.

    All methods raise DataStoreError on connectivity issues with Redis.
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, click: ClickEventModel, **kwargs) -> ClickEventModel:
        payload = json.dumps(
            {
                'id': uuid.uuid4().hex,
                'clickedAt': isoformat(click.clicked_at),
                'referrer': click.referrer,
                'ipAddress': click.ip_address,
                'userAgent': click.user_agent,
            }
        )
        self.redis.zadd(self.keys.link_clicks_key(click.shortcode), {payload: click.clicked_at.timestamp()})
        return click

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> list[ClickEventModel]:
        payloads = self.redis.zrevrange(self.keys.link_clicks_key(shortcode), 0, -1)
        return [self._deserialize(shortcode, payload) for payload in payloads]

    @handle_redis_connection_error
    def counts(self, shortcodes: Iterable[str], **kwargs) -> dict[str, int]:
        shortcodes = list(shortcodes)
        if not shortcodes:
            return {}

        with self.redis.pipeline(transaction=False) as pipe:
            for shortcode in shortcodes:
                pipe.zcard(self.keys.link_clicks_key(shortcode))
            totals = pipe.execute()

        return {shortcode: int(total) for shortcode, total in zip(shortcodes, totals)}

    @staticmethod
    def _deserialize(shortcode: str, payload: str | bytes) -> ClickEventModel:
        record = json.loads(payload)
        return ClickEventModel(
            shortcode=shortcode,
            clicked_at=parse_isoformat(record['clickedAt']),
            referrer=record.get('referrer'),
            ip_address=record.get('ipAddress') or UNKNOWN_IP_ADDRESS,
            user_agent=record.get('userAgent'),
        )
