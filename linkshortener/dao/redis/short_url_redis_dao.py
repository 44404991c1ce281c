"""Data Access Object (DAO) implementation for managing shortened URLs in Redis

This module provides a Redis-based implementation of ShortURLBaseDAO for
insert-if-absent writes and reads of ShortURLModel instances.

Storage layout (see RedisKeySchema):
    <prefix>:links:<shortcode>      STRING  JSON {target, createdAt, validityMinutes}
    <prefix>:links:index            ZSET    shortcode scored by creation epoch

Records carry no Redis TTL. Expiry is computed from createdAt and
validityMinutes, and expired records remain queryable for analytics.

Classes:
    ShortURLRedisDAO:
        DAO for storing and retrieving ShortURLModel in a Redis datastore.

Example:
    >>> from linkshortener.models import ShortURLModel
    >>> from linkshortener.dao.redis import ShortURLRedisDAO

    >>> dao = ShortURLRedisDAO(prefix="app:dev")

    >>> short_url = ShortURLModel(
    ...     target="https://example.com/page",
    ...     shortcode="abc123",
    ...     created_at=datetime.now(UTC),
    ...     validity_minutes=30,
    ... )
    >>> dao.insert(short_url)
    <ShortURLRedisDAO>

    >>> dao.get("abc123").target
    'https://example.com/page'
"""

import json

from beartype import beartype

from linkshortener.models import ShortURLModel
from linkshortener.dao.base import ShortURLBaseDAO
from linkshortener.dao.redis.mixins import RedisClientMixin
from linkshortener.dao.redis.helpers import handle_redis_connection_error
from linkshortener.dao.exceptions import ShortURLAlreadyExistsError, ShortURLNotFoundError
from linkshortener.utils.helpers import isoformat, parse_isoformat


class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short URL mappings

    This class implements the ShortURLBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(short_url: ShortURLModel, **kwargs) -> ShortURLRedisDAO:
            Store a short URL mapping if its shortcode is free (SET NX).
            Raises ShortURLAlreadyExistsError when a URL with the same shortcode exists.
            Raises DataStoreError on connectivity issues with Redis.

        get(shortcode: str, **kwargs) -> ShortURLModel:
            Retrieve a short URL mapping by shortcode.
            Raises ShortURLNotFoundError when the shortcode doesn't exist.
            Raises DataStoreError on connectivity issues with Redis.

        exists(shortcode: str, **kwargs) -> bool:
            Check whether the shortcode is taken.
            Raises DataStoreError on connectivity issues with Redis.

        all(**kwargs) -> list[ShortURLModel]:
            Retrieve all short URL mappings, newest first.
            Raises DataStoreError on connectivity issues with Redis.
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> 'ShortURLRedisDAO':
        """Insert a short URL mapping into Redis

        The record write and its creation index entry are performed in one
        Redis transaction. The record is written with SET NX, which makes
        Redis the source of truth for shortcode uniqueness.

        Args:
            short_url (ShortURLModel):
                ShortURLModel instance representing the shortened URL mapping.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLRedisDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a short URL with the same shortcode already exists.
            DataStoreError:
                If a Redis connection issue occurs during the transaction.
        """
        link_key = self.keys.link_key(short_url.shortcode)
        payload = json.dumps(
            {
                'target': short_url.target,
                'createdAt': isoformat(short_url.created_at),
                'validityMinutes': short_url.validity_minutes,
            }
        )

        # NOTE: ZADD NX never moves an existing index entry, so when SET NX
        #       loses the race against a concurrent creator, the transaction
        #       leaves the winner's record and its index score untouched:
        #
        #       (lambda 1): SET <app>:links:<shortcode> <payload 1> NX  => OK
        #       (lambda 2): SET <app>:links:<shortcode> <payload 2> NX  => nil
        #       (lambda 2): ZADD <app>:links:index NX <ts 2> <shortcode> => 0 (no-op)
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(link_key, payload, nx=True)
            pipe.zadd(self.keys.links_index_key(), {short_url.shortcode: short_url.created_at.timestamp()}, nx=True)
            created, _ = pipe.execute()

        if not created:
            raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.")
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Retrieve a stored short URL mapping by shortcode

        Raises:
            ShortURLNotFoundError:
                If the short URL does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('abc123')
            ShortURLModel(target='https://example.com', shortcode='abc123', ...)
        """
        payload = self.redis.get(self.keys.link_key(shortcode))
        if payload is None:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")
        return self._deserialize(shortcode, payload)

    @handle_redis_connection_error
    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        return bool(self.redis.exists(self.keys.link_key(shortcode)))

    @handle_redis_connection_error
    def all(self, **kwargs) -> list[ShortURLModel]:
        """Retrieve all short URL mappings ordered by creation time, newest first

        Reads the creation index, then fetches the records in a single
        pipelined round trip.
        """
        shortcodes = self.redis.zrevrange(self.keys.links_index_key(), 0, -1)
        if not shortcodes:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for shortcode in shortcodes:
                pipe.get(self.keys.link_key(shortcode))
            payloads = pipe.execute()

        return [self._deserialize(shortcode, payload) for shortcode, payload in zip(shortcodes, payloads) if payload is not None]

    @staticmethod
    def _deserialize(shortcode: str, payload: str | bytes) -> ShortURLModel:
        record = json.loads(payload)
        return ShortURLModel(
            target=record['target'],
            shortcode=shortcode,
            created_at=parse_isoformat(record['createdAt']),
            validity_minutes=int(record['validityMinutes']),
        )
