import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from pressroom.config import settings
from pressroom.errors import CacheError
from pressroom.middleware import count_cache_command

logger = logging.getLogger(__name__)


class RankingCache:
    """
    Popularity ranking backed by a single Redis sorted set.

    Members are article ids, scores are accumulated engagement counts.
    Unlike a read-through cache this is the only place the ranking lives,
    so failures are not swallowed: every Redis error is re-raised as
    ``CacheError`` and the request that triggered it fails.
    """

    def __init__(
        self,
        client: redis.Redis | None = None,
        key: str = settings.POPULAR_ARTICLES_KEY,
    ) -> None:
        self._redis: redis.Redis | None = client
        self.key = key

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self, url: str = settings.REDIS_URL) -> None:
        """Open the connection pool.  Called once at application startup."""
        self._redis = redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        # Ping to surface mis-configuration early; requests still fail loudly later.
        try:
            await self._redis.ping()
            logger.info("Ranking cache connected: %s", url)
        except RedisError as exc:
            logger.warning("Ranking cache ping failed: %s", exc)

    async def disconnect(self) -> None:
        """Close the connection pool.  Called once at application shutdown."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    @property
    def connected(self) -> bool:
        return self._redis is not None

    def _client(self) -> redis.Redis:
        if self._redis is None:
            raise CacheError("Ranking cache is not connected")
        count_cache_command()
        return self._redis

    # ------------------------------------------------------------------
    # Sorted-set operations
    # ------------------------------------------------------------------

    async def increment(self, article_id: int | str, amount: int = 1) -> int:
        """Atomically add *amount* to the article's score; return the new score."""
        client = self._client()
        try:
            score = await client.zincrby(self.key, amount, str(article_id))
        except RedisError as exc:
            raise CacheError(str(exc)) from exc
        return int(score)

    async def top(self, limit: int = settings.POPULAR_ARTICLES_LIMIT) -> list[tuple[str, int]]:
        """Return up to *limit* ``(article_id, score)`` pairs, highest first."""
        if limit <= 0:
            return []
        client = self._client()
        try:
            rows = await client.zrevrange(self.key, 0, limit - 1, withscores=True)
        except RedisError as exc:
            raise CacheError(str(exc)) from exc
        return [(member, int(score)) for member, score in rows]

    async def score(self, article_id: int | str) -> int | None:
        """Return the article's current score, or None if it is not ranked."""
        client = self._client()
        try:
            value = await client.zscore(self.key, str(article_id))
        except RedisError as exc:
            raise CacheError(str(exc)) from exc
        return None if value is None else int(value)

    async def size(self) -> int:
        """Number of ranked articles."""
        client = self._client()
        try:
            return await client.zcard(self.key)
        except RedisError as exc:
            raise CacheError(str(exc)) from exc

    async def clear(self) -> None:
        """Drop the whole ranking."""
        client = self._client()
        try:
            await client.delete(self.key)
        except RedisError as exc:
            raise CacheError(str(exc)) from exc
