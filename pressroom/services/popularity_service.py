"""
Popularity service - reads the ranking straight from the cache.

The durable store is never consulted, so scores reflect every increment
the cache has seen and may drift from ``likes_count + views_count``.
"""
from pressroom.config import settings
from pressroom.ranking import RankingCache


async def get_popular(
    ranking: RankingCache, limit: int = settings.POPULAR_ARTICLES_LIMIT
) -> list[dict]:
    """Return the top *limit* articles as ``{"id", "score"}`` dicts, highest score first."""
    return [
        {"id": article_id, "score": score}
        for article_id, score in await ranking.top(limit)
    ]
