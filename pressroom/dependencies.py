from fastapi import Request

from pressroom.ranking import RankingCache


def get_ranking(request: Request) -> RankingCache:
    """
    FastAPI dependency returning the process-wide ranking cache.

    The cache is created and connected by the application lifespan and
    stored on ``app.state``; tests override this dependency with a cache
    bound to an in-memory Redis.

    Usage in a router::

        @router.get("/popular")
        async def popular(ranking: RankingCache = Depends(get_ranking)):
            ...
    """
    return request.app.state.ranking
