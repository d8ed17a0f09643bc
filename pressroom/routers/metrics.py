from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pressroom.database import get_db
from pressroom.dependencies import get_ranking
from pressroom.errors import StoreError
from pressroom.models import Article, ArticleLike, ArticleView, Notification
from pressroom.ranking import RankingCache
from pressroom.schemas import MetricsResponse

router = APIRouter(prefix="/metrics", tags=["metrics"])

@router.get("", response_model=MetricsResponse)
async def get_metrics(
    db: AsyncSession = Depends(get_db),
    ranking: RankingCache = Depends(get_ranking),
):
    try:
        total_articles, likes_sum, views_sum = (
            await db.execute(
                select(
                    func.count(Article.id),
                    func.coalesce(func.sum(Article.likes_count), 0),
                    func.coalesce(func.sum(Article.views_count), 0),
                )
            )
        ).one()

        total_likes = (await db.execute(select(func.count()).select_from(ArticleLike))).scalar_one()

        total_views = (await db.execute(select(func.count()).select_from(ArticleView))).scalar_one()

        total_notifications = (
            await db.execute(select(func.count()).select_from(Notification))
        ).scalar_one()
    except SQLAlchemyError as exc:
        raise StoreError.wrap(exc) from exc

    return MetricsResponse(
        total_articles=total_articles,
        total_like_events=total_likes,
        total_view_events=total_views,
        total_notifications=total_notifications,
        likes_count_sum=likes_sum,
        views_count_sum=views_sum,
        likes_drift=likes_sum - total_likes,
        views_drift=views_sum - total_views,
        ranked_articles=await ranking.size(),
    )
