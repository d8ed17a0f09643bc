from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pressroom.database import get_db
from pressroom.dependencies import get_ranking
from pressroom.ranking import RankingCache
from pressroom.schemas import (
    ArticleCreate,
    ArticleResponse,
    EngagementRequest,
    EngagementResponse,
    PopularArticle,
)
from pressroom.services import article_service, engagement_service, popularity_service

router = APIRouter(prefix="/articles", tags=["articles"])

@router.post("", status_code=201, response_model=ArticleResponse)
async def create_article(data: ArticleCreate, db: AsyncSession = Depends(get_db)):
    return await article_service.create_article(db, data)

# Declared before /{article_id} so "popular" is never parsed as an id.
@router.get("/popular", response_model=list[PopularArticle])
async def popular_articles(ranking: RankingCache = Depends(get_ranking)):
    return await popularity_service.get_popular(ranking)

@router.get("/{article_id}", response_model=ArticleResponse)
async def get_article(article_id: int, db: AsyncSession = Depends(get_db)):
    return await article_service.get_article(db, article_id)

@router.post("/{article_id}/like", response_model=EngagementResponse)
async def like_article(
    article_id: int,
    data: EngagementRequest,
    db: AsyncSession = Depends(get_db),
    ranking: RankingCache = Depends(get_ranking),
):
    result = await engagement_service.record_like(db, ranking, article_id, data.user_id)
    return {"message": result.message}

@router.post("/{article_id}/view", response_model=EngagementResponse)
async def view_article(
    article_id: int,
    data: EngagementRequest,
    db: AsyncSession = Depends(get_db),
    ranking: RankingCache = Depends(get_ranking),
):
    result = await engagement_service.record_view(db, ranking, article_id, data.user_id)
    return {"message": result.message}
