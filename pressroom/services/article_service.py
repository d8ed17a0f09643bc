"""
Article service - submission and lookup of articles.

Counters are never written here; they start at zero and are only moved
by ``engagement_service``.
"""
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pressroom.errors import NotFoundError, StoreError, ValidationError
from pressroom.models import Article
from pressroom.schemas import ArticleCreate

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("title", "author", "body")


def _article_to_dict(article: Article) -> dict:
    return {
        "id": article.id,
        "title": article.title,
        "author": article.author,
        "body": article.body,
        "likes_count": article.likes_count,
        "views_count": article.views_count,
    }


async def create_article(db: AsyncSession, data: ArticleCreate) -> dict:
    """
    Insert a new article with zeroed counters and return it.

    Every field must be present and non-blank; otherwise ValidationError is
    raised naming the offending fields and nothing is written.
    """
    missing = [
        name
        for name in _REQUIRED_FIELDS
        if not (getattr(data, name) or "").strip()
    ]
    if missing:
        raise ValidationError("Title, author, and body are required", missing_fields=missing)

    article = Article(
        title=data.title,
        author=data.author,
        body=data.body,
        likes_count=0,
        views_count=0,
    )
    db.add(article)
    # Committed here so a failed write is reported before the 201 goes out.
    try:
        await db.flush()
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        raise StoreError.wrap(exc) from exc

    logger.info("Created article id=%s author=%s", article.id, article.author)
    return _article_to_dict(article)


async def get_article(db: AsyncSession, article_id: int) -> dict:
    """Return the article record for *article_id*, or raise NotFoundError."""
    try:
        result = await db.execute(select(Article).where(Article.id == article_id))
    except SQLAlchemyError as exc:
        raise StoreError.wrap(exc) from exc
    article = result.scalar_one_or_none()
    if article is None:
        raise NotFoundError(f"Article {article_id} not found")
    return _article_to_dict(article)
