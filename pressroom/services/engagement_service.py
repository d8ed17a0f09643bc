"""
Engagement service - applies one like or view to both stores.

Design notes
------------
- A single engagement is four independent writes: ledger insert, counter
  increment, author notification (likes only) and the ranking-cache
  increment.  Each durable step is committed on its own; there is no
  enclosing transaction and nothing spans the database and Redis.  When a
  step fails the remaining steps are skipped and earlier ones stay applied.
- The ledger insert is idempotent (``ON CONFLICT DO NOTHING``) but the
  counter and the ranking score are bumped on every call, so repeated
  engagement by the same user keeps counting while the ledger holds one
  row.  ``/metrics`` reports the resulting drift.
- The article must exist before anything is written.
"""
import logging
from dataclasses import dataclass

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pressroom.config import settings
from pressroom.errors import CacheError, NotFoundError, StoreError
from pressroom.models import Article, ArticleLike, ArticleView, Notification
from pressroom.ranking import RankingCache
from pressroom.schemas import EngagementKind

logger = logging.getLogger(__name__)

_LEDGERS = {
    EngagementKind.LIKE: (ArticleLike, Article.likes_count),
    EngagementKind.VIEW: (ArticleView, Article.views_count),
}

_MESSAGES = {
    EngagementKind.LIKE: "Article liked and notification sent",
    EngagementKind.VIEW: "Article viewed",
}

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


@dataclass
class EngagementResult:
    article_id: int
    user_id: str
    kind: EngagementKind
    first_engagement: bool
    score: int

    @property
    def message(self) -> str:
        return _MESSAGES[self.kind]


# ---------------------------------------------------------------------------
# Individual steps
# ---------------------------------------------------------------------------

async def _require_article(db: AsyncSession, article_id: int) -> str:
    """Return the author of *article_id*, raising NotFoundError if absent."""
    try:
        result = await db.execute(select(Article.author).where(Article.id == article_id))
    except SQLAlchemyError as exc:
        raise StoreError.wrap(exc) from exc
    author = result.scalar_one_or_none()
    if author is None:
        raise NotFoundError(f"Article {article_id} not found")
    return author


async def _insert_ledger_row(db: AsyncSession, ledger, article_id: int, user_id: str) -> bool:
    """Insert the (article, user) ledger row; return False if it already existed."""
    dialect = db.get_bind().dialect.name
    insert = _UPSERT_DIALECTS.get(dialect)
    if insert is None:
        raise StoreError(f"Idempotent insert is not supported on {dialect!r}")
    stmt = (
        insert(ledger.__table__)
        .values(article_id=article_id, user_id=user_id)
        .on_conflict_do_nothing(index_elements=["article_id", "user_id"])
    )
    result = await db.execute(stmt)
    await db.commit()
    return result.rowcount == 1


async def _increment_counter(db: AsyncSession, article_id: int, counter) -> None:
    await db.execute(
        update(Article)
        .where(Article.id == article_id)
        .values({counter: counter + 1})
    )
    await db.commit()


async def _notify_author(db: AsyncSession, article_id: int, author: str) -> None:
    db.add(
        Notification(
            user_id=author,
            article_id=article_id,
            message=settings.LIKE_NOTIFICATION_MESSAGE,
        )
    )
    await db.commit()


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def record_engagement(
    db: AsyncSession,
    ranking: RankingCache,
    article_id: int,
    user_id: str,
    kind: EngagementKind,
) -> EngagementResult:
    """
    Record a like or view of *article_id* by *user_id* in both stores.

    Raises NotFoundError before any write when the article does not exist,
    StoreError / CacheError when a step fails part way through.
    """
    ledger, counter = _LEDGERS[kind]
    author = await _require_article(db, article_id)

    done: list[str] = []
    try:
        first = await _insert_ledger_row(db, ledger, article_id, user_id)
        done.append("ledger")
        await _increment_counter(db, article_id, counter)
        done.append("counter")
        if kind is EngagementKind.LIKE:
            await _notify_author(db, article_id, author)
            done.append("notification")
    except SQLAlchemyError as exc:
        await db.rollback()
        _log_partial(kind, article_id, user_id, done)
        raise StoreError.wrap(exc) from exc

    try:
        score = await ranking.increment(article_id)
    except CacheError:
        _log_partial(kind, article_id, user_id, done)
        raise

    logger.info(
        "Recorded %s article=%s user=%s first=%s score=%s",
        kind.value,
        article_id,
        user_id,
        first,
        score,
    )
    return EngagementResult(
        article_id=article_id,
        user_id=user_id,
        kind=kind,
        first_engagement=first,
        score=score,
    )


async def record_like(
    db: AsyncSession, ranking: RankingCache, article_id: int, user_id: str
) -> EngagementResult:
    return await record_engagement(db, ranking, article_id, user_id, EngagementKind.LIKE)


async def record_view(
    db: AsyncSession, ranking: RankingCache, article_id: int, user_id: str
) -> EngagementResult:
    return await record_engagement(db, ranking, article_id, user_id, EngagementKind.VIEW)


def _log_partial(kind: EngagementKind, article_id: int, user_id: str, done: list[str]) -> None:
    if done:
        logger.warning(
            "%s of article=%s by user=%s left partially applied (committed: %s)",
            kind.value,
            article_id,
            user_id,
            ", ".join(done),
        )
