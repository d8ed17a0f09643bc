"""Seed articles plus random likes/views into both the database and the ranking."""
import argparse
import asyncio
import random
import time

from pressroom.config import settings
from pressroom.database import Base, async_session, engine
from pressroom.ranking import RankingCache
from pressroom.schemas import ArticleCreate
from pressroom.services import article_service, engagement_service

TOPICS = ["python", "fastapi", "postgresql", "redis", "docker", "kubernetes",
          "testing", "performance", "security", "observability"]


async def seed(small: bool = False, reset: bool = False):
    num_authors = 5 if small else 25
    num_readers = 20 if small else 200
    num_articles = 30 if small else 1000
    max_views = 15 if small else 80

    print(f"Seeding: {num_articles} articles, up to {max_views} views each")
    start = time.perf_counter()

    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    ranking = RankingCache()
    await ranking.connect(settings.REDIS_URL)
    if reset:
        await ranking.clear()

    readers = [f"reader_{i:04d}" for i in range(num_readers)]
    likes = views = 0
    async with async_session() as session:
        article_ids = []
        for i in range(num_articles):
            topic = random.choice(TOPICS)
            article = await article_service.create_article(
                session,
                ArticleCreate(
                    title=f"Article {i}: Notes on {topic}",
                    author=f"author_{random.randrange(num_authors):03d}",
                    body=f"Everything worth knowing about {topic}. " * 20,
                ),
            )
            article_ids.append(article["id"])
        await session.commit()
        print(f"  Created {len(article_ids)} articles")

        for article_id in article_ids:
            audience = random.sample(readers, k=random.randint(0, min(max_views, num_readers)))
            for user_id in audience:
                await engagement_service.record_view(session, ranking, article_id, user_id)
                views += 1
                if random.random() < 0.2:
                    await engagement_service.record_like(session, ranking, article_id, user_id)
                    likes += 1

    await ranking.disconnect()
    await engine.dispose()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")
    print(f"  Articles: {num_articles}")
    print(f"  Views: {views}")
    print(f"  Likes: {likes}")


def main():
    parser = argparse.ArgumentParser(description="Seed the pressroom database and ranking")
    parser.add_argument("--small", action="store_true", help="Use small dataset (30 articles)")
    parser.add_argument("--reset", action="store_true", help="Drop tables and clear the ranking first")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small, reset=args.reset))


if __name__ == "__main__":
    main()
