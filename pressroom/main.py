import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from pressroom.config import settings
from pressroom.database import dispose_engine
from pressroom.errors import register_exception_handlers
from pressroom.logging_config import configure_logging
from pressroom.middleware import TimingMiddleware
from pressroom.ranking import RankingCache
from pressroom.routers import articles, metrics, users

VERSION = "1.0.0"

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    configure_logging()
    app.state.ranking = RankingCache()
    await app.state.ranking.connect(settings.REDIS_URL)
    logger.info("Pressroom %s started (env=%s)", VERSION, settings.APP_ENV)
    yield
    # Shutdown
    await app.state.ranking.disconnect()
    await dispose_engine()

app = FastAPI(
    title="Pressroom",
    description="Article publishing API with like/view tracking and a popularity ranking",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(TimingMiddleware)
register_exception_handlers(app)

# Routers
app.include_router(articles.router)
app.include_router(users.router)
app.include_router(metrics.router)

@app.get("/health")
async def health():
    return {"status": "healthy", "version": VERSION}


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    configure_logging()
    logger.info("Server running on port %s", settings.PORT)
    uvicorn.run(
        "pressroom.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )
