"""
FastAPI Main Application
Serves the chart analysis engine over HTTP
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chart_analyst import __version__
from chart_analyst.api.routes import analysis, health
from chart_analyst.config import settings
from chart_analyst.core.logging import setup_logging
from chart_analyst.domain.services.analysis_engine import ChartAnalysisEngine
from chart_analyst.infrastructure.news.sentiment_client import NewsSentimentClient

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Builds the stateless engine and the news client once per process
    """
    logger.info("🚀 Starting NSE Chart Analyst")
    app.state.analysis_engine = ChartAnalysisEngine(history_min_bars=settings.HISTORY_MIN_BARS)
    app.state.news_client = NewsSentimentClient(
        base_url=settings.NEWS_SENTIMENT_URL,
        timeout=settings.NEWS_SENTIMENT_TIMEOUT_SECONDS,
        enabled=settings.NEWS_SENTIMENT_ENABLED,
    )
    if not settings.NEWS_SENTIMENT_ENABLED:
        logger.info("📰 News sentiment disabled; technical-only analysis")
    logger.info("✅ Analysis engine ready")

    yield

    logger.info("🛑 Shutting down NSE Chart Analyst")


def create_app() -> FastAPI:
    app = FastAPI(
        title="NSE Chart Analyst",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "🇮🇳 NSE Chart Analyst",
            "version": __version__,
            "docs": "/docs",
        }

    app.include_router(health.router, tags=["Health"])
    app.include_router(analysis.router, prefix="/api/v1/analysis", tags=["Analysis"])
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "chart_analyst.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
