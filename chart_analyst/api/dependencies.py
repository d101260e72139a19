"""
Shared FastAPI dependencies.
Engine and news client live on app.state, created in the lifespan.
"""

from fastapi import Request

from chart_analyst.domain.services.analysis_engine import ChartAnalysisEngine
from chart_analyst.infrastructure.news.sentiment_client import NewsSentimentClient


def get_analysis_engine(request: Request) -> ChartAnalysisEngine:
    return request.app.state.analysis_engine


def get_news_client(request: Request) -> NewsSentimentClient:
    return request.app.state.news_client
