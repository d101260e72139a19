from typing import AsyncGenerator, Callable, Optional

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

from chart_analyst.api.dependencies import get_news_client
from chart_analyst.domain.models import MarketSnapshot, NewsSentiment, PriceBar
from chart_analyst.domain.services.analysis_engine import ChartAnalysisEngine
from chart_analyst.main import create_app


def make_snapshot(
    current_price: float = 100.0,
    previous_close: float = 100.0,
    high: float = 101.0,
    low: float = 99.0,
    change: Optional[float] = None,
    change_percent: Optional[float] = None,
    volume: float = 1_000_000,
    symbol: str = "RELIANCE",
) -> MarketSnapshot:
    if change is None:
        change = current_price - previous_close
    if change_percent is None:
        change_percent = (change / previous_close * 100) if previous_close else 0.0
    return MarketSnapshot(
        symbol=symbol,
        current_price=current_price,
        previous_close=previous_close,
        change=change,
        change_percent=change_percent,
        high=high,
        low=low,
        volume=volume,
        timeframe="1D",
    )


def make_bars(closes, spread: float = 1.0, volume: float = 100_000):
    return [
        PriceBar(
            time=f"2026-01-{(i % 28) + 1:02d}",
            open=close,
            high=close + spread,
            low=close - spread,
            close=close,
            volume=volume,
        )
        for i, close in enumerate(closes)
    ]


@pytest.fixture
def snapshot_factory() -> Callable[..., MarketSnapshot]:
    return make_snapshot


@pytest.fixture
def trending_volatile_snapshot() -> MarketSnapshot:
    """Wide-range up day: +2.04% inside a 10% range."""
    return make_snapshot(
        current_price=100.0,
        previous_close=98.0,
        high=105.0,
        low=95.0,
        change=2.0,
        change_percent=2.04,
        volume=1_000_000,
    )


@pytest.fixture
def flat_snapshot() -> MarketSnapshot:
    return make_snapshot(
        current_price=100.0,
        previous_close=100.0,
        high=100.5,
        low=99.5,
        change=0.0,
        change_percent=0.0,
        volume=500_000,
    )


@pytest.fixture
def engine() -> ChartAnalysisEngine:
    return ChartAnalysisEngine()


class StubNewsClient:
    def __init__(self, sentiment: Optional[NewsSentiment] = None):
        self.sentiment = sentiment or NewsSentiment.unavailable()
        self.calls = []

    async def fetch(self, symbol: str) -> NewsSentiment:
        self.calls.append(symbol)
        return self.sentiment


@pytest.fixture
def news_client() -> StubNewsClient:
    return StubNewsClient()


@pytest.fixture
def app(news_client) -> FastAPI:
    app = create_app()
    app.state.analysis_engine = ChartAnalysisEngine()
    app.state.news_client = news_client
    app.dependency_overrides[get_news_client] = lambda: news_client
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def bars_factory():
    return make_bars
