"""
News Sentiment Client
Best-effort fetch of the news-analysis collaborator

The analysis pipeline waits on this before classifying, so every failure
(timeout, transport error, bad status, malformed payload) degrades to
NewsSentiment.unavailable() instead of raising.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from chart_analyst.domain.models import NewsSentiment, SentimentLabel

logger = logging.getLogger(__name__)


class NewsSentimentClient:
    """
    Client for the news-analysis endpoint

    Expects a payload shaped like
    {"success": true, "analysis": {"overallSentiment", "sentimentScore",
    "newsCount", "keyTopics", "summary"}}
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        enabled: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.enabled = enabled
        self._transport = transport

    async def fetch(self, symbol: str) -> NewsSentiment:
        """Resolve sentiment for a symbol, never waiting longer than the timeout."""
        if not self.enabled:
            return NewsSentiment.unavailable()

        try:
            payload = await asyncio.wait_for(self._request_json(symbol), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(f"📰 News sentiment timed out for {symbol} after {self.timeout}s")
            return NewsSentiment.unavailable()

        sentiment = self._parse(payload) if payload else None
        if sentiment is None:
            logger.info(f"📰 News unavailable for {symbol}, proceeding with technical-only analysis")
            return NewsSentiment.unavailable()

        logger.info(
            f"📰 News sentiment for {symbol}: {sentiment.sentiment.value} "
            f"({sentiment.articles_count} articles, impact {sentiment.impact.value})"
        )
        return sentiment

    async def _request_json(self, symbol: str) -> Optional[Dict[str, Any]]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.base_url, params={"symbol": symbol})
                if response.status_code != 200:
                    logger.debug(f"News API {response.status_code} for {symbol}")
                    return None
                return response.json()
        except httpx.HTTPError as exc:
            logger.debug(f"News API request failed for {symbol}: {exc}")
            return None
        except ValueError as exc:
            logger.debug(f"News API returned invalid JSON for {symbol}: {exc}")
            return None

    @staticmethod
    def _parse(payload: Dict[str, Any]) -> Optional[NewsSentiment]:
        if not isinstance(payload, dict) or not payload.get("success"):
            return None
        analysis = payload.get("analysis")
        if not isinstance(analysis, dict):
            return None

        label = str(analysis.get("overallSentiment") or "neutral").lower()
        try:
            sentiment = SentimentLabel(label)
        except ValueError:
            sentiment = SentimentLabel.NEUTRAL

        try:
            score = float(analysis.get("sentimentScore") or 0)
            articles = int(analysis.get("newsCount") or 0)
        except (TypeError, ValueError, OverflowError):
            return None

        topics = analysis.get("keyTopics")
        if not isinstance(topics, list):
            topics = []
        return NewsSentiment.from_score(
            sentiment=sentiment,
            score=score,
            articles_count=articles,
            key_topics=tuple(str(topic) for topic in topics),
            reasoning=analysis.get("summary") or "News sentiment analyzed from recent articles.",
        )
