"""
Domain Models - Market inputs and derived market condition
Pure domain objects with no infrastructure dependencies
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


class MarketState(str, Enum):
    """Coarse market regime"""
    TRENDING = "trending"
    RANGING = "ranging"
    VOLATILE = "volatile"
    CONSOLIDATING = "consolidating"


class TrendStrength(str, Enum):
    """Direction and strength of the day's move"""
    STRONG_BULLISH = "strong-bullish"
    BULLISH = "bullish"
    NEUTRAL = "neutral"
    BEARISH = "bearish"
    STRONG_BEARISH = "strong-bearish"


class VolatilityLevel(str, Enum):
    """Volatility tier from ATR %"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


class SentimentLabel(str, Enum):
    """News sentiment label reported by the news collaborator"""
    VERY_POSITIVE = "very-positive"
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"
    VERY_NEGATIVE = "very-negative"
    UNAVAILABLE = "unavailable"


class NewsImpact(str, Enum):
    """How strongly news is expected to drive price"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


@dataclass(frozen=True)
class MarketSnapshot:
    """
    Immutable single-bar view of a symbol.

    high >= current_price >= low is expected but not enforced; the engine
    degrades to neutral values instead of failing on violations.
    """
    symbol: str
    current_price: float
    previous_close: float
    change: float
    change_percent: float
    high: float
    low: float
    volume: float
    timeframe: str = "1D"

    @property
    def price_range(self) -> float:
        return self.high - self.low

    @property
    def price_position(self) -> float:
        """Position of current price inside the day range, 0-100."""
        price_range = self.price_range
        if price_range == 0:
            return 50.0
        return (self.current_price - self.low) / price_range * 100

    @property
    def is_up_day(self) -> bool:
        return self.change > 0


@dataclass(frozen=True)
class PriceBar:
    """One OHLCV bar of a caller-supplied history window (oldest first)."""
    time: str
    open: float
    high: float
    low: float
    close: float
    volume: float


@dataclass(frozen=True)
class NewsSentiment:
    """
    Result of the news-sentiment collaborator.

    Use NewsSentiment.unavailable() when the collaborator cannot be reached.
    """
    sentiment: SentimentLabel
    score: float
    articles_count: int
    impact: NewsImpact
    reasoning: str
    key_topics: Tuple[str, ...] = field(default_factory=tuple)

    @staticmethod
    def impact_for_score(score: float) -> NewsImpact:
        if score > 0.5:
            return NewsImpact.HIGH
        if score > 0.2:
            return NewsImpact.MEDIUM
        return NewsImpact.LOW

    @classmethod
    def from_score(
        cls,
        sentiment: SentimentLabel,
        score: float,
        articles_count: int = 0,
        key_topics: Tuple[str, ...] = (),
        reasoning: str = "News sentiment analyzed from recent articles.",
    ) -> "NewsSentiment":
        return cls(
            sentiment=sentiment,
            score=score,
            articles_count=articles_count,
            impact=cls.impact_for_score(score),
            reasoning=reasoning,
            key_topics=tuple(key_topics),
        )

    @classmethod
    def unavailable(cls) -> "NewsSentiment":
        return cls(
            sentiment=SentimentLabel.UNAVAILABLE,
            score=0.0,
            articles_count=0,
            impact=NewsImpact.NONE,
            reasoning="No recent news available. Analysis based purely on technical indicators.",
        )


@dataclass(frozen=True)
class MarketCondition:
    """Classified market condition, recomputed on every analysis"""
    state: MarketState
    trend: TrendStrength
    volatility: VolatilityLevel
    momentum: float
    atr: float
    reasoning: str
