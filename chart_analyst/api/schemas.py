"""
API request / response models for chart analysis.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from chart_analyst.domain.models import (
    MarketSnapshot,
    MarketState,
    NewsImpact,
    PriceBar,
    ReasonType,
    RiskLevel,
    Sentiment,
    SentimentLabel,
    TradeAction,
    TrendStrength,
    VolatilityLevel,
)


class _CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _RequestModel(_CamelModel):
    model_config = ConfigDict(allow_inf_nan=False)


class _FromDomain(_CamelModel):
    model_config = ConfigDict(from_attributes=True)


# Request models
class PriceBarIn(_RequestModel):
    time: str
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    def to_domain(self) -> PriceBar:
        return PriceBar(
            time=self.time,
            open=self.open,
            high=self.high,
            low=self.low,
            close=self.close,
            volume=self.volume,
        )


class ChartAnalysisRequest(_RequestModel):
    symbol: str = Field(min_length=1)
    current_price: float
    previous_close: float
    change: float
    change_percent: float
    high: float
    low: float
    volume: float = 0.0
    timeframe: str = "1D"
    chart_data: Optional[List[PriceBarIn]] = None

    def to_snapshot(self) -> MarketSnapshot:
        return MarketSnapshot(
            symbol=self.symbol,
            current_price=self.current_price,
            previous_close=self.previous_close,
            change=self.change,
            change_percent=self.change_percent,
            high=self.high,
            low=self.low,
            volume=self.volume,
            timeframe=self.timeframe,
        )

    def to_history(self) -> Optional[List[PriceBar]]:
        if not self.chart_data:
            return None
        return [bar.to_domain() for bar in self.chart_data]


# Response models
class BollingerBandsOut(_FromDomain):
    upper: float
    middle: float
    lower: float
    percent_b: float
    bandwidth: float


class FibonacciOut(_FromDomain):
    # Level keys keep their underscores (level_236, level_618)
    model_config = ConfigDict(alias_generator=None)

    level_0: float
    level_236: float
    level_382: float
    level_500: float
    level_618: float
    level_786: float
    level_100: float


class VolumeOut(_FromDomain):
    current: float
    average: float
    ratio: float
    trend: str


class MacdOut(_FromDomain):
    value: float
    signal: float
    histogram: float
    trend: str


class AtrOut(_FromDomain):
    value: float
    volatility: str


class StochasticOut(_FromDomain):
    k: float
    d: float
    signal: str


class IndicatorsOut(_FromDomain):
    rsi: Optional[float] = None
    bollinger_bands: Optional[BollingerBandsOut] = None
    fibonacci: Optional[FibonacciOut] = None
    volume: Optional[VolumeOut] = None
    macd: Optional[MacdOut] = None
    atr: Optional[AtrOut] = None
    stochastic: Optional[StochasticOut] = None


class RiskZoneOut(_FromDomain):
    start: float
    end: float
    reason: str


class TechnicalReasonOut(_FromDomain):
    title: str
    description: str
    type: ReasonType


class AnalysisOut(_FromDomain):
    sentiment: Sentiment
    action: TradeAction
    confidence: float
    risk_level: RiskLevel
    entry_price: float
    target_price: float
    stop_loss: float
    time_horizon: str
    support_levels: List[float]
    resistance_levels: List[float]
    risk_zones: List[RiskZoneOut]
    technical_reasons: List[TechnicalReasonOut]
    summary: str
    key_points: List[str]
    bullish_score: float
    bearish_score: float


class MarketConditionOut(_FromDomain):
    state: MarketState
    trend: TrendStrength
    volatility: VolatilityLevel
    momentum: float
    atr: float
    reasoning: str


class NewsSentimentOut(_FromDomain):
    sentiment: SentimentLabel
    score: float
    articles_count: int
    key_topics: List[str]
    impact: NewsImpact
    reasoning: str


class RationaleOut(_FromDomain):
    market_condition: str
    indicator_selection: str
    news_sentiment: str
    final_decision: str
    chosen: List[str]
    weights: Dict[str, float]
    indicator_source: str


class ChartAnalysisResponse(_CamelModel):
    success: bool = True
    symbol: str
    analysis: AnalysisOut
    indicators: IndicatorsOut
    market_condition: MarketConditionOut
    news_sentiment: NewsSentimentOut
    ai_reasoning: RationaleOut
    timestamp: str
