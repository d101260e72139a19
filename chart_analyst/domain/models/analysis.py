"""
DOMAIN MODELS — CHART ANALYSIS

Pure, immutable structures produced by the analysis engine.
This layer contains NO HTTP or service logic.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from .indicators import IndicatorSet
from .market import MarketCondition, NewsSentiment


class TradeAction(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class Sentiment(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class ReasonType(str, Enum):
    SUPPORT = "support"
    RESISTANCE = "resistance"
    RISK = "risk"
    OPPORTUNITY = "opportunity"


@dataclass(frozen=True)
class IndicatorSelection:
    """
    Indicators chosen for the current market condition.

    Weights are audit metadata; they are not used by the scorer.
    """
    chosen: Tuple[str, ...]
    weights: Dict[str, float]
    reasoning: str


@dataclass(frozen=True)
class ConfluenceScore:
    """Outcome of the point-scoring rulebook"""
    bullish_score: float
    bearish_score: float
    action: TradeAction
    sentiment: Sentiment
    confidence: float
    risk_level: RiskLevel
    risk_factors: int
    volume_penalty_applied: bool = False

    @property
    def score_difference(self) -> float:
        return abs(self.bullish_score - self.bearish_score)


@dataclass(frozen=True)
class TradePlan:
    entry_price: float
    target_price: float
    stop_loss: float
    time_horizon: str


@dataclass(frozen=True)
class RiskZone:
    start: float
    end: float
    reason: str


@dataclass(frozen=True)
class TechnicalReason:
    title: str
    description: str
    type: ReasonType


@dataclass(frozen=True)
class AnalysisRationale:
    """Human-readable trail of how the decision was reached"""
    market_condition: str
    indicator_selection: str
    news_sentiment: str
    final_decision: str
    chosen: Tuple[str, ...]
    weights: Dict[str, float]
    indicator_source: str


@dataclass(frozen=True)
class AnalysisResult:
    """
    Final output of one analysis call.

    Nothing here outlives the call that created it.
    """
    symbol: str
    sentiment: Sentiment
    action: TradeAction
    confidence: float
    risk_level: RiskLevel
    entry_price: float
    target_price: float
    stop_loss: float
    time_horizon: str
    support_levels: Tuple[float, ...]
    resistance_levels: Tuple[float, ...]
    risk_zones: Tuple[RiskZone, ...]
    technical_reasons: Tuple[TechnicalReason, ...]
    indicators: IndicatorSet
    summary: str
    key_points: Tuple[str, ...]
    market_condition: MarketCondition
    news_sentiment: NewsSentiment
    rationale: AnalysisRationale
    bullish_score: float = 0.0
    bearish_score: float = 0.0
    risk_factors: int = 0
