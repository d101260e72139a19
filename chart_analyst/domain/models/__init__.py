"""
Domain Models Package
Export all domain entities
"""

from .market import (
    # Enums
    MarketState,
    NewsImpact,
    SentimentLabel,
    TrendStrength,
    VolatilityLevel,

    # Entities
    MarketCondition,
    MarketSnapshot,
    NewsSentiment,
    PriceBar,
)
from .indicators import (
    AtrReading,
    BollingerBands,
    FibonacciLevels,
    IndicatorSet,
    MacdReading,
    StochasticReading,
    VolumeAnalysis,
)
from .analysis import (
    # Enums
    ReasonType,
    RiskLevel,
    Sentiment,
    TradeAction,

    # Entities
    AnalysisRationale,
    AnalysisResult,
    ConfluenceScore,
    IndicatorSelection,
    RiskZone,
    TechnicalReason,
    TradePlan,
)

__all__ = [
    # Enums
    "MarketState",
    "NewsImpact",
    "ReasonType",
    "RiskLevel",
    "Sentiment",
    "SentimentLabel",
    "TradeAction",
    "TrendStrength",
    "VolatilityLevel",

    # Entities
    "AnalysisRationale",
    "AnalysisResult",
    "AtrReading",
    "BollingerBands",
    "ConfluenceScore",
    "FibonacciLevels",
    "IndicatorSelection",
    "IndicatorSet",
    "MacdReading",
    "MarketCondition",
    "MarketSnapshot",
    "NewsSentiment",
    "PriceBar",
    "RiskZone",
    "StochasticReading",
    "TechnicalReason",
    "TradePlan",
    "VolumeAnalysis",
]
