"""Typed indicator readings.

Keep these as simple, serializable structures. Do not embed scoring logic here.
"""
from dataclasses import dataclass, fields
from typing import List, Literal, Optional

IndicatorName = Literal[
    "rsi",
    "bollinger_bands",
    "fibonacci",
    "volume",
    "macd",
    "atr",
    "stochastic",
]

VolumeTrend = Literal["surge", "above-average", "normal", "below-average", "declining"]
MacdTrend = Literal["bullish", "bearish", "neutral"]
StochasticSignal = Literal["overbought", "oversold", "neutral"]


@dataclass(frozen=True)
class BollingerBands:
    upper: float
    middle: float
    lower: float
    percent_b: float
    bandwidth: float


@dataclass(frozen=True)
class FibonacciLevels:
    level_0: float
    level_236: float
    level_382: float
    level_500: float
    level_618: float
    level_786: float
    level_100: float

    def interior(self) -> List[float]:
        """The five retracement levels strictly inside the range."""
        return [
            self.level_236,
            self.level_382,
            self.level_500,
            self.level_618,
            self.level_786,
        ]


@dataclass(frozen=True)
class VolumeAnalysis:
    current: float
    average: float
    ratio: float
    trend: VolumeTrend


@dataclass(frozen=True)
class MacdReading:
    value: float
    signal: float
    histogram: float
    trend: MacdTrend


@dataclass(frozen=True)
class AtrReading:
    value: float
    volatility: str


@dataclass(frozen=True)
class StochasticReading:
    k: float
    d: float
    signal: StochasticSignal


@dataclass(frozen=True)
class IndicatorSet:
    """
    Sparse set of indicator readings.

    Only indicators chosen by the selector are populated; everything else
    stays None.
    """
    rsi: Optional[float] = None
    bollinger_bands: Optional[BollingerBands] = None
    fibonacci: Optional[FibonacciLevels] = None
    volume: Optional[VolumeAnalysis] = None
    macd: Optional[MacdReading] = None
    atr: Optional[AtrReading] = None
    stochastic: Optional[StochasticReading] = None

    def present(self) -> List[str]:
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]
