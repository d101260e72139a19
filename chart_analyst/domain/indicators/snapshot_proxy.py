"""
Single-bar indicator proxies.

These approximate the textbook indicators from one snapshot (price, previous
close, day high/low, change, volume) when no history is available. All
functions are pure and never raise on degenerate snapshots: zero-width
ranges, zero prices and zero volume fall back to neutral values.
"""
import math

from chart_analyst.domain.models import (
    AtrReading,
    BollingerBands,
    FibonacciLevels,
    MacdReading,
    MarketSnapshot,
    StochasticReading,
    VolatilityLevel,
    VolumeAnalysis,
)

FIB_RATIOS = (0.0, 0.236, 0.382, 0.5, 0.618, 0.786, 1.0)


def safe_div(numerator: float, denominator: float, default: float = 0.0) -> float:
    if denominator == 0:
        return default
    value = numerator / denominator
    if not math.isfinite(value):
        return default
    return value


def classify_volatility(atr_pct: float) -> VolatilityLevel:
    """Volatility tier shared by the ATR reading and the market classifier."""
    if atr_pct < 1:
        return VolatilityLevel.LOW
    if atr_pct < 2:
        return VolatilityLevel.MEDIUM
    if atr_pct < 4:
        return VolatilityLevel.HIGH
    return VolatilityLevel.EXTREME


def atr_percent(snapshot: MarketSnapshot) -> float:
    return safe_div(snapshot.price_range, snapshot.current_price) * 100


def rsi(snapshot: MarketSnapshot) -> float:
    """RSI estimate from momentum, or from range position on quiet days."""
    abs_change = abs(snapshot.change_percent)
    if snapshot.change > 0 and abs_change > 2:
        return min(70 + abs_change * 3, 95)
    if snapshot.change < 0 and abs_change > 2:
        return max(30 - abs_change * 3, 5)
    # Map position (0-100) into 30-70
    return 30 + snapshot.price_position * 0.4


def bollinger_bands(snapshot: MarketSnapshot) -> BollingerBands:
    middle = (snapshot.high + snapshot.low + snapshot.current_price) / 3
    std_dev = snapshot.price_range * 0.5 * (1 + abs(snapshot.change_percent) / 100)
    upper = middle + 2 * std_dev
    lower = middle - 2 * std_dev
    percent_b = safe_div(snapshot.current_price - lower, upper - lower, default=0.5)
    bandwidth = safe_div(upper - lower, middle)
    return BollingerBands(
        upper=round(upper, 2),
        middle=round(middle, 2),
        lower=round(lower, 2),
        percent_b=round(percent_b, 3),
        bandwidth=round(bandwidth, 3),
    )


def fibonacci_levels(low: float, high: float) -> FibonacciLevels:
    price_range = high - low
    values = [round(low + price_range * ratio, 2) for ratio in FIB_RATIOS]
    return FibonacciLevels(*values)


def fibonacci(snapshot: MarketSnapshot) -> FibonacciLevels:
    return fibonacci_levels(snapshot.low, snapshot.high)


def classify_volume(ratio: float) -> str:
    if ratio > 2:
        return "surge"
    if ratio > 1.2:
        return "above-average"
    if ratio > 0.8:
        return "normal"
    if ratio > 0.5:
        return "below-average"
    return "declining"


def volume_analysis(snapshot: MarketSnapshot) -> VolumeAnalysis:
    current = snapshot.volume
    # Today's volume is assumed to run slightly above its average
    average = current * 0.8
    ratio = safe_div(current, average)
    return VolumeAnalysis(
        current=current,
        average=average,
        ratio=round(ratio, 2),
        trend=classify_volume(ratio),
    )


def classify_macd(histogram: float) -> str:
    if histogram > 0.5:
        return "bullish"
    if histogram < -0.5:
        return "bearish"
    return "neutral"


def macd(snapshot: MarketSnapshot) -> MacdReading:
    value = snapshot.change_percent * (snapshot.price_position / 50)
    signal = value * 0.8
    histogram = value - signal
    return MacdReading(
        value=round(value, 3),
        signal=round(signal, 3),
        histogram=round(histogram, 3),
        trend=classify_macd(histogram),
    )


def atr(snapshot: MarketSnapshot) -> AtrReading:
    value = atr_percent(snapshot)
    return AtrReading(value=round(value, 2), volatility=classify_volatility(value).value)


def classify_stochastic(k: float) -> str:
    if k > 80:
        return "overbought"
    if k < 20:
        return "oversold"
    return "neutral"


def stochastic(snapshot: MarketSnapshot) -> StochasticReading:
    k = snapshot.price_position
    d = k * 0.9
    return StochasticReading(k=round(k, 1), d=round(d, 1), signal=classify_stochastic(k))
