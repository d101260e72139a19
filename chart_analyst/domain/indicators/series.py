"""Textbook indicators over a bar history, oldest value first.

Every function returns None when the history is shorter than its period.
"""
from typing import List, Optional, Sequence, Tuple


def sma(values: Sequence[float], period: int) -> Optional[float]:
    if period <= 0 or len(values) < period:
        return None
    return sum(values[-period:]) / period


def _ema_line(values: Sequence[float], period: int) -> List[float]:
    """EMA at every bar from index period - 1 on, seeded with the first SMA."""
    alpha = 2 / (period + 1)
    value = sum(values[:period]) / period
    line = [value]
    for price in values[period:]:
        value += alpha * (price - value)
        line.append(value)
    return line


def ema(values: Sequence[float], period: int) -> Optional[float]:
    if not values or period <= 0:
        return None
    if len(values) < period:
        # Plain mean of a short history
        return sum(values) / len(values)
    return _ema_line(values, period)[-1]


def rsi(values: Sequence[float], period: int = 14) -> Optional[float]:
    """Cutler RSI: simple means of the last `period` gains and losses."""
    if period <= 0 or len(values) < period + 1:
        return None
    window = values[-(period + 1):]
    deltas = [curr - prev for prev, curr in zip(window, window[1:])]
    avg_gain = sum(d for d in deltas if d > 0) / period
    avg_loss = -sum(d for d in deltas if d < 0) / period
    if avg_loss == 0:
        return 100.0 if avg_gain > 0 else 50.0
    return 100 - 100 / (1 + avg_gain / avg_loss)


def macd(
    values: Sequence[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> Optional[Tuple[float, float, float]]:
    """Return (macd, signal, histogram) for the last bar."""
    if len(values) < slow + signal:
        return None
    fast_line = _ema_line(values, fast)[slow - fast:]
    slow_line = _ema_line(values, slow)
    macd_line = [f - s for f, s in zip(fast_line, slow_line)]
    signal_value = ema(macd_line, signal)
    return macd_line[-1], signal_value, macd_line[-1] - signal_value


def bollinger_bands(
    values: Sequence[float],
    period: int = 20,
    std_mult: float = 2.0,
) -> Optional[Tuple[float, float, float]]:
    """Return (lower, middle, upper) using the population standard deviation."""
    middle = sma(values, period)
    if middle is None:
        return None
    variance = sum((x - middle) ** 2 for x in values[-period:]) / period
    width = std_mult * variance ** 0.5
    return middle - width, middle, middle + width


def true_ranges(highs: Sequence[float], lows: Sequence[float], closes: Sequence[float]) -> List[float]:
    ranges = []
    for i in range(len(closes)):
        if i == 0:
            ranges.append(highs[i] - lows[i])
            continue
        prev_close = closes[i - 1]
        ranges.append(max(
            highs[i] - lows[i],
            abs(highs[i] - prev_close),
            abs(lows[i] - prev_close),
        ))
    return ranges


def atr(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
) -> Optional[float]:
    if len(closes) < period + 1:
        return None
    ranges = true_ranges(highs, lows, closes)
    value = sma(ranges[:period], period)
    # Wilder smoothing
    for tr in ranges[period:]:
        value = (value * (period - 1) + tr) / period
    return value


def stochastic(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    period: int = 14,
    smooth: int = 3,
) -> Optional[Tuple[float, float]]:
    """Return (%K, %D) for the last bar; %D is the SMA of the last `smooth` %K values."""
    if len(closes) < period + smooth - 1:
        return None
    k_values = []
    for end in range(len(closes) - smooth + 1, len(closes) + 1):
        hh = max(highs[end - period:end])
        ll = min(lows[end - period:end])
        if hh == ll:
            k_values.append(50.0)
        else:
            k_values.append((closes[end - 1] - ll) / (hh - ll) * 100)
    return k_values[-1], sma(k_values, smooth)
