"""
LEVEL ENGINE

Support / resistance levels, entry-target-stop prices and risk zones.

Support candidates: Fibonacci 23.6 / 38.2 / 61.8 %, day low, lower Bollinger
band, and the current price floored to the nearest 10. Resistance mirrors this
with Fibonacci 61.8 / 78.6 / 100 %, day high, upper band and the ceiling to the
nearest 10. Only levels on the correct side of price survive, nearest first,
at most three per side.
"""

import math
from typing import Iterable, List, Tuple

from chart_analyst.domain.models import (
    IndicatorSet,
    MarketSnapshot,
    RiskLevel,
    RiskZone,
    TradeAction,
    TradePlan,
)


MAX_LEVELS = 3
PSYCHOLOGICAL_STEP = 10
RISK_ZONE_WIDTH = 0.02


def _unique(levels: Iterable[float]) -> List[float]:
    seen = set()
    unique = []
    for level in levels:
        if level in seen or not math.isfinite(level):
            continue
        seen.add(level)
        unique.append(level)
    return unique


def support_levels(snapshot: MarketSnapshot, indicators: IndicatorSet) -> Tuple[float, ...]:
    price = snapshot.current_price
    candidates: List[float] = []
    if indicators.fibonacci is not None:
        fib = indicators.fibonacci
        candidates.extend([fib.level_236, fib.level_382, fib.level_618])
    candidates.append(round(snapshot.low, 2))
    if indicators.bollinger_bands is not None and indicators.bollinger_bands.lower < price:
        candidates.append(indicators.bollinger_bands.lower)
    if math.isfinite(price):
        candidates.append(math.floor(price / PSYCHOLOGICAL_STEP) * PSYCHOLOGICAL_STEP)

    below = [level for level in _unique(candidates) if level < price]
    return tuple(sorted(below, reverse=True)[:MAX_LEVELS])


def resistance_levels(snapshot: MarketSnapshot, indicators: IndicatorSet) -> Tuple[float, ...]:
    price = snapshot.current_price
    candidates: List[float] = []
    if indicators.fibonacci is not None:
        fib = indicators.fibonacci
        candidates.extend([fib.level_618, fib.level_786, fib.level_100])
    candidates.append(round(snapshot.high, 2))
    if indicators.bollinger_bands is not None and indicators.bollinger_bands.upper > price:
        candidates.append(indicators.bollinger_bands.upper)
    if math.isfinite(price):
        candidates.append(math.ceil(price / PSYCHOLOGICAL_STEP) * PSYCHOLOGICAL_STEP)

    above = [level for level in _unique(candidates) if level > price]
    return tuple(sorted(above)[:MAX_LEVELS])


def time_horizon(snapshot: MarketSnapshot) -> str:
    if abs(snapshot.change_percent) > 2:
        return "Short-term (1-3 days)"
    return "Medium-term (1-2 weeks)"


def trade_plan(
    snapshot: MarketSnapshot,
    action: TradeAction,
    supports: Tuple[float, ...],
    resistances: Tuple[float, ...],
) -> TradePlan:
    """
    Logic:
    - BUY:  entry 0.5% below price, target nearest resistance, stop farthest support
    - SELL: entry 0.5% above price, target farthest support, stop nearest resistance
    - HOLD: entry at price, +/-1% target and stop
    Missing levels fall back to fixed percentages of price.
    """
    price = snapshot.current_price
    if action == TradeAction.BUY:
        entry = price * 0.995
        target = resistances[0] if resistances else price * 1.03
        stop = supports[-1] if supports else price * 0.98
    elif action == TradeAction.SELL:
        entry = price * 1.005
        target = supports[-1] if supports else price * 0.97
        stop = resistances[0] if resistances else price * 1.02
    else:
        entry = price
        target = price * 1.01
        stop = price * 0.99

    return TradePlan(
        entry_price=round(entry, 2),
        target_price=round(target, 2),
        stop_loss=round(stop, 2),
        time_horizon=time_horizon(snapshot),
    )


def risk_zones(
    snapshot: MarketSnapshot,
    risk_level: RiskLevel,
    indicators: IndicatorSet,
) -> Tuple[RiskZone, ...]:
    """Bands just outside the Bollinger envelope, only for High risk."""
    bands = indicators.bollinger_bands
    if risk_level != RiskLevel.HIGH or bands is None:
        return ()

    zones = []
    if bands.upper > snapshot.current_price:
        zones.append(RiskZone(
            start=bands.upper,
            end=round(bands.upper * (1 + RISK_ZONE_WIDTH), 2),
            reason=(
                f"Bollinger Band resistance zone (₹{bands.upper:.2f}) - high probability "
                "of rejection. Overbought territory."
            ),
        ))
    if bands.lower < snapshot.current_price:
        zones.append(RiskZone(
            start=round(bands.lower * (1 - RISK_ZONE_WIDTH), 2),
            end=bands.lower,
            reason=(
                f"Bollinger Band support zone (₹{bands.lower:.2f}) - breakdown below "
                "this signals oversold panic."
            ),
        ))
    return tuple(zones)
