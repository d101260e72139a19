"""
NARRATIVE ENGINE

Turns a scored analysis into text: ranked technical reasons, a summary block
and key points.

The reason catalogue is an ordered table of rules. Every rule that applies
produces one reason; the first five, in catalogue order, are kept.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from chart_analyst.domain.models import (
    IndicatorSet,
    MarketSnapshot,
    ReasonType,
    RiskLevel,
    Sentiment,
    TechnicalReason,
    TradeAction,
)


MAX_REASONS = 5
NEAR_LEVEL_PCT = 2.0
FIB_REASON_PROXIMITY = 0.015


@dataclass(frozen=True)
class ReasonContext:
    snapshot: MarketSnapshot
    indicators: IndicatorSet
    action: TradeAction
    support_levels: Tuple[float, ...]
    resistance_levels: Tuple[float, ...]

    @property
    def abs_change_pct(self) -> float:
        return abs(self.snapshot.change_percent)


ReasonRule = Callable[[ReasonContext], Optional[TechnicalReason]]


def _rsi_reason(ctx: ReasonContext) -> Optional[TechnicalReason]:
    rsi = ctx.indicators.rsi
    if rsi is None:
        return None
    if rsi < 30:
        return TechnicalReason(
            title=f"RSI Oversold: {rsi:.1f}",
            description=(
                f"RSI at {rsi:.1f} indicates oversold conditions (below 30 threshold). "
                "This suggests price may have fallen too far too fast. Oversold RSI often "
                "precedes a bounce. Consider this a potential buying opportunity, but wait "
                "for confirmation."
            ),
            type=ReasonType.OPPORTUNITY,
        )
    if rsi > 70:
        return TechnicalReason(
            title=f"RSI Overbought: {rsi:.1f}",
            description=(
                f"RSI at {rsi:.1f} signals overbought conditions (above 70 threshold). "
                "Price may be extended and due for a pullback. Exercise caution with new "
                "long positions."
            ),
            type=ReasonType.RISK,
        )
    if rsi > 50:
        return TechnicalReason(
            title=f"RSI Bullish: {rsi:.1f}",
            description=(
                f"RSI at {rsi:.1f} (above 50 midpoint) indicates bullish momentum. Buyers "
                "are in control but not yet overbought."
            ),
            type=ReasonType.OPPORTUNITY,
        )
    return TechnicalReason(
        title=f"RSI Bearish: {rsi:.1f}",
        description=(
            f"RSI at {rsi:.1f} (below 50 midpoint) shows bearish momentum. Sellers have "
            "the upper hand but not yet oversold."
        ),
        type=ReasonType.RISK,
    )


def _bollinger_position_reason(ctx: ReasonContext) -> Optional[TechnicalReason]:
    bands = ctx.indicators.bollinger_bands
    if bands is None:
        return None
    pct_b = bands.percent_b * 100
    if bands.percent_b < 0:
        return TechnicalReason(
            title=f"Below Bollinger Band ({pct_b:.0f}%)",
            description=(
                f"Price is {abs(pct_b):.0f}% below the lower Bollinger Band "
                f"(₹{bands.lower:.2f}). This extreme often leads to a bounce back toward "
                "the middle band. Strong oversold signal."
            ),
            type=ReasonType.OPPORTUNITY,
        )
    if bands.percent_b > 1:
        return TechnicalReason(
            title=f"Above Bollinger Band ({pct_b:.0f}%)",
            description=(
                f"Price is {pct_b - 100:.0f}% above the upper Bollinger Band "
                f"(₹{bands.upper:.2f}). This suggests overextension and a likely pullback "
                f"toward the middle band at ₹{bands.middle:.2f}."
            ),
            type=ReasonType.RISK,
        )
    if bands.percent_b < 0.2:
        return TechnicalReason(
            title="Near Lower Bollinger Band",
            description=(
                f"Price at {pct_b:.0f}% position within Bollinger Bands, very close to the "
                f"lower band (₹{bands.lower:.2f}). Potential bounce zone. Upper band at "
                f"₹{bands.upper:.2f} is the resistance target."
            ),
            type=ReasonType.OPPORTUNITY,
        )
    if bands.percent_b > 0.8:
        return TechnicalReason(
            title="Near Upper Bollinger Band",
            description=(
                f"Price at {pct_b:.0f}% position within bands, approaching the upper band "
                f"(₹{bands.upper:.2f}). Overbought zone. Lower band at ₹{bands.lower:.2f} "
                "may act as support on pullback."
            ),
            type=ReasonType.RISK,
        )
    return None


def _bollinger_squeeze_reason(ctx: ReasonContext) -> Optional[TechnicalReason]:
    bands = ctx.indicators.bollinger_bands
    if bands is None or bands.bandwidth >= 0.1:
        return None
    return TechnicalReason(
        title="Bollinger Band Squeeze",
        description=(
            f"Band width at {bands.bandwidth * 100:.1f}% indicates very low volatility. "
            "A squeeze often precedes a significant breakout. Breakout above "
            f"₹{bands.upper:.2f} is bullish, below ₹{bands.lower:.2f} is bearish."
        ),
        type=ReasonType.OPPORTUNITY,
    )


def _volume_reason(ctx: ReasonContext) -> Optional[TechnicalReason]:
    volume = ctx.indicators.volume
    if volume is None:
        return None
    up_day = ctx.snapshot.is_up_day
    directional_type = ReasonType.OPPORTUNITY if up_day else ReasonType.RISK
    if volume.trend == "surge":
        direction = "up" if up_day else "down"
        return TechnicalReason(
            title=f"Volume Surge ({volume.ratio:.1f}x Average)",
            description=(
                f"Exceptional volume at {volume.ratio:.1f}x the average confirms strong "
                f"{direction}ward momentum. "
                f"{'Strong buying pressure.' if up_day else 'Strong selling pressure.'}"
            ),
            type=directional_type,
        )
    if volume.trend == "above-average":
        return TechnicalReason(
            title=f"Strong Volume ({volume.ratio:.1f}x Average)",
            description=(
                f"Volume {volume.ratio:.1f}x above average indicates good participation. "
                f"This {'buying' if up_day else 'selling'} activity supports the "
                f"{'upward' if up_day else 'downward'} move."
            ),
            type=directional_type,
        )
    if volume.trend in ("declining", "below-average"):
        return TechnicalReason(
            title=f"Low Volume Warning ({volume.ratio:.1f}x Average)",
            description=(
                f"Volume at only {volume.ratio:.1f}x average. Low volume "
                f"{'rallies' if up_day else 'declines'} lack conviction and often reverse. "
                "Wait for volume confirmation (>1.2x average) before trusting this move."
            ),
            type=ReasonType.RISK,
        )
    return None


_FIB_NAMES = (
    ("level_236", "23.6%", "support"),
    ("level_382", "38.2%", "support"),
    ("level_500", "50%", "key"),
    ("level_618", "61.8%", "resistance"),
    ("level_786", "78.6%", "resistance"),
)

_FIB_NOTES = {
    "support": "This is a critical support zone where buyers typically step in.",
    "resistance": "This is a major resistance level. A breakout above it is significant.",
    "key": "The 50% midpoint often acts as pivot between bullish and bearish control.",
}


def _fibonacci_reason(ctx: ReasonContext) -> Optional[TechnicalReason]:
    fib = ctx.indicators.fibonacci
    price = ctx.snapshot.current_price
    if fib is None or price == 0:
        return None
    # First of equally-close levels wins
    attr, name, role = min(
        _FIB_NAMES,
        key=lambda entry: abs(price - getattr(fib, entry[0])) / price,
    )
    level = getattr(fib, attr)
    if not abs(price - level) / price < FIB_REASON_PROXIMITY:
        return None
    position = "approaching" if price < level else "just above"
    return TechnicalReason(
        title=f"At Fibonacci {name} Level",
        description=(
            f"Price {position} key Fibonacci {name} retracement at ₹{level:.2f}. "
            f"{_FIB_NOTES[role]}"
        ),
        type=ReasonType.RESISTANCE if role == "resistance" else ReasonType.OPPORTUNITY,
    )


def _support_reason(ctx: ReasonContext) -> Optional[TechnicalReason]:
    if not ctx.support_levels:
        return None
    price = ctx.snapshot.current_price
    nearest = ctx.support_levels[0]
    distance = (price - nearest) / price * 100 if price else 0.0
    if distance < NEAR_LEVEL_PCT:
        return TechnicalReason(
            title="Price Near Strong Support",
            description=(
                f"Current price ₹{price:.2f} is very close to key support at "
                f"₹{nearest:.2f}. Risk of breakdown exists if support breaks."
            ),
            type=ReasonType.SUPPORT,
        )
    return TechnicalReason(
        title=f"Support at ₹{nearest:.2f}",
        description=(
            f"Key support level identified at ₹{nearest:.2f} ({distance:.1f}% below "
            "current price). Expect buying interest if price falls to this level."
        ),
        type=ReasonType.SUPPORT,
    )


def _resistance_reason(ctx: ReasonContext) -> Optional[TechnicalReason]:
    if not ctx.resistance_levels:
        return None
    price = ctx.snapshot.current_price
    nearest = ctx.resistance_levels[0]
    distance = (nearest - price) / price * 100 if price else 0.0
    if distance < NEAR_LEVEL_PCT:
        return TechnicalReason(
            title="Approaching Key Resistance",
            description=(
                f"Price is testing resistance at ₹{nearest:.2f}. A breakout above this "
                "level could trigger strong upward momentum; failure may cause a pullback."
            ),
            type=ReasonType.RESISTANCE,
        )
    return TechnicalReason(
        title=f"Resistance at ₹{nearest:.2f}",
        description=(
            f"Major resistance identified at ₹{nearest:.2f} ({distance:.1f}% above "
            "current price). Price may face selling pressure at this level."
        ),
        type=ReasonType.RESISTANCE,
    )


def _volatility_reason(ctx: ReasonContext) -> Optional[TechnicalReason]:
    if ctx.abs_change_pct <= 2:
        return None
    return TechnicalReason(
        title="High Volatility Alert",
        description=(
            f"Current volatility of {ctx.abs_change_pct:.2f}% indicates increased price "
            "swings. Use tighter stop losses and consider reducing position size."
        ),
        type=ReasonType.RISK,
    )


def _range_position_reason(ctx: ReasonContext) -> Optional[TechnicalReason]:
    position = ctx.snapshot.price_position
    if position > 80:
        return TechnicalReason(
            title="Price in Upper Range",
            description=(
                f"Stock is trading in the upper {100 - position:.0f}% of today's range. "
                "Strong buying pressure, but risk of profit booking exists."
            ),
            type=ReasonType.RISK,
        )
    if position < 20:
        return TechnicalReason(
            title="Price in Lower Range",
            description=(
                f"Stock is trading in the lower {position:.0f}% of today's range. "
                "Potential bounce opportunity if support holds."
            ),
            type=ReasonType.OPPORTUNITY,
        )
    return None


def _momentum_reason(ctx: ReasonContext) -> Optional[TechnicalReason]:
    if ctx.abs_change_pct <= 2:
        return None
    rising = ctx.snapshot.change_percent > 0
    direction = "upward" if rising else "downward"
    return TechnicalReason(
        title=f"Strong {direction.capitalize()} Momentum",
        description=(
            f"Price moving {direction} with {ctx.abs_change_pct:.2f}% change. Strong "
            f"momentum indicates {'buying' if rising else 'selling'} pressure. Be cautious "
            "of momentum exhaustion."
        ),
        type=ReasonType.OPPORTUNITY if rising else ReasonType.RISK,
    )


def _hold_reason(ctx: ReasonContext) -> Optional[TechnicalReason]:
    if ctx.action != TradeAction.HOLD:
        return None
    return TechnicalReason(
        title="Why HOLD? - Unclear Trend",
        description=(
            "Current price action doesn't show a clear directional bias. Wait for a "
            "decisive breakout or breakdown before committing capital."
        ),
        type=ReasonType.RISK,
    )


REASON_CATALOGUE: Tuple[ReasonRule, ...] = (
    _rsi_reason,
    _bollinger_position_reason,
    _bollinger_squeeze_reason,
    _volume_reason,
    _fibonacci_reason,
    _support_reason,
    _resistance_reason,
    _volatility_reason,
    _range_position_reason,
    _momentum_reason,
    _hold_reason,
)


def technical_reasons(ctx: ReasonContext) -> Tuple[TechnicalReason, ...]:
    reasons = []
    for rule in REASON_CATALOGUE:
        reason = rule(ctx)
        if reason is not None:
            reasons.append(reason)
    return tuple(reasons[:MAX_REASONS])


def _rsi_status(rsi: float) -> str:
    if rsi > 70:
        return "OVERBOUGHT"
    if rsi < 30:
        return "OVERSOLD"
    return "NEUTRAL"


def _band_status(percent_b: float) -> str:
    if percent_b > 1:
        return "above upper band"
    if percent_b < 0:
        return "below lower band"
    return "within bands"


def summary(
    snapshot: MarketSnapshot,
    indicators: IndicatorSet,
    action: TradeAction,
    sentiment: Sentiment,
    risk_level: RiskLevel,
) -> str:
    lines: List[str] = [
        f"{snapshot.symbol} is currently trading at ₹{snapshot.current_price:.2f}, showing a "
        f"{'gain' if snapshot.is_up_day else 'loss'} of {abs(snapshot.change_percent):.2f}%.",
        "",
        "TECHNICAL INDICATORS:",
    ]
    if indicators.rsi is not None:
        lines.append(f"• RSI: {indicators.rsi:.1f} ({_rsi_status(indicators.rsi)})")
    if indicators.bollinger_bands is not None:
        pct_b = indicators.bollinger_bands.percent_b
        lines.append(f"• Bollinger %B: {pct_b * 100:.0f}% {_band_status(pct_b)}")
    if indicators.volume is not None:
        lines.append(
            f"• Volume: {indicators.volume.ratio:.1f}x average ({indicators.volume.trend.upper()})"
        )
    if indicators.fibonacci is not None and snapshot.price_range != 0:
        lines.append(f"• Fibonacci: Price at {snapshot.price_position:.0f}% of range")

    if action == TradeAction.BUY:
        character = "multiple bullish indicators converging"
        advice = "Technical confluence suggests accumulation opportunity."
    elif action == TradeAction.SELL:
        character = "bearish technical signals aligning"
        advice = "Multiple bearish signals warrant caution."
    else:
        character = "mixed signals from technical indicators"
        advice = "Wait for clearer trend confirmation. Patience recommended until directional bias emerges."

    risk_notes = {
        RiskLevel.HIGH: "Exercise caution. Use tight stops and reduced position size.",
        RiskLevel.MEDIUM: "Normal market risk. Standard position sizing applicable.",
        RiskLevel.LOW: "Favorable risk/reward setup. Market showing stability.",
    }

    lines.extend([
        "",
        f"MARKET SENTIMENT: {sentiment.value.upper()}",
        f"The stock is exhibiting {sentiment.value} characteristics with {character}.",
        "",
        f"RECOMMENDATION: {action.value}",
        advice,
        "",
        f"RISK LEVEL: {risk_level.value}",
        risk_notes[risk_level],
    ])
    return "\n".join(lines)


def key_points(
    snapshot: MarketSnapshot,
    indicators: IndicatorSet,
    action: TradeAction,
) -> Tuple[str, ...]:
    sign = "+" if snapshot.change_percent > 0 else ""
    points = [f"Current price: ₹{snapshot.current_price:.2f} ({sign}{snapshot.change_percent:.2f}%)"]

    rsi = indicators.rsi
    if rsi is not None:
        if rsi > 70:
            zone = "Overbought"
        elif rsi < 30:
            zone = "Oversold"
        elif rsi > 50:
            zone = "Bullish"
        else:
            zone = "Bearish"
        points.append(f"RSI: {rsi:.1f} - {zone} territory")

    bands = indicators.bollinger_bands
    if bands is not None:
        points.append(
            f"Bollinger Band: {bands.percent_b * 100:.0f}% position - {_band_status(bands.percent_b).capitalize()}"
        )

    volume = indicators.volume
    if volume is not None:
        activity = {"surge": "Exceptional", "above-average": "Strong", "declining": "Weak"}.get(
            volume.trend, "Normal"
        )
        points.append(f"Volume: {volume.ratio:.1f}x average - {activity} activity")

    if indicators.fibonacci is not None:
        fib = indicators.fibonacci
        points.append(
            f"Fibonacci: Key support at ₹{fib.level_382:.2f} (38.2%), "
            f"resistance at ₹{fib.level_618:.2f} (61.8%)"
        )

    signals = []
    if rsi is not None and (rsi < 30 or rsi > 70):
        signals.append("extreme RSI")
    if bands is not None and (bands.percent_b > 0.8 or bands.percent_b < 0.2):
        signals.append("Bollinger extreme")
    if volume is not None and volume.ratio > 1.5:
        signals.append("high volume")
    points.append(f"{action.value} signal with {', '.join(signals) if signals else 'volume confirmation'}")

    range_pct = (snapshot.price_range / snapshot.low * 100) if snapshot.low else 0.0
    points.append(
        f"Trading range: ₹{snapshot.low:.2f} - ₹{snapshot.high:.2f} with {range_pct:.2f}% volatility"
    )
    return tuple(points)
