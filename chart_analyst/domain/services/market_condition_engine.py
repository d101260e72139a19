"""
MARKET CONDITION ENGINE
Classify the market regime from one snapshot (NOT decisions)

RESPONSIBILITIES:
- Volatility tier from ATR %
- Trend tier from the day's change
- Market state (trending / ranging / volatile / consolidating)

RULES:
❌ No signals
❌ No trading decisions
✅ Pure calculation
✅ Deterministic output
"""

from chart_analyst.domain.indicators.snapshot_proxy import (
    atr_percent,
    classify_volatility,
    safe_div,
)
from chart_analyst.domain.models import (
    MarketCondition,
    MarketSnapshot,
    MarketState,
    TrendStrength,
    VolatilityLevel,
)


STATE_NOTES = {
    MarketState.TRENDING: "Strong directional movement detected.",
    MarketState.RANGING: "Price oscillating in a defined range.",
    MarketState.VOLATILE: "High volatility creating uncertainty.",
    MarketState.CONSOLIDATING: "Price consolidating, waiting for breakout.",
}


class MarketConditionEngine:
    """
    Market Condition Engine
    Describes the market environment, does NOT make decisions
    """

    def classify(self, snapshot: MarketSnapshot) -> MarketCondition:
        """
        Classify market condition for a snapshot

        Args:
            snapshot: Single-bar market snapshot

        Returns:
            MarketCondition object
        """
        atr = atr_percent(snapshot)
        volatility = classify_volatility(atr)
        momentum = self._calculate_momentum(snapshot)
        trend = self._determine_trend(snapshot)
        state = self._determine_state(
            volatility=volatility,
            abs_change_pct=abs(snapshot.change_percent),
            price_position=snapshot.price_position,
        )

        return MarketCondition(
            state=state,
            trend=trend,
            volatility=volatility,
            momentum=momentum,
            atr=atr,
            reasoning=self._build_reasoning(snapshot, state, trend, volatility, atr),
        )

    @staticmethod
    def _calculate_momentum(snapshot: MarketSnapshot) -> float:
        """
        Formula: ((current - previous_close) / previous_close) * 100

        A zero previous close yields 0 momentum.
        """
        return safe_div(
            snapshot.current_price - snapshot.previous_close,
            snapshot.previous_close,
        ) * 100

    @staticmethod
    def _determine_trend(snapshot: MarketSnapshot) -> TrendStrength:
        """
        Logic:
        - |change %| > 3   → strong bullish / strong bearish
        - |change %| > 1.5 → bullish / bearish
        - otherwise        → neutral
        Direction comes from the sign of the absolute change.
        """
        abs_change_pct = abs(snapshot.change_percent)
        if abs_change_pct > 3:
            return TrendStrength.STRONG_BULLISH if snapshot.change > 0 else TrendStrength.STRONG_BEARISH
        if abs_change_pct > 1.5:
            return TrendStrength.BULLISH if snapshot.change > 0 else TrendStrength.BEARISH
        return TrendStrength.NEUTRAL

    @staticmethod
    def _determine_state(
        volatility: VolatilityLevel,
        abs_change_pct: float,
        price_position: float,
    ) -> MarketState:
        """
        Logic (first match wins):
        - extreme volatility                        → volatile
        - |change %| > 2                            → trending
        - position in (40, 60) and |change %| < 1   → ranging
        - otherwise                                 → consolidating
        """
        if volatility == VolatilityLevel.EXTREME:
            return MarketState.VOLATILE
        if abs_change_pct > 2:
            return MarketState.TRENDING
        if 40 < price_position < 60 and abs_change_pct < 1:
            return MarketState.RANGING
        return MarketState.CONSOLIDATING

    @staticmethod
    def _build_reasoning(
        snapshot: MarketSnapshot,
        state: MarketState,
        trend: TrendStrength,
        volatility: VolatilityLevel,
        atr: float,
    ) -> str:
        direction = "upward" if snapshot.change > 0 else "downward"
        return (
            f"Market is {state.value} with {trend.value} trend. "
            f"ATR at {atr:.2f}% indicates {volatility.value} volatility. "
            f"Price moved {abs(snapshot.change_percent):.2f}% {direction} "
            f"within {snapshot.price_range:.2f} range. {STATE_NOTES[state]}"
        )
