"""
Indicator selection table.

Chooses which indicators are informative for the classified market state and
weights them. Weights are audit metadata carried into the rationale; the
confluence scorer does not read them.
"""

from typing import Dict, Tuple

from chart_analyst.domain.models import (
    IndicatorSelection,
    MarketCondition,
    MarketState,
    NewsImpact,
    NewsSentiment,
    VolatilityLevel,
)


BASE_INDICATORS: Tuple[Tuple[str, float], ...] = (
    ("volume", 1.0),
    ("fibonacci", 1.0),
)

STATE_INDICATORS: Dict[MarketState, Tuple[Tuple[str, float], ...]] = {
    MarketState.TRENDING: (("rsi", 1.5), ("macd", 1.5)),
    MarketState.RANGING: (("bollinger_bands", 1.5), ("stochastic", 1.2)),
    MarketState.VOLATILE: (("atr", 1.8), ("bollinger_bands", 1.3), ("rsi", 1.0)),
    MarketState.CONSOLIDATING: (("bollinger_bands", 1.2), ("rsi", 1.0)),
}

HIGH_NEWS_WEIGHT_FACTOR = 0.7


def _state_reasoning(condition: MarketCondition) -> str:
    if condition.state == MarketState.TRENDING:
        return (
            f"Market is {condition.trend.value} trending. RSI and MACD excel at confirming "
            "trend strength and momentum shifts. "
        )
    if condition.state == MarketState.RANGING:
        return (
            "Market is ranging/sideways. Bollinger Bands and Stochastic identify "
            "overbought/oversold bounces within the range. "
        )
    if condition.state == MarketState.VOLATILE:
        return (
            f"Market is highly volatile (ATR: {condition.atr:.2f}%). ATR measures risk, "
            "Bollinger Bands show volatility extremes, RSI confirms oversold/overbought. "
        )
    return (
        "Market is consolidating. Watching for Bollinger Band squeeze breakout and "
        "RSI directional confirmation. "
    )


def _news_reasoning(news: NewsSentiment) -> str:
    if news.impact == NewsImpact.HIGH:
        return (
            f"HIGH NEWS IMPACT detected ({news.sentiment.value}). Technical indicators "
            f"weighted down 30% due to news-driven price action. {news.reasoning}"
        )
    if news.impact == NewsImpact.MEDIUM:
        return (
            f"Moderate news impact ({news.sentiment.value}). Combining technical signals "
            "with news sentiment. "
        )
    return "No significant news impact. Pure technical analysis. "


def select_indicators(condition: MarketCondition, news: NewsSentiment) -> IndicatorSelection:
    """
    Pick indicators for the market state.

    Volume and Fibonacci are always included. High news impact scales every
    weight by 0.7.
    """
    entries = BASE_INDICATORS + STATE_INDICATORS.get(
        condition.state, STATE_INDICATORS[MarketState.CONSOLIDATING]
    )
    chosen = tuple(name for name, _ in entries)
    weights = {name: weight for name, weight in entries}

    if news.impact == NewsImpact.HIGH:
        weights = {name: weight * HIGH_NEWS_WEIGHT_FACTOR for name, weight in weights.items()}

    reasoning = _state_reasoning(condition) + _news_reasoning(news)
    if condition.volatility == VolatilityLevel.EXTREME:
        reasoning += "EXTREME volatility warning! Widen stop losses and reduce position size."

    return IndicatorSelection(chosen=chosen, weights=weights, reasoning=reasoning)
