"""
CONFLUENCE SCORER

Point-scoring rulebook over the selected indicators.

Each present indicator adds points to a bullish or bearish tally; the
difference between the tallies decides BUY / SELL / HOLD and the confidence.
Indicator weights from the selector are NOT used here.
"""

import logging
from typing import Tuple

from chart_analyst.domain.models import (
    ConfluenceScore,
    IndicatorSet,
    MarketSnapshot,
    RiskLevel,
    Sentiment,
    TradeAction,
)

logger = logging.getLogger(__name__)


DECISION_THRESHOLD = 20
MAX_CONFIDENCE = 95
VOLUME_DECLINE_PENALTY = 10
FIB_PROXIMITY = 0.01


class ConfluenceScorer:
    """Scores an IndicatorSet against one snapshot"""

    def score(self, snapshot: MarketSnapshot, indicators: IndicatorSet) -> ConfluenceScore:
        bullish, bearish = self._tally(snapshot, indicators)
        action, sentiment, confidence = self._decide(bullish, bearish)

        penalty_applied = (
            indicators.volume is not None and indicators.volume.trend == "declining"
        )
        if penalty_applied:
            # Applied after the action formula; the HOLD floor is not re-applied
            confidence -= VOLUME_DECLINE_PENALTY

        risk_factors = self.count_risk_factors(snapshot, indicators)
        result = ConfluenceScore(
            bullish_score=bullish,
            bearish_score=bearish,
            action=action,
            sentiment=sentiment,
            confidence=confidence,
            risk_level=self.risk_level_for(risk_factors),
            risk_factors=risk_factors,
            volume_penalty_applied=penalty_applied,
        )
        logger.debug(
            f"{snapshot.symbol}: bullish={bullish:.1f} bearish={bearish:.1f} "
            f"→ {action.value} ({confidence:.0f}%)"
        )
        return result

    @staticmethod
    def _tally(snapshot: MarketSnapshot, indicators: IndicatorSet) -> Tuple[float, float]:
        bullish = 0.0
        bearish = 0.0
        price = snapshot.current_price
        up_day = snapshot.is_up_day

        # 1) RSI
        if indicators.rsi is not None:
            rsi = indicators.rsi
            if rsi < 30:
                bullish += 25
            elif rsi > 70:
                bearish += 25
            elif rsi > 50:
                bullish += (rsi - 50) * 0.5
            else:
                bearish += (50 - rsi) * 0.5

        # 2) Bollinger position and squeeze
        bands = indicators.bollinger_bands
        if bands is not None:
            if bands.percent_b < 0.2:
                bullish += 20
            elif bands.percent_b > 0.8:
                bearish += 20
            if bands.bandwidth < 0.1:
                # Squeeze: breakout risk both ways
                bullish += 5
                bearish += 5

        # 3) Volume confirms the day's direction. The original web route scores an
        # unchanged day as bearish here; an unchanged day scores nothing instead.
        volume = indicators.volume
        if volume is not None and snapshot.change != 0:
            points = {"surge": 25, "above-average": 15}.get(volume.trend, 0)
            if up_day:
                bullish += points
            else:
                bearish += points

        # 4) Fibonacci proximity
        fib = indicators.fibonacci
        if fib is not None and price != 0:
            near_level = any(abs(price - level) / price < FIB_PROXIMITY for level in fib.interior())
            if near_level:
                if price < fib.level_500:
                    bullish += 15
                else:
                    bearish += 15

        # 5) MACD
        if indicators.macd is not None:
            if indicators.macd.trend == "bullish":
                bullish += 20
            elif indicators.macd.trend == "bearish":
                bearish += 20

        # 6) Stochastic
        if indicators.stochastic is not None:
            if indicators.stochastic.signal == "oversold":
                bullish += 15
            elif indicators.stochastic.signal == "overbought":
                bearish += 15

        # 7) Price momentum alignment
        position = snapshot.price_position
        if up_day and position > 60:
            bullish += 10
        elif snapshot.change < 0 and position < 40:
            bearish += 10

        return bullish, bearish

    @staticmethod
    def _decide(bullish: float, bearish: float) -> Tuple[TradeAction, Sentiment, float]:
        """
        Logic:
        - bullish leads by more than 20 → BUY,  confidence min(60 + diff, 95)
        - bearish leads by more than 20 → SELL, confidence min(60 + diff, 95)
        - otherwise                     → HOLD, confidence max(50, 70 - diff)
        """
        diff = abs(bullish - bearish)
        if bullish > bearish and diff > DECISION_THRESHOLD:
            return TradeAction.BUY, Sentiment.BULLISH, min(60 + diff, MAX_CONFIDENCE)
        if bearish > bullish and diff > DECISION_THRESHOLD:
            return TradeAction.SELL, Sentiment.BEARISH, min(60 + diff, MAX_CONFIDENCE)
        return TradeAction.HOLD, Sentiment.NEUTRAL, max(50, 70 - diff)

    @staticmethod
    def count_risk_factors(snapshot: MarketSnapshot, indicators: IndicatorSet) -> int:
        factors = 0
        if indicators.rsi is not None and (indicators.rsi > 70 or indicators.rsi < 30):
            factors += 1
        bands = indicators.bollinger_bands
        if bands is not None and (bands.percent_b > 1 or bands.percent_b < 0):
            factors += 1
        if abs(snapshot.change_percent) > 3:
            factors += 1
        if indicators.volume is not None and indicators.volume.trend == "surge":
            factors += 1
        return factors

    @staticmethod
    def risk_level_for(risk_factors: int) -> RiskLevel:
        if risk_factors >= 3:
            return RiskLevel.HIGH
        if risk_factors >= 2:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW
