"""
Unit Tests for Market Condition Engine
"""

import pytest

from chart_analyst.domain.models import MarketState, TrendStrength, VolatilityLevel
from chart_analyst.domain.services.market_condition_engine import MarketConditionEngine


@pytest.fixture
def condition_engine():
    """Fixture for MarketConditionEngine"""
    return MarketConditionEngine()


class TestMarketConditionEngine:
    """Test suite for Market Condition Engine"""

    def test_extreme_volatility_wins_over_trend(self, condition_engine, trending_volatile_snapshot):
        """A 10% range day is volatile even with a >2% directional move"""
        condition = condition_engine.classify(trending_volatile_snapshot)
        assert condition.atr == pytest.approx(10.0)
        assert condition.volatility == VolatilityLevel.EXTREME
        assert condition.state == MarketState.VOLATILE
        assert condition.trend == TrendStrength.BULLISH
        assert condition.momentum == pytest.approx(2 / 98 * 100)

    def test_flat_day_is_ranging(self, condition_engine, flat_snapshot):
        condition = condition_engine.classify(flat_snapshot)
        assert condition.state == MarketState.RANGING
        assert condition.trend == TrendStrength.NEUTRAL
        assert condition.volatility == VolatilityLevel.MEDIUM
        assert condition.momentum == 0.0

    def test_trending_day(self, condition_engine, snapshot_factory):
        snap = snapshot_factory(
            current_price=100.0, previous_close=97.0, high=101.0, low=98.5,
            change=3.0, change_percent=3.09,
        )
        condition = condition_engine.classify(snap)
        assert condition.volatility == VolatilityLevel.HIGH
        assert condition.state == MarketState.TRENDING
        assert condition.trend == TrendStrength.STRONG_BULLISH

    def test_strong_bearish_trend(self, condition_engine, snapshot_factory):
        snap = snapshot_factory(
            current_price=98.5, previous_close=102.6, high=101.0, low=98.0,
            change=-4.1, change_percent=-4.0,
        )
        condition = condition_engine.classify(snap)
        assert condition.trend == TrendStrength.STRONG_BEARISH
        assert condition.state == MarketState.TRENDING

    def test_consolidating_day(self, condition_engine, snapshot_factory):
        snap = snapshot_factory(
            current_price=100.0, previous_close=99.5, high=101.0, low=99.5,
            change=0.5, change_percent=0.5,
        )
        condition = condition_engine.classify(snap)
        assert condition.state == MarketState.CONSOLIDATING
        assert condition.trend == TrendStrength.NEUTRAL

    def test_range_boundary_is_exclusive(self, condition_engine, snapshot_factory):
        # Position exactly 40 is not inside (40, 60)
        edge = snapshot_factory(
            current_price=1004.0, previous_close=1004.0, high=1010.0, low=1000.0,
            change=0.0, change_percent=0.0,
        )
        assert edge.price_position == 40.0
        assert condition_engine.classify(edge).state == MarketState.CONSOLIDATING

    def test_zero_previous_close_does_not_raise(self, condition_engine, snapshot_factory):
        snap = snapshot_factory(previous_close=0.0, change=0.0, change_percent=0.0)
        condition = condition_engine.classify(snap)
        assert condition.momentum == 0.0

    def test_zero_width_day(self, condition_engine, snapshot_factory):
        snap = snapshot_factory(high=100.0, low=100.0, change=0.0, change_percent=0.0)
        condition = condition_engine.classify(snap)
        assert condition.atr == 0.0
        assert condition.volatility == VolatilityLevel.LOW
        assert condition.state == MarketState.RANGING

    def test_reasoning_embeds_computed_values(self, condition_engine, trending_volatile_snapshot):
        condition = condition_engine.classify(trending_volatile_snapshot)
        assert "10.00%" in condition.reasoning
        assert "2.04%" in condition.reasoning
        assert "volatile" in condition.reasoning


@pytest.mark.parametrize("change_percent,change,expected", [
    (0.5, 0.5, TrendStrength.NEUTRAL),
    (1.5, 1.5, TrendStrength.NEUTRAL),
    (1.6, 1.6, TrendStrength.BULLISH),
    (-1.6, -1.6, TrendStrength.BEARISH),
    (3.0, 3.0, TrendStrength.BULLISH),
    (3.1, 3.1, TrendStrength.STRONG_BULLISH),
    (-3.1, -3.1, TrendStrength.STRONG_BEARISH),
])
def test_trend_tiers_parametrized(condition_engine, snapshot_factory, change_percent, change, expected):
    """Parametrized test for trend tiers"""
    snap = snapshot_factory(change=change, change_percent=change_percent)
    assert condition_engine._determine_trend(snap) == expected
