"""
Unit Tests for Confluence Scorer
"""

import itertools

import pytest

from chart_analyst.domain.models import (
    BollingerBands,
    FibonacciLevels,
    IndicatorSet,
    MacdReading,
    RiskLevel,
    Sentiment,
    StochasticReading,
    TradeAction,
    VolumeAnalysis,
)
from chart_analyst.domain.services.analysis_engine import ChartAnalysisEngine
from chart_analyst.domain.services.confluence_scorer import ConfluenceScorer


NEUTRAL_BANDS = BollingerBands(upper=110.0, middle=100.0, lower=90.0, percent_b=0.5, bandwidth=0.2)
FIB_90_110 = FibonacciLevels(
    level_0=90.0, level_236=94.72, level_382=97.64, level_500=100.0,
    level_618=102.36, level_786=105.72, level_100=110.0,
)


def _macd(trend: str) -> MacdReading:
    return MacdReading(value=0.0, signal=0.0, histogram=0.0, trend=trend)


def _volume(trend: str, ratio: float = 1.0) -> VolumeAnalysis:
    return VolumeAnalysis(current=1000.0, average=1000.0, ratio=ratio, trend=trend)


@pytest.fixture
def scorer():
    return ConfluenceScorer()


@pytest.fixture
def unchanged(snapshot_factory):
    """Price mid-range, no change: no volume or momentum points."""
    return snapshot_factory()


@pytest.fixture
def up_day(snapshot_factory):
    return snapshot_factory(previous_close=99.0, change=1.0, change_percent=1.01)


class TestDecisionThreshold:

    def test_difference_of_exactly_twenty_holds(self, scorer, unchanged):
        result = scorer.score(unchanged, IndicatorSet(macd=_macd("bullish")))
        assert (result.bullish_score, result.bearish_score) == (20.0, 0.0)
        assert result.action == TradeAction.HOLD
        assert result.sentiment == Sentiment.NEUTRAL
        assert result.confidence == 50

    def test_difference_of_twenty_one_buys(self, scorer, unchanged):
        result = scorer.score(unchanged, IndicatorSet(rsi=52.0, macd=_macd("bullish")))
        assert result.bullish_score == 21.0
        assert result.action == TradeAction.BUY
        assert result.sentiment == Sentiment.BULLISH
        assert result.confidence == 81

    def test_difference_of_twenty_one_sells(self, scorer, unchanged):
        result = scorer.score(unchanged, IndicatorSet(rsi=48.0, macd=_macd("bearish")))
        assert result.bearish_score == 21.0
        assert result.action == TradeAction.SELL
        assert result.sentiment == Sentiment.BEARISH
        assert result.confidence == 81

    def test_confidence_is_capped(self, scorer, unchanged):
        indicators = IndicatorSet(
            rsi=20.0,
            macd=_macd("bullish"),
            stochastic=StochasticReading(k=10.0, d=10.0, signal="oversold"),
            bollinger_bands=BollingerBands(110.0, 100.0, 90.0, percent_b=0.1, bandwidth=0.2),
        )
        result = scorer.score(unchanged, indicators)
        assert result.bullish_score == 80.0
        assert result.confidence == 95

    def test_empty_indicator_set_holds_at_seventy(self, scorer, unchanged):
        result = scorer.score(unchanged, IndicatorSet())
        assert result.action == TradeAction.HOLD
        assert result.confidence == 70


class TestRules:

    @pytest.mark.parametrize("rsi,bullish,bearish", [
        (25.0, 25.0, 0.0),
        (75.0, 0.0, 25.0),
        (60.0, 5.0, 0.0),
        (40.0, 0.0, 5.0),
        (50.0, 0.0, 0.0),
    ])
    def test_rsi_points(self, scorer, unchanged, rsi, bullish, bearish):
        result = scorer.score(unchanged, IndicatorSet(rsi=rsi))
        assert (result.bullish_score, result.bearish_score) == (bullish, bearish)

    def test_squeeze_adds_to_both_sides(self, scorer, unchanged):
        bands = BollingerBands(101.0, 100.0, 99.0, percent_b=0.5, bandwidth=0.02)
        result = scorer.score(unchanged, IndicatorSet(bollinger_bands=bands))
        assert (result.bullish_score, result.bearish_score) == (5.0, 5.0)

    def test_band_extremes(self, scorer, unchanged):
        low = BollingerBands(110.0, 100.0, 90.0, percent_b=0.1, bandwidth=0.2)
        high = BollingerBands(110.0, 100.0, 90.0, percent_b=0.9, bandwidth=0.2)
        assert scorer.score(unchanged, IndicatorSet(bollinger_bands=low)).bullish_score == 20.0
        assert scorer.score(unchanged, IndicatorSet(bollinger_bands=high)).bearish_score == 20.0

    def test_volume_surge_follows_day_direction(self, scorer, up_day, snapshot_factory):
        down_day = snapshot_factory(previous_close=101.0, change=-1.0, change_percent=-0.99)
        surge = IndicatorSet(volume=_volume("surge", 2.5))
        assert scorer.score(up_day, surge).bullish_score == 25.0
        assert scorer.score(down_day, surge).bearish_score == 25.0

    def test_unchanged_day_scores_no_volume(self, scorer, unchanged):
        result = scorer.score(unchanged, IndicatorSet(volume=_volume("surge", 2.5)))
        assert (result.bullish_score, result.bearish_score) == (0.0, 0.0)

    def test_fibonacci_at_midpoint_is_bearish(self, scorer, unchanged):
        result = scorer.score(unchanged, IndicatorSet(fibonacci=FIB_90_110))
        assert (result.bullish_score, result.bearish_score) == (0.0, 15.0)

    def test_fibonacci_below_midpoint_is_bullish(self, scorer, snapshot_factory):
        snap = snapshot_factory(current_price=97.7, previous_close=97.7, high=98.7, low=96.7)
        result = scorer.score(snap, IndicatorSet(fibonacci=FIB_90_110))
        assert (result.bullish_score, result.bearish_score) == (15.0, 0.0)

    def test_fibonacci_far_from_levels_scores_nothing(self, scorer, snapshot_factory):
        snap = snapshot_factory(current_price=108.0, previous_close=108.0, high=109.0, low=107.0)
        result = scorer.score(snap, IndicatorSet(fibonacci=FIB_90_110))
        assert (result.bullish_score, result.bearish_score) == (0.0, 0.0)

    def test_stochastic_extremes(self, scorer, unchanged):
        oversold = StochasticReading(k=10.0, d=10.0, signal="oversold")
        overbought = StochasticReading(k=90.0, d=90.0, signal="overbought")
        assert scorer.score(unchanged, IndicatorSet(stochastic=oversold)).bullish_score == 15.0
        assert scorer.score(unchanged, IndicatorSet(stochastic=overbought)).bearish_score == 15.0

    def test_momentum_alignment(self, scorer, snapshot_factory):
        strong_close = snapshot_factory(current_price=100.8, previous_close=100.0, change=0.8, change_percent=0.8)
        weak_close = snapshot_factory(current_price=99.2, previous_close=100.0, change=-0.8, change_percent=-0.8)
        assert scorer.score(strong_close, IndicatorSet()).bullish_score == 10.0
        assert scorer.score(weak_close, IndicatorSet()).bearish_score == 10.0


class TestVolumePenalty:

    def test_declining_volume_lowers_confidence(self, scorer, up_day):
        result = scorer.score(up_day, IndicatorSet(volume=_volume("declining", 0.4)))
        assert result.action == TradeAction.HOLD
        assert result.confidence == 60
        assert result.volume_penalty_applied is True

    def test_penalty_is_not_reclamped_to_hold_floor(self, scorer, up_day):
        indicators = IndicatorSet(volume=_volume("declining", 0.4), macd=_macd("bullish"))
        result = scorer.score(up_day, indicators)
        assert result.action == TradeAction.HOLD
        assert result.confidence == 40

    def test_penalty_applies_to_directional_calls(self, scorer, up_day):
        indicators = IndicatorSet(
            rsi=20.0, macd=_macd("bullish"), volume=_volume("declining", 0.4)
        )
        result = scorer.score(up_day, indicators)
        assert result.action == TradeAction.BUY
        assert result.confidence == 95 - 10


class TestRisk:

    def test_three_factors_is_high(self, scorer, snapshot_factory):
        snap = snapshot_factory(current_price=104.0, previous_close=100.0, high=105.0, low=99.0)
        indicators = IndicatorSet(
            rsi=80.0,
            bollinger_bands=BollingerBands(103.0, 100.0, 97.0, percent_b=1.2, bandwidth=0.06),
        )
        result = scorer.score(snap, indicators)
        assert result.risk_factors == 3
        assert result.risk_level == RiskLevel.HIGH

    def test_two_factors_is_medium(self, scorer, unchanged):
        result = scorer.score(unchanged, IndicatorSet(rsi=80.0, volume=_volume("surge", 2.5)))
        assert result.risk_factors == 2
        assert result.risk_level == RiskLevel.MEDIUM

    def test_no_factors_is_low(self, scorer, unchanged):
        result = scorer.score(unchanged, IndicatorSet(rsi=55.0, bollinger_bands=NEUTRAL_BANDS))
        assert result.risk_factors == 0
        assert result.risk_level == RiskLevel.LOW


def test_confidence_bounds_and_high_risk_factors_over_grid(snapshot_factory):
    """Every generated snapshot keeps confidence in range and justifies High risk."""
    engine = ChartAnalysisEngine()
    prices = (50.0, 99.0, 100.0, 101.0, 140.0)
    changes = (-6.0, -2.5, 0.0, 1.0, 4.5)
    widths = (0.0, 0.5, 3.0, 12.0)
    volumes = (0.0, 400_000.0, 2_000_000.0)

    for price, change, width, volume in itertools.product(prices, changes, widths, volumes):
        snap = snapshot_factory(
            current_price=price,
            previous_close=price - change,
            high=price + width / 2,
            low=price - width / 2,
            volume=volume,
        )
        result = engine.analyze(snap)
        penalty = 10 if result.indicators.volume and result.indicators.volume.trend == "declining" else 0

        if result.action == TradeAction.HOLD:
            assert 50 <= result.confidence + penalty <= 70
        else:
            assert 0 <= result.confidence <= 95

        if result.risk_level == RiskLevel.HIGH:
            rsi = result.indicators.rsi
            bands = result.indicators.bollinger_bands
            assert (
                (rsi is not None and (rsi > 70 or rsi < 30))
                or (bands is not None and not 0 <= bands.percent_b <= 1)
                or abs(snap.change_percent) > 3
                or (result.indicators.volume is not None and result.indicators.volume.trend == "surge")
            )
