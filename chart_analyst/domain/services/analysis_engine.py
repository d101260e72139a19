"""
CHART ANALYSIS ENGINE
Snapshot (+ optional news sentiment) → trading recommendation

PIPELINE:
1. Classify market condition
2. Select indicators for the condition and news impact
3. Compute only the selected indicators
4. Score confluence → action, confidence, risk
5. Derive levels, trade plan, risk zones and narrative

RULES:
✅ Pure: no I/O, no shared mutable state
✅ Deterministic: identical inputs give identical results
✅ Never raises on degenerate snapshots
"""

import logging
from typing import Optional, Sequence

from chart_analyst.domain.indicators import compute_indicators, select_indicator_source
from chart_analyst.domain.indicators.sources import HistoricalSeries
from chart_analyst.domain.models import (
    AnalysisRationale,
    AnalysisResult,
    ConfluenceScore,
    IndicatorSelection,
    MarketCondition,
    MarketSnapshot,
    NewsImpact,
    NewsSentiment,
    PriceBar,
)
from chart_analyst.domain.services import level_engine, narrative_engine
from chart_analyst.domain.services.confluence_scorer import ConfluenceScorer
from chart_analyst.domain.services.indicator_selector import select_indicators
from chart_analyst.domain.services.market_condition_engine import MarketConditionEngine

logger = logging.getLogger(__name__)


class ChartAnalysisEngine:
    """
    Chart Analysis Engine
    Stateless; one instance can serve any number of concurrent callers
    """

    def __init__(
        self,
        condition_engine: Optional[MarketConditionEngine] = None,
        scorer: Optional[ConfluenceScorer] = None,
        history_min_bars: int = HistoricalSeries.REQUIRED_BARS,
    ):
        self.condition_engine = condition_engine or MarketConditionEngine()
        self.scorer = scorer or ConfluenceScorer()
        self.history_min_bars = history_min_bars

    def analyze(
        self,
        snapshot: MarketSnapshot,
        news: Optional[NewsSentiment] = None,
        history: Optional[Sequence[PriceBar]] = None,
    ) -> AnalysisResult:
        """
        Run the full analysis for one snapshot

        Args:
            snapshot: Current bar for the symbol
            news: Resolved news sentiment; None means unavailable
            history: Optional OHLCV window (oldest first) for textbook indicators

        Returns:
            AnalysisResult
        """
        news = news or NewsSentiment.unavailable()

        condition = self.condition_engine.classify(snapshot)
        logger.info(
            f"📊 {snapshot.symbol}: {condition.state.value} | trend {condition.trend.value} "
            f"| volatility {condition.volatility.value}"
        )

        selection = select_indicators(condition, news)
        source = select_indicator_source(snapshot, history, self.history_min_bars)
        indicators = compute_indicators(source, selection.chosen)
        logger.debug(f"{snapshot.symbol}: indicators {', '.join(selection.chosen)} via {source.name}")

        score = self.scorer.score(snapshot, indicators)

        supports = level_engine.support_levels(snapshot, indicators)
        resistances = level_engine.resistance_levels(snapshot, indicators)
        plan = level_engine.trade_plan(snapshot, score.action, supports, resistances)
        zones = level_engine.risk_zones(snapshot, score.risk_level, indicators)

        reasons = narrative_engine.technical_reasons(narrative_engine.ReasonContext(
            snapshot=snapshot,
            indicators=indicators,
            action=score.action,
            support_levels=supports,
            resistance_levels=resistances,
        ))

        result = AnalysisResult(
            symbol=snapshot.symbol,
            sentiment=score.sentiment,
            action=score.action,
            confidence=score.confidence,
            risk_level=score.risk_level,
            entry_price=plan.entry_price,
            target_price=plan.target_price,
            stop_loss=plan.stop_loss,
            time_horizon=plan.time_horizon,
            support_levels=supports,
            resistance_levels=resistances,
            risk_zones=zones,
            technical_reasons=reasons,
            indicators=indicators,
            summary=narrative_engine.summary(
                snapshot, indicators, score.action, score.sentiment, score.risk_level
            ),
            key_points=narrative_engine.key_points(snapshot, indicators, score.action),
            market_condition=condition,
            news_sentiment=news,
            rationale=self._build_rationale(condition, news, selection, score, source.name),
            bullish_score=score.bullish_score,
            bearish_score=score.bearish_score,
            risk_factors=score.risk_factors,
        )

        logger.info(
            f"🤖 {snapshot.symbol}: {result.action.value} with {result.confidence:.0f}% confidence "
            f"(risk {result.risk_level.value})"
        )
        return result

    @staticmethod
    def _build_rationale(
        condition: MarketCondition,
        news: NewsSentiment,
        selection: IndicatorSelection,
        score: ConfluenceScore,
        source_name: str,
    ) -> AnalysisRationale:
        final_decision = (
            f"Analyzed {len(selection.chosen)} indicators ({', '.join(selection.chosen)}) "
            f"based on {condition.state.value} market condition. "
        )
        if news.impact != NewsImpact.NONE:
            final_decision += f"News sentiment ({news.sentiment.value}) influenced decision. "
        final_decision += f"Confidence: {score.confidence:g}%"

        return AnalysisRationale(
            market_condition=condition.reasoning,
            indicator_selection=selection.reasoning,
            news_sentiment=news.reasoning,
            final_decision=final_decision,
            chosen=selection.chosen,
            weights=dict(selection.weights),
            indicator_source=source_name,
        )
