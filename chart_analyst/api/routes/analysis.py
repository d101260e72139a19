"""
Analysis API Routes
Visual chart analysis: market condition, confluence score and trade levels
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from chart_analyst.api.dependencies import get_analysis_engine, get_news_client
from chart_analyst.api.schemas import (
    AnalysisOut,
    ChartAnalysisRequest,
    ChartAnalysisResponse,
    IndicatorsOut,
    MarketConditionOut,
    NewsSentimentOut,
    RationaleOut,
)
from chart_analyst.domain.services.analysis_engine import ChartAnalysisEngine
from chart_analyst.infrastructure.news.sentiment_client import NewsSentimentClient
from chart_analyst.utils.time import now_ist_iso

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/visual", response_model=ChartAnalysisResponse)
async def analyze_chart(
    payload: ChartAnalysisRequest,
    engine: ChartAnalysisEngine = Depends(get_analysis_engine),
    news_client: NewsSentimentClient = Depends(get_news_client),
):
    """
    Analyze one price snapshot

    News sentiment is resolved first (bounded by its timeout) because the
    indicator weighting depends on its impact.
    """
    logger.info(f"🤖 Analysis requested for {payload.symbol}")
    try:
        news = await news_client.fetch(payload.symbol)
        result = engine.analyze(
            payload.to_snapshot(),
            news=news,
            history=payload.to_history(),
        )
    except Exception as exc:
        logger.exception(f"❌ Analysis failed for {payload.symbol}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": str(exc) or "Analysis failed",
                "timestamp": now_ist_iso(),
            },
        )

    return ChartAnalysisResponse(
        success=True,
        symbol=result.symbol,
        analysis=AnalysisOut.model_validate(result),
        indicators=IndicatorsOut.model_validate(result.indicators),
        market_condition=MarketConditionOut.model_validate(result.market_condition),
        news_sentiment=NewsSentimentOut.model_validate(result.news_sentiment),
        ai_reasoning=RationaleOut.model_validate(result.rationale),
        timestamp=now_ist_iso(),
    )
