"""
FastAPI router for stateless text analysis
==========================================

Provides HTTP API endpoints for:
- Statistics: counts, averages, extremes and time estimates for ad-hoc text
- Keywords: keyword frequency table with density percentages

Nothing here reads or writes the document session.
"""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, HTTPException, status

from models import (
    KeywordsAnalysisRequest,
    KeywordsResponse,
    StatisticsAnalysisRequest,
    StatisticsResponse,
)
from statistics_options import StatisticOption, StatisticOptionSet
from statistics_report import build_statistics_report
from tools.keyword_density import build_dictionary, ranked_keywords
from tools.segmenter import segment

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analysis", tags=["analysis"])


@router.post(
    "/statistics",
    response_model=StatisticsResponse,
    summary="Compute Text Statistics",
    description=(
        "Computes the requested statistics for the given text. The option list "
        "uses the persisted form; omitting it selects the default six statistics "
        "and an invalid list is rejected with 422."
    )
)
async def analyze_statistics_endpoint(request: StatisticsAnalysisRequest) -> StatisticsResponse:
    start_time = time.time()

    if request.statistics_options is None:
        option_set = StatisticOptionSet.defaults()
    else:
        try:
            parsed = [StatisticOption.from_json(item) for item in request.statistics_options]
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=f"Invalid statistics_options: {str(e)}"
            )
        option_set = StatisticOptionSet(
            [option.kind for option in parsed],
            {option.kind: option.rate for option in parsed if option.is_parameterized},
        )

    try:
        statistics = build_statistics_report(option_set.options, segment(request.text))
    except Exception as e:
        logger.error(f"Statistics analysis failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Analysis failed: {str(e)}"
        )

    processing_time_ms = (time.time() - start_time) * 1000
    return StatisticsResponse(
        revision=0,
        statistics=[value.to_dict() for value in statistics],
        processing_time_ms=processing_time_ms,
    )


@router.post(
    "/keywords",
    response_model=KeywordsResponse,
    summary="Build Keyword Table",
    description="Counts keyword occurrences and returns them highest count first."
)
async def analyze_keywords_endpoint(request: KeywordsAnalysisRequest) -> KeywordsResponse:
    try:
        dictionary = build_dictionary(request.text, request.match_case)
        rows = ranked_keywords(dictionary, request.density_basis)
    except Exception as e:
        logger.error(f"Keyword analysis failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Analysis failed: {str(e)}"
        )

    if request.top_k:
        rows = rows[:request.top_k]

    return KeywordsResponse(
        revision=0,
        match_case=request.match_case,
        density_basis=request.density_basis,
        total_keywords=len(dictionary),
        total_words=sum(dictionary.values()),
        keywords=[{"word": row.word, "count": row.count, "density": row.density} for row in rows],
    )


@router.get(
    "/health",
    summary="Health Check",
    description="Verify that the analysis endpoints are operational"
)
async def health_check():
    """Health check endpoint for analysis router"""
    return {
        "status": "healthy",
        "endpoints": [
            "/analysis/statistics",
            "/analysis/keywords"
        ]
    }
