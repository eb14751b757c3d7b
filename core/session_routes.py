"""
Session routes: edit the document, toggle statistics, read the live panel.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import Depends, HTTPException, Response, status

from models import (
    KeywordsResponse,
    MatchCaseRequest,
    MutationResponse,
    RateUpdateRequest,
    SessionStateResponse,
    StatisticsResponse,
    StatisticToggleRequest,
    TextUpdateRequest,
    configuration_model,
)
from statistics_options import PARAMETERIZED_KINDS, StatisticKind, resolve_kind
from tools.keyword_density import EXPORT_FILENAME

from .app_state import app, get_session, logger
from .document_session import DocumentSession


def _resolve_kind_or_404(kind: str) -> StatisticKind:
    try:
        return resolve_kind(kind)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _mutation_response(session: DocumentSession, revision: int) -> MutationResponse:
    return MutationResponse(
        revision=revision,
        configuration=configuration_model(session.configuration().to_dict()),
    )


@app.get("/health")
async def health_check(session: DocumentSession = Depends(get_session)):
    """Health check endpoint"""
    return {
        "status": "healthy",
        "persistent": session.persistent,
        "revision": session.revision,
        "timestamp": datetime.now().isoformat(),
    }


@app.get("/session", response_model=SessionStateResponse)
async def get_session_state(session: DocumentSession = Depends(get_session)):
    """Current text and configuration state"""
    described = session.describe()
    return SessionStateResponse(
        revision=described["revision"],
        text=session.text,
        text_length=described["text_length"],
        persistent=described["persistent"],
        degraded=described["degraded"],
        configuration=configuration_model(described["configuration"]),
    )


@app.put("/session/text", response_model=MutationResponse)
async def update_text(request: TextUpdateRequest, session: DocumentSession = Depends(get_session)):
    revision = session.set_text(request.text)
    return _mutation_response(session, revision)


@app.delete("/session/text", response_model=MutationResponse)
async def clear_text(session: DocumentSession = Depends(get_session)):
    revision = session.clear_text()
    return _mutation_response(session, revision)


@app.put("/session/match-case", response_model=MutationResponse)
async def update_match_case(request: MatchCaseRequest, session: DocumentSession = Depends(get_session)):
    revision = session.set_match_case(request.enabled)
    return _mutation_response(session, revision)


@app.put("/session/options/{kind}", response_model=MutationResponse)
async def toggle_statistic(
    kind: str,
    request: StatisticToggleRequest,
    session: DocumentSession = Depends(get_session),
):
    """Enable or disable a statistic; the option list is rebuilt in display order"""
    resolved = _resolve_kind_or_404(kind)
    revision = session.toggle_statistic(resolved, request.enabled)
    return _mutation_response(session, revision)


@app.put("/session/rates/{kind}", response_model=MutationResponse)
async def update_rate(
    kind: str,
    request: RateUpdateRequest,
    session: DocumentSession = Depends(get_session),
):
    """Set the rate of a time estimate (ReadingTime, SpeakingTime, HandWritingTime)"""
    resolved = _resolve_kind_or_404(kind)
    if resolved not in PARAMETERIZED_KINDS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{resolved.value} does not take a rate",
        )
    revision = session.set_rate(resolved, request.rate)
    return _mutation_response(session, revision)


@app.get("/session/statistics", response_model=StatisticsResponse)
async def get_statistics(session: DocumentSession = Depends(get_session)):
    """Enabled statistics, in display order, from the latest recompute pass"""
    try:
        result = session.current_result()
    except Exception as e:
        logger.error(f"Statistics recompute failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Recompute failed: {str(e)}"
        )

    return StatisticsResponse(
        revision=result.revision,
        statistics=[value.to_dict() for value in result.statistics],
        processing_time_ms=result.elapsed_ms,
    )


@app.get("/session/keywords", response_model=KeywordsResponse)
async def get_keywords(session: DocumentSession = Depends(get_session)):
    """Keyword table, highest count first"""
    result = session.current_result()
    return KeywordsResponse(
        revision=result.revision,
        match_case=result.snapshot.configuration.match_case,
        density_basis=session.density_basis,
        total_keywords=len(result.keywords),
        total_words=sum(result.keywords.values()),
        keywords=[
            {"word": row.word, "count": row.count, "density": row.density}
            for row in result.keyword_rows
        ],
    )


@app.get("/session/keywords/export")
async def export_keywords(session: DocumentSession = Depends(get_session)):
    """Download the keyword table as results.csv"""
    data = session.export_csv()
    return Response(
        content=data,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )
