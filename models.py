"""
Data Models for the Text Statistics Engine
==========================================

Pydantic models for HTTP request/response handling.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class TextUpdateRequest(BaseModel):
    """Replace the session text"""

    text: str = Field(default="", description="Full document text (may be empty)")


class MatchCaseRequest(BaseModel):
    """Set the keyword match-case toggle"""

    enabled: bool = Field(..., description="Treat differently-cased words as distinct keywords")


class StatisticToggleRequest(BaseModel):
    """Enable or disable one statistic"""

    enabled: bool = Field(..., description="Show this statistic in the panel")


class RateUpdateRequest(BaseModel):
    """Update a units-per-minute rate; unparseable values are stored as 0"""

    rate: Union[int, str] = Field(..., description="Units per minute (e.g. 275 for reading)")


class DurationPart(BaseModel):
    value: int
    unit: str


class StatisticValueModel(BaseModel):
    """One computed statistic"""

    kind: str = Field(..., description="Statistic tag, e.g. 'Words' or 'ReadingTime'")
    label: str = Field(..., description="Human-readable label")
    value: Union[int, float] = Field(..., description="Raw value (seconds for time estimates)")
    display: str = Field(..., description="Formatted value for display")
    rate: Optional[int] = Field(None, description="Rate used for time estimates")
    breakdown: Optional[List[DurationPart]] = Field(None, description="Unit breakdown for time estimates")


class KeywordRowModel(BaseModel):
    word: str
    count: int
    density: float = Field(..., description="Density percentage")


class ConfigurationModel(BaseModel):
    """Current configuration state"""

    statistics_options: List[Any] = Field(..., description="Enabled statistics in display order")
    reading_rate: int
    speaking_rate: int
    hand_writing_rate: int
    match_case: bool


class SessionStateResponse(BaseModel):
    revision: int
    text: str
    text_length: int
    persistent: bool = Field(..., description="False when running on the in-memory fallback")
    degraded: bool
    configuration: ConfigurationModel


class StatisticsResponse(BaseModel):
    revision: int
    statistics: List[StatisticValueModel]
    processing_time_ms: float


class KeywordsResponse(BaseModel):
    revision: int
    match_case: bool
    density_basis: str
    total_keywords: int
    total_words: int
    keywords: List[KeywordRowModel]


class MutationResponse(BaseModel):
    """Returned by every session mutation"""

    revision: int
    configuration: ConfigurationModel


# ============================================================================
# Stateless analysis
# ============================================================================

class StatisticsAnalysisRequest(BaseModel):
    """Compute statistics for ad-hoc text without touching the session"""

    text: str = Field(default="", description="Text to analyze")
    statistics_options: Optional[List[Any]] = Field(
        default=None,
        description="Option list in persisted form (e.g. ['Words', {'ReadingTime': 275}]); defaults when omitted",
    )


class KeywordsAnalysisRequest(BaseModel):
    text: str = Field(default="", description="Text to analyze")
    match_case: bool = Field(default=False, description="Keep original casing for keywords")
    density_basis: Literal["distinct_keys", "total_words"] = Field(
        default="distinct_keys",
        description="Divisor used for keyword density percentages",
    )
    top_k: int = Field(default=0, ge=0, description="Limit rows returned (0 = all)")


def configuration_model(configuration: Dict[str, Any]) -> ConfigurationModel:
    return ConfigurationModel(**configuration)
