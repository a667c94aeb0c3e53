"""API Pydantic models."""

from api.models.schemas import (
    FilterStateModel,
    DecodedFilters,
    EncodedFilters,
    FilterPresetModel,
    PresetDetail,
    RankingResponse,
    OverviewResponse,
    TrendResponse,
    LabelTrendResponse,
    EmergingSignalsResponse,
    GeographyResponse,
    CitationInsightsModel,
    HealthResponse,
)

__all__ = [
    "FilterStateModel",
    "DecodedFilters",
    "EncodedFilters",
    "FilterPresetModel",
    "PresetDetail",
    "RankingResponse",
    "OverviewResponse",
    "TrendResponse",
    "LabelTrendResponse",
    "EmergingSignalsResponse",
    "GeographyResponse",
    "CitationInsightsModel",
    "HealthResponse",
]
