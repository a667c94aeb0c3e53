"""Pydantic schemas for API request/response validation.

Response fields are serialized in camelCase, matching the serialized
FilterState shape and the `to_dict()` output of the analysis results.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Optional, Union


class CamelModel(BaseModel):
    """Base model accepting snake_case or camelCase and emitting camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Filters
# =============================================================================

class FilterStateModel(CamelModel):
    """Serialized FilterState. Empty lists place no constraint."""
    drug: list[str] = Field(default_factory=list, description="Drug names")
    company: list[str] = Field(default_factory=list, description="Manufacturers")
    therapeutic_area: list[str] = Field(default_factory=list, description="Therapeutic areas")
    country: list[str] = Field(default_factory=list, description="Countries")
    specialty: list[str] = Field(default_factory=list, description="Physician specialties")
    profession: list[str] = Field(default_factory=list, description="Professional roles")
    age_group: list[str] = Field(default_factory=list, description="Predicted patient age groups")
    gender: list[str] = Field(default_factory=list, description="Predicted patient genders")
    date_from: Optional[str] = Field(None, description="ISO-8601 lower bound (inclusive)")
    date_to: Optional[str] = Field(None, description="ISO-8601 upper bound (inclusive)")


class DecodedFilters(CamelModel):
    """A query string decoded to its canonical FilterState."""
    filters: FilterStateModel
    query: str
    summary: str
    active_filter_count: int


class EncodedFilters(CamelModel):
    """A FilterState encoded for the URL."""
    query: str
    url: str


class OptionValue(BaseModel):
    """Autocomplete option."""
    value: str
    label: str
    count: int


class FilterSuggestionModel(CamelModel):
    """A one-click filter built from a top label."""
    dimension: str
    label: str
    count: int
    apply: dict[str, Any]


class FilterPresetModel(CamelModel):
    """Built-in filter preset."""
    id: str
    name: str
    description: str
    category: str
    filters: dict[str, Any]
    lookback_days: Optional[int] = None
    is_default: bool = False
    is_built_in: bool = True


class PresetDetail(FilterPresetModel):
    """Preset with the FilterState it resolves to today."""
    resolved: FilterStateModel
    query: str


# =============================================================================
# Aggregates
# =============================================================================

class RankedItemModel(CamelModel):
    """A label and how often it occurs."""
    label: str
    count: int
    share: Optional[float] = None


class RankingResponse(CamelModel):
    """Top labels for one dimension."""
    dimension: str
    total_records: int
    items: list[RankedItemModel]


class KeyMetricsModel(CamelModel):
    """Headline counts."""
    total_records: int
    unique_countries: int
    unique_specialties: int
    unique_drugs: int


class OverviewResponse(CamelModel):
    """Dashboard overview for the active filters."""
    summary: str
    metrics: KeyMetricsModel
    top_drugs: list[RankedItemModel]
    top_therapeutic_areas: list[RankedItemModel]


class SeriesPointModel(CamelModel):
    """Aggregated value for the bucket starting at `date`."""
    date: str
    value: Union[int, float]


class TrendResponse(CamelModel):
    """Fixed-width bucket series."""
    metric: str
    bucket_days: int
    date_from: str
    date_to: str
    points: list[SeriesPointModel]


class MonthlyRowModel(CamelModel):
    """Label counts for one calendar month."""
    month: str
    counts: dict[str, int]
    growth: Optional[dict[str, Optional[float]]] = None


class LabelTrendResponse(CamelModel):
    """Monthly counts for the top labels of a dimension."""
    dimension: str
    labels: list[str]
    months: list[MonthlyRowModel]


class EmergingSignalModel(CamelModel):
    """A label whose activity grew significantly."""
    id: str
    kind: str
    title: str
    context: str
    current: int
    prior: int
    percent_change: float
    apply: dict[str, Any]


class EmergingSignalsResponse(CamelModel):
    """Emerging signals for the active filters."""
    as_of: str
    window_days: int
    total_records_analyzed: int
    signals: list[EmergingSignalModel]


class GeoAggregateModel(CamelModel):
    """Activity for one group."""
    group: str
    count: int
    percent_change: float
    sparkline: list[int]


class GeographyResponse(CamelModel):
    """Geographic rollup for the active filters."""
    as_of: str
    window_days: int
    groups: list[GeoAggregateModel]


class CitationInsightsModel(CamelModel):
    """Citation usage summary."""
    total_answers: int
    answers_with_citations: int
    answers_without_citations: int
    total_citations: int
    unique_dois: int
    average_citations_per_answer: float
    evidence_based_percentage: int
    sample_dois: list[str]


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    records_loaded: int
