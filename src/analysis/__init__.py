"""Analysis module: pure aggregations over filtered record sets."""

from .rankings import (
    EXTRACTORS,
    RankedItem,
    FilterSuggestion,
    count_labels,
    rank,
    rank_with_share,
    suggest_filters,
)
from .timeseries import (
    VALUE_EXTRACTORS,
    SeriesPoint,
    MonthlyRow,
    bucket,
    monthly_label_series,
)
from .signals import (
    PeriodSignal,
    EmergingSignal,
    SignalKind,
    SignalThresholds,
    SignalDetector,
    SignalDetectionResult,
    percent_change,
    signal,
    detect_emerging_signals,
)
from .geography import GeoAggregate, geo_rollup
from .metrics import KeyMetrics, CitationInsights, key_metrics, citation_insights

__all__ = [
    # Rankings
    "EXTRACTORS",
    "RankedItem",
    "FilterSuggestion",
    "count_labels",
    "rank",
    "rank_with_share",
    "suggest_filters",
    # Time series
    "VALUE_EXTRACTORS",
    "SeriesPoint",
    "MonthlyRow",
    "bucket",
    "monthly_label_series",
    # Signals
    "PeriodSignal",
    "EmergingSignal",
    "SignalKind",
    "SignalThresholds",
    "SignalDetector",
    "SignalDetectionResult",
    "percent_change",
    "signal",
    "detect_emerging_signals",
    # Geography
    "GeoAggregate",
    "geo_rollup",
    # Metrics
    "KeyMetrics",
    "CitationInsights",
    "key_metrics",
    "citation_insights",
]
