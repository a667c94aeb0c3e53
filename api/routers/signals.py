"""Signals API router: aggregates over the filtered record set.

Every endpoint accepts the URL filter keys (drug, company, ta, country, sp,
prof, age, gender, from, to) alongside its own options.
"""

from dataclasses import replace
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.config import get_settings
from api.models.schemas import (
    CitationInsightsModel,
    EmergingSignalsResponse,
    GeographyResponse,
    LabelTrendResponse,
    OverviewResponse,
    RankingResponse,
    TrendResponse,
)
from api.services.filters import filters_from_request
from api.services.store import get_store
from config import config
from src.analysis import (
    EXTRACTORS,
    VALUE_EXTRACTORS,
    SignalThresholds,
    bucket,
    citation_insights,
    detect_emerging_signals,
    geo_rollup,
    key_metrics,
    monthly_label_series,
    rank,
    rank_with_share,
)
from src.analysis.signals import as_utc
from src.filtering import DashboardStore, FilterCodecError, FilterState
from src.filtering.models import upper_bound

router = APIRouter()


def _reference_time(as_of: Optional[str]) -> datetime:
    """Resolve `as_of` (date-only covers the whole day) or fall back to now."""
    if not as_of:
        return as_utc(None)
    try:
        return upper_bound(as_of, "as_of")
    except FilterCodecError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/overview", response_model=OverviewResponse)
async def get_overview(
    top_n: int = Query(5, ge=1, le=50, description="Entries per top list"),
    filters: FilterState = Depends(filters_from_request),
    store: DashboardStore = Depends(get_store),
):
    """Key metrics and top drugs/areas for the active filters."""
    records = store.select(filters)
    return {
        "summary": filters.get_summary(),
        "metrics": key_metrics(records).to_dict(),
        "topDrugs": [item.to_dict() for item in rank(records, EXTRACTORS["drug"], top_n=top_n)],
        "topTherapeuticAreas": [
            item.to_dict() for item in rank(records, EXTRACTORS["therapeutic_area"], top_n=top_n)
        ],
    }


@router.get("/rankings/{dimension}", response_model=RankingResponse)
async def get_rankings(
    dimension: str,
    top_n: Optional[int] = Query(None, ge=1, description="Maximum entries (default from settings)"),
    filters: FilterState = Depends(filters_from_request),
    store: DashboardStore = Depends(get_store),
):
    """Rank the labels of one dimension by frequency."""
    if dimension not in EXTRACTORS:
        raise HTTPException(status_code=404, detail=f"Unknown dimension: {dimension}")

    settings = get_settings()
    top_n = min(top_n or settings.default_top_n, settings.max_top_n)

    records = store.select(filters)
    return {
        "dimension": dimension,
        "totalRecords": len(records),
        "items": [item.to_dict() for item in rank_with_share(records, EXTRACTORS[dimension], top_n=top_n)],
    }


@router.get("/trends", response_model=TrendResponse)
async def get_trends(
    bucket_days: int = Query(7, ge=1, le=366, description="Bucket width in days"),
    metric: str = Query("count", description="Value per record: count or citations"),
    filters: FilterState = Depends(filters_from_request),
    store: DashboardStore = Depends(get_store),
):
    """Fixed-width time buckets over the active date range."""
    if metric not in VALUE_EXTRACTORS:
        raise HTTPException(status_code=400, detail="metric must be count or citations")

    points = bucket(
        store.select(filters),
        filters.date_from,
        filters.date_to,
        bucket_days,
        extractor=VALUE_EXTRACTORS[metric],
    )
    return {
        "metric": metric,
        "bucketDays": bucket_days,
        "dateFrom": filters.date_from,
        "dateTo": filters.date_to,
        "points": [point.to_dict() for point in points],
    }


@router.get("/drug-trends", response_model=LabelTrendResponse)
async def get_label_trends(
    dimension: str = Query("drug", description="Dimension to track"),
    top_n: int = Query(5, ge=1, le=20, description="Labels to track"),
    growth: bool = Query(False, description="Include month-over-month growth"),
    filters: FilterState = Depends(filters_from_request),
    store: DashboardStore = Depends(get_store),
):
    """Monthly counts for the most frequent labels (drugs by default)."""
    if dimension not in EXTRACTORS:
        raise HTTPException(status_code=404, detail=f"Unknown dimension: {dimension}")

    rows = monthly_label_series(store.select(filters), EXTRACTORS[dimension], top_n=top_n, growth=growth)
    return {
        "dimension": dimension,
        "labels": list(rows[0].counts) if rows else [],
        "months": [row.to_dict() for row in rows],
    }


@router.get("/emerging", response_model=EmergingSignalsResponse)
async def get_emerging_signals(
    as_of: Optional[str] = Query(None, description="End of the current window (ISO-8601, default now)"),
    window_days: Optional[int] = Query(None, ge=1, le=365, description="Window length in days"),
    filters: FilterState = Depends(filters_from_request),
    store: DashboardStore = Depends(get_store),
):
    """Drugs and therapeutic areas with significant period-over-period growth."""
    now = _reference_time(as_of)
    thresholds = SignalThresholds.from_config()
    if window_days is not None:
        thresholds = replace(thresholds, window_days=window_days)

    result = detect_emerging_signals(store.select(filters), now=now, thresholds=thresholds)
    return {
        "asOf": now.isoformat(),
        "windowDays": thresholds.window_days,
        "totalRecordsAnalyzed": result.total_records_analyzed,
        "signals": [s.to_dict() for s in result.signals],
    }


@router.get("/geography", response_model=GeographyResponse)
async def get_geography(
    as_of: Optional[str] = Query(None, description="End of the current window (ISO-8601, default now)"),
    window_days: Optional[int] = Query(None, ge=1, le=365, description="Window length in days"),
    limit: Optional[int] = Query(None, ge=1, le=200, description="Maximum groups"),
    filters: FilterState = Depends(filters_from_request),
    store: DashboardStore = Depends(get_store),
):
    """Country rollup with change versus the prior window and a sparkline."""
    now = _reference_time(as_of)
    window_days = window_days or config.analysis.signal_window_days

    groups = geo_rollup(
        store.select(filters),
        now=now,
        window_days=window_days,
        limit=limit or config.analysis.geo_limit,
    )
    return {
        "asOf": now.isoformat(),
        "windowDays": window_days,
        "groups": [g.to_dict() for g in groups],
    }


@router.get("/citations", response_model=CitationInsightsModel)
async def get_citations(
    sample_size: int = Query(8, ge=0, le=50, description="Sample DOIs to return"),
    filters: FilterState = Depends(filters_from_request),
    store: DashboardStore = Depends(get_store),
):
    """Citation usage for the active filters."""
    return citation_insights(store.select(filters), sample_size=sample_size).to_dict()
