"""Filters API router.

Decodes and encodes the URL filter state, lists filter options for
autocomplete and suggests one-click filters.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional

from api.models.schemas import (
    DecodedFilters,
    EncodedFilters,
    FilterStateModel,
    FilterSuggestionModel,
    OptionValue,
)
from api.services.filters import filters_from_request
from api.services.store import get_store
from src.analysis import EXTRACTORS, rank, suggest_filters
from src.filtering import (
    MULTI_VALUE_FIELDS,
    DashboardStore,
    FilterCodecError,
    FilterState,
    build_url,
    encode,
)
from src.filtering.models import SERIALIZED_KEYS, parse_iso_bound

router = APIRouter()


@router.get("/decode", response_model=DecodedFilters)
async def decode_filters(filters: FilterState = Depends(filters_from_request)):
    """Decode the request query string to its canonical FilterState."""
    return {
        "filters": filters.to_dict(),
        "query": encode(filters),
        "summary": filters.get_summary(),
        "activeFilterCount": filters.active_filter_count,
    }


@router.post("/encode", response_model=EncodedFilters)
async def encode_filters(
    body: FilterStateModel,
    path: str = Query("/", description="Page path for the URL"),
):
    """Encode a FilterState to a query string and URL."""
    state = FilterState.from_dict(body.model_dump())
    for key in ("date_from", "date_to"):
        value = getattr(state, key)
        if value is not None:
            try:
                parse_iso_bound(value, SERIALIZED_KEYS[key])
            except FilterCodecError as e:
                raise HTTPException(status_code=400, detail=str(e))

    return {"query": encode(state), "url": build_url(path, state)}


@router.get("/options")
async def list_filter_options(store: DashboardStore = Depends(get_store)):
    """Distinct values per filter dimension, most frequent first."""
    return {
        SERIALIZED_KEYS[name]: [item.label for item in rank(store.records, EXTRACTORS[name])]
        for name in MULTI_VALUE_FIELDS
    }


@router.get("/options/{dimension}", response_model=list[OptionValue])
async def list_dimension_options(
    dimension: str,
    search: Optional[str] = Query(None, description="Search term"),
    limit: int = Query(50, ge=1, le=200, description="Max results"),
    store: DashboardStore = Depends(get_store),
):
    """Get values of one dimension for autocomplete."""
    if dimension not in MULTI_VALUE_FIELDS:
        raise HTTPException(status_code=404, detail=f"Unknown dimension: {dimension}")

    items = rank(store.records, EXTRACTORS[dimension])
    if search:
        items = [item for item in items if search.lower() in item.label.lower()]

    return [{"value": item.label, "label": item.label, "count": item.count} for item in items[:limit]]


@router.get("/suggestions", response_model=list[FilterSuggestionModel])
async def get_suggestions(
    filters: FilterState = Depends(filters_from_request),
    store: DashboardStore = Depends(get_store),
):
    """Suggest filters from the top labels while only a date range is active."""
    return [s.to_dict() for s in suggest_filters(store.select(filters), filters)]
