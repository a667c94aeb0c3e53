"""URL codec: lossless mapping between FilterState and a query string.

This module is the single place that knows the query-string key names and the
default date range. Key map (field -> key):

    drug -> drug            country -> country      age_group -> age
    company -> company      specialty -> sp         gender -> gender
    therapeutic_area -> ta  profession -> prof      date_from -> from
                                                    date_to -> to

Multi-valued fields are comma-joined (``drug=A,B``). Commas inside a value are
not supported. Callers that push the encoded URL to a browser must use
history *replace* semantics, never *push*.
"""

from datetime import date, datetime, timezone
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import parse_qs, quote

from config.constants import DEFAULT_DATE_FROM
from config.logging_config import get_logger
from src.filtering.models import DATE_FIELDS, FilterState, parse_iso_bound

logger = get_logger("codec")

URL_PARAM_KEYS: Dict[str, str] = {
    "drug": "drug",
    "company": "company",
    "therapeutic_area": "ta",
    "country": "country",
    "specialty": "sp",
    "profession": "prof",
    "age_group": "age",
    "gender": "gender",
    "date_from": "from",
    "date_to": "to",
}
FIELD_BY_PARAM: Dict[str, str] = {key: name for name, key in URL_PARAM_KEYS.items()}

# Commas separate values; colons appear in ISO date-times
_SAFE_CHARS = ",:"

QueryInput = Union[str, Mapping[str, Any]]


def today_utc() -> date:
    """Current UTC calendar date."""
    return datetime.now(timezone.utc).date()


def default_date_to(today: Optional[date] = None) -> str:
    """Default upper date bound: today's ISO date."""
    return (today or today_utc()).isoformat()


def default_state(today: Optional[date] = None) -> FilterState:
    """The state used on first load and after a reset."""
    return FilterState(date_from=DEFAULT_DATE_FROM, date_to=default_date_to(today))


def encode(state: FilterState) -> str:
    """
    Serialize a FilterState to a query string (without the leading '?').

    Args:
        state: FilterState to encode.

    Returns:
        Query string with keys in the documented order; empty fields are omitted.
    """
    parts = []

    for field_name, key in URL_PARAM_KEYS.items():
        value = getattr(state, field_name)
        if not value:
            continue
        if field_name in DATE_FIELDS:
            parts.append(f"{key}={quote(value, safe=_SAFE_CHARS)}")
        else:
            parts.append(f"{key}={quote(','.join(value), safe=_SAFE_CHARS)}")

    return "&".join(parts)


def _read_params(query: QueryInput) -> Dict[str, str]:
    """Flatten a query string or mapping to key -> first value."""
    if isinstance(query, str):
        parsed = parse_qs(query.lstrip("?"), keep_blank_values=True)
        return {key: values[0] for key, values in parsed.items()}

    params = {}
    for key, value in query.items():
        if isinstance(value, (list, tuple)):
            value = value[0] if value else ""
        params[key] = value
    return params


def decode(query: QueryInput, today: Optional[date] = None) -> FilterState:
    """
    Rebuild a FilterState from a query string or parameter mapping.

    Args:
        query: Raw query string (leading '?' optional) or a mapping of
               key -> value (lists take their first element).
        today: Date used for the default upper bound; defaults to today (UTC).

    Returns:
        FilterState. Absent keys decode to empty fields; absent `from`/`to`
        fall back to the default date range; unknown keys are ignored.

    Raises:
        FilterCodecError: If `from` or `to` is not a valid ISO-8601 value.
    """
    params = _read_params(query)
    values: Dict[str, Any] = {}

    for field_name, key in URL_PARAM_KEYS.items():
        if field_name in DATE_FIELDS:
            continue
        raw = params.get(key)
        values[field_name] = tuple(token for token in raw.split(",") if token) if raw else ()

    date_from = params.get("from") or DEFAULT_DATE_FROM
    date_to = params.get("to") or default_date_to(today)

    # Both bounds must parse
    parse_iso_bound(date_from, "from")
    parse_iso_bound(date_to, "to")

    ignored = [key for key in params if key not in FIELD_BY_PARAM]
    if ignored:
        logger.debug(f"Ignoring unknown query parameters: {', '.join(ignored)}")

    return FilterState(date_from=date_from, date_to=date_to, **values)


def build_url(path: str, state: FilterState) -> str:
    """
    Build the URL handed to the navigator for a state.

    Args:
        path: Current page path, e.g. "/".
        state: FilterState to encode.

    Returns:
        "path?query", or just the path when no filter is set.
    """
    query = encode(state)
    return f"{path}?{query}" if query else path
