"""Core data model: physician Q&A records and the active filter state."""

from dataclasses import dataclass, fields, replace
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional, Tuple

from config.constants import (
    AGE_GROUPS,
    GENDERS,
    MAX_BOUND_YEAR,
    MIN_BOUND_YEAR,
    SUMMARY_INLINE_LIMIT,
    get_dimension_label,
)
from config.logging_config import get_logger
from src.filtering.exceptions import FilterCodecError, RecordValidationError

logger = get_logger("models")

# FilterState fields holding a set of accepted values (OR within the field)
MULTI_VALUE_FIELDS: Tuple[str, ...] = (
    "drug",
    "company",
    "therapeutic_area",
    "country",
    "specialty",
    "profession",
    "age_group",
    "gender",
)
DATE_FIELDS: Tuple[str, ...] = ("date_from", "date_to")

# FilterState field -> key in the serialized (dict / JSON) shape
SERIALIZED_KEYS: Dict[str, str] = {
    "drug": "drug",
    "company": "company",
    "therapeutic_area": "therapeuticArea",
    "country": "country",
    "specialty": "specialty",
    "profession": "profession",
    "age_group": "ageGroup",
    "gender": "gender",
    "date_from": "dateFrom",
    "date_to": "dateTo",
}
_FIELD_BY_KEY: Dict[str, str] = {
    **{name: name for name in SERIALIZED_KEYS},
    **{key: name for name, key in SERIALIZED_KEYS.items()},
}


# =============================================================================
# Date parsing
# =============================================================================

def parse_iso_bound(value: Any, key: str) -> Tuple[datetime, bool]:
    """
    Parse an ISO-8601 date or date-time used as a filter bound.

    Args:
        value: The raw bound, e.g. "2024-01-01" or "2024-01-01T12:00:00Z".
        key: Name reported in the error when parsing fails.

    Returns:
        Tuple of (timezone-aware instant, whether the value was date-only).
        Date-only values resolve to midnight UTC; naive date-times are UTC.

    Raises:
        FilterCodecError: If the value is not a valid ISO-8601 string or its
            year falls outside MIN_BOUND_YEAR..MAX_BOUND_YEAR.
    """
    if not isinstance(value, str) or not value:
        raise FilterCodecError(key, value)

    try:
        day = date.fromisoformat(value)
    except ValueError:
        day = None

    if day is not None:
        parsed, date_only = datetime(day.year, day.month, day.day, tzinfo=timezone.utc), True
    else:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            raise FilterCodecError(key, value) from None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        date_only = False

    if not MIN_BOUND_YEAR <= parsed.year <= MAX_BOUND_YEAR:
        raise FilterCodecError(key, value, f"year must be between {MIN_BOUND_YEAR} and {MAX_BOUND_YEAR}")
    return parsed, date_only


def lower_bound(value: str, key: str = "date_from") -> datetime:
    """Earliest instant included by a `date_from` bound."""
    instant, _ = parse_iso_bound(value, key)
    return instant


def upper_bound(value: str, key: str = "date_to") -> datetime:
    """Latest instant included by a `date_to` bound.

    A date-only bound covers the whole UTC day.
    """
    instant, date_only = parse_iso_bound(value, key)
    if date_only:
        return instant + timedelta(days=1) - timedelta(microseconds=1)
    return instant


def parse_timestamp(value: Any) -> datetime:
    """Parse a record timestamp into a timezone-aware datetime (UTC default)."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            raise RecordValidationError(f"Invalid timestamp: {value!r}") from None
    else:
        raise RecordValidationError(f"Invalid timestamp: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# =============================================================================
# Record
# =============================================================================

def _string_tuple(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


@dataclass(frozen=True)
class Record:
    """One anonymized physician Q&A interaction."""

    specialty: str
    professional_role: str
    country: str
    timestamp: datetime
    drug_names: Tuple[str, ...] = ()
    therapeutic_areas: Tuple[str, ...] = ()
    predicted_age_group: str = "adult"
    predicted_gender: str = "both"
    citation_count: int = 0
    doi_list: Tuple[str, ...] = ()
    manufacturers: Tuple[str, ...] = ()
    id: Optional[str] = None

    def __post_init__(self):
        for name in ("drug_names", "therapeutic_areas", "doi_list", "manufacturers"):
            object.__setattr__(self, name, _string_tuple(getattr(self, name)))
        object.__setattr__(self, "timestamp", parse_timestamp(self.timestamp))

        if self.predicted_age_group not in AGE_GROUPS:
            raise RecordValidationError(
                f"Unknown age group {self.predicted_age_group!r} (expected one of {', '.join(AGE_GROUPS)})"
            )
        if self.predicted_gender not in GENDERS:
            raise RecordValidationError(
                f"Unknown gender {self.predicted_gender!r} (expected one of {', '.join(GENDERS)})"
            )
        if self.citation_count < 0:
            raise RecordValidationError(f"Negative citation count: {self.citation_count}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Record":
        """
        Create a record from its wire shape (camelCase keys).

        Raises:
            RecordValidationError: If a required key is missing or a value is invalid.
        """
        try:
            citation_count = int(data.get("citationCount", 0))
        except (TypeError, ValueError):
            raise RecordValidationError(f"Invalid citation count: {data.get('citationCount')!r}") from None

        try:
            return cls(
                id=data.get("id"),
                specialty=data["specialty"],
                professional_role=data["professionalRole"],
                country=data["country"],
                timestamp=data["timestamp"],
                drug_names=_string_tuple(data.get("drugNames")),
                therapeutic_areas=_string_tuple(data.get("therapeuticAreas")),
                predicted_age_group=data.get("predictedAgeGroup", "adult"),
                predicted_gender=data.get("predictedGender", "both"),
                citation_count=citation_count,
                doi_list=_string_tuple(data.get("doiList")),
                manufacturers=_string_tuple(data.get("manufacturers")),
            )
        except KeyError as e:
            raise RecordValidationError(f"Record is missing required field {e.args[0]!r}") from None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire shape."""
        return {
            "id": self.id,
            "specialty": self.specialty,
            "professionalRole": self.professional_role,
            "country": self.country,
            "timestamp": self.timestamp.isoformat(),
            "drugNames": list(self.drug_names),
            "therapeuticAreas": list(self.therapeutic_areas),
            "predictedAgeGroup": self.predicted_age_group,
            "predictedGender": self.predicted_gender,
            "citationCount": self.citation_count,
            "doiList": list(self.doi_list),
            "manufacturers": list(self.manufacturers),
        }


# =============================================================================
# FilterState
# =============================================================================

def _normalize_values(value: Any) -> Tuple[str, ...]:
    """Ordered, de-duplicated tuple with empty tokens removed."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = (value,)
    seen = []
    for item in value:
        if item and item not in seen:
            seen.append(item)
    return tuple(seen)


def _resolve_patch(patch: Mapping[str, Any]) -> Dict[str, Any]:
    """Map snake_case or camelCase patch keys to FilterState field names."""
    resolved = {}
    for key, value in patch.items():
        name = _FIELD_BY_KEY.get(key)
        if name is None:
            logger.warning(f"Ignoring unknown filter key: {key}")
            continue
        resolved[name] = value
    return resolved


@dataclass(frozen=True)
class FilterState:
    """Active inclusion criteria. Empty fields place no constraint."""

    drug: Tuple[str, ...] = ()
    company: Tuple[str, ...] = ()
    therapeutic_area: Tuple[str, ...] = ()
    country: Tuple[str, ...] = ()
    specialty: Tuple[str, ...] = ()
    profession: Tuple[str, ...] = ()
    age_group: Tuple[str, ...] = ()
    gender: Tuple[str, ...] = ()
    date_from: Optional[str] = None
    date_to: Optional[str] = None

    def __post_init__(self):
        for name in MULTI_VALUE_FIELDS:
            object.__setattr__(self, name, _normalize_values(getattr(self, name)))
        for name in DATE_FIELDS:
            if not getattr(self, name):
                object.__setattr__(self, name, None)

    @property
    def is_empty(self) -> bool:
        """Check if all filters are empty (matches every record)."""
        return not self.has_value_filters and self.date_from is None and self.date_to is None

    @property
    def has_value_filters(self) -> bool:
        """Check if any non-date dimension is constrained."""
        return any(getattr(self, name) for name in MULTI_VALUE_FIELDS)

    @property
    def active_filter_count(self) -> int:
        """Count of active filters. The date range counts as one."""
        count = sum(1 for name in MULTI_VALUE_FIELDS if getattr(self, name))
        if self.date_from is not None or self.date_to is not None:
            count += 1
        return count

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the serialized shape, omitting empty fields."""
        data: Dict[str, Any] = {}
        for name in MULTI_VALUE_FIELDS:
            values = getattr(self, name)
            if values:
                data[SERIALIZED_KEYS[name]] = list(values)
        for name in DATE_FIELDS:
            value = getattr(self, name)
            if value is not None:
                data[SERIALIZED_KEYS[name]] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FilterState":
        """Create from the serialized shape. snake_case keys are also accepted."""
        return cls(**_resolve_patch(data))

    def patched(self, patch: Mapping[str, Any]) -> "FilterState":
        """
        Return a new state with the given fields replaced.

        Args:
            patch: Field values keyed by snake_case or camelCase name.
                   A None or empty value clears the field.

        Returns:
            New FilterState; unknown keys are logged and ignored.
        """
        return replace(self, **_resolve_patch(patch))

    def copy(self) -> "FilterState":
        """Create a copy of this filter state."""
        return replace(self)

    def merge(self, other: "FilterState", override: bool = True) -> "FilterState":
        """
        Merge another filter state into this one.

        Args:
            other: FilterState to merge in.
            override: If True, non-empty values from other override this.
                      If False, only fill in empty values.

        Returns:
            A new merged FilterState.
        """
        merged = {}
        for f in fields(self):
            mine = getattr(self, f.name)
            theirs = getattr(other, f.name)
            if override:
                merged[f.name] = theirs if theirs else mine
            else:
                merged[f.name] = mine if mine else theirs
        return FilterState(**merged)

    def get_summary(self) -> str:
        """Get a human-readable summary of active filters."""
        parts = []

        for name in MULTI_VALUE_FIELDS:
            values = getattr(self, name)
            if not values:
                continue
            label = get_dimension_label(name)
            if len(values) <= SUMMARY_INLINE_LIMIT:
                parts.append(f"{label}: {', '.join(values)}")
            else:
                parts.append(f"{label}: {len(values)} selected")

        if self.date_from or self.date_to:
            parts.append(f"Dates: {self.date_from or '...'} to {self.date_to or '...'}")

        return " | ".join(parts) if parts else "All data (no filters)"
