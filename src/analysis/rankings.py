"""Frequency rankings (top-N by count) over a filtered record set."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from src.filtering.models import FilterState, Record

Extractor = Callable[[Record], Iterable[str]]


# =============================================================================
# Label extractors
# =============================================================================

def extract_drugs(record: Record) -> Iterable[str]:
    return record.drug_names


def extract_manufacturers(record: Record) -> Iterable[str]:
    return record.manufacturers


def extract_therapeutic_areas(record: Record) -> Iterable[str]:
    return record.therapeutic_areas


def extract_countries(record: Record) -> Iterable[str]:
    return (record.country,)


def extract_specialties(record: Record) -> Iterable[str]:
    return (record.specialty,)


def extract_professions(record: Record) -> Iterable[str]:
    return (record.professional_role,)


def extract_age_groups(record: Record) -> Iterable[str]:
    return (record.predicted_age_group,)


def extract_genders(record: Record) -> Iterable[str]:
    return (record.predicted_gender,)


def extract_dois(record: Record) -> Iterable[str]:
    return record.doi_list


# Dimension name (FilterState field where one exists) -> extractor
EXTRACTORS: Dict[str, Extractor] = {
    "drug": extract_drugs,
    "company": extract_manufacturers,
    "therapeutic_area": extract_therapeutic_areas,
    "country": extract_countries,
    "specialty": extract_specialties,
    "profession": extract_professions,
    "age_group": extract_age_groups,
    "gender": extract_genders,
    "doi": extract_dois,
}


# =============================================================================
# Rankings
# =============================================================================

@dataclass(frozen=True)
class RankedItem:
    """A label and how often it occurs."""

    label: str
    count: int
    share: Optional[float] = None  # percent of all label occurrences

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"label": self.label, "count": self.count}
        if self.share is not None:
            data["share"] = self.share
        return data


def count_labels(records: Iterable[Record], extractor: Extractor) -> Dict[str, int]:
    """
    Count label occurrences.

    A record contributing several labels counts once per label occurrence.
    The returned dict preserves the order in which labels were first seen.
    """
    counts: Dict[str, int] = {}
    for record in records:
        for label in extractor(record):
            counts[label] = counts.get(label, 0) + 1
    return counts


def _ordered(counts: Dict[str, int], top_n: Optional[int]) -> List[Tuple[str, int]]:
    if top_n is not None and top_n < 0:
        raise ValueError(f"top_n must be non-negative, got {top_n}")
    # sorted() is stable, so equal counts keep first-seen order
    ordered = sorted(counts.items(), key=lambda item: -item[1])
    return ordered if top_n is None else ordered[:top_n]


def rank(
    records: Iterable[Record],
    extractor: Extractor,
    top_n: Optional[int] = None,
) -> List[RankedItem]:
    """
    Rank labels by frequency.

    Args:
        records: Records to scan, in source order.
        extractor: Maps a record to zero or more labels.
        top_n: Maximum number of entries to return (None for all).

    Returns:
        RankedItems sorted by count descending; ties keep the order in
        which labels were first observed.
    """
    return [RankedItem(label, count) for label, count in _ordered(count_labels(records, extractor), top_n)]


def rank_with_share(
    records: Iterable[Record],
    extractor: Extractor,
    top_n: Optional[int] = None,
) -> List[RankedItem]:
    """Like `rank`, with each label's percentage of all label occurrences."""
    counts = count_labels(records, extractor)
    total = sum(counts.values())
    return [
        RankedItem(label, count, share=(count / total * 100) if total else 0.0)
        for label, count in _ordered(counts, top_n)
    ]


# =============================================================================
# Filter suggestions
# =============================================================================

@dataclass(frozen=True)
class FilterSuggestion:
    """A one-click filter built from a top label."""

    dimension: str
    label: str
    count: int
    patch: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dimension": self.dimension,
            "label": self.label,
            "count": self.count,
            "apply": FilterState.from_dict(self.patch).to_dict(),
        }


DEFAULT_SUGGESTION_LIMITS: Tuple[Tuple[str, int], ...] = (
    ("therapeutic_area", 3),
    ("drug", 2),
    ("country", 2),
)


def suggest_filters(
    records: Sequence[Record],
    state: Optional[FilterState] = None,
    limits: Sequence[Tuple[str, int]] = DEFAULT_SUGGESTION_LIMITS,
) -> List[FilterSuggestion]:
    """
    Suggest filters from the most frequent labels.

    Suggestions are only offered while no dimension other than the date
    range is constrained.

    Args:
        records: Records to rank.
        state: Active FilterState, if any.
        limits: (dimension, how many) pairs, in output order.

    Returns:
        FilterSuggestions, grouped by dimension in the order of `limits`.
    """
    if state is not None and state.has_value_filters:
        return []

    suggestions = []
    for dimension, limit in limits:
        for item in rank(records, EXTRACTORS[dimension], top_n=limit):
            suggestions.append(FilterSuggestion(
                dimension=dimension,
                label=item.label,
                count=item.count,
                patch={dimension: [item.label]},
            ))
    return suggestions
