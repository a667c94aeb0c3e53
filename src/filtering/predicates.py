"""Predicate evaluation: decide whether a record satisfies a FilterState.

Each FilterState field is checked independently and the results are combined
with AND. An empty field never excludes a record.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, FrozenSet, Iterable, List, Optional, Tuple

from config.logging_config import get_logger
from src.filtering.models import FilterState, Record, lower_bound, upper_bound

logger = get_logger("predicates")


@dataclass(frozen=True)
class FieldPredicate:
    """Maps one FilterState field to the record attribute it constrains."""

    field: str
    attribute: str
    set_valued: bool  # True when the record attribute holds several labels

    def test(self, record: Record, accepted: FrozenSet[str]) -> bool:
        """Check a record against the accepted values for this field."""
        if not accepted:
            return True
        value = getattr(record, self.attribute)
        if self.set_valued:
            return not accepted.isdisjoint(value)
        return value in accepted


FIELD_PREDICATES: Tuple[FieldPredicate, ...] = (
    FieldPredicate("drug", "drug_names", set_valued=True),
    FieldPredicate("company", "manufacturers", set_valued=True),
    FieldPredicate("therapeutic_area", "therapeutic_areas", set_valued=True),
    FieldPredicate("country", "country", set_valued=False),
    FieldPredicate("specialty", "specialty", set_valued=False),
    FieldPredicate("profession", "professional_role", set_valued=False),
    FieldPredicate("age_group", "predicted_age_group", set_valued=False),
    FieldPredicate("gender", "predicted_gender", set_valued=False),
)


def in_date_range(
    timestamp: datetime,
    start: Optional[datetime],
    end: Optional[datetime],
) -> bool:
    """Inclusive range check; a missing bound is unbounded."""
    if start is not None and timestamp < start:
        return False
    if end is not None and timestamp > end:
        return False
    return True


def compile_predicate(state: FilterState) -> Callable[[Record], bool]:
    """
    Build a record predicate for a FilterState.

    Date bounds are parsed once here so that filtering a large record set
    does not re-parse them per record.

    Raises:
        FilterCodecError: If a date bound is not valid ISO-8601.
    """
    start = lower_bound(state.date_from) if state.date_from else None
    end = upper_bound(state.date_to) if state.date_to else None

    active: List[Tuple[FieldPredicate, FrozenSet[str]]] = [
        (predicate, frozenset(getattr(state, predicate.field)))
        for predicate in FIELD_PREDICATES
        if getattr(state, predicate.field)
    ]

    def predicate(record: Record) -> bool:
        for field_predicate, accepted in active:
            if not field_predicate.test(record, accepted):
                return False
        return in_date_range(record.timestamp, start, end)

    return predicate


def matches(record: Record, state: FilterState) -> bool:
    """Check whether a single record satisfies every constraint of a state."""
    return compile_predicate(state)(record)


def filter_records(records: Iterable[Record], state: FilterState) -> Tuple[Record, ...]:
    """
    Apply a FilterState to a record set.

    Args:
        records: Records in source order.
        state: FilterState to apply.

    Returns:
        Matching records, in source order.
    """
    predicate = compile_predicate(state)
    matched = tuple(record for record in records if predicate(record))
    logger.debug(f"Filter matched {len(matched)} records ({state.get_summary()})")
    return matched
