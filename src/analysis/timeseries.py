"""Time-series aggregation: fixed-width buckets and per-label monthly trends."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import pandas as pd

from config.logging_config import get_logger
from src.analysis.rankings import Extractor, rank
from src.filtering.models import Record, parse_iso_bound, upper_bound

logger = get_logger("timeseries")

Number = Union[int, float]
ValueExtractor = Callable[[Record], Number]
DateLike = Union[str, date]


def count_records(record: Record) -> int:
    """Each record contributes 1."""
    return 1


def sum_citations(record: Record) -> int:
    """Each record contributes its citation count."""
    return record.citation_count


VALUE_EXTRACTORS: Dict[str, ValueExtractor] = {
    "count": count_records,
    "citations": sum_citations,
}


@dataclass(frozen=True)
class SeriesPoint:
    """Aggregated value for the bucket starting at `date`."""

    date: str
    value: Number

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "value": self.value}


def _as_iso(value: DateLike) -> str:
    return value if isinstance(value, str) else value.isoformat()


def bucket(
    records: Sequence[Record],
    date_from: DateLike,
    date_to: DateLike,
    bucket_size_days: int,
    extractor: ValueExtractor = count_records,
) -> List[SeriesPoint]:
    """
    Aggregate records into contiguous fixed-width time buckets.

    Args:
        records: Records to aggregate.
        date_from: First bucket boundary (ISO string or date).
        date_to: Last boundary candidate (inclusive; a date-only value
                 includes the whole day).
        bucket_size_days: Bucket width in days.
        extractor: Value contributed by each record (count or a numeric field).

    Returns:
        One SeriesPoint per boundary from `date_from` to `date_to` stepping by
        `bucket_size_days`, i.e. floor((to - from) / step) + 1 points. Empty
        buckets have value 0. Returns [] when `date_to` precedes `date_from`.

    Raises:
        ValueError: If bucket_size_days is not positive.
        FilterCodecError: If a bound is not a valid ISO-8601 value.
    """
    if bucket_size_days <= 0:
        raise ValueError(f"bucket_size_days must be positive, got {bucket_size_days}")

    start, date_only = parse_iso_bound(_as_iso(date_from), "date_from")
    end_boundary, _ = parse_iso_bound(_as_iso(date_to), "date_to")
    end = upper_bound(_as_iso(date_to), "date_to")

    if end_boundary < start:
        return []

    step = timedelta(days=bucket_size_days)
    periods = (end_boundary - start) // step + 1
    boundaries = pd.date_range(start=start, periods=periods, freq=pd.Timedelta(step))

    values: List[Number] = [0] * periods
    for record in records:
        if record.timestamp < start or record.timestamp > end:
            continue
        index = (record.timestamp - start) // step
        if index < periods:
            values[index] += extractor(record)

    return [
        SeriesPoint(
            date=boundary.date().isoformat() if date_only else boundary.isoformat(),
            value=value,
        )
        for boundary, value in zip(boundaries, values)
    ]


@dataclass(frozen=True)
class MonthlyRow:
    """Label counts for one calendar month."""

    month: str
    counts: Dict[str, int] = field(default_factory=dict)
    growth: Optional[Dict[str, Optional[float]]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"month": self.month, "counts": dict(self.counts)}
        if self.growth is not None:
            data["growth"] = dict(self.growth)
        return data


def _month_of(record: Record) -> pd.Period:
    return pd.Period(record.timestamp.astimezone(timezone.utc).replace(tzinfo=None), freq="M")


def monthly_label_series(
    records: Sequence[Record],
    extractor: Extractor,
    top_n: int = 5,
    growth: bool = False,
) -> List[MonthlyRow]:
    """
    Monthly counts for the most frequent labels.

    Args:
        records: Records to aggregate.
        extractor: Maps a record to labels (e.g. drug names).
        top_n: Number of labels to track, chosen by overall frequency.
        growth: Include month-over-month percent growth per label. Growth is
                None for the first month and when the previous month is 0.

    Returns:
        One MonthlyRow per calendar month (UTC) from the first to the last
        month with any record, gap-filled with zeros.
    """
    labels = [item.label for item in rank(records, extractor, top_n=top_n)]
    if not labels:
        return []

    tracked = set(labels)
    rows = [
        (_month_of(record), label)
        for record in records
        for label in extractor(record)
        if label in tracked
    ]
    months = [_month_of(record) for record in records]

    frame = pd.DataFrame(rows, columns=["month", "label"])
    table = (
        frame.groupby(["month", "label"]).size()
        .unstack(fill_value=0)
        .reindex(
            index=pd.period_range(min(months), max(months), freq="M"),
            columns=labels,
            fill_value=0,
        )
    )

    series = []
    previous: Optional[Dict[str, int]] = None
    for month, row in table.iterrows():
        counts = {label: int(row[label]) for label in labels}
        month_growth = None
        if growth:
            month_growth = {
                label: (
                    round((counts[label] - previous[label]) / previous[label] * 100, 1)
                    if previous is not None and previous[label] > 0
                    else None
                )
                for label in labels
            }
        series.append(MonthlyRow(month=str(month), counts=counts, growth=month_growth))
        previous = counts

    logger.debug(f"Built {len(series)} monthly rows for {len(labels)} labels")
    return series
