"""Geographic rollups with period-over-period change and activity sparklines."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import numpy as np

from config import config
from config.logging_config import get_logger
from src.analysis.signals import as_utc, percent_change, window_bounds
from src.filtering.models import Record

logger = get_logger("geography")

GroupKey = Union[str, Callable[[Record], str]]


@dataclass(frozen=True)
class GeoAggregate:
    """Activity for one group (typically a country)."""

    group: str
    count: int
    percent_change: float
    sparkline: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group": self.group,
            "count": self.count,
            "percentChange": self.percent_change,
            "sparkline": list(self.sparkline),
        }


def _group_getter(group_key: GroupKey) -> Callable[[Record], str]:
    if callable(group_key):
        return group_key
    if group_key not in Record.__dataclass_fields__:
        raise ValueError(f"Unknown record attribute for grouping: {group_key}")
    return lambda record: getattr(record, group_key)


def _sparkline(offsets: List[float], window_seconds: float, buckets: int) -> List[int]:
    """Bin offsets (seconds since window start) into equal sub-buckets, oldest first."""
    if not offsets:
        return [0] * buckets
    width = window_seconds / buckets
    # A record exactly at `now` belongs to the last sub-bucket
    indices = np.minimum((np.asarray(offsets) // width).astype(int), buckets - 1)
    return np.bincount(indices, minlength=buckets).tolist()


def geo_rollup(
    records: Sequence[Record],
    group_key: GroupKey = "country",
    now: Optional[datetime] = None,
    window_days: Optional[int] = None,
    sparkline_buckets: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[GeoAggregate]:
    """
    Roll records up by group over the current window.

    Args:
        records: Records to aggregate.
        group_key: Record attribute name, or a callable returning the group.
        now: End of the current window; defaults to the current time (UTC).
        window_days: Window length; defaults to config.
        sparkline_buckets: Sub-buckets in each sparkline; defaults to config.
        limit: Maximum number of groups to return (None for all).

    Returns:
        GeoAggregates for every group seen in the current or prior window,
        sorted by current count descending. Ties keep first-seen order.
    """
    if window_days is None:
        window_days = config.analysis.signal_window_days
    if sparkline_buckets is None:
        sparkline_buckets = config.analysis.sparkline_buckets
    if sparkline_buckets <= 0:
        raise ValueError(f"sparkline_buckets must be positive, got {sparkline_buckets}")

    get_group = _group_getter(group_key)
    prior_start, current_start, end = window_bounds(as_utc(now), window_days)
    window_seconds = (end - current_start).total_seconds()

    current: Dict[str, List[float]] = {}
    prior: Dict[str, int] = {}
    order: List[str] = []

    for record in records:
        if current_start <= record.timestamp <= end:
            group = get_group(record)
            current.setdefault(group, []).append((record.timestamp - current_start).total_seconds())
        elif prior_start <= record.timestamp < current_start:
            group = get_group(record)
            prior[group] = prior.get(group, 0) + 1
        else:
            continue
        if group not in order:
            order.append(group)

    rollup = []
    for group in order:
        offsets = current.get(group, [])
        rollup.append(GeoAggregate(
            group=group,
            count=len(offsets),
            percent_change=percent_change(len(offsets), prior.get(group, 0)),
            sparkline=_sparkline(offsets, window_seconds, sparkline_buckets),
        ))

    rollup.sort(key=lambda g: -g.count)
    if limit is not None:
        rollup = rollup[:limit]

    logger.debug(f"Rolled {len(records)} records into {len(rollup)} groups")
    return rollup
