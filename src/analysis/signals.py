"""Signal detection: period-over-period growth of label activity."""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
from dataclasses import dataclass, field
from enum import Enum

from config import config
from config.logging_config import get_logger
from src.analysis.rankings import Extractor, extract_drugs, extract_therapeutic_areas
from src.filtering.models import SERIALIZED_KEYS, Record

logger = get_logger("signals")

ContextBuilder = Callable[[Record], str]


def percent_change(current: int, prior: int) -> float:
    """
    Percentage change from `prior` to `current`.

    A zero prior never divides: it yields 100 when there is current
    activity and 0 otherwise.
    """
    if prior > 0:
        return (current - prior) / prior * 100
    return 100.0 if current > 0 else 0.0


def as_utc(now: Optional[datetime]) -> datetime:
    """Reference instant for window math; naive values are UTC, None is now."""
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def window_bounds(now: datetime, window_days: int) -> Tuple[datetime, datetime, datetime]:
    """
    Boundaries of the two comparison windows.

    Returns:
        (prior_start, current_start, now). The current window is
        [current_start, now]; the prior window is [prior_start, current_start).

    Raises:
        ValueError: If window_days is not positive or the windows reach
            outside the datetime range.
    """
    if window_days <= 0:
        raise ValueError(f"window_days must be positive, got {window_days}")
    try:
        window = timedelta(days=window_days)
        return now - 2 * window, now - window, now
    except OverflowError:
        raise ValueError(f"{window_days}-day windows before {now.isoformat()} are out of range") from None


@dataclass
class _Tally:
    current: int = 0
    prior: int = 0
    contexts: List[str] = field(default_factory=list)


def _tally_windows(
    records: Sequence[Record],
    extractor: Extractor,
    now: datetime,
    window_days: int,
    context_of: Optional[ContextBuilder] = None,
) -> Dict[str, _Tally]:
    """Count labels per window; labels keep first-seen order (current window first)."""
    prior_start, current_start, end = window_bounds(now, window_days)

    current = [r for r in records if current_start <= r.timestamp <= end]
    prior = [r for r in records if prior_start <= r.timestamp < current_start]

    tallies: Dict[str, _Tally] = {}
    for record in current:
        for label in extractor(record):
            tally = tallies.setdefault(label, _Tally())
            tally.current += 1
            if context_of is not None:
                context = context_of(record)
                if context not in tally.contexts:
                    tally.contexts.append(context)

    for record in prior:
        for label in extractor(record):
            tallies.setdefault(label, _Tally()).prior += 1

    return tallies


@dataclass(frozen=True)
class PeriodSignal:
    """Label activity in the current window versus the prior window."""

    label: str
    current: int
    prior: int
    percent_change: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "current": self.current,
            "prior": self.prior,
            "percentChange": self.percent_change,
        }


def signal(
    records: Sequence[Record],
    window_days: int = 30,
    extractor: Extractor = extract_drugs,
    now: Optional[datetime] = None,
) -> List[PeriodSignal]:
    """
    Compare label activity in the last `window_days` against the window before.

    Args:
        records: Records to scan.
        window_days: Length of each window.
        extractor: Maps a record to labels.
        now: End of the current window; defaults to the current time (UTC).

    Returns:
        One PeriodSignal per label seen in either window, in first-seen order.
        No significance threshold is applied here.
    """
    tallies = _tally_windows(records, extractor, as_utc(now), window_days)
    return [
        PeriodSignal(label, t.current, t.prior, percent_change(t.current, t.prior))
        for label, t in tallies.items()
    ]


# =============================================================================
# Emerging signals
# =============================================================================

class SignalKind(Enum):
    """Dimensions scanned for emerging signals."""
    DRUG = "drug"
    THERAPEUTIC_AREA = "therapeutic_area"


@dataclass(frozen=True)
class SignalThresholds:
    """Significance policy for emerging signals."""

    window_days: int = 30
    min_percent_change: float = 20.0
    min_drug_activity: int = 3
    min_area_activity: int = 5
    max_signals: int = 6

    @classmethod
    def from_config(cls) -> "SignalThresholds":
        """Build thresholds from application config."""
        analysis = config.analysis
        return cls(
            window_days=analysis.signal_window_days,
            min_percent_change=analysis.min_percent_change,
            min_drug_activity=analysis.min_drug_activity,
            min_area_activity=analysis.min_area_activity,
            max_signals=analysis.max_signals,
        )


@dataclass(frozen=True)
class EmergingSignal:
    """A label whose activity grew significantly, with the filter that explores it."""

    kind: SignalKind
    title: str
    context: str
    current: int
    prior: int
    percent_change: float
    apply: Dict[str, Any] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return f"{self.kind.value}-{self.title}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "title": self.title,
            "context": self.context,
            "current": self.current,
            "prior": self.prior,
            "percentChange": self.percent_change,
            "apply": dict(self.apply),
        }


@dataclass
class SignalDetectionResult:
    """Result of signal detection analysis."""

    signals: List[EmergingSignal] = field(default_factory=list)
    analysis_period: Optional[Tuple[datetime, datetime]] = None
    baseline_period: Optional[Tuple[datetime, datetime]] = None
    total_records_analyzed: int = 0


def _drug_context(record: Record) -> str:
    area = record.therapeutic_areas[0] if record.therapeutic_areas else "Unknown"
    return f"{area} · {record.country}"


def _area_context(record: Record) -> str:
    return f"{record.specialty} · {record.country}"


class SignalDetector:
    """Detects emerging drug and therapeutic-area signals."""

    # Context strings shown per signal
    MAX_CONTEXTS = 2

    def __init__(self, thresholds: Optional[SignalThresholds] = None):
        """
        Initialize the signal detector.

        Args:
            thresholds: Significance policy; defaults to application config.
        """
        self.thresholds = thresholds or SignalThresholds.from_config()

    def detect_all_signals(
        self,
        records: Sequence[Record],
        now: Optional[datetime] = None,
    ) -> SignalDetectionResult:
        """
        Run drug and therapeutic-area detection.

        Args:
            records: Filtered records to analyze.
            now: End of the current window; defaults to the current time (UTC).

        Returns:
            SignalDetectionResult with signals sorted by percent change
            (descending, stable) and truncated to `max_signals`.
        """
        now = as_utc(now)
        prior_start, current_start, end = window_bounds(now, self.thresholds.window_days)

        result = SignalDetectionResult(
            analysis_period=(current_start, end),
            baseline_period=(prior_start, current_start),
            total_records_analyzed=len(records),
        )

        candidates = self.detect_drug_signals(records, now) + self.detect_area_signals(records, now)
        candidates.sort(key=lambda s: -s.percent_change)
        result.signals = candidates[: self.thresholds.max_signals]

        logger.debug(
            f"Detected {len(candidates)} candidate signals in {len(records)} records, "
            f"kept {len(result.signals)}"
        )
        return result

    def detect_drug_signals(
        self,
        records: Sequence[Record],
        now: Optional[datetime] = None,
    ) -> List[EmergingSignal]:
        """Detect drugs with significant growth."""
        return self._detect(
            records,
            now,
            kind=SignalKind.DRUG,
            extractor=extract_drugs,
            context_of=_drug_context,
            min_activity=self.thresholds.min_drug_activity,
        )

    def detect_area_signals(
        self,
        records: Sequence[Record],
        now: Optional[datetime] = None,
    ) -> List[EmergingSignal]:
        """Detect therapeutic areas with significant growth."""
        return self._detect(
            records,
            now,
            kind=SignalKind.THERAPEUTIC_AREA,
            extractor=extract_therapeutic_areas,
            context_of=_area_context,
            min_activity=self.thresholds.min_area_activity,
        )

    def _detect(
        self,
        records: Sequence[Record],
        now: Optional[datetime],
        kind: SignalKind,
        extractor: Extractor,
        context_of: ContextBuilder,
        min_activity: int,
    ) -> List[EmergingSignal]:
        tallies = _tally_windows(records, extractor, as_utc(now), self.thresholds.window_days, context_of)

        signals = []
        for label, tally in tallies.items():
            change = percent_change(tally.current, tally.prior)
            if change <= self.thresholds.min_percent_change or tally.current < min_activity:
                continue
            signals.append(EmergingSignal(
                kind=kind,
                title=label,
                context=", ".join(tally.contexts[: self.MAX_CONTEXTS]),
                current=tally.current,
                prior=tally.prior,
                percent_change=change,
                apply={SERIALIZED_KEYS[kind.value]: [label]},
            ))
        return signals


def detect_emerging_signals(
    records: Sequence[Record],
    now: Optional[datetime] = None,
    thresholds: Optional[SignalThresholds] = None,
) -> SignalDetectionResult:
    """
    Convenience function to detect all emerging signals.

    Args:
        records: Filtered records to analyze.
        now: End of the current window; defaults to the current time (UTC).
        thresholds: Significance policy; defaults to application config.

    Returns:
        SignalDetectionResult with detected signals.
    """
    detector = SignalDetector(thresholds)
    return detector.detect_all_signals(records, now)
