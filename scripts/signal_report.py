#!/usr/bin/env python
"""
Signal report for Synduct Insights.

Loads a record file, applies a filter query string (the same one the
dashboard puts in its URL) and prints headline metrics, top drugs and
emerging signals.

Usage:
    python scripts/signal_report.py [options]

Options:
    --records PATH      Record file (JSON array)
    --query QUERY       Filter query string, e.g. "drug=A,B&country=DE&from=2024-01-01"
    --as-of DATE        End of the signal window (ISO-8601, default now)
    --top N             Entries in the top-drugs list
    --json              Output in JSON format
"""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import config
from config.logging_config import setup_logging, get_logger
from src.analysis import EXTRACTORS, detect_emerging_signals, key_metrics, rank
from src.filtering import DashboardStore, FilterError, JsonRecordSource
from src.filtering.models import upper_bound

logger = get_logger("signal_report")


def build_report(store: DashboardStore, query: str, as_of: datetime = None, top_n: int = 5) -> Dict[str, Any]:
    """
    Build the report for one filter query.

    Args:
        store: Store holding the full record set.
        query: Filter query string.
        as_of: End of the signal window.
        top_n: Entries in the top-drugs list.

    Returns:
        Dictionary with filters, metrics, top drugs and signals.

    Raises:
        FilterCodecError: If the query carries a malformed date.
    """
    store.hydrate_from_url(query)
    state = store.get_state()
    records = store.filtered

    result = detect_emerging_signals(records, now=as_of)

    return {
        "generated": datetime.now().isoformat(),
        "filters": state.to_dict(),
        "summary": state.get_summary(),
        "metrics": key_metrics(records).to_dict(),
        "top_drugs": [item.to_dict() for item in rank(records, EXTRACTORS["drug"], top_n=top_n)],
        "signals": [s.to_dict() for s in result.signals],
    }


def format_human_readable(report: Dict[str, Any]) -> str:
    """
    Format a report for human-readable output.

    Args:
        report: Output of build_report.

    Returns:
        Formatted string.
    """
    metrics = report["metrics"]
    lines = []
    lines.append("=" * 60)
    lines.append("Synduct Insights Signal Report")
    lines.append(f"Generated: {report['generated']}")
    lines.append(f"Filters: {report['summary']}")
    lines.append("=" * 60)

    lines.append("\nKEY METRICS:")
    lines.append("-" * 30)
    lines.append(f"  Interactions: {metrics['totalRecords']:,}")
    lines.append(f"  Countries: {metrics['uniqueCountries']}")
    lines.append(f"  Specialties: {metrics['uniqueSpecialties']}")
    lines.append(f"  Drugs: {metrics['uniqueDrugs']}")

    lines.append("\nTOP DRUGS:")
    lines.append("-" * 30)
    if report["top_drugs"]:
        for item in report["top_drugs"]:
            lines.append(f"  {item['label']}: {item['count']}")
    else:
        lines.append("  No drug mentions in range")

    lines.append("\nEMERGING SIGNALS:")
    lines.append("-" * 30)
    if report["signals"]:
        for s in report["signals"]:
            lines.append(f"  [{s['kind'].upper()}] {s['title']} +{s['percentChange']:.0f}% ({s['prior']} -> {s['current']})")
            if s["context"]:
                lines.append(f"      {s['context']}")
    else:
        lines.append("  No significant changes")

    lines.append("")
    return "\n".join(lines)


def main():
    """Main entry point for the signal report."""
    parser = argparse.ArgumentParser(
        description="Print metrics and emerging signals for a filter query",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--records",
        type=Path,
        default=config.data.records_path,
        help="Record file (JSON array)",
    )
    parser.add_argument(
        "--query",
        default="",
        help="Filter query string",
    )
    parser.add_argument(
        "--as-of",
        default=None,
        help="End of the signal window (ISO-8601, default now)",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=5,
        help="Entries in the top-drugs list",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )

    args = parser.parse_args()
    setup_logging(log_level=config.app.log_level, log_to_console=not args.json)

    try:
        store = DashboardStore.from_source(JsonRecordSource(args.records))
        as_of = upper_bound(args.as_of, "as_of") if args.as_of else None
        report = build_report(store, args.query, as_of=as_of, top_n=args.top)
    except FilterError as e:
        logger.error(str(e))
        sys.exit(1)

    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print(format_human_readable(report))


if __name__ == "__main__":
    main()
