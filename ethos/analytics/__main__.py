"""
Command line: python -m ethos.analytics <records.csv> <start> <end>

Exit codes: 0 ok, 1 usage error, 2 halted on bad input.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from .engine import calculate_metrics
from .errors import IngestionError, InvalidRecord, InvalidWindow
from .ingestion import load_records, parse_timestamp


def _timestamp_arg(value: str) -> datetime:
    try:
        parsed = parse_timestamp(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None
    if parsed is None:
        raise argparse.ArgumentTypeError("timestamp is blank")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m ethos.analytics",
        description="Compute reporting-channel analytics for [start, end) from a CSV record export.",
    )
    parser.add_argument("records", help="CSV export of report records")
    parser.add_argument("start", type=_timestamp_arg, help="period start (inclusive)")
    parser.add_argument("end", type=_timestamp_arg, help="period end (exclusive)")
    parser.add_argument(
        "--as-of",
        type=_timestamp_arg,
        default=None,
        help="evaluation instant for trailing windows (default: now, UTC)",
    )
    parser.add_argument("--employees", type=int, default=None, help="active employee count")
    parser.add_argument("--json", action="store_true", help="print the snapshot as JSON")
    parser.add_argument("--log-level", default="WARNING", help="logging level (default WARNING)")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return 0 if e.code == 0 else 1

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    as_of = args.as_of or datetime.now(timezone.utc)

    try:
        result = load_records(args.records)
        snapshot = calculate_metrics(
            result.records,
            args.start,
            args.end,
            as_of=as_of,
            active_employees=args.employees,
        )
    except (IngestionError, InvalidWindow, InvalidRecord) as e:
        print(str(e), file=sys.stderr)
        return 2

    if args.json:
        print(snapshot.to_json())
    else:
        print(result.report.as_text())
        print()
        print(snapshot.as_text())
    return 0


if __name__ == "__main__":
    sys.exit(main())
