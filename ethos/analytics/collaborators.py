"""
Collaborator interfaces.

The engine never fetches anything. These protocols describe what a caller
plugs in (a record store, an HR directory); build_company_report wires them
to calculate_metrics for one tenant. Fetching may be slow or concurrent;
that is the collaborator's business, and so are retries.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Protocol, Sequence

from .engine import calculate_metrics
from .records import ReportRecord
from .snapshot import MetricsSnapshot, SectorBenchmark
from .window import resolve_previous_window

logger = logging.getLogger(__name__)


class RecordSource(Protocol):
    def fetch_records(self, company_id: str, start: datetime, end: datetime) -> Sequence[ReportRecord]:
        """Records with start <= created_at < end for one company."""
        ...


class EmployeeDirectory(Protocol):
    def count_active_employees(self, company_id: str) -> int:
        ...


def build_company_report(
    company_id: str,
    start: datetime,
    end: datetime,
    *,
    source: RecordSource,
    as_of: datetime,
    directory: Optional[EmployeeDirectory] = None,
    benchmark: Optional[SectorBenchmark] = None,
) -> MetricsSnapshot:
    """
    Fetch the previous and current periods in one call and compute the snapshot.

    The window is validated before anything is fetched. Trailing trend and
    recurrence only see what the fetch returned, so callers that want a full
    12-month trend should fetch that span themselves and call
    calculate_metrics directly.
    """
    previous = resolve_previous_window(start, end)
    records = source.fetch_records(company_id, previous.start, end)
    active_employees = directory.count_active_employees(company_id) if directory else None
    logger.info(
        "[collaborators] %s: fetched %d records for %s .. %s",
        company_id, len(records), previous.start.isoformat(), end.isoformat(),
    )
    return calculate_metrics(
        records,
        start,
        end,
        as_of=as_of,
        active_employees=active_employees,
        benchmark=benchmark,
    )
