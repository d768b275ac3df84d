"""
Ethos Reporting Analytics Engine

Maps an already-fetched record set and a reporting window to one immutable
MetricsSnapshot.

RULES:
- No I/O. Records come in materialised; the snapshot goes out unserialised.
- No system clock. The evaluation instant (as_of) is a parameter; it anchors
  the 12-month trend, the 6-month recurrence window and the overdue check.
- No shared state between stages or between calls.
- A window that ends before it starts halts before any aggregation.
- Every division by zero resolves to 0.

Public API:
  calculate_metrics(records, period_start, period_end, *, as_of, ...) -> MetricsSnapshot
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from .breakdown import aggregate_by, percentage
from .classification import classify_performance, evaluate_compliance
from .comparison import compare_periods
from .effectiveness import score_effectiveness
from .ranking import rank_categories
from .records import ReportRecord, records_to_frame, validate_records
from .recurrence import detect_recurrence
from .resolution import resolution_statistics
from .snapshot import MetricsSnapshot, SectorBenchmark
from .timeutils import to_utc_naive
from .trend import monthly_trend
from .window import reporting_window, resolve_previous_window

logger = logging.getLogger(__name__)


def calculate_metrics(
    records: Iterable[ReportRecord],
    period_start: datetime,
    period_end: datetime,
    *,
    as_of: datetime,
    active_employees: Optional[int] = None,
    benchmark: Optional[SectorBenchmark] = None,
) -> MetricsSnapshot:
    """
    Build the metrics snapshot for [period_start, period_end).

    Parameters
    ----------
    records : iterable of ReportRecord
        Every record the caller fetched. The current period and the
        equal-length previous period are both selected from this set by
        created_at; the trailing trend and recurrence windows read all of it.
    period_start, period_end : datetime
        Half-open reporting window. Naive values are taken as UTC.
    as_of : datetime
        Evaluation instant. Inject a fixed value for reproducible output.
    active_employees : int, optional
        Used only for the channel utilization rate (0 when unknown).
    benchmark : SectorBenchmark, optional
        Echoed into the snapshot for side-by-side display.

    Raises
    ------
    InvalidWindow
        period_end is earlier than period_start.
    InvalidRecord
        A record fails boundary validation.
    """
    # ------------------------------------------------------------------
    # STAGE 1: Window resolution (fail fast)
    # ------------------------------------------------------------------
    window = reporting_window(period_start, period_end)
    previous_window = resolve_previous_window(period_start, period_end)
    as_of = to_utc_naive(as_of)

    # ------------------------------------------------------------------
    # STAGE 2: Boundary validation, one frame for every stage
    # ------------------------------------------------------------------
    validated = validate_records(records)
    all_df = records_to_frame(validated)
    df = all_df[window.mask(all_df)]
    previous_df = all_df[previous_window.mask(all_df)]

    total = len(df)
    closed = int(df["is_closed"].sum())
    anonymous = int(df["is_anonymous"].sum())

    # ------------------------------------------------------------------
    # STAGE 3: Breakdowns
    # ------------------------------------------------------------------
    by_status = aggregate_by(df, "status")
    by_category = aggregate_by(df, "category")
    by_priority = aggregate_by(df, "priority")

    # ------------------------------------------------------------------
    # STAGE 4: Trailing 12-month trend (independent of the window)
    # ------------------------------------------------------------------
    trend = monthly_trend(all_df, as_of)

    # ------------------------------------------------------------------
    # STAGE 5: Resolution statistics
    # ------------------------------------------------------------------
    resolution = resolution_statistics(df, as_of)

    # ------------------------------------------------------------------
    # STAGE 6: Comparison with the previous period
    # ------------------------------------------------------------------
    comparison = compare_periods(df, previous_df, previous_window)

    # ------------------------------------------------------------------
    # STAGE 7: Ranking
    # ------------------------------------------------------------------
    top_categories = rank_categories(by_category, previous_df)

    # ------------------------------------------------------------------
    # STAGE 8: Recurrence (trailing 6 months, independent of the window)
    # ------------------------------------------------------------------
    recurrence = detect_recurrence(all_df, as_of)

    # ------------------------------------------------------------------
    # STAGE 9: Funnel and effectiveness
    # ------------------------------------------------------------------
    effectiveness = score_effectiveness(df, previous_df, by_category, resolution)

    # ------------------------------------------------------------------
    # STAGE 10: Classification and compliance
    # ------------------------------------------------------------------
    performance = classify_performance(
        resolution.resolution_rate, resolution.avg_resolution_time_days
    )
    compliance = evaluate_compliance(
        total_reports=total,
        category_count=len(by_category),
        resolution_rate=resolution.resolution_rate,
        avg_resolution_days=resolution.avg_resolution_time_days,
        reports_overdue=resolution.reports_overdue,
        systemic_issues_count=recurrence.systemic_issues_count,
        active_employees=active_employees,
    )

    snapshot = MetricsSnapshot(
        period=window,
        previous_period=previous_window,
        calculation_date=as_of,
        total_reports=total,
        total_reports_current_year=int((df["created_at"].dt.year == as_of.year).sum()),
        open_reports=total - closed,
        closed_reports=closed,
        anonymous_reports=anonymous,
        anonymous_percentage=percentage(anonymous, total),
        by_status=by_status,
        by_category=by_category,
        by_priority=by_priority,
        monthly_trend=trend,
        resolution_metrics=resolution,
        comparison=comparison,
        top_categories=top_categories,
        recurrence_analysis=recurrence,
        performance_classification=performance,
        compliance_status=compliance,
        resolution_effectiveness=effectiveness,
        sector_benchmark=benchmark,
    )

    logger.info(
        "[engine] snapshot built: %d current, %d previous, %d supplied, class=%s",
        total, len(previous_df), len(all_df), performance.value,
    )
    return snapshot
