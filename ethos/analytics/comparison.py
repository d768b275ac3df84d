"""Comparative Analyzer: current period against the equal-length previous one."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import pandas as pd

from .breakdown import percentage
from .resolution import resolution_rate
from .window import ReportingWindow


@dataclass(frozen=True)
class PeriodComparison:
    previous_period_start: datetime
    previous_period_end: datetime
    previous_period_total: int
    change_percentage: float
    is_improving: bool
    previous_resolution_rate: float
    resolution_rate_change: float


def compare_periods(
    current: pd.DataFrame,
    previous: pd.DataFrame,
    previous_window: ReportingWindow,
) -> PeriodComparison:
    """
    change_percentage saturates to 0 when the previous period is empty.
    is_improving is an OR of two signals: fewer reports, or a better
    resolution rate.
    """
    current_total = len(current)
    previous_total = len(previous)
    current_rate = resolution_rate(current)
    previous_rate = resolution_rate(previous)

    return PeriodComparison(
        previous_period_start=previous_window.start,
        previous_period_end=previous_window.end,
        previous_period_total=previous_total,
        change_percentage=percentage(current_total - previous_total, previous_total),
        is_improving=current_total < previous_total or current_rate > previous_rate,
        previous_resolution_rate=previous_rate,
        resolution_rate_change=current_rate - previous_rate,
    )
