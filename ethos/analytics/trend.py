"""
Temporal Bucketizer

Twelve calendar-month buckets ending at the evaluation month, inclusive.
The buckets are anchored to as_of, not to the reporting window, so charts
stay put while the analysis period changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import pandas as pd

from .breakdown import mean_or_zero
from .constants import TREND_MONTHS


@dataclass(frozen=True)
class MonthlyBucket:
    month: str
    reports_received: int
    reports_resolved: int
    reports_open: int
    avg_resolution_days: float


def trailing_months(as_of: datetime, months: int = TREND_MONTHS) -> pd.PeriodIndex:
    """Month periods ending at as_of's month, oldest first."""
    return pd.period_range(end=pd.Period(as_of, freq="M"), periods=months, freq="M")


def monthly_trend(df: pd.DataFrame, as_of: datetime) -> tuple[MonthlyBucket, ...]:
    """
    reports_received counts by created_at month; reports_resolved by
    closed_at month, which may differ from the month the record arrived.
    """
    created_month = df["created_at"].dt.to_period("M")
    closed_month = df["closed_at"].dt.to_period("M")

    buckets: list[MonthlyBucket] = []
    for month in trailing_months(as_of):
        received = df[created_month == month]
        resolved = df[closed_month == month]
        buckets.append(MonthlyBucket(
            month=str(month),
            reports_received=len(received),
            reports_resolved=len(resolved),
            reports_open=int((~received["is_closed"]).sum()),
            avg_resolution_days=mean_or_zero(resolved["resolution_days"]),
        ))
    return tuple(buckets)
