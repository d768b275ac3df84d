"""
Resolution Statistics

Rate, mean and median resolution time, overdue open records, and
age buckets for closed records.

Median convention: the element at index n // 2 of the ascending list. For
even n this picks one middle value instead of averaging the two.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import pandas as pd

from .breakdown import mean_or_zero, percentage
from .constants import FAST_RESOLUTION_DAYS, OVERDUE_AGE_DAYS, SLOW_RESOLUTION_DAYS
from .timeutils import days_between


@dataclass(frozen=True)
class ResolutionMetrics:
    resolution_rate: float
    avg_resolution_time_days: float
    median_resolution_time_days: int
    reports_overdue: int
    reports_under_30_days: int
    reports_30_90_days: int
    reports_over_90_days: int


def resolution_rate(df: pd.DataFrame) -> float:
    return percentage(int(df["is_closed"].sum()), len(df))


def median_days(days: list[int]) -> int:
    if not days:
        return 0
    ordered = sorted(days)
    return ordered[len(ordered) // 2]


def count_overdue(df: pd.DataFrame, as_of: datetime) -> int:
    """Open records older than the overdue age, in floor days."""
    open_created = df.loc[~df["is_closed"], "created_at"]
    return sum(
        1 for created in open_created
        if days_between(created.to_pydatetime(), as_of) > OVERDUE_AGE_DAYS
    )


def resolution_statistics(df: pd.DataFrame, as_of: datetime) -> ResolutionMetrics:
    # Age buckets use resolution duration, so only closed records with a closing time count.
    closed_days = df.loc[df["is_closed"], "resolution_days"].dropna()
    days = [int(d) for d in closed_days]

    return ResolutionMetrics(
        resolution_rate=resolution_rate(df),
        avg_resolution_time_days=mean_or_zero(closed_days),
        median_resolution_time_days=median_days(days),
        reports_overdue=count_overdue(df, as_of),
        reports_under_30_days=sum(1 for d in days if d < FAST_RESOLUTION_DAYS),
        reports_30_90_days=sum(1 for d in days if FAST_RESOLUTION_DAYS <= d <= SLOW_RESOLUTION_DAYS),
        reports_over_90_days=sum(1 for d in days if d > SLOW_RESOLUTION_DAYS),
    )
