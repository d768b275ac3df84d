"""Ranking & Trend Classifier: top categories by volume, labelled against the previous period."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

import pandas as pd

from .breakdown import BreakdownRow, percentage
from .constants import CATEGORY_TREND_TOLERANCE_PCT, TOP_CATEGORY_LIMIT


class Trend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


@dataclass(frozen=True)
class RankedCategory:
    category: str
    count: int
    percentage_of_total: float
    trend: Trend


def classify_trend(current_count: int, previous_count: int) -> Trend:
    # A category unseen last period is stable, not an alarm.
    if previous_count == 0:
        return Trend.STABLE
    change = percentage(current_count - previous_count, previous_count)
    if change > CATEGORY_TREND_TOLERANCE_PCT:
        return Trend.INCREASING
    if change < -CATEGORY_TREND_TOLERANCE_PCT:
        return Trend.DECREASING
    return Trend.STABLE


def rank_categories(
    by_category: Mapping[str, BreakdownRow],
    previous: pd.DataFrame,
    limit: int = TOP_CATEGORY_LIMIT,
) -> tuple[RankedCategory, ...]:
    """Descending by count; ties keep first-seen order."""
    previous_counts = previous["category"].value_counts()
    ranked = sorted(by_category.values(), key=lambda row: row.count, reverse=True)[:limit]
    return tuple(
        RankedCategory(
            category=row.key,
            count=row.count,
            percentage_of_total=row.percentage,
            trend=classify_trend(row.count, int(previous_counts.get(row.key, 0))),
        )
        for row in ranked
    )
