"""
Funnel & Effectiveness Scorer

Resolution funnel, speed score, distance to the target resolution rate,
backlog direction, and the best/worst categories by resolution rate.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping

import pandas as pd

from .breakdown import BreakdownRow, percentage
from .constants import (
    RESOLUTION_RANKING_MIN_RECORDS,
    RESOLUTION_RANKING_SIZE,
    SPEED_SCORE_CAP,
    SPEED_SCORE_MULTIPLIER,
    TARGET_RESOLUTION_RATE,
)
from .records import ReportStatus
from .resolution import ResolutionMetrics


class BacklogTrend(str, Enum):
    IMPROVING = "improving"
    WORSENING = "worsening"
    STABLE = "stable"


@dataclass(frozen=True)
class ResolutionFunnel:
    received: int
    under_investigation: int
    awaiting_action: int
    resolved: int
    conversion_rate: float


@dataclass(frozen=True)
class CategoryResolution:
    category: str
    resolution_rate: float
    avg_resolution_days: float


@dataclass(frozen=True)
class ResolutionEffectiveness:
    total_resolved: int
    total_received: int
    target_resolution_rate: float
    actual_resolution_rate: float
    is_meeting_target: bool
    gap_to_target: float
    resolved_under_30_days_percentage: float
    resolved_with_action_taken: int
    resolved_without_action: int
    resolution_funnel: ResolutionFunnel
    resolution_speed_score: float
    backlog_trend: BacklogTrend
    best_resolved_categories: tuple[CategoryResolution, ...]
    worst_resolved_categories: tuple[CategoryResolution, ...]


def _status_count(df: pd.DataFrame, status: ReportStatus) -> int:
    return int((df["status"] == status.value).sum())


def build_funnel(df: pd.DataFrame) -> ResolutionFunnel:
    received = len(df)
    resolved = int(df["is_closed"].sum())
    return ResolutionFunnel(
        received=received,
        under_investigation=_status_count(df, ReportStatus.UNDER_INVESTIGATION),
        awaiting_action=_status_count(df, ReportStatus.AWAITING_ACTION),
        resolved=resolved,
        conversion_rate=percentage(resolved, received),
    )


def speed_score(under_30_days_pct: float) -> float:
    """Capped linear score, not a probability."""
    return min(SPEED_SCORE_CAP, SPEED_SCORE_MULTIPLIER * under_30_days_pct)


def backlog_trend(current_open: int, previous_open: int) -> BacklogTrend:
    if current_open < previous_open:
        return BacklogTrend.IMPROVING
    if current_open > previous_open:
        return BacklogTrend.WORSENING
    return BacklogTrend.STABLE


def rank_category_resolution(
    df: pd.DataFrame,
    by_category: Mapping[str, BreakdownRow],
) -> tuple[tuple[CategoryResolution, ...], tuple[CategoryResolution, ...]]:
    """
    Best and worst categories by resolution rate.

    Only categories with at least RESOLUTION_RANKING_MIN_RECORDS records
    qualify. The worst list is the tail of the ranking, worst first.
    """
    closed_per_category = df.groupby("category", sort=False)["is_closed"].sum()
    qualifying = [
        CategoryResolution(
            category=row.key,
            resolution_rate=percentage(int(closed_per_category.get(row.key, 0)), row.count),
            avg_resolution_days=row.avg_resolution_days,
        )
        for row in by_category.values()
        if row.count >= RESOLUTION_RANKING_MIN_RECORDS
    ]
    ranked = sorted(qualifying, key=lambda c: c.resolution_rate, reverse=True)
    best = tuple(ranked[:RESOLUTION_RANKING_SIZE])
    worst = tuple(reversed(ranked[-RESOLUTION_RANKING_SIZE:])) if ranked else ()
    return best, worst


def score_effectiveness(
    df: pd.DataFrame,
    previous: pd.DataFrame,
    by_category: Mapping[str, BreakdownRow],
    resolution: ResolutionMetrics,
) -> ResolutionEffectiveness:
    funnel = build_funnel(df)
    under_30_pct = percentage(resolution.reports_under_30_days, funnel.resolved)
    current_open = funnel.received - funnel.resolved
    previous_open = int((~previous["is_closed"]).sum())
    best, worst = rank_category_resolution(df, by_category)

    return ResolutionEffectiveness(
        total_resolved=funnel.resolved,
        total_received=funnel.received,
        target_resolution_rate=TARGET_RESOLUTION_RATE,
        actual_resolution_rate=resolution.resolution_rate,
        is_meeting_target=resolution.resolution_rate >= TARGET_RESOLUTION_RATE,
        gap_to_target=TARGET_RESOLUTION_RATE - resolution.resolution_rate,
        resolved_under_30_days_percentage=under_30_pct,
        resolved_with_action_taken=_status_count(df, ReportStatus.RESOLVED),
        resolved_without_action=_status_count(df, ReportStatus.ARCHIVED),
        resolution_funnel=funnel,
        resolution_speed_score=speed_score(under_30_pct),
        backlog_trend=backlog_trend(current_open, previous_open),
        best_resolved_categories=best,
        worst_resolved_categories=worst,
    )
