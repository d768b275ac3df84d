"""
Breakdown Aggregator

Groups records by one categorical column and reports count, share of the
total and average resolution time per group. Used for status, category and
priority alike.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

import pandas as pd

from .records import Priority

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BreakdownRow:
    key: str
    count: int
    percentage: float
    avg_resolution_days: float
    critical_count: int


def percentage(part: int, whole: int) -> float:
    """100 * part / whole, or 0 when whole is 0."""
    return (part / whole * 100) if whole > 0 else 0.0


def mean_or_zero(values: pd.Series) -> float:
    """Mean of the non-null values, or 0 when there are none."""
    values = values.dropna()
    return float(values.mean()) if len(values) > 0 else 0.0


def aggregate_by(df: pd.DataFrame, column: str) -> Mapping[str, BreakdownRow]:
    """
    Group df by column, preserving first-seen key order.

    avg_resolution_days is taken over the members that have a closed_at;
    groups without any report 0.
    """
    total = len(df)
    rows: dict[str, BreakdownRow] = {}
    if total == 0:
        return MappingProxyType(rows)

    grouped = df.groupby(column, sort=False)
    for key, group in grouped:
        count = len(group)
        rows[str(key)] = BreakdownRow(
            key=str(key),
            count=count,
            percentage=percentage(count, total),
            avg_resolution_days=mean_or_zero(group["resolution_days"]),
            critical_count=int((group["priority"] == Priority.CRITICAL.value).sum()),
        )

    logger.debug("[breakdown] %s: %d groups over %d records", column, len(rows), total)
    return MappingProxyType(rows)
