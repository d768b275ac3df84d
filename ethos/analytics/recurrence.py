"""
Recurrence Detector

Flags categories that keep coming back within a fixed trailing window.
Frequency threshold only, no statistical test: window and threshold are
fixed so the output is reproducible.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import pandas as pd

from .constants import RECURRENCE_THRESHOLD, RECURRENCE_WINDOW_MONTHS


@dataclass(frozen=True)
class RecurringCategory:
    category: str
    count: int
    is_systemic: bool


@dataclass(frozen=True)
class RecurrenceAnalysis:
    categories_with_recurrence: tuple[RecurringCategory, ...]
    systemic_issues_count: int


def recurrence_cutoff(as_of: datetime) -> pd.Timestamp:
    """as_of minus the recurrence window, in calendar months."""
    return pd.Timestamp(as_of) - pd.DateOffset(months=RECURRENCE_WINDOW_MONTHS)


def detect_recurrence(df: pd.DataFrame, as_of: datetime) -> RecurrenceAnalysis:
    """Counts records created in [as_of - window, as_of]; later records are ignored."""
    created = df["created_at"]
    recent = df[(created >= recurrence_cutoff(as_of)) & (created <= pd.Timestamp(as_of))]
    counts = recent.groupby("category", sort=False).size()

    systemic = tuple(
        RecurringCategory(category=str(category), count=int(count), is_systemic=True)
        for category, count in counts.items()
        if count >= RECURRENCE_THRESHOLD
    )
    return RecurrenceAnalysis(
        categories_with_recurrence=systemic,
        systemic_issues_count=len(systemic),
    )
