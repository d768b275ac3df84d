"""Reporting windows and the equal-length comparison window."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

import pandas as pd

from .errors import InvalidWindow
from .timeutils import to_utc_naive


@dataclass(frozen=True)
class ReportingWindow:
    """Half-open interval [start, end)."""
    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def mask(self, frame: pd.DataFrame) -> pd.Series:
        created = frame["created_at"]
        return (created >= self.start) & (created < self.end)


def reporting_window(start: datetime, end: datetime) -> ReportingWindow:
    """Normalise bounds to UTC and reject windows that end before they start."""
    start = to_utc_naive(start)
    end = to_utc_naive(end)
    if end < start:
        raise InvalidWindow(start=start, end=end)
    return ReportingWindow(start=start, end=end)


def resolve_previous_window(start: datetime, end: datetime) -> ReportingWindow:
    """
    The window of identical duration immediately before start.

    Pure duration arithmetic: a 37-day window compares against the 37 days
    before it, with no calendar alignment.
    """
    current = reporting_window(start, end)
    return ReportingWindow(start=current.start - current.duration, end=current.start)
