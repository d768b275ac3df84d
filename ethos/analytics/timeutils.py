"""Timestamp normalisation and the single days-between convention."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

ONE_DAY = timedelta(days=1)


def to_utc_naive(value: datetime) -> datetime:
    """Aware values are converted to UTC; naive values are taken as UTC already."""
    if not isinstance(value, datetime):
        raise TypeError(f"expected datetime, got {type(value).__name__}")
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def days_between(start: datetime, end: datetime) -> int:
    """
    Whole days from start to end, floored.

    Every stage that turns a duration into days goes through here, so the
    engine never mixes floor and round semantics.
    """
    return (end - start) // ONE_DAY
