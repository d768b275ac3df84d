"""
Ethos Analytics fixed thresholds.

Every value here is CONTRACT-LOCKED: changing one changes reported KPIs.
They are deliberately not read from the environment so that identical
inputs always produce identical snapshots.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Resolution-time buckets (days, floor convention)
# ---------------------------------------------------------------------------

FAST_RESOLUTION_DAYS: int = 30       # "< 30 days" bucket upper bound (exclusive)
SLOW_RESOLUTION_DAYS: int = 90       # "> 90 days" bucket lower bound (exclusive)
OVERDUE_AGE_DAYS: int = 90           # open records older than this are overdue

# ---------------------------------------------------------------------------
# Trailing windows (anchored to the evaluation instant)
# ---------------------------------------------------------------------------

TREND_MONTHS: int = 12
RECURRENCE_WINDOW_MONTHS: int = 6
RECURRENCE_THRESHOLD: int = 3

# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------

TOP_CATEGORY_LIMIT: int = 5
CATEGORY_TREND_TOLERANCE_PCT: float = 10.0
RESOLUTION_RANKING_MIN_RECORDS: int = 2
RESOLUTION_RANKING_SIZE: int = 3

# ---------------------------------------------------------------------------
# Effectiveness
# ---------------------------------------------------------------------------

TARGET_RESOLUTION_RATE: float = 85.0
SPEED_SCORE_MULTIPLIER: float = 1.5
SPEED_SCORE_CAP: float = 100.0

# ---------------------------------------------------------------------------
# Compliance
# ---------------------------------------------------------------------------

ISO_37001_MIN_RESOLUTION_RATE: float = 70.0
ISO_37001_MAX_AVG_DAYS: float = 90.0
