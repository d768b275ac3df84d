"""Ethos reporting analytics engine."""

from .engine import calculate_metrics
from .errors import IngestionError, InvalidRecord, InvalidWindow
from .records import CLOSED_STATUSES, Priority, ReportRecord, ReportStatus, validate_records
from .snapshot import MetricsSnapshot, SectorBenchmark
from .window import ReportingWindow, resolve_previous_window

__all__ = [
    "CLOSED_STATUSES",
    "IngestionError",
    "InvalidRecord",
    "InvalidWindow",
    "MetricsSnapshot",
    "Priority",
    "ReportRecord",
    "ReportStatus",
    "ReportingWindow",
    "SectorBenchmark",
    "calculate_metrics",
    "resolve_previous_window",
    "validate_records",
]
