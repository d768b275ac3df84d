"""
Ethos Record Model

One immutable record per submitted report (whistleblower, compliance,
quality or emissions reports share the same shape).

RULES:
- Status and priority are closed vocabularies. Raw tags are matched
  case-insensitively against a fixed alias table; unknown tags are rejected,
  never bucketed as "other".
- Category is an open vocabulary, normalised only mechanically (strip +
  collapse internal whitespace) so a stray space never splits a group.
- Records are validated before aggregation. A bad record halts the run.

Public API:
  ReportStatus, Priority, CLOSED_STATUSES
  ReportRecord
  normalize_category(raw) -> str
  validate_records(records) -> tuple[ReportRecord, ...]
  records_to_frame(records) -> pd.DataFrame
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional

import pandas as pd

from .errors import InvalidRecord
from .timeutils import days_between, to_utc_naive

logger = logging.getLogger(__name__)


def _alias_key(raw: str) -> str:
    return " ".join(str(raw).split()).lower()


class ReportStatus(str, Enum):
    NEW = "New"
    UNDER_INVESTIGATION = "Under Investigation"
    AWAITING_ACTION = "Awaiting Action"
    RESOLVED = "Resolved"
    CLOSED = "Closed"
    ARCHIVED = "Archived"

    @property
    def is_closed(self) -> bool:
        return self in CLOSED_STATUSES

    @classmethod
    def parse(cls, raw: str | ReportStatus) -> ReportStatus:
        if isinstance(raw, cls):
            return raw
        try:
            return _STATUS_ALIASES[_alias_key(raw)]
        except KeyError:
            raise ValueError(f"unknown status '{raw}'") from None


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @classmethod
    def parse(cls, raw: str | Priority) -> Priority:
        if isinstance(raw, cls):
            return raw
        try:
            return _PRIORITY_ALIASES[_alias_key(raw)]
        except KeyError:
            raise ValueError(f"unknown priority '{raw}'") from None


CLOSED_STATUSES: frozenset[ReportStatus] = frozenset({
    ReportStatus.RESOLVED,
    ReportStatus.CLOSED,
    ReportStatus.ARCHIVED,
})

# Portuguese labels come from the ethics-channel forms of the source app.
_STATUS_ALIASES: dict[str, ReportStatus] = {
    "new":                   ReportStatus.NEW,
    "open":                  ReportStatus.NEW,
    "nova":                  ReportStatus.NEW,
    "under investigation":   ReportStatus.UNDER_INVESTIGATION,
    "under_investigation":   ReportStatus.UNDER_INVESTIGATION,
    "investigating":         ReportStatus.UNDER_INVESTIGATION,
    "em investigação":       ReportStatus.UNDER_INVESTIGATION,
    "em investigacao":       ReportStatus.UNDER_INVESTIGATION,
    "awaiting action":       ReportStatus.AWAITING_ACTION,
    "awaiting_action":       ReportStatus.AWAITING_ACTION,
    "aguardando ação":       ReportStatus.AWAITING_ACTION,
    "aguardando acao":       ReportStatus.AWAITING_ACTION,
    "resolved":              ReportStatus.RESOLVED,
    "resolvida":             ReportStatus.RESOLVED,
    "closed":                ReportStatus.CLOSED,
    "fechada":               ReportStatus.CLOSED,
    "archived":              ReportStatus.ARCHIVED,
    "arquivada":             ReportStatus.ARCHIVED,
}

_PRIORITY_ALIASES: dict[str, Priority] = {
    "low":       Priority.LOW,
    "baixa":     Priority.LOW,
    "medium":    Priority.MEDIUM,
    "média":     Priority.MEDIUM,
    "media":     Priority.MEDIUM,
    "high":      Priority.HIGH,
    "alta":      Priority.HIGH,
    "critical":  Priority.CRITICAL,
    "crítica":   Priority.CRITICAL,
    "critica":   Priority.CRITICAL,
}


def normalize_category(raw) -> str:
    """Strip and collapse whitespace. Case is preserved."""
    if raw is None:
        return ""
    return " ".join(str(raw).split())


@dataclass(frozen=True)
class ReportRecord:
    id: str
    category: str
    priority: Priority
    status: ReportStatus
    is_anonymous: bool
    created_at: datetime
    closed_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        record_id = str(self.id).strip() if self.id is not None else ""
        if not record_id:
            raise InvalidRecord(
                record_id=None,
                reason="Record has no id",
                invalid_fields=["id"],
                fix_steps=["Every record needs a unique, non-empty identifier."],
            )

        category = normalize_category(self.category)
        if not category:
            raise InvalidRecord(
                record_id=record_id,
                reason="Record has no category",
                invalid_fields=["category"],
                fix_steps=["Assign a category before running analytics."],
            )

        try:
            status = ReportStatus.parse(self.status)
        except ValueError as e:
            raise InvalidRecord(
                record_id=record_id,
                reason=str(e),
                invalid_fields=["status"],
                fix_steps=[f"Use one of: {', '.join(s.value for s in ReportStatus)}."],
            ) from None

        try:
            priority = Priority.parse(self.priority)
        except ValueError as e:
            raise InvalidRecord(
                record_id=record_id,
                reason=str(e),
                invalid_fields=["priority"],
                fix_steps=[f"Use one of: {', '.join(p.value for p in Priority)}."],
            ) from None

        try:
            created_at = to_utc_naive(self.created_at)
            closed_at = to_utc_naive(self.closed_at) if self.closed_at is not None else None
        except TypeError as e:
            raise InvalidRecord(
                record_id=record_id,
                reason=f"Timestamp is not a datetime ({e})",
                invalid_fields=["created_at", "closed_at"],
                fix_steps=["Parse timestamps before building records."],
            ) from None

        object.__setattr__(self, "id", record_id)
        object.__setattr__(self, "category", category)
        object.__setattr__(self, "status", status)
        object.__setattr__(self, "priority", priority)
        object.__setattr__(self, "is_anonymous", bool(self.is_anonymous))
        object.__setattr__(self, "created_at", created_at)
        object.__setattr__(self, "closed_at", closed_at)

    @property
    def is_closed(self) -> bool:
        return self.status.is_closed

    @property
    def resolution_days(self) -> Optional[int]:
        if self.closed_at is None:
            return None
        return days_between(self.created_at, self.closed_at)


def validate_records(records: Iterable[ReportRecord]) -> tuple[ReportRecord, ...]:
    """
    Cross-field checks that a single constructor cannot see.

    Raises InvalidRecord on the first violation:
    - closed_at earlier than created_at
    - closed_at set on an open status
    - duplicate id
    """
    seen: set[str] = set()
    validated: list[ReportRecord] = []
    for record in records:
        if not isinstance(record, ReportRecord):
            raise InvalidRecord(
                record_id=None,
                reason=f"Expected ReportRecord, got {type(record).__name__}",
                fix_steps=["Build records with ReportRecord(...) or load them via ingestion."],
            )
        if record.id in seen:
            raise InvalidRecord(
                record_id=record.id,
                reason="Duplicate record id",
                invalid_fields=["id"],
                fix_steps=["Remove the duplicate row from the record fetch."],
            )
        seen.add(record.id)

        if record.closed_at is not None:
            if record.closed_at < record.created_at:
                raise InvalidRecord(
                    record_id=record.id,
                    reason="closed_at is earlier than created_at",
                    invalid_fields=["created_at", "closed_at"],
                    fix_steps=[
                        "Correct the closing timestamp in the source system.",
                        "A negative resolution time is never averaged in.",
                    ],
                )
            if not record.is_closed:
                raise InvalidRecord(
                    record_id=record.id,
                    reason=f"closed_at is set but status '{record.status.value}' is open",
                    invalid_fields=["status", "closed_at"],
                    fix_steps=["Either close the record or clear closed_at."],
                )
        validated.append(record)

    logger.debug("[records] validated %d records", len(validated))
    return tuple(validated)


FRAME_COLUMNS: list[str] = [
    "id",
    "category",
    "priority",
    "status",
    "is_closed",
    "is_anonymous",
    "created_at",
    "closed_at",
    "resolution_days",
]


def records_to_frame(records: Iterable[ReportRecord]) -> pd.DataFrame:
    """One row per record, in input order. Tags are stored as their string values."""
    rows = [
        {
            "id": r.id,
            "category": r.category,
            "priority": r.priority.value,
            "status": r.status.value,
            "is_closed": r.is_closed,
            "is_anonymous": r.is_anonymous,
            "created_at": r.created_at,
            "closed_at": r.closed_at,
            "resolution_days": r.resolution_days,
        }
        for r in records
    ]
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    df["created_at"] = pd.to_datetime(df["created_at"])
    df["closed_at"] = pd.to_datetime(df["closed_at"])
    df["is_closed"] = df["is_closed"].astype(bool)
    df["is_anonymous"] = df["is_anonymous"].astype(bool)
    df["resolution_days"] = df["resolution_days"].astype("float64")
    return df
