"""
Ethos Ingestion: CSV record export → validated ReportRecords.

This is the command line's record source, not a persistence layer: it reads
a file somebody already exported and refuses to hand the engine anything it
would have to guess about.

CONTRACT ANCHORS
----------------
- Required columns: id, category, priority, status, created_at
- Optional columns: closed_at (blank = not closed), is_anonymous (blank = false)
- Headers resolved through the column_mapper alias library; every rename logged
- No partial loads. A bad row halts ingestion with the row number.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from .column_mapper import get_unmatched_columns, resolve_columns
from .errors import IngestionError, InvalidRecord
from .records import ReportRecord, validate_records
from .timeutils import to_utc_naive

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: list[str] = ["id", "category", "priority", "status", "created_at"]

_TRUE_VALUES: frozenset[str] = frozenset({"true", "t", "yes", "y", "1", "sim", "s"})
_FALSE_VALUES: frozenset[str] = frozenset({"false", "f", "no", "n", "0", "não", "nao", ""})

_TIMESTAMP_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y",
)


@dataclass
class IngestionReport:
    """Surfaces every rename and unmatched header. Nothing is suppressed."""
    source_file: str
    row_count: int
    alias_map: dict[str, str]
    unmatched_columns: list[str]
    flags: list[str] = field(default_factory=list)

    def as_text(self) -> str:
        lines = [
            "═" * 60,
            "ETHOS INGESTION REPORT",
            "═" * 60,
            f"Source File     : {self.source_file}",
            f"Records Loaded  : {self.row_count}",
            "",
            "COLUMN ALIAS MAP",
        ]
        if not self.alias_map:
            lines.append("  None")
        for raw, normalized in self.alias_map.items():
            lines.append(f"  '{raw}' → '{normalized}'")
        lines += ["", "UNMATCHED COLUMNS (ignored)"]
        if not self.unmatched_columns:
            lines.append("  None")
        for col in self.unmatched_columns:
            lines.append(f"  {col}")
        if self.flags:
            lines += ["", "FLAGS"]
            for flag in self.flags:
                lines.append(f"  ⚑ {flag}")
        lines.append("═" * 60)
        return "\n".join(lines)


@dataclass
class IngestionResult:
    records: tuple[ReportRecord, ...]
    report: IngestionReport


# ---------------------------------------------------------------------------
# Internal utilities
# ---------------------------------------------------------------------------


def _mechanical_normalize(df: pd.DataFrame) -> pd.DataFrame:
    """Strip BOM, zero-width characters and surrounding whitespace from headers and cells."""
    df = df.copy()
    df.columns = [
        str(c).replace("\ufeff", "").replace("\u200b", "").strip() for c in df.columns
    ]
    for col in df.columns:
        df[col] = (
            df[col]
            .astype(str)
            .str.replace(r"[\u200b\u200c\u200d\ufeff]", "", regex=True)
            .str.strip()
        )
    return df


def parse_timestamp(val) -> Optional[datetime]:
    """Parse a timestamp tolerantly. Blank → None. Unparseable → ValueError."""
    s = str(val).strip() if val is not None else ""
    if not s:
        return None
    try:
        return to_utc_naive(datetime.fromisoformat(s.replace("Z", "+00:00")))
    except ValueError:
        pass
    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    raise ValueError(f"unparseable timestamp '{s}'")


def parse_flag(val) -> bool:
    s = str(val).strip().lower() if val is not None else ""
    if s in _TRUE_VALUES:
        return True
    if s in _FALSE_VALUES:
        return False
    raise ValueError(f"unrecognised boolean '{val}'")


def _halt(path: str, reason: str, fields: list[str], steps: list[str]) -> IngestionError:
    return IngestionError(
        reason=reason,
        affected_file=path,
        missing_or_invalid_fields=fields,
        operator_fix_steps=steps,
    )


def _row_to_record(row: pd.Series, row_number: int, path: str) -> ReportRecord:
    try:
        created_at = parse_timestamp(row["created_at"])
        closed_at = parse_timestamp(row["closed_at"]) if "closed_at" in row.index else None
    except ValueError as e:
        raise _halt(
            path,
            f"Row {row_number}: {e}",
            ["created_at", "closed_at"],
            ["Use ISO-8601 (YYYY-MM-DD or YYYY-MM-DDTHH:MM:SS) or DD/MM/YYYY timestamps."],
        ) from None
    if created_at is None:
        raise _halt(
            path,
            f"Row {row_number}: created_at is blank",
            ["created_at"],
            ["Every record needs a creation timestamp."],
        )

    try:
        is_anonymous = parse_flag(row["is_anonymous"]) if "is_anonymous" in row.index else False
    except ValueError as e:
        raise _halt(
            path,
            f"Row {row_number}: {e}",
            ["is_anonymous"],
            ["Use true/false, yes/no or 1/0 for the anonymity flag."],
        ) from None

    try:
        return ReportRecord(
            id=row["id"],
            category=row["category"],
            priority=row["priority"],
            status=row["status"],
            is_anonymous=is_anonymous,
            created_at=created_at,
            closed_at=closed_at,
        )
    except InvalidRecord as e:
        raise _halt(path, f"Row {row_number}: {e.reason}", e.invalid_fields, e.fix_steps) from None


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------


def load_records(
    path: str,
    column_overrides: Optional[dict[str, str]] = None,
) -> IngestionResult:
    """
    Load and validate a CSV record export.

    Parameters
    ----------
    path : str
        Path to the CSV file.
    column_overrides : dict, optional
        Operator-confirmed {raw_header: normalized_key} mappings. When given
        they replace the alias library's proposals entirely.

    Raises
    ------
    IngestionError
        On any condition that would otherwise require guessing.
    """
    if not Path(path).exists():
        raise _halt(
            path,
            "Record file not found",
            [],
            [f"Verify the path is correct: {path}"],
        )

    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise _halt(
            path,
            "Record file is not parseable",
            [],
            ["Verify the file is a valid UTF-8 CSV.", f"Parse error: {e}"],
        ) from None

    df = _mechanical_normalize(df)

    alias_map = column_overrides if column_overrides is not None else resolve_columns(df, Path(path).name)
    unmatched = get_unmatched_columns(df, alias_map)

    targets = list(alias_map.values())
    duplicated = sorted({t for t in targets if targets.count(t) > 1})
    if duplicated:
        raise _halt(
            path,
            "More than one column maps to the same field",
            duplicated,
            ["Remove the redundant column or pass column_overrides naming the one to use."],
        )

    df = df.rename(columns=alias_map)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise _halt(
            path,
            "Required columns missing",
            missing,
            [
                f"Add or rename missing column(s): {', '.join(missing)}",
                "Ensure headers match the Ethos field names or a known variant.",
            ],
        )

    # Header is line 1, so data row i sits on line i + 2.
    records = [_row_to_record(row, i + 2, path) for i, (_, row) in enumerate(df.iterrows())]

    try:
        validated = validate_records(records)
    except InvalidRecord as e:
        raise _halt(path, f"Record {e.record_id}: {e.reason}", e.invalid_fields, e.fix_steps) from None

    flags: list[str] = []
    if "closed_at" not in df.columns:
        flags.append("No closed_at column: resolution times will all be 0")
    if "is_anonymous" not in df.columns:
        flags.append("No is_anonymous column: every record treated as identified")

    report = IngestionReport(
        source_file=Path(path).name,
        row_count=len(validated),
        alias_map=dict(alias_map),
        unmatched_columns=unmatched,
        flags=flags,
    )
    logger.info("[ingestion] %s: %d records loaded", report.source_file, report.row_count)
    return IngestionResult(records=validated, report=report)
