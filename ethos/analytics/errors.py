"""
Structured halt errors.

Each error carries enough context for an operator to fix the input without
reading a traceback. None of them is ever caught inside the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


def _banner(title: str, body: list[str], fix_steps: list[str]) -> str:
    lines = ["═" * 60, title, "═" * 60, *body]
    if fix_steps:
        lines.append("Fix Steps:")
        for i, step in enumerate(fix_steps, 1):
            lines.append(f"  {i}. {step}")
    lines.append("═" * 60)
    return "\n".join(lines)


@dataclass
class InvalidWindow(Exception):
    """Reporting window whose end precedes its start."""
    start: datetime
    end: datetime
    reason: str = "Reporting window ends before it starts"

    def __str__(self) -> str:
        return _banner(
            "ETHOS INVALID REPORTING WINDOW",
            [
                f"Reason          : {self.reason}",
                f"Start           : {self.start.isoformat()}",
                f"End             : {self.end.isoformat()}",
            ],
            ["Pass the earlier instant as start and the later one as end."],
        )


@dataclass
class InvalidRecord(Exception):
    """A single report record that would corrupt aggregation."""
    record_id: Optional[str]
    reason: str
    invalid_fields: list[str] = field(default_factory=list)
    fix_steps: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        body = [
            f"Reason          : {self.reason}",
            f"Record          : {self.record_id if self.record_id is not None else '<unknown>'}",
        ]
        if self.invalid_fields:
            body.append(f"Invalid Fields  : {', '.join(self.invalid_fields)}")
        return _banner("ETHOS RECORD REJECTED", body, self.fix_steps)


@dataclass
class IngestionError(Exception):
    """CSV export could not be turned into validated records."""
    reason: str
    affected_file: str
    missing_or_invalid_fields: list[str]
    operator_fix_steps: list[str]

    def __str__(self) -> str:
        body = [
            f"Reason          : {self.reason}",
            f"Affected File   : {self.affected_file}",
        ]
        if self.missing_or_invalid_fields:
            body.append(f"Missing/Invalid : {', '.join(self.missing_or_invalid_fields)}")
        return _banner("ETHOS INGESTION HALT", body, self.operator_fix_steps)
