"""
Metrics Snapshot

The engine's only output. Built once per invocation and never mutated:
every type here is a frozen dataclass, sequences are tuples and breakdown
tables are read-only mappings.

to_dict() gives JSON-ready primitives for the caller to serialise.
as_text() renders a plain-text brief for terminals and logs.
"""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional

from .breakdown import BreakdownRow
from .classification import PERFORMANCE_INTERPRETATION, ComplianceStatus, PerformanceClass
from .comparison import PeriodComparison
from .effectiveness import ResolutionEffectiveness
from .ranking import RankedCategory
from .recurrence import RecurrenceAnalysis
from .resolution import ResolutionMetrics
from .trend import MonthlyBucket
from .window import ReportingWindow

RULE = "═" * 75


@dataclass(frozen=True)
class SectorBenchmark:
    """Caller-supplied sector reference figures, echoed into the snapshot."""
    reports_per_100_employees: float
    typical_resolution_time_days: float
    typical_resolution_rate: float


@dataclass(frozen=True)
class MetricsSnapshot:
    period: ReportingWindow
    previous_period: ReportingWindow
    calculation_date: datetime

    total_reports: int
    total_reports_current_year: int
    open_reports: int
    closed_reports: int
    anonymous_reports: int
    anonymous_percentage: float

    by_status: Mapping[str, BreakdownRow]
    by_category: Mapping[str, BreakdownRow]
    by_priority: Mapping[str, BreakdownRow]

    monthly_trend: tuple[MonthlyBucket, ...]
    resolution_metrics: ResolutionMetrics
    comparison: PeriodComparison
    top_categories: tuple[RankedCategory, ...]
    recurrence_analysis: RecurrenceAnalysis
    performance_classification: PerformanceClass
    compliance_status: ComplianceStatus
    resolution_effectiveness: ResolutionEffectiveness
    sector_benchmark: Optional[SectorBenchmark] = None

    def to_dict(self) -> dict[str, Any]:
        return _to_primitive(self)

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def as_text(self) -> str:
        return render_brief(self)


def _to_primitive(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_primitive(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Mapping):
        # Breakdown tables keep their order as a list of rows.
        return [_to_primitive(v) for v in value.values()]
    if isinstance(value, (tuple, list)):
        return [_to_primitive(v) for v in value]
    return value


def _section(title: str) -> list[str]:
    return [RULE, title, RULE, ""]


def _breakdown_lines(label: str, rows: Mapping[str, BreakdownRow]) -> list[str]:
    lines = [f"{label}:"]
    if not rows:
        lines.append("  None")
    for row in rows.values():
        lines.append(
            f"  {row.key}: {row.count} ({row.percentage:.1f}%), "
            f"avg {row.avg_resolution_days:.1f} days"
        )
    return lines


def render_brief(s: MetricsSnapshot) -> str:
    """Plain-text leadership brief. Deterministic for a given snapshot."""
    rm = s.resolution_metrics
    cmp_ = s.comparison
    eff = s.resolution_effectiveness
    comp = s.compliance_status

    lines: list[str] = [
        RULE,
        "REPORTING CHANNEL ANALYTICS BRIEF",
        RULE,
        "",
        f"Period          : {s.period.start.isoformat()} to {s.period.end.isoformat()}",
        f"Previous Period : {s.previous_period.start.isoformat()} to {s.previous_period.end.isoformat()}",
        f"Calculated At   : {s.calculation_date.isoformat()}",
        "",
    ]

    lines += _section("PERFORMANCE — AT A GLANCE")
    lines += [
        f"Classification: {s.performance_classification.value}",
        f"Interpretation: {PERFORMANCE_INTERPRETATION[s.performance_classification]}",
        "",
    ]

    lines += _section("VOLUME")
    lines += [
        f"Total Reports   : {s.total_reports}",
        f"Current Year    : {s.total_reports_current_year}",
        f"Open / Closed   : {s.open_reports} / {s.closed_reports}",
        f"Anonymous       : {s.anonymous_reports} ({s.anonymous_percentage:.1f}%)",
        "",
    ]
    lines += _breakdown_lines("By Status", s.by_status)
    lines += _breakdown_lines("By Category", s.by_category)
    lines += _breakdown_lines("By Priority", s.by_priority)
    lines.append("")

    lines += _section("RESOLUTION")
    lines += [
        f"Resolution Rate : {rm.resolution_rate:.1f}%",
        f"Average Time    : {rm.avg_resolution_time_days:.1f} days",
        f"Median Time     : {rm.median_resolution_time_days} days",
        f"Overdue (>90d)  : {rm.reports_overdue}",
        f"Closed <30d     : {rm.reports_under_30_days}",
        f"Closed 30-90d   : {rm.reports_30_90_days}",
        f"Closed >90d     : {rm.reports_over_90_days}",
        "",
    ]

    lines += _section("PERIOD COMPARISON")
    sign = "+" if cmp_.change_percentage > 0 else ""
    rate_sign = "+" if cmp_.resolution_rate_change > 0 else ""
    lines += [
        f"Previous Total  : {cmp_.previous_period_total}",
        f"Volume Change   : {sign}{cmp_.change_percentage:.1f}%",
        f"Rate Change     : {rate_sign}{cmp_.resolution_rate_change:.1f} pts",
        f"Improving       : {'YES' if cmp_.is_improving else 'NO'}",
        "",
    ]

    lines += _section("TOP CATEGORIES")
    if not s.top_categories:
        lines.append("None")
    for i, cat in enumerate(s.top_categories, 1):
        lines.append(
            f"{i}. {cat.category}: {cat.count} ({cat.percentage_of_total:.1f}%), {cat.trend.value}"
        )
    lines.append("")

    lines += _section("SYSTEMIC ISSUES")
    if not s.recurrence_analysis.categories_with_recurrence:
        lines.append("No category meets the recurrence threshold.")
    for issue in s.recurrence_analysis.categories_with_recurrence:
        lines.append(f"• {issue.category}: {issue.count} reports in the trailing window")
    lines.append("")

    lines += _section("RESOLUTION EFFECTIVENESS")
    funnel = eff.resolution_funnel
    lines += [
        f"Funnel          : {funnel.received} received → {funnel.under_investigation} investigating "
        f"→ {funnel.awaiting_action} awaiting action → {funnel.resolved} resolved",
        f"Conversion      : {funnel.conversion_rate:.1f}%",
        f"Target Rate     : {eff.target_resolution_rate:.0f}% "
        f"({'MET' if eff.is_meeting_target else f'gap {eff.gap_to_target:.1f} pts'})",
        f"Speed Score     : {eff.resolution_speed_score:.1f}/100",
        f"Backlog         : {eff.backlog_trend.value}",
        "",
    ]

    lines += _section("COMPLIANCE")
    lines += [
        f"GRI 2-26        : {'PASS' if comp.gri_2_26_compliant else 'FAIL'}",
        f"ISO 37001       : {'PASS' if comp.iso_37001_compliant else 'FAIL'}",
        f"Utilization     : {comp.channel_utilization_rate:.1f}% of active employees",
    ]
    if comp.missing_data:
        lines.append("Missing Data:")
        lines += [f"  ⚑ {item}" for item in comp.missing_data]
    if comp.recommendations:
        lines.append("Recommendations:")
        lines += [f"  • {item}" for item in comp.recommendations]

    if s.sector_benchmark is not None:
        b = s.sector_benchmark
        lines += [
            "",
            *_section("SECTOR BENCHMARK"),
            f"Reports / 100 employees : {b.reports_per_100_employees:.1f}",
            f"Typical resolution time : {b.typical_resolution_time_days:.0f} days",
            f"Typical resolution rate : {b.typical_resolution_rate:.0f}%",
        ]

    lines.append(RULE)
    return "\n".join(lines)
