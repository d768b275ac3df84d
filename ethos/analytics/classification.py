"""
Classifier & Compliance Evaluator

Performance class is a priority-ordered rule cascade, not a weighted score:
the first matching rule wins. Compliance predicates are independent of the
class and of each other.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .constants import ISO_37001_MAX_AVG_DAYS, ISO_37001_MIN_RESOLUTION_RATE, OVERDUE_AGE_DAYS


class PerformanceClass(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    ATTENTION = "Attention"
    CRITICAL = "Critical"


PERFORMANCE_INTERPRETATION: dict[PerformanceClass, str] = {
    PerformanceClass.EXCELLENT: "Reports are resolved quickly and almost all reach closure.",
    PerformanceClass.GOOD: "Resolution performance is healthy. Keep monitoring turnaround time.",
    PerformanceClass.ATTENTION: "Resolution performance needs leadership attention.",
    PerformanceClass.CRITICAL: "Reports are neither closed nor resolved in time. Immediate action required.",
}


@dataclass(frozen=True)
class ComplianceStatus:
    has_reporting_channel: bool
    channel_utilization_rate: float
    gri_2_26_compliant: bool
    iso_37001_compliant: bool
    missing_data: tuple[str, ...]
    recommendations: tuple[str, ...]


def classify_performance(resolution_rate: float, avg_resolution_days: float) -> PerformanceClass:
    if resolution_rate >= 90 and avg_resolution_days <= 30:
        return PerformanceClass.EXCELLENT
    elif resolution_rate >= 80 and avg_resolution_days <= 60:
        return PerformanceClass.GOOD
    elif resolution_rate >= 60 or avg_resolution_days <= 90:
        return PerformanceClass.ATTENTION
    else:
        return PerformanceClass.CRITICAL


def channel_utilization(total_reports: int, active_employees: int | None) -> float:
    if (active_employees or 0) <= 0:
        return 0.0
    return total_reports / active_employees * 100


def evaluate_compliance(
    total_reports: int,
    category_count: int,
    resolution_rate: float,
    avg_resolution_days: float,
    reports_overdue: int,
    systemic_issues_count: int,
    active_employees: int | None = None,
) -> ComplianceStatus:
    """
    Strings in missing_data and recommendations are advisory text for
    people. Consumers must treat them as opaque.
    """
    missing_data: list[str] = []
    recommendations: list[str] = []

    # GRI 2-26: mechanisms for seeking advice and raising concerns
    gri_2_26_compliant = total_reports > 0 and category_count > 0
    if not gri_2_26_compliant:
        missing_data.append("Insufficient data on reports and their categories")
        recommendations.append("Record a category and status for every report")

    # ISO 37001: anti-bribery management, investigation quality
    iso_37001_compliant = (
        resolution_rate >= ISO_37001_MIN_RESOLUTION_RATE
        and avg_resolution_days <= ISO_37001_MAX_AVG_DAYS
    )
    if not iso_37001_compliant:
        if resolution_rate < ISO_37001_MIN_RESOLUTION_RATE:
            missing_data.append(f"Resolution rate below {ISO_37001_MIN_RESOLUTION_RATE:.0f}%")
            recommendations.append("Improve investigation processes to raise the resolution rate")
        if avg_resolution_days > ISO_37001_MAX_AVG_DAYS:
            missing_data.append(f"Average resolution time above {ISO_37001_MAX_AVG_DAYS:.0f} days")
            recommendations.append(
                f"Speed up investigations to resolve reports within {ISO_37001_MAX_AVG_DAYS:.0f} days"
            )

    if reports_overdue > 0:
        recommendations.append(
            f"{reports_overdue} reports open for more than {OVERDUE_AGE_DAYS} days need urgent attention"
        )

    if systemic_issues_count > 0:
        recommendations.append(
            "Put structural corrective actions in place for the systemic issues identified"
        )

    return ComplianceStatus(
        has_reporting_channel=True,
        channel_utilization_rate=channel_utilization(total_reports, active_employees),
        gri_2_26_compliant=gri_2_26_compliant,
        iso_37001_compliant=iso_37001_compliant,
        missing_data=tuple(missing_data),
        recommendations=tuple(recommendations),
    )
