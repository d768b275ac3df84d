"""Metrics Snapshot serialisation and brief tests."""

import json
from datetime import datetime, timedelta

from ethos.analytics.engine import calculate_metrics
from ethos.analytics.records import ReportRecord

AS_OF = datetime(2024, 6, 15, 12, 0)


def snapshot(records=()):
    return calculate_metrics(list(records), datetime(2024, 1, 1), datetime(2024, 4, 1), as_of=AS_OF)


def sample():
    created = datetime(2024, 2, 1)
    return [
        ReportRecord(id="1", category="Fraud", priority="Critical", status="Resolved",
                     is_anonymous=True, created_at=created, closed_at=created + timedelta(days=12)),
        ReportRecord(id="2", category="Fraud", priority="Low", status="New",
                     is_anonymous=False, created_at=created),
        ReportRecord(id="3", category="Fraud", priority="Low", status="Awaiting Action",
                     is_anonymous=False, created_at=created),
    ]


class TestToDict:
    def test_enums_become_values(self):
        data = snapshot(sample()).to_dict()
        assert data["performance_classification"] in {"Excellent", "Good", "Attention", "Critical"}
        assert data["top_categories"][0]["trend"] == "stable"
        assert data["resolution_effectiveness"]["backlog_trend"] == "worsening"

    def test_breakdowns_become_ordered_row_lists(self):
        data = snapshot(sample()).to_dict()
        assert [row["key"] for row in data["by_status"]] == ["Resolved", "New", "Awaiting Action"]

    def test_datetimes_become_iso_strings(self):
        data = snapshot().to_dict()
        assert data["calculation_date"] == "2024-06-15T12:00:00"
        assert data["comparison"]["previous_period_start"] == "2023-10-02T00:00:00"

    def test_json_is_stable(self):
        a = snapshot(sample()).to_json()
        assert a == snapshot(sample()).to_json()
        assert json.loads(a)["total_reports"] == 3


class TestAsText:
    def test_sections_present(self):
        text = snapshot(sample()).as_text()
        for heading in ("REPORTING CHANNEL ANALYTICS BRIEF", "RESOLUTION", "PERIOD COMPARISON",
                        "TOP CATEGORIES", "SYSTEMIC ISSUES", "COMPLIANCE"):
            assert heading in text

    def test_empty_snapshot_renders(self):
        text = snapshot().as_text()
        assert "None" in text
        assert "No category meets the recurrence threshold." in text
        assert "SECTOR BENCHMARK" not in text

    def test_systemic_category_listed(self):
        assert "Fraud: 3 reports in the trailing window" in snapshot(sample()).as_text()
