"""Comparative Analyzer tests."""

from datetime import datetime, timedelta

import pytest

from ethos.analytics.comparison import compare_periods
from ethos.analytics.records import ReportRecord, records_to_frame
from ethos.analytics.window import resolve_previous_window

PREVIOUS = resolve_previous_window(datetime(2024, 3, 1), datetime(2024, 4, 1))


def frame(total, closed_count, prefix):
    created = datetime(2024, 3, 2)
    records = []
    for i in range(total):
        is_closed = i < closed_count
        records.append(ReportRecord(
            id=f"{prefix}{i}",
            category="Fraud",
            priority="Low",
            status="Resolved" if is_closed else "New",
            is_anonymous=False,
            created_at=created,
            closed_at=created + timedelta(days=3) if is_closed else None,
        ))
    return records_to_frame(records)


class TestChangePercentage:
    def test_growth(self):
        result = compare_periods(frame(6, 0, "c"), frame(4, 0, "p"), PREVIOUS)
        assert result.previous_period_total == 4
        assert result.change_percentage == pytest.approx(50.0)

    def test_decline(self):
        result = compare_periods(frame(3, 0, "c"), frame(4, 0, "p"), PREVIOUS)
        assert result.change_percentage == pytest.approx(-25.0)

    def test_empty_previous_saturates_to_zero(self):
        result = compare_periods(frame(5, 0, "c"), frame(0, 0, "p"), PREVIOUS)
        assert result.change_percentage == 0

    def test_previous_window_echoed(self):
        result = compare_periods(frame(1, 0, "c"), frame(1, 0, "p"), PREVIOUS)
        assert result.previous_period_start == PREVIOUS.start
        assert result.previous_period_end == datetime(2024, 3, 1)


class TestResolutionRateChange:
    def test_is_the_difference_in_points(self):
        result = compare_periods(frame(4, 2, "c"), frame(4, 1, "p"), PREVIOUS)
        assert result.previous_resolution_rate == pytest.approx(25.0)
        assert result.resolution_rate_change == pytest.approx(25.0)

    def test_from_zero_is_not_saturated(self):
        result = compare_periods(frame(2, 1, "c"), frame(3, 0, "p"), PREVIOUS)
        assert result.resolution_rate_change == pytest.approx(50.0)


class TestIsImproving:
    def test_better_rate_alone(self):
        assert compare_periods(frame(4, 2, "c"), frame(4, 1, "p"), PREVIOUS).is_improving

    def test_fewer_reports_alone(self):
        assert compare_periods(frame(2, 0, "c"), frame(4, 0, "p"), PREVIOUS).is_improving

    def test_neither(self):
        result = compare_periods(frame(4, 1, "c"), frame(4, 2, "p"), PREVIOUS)
        assert not result.is_improving
        assert result.resolution_rate_change == pytest.approx(-25.0)
