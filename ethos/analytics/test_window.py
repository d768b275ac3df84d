"""Window Resolver tests."""

from datetime import datetime, timedelta, timezone

import pytest

from ethos.analytics.errors import InvalidWindow
from ethos.analytics.records import ReportRecord, records_to_frame
from ethos.analytics.window import ReportingWindow, reporting_window, resolve_previous_window


class TestPreviousWindow:
    @pytest.mark.parametrize("start,end", [
        (datetime(2024, 1, 1), datetime(2024, 4, 1)),
        (datetime(2024, 2, 1), datetime(2024, 3, 9)),          # 37 days, leap February
        (datetime(2023, 12, 31, 18, 30), datetime(2024, 1, 1, 6, 0)),
        (datetime(2020, 1, 1), datetime(2024, 1, 1)),
    ])
    def test_equal_duration_immediately_before(self, start, end):
        prev = resolve_previous_window(start, end)
        assert prev.end == start
        assert prev.end - prev.start == end - start

    def test_no_calendar_alignment(self):
        prev = resolve_previous_window(datetime(2024, 3, 1), datetime(2024, 4, 7))
        assert prev.start == datetime(2024, 3, 1) - timedelta(days=37)

    def test_zero_length_window_is_valid(self):
        instant = datetime(2024, 5, 1)
        prev = resolve_previous_window(instant, instant)
        assert prev.start == prev.end == instant

    def test_end_before_start_fails_fast(self):
        with pytest.raises(InvalidWindow) as exc_info:
            resolve_previous_window(datetime(2024, 4, 1), datetime(2024, 1, 1))
        # bounds are reported as given, never swapped
        assert exc_info.value.start == datetime(2024, 4, 1)
        assert exc_info.value.end == datetime(2024, 1, 1)
        assert "INVALID REPORTING WINDOW" in str(exc_info.value)

    def test_aware_bounds_normalized_to_utc(self):
        tz = timezone(timedelta(hours=2))
        window = reporting_window(datetime(2024, 1, 1, 2, 0, tzinfo=tz), datetime(2024, 2, 1, tzinfo=tz))
        assert window.start == datetime(2024, 1, 1, 0, 0)
        assert window.start.tzinfo is None


class TestWindowMask:
    def test_half_open_interval(self):
        window = ReportingWindow(start=datetime(2024, 1, 1), end=datetime(2024, 2, 1))
        records = [
            ReportRecord(id=str(i), category="Fraud", priority="Low", status="New",
                         is_anonymous=False, created_at=created)
            for i, created in enumerate([
                datetime(2023, 12, 31, 23, 59),
                datetime(2024, 1, 1),
                datetime(2024, 1, 31, 23, 59),
                datetime(2024, 2, 1),
            ])
        ]
        df = records_to_frame(records)
        assert window.mask(df).tolist() == [False, True, True, False]
