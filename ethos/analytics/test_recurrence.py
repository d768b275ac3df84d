"""Recurrence Detector tests."""

from datetime import datetime

from ethos.analytics.records import ReportRecord, records_to_frame
from ethos.analytics.recurrence import detect_recurrence, recurrence_cutoff

AS_OF = datetime(2024, 6, 15, 12, 0)


def frame(rows):
    return records_to_frame([
        ReportRecord(id=str(i), category=category, priority="Low", status="New",
                     is_anonymous=False, created_at=created)
        for i, (category, created) in enumerate(rows)
    ])


class TestRecurrenceCutoff:
    def test_six_calendar_months_back(self):
        assert recurrence_cutoff(AS_OF) == datetime(2023, 12, 15, 12, 0)


class TestDetectRecurrence:
    def test_three_in_window_is_systemic(self):
        df = frame([
            ("Fraud", datetime(2024, 1, 10)),
            ("Harassment", datetime(2024, 2, 1)),
            ("Fraud", datetime(2024, 3, 1)),
            ("Harassment", datetime(2024, 4, 1)),
            ("Fraud", datetime(2024, 5, 20)),
            ("Harassment", datetime(2023, 11, 1)),    # before the cutoff
        ])
        result = detect_recurrence(df, AS_OF)
        assert result.systemic_issues_count == 1
        only = result.categories_with_recurrence[0]
        assert (only.category, only.count, only.is_systemic) == ("Fraud", 3, True)

    def test_cutoff_instant_is_included(self):
        cutoff = datetime(2023, 12, 15, 12, 0)
        df = frame([("Theft", cutoff), ("Theft", datetime(2024, 1, 1)), ("Theft", datetime(2024, 2, 1))])
        assert detect_recurrence(df, AS_OF).systemic_issues_count == 1

    def test_just_before_cutoff_is_excluded(self):
        df = frame([
            ("Theft", datetime(2023, 12, 15, 11, 59)),
            ("Theft", datetime(2024, 1, 1)),
            ("Theft", datetime(2024, 2, 1)),
        ])
        assert detect_recurrence(df, AS_OF).systemic_issues_count == 0

    def test_first_seen_order(self):
        rows = [("B", datetime(2024, 3, 1))] * 3 + [("A", datetime(2024, 3, 2))] * 4
        result = detect_recurrence(frame(rows), AS_OF)
        assert [c.category for c in result.categories_with_recurrence] == ["B", "A"]

    def test_empty(self):
        result = detect_recurrence(frame([]), AS_OF)
        assert result.categories_with_recurrence == ()
        assert result.systemic_issues_count == 0

    def test_records_after_as_of_are_ignored(self):
        df = frame([("Fraud", datetime(2024, 9, d)) for d in (1, 2, 3)])
        result = detect_recurrence(df, AS_OF)
        assert result.systemic_issues_count == 0
        assert result.categories_with_recurrence == ()

    def test_as_of_instant_is_included(self):
        df = frame([("Theft", AS_OF), ("Theft", datetime(2024, 6, 1)), ("Theft", datetime(2024, 5, 1))])
        assert detect_recurrence(df, AS_OF).systemic_issues_count == 1
