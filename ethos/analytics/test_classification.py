"""Classifier & Compliance Evaluator tests."""

import pytest

from ethos.analytics.classification import (
    PERFORMANCE_INTERPRETATION,
    PerformanceClass,
    channel_utilization,
    classify_performance,
    evaluate_compliance,
)


class TestClassifyPerformance:
    @pytest.mark.parametrize("rate,avg,expected", [
        (95.0, 20.0, PerformanceClass.EXCELLENT),
        (90.0, 30.0, PerformanceClass.EXCELLENT),
        (95.0, 31.0, PerformanceClass.GOOD),
        (80.0, 60.0, PerformanceClass.GOOD),
        (79.9, 10.0, PerformanceClass.ATTENTION),
        (70.0, 10.0, PerformanceClass.ATTENTION),
        (50.0, 90.0, PerformanceClass.ATTENTION),
        (85.0, 120.0, PerformanceClass.ATTENTION),
        (59.9, 90.1, PerformanceClass.CRITICAL),
        (0.0, 0.0, PerformanceClass.ATTENTION),
    ])
    def test_first_matching_rule_wins(self, rate, avg, expected):
        assert classify_performance(rate, avg) is expected

    def test_every_class_has_an_interpretation(self):
        assert set(PERFORMANCE_INTERPRETATION) == set(PerformanceClass)


class TestChannelUtilization:
    def test_rate(self):
        assert channel_utilization(25, 500) == pytest.approx(5.0)

    @pytest.mark.parametrize("employees", [None, 0, -3])
    def test_unknown_or_zero_employees(self, employees):
        assert channel_utilization(25, employees) == 0

    def test_single_employee(self):
        assert channel_utilization(1, 1) == pytest.approx(100.0)


class TestEvaluateCompliance:
    def _evaluate(self, **overrides):
        kwargs = dict(
            total_reports=10,
            category_count=2,
            resolution_rate=80.0,
            avg_resolution_days=20.0,
            reports_overdue=0,
            systemic_issues_count=0,
        )
        kwargs.update(overrides)
        return evaluate_compliance(**kwargs)

    def test_healthy_channel(self):
        status = self._evaluate()
        assert status.has_reporting_channel
        assert status.gri_2_26_compliant
        assert status.iso_37001_compliant
        assert status.missing_data == ()
        assert status.recommendations == ()

    def test_no_reports_fails_gri(self):
        status = self._evaluate(total_reports=0, category_count=0)
        assert not status.gri_2_26_compliant
        assert len(status.missing_data) == 1

    def test_iso_boundary_is_inclusive(self):
        assert self._evaluate(resolution_rate=70.0, avg_resolution_days=90.0).iso_37001_compliant

    def test_iso_failures_are_itemised(self):
        status = self._evaluate(resolution_rate=40.0, avg_resolution_days=120.0)
        assert not status.iso_37001_compliant
        assert len(status.missing_data) == 2
        assert len(status.recommendations) == 2

    def test_overdue_and_systemic_add_recommendations(self):
        status = self._evaluate(reports_overdue=4, systemic_issues_count=1)
        assert status.iso_37001_compliant
        assert len(status.recommendations) == 2
        assert "4 reports" in status.recommendations[0]

    def test_utilization_passed_through(self):
        assert self._evaluate(active_employees=200).channel_utilization_rate == pytest.approx(5.0)

    def test_classes_and_compliance_are_independent(self):
        # Critical performance can still pass GRI 2-26
        status = self._evaluate(resolution_rate=10.0, avg_resolution_days=200.0)
        assert status.gri_2_26_compliant
        assert classify_performance(10.0, 200.0) is PerformanceClass.CRITICAL
