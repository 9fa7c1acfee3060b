"""Tests for recovery_debt.analytics.baselines -- rolling medians."""

from datetime import timedelta

import pytest

from recovery_debt.analytics.baselines import Baselines, clamp, compute_baselines, median
from recovery_debt.models import DailyMetric

from tests.conftest import NOW, make_metrics


class TestMedian:
    def test_empty(self):
        assert median([]) == 0.0

    def test_odd(self):
        assert median([3.0, 1.0, 2.0]) == 2.0

    def test_even_averages_middle(self):
        assert median([1.0, 2.0, 3.0, 10.0]) == pytest.approx(2.5)

    def test_single(self):
        assert median([42.0]) == 42.0


class TestClamp:
    def test_inside(self):
        assert clamp(0.5, 0.0, 1.0) == 0.5

    def test_bounds(self):
        assert clamp(-1.0, 0.0, 1.0) == 0.0
        assert clamp(2.0, 0.0, 1.0) == 1.0


class TestComputeBaselines:
    def test_empty(self):
        assert compute_baselines([], 28) == Baselines()

    def test_stable(self):
        result = compute_baselines(make_metrics(28), 28)
        assert result.sleep_minutes == 420.0
        assert result.hrv_sdnn == 60.0
        assert result.resting_heart_rate == 55.0

    def test_window_uses_latest_entries(self):
        old = make_metrics(10, sleep=300.0, last_day=NOW.date() - timedelta(days=5))
        recent = make_metrics(5, sleep=480.0)
        result = compute_baselines(old + recent, 5)
        assert result.sleep_minutes == 480.0

    def test_missing_and_zero_skipped(self):
        metrics = [
            DailyMetric(date=NOW.date() - timedelta(days=2), hrv_sdnn=50.0),
            DailyMetric(date=NOW.date() - timedelta(days=1), hrv_sdnn=0.0),
            DailyMetric(date=NOW.date(), hrv_sdnn=70.0, sleep_minutes=400.0),
        ]
        result = compute_baselines(metrics, 28)
        assert result.hrv_sdnn == pytest.approx(60.0)
        assert result.sleep_minutes == 400.0
        assert result.resting_heart_rate == 0.0
