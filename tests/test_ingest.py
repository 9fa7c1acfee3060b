"""Tests for recovery_debt.ingest -- export normalization and aggregation."""

from __future__ import annotations

import logging
from datetime import date, timedelta

import pytest

from recovery_debt.analytics.load import zone_weighted_load
from recovery_debt.ingest import (
    aggregate_daily_metrics,
    normalize_heart_rate_samples,
    summarize_workout,
)
from recovery_debt.models import DailyMetric

from tests.conftest import NOW, iso, make_raw_workout


class TestNormalizeHeartRateSamples:
    def test_fills_missing_bounds(self):
        start, end = NOW - timedelta(hours=1), NOW
        samples = normalize_heart_rate_samples([{"value": 140}], start, end)
        assert len(samples) == 1
        assert samples[0].start_time == start
        assert samples[0].end_time == end
        assert samples[0].bpm == 140.0

    def test_drops_unusable_values(self, caplog):
        raw = [{"value": None}, {"value": "abc"}, {"value": 0}, {"value": -5}, {"value": 120}]
        with caplog.at_level(logging.DEBUG, logger="recovery_debt.ingest"):
            samples = normalize_heart_rate_samples(raw, NOW, NOW)
        assert [s.bpm for s in samples] == [120.0]
        assert "Dropped 4" in caplog.text

    def test_parses_bounds(self):
        raw = [{"startDate": iso(NOW), "endDate": iso(NOW + timedelta(minutes=2)), "value": 100}]
        samples = normalize_heart_rate_samples(raw, NOW - timedelta(hours=1), NOW)
        assert samples[0].duration_minutes == pytest.approx(2.0)


class TestAggregateDailyMetrics:
    def test_empty(self):
        assert aggregate_daily_metrics() == []

    def test_groups_by_day(self):
        day1 = NOW - timedelta(days=1)
        result = aggregate_daily_metrics(
            rhr_samples=[{"startDate": iso(day1), "value": 52}, {"startDate": iso(NOW), "value": 54}],
            hrv_samples=[{"startDate": iso(NOW), "value": 61}],
        )
        assert result == [
            DailyMetric(date=day1.date(), resting_heart_rate=52.0),
            DailyMetric(date=NOW.date(), resting_heart_rate=54.0, hrv_sdnn=61.0),
        ]

    def test_last_value_wins(self):
        result = aggregate_daily_metrics(
            hrv_samples=[
                {"startDate": iso(NOW.replace(hour=6)), "value": 50},
                {"startDate": iso(NOW.replace(hour=9)), "value": 58},
            ],
        )
        assert result[0].hrv_sdnn == 58.0

    def test_alternate_keys(self):
        result = aggregate_daily_metrics(rhr_samples=[{"date": "2026-02-14", "restingHeartRate": 49}])
        assert result == [DailyMetric(date=date(2026, 2, 14), resting_heart_rate=49.0)]

    def test_sleep_summed_on_start_day(self):
        night = NOW.replace(hour=0)
        result = aggregate_daily_metrics(
            sleep_samples=[
                {"startDate": iso(night), "endDate": iso(night + timedelta(hours=3))},
                {"startDate": iso(night + timedelta(hours=3, minutes=30)),
                 "endDate": iso(night + timedelta(hours=7))},
            ],
        )
        assert result[0].sleep_minutes == pytest.approx(180.0 + 210.0)

    def test_skips_malformed(self):
        result = aggregate_daily_metrics(
            rhr_samples=[{"startDate": "garbage", "value": 50}, {"startDate": iso(NOW)}],
            sleep_samples=[{"endDate": iso(NOW)}, {"startDate": iso(NOW), "endDate": iso(NOW)}],
        )
        assert result == []

    def test_sorted_oldest_first(self):
        result = aggregate_daily_metrics(
            rhr_samples=[
                {"startDate": iso(NOW), "value": 50},
                {"startDate": iso(NOW - timedelta(days=3)), "value": 53},
            ],
        )
        assert [m.date for m in result] == sorted(m.date for m in result)


class TestSummarizeWorkout:
    def test_zones_from_samples(self):
        raw = make_raw_workout(end=NOW, minutes=30.0, bpm=150.0)
        summary = summarize_workout(raw, raw["heartRateSamples"], max_hr=200.0)
        assert summary.id == "w1"
        assert summary.type == "running"
        assert summary.duration_seconds == pytest.approx(1800.0)
        assert summary.zone_minutes.z3 == pytest.approx(30.0)
        assert summary.load_score == pytest.approx(zone_weighted_load(summary.zone_minutes))

    def test_rpe_without_heart_rate(self):
        raw = make_raw_workout(end=NOW, minutes=45.0, activity="cycling", rpe=6)
        summary = summarize_workout(raw)
        assert summary.load_score == pytest.approx(45.0 * 6.0 * 0.9)
        assert summary.zone_minutes.total == 0.0

    def test_samples_without_max_hr_use_rpe(self):
        raw = make_raw_workout(end=NOW, minutes=20.0, bpm=150.0, rpe=4)
        summary = summarize_workout(raw, raw["heartRateSamples"])
        assert summary.load_score == pytest.approx(20.0 * 4.0)

    def test_invalid_window(self, caplog):
        raw = {"uuid": "bad", "startDate": "not a date", "endDate": iso(NOW)}
        with caplog.at_level(logging.INFO, logger="recovery_debt.ingest"):
            assert summarize_workout(raw) is None
        assert "without a valid time window" in caplog.text

    def test_defaults_for_missing_identity(self):
        raw = {"startDate": iso(NOW - timedelta(hours=1)), "endDate": iso(NOW)}
        summary = summarize_workout(raw)
        assert summary.type == "Workout"
        assert summary.id.startswith("workout-")

    def test_end_before_start(self):
        raw = {"startDate": iso(NOW), "endDate": iso(NOW - timedelta(hours=1))}
        summary = summarize_workout(raw)
        assert summary.duration_seconds == 0.0
        assert summary.load_score == 0.0
