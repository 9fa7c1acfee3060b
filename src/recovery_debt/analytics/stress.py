"""Stress and recovery index summary.

A display-oriented view of the same signals: percentage deltas of the
latest day against the 7-day medians, a 0-130 recovery index and a 0-100
training-stress index from the last 3 days of load.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Sequence

from recovery_debt.analytics.baselines import clamp, compute_baselines
from recovery_debt.analytics.modifier import recent_training_load
from recovery_debt.config import DEFAULT_STRESS_CONFIG, StressConfig
from recovery_debt.models import DailyMetric, WorkoutSummary, utc_now


@dataclass(frozen=True)
class StressSummary:
    """Deltas in percent (``None`` without a baseline) and the two indices."""

    sleep_delta: float | None
    hrv_delta: float | None
    rhr_delta: float | None
    recovery_index: int
    stress_index: int
    recent_load: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _ratio(value: float | None, baseline: float) -> float | None:
    if not value or baseline <= 0:
        return None
    return value / baseline


def compute_stress_summary(
    daily_metrics: Sequence[DailyMetric],
    workout_summaries: Sequence[WorkoutSummary],
    config: StressConfig | None = None,
    *,
    now: datetime | None = None,
) -> StressSummary:
    cfg = config or DEFAULT_STRESS_CONFIG
    now = utc_now(now)

    recent = list(daily_metrics)[-cfg.window_days:]
    baselines = compute_baselines(recent, cfg.window_days)
    latest = recent[-1] if recent else None

    sleep_r = _ratio(latest and latest.sleep_minutes, baselines.sleep_minutes)
    hrv_r = _ratio(latest and latest.hrv_sdnn, baselines.hrv_sdnn)
    # Inverted: a resting HR below baseline is an improvement
    rhr_r = None
    if latest and latest.resting_heart_rate and baselines.resting_heart_rate > 0:
        rhr_r = baselines.resting_heart_rate / latest.resting_heart_rate

    lo, hi = cfg.ratio_score_range
    sleep_score = clamp(sleep_r, *cfg.sleep_score_range) if sleep_r is not None else 1.0
    hrv_score = clamp(hrv_r, lo, hi) if hrv_r is not None else 1.0
    rhr_score = clamp(rhr_r, lo, hi) if rhr_r is not None else 1.0

    raw_recovery = (sleep_score + hrv_score + rhr_score) / 3.0
    load = recent_training_load(workout_summaries, now, cfg.lookback_days)

    def delta(r: float | None) -> float | None:
        return round((r - 1.0) * 100.0, 1) if r is not None else None

    return StressSummary(
        sleep_delta=delta(sleep_r),
        hrv_delta=delta(hrv_r),
        rhr_delta=delta(rhr_r),
        recovery_index=round(clamp(raw_recovery, 0.0, cfg.index_ceiling) * 100),
        stress_index=round(clamp(load / cfg.load_cap, 0.0, 1.0) * 100),
        recent_load=round(load),
    )
