"""Recovery modifier for the EPOC model.

Averages four factors into a single multiplier (roughly 0.2-1.5):

    sleep   latest sleep vs. 7-day median, as a score in percent
    hrv     latest HRV vs. 7-day median
    rhr     latest resting HR vs. 7-day median (lower is better)
    stress  1 - load of the last 3 days / cap, clamped to [0.2, 1]

This is not the debt model's rate modifier: the bands and the window
differ and the two must be tuned separately.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Any, Sequence

from recovery_debt.analytics.baselines import clamp, compute_baselines
from recovery_debt.config import DEFAULT_MODIFIER_CONFIG, ModifierConfig
from recovery_debt.models import DailyMetric, WorkoutSummary, as_utc, utc_now


@dataclass(frozen=True)
class RecoveryModifier:
    """The combined modifier and the factors it averages."""

    modifier: float
    sleep_factor: float
    hrv_factor: float
    rhr_factor: float
    stress_factor: float
    recent_load: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _sleep_factor(latest: float | None, baseline: float, cfg: ModifierConfig) -> float:
    if not latest or baseline <= 0:
        return 1.0
    score = latest / baseline * 100.0
    if score >= cfg.sleep_excellent_score:
        return cfg.sleep_excellent_factor
    if score >= cfg.sleep_good_score:
        return cfg.sleep_good_factor
    if score < cfg.sleep_poor_score:
        return cfg.sleep_poor_factor
    return 1.0


def _hrv_factor(latest: float | None, baseline: float, cfg: ModifierConfig) -> float:
    if not latest or baseline <= 0:
        return 1.0
    if latest >= baseline * cfg.hrv_high_ratio:
        return cfg.hrv_high_factor
    if latest <= baseline * cfg.hrv_low_ratio:
        return cfg.hrv_low_factor
    return 1.0


def _rhr_factor(latest: float | None, baseline: float, cfg: ModifierConfig) -> float:
    if not latest or baseline <= 0:
        return 1.0
    if latest <= baseline * cfg.rhr_low_ratio:
        return cfg.rhr_low_factor
    if latest >= baseline * cfg.rhr_high_ratio:
        return cfg.rhr_high_factor
    return 1.0


def recent_training_load(
    workouts: Sequence[WorkoutSummary],
    now: datetime,
    lookback_days: float,
) -> float:
    """Sum of load scores of workouts started within the lookback."""
    cutoff = as_utc(now) - timedelta(days=lookback_days)
    return sum(w.load_score for w in workouts if w.start_time >= cutoff)


def compute_recovery_modifier(
    daily_metrics: Sequence[DailyMetric],
    workout_summaries: Sequence[WorkoutSummary],
    config: ModifierConfig | None = None,
    *,
    now: datetime | None = None,
) -> RecoveryModifier:
    """Combine biometric and training-stress factors into one multiplier.

    Args:
        daily_metrics: Daily metrics, oldest first.
        workout_summaries: Scored workouts.
        config: Optional :class:`ModifierConfig` override.
        now: Evaluation time (default: current UTC time; naive is UTC).

    Returns:
        RecoveryModifier; factors for missing signals are neutral (1.0).
    """
    cfg = config or DEFAULT_MODIFIER_CONFIG
    now = utc_now(now)

    recent = list(daily_metrics)[-cfg.window_days:]
    baselines = compute_baselines(recent, cfg.window_days)
    latest = recent[-1] if recent else None

    sleep_f = _sleep_factor(latest and latest.sleep_minutes, baselines.sleep_minutes, cfg)
    hrv_f = _hrv_factor(latest and latest.hrv_sdnn, baselines.hrv_sdnn, cfg)
    rhr_f = _rhr_factor(
        latest and latest.resting_heart_rate, baselines.resting_heart_rate, cfg
    )

    load = recent_training_load(workout_summaries, now, cfg.stress_lookback_days)
    stress_f = clamp(1.0 - load / cfg.stress_load_cap, cfg.stress_floor, 1.0)

    return RecoveryModifier(
        modifier=(sleep_f + hrv_f + rhr_f + stress_f) / 4.0,
        sleep_factor=sleep_f,
        hrv_factor=hrv_f,
        rhr_factor=rhr_f,
        stress_factor=stress_f,
        recent_load=round(load),
    )
