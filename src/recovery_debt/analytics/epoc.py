"""EPOC-based recovery-time estimate.

An alternative to the debt model.  Each workout's excess post-exercise
oxygen consumption is approximated from its duration and intensity:

    epoc  = minutes * f_int * exp(a * intensity_ratio)
    hours = epoc / (vo2max * k)

Recovery still owed for a workout is ``hours`` minus the time since it
ended, scaled by the recovery modifier.  Each workout is floored at zero
on its own before the contributions are summed.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Sequence

from recovery_debt.analytics.baselines import clamp
from recovery_debt.config import DEFAULT_EPOC_CONFIG, ZONE_KEYS, EpocConfig
from recovery_debt.models import WorkoutSummary, as_utc, utc_now


def estimate_intensity_ratio(
    workout: WorkoutSummary,
    config: EpocConfig | None = None,
) -> float:
    """Fraction of max effort for a workout.

    Uses the minutes-weighted zone intensities when zone data exists,
    otherwise a lookup by workout type.
    """
    cfg = config or DEFAULT_EPOC_CONFIG
    zones = workout.zone_minutes
    minutes = zones.total
    if minutes > 0:
        weighted = sum(getattr(zones, k) * cfg.zone_intensities[k] for k in ZONE_KEYS)
        return clamp(weighted / minutes, cfg.min_intensity, cfg.max_intensity)

    key = (workout.type or "").lower()
    return cfg.type_intensities.get(key, cfg.default_intensity)


def estimate_epoc_total(
    workout: WorkoutSummary,
    config: EpocConfig | None = None,
) -> float:
    cfg = config or DEFAULT_EPOC_CONFIG
    duration_min = workout.duration_minutes
    if not math.isfinite(duration_min) or duration_min <= 0:
        return 0.0
    ratio = estimate_intensity_ratio(workout, cfg)
    return duration_min * cfg.f_int * math.exp(cfg.a * ratio)


def estimate_epoc_recovery_added(
    workout: WorkoutSummary,
    config: EpocConfig | None = None,
) -> float:
    """Recovery hours a single workout adds (0 for a non-positive vo2max or k)."""
    cfg = config or DEFAULT_EPOC_CONFIG
    if cfg.vo2max <= 0 or cfg.k <= 0:
        return 0.0
    return estimate_epoc_total(workout, cfg) / (cfg.vo2max * cfg.k)


def _since(workouts: Sequence[WorkoutSummary], since: datetime) -> list[WorkoutSummary]:
    since = as_utc(since)
    return [w for w in workouts if w.end_time >= since]


def estimate_epoc_recovery_total(
    workouts: Sequence[WorkoutSummary],
    since: datetime,
    config: EpocConfig | None = None,
) -> float:
    """Recovery hours added by all workouts ending at or after ``since``."""
    return sum(estimate_epoc_recovery_added(w, config) for w in _since(workouts, since))


def estimate_epoc_recovery_remaining(
    workouts: Sequence[WorkoutSummary],
    since: datetime,
    modifier: float,
    config: EpocConfig | None = None,
    *,
    now: datetime | None = None,
) -> float:
    """Recovery hours still owed by workouts ending at or after ``since``.

    Args:
        workouts: Workout summaries.
        since: Cutoff; older workouts are ignored.
        modifier: Recovery speed multiplier (see
            :func:`recovery_debt.analytics.modifier.compute_recovery_modifier`).
        config: Optional :class:`EpocConfig` override.
        now: Evaluation time (default: current UTC time; naive is UTC).

    Returns:
        Sum of ``max(0, added - hours_since_end * modifier)`` per workout.
    """
    now = utc_now(now)
    remaining = 0.0
    for workout in _since(workouts, since):
        added = estimate_epoc_recovery_added(workout, config)
        hours_since = max(0.0, (now - workout.end_time).total_seconds() / 3600.0)
        remaining += max(0.0, added - hours_since * modifier)
    return remaining


def latest_workout_end(
    workouts: Sequence[WorkoutSummary],
    since: datetime,
) -> datetime | None:
    """End time of the most recent workout ending at or after ``since``."""
    recent = _since(workouts, since)
    if not recent:
        return None
    return max(w.end_time for w in recent)
