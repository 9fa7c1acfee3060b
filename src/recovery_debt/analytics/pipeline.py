"""Analytics pipeline: wire an exported health snapshot into the engine.

This module consumes an export dict (as written by a health-store sync,
already fetched and authorized)::

    {
      "profile": {"max_hr": 190, "sex": "male"},
      "previous_state": {...} | null,
      "workouts": [{"uuid", "activityName", "startDate", "endDate",
                    "heartRateSamples": [...]}],
      "resting_heart_rate": [...], "hrv": [...], "sleep": [...]
    }

and runs one full refresh, producing a :class:`RecoveryReport`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Mapping

from recovery_debt.analytics.debt import replay_workouts
from recovery_debt.analytics.epoc import (
    estimate_epoc_recovery_remaining,
    estimate_epoc_recovery_total,
    latest_workout_end,
)
from recovery_debt.analytics.modifier import compute_recovery_modifier
from recovery_debt.analytics.stress import compute_stress_summary
from recovery_debt.analytics.summary import RecoveryReport, build_recovery_report
from recovery_debt.config import (
    DEFAULT_DEBT_CONFIG,
    DEFAULT_EPOC_CONFIG,
    DEFAULT_LOAD_CONFIG,
    DEFAULT_MODIFIER_CONFIG,
    DEFAULT_STRESS_CONFIG,
    DebtModelConfig,
    EpocConfig,
    LoadConfig,
    ModifierConfig,
    StressConfig,
)
from recovery_debt.ingest import aggregate_daily_metrics, summarize_workout
from recovery_debt.models import RecoveryState, Sex, WorkoutSummary, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineConfig:
    """The constant tables used by one pipeline run."""

    load: LoadConfig = DEFAULT_LOAD_CONFIG
    debt: DebtModelConfig = DEFAULT_DEBT_CONFIG
    epoc: EpocConfig = DEFAULT_EPOC_CONFIG
    modifier: ModifierConfig = DEFAULT_MODIFIER_CONFIG
    stress: StressConfig = DEFAULT_STRESS_CONFIG


DEFAULT_PIPELINE_CONFIG = PipelineConfig()


def _profile(payload: Mapping[str, Any]) -> tuple[float | None, Sex]:
    profile = payload.get("profile") or {}
    max_hr = profile.get("max_hr")
    try:
        max_hr = float(max_hr) if max_hr is not None else None
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric max_hr %r", max_hr)
        max_hr = None
    try:
        sex = Sex(str(profile.get("sex", Sex.MALE.value)).lower())
    except ValueError:
        sex = Sex.MALE
    return max_hr, sex


def run_pipeline(
    payload: Mapping[str, Any],
    now: datetime | None = None,
    max_hr: float | None = None,
    epoc_window_days: int = 30,
    config: PipelineConfig | None = None,
) -> RecoveryReport:
    """Run the full analytics pipeline on an exported snapshot.

    Args:
        payload: Export dict (see module docstring).
        now: Evaluation time (default: current UTC time).
        max_hr: Overrides ``profile.max_hr``.
        epoc_window_days: EPOC lookback (usually 7, 30 or 90 days).
        config: Optional :class:`PipelineConfig` override.

    Returns:
        A populated RecoveryReport.
    """
    cfg = config or DEFAULT_PIPELINE_CONFIG
    now = utc_now(now)
    profile_max_hr, sex = _profile(payload)
    max_hr = max_hr if max_hr is not None else profile_max_hr

    # --- Daily metrics ---
    daily_metrics = aggregate_daily_metrics(
        payload.get("resting_heart_rate") or [],
        payload.get("hrv") or [],
        payload.get("sleep") or [],
    )
    metrics_by_day = {m.date: m for m in daily_metrics}
    logger.info("Aggregated %d days of metrics", len(daily_metrics))

    # --- Workouts ---
    workouts: list[WorkoutSummary] = []
    for raw in payload.get("workouts") or []:
        summary = summarize_workout(
            raw,
            raw.get("heartRateSamples") or [],
            max_hr=max_hr,
            metrics_by_day=metrics_by_day,
            sex=sex,
            config=cfg.load,
        )
        if summary is not None:
            workouts.append(summary)
    workouts.sort(key=lambda w: w.start_time)
    logger.info("Scored %d workouts", len(workouts))

    # --- Recovery debt ---
    previous_raw = payload.get("previous_state")
    if previous_raw:
        previous = RecoveryState.from_dict(previous_raw)
    else:
        # Fresh timeline: zero debt just before the first workout
        first = min((w.start_time for w in workouts), default=now)
        previous = RecoveryState.initial(min(first, now))
    state = replay_workouts(previous, daily_metrics, workouts, now=now, config=cfg.debt)

    # --- EPOC ---
    since = now - timedelta(days=epoc_window_days)
    modifier = compute_recovery_modifier(daily_metrics, workouts, now=now, config=cfg.modifier)
    hours_added = estimate_epoc_recovery_total(workouts, since, cfg.epoc)
    hours_remaining = estimate_epoc_recovery_remaining(
        workouts, since, modifier.modifier, now=now, config=cfg.epoc,
    )

    # --- Stress ---
    stress = compute_stress_summary(daily_metrics, workouts, now=now, config=cfg.stress)

    return build_recovery_report(
        state=state,
        workouts=workouts,
        daily_metrics=daily_metrics,
        epoc_window_days=epoc_window_days,
        epoc_hours_added=hours_added,
        epoc_hours_remaining=hours_remaining,
        latest_workout_end=latest_workout_end(workouts, since),
        modifier=modifier,
        stress=stress,
    )
