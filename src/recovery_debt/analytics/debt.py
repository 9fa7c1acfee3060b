"""Recovery debt model.

Training load accumulates as a scalar "debt" that is paid back at an
hourly rate.  The rate is a base constant scaled by how today's sleep,
HRV and resting HR compare with their 28-day medians, plus a flat boost
while the baselines are still thin (the learning phase).

Each update works from the previous snapshot only:

    recovered = elapsed_hours * effective_rate
    debt      = max(0, previous_debt - recovered) + new_workout_load

Status is a pure function of the final debt against two thresholds, and
the hours until hard training is the debt above the yellow threshold
divided by the effective rate (infinite, with no ready time, when the
rate is zero).  Modifiers are recomputed from the metric
history on every call; nothing from a previous breakdown is reused.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
from datetime import datetime, timedelta, timezone
from typing import Sequence

from recovery_debt.analytics.baselines import Baselines, compute_baselines
from recovery_debt.config import (
    DEFAULT_DEBT_CONFIG,
    DebtModelConfig,
    DebtModifierConfig,
    DebtThresholds,
    RatioGate,
)
from recovery_debt.models import (
    DailyMetric,
    ReadinessStatus,
    RecoveryBreakdown,
    RecoveryState,
    WorkoutSummary,
    utc_now,
)


@dataclass(frozen=True)
class DebtModifiers:
    """Rate multipliers for one update."""

    sleep: float = 1.0
    hrv: float = 1.0
    rhr: float = 1.0
    learning: float = 1.0

    @property
    def combined(self) -> float:
        return self.sleep * self.hrv * self.rhr * self.learning


# ---------------------------------------------------------------------------
# Status labelling
# ---------------------------------------------------------------------------


def classify_status(debt: float, thresholds: DebtThresholds | None = None) -> ReadinessStatus:
    """Map a debt score to green / yellow / red (upper bounds inclusive)."""
    thr = thresholds or DEFAULT_DEBT_CONFIG.thresholds
    if debt <= thr.yellow_max:
        return ReadinessStatus.GREEN
    if debt <= thr.red_max:
        return ReadinessStatus.YELLOW
    return ReadinessStatus.RED


# ---------------------------------------------------------------------------
# Modifiers
# ---------------------------------------------------------------------------


def _gate(value: float | None, baseline: float, gate: RatioGate) -> float:
    if not value or baseline <= 0:
        return 1.0
    if value >= baseline * gate.high_ratio:
        return gate.high_modifier
    if value < baseline * gate.low_ratio:
        return gate.low_modifier
    return 1.0


def debt_modifiers(
    metrics: Sequence[DailyMetric],
    baselines: Baselines,
    config: DebtModifierConfig | None = None,
) -> DebtModifiers:
    """Rate modifiers from the most recent day against its baselines.

    Missing signals leave their modifier neutral.
    """
    cfg = config or DEFAULT_DEBT_CONFIG.modifiers
    if not metrics:
        return DebtModifiers()

    latest = metrics[-1]
    days_with_data = sum(1 for m in metrics if m.has_data)
    learning = 1.0
    if 0 < days_with_data < cfg.learning_phase_days:
        learning = cfg.learning_phase_modifier

    return DebtModifiers(
        sleep=_gate(latest.sleep_minutes, baselines.sleep_minutes, cfg.sleep),
        hrv=_gate(latest.hrv_sdnn, baselines.hrv_sdnn, cfg.hrv),
        rhr=_gate(latest.resting_heart_rate, baselines.resting_heart_rate, cfg.rhr),
        learning=learning,
    )


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def advance_recovery_state(
    previous: RecoveryState,
    daily_metrics: Sequence[DailyMetric],
    new_workout: WorkoutSummary | None = None,
    config: DebtModelConfig | None = None,
    *,
    now: datetime | None = None,
) -> RecoveryState:
    """Decay the previous debt up to ``now`` and add a new workout.

    Args:
        previous: Last known recovery state.
        daily_metrics: Daily metrics, oldest first.
        new_workout: Workout completed since ``previous`` (optional).
        config: Optional :class:`DebtModelConfig` override.
        now: Evaluation time (default: current UTC time; naive is UTC).

    Returns:
        A new :class:`RecoveryState`; ``previous`` is left untouched.
    """
    cfg = config or DEFAULT_DEBT_CONFIG
    now = utc_now(now)

    elapsed_hours = max(0.0, (now - previous.timestamp).total_seconds() / 3600.0)

    baselines = compute_baselines(daily_metrics, cfg.baseline_days)
    modifiers = debt_modifiers(daily_metrics, baselines, cfg.modifiers)
    effective_rate = cfg.base_rate_per_hour * modifiers.combined

    recovered = elapsed_hours * effective_rate
    debt = max(0.0, previous.debt_score - recovered)

    workout_load = None
    if new_workout is not None:
        workout_load = max(0.0, new_workout.load_score)
        debt += workout_load

    hard_training_debt = max(0.0, debt - cfg.thresholds.yellow_max)
    if effective_rate > 0:
        hours_remaining = hard_training_debt / effective_rate
    else:
        # No recovery: never ready while debt sits above yellow
        hours_remaining = math.inf if hard_training_debt > 0 else 0.0

    ready_at = None
    if 0 < hours_remaining < math.inf:
        ready_at = now + timedelta(hours=hours_remaining)

    return RecoveryState(
        timestamp=now,
        debt_score=debt,
        recovery_hours_remaining=hours_remaining,
        ready_for_hard_training_at=ready_at,
        status=classify_status(debt, cfg.thresholds),
        breakdown=RecoveryBreakdown(
            sleep_modifier=modifiers.sleep,
            hrv_modifier=modifiers.hrv,
            rhr_modifier=modifiers.rhr,
            learning_modifier=modifiers.learning,
            effective_rate=round(effective_rate, 4),
            elapsed_hours=round(elapsed_hours, 4),
            recovered=round(recovered, 4),
            last_workout_load=workout_load,
            sleep_baseline=baselines.sleep_minutes,
            hrv_baseline=baselines.hrv_sdnn,
            rhr_baseline=baselines.resting_heart_rate,
        ),
    )


def replay_workouts(
    previous: RecoveryState,
    daily_metrics: Sequence[DailyMetric],
    workouts: Sequence[WorkoutSummary],
    config: DebtModelConfig | None = None,
    *,
    now: datetime | None = None,
) -> RecoveryState:
    """Apply every workout that ended after ``previous`` in end-time order.

    Each workout is applied at its own end time, using only the metrics
    known up to that day, then the state is decayed up to ``now``.
    Workouts ending after ``now`` are ignored.
    """
    now = utc_now(now)
    state = previous
    pending = sorted(
        (w for w in workouts if previous.timestamp < w.end_time <= now),
        key=lambda w: w.end_time,
    )
    for workout in pending:
        day = workout.end_time.astimezone(timezone.utc).date()
        known = [m for m in daily_metrics if m.date <= day]
        state = advance_recovery_state(state, known, workout, now=workout.end_time, config=config)
    return advance_recovery_state(state, daily_metrics, now=now, config=config)
