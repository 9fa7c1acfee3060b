"""Analytics engine for recovery debt and readiness.

Modules:
    baselines -- Median baselines over trailing daily metrics
    zones     -- HR-zone classification of heart rate samples
    load      -- Workout load scoring (zones, TRIMP, RPE)
    debt      -- Recovery debt decay and readiness status
    epoc      -- EPOC-based recovery-time estimate
    modifier  -- Recovery modifier for the EPOC model
    stress    -- Stress / recovery index summary
    summary   -- Recovery report aggregation
    pipeline  -- Full refresh over an exported health snapshot
"""

from recovery_debt.analytics.baselines import Baselines, compute_baselines, median
from recovery_debt.analytics.zones import classify_zones
from recovery_debt.analytics.load import (
    LoadInputs,
    LoadMethod,
    LoadResult,
    score_workout_load,
    zone_weighted_load,
    trimp_load,
    rpe_load,
)
from recovery_debt.analytics.debt import (
    advance_recovery_state,
    classify_status,
    debt_modifiers,
    replay_workouts,
)
from recovery_debt.analytics.epoc import (
    estimate_intensity_ratio,
    estimate_epoc_total,
    estimate_epoc_recovery_added,
    estimate_epoc_recovery_total,
    estimate_epoc_recovery_remaining,
    latest_workout_end,
)
from recovery_debt.analytics.modifier import compute_recovery_modifier, RecoveryModifier
from recovery_debt.analytics.stress import compute_stress_summary, StressSummary
from recovery_debt.analytics.summary import build_recovery_report, RecoveryReport

__all__ = [
    # baselines
    "Baselines",
    "compute_baselines",
    "median",
    # zones
    "classify_zones",
    # load
    "LoadInputs",
    "LoadMethod",
    "LoadResult",
    "score_workout_load",
    "zone_weighted_load",
    "trimp_load",
    "rpe_load",
    # debt
    "advance_recovery_state",
    "classify_status",
    "debt_modifiers",
    "replay_workouts",
    # epoc
    "estimate_intensity_ratio",
    "estimate_epoc_total",
    "estimate_epoc_recovery_added",
    "estimate_epoc_recovery_total",
    "estimate_epoc_recovery_remaining",
    "latest_workout_end",
    # modifier
    "compute_recovery_modifier",
    "RecoveryModifier",
    # stress
    "compute_stress_summary",
    "StressSummary",
    # summary
    "build_recovery_report",
    "RecoveryReport",
]
