"""Recovery report aggregator.

Pulls the debt state, the EPOC estimate, the recovery modifier and the
stress summary into a single RecoveryReport that is JSON-serializable.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from recovery_debt.analytics.modifier import RecoveryModifier
from recovery_debt.analytics.stress import StressSummary
from recovery_debt.models import DailyMetric, RecoveryState, WorkoutSummary


@dataclass
class RecoveryReport:
    """One refresh worth of recovery metrics."""

    state: RecoveryState

    # EPOC
    epoc_window_days: int = 30
    epoc_hours_added: float = 0.0
    epoc_hours_remaining: float = 0.0
    latest_workout_end: datetime | None = None

    modifier: RecoveryModifier | None = None
    stress: StressSummary | None = None

    workouts: list[WorkoutSummary] = field(default_factory=list)
    daily_metrics: list[DailyMetric] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict (JSON-friendly)."""
        return {
            "state": self.state.to_dict(),
            "epoc": {
                "window_days": self.epoc_window_days,
                "hours_added": round(self.epoc_hours_added, 2),
                "hours_remaining": round(self.epoc_hours_remaining, 2),
                "latest_workout_end": (
                    self.latest_workout_end.isoformat() if self.latest_workout_end else None
                ),
            },
            "modifier": self.modifier.to_dict() if self.modifier else None,
            "stress": self.stress.to_dict() if self.stress else None,
            "workouts": [w.to_dict() for w in self.workouts],
            "daily_metrics": [m.to_dict() for m in self.daily_metrics],
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        return (
            f"RecoveryReport({self.state.status.value}: "
            f"debt={self.state.debt_score:.1f}, "
            f"epoc_left={self.epoc_hours_remaining:.1f}h, "
            f"workouts={len(self.workouts)})"
        )


def build_recovery_report(
    state: RecoveryState,
    workouts: list[WorkoutSummary] | None = None,
    daily_metrics: list[DailyMetric] | None = None,
    epoc_window_days: int = 30,
    epoc_hours_added: float = 0.0,
    epoc_hours_remaining: float = 0.0,
    latest_workout_end: datetime | None = None,
    modifier: RecoveryModifier | None = None,
    stress: StressSummary | None = None,
) -> RecoveryReport:
    """Build a report from individual analytics results.

    Args:
        state: New recovery-debt state.
        workouts: Scored workouts used for the refresh.
        daily_metrics: Aggregated daily metrics.
        epoc_window_days: EPOC lookback window.
        epoc_hours_added: EPOC recovery hours added in the window.
        epoc_hours_remaining: EPOC recovery hours still owed.
        latest_workout_end: Most recent workout end in the window.
        modifier: Recovery modifier used to decay EPOC hours.
        stress: Stress / recovery index summary.

    Returns:
        A populated RecoveryReport.
    """
    return RecoveryReport(
        state=state,
        epoc_window_days=epoc_window_days,
        epoc_hours_added=epoc_hours_added,
        epoc_hours_remaining=epoc_hours_remaining,
        latest_workout_end=latest_workout_end,
        modifier=modifier,
        stress=stress,
        workouts=list(workouts or []),
        daily_metrics=list(daily_metrics or []),
    )
