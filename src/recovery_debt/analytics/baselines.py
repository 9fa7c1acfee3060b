"""Rolling biometric baselines.

This is the shared foundation for the recovery models.  A baseline is the
median of a signal over the trailing window of daily metrics, skipping
days where the signal is missing or zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from recovery_debt.models import DailyMetric


def median(values: Sequence[float]) -> float:
    """Median of ``values``; the mean of the two central values for even
    lengths, 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.median(np.asarray(values, dtype=np.float64)))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True)
class Baselines:
    """Median sleep / HRV / resting-HR over a trailing window."""

    sleep_minutes: float = 0.0
    hrv_sdnn: float = 0.0
    resting_heart_rate: float = 0.0


def compute_baselines(metrics: Sequence[DailyMetric], window_days: int) -> Baselines:
    """Baselines over the last ``window_days`` entries of ``metrics``.

    ``metrics`` is ordered oldest first.  Falsy values (missing or 0) are
    ignored.
    """
    recent = list(metrics)[-window_days:] if window_days > 0 else []
    return Baselines(
        sleep_minutes=median([m.sleep_minutes for m in recent if m.sleep_minutes]),
        hrv_sdnn=median([m.hrv_sdnn for m in recent if m.hrv_sdnn]),
        resting_heart_rate=median(
            [m.resting_heart_rate for m in recent if m.resting_heart_rate]
        ),
    )
