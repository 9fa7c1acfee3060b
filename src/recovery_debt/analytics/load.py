"""Workout load scoring.

Three interchangeable methods, picked by which inputs are available:

1. **zones** -- minutes in each HR zone times an increasing weight.  Zone
   minutes are taken as given, or classified from raw HR samples.
2. **trimp** -- Banister's heart-rate-reserve TRIMP,
   ``minutes * i * c1 * exp(c2 * i)`` with sex-specific constants.
3. **rpe** -- session RPE, ``minutes * rpe * sport_multiplier``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from recovery_debt.analytics.baselines import clamp
from recovery_debt.analytics.zones import classify_zones
from recovery_debt.config import DEFAULT_LOAD_CONFIG, ZONE_KEYS, LoadConfig, ZoneConfig
from recovery_debt.models import HeartRateSample, Sex, ZoneMinutes


class LoadMethod(str, Enum):
    """Which scoring method produced a load."""

    ZONES = "zones"
    TRIMP = "trimp"
    RPE = "rpe"


@dataclass(frozen=True)
class LoadInputs:
    """Everything a workout may supply for load scoring.

    Only ``duration_minutes`` is required; the remaining fields decide
    which method applies.
    """

    duration_minutes: float = 0.0
    zone_minutes: ZoneMinutes | None = None
    heart_rate_samples: Sequence[HeartRateSample] | None = None
    max_hr: float | None = None
    zone_config: ZoneConfig | None = None
    avg_heart_rate: float | None = None
    resting_heart_rate: float | None = None
    sex: Sex = Sex.MALE
    rpe: float | None = None
    workout_type: str | None = None


@dataclass(frozen=True)
class LoadResult:
    """Load score plus the zone minutes and method behind it."""

    load_score: float
    zone_minutes: ZoneMinutes = field(default_factory=ZoneMinutes)
    method: LoadMethod = LoadMethod.ZONES

    def __repr__(self) -> str:
        return f"LoadResult({self.method.value}, load={self.load_score:.1f})"


# ---------------------------------------------------------------------------
# Individual methods
# ---------------------------------------------------------------------------


def zone_weighted_load(
    zone_minutes: ZoneMinutes,
    config: LoadConfig | None = None,
) -> float:
    """Sum of zone minutes times zone weight."""
    cfg = config or DEFAULT_LOAD_CONFIG
    return sum(getattr(zone_minutes, k) * cfg.zone_weights[k] for k in ZONE_KEYS)


def trimp_load(
    duration_minutes: float,
    avg_heart_rate: float,
    resting_heart_rate: float,
    max_hr: float,
    sex: Sex = Sex.MALE,
    config: LoadConfig | None = None,
) -> float:
    """Heart-rate-reserve TRIMP.

    Returns 0 for a non-positive duration or HR reserve.
    """
    cfg = config or DEFAULT_LOAD_CONFIG
    hr_reserve = max_hr - resting_heart_rate
    if duration_minutes <= 0 or hr_reserve <= 0:
        return 0.0

    intensity = clamp((avg_heart_rate - resting_heart_rate) / hr_reserve, 0.0, 1.0)
    constants = cfg.trimp_female if sex == Sex.FEMALE else cfg.trimp_male
    weighting = constants.c1 * math.exp(constants.c2 * intensity)
    return duration_minutes * intensity * weighting


def sport_multiplier(workout_type: str | None, config: LoadConfig | None = None) -> float:
    cfg = config or DEFAULT_LOAD_CONFIG
    if not workout_type:
        return cfg.default_sport_multiplier
    return cfg.sport_multipliers.get(workout_type.lower(), cfg.default_sport_multiplier)


def rpe_load(
    duration_minutes: float,
    rpe: float,
    workout_type: str | None = None,
    config: LoadConfig | None = None,
) -> float:
    """Session-RPE load; RPE is clamped onto the 1-10 scale."""
    if duration_minutes <= 0:
        return 0.0
    rpe = clamp(rpe, 1.0, 10.0)
    return duration_minutes * (rpe / 10.0) * 10.0 * sport_multiplier(workout_type, config)


# ---------------------------------------------------------------------------
# Method selection
# ---------------------------------------------------------------------------


def score_workout_load(
    inputs: LoadInputs,
    config: LoadConfig | None = None,
) -> LoadResult:
    """Score a workout with the best method its inputs allow.

    Precedence: explicit zone minutes, then HR samples with a max HR,
    then TRIMP (avg, resting and max HR all known), then RPE.
    """
    if inputs.zone_minutes is not None:
        return LoadResult(
            load_score=zone_weighted_load(inputs.zone_minutes, config),
            zone_minutes=inputs.zone_minutes,
            method=LoadMethod.ZONES,
        )

    if inputs.heart_rate_samples and inputs.max_hr and inputs.max_hr > 0:
        derived = classify_zones(inputs.heart_rate_samples, inputs.max_hr, inputs.zone_config)
        return LoadResult(
            load_score=zone_weighted_load(derived, config),
            zone_minutes=derived,
            method=LoadMethod.ZONES,
        )

    if (
        inputs.avg_heart_rate is not None
        and inputs.resting_heart_rate is not None
        and inputs.max_hr is not None
    ):
        return LoadResult(
            load_score=trimp_load(
                inputs.duration_minutes,
                inputs.avg_heart_rate,
                inputs.resting_heart_rate,
                inputs.max_hr,
                inputs.sex,
                config,
            ),
            method=LoadMethod.TRIMP,
        )

    cfg = config or DEFAULT_LOAD_CONFIG
    rpe = inputs.rpe if inputs.rpe is not None else cfg.default_rpe
    return LoadResult(
        load_score=rpe_load(inputs.duration_minutes, rpe, inputs.workout_type, cfg),
        method=LoadMethod.RPE,
    )
