"""Tunable constant tables for the recovery engine.

Every coefficient the analytics modules use lives here as a frozen
pydantic model with a module-level default.  Computations accept an
optional ``config=`` override.

Invalid tables are rejected when the model is built, never during a
computation: a ``pydantic.ValidationError`` (a ``ValueError``) is raised.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

ZONE_KEYS = ("z1", "z2", "z3", "z4", "z5")


class _Config(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


def _check_zone_table(table: dict[str, float], name: str) -> None:
    missing = [k for k in ZONE_KEYS if k not in table]
    if missing:
        raise ValueError(f"{name} is missing zones: {', '.join(missing)}")
    extra = [k for k in table if k not in ZONE_KEYS]
    if extra:
        raise ValueError(f"{name} has unknown zones: {', '.join(extra)}")


# ---------------------------------------------------------------------------
# HR zones (fractions of max HR)
# ---------------------------------------------------------------------------


class ZoneConfig(_Config):
    """Five ``(lower, upper)`` HR-zone bands as fractions of max HR.

    Only the lower bound is used for classification; the upper bound is
    kept for display and validation.
    """

    z1: tuple[float, float] = (0.50, 0.60)
    z2: tuple[float, float] = (0.60, 0.70)
    z3: tuple[float, float] = (0.70, 0.80)
    z4: tuple[float, float] = (0.80, 0.90)
    z5: tuple[float, float] = (0.90, 1.00)

    @model_validator(mode="after")
    def check_ascending(self) -> ZoneConfig:
        floors = self.floors()
        for lower, upper in self.bands():
            if lower < 0:
                raise ValueError("zone bounds must be non-negative")
            if upper < lower:
                raise ValueError("zone upper bound below its lower bound")
        for prev, cur in zip(floors, floors[1:]):
            if cur <= prev:
                raise ValueError("zone floors must be strictly ascending")
        return self

    def bands(self) -> list[tuple[float, float]]:
        return [getattr(self, k) for k in ZONE_KEYS]

    def floors(self) -> list[float]:
        return [band[0] for band in self.bands()]


# ---------------------------------------------------------------------------
# Load scoring
# ---------------------------------------------------------------------------

_ZONE_WEIGHTS = {"z1": 1.0, "z2": 1.5, "z3": 2.5, "z4": 4.0, "z5": 7.0}

_SPORT_MULTIPLIERS = {
    "running": 1.0,
    "cycling": 0.9,
    "swimming": 0.95,
    "strength": 0.7,
    "hiit": 1.1,
}


class TrimpConstants(_Config):
    """``w(i) = c1 * exp(c2 * i)`` (Banister)."""

    c1: float = Field(gt=0)
    c2: float = Field(gt=0)


class LoadConfig(_Config):
    """Coefficients for the three load-scoring methods."""

    zone_weights: dict[str, float] = Field(default_factory=lambda: dict(_ZONE_WEIGHTS))
    trimp_male: TrimpConstants = TrimpConstants(c1=0.64, c2=1.92)
    trimp_female: TrimpConstants = TrimpConstants(c1=0.86, c2=1.67)
    sport_multipliers: dict[str, float] = Field(
        default_factory=lambda: dict(_SPORT_MULTIPLIERS),
    )
    default_sport_multiplier: float = Field(0.85, gt=0)
    default_rpe: float = Field(5.0, ge=1, le=10)

    @model_validator(mode="after")
    def check_weights(self) -> LoadConfig:
        _check_zone_table(self.zone_weights, "zone_weights")
        weights = [self.zone_weights[k] for k in ZONE_KEYS]
        if weights[0] <= 0:
            raise ValueError("zone weights must be positive")
        for prev, cur in zip(weights, weights[1:]):
            if cur <= prev:
                raise ValueError("zone weights must increase with intensity")
        if any(v <= 0 for v in self.sport_multipliers.values()):
            raise ValueError("sport multipliers must be positive")
        return self


# ---------------------------------------------------------------------------
# Recovery debt model
# ---------------------------------------------------------------------------


class DebtThresholds(_Config):
    """Status gates: green <= yellow_max < yellow <= red_max < red."""

    yellow_max: float = Field(20.0, ge=0)
    red_max: float = Field(80.0, ge=0)

    @model_validator(mode="after")
    def check_order(self) -> DebtThresholds:
        if self.yellow_max >= self.red_max:
            raise ValueError("yellow_max must be below red_max")
        return self


class RatioGate(_Config):
    """Compare today's value to baseline.

    ``value >= baseline * high_ratio`` applies ``high_modifier``;
    ``value < baseline * low_ratio`` applies ``low_modifier``; anything in
    between is neutral (1.0).
    """

    high_ratio: float = Field(gt=0)
    low_ratio: float = Field(gt=0)
    high_modifier: float = Field(gt=0)
    low_modifier: float = Field(gt=0)

    @model_validator(mode="after")
    def check_order(self) -> RatioGate:
        if self.low_ratio > self.high_ratio:
            raise ValueError("low_ratio must not exceed high_ratio")
        return self


class DebtModifierConfig(_Config):
    """Per-update rate modifiers of the debt model.

    Higher sleep and HRV than baseline speed recovery up; a higher resting
    HR slows it down, hence the RHR gate's ``high_modifier`` below 1.
    """

    sleep: RatioGate = RatioGate(
        high_ratio=1.0, low_ratio=0.8, high_modifier=1.15, low_modifier=0.85,
    )
    hrv: RatioGate = RatioGate(
        high_ratio=1.1, low_ratio=0.9, high_modifier=1.1, low_modifier=0.9,
    )
    rhr: RatioGate = RatioGate(
        high_ratio=1.05, low_ratio=0.95, high_modifier=0.9, low_modifier=1.05,
    )
    learning_phase_days: int = Field(7, ge=0)
    learning_phase_modifier: float = Field(1.15, gt=0)


class DebtModelConfig(_Config):
    """Configuration for :func:`recovery_debt.analytics.debt.advance_recovery_state`."""

    base_rate_per_hour: float = Field(10.0, gt=0)
    baseline_days: int = Field(28, ge=1)
    thresholds: DebtThresholds = DebtThresholds()
    modifiers: DebtModifierConfig = DebtModifierConfig()


# ---------------------------------------------------------------------------
# EPOC estimator
# ---------------------------------------------------------------------------

_ZONE_INTENSITIES = {"z1": 0.55, "z2": 0.65, "z3": 0.75, "z4": 0.85, "z5": 0.95}

_TYPE_INTENSITIES = {
    "running": 0.75,
    "cycling": 0.70,
    "swimming": 0.72,
    "strength": 0.60,
    "hiit": 0.85,
    "walking": 0.55,
}


class EpocConfig(_Config):
    """EPOC model: ``epoc = minutes * f_int * exp(a * ratio)``, hours = epoc / (vo2max * k)."""

    a: float = Field(3.5, ge=0)
    f_int: float = Field(1.0, ge=0)
    vo2max: float = 40.0
    k: float = 1.2
    zone_intensities: dict[str, float] = Field(
        default_factory=lambda: dict(_ZONE_INTENSITIES),
    )
    type_intensities: dict[str, float] = Field(
        default_factory=lambda: dict(_TYPE_INTENSITIES),
    )
    default_intensity: float = Field(0.65, gt=0, le=1)
    min_intensity: float = Field(0.4, ge=0)
    max_intensity: float = Field(1.0, gt=0)

    @model_validator(mode="after")
    def check_tables(self) -> EpocConfig:
        _check_zone_table(self.zone_intensities, "zone_intensities")
        if self.min_intensity > self.max_intensity:
            raise ValueError("min_intensity must not exceed max_intensity")
        if any(v <= 0 for v in self.type_intensities.values()):
            raise ValueError("type intensities must be positive")
        return self


# ---------------------------------------------------------------------------
# Recovery modifier (EPOC decay) and stress summary
# ---------------------------------------------------------------------------


class ModifierConfig(_Config):
    """Bands for :func:`recovery_debt.analytics.modifier.compute_recovery_modifier`.

    Wider bands than :class:`DebtModifierConfig`; the two are tuned
    independently.
    """

    window_days: int = Field(7, ge=1)

    # sleep score = latest / baseline * 100
    sleep_excellent_score: float = 120.0
    sleep_good_score: float = 100.0
    sleep_poor_score: float = 70.0
    sleep_excellent_factor: float = Field(1.5, gt=0)
    sleep_good_factor: float = Field(1.2, gt=0)
    sleep_poor_factor: float = Field(0.5, gt=0)

    hrv_high_ratio: float = Field(1.05, gt=0)
    hrv_low_ratio: float = Field(0.80, gt=0)
    hrv_high_factor: float = Field(1.2, gt=0)
    hrv_low_factor: float = Field(0.2, gt=0)

    rhr_low_ratio: float = Field(0.95, gt=0)
    rhr_high_ratio: float = Field(1.05, gt=0)
    rhr_low_factor: float = Field(1.1, gt=0)
    rhr_high_factor: float = Field(0.8, gt=0)

    stress_lookback_days: float = Field(3.0, gt=0)
    stress_load_cap: float = Field(300.0, gt=0)
    stress_floor: float = Field(0.2, ge=0, le=1)

    @model_validator(mode="after")
    def check_bands(self) -> ModifierConfig:
        if not self.sleep_poor_score <= self.sleep_good_score <= self.sleep_excellent_score:
            raise ValueError("sleep score bands must be ascending")
        if self.hrv_low_ratio > self.hrv_high_ratio:
            raise ValueError("hrv_low_ratio must not exceed hrv_high_ratio")
        if self.rhr_low_ratio > self.rhr_high_ratio:
            raise ValueError("rhr_low_ratio must not exceed rhr_high_ratio")
        return self


class StressConfig(_Config):
    """Clamp ranges for the stress / recovery index summary."""

    window_days: int = Field(7, ge=1)
    lookback_days: float = Field(3.0, gt=0)
    load_cap: float = Field(200.0, gt=0)
    sleep_score_range: tuple[float, float] = (0.0, 1.3)
    ratio_score_range: tuple[float, float] = (0.7, 1.3)
    index_ceiling: float = Field(1.3, gt=0)


DEFAULT_ZONE_CONFIG = ZoneConfig()
DEFAULT_LOAD_CONFIG = LoadConfig()
DEFAULT_DEBT_CONFIG = DebtModelConfig()
DEFAULT_EPOC_CONFIG = EpocConfig()
DEFAULT_MODIFIER_CONFIG = ModifierConfig()
DEFAULT_STRESS_CONFIG = StressConfig()
