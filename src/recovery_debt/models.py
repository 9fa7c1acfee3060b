"""Value objects shared by the analytics modules.

All of them are frozen dataclasses: a recomputation always yields a new
object and never edits an old one.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from collections.abc import Mapping
from typing import Any

from recovery_debt.config import ZONE_KEYS


class Sex(str, Enum):
    """Selects the TRIMP weighting constants."""

    MALE = "male"
    FEMALE = "female"


class ReadinessStatus(str, Enum):
    """Traffic-light readiness derived from the debt score."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken as UTC."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def utc_now(now: datetime | None = None) -> datetime:
    """``now`` as an aware datetime, defaulting to the current UTC time."""
    return as_utc(now) if now is not None else datetime.now(timezone.utc)


def parse_timestamp(value: datetime | str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime.

    A trailing ``Z`` is accepted; naive values are taken as UTC.  Raises
    ``ValueError`` on unparseable text or a non-string value.
    """
    if isinstance(value, datetime):
        return as_utc(value)
    if not isinstance(value, str):
        raise ValueError(f"expected an ISO-8601 string, got {type(value).__name__}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(text))


def _coerce_utc(obj: Any, *names: str) -> None:
    # Frozen dataclasses: bypass __setattr__
    for name in names:
        value = getattr(obj, name)
        if value is not None:
            object.__setattr__(obj, name, as_utc(value))


def _non_negative(data: Mapping[str, Any], key: str) -> float:
    value = data.get(key) or 0.0
    try:
        return max(0.0, float(value))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be a number, got {value!r}") from exc


# ---------------------------------------------------------------------------
# Raw inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HeartRateSample:
    """A single HR reading covering ``[start_time, end_time]``."""

    start_time: datetime
    end_time: datetime
    bpm: float

    def __post_init__(self) -> None:
        _coerce_utc(self, "start_time", "end_time")

    @property
    def duration_minutes(self) -> float:
        """Sample span in minutes; point samples count as one minute."""
        minutes = max(0.0, (self.end_time - self.start_time).total_seconds() / 60.0)
        return minutes or 1.0


@dataclass(frozen=True)
class ZoneMinutes:
    """Minutes spent in each of the five HR zones."""

    z1: float = 0.0
    z2: float = 0.0
    z3: float = 0.0
    z4: float = 0.0
    z5: float = 0.0

    def __post_init__(self) -> None:
        for key in ZONE_KEYS:
            if getattr(self, key) < 0:
                raise ValueError(f"zone minutes must be non-negative ({key})")

    @classmethod
    def from_dict(cls, data: Mapping[str, float]) -> ZoneMinutes:
        return cls(**{k: float(data.get(k, 0.0) or 0.0) for k in ZONE_KEYS})

    @property
    def total(self) -> float:
        return sum(getattr(self, k) for k in ZONE_KEYS)

    def as_dict(self) -> dict[str, float]:
        return {k: getattr(self, k) for k in ZONE_KEYS}

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={getattr(self, k):.1f}" for k in ZONE_KEYS)
        return f"ZoneMinutes({inner})"


@dataclass(frozen=True)
class WorkoutSummary:
    """A completed workout with its derived zone minutes and load."""

    id: str
    type: str
    start_time: datetime
    end_time: datetime
    duration_seconds: float
    zone_minutes: ZoneMinutes = field(default_factory=ZoneMinutes)
    load_score: float = 0.0

    def __post_init__(self) -> None:
        _coerce_utc(self, "start_time", "end_time")

    @property
    def duration_minutes(self) -> float:
        return self.duration_seconds / 60.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "start_time": _iso(self.start_time),
            "end_time": _iso(self.end_time),
            "duration_seconds": self.duration_seconds,
            "zone_minutes": self.zone_minutes.as_dict(),
            "load_score": self.load_score,
        }


@dataclass(frozen=True)
class DailyMetric:
    """Aggregated biometrics for one calendar day.

    A field is ``None`` when no sample for that signal exists that day.
    """

    date: date
    sleep_minutes: float | None = None
    resting_heart_rate: float | None = None
    hrv_sdnn: float | None = None

    @property
    def has_data(self) -> bool:
        return bool(self.sleep_minutes or self.resting_heart_rate or self.hrv_sdnn)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["date"] = self.date.isoformat()
        return data


# ---------------------------------------------------------------------------
# Recovery state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RecoveryBreakdown:
    """What the last update actually applied, for explanation only."""

    sleep_modifier: float = 1.0
    hrv_modifier: float = 1.0
    rhr_modifier: float = 1.0
    learning_modifier: float = 1.0
    effective_rate: float = 0.0
    elapsed_hours: float = 0.0
    recovered: float = 0.0
    last_workout_load: float | None = None
    sleep_baseline: float = 0.0
    hrv_baseline: float = 0.0
    rhr_baseline: float = 0.0


@dataclass(frozen=True)
class RecoveryState:
    """A snapshot of the recovery-debt timeline."""

    timestamp: datetime
    debt_score: float = 0.0
    recovery_hours_remaining: float = 0.0
    ready_for_hard_training_at: datetime | None = None
    status: ReadinessStatus = ReadinessStatus.GREEN
    breakdown: RecoveryBreakdown | None = None

    def __post_init__(self) -> None:
        _coerce_utc(self, "timestamp", "ready_for_hard_training_at")

    @classmethod
    def initial(cls, now: datetime | None = None) -> RecoveryState:
        """Zero debt, green, stamped at ``now``."""
        return cls(timestamp=utc_now(now))

    @property
    def is_ready(self) -> bool:
        return self.recovery_hours_remaining <= 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": _iso(self.timestamp),
            "debt_score": self.debt_score,
            "recovery_hours_remaining": self.recovery_hours_remaining,
            "ready_for_hard_training_at": _iso(self.ready_for_hard_training_at),
            "status": self.status.value,
            "breakdown": asdict(self.breakdown) if self.breakdown else None,
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RecoveryState:
        """Rebuild a state from :meth:`to_dict` output.

        Raises ``KeyError`` without a timestamp and ``ValueError`` for any
        malformed field.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"expected a mapping, got {type(data).__name__}")
        ready_at = data.get("ready_for_hard_training_at")
        breakdown = data.get("breakdown")
        if breakdown:
            if not isinstance(breakdown, Mapping):
                raise ValueError("breakdown must be a mapping")
            try:
                breakdown = RecoveryBreakdown(**breakdown)
            except TypeError as exc:
                raise ValueError(f"invalid breakdown: {exc}") from exc
        return cls(
            timestamp=parse_timestamp(data["timestamp"]),
            debt_score=_non_negative(data, "debt_score"),
            recovery_hours_remaining=_non_negative(data, "recovery_hours_remaining"),
            ready_for_hard_training_at=parse_timestamp(ready_at) if ready_at else None,
            status=ReadinessStatus(data.get("status", ReadinessStatus.GREEN.value)),
            breakdown=breakdown or None,
        )

    def __repr__(self) -> str:
        return (
            f"RecoveryState({self.status.value}, "
            f"debt={self.debt_score:.1f}, "
            f"hours_left={self.recovery_hours_remaining:.1f})"
        )
