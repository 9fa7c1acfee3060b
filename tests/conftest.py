"""Shared helpers for the recovery_debt test suite."""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from recovery_debt.models import (
    DailyMetric,
    HeartRateSample,
    RecoveryState,
    WorkoutSummary,
    ZoneMinutes,
)

NOW = datetime(2026, 2, 14, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Model helpers
# ---------------------------------------------------------------------------


def make_sample(
    bpm: float,
    minutes: float = 1.0,
    start: datetime = NOW,
) -> HeartRateSample:
    """An HR sample of ``bpm`` spanning ``minutes`` from ``start``."""
    return HeartRateSample(
        start_time=start,
        end_time=start + timedelta(minutes=minutes),
        bpm=bpm,
    )


def make_workout(
    load: float = 0.0,
    end: datetime = NOW,
    minutes: float = 60.0,
    zones: ZoneMinutes | None = None,
    workout_type: str = "running",
    workout_id: str = "w1",
) -> WorkoutSummary:
    """A scored workout that ended at ``end`` and lasted ``minutes``."""
    return WorkoutSummary(
        id=workout_id,
        type=workout_type,
        start_time=end - timedelta(minutes=minutes),
        end_time=end,
        duration_seconds=minutes * 60.0,
        zone_minutes=zones or ZoneMinutes(),
        load_score=load,
    )


def make_metrics(
    days: int,
    sleep: float | None = 420.0,
    rhr: float | None = 55.0,
    hrv: float | None = 60.0,
    last_day: date | None = None,
) -> list[DailyMetric]:
    """``days`` identical daily metrics ending on ``last_day``, oldest first."""
    last_day = last_day or NOW.date()
    return [
        DailyMetric(
            date=last_day - timedelta(days=days - 1 - i),
            sleep_minutes=sleep,
            resting_heart_rate=rhr,
            hrv_sdnn=hrv,
        )
        for i in range(days)
    ]


def with_latest(
    metrics: list[DailyMetric],
    sleep: float | None = None,
    rhr: float | None = None,
    hrv: float | None = None,
) -> list[DailyMetric]:
    """Replace the most recent day's values (``None`` keeps the old one)."""
    last = metrics[-1]
    return metrics[:-1] + [
        DailyMetric(
            date=last.date,
            sleep_minutes=sleep if sleep is not None else last.sleep_minutes,
            resting_heart_rate=rhr if rhr is not None else last.resting_heart_rate,
            hrv_sdnn=hrv if hrv is not None else last.hrv_sdnn,
        )
    ]


def make_state(debt: float = 0.0, at: datetime = NOW) -> RecoveryState:
    return RecoveryState(timestamp=at, debt_score=debt)


# ---------------------------------------------------------------------------
# Export payload helpers
# ---------------------------------------------------------------------------


def iso(moment: datetime) -> str:
    return moment.isoformat().replace("+00:00", "Z")


def make_export(
    workouts: list[dict] | None = None,
    days: int = 14,
    max_hr: float | None = 190.0,
    previous_state: dict | None = None,
) -> dict:
    """A health-store export with ``days`` days of stable biometrics."""
    rhr, hrv, sleep = [], [], []
    for i in range(days):
        day = NOW - timedelta(days=days - 1 - i)
        morning = day.replace(hour=6, minute=0)
        rhr.append({"startDate": iso(morning), "value": 55})
        hrv.append({"startDate": iso(morning), "value": 60})
        sleep.append({
            "startDate": iso(morning - timedelta(hours=7)),
            "endDate": iso(morning),
        })
    return {
        "profile": {"max_hr": max_hr, "sex": "male"},
        "previous_state": previous_state,
        "workouts": workouts or [],
        "resting_heart_rate": rhr,
        "hrv": hrv,
        "sleep": sleep,
    }


def make_raw_workout(
    end: datetime,
    minutes: float = 60.0,
    bpm: float | None = None,
    uuid: str = "w1",
    activity: str = "running",
    rpe: float | None = None,
) -> dict:
    """An exported workout; ``bpm`` adds one HR sample per minute."""
    start = end - timedelta(minutes=minutes)
    raw = {
        "uuid": uuid,
        "activityName": activity,
        "startDate": iso(start),
        "endDate": iso(end),
        "heartRateSamples": [],
    }
    if bpm is not None:
        raw["heartRateSamples"] = [
            {
                "startDate": iso(start + timedelta(minutes=i)),
                "endDate": iso(start + timedelta(minutes=i + 1)),
                "value": bpm,
            }
            for i in range(int(minutes))
        ]
    if rpe is not None:
        raw["rpe"] = rpe
    return raw


def write_export(path: Path, payload: dict) -> Path:
    """Write an export payload as JSON to the given path."""
    with open(path, "w") as f:
        json.dump(payload, f)
    return path
