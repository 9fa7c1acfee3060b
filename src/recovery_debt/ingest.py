"""Turn exported health records into analytics inputs.

The records are plain dicts as a health store exports them (camelCase
keys, ISO-8601 timestamps)::

    {"startDate": "2026-02-13T06:00:00Z", "endDate": "...", "value": 52}

Fetching them is the caller's job; this module only normalises,
aggregates per calendar day, and scores workouts.  Malformed records are
skipped and logged, never raised.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone
from typing import Any

from recovery_debt.analytics.load import LoadInputs, score_workout_load
from recovery_debt.config import LoadConfig
from recovery_debt.models import (
    DailyMetric,
    HeartRateSample,
    Sex,
    WorkoutSummary,
    parse_timestamp,
)

logger = logging.getLogger(__name__)


def _number(value: Any) -> float | None:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    return parsed if math.isfinite(parsed) else None


def _timestamp(value: Any) -> datetime | None:
    if value is None:
        return None
    try:
        return parse_timestamp(value)
    except (TypeError, ValueError):
        return None


def _day_key(moment: datetime) -> date:
    return moment.astimezone(timezone.utc).date()


# ---------------------------------------------------------------------------
# Heart rate samples
# ---------------------------------------------------------------------------


def normalize_heart_rate_samples(
    raw_samples: Iterable[Mapping[str, Any]],
    window_start: datetime,
    window_end: datetime,
) -> list[HeartRateSample]:
    """Build HR samples, filling missing bounds with the workout window.

    Records without a positive numeric value are dropped.
    """
    samples: list[HeartRateSample] = []
    skipped = 0
    for raw in raw_samples:
        bpm = _number(raw.get("value"))
        if bpm is None or bpm <= 0:
            skipped += 1
            continue
        start = _timestamp(raw.get("startDate")) or window_start
        end = _timestamp(raw.get("endDate")) or window_end
        samples.append(HeartRateSample(start_time=start, end_time=end, bpm=bpm))
    if skipped:
        logger.debug("Dropped %d heart rate samples without a usable value", skipped)
    return samples


# ---------------------------------------------------------------------------
# Daily metrics
# ---------------------------------------------------------------------------


def aggregate_daily_metrics(
    rhr_samples: Iterable[Mapping[str, Any]] = (),
    hrv_samples: Iterable[Mapping[str, Any]] = (),
    sleep_samples: Iterable[Mapping[str, Any]] = (),
) -> list[DailyMetric]:
    """Fold raw samples into one :class:`DailyMetric` per UTC day.

    The last resting-HR / HRV reading of a day wins; sleep spans are
    summed onto the day they start.  Returns metrics sorted oldest first.
    """
    days: dict[date, dict[str, float]] = {}

    def _point(raw: Mapping[str, Any], value_key: str, field_name: str) -> None:
        moment = _timestamp(raw.get("startDate") or raw.get("date"))
        value = _number(raw.get("value", raw.get(value_key)))
        if moment is None or value is None:
            logger.debug("Skipping %s record %r", field_name, raw)
            return
        days.setdefault(_day_key(moment), {})[field_name] = value

    for raw in rhr_samples:
        _point(raw, "restingHeartRate", "resting_heart_rate")
    for raw in hrv_samples:
        _point(raw, "hrv", "hrv_sdnn")

    for raw in sleep_samples:
        start = _timestamp(raw.get("startDate"))
        end = _timestamp(raw.get("endDate") or raw.get("startDate"))
        if start is None or end is None:
            logger.debug("Skipping sleep record %r", raw)
            continue
        minutes = (end - start).total_seconds() / 60.0
        if minutes <= 0:
            continue
        entry = days.setdefault(_day_key(start), {})
        entry["sleep_minutes"] = entry.get("sleep_minutes", 0.0) + minutes

    return [DailyMetric(date=day, **fields) for day, fields in sorted(days.items())]


# ---------------------------------------------------------------------------
# Workouts
# ---------------------------------------------------------------------------


def summarize_workout(
    raw: Mapping[str, Any],
    heart_rate_samples: Iterable[Mapping[str, Any]] = (),
    max_hr: float | None = None,
    metrics_by_day: Mapping[date, DailyMetric] | None = None,
    sex: Sex = Sex.MALE,
    config: LoadConfig | None = None,
) -> WorkoutSummary | None:
    """Score one exported workout.

    Args:
        raw: Workout record (``uuid``/``id``, ``activityName``/``type``,
            ``startDate``, ``endDate``, optional ``rpe``).
        heart_rate_samples: Raw HR records recorded during the workout.
        max_hr: User's max HR, if known.
        metrics_by_day: Daily metrics keyed by UTC day; the workout day's
            resting HR feeds TRIMP.
        sex: Selects the TRIMP constants.
        config: Optional :class:`LoadConfig` override.

    Returns:
        WorkoutSummary, or None when the record has no usable time window.
    """
    start = _timestamp(raw.get("startDate"))
    end = _timestamp(raw.get("endDate"))
    if start is None or end is None:
        logger.info("Skipping workout without a valid time window: %r", raw.get("uuid"))
        return None

    duration_s = max(0.0, (end - start).total_seconds())
    workout_type = raw.get("activityName") or raw.get("type") or "Workout"
    workout_id = raw.get("uuid") or raw.get("id") or f"workout-{start.isoformat()}"

    samples = normalize_heart_rate_samples(heart_rate_samples, start, end)
    avg_hr = sum(s.bpm for s in samples) / len(samples) if samples else None
    day_metric = (metrics_by_day or {}).get(_day_key(start))
    resting_hr = day_metric.resting_heart_rate if day_metric else None

    result = score_workout_load(
        LoadInputs(
            duration_minutes=duration_s / 60.0,
            heart_rate_samples=samples,
            max_hr=max_hr,
            avg_heart_rate=avg_hr,
            resting_heart_rate=resting_hr,
            sex=sex,
            rpe=_number(raw.get("rpe")),
            workout_type=workout_type,
        ),
        config,
    )
    logger.debug(
        "Workout %s: %d HR samples, load %.1f (%s)",
        workout_id, len(samples), result.load_score, result.method.value,
    )

    return WorkoutSummary(
        id=str(workout_id),
        type=str(workout_type),
        start_time=start,
        end_time=end,
        duration_seconds=duration_s,
        zone_minutes=result.zone_minutes,
        load_score=result.load_score,
    )

