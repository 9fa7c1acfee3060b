"""Heart-rate zone classification.

Each HR sample is assigned, whole, to the highest zone whose lower bound
it reaches.  Zone floors are fractions of max HR; upper bounds are not
used for classification.  Samples below the zone 1 floor are dropped.
"""

from __future__ import annotations

from typing import Sequence

from recovery_debt.config import DEFAULT_ZONE_CONFIG, ZONE_KEYS, ZoneConfig
from recovery_debt.models import HeartRateSample, ZoneMinutes


def _classify_zone(bpm: float, floors_bpm: Sequence[float]) -> int:
    """Return 0-based zone index (0 = below zone 1, 1..5 = zone 1..5)."""
    for idx in range(len(floors_bpm) - 1, -1, -1):
        if bpm >= floors_bpm[idx]:
            return idx + 1
    return 0


def zone_floors_bpm(max_hr: float, zone_config: ZoneConfig | None = None) -> list[float]:
    """Absolute lower bound (bpm) of each zone for a given max HR."""
    cfg = zone_config or DEFAULT_ZONE_CONFIG
    return [max_hr * floor for floor in cfg.floors()]


def classify_zones(
    samples: Sequence[HeartRateSample],
    max_hr: float,
    zone_config: ZoneConfig | None = None,
) -> ZoneMinutes:
    """Accumulate minutes per HR zone.

    Args:
        samples: HR samples for the workout window.
        max_hr: User's max heart rate (bpm).
        zone_config: Optional zone table override.

    Returns:
        ZoneMinutes; all zeros for empty input or a non-positive max HR.
    """
    if len(samples) == 0 or max_hr <= 0:
        return ZoneMinutes()

    floors = zone_floors_bpm(max_hr, zone_config)
    minutes = [0.0] * len(ZONE_KEYS)

    for sample in samples:
        zone_idx = _classify_zone(sample.bpm, floors)
        if zone_idx:
            minutes[zone_idx - 1] += sample.duration_minutes
        # Below zone 1 contributes nothing

    return ZoneMinutes(*minutes)
