"""Tests for recovery_debt.analytics.zones -- HR-zone classification."""

import pytest

from recovery_debt.analytics.zones import _classify_zone, classify_zones, zone_floors_bpm
from recovery_debt.config import ZoneConfig
from recovery_debt.models import ZoneMinutes

from tests.conftest import make_sample


class TestClassifyZone:
    FLOORS = [100.0, 120.0, 140.0, 160.0, 180.0]  # max HR 200

    def test_below_zone_1(self):
        assert _classify_zone(99.0, self.FLOORS) == 0

    def test_boundary_zone_1(self):
        assert _classify_zone(100.0, self.FLOORS) == 1  # exactly 50%

    def test_zone_3(self):
        assert _classify_zone(150.0, self.FLOORS) == 3

    def test_boundary_zone_5(self):
        assert _classify_zone(180.0, self.FLOORS) == 5

    def test_above_max_hr(self):
        assert _classify_zone(215.0, self.FLOORS) == 5


class TestZoneFloors:
    def test_default_floors(self):
        assert zone_floors_bpm(200.0) == pytest.approx([100.0, 120.0, 140.0, 160.0, 180.0])

    def test_custom_table(self):
        cfg = ZoneConfig(
            z1=(0.4, 0.5), z2=(0.5, 0.6), z3=(0.6, 0.7), z4=(0.7, 0.85), z5=(0.85, 1.0),
        )
        assert zone_floors_bpm(200.0, cfg)[0] == pytest.approx(80.0)


class TestClassifyZones:
    def test_empty_input(self):
        assert classify_zones([], max_hr=200.0) == ZoneMinutes()

    def test_non_positive_max_hr(self):
        samples = [make_sample(150.0)]
        assert classify_zones(samples, max_hr=0.0) == ZoneMinutes()
        assert classify_zones(samples, max_hr=-10.0) == ZoneMinutes()

    def test_single_zone(self):
        samples = [make_sample(150.0, minutes=30.0)]
        result = classify_zones(samples, max_hr=200.0)
        assert result.z3 == pytest.approx(30.0)
        assert result.total == pytest.approx(30.0)

    def test_below_zone_1_dropped(self):
        samples = [make_sample(80.0, minutes=10.0), make_sample(130.0, minutes=5.0)]
        result = classify_zones(samples, max_hr=200.0)
        assert result.total == pytest.approx(5.0)
        assert result.z2 == pytest.approx(5.0)

    def test_point_sample_counts_one_minute(self):
        samples = [make_sample(170.0, minutes=0.0)]
        result = classify_zones(samples, max_hr=200.0)
        assert result.z4 == pytest.approx(1.0)

    def test_no_double_counting(self):
        # Every sample lands in exactly one zone
        bpms = [100.0, 119.9, 120.0, 145.0, 160.0, 179.0, 180.0, 199.0]
        samples = [make_sample(bpm, minutes=2.0) for bpm in bpms]
        result = classify_zones(samples, max_hr=200.0)
        assert result.total == pytest.approx(2.0 * len(bpms))
        assert result.as_dict() == pytest.approx(
            {"z1": 4.0, "z2": 2.0, "z3": 2.0, "z4": 4.0, "z5": 4.0}
        )

    def test_total_never_exceeds_sample_minutes(self):
        samples = [make_sample(bpm, minutes=3.0) for bpm in (50.0, 110.0, 190.0)]
        result = classify_zones(samples, max_hr=200.0)
        assert result.total <= sum(s.duration_minutes for s in samples)
