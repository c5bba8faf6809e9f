"""
Tests for the weekly volume schedule.

Run with: python -m pytest tests/test_volume.py -v
"""

import pytest
import numpy as np

from periodization.config import RaceDistance, TrainingPhase
from periodization.phases import PhaseAllocation, allocate_phases
from periodization.volume import (
    WeekRecord,
    compute_starting_volume,
    compute_annual_average,
    get_cap_factor,
    compute_global_ceiling,
    compute_phase_cap,
    trailing_average,
    compute_phase_boundaries,
    compute_volume_schedule,
)


@pytest.fixture
def ten_k_schedule():
    """16-week 10k cycle starting at 40 km with a 35 km annual average."""
    allocation = allocate_phases(16, "10km", 50, True, 16)
    return compute_volume_schedule(allocation, 40.0, 35.0, 40.0)


# =============================================================================
# Helpers
# =============================================================================

class TestVolumeHelpers:
    """Tests for starting volume, averages and caps."""

    def test_starting_volume(self):
        assert compute_starting_volume(40, 50) == 45

    def test_annual_average(self):
        assert compute_annual_average(2080) == pytest.approx(40.0)

    def test_cap_factor_tiers(self):
        assert get_cap_factor(30) == 0.30
        assert get_cap_factor(40) == 0.25
        assert get_cap_factor(75) == 0.20
        assert get_cap_factor(120) == 0.15

    def test_global_ceiling_distance_floor(self):
        """35 km x 1.30 = 45.5, raised to the 10k minimum of 50."""
        assert compute_global_ceiling(35, RaceDistance.TEN_K) == pytest.approx(50.0)

    def test_global_ceiling_reference_floor(self):
        """Annual average is floored at 20 km before the cap factor."""
        assert compute_global_ceiling(10, RaceDistance.FIVE_K) == pytest.approx(40.0)
        assert compute_global_ceiling(10) == pytest.approx(26.0)

    def test_global_ceiling_high_volume(self):
        assert compute_global_ceiling(100, RaceDistance.MARATHON) == pytest.approx(115.0)

    def test_global_ceiling_absolute_cap(self):
        assert compute_global_ceiling(500, RaceDistance.MARATHON) == pytest.approx(210.0)

    def test_phase_cap_bounded_by_ceiling(self):
        assert compute_phase_cap(40, 100) == pytest.approx(50.0)
        assert compute_phase_cap(40, 45) == pytest.approx(45.0)

    def test_trailing_average_skips_deloads(self):
        schedule = [
            WeekRecord(1, TrainingPhase.BASE, 40.0),
            WeekRecord(2, TrainingPhase.BASE, 50.0),
            WeekRecord(3, TrainingPhase.BASE, 30.0, is_deload=True),
        ]
        assert trailing_average(schedule, 4) == pytest.approx(45.0)
        assert trailing_average([], 4, default=33.0) == 33.0


# =============================================================================
# Schedule
# =============================================================================

class TestVolumeSchedule:
    """Tests for compute_volume_schedule."""

    def test_end_to_end_length_and_taper(self, ten_k_schedule):
        """16 weeks, ending in a Taper week below the Peak maximum."""
        assert len(ten_k_schedule) == 16
        last = ten_k_schedule[-1]
        assert last.phase == TrainingPhase.TAPER
        peak_max = max(r.volume for r in ten_k_schedule if r.phase == TrainingPhase.PEAK)
        assert last.volume < peak_max

    def test_week_numbers_and_phase_order(self, ten_k_schedule):
        assert [r.week for r in ten_k_schedule] == list(range(1, 17))
        phases = [r.phase for r in ten_k_schedule]
        assert phases == (
            [TrainingPhase.BASE] * 6 + [TrainingPhase.BUILD] * 5
            + [TrainingPhase.PEAK] * 4 + [TrainingPhase.TAPER]
        )

    def test_base_growth_band_and_cap(self, ten_k_schedule):
        """+10% of 40 is below the 5 km band, then the 50 km cap holds."""
        assert ten_k_schedule[0].volume == pytest.approx(45.0)
        assert ten_k_schedule[1].volume == pytest.approx(50.0)

    def test_residual_growth_at_cap(self, ten_k_schedule):
        """At the cap, growth continues at 3% per week."""
        assert ten_k_schedule[2].volume == pytest.approx(51.5)

    def test_deload_flags(self, ten_k_schedule):
        deloads = [i for i, r in enumerate(ten_k_schedule) if r.is_deload]
        assert deloads == [5, 10]

    def test_deloads_drop_volume(self, ten_k_schedule):
        for i, record in enumerate(ten_k_schedule):
            if record.is_deload and i > 0:
                assert record.volume < ten_k_schedule[i - 1].volume

    def test_base_deload_fraction(self, ten_k_schedule):
        pre = ten_k_schedule[4].volume
        assert ten_k_schedule[5].volume == pytest.approx(pre * 0.75, abs=0.1)

    def test_build_deload_fraction(self, ten_k_schedule):
        pre = ten_k_schedule[9].volume
        assert ten_k_schedule[10].volume == pytest.approx(pre * 0.70, abs=0.1)

    def test_ramp_back_after_deload(self, ten_k_schedule):
        """The week after a Build deload returns to at most 92% of pre-deload."""
        pre = ten_k_schedule[9].volume
        assert ten_k_schedule[11].volume <= pre * 0.92 + 0.05
        assert ten_k_schedule[11].volume > ten_k_schedule[10].volume
        assert ten_k_schedule[12].volume <= pre + 0.05

    def test_deload_during_ramp_restarts_it(self):
        """A deload on a ramp week takes the ramp week as its reference."""
        allocation = PhaseAllocation(
            total_weeks=4, distance=RaceDistance.TEN_K, build=4, build_deloads=[1, 3]
        )
        schedule = compute_volume_schedule(allocation, 40.0, 40.0, 40.0)
        volumes = [r.volume for r in schedule]
        assert volumes[0] == pytest.approx(28.0)   # 40 x 0.70
        assert volumes[1] == pytest.approx(36.8)   # 40 x 0.92
        assert volumes[2] == pytest.approx(25.8)   # 36.8 x 0.70
        assert volumes[3] == pytest.approx(33.9)   # 36.8 x 0.92

    def test_high_volume_taper_decay(self):
        allocation = PhaseAllocation(
            total_weeks=3, distance=RaceDistance.MARATHON, build=1, taper=2
        )
        schedule = compute_volume_schedule(allocation, 120.0, 120.0, 120.0)
        volumes = [r.volume for r in schedule]
        assert volumes[0] == pytest.approx(132.0)
        assert volumes[1] == pytest.approx(92.4)
        assert volumes[2] == pytest.approx(64.7)

    def test_low_volume_taper_decay(self):
        allocation = PhaseAllocation(
            total_weeks=2, distance=RaceDistance.TEN_K, build=1, taper=1
        )
        schedule = compute_volume_schedule(allocation, 40.0, 40.0, 40.0)
        assert schedule[0].volume == pytest.approx(45.0)
        assert schedule[1].volume == pytest.approx(45.0 * 0.75, abs=0.1)

    def test_absolute_cap_respected(self):
        for distance in RaceDistance:
            allocation = allocate_phases(30, distance, 250, True, 30)
            schedule = compute_volume_schedule(allocation, 205.0, 1000.0, 205.0)
            volumes = np.array([r.volume for r in schedule])
            assert len(volumes) == 30
            assert np.all(volumes <= 210.0)

    def test_volumes_rounded_to_one_decimal(self, ten_k_schedule):
        for record in ten_k_schedule:
            assert record.volume == round(record.volume, 1)

    def test_invalid_allocation_gives_empty_schedule(self):
        allocation = allocate_phases(6, RaceDistance.TEN_K, 50)
        assert compute_volume_schedule(allocation, 40.0, 40.0, 40.0) == []

    def test_phase_boundaries(self, ten_k_schedule):
        assert compute_phase_boundaries(ten_k_schedule) == {
            TrainingPhase.BASE: (0, 6),
            TrainingPhase.BUILD: (6, 5),
            TrainingPhase.PEAK: (11, 4),
            TrainingPhase.TAPER: (15, 1),
        }
