"""
Tests for phase allocation.

Run with: python -m pytest tests/test_phases.py -v
"""

import pytest

from periodization.config import RaceDistance, TrainingPhase
from periodization.phases import (
    TAPER_EXTENDED,
    TAPER_NONE,
    TAPER_STANDARD,
    compute_taper,
    compute_build_deloads,
    allocate_phases,
    allocate_continuous,
)


# =============================================================================
# Taper
# =============================================================================

class TestTaper:
    """Tests for taper length selection."""

    def test_marathon_high_volume_extended(self):
        assert compute_taper(RaceDistance.MARATHON, 90) == (3, TAPER_EXTENDED)

    def test_marathon_low_volume_standard(self):
        assert compute_taper(RaceDistance.MARATHON, 50) == (2, TAPER_STANDARD)

    def test_half_marathon_threshold(self):
        assert compute_taper(RaceDistance.HALF_MARATHON, 60) == (2, TAPER_EXTENDED)
        assert compute_taper(RaceDistance.HALF_MARATHON, 59) == (1, TAPER_STANDARD)

    def test_short_distances_single_week(self):
        assert compute_taper(RaceDistance.TEN_K, 500) == (1, TAPER_STANDARD)
        assert compute_taper(RaceDistance.FIVE_K, 500) == (1, TAPER_STANDARD)


# =============================================================================
# Build deloads
# =============================================================================

class TestBuildDeloads:
    """Tests for deload placement within Build."""

    def test_every_fifth_week(self):
        assert compute_build_deloads(10) == [5, 10]

    def test_final_week_added(self):
        assert compute_build_deloads(4) == [4]
        assert compute_build_deloads(8) == [5, 8]

    def test_adjacent_deloads_collapse(self):
        """When the last two deloads are adjacent the earlier one goes."""
        assert compute_build_deloads(6) == [6]
        assert compute_build_deloads(11) == [5, 11]

    def test_empty_build(self):
        assert compute_build_deloads(0) == []


# =============================================================================
# Allocation
# =============================================================================

class TestAllocatePhases:
    """Tests for the phase allocator."""

    def test_infeasible_below_minimum(self):
        """Seven weeks is not enough for a cycle."""
        allocation = allocate_phases(7, "10km", 50, True, 7)
        assert allocation.valid is False
        assert allocation.warnings

    def test_sixteen_week_10k(self):
        allocation = allocate_phases(16, "10km", 50, True, 16)
        assert allocation.valid
        assert (allocation.base, allocation.build, allocation.peak, allocation.taper) == (6, 5, 4, 1)
        assert allocation.taper_type == TAPER_STANDARD
        assert allocation.base_deloads == [6]
        assert allocation.build_deloads == [5]

    def test_short_plan_warns_but_proceeds(self):
        allocation = allocate_phases(10, RaceDistance.TEN_K, 50)
        assert allocation.valid
        assert any("not optimal" in w for w in allocation.warnings)

    def test_base_length_depends_on_plan_length(self):
        long_first = allocate_phases(20, RaceDistance.TEN_K, 50, True, 20)
        later_cycle = allocate_phases(20, RaceDistance.TEN_K, 50, False, 40)
        assert long_first.base == 6
        assert later_cycle.base == 4

    def test_peak_shrinks_first(self):
        allocation = allocate_phases(11, RaceDistance.TEN_K, 50, False, 11)
        assert (allocation.base, allocation.build, allocation.peak, allocation.taper) == (4, 4, 2, 1)
        assert any("Peak phase shortened" in w for w in allocation.warnings)

    def test_taper_dropped_second(self):
        allocation = allocate_phases(9, RaceDistance.TEN_K, 50, False, 9)
        assert allocation.taper == 0
        assert allocation.peak == 1
        assert allocation.taper_type == TAPER_NONE
        assert any("taper" in w for w in allocation.warnings)

    def test_peak_dropped_third(self):
        allocation = allocate_phases(8, RaceDistance.TEN_K, 50, False, 8)
        assert (allocation.base, allocation.build, allocation.peak, allocation.taper) == (4, 4, 0, 0)
        assert any("peak phase" in w for w in allocation.warnings)

    def test_floor_base_and_build_only(self):
        allocation = allocate_phases(8, RaceDistance.MARATHON, 50, False, 8)
        assert allocation.valid
        assert allocation.peak == 0 and allocation.taper == 0
        assert allocation.base + allocation.build == 8
        assert any("compressed" in w for w in allocation.warnings)

    @pytest.mark.parametrize("distance", list(RaceDistance))
    def test_weeks_always_sum_to_total(self, distance):
        """Every valid allocation uses exactly the weeks available."""
        for total in range(8, 41):
            for first in (True, False):
                allocation = allocate_phases(total, distance, 70, first, total)
                assert allocation.valid
                assert allocation.allocated_weeks == total
                assert not any("mismatch" in w for w in allocation.warnings)

    def test_phase_sequence_skips_empty_phases(self):
        allocation = allocate_phases(8, RaceDistance.TEN_K, 50, False, 8)
        phases = [phase for phase, _ in allocation.phase_sequence()]
        assert phases == [TrainingPhase.BASE, TrainingPhase.BUILD]

    def test_unknown_distance_raises(self):
        with pytest.raises(ValueError):
            allocate_phases(16, "ultra", 50)


class TestAllocateContinuous:
    """Tests for the Base + Build allocation without a race."""

    def test_default_24_weeks(self):
        allocation = allocate_continuous(24)
        assert allocation.base == 6
        assert allocation.build == 18
        assert allocation.peak == 0 and allocation.taper == 0
        assert allocation.build_deloads == [5, 10, 15, 18]
        assert allocation.distance == RaceDistance.TEN_K
