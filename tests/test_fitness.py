"""
Tests for the fitness index and pace zones.

Run with: python -m pytest tests/test_fitness.py -v
"""

import pytest
import numpy as np

from periodization.config import RaceDistance
from periodization.fitness import (
    SAFE_SLOW_PACE,
    ZONE_ORDER,
    PaceZoneName,
    parse_time_to_seconds,
    compute_fitness_index,
    fitness_index_from_race,
    pace_from_fraction,
    compute_all_pace_zones,
    format_pace,
    format_pace_range,
    estimate_duration_minutes,
)


# =============================================================================
# Time parsing
# =============================================================================

class TestParseTime:
    """Tests for race time parsing."""

    def test_hours_minutes_seconds(self):
        assert parse_time_to_seconds("1:30:00") == 5400

    def test_minutes_seconds(self):
        assert parse_time_to_seconds("40:00") == 2400
        assert parse_time_to_seconds("4:30") == 270

    def test_seconds_only(self):
        assert parse_time_to_seconds("45") == 45

    def test_non_numeric_raises(self):
        with pytest.raises(ValueError):
            parse_time_to_seconds("ab:cd")

    def test_too_many_parts_raises(self):
        with pytest.raises(ValueError):
            parse_time_to_seconds("1:2:3:4")


# =============================================================================
# Fitness index
# =============================================================================

class TestFitnessIndex:
    """Tests for the VDOT-style fitness index."""

    def test_known_5k_value(self):
        """A 20:00 5k is a fitness index of about 49.8."""
        index = compute_fitness_index(5000, 1200)
        assert index == pytest.approx(49.8, abs=0.1)

    def test_faster_time_gives_higher_index(self):
        slow = compute_fitness_index(10000, 3000)
        fast = compute_fitness_index(10000, 2400)
        assert fast > slow

    def test_from_race_matches_direct(self):
        direct = compute_fitness_index(5000, 1200)
        assert fitness_index_from_race("5km", "20:00") == pytest.approx(direct)
        assert fitness_index_from_race(RaceDistance.FIVE_K, "20:00") == pytest.approx(direct)

    def test_track_distances_accepted(self):
        index = fitness_index_from_race("1500", "4:30")
        assert index > 0

    def test_unknown_distance_raises(self):
        with pytest.raises(ValueError):
            fitness_index_from_race("ultra", "5:00:00")


# =============================================================================
# Pace zones
# =============================================================================

class TestPaceZones:
    """Tests for pace zone computation."""

    @pytest.mark.parametrize("index", [30.0, 45.0, 60.0, 80.0])
    def test_mid_paces_strictly_decreasing(self, index):
        """Faster zones have strictly faster (smaller) mid paces."""
        zones = compute_all_pace_zones(index)
        assert len(zones) == 7
        mids = np.array([zones[name].mid for name in ZONE_ORDER])
        assert np.all(np.diff(mids) < 0)

    def test_slow_bound_above_fast_bound(self):
        zones = compute_all_pace_zones(50.0)
        for zone in zones.values():
            assert zone.slow > zone.fast

    def test_adjacent_zones_share_boundary(self):
        zones = compute_all_pace_zones(50.0)
        for slower, faster in zip(ZONE_ORDER, ZONE_ORDER[1:]):
            assert zones[slower].fast == zones[faster].slow

    def test_negative_index_falls_back_to_safe_pace(self):
        """Degenerate inputs give a slow pace instead of an error."""
        assert pace_from_fraction(-100.0, 1.0) == SAFE_SLOW_PACE
        assert pace_from_fraction(-20.0, 1.0) == SAFE_SLOW_PACE

    def test_zero_index_still_returns_a_pace(self):
        assert pace_from_fraction(0.0, 0.5) > 0

    def test_zero_time_or_distance_gives_zero_index(self):
        """No division error: a zero index still yields usable zones."""
        assert compute_fitness_index(10000, 0) == 0.0
        assert compute_fitness_index(0, 1200) == 0.0
        assert compute_fitness_index(5000, -60) == 0.0
        zones = compute_all_pace_zones(compute_fitness_index(10000, 0))
        assert all(zone.slow > 0 and zone.fast > 0 for zone in zones.values())


# =============================================================================
# Formatting
# =============================================================================

class TestFormatting:
    """Tests for pace and duration helpers."""

    def test_format_pace(self):
        assert format_pace(245) == "4:05"
        assert format_pace(300) == "5:00"

    def test_format_pace_range(self):
        zones = compute_all_pace_zones(50.0)
        easy = zones[PaceZoneName.EASY]
        text = format_pace_range(zones, PaceZoneName.EASY)
        assert text == f"{format_pace(easy.slow)}-{format_pace(easy.fast)} /km"

    def test_format_pace_range_missing_zone(self):
        assert format_pace_range({}, PaceZoneName.TEMPO) == ""

    def test_estimate_duration(self):
        assert estimate_duration_minutes(10, 300) == pytest.approx(50.0)
