"""
Tests for planning parameters and enums.

Run with: python -m pytest tests/test_config.py -v
"""

import json
import pytest

from periodization.config import (
    DEFAULT_PARAMS,
    PlanningParams,
    RaceDistance,
    TrainingPhase,
    load_params,
    resolve_params,
)


class TestRaceDistance:
    """Tests for race distance parsing."""

    def test_parse_value_and_name(self):
        assert RaceDistance.parse("10km") == RaceDistance.TEN_K
        assert RaceDistance.parse("MARATHON") == RaceDistance.MARATHON
        assert RaceDistance.parse(RaceDistance.FIVE_K) == RaceDistance.FIVE_K

    def test_parse_case_insensitive_value(self):
        assert RaceDistance.parse("semi marathon") == RaceDistance.HALF_MARATHON

    def test_parse_invalid(self):
        with pytest.raises(ValueError):
            RaceDistance.parse("ultra")

    def test_meters(self):
        assert RaceDistance.HALF_MARATHON.meters == 21097
        assert RaceDistance.MARATHON.meters == 42195


class TestPlanningParams:
    """Tests for PlanningParams."""

    def test_defaults_valid(self):
        is_valid, message = PlanningParams().validate()
        assert is_valid, message

    def test_dict_round_trip(self):
        params = PlanningParams()
        assert PlanningParams.from_dict(params.to_dict()) == params

    def test_json_round_trip(self):
        data = json.loads(json.dumps(DEFAULT_PARAMS.to_dict()))
        assert PlanningParams.from_dict(data) == DEFAULT_PARAMS

    def test_invalid_deload_fraction(self):
        params = PlanningParams(deload_fraction={"base": 1.2, "build": 0.7, "peak": 0.7})
        is_valid, message = params.validate()
        assert not is_valid
        assert "Deload fraction" in message

    def test_unordered_effort_ceilings(self):
        params = PlanningParams(low_quality_effort_ceiling=9)
        is_valid, _ = params.validate()
        assert not is_valid

    def test_unordered_cap_thresholds(self):
        params = PlanningParams(volume_cap_factors=[(60.0, 0.25), (40.0, 0.30)])
        assert params.validate()[0] is False

    def test_cap_factor_lookup(self):
        params = PlanningParams()
        assert params.cap_factor(39.9) == 0.30
        assert params.cap_factor(40.0) == 0.25
        assert params.cap_factor(90.0) == 0.15

    def test_recovery_days(self):
        params = PlanningParams(recovery_days={"Marathon": 14})
        assert params.recovery_days_for(RaceDistance.MARATHON) == 14
        assert params.recovery_days_for(RaceDistance.FIVE_K) == 10

    def test_deload_fraction_for_taper(self):
        assert DEFAULT_PARAMS.deload_fraction_for(TrainingPhase.BUILD) == 0.70
        assert DEFAULT_PARAMS.deload_fraction_for(TrainingPhase.TAPER) == 0.75

    def test_resolve_params(self):
        custom = PlanningParams(absolute_cap_km=180.0)
        assert resolve_params(None) is DEFAULT_PARAMS
        assert resolve_params(custom) is custom


class TestLoadParams:
    """Tests for loading parameters from JSON."""

    def test_overrides_merge_with_defaults(self, tmp_path):
        path = tmp_path / "params.json"
        path.write_text(json.dumps({
            'absolute_cap_km': 180.0,
            'build_increment_band': [4.0, 12.0],
        }))
        params = load_params(str(path))
        assert params.absolute_cap_km == 180.0
        assert params.build_increment_band == (4.0, 12.0)
        assert params.base_growth_at_avg == DEFAULT_PARAMS.base_growth_at_avg

    def test_invalid_file_raises(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({'taper_decay_default': 1.5}))
        with pytest.raises(ValueError):
            load_params(str(path))
