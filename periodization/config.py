"""
Planning Parameters: the tuning table behind every periodization decision.

Growth rates, caps, deload fractions, taper lengths, effort ceilings and
day-placement weights all live here so that a phase-specific tweak is a
single, auditable edit. Every engine function accepts an optional
``params`` argument and falls back to ``DEFAULT_PARAMS``.

Based on:
- Daniels, J. (2014). Daniels' Running Formula (VDOT, pace zones)
- Pfitzinger, P. & Douglas, S. (2009). Advanced Marathoning (taper lengths)
- Progressive overload with 3:1 / 4:1 loading-to-deload cycles
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple
import json
import math


class RaceDistance(Enum):
    """Target race distance categories."""
    FIVE_K = "5km"
    TEN_K = "10km"
    HALF_MARATHON = "Semi Marathon"
    MARATHON = "Marathon"

    @property
    def meters(self) -> int:
        return DISTANCE_METERS[self.value]

    @classmethod
    def parse(cls, value: Any) -> 'RaceDistance':
        """Accept an enum member, its value or its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text == member.value or text.upper() == member.name:
                return member
        lowered = text.lower()
        for member in cls:
            if lowered == member.value.lower():
                return member
        raise ValueError(f"Unknown race distance: {value!r}")


class TrainingPhase(Enum):
    """Training phases of one cycle, in order."""
    BASE = "base"       # Aerobic foundation
    BUILD = "build"     # Introduction of intensity
    PEAK = "peak"       # Race-pace specific work
    TAPER = "taper"     # Pre-race reduction


PHASE_ORDER = [TrainingPhase.BASE, TrainingPhase.BUILD, TrainingPhase.PEAK, TrainingPhase.TAPER]

# Reference distances, including the short track distances a fitness index
# can be computed from.
DISTANCE_METERS: Dict[str, int] = {
    "1500": 1500,
    "3000": 3000,
    "5km": 5000,
    "10km": 10000,
    "Semi Marathon": 21097,
    "Marathon": 42195,
}

DEFAULT_REFERENCE_TIMES: Dict[str, str] = {
    "1500": "4:30",
    "3000": "10:00",
    "5km": "20:00",
    "10km": "40:00",
    "Semi Marathon": "1:30:00",
    "Marathon": "3:00:00",
}


@dataclass
class PlanningParams:
    """
    Tunable parameters for phase allocation, volume scheduling and
    session generation.

    Fractions are decimals (0.10 = 10%), volumes are km/week, durations are
    minutes. Distance-keyed tables use the ``RaceDistance`` value as key and
    phase-keyed tables use the ``TrainingPhase`` value, so the whole object
    survives a JSON round trip.
    """

    # ═══════════════════════════════════════════════════════════════════════════
    # VOLUME CEILINGS
    # ═══════════════════════════════════════════════════════════════════════════

    absolute_cap_km: float = 210.0
    residual_growth_rate: float = 0.03      # Growth once a cap is reached
    min_ceiling_reference_km: float = 20.0  # Annual average floor for the ceiling

    # (threshold, factor): first threshold above the reference volume wins
    volume_cap_factors: List[Tuple[float, float]] = field(default_factory=lambda: [
        (40.0, 0.30),
        (60.0, 0.25),
        (90.0, 0.20),
    ])
    volume_cap_factor_floor: float = 0.15   # Reference volume above every threshold

    distance_min_ceiling_km: Dict[str, float] = field(default_factory=lambda: {
        "5km": 40.0,
        "10km": 50.0,
        "Semi Marathon": 60.0,
        "Marathon": 70.0,
    })

    # ═══════════════════════════════════════════════════════════════════════════
    # PHASE ALLOCATION
    # ═══════════════════════════════════════════════════════════════════════════

    min_total_weeks: int = 8
    suboptimal_total_weeks: int = 10
    base_weeks_long_first_cycle: int = 6
    base_weeks_default: int = 4
    long_plan_threshold_weeks: int = 12

    peak_max_weeks: Dict[str, int] = field(default_factory=lambda: {
        "5km": 3,
        "10km": 4,
        "Semi Marathon": 5,
        "Marathon": 6,
    })
    build_min_weeks: Dict[str, int] = field(default_factory=lambda: {
        "5km": 4,
        "10km": 4,
        "Semi Marathon": 5,
        "Marathon": 5,
    })

    # (short weeks, long weeks, estimated peak volume that triggers long taper)
    taper_profiles: Dict[str, Tuple[int, int, float]] = field(default_factory=lambda: {
        "5km": (1, 1, math.inf),
        "10km": (1, 1, math.inf),
        "Semi Marathon": (1, 2, 60.0),
        "Marathon": (2, 3, 80.0),
    })

    build_deload_interval: int = 5

    # ═══════════════════════════════════════════════════════════════════════════
    # VOLUME PROGRESSION
    # ═══════════════════════════════════════════════════════════════════════════

    # Base: faster growth while still under the annual average
    base_growth_below_avg: float = 0.20
    base_growth_at_avg: float = 0.10
    base_increment_band: Tuple[float, float] = (5.0, 20.0)

    build_growth: float = 0.10
    build_increment_band: Tuple[float, float] = (5.0, 15.0)

    peak_growth: float = 0.05
    peak_increment_band: Tuple[float, float] = (5.0, 10.0)

    deload_fraction: Dict[str, float] = field(default_factory=lambda: {
        "base": 0.75,
        "build": 0.70,
        "peak": 0.70,
    })
    ramp_back_fractions: Tuple[float, float] = (0.92, 1.00)
    deload_cap_slack_km: float = 2.0

    taper_decay_high_volume: float = 0.70
    taper_decay_default: float = 0.75
    taper_high_volume_km: float = 100.0

    trailing_average_weeks: int = 4

    # ═══════════════════════════════════════════════════════════════════════════
    # MULTI-CYCLE PLANS
    # ═══════════════════════════════════════════════════════════════════════════

    recovery_days: Dict[str, int] = field(default_factory=lambda: {
        "5km": 5,
        "10km": 7,
        "Semi Marathon": 10,
        "Marathon": 14,
    })
    default_recovery_days: int = 10
    min_weeks_before_priority: int = 8
    min_weeks_between_priority: int = 8
    next_cycle_volume_factor: float = 0.70
    estimated_peak_factor: float = 1.4
    continuous_plan_weeks: int = 24
    continuous_distance: str = "10km"

    default_year_km: float = 2000.0
    default_avg4w_km: float = 40.0
    default_last_week_km: float = 40.0

    # ═══════════════════════════════════════════════════════════════════════════
    # SESSION SLOTS
    # ═══════════════════════════════════════════════════════════════════════════

    base_min_sessions_for_quality: int = 3
    min_sessions_for_quality: int = 2
    min_sessions_for_two_quality: int = 5

    long_run_share: Dict[str, float] = field(default_factory=lambda: {
        "base": 0.40,
        "build": 0.42,
        "peak": 0.45,
        "taper": 0.40,
    })
    long_run_share_two_sessions: float = 0.55
    high_quality_share: float = 0.18
    low_quality_share: float = 0.15

    long_run_effort: Dict[str, int] = field(default_factory=lambda: {
        "base": 3,
        "build": 4,
        "peak": 5,
        "taper": 3,
    })
    high_quality_effort_range: Dict[str, Tuple[int, int]] = field(default_factory=lambda: {
        "base": (5, 6),
        "build": (6, 8),
        "peak": (7, 9),
        "taper": (7, 8),
    })
    low_quality_effort_range: Dict[str, Tuple[int, int]] = field(default_factory=lambda: {
        "base": (4, 5),
        "build": (5, 6),
        "peak": (5, 6),
        "taper": (5, 6),
    })
    easy_effort: int = 3
    recovery_effort: int = 2

    low_quality_effort_ceiling: int = 6
    high_quality_effort_ceiling: int = 8
    high_quality_effort_ceiling_high_volume: int = 9
    high_volume_threshold_km: float = 50.0
    deload_effort_ceiling: int = 4
    deload_long_run_effort: int = 3

    # ═══════════════════════════════════════════════════════════════════════════
    # VOLUME DISTRIBUTION
    # ═══════════════════════════════════════════════════════════════════════════

    long_run_cap_km: Dict[str, float] = field(default_factory=lambda: {
        "5km": 18.0,
        "10km": 22.0,
        "Semi Marathon": 26.0,
        "Marathon": 35.0,
    })
    long_run_max_minutes: Dict[str, Dict[str, float]] = field(default_factory=lambda: {
        "5km": {"base": 75, "build": 85, "peak": 90, "taper": 60},
        "10km": {"base": 90, "build": 100, "peak": 105, "taper": 70},
        "Semi Marathon": {"base": 100, "build": 120, "peak": 130, "taper": 80},
        "Marathon": {"base": 120, "build": 150, "peak": 180, "taper": 100},
    })
    easy_long_weight: float = 1.6
    easy_short_weight: float = 1.0
    deload_session_scale: float = 0.75

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameters to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'PlanningParams':
        """Create parameters from dictionary, restoring tuple-valued fields."""
        values = dict(d)
        for key in ('base_increment_band', 'build_increment_band',
                    'peak_increment_band', 'ramp_back_fractions'):
            if key in values:
                values[key] = tuple(values[key])
        if 'volume_cap_factors' in values:
            values['volume_cap_factors'] = [tuple(p) for p in values['volume_cap_factors']]
        for key in ('taper_profiles', 'high_quality_effort_range', 'low_quality_effort_range'):
            if key in values:
                values[key] = {k: tuple(v) for k, v in values[key].items()}
        return cls(**values)

    def validate(self) -> Tuple[bool, str]:
        """Validate parameter constraints."""
        issues = []

        thresholds = [t for t, _ in self.volume_cap_factors]
        if thresholds != sorted(thresholds):
            issues.append("Volume cap thresholds must be in ascending order")

        for name in ('base_increment_band', 'build_increment_band', 'peak_increment_band'):
            low, high = getattr(self, name)
            if not 0 <= low <= high:
                issues.append(f"{name}: 0 <= low <= high")

        for phase, fraction in self.deload_fraction.items():
            if not 0 < fraction < 1:
                issues.append(f"Deload fraction for {phase} must be in (0, 1)")

        if not 0 < self.taper_decay_high_volume <= self.taper_decay_default < 1:
            issues.append("Taper decay: 0 < high-volume decay <= default decay < 1")

        if self.min_total_weeks < 1:
            issues.append("min_total_weeks must be positive")

        if not (self.low_quality_effort_ceiling <= self.high_quality_effort_ceiling
                <= self.high_quality_effort_ceiling_high_volume <= 10):
            issues.append("Effort ceilings must be ordered low <= high <= high-volume <= 10")

        if self.deload_effort_ceiling > self.low_quality_effort_ceiling:
            issues.append("Deload effort ceiling must not exceed the low-quality ceiling")

        missing = [d.value for d in RaceDistance if d.value not in self.long_run_cap_km]
        if missing:
            issues.append(f"long_run_cap_km missing distances: {missing}")

        if issues:
            return False, "; ".join(issues)
        return True, "Valid"

    # ───────────────────────────────────────────────────────────────────────────
    # Table lookups
    # ───────────────────────────────────────────────────────────────────────────

    def cap_factor(self, reference_volume: float) -> float:
        """Tiered cap factor for a reference weekly volume."""
        for threshold, factor in self.volume_cap_factors:
            if reference_volume < threshold:
                return factor
        return self.volume_cap_factor_floor

    def recovery_days_for(self, distance: RaceDistance) -> int:
        return self.recovery_days.get(distance.value, self.default_recovery_days)

    def deload_fraction_for(self, phase: TrainingPhase) -> float:
        return self.deload_fraction.get(phase.value, 0.75)


DEFAULT_PARAMS = PlanningParams()


def load_params(path: str) -> PlanningParams:
    """
    Load parameters from a JSON file.

    Keys missing from the file keep their defaults.

    Raises:
        ValueError: If the loaded parameters fail validation
    """
    with open(path, 'r') as f:
        overrides = json.load(f)

    merged = DEFAULT_PARAMS.to_dict()
    merged.update(overrides)
    params = PlanningParams.from_dict(merged)

    is_valid, message = params.validate()
    if not is_valid:
        raise ValueError(f"Invalid planning parameters in {path}: {message}")
    return params


def resolve_params(params: Optional[PlanningParams]) -> PlanningParams:
    """Return ``params`` or the module defaults."""
    return params if params is not None else DEFAULT_PARAMS
