"""
Fitness Index and Pace Zone Calculations.

Based on:
- Daniels, J. & Gilbert, J. (1979). Oxygen Power
- Daniels, J. (2014). Daniels' Running Formula

A single reference race performance is converted into a VDOT-style fitness
index (estimated VO2 normalised by the fraction of VO2max sustainable for
the race duration). The inverse solves for the velocity at a given fraction
of the index, which yields the pace bounds of the seven training zones.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple, Union
import math

from .config import DISTANCE_METERS, RaceDistance


# Oxygen cost of running: VO2 = a*v^2 + b*v + c  (v in m/min)
VO2_A = 0.000104
VO2_B = 0.182258
VO2_C = -4.6

# Pace returned when the quadratic has no positive root (sec/km)
SAFE_SLOW_PACE = 600


class PaceZoneName(Enum):
    """Training intensity zones, ordered by increasing intensity."""
    EASY = "easy"                 # Warmup, recovery, cooldown
    ACTIVE = "active"             # Easy runs and long runs
    THRESHOLD_1 = "threshold_1"   # Very long quality blocks (20-40 min)
    TEMPO = "tempo"               # Long quality blocks (6-20 min)
    THRESHOLD_2 = "threshold_2"   # Fast long blocks (4-12 min)
    VO2_LONG = "vo2_long"         # 10k-5k pace, 1-6 min intervals
    VO2_SHORT = "vo2_short"       # 1500-3000 pace, short intervals and hills


ZONE_ORDER = list(PaceZoneName)

# (slow fraction, fast fraction) of the fitness index per zone
ZONE_FRACTIONS: Dict[PaceZoneName, Tuple[float, float]] = {
    PaceZoneName.EASY: (0.45, 0.60),
    PaceZoneName.ACTIVE: (0.60, 0.70),
    PaceZoneName.THRESHOLD_1: (0.70, 0.75),
    PaceZoneName.TEMPO: (0.75, 0.85),
    PaceZoneName.THRESHOLD_2: (0.85, 0.90),
    PaceZoneName.VO2_LONG: (0.90, 0.95),
    PaceZoneName.VO2_SHORT: (0.95, 1.00),
}

ZONE_LABELS: Dict[PaceZoneName, str] = {
    PaceZoneName.EASY: "Easy",
    PaceZoneName.ACTIVE: "Active",
    PaceZoneName.THRESHOLD_1: "Threshold 1",
    PaceZoneName.TEMPO: "Tempo",
    PaceZoneName.THRESHOLD_2: "Threshold 2",
    PaceZoneName.VO2_LONG: "VO2 long",
    PaceZoneName.VO2_SHORT: "VO2 short",
}

ZONE_DESCRIPTIONS: Dict[PaceZoneName, str] = {
    PaceZoneName.EASY: "Easy running, warmup, recovery and cooldown",
    PaceZoneName.ACTIVE: "Easy runs and long runs, in portions",
    PaceZoneName.THRESHOLD_1: "Very long quality blocks, usually 20 to 40 min",
    PaceZoneName.TEMPO: "Long quality blocks, usually 6 to 20 min",
    PaceZoneName.THRESHOLD_2: "Fast long blocks, usually 4 to 12 min",
    PaceZoneName.VO2_LONG: "10k-5k pace: 1 to 6 min intervals (400-1200m)",
    PaceZoneName.VO2_SHORT: "1500-3000 pace: short intervals (<400m), hills, speed",
}


@dataclass(frozen=True)
class PaceZone:
    """
    Pace band for one training zone.

    Paces are seconds per kilometre, so ``slow > fast``.
    """
    name: PaceZoneName
    slow: int
    fast: int

    @property
    def mid(self) -> float:
        return (self.slow + self.fast) / 2

    @property
    def label(self) -> str:
        return ZONE_LABELS[self.name]

    @property
    def description(self) -> str:
        return ZONE_DESCRIPTIONS[self.name]


PaceZones = Dict[PaceZoneName, PaceZone]


def parse_time_to_seconds(time_str: str) -> int:
    """
    Parse "h:mm:ss", "mm:ss" or "ss" into seconds.

    Raises:
        ValueError: If a component is not a number
    """
    parts = [int(p) for p in str(time_str).strip().split(":")]
    if len(parts) == 3:
        return parts[0] * 3600 + parts[1] * 60 + parts[2]
    if len(parts) == 2:
        return parts[0] * 60 + parts[1]
    if len(parts) == 1:
        return parts[0]
    raise ValueError(f"Unrecognised time format: {time_str!r}")


def compute_fitness_index(distance_m: float, time_sec: float) -> float:
    """
    Compute the fitness index (VDOT) from a race performance.

    Formula:
        v = distance / minutes
        VO2 = -4.6 + 0.182258*v + 0.000104*v^2
        %max = 0.8 + 0.1894393*e^(-0.012778*t) + 0.2989558*e^(-0.1932605*t)
        index = VO2 / %max

    Args:
        distance_m: Race distance in meters
        time_sec: Finish time in seconds

    Returns:
        Fitness index (ml/kg/min equivalent), 0.0 for a non-positive
        distance or time
    """
    t_min = time_sec / 60
    if t_min <= 0 or distance_m <= 0:
        return 0.0
    velocity = distance_m / t_min
    vo2 = VO2_C + VO2_B * velocity + VO2_A * velocity * velocity
    pct_max = (
        0.8
        + 0.1894393 * math.exp(-0.012778 * t_min)
        + 0.2989558 * math.exp(-0.1932605 * t_min)
    )
    return vo2 / pct_max


def fitness_index_from_race(
    distance: Union[RaceDistance, str],
    time_str: str
) -> float:
    """Fitness index from a distance key ("5km", "1500", ...) and a time string."""
    key = distance.value if isinstance(distance, RaceDistance) else str(distance)
    if key not in DISTANCE_METERS:
        key = RaceDistance.parse(key).value
    return compute_fitness_index(DISTANCE_METERS[key], parse_time_to_seconds(time_str))


def pace_from_fraction(fitness_index: float, fraction: float) -> int:
    """
    Pace (sec/km) sustainable at a fraction of the fitness index.

    Solves a*v^2 + b*v + (c - fraction*index) = 0 for the positive root.
    Degenerate inputs yield ``SAFE_SLOW_PACE`` rather than an error.
    """
    target = fraction * fitness_index
    c = VO2_C - target
    disc = VO2_B * VO2_B - 4 * VO2_A * c
    if disc < 0:
        return SAFE_SLOW_PACE

    velocity = (-VO2_B + math.sqrt(disc)) / (2 * VO2_A)
    if velocity <= 0:
        return SAFE_SLOW_PACE

    return round(60000 / velocity)


def compute_all_pace_zones(fitness_index: float) -> PaceZones:
    """
    Build all seven pace zones for a fitness index.

    Adjacent zones share a boundary: zone i's fast bound equals
    zone i+1's slow bound.
    """
    return {
        name: PaceZone(
            name=name,
            slow=pace_from_fraction(fitness_index, slow_frac),
            fast=pace_from_fraction(fitness_index, fast_frac),
        )
        for name, (slow_frac, fast_frac) in ZONE_FRACTIONS.items()
    }


def format_pace(sec_per_km: float) -> str:
    """Format seconds per km as m:ss."""
    total = int(round(sec_per_km))
    minutes, seconds = divmod(total, 60)
    return f"{minutes}:{seconds:02d}"


def format_pace_range(zones: PaceZones, zone: PaceZoneName) -> str:
    """Format a zone as "slow-fast /km"."""
    band = zones.get(zone)
    if band is None:
        return ""
    return f"{format_pace(band.slow)}-{format_pace(band.fast)} /km"


def estimate_duration_minutes(distance_km: float, pace_sec_per_km: float) -> float:
    """Duration of a continuous run at a given pace, in minutes."""
    return distance_km * pace_sec_per_km / 60
