"""
Volume Scheduling: week-by-week target volume for one training cycle.

Based on:
- Progressive overload with a tiered cap on weekly growth
- Loading/deload cycles (deload at 70-75% of the loaded volume)
- Geometric taper (Mujika, I. & Padilla, S. (2003). Scientific bases for precompetition tapering)

The scheduler is a small state machine. It carries the running volume, the
pre-deload reference and the ramp-back state across the whole cycle, and
recomputes a phase-local cap at each phase boundary from the trailing
average of the non-deload weeks already scheduled.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple

from loguru import logger

from .config import PlanningParams, RaceDistance, TrainingPhase, resolve_params
from .phases import PhaseAllocation


class RampState(Enum):
    """Position in the post-deload ramp back."""
    FREEFORM = "freeform"         # Normal growth
    DELOADING = "deloading"       # Last week was a deload
    RAMP_STEP_1 = "ramp_step_1"   # Last week was the first ramp step


@dataclass
class WeekRecord:
    """One week of a volume schedule (1-based, cycle-relative)."""
    week: int
    phase: TrainingPhase
    volume: float
    is_deload: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'week': self.week,
            'phase': self.phase.value,
            'volume': self.volume,
            'is_deload': self.is_deload,
        }


def compute_starting_volume(avg4w: float, last_week: float) -> float:
    """Starting volume: mean of the 4-week average and last week's volume."""
    return (avg4w + last_week) / 2


def compute_annual_average(year_km: float) -> float:
    """Average weekly volume over the last year."""
    return year_km / 52


def clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(maximum, value))


def get_cap_factor(
    reference_volume: float,
    params: Optional[PlanningParams] = None
) -> float:
    """
    Tiered growth allowance above a reference volume.

    Lower volumes get more headroom:
        < 40 km: 30%   < 60 km: 25%   < 90 km: 20%   otherwise: 15%
    """
    return resolve_params(params).cap_factor(reference_volume)


def compute_global_ceiling(
    annual_average: float,
    distance: Optional[RaceDistance] = None,
    params: Optional[PlanningParams] = None
) -> float:
    """
    Highest weekly volume the cycle should normally reach.

    Formula:
        ref = max(annual_average, 20)
        ceiling = ref * (1 + cap_factor(ref))
        ceiling = max(ceiling, distance minimum)
        ceiling = min(ceiling, absolute cap)
    """
    params = resolve_params(params)
    reference = max(annual_average, params.min_ceiling_reference_km)
    ceiling = reference * (1 + params.cap_factor(reference))
    if distance is not None:
        ceiling = max(ceiling, params.distance_min_ceiling_km.get(distance.value, 0.0))
    return min(ceiling, params.absolute_cap_km)


def compute_phase_cap(
    reference_volume: float,
    global_ceiling: float,
    params: Optional[PlanningParams] = None
) -> float:
    """Phase-local cap from a trailing average, bounded by the global ceiling."""
    params = resolve_params(params)
    cap = reference_volume * (1 + params.cap_factor(reference_volume))
    return min(cap, global_ceiling, params.absolute_cap_km)


def trailing_average(
    schedule: List[WeekRecord],
    n_weeks: int = 4,
    default: float = 0.0
) -> float:
    """Average of the last ``n_weeks`` non-deload weeks (fewer if not available)."""
    loaded = [r.volume for r in schedule if not r.is_deload][-n_weeks:]
    if not loaded:
        return default
    return sum(loaded) / len(loaded)


def compute_phase_boundaries(schedule: List[WeekRecord]) -> Dict[TrainingPhase, Tuple[int, int]]:
    """
    Map each phase present in a schedule to (start index, length).

    Indices are 0-based positions in ``schedule``.
    """
    boundaries: Dict[TrainingPhase, Tuple[int, int]] = {}
    for i, record in enumerate(schedule):
        if record.phase in boundaries:
            start, length = boundaries[record.phase]
            boundaries[record.phase] = (start, length + 1)
        else:
            boundaries[record.phase] = (i, 1)
    return boundaries


class _ScheduleState:
    """Running state shared by every phase of one cycle."""

    def __init__(self, starting_volume: float):
        self.current = starting_volume
        self.pre_deload: Optional[float] = None
        self.ramp = RampState.FREEFORM

    def deload(self, fraction: float) -> float:
        self.pre_deload = self.current
        self.ramp = RampState.DELOADING
        return self.current * fraction

    def ramp_back(self, ramp_fractions: Tuple[float, float], cap: float) -> float:
        if self.ramp == RampState.DELOADING:
            self.ramp = RampState.RAMP_STEP_1
            return min(self.pre_deload * ramp_fractions[0], cap)
        self.ramp = RampState.FREEFORM
        return min(self.pre_deload * ramp_fractions[1], cap)


def _growth_settings(
    phase: TrainingPhase,
    current: float,
    annual_average: float,
    params: PlanningParams
) -> Tuple[float, Tuple[float, float]]:
    if phase == TrainingPhase.BASE:
        rate = params.base_growth_below_avg if current < annual_average else params.base_growth_at_avg
        return rate, params.base_increment_band
    if phase == TrainingPhase.BUILD:
        return params.build_growth, params.build_increment_band
    return params.peak_growth, params.peak_increment_band


def _grow(
    current: float,
    cap: float,
    rate: float,
    band: Tuple[float, float],
    params: PlanningParams
) -> float:
    if current >= cap:
        # Ceiling reached: slow residual growth, no band clamp
        volume = current * (1 + params.residual_growth_rate)
    else:
        increment = clamp(current * rate, band[0], band[1])
        volume = min(current + increment, cap)
    return min(volume, params.absolute_cap_km)


def compute_volume_schedule(
    allocation: PhaseAllocation,
    starting_volume: float,
    annual_average: float,
    recent_4w_average: float,
    params: Optional[PlanningParams] = None
) -> List[WeekRecord]:
    """
    Generate the weekly volume schedule for a phase allocation.

    Per phase:
        Base:  +20% below annual average / +10% at or above, band [5, 20] km,
               last week is a deload at 75%
        Build: +10%, band [5, 15] km, deloads at the allocated weeks (70%)
        Peak:  +5%, band [5, 10] km, no scheduled deloads
        Taper: geometric decay (70% above 100 km pre-taper, else 75%)

    After a deload the next two loaded weeks ramp back to 92% then 100% of
    the pre-deload volume. A deload during the ramp restarts it from the
    current volume. Each phase cap grows by 2 km per deload already seen in
    the phase. Once a cap is reached growth continues at 3%/week.

    Args:
        allocation: Phase allocation for the cycle
        starting_volume: Current weekly volume (km)
        annual_average: Average weekly volume over the last year (km)
        recent_4w_average: Average weekly volume of the last 4 weeks (km)
        params: Planning parameters

    Returns:
        Ordered list of WeekRecord
    """
    params = resolve_params(params)
    schedule: List[WeekRecord] = []
    if not allocation.valid:
        return schedule

    global_ceiling = compute_global_ceiling(annual_average, allocation.distance, params)
    state = _ScheduleState(starting_volume)
    week = 1

    for phase, n_weeks in allocation.phase_sequence():
        if phase == TrainingPhase.TAPER:
            decay = (
                params.taper_decay_high_volume
                if state.current > params.taper_high_volume_km
                else params.taper_decay_default
            )
            volume = state.current
            for _ in range(n_weeks):
                volume = round(volume * decay, 1)
                schedule.append(WeekRecord(week=week, phase=phase, volume=volume))
                week += 1
            state.current = volume
            continue

        reference = trailing_average(
            schedule, params.trailing_average_weeks, default=recent_4w_average
        )
        phase_cap = compute_phase_cap(reference, global_ceiling, params)
        deload_weeks = set(allocation.deloads_for(phase))
        deloads_seen = 0

        logger.debug(
            "Volume phase start",
            phase=phase.value,
            reference=round(reference, 1),
            phase_cap=round(phase_cap, 1),
        )

        for week_in_phase in range(1, n_weeks + 1):
            cap = min(
                phase_cap + params.deload_cap_slack_km * deloads_seen,
                params.absolute_cap_km,
            )
            is_deload = week_in_phase in deload_weeks

            if is_deload:
                volume = state.deload(params.deload_fraction_for(phase))
                deloads_seen += 1
            elif state.ramp != RampState.FREEFORM:
                volume = state.ramp_back(params.ramp_back_fractions, cap)
            else:
                rate, band = _growth_settings(phase, state.current, annual_average, params)
                volume = _grow(state.current, cap, rate, band, params)

            volume = round(max(volume, 0.0), 1)
            schedule.append(WeekRecord(week=week, phase=phase, volume=volume, is_deload=is_deload))
            if not is_deload:
                state.current = volume
            week += 1

    return schedule
