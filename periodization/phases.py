"""
Phase Allocation: splitting a training cycle into Base / Build / Peak / Taper.

Based on:
- Bompa, T. & Haff, G. (2009). Periodization: Theory and Methodology of Training
- Pfitzinger, P. & Douglas, S. (2009). Advanced Marathoning

The allocator never raises for short or awkward cycles. It degrades the
allocation step by step (shorter Peak, no Taper, no Peak) and records a
warning for each degradation; a cycle under the minimum length is returned
with ``valid=False``.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Tuple

from loguru import logger

from .config import (
    PHASE_ORDER,
    PlanningParams,
    RaceDistance,
    TrainingPhase,
    resolve_params,
)


TAPER_NONE = "none"
TAPER_STANDARD = "standard"
TAPER_EXTENDED = "extended"


@dataclass
class PhaseAllocation:
    """
    Week counts per phase for one training cycle.

    Deload indices are 1-based week numbers within their phase.
    """
    total_weeks: int
    distance: RaceDistance
    base: int = 0
    build: int = 0
    peak: int = 0
    taper: int = 0
    taper_type: str = TAPER_NONE
    base_deloads: List[int] = field(default_factory=list)
    build_deloads: List[int] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    valid: bool = True

    @property
    def allocated_weeks(self) -> int:
        return self.base + self.build + self.peak + self.taper

    def weeks_for(self, phase: TrainingPhase) -> int:
        return {
            TrainingPhase.BASE: self.base,
            TrainingPhase.BUILD: self.build,
            TrainingPhase.PEAK: self.peak,
            TrainingPhase.TAPER: self.taper,
        }[phase]

    def deloads_for(self, phase: TrainingPhase) -> List[int]:
        if phase == TrainingPhase.BASE:
            return self.base_deloads
        if phase == TrainingPhase.BUILD:
            return self.build_deloads
        return []

    def phase_sequence(self) -> List[Tuple[TrainingPhase, int]]:
        """Phases in order with their week counts, skipping empty phases."""
        return [(p, self.weeks_for(p)) for p in PHASE_ORDER if self.weeks_for(p) > 0]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_weeks': self.total_weeks,
            'distance': self.distance.value,
            'base': self.base,
            'build': self.build,
            'peak': self.peak,
            'taper': self.taper,
            'taper_type': self.taper_type,
            'base_deloads': list(self.base_deloads),
            'build_deloads': list(self.build_deloads),
            'warnings': list(self.warnings),
            'valid': self.valid,
        }


def compute_taper(
    distance: RaceDistance,
    estimated_peak_volume: float,
    params: Optional[PlanningParams] = None
) -> Tuple[int, str]:
    """
    Taper length and type for a race distance.

    Longer races at high estimated peak volume get the extended taper.

    Returns:
        Tuple of (weeks, taper_type)
    """
    params = resolve_params(params)
    short_weeks, long_weeks, threshold = params.taper_profiles[distance.value]

    if long_weeks > short_weeks and estimated_peak_volume >= threshold:
        return long_weeks, TAPER_EXTENDED
    return short_weeks, TAPER_STANDARD


def compute_build_deloads(
    build_weeks: int,
    params: Optional[PlanningParams] = None
) -> List[int]:
    """
    Deload weeks within Build.

    Every ``build_deload_interval``-th week, plus the final Build week.
    When the last two deloads would fall on consecutive weeks the earlier
    one is dropped.
    """
    params = resolve_params(params)
    if build_weeks <= 0:
        return []

    interval = params.build_deload_interval
    deloads = list(range(interval, build_weeks + 1, interval))
    if build_weeks not in deloads:
        deloads.append(build_weeks)

    if len(deloads) >= 2 and deloads[-1] - deloads[-2] <= 1:
        del deloads[-2]

    return deloads


def compute_base_weeks(
    is_first_cycle: bool,
    plan_total_weeks: int,
    params: Optional[PlanningParams] = None
) -> int:
    params = resolve_params(params)
    if is_first_cycle and plan_total_weeks > params.long_plan_threshold_weeks:
        return params.base_weeks_long_first_cycle
    return params.base_weeks_default


def allocate_phases(
    total_weeks: int,
    distance: RaceDistance,
    estimated_peak_volume: float,
    is_first_cycle: bool = True,
    plan_total_weeks: Optional[int] = None,
    params: Optional[PlanningParams] = None
) -> PhaseAllocation:
    """
    Partition a cycle's weeks into Base / Build / Peak / Taper.

    Algorithm:
        1. Reject (valid=False) below ``min_total_weeks``
        2. Warn at or below ``suboptimal_total_weeks``
        3. Base: 6 weeks for a long first cycle, else 4
        4. Taper from distance and estimated peak volume
        5. Ideal = max Peak + min Build + Taper. When it doesn't fit:
           shrink Peak, then drop Taper, then drop Peak
        6. Build deloads every 5th week and on the last Build week

    Args:
        total_weeks: Weeks available in this cycle
        distance: Target race distance
        estimated_peak_volume: Expected Peak-phase weekly volume (km)
        is_first_cycle: Whether this is the athlete's first cycle
        plan_total_weeks: Weeks in the whole plan (defaults to total_weeks)
        params: Planning parameters

    Returns:
        PhaseAllocation (check ``valid`` before use)
    """
    params = resolve_params(params)
    distance = RaceDistance.parse(distance)
    if plan_total_weeks is None:
        plan_total_weeks = total_weeks

    allocation = PhaseAllocation(total_weeks=total_weeks, distance=distance)

    if total_weeks < params.min_total_weeks:
        allocation.valid = False
        _warn(allocation, (
            f"Only {total_weeks} weeks available. "
            f"Minimum required: {params.min_total_weeks} weeks."
        ))
        return allocation

    if total_weeks <= params.suboptimal_total_weeks:
        _warn(allocation, (
            f"{total_weeks}-week plan: not optimal. "
            f"{params.suboptimal_total_weeks + 2} weeks recommended."
        ))

    base_weeks = min(compute_base_weeks(is_first_cycle, plan_total_weeks, params), total_weeks)
    taper_weeks, taper_type = compute_taper(distance, estimated_peak_volume, params)
    max_peak = params.peak_max_weeks[distance.value]
    min_build = params.build_min_weeks[distance.value]

    after_base = total_weeks - base_weeks
    ideal_need = min_build + max_peak + taper_weeks

    if after_base >= ideal_need:
        peak_weeks = max_peak
        build_weeks = after_base - peak_weeks - taper_weeks
    elif after_base - taper_weeks - min_build >= 1:
        # Shrink Peak first
        peak_weeks = after_base - taper_weeks - min_build
        build_weeks = min_build
        _warn(allocation, (
            f"Peak phase shortened to {peak_weeks} weeks "
            f"(ideal {max_peak})."
        ))
    elif after_base - min_build >= 1:
        # Then drop the taper
        peak_weeks = min(after_base - min_build, max_peak)
        build_weeks = after_base - peak_weeks
        taper_weeks = 0
        _warn(allocation, "Not enough time for a taper.")
    elif after_base >= min_build:
        # Then drop the Peak phase
        peak_weeks = 0
        build_weeks = after_base
        taper_weeks = 0
        _warn(allocation, "Not enough time for the peak phase and the taper.")
    else:
        peak_weeks = 0
        build_weeks = after_base
        taper_weeks = 0
        _warn(allocation, "Very compressed plan. Base and minimal Build only.")

    if peak_weeks < 1:
        taper_weeks = 0

    allocation.base = base_weeks
    allocation.build = build_weeks
    allocation.peak = peak_weeks
    allocation.taper = taper_weeks
    allocation.taper_type = taper_type if taper_weeks > 0 else TAPER_NONE
    allocation.base_deloads = [base_weeks] if base_weeks > 0 else []
    allocation.build_deloads = compute_build_deloads(build_weeks, params)

    if allocation.allocated_weeks != total_weeks:
        _warn(allocation, (
            f"Allocation mismatch: {allocation.allocated_weeks} "
            f"vs {total_weeks} weeks."
        ))

    logger.debug(
        "Allocated phases",
        distance=distance.value,
        base=base_weeks,
        build=build_weeks,
        peak=peak_weeks,
        taper=taper_weeks,
    )
    return allocation


def allocate_continuous(
    total_weeks: int,
    params: Optional[PlanningParams] = None
) -> PhaseAllocation:
    """
    Base + Build only allocation for plans without a priority race.

    Build takes every week after Base and carries the regular deload pattern.
    """
    params = resolve_params(params)
    distance = RaceDistance.parse(params.continuous_distance)
    base_weeks = min(compute_base_weeks(True, total_weeks, params), total_weeks)
    build_weeks = total_weeks - base_weeks

    return PhaseAllocation(
        total_weeks=total_weeks,
        distance=distance,
        base=base_weeks,
        build=build_weeks,
        taper_type=TAPER_NONE,
        base_deloads=[base_weeks] if base_weeks > 0 else [],
        build_deloads=compute_build_deloads(build_weeks, params),
    )


def _warn(allocation: PhaseAllocation, message: str):
    allocation.warnings.append(message)
    logger.warning(message)
