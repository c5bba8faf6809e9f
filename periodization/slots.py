"""
Session Slots: the abstract shape of a training week.

Before any workout is chosen, a week is described as a list of slots. Each
slot has a role, a workout category, a target effort with a hard ceiling,
and the share of weekly volume it should carry (0 for sessions that split
whatever volume is left).

Rules:
- Exactly one long run per week
- Quality slots scale with session count (at most 2)
- Quality effort rises with progress through the phase, under fixed ceilings
- Deload weeks drop quality slots and cap every effort at 4
- Remaining slots are recovery/easy runs alternating long and short
"""

from dataclasses import dataclass
from enum import Enum
import math
from typing import Optional, Dict, Any, List, Tuple

from library.templates import WorkoutCategory

from .config import PlanningParams, RaceDistance, TrainingPhase, resolve_params


class SlotRole(Enum):
    """Role of a session within the week."""
    LONG_RUN = "long_run"
    HIGH_QUALITY = "high_quality"
    LOW_QUALITY = "low_quality"
    RECOVERY = "recovery"
    EASY = "easy"


QUALITY_ROLES = {SlotRole.HIGH_QUALITY, SlotRole.LOW_QUALITY}

EASY_LONG = "long"
EASY_SHORT = "short"


@dataclass
class SessionSlot:
    """
    Abstract description of one session of the week.

    Attributes:
        role: Role in the week
        category: Workout family to query the library with
        target_effort: Desired perceived effort (1-10)
        max_effort: Effort the resolved session must not exceed
        volume_share: Fraction of weekly volume (0 = share the remainder)
        variant: "long" or "short" for easy/recovery runs
        target_race: Race distance for race-specific workouts
    """
    role: SlotRole
    category: WorkoutCategory
    target_effort: int
    max_effort: int
    volume_share: float = 0.0
    variant: Optional[str] = None
    target_race: Optional[RaceDistance] = None

    @property
    def is_quality(self) -> bool:
        return self.role in QUALITY_ROLES

    @property
    def is_volume_driven(self) -> bool:
        return self.volume_share > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'role': self.role.value,
            'category': self.category.value,
            'target_effort': self.target_effort,
            'max_effort': self.max_effort,
            'volume_share': self.volume_share,
            'variant': self.variant,
            'target_race': self.target_race.value if self.target_race else None,
        }


def progress_ratio(week_in_phase: int, weeks_in_phase: int) -> float:
    """Position in the phase: 0.0 on the first week, 1.0 on the last."""
    if weeks_in_phase <= 1:
        return 0.0
    ratio = (week_in_phase - 1) / (weeks_in_phase - 1)
    return max(0.0, min(1.0, ratio))


def count_quality_slots(
    phase: TrainingPhase,
    n_sessions: int,
    is_deload: bool = False,
    params: Optional[PlanningParams] = None
) -> int:
    """
    Number of quality sessions for a week.

    Base needs 3 sessions for one quality slot, other phases need 2.
    Five sessions allow two. Taper keeps at most one.
    """
    params = resolve_params(params)
    if is_deload:
        return 0

    minimum = (
        params.base_min_sessions_for_quality
        if phase == TrainingPhase.BASE
        else params.min_sessions_for_quality
    )
    if n_sessions < minimum:
        count = 0
    elif n_sessions < params.min_sessions_for_two_quality:
        count = 1
    else:
        count = 2

    if phase == TrainingPhase.TAPER:
        count = min(count, 1)
    return min(count, max(0, n_sessions - 1))


def quality_categories(
    phase: TrainingPhase,
    week_in_phase: int = 1
) -> Tuple[WorkoutCategory, WorkoutCategory]:
    """(high-quality, low-quality) workout categories for a phase."""
    if phase == TrainingPhase.BASE:
        return WorkoutCategory.VO2_SHORT, WorkoutCategory.TEMPO
    if phase == TrainingPhase.BUILD:
        high = WorkoutCategory.VO2_LONG if week_in_phase % 2 == 0 else WorkoutCategory.VO2_SHORT
        return high, WorkoutCategory.THRESHOLD
    if phase == TrainingPhase.PEAK:
        return WorkoutCategory.RACE_SPECIFIC, WorkoutCategory.TEMPO
    return WorkoutCategory.RACE_SPECIFIC, WorkoutCategory.TEMPO


def high_quality_ceiling(
    week_volume: float,
    params: Optional[PlanningParams] = None
) -> int:
    """Effort ceiling of the high-quality slot (9 from 50 km/week, else 8)."""
    params = resolve_params(params)
    if week_volume >= params.high_volume_threshold_km:
        return params.high_quality_effort_ceiling_high_volume
    return params.high_quality_effort_ceiling


def interpolate_effort(effort_range: Tuple[int, int], ratio: float) -> int:
    low, high = effort_range
    return math.floor(low + ratio * (high - low) + 0.5)


def long_run_share(
    phase: TrainingPhase,
    n_sessions: int,
    params: Optional[PlanningParams] = None
) -> float:
    params = resolve_params(params)
    if n_sessions <= 1:
        return 1.0
    if n_sessions == 2:
        return params.long_run_share_two_sessions
    return params.long_run_share[phase.value]


def build_session_slots(
    phase: TrainingPhase,
    ratio: float,
    n_sessions: int,
    is_deload: bool = False,
    distance: Optional[RaceDistance] = None,
    week_volume: float = 0.0,
    week_in_phase: int = 1,
    params: Optional[PlanningParams] = None
) -> List[SessionSlot]:
    """
    Build the ordered slot list for one week.

    Order: long run, high-quality, low-quality, then recovery/easy fillers.

    Args:
        phase: Training phase of the week
        ratio: Progress through the phase (0-1)
        n_sessions: Number of sessions this week
        is_deload: Whether the week is a deload week
        distance: Target race distance
        week_volume: Scheduled weekly volume (km)
        week_in_phase: 1-based week within the phase
        params: Planning parameters

    Returns:
        List of exactly ``n_sessions`` slots
    """
    params = resolve_params(params)
    if n_sessions <= 0:
        return []

    ratio = max(0.0, min(1.0, ratio))
    slots: List[SessionSlot] = []

    # Long run
    long_effort = params.long_run_effort[phase.value]
    if is_deload:
        long_effort = params.deload_long_run_effort
    slots.append(SessionSlot(
        role=SlotRole.LONG_RUN,
        category=WorkoutCategory.LONG_RUN,
        target_effort=long_effort,
        max_effort=min(long_effort + 1, params.deload_effort_ceiling) if is_deload else long_effort,
        volume_share=long_run_share(phase, n_sessions, params),
    ))

    # Quality
    n_quality = count_quality_slots(phase, n_sessions, is_deload, params)
    high_category, low_category = quality_categories(phase, week_in_phase)

    if n_quality == 2 or (n_quality == 1 and phase != TrainingPhase.BASE):
        ceiling = high_quality_ceiling(week_volume, params)
        effort = interpolate_effort(params.high_quality_effort_range[phase.value], ratio)
        slots.append(SessionSlot(
            role=SlotRole.HIGH_QUALITY,
            category=high_category,
            target_effort=min(effort, ceiling),
            max_effort=ceiling,
            volume_share=params.high_quality_share,
            target_race=distance if high_category == WorkoutCategory.RACE_SPECIFIC else None,
        ))

    if n_quality == 2 or (n_quality == 1 and phase == TrainingPhase.BASE):
        ceiling = params.low_quality_effort_ceiling
        effort = interpolate_effort(params.low_quality_effort_range[phase.value], ratio)
        slots.append(SessionSlot(
            role=SlotRole.LOW_QUALITY,
            category=low_category,
            target_effort=min(effort, ceiling),
            max_effort=ceiling,
            volume_share=params.low_quality_share,
        ))

    # Fillers
    n_fillers = n_sessions - len(slots)
    easy_index = 0
    for i in range(n_fillers):
        if i == 0 and phase in (TrainingPhase.BUILD, TrainingPhase.PEAK):
            slots.append(SessionSlot(
                role=SlotRole.RECOVERY,
                category=WorkoutCategory.EASY,
                target_effort=params.recovery_effort,
                max_effort=params.recovery_effort,
                variant=EASY_SHORT,
            ))
            continue

        variant = EASY_LONG if easy_index % 2 == 0 else EASY_SHORT
        easy_index += 1
        slots.append(SessionSlot(
            role=SlotRole.EASY,
            category=WorkoutCategory.EASY,
            target_effort=params.easy_effort,
            max_effort=params.easy_effort,
            variant=variant,
        ))

    if is_deload:
        for slot in slots:
            slot.max_effort = min(slot.max_effort, params.deload_effort_ceiling)
            slot.target_effort = min(slot.target_effort, slot.max_effort)

    return slots
