"""
Running training periodization and session generation.

This package turns race objectives and recent training history into a
week-by-week plan:
- Fitness index and pace zones from a reference race
- Phase allocation (Base, Build, Peak, Taper) with graceful degradation
- Weekly volume schedule with deloads, caps and taper decay
- Multi-objective plan orchestration
- Session slots, template resolution, volume distribution and day assignment
"""

# Parameters
from .config import (
    RaceDistance,
    TrainingPhase,
    PHASE_ORDER,
    PlanningParams,
    DEFAULT_PARAMS,
    load_params,
)

# Fitness index and pace zones
from .fitness import (
    PaceZoneName,
    PaceZone,
    parse_time_to_seconds,
    compute_fitness_index,
    fitness_index_from_race,
    compute_all_pace_zones,
    format_pace,
    format_pace_range,
)

# Phase allocation
from .phases import (
    PhaseAllocation,
    compute_taper,
    compute_build_deloads,
    allocate_phases,
    allocate_continuous,
)

# Volume schedule
from .volume import (
    RampState,
    WeekRecord,
    compute_starting_volume,
    compute_annual_average,
    compute_global_ceiling,
    compute_phase_boundaries,
    compute_volume_schedule,
)

# Plan orchestration
from .plan_builder import (
    ObjectivePriority,
    Objective,
    AthleteHistory,
    Cycle,
    Plan,
    build_plan,
)

# Sessions
from .slots import SlotRole, SessionSlot, build_session_slots
from .sessions import SessionType, WorkoutBlock, Session
from .resolver import RepetitionMemory, resolve_slot, resolve_week
from .distribution import distribute_volume
from .scheduling import DayOfWeek, assign_days, format_weekly_schedule
from .week_generator import (
    Availability,
    WeeklyPlanEntry,
    generate_week,
    generate_weekly_plan,
)

__all__ = [
    # Parameters
    'RaceDistance',
    'TrainingPhase',
    'PHASE_ORDER',
    'PlanningParams',
    'DEFAULT_PARAMS',
    'load_params',
    # Fitness
    'PaceZoneName',
    'PaceZone',
    'parse_time_to_seconds',
    'compute_fitness_index',
    'fitness_index_from_race',
    'compute_all_pace_zones',
    'format_pace',
    'format_pace_range',
    # Phases
    'PhaseAllocation',
    'compute_taper',
    'compute_build_deloads',
    'allocate_phases',
    'allocate_continuous',
    # Volume
    'RampState',
    'WeekRecord',
    'compute_starting_volume',
    'compute_annual_average',
    'compute_global_ceiling',
    'compute_phase_boundaries',
    'compute_volume_schedule',
    # Plan
    'ObjectivePriority',
    'Objective',
    'AthleteHistory',
    'Cycle',
    'Plan',
    'build_plan',
    # Sessions
    'SlotRole',
    'SessionSlot',
    'build_session_slots',
    'SessionType',
    'WorkoutBlock',
    'Session',
    'RepetitionMemory',
    'resolve_slot',
    'resolve_week',
    'distribute_volume',
    'DayOfWeek',
    'assign_days',
    'format_weekly_schedule',
    'Availability',
    'WeeklyPlanEntry',
    'generate_week',
    'generate_weekly_plan',
]
