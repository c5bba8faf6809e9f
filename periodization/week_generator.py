"""
Week Generation: from a volume schedule to dated, seven-day weeks.

For every scheduled week the pipeline runs

    slots -> resolved sessions -> distributed volume -> assigned days

and carries the anti-repetition memory from one week to the next. Deload
weeks are scaled down once the pipeline is done.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional, Dict, Any, List, Mapping, Tuple, Union

from loguru import logger

from library.catalog import default_library
from library.templates import TemplateLibrary

from .config import PlanningParams, TrainingPhase, resolve_params
from .fitness import PaceZones
from .plan_builder import Cycle, Plan
from .resolver import RepetitionMemory, resolve_week
from .scheduling import DayOfWeek, assign_days, parse_days
from .sessions import PHASE_OBJECTIVES, Session, scale_session
from .slots import build_session_slots, progress_ratio
from .distribution import distribute_volume
from .volume import WeekRecord, compute_phase_boundaries


DEFAULT_TRAINING_DAYS = ("TUESDAY", "THURSDAY", "SATURDAY", "SUNDAY")

DELOAD_NOTE = "Deload week: distances reduced to absorb the previous weeks."


@dataclass
class Availability:
    """Sessions per week and the weekdays the athlete can train."""
    sessions_per_week: int = 4
    training_days: List[DayOfWeek] = field(
        default_factory=lambda: [DayOfWeek.parse(d) for d in DEFAULT_TRAINING_DAYS]
    )

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> 'Availability':
        """
        Build availability from loosely typed input.

        Raises:
            ValueError: If a training day is not a weekday name
        """
        days = raw.get('training_days')
        return cls(
            sessions_per_week=int(raw.get('sessions_per_week', 4)),
            training_days=(
                sorted(parse_days(days), key=lambda d: d.value)
                if days is not None
                else [DayOfWeek.parse(d) for d in DEFAULT_TRAINING_DAYS]
            ),
        )

    @property
    def effective_sessions(self) -> int:
        """Session count, reduced to the number of available days."""
        return max(0, min(self.sessions_per_week, len(set(self.training_days))))


@dataclass
class WeeklyPlanEntry:
    """One generated week, ready for display or persistence."""
    cycle_index: int
    week: int
    plan_week: int
    phase: TrainingPhase
    volume: float
    is_deload: bool
    sessions: List[Session]
    week_start: date
    week_end: date
    objective: str = ""

    @property
    def training_sessions(self) -> List[Session]:
        return [s for s in self.sessions if not s.is_rest]

    @property
    def total_distance(self) -> float:
        return round(sum(s.distance_km for s in self.training_sessions), 1)

    @property
    def total_distance_range(self) -> Tuple[int, int]:
        """(low, high) whole km; the spread is 10% capped at 5 km."""
        low = int(round(self.total_distance))
        return low, low + min(5, int(round(low * 0.1)))

    def to_dict(self) -> Dict[str, Any]:
        low, high = self.total_distance_range
        return {
            'cycle_index': self.cycle_index,
            'week': self.week,
            'plan_week': self.plan_week,
            'phase': self.phase.value,
            'volume': self.volume,
            'is_deload': self.is_deload,
            'sessions': [s.to_dict() for s in self.sessions],
            'total_distance': {'low': low, 'high': high},
            'week_start': self.week_start.isoformat(),
            'week_end': self.week_end.isoformat(),
            'objective': self.objective,
        }


def generate_week(
    record: WeekRecord,
    cycle: Cycle,
    week_in_phase: int,
    weeks_in_phase: int,
    availability: Availability,
    zones: Optional[PaceZones],
    library: TemplateLibrary,
    memory: RepetitionMemory,
    week_start: date,
    params: Optional[PlanningParams] = None,
    previous_day: Optional[Session] = None
) -> Tuple[List[Session], RepetitionMemory]:
    """
    Run the slot -> resolve -> distribute -> assign pipeline for one week.

    ``previous_day`` is the last session of the preceding week when that
    week ends the day before ``week_start``.

    Returns:
        Tuple of (seven sessions from ``week_start``, updated memory)
    """
    params = resolve_params(params)
    distance = cycle.allocation.distance

    slots = build_session_slots(
        record.phase,
        progress_ratio(week_in_phase, weeks_in_phase),
        availability.effective_sessions,
        is_deload=record.is_deload,
        distance=distance,
        week_volume=record.volume,
        week_in_phase=week_in_phase,
        params=params,
    )
    sessions, memory = resolve_week(
        slots, record.phase, week_in_phase, weeks_in_phase, zones, library, memory
    )
    distribute_volume(sessions, record.volume, distance, record.phase, zones, params)

    if record.is_deload:
        sessions = [scale_session(s, params.deload_session_scale, zones) for s in sessions]
        for session in sessions:
            session.notes = f"{session.notes} {DELOAD_NOTE}".strip()

    week = assign_days(sessions, availability.training_days, week_start, previous_day)
    return week, memory


def generate_weekly_plan(
    plan: Plan,
    availability: Union[Availability, Mapping[str, Any], None] = None,
    zones: Optional[PaceZones] = None,
    start_date: Optional[date] = None,
    library: Optional[TemplateLibrary] = None,
    params: Optional[PlanningParams] = None
) -> List[WeeklyPlanEntry]:
    """
    Generate dated weekly plans for every cycle of a plan.

    Args:
        plan: Plan from ``build_plan``
        availability: Sessions per week and training days
        zones: Athlete pace zones (from ``compute_all_pace_zones``)
        start_date: Overrides the plan start; every cycle shifts by the
            same offset
        library: Template library (defaults to the built-in catalog)
        params: Planning parameters

    Returns:
        One entry per scheduled week, in order
    """
    params = resolve_params(params)
    if not plan.cycles:
        return []

    if availability is None:
        availability = Availability()
    elif not isinstance(availability, Availability):
        availability = Availability.from_raw(availability)
    if availability.effective_sessions < availability.sessions_per_week:
        logger.info(
            "Session count reduced to available days",
            requested=availability.sessions_per_week,
            days=len(set(availability.training_days)),
        )

    library = library if library is not None else default_library()
    offset = timedelta(0)
    if start_date is not None:
        offset = start_date - plan.cycles[0].start_date

    memory = RepetitionMemory()
    entries: List[WeeklyPlanEntry] = []
    plan_week = 0

    for cycle_index, cycle in enumerate(plan.cycles):
        boundaries = compute_phase_boundaries(cycle.schedule)
        for idx, record in enumerate(cycle.schedule):
            plan_week += 1
            phase_start, phase_length = boundaries[record.phase]
            week_start = cycle.week_start(record.week) + offset
            previous_day = None
            if entries and entries[-1].week_end + timedelta(days=1) == week_start:
                previous_day = entries[-1].sessions[-1]

            week, memory = generate_week(
                record,
                cycle,
                idx - phase_start + 1,
                phase_length,
                availability,
                zones,
                library,
                memory,
                week_start,
                params,
                previous_day,
            )
            entries.append(WeeklyPlanEntry(
                cycle_index=cycle_index,
                week=record.week,
                plan_week=plan_week,
                phase=record.phase,
                volume=record.volume,
                is_deload=record.is_deload,
                sessions=week,
                week_start=week_start,
                week_end=week_start + timedelta(days=6),
                objective=PHASE_OBJECTIVES[record.phase],
            ))

    logger.info("Generated weekly plan", weeks=len(entries), cycles=len(plan.cycles))
    return entries
