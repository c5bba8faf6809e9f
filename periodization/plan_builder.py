"""
Plan Building: turning target races and training history into cycles.

One cycle is built per priority race, back to back, each separated from the
previous race by a distance-dependent recovery period. Without a priority
race the plan is a single continuous Base + Build cycle.

Spacing problems are reported as warnings; the plan is always built.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional, Dict, Any, List, Mapping, Sequence, Union
import math

from loguru import logger

from .config import PlanningParams, RaceDistance, resolve_params
from .phases import PhaseAllocation, allocate_continuous, allocate_phases
from .volume import (
    WeekRecord,
    compute_annual_average,
    compute_starting_volume,
    compute_volume_schedule,
)


CYCLE_CONTINUOUS = "continuous"
CYCLE_FULL = "full_cycle"


class ObjectivePriority(Enum):
    """Priority tier of a target race. Only PRIORITY races shape cycles."""
    PRIORITY = "priority"
    SECONDARY = "secondary"
    AUXILIARY = "auxiliary"


@dataclass
class Objective:
    """A target race declared by the athlete."""
    race_date: date
    distance: RaceDistance
    priority: ObjectivePriority = ObjectivePriority.PRIORITY
    name: str = ""

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> 'Objective':
        race_date = d['date']
        if isinstance(race_date, str):
            race_date = date.fromisoformat(race_date)
        return cls(
            race_date=_as_date(race_date),
            distance=RaceDistance.parse(d['distance']),
            priority=ObjectivePriority(d.get('priority', ObjectivePriority.PRIORITY.value)),
            name=d.get('name', ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.race_date.isoformat(),
            'distance': self.distance.value,
            'priority': self.priority.value,
            'name': self.name,
        }


@dataclass
class AthleteHistory:
    """Recent training volume used to seed the first cycle (km)."""
    year_km: float = 2000.0
    avg4w_km: float = 40.0
    last_week_km: float = 40.0

    @classmethod
    def from_raw(
        cls,
        raw: Mapping[str, Any],
        params: Optional[PlanningParams] = None
    ) -> 'AthleteHistory':
        """
        Build history from loosely typed input.

        Missing or non-numeric fields fall back to the defaults in ``params``.
        """
        params = resolve_params(params)
        defaults = {
            'year_km': params.default_year_km,
            'avg4w_km': params.default_avg4w_km,
            'last_week_km': params.default_last_week_km,
        }
        values = {}
        for key, default in defaults.items():
            values[key] = _coerce_volume(raw.get(key), default, key)
        return cls(**values)

    @property
    def starting_volume(self) -> float:
        return compute_starting_volume(self.avg4w_km, self.last_week_km)

    @property
    def annual_average(self) -> float:
        return compute_annual_average(self.year_km)


@dataclass
class Cycle:
    """One training cycle: allocation, volume schedule and start date."""
    objective: Optional[Objective]
    allocation: PhaseAllocation
    schedule: List[WeekRecord]
    start_date: date
    cycle_type: str = CYCLE_FULL

    @property
    def n_weeks(self) -> int:
        return len(self.schedule)

    def week_start(self, week: int) -> date:
        """Calendar start date of a 1-based cycle week."""
        return self.start_date + timedelta(weeks=week - 1)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'objective': self.objective.to_dict() if self.objective else None,
            'allocation': self.allocation.to_dict(),
            'schedule': [r.to_dict() for r in self.schedule],
            'start_date': self.start_date.isoformat(),
            'cycle_type': self.cycle_type,
        }


@dataclass
class Plan:
    """Ordered cycles plus advisory warnings."""
    cycles: List[Cycle] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def total_weeks(self) -> int:
        return sum(c.n_weeks for c in self.cycles)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cycles': [c.to_dict() for c in self.cycles],
            'warnings': list(self.warnings),
        }


def weeks_between(start: date, end: date) -> int:
    """Whole weeks from ``start`` to ``end`` (floored)."""
    return math.floor((end - start).days / 7)


def build_plan(
    start_date: date,
    objectives: Sequence[Union[Objective, Mapping[str, Any]]],
    history: Union[AthleteHistory, Mapping[str, Any], None] = None,
    params: Optional[PlanningParams] = None
) -> Plan:
    """
    Build a multi-cycle plan from target races and training history.

    Args:
        start_date: First day of the plan
        objectives: Target races (any priority tier)
        history: Athlete history, or a raw mapping to coerce
        params: Planning parameters

    Returns:
        Plan with one cycle per priority race, or one continuous cycle

    Raises:
        TypeError: If start_date is not a date
    """
    params = resolve_params(params)
    start_date = _as_date(start_date)

    if history is None:
        history = AthleteHistory.from_raw({}, params)
    elif not isinstance(history, AthleteHistory):
        history = AthleteHistory.from_raw(history, params)

    parsed = [o if isinstance(o, Objective) else Objective.from_dict(o) for o in objectives]
    priority = sorted(
        (o for o in parsed if o.priority == ObjectivePriority.PRIORITY),
        key=lambda o: o.race_date,
    )

    starting_volume = history.starting_volume
    annual_average = history.annual_average
    plan = Plan()

    if not priority:
        allocation = allocate_continuous(params.continuous_plan_weeks, params)
        schedule = compute_volume_schedule(
            allocation, starting_volume, annual_average, history.avg4w_km, params
        )
        plan.cycles.append(Cycle(
            objective=None,
            allocation=allocation,
            schedule=schedule,
            start_date=start_date,
            cycle_type=CYCLE_CONTINUOUS,
        ))
        _warn(plan, "No priority objective: continuous Base + Build plan.")
        return plan

    _check_spacing(plan, start_date, priority, params)

    plan_total_weeks = weeks_between(start_date, priority[-1].race_date)
    cycle_start = start_date
    current_volume = starting_volume

    for i, objective in enumerate(priority):
        cycle_weeks = weeks_between(cycle_start, objective.race_date)
        allocation = allocate_phases(
            cycle_weeks,
            objective.distance,
            current_volume * params.estimated_peak_factor,
            is_first_cycle=(i == 0),
            plan_total_weeks=plan_total_weeks,
            params=params,
        )
        for message in allocation.warnings:
            plan.warnings.append(f"{objective.distance.value} on {objective.race_date.isoformat()}: {message}")

        schedule = compute_volume_schedule(
            allocation, current_volume, annual_average, history.avg4w_km, params
        )
        if schedule:
            current_volume = schedule[-1].volume * params.next_cycle_volume_factor

        plan.cycles.append(Cycle(
            objective=objective,
            allocation=allocation,
            schedule=schedule,
            start_date=cycle_start,
            cycle_type=CYCLE_FULL,
        ))
        logger.info(
            "Built cycle",
            distance=objective.distance.value,
            weeks=len(schedule),
            start=cycle_start.isoformat(),
        )

        cycle_start = objective.race_date + timedelta(days=params.recovery_days_for(objective.distance))

    return plan


def _check_spacing(
    plan: Plan,
    start_date: date,
    priority: List[Objective],
    params: PlanningParams
):
    first = priority[0]
    lead_weeks = weeks_between(start_date, first.race_date)
    if lead_weeks < params.min_weeks_before_priority:
        _warn(plan, (
            f"Objective {first.distance.value} on {first.race_date.isoformat()}: "
            f"only {lead_weeks} weeks away. Minimum required: {params.min_weeks_before_priority}."
        ))

    for previous, current in zip(priority, priority[1:]):
        recovery_end = previous.race_date + timedelta(days=params.recovery_days_for(previous.distance))
        gap = weeks_between(recovery_end, current.race_date)
        if gap < params.min_weeks_between_priority:
            _warn(plan, (
                f"Insufficient spacing: {previous.distance.value} -> {current.distance.value}, "
                f"only {gap} weeks after recovery. Minimum: {params.min_weeks_between_priority}."
            ))


def _coerce_volume(value: Any, default: float, name: str) -> float:
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning("Non-numeric history value, using default", field=name, value=repr(value), default=default)
        return default
    if math.isnan(number) or number < 0:
        logger.warning("Invalid history value, using default", field=name, value=number, default=default)
        return default
    return number


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected a date, got {type(value).__name__}")


def _warn(plan: Plan, message: str):
    plan.warnings.append(message)
    logger.warning(message)
