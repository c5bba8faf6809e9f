"""
Scheduling and Day Assignment: placing a week's sessions on calendar days.

Based on:
- Hard/easy sequencing: no two hard days back to back
- Weekend long runs, midweek quality

Greedy placement, never backtracking:
    1. Long run on Saturday, else Sunday, else the latest free day
    2. Quality sessions (hardest first) on the best valid day, preferring
       Tuesday-Thursday and never next to the long run or another
       session of effort >= 6
    3. Easy sessions on the first free days
    4. Every other day becomes a rest day

The greedy pass can miss a valid arrangement when sessions are dense
relative to available days; it then takes the first free day.
"""

from datetime import date, timedelta
from enum import Enum
from typing import Optional, Dict, List, Iterable, Set, Union

from loguru import logger

from .sessions import Session


HARD_EFFORT = 6


class DayOfWeek(Enum):
    """Days of the week."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, value: Union['DayOfWeek', str, int]) -> 'DayOfWeek':
        """
        Accept a member, an index (0 = Monday), a full name or a
        three-letter abbreviation, case-insensitive.

        Raises:
            ValueError: If the value names no weekday
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        text = str(value).strip().upper()
        for day in cls:
            if text == day.name or text == day.name[:3]:
                return day
        raise ValueError(f"Unknown weekday: {value!r}")


WEEKEND = [DayOfWeek.SATURDAY, DayOfWeek.SUNDAY]
MIDWEEK = {DayOfWeek.TUESDAY, DayOfWeek.WEDNESDAY, DayOfWeek.THURSDAY}


def parse_days(days: Optional[Iterable[Union[DayOfWeek, str, int]]]) -> Set[DayOfWeek]:
    """Set of weekdays from names, indices or members (all days when None)."""
    if days is None:
        return set(DayOfWeek)
    return {DayOfWeek.parse(d) for d in days}


def week_order(week_start: Optional[date] = None) -> List[DayOfWeek]:
    """Weekdays in calendar order from ``week_start`` (Monday when None)."""
    first = week_start.weekday() if week_start else 0
    return [DayOfWeek((first + i) % 7) for i in range(7)]


def neighbours(day: DayOfWeek, order: Optional[List[DayOfWeek]] = None) -> List[DayOfWeek]:
    """Calendar-adjacent days within the same week (no wraparound)."""
    order = order or list(DayOfWeek)
    i = order.index(day)
    return [order[j] for j in (i - 1, i + 1) if 0 <= j < len(order)]


def is_valid_placement(
    day: DayOfWeek,
    session: Session,
    current_schedule: Dict[DayOfWeek, Session],
    available_days: Set[DayOfWeek],
    order: Optional[List[DayOfWeek]] = None,
    previous_day: Optional[Session] = None
) -> bool:
    """
    Check if placing a workout on a given day is valid.

    Quality sessions may not sit next to the long run or next to another
    session of effort >= 6. ``previous_day`` is the session on the day
    before the week starts and counts as a neighbour of the first day.
    """
    # Must be available
    if day not in available_days:
        return False

    # Day must not already have a workout
    if day in current_schedule:
        return False

    if session.is_quality:
        adjacent = [current_schedule.get(d) for d in neighbours(day, order)]
        if previous_day is not None and day == (order or list(DayOfWeek))[0]:
            adjacent.append(previous_day)
        for other in adjacent:
            if other is None or other.is_rest:
                continue
            if other.is_long_run or other.effort >= HARD_EFFORT:
                return False

    return True


def get_day_preference_score(day: DayOfWeek, session: Session) -> float:
    """
    Preference score for placing a session on a day.

    Returns:
        Preference score (higher = more preferred)
    """
    base_score = 1.0

    # Long runs prefer weekends
    if session.is_long_run and day in WEEKEND:
        base_score += 0.5

    # Hard workouts prefer midweek (Tue/Wed/Thu)
    if session.is_quality and day in MIDWEEK:
        base_score += 0.3

    return base_score


def calculate_proximity_penalty(
    day: DayOfWeek,
    schedule: Dict[DayOfWeek, Session],
    order: Optional[List[DayOfWeek]] = None
) -> float:
    """Small penalty per occupied neighbouring day."""
    return 0.1 * sum(1 for d in neighbours(day, order) if d in schedule)


def _long_run_day(free_days: List[DayOfWeek]) -> Optional[DayOfWeek]:
    for day in WEEKEND:
        if day in free_days:
            return day
    return free_days[-1] if free_days else None


def assign_days(
    sessions: List[Session],
    available_days: Optional[Iterable[Union[DayOfWeek, str, int]]] = None,
    week_start: Optional[date] = None,
    previous_day: Optional[Session] = None
) -> List[Session]:
    """
    Assign sessions to days and fill the week with rest days.

    Args:
        sessions: Sessions of the week (any order)
        available_days: Days the athlete can run (all days when None)
        week_start: Date of the first day of the week (Monday when None)
        previous_day: Session on the day before ``week_start``, if any

    Returns:
        Seven sessions, one per day from ``week_start``, rest days included
    """
    available = parse_days(available_days)
    order = week_order(week_start)
    schedule: Dict[DayOfWeek, Session] = {}

    def free_days() -> List[DayOfWeek]:
        return [d for d in order if d in available and d not in schedule]

    long_runs = [s for s in sessions if s.is_long_run]
    quality = sorted((s for s in sessions if s.is_quality), key=lambda s: -s.effort)
    others = [s for s in sessions if not s.is_long_run and not s.is_quality and not s.is_rest]

    for session in long_runs:
        day = _long_run_day(free_days())
        if day is None:
            logger.warning("No free day left for the long run", title=session.title)
            continue
        schedule[day] = session

    for session in quality:
        best_day = None
        best_score = float('-inf')

        for day in free_days():
            # Check validity
            if not is_valid_placement(day, session, schedule, available, order, previous_day):
                continue

            score = (
                get_day_preference_score(day, session)
                - calculate_proximity_penalty(day, schedule, order)
            )
            if score > best_score:
                best_score = score
                best_day = day

        if best_day is None:
            remaining = free_days()
            if not remaining:
                logger.warning("No free day left for session", title=session.title)
                continue
            best_day = remaining[0]
            logger.warning(
                "No spacing-compliant day for quality session, using first free day",
                title=session.title,
                day=best_day.label,
            )
        schedule[best_day] = session

    for session in others:
        remaining = free_days()
        if not remaining:
            logger.warning("No free day left for session", title=session.title)
            continue
        schedule[remaining[0]] = session

    week: List[Session] = []
    for position, day in enumerate(order):
        day_date = week_start + timedelta(days=position) if week_start else None
        session = schedule.get(day)
        if session is None:
            week.append(Session.rest(day_date, day.label))
            continue
        session.session_date = day_date
        session.weekday = day.label
        week.append(session)

    return week


def format_weekly_schedule(week: List[Session]) -> str:
    """Format a seven-day week as text lines."""
    lines = []
    for session in week:
        day = (session.weekday or "")[:3]
        if session.is_rest:
            lines.append(f"  {day:<4} Rest")
            continue
        lines.append(
            f"  {day:<4} {session.title:<32} {session.distance_km:>5.1f} km  "
            f"{session.duration_text:>6}  effort {session.effort}"
        )
    return "\n".join(lines)
