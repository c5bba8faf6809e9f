"""
Volume Distribution: spreading the weekly volume over resolved sessions.

Algorithm:
    1. Long run: min(week volume x share, distance cap), then capped again
       so its duration at easy pace stays under the phase limit
    2. Other volume-driven sessions: week volume x share
    3. The remainder goes to easy/recovery sessions, weighted 1.6 for
       "long" variants and 1.0 for "short" ones
    4. No session runs longer than the long run; volume left over tops up
       the long run to its cap, the rest is dropped
    5. Durations of distance-based sessions are recomputed
"""

from typing import Optional, List

from loguru import logger

from .config import PlanningParams, RaceDistance, TrainingPhase, resolve_params
from .fitness import PaceZoneName, PaceZones
from .sessions import Session, apply_distance, zone_mid_pace
from .slots import EASY_LONG, SlotRole


def long_run_cap_km(
    distance: RaceDistance,
    phase: TrainingPhase,
    zones: Optional[PaceZones],
    params: Optional[PlanningParams] = None
) -> float:
    """
    Longest allowed long run: the distance cap, or the phase duration limit
    converted to km at easy mid pace, whichever is shorter.
    """
    params = resolve_params(params)
    distance_cap = params.long_run_cap_km[distance.value]
    max_minutes = params.long_run_max_minutes[distance.value][phase.value]
    easy_pace = zone_mid_pace(zones, PaceZoneName.EASY)
    duration_cap = max_minutes * 60 / easy_pace
    return min(distance_cap, duration_cap)


def easy_weight(session: Session, params: Optional[PlanningParams] = None) -> float:
    params = resolve_params(params)
    if session.variant == EASY_LONG:
        return params.easy_long_weight
    return params.easy_short_weight


def _fill_remainder(
    fillers: List[Session],
    remaining: float,
    cap: float,
    zones: Optional[PaceZones],
    params: PlanningParams
) -> float:
    """
    Split ``remaining`` among fillers by weight, none above ``cap``.

    Volume a capped filler cannot take moves to the others.

    Returns:
        Volume left over once every filler is at the cap
    """
    pending = sorted(fillers, key=lambda s: -easy_weight(s, params))
    while pending:
        total_weight = sum(easy_weight(s, params) for s in pending)
        head = pending[0]
        km = remaining * easy_weight(head, params) / total_weight if total_weight > 0 else 0.0
        if km <= cap:
            break
        apply_distance(head, cap, zones)
        remaining -= head.distance_km
        pending.pop(0)

    if not pending:
        return max(0.0, remaining)

    total_weight = sum(easy_weight(s, params) for s in pending)
    for session in pending:
        share = easy_weight(session, params) / total_weight if total_weight > 0 else 0.0
        apply_distance(session, remaining * share, zones)
    return 0.0


def distribute_volume(
    sessions: List[Session],
    week_volume: float,
    distance: RaceDistance,
    phase: TrainingPhase,
    zones: Optional[PaceZones] = None,
    params: Optional[PlanningParams] = None
) -> List[Session]:
    """
    Assign a distance to every session of the week.

    No session is longer than the long run. Volume that fits nowhere goes
    to the long run up to its cap; anything beyond that is dropped.

    Sessions are updated in place and returned for chaining.

    Args:
        sessions: Resolved sessions (slot order)
        week_volume: Weekly target volume (km)
        distance: Target race distance (long-run caps)
        phase: Training phase (long-run duration limit)
        zones: Athlete pace zones
        params: Planning parameters

    Returns:
        The same sessions with distances and durations set
    """
    params = resolve_params(params)
    cap = long_run_cap_km(distance, phase, zones, params)
    long_run = next((s for s in sessions if s.role == SlotRole.LONG_RUN), None)
    longest = cap
    allocated = 0.0

    if long_run is not None:
        km = week_volume * long_run.volume_share
        if km > cap:
            logger.debug("Long run capped", planned=round(km, 1), cap=round(cap, 1))
            km = cap
        apply_distance(long_run, km, zones)
        allocated += long_run.distance_km
        longest = long_run.distance_km

    fillers = []
    for session in sessions:
        if session is long_run:
            continue
        if session.volume_share <= 0:
            fillers.append(session)
            continue
        apply_distance(session, min(week_volume * session.volume_share, longest), zones)
        allocated += session.distance_km

    remaining = max(0.0, week_volume - allocated)
    surplus = _fill_remainder(fillers, remaining, longest, zones, params)

    if surplus > 0 and long_run is not None and long_run.distance_km < cap:
        extra = min(surplus, cap - long_run.distance_km)
        apply_distance(long_run, long_run.distance_km + extra, zones)
        surplus -= extra

    if surplus >= 0.1:
        logger.info(
            "Weekly volume not fully distributed",
            target=round(week_volume, 1),
            dropped=round(surplus, 1),
        )

    return sessions
