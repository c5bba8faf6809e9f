"""
Report generation utilities for training plans.

Generates the text plan report, tabular exports and persistence-ready rows.
"""

from typing import List, Dict, Any, Optional
from datetime import datetime

import numpy as np
import pandas as pd

from periodization.fitness import PaceZones, ZONE_ORDER, format_pace
from periodization.plan_builder import Plan
from periodization.scheduling import format_weekly_schedule
from periodization.week_generator import WeeklyPlanEntry


SESSION_COLUMNS = [
    'plan_week', 'cycle_index', 'week', 'phase', 'is_deload', 'week_volume',
    'date', 'weekday', 'type', 'title', 'effort', 'distance_km',
    'duration_min', 'template_id',
]


def generate_plan_report(
    plan: Plan,
    weeks: List[WeeklyPlanEntry],
    zones: Optional[PaceZones] = None,
    fitness_index: Optional[float] = None,
    title: str = "Training Plan"
) -> str:
    """
    Generate a text report of a plan and its generated weeks.

    Args:
        plan: Plan from ``build_plan``
        weeks: Entries from ``generate_weekly_plan``
        zones: Athlete pace zones (listed when given)
        fitness_index: Fitness index used for the zones
        title: Report title

    Returns:
        Formatted report string
    """
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    volumes = np.array([w.volume for w in weeks]) if weeks else np.zeros(1)

    report = f"""
{'='*70}
{title}
{'='*70}
Generated: {timestamp}
Cycles: {len(plan.cycles)}
Weeks: {plan.total_weeks}

VOLUME
------
Mean weekly volume:        {np.mean(volumes):>8.1f} km
Peak weekly volume:        {np.max(volumes):>8.1f} km
Total planned volume:      {np.sum(volumes):>8.1f} km
Deload weeks:              {sum(1 for w in weeks if w.is_deload):>8d}
"""

    if fitness_index is not None or zones:
        report += """
PACE ZONES
----------
"""
        if fitness_index is not None:
            report += f"Fitness index: {fitness_index:.1f}\n"
        for name in ZONE_ORDER:
            if zones and name in zones:
                zone = zones[name]
                report += (f"  {zone.label:<12} "
                           f"{format_pace(zone.slow)} - {format_pace(zone.fast)} /km\n")

    report += """
CYCLES
------
"""
    for idx, cycle in enumerate(plan.cycles):
        allocation = cycle.allocation
        objective = cycle.objective
        name = objective.name or objective.distance.value if objective else "Continuous"
        report += f"Cycle {idx + 1}: {name} ({cycle.cycle_type}), starts {cycle.start_date.isoformat()}\n"
        phases = ", ".join(f"{phase.value} {n}" for phase, n in allocation.phase_sequence())
        report += f"  {phases} (taper: {allocation.taper_type})\n"

    if plan.warnings:
        report += """
WARNINGS
--------
"""
        for warning in plan.warnings:
            report += f"  - {warning}\n"

    report += """
WEEKLY SCHEDULE
---------------
"""
    for entry in weeks:
        low, high = entry.total_distance_range
        deload = " (deload)" if entry.is_deload else ""
        report += (f"\nWeek {entry.plan_week:>2}  {entry.week_start.isoformat()}  "
                   f"{entry.phase.value:<6} {entry.volume:>5.1f} km{deload}  "
                   f"[{low}-{high} km]\n")
        report += format_weekly_schedule(entry.sessions) + "\n"

    report += "\n" + "=" * 70 + "\n"
    return report


def plan_to_dataframe(weeks: List[WeeklyPlanEntry], include_rest: bool = False) -> pd.DataFrame:
    """
    One row per session of the generated plan.

    Args:
        weeks: Entries from ``generate_weekly_plan``
        include_rest: Keep rest days

    Returns:
        DataFrame with ``SESSION_COLUMNS``
    """
    records = []
    for entry in weeks:
        for session in entry.sessions:
            if session.is_rest and not include_rest:
                continue
            records.append({
                'plan_week': entry.plan_week,
                'cycle_index': entry.cycle_index,
                'week': entry.week,
                'phase': entry.phase.value,
                'is_deload': entry.is_deload,
                'week_volume': entry.volume,
                'date': pd.Timestamp(session.session_date) if session.session_date else pd.NaT,
                'weekday': session.weekday,
                'type': session.session_type.value,
                'title': session.title,
                'effort': session.effort,
                'distance_km': session.distance_km,
                'duration_min': round(session.duration_min),
                'template_id': session.template_id,
            })
    return pd.DataFrame.from_records(records, columns=SESSION_COLUMNS)


def weekly_summary(weeks: List[WeeklyPlanEntry]) -> pd.DataFrame:
    """
    Per-week totals: scheduled volume, distributed distance, session count
    and the hardest effort of the week.
    """
    df = plan_to_dataframe(weeks)
    if df.empty:
        return pd.DataFrame(
            columns=['plan_week', 'phase', 'week_volume', 'distance_km', 'sessions', 'max_effort']
        )
    summary = df.groupby(['plan_week', 'phase', 'week_volume'], sort=True).agg(
        distance_km=('distance_km', 'sum'),
        sessions=('title', 'count'),
        max_effort=('effort', 'max'),
    ).reset_index()
    summary['distance_km'] = summary['distance_km'].round(1)
    return summary


def export_plan_csv(weeks: List[WeeklyPlanEntry], filepath: str) -> None:
    """
    Export the session table to CSV.

    Args:
        weeks: Entries from ``generate_weekly_plan``
        filepath: Output file path
    """
    plan_to_dataframe(weeks).to_csv(filepath, index=False)


def plan_to_rows(
    weeks: List[WeeklyPlanEntry],
    zones: Optional[PaceZones] = None
) -> List[Dict[str, Any]]:
    """
    Persistence-ready rows: one per week, each with its sessions and their
    ordered step rows.

    Args:
        weeks: Entries from ``generate_weekly_plan``
        zones: Athlete pace zones (pace bounds on steps)

    Returns:
        List of week rows
    """
    rows = []
    for entry in weeks:
        low, high = entry.total_distance_range
        sessions = []
        for session in entry.training_sessions:
            distance_low, distance_high = session.distance_range
            sessions.append({
                'date': session.session_date.isoformat() if session.session_date else None,
                'weekday': session.weekday,
                'session_type': session.session_type.value,
                'title': session.title,
                'effort': session.effort,
                'distance_km': session.distance_km,
                'distance_low_km': distance_low,
                'distance_high_km': distance_high,
                'duration_min': round(session.duration_min),
                'template_id': session.template_id,
                'notes': session.notes,
                'coach_tips': list(session.coach_tips),
                'steps': session.to_steps(zones),
            })
        rows.append({
            'plan_week': entry.plan_week,
            'cycle_index': entry.cycle_index,
            'week_number': entry.week,
            'phase': entry.phase.value,
            'is_deload': entry.is_deload,
            'target_volume_km': entry.volume,
            'total_distance_low_km': low,
            'total_distance_high_km': high,
            'week_start': entry.week_start.isoformat(),
            'week_end': entry.week_end.isoformat(),
            'objective': entry.objective,
            'sessions': sessions,
        })
    return rows
