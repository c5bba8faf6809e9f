"""
Visualization utilities for training plans.

Provides charts for:
- Weekly volume schedule coloured by phase
- Planned vs distributed weekly distance
- Weekly effort distribution
"""

from typing import List, Optional, Tuple
import numpy as np

import matplotlib.pyplot as plt
from matplotlib.patches import Patch

from periodization.config import PHASE_ORDER, TrainingPhase
from periodization.plan_builder import Plan
from periodization.week_generator import WeeklyPlanEntry


PHASE_COLORS = {
    TrainingPhase.BASE: 'steelblue',
    TrainingPhase.BUILD: 'seagreen',
    TrainingPhase.PEAK: 'darkorange',
    TrainingPhase.TAPER: 'mediumpurple',
}


def plot_volume_schedule(
    plan: Plan,
    title: str = "Weekly Volume Schedule",
    figsize: Tuple[int, int] = (12, 6),
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Bar chart of the weekly volume of every cycle, coloured by phase.

    Deload weeks are hatched and cycle boundaries drawn as dashed lines.

    Args:
        plan: Plan from ``build_plan``
        title: Plot title
        figsize: Figure size
        ax: Optional existing axes

    Returns:
        Matplotlib figure
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    records = [r for cycle in plan.cycles for r in cycle.schedule]
    weeks = np.arange(1, len(records) + 1)
    volumes = np.array([r.volume for r in records])
    colors = [PHASE_COLORS[r.phase] for r in records]
    hatches = ['//' if r.is_deload else '' for r in records]

    bars = ax.bar(weeks, volumes, color=colors, edgecolor='black', linewidth=0.5)
    for bar, hatch in zip(bars, hatches):
        bar.set_hatch(hatch)

    # Cycle boundaries
    boundary = 0
    for cycle in plan.cycles[:-1]:
        boundary += cycle.n_weeks
        ax.axvline(boundary + 0.5, color='gray', linestyle='--', alpha=0.7)

    legend_elements = [
        Patch(facecolor=PHASE_COLORS[p], edgecolor='black', label=p.value.capitalize())
        for p in PHASE_ORDER
    ]
    legend_elements.append(Patch(facecolor='white', edgecolor='black', hatch='//', label='Deload'))

    ax.set_xlabel('Week')
    ax.set_ylabel('Weekly Volume (km)')
    ax.set_title(title)
    ax.legend(handles=legend_elements, loc='upper left')
    ax.grid(True, axis='y', alpha=0.3)

    return fig


def plot_weekly_distance(
    weeks: List[WeeklyPlanEntry],
    title: str = "Planned vs Distributed Distance",
    figsize: Tuple[int, int] = (12, 6),
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Scheduled weekly volume against the distance actually given to sessions.

    Args:
        weeks: Entries from ``generate_weekly_plan``
        title: Plot title
        figsize: Figure size
        ax: Optional existing axes

    Returns:
        Matplotlib figure
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    x = np.array([w.plan_week for w in weeks])
    planned = np.array([w.volume for w in weeks])
    distributed = np.array([w.total_distance for w in weeks])

    ax.plot(x, planned, 'k-', linewidth=2, label='Scheduled volume')
    ax.plot(x, distributed, 'o--', color='steelblue', markersize=4, label='Session total')
    ax.fill_between(x, planned, distributed, alpha=0.2, color='orange')

    ax.set_xlabel('Week')
    ax.set_ylabel('Distance (km)')
    ax.set_title(title)
    ax.legend(loc='upper left')
    ax.grid(True, alpha=0.3)

    return fig


def plot_effort_distribution(
    weeks: List[WeeklyPlanEntry],
    title: str = "Session Effort by Week",
    figsize: Tuple[int, int] = (14, 6),
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Heatmap of session counts per effort level (rows) and week (columns).
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.get_figure()

    matrix = np.zeros((10, max(len(weeks), 1)))
    for col, entry in enumerate(weeks):
        for session in entry.training_sessions:
            if 1 <= session.effort <= 10:
                matrix[session.effort - 1, col] += 1

    im = ax.imshow(matrix, aspect='auto', cmap='YlOrRd', origin='lower')

    ax.set_xlabel('Week')
    ax.set_ylabel('Effort')
    ax.set_title(title)
    ax.set_yticks(range(10))
    ax.set_yticklabels(range(1, 11))

    cbar = plt.colorbar(im, ax=ax)
    cbar.set_label('Sessions')

    return fig


def create_plan_dashboard(
    plan: Plan,
    weeks: List[WeeklyPlanEntry],
    figsize: Tuple[int, int] = (14, 12)
) -> plt.Figure:
    """Volume schedule, distance comparison and effort heatmap on one figure."""
    fig, axes = plt.subplots(3, 1, figsize=figsize)

    plot_volume_schedule(plan, ax=axes[0])
    plot_weekly_distance(weeks, ax=axes[1])
    plot_effort_distribution(weeks, ax=axes[2])

    plt.tight_layout()
    return fig
