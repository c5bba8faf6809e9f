"""Plan reports, tabular exports and visualization utilities."""

from .visualizations import (
    plot_volume_schedule,
    plot_weekly_distance,
    plot_effort_distribution,
    create_plan_dashboard,
)
from .reports import (
    generate_plan_report,
    plan_to_dataframe,
    weekly_summary,
    export_plan_csv,
    plan_to_rows,
)

__all__ = [
    'plot_volume_schedule',
    'plot_weekly_distance',
    'plot_effort_distribution',
    'create_plan_dashboard',
    'generate_plan_report',
    'plan_to_dataframe',
    'weekly_summary',
    'export_plan_csv',
    'plan_to_rows',
]
