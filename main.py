#!/usr/bin/env python3
"""
Training Periodization Engine - CLI Entry Point

Usage:
    python main.py paces --distance 10km --time 40:00
    python main.py plan --start 2026-01-05 --race 2026-05-10:Marathon [--race DATE:DIST:secondary]
    python main.py params
"""

import sys
import argparse
import json
from datetime import date

from loguru import logger

from periodization.config import DEFAULT_PARAMS, RaceDistance, load_params
from periodization.fitness import (
    ZONE_ORDER,
    compute_all_pace_zones,
    fitness_index_from_race,
    format_pace_range,
)
from periodization.plan_builder import AthleteHistory, Objective, ObjectivePriority, build_plan
from periodization.week_generator import Availability, generate_weekly_plan
from analysis.reports import export_plan_csv, generate_plan_report, plan_to_rows


def parse_race(value: str) -> Objective:
    """
    Parse "DATE:DISTANCE[:PRIORITY[:NAME]]" into an objective.

    Raises:
        argparse.ArgumentTypeError: If any part is malformed
    """
    parts = value.split(":", 3)
    if len(parts) < 2:
        raise argparse.ArgumentTypeError(f"Expected DATE:DISTANCE, got {value!r}")
    try:
        return Objective(
            race_date=date.fromisoformat(parts[0]),
            distance=RaceDistance.parse(parts[1]),
            priority=ObjectivePriority(parts[2]) if len(parts) > 2 else ObjectivePriority.PRIORITY,
            name=parts[3] if len(parts) > 3 else "",
        )
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def configure_logging(verbose: bool = False):
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def run_paces(distance: str, time_str: str):
    """Print the fitness index and pace zones for a reference race."""
    index = fitness_index_from_race(distance, time_str)
    zones = compute_all_pace_zones(index)

    print(f"Reference: {distance} in {time_str}")
    print(f"Fitness index: {index:.1f}\n")
    for name in ZONE_ORDER:
        zone = zones[name]
        print(f"  {zone.label:<12} {format_pace_range(zones, name):<16} {zone.description}")

    return index, zones


def run_plan(args):
    """Build a plan, generate its weeks and print the report."""
    params = load_params(args.params) if args.params else DEFAULT_PARAMS

    history = AthleteHistory.from_raw({
        'year_km': args.year_km,
        'avg4w_km': args.avg4w_km,
        'last_week_km': args.last_week_km,
    }, params)
    availability = Availability.from_raw({
        'sessions_per_week': args.sessions,
        'training_days': args.days.split(",") if args.days else None,
    })

    index = None
    zones = None
    if args.ref_time:
        index = fitness_index_from_race(args.ref_distance, args.ref_time)
        zones = compute_all_pace_zones(index)

    plan = build_plan(args.start, args.race or [], history, params)
    weeks = generate_weekly_plan(plan, availability, zones, params=params)

    print(generate_plan_report(plan, weeks, zones, index))

    if args.csv:
        export_plan_csv(weeks, args.csv)
        print(f"Sessions exported to: {args.csv}")

    if args.json:
        with open(args.json, 'w') as f:
            json.dump(plan_to_rows(weeks, zones), f, indent=2)
        print(f"Week rows saved to: {args.json}")

    if args.chart:
        from analysis.visualizations import plot_volume_schedule
        fig = plot_volume_schedule(plan)
        fig.savefig(args.chart, dpi=100)
        print(f"Volume chart saved to: {args.chart}")

    return plan, weeks


def run_params(output: str = None):
    """Dump the default parameters as JSON."""
    text = json.dumps(DEFAULT_PARAMS.to_dict(), indent=2, default=str)
    if output:
        with open(output, 'w') as f:
            f.write(text)
        print(f"Parameters saved to: {output}")
    else:
        print(text)


def main():
    parser = argparse.ArgumentParser(description='Training Periodization Engine')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Paces command
    pace_parser = subparsers.add_parser('paces', help='Fitness index and pace zones')
    pace_parser.add_argument('--distance', default='10km', help='Reference distance (1500, 3000, 5km, ...)')
    pace_parser.add_argument('--time', required=True, help='Reference time (h:mm:ss or mm:ss)')

    # Plan command
    plan_parser = subparsers.add_parser('plan', help='Build and print a training plan')
    plan_parser.add_argument('--start', type=date.fromisoformat, default=date.today(),
                             help='Plan start date (YYYY-MM-DD)')
    plan_parser.add_argument('--race', type=parse_race, action='append',
                             help='DATE:DISTANCE[:PRIORITY[:NAME]], repeatable')
    plan_parser.add_argument('--year-km', type=float, default=None, help='Volume over the last year')
    plan_parser.add_argument('--avg4w-km', type=float, default=None, help='Average of the last 4 weeks')
    plan_parser.add_argument('--last-week-km', type=float, default=None, help='Volume of the last week')
    plan_parser.add_argument('--sessions', type=int, default=4, help='Sessions per week')
    plan_parser.add_argument('--days', default=None, help='Training days, e.g. tue,thu,sat,sun')
    plan_parser.add_argument('--ref-distance', default='10km', help='Reference race distance')
    plan_parser.add_argument('--ref-time', default=None, help='Reference race time')
    plan_parser.add_argument('--params', default=None, help='JSON parameter file')
    plan_parser.add_argument('--csv', default=None, help='Export sessions to CSV')
    plan_parser.add_argument('--json', default=None, help='Export week rows to JSON')
    plan_parser.add_argument('--chart', default=None, help='Save volume chart (PNG)')

    # Params command
    params_parser = subparsers.add_parser('params', help='Dump default parameters')
    params_parser.add_argument('--output', default=None, help='Output file')

    args = parser.parse_args()
    configure_logging(args.verbose)

    if args.command == 'paces':
        run_paces(args.distance, args.time)
    elif args.command == 'plan':
        run_plan(args)
    elif args.command == 'params':
        run_params(args.output)
    else:
        parser.print_help()


if __name__ == '__main__':
    main()
