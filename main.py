#!/usr/bin/env python3
# greencart-sim/main.py
"""
Command-Line Interface for the GreenCart Delivery Simulation.

Runs a fleet-sizing simulation against a data source and prints the KPI report.

Usage:
    python main.py                                # 3 drivers, 09:00 start, 8h cap, data/ CSVs
    python main.py -n 5 -t 07:30 -m 10            # Custom request
    python main.py --compare 2 3 4 5              # Compare several fleet sizes
    python main.py --source supabase              # Read from Supabase (SUPABASE_URL / SUPABASE_API_KEY)
    python main.py --json                         # Print the response envelope as JSON

Exit Codes:
    0: Success
    1: Data loading error
    2: Simulation error (invalid request, insufficient resources, fetch failure)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

import pandas as pd

from greencart import config
from greencart.datasources import CsvDataSource, DataSource, SupabaseDataSource
from greencart.errors import DataSourceError, SimulationError
from greencart.models import SimulationReport
from greencart.simulation import DeliverySimulation
from greencart.utils import format_hours

# KPI rows shown in tables: (label, key in KPIResult.to_dict(), unit)
DISPLAY_METRICS = [
    ("Total Deliveries", "totalDeliveries", ""),
    ("Total Revenue", "totalRevenue", "Rs"),
    ("Avg Delivery Time", "averageDeliveryTime", "min"),
    ("Driver Utilization", "driverUtilization", "%"),
    ("On-Time Rate", "onTimeDeliveryRate", "%"),
    ("Fuel Cost", "fuelCost", "Rs"),
    ("Cost per Delivery", "costPerDelivery", "Rs"),
    ("Total Penalties", "totalPenalties", "Rs"),
    ("Total Bonuses", "totalBonuses", "Rs"),
    ("Overall Profit", "overallProfit", "Rs"),
    ("Efficiency Score", "efficiencyScore", ""),
]

DATA_SOURCES = ["csv", "supabase"]


def print_header() -> None:
    """Print the CLI header."""
    print("\n" + "=" * 60)
    print("  GREENCART LOGISTICS - Delivery Simulation")
    print("  Fleet Sizing and KPI Report")
    print("=" * 60 + "\n")


def format_metric(value: Any, unit: str) -> str:
    if unit == "Rs":
        return f"Rs {value:,.2f}"
    if unit == "%":
        return f"{value:.2f}%"
    if unit == "min":
        return f"{value:.0f} min"
    return str(value)


def print_report(report: SimulationReport, show_skipped: bool = False) -> None:
    """
    Print a formatted KPI report for one simulation.

    Args:
        report: Result of a successful run
        show_skipped: Also list every order that was not delivered
    """
    kpis = report.kpis.to_dict()
    meta = report.metadata

    print(f"Request: {report.request.number_of_drivers} drivers, "
          f"start {meta['routeStartTime']}, "
          f"max {report.request.max_hours_per_driver:g}h per driver")
    print(f"Data: {meta['totalDriversAvailable']} active drivers, "
          f"{meta['totalRoutesProcessed']} routes, "
          f"{meta['totalOrdersProcessed']} pending orders\n")

    print("| Metric                    | Value                |")
    print("|" + "-" * 27 + "|" + "-" * 22 + "|")
    for label, key, unit in DISPLAY_METRICS:
        print(f"| {label:<25} | {format_metric(kpis[key], unit):>20} |")

    print("\nDrivers:")
    for driver in report.drivers:
        fatigue = " (fatigued)" if driver.is_fatigued else ""
        print(f"  {driver.driver_id:<8} {driver.name:<20} "
              f"{format_hours(driver.hours_worked):>8}  "
              f"{driver.deliveries:>3} deliveries{fatigue}")

    if report.skipped:
        print(f"\n{len(report.skipped)} eligible order(s) were not delivered")
        if show_skipped:
            for skipped in report.skipped:
                print(f"  {skipped.order_id:<8} route {skipped.route_id:<8} {skipped.reason.value}")

    print("\n" + "=" * 60 + "\n")


def build_comparison_table(reports: Dict[int, SimulationReport]) -> pd.DataFrame:
    """
    Build a metric-by-fleet-size comparison table.

    Args:
        reports: Mapping of driver count to its simulation report

    Returns:
        DataFrame with one row per metric and one column per fleet size
    """
    table_data = []
    for label, key, unit in DISPLAY_METRICS:
        row = {"Metric": label}
        for count, report in reports.items():
            row[f"{count} drivers"] = format_metric(report.kpis.to_dict()[key], unit)
        table_data.append(row)
    return pd.DataFrame(table_data)


def print_error(error: SimulationError) -> None:
    print(f"ERROR [{error.code.value}]: {error.message}")
    if error.field:
        print(f"  Field: {error.field}")
    if error.details:
        print(f"  Details: {error.details}")


def create_data_source(source: str, data_dir: str) -> Optional[DataSource]:
    """
    Create the requested data source with graceful error handling.

    Returns:
        A data source, or None if it cannot be set up
    """
    if source == "supabase":
        try:
            return SupabaseDataSource(config.SUPABASE_URL, config.SUPABASE_API_KEY)
        except DataSourceError as e:
            print(f"ERROR: {e}")
            print("Set SUPABASE_URL and SUPABASE_API_KEY in the environment or a .env file.")
            return None

    csv_source = CsvDataSource(data_dir)
    missing = csv_source.missing_files()
    if missing:
        for path in missing:
            print(f"ERROR: Data file not found: {path}")
        print("Please ensure the data directory contains drivers.csv, routes.csv and orders.csv.")
        return None
    return csv_source


def run_simulation_safe(
    simulation: DeliverySimulation,
    payload: Dict[str, Any],
) -> Optional[SimulationReport]:
    """
    Run one simulation, printing structured errors instead of raising.

    Returns:
        The report, or None if the run failed
    """
    try:
        return simulation.run(payload)
    except SimulationError as e:
        print_error(e)
        return None


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="GreenCart Delivery Simulation CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                  # Default request on data/
  python main.py -n 4 -t 06:00 -m 10              # Four drivers, 10h cap
  python main.py --compare 1 2 3 4                # Compare fleet sizes
  python main.py --json                           # JSON response envelope
        """
    )

    parser.add_argument(
        "--drivers", "-n",
        type=int,
        default=3,
        help="Number of drivers to simulate (default: 3)"
    )

    parser.add_argument(
        "--start-time", "-t",
        type=str,
        default="09:00",
        help="Route start time, HH:MM 24-hour (default: 09:00)"
    )

    parser.add_argument(
        "--max-hours", "-m",
        type=float,
        default=8.0,
        help="Maximum working hours per driver (default: 8)"
    )

    parser.add_argument(
        "--source", "-s",
        choices=DATA_SOURCES,
        default="csv",
        help="Where to read drivers, routes and orders from (default: csv)"
    )

    parser.add_argument(
        "--data-dir", "-d",
        type=str,
        default=config.DATA_DIR,
        help=f"Directory with the CSV files (default: {config.DATA_DIR})"
    )

    parser.add_argument(
        "--compare",
        type=int,
        nargs="+",
        metavar="N",
        help="Run once per driver count and print a comparison table"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the response envelope as JSON"
    )

    parser.add_argument(
        "--show-skipped",
        action="store_true",
        help="List orders that could not be delivered"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show detailed simulation progress"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    data_source = create_data_source(args.source, args.data_dir)
    if data_source is None:
        return 1

    simulation = DeliverySimulation(data_source)

    def payload_for(count: int) -> Dict[str, Any]:
        return {
            "numberOfDrivers": count,
            "routeStartTime": args.start_time,
            "maxHoursPerDriver": args.max_hours,
        }

    # Comparison mode
    if args.compare:
        reports: Dict[int, SimulationReport] = {}
        for count in args.compare:
            report = run_simulation_safe(simulation, payload_for(count))
            if report is None:
                print(f"WARN: Skipping {count} drivers due to error")
                continue
            reports[count] = report

        if not reports:
            print("ERROR: No simulations completed successfully")
            return 2

        if args.json:
            print(json.dumps({str(k): r.to_dict() for k, r in reports.items()}, indent=2))
        else:
            print_header()
            print(build_comparison_table(reports).to_string(index=False))
            print()
        return 0

    # Single run
    try:
        report = simulation.run(payload_for(args.drivers))
    except SimulationError as e:
        if args.json:
            print(json.dumps(e.to_dict(), indent=2))
        else:
            print_error(e)
        return 2

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_header()
        print_report(report, show_skipped=args.show_skipped)

    return 0


if __name__ == "__main__":
    sys.exit(main())
