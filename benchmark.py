# greencart-sim/benchmark.py
"""
Fleet-sizing benchmark for the GreenCart Delivery Simulation.
Sweeps driver counts and hour caps over a dataset and writes every KPI to CSV
for analysis.
"""

import argparse
import os
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd

from greencart import config
from greencart.datasources import CsvDataSource
from greencart.errors import SimulationError
from greencart.simulation import DeliverySimulation

DRIVER_COUNTS = [1, 2, 3, 4, 5]
MAX_HOURS_OPTIONS = [4.0, 6.0, 8.0, 10.0]
ROUTE_START_TIME = "09:00"

# KPI columns in output order
CSV_KPIS = [
    "totalDeliveries",
    "totalRevenue",
    "averageDeliveryTime",
    "driverUtilization",
    "onTimeDeliveryRate",
    "fuelCost",
    "costPerDelivery",
    "totalPenalties",
    "totalBonuses",
    "overallProfit",
    "efficiencyScore",
]


def run_case(simulation: DeliverySimulation, drivers: int, max_hours: float) -> Optional[Dict[str, Any]]:
    """Run one (driver count, hour cap) combination and flatten it into a row."""
    payload = {
        "numberOfDrivers": drivers,
        "routeStartTime": ROUTE_START_TIME,
        "maxHoursPerDriver": max_hours,
    }
    try:
        report = simulation.run(payload)
    except SimulationError as e:
        print(f"  ✗ {drivers} drivers / {max_hours:g}h: {e.code.value} - {e.message}")
        return None

    row: Dict[str, Any] = {"drivers": drivers, "max_hours": max_hours}
    kpis = report.kpis.to_dict()
    row.update({kpi: kpis[kpi] for kpi in CSV_KPIS})
    row["skipped_orders"] = report.metadata["skippedOrders"]
    row["fatigued_drivers"] = sum(1 for d in report.drivers if d.is_fatigued)

    print(f"  ✓ {drivers} drivers / {max_hours:g}h: "
          f"{kpis['totalDeliveries']} deliveries, "
          f"profit Rs {kpis['overallProfit']:,.2f}, "
          f"{kpis['efficiencyScore']:.2f}% efficiency")
    return row


def run_sweep(
    data_dir: str,
    driver_counts: List[int] = None,
    max_hours_options: List[float] = None,
) -> pd.DataFrame:
    """Run the full sweep and return one row per successful combination."""
    driver_counts = driver_counts or DRIVER_COUNTS
    max_hours_options = max_hours_options or MAX_HOURS_OPTIONS

    print(f"\n{'='*60}")
    print(f"DATASET: {data_dir}")
    print(f"Driver counts: {driver_counts}")
    print(f"Hour caps: {max_hours_options}")
    print(f"{'='*60}")

    simulation = DeliverySimulation(CsvDataSource(data_dir))
    rows = []
    for drivers in driver_counts:
        for max_hours in max_hours_options:
            row = run_case(simulation, drivers, max_hours)
            if row is not None:
                rows.append(row)

    return pd.DataFrame(rows, columns=["drivers", "max_hours"] + CSV_KPIS + ["skipped_orders", "fatigued_drivers"])


def save_results(results: pd.DataFrame, output_dir: str, timestamp: str) -> str:
    """Write the sweep to a timestamped CSV and return its path."""
    os.makedirs(output_dir, exist_ok=True)
    filename = os.path.join(output_dir, f"fleet_sweep_{timestamp}.csv")
    results.to_csv(filename, index=False)
    return filename


def print_summary(results: pd.DataFrame) -> None:
    """Print the best combination by profit and by efficiency."""
    if results.empty:
        print("\nNo successful runs.")
        return

    best_profit = results.loc[results["overallProfit"].idxmax()]
    best_efficiency = results.loc[results["efficiencyScore"].idxmax()]

    print(f"\n{'='*60}")
    print("SUMMARY")
    print(f"{'='*60}")
    print(f"  Best profit:     {int(best_profit['drivers'])} drivers / "
          f"{best_profit['max_hours']:g}h -> Rs {best_profit['overallProfit']:,.2f}")
    print(f"  Best efficiency: {int(best_efficiency['drivers'])} drivers / "
          f"{best_efficiency['max_hours']:g}h -> {best_efficiency['efficiencyScore']:.2f}%")


def main() -> int:
    parser = argparse.ArgumentParser(description="GreenCart fleet-sizing benchmark")
    parser.add_argument("--data-dir", "-d", default=config.DATA_DIR, help="Directory with the CSV files")
    parser.add_argument("--output-dir", "-o", default="results", help="Where to write the CSV")
    parser.add_argument("--drivers", type=int, nargs="+", help=f"Driver counts (default: {DRIVER_COUNTS})")
    parser.add_argument("--max-hours", type=float, nargs="+", help=f"Hour caps (default: {MAX_HOURS_OPTIONS})")
    args = parser.parse_args()

    missing = CsvDataSource(args.data_dir).missing_files()
    if missing:
        for path in missing:
            print(f"ERROR: Data file not found: {path}")
        return 1

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    results = run_sweep(args.data_dir, args.drivers, args.max_hours)
    print_summary(results)

    if results.empty:
        return 2

    path = save_results(results, args.output_dir, timestamp)
    print(f"\nResults saved to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
