# greencart-sim/greencart/kpi.py
"""
KPI aggregation for the GreenCart Delivery Simulation.

Reduces the per-delivery outcomes of a run into a single KPIResult.
This is a total function: empty inputs give zeros, never an error.

Overall Profit = Revenue + Bonuses - Penalties - Fuel Cost
Efficiency Score = On-time delivery rate
"""

from __future__ import annotations

from typing import Dict, Sequence

from .models import DeliveryOutcome, DriverState, KPIResult, OrderRecord
from .utils import round_half_up, round_money


def _safe_ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def calculate_kpis(
    outcomes: Sequence[DeliveryOutcome],
    drivers: Sequence[DriverState],
    max_hours_per_driver: float,
    orders: Sequence[OrderRecord],
) -> KPIResult:
    """
    Aggregate delivery outcomes into KPIs.

    Args:
        outcomes: One outcome per delivered order
        drivers: Final state of every selected driver
        max_hours_per_driver: The request's hour budget per driver
        orders: The order collection the outcomes were produced from

    Returns:
        KPIResult with money/percentages at 2 decimals and average time in whole minutes
    """
    total_deliveries = len(outcomes)
    on_time_deliveries = sum(1 for o in outcomes if o.is_on_time)

    # Revenue only counts orders that were actually delivered
    order_values: Dict[str, float] = {}
    for order in orders:
        order_values.setdefault(order.order_id, order.value_rs)
    total_revenue = sum(order_values.get(o.order_id, 0.0) for o in outcomes)

    average_delivery_time = _safe_ratio(
        sum(o.actual_delivery_time for o in outcomes), total_deliveries
    )

    total_driver_hours = sum(d.hours_worked for d in drivers)
    max_possible_hours = len(drivers) * max_hours_per_driver
    driver_utilization = _safe_ratio(total_driver_hours, max_possible_hours) * 100

    on_time_rate = _safe_ratio(on_time_deliveries, total_deliveries) * 100

    total_penalties = sum(o.penalty for o in outcomes)
    total_bonuses = sum(o.bonus for o in outcomes)
    total_fuel_cost = sum(o.fuel_cost for o in outcomes)
    cost_per_delivery = _safe_ratio(total_fuel_cost, total_deliveries)

    overall_profit = total_revenue + total_bonuses - total_penalties - total_fuel_cost

    return KPIResult(
        total_deliveries=total_deliveries,
        total_revenue=round_money(total_revenue),
        average_delivery_time=int(round_half_up(average_delivery_time)),
        driver_utilization=round_money(driver_utilization),
        on_time_delivery_rate=round_money(on_time_rate),
        fuel_cost=round_money(total_fuel_cost),
        cost_per_delivery=round_money(cost_per_delivery),
        total_penalties=round_money(total_penalties),
        total_bonuses=round_money(total_bonuses),
        overall_profit=round_money(overall_profit),
        efficiency_score=round_money(on_time_rate),
    )
