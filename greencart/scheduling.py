# greencart-sim/greencart/scheduling.py
"""
Driver selection and scheduling for the GreenCart Delivery Simulation.

A run walks through four steps:

1. **Eligibility**: enough active drivers, at least one route, at least one order.
2. **Selection**: drivers with the fewest hours over the past week go first.
3. **Route assignment**: route i goes to selected driver i mod N (round-robin).
4. **Delivery walk**: each driver works through the orders on their routes
   until their hour budget is spent.

Orders that are never reached are reported as skipped and do not count
towards any KPI.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from . import scoring, utils
from .errors import insufficient_drivers, no_orders, no_routes
from .models import (
    DeliveryOutcome,
    DriverRecord,
    DriverState,
    OrderRecord,
    RouteRecord,
    SimulationRequest,
    SkippedOrder,
    SkipReason,
)

logger = logging.getLogger(__name__)


@dataclass
class ScheduleResult:
    """Outcomes, final driver states and skipped orders of one run."""
    outcomes: List[DeliveryOutcome] = field(default_factory=list)
    drivers: List[DriverState] = field(default_factory=list)
    skipped: List[SkippedOrder] = field(default_factory=list)


def check_eligibility(
    request: SimulationRequest,
    drivers: Sequence[DriverRecord],
    routes: Sequence[RouteRecord],
    orders: Sequence[OrderRecord],
) -> None:
    """
    Make sure the run has something to work with.

    Raises:
        SimulationError: INSUFFICIENT_DRIVERS, NO_ROUTES or NO_ORDERS
    """
    if len(drivers) < request.number_of_drivers:
        raise insufficient_drivers(len(drivers), request.number_of_drivers)
    if not routes:
        raise no_routes()
    if not orders:
        raise no_orders()


def select_drivers(drivers: Sequence[DriverRecord], count: int) -> List[DriverState]:
    """
    Pick the `count` drivers with the fewest hours in the past seven days.

    The sort is stable, so ties keep their input order.
    """
    ranked = sorted(drivers, key=lambda d: d.past_seven_day_hours)
    return [DriverState.start(driver) for driver in ranked[:count]]


def group_orders_by_route(orders: Sequence[OrderRecord]) -> Dict[str, List[OrderRecord]]:
    """Partition orders by assigned route, keeping their original order."""
    grouped: Dict[str, List[OrderRecord]] = {}
    for order in orders:
        grouped.setdefault(order.assigned_route, []).append(order)
    return grouped


def assign_routes(routes: Sequence[RouteRecord], driver_count: int) -> List[List[RouteRecord]]:
    """
    Assign routes to drivers round-robin by position.

    Returns:
        One list of routes per driver index; a driver may get none
    """
    assignments: List[List[RouteRecord]] = [[] for _ in range(driver_count)]
    for index, route in enumerate(routes):
        assignments[index % driver_count].append(route)
    return assignments


def _walk_driver(
    driver: DriverState,
    routes: List[RouteRecord],
    orders_by_route: Dict[str, List[OrderRecord]],
    max_hours: float,
    result: ScheduleResult,
) -> None:
    for route in routes:
        for order in orders_by_route.get(route.route_id, []):
            if not driver.has_capacity(max_hours):
                result.skipped.append(SkippedOrder(
                    order_id=order.order_id,
                    route_id=route.route_id,
                    reason=SkipReason.HOURS_EXHAUSTED,
                    driver_id=driver.driver_id,
                ))
                continue

            outcome = scoring.simulate_delivery(order, route, driver)
            result.outcomes.append(outcome)
            driver.record_delivery(outcome.actual_delivery_time)


def run_schedule(
    request: SimulationRequest,
    drivers: Sequence[DriverRecord],
    routes: Sequence[RouteRecord],
    orders: Sequence[OrderRecord],
) -> ScheduleResult:
    """
    Select drivers, assign routes and simulate every reachable delivery.

    Args:
        request: Validated simulation request
        drivers: Active drivers
        routes: All routes, in their natural order
        orders: Pending / in-transit orders, in their natural order

    Returns:
        ScheduleResult with outcomes in processing order

    Raises:
        SimulationError: If the eligibility check fails
    """
    check_eligibility(request, drivers, routes, orders)

    selected = select_drivers(drivers, request.number_of_drivers)
    logger.info("Selected %d of %d active drivers", len(selected), len(drivers))

    orders_by_route = group_orders_by_route(orders)
    assignments = assign_routes(routes, len(selected))
    result = ScheduleResult(drivers=selected)

    for driver, driver_routes in zip(selected, assignments):
        _walk_driver(driver, driver_routes, orders_by_route, request.max_hours_per_driver, result)
        logger.debug(
            "Driver %s (%s) worked %s with %d deliveries%s",
            driver.name,
            driver.driver_id,
            utils.format_hours(driver.hours_worked),
            driver.deliveries,
            " [fatigued]" if driver.is_fatigued else "",
        )

    known_routes = {route.route_id for route in routes}
    for route_id, route_orders in orders_by_route.items():
        if route_id in known_routes:
            continue
        for order in route_orders:
            result.skipped.append(SkippedOrder(
                order_id=order.order_id,
                route_id=route_id,
                reason=SkipReason.UNKNOWN_ROUTE,
            ))

    if result.skipped:
        logger.info("%d eligible orders were not delivered", len(result.skipped))

    return result
