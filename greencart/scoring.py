# greencart-sim/greencart/scoring.py
"""
Per-delivery rule evaluation for the GreenCart Delivery Simulation.

This module applies the company rules to a single order on a single route:
1. Late delivery: Rs 50 penalty when slower than base time + 10 minutes
2. Fatigue: fatigued drivers are 30% slower
3. High value: 10% bonus on orders above Rs 1000 delivered on time
4. Fuel: Rs 5/km, plus Rs 2/km on High traffic routes

Every function here is pure. The driver state is read, never modified.
"""

from __future__ import annotations

from . import config
from .models import DeliveryOutcome, DriverState, OrderRecord, RouteRecord


def get_traffic_multiplier(traffic_level: str) -> float:
    """
    Get the delivery-time multiplier for a traffic level.

    Args:
        traffic_level: Route traffic level, usually 'Low', 'Medium' or 'High'

    Returns:
        Multiplier (1.0 for Low, higher for heavier traffic, 1.0 if unknown)
    """
    return config.TRAFFIC_MULTIPLIERS.get(traffic_level, config.DEFAULT_TRAFFIC_MULTIPLIER)


def calculate_delivery_time(route: RouteRecord, is_fatigued: bool) -> float:
    """
    Calculate the simulated delivery time in minutes.

    Base time is scaled by traffic, then by the fatigue slowdown.
    No rounding is applied.
    """
    minutes = route.base_time_minutes * get_traffic_multiplier(route.traffic_level)
    if is_fatigued:
        minutes *= config.FATIGUE_SLOWDOWN_MULTIPLIER
    return minutes


def calculate_fuel_cost(route: RouteRecord) -> float:
    """Fuel cost for driving the route once, including the High traffic surcharge."""
    cost = route.distance_km * config.FUEL_COST_PER_KM
    if route.is_high_traffic:
        cost += route.distance_km * config.HIGH_TRAFFIC_SURCHARGE_PER_KM
    return cost


def allowed_delivery_time(route: RouteRecord) -> float:
    # Grace is added to the unadjusted base time
    return route.base_time_minutes + config.ON_TIME_GRACE_MINUTES


def calculate_penalty(is_on_time: bool) -> float:
    return 0.0 if is_on_time else config.LATE_DELIVERY_PENALTY


def calculate_bonus(order: OrderRecord, is_on_time: bool) -> float:
    if is_on_time and order.is_high_value:
        return order.value_rs * config.HIGH_VALUE_BONUS_RATE
    return 0.0


def simulate_delivery(order: OrderRecord, route: RouteRecord, driver: DriverState) -> DeliveryOutcome:
    """
    Evaluate one delivery under the company rules.

    Args:
        order: The order being delivered
        route: The route the order is assigned to
        driver: The driver's state at the time of the delivery

    Returns:
        The DeliveryOutcome for this order
    """
    actual_minutes = calculate_delivery_time(route, driver.is_fatigued)
    is_on_time = actual_minutes <= allowed_delivery_time(route)

    return DeliveryOutcome(
        order_id=order.order_id,
        actual_delivery_time=actual_minutes,
        is_on_time=is_on_time,
        penalty=calculate_penalty(is_on_time),
        bonus=calculate_bonus(order, is_on_time),
        fuel_cost=calculate_fuel_cost(route),
    )
