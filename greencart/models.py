# greencart-sim/greencart/models.py
"""
Core domain models for the GreenCart Delivery Simulation.

This module defines the data structures used throughout a simulation run:
- SimulationRequest: The validated fleet-sizing request
- DriverRecord / RouteRecord / OrderRecord: Read-only inputs from the data store
- DriverState: Per-run mutable accumulator for a selected driver
- DeliveryOutcome: Result of one simulated delivery
- SkippedOrder: An eligible order that produced no outcome, and why
- KPIResult: The aggregated report
- SimulationReport: KPIs plus run metadata, as returned to callers
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import time
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from . import config
from .errors import RecordError
from .utils import round_money


class DriverStatus(Enum):
    """Employment states a driver record can be in."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on-leave"


class OrderStatus(Enum):
    """Lifecycle states for an order in the data store."""
    PENDING = "pending"
    IN_TRANSIT = "in-transit"
    DELIVERED = "delivered"
    DELAYED = "delayed"
    CANCELLED = "cancelled"


class TrafficLevel(Enum):
    """Known route traffic levels. Other levels are kept as-is and get no multiplier."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class SkipReason(Enum):
    """Why an eligible order produced no delivery outcome."""
    UNKNOWN_ROUTE = "unknown_route"        # Order references a route that does not exist
    HOURS_EXHAUSTED = "hours_exhausted"    # Driver's hour budget was already used up


# -----------------------------------------------------------------------------
# Record parsing helpers
# -----------------------------------------------------------------------------

def _required(data: Mapping[str, Any], key: str, kind: str) -> Any:
    value = data.get(key)
    if value is None or (isinstance(value, str) and value.strip() == ""):
        raise RecordError(f"{kind} record is missing required field '{key}'")
    return value


def _text(data: Mapping[str, Any], key: str, kind: str) -> str:
    return str(_required(data, key, kind)).strip()


def _number(
    data: Mapping[str, Any],
    key: str,
    kind: str,
    minimum: float = 0.0,
    exclusive: bool = False,
) -> float:
    """Read a finite number >= minimum (> minimum when exclusive)."""
    value = _required(data, key, kind)
    if isinstance(value, bool):
        raise RecordError(f"{kind} field '{key}' must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise RecordError(f"{kind} field '{key}' must be a number, got {value!r}")
    if not math.isfinite(number):
        raise RecordError(f"{kind} field '{key}' must be finite, got {value!r}")
    if number < minimum or (exclusive and number == minimum):
        bound = f"> {minimum:g}" if exclusive else f">= {minimum:g}"
        raise RecordError(f"{kind} field '{key}' must be {bound}, got {value!r}")
    return number


def _enum(data: Mapping[str, Any], key: str, kind: str, enum_type: type) -> Enum:
    value = _text(data, key, kind)
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise RecordError(f"{kind} field '{key}' must be one of {allowed}, got {value!r}")


# -----------------------------------------------------------------------------
# Request
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class SimulationRequest:
    """
    A validated simulation request.

    Attributes:
        number_of_drivers: How many drivers to put on the road (1-100)
        route_start_time: Shift start; echoed back in metadata only
        max_hours_per_driver: Hour budget per driver, in (0, 24]
    """
    number_of_drivers: int
    route_start_time: time
    max_hours_per_driver: float

    @classmethod
    def from_payload(cls, payload: Any) -> "SimulationRequest":
        """
        Validate a raw request payload and build a SimulationRequest.

        Raises:
            RequestValidationError: If any field fails validation
        """
        from .validation import parse_request
        return parse_request(payload)

    def to_payload(self) -> Dict[str, Any]:
        """Render the request with its wire field names."""
        return {
            "numberOfDrivers": self.number_of_drivers,
            "routeStartTime": self.route_start_time.strftime("%H:%M"),
            "maxHoursPerDriver": self.max_hours_per_driver,
        }


# -----------------------------------------------------------------------------
# Records
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class DriverRecord:
    """A driver as stored in the data store."""
    driver_id: str
    name: str
    past_seven_day_hours: float
    status: DriverStatus = DriverStatus.ACTIVE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DriverRecord":
        return cls(
            driver_id=_text(data, "id", "Driver"),
            name=_text(data, "name", "Driver"),
            past_seven_day_hours=_number(data, "past_seven_day_hours", "Driver"),
            status=_enum(data, "status", "Driver", DriverStatus),
        )

    @property
    def is_active(self) -> bool:
        return self.status == DriverStatus.ACTIVE


@dataclass(frozen=True)
class RouteRecord:
    """A delivery route with its distance, traffic level and base time."""
    route_id: str
    distance_km: float
    traffic_level: str
    base_time_minutes: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RouteRecord":
        return cls(
            route_id=_text(data, "route_id", "Route"),
            distance_km=_number(data, "distance_km", "Route", exclusive=True),
            traffic_level=_text(data, "traffic_level", "Route"),
            base_time_minutes=_number(data, "base_time_minutes", "Route", exclusive=True),
        )

    @property
    def is_high_traffic(self) -> bool:
        return self.traffic_level == TrafficLevel.HIGH.value


@dataclass(frozen=True)
class OrderRecord:
    """An order waiting to be delivered along its assigned route."""
    order_id: str
    value_rs: float
    assigned_route: str
    status: OrderStatus = OrderStatus.PENDING

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OrderRecord":
        return cls(
            order_id=_text(data, "id", "Order"),
            value_rs=_number(data, "value_rs", "Order"),
            assigned_route=_text(data, "assigned_route", "Order"),
            status=_enum(data, "status", "Order", OrderStatus),
        )

    @property
    def is_eligible(self) -> bool:
        return self.status.value in config.ELIGIBLE_ORDER_STATUSES

    @property
    def is_high_value(self) -> bool:
        return self.value_rs > config.HIGH_VALUE_THRESHOLD


# -----------------------------------------------------------------------------
# Run state and results
# -----------------------------------------------------------------------------

@dataclass
class DriverState:
    """
    A selected driver's state during one simulation run.

    Created at selection time, mutated once per delivery, discarded at the end.
    Fatigue may switch on mid-run and then stays on.
    """
    driver: DriverRecord
    hours_worked: float = 0.0
    is_fatigued: bool = False
    deliveries: int = 0

    @classmethod
    def start(cls, driver: DriverRecord) -> "DriverState":
        return cls(
            driver=driver,
            is_fatigued=driver.past_seven_day_hours > config.FATIGUE_WEEKLY_HOURS_THRESHOLD,
        )

    @property
    def driver_id(self) -> str:
        return self.driver.driver_id

    @property
    def name(self) -> str:
        return self.driver.name

    def has_capacity(self, max_hours: float) -> bool:
        return self.hours_worked < max_hours

    def record_delivery(self, delivery_minutes: float) -> None:
        """Book a finished delivery and apply the daily fatigue rule."""
        self.hours_worked += delivery_minutes / 60
        self.deliveries += 1
        if self.hours_worked > config.FATIGUE_DAILY_HOURS_THRESHOLD:
            self.is_fatigued = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.driver_id,
            "name": self.name,
            "hoursWorked": round_money(self.hours_worked),
            "deliveries": self.deliveries,
            "isFatigued": self.is_fatigued,
        }

    def __repr__(self) -> str:
        return (f"DriverState({self.driver_id}, hours={self.hours_worked:.2f}, "
                f"deliveries={self.deliveries}, fatigued={self.is_fatigued})")


@dataclass(frozen=True)
class DeliveryOutcome:
    """The simulated result of delivering one order."""
    order_id: str
    actual_delivery_time: float  # minutes
    is_on_time: bool
    penalty: float
    bonus: float
    fuel_cost: float


@dataclass(frozen=True)
class SkippedOrder:
    """An eligible order that was not delivered in this run."""
    order_id: str
    route_id: str
    reason: SkipReason
    driver_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orderId": self.order_id,
            "routeId": self.route_id,
            "reason": self.reason.value,
            "driverId": self.driver_id,
        }


@dataclass(frozen=True)
class KPIResult:
    """
    Aggregated KPIs for one simulation run.

    Money and percentages are rounded to 2 decimals, average delivery time
    to whole minutes.
    """
    total_deliveries: int
    total_revenue: float
    average_delivery_time: int
    driver_utilization: float
    on_time_delivery_rate: float
    fuel_cost: float
    cost_per_delivery: float
    total_penalties: float
    total_bonuses: float
    overall_profit: float
    efficiency_score: float

    def to_dict(self) -> Dict[str, Any]:
        """Render with the external camelCase field names."""
        return {
            "totalDeliveries": self.total_deliveries,
            "totalRevenue": self.total_revenue,
            "averageDeliveryTime": self.average_delivery_time,
            "driverUtilization": self.driver_utilization,
            "onTimeDeliveryRate": self.on_time_delivery_rate,
            "fuelCost": self.fuel_cost,
            "costPerDelivery": self.cost_per_delivery,
            "totalPenalties": self.total_penalties,
            "totalBonuses": self.total_bonuses,
            "overallProfit": self.overall_profit,
            "efficiencyScore": self.efficiency_score,
        }


@dataclass
class SimulationReport:
    """
    Everything a successful run returns.

    Attributes:
        request: The validated request
        kpis: Aggregated KPIs
        metadata: Run metadata (timestamp, record counts); not part of the KPI contract
        drivers: Final state of each selected driver
        outcomes: Per-delivery outcomes in processing order
        skipped: Eligible orders that produced no outcome
    """
    request: SimulationRequest
    kpis: KPIResult
    metadata: Dict[str, Any]
    drivers: List[DriverState] = field(default_factory=list)
    outcomes: List[DeliveryOutcome] = field(default_factory=list)
    skipped: List[SkippedOrder] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Render the success envelope."""
        return {
            "success": True,
            "data": self.kpis.to_dict(),
            "metadata": dict(self.metadata),
            "drivers": [d.to_dict() for d in self.drivers],
            "skippedOrders": [s.to_dict() for s in self.skipped],
        }
