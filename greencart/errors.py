# greencart-sim/greencart/errors.py
"""
Error types for the GreenCart Delivery Simulation.

Three families of failure exist:
- Validation errors: the request itself is malformed or out of range
- Resource errors: not enough drivers, no routes or no orders to simulate
- Unexpected errors: upstream data fetch or record parsing failed

All of them are terminal for a run. No partial KPIs are ever returned.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Machine-readable error codes exposed to callers."""
    MISSING_BODY = "MISSING_BODY"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_TYPE = "INVALID_TYPE"
    INVALID_RANGE = "INVALID_RANGE"
    INVALID_FORMAT = "INVALID_FORMAT"
    INSUFFICIENT_DRIVERS = "INSUFFICIENT_DRIVERS"
    NO_ROUTES = "NO_ROUTES"
    NO_ORDERS = "NO_ORDERS"
    SIMULATION_ERROR = "SIMULATION_ERROR"


@dataclass(frozen=True)
class ValidationFailure:
    """A single rejected field in a simulation request."""
    message: str
    code: ErrorCode
    field: str


class SimulationError(Exception):
    """
    Base error for a simulation run.

    Attributes:
        code: One of ErrorCode
        message: Human-readable description
        field: Offending request field, if any
        details: Extra free-form context (e.g. upstream error text)
        extra: Additional structured values merged into the error envelope
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        field: Optional[str] = None,
        details: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.field = field
        self.details = details
        self.extra: Dict[str, Any] = dict(extra or {})

    def to_dict(self) -> Dict[str, Any]:
        """Render the error envelope returned to callers."""
        payload: Dict[str, Any] = {"error": self.message, "code": self.code.value}
        if self.field is not None:
            payload["field"] = self.field
        if self.details is not None:
            payload["details"] = self.details
        payload.update(self.extra)
        return payload

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code.value}: {self.message})"


class RequestValidationError(SimulationError):
    """Raised when a simulation request fails input validation."""

    def __init__(self, failure: ValidationFailure) -> None:
        super().__init__(failure.code, failure.message, field=failure.field)
        self.failure = failure


class DataSourceError(Exception):
    """Raised when drivers, routes or orders cannot be fetched."""


class RecordError(ValueError):
    """Raised when a driver, route or order record does not match the schema."""


def insufficient_drivers(available: int, requested: int) -> SimulationError:
    return SimulationError(
        ErrorCode.INSUFFICIENT_DRIVERS,
        "Insufficient active drivers available",
        details=f"Requested: {requested}, Available: {available}",
        extra={"availableDrivers": available, "requestedDrivers": requested},
    )


def no_routes() -> SimulationError:
    return SimulationError(
        ErrorCode.NO_ROUTES,
        "No routes available for simulation",
        details="At least one route must exist to run simulation",
    )


def no_orders() -> SimulationError:
    return SimulationError(
        ErrorCode.NO_ORDERS,
        "No pending orders available for simulation",
        details="At least one pending or in-transit order must exist to run simulation",
    )
