# greencart-sim/greencart/validation.py
"""
Input validation for simulation requests.

Requests are checked before any data is fetched. Checks run in a fixed order
and stop at the first failure:

1. The payload is a mapping
2. numberOfDrivers: present, integer, 1..MAX_DRIVERS_PER_REQUEST
3. routeStartTime: present, string, 24-hour H:MM / HH:MM
4. maxHoursPerDriver: present, number, (0, MAX_HOURS_PER_DRIVER_LIMIT]
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any, Optional

from . import config, utils
from .errors import ErrorCode, RequestValidationError, ValidationFailure
from .models import SimulationRequest

_START_TIME_RE = re.compile(config.ROUTE_START_TIME_PATTERN)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid count or duration
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integer(value: Any) -> bool:
    if not _is_number(value):
        return False
    return isinstance(value, int) or (math.isfinite(value) and float(value).is_integer())


def _validate_number_of_drivers(value: Any) -> Optional[ValidationFailure]:
    field = "numberOfDrivers"
    if value is None:
        return ValidationFailure("Number of drivers is required", ErrorCode.MISSING_FIELD, field)
    if not _is_integer(value):
        return ValidationFailure("Number of drivers must be an integer", ErrorCode.INVALID_TYPE, field)
    if value <= 0:
        return ValidationFailure(
            "Number of drivers must be greater than 0", ErrorCode.INVALID_RANGE, field
        )
    if value > config.MAX_DRIVERS_PER_REQUEST:
        return ValidationFailure(
            f"Number of drivers cannot exceed {config.MAX_DRIVERS_PER_REQUEST}",
            ErrorCode.INVALID_RANGE,
            field,
        )
    return None


def _validate_route_start_time(value: Any) -> Optional[ValidationFailure]:
    field = "routeStartTime"
    if value is None or value == "":
        return ValidationFailure("Route start time is required", ErrorCode.MISSING_FIELD, field)
    if not isinstance(value, str):
        return ValidationFailure("Route start time must be a string", ErrorCode.INVALID_TYPE, field)
    if not _START_TIME_RE.fullmatch(value):
        return ValidationFailure(
            "Route start time must be in HH:MM format (24-hour)", ErrorCode.INVALID_FORMAT, field
        )
    return None


def _validate_max_hours(value: Any) -> Optional[ValidationFailure]:
    field = "maxHoursPerDriver"
    if value is None:
        return ValidationFailure("Max hours per driver is required", ErrorCode.MISSING_FIELD, field)
    if not _is_number(value):
        return ValidationFailure("Max hours per driver must be a number", ErrorCode.INVALID_TYPE, field)
    if not math.isfinite(value) or value <= 0:
        return ValidationFailure(
            "Max hours per driver must be greater than 0", ErrorCode.INVALID_RANGE, field
        )
    if value > config.MAX_HOURS_PER_DRIVER_LIMIT:
        return ValidationFailure(
            f"Max hours per driver cannot exceed {config.MAX_HOURS_PER_DRIVER_LIMIT:g} hours",
            ErrorCode.INVALID_RANGE,
            field,
        )
    return None


def validate_request(payload: Any) -> Optional[ValidationFailure]:
    """
    Validate a raw simulation request.

    Args:
        payload: Decoded request body (normally a dict parsed from JSON)

    Returns:
        None if the request is valid, otherwise the first ValidationFailure
    """
    if payload is None or not isinstance(payload, Mapping):
        return ValidationFailure(
            "Request body is required and must be an object", ErrorCode.MISSING_BODY, "body"
        )

    return (
        _validate_number_of_drivers(payload.get("numberOfDrivers"))
        or _validate_route_start_time(payload.get("routeStartTime"))
        or _validate_max_hours(payload.get("maxHoursPerDriver"))
    )


def parse_request(payload: Any) -> SimulationRequest:
    """
    Validate a raw payload and convert it to a SimulationRequest.

    Raises:
        RequestValidationError: Carrying the first ValidationFailure
    """
    failure = validate_request(payload)
    if failure is not None:
        raise RequestValidationError(failure)

    return SimulationRequest(
        number_of_drivers=int(payload["numberOfDrivers"]),
        route_start_time=utils.parse_clock_time(payload["routeStartTime"]),
        max_hours_per_driver=float(payload["maxHoursPerDriver"]),
    )
