# greencart-sim/greencart/utils.py
"""
Utility functions for the GreenCart Delivery Simulation.

Provides rounding, clock-time parsing and duration formatting helpers.
"""

from __future__ import annotations

import math
from datetime import datetime, time, timezone
from typing import Union

Number = Union[int, float]


def round_half_up(value: Number, ndigits: int = 0) -> float:
    """
    Round to `ndigits` decimals, with halves rounded towards +infinity.

    Python's built-in round() uses banker's rounding (round(0.5) == 0).
    KPI figures are reported with the conventional half-up rule instead.

    Args:
        value: Number to round
        ndigits: Decimal places to keep

    Returns:
        The rounded value as a float

    Example:
        >>> round_half_up(30.5)
        31.0
        >>> round_half_up(12.125, 2)
        12.13
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def round_money(value: Number) -> float:
    """Round a currency or percentage figure to 2 decimals."""
    return round_half_up(value, 2)


def parse_clock_time(value: str) -> time:
    """
    Parse an `H:MM` / `HH:MM` 24-hour string into a time object.

    Args:
        value: Clock time such as "09:30" or "9:30"

    Returns:
        A datetime.time object

    Raises:
        ValueError: If the string is not a valid clock time
    """
    return datetime.strptime(value, "%H:%M").time()


def format_clock_time(t: time) -> str:
    """Format a time object as zero-padded HH:MM."""
    return t.strftime("%H:%M")


def utc_timestamp() -> str:
    """Current UTC time in ISO-8601 format."""
    return datetime.now(timezone.utc).isoformat()


def minutes_to_hours(minutes: Number) -> float:
    """Convert a duration in minutes to hours."""
    return minutes / 60


def format_hours(hours: float) -> str:
    """
    Format a duration in hours as a human-readable string.

    Args:
        hours: Duration in hours

    Returns:
        Formatted string like "1h 23m" or "45m"
    """
    total_minutes = int(round_half_up(hours * 60))
    if total_minutes < 60:
        return f"{total_minutes}m"
    return f"{total_minutes // 60}h {total_minutes % 60}m"
