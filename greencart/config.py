# greencart-sim/greencart/config.py
"""
Configuration parameters for the GreenCart Delivery Simulation.

This module centralizes all tunable parameters:
- Company business rules applied to every simulated delivery
- Limits enforced on incoming simulation requests
- Data-source settings (read from the environment / .env file)

Business-rule values are part of the KPI contract. Changing them changes
every KPI the engine reports.
"""

import os
from typing import Dict, Final

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# REQUEST LIMITS
# =============================================================================

MAX_DRIVERS_PER_REQUEST: Final[int] = 100
"""Upper bound for numberOfDrivers in a simulation request."""

MAX_HOURS_PER_DRIVER_LIMIT: Final[float] = 24.0
"""Upper bound for maxHoursPerDriver (one calendar day)."""

ROUTE_START_TIME_PATTERN: Final[str] = r"([0-1]?[0-9]|2[0-3]):[0-5][0-9]"
"""24-hour clock, hour 0-23 (leading zero optional), minute 00-59."""

# =============================================================================
# TRAFFIC
# =============================================================================

TRAFFIC_MULTIPLIERS: Final[Dict[str, float]] = {
    "Low": 1.0,
    "Medium": 1.3,
    "High": 1.7,
}
"""Delivery-time multiplier per route traffic level."""

DEFAULT_TRAFFIC_MULTIPLIER: Final[float] = 1.0
"""Multiplier used when a route carries a traffic level not listed above."""

# =============================================================================
# COMPANY RULES
# =============================================================================

# Rule 1: late delivery penalty
ON_TIME_GRACE_MINUTES: float = 10.0
"""
Grace added to the route's *base* time to get the allowed delivery time.
Traffic and fatigue multipliers are NOT applied to the allowance.
"""

LATE_DELIVERY_PENALTY: float = 50.0
"""Flat penalty (Rs) for a delivery slower than the allowed time."""

# Rule 2: driver fatigue
FATIGUE_WEEKLY_HOURS_THRESHOLD: float = 56.0
"""Drivers above this many hours over the past 7 days start fatigued (8h/day)."""

FATIGUE_DAILY_HOURS_THRESHOLD: float = 8.0
"""Drivers become fatigued once simulated hours exceed this value."""

FATIGUE_SLOWDOWN_MULTIPLIER: float = 1.3
"""Fatigued drivers take 30% longer per delivery."""

# Rule 3: high-value bonus
HIGH_VALUE_THRESHOLD: float = 1000.0
"""Orders strictly above this value (Rs) qualify for the bonus."""

HIGH_VALUE_BONUS_RATE: float = 0.10
"""Share of the order value paid as bonus for on-time high-value orders."""

# Rule 4: fuel cost
FUEL_COST_PER_KM: float = 5.0
"""Base fuel cost (Rs per km)."""

HIGH_TRAFFIC_SURCHARGE_PER_KM: float = 2.0
"""Extra fuel cost (Rs per km) on High traffic routes."""

# =============================================================================
# RECORD FILTERS
# =============================================================================

ELIGIBLE_DRIVER_STATUS: Final[str] = "active"
"""Only drivers with this status can be selected."""

ELIGIBLE_ORDER_STATUSES: Final[tuple] = ("pending", "in-transit")
"""Orders in these states take part in a simulation."""

# =============================================================================
# DATA SOURCES
# =============================================================================

DATA_DIR: str = os.getenv("GREENCART_DATA_DIR", "data")
"""Directory holding drivers.csv, routes.csv and orders.csv for the CSV source."""

SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
"""Base URL of the Supabase project (e.g. https://<project>.supabase.co)."""

SUPABASE_API_KEY: str = os.getenv("SUPABASE_API_KEY", "")
"""API key sent as both `apikey` and bearer token to the REST endpoint."""

SUPABASE_TIMEOUT_SECONDS: float = float(os.getenv("SUPABASE_TIMEOUT_SECONDS", "10"))
"""Timeout for each table query. Fail fast rather than hang the run."""

FETCH_WORKERS: int = 3
"""Thread pool size for the three concurrent table fetches."""
