# greencart-sim/greencart/__init__.py

from .models import (
    SimulationRequest,
    DriverRecord,
    RouteRecord,
    OrderRecord,
    DriverState,
    DeliveryOutcome,
    SkippedOrder,
    KPIResult,
    SimulationReport,
    DriverStatus,
    OrderStatus,
    TrafficLevel,
    SkipReason,
)
from .errors import (
    ErrorCode,
    SimulationError,
    RequestValidationError,
    ValidationFailure,
    DataSourceError,
    RecordError,
)
from .validation import validate_request, parse_request
from .scoring import simulate_delivery
from .scheduling import run_schedule, ScheduleResult
from .kpi import calculate_kpis
from .datasources import DataSource, InMemoryDataSource, CsvDataSource, SupabaseDataSource
from .simulation import DeliverySimulation

__version__ = "1.0.0"

__all__ = [
    # Models
    "SimulationRequest",
    "DriverRecord",
    "RouteRecord",
    "OrderRecord",
    "DriverState",
    "DeliveryOutcome",
    "SkippedOrder",
    "KPIResult",
    "SimulationReport",
    "DriverStatus",
    "OrderStatus",
    "TrafficLevel",
    "SkipReason",
    # Errors
    "ErrorCode",
    "SimulationError",
    "RequestValidationError",
    "ValidationFailure",
    "DataSourceError",
    "RecordError",
    # Core
    "DeliverySimulation",
    "ScheduleResult",
    # Functions
    "validate_request",
    "parse_request",
    "simulate_delivery",
    "run_schedule",
    "calculate_kpis",
    # Data sources
    "DataSource",
    "InMemoryDataSource",
    "CsvDataSource",
    "SupabaseDataSource",
]
