# greencart-sim/greencart/simulation.py
"""
Simulation service for the GreenCart Delivery Simulation.

Ties the pipeline together for one request:

    validate -> fetch (drivers, routes, orders in parallel) -> schedule -> aggregate

Each run is independent: state is rebuilt from the data source every call,
and the computation itself is a deterministic single pass. Re-running with
the same data gives the same KPIs.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Tuple

from . import config, utils
from .datasources import DataSource
from .errors import ErrorCode, SimulationError
from .kpi import calculate_kpis
from .models import DriverRecord, OrderRecord, RouteRecord, SimulationReport, SimulationRequest
from .scheduling import run_schedule
from .validation import parse_request

logger = logging.getLogger(__name__)


class DeliverySimulation:
    """
    Runs delivery simulations against a data source.

    Attributes:
        data_source: Provides active drivers, routes and pending orders
    """

    def __init__(self, data_source: DataSource) -> None:
        self.data_source = data_source

    def fetch_inputs(self) -> Tuple[List[DriverRecord], List[RouteRecord], List[OrderRecord]]:
        """
        Fetch drivers, routes and orders concurrently and wait for all three.

        Raises:
            SimulationError: SIMULATION_ERROR if any fetch fails
        """
        with ThreadPoolExecutor(max_workers=config.FETCH_WORKERS) as pool:
            drivers_future = pool.submit(self.data_source.active_drivers)
            routes_future = pool.submit(self.data_source.all_routes)
            orders_future = pool.submit(self.data_source.pending_orders)

            try:
                return drivers_future.result(), routes_future.result(), orders_future.result()
            except Exception as e:
                logger.error("Data fetch failed: %s", e)
                raise SimulationError(
                    ErrorCode.SIMULATION_ERROR,
                    "Internal server error during simulation",
                    details=str(e) or type(e).__name__,
                    extra={"timestamp": utils.utc_timestamp()},
                ) from e

    def run_request(self, request: SimulationRequest) -> SimulationReport:
        """
        Run a simulation for an already validated request.

        Raises:
            SimulationError: On fetch failure or insufficient drivers/routes/orders
        """
        drivers, routes, orders = self.fetch_inputs()

        logger.info(
            "Starting simulation with %d drivers, %d routes, %d orders",
            request.number_of_drivers, len(routes), len(orders),
        )

        schedule = run_schedule(request, drivers, routes, orders)
        kpis = calculate_kpis(
            schedule.outcomes, schedule.drivers, request.max_hours_per_driver, orders
        )

        metadata: Dict[str, Any] = {
            "simulationTimestamp": utils.utc_timestamp(),
            "routeStartTime": utils.format_clock_time(request.route_start_time),
            "totalDriversAvailable": len(drivers),
            "totalRoutesProcessed": len(routes),
            "totalOrdersProcessed": len(orders),
            "skippedOrders": len(schedule.skipped),
        }

        logger.info(
            "Simulation complete: %d deliveries, %.2f%% on time, profit %.2f",
            kpis.total_deliveries, kpis.on_time_delivery_rate, kpis.overall_profit,
        )

        return SimulationReport(
            request=request,
            kpis=kpis,
            metadata=metadata,
            drivers=schedule.drivers,
            outcomes=schedule.outcomes,
            skipped=schedule.skipped,
        )

    def run(self, payload: Any) -> SimulationReport:
        """
        Validate a raw request payload and run the simulation.

        Validation happens before any data is fetched.

        Args:
            payload: Decoded request body with numberOfDrivers, routeStartTime
                and maxHoursPerDriver

        Returns:
            SimulationReport with KPIs and run metadata

        Raises:
            RequestValidationError: If the payload is invalid
            SimulationError: On fetch failure or insufficient resources
        """
        request = parse_request(payload)
        return self.run_request(request)
