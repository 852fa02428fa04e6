from pathlib import Path

import pytest

from greencart.models import (
    DriverRecord,
    DriverState,
    DriverStatus,
    OrderRecord,
    OrderStatus,
    RouteRecord,
    SimulationRequest,
)
from greencart.utils import parse_clock_time

SAMPLE_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def make_driver(driver_id="D1", hours=0.0, name=None, status=DriverStatus.ACTIVE):
    return DriverRecord(
        driver_id=driver_id,
        name=name or f"Driver {driver_id}",
        past_seven_day_hours=hours,
        status=status,
    )


def make_route(route_id="R1", distance=10.0, traffic="Low", base_time=30.0):
    return RouteRecord(
        route_id=route_id,
        distance_km=distance,
        traffic_level=traffic,
        base_time_minutes=base_time,
    )


def make_order(order_id="O1", value=500.0, route_id="R1", status=OrderStatus.PENDING):
    return OrderRecord(
        order_id=order_id,
        value_rs=value,
        assigned_route=route_id,
        status=status,
    )


def make_request(drivers=1, max_hours=8.0, start="09:00"):
    return SimulationRequest(
        number_of_drivers=drivers,
        route_start_time=parse_clock_time(start),
        max_hours_per_driver=max_hours,
    )


@pytest.fixture
def fresh_driver():
    return DriverState.start(make_driver())


@pytest.fixture
def fatigued_driver():
    return DriverState.start(make_driver(hours=60))


@pytest.fixture
def valid_payload():
    return {"numberOfDrivers": 3, "routeStartTime": "09:00", "maxHoursPerDriver": 8}


@pytest.fixture
def sample_data_dir():
    return str(SAMPLE_DATA_DIR)
