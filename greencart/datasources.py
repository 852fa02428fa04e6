# greencart-sim/greencart/datasources.py
"""
Data access for the GreenCart Delivery Simulation.

The engine never reaches into ambient state. It is handed a data source with
three queries:

- active_drivers(): drivers whose status is 'active'
- all_routes(): every route, in storage order
- pending_orders(): orders that are 'pending' or 'in-transit'

Implementations:
- InMemoryDataSource: records or dicts held in memory (tests, embedding)
- CsvDataSource: drivers.csv / routes.csv / orders.csv in a directory
- SupabaseDataSource: the Supabase (PostgREST) REST API over HTTP
"""

from __future__ import annotations

import csv
import logging
import os
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Protocol, TypeVar, Union

import requests

from . import config
from .errors import DataSourceError, RecordError
from .models import DriverRecord, OrderRecord, RouteRecord

logger = logging.getLogger(__name__)

R = TypeVar("R")


class DataSource(Protocol):
    """Read-only access to the three collections a simulation needs."""

    def active_drivers(self) -> List[DriverRecord]: ...

    def all_routes(self) -> List[RouteRecord]: ...

    def pending_orders(self) -> List[OrderRecord]: ...


def _coerce(items: Iterable[Union[R, Mapping[str, Any]]], parser: Callable[[Mapping[str, Any]], R]) -> List[R]:
    return [parser(item) if isinstance(item, Mapping) else item for item in items]


def _parse_rows(rows: Iterable[Mapping[str, Any]], parser: Callable[[Mapping[str, Any]], R], origin: str) -> List[R]:
    records: List[R] = []
    for line, row in enumerate(rows, start=1):
        try:
            records.append(parser(row))
        except RecordError as e:
            raise RecordError(f"Invalid record #{line} in {origin}: {e}")
    return records


class InMemoryDataSource:
    """
    Data source over in-memory collections.

    Accepts record objects or plain dicts (parsed with the strict record schema).
    Status filters are applied on every query, like a database would.
    """

    def __init__(
        self,
        drivers: Iterable[Union[DriverRecord, Mapping[str, Any]]] = (),
        routes: Iterable[Union[RouteRecord, Mapping[str, Any]]] = (),
        orders: Iterable[Union[OrderRecord, Mapping[str, Any]]] = (),
    ) -> None:
        self.drivers: List[DriverRecord] = _coerce(drivers, DriverRecord.from_dict)
        self.routes: List[RouteRecord] = _coerce(routes, RouteRecord.from_dict)
        self.orders: List[OrderRecord] = _coerce(orders, OrderRecord.from_dict)

    def active_drivers(self) -> List[DriverRecord]:
        return [d for d in self.drivers if d.is_active]

    def all_routes(self) -> List[RouteRecord]:
        return list(self.routes)

    def pending_orders(self) -> List[OrderRecord]:
        return [o for o in self.orders if o.is_eligible]


class CsvDataSource:
    """
    Data source reading CSV exports from a directory.

    Expected files and columns:
        drivers.csv: id, name, past_seven_day_hours, status
        routes.csv:  route_id, distance_km, traffic_level, base_time_minutes
        orders.csv:  id, value_rs, assigned_route, status
    """

    DRIVERS_FILE = "drivers.csv"
    ROUTES_FILE = "routes.csv"
    ORDERS_FILE = "orders.csv"

    def __init__(self, data_dir: str = config.DATA_DIR) -> None:
        self.data_dir = data_dir

    def _path(self, filename: str) -> str:
        return os.path.join(self.data_dir, filename)

    def missing_files(self) -> List[str]:
        """Paths of expected CSV files that do not exist."""
        return [
            self._path(name)
            for name in (self.DRIVERS_FILE, self.ROUTES_FILE, self.ORDERS_FILE)
            if not os.path.exists(self._path(name))
        ]

    def _load(self, filename: str, parser: Callable[[Mapping[str, Any]], R]) -> List[R]:
        """
        Load and parse one CSV file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            RecordError: If a row doesn't match the record schema
        """
        path = self._path(filename)
        if not os.path.exists(path):
            raise FileNotFoundError(f"Data file not found: {path}")

        with open(path, "r", newline="", encoding="utf-8") as f:
            records = _parse_rows(csv.DictReader(f), parser, path)

        logger.debug("Loaded %d rows from %s", len(records), path)
        return records

    def active_drivers(self) -> List[DriverRecord]:
        return [d for d in self._load(self.DRIVERS_FILE, DriverRecord.from_dict) if d.is_active]

    def all_routes(self) -> List[RouteRecord]:
        return self._load(self.ROUTES_FILE, RouteRecord.from_dict)

    def pending_orders(self) -> List[OrderRecord]:
        return [o for o in self._load(self.ORDERS_FILE, OrderRecord.from_dict) if o.is_eligible]


class SupabaseDataSource:
    """
    Data source backed by the Supabase REST (PostgREST) API.

    Each query is a single GET against /rest/v1/<table> with the same
    filters the store applies for the simulation:
        drivers: status=eq.active
        routes:  (all)
        orders:  status=in.(pending,in-transit)
    """

    def __init__(
        self,
        url: str = config.SUPABASE_URL,
        api_key: str = config.SUPABASE_API_KEY,
        timeout: float = config.SUPABASE_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not url:
            raise DataSourceError("SUPABASE_URL is not configured")
        if not api_key:
            raise DataSourceError("SUPABASE_API_KEY is not configured")

        self.base_url = url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        })

    def _select(self, table: str, filters: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
        """
        Fetch all rows of a table matching the PostgREST filters.

        Raises:
            DataSourceError: On timeout, HTTP error or malformed response
        """
        params = {"select": "*"}
        params.update(filters or {})
        url = f"{self.base_url}/rest/v1/{table}"

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            rows = response.json()
        except requests.exceptions.Timeout:
            logger.warning("Supabase request for %s timed out", table)
            raise DataSourceError(f"Failed to fetch {table}: request timed out")
        except requests.exceptions.RequestException as e:
            logger.warning("Supabase request for %s failed: %s", table, e)
            raise DataSourceError(f"Failed to fetch {table}: {e}")
        except ValueError as e:
            raise DataSourceError(f"Failed to fetch {table}: invalid JSON response ({e})")

        if not isinstance(rows, list):
            raise DataSourceError(f"Failed to fetch {table}: expected a list of rows")
        return rows

    def active_drivers(self) -> List[DriverRecord]:
        rows = self._select("drivers", {"status": f"eq.{config.ELIGIBLE_DRIVER_STATUS}"})
        return _parse_rows(rows, DriverRecord.from_dict, "drivers")

    def all_routes(self) -> List[RouteRecord]:
        return _parse_rows(self._select("routes"), RouteRecord.from_dict, "routes")

    def pending_orders(self) -> List[OrderRecord]:
        statuses = ",".join(config.ELIGIBLE_ORDER_STATUSES)
        rows = self._select("orders", {"status": f"in.({statuses})"})
        return _parse_rows(rows, OrderRecord.from_dict, "orders")
