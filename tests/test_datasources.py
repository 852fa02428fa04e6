import pytest
import requests

from conftest import make_driver, make_order, make_route
from greencart.datasources import CsvDataSource, InMemoryDataSource, SupabaseDataSource
from greencart.errors import DataSourceError, RecordError
from greencart.models import DriverStatus, OrderStatus

DRIVER_ROW = {"id": "D1", "name": "Asha", "past_seven_day_hours": 12, "status": "active"}
ROUTE_ROW = {"route_id": "R1", "distance_km": 7.5, "traffic_level": "Medium", "base_time_minutes": 25}
ORDER_ROW = {"id": "O1", "value_rs": 640, "assigned_route": "R1", "status": "pending"}


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    def __init__(self, responses=None, error=None):
        self.headers = {}
        self.responses = responses or {}
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        if self.error is not None:
            raise self.error
        table = url.rsplit("/", 1)[-1]
        return self.responses.get(table, FakeResponse([]))


class TestInMemory:
    def test_filters_by_status(self):
        source = InMemoryDataSource(
            drivers=[make_driver("D1"), make_driver("D2", status=DriverStatus.INACTIVE)],
            routes=[make_route("R1"), make_route("R2")],
            orders=[
                make_order("O1"),
                make_order("O2", status=OrderStatus.IN_TRANSIT),
                make_order("O3", status=OrderStatus.DELIVERED),
                make_order("O4", status=OrderStatus.CANCELLED),
            ],
        )

        assert [d.driver_id for d in source.active_drivers()] == ["D1"]
        assert [r.route_id for r in source.all_routes()] == ["R1", "R2"]
        assert [o.order_id for o in source.pending_orders()] == ["O1", "O2"]

    def test_accepts_plain_dicts(self):
        source = InMemoryDataSource(drivers=[DRIVER_ROW], routes=[ROUTE_ROW], orders=[ORDER_ROW])

        route = source.all_routes()[0]
        assert route.distance_km == 7.5
        assert route.traffic_level == "Medium"
        assert source.pending_orders()[0].value_rs == 640
        assert source.active_drivers()[0].past_seven_day_hours == 12

    def test_missing_distance_is_rejected(self):
        row = {k: v for k, v in ROUTE_ROW.items() if k != "distance_km"}
        with pytest.raises(RecordError, match="distance_km"):
            InMemoryDataSource(routes=[row])

    @pytest.mark.parametrize("field, value", [
        ("traffic_level", ""),
        ("distance_km", 0),
        ("base_time_minutes", -5),
        ("distance_km", "far"),
    ])
    def test_invalid_route_fields(self, field, value):
        with pytest.raises(RecordError, match=field):
            InMemoryDataSource(routes=[dict(ROUTE_ROW, **{field: value})])

    @pytest.mark.parametrize("level", ["Severe", "high"])
    def test_unlisted_traffic_level_is_kept(self, level):
        route = InMemoryDataSource(routes=[dict(ROUTE_ROW, traffic_level=level)]).all_routes()[0]

        assert route.traffic_level == level
        assert route.is_high_traffic is False

    def test_alternate_field_names_are_not_guessed(self):
        row = {"id": "D1", "driver_name": "Asha", "past_seven_day_hours": 12, "status": "active"}
        with pytest.raises(RecordError, match="name"):
            InMemoryDataSource(drivers=[row])

    def test_boolean_is_not_a_number(self):
        with pytest.raises(RecordError):
            InMemoryDataSource(orders=[dict(ORDER_ROW, value_rs=True)])


class TestCsv:
    def write_files(self, directory, drivers, routes, orders):
        (directory / "drivers.csv").write_text(drivers)
        (directory / "routes.csv").write_text(routes)
        (directory / "orders.csv").write_text(orders)

    def test_reads_and_filters(self, tmp_path):
        self.write_files(
            tmp_path,
            "id,name,past_seven_day_hours,status\nD1,Asha,12,active\nD2,Ravi,3,on-leave\n",
            "route_id,distance_km,traffic_level,base_time_minutes\nR1,7.5,High,25\n",
            "id,value_rs,assigned_route,status\nO1,640,R1,pending\nO2,90,R1,delivered\n",
        )
        source = CsvDataSource(str(tmp_path))

        assert source.missing_files() == []
        assert [d.driver_id for d in source.active_drivers()] == ["D1"]
        assert source.all_routes()[0].is_high_traffic
        assert [o.order_id for o in source.pending_orders()] == ["O1"]

    def test_missing_file(self, tmp_path):
        source = CsvDataSource(str(tmp_path))

        assert len(source.missing_files()) == 3
        with pytest.raises(FileNotFoundError, match="routes.csv"):
            source.all_routes()

    def test_bad_row_reports_position(self, tmp_path):
        self.write_files(
            tmp_path,
            "id,name,past_seven_day_hours,status\n",
            "route_id,distance_km,traffic_level,base_time_minutes\nR1,7.5,Low,25\nR2,,Low,30\n",
            "id,value_rs,assigned_route,status\n",
        )
        with pytest.raises(RecordError, match="#2"):
            CsvDataSource(str(tmp_path)).all_routes()

    def test_sample_data(self, sample_data_dir):
        source = CsvDataSource(sample_data_dir)

        assert len(source.active_drivers()) == 6
        assert len(source.all_routes()) == 6
        assert len(source.pending_orders()) == 17


class TestSupabase:
    def test_sends_auth_headers_and_filters(self):
        session = FakeSession(responses={
            "drivers": FakeResponse([DRIVER_ROW]),
            "routes": FakeResponse([ROUTE_ROW]),
            "orders": FakeResponse([ORDER_ROW]),
        })
        source = SupabaseDataSource("https://example.supabase.co/", "secret", timeout=5, session=session)

        drivers = source.active_drivers()
        routes = source.all_routes()
        orders = source.pending_orders()

        assert session.headers["apikey"] == "secret"
        assert session.headers["Authorization"] == "Bearer secret"
        assert [d.driver_id for d in drivers] == ["D1"]
        assert [r.route_id for r in routes] == ["R1"]
        assert [o.order_id for o in orders] == ["O1"]

        urls = [call[0] for call in session.calls]
        assert urls == [
            "https://example.supabase.co/rest/v1/drivers",
            "https://example.supabase.co/rest/v1/routes",
            "https://example.supabase.co/rest/v1/orders",
        ]
        assert session.calls[0][1] == {"select": "*", "status": "eq.active"}
        assert session.calls[1][1] == {"select": "*"}
        assert session.calls[2][1] == {"select": "*", "status": "in.(pending,in-transit)"}
        assert all(call[2] == 5 for call in session.calls)

    @pytest.mark.parametrize("url, key", [("", "secret"), ("https://example.supabase.co", "")])
    def test_requires_configuration(self, url, key):
        with pytest.raises(DataSourceError):
            SupabaseDataSource(url, key, session=FakeSession())

    def test_http_error(self):
        session = FakeSession(responses={"routes": FakeResponse({"message": "boom"}, status_code=500)})
        source = SupabaseDataSource("https://example.supabase.co", "secret", session=session)

        with pytest.raises(DataSourceError, match="routes"):
            source.all_routes()

    def test_timeout(self):
        session = FakeSession(error=requests.exceptions.Timeout())
        source = SupabaseDataSource("https://example.supabase.co", "secret", session=session)

        with pytest.raises(DataSourceError, match="timed out"):
            source.active_drivers()

    def test_invalid_json(self):
        session = FakeSession(responses={"orders": FakeResponse(ValueError("Expecting value"))})
        source = SupabaseDataSource("https://example.supabase.co", "secret", session=session)

        with pytest.raises(DataSourceError, match="invalid JSON"):
            source.pending_orders()

    def test_non_list_payload(self):
        session = FakeSession(responses={"routes": FakeResponse({"rows": []})})
        source = SupabaseDataSource("https://example.supabase.co", "secret", session=session)

        with pytest.raises(DataSourceError, match="list of rows"):
            source.all_routes()

    def test_bad_row_is_a_record_error(self):
        session = FakeSession(responses={"routes": FakeResponse([dict(ROUTE_ROW, traffic_level=None)])})
        source = SupabaseDataSource("https://example.supabase.co", "secret", session=session)

        with pytest.raises(RecordError, match="routes"):
            source.all_routes()
