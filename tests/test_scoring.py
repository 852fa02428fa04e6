import pytest

from conftest import make_order, make_route
from greencart import config, scoring


@pytest.mark.parametrize("level, expected", [
    ("Low", 1.0),
    ("Medium", 1.3),
    ("High", 1.7),
    ("Extreme", 1.0),
    ("", 1.0),
])
def test_traffic_multiplier(level, expected):
    assert scoring.get_traffic_multiplier(level) == expected


class TestFuelCost:
    def test_high_traffic_surcharge(self):
        assert scoring.calculate_fuel_cost(make_route(distance=10, traffic="High")) == 70

    @pytest.mark.parametrize("traffic", ["Low", "Medium"])
    def test_no_surcharge_below_high(self, traffic):
        assert scoring.calculate_fuel_cost(make_route(distance=10, traffic=traffic)) == 50


class TestFatigue:
    def test_fatigued_driver_is_thirty_percent_slower(self, fatigued_driver):
        outcome = scoring.simulate_delivery(make_order(), make_route(base_time=30), fatigued_driver)
        assert outcome.actual_delivery_time == pytest.approx(39)

    def test_rested_driver_keeps_base_time(self, fresh_driver):
        outcome = scoring.simulate_delivery(make_order(), make_route(base_time=30), fresh_driver)
        assert outcome.actual_delivery_time == pytest.approx(30)

    def test_fatigue_stacks_on_traffic(self):
        route = make_route(traffic="Medium", base_time=30)
        assert scoring.calculate_delivery_time(route, is_fatigued=True) == pytest.approx(50.7)


class TestOnTimeRule:
    def test_grace_uses_base_time_not_adjusted_time(self, fresh_driver):
        outcome = scoring.simulate_delivery(
            make_order(), make_route(traffic="High", base_time=30), fresh_driver
        )

        assert outcome.actual_delivery_time == pytest.approx(51)
        assert scoring.allowed_delivery_time(make_route(traffic="High", base_time=30)) == 40
        assert outcome.is_on_time is False
        assert outcome.penalty == 50

    def test_medium_traffic_within_grace(self, fresh_driver):
        outcome = scoring.simulate_delivery(
            make_order(), make_route(traffic="Medium", base_time=30), fresh_driver
        )
        assert outcome.actual_delivery_time == pytest.approx(39)
        assert outcome.is_on_time is True
        assert outcome.penalty == 0

    def test_delivery_exactly_at_allowed_time_is_on_time(self, fresh_driver, monkeypatch):
        monkeypatch.setattr(config, "ON_TIME_GRACE_MINUTES", 0.0)

        outcome = scoring.simulate_delivery(make_order(), make_route(base_time=40), fresh_driver)

        assert outcome.actual_delivery_time == 40
        assert outcome.is_on_time is True
        assert outcome.penalty == 0

    def test_penalty_tracks_on_time_flag(self, fresh_driver, fatigued_driver):
        for driver in (fresh_driver, fatigued_driver):
            for traffic in ("Low", "Medium", "High"):
                outcome = scoring.simulate_delivery(
                    make_order(), make_route(traffic=traffic, base_time=30), driver
                )
                assert outcome.penalty == (0 if outcome.is_on_time else 50)


class TestHighValueBonus:
    def test_on_time_high_value_earns_ten_percent(self, fresh_driver):
        outcome = scoring.simulate_delivery(make_order(value=1500), make_route(), fresh_driver)
        assert outcome.is_on_time
        assert outcome.bonus == pytest.approx(150)

    def test_late_high_value_earns_nothing(self, fresh_driver):
        outcome = scoring.simulate_delivery(
            make_order(value=1500), make_route(traffic="High", base_time=30), fresh_driver
        )
        assert not outcome.is_on_time
        assert outcome.bonus == 0

    @pytest.mark.parametrize("value", [0, 800, 1000])
    def test_threshold_is_strictly_above_1000(self, fresh_driver, value):
        outcome = scoring.simulate_delivery(make_order(value=value), make_route(), fresh_driver)
        assert outcome.bonus == 0


def test_simulate_delivery_does_not_mutate_driver(fresh_driver):
    scoring.simulate_delivery(make_order(), make_route(), fresh_driver)

    assert fresh_driver.hours_worked == 0
    assert fresh_driver.deliveries == 0
    assert fresh_driver.is_fatigued is False


def test_outcome_carries_order_id(fresh_driver):
    outcome = scoring.simulate_delivery(make_order(order_id="ORD-42"), make_route(), fresh_driver)
    assert outcome.order_id == "ORD-42"
