import pytest

from plantsim.engine import baseline_state
from plantsim.levers import LEVER_IDS
from plantsim.state import SystemState
from plantsim.water_models import (
    circulating_water_flow,
    condensate_flow,
    condenser_pressure,
    derive_indicators,
    drum_level,
    flue_gas_temp,
    heat_rate,
    oil_tank_level,
    plant_efficiency,
    plant_statuses,
)


def test_drum_level_formula(cfg):
    assert drum_level(0.5, 0.6, 1340.0, cfg) == pytest.approx(50.0 + 40.0 * (0.6 - 0.67))
    assert drum_level(0.0, 0.0, 0.0, cfg) == pytest.approx(35.0)
    assert drum_level(1.0, 1.0, 0.0, cfg) == 100.0


def test_drum_level_falls_with_steam_draw(cfg):
    assert drum_level(0.5, 0.5, 1500.0, cfg) < drum_level(0.5, 0.5, 500.0, cfg)


@pytest.mark.parametrize("low,high", [(0.0, 0.5), (0.5, 1.0)])
def test_cooling_water_monotonic(cfg, low, high):
    assert circulating_water_flow(low, 300.0, cfg) < circulating_water_flow(high, 300.0, cfg)
    assert condenser_pressure(low, 0.5, 300.0, cfg) > condenser_pressure(high, 0.5, 300.0, cfg)


def test_condensate_rises_with_load(cfg):
    assert condensate_flow(0.0, 0.5, cfg) == 0.0
    assert condensate_flow(100.0, 0.5, cfg) < condensate_flow(400.0, 0.5, cfg)


def test_oil_tank_level_is_deterministic(cfg):
    assert oil_tank_level(1500.0, cfg) == oil_tank_level(1500.0, cfg)
    assert oil_tank_level(3000.0, cfg) < oil_tank_level(0.0, cfg)


def test_exhaust_damper_cools_flue_gas(cfg):
    assert flue_gas_temp(500.0, 1.0, cfg) < flue_gas_temp(500.0, 0.0, cfg)


def test_efficiency_and_heat_rate_idle(cfg):
    assert plant_efficiency(0.0, 0.0, cfg) == 0.0
    assert heat_rate(0.0, 1000.0) == 0.0
    assert 8000.0 <= heat_rate(200.0, 1400.0) <= 12000.0


def test_derive_indicators_covers_state_fields(cfg):
    fractions = {lever_id: 0.5 for lever_id in LEVER_IDS}
    state = SystemState(main_steam_temp=480.0, main_steam_flow=1300.0, turbine_speed=900.0, load=180.0)
    indicators = derive_indicators(fractions, state, cfg)
    for name in indicators:
        assert hasattr(state, name)
    assert indicators["frequency_deviation"] == pytest.approx(indicators["frequency"] - 50.0)
    assert indicators["heater1_temp"] > indicators["heater4_temp"]
    assert indicators["fuel_consumption_rate"] > indicators["coal_loading_rate"]


class TestStatuses:
    def test_cold_plant(self, cfg):
        statuses = plant_statuses(baseline_state(cfg), 0.0)
        assert statuses["turbine_status"] == "stopped"
        assert statuses["generator_status"] == "offline"

    def test_tripped_plant(self):
        state = SystemState(turbine_speed=2000.0, load=100.0, trip=True)
        statuses = plant_statuses(state, 0.5)
        assert statuses["turbine_status"] == "emergency"
        assert statuses["generator_status"] == "offline"

    def test_generating_plant(self):
        state = SystemState(turbine_speed=2000.0, load=100.0)
        assert plant_statuses(state, 0.5)["generator_status"] == "online"


def test_heat_rate_zero_without_fuel(cfg):
    assert heat_rate(150.0, 0.0, cfg) == 0.0
    assert heat_rate(150.0, 1400.0, cfg) > 0.0
