import pytest

from plantsim.turbine_models import (
    grid_frequency,
    mechanical_power,
    specific_work,
    step_turbine,
    turbine_efficiency,
)


def test_specific_work_zero_at_condenser_temperature(cfg):
    assert specific_work(cfg.CONDENSER_REFERENCE_TEMP_C, cfg) == 0.0
    assert specific_work(540.0, cfg) == pytest.approx(2.2 * 500.0)


def test_efficiency_capped_by_pressure_ratio(cfg):
    assert turbine_efficiency(1.0, 20.0, cfg) == pytest.approx(cfg.TURBINE_EFFICIENCY)
    assert turbine_efficiency(1.0, 5.0, cfg) == pytest.approx(cfg.TURBINE_EFFICIENCY * 0.5)


def test_closed_throttle_produces_no_power(cfg):
    assert mechanical_power(1500.0, 540.0, 12.0, 0.0, cfg) == 0.0


def test_grid_frequency_droop(cfg):
    assert grid_frequency(3000.0, cfg) == pytest.approx(50.0)
    assert grid_frequency(3060.0, cfg) == pytest.approx(51.0)
    assert grid_frequency(0.0, cfg) == 0.0


class TestStepTurbine:
    def test_spins_up_with_steam(self, cfg):
        result = step_turbine(0.7, 0.7, 1340.0, 481.0, 8.9, 0.0, 0.0, 1.0, cfg)
        assert result.target_load == pytest.approx(183.0, rel=0.02)
        assert result.target_turbine_speed == pytest.approx(934.0, rel=0.02)
        assert 0.0 < result.load < result.target_load

    def test_load_limited_by_demand(self, cfg):
        result = step_turbine(1.0, 0.1, 2000.0, 600.0, 15.0, 3000.0, 60.0, 1.0, cfg)
        assert result.target_load == pytest.approx(0.1 * cfg.RATED_POWER_MW)

    def test_coasts_down_without_steam(self, cfg):
        result = step_turbine(0.7, 0.7, 0.0, 200.0, 0.1, 3000.0, 300.0, 1.0, cfg)
        assert result.target_turbine_speed == 0.0
        assert 0.0 < result.turbine_speed < 3000.0
        assert 0.0 < result.load < 300.0
