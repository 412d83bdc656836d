from dataclasses import replace

import pytest

from plantsim.engine import baseline_state
from plantsim.levers import uniform_levers
from plantsim.protection import (
    MANUAL_SHUTDOWN,
    begin_shutdown,
    decay_primary,
    protected_levers,
    trip_reason,
)
from plantsim.state import PlantMode, SystemState


class TestTripReason:
    def test_healthy_state(self, cfg):
        assert trip_reason(baseline_state(cfg), cfg) is None

    @pytest.mark.parametrize(
        "changes,fragment",
        [
            ({"main_steam_temp": 625.0}, "overtemperature"),
            ({"drum_level": 5.0}, "drum level low"),
            ({"drum_level": 97.0}, "drum level high"),
            ({"turbine_speed": 3400.0}, "overspeed"),
        ],
    )
    def test_each_limit(self, cfg, changes, fragment):
        state = replace(baseline_state(cfg), **changes)
        assert fragment in trip_reason(state, cfg)


def test_protected_levers_cut_fuel_and_throttle():
    levers = uniform_levers(60.0)
    applied = protected_levers(levers, True)
    assert applied["coal_feed"] == applied["fuel_injection"] == applied["steam_turbine"] == 0.0
    assert applied["feedwater"] == 60.0
    assert levers["coal_feed"] == 60.0
    assert protected_levers(levers, False) == levers


class TestShutdown:
    def test_begin_shutdown_arms_countdown(self, cfg):
        state = begin_shutdown(baseline_state(cfg), config=cfg)
        assert state.mode is PlantMode.SHUTTING_DOWN
        assert state.trip
        assert state.trip_reason == MANUAL_SHUTDOWN
        assert state.shutdown_time == cfg.SHUTDOWN_COUNTDOWN_SECONDS

    def test_begin_shutdown_keeps_existing_reason(self, cfg):
        state = replace(baseline_state(cfg), trip=True, trip_reason="turbine overspeed (3400 rpm)")
        assert begin_shutdown(state, 5.0, cfg).trip_reason.startswith("turbine overspeed")

    def test_zero_countdown_is_immediate(self, cfg):
        assert begin_shutdown(baseline_state(cfg), 0.0, cfg).mode is PlantMode.SHUT_DOWN

    def test_decay_is_monotone_and_floored(self, cfg):
        state = begin_shutdown(
            SystemState(main_steam_temp=500.0, main_steam_pressure=9.0, main_steam_flow=1200.0, turbine_speed=900.0, load=180.0),
            config=cfg,
        )
        previous = state
        for _ in range(200):
            state = decay_primary(state, 0.05, cfg)
            for name, value in state.primary().items():
                assert value <= previous.primary()[name]
            previous = state
        assert state.main_steam_temp >= cfg.STEAM_TEMP_MIN_C
        assert state.main_steam_pressure >= cfg.STEAM_PRESSURE_MIN_MPA
        assert state.load == pytest.approx(180.0 * 0.95**200)

    def test_countdown_expiry(self, cfg):
        state = begin_shutdown(baseline_state(cfg), 1.0, cfg)
        state = decay_primary(state, 0.6, cfg)
        assert state.mode is PlantMode.SHUTTING_DOWN
        state = decay_primary(state, 0.6, cfg)
        assert state.mode is PlantMode.SHUT_DOWN
        assert state.shutdown_time == 0.0
        assert state.trip


def test_repeated_shutdown_keeps_running_countdown(cfg):
    state = begin_shutdown(baseline_state(cfg), 10.0, cfg)
    for _ in range(6):
        state = decay_primary(state, 1.0, cfg)
    again = begin_shutdown(state, 10.0, cfg)
    assert again.shutdown_time == pytest.approx(4.0)
    assert again.mode is PlantMode.SHUTTING_DOWN
    assert again == state
