import logging

import pytest

from plantsim.engine import baseline_state
from plantsim.levers import LEVER_IDS
from plantsim.session import SimulatorSession
from plantsim.simulation_core import SCENARIOS
from plantsim.state import PlantMode


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session(cfg, clock):
    return SimulatorSession(cfg, clock=clock)


def _apply(session, levers):
    for lever_id, value in levers.items():
        session.set_lever_target(lever_id, value, immediate=True)


def test_new_session_is_baseline(session, cfg):
    assert session.snapshot() == baseline_state(cfg)
    assert session.history_frame().empty


def test_ticks_ignored_while_stopped(session):
    state = session.tick(1.0)
    assert state.run_seconds == 0.0
    assert session.history_frame().empty


def test_start_and_explicit_ticks(session):
    started = session.start()
    assert started.is_running
    assert started.start_time is not None
    for _ in range(5):
        state = session.tick(1.0)
    assert state.run_seconds == pytest.approx(5.0)
    assert len(session.history_frame()) == 5


def test_clock_driven_tick(session, clock):
    session.start()
    assert session.tick().run_seconds == 0.0
    clock.now += 0.5
    assert session.tick().run_seconds == pytest.approx(0.5)
    clock.now += 0.25
    assert session.tick().run_seconds == pytest.approx(0.75)


def test_stop_freezes_run_time(session):
    session.start()
    session.tick(1.0)
    stopped = session.stop()
    assert not stopped.is_running
    assert session.tick(1.0).run_seconds == pytest.approx(1.0)


def test_lever_targets_lag(session):
    session.start()
    assert session.set_lever_target("coal_feed", 80.0) == 80.0
    session.tick(1.0)
    value = session.lever_values()["coal_feed"]
    assert 0.0 < value < 80.0


def test_unknown_lever_rejected(session):
    with pytest.raises(ValueError):
        session.set_lever_target("reactor_rods", 10.0)


def test_earnings_follow_load_and_run_time(session, cfg):
    _apply(session, SCENARIOS["nominal"])
    session.start()
    for _ in range(120):
        state = session.tick(1.0)
    assert state.load > 0
    assert state.total_earnings == pytest.approx(state.load * cfg.REVENUE_RATE_PER_MWH * state.run_seconds / 3600.0)
    assert state.energy_produced_mwh == pytest.approx(state.load * state.run_seconds / 3600.0)


def test_invalid_dt_logged_and_ignored(session, caplog):
    session.start()
    session.tick(1.0)
    with caplog.at_level(logging.WARNING, logger="plantsim.session"):
        state = session.tick(float("nan"))
    assert state.run_seconds == pytest.approx(1.0)
    assert "invalid dt" in caplog.text


def test_trip_logged_once(session, caplog):
    _apply(session, SCENARIOS["overfire"])
    session.start()
    with caplog.at_level(logging.WARNING, logger="plantsim.session"):
        for _ in range(300):
            state = session.tick(1.0)
    assert state.trip
    assert caplog.text.count("Plant tripped") == 1


def test_shutdown_countdown_and_hold(session):
    _apply(session, SCENARIOS["nominal"])
    session.start()
    for _ in range(50):
        session.tick(1.0)
    assert session.shutdown().mode is PlantMode.SHUTTING_DOWN
    for _ in range(10):
        state = session.tick(1.0)
    assert state.mode is PlantMode.SHUT_DOWN
    frozen = state.run_seconds
    held = session.tick(1.0)
    assert held.run_seconds == frozen
    assert held.primary() == state.primary()


def test_reset_restores_baseline(session, cfg):
    _apply(session, SCENARIOS["overfire"])
    session.start()
    for _ in range(20):
        session.tick(1.0)
    state = session.reset()
    assert state == baseline_state(cfg)
    assert all(channel.current_value == 0.0 for channel in session.levers)
    assert session.history_frame().empty


def test_history_is_bounded(cfg, clock):
    session = SimulatorSession(cfg.with_overrides(HISTORY_MAX_SAMPLES=5), clock=clock)
    session.start()
    for _ in range(12):
        session.tick(0.5)
    history = session.history_frame()
    assert len(history) == 5
    assert history["t_s"].iloc[-1] == pytest.approx(6.0)
    assert set(LEVER_IDS) <= set(history.columns)


def test_repeated_shutdown_does_not_rearm_countdown(session):
    _apply(session, SCENARIOS["nominal"])
    session.start()
    for _ in range(30):
        session.tick(1.0)
    session.shutdown()
    for _ in range(6):
        session.tick(1.0)
    state = session.shutdown()
    assert state.shutdown_time == pytest.approx(4.0)
    for _ in range(4):
        state = session.tick(1.0)
    assert state.mode is PlantMode.SHUT_DOWN


def test_reset_after_finished_shutdown_restores_baseline(session, cfg):
    _apply(session, SCENARIOS["nominal"])
    session.start()
    for _ in range(60):
        session.tick(1.0)
    session.shutdown(10.0)
    for _ in range(10):
        state = session.tick(1.0)
    assert state.mode is PlantMode.SHUT_DOWN
    assert state.shutdown_time == 0.0
    assert session.reset() == baseline_state(cfg)
    assert session.snapshot() == baseline_state(cfg)
    assert all(channel.target_value == 0.0 for channel in session.levers)


def test_trip_keeps_displayed_levers_but_cuts_fuel(session):
    _apply(session, SCENARIOS["overfire"])
    session.start()
    for _ in range(300):
        state = session.tick(1.0)
    assert state.trip
    assert session.lever_values()["coal_feed"] == 100.0
    assert session.lever_values()["steam_turbine"] == 50.0
    assert state.coal_loading_rate == 0.0
    assert state.fuel_consumption_rate == 0.0
    history = session.history_frame()
    assert (history.loc[history["trip"], "coal_feed"] == 100.0).all()
