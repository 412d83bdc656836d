"""Shared fixtures for the plant simulator tests."""

from __future__ import annotations

from typing import Callable, Dict, List

import pytest

from config.simulation_config import CONFIG, SimulationConfig
from plantsim.engine import baseline_state, step_system
from plantsim.simulation_core import SCENARIOS
from plantsim.state import SystemState


@pytest.fixture
def cfg() -> SimulationConfig:
    return CONFIG


@pytest.fixture
def nominal_levers() -> Dict[str, float]:
    return dict(SCENARIOS["nominal"])


@pytest.fixture
def overfire_levers() -> Dict[str, float]:
    return dict(SCENARIOS["overfire"])


@pytest.fixture
def cold_levers() -> Dict[str, float]:
    return dict(SCENARIOS["cold_standby"])


@pytest.fixture
def run_ticks() -> Callable[..., List[SystemState]]:
    """Factory: run ``n`` ticks of constant levers and return every state."""

    def _run(levers, n, dt=1.0, start=None, config=None):
        state = start if start is not None else baseline_state(config)
        states = []
        for _ in range(n):
            state = step_system(levers, state, dt, config)
            states.append(state)
        return states

    return _run
