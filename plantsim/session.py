"""
Simulator session: the single owner of the live plant.

A session holds the lever bank, the current :class:`SystemState` and a
bounded history of snapshots. The dashboard (or any other front end) sends
commands and calls :meth:`SimulatorSession.tick` from its own scheduler;
lever changes only move targets and never advance time.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Callable, Deque, Dict, List

import pandas as pd

from config.simulation_config import CONFIG, SimulationConfig
from plantsim.economic_models import earnings, energy_produced
from plantsim.engine import baseline_state, step_system
from plantsim.levers import LeverBank, LeverChannel
from plantsim.protection import begin_shutdown
from plantsim.state import PlantMode, SystemState
from plantsim.utils.math_tools import is_valid_dt

logger = logging.getLogger(__name__)


class SimulatorSession:
    """Thread-safe handle around one simulated plant."""

    def __init__(
        self,
        config: SimulationConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or CONFIG
        self._clock = clock
        self._lock = threading.RLock()
        self._levers = LeverBank(self.config)
        self._state = baseline_state(self.config)
        self._history: Deque[Dict[str, float]] = deque(maxlen=self.config.HISTORY_MAX_SAMPLES)
        self._last_tick: float | None = None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def start(self) -> SystemState:
        with self._lock:
            if self._state.start_time is None:
                self._state.start_time = time.time()
            self._state.is_running = True
            self._last_tick = None
            logger.info("Simulation started")
            return self._state.copy()

    def stop(self) -> SystemState:
        with self._lock:
            self._state.is_running = False
            self._last_tick = None
            logger.info("Simulation stopped after %.1f s", self._state.run_seconds)
            return self._state.copy()

    def reset(self) -> SystemState:
        with self._lock:
            self._levers.reset()
            self._state = baseline_state(self.config)
            self._history.clear()
            self._last_tick = None
            logger.info("Simulation reset to baseline")
            return self._state.copy()

    def shutdown(self, countdown: float | None = None) -> SystemState:
        with self._lock:
            if self._state.mode in (PlantMode.SHUTTING_DOWN, PlantMode.SHUT_DOWN):
                logger.info("Shutdown already %s; request ignored", self._state.mode.value)
                return self._state.copy()
            self._state = begin_shutdown(self._state, countdown, self.config)
            logger.info("Emergency shutdown requested (%.1f s countdown)", self._state.shutdown_time)
            return self._state.copy()

    def set_lever_target(self, lever_id: str, value: float, immediate: bool = False) -> float:
        """Move a lever target; ``immediate`` also skips the actuator lag."""
        with self._lock:
            if immediate:
                return self._levers.set_immediate(lever_id, value)
            return self._levers.set_target(lever_id, value)

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------
    def tick(self, dt: float | None = None) -> SystemState:
        """
        Advance the plant once.

        Without an explicit *dt* the elapsed clock time since the previous
        tick is used; the first call after ``start`` only primes the clock.
        A stopped session ignores ticks.
        """
        with self._lock:
            if not self._state.is_running:
                return self._state.copy()

            now = self._clock()
            if dt is None:
                if self._last_tick is None:
                    self._last_tick = now
                    return self._state.copy()
                dt = now - self._last_tick
            self._last_tick = now

            if not is_valid_dt(dt):
                logger.warning("Ignoring tick with invalid dt=%r", dt)
                return self._state.copy()

            was_tripped = self._state.trip
            levers = self._levers.advance(dt)
            state = step_system(levers, self._state, dt, self.config)

            if self._state.mode is not PlantMode.SHUT_DOWN:
                state.run_seconds = self._state.run_seconds + dt
            state.total_earnings = earnings(state.load, state.run_seconds, config=self.config)
            state.energy_produced_mwh = energy_produced(state.load, state.run_seconds)
            state.last_update_time = now
            self._state = state

            if state.trip and not was_tripped:
                logger.warning("Plant tripped: %s", state.trip_reason)
            self._history.append({"t_s": state.run_seconds, **state.as_dict(), **levers})
            return state.copy()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def snapshot(self) -> SystemState:
        with self._lock:
            return self._state.copy()

    @property
    def levers(self) -> List[LeverChannel]:
        with self._lock:
            return self._levers.snapshot()

    def lever_values(self) -> Dict[str, float]:
        with self._lock:
            return self._levers.values()

    def history_frame(self) -> pd.DataFrame:
        """Recorded ticks as a DataFrame (one row per tick, oldest first)."""
        with self._lock:
            return pd.DataFrame(list(self._history))
