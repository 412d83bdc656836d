"""
Trip and shutdown protection.

``NORMAL -> TRIPPED`` on any safety limit; ``NORMAL/TRIPPED -> SHUTTING_DOWN``
on an operator shutdown; ``SHUTTING_DOWN -> SHUT_DOWN`` when the countdown
expires. Only a reset returns the plant to ``NORMAL``.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Mapping, Optional

from config.simulation_config import CONFIG, SimulationConfig
from plantsim.levers import FUEL_LEVERS, THROTTLE_LEVERS
from plantsim.state import PlantMode, SystemState
from plantsim.utils.math_tools import clamp

MANUAL_SHUTDOWN = "manual shutdown"

# Residual countdown below this is treated as expired (float dt accumulation).
_COUNTDOWN_RESOLUTION = 1e-9


def trip_reason(state: SystemState, config: SimulationConfig | None = None) -> Optional[str]:
    """Return the first violated safety limit, or ``None`` when all are respected."""
    cfg = config or CONFIG
    if state.main_steam_temp > cfg.MAX_BOILER_TEMP_C:
        return f"boiler overtemperature ({state.main_steam_temp:.1f} °C)"
    if state.drum_level < cfg.WATER_LEVEL_MIN_PCT:
        return f"drum level low ({state.drum_level:.1f} %)"
    if state.drum_level > cfg.WATER_LEVEL_MAX_PCT:
        return f"drum level high ({state.drum_level:.1f} %)"
    if state.turbine_speed > cfg.OVERSPEED_TRIP_RPM:
        return f"turbine overspeed ({state.turbine_speed:.0f} rpm)"
    return None


def protected_levers(levers: Mapping[str, float], tripped: bool) -> Dict[str, float]:
    """Lever values that physically reach the plant; fuel and throttle are cut on trip."""
    applied = dict(levers)
    if tripped:
        for lever_id in FUEL_LEVERS + THROTTLE_LEVERS:
            applied[lever_id] = 0.0
    return applied


def begin_shutdown(
    state: SystemState,
    countdown: float | None = None,
    config: SimulationConfig | None = None,
) -> SystemState:
    """Arm the shutdown countdown. A running or finished shutdown is left untouched."""
    cfg = config or CONFIG
    if state.mode in (PlantMode.SHUTTING_DOWN, PlantMode.SHUT_DOWN):
        return state.copy()
    seconds = cfg.SHUTDOWN_COUNTDOWN_SECONDS if countdown is None else max(float(countdown), 0.0)
    return replace(
        state,
        trip=True,
        trip_reason=state.trip_reason or MANUAL_SHUTDOWN,
        shutdown_time=seconds,
        mode=PlantMode.SHUTTING_DOWN if seconds > 0 else PlantMode.SHUT_DOWN,
    )


def decay_primary(state: SystemState, dt: float, config: SimulationConfig | None = None) -> SystemState:
    """
    One shutdown tick: count down and shrink the primary state.

    The decay is a fixed per-tick multiplier rather than the smoothing
    function. Values are floored at their physical minimum.
    """
    cfg = config or CONFIG
    factor = clamp(cfg.SHUTDOWN_DECAY_FACTOR, 0.0, 1.0)
    remaining = state.shutdown_time - dt
    if remaining <= _COUNTDOWN_RESOLUTION:
        remaining = 0.0

    temp = max(state.main_steam_temp * factor, cfg.STEAM_TEMP_MIN_C)
    pressure = max(state.main_steam_pressure * factor, cfg.STEAM_PRESSURE_MIN_MPA)
    flow = state.main_steam_flow * factor
    speed = state.turbine_speed * factor
    load = state.load * factor

    return replace(
        state,
        main_steam_temp=min(temp, state.main_steam_temp),
        main_steam_pressure=min(pressure, state.main_steam_pressure),
        main_steam_flow=flow,
        turbine_speed=speed,
        load=load,
        target_main_steam_temp=min(temp, state.main_steam_temp),
        target_main_steam_pressure=min(pressure, state.main_steam_pressure),
        target_main_steam_flow=0.0,
        target_turbine_speed=0.0,
        target_load=0.0,
        trip=True,
        trip_reason=state.trip_reason or MANUAL_SHUTDOWN,
        shutdown_time=remaining,
        mode=PlantMode.SHUTTING_DOWN if remaining > 0 else PlantMode.SHUT_DOWN,
    )
