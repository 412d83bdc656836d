"""
Physics engine: one pure tick of the whole plant.

``step_system`` never mutates its input. Control flow per tick:

1. invalid ``dt`` or a finished shutdown -> unchanged copy;
2. shutdown countdown -> multiplicative decay, indicators re-derived;
3. otherwise protection decides which lever values reach the plant, then
   boiler -> turbine -> water/auxiliary, and the result is checked against
   the trip limits again.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Mapping

from config.simulation_config import CONFIG, SimulationConfig
from plantsim.boiler_models import CombustionFigures, step_boiler
from plantsim.levers import (
    AIR_SUPPLY,
    BOILER_PRESSURE,
    COAL_FEED,
    EMERGENCY_VALVE,
    FEEDWATER,
    LEVER_IDS,
    STEAM_FLOW,
    STEAM_TURBINE,
    normalise_lever_values,
)
from plantsim.protection import decay_primary, protected_levers, trip_reason
from plantsim.state import PlantMode, SystemState
from plantsim.turbine_models import step_turbine
from plantsim.utils.math_tools import is_valid_dt
from plantsim.water_models import derive_indicators, plant_statuses


def _fractions(levers: Mapping[str, float]) -> Dict[str, float]:
    return {lever_id: levers[lever_id] / 100.0 for lever_id in LEVER_IDS}


def _with_indicators(
    state: SystemState,
    fractions: Mapping[str, float],
    cfg: SimulationConfig,
    combustion: CombustionFigures | None = None,
) -> SystemState:
    derived = replace(state, **derive_indicators(fractions, state, cfg, combustion))
    return replace(derived, **plant_statuses(derived, fractions[FEEDWATER]))


def baseline_state(config: SimulationConfig | None = None) -> SystemState:
    """Cold-standby plant with every lever closed. Reset restores exactly this."""
    cfg = config or CONFIG
    state = SystemState(
        main_steam_flow=0.0,
        main_steam_pressure=cfg.STEAM_PRESSURE_MIN_MPA,
        main_steam_temp=cfg.STEAM_TEMP_MIN_C,
        turbine_speed=0.0,
        load=0.0,
        target_main_steam_flow=0.0,
        target_main_steam_pressure=cfg.STEAM_PRESSURE_MIN_MPA,
        target_main_steam_temp=cfg.STEAM_TEMP_MIN_C,
        target_turbine_speed=0.0,
        target_load=0.0,
    )
    return _with_indicators(state, {lever_id: 0.0 for lever_id in LEVER_IDS}, cfg)


def step_system(
    levers: Mapping[str, float],
    previous: SystemState | None = None,
    dt: float = 0.1,
    config: SimulationConfig | None = None,
) -> SystemState:
    """
    Advance the plant by *dt* seconds under the given lever positions (0-100).

    Run bookkeeping (``is_running``, earnings, run time) is carried through
    untouched; the session owns it.
    """
    cfg = config or CONFIG
    prev = previous if previous is not None else baseline_state(cfg)
    if not is_valid_dt(dt):
        return prev.copy()

    values = normalise_lever_values(levers)

    if prev.mode is PlantMode.SHUT_DOWN:
        return prev.copy()

    if prev.mode is PlantMode.SHUTTING_DOWN:
        decayed = decay_primary(prev, dt, cfg)
        return _with_indicators(decayed, _fractions(protected_levers(values, True)), cfg)

    reason = prev.trip_reason if prev.trip else trip_reason(prev, cfg)
    tripped = prev.trip or reason is not None
    fractions = _fractions(protected_levers(values, tripped))

    boiler = step_boiler(
        fuel=fractions[COAL_FEED],
        air=fractions[AIR_SUPPLY],
        feedwater=fractions[FEEDWATER],
        temp_c=prev.main_steam_temp,
        pressure_mpa=prev.main_steam_pressure,
        flow_t_h=prev.main_steam_flow,
        dt=dt,
        boiler_pressure=fractions[BOILER_PRESSURE],
        emergency_valve=fractions[EMERGENCY_VALVE],
        config=cfg,
    )
    turbine = step_turbine(
        throttle=fractions[STEAM_TURBINE],
        load_demand=fractions[STEAM_FLOW],
        flow_t_h=boiler.main_steam_flow,
        temp_c=boiler.main_steam_temp,
        pressure_mpa=boiler.main_steam_pressure,
        speed_rpm=prev.turbine_speed,
        load_mw=prev.load,
        dt=dt,
        config=cfg,
    )

    advanced = replace(
        prev,
        main_steam_flow=boiler.main_steam_flow,
        main_steam_pressure=boiler.main_steam_pressure,
        main_steam_temp=boiler.main_steam_temp,
        turbine_speed=turbine.turbine_speed,
        load=turbine.load,
        target_main_steam_flow=boiler.target_main_steam_flow,
        target_main_steam_pressure=boiler.target_main_steam_pressure,
        target_main_steam_temp=boiler.target_main_steam_temp,
        target_turbine_speed=turbine.target_turbine_speed,
        target_load=turbine.target_load,
        trip=tripped,
        trip_reason=reason,
    )
    advanced = replace(advanced, **derive_indicators(fractions, advanced, cfg, boiler.combustion))

    if not tripped:
        reason = trip_reason(advanced, cfg)
        tripped = reason is not None
    advanced = replace(
        advanced,
        trip=tripped,
        trip_reason=reason,
        mode=PlantMode.TRIPPED if tripped else PlantMode.NORMAL,
    )
    return replace(advanced, **plant_statuses(advanced, fractions[FEEDWATER]))
