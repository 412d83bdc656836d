"""
Water and auxiliary stage.

Everything here is a closed-form function of the primary plant state and the
current lever fractions; nothing carries memory between ticks. Each
indicator is clamped to the range published by :func:`plantsim.state.field_bounds`
and moves monotonically with the drivers named in its docstring.
"""

from __future__ import annotations

from typing import Dict, Mapping, Tuple

from config.simulation_config import CONFIG, SimulationConfig
from plantsim.boiler_models import CombustionFigures, combustion_figures
from plantsim.levers import (
    AIR_SUPPLY,
    COAL_FEED,
    CONDENSER,
    COOLING_WATER,
    EXHAUST_GAS,
    FEEDWATER,
    FUEL_INJECTION,
    WATER_LEVEL,
)
from plantsim.state import SystemState
from plantsim.turbine_models import grid_frequency
from plantsim.utils.math_tools import clamp

HEATER_STAGE_FRACTIONS: Tuple[float, float, float, float] = (0.9, 0.7, 0.5, 0.3)
HEATER_HIGH_TEMP_C = 520.0
CONDENSER_HIGH_TEMP_C = 50.0
CONDENSER_LOW_PRESSURE_KPA = 1.5


def condensate_flow(load_mw: float, condenser: float, config: SimulationConfig | None = None) -> float:
    """Condensate returned (t/h); rises with load and condenser duty."""
    cfg = config or CONFIG
    flow = cfg.CONDENSATE_T_H_PER_MW * max(load_mw, 0.0) * (0.6 + 0.4 * clamp(condenser, 0.0, 1.0))
    return clamp(flow, 0.0, cfg.CONDENSATE_T_H_PER_MW * cfg.RATED_POWER_MW)


def circulating_water_flow(cooling_water: float, load_mw: float, config: SimulationConfig | None = None) -> float:
    """Circulating water (m³/h); rises with cooling water pumping and load."""
    cfg = config or CONFIG
    flow = (
        cfg.CIRCULATING_WATER_BASE_M3_H
        + 500.0 * clamp(cooling_water, 0.0, 1.0)
        + 300.0 * clamp(load_mw / cfg.RATED_POWER_MW, 0.0, 1.0)
    )
    return clamp(flow, 500.0, 1800.0)


def drum_level(
    water_level: float,
    feedwater: float,
    steam_flow_t_h: float,
    config: SimulationConfig | None = None,
) -> float:
    """Drum level (%); rises with the level setpoint and feedwater, falls with steam draw."""
    cfg = config or CONFIG
    evaporation = clamp(steam_flow_t_h / cfg.MAX_STEAM_FLOW_T_H, 0.0, 1.0)
    level = (
        cfg.DRUM_LEVEL_NOMINAL_PCT
        + cfg.DRUM_LEVEL_LEVER_GAIN * (100.0 * clamp(water_level, 0.0, 1.0) - 50.0)
        + cfg.DRUM_LEVEL_BALANCE_GAIN * (clamp(feedwater, 0.0, 1.0) - evaporation)
    )
    return clamp(level, 0.0, 100.0)


def oil_tank_level(speed_rpm: float, config: SimulationConfig | None = None) -> float:
    """Lube oil tank level (%); drops as oil is drawn into the running bearings."""
    cfg = config or CONFIG
    return clamp(cfg.OIL_TANK_NOMINAL_PCT - 5.0 * speed_rpm / cfg.RATED_SPEED_RPM, 60.0, 95.0)


def condenser_out_temp(
    cooling_water: float,
    condenser: float,
    load_mw: float,
    config: SimulationConfig | None = None,
) -> float:
    cfg = config or CONFIG
    temp = (
        40.0
        - 20.0 * clamp(cooling_water, 0.0, 1.0)
        - 5.0 * clamp(condenser, 0.0, 1.0)
        + 15.0 * clamp(load_mw / cfg.RATED_POWER_MW, 0.0, 1.0)
    )
    return clamp(temp, 20.0, 70.0)


def condenser_pressure(
    cooling_water: float,
    condenser: float,
    load_mw: float,
    config: SimulationConfig | None = None,
) -> float:
    """Back pressure (kPa)."""
    cfg = config or CONFIG
    pressure = (
        cfg.CONDENSER_BASE_PRESSURE_KPA
        - 2.0 * clamp(cooling_water, 0.0, 1.0)
        - 1.0 * clamp(condenser, 0.0, 1.0)
        + 2.0 * clamp(load_mw / cfg.RATED_POWER_MW, 0.0, 1.0)
    )
    return clamp(pressure, 1.0, 10.0)


def heater_temps(steam_temp_c: float) -> Tuple[float, float, float, float]:
    h1, h2, h3, h4 = (steam_temp_c * fraction for fraction in HEATER_STAGE_FRACTIONS)
    return h1, h2, h3, h4


def feedwater_temp(steam_temp_c: float, config: SimulationConfig | None = None) -> float:
    cfg = config or CONFIG
    return clamp(150.0 + 50.0 * steam_temp_c / cfg.STEAM_TEMP_REFERENCE_C, 50.0, 250.0)


def feedwater_pressure(steam_pressure_mpa: float, feedwater: float, config: SimulationConfig | None = None) -> float:
    cfg = config or CONFIG
    pressure = steam_pressure_mpa * clamp(feedwater, 0.0, 1.0) * 1.2
    return clamp(pressure, 0.1, cfg.STEAM_PRESSURE_MAX_MPA * 1.2)


def generator_temp(load_mw: float, config: SimulationConfig | None = None) -> float:
    cfg = config or CONFIG
    return clamp(60.0 + 40.0 * load_mw / cfg.RATED_POWER_MW, 40.0, 100.0)


def oil_cooler_temp(speed_rpm: float, config: SimulationConfig | None = None) -> float:
    cfg = config or CONFIG
    return clamp(45.0 + 15.0 * speed_rpm / cfg.RATED_SPEED_RPM, 35.0, 70.0)


def flue_gas_temp(steam_temp_c: float, exhaust_gas: float, config: SimulationConfig | None = None) -> float:
    """Stack temperature; hotter furnace raises it, a wider damper lowers it."""
    cfg = config or CONFIG
    temp = 130.0 + 0.3 * (steam_temp_c - cfg.STEAM_TEMP_MIN_C) - 30.0 * clamp(exhaust_gas, 0.0, 1.0)
    return clamp(temp, 90.0, 400.0)


def plant_efficiency(load_mw: float, fuel_heat_mw: float, config: SimulationConfig | None = None) -> float:
    """Electrical output over fuel chemical input (%), capped at 50 %."""
    cfg = config or CONFIG
    if fuel_heat_mw <= cfg.EPSILON:
        return 0.0
    return clamp(100.0 * load_mw / fuel_heat_mw, 0.0, 50.0)


def heat_rate(load_mw: float, fuel_heat_mw: float, config: SimulationConfig | None = None) -> float:
    """kJ of fuel per kWh generated; 0 while the unit is not generating or not firing."""
    cfg = config or CONFIG
    if load_mw < 1.0 or fuel_heat_mw <= cfg.EPSILON:
        return 0.0
    return clamp(fuel_heat_mw * 3600.0 / load_mw, 8000.0, 12_000.0)


def emissions_rate(fuel: float, combustion_efficiency: float, config: SimulationConfig | None = None) -> float:
    """CO2-equivalent (kg/h); poor combustion adds an unburnt-fuel penalty."""
    cfg = config or CONFIG
    coal_kg_h = clamp(fuel, 0.0, 1.0) * cfg.COAL_FEED_MAX_KG_S * 3600.0
    return coal_kg_h * cfg.CO2_PER_KG_COAL * (2.0 - clamp(combustion_efficiency, 0.0, 1.0))


def derive_indicators(
    fractions: Mapping[str, float],
    state: SystemState,
    config: SimulationConfig | None = None,
    combustion: CombustionFigures | None = None,
) -> Dict[str, float]:
    """
    Recompute every memoryless indicator from *state*'s primary fields.

    ``fractions`` are the physically applied lever positions in 0-1 (already
    zeroed by the protection system when tripped).
    """
    cfg = config or CONFIG
    fuel = fractions[COAL_FEED]
    feed = fractions[FEEDWATER]
    cooling = fractions[COOLING_WATER]
    condenser = fractions[CONDENSER]
    oil = fractions[FUEL_INJECTION]
    if combustion is None:
        combustion = combustion_figures(fuel, fractions[AIR_SUPPLY], cfg)

    temp = state.main_steam_temp
    flow = state.main_steam_flow
    speed = state.turbine_speed
    load = state.load

    frequency = grid_frequency(speed, cfg)
    cond_out = condenser_out_temp(cooling, condenser, load, cfg)
    generator = generator_temp(load, cfg)
    h1, h2, h3, h4 = heater_temps(temp)
    coal_t_h = fuel * cfg.COAL_FEED_MAX_KG_S * 3.6
    water_t_h = feed * cfg.FEEDWATER_MAX_T_H
    fuel_heat_mw = fuel * cfg.FULL_FIRING_HEAT_MW
    boiling_t_h = combustion.heat_input_mw * 1e3 / cfg.LATENT_HEAT_KJ_PER_KG * 3.6

    return {
        "frequency": frequency,
        "frequency_deviation": frequency - cfg.GRID_FREQUENCY_HZ,
        "air_fuel_ratio": combustion.air_fuel_ratio,
        "combustion_efficiency": combustion.combustion_efficiency,
        "heat_input": combustion.heat_input_mw,
        "condensate_water_flow": condensate_flow(load, condenser, cfg),
        "circulating_water_flow": circulating_water_flow(cooling, load, cfg),
        "drum_level": drum_level(fractions[WATER_LEVEL], feed, flow, cfg),
        "oil_tank_level": oil_tank_level(speed, cfg),
        "steam_out_turbine_temp": clamp(temp - 200.0 * speed / cfg.RATED_SPEED_RPM, 40.0, cfg.STEAM_TEMP_MAX_C),
        "surge_tank_temp": clamp(
            temp - 20.0 * flow / cfg.MAX_STEAM_FLOW_T_H, cfg.STEAM_TEMP_MIN_C, cfg.STEAM_TEMP_MAX_C
        ),
        "condenser_out_temp": cond_out,
        "cooling_water_temp": clamp(cond_out + 5.0, 25.0, 75.0),
        "condenser_pressure": condenser_pressure(cooling, condenser, load, cfg),
        "feedwater_temp": feedwater_temp(temp, cfg),
        "feedwater_pressure": feedwater_pressure(state.main_steam_pressure, feed, cfg),
        "heater1_temp": h1,
        "heater2_temp": h2,
        "heater3_temp": h3,
        "heater4_temp": h4,
        "generator_temp": generator,
        "oil_cooler_temp": oil_cooler_temp(speed, cfg),
        "generator_air_cooler_temp": clamp(generator - 10.0, 30.0, 90.0),
        "flue_gas_temp": flue_gas_temp(temp, fractions[EXHAUST_GAS], cfg),
        "coal_loading_rate": coal_t_h,
        "combustion_speed": clamp(100.0 * fuel * combustion.ratio_efficiency, 0.0, 100.0),
        "water_loading_rate": water_t_h,
        "water_boiling_rate": max(0.0, min(boiling_t_h, water_t_h)),
        "steam_generation_rate": state.target_main_steam_flow,
        "fuel_consumption_rate": coal_t_h + oil * cfg.OIL_FEED_MAX_T_H,
        "efficiency": plant_efficiency(load, fuel_heat_mw, cfg),
        "emissions_rate": emissions_rate(fuel, combustion.combustion_efficiency, cfg),
        "heat_rate": heat_rate(load, fuel_heat_mw, cfg),
    }


def plant_statuses(state: SystemState, feedwater: float) -> Dict[str, str]:
    """Discrete status labels for the turbine, generator, condenser and heaters."""
    if state.trip:
        turbine = "emergency"
    elif state.turbine_speed > 1.0:
        turbine = "running"
    else:
        turbine = "stopped"

    if state.trip:
        generator = "offline"
    elif state.load > 1.0:
        generator = "online"
    elif state.turbine_speed > 1.0:
        generator = "synchronizing"
    else:
        generator = "offline"

    if state.condenser_out_temp > CONDENSER_HIGH_TEMP_C:
        condenser = "high_temp"
    elif state.condenser_pressure <= CONDENSER_LOW_PRESSURE_KPA:
        condenser = "low_pressure"
    else:
        condenser = "normal"

    if state.heater1_temp > HEATER_HIGH_TEMP_C:
        heater = "high_temp"
    elif feedwater < 0.1 and state.main_steam_flow > 1.0:
        heater = "low_flow"
    else:
        heater = "normal"

    return {
        "turbine_status": turbine,
        "generator_status": generator,
        "condenser_status": condenser,
        "heater_status": heater,
    }
