"""
Boiler stage: combustion, heat balance and steam generation.

Lever inputs arrive as 0-1 fractions. The stage advances the three boiler
primary states (steam temperature, pressure and flow) with :func:`approach`
and reports the pre-smoothing targets alongside them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from config.simulation_config import CONFIG, SimulationConfig
from plantsim.utils.math_tools import approach, clamp, safe_ratio


@dataclass(frozen=True)
class CombustionFigures:
    """Intermediate combustion results for one firing condition."""

    air_fuel_ratio: float
    ratio_efficiency: float
    combustion_efficiency: float
    heat_input_mw: float


@dataclass(frozen=True)
class BoilerResult:
    main_steam_temp: float
    main_steam_pressure: float
    main_steam_flow: float
    target_main_steam_temp: float
    target_main_steam_pressure: float
    target_main_steam_flow: float
    combustion: CombustionFigures
    net_heat_mw: float


def air_fuel_ratio(fuel: float, air: float, config: SimulationConfig | None = None) -> float:
    """Mass air-fuel ratio; equal lever positions give the stoichiometric optimum."""
    cfg = config or CONFIG
    return cfg.AIR_TO_FUEL_LEVER_SCALE * safe_ratio(air, fuel, cfg.EPSILON)


def ratio_efficiency(ratio: float, config: SimulationConfig | None = None) -> float:
    """Penalty for deviating from stoichiometric, floored at ``RATIO_EFFICIENCY_FLOOR``."""
    cfg = config or CONFIG
    optimum = cfg.STOICHIOMETRIC_AIR_FUEL_RATIO
    return max(cfg.RATIO_EFFICIENCY_FLOOR, 1.0 - abs(ratio - optimum) / optimum)


def combustion_figures(
    fuel: float,
    air: float,
    config: SimulationConfig | None = None,
) -> CombustionFigures:
    cfg = config or CONFIG
    fuel = clamp(fuel, 0.0, 1.0)
    air = clamp(air, 0.0, 1.0)
    ratio = air_fuel_ratio(fuel, air, cfg)
    ratio_eff = ratio_efficiency(ratio, cfg)
    base = cfg.PARTIAL_LOAD_EFFICIENCY_BASE
    combustion_eff = ratio_eff * (base + (1.0 - base) * fuel)
    heat_input = fuel * cfg.FULL_FIRING_HEAT_MW * combustion_eff * cfg.BOILER_EFFICIENCY
    return CombustionFigures(
        air_fuel_ratio=ratio,
        ratio_efficiency=ratio_eff,
        combustion_efficiency=combustion_eff,
        heat_input_mw=heat_input,
    )


def saturation_pressure(temp_c: float, config: SimulationConfig | None = None) -> float:
    """Power-law stand-in for the saturation curve (MPa)."""
    cfg = config or CONFIG
    return cfg.SATURATION_PRESSURE_COEFF_MPA * (max(temp_c, 0.0) / 100.0) ** 4


def equilibrium_temperature(heat_input_mw: float, feedwater: float, config: SimulationConfig | None = None) -> float:
    """Temperature at which heat input balances losses and the feedwater sink."""
    cfg = config or CONFIG
    absorbed = heat_input_mw - cfg.FEEDWATER_HEAT_SINK_MW * feedwater
    return absorbed / cfg.BOILER_HEAT_LOSS_MW_PER_C


def _target_temperature(
    current: float,
    heat_input_mw: float,
    feedwater: float,
    cfg: SimulationConfig,
) -> Tuple[float, float]:
    net_heat = (
        heat_input_mw
        - cfg.BOILER_HEAT_LOSS_MW_PER_C * current
        - cfg.FEEDWATER_HEAT_SINK_MW * feedwater
    )
    # Project over one thermal time constant so the tick length does not
    # change the heating rate.
    horizon = 1.0 / cfg.TEMP_SMOOTHING_RATE
    target = current + net_heat / cfg.BOILER_HEAT_CAPACITY_MJ_PER_C * horizon
    equilibrium = equilibrium_temperature(heat_input_mw, feedwater, cfg)
    target = min(target, equilibrium) if net_heat >= 0 else max(target, equilibrium)
    return clamp(target, cfg.STEAM_TEMP_MIN_C, cfg.STEAM_TEMP_MAX_C), net_heat


def target_pressure(
    temp_c: float,
    fuel: float,
    boiler_pressure: float,
    emergency_valve: float,
    config: SimulationConfig | None = None,
) -> float:
    cfg = config or CONFIG
    bias = 1.0 + cfg.PRESSURE_LEVER_SPAN * (boiler_pressure - 0.5)
    relief = 1.0 - cfg.EMERGENCY_VALVE_RELIEF * emergency_valve
    pressure = saturation_pressure(temp_c, cfg) * (1.0 + fuel * cfg.PRESSURE_FIRING_BOOST) * bias * relief
    return clamp(pressure, cfg.STEAM_PRESSURE_MIN_MPA, cfg.STEAM_PRESSURE_MAX_MPA)


def target_steam_flow(
    temp_c: float,
    fuel: float,
    combustion_efficiency: float,
    config: SimulationConfig | None = None,
) -> float:
    cfg = config or CONFIG
    temp_factor = min(1.0, temp_c / cfg.STEAM_TEMP_REFERENCE_C)
    flow = fuel * cfg.MAX_STEAM_FLOW_T_H * temp_factor * combustion_efficiency
    return clamp(flow, 0.0, cfg.MAX_STEAM_FLOW_T_H)


def step_boiler(
    fuel: float,
    air: float,
    feedwater: float,
    temp_c: float,
    pressure_mpa: float,
    flow_t_h: float,
    dt: float,
    boiler_pressure: float = 0.5,
    emergency_valve: float = 0.0,
    config: SimulationConfig | None = None,
) -> BoilerResult:
    """
    Advance the boiler by *dt* seconds.

    Temperature, pressure and flow each follow their own smoothing rate; the
    pressure and flow targets are evaluated at the freshly smoothed
    temperature.
    """
    cfg = config or CONFIG
    fuel = clamp(fuel, 0.0, 1.0)
    feedwater = clamp(feedwater, 0.0, 1.0)
    temp_c = clamp(temp_c, cfg.STEAM_TEMP_MIN_C, cfg.STEAM_TEMP_MAX_C)
    pressure_mpa = clamp(pressure_mpa, cfg.STEAM_PRESSURE_MIN_MPA, cfg.STEAM_PRESSURE_MAX_MPA)
    flow_t_h = clamp(flow_t_h, 0.0, cfg.MAX_STEAM_FLOW_T_H)

    combustion = combustion_figures(fuel, air, cfg)

    temp_target, net_heat = _target_temperature(temp_c, combustion.heat_input_mw, feedwater, cfg)
    new_temp = clamp(
        approach(temp_c, temp_target, cfg.TEMP_SMOOTHING_RATE, dt),
        cfg.STEAM_TEMP_MIN_C,
        cfg.STEAM_TEMP_MAX_C,
    )

    pressure_target = target_pressure(
        new_temp,
        fuel,
        clamp(boiler_pressure, 0.0, 1.0),
        clamp(emergency_valve, 0.0, 1.0),
        cfg,
    )
    new_pressure = clamp(
        approach(pressure_mpa, pressure_target, cfg.PRESSURE_SMOOTHING_RATE, dt),
        cfg.STEAM_PRESSURE_MIN_MPA,
        cfg.STEAM_PRESSURE_MAX_MPA,
    )

    flow_target = target_steam_flow(new_temp, fuel, combustion.combustion_efficiency, cfg)
    new_flow = clamp(
        approach(flow_t_h, flow_target, cfg.FLOW_SMOOTHING_RATE, dt),
        0.0,
        cfg.MAX_STEAM_FLOW_T_H,
    )

    return BoilerResult(
        main_steam_temp=new_temp,
        main_steam_pressure=new_pressure,
        main_steam_flow=new_flow,
        target_main_steam_temp=temp_target,
        target_main_steam_pressure=pressure_target,
        target_main_steam_flow=flow_target,
        combustion=combustion,
        net_heat_mw=net_heat,
    )
