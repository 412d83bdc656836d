"""
Turbine stage: steam expansion, shaft speed, generator load and frequency.
"""

from __future__ import annotations

from dataclasses import dataclass

from config.simulation_config import CONFIG, SimulationConfig
from plantsim.utils.math_tools import approach, clamp


@dataclass(frozen=True)
class TurbineResult:
    turbine_speed: float
    load: float
    frequency: float
    target_turbine_speed: float
    target_load: float
    mechanical_power_mw: float
    actual_efficiency: float


def specific_work(temp_c: float, config: SimulationConfig | None = None) -> float:
    """Enthalpy drop (kJ/kg) from main steam down to the condenser reference."""
    cfg = config or CONFIG
    steam_enthalpy = cfg.STEAM_ENTHALPY_SLOPE_KJ_PER_KG_C * temp_c
    condenser_enthalpy = cfg.STEAM_ENTHALPY_SLOPE_KJ_PER_KG_C * cfg.CONDENSER_REFERENCE_TEMP_C
    return max(steam_enthalpy - condenser_enthalpy, 0.0)


def turbine_efficiency(throttle: float, pressure_mpa: float, config: SimulationConfig | None = None) -> float:
    """Isentropic efficiency with the partial-opening penalty and pressure-ratio cap."""
    cfg = config or CONFIG
    isentropic = cfg.TURBINE_EFFICIENCY * (0.8 + 0.2 * clamp(throttle, 0.0, 1.0))
    pressure_ratio = min(1.0, max(pressure_mpa, 0.0) / cfg.FULL_EXPANSION_PRESSURE_MPA)
    return isentropic * pressure_ratio


def mechanical_power(
    flow_t_h: float,
    temp_c: float,
    pressure_mpa: float,
    throttle: float,
    config: SimulationConfig | None = None,
) -> float:
    """Shaft power in MW."""
    cfg = config or CONFIG
    throttle = clamp(throttle, 0.0, 1.0)
    flow_kg_s = max(flow_t_h, 0.0) / 3.6
    efficiency = turbine_efficiency(throttle, pressure_mpa, cfg)
    return flow_kg_s * specific_work(temp_c, cfg) * efficiency * throttle / 1e3


def grid_frequency(speed_rpm: float, config: SimulationConfig | None = None) -> float:
    """Linear droop around the rated speed, never negative."""
    cfg = config or CONFIG
    return max(0.0, cfg.GRID_FREQUENCY_HZ + (speed_rpm - cfg.RATED_SPEED_RPM) / cfg.RPM_PER_HZ)


def step_turbine(
    throttle: float,
    load_demand: float,
    flow_t_h: float,
    temp_c: float,
    pressure_mpa: float,
    speed_rpm: float,
    load_mw: float,
    dt: float,
    config: SimulationConfig | None = None,
) -> TurbineResult:
    """
    Advance the turbine-generator by *dt* seconds.

    With no steam the targets fall to zero and speed and load coast down
    through the same smoothing instead of snapping.
    """
    cfg = config or CONFIG
    speed_rpm = clamp(speed_rpm, 0.0, cfg.MAX_TURBINE_SPEED_RPM)
    load_mw = clamp(load_mw, 0.0, cfg.RATED_POWER_MW)

    power = mechanical_power(flow_t_h, temp_c, pressure_mpa, throttle, cfg)

    speed_target = clamp(
        cfg.RATED_SPEED_RPM * power / cfg.RATED_POWER_MW,
        0.0,
        cfg.MAX_TURBINE_SPEED_RPM,
    )
    new_speed = clamp(
        approach(speed_rpm, speed_target, cfg.SPEED_SMOOTHING_RATE, dt),
        0.0,
        cfg.MAX_TURBINE_SPEED_RPM,
    )

    load_target = clamp(
        min(power * cfg.GENERATOR_EFFICIENCY, clamp(load_demand, 0.0, 1.0) * cfg.RATED_POWER_MW),
        0.0,
        cfg.RATED_POWER_MW,
    )
    new_load = clamp(
        approach(load_mw, load_target, cfg.LOAD_SMOOTHING_RATE, dt),
        0.0,
        cfg.RATED_POWER_MW,
    )

    return TurbineResult(
        turbine_speed=new_speed,
        load=new_load,
        frequency=grid_frequency(new_speed, cfg),
        target_turbine_speed=speed_target,
        target_load=load_target,
        mechanical_power_mw=power,
        actual_efficiency=turbine_efficiency(throttle, pressure_mpa, cfg),
    )
