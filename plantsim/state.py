"""
System state snapshot shared between the physics engine and the dashboard.

Only the five primary fields carry memory between ticks; every other
indicator is recomputed from them and the current lever positions.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from config.simulation_config import CONFIG, SimulationConfig


class PlantMode(str, Enum):
    """Protection state machine positions."""

    NORMAL = "normal"
    TRIPPED = "tripped"
    SHUTTING_DOWN = "shutting_down"
    SHUT_DOWN = "shut_down"  # Countdown finished; values held until reset


PRIMARY_FIELDS: Tuple[str, ...] = (
    "main_steam_flow",
    "main_steam_pressure",
    "main_steam_temp",
    "turbine_speed",
    "load",
)


@dataclass
class SystemState:
    """Full plant snapshot. Units are noted per field."""

    # Primary thermodynamic state --------------------------------------------
    main_steam_flow: float = 0.0  # t/h
    main_steam_pressure: float = 0.1  # MPa
    main_steam_temp: float = 200.0  # °C
    turbine_speed: float = 0.0  # rpm
    load: float = 0.0  # MW

    # Pre-smoothing targets ------------------------------------------------
    target_main_steam_flow: float = 0.0
    target_main_steam_pressure: float = 0.1
    target_main_steam_temp: float = 200.0
    target_turbine_speed: float = 0.0
    target_load: float = 0.0

    # Derived indicators ---------------------------------------------------
    frequency: float = 0.0  # Hz
    frequency_deviation: float = 0.0  # Hz, signed
    air_fuel_ratio: float = 0.0
    combustion_efficiency: float = 0.0  # fraction
    heat_input: float = 0.0  # MW thermal
    condensate_water_flow: float = 0.0  # t/h
    circulating_water_flow: float = 0.0  # m³/h
    drum_level: float = 50.0  # %
    oil_tank_level: float = 80.0  # %
    steam_out_turbine_temp: float = 200.0  # °C
    surge_tank_temp: float = 200.0  # °C
    condenser_out_temp: float = 40.0  # °C
    cooling_water_temp: float = 45.0  # °C
    condenser_pressure: float = 5.0  # kPa
    feedwater_temp: float = 150.0  # °C
    feedwater_pressure: float = 0.1  # MPa
    heater1_temp: float = 0.0  # °C
    heater2_temp: float = 0.0
    heater3_temp: float = 0.0
    heater4_temp: float = 0.0
    generator_temp: float = 60.0  # °C
    oil_cooler_temp: float = 45.0  # °C
    generator_air_cooler_temp: float = 50.0  # °C
    flue_gas_temp: float = 130.0  # °C
    coal_loading_rate: float = 0.0  # t/h
    combustion_speed: float = 0.0  # %
    water_loading_rate: float = 0.0  # t/h
    water_boiling_rate: float = 0.0  # t/h
    steam_generation_rate: float = 0.0  # t/h
    fuel_consumption_rate: float = 0.0  # t/h
    efficiency: float = 0.0  # %
    emissions_rate: float = 0.0  # kg CO2/h
    heat_rate: float = 0.0  # kJ/kWh
    turbine_status: str = "stopped"
    generator_status: str = "offline"
    condenser_status: str = "normal"
    heater_status: str = "normal"

    # Run bookkeeping ------------------------------------------------------
    is_running: bool = False
    start_time: Optional[float] = None  # Wall clock, epoch seconds
    run_seconds: float = 0.0
    total_earnings: float = 0.0
    energy_produced_mwh: float = 0.0
    trip: bool = False
    trip_reason: Optional[str] = None
    mode: PlantMode = PlantMode.NORMAL
    shutdown_time: float = 0.0  # Seconds left on the shutdown countdown
    last_update_time: Optional[float] = None  # Monotonic clock

    def copy(self) -> "SystemState":
        return replace(self)

    def as_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["mode"] = self.mode.value
        return payload

    def primary(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in PRIMARY_FIELDS}


def numeric_fields() -> Tuple[str, ...]:
    """Names of the float-valued fields, in declaration order."""
    return tuple(f.name for f in fields(SystemState) if f.type in ("float", float))


def field_bounds(config: SimulationConfig | None = None) -> Dict[str, Tuple[float, float]]:
    """Documented physical range of every bounded indicator."""
    cfg = config or CONFIG
    temp = (cfg.STEAM_TEMP_MIN_C, cfg.STEAM_TEMP_MAX_C)
    return {
        "main_steam_flow": (0.0, cfg.MAX_STEAM_FLOW_T_H),
        "main_steam_pressure": (cfg.STEAM_PRESSURE_MIN_MPA, cfg.STEAM_PRESSURE_MAX_MPA),
        "main_steam_temp": temp,
        "turbine_speed": (0.0, cfg.MAX_TURBINE_SPEED_RPM),
        "load": (0.0, cfg.RATED_POWER_MW),
        "target_main_steam_flow": (0.0, cfg.MAX_STEAM_FLOW_T_H),
        "target_main_steam_pressure": (cfg.STEAM_PRESSURE_MIN_MPA, cfg.STEAM_PRESSURE_MAX_MPA),
        "target_main_steam_temp": temp,
        "target_turbine_speed": (0.0, cfg.MAX_TURBINE_SPEED_RPM),
        "target_load": (0.0, cfg.RATED_POWER_MW),
        "frequency": (0.0, cfg.GRID_FREQUENCY_HZ + cfg.MAX_TURBINE_SPEED_RPM / cfg.RPM_PER_HZ),
        "frequency_deviation": (-cfg.GRID_FREQUENCY_HZ, cfg.MAX_TURBINE_SPEED_RPM / cfg.RPM_PER_HZ),
        "combustion_efficiency": (0.0, 1.0),
        "condensate_water_flow": (0.0, cfg.CONDENSATE_T_H_PER_MW * cfg.RATED_POWER_MW),
        "circulating_water_flow": (500.0, 1800.0),
        "drum_level": (0.0, 100.0),
        "oil_tank_level": (60.0, 95.0),
        "steam_out_turbine_temp": (40.0, cfg.STEAM_TEMP_MAX_C),
        "surge_tank_temp": temp,
        "condenser_out_temp": (20.0, 70.0),
        "cooling_water_temp": (25.0, 75.0),
        "condenser_pressure": (1.0, 10.0),
        "feedwater_temp": (50.0, 250.0),
        "feedwater_pressure": (0.1, cfg.STEAM_PRESSURE_MAX_MPA * 1.2),
        "heater1_temp": (0.0, cfg.STEAM_TEMP_MAX_C),
        "heater2_temp": (0.0, cfg.STEAM_TEMP_MAX_C),
        "heater3_temp": (0.0, cfg.STEAM_TEMP_MAX_C),
        "heater4_temp": (0.0, cfg.STEAM_TEMP_MAX_C),
        "generator_temp": (40.0, 100.0),
        "oil_cooler_temp": (35.0, 70.0),
        "generator_air_cooler_temp": (30.0, 90.0),
        "flue_gas_temp": (90.0, 400.0),
        "combustion_speed": (0.0, 100.0),
        "efficiency": (0.0, 50.0),
        "heat_rate": (0.0, 12_000.0),
    }
