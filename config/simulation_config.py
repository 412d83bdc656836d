"""
Central configuration for the steam plant simulator and control-room dashboard.

Every constant that shapes combustion, turbine response, inertia, protection,
or revenue is defined here so there is a single source of truth. Modules take
a ``SimulationConfig`` argument (defaulting to ``CONFIG``) and derived
configurations are produced with :meth:`SimulationConfig.with_overrides`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict


# Actuator response time (s) per lever id; a lever moves at 1/response toward its target.
LEVER_RESPONSE_TIMES_S: Dict[str, float] = {
    "coal_feed": 15.0,
    "feedwater": 8.0,
    "boiler_pressure": 20.0,
    "steam_turbine": 12.0,
    "condenser": 10.0,
    "cooling_water": 6.0,
    "air_supply": 5.0,
    "fuel_injection": 8.0,
    "steam_flow": 10.0,
    "water_level": 25.0,
    "exhaust_gas": 8.0,
    "emergency_valve": 2.0,
}


@dataclass(frozen=True)
class SimulationConfig:
    """Container for all physics, protection and economic assumptions."""

    # Execution controls ----------------------------------------------------
    TICK_SECONDS: float = 0.2  # Dashboard scheduler period
    SCENARIO_DT_SECONDS: float = 1.0
    SCENARIO_DURATION_SECONDS: float = 600.0
    HISTORY_MAX_SAMPLES: int = 3000
    EPSILON: float = 1e-3  # Floor for near-zero denominators

    # Combustion ------------------------------------------------------------
    STOICHIOMETRIC_AIR_FUEL_RATIO: float = 15.5
    AIR_TO_FUEL_LEVER_SCALE: float = 15.5  # Full air lever mass / full coal lever mass
    RATIO_EFFICIENCY_FLOOR: float = 0.4
    PARTIAL_LOAD_EFFICIENCY_BASE: float = 0.7
    COAL_FEED_MAX_KG_S: float = 70.0
    COAL_CALORIFIC_VALUE_KJ_PER_KG: float = 25_000.0
    OIL_FEED_MAX_T_H: float = 5.0
    CO2_PER_KG_COAL: float = 2.4

    # Boiler ----------------------------------------------------------------
    BOILER_EFFICIENCY: float = 0.85
    BOILER_HEAT_CAPACITY_MJ_PER_C: float = 200.0
    BOILER_HEAT_LOSS_MW_PER_C: float = 2.2
    FEEDWATER_HEAT_SINK_MW: float = 100.0
    LATENT_HEAT_KJ_PER_KG: float = 2257.0
    STEAM_TEMP_MIN_C: float = 200.0
    STEAM_TEMP_MAX_C: float = 650.0
    STEAM_TEMP_REFERENCE_C: float = 540.0
    SATURATION_PRESSURE_COEFF_MPA: float = 0.014
    PRESSURE_FIRING_BOOST: float = 0.5
    PRESSURE_LEVER_SPAN: float = 0.4  # Boiler pressure lever bias, +/- half span
    EMERGENCY_VALVE_RELIEF: float = 0.3
    STEAM_PRESSURE_MIN_MPA: float = 0.1
    STEAM_PRESSURE_MAX_MPA: float = 30.0
    MAX_STEAM_FLOW_T_H: float = 2000.0
    FEEDWATER_MAX_T_H: float = 2200.0

    # Turbine & generator ---------------------------------------------------
    STEAM_ENTHALPY_SLOPE_KJ_PER_KG_C: float = 2.2
    CONDENSER_REFERENCE_TEMP_C: float = 40.0
    TURBINE_EFFICIENCY: float = 0.88
    FULL_EXPANSION_PRESSURE_MPA: float = 10.0
    GENERATOR_EFFICIENCY: float = 0.98
    RATED_POWER_MW: float = 600.0
    RATED_SPEED_RPM: float = 3000.0
    MAX_TURBINE_SPEED_RPM: float = 3600.0
    GRID_FREQUENCY_HZ: float = 50.0
    RPM_PER_HZ: float = 60.0

    # Smoothing rates (1/s) -------------------------------------------------
    TEMP_SMOOTHING_RATE: float = 0.04
    PRESSURE_SMOOTHING_RATE: float = 0.05
    FLOW_SMOOTHING_RATE: float = 0.05
    SPEED_SMOOTHING_RATE: float = 0.03
    LOAD_SMOOTHING_RATE: float = 0.04
    LEVER_RESPONSE_S: Dict[str, float] = field(default_factory=lambda: dict(LEVER_RESPONSE_TIMES_S))
    DEFAULT_LEVER_RESPONSE_S: float = 10.0  # Levers missing from LEVER_RESPONSE_S

    # Water & auxiliary -----------------------------------------------------
    CONDENSATE_T_H_PER_MW: float = 2.0
    CIRCULATING_WATER_BASE_M3_H: float = 1000.0
    DRUM_LEVEL_NOMINAL_PCT: float = 50.0
    DRUM_LEVEL_LEVER_GAIN: float = 0.3
    DRUM_LEVEL_BALANCE_GAIN: float = 40.0
    CONDENSER_BASE_PRESSURE_KPA: float = 5.0
    OIL_TANK_NOMINAL_PCT: float = 80.0

    # Protection ------------------------------------------------------------
    MAX_BOILER_TEMP_C: float = 620.0
    WATER_LEVEL_MIN_PCT: float = 8.0
    WATER_LEVEL_MAX_PCT: float = 95.0
    OVERSPEED_TRIP_RPM: float = 3300.0
    SHUTDOWN_COUNTDOWN_SECONDS: float = 10.0
    SHUTDOWN_DECAY_FACTOR: float = 0.95

    # Economics -------------------------------------------------------------
    REVENUE_RATE_PER_MWH: float = 1_000_000.0  # Rupiah per MWh
    CURRENCY_SYMBOL: str = "Rp"

    def as_dict(self) -> Dict[str, Any]:
        """Return configuration values as a mutable dictionary copy."""
        return dict(asdict(self))

    def with_overrides(self, **changes: Any) -> "SimulationConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @property
    def FULL_FIRING_HEAT_MW(self) -> float:
        """Thermal input with the coal feed lever fully open."""
        return self.COAL_FEED_MAX_KG_S * self.COAL_CALORIFIC_VALUE_KJ_PER_KG / 1e3


CONFIG = SimulationConfig()


def get_config() -> SimulationConfig:
    """Convenience accessor for importing modules."""
    return CONFIG
