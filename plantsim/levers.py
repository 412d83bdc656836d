"""
Lever registry: the twelve operator control channels of the plant.

The surrounding application writes *targets* into a :class:`LeverBank`; the
bank moves each channel's ``current_value`` towards its target once per tick
and hands the physics engine a plain ``{lever_id: value}`` mapping.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterator, List, Mapping, Tuple

from config.simulation_config import CONFIG, SimulationConfig
from plantsim.utils.math_tools import clamp, finite_or, first_order_response

COAL_FEED = "coal_feed"
FEEDWATER = "feedwater"
BOILER_PRESSURE = "boiler_pressure"
STEAM_TURBINE = "steam_turbine"
CONDENSER = "condenser"
COOLING_WATER = "cooling_water"
AIR_SUPPLY = "air_supply"
FUEL_INJECTION = "fuel_injection"
STEAM_FLOW = "steam_flow"
WATER_LEVEL = "water_level"
EXHAUST_GAS = "exhaust_gas"
EMERGENCY_VALVE = "emergency_valve"

LEVER_IDS: Tuple[str, ...] = (
    COAL_FEED,
    FEEDWATER,
    BOILER_PRESSURE,
    STEAM_TURBINE,
    CONDENSER,
    COOLING_WATER,
    AIR_SUPPLY,
    FUEL_INJECTION,
    STEAM_FLOW,
    WATER_LEVEL,
    EXHAUST_GAS,
    EMERGENCY_VALVE,
)

# Levers zeroed by the protection system while tripped.
FUEL_LEVERS: Tuple[str, ...] = (COAL_FEED, FUEL_INJECTION)
THROTTLE_LEVERS: Tuple[str, ...] = (STEAM_TURBINE,)


@dataclass
class LeverChannel:
    """One bounded control channel."""

    lever_id: str
    name: str
    description: str
    response_time: float
    sensitivity: float
    min_value: float = 0.0
    max_value: float = 100.0
    current_value: float = 0.0
    target_value: float = 0.0
    unit: str = "%"

    def __post_init__(self) -> None:
        self.current_value = self.clamp_value(self.current_value)
        self.target_value = self.clamp_value(self.target_value)

    def clamp_value(self, value: float) -> float:
        """Clamp to the channel range; non-finite input maps to ``min_value``."""
        return clamp(finite_or(value, self.min_value), self.min_value, self.max_value)

    @property
    def smoothing_rate(self) -> float:
        """Approach rate in 1/s derived from the response time."""
        return 1.0 / self.response_time if self.response_time > 0 else float("inf")

    def set_target(self, value: float) -> float:
        self.target_value = self.clamp_value(value)
        return self.target_value

    def set_current(self, value: float) -> float:
        self.current_value = self.clamp_value(value)
        return self.current_value

    def advance(self, dt: float) -> float:
        """Move ``current_value`` towards ``target_value`` over *dt* seconds."""
        moved = first_order_response(self.current_value, self.target_value, dt, self.response_time)
        # Snap the residual so the channel settles exactly on its target.
        if abs(moved - self.target_value) < 0.01:
            moved = self.target_value
        return self.set_current(moved)


# (name, description, sensitivity); response times come from SimulationConfig.LEVER_RESPONSE_S
_DEFAULT_CHANNELS: Dict[str, Tuple[str, str, float]] = {
    COAL_FEED: ("Coal Feed", "Coal supply to the boiler", 0.3),
    FEEDWATER: ("Feedwater", "Water circulation into the boiler", 0.4),
    BOILER_PRESSURE: ("Boiler Pressure", "Boiler pressure setpoint bias", 0.2),
    STEAM_TURBINE: ("Steam Turbine", "Turbine throttle valve opening", 0.35),
    CONDENSER: ("Condenser", "Steam condensation duty", 0.4),
    COOLING_WATER: ("Cooling Water", "Cooling water pumping", 0.5),
    AIR_SUPPLY: ("Air Supply", "Combustion air fans", 0.6),
    FUEL_INJECTION: ("Fuel Injection", "Oil support burners", 0.4),
    STEAM_FLOW: ("Steam Flow", "Steam admitted to the turbine (load demand)", 0.35),
    WATER_LEVEL: ("Water Level", "Drum level setpoint", 0.15),
    EXHAUST_GAS: ("Exhaust Gas", "Flue gas damper opening", 0.4),
    EMERGENCY_VALVE: ("Emergency Valve", "Steam relief valve", 0.8),
}


def default_channels(config: SimulationConfig | None = None) -> List[LeverChannel]:
    """Build the twelve channels at their resting (zero) position."""
    cfg = config or CONFIG
    channels: List[LeverChannel] = []
    for lever_id in LEVER_IDS:
        name, description, sensitivity = _DEFAULT_CHANNELS[lever_id]
        response_time = cfg.LEVER_RESPONSE_S.get(lever_id, cfg.DEFAULT_LEVER_RESPONSE_S)
        channels.append(
            LeverChannel(
                lever_id=lever_id,
                name=name,
                description=description,
                response_time=response_time,
                sensitivity=sensitivity,
            )
        )
    return channels


def require_lever_id(lever_id: str) -> str:
    if lever_id not in LEVER_IDS:
        raise ValueError(f"Unknown lever id: {lever_id!r}")
    return lever_id


def normalise_lever_values(values: Mapping[str, float]) -> Dict[str, float]:
    """
    Validate a lever mapping and clamp every value to [0, 100].

    All twelve ids are required; unknown ids are rejected. Non-finite values
    are treated as the channel minimum.
    """
    missing = [lever_id for lever_id in LEVER_IDS if lever_id not in values]
    if missing:
        raise ValueError(f"Missing lever values: {', '.join(missing)}")
    unknown = sorted(set(values) - set(LEVER_IDS))
    if unknown:
        raise ValueError(f"Unknown lever ids: {', '.join(unknown)}")
    return {lever_id: clamp(finite_or(values[lever_id], 0.0), 0.0, 100.0) for lever_id in LEVER_IDS}


def uniform_levers(value: float = 50.0, **overrides: float) -> Dict[str, float]:
    """Every lever at *value*, with selected levers overridden by keyword."""
    levers = {lever_id: float(value) for lever_id in LEVER_IDS}
    for lever_id, lever_value in overrides.items():
        levers[require_lever_id(lever_id)] = float(lever_value)
    return levers


class LeverBank:
    """Mutable set of the twelve channels owned by one simulator session."""

    def __init__(self, config: SimulationConfig | None = None) -> None:
        self.config = config or CONFIG
        self._channels: Dict[str, LeverChannel] = {
            channel.lever_id: channel for channel in default_channels(self.config)
        }

    def __iter__(self) -> Iterator[LeverChannel]:
        return iter(self._channels[lever_id] for lever_id in LEVER_IDS)

    def __len__(self) -> int:
        return len(self._channels)

    def channel(self, lever_id: str) -> LeverChannel:
        return self._channels[require_lever_id(lever_id)]

    def set_target(self, lever_id: str, value: float) -> float:
        return self.channel(lever_id).set_target(value)

    def set_immediate(self, lever_id: str, value: float) -> float:
        """Set target and current together, skipping the actuator lag."""
        channel = self.channel(lever_id)
        channel.set_target(value)
        return channel.set_current(channel.target_value)

    def advance(self, dt: float) -> Dict[str, float]:
        for channel in self:
            channel.advance(dt)
        return self.values()

    def values(self) -> Dict[str, float]:
        return {channel.lever_id: channel.current_value for channel in self}

    def targets(self) -> Dict[str, float]:
        return {channel.lever_id: channel.target_value for channel in self}

    def snapshot(self) -> List[LeverChannel]:
        return [replace(channel) for channel in self]

    def reset(self) -> None:
        self._channels = {channel.lever_id: channel for channel in default_channels(self.config)}
