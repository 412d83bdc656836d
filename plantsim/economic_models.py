"""
Revenue and KPI calculations.

``earnings`` and ``energy_produced`` are recomputed every tick from the
current load and the total run time rather than summed per tick, so a
variable tick rate cannot make the totals drift. The remaining helpers turn a
recorded run (see :mod:`plantsim.simulation_core`) into aggregate figures.
"""

from __future__ import annotations

from typing import Dict

import numpy as np
import pandas as pd

from config.simulation_config import CONFIG, SimulationConfig


def energy_produced(load_mw: float, duration_seconds: float) -> float:
    """Energy in MWh for *load_mw* held over *duration_seconds*."""
    return max(load_mw, 0.0) * max(duration_seconds, 0.0) / 3600.0


def earnings(
    load_mw: float,
    duration_seconds: float,
    rate_per_mwh: float | None = None,
    config: SimulationConfig | None = None,
) -> float:
    """Revenue for *load_mw* held over *duration_seconds* at the configured rate."""
    cfg = config or CONFIG
    rate = cfg.REVENUE_RATE_PER_MWH if rate_per_mwh is None else rate_per_mwh
    return energy_produced(load_mw, duration_seconds) * rate


def compute_energy_outputs(load_mw: np.ndarray, dt_seconds: float) -> Dict[str, float]:
    """Integrate a load trace (MW) into cumulative electrical energy."""
    trace = np.asarray(load_mw, dtype=float)
    if trace.size < 2:
        return {"total_energy_mwh": 0.0, "total_energy_j": 0.0}
    energy_mwh = float(np.trapezoid(trace, dx=dt_seconds)) / 3600.0
    return {
        "total_energy_mwh": energy_mwh,
        "total_energy_j": energy_mwh * 3.6e9,
    }


def compute_fuel_usage(coal_t_h: np.ndarray, dt_seconds: float) -> Dict[str, float]:
    """Integrate coal feed (t/h) into consumed tonnage."""
    trace = np.asarray(coal_t_h, dtype=float)
    tons = float(np.trapezoid(trace, dx=dt_seconds)) / 3600.0 if trace.size >= 2 else 0.0
    return {
        "coal_consumed_kg": tons * 1000.0,
        "coal_consumed_tons": tons,
    }


def compute_run_kpis(
    results: pd.DataFrame,
    dt_seconds: float,
    config: SimulationConfig | None = None,
) -> Dict[str, float | bool | str | None]:
    """Summarise a recorded run for the KPI export."""
    cfg = config or CONFIG
    if results.empty:
        return {"samples": 0}

    energy = compute_energy_outputs(results["load"].to_numpy(), dt_seconds)
    fuel = compute_fuel_usage(results["coal_loading_rate"].to_numpy(), dt_seconds)
    co2_kg = float(np.trapezoid(results["emissions_rate"].to_numpy(), dx=dt_seconds)) / 3600.0

    revenue = energy["total_energy_mwh"] * cfg.REVENUE_RATE_PER_MWH
    energy_mwh = energy["total_energy_mwh"]
    tripped = results["trip"].astype(bool)
    trip_time = float(results.loc[tripped, "t_s"].iloc[0]) if tripped.any() else None
    duration_h = float(results["t_s"].iloc[-1]) / 3600.0
    rated_energy = cfg.RATED_POWER_MW * duration_h

    return {
        "samples": int(len(results)),
        "duration_s": float(results["t_s"].iloc[-1]),
        **energy,
        **fuel,
        "revenue": revenue,
        "final_load_mw": float(results["load"].iloc[-1]),
        "peak_load_mw": float(results["load"].max()),
        "peak_steam_temp_c": float(results["main_steam_temp"].max()),
        "mean_efficiency_percent": float(results["efficiency"].mean()),
        "capacity_factor_percent": (energy_mwh / rated_energy * 100.0) if rated_energy > 0 else 0.0,
        "co2_emitted_tons": co2_kg / 1000.0,
        "co2_intensity_t_per_mwh": (co2_kg / 1000.0 / energy_mwh) if energy_mwh > 0 else 0.0,
        "tripped": bool(tripped.any()),
        "trip_time_s": trip_time,
    }
