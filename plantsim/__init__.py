"""
Coal-fired steam plant simulator.

The physics core is the pure ``engine.step_system`` function; ``session``
wraps it for interactive front ends and ``simulation_core`` drives it
headlessly for scenario exports.
"""

from __future__ import annotations

__all__ = [
    "boiler_models",
    "economic_models",
    "engine",
    "levers",
    "protection",
    "session",
    "simulation_core",
    "state",
    "turbine_models",
    "water_models",
]
