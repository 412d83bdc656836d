"""
Reusable mathematical helpers for the simulation models.

Only lightweight utilities are placed here to avoid re-implementing the same
logic across the boiler, turbine and water stages. Every inertia term in the
plant goes through :func:`approach`.
"""

from __future__ import annotations

import math


def clamp(value: float, low: float, high: float) -> float:
    """Clamp *value* to the inclusive range [low, high]."""
    return max(low, min(high, value))


def approach(current: float, target: float, rate: float, dt: float) -> float:
    """
    Move *current* towards *target* with first-order exponential convergence.

    ``rate`` is in 1/s. The result lies between *current* and *target* for any
    positive ``rate`` and ``dt``, equals *current* when ``dt == 0`` and is
    within 1 % of *target* once ``dt >= 5 / rate``.
    """
    if dt <= 0 or rate <= 0:
        return current
    return current + (target - current) * (1.0 - math.exp(-rate * dt))


def first_order_response(current: float, target: float, dt: float, tau: float) -> float:
    """Advance a first-order lag towards *target* using time constant *tau*."""
    if tau <= 0:
        return target
    return approach(current, target, 1.0 / tau, dt)


def safe_ratio(numerator: float, denominator: float, epsilon: float) -> float:
    """Divide with the denominator floored at *epsilon*."""
    return numerator / max(denominator, epsilon)


def is_valid_dt(dt: float) -> bool:
    """True when *dt* is a finite, strictly positive time step."""
    try:
        return math.isfinite(dt) and dt > 0
    except TypeError:
        return False


def finite_or(value: float, fallback: float) -> float:
    """Return *value* unless it is NaN/inf (or not numeric), else *fallback*."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    return number if math.isfinite(number) else fallback
