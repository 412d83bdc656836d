"""
Plotly figure builders used by the control-room dashboard.
"""

from __future__ import annotations

__all__ = [
    "indicators",
    "trends",
]
