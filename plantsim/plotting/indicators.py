"""
Plotting helpers for the control-room indicator panel.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

import plotly.graph_objects as go

from config.simulation_config import CONFIG, SimulationConfig
from plantsim.levers import LeverChannel
from plantsim.state import SystemState


def gauge_specs(config: SimulationConfig | None = None) -> List[Tuple[str, str, str, float, float, float]]:
    """(field, title, unit, lower, upper, alarm threshold) for each dial."""
    cfg = config or CONFIG
    return [
        ("main_steam_temp", "Main Steam Temp", "°C", cfg.STEAM_TEMP_MIN_C, cfg.STEAM_TEMP_MAX_C, cfg.MAX_BOILER_TEMP_C),
        ("main_steam_pressure", "Main Steam Pressure", "MPa", 0.0, 20.0, 18.0),
        ("turbine_speed", "Turbine Speed", "rpm", 0.0, cfg.MAX_TURBINE_SPEED_RPM, cfg.OVERSPEED_TRIP_RPM),
        ("load", "Generator Load", "MW", 0.0, cfg.RATED_POWER_MW, cfg.RATED_POWER_MW),
        ("drum_level", "Drum Level", "%", 0.0, 100.0, cfg.WATER_LEVEL_MAX_PCT),
        ("efficiency", "Plant Efficiency", "%", 0.0, 50.0, 50.0),
    ]


def build_gauge(
    value: float,
    title: str,
    unit: str,
    lower: float,
    upper: float,
    threshold: float | None = None,
) -> go.Figure:
    """Return a single gauge; the band above *threshold* is painted as alarm."""
    steps = []
    if threshold is not None and lower < threshold < upper:
        steps = [
            {"range": [lower, threshold], "color": "#e8f4ea"},
            {"range": [threshold, upper], "color": "#ff9896"},
        ]
    fig = go.Figure(
        go.Indicator(
            mode="gauge+number",
            value=value,
            number={"suffix": f" {unit}", "valueformat": ".1f"},
            title={"text": title},
            gauge={
                "axis": {"range": [lower, upper]},
                "bar": {"color": "#1f77b4"},
                "steps": steps,
                "threshold": {
                    "line": {"color": "#d62728", "width": 3},
                    "value": threshold if threshold is not None else upper,
                },
            },
        )
    )
    fig.update_layout(height=220, margin=dict(l=20, r=20, t=50, b=10))
    return fig


def build_gauges(state: SystemState, config: SimulationConfig | None = None) -> Dict[str, go.Figure]:
    """One gauge per key indicator, keyed by state field name."""
    return {
        field: build_gauge(getattr(state, field), title, unit, lower, upper, threshold)
        for field, title, unit, lower, upper, threshold in gauge_specs(config)
    }


def build_lever_chart(channels: Iterable[LeverChannel]) -> go.Figure:
    """Return a grouped bar chart of lever targets against actuator positions."""
    channels = list(channels)
    names = [channel.name for channel in channels]
    fig = go.Figure(
        data=[
            go.Bar(
                name="Target",
                x=names,
                y=[channel.target_value for channel in channels],
                marker_color="#ff7f0e",
            ),
            go.Bar(
                name="Actual",
                x=names,
                y=[channel.current_value for channel in channels],
                marker_color="#1f77b4",
            ),
        ]
    )
    fig.update_layout(
        title="Lever Positions",
        barmode="group",
        yaxis=dict(title="Position [%]", range=[0, 100]),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, x=0.0),
        height=320,
        margin=dict(l=40, r=20, t=60, b=80),
    )
    return fig
