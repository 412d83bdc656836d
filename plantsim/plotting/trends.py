"""
Plotting helpers for the control-room trend panel.

All functions operate on the history DataFrame produced by
:meth:`plantsim.session.SimulatorSession.history_frame` (or the results of
:func:`plantsim.simulation_core.simulate_scenario`) and have no side effects.
"""

from __future__ import annotations

import pandas as pd
from plotly.subplots import make_subplots
import plotly.graph_objects as go

# (row, col, column, label, color, secondary axis)
_TRACES = [
    (1, 1, "main_steam_temp", "steam temp [°C]", "#d62728", False),
    (1, 1, "main_steam_pressure", "steam pressure [MPa]", "#1f77b4", True),
    (1, 2, "turbine_speed", "turbine speed [rpm]", "#9467bd", False),
    (1, 2, "frequency", "frequency [Hz]", "#8c564b", True),
    (2, 1, "main_steam_flow", "steam flow [t/h]", "#2ca02c", False),
    (2, 1, "drum_level", "drum level [%]", "#17becf", True),
    (2, 2, "load", "load [MW]", "#ff7f0e", False),
    (2, 2, "efficiency", "efficiency [%]", "#7f7f7f", True),
]


def build_trends_figure(history: pd.DataFrame) -> go.Figure:
    """Create the 2x2 trend figure (time axis in seconds of run time)."""
    if history.empty or "t_s" not in history:
        return go.Figure()

    t_s = history["t_s"].to_numpy()
    fig = make_subplots(
        rows=2,
        cols=2,
        specs=[[{"secondary_y": True}, {"secondary_y": True}]] * 2,
        shared_xaxes=True,
        horizontal_spacing=0.08,
        vertical_spacing=0.12,
        subplot_titles=[
            "Boiler Temperature & Pressure",
            "Turbine Speed & Grid Frequency",
            "Steam Flow & Drum Level",
            "Generator Load & Efficiency",
        ],
    )
    for row, col, column, label, color, secondary in _TRACES:
        if column not in history:
            continue
        fig.add_trace(
            go.Scatter(
                x=t_s,
                y=history[column],
                name=label,
                line=dict(color=color, dash="dash" if secondary else "solid"),
            ),
            row=row,
            col=col,
            secondary_y=secondary,
        )

    if "trip" in history and history["trip"].astype(bool).any():
        trip_time = float(history.loc[history["trip"].astype(bool), "t_s"].iloc[0])
        fig.add_vline(x=trip_time, line=dict(color="#d62728", dash="dot"))

    fig.update_xaxes(title_text="Run time [s]", row=2, col=1)
    fig.update_xaxes(title_text="Run time [s]", row=2, col=2)
    fig.update_xaxes(showgrid=True, gridcolor="rgba(0,0,0,0.1)")
    fig.update_layout(
        height=600,
        legend=dict(orientation="h", yanchor="top", y=1.12, x=0.01),
        margin=dict(l=40, r=20, t=60, b=60),
    )
    return fig
