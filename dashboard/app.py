"""
Dash control room for the coal-fired plant simulator.

One module-level :class:`SimulatorSession` is driven by a ``dcc.Interval``;
sliders only move lever targets and the buttons issue session commands.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Allow running this module directly via `python dashboard/app.py`
if __package__ in {None, ""}:
    project_root = Path(__file__).resolve().parents[1]
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))

from dash import Dash, Input, Output, ctx, dcc, html

from config.simulation_config import CONFIG
from plantsim.levers import LEVER_IDS
from plantsim.plotting.indicators import build_gauges, build_lever_chart, gauge_specs
from plantsim.plotting.trends import build_trends_figure
from plantsim.session import SimulatorSession
from plantsim.state import PlantMode, SystemState

logger = logging.getLogger(__name__)

session = SimulatorSession(CONFIG)


def format_currency(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    return f"{CONFIG.CURRENCY_SYMBOL} {value:,.0f}"


def format_number(value: Optional[float], digits: int = 2) -> str:
    if value is None:
        return "N/A"
    return f"{value:,.{digits}f}"


def format_duration(seconds: Optional[float]) -> str:
    if seconds is None:
        return "N/A"
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def _kpi_card(title: str, value: str) -> html.Div:
    return html.Div(
        [
            html.Div(title, style={"fontSize": "0.85rem", "color": "#6c757d"}),
            html.Div(value, style={"fontSize": "1.2rem", "fontWeight": "600"}),
        ],
        style={
            "padding": "12px 16px",
            "border": "1px solid #dee2e6",
            "borderRadius": "8px",
            "backgroundColor": "#fff",
            "minWidth": "160px",
        },
    )


def _grid(children: List[Any], min_width: str = "160px") -> html.Div:
    return html.Div(
        children,
        style={"display": "grid", "gridTemplateColumns": f"repeat(auto-fit, minmax({min_width}, 1fr))", "gap": "12px"},
    )


def build_kpi_cards(state: SystemState) -> html.Div:
    return _grid(
        [
            _kpi_card("Run time", format_duration(state.run_seconds)),
            _kpi_card("Earnings", format_currency(state.total_earnings)),
            _kpi_card("Energy (MWh)", format_number(state.energy_produced_mwh, 2)),
            _kpi_card("Load (MW)", format_number(state.load, 1)),
            _kpi_card("Frequency (Hz)", format_number(state.frequency, 2)),
            _kpi_card("Steam flow (t/h)", format_number(state.main_steam_flow, 0)),
            _kpi_card("Air/fuel ratio", format_number(state.air_fuel_ratio, 1)),
            _kpi_card("Heat rate (kJ/kWh)", format_number(state.heat_rate, 0)),
            _kpi_card("Feedwater temp (°C)", format_number(state.feedwater_temp, 1)),
            _kpi_card("Condenser (kPa)", format_number(state.condenser_pressure, 1)),
            _kpi_card("Flue gas (°C)", format_number(state.flue_gas_temp, 0)),
            _kpi_card("CO₂ (kg/h)", format_number(state.emissions_rate, 0)),
        ]
    )


def build_status_banner(state: SystemState) -> html.Div:
    if state.mode is PlantMode.SHUTTING_DOWN:
        text = f"EMERGENCY SHUTDOWN: {state.shutdown_time:.1f} s remaining"
        color = "#d62728"
    elif state.mode is PlantMode.SHUT_DOWN:
        text = "PLANT SHUT DOWN: reset to restart"
        color = "#d62728"
    elif state.trip:
        text = f"TRIP: {state.trip_reason}"
        color = "#ff7f0e"
    elif state.is_running:
        text = f"Running | turbine {state.turbine_status} | generator {state.generator_status}"
        color = "#2ca02c"
    else:
        text = "Stopped"
        color = "#6c757d"
    return html.Div(
        text,
        style={
            "backgroundColor": "#f1f3f5",
            "border": f"2px solid {color}",
            "borderRadius": "8px",
            "padding": "12px 16px",
            "fontWeight": "600",
            "color": color,
        },
    )


def _lever_slider(channel) -> html.Div:
    return html.Div(
        [
            html.Div(
                f"{channel.name} ({channel.unit})",
                title=channel.description,
                style={"fontSize": "0.85rem", "fontWeight": "600"},
            ),
            dcc.Slider(
                id=f"lever-{channel.lever_id}",
                min=channel.min_value,
                max=channel.max_value,
                step=1,
                value=channel.target_value,
                marks={0: "0", 50: "50", 100: "100"},
                tooltip={"placement": "bottom"},
                updatemode="mouseup",
            ),
        ],
        style={"padding": "8px 4px"},
    )


_BUTTON_STYLE = {"padding": "8px 20px", "borderRadius": "6px", "border": "1px solid #adb5bd", "cursor": "pointer"}

app = Dash(__name__)
app.title = "Coal Plant Control Room"

app.layout = html.Div(
    [
        html.H1("Coal Plant Control Room"),
        html.Div(
            [
                html.Button("Start", id="btn-start", n_clicks=0, style=_BUTTON_STYLE),
                html.Button("Stop", id="btn-stop", n_clicks=0, style=_BUTTON_STYLE),
                html.Button(
                    "Emergency Shutdown",
                    id="btn-shutdown",
                    n_clicks=0,
                    style={**_BUTTON_STYLE, "backgroundColor": "#ff9896"},
                ),
                html.Button("Reset", id="btn-reset", n_clicks=0, style=_BUTTON_STYLE),
            ],
            style={"display": "flex", "gap": "12px", "marginBottom": "16px"},
        ),
        html.Div(id="status-banner", style={"marginBottom": "16px"}),
        html.Div(id="kpi-cards", style={"marginBottom": "16px"}),
        _grid([dcc.Graph(id=f"gauge-{spec[0]}") for spec in gauge_specs(CONFIG)], min_width="240px"),
        html.H3("Levers"),
        _grid([_lever_slider(channel) for channel in session.levers], min_width="260px"),
        dcc.Graph(id="lever-chart"),
        dcc.Graph(id="trends"),
        dcc.Store(id="lever-targets"),
        dcc.Interval(id="tick", interval=int(CONFIG.TICK_SECONDS * 1000), n_intervals=0),
    ],
    style={"maxWidth": "1280px", "margin": "0 auto", "padding": "24px"},
)


@app.callback(
    [Output(f"lever-{lever_id}", "value") for lever_id in LEVER_IDS],
    [Input(button, "n_clicks") for button in ("btn-start", "btn-stop", "btn-shutdown", "btn-reset")],
    prevent_initial_call=True,
)
def handle_command(*_clicks: int) -> List[float]:
    command = ctx.triggered_id
    logger.info("Control room command: %s", command)
    if command == "btn-start":
        session.start()
    elif command == "btn-stop":
        session.stop()
    elif command == "btn-shutdown":
        session.shutdown()
    elif command == "btn-reset":
        session.reset()
    else:
        logger.warning("Ignoring unknown control room command %r", command)
    return [channel.target_value for channel in session.levers]


@app.callback(
    Output("lever-targets", "data"),
    [Input(f"lever-{lever_id}", "value") for lever_id in LEVER_IDS],
)
def update_levers(*values: Optional[float]) -> Dict[str, float]:
    targets: Dict[str, float] = {}
    for lever_id, value in zip(LEVER_IDS, values):
        if value is not None:
            targets[lever_id] = session.set_lever_target(lever_id, value)
    return targets


@app.callback(
    [
        Output("status-banner", "children"),
        Output("kpi-cards", "children"),
        *[Output(f"gauge-{spec[0]}", "figure") for spec in gauge_specs(CONFIG)],
        Output("lever-chart", "figure"),
        Output("trends", "figure"),
    ],
    [Input("tick", "n_intervals")],
)
def refresh(_n_intervals: int) -> List[Any]:
    state = session.tick()
    gauges = build_gauges(state, CONFIG)
    return [
        build_status_banner(state),
        build_kpi_cards(state),
        *[gauges[spec[0]] for spec in gauge_specs(CONFIG)],
        build_lever_chart(session.levers),
        build_trends_figure(session.history_frame()),
    ]


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app.run(debug=False)
