"""
Input/output helpers for headless scenario runs.

Every run of :func:`plantsim.simulation_core.run_simulation` gets its own
folder under ``sim_out/`` holding the tick trace and the KPI/assumption
exports.
"""

from __future__ import annotations

import json
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

import pandas as pd


SIM_OUT_DIR = Path("sim_out")


def ensure_output_root(root: Path | None = None) -> Path:
    """Create the output root (``sim_out/`` by default) if it does not exist."""
    target = root or SIM_OUT_DIR
    target.mkdir(parents=True, exist_ok=True)
    return target


def _safe_label(label: str) -> str:
    """Filesystem-safe version of a scenario name, e.g. 'cold standby' -> 'cold-standby'."""
    cleaned = re.sub(r"[^A-Za-z0-9]+", "-", label).strip("-")
    return cleaned or "run"


def create_run_directory(
    label: str | None = None,
    timestamp: str | None = None,
    root: Path | None = None,
) -> Path:
    """
    Create a new timestamped run directory and return its path.

    The format is `sim_run_YYYY-MM-DD_HH-MM[_label]`. An existing directory of
    the same name gets a numeric suffix instead of being overwritten.
    """
    out_root = ensure_output_root(root)
    ts = timestamp or datetime.now().strftime("%Y-%m-%d_%H-%M")
    base_name = f"sim_run_{ts}"
    if label:
        base_name = f"{base_name}_{_safe_label(label)}"
    run_path = out_root / base_name
    counter = 1
    while run_path.exists():
        run_path = out_root / f"{base_name}_{counter}"
        counter += 1
    run_path.mkdir(parents=True, exist_ok=False)
    return run_path


def save_dataframe(path: Path, dataframe: pd.DataFrame) -> None:
    """Persist a DataFrame to CSV using UTF-8 encoding."""
    path.parent.mkdir(parents=True, exist_ok=True)
    dataframe.to_csv(path, index=False)


def save_json(path: Path, payload: Dict[str, Any]) -> None:
    """Persist a dictionary to JSON with readable formatting."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2)


def load_json(path: Path) -> Dict[str, Any]:
    """Load a JSON file, returning an empty dict if the file is missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def load_csv(path: Path) -> pd.DataFrame:
    """Load a CSV file, returning an empty DataFrame if the file is missing."""
    if not path.exists():
        return pd.DataFrame()
    return pd.read_csv(path)
