"""
Transition-window width study.

Sweeps the handoff width (in grid intervals, centred on the grid midpoint)
and reports how abruptly the strength tables move: the largest per-step
increment and the largest second difference of the hand table, plus the
worst deviation of the total coupling from the force coefficient.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd
import yaml

from . import save_study_metadata, set_by_path
from ..config.loader import normalize_config_dict

SimFunc = Callable[[Dict[str, Any]], pd.DataFrame]


def _extract_metrics(df: pd.DataFrame) -> Dict[str, float]:
    hand = df["Hand_Strength"].to_numpy()
    d1 = np.diff(hand)
    d2 = np.diff(hand, n=2)
    scale = float(df.attrs.get("table_scale", np.nan)) + 2.0 * float(df.attrs.get("baseline_force", 0.0))
    coupling = df["Total_Coupling_N"].to_numpy()
    return {
        "max_step_increment": float(np.max(np.abs(d1))) if d1.size else 0.0,
        "max_second_difference": float(np.max(np.abs(d2))) if d2.size else 0.0,
        "coupling_error_N": float(np.max(np.abs(coupling - scale))),
    }


def run_window_sensitivity(
    cfg_overrides: Dict[str, Any],
    widths: Iterable[int],
    *,
    out_dir: Optional[Path] = None,
    save_timeseries: bool = False,
    simulate_func: Optional[SimFunc] = None,
) -> pd.DataFrame:
    """
    Sweep the transition width and summarize how smooth each handoff is.

    Parameters
    ----------
    cfg_overrides:
        Config overrides loaded from YAML (can be partial).
    widths:
        Transition widths in grid intervals; 0 gives a unit step.
    out_dir:
        If provided, write summary CSV + metadata.
    save_timeseries:
        If True, also save each run DataFrame as CSV.
    simulate_func:
        For testing; defaults to `contact_switch.core.engine.run_from_config`.

    Returns
    -------
    pd.DataFrame with one row per width, narrowest first.
    """
    if simulate_func is None:
        from contact_switch.core.engine import run_from_config as simulate_func  # type: ignore

    base = normalize_config_dict(cfg_overrides, filename="<overrides>")
    widths = [int(w) for w in widths]

    rows: List[Dict[str, Any]] = []
    for width in widths:
        cfg = set_by_path(base, "transition", {"mode": "centred", "width_steps": width})

        df = simulate_func(cfg)
        rows.append(
            {
                "width_steps": width,
                "t_start": float(df.attrs.get("t_start", np.nan)),
                "t_end": float(df.attrs.get("t_end", np.nan)),
                **_extract_metrics(df),
            }
        )

        if out_dir and save_timeseries:
            out_dir.mkdir(parents=True, exist_ok=True)
            df.to_csv(out_dir / f"timeseries_width_{width:04d}.csv", index=False)

    summary = pd.DataFrame(rows).sort_values("width_steps").reset_index(drop=True)

    if out_dir:
        out_dir.mkdir(parents=True, exist_ok=True)
        summary.to_csv(out_dir / "window_sensitivity.csv", index=False)
        (out_dir / "config_overrides.yml").write_text(
            yaml.safe_dump(cfg_overrides, sort_keys=False), encoding="utf-8"
        )
        save_study_metadata(
            out_dir,
            metadata={
                "study_type": "window_sensitivity",
                "widths": widths,
                "save_timeseries": bool(save_timeseries),
            },
        )
    return summary
