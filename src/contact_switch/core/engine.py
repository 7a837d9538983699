"""Reference stepping driver for the contact switch.

The real inverse-dynamics driver lives in the host engine. This module steps
the time grid the same way (one step at a time, every element queried at the
current step before moving on) and records what the host would receive, so
that strength tables and the handoff can be inspected and tested without a
multibody model.

Use from the CLI or tests as:

    from contact_switch.core.engine import build_from_config, run_switch_sweep

    switch = build_from_config(cfg)
    df = run_switch_sweep(switch)
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Union

import numpy as np
import pandas as pd

from ..config.loader import normalize_config_dict
from ..config.models import SwitchConfig
from .contact import ContactSwitch, build_contact_switch
from .elements import OneSidedActivation, constant_activation
from .measures import DOF_LABELS, Pose
from .timegrid import TimeGrid
from .transition import TransitionWindow

logger = logging.getLogger(__name__)

PoseFunc = Callable[[int, float], Pose]


def _coerce_config(cfg: Union[SwitchConfig, Dict[str, Any], None]) -> SwitchConfig:
    if cfg is None:
        return SwitchConfig()
    if isinstance(cfg, SwitchConfig):
        return cfg
    return SwitchConfig.model_validate(normalize_config_dict(cfg, filename="<dict>"))


def build_from_config(cfg: Union[SwitchConfig, Dict[str, Any], None] = None) -> ContactSwitch:
    """Build the time grid, tables and both contact groups from a config."""
    cfg = _coerce_config(cfg)
    grid = TimeGrid.from_span(cfg.time_grid.t0, cfg.time_grid.t1, cfg.time_grid.n_points)

    spec = cfg.transition
    if spec.mode == "explicit":
        window = TransitionWindow(spec.t_start, spec.t_end)
    elif spec.mode == "centred":
        window = TransitionWindow(*grid.centred_window(int(spec.width_steps)))
    else:
        window = TransitionWindow(*grid.midpoint_window())

    if cfg.activation.type == "one_sided":
        activation = OneSidedActivation(cfg.activation.smoothing)
    else:
        activation = constant_activation

    return build_contact_switch(
        grid,
        window,
        hand_frame=cfg.frames.hand,
        world_frame=cfg.frames.world,
        payload_frame=cfg.frames.payload,
        table_scale=cfg.force_law.table_scale,
        baseline_force=cfg.force_law.baseline_force,
        activation=activation,
    )


def run_switch_sweep(switch: ContactSwitch, pose_func: Optional[PoseFunc] = None) -> pd.DataFrame:
    """
    Step through the whole time grid and record the handoff.

    Parameters
    ----------
    switch:
        A built contact switch.
    pose_func:
        ``pose_func(step, t) -> Pose``; defaults to every frame at the origin.

    Returns
    -------
    pd.DataFrame with one row per step: strengths, force-law outputs, the
    total coupling and the net generalized force of each group per DOF.
    """
    grid = switch.grid
    hand, world = switch.groups
    rows: List[Dict[str, Any]] = []

    logger.debug("Sweeping %d steps.", grid.n_steps)
    for step in range(grid.n_steps):
        t = float(grid.t[step])
        pose = pose_func(step, t) if pose_func is not None else Pose.identity()

        hand_strength, world_strength = switch.strengths(step)
        hand_force = hand.law.evaluate(step)
        world_force = world.law.evaluate(step)
        gen = switch.generalized_forces(step, pose)

        row: Dict[str, Any] = {
            "Step": step,
            "Time_s": t,
            "Hand_Strength": hand_strength,
            "World_Strength": world_strength,
            "Hand_Force_N": hand_force,
            "World_Force_N": world_force,
            "Total_Coupling_N": hand_force + world_force,
        }
        for label, value in zip(DOF_LABELS, gen[hand.name]):
            row[f"Hand_{label}"] = float(value)
        for label, value in zip(DOF_LABELS, gen[world.name]):
            row[f"World_{label}"] = float(value)
        rows.append(row)

    df = pd.DataFrame(rows)
    df.attrs["t_start"] = switch.window.t_start
    df.attrs["t_end"] = switch.window.t_end
    df.attrs["table_scale"] = hand.law.table_scale
    df.attrs["baseline_force"] = hand.law.baseline_force
    df.attrs["n_elements"] = len(switch.actuators())

    scale = hand.law.table_scale + 2.0 * hand.law.baseline_force
    err = float(np.max(np.abs(df["Total_Coupling_N"].to_numpy() - scale)))
    df.attrs["coupling_error_N"] = err
    if err > 1e-9 * scale:
        logger.warning("Total coupling drifts from %.6g by up to %.3e N.", scale, err)
    return df


def run_from_config(
    cfg: Union[SwitchConfig, Dict[str, Any], None] = None,
    pose_func: Optional[PoseFunc] = None,
) -> pd.DataFrame:
    """High-level convenience wrapper: build from ``cfg`` and sweep."""
    return run_switch_sweep(build_from_config(cfg), pose_func=pose_func)
