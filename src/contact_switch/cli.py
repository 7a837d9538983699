# src/contact_switch/cli.py

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
import typer

from .config.loader import ConfigError, get_default_switch_params, load_raw_config, normalize_config_dict
from .core.contact import build_contact_switch
from .core.engine import build_from_config, run_switch_sweep
from .core.errors import ContactSwitchError
from .core.timegrid import TimeGrid
from .core.transition import TransitionWindow
from .studies import parse_override, parse_widths, save_study_metadata, set_by_path

app = typer.Typer(
    add_completion=False,
    help=(
        "Contact switch CLI\n\n"
        "Build the complementary strength tables that hand a held payload\n"
        "over from the hand to the world, sweep the time grid and export\n"
        "the force-law outputs seen by the inverse-dynamics solver."
    ),
)

# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------


def _ensure_output_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def _setup_logger(output_dir: Path, log_stem: str) -> logging.Logger:
    """
    Set up a per-run log file <output_dir>/<log_stem>.log collecting the
    package's messages (core build info included).
    """
    _ensure_output_dir(output_dir)
    package_logger = logging.getLogger("contact_switch")
    package_logger.setLevel(logging.INFO)
    package_logger.handlers.clear()

    log_file = output_dir / f"{log_stem}.log"
    handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    handler.setFormatter(formatter)
    package_logger.addHandler(handler)

    return logging.getLogger(f"contact_switch.cli.{log_stem}")


def _print_and_log(logger: logging.Logger, msg: str) -> None:
    typer.echo(msg)
    logger.info(msg)


def _load_config_dict(path: Optional[Path], overrides: Optional[List[str]]) -> Dict[str, Any]:
    """Load a YAML/JSON config (or defaults) and apply 'path=value' overrides."""
    name = path.name if path is not None else "<defaults>"
    try:
        cfg = load_raw_config(path) if path is not None else {}
        known = get_default_switch_params()
        for spec in overrides or []:
            key, value = parse_override(spec, known=known)
            cfg = set_by_path(cfg, key, value)
        return normalize_config_dict(cfg, filename=name)
    except (ConfigError, ValueError) as exc:
        raise typer.BadParameter(str(exc)) from exc


def _save_strength_plot(df: pd.DataFrame, path: Path) -> None:
    """Write hand/world strength vs time to a PNG."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(df["Time_s"], df["Hand_Strength"], label="hand")
    ax.plot(df["Time_s"], df["World_Strength"], label="world")
    ax.axvspan(df.attrs["t_start"], df.attrs["t_end"], color="0.9", zorder=0)
    ax.set_xlabel("t [s]")
    ax.set_ylabel("strength [-]")
    ax.set_ylim(-0.05, 1.05)
    ax.grid(True)
    ax.legend()
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)


# ----------------------------------------------------------------------
# Commands
# ----------------------------------------------------------------------


@app.command()
def run(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        readable=True,
        help="YAML/JSON switch configuration (defaults if omitted).",
    ),
    output_dir: Path = typer.Option(
        Path("results"),
        "--output-dir",
        "-o",
        help="Directory for result files.",
    ),
    prefix: str = typer.Option(
        "",
        "--prefix",
        "-p",
        help="Optional filename prefix for output files.",
    ),
    override: Optional[List[str]] = typer.Option(
        None,
        "--set",
        help="Override a config value, e.g. --set force_law.table_scale=500",
    ),
    plot: bool = typer.Option(
        False,
        "--plot",
        help="Write a PNG of both strength tables.",
    ),
) -> None:
    """
    Build the contact switch and sweep the full time grid.

    Examples
    --------
        contact-switch run --config configs/dumbbell_release.yml -o results/release --plot
    """
    _ensure_output_dir(output_dir)
    filename_prefix = f"{prefix}_" if prefix else ""
    log_stem = f"{filename_prefix}run"
    logger = _setup_logger(output_dir, log_stem)

    _print_and_log(logger, f"Loading config: {config if config else '<defaults>'}")
    cfg = _load_config_dict(config, override)

    _print_and_log(logger, "Building contact switch ...")
    try:
        switch = build_from_config(cfg)
    except ContactSwitchError as exc:
        logger.error("Build failed: %s", exc)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    t0 = time.perf_counter()
    df = run_switch_sweep(switch)
    wall = time.perf_counter() - t0

    csv_path = output_dir / f"{filename_prefix}timeseries.csv"
    _print_and_log(logger, f"Writing time history to {csv_path}")
    df.to_csv(csv_path, index=False)

    _print_and_log(
        logger,
        f"Steps: {len(df)}  window: [{df.attrs['t_start']:.6g}, {df.attrs['t_end']:.6g}] s  "
        f"elements: {df.attrs['n_elements']}  coupling error: {df.attrs['coupling_error_N']:.3e} N  "
        f"wall time: {wall:.3f} s",
    )

    if plot:
        png_path = output_dir / f"{filename_prefix}strengths.png"
        _save_strength_plot(df, png_path)
        _print_and_log(logger, f"Strength plot written to {png_path}")

    save_study_metadata(
        output_dir,
        metadata={"study_type": "single_run", "config": cfg, "wall_time_s": wall},
    )
    typer.echo(f"\nDetailed log written to {output_dir / f'{log_stem}.log'}")
    logger.info("Run completed.")


@app.command()
def tables(
    n_points: int = typer.Option(101, "--n-points", "-n", help="Number of grid instants."),
    t0: float = typer.Option(0.0, "--t0", help="First instant [s]."),
    t1: float = typer.Option(1.0, "--t1", help="Last instant [s]."),
    t_start: Optional[float] = typer.Option(None, "--t-start", help="Window start [s] (default: grid midpoint)."),
    t_end: Optional[float] = typer.Option(None, "--t-end", help="Window end [s] (default: grid midpoint)."),
    scale: float = typer.Option(1000.0, "--scale", help="Force coefficient at full strength."),
    csv: Optional[Path] = typer.Option(None, "--csv", help="Also write the tables to this CSV."),
) -> None:
    """Print the hand/world strength tables and force-law outputs."""
    try:
        grid = TimeGrid.from_span(t0, t1, n_points)
        if (t_start is None) != (t_end is None):
            raise typer.BadParameter("--t-start and --t-end must be given together.")
        window = TransitionWindow(t_start, t_end) if t_start is not None else None
        switch = build_contact_switch(grid, window, table_scale=scale)
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    hand, world = switch.groups
    df = pd.DataFrame(
        {
            "Step": np.arange(grid.n_steps),
            "Time_s": grid.t,
            "Hand_Strength": hand.law.table.values,
            "World_Strength": world.law.table.values,
            "Hand_Force_N": hand.law.evaluate_all(),
            "World_Force_N": world.law.evaluate_all(),
        }
    )
    typer.echo(df.to_string(index=False))
    if csv is not None:
        df.to_csv(csv, index=False)
        typer.echo(f"Saved to: {csv}")


@app.command("window-sensitivity")
def window_sensitivity_cmd(
    config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, readable=True, help="Base config YAML"),
    widths: str = typer.Option("0,1,2,5,10,20", "--widths", help="Comma/space-separated widths [grid intervals]"),
    out: Path = typer.Option(..., "--out", "-o", help="Output directory"),
    save_timeseries: bool = typer.Option(False, "--save-timeseries", help="Save timeseries CSVs for each run"),
) -> None:
    """Sweep the transition width and summarize handoff smoothness."""
    from .studies.window_sensitivity import run_window_sensitivity

    cfg = _load_config_dict(config, None)
    try:
        width_list = parse_widths(widths)
    except ValueError as exc:
        raise typer.BadParameter(f"Could not parse widths from {widths!r}: {exc}") from exc
    summary = run_window_sensitivity(cfg, width_list, out_dir=out, save_timeseries=save_timeseries)
    typer.echo(summary.to_string(index=False))
    typer.echo(f"Saved to: {out}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
