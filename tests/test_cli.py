from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from contact_switch.cli import app

runner = CliRunner()


def test_tables_command() -> None:
    result = runner.invoke(app, ["tables", "--n-points", "11"])
    assert result.exit_code == 0, result.output
    assert "Hand_Strength" in result.output
    assert "World_Force_N" in result.output


def test_tables_rejects_window_outside_grid() -> None:
    result = runner.invoke(app, ["tables", "--n-points", "11", "--t-start", "0.5", "--t-end", "3.0"])
    assert result.exit_code == 1
    assert "outside" in result.output


def test_run_command_writes_outputs(tmp_path: Path) -> None:
    out = tmp_path / "run"
    result = runner.invoke(
        app,
        ["run", "-o", str(out), "--set", "time_grid.n_points=21", "--set", "force_law.table_scale=10", "--plot"],
    )
    assert result.exit_code == 0, result.output
    assert (out / "timeseries.csv").is_file()
    assert (out / "strengths.png").is_file()
    assert (out / "run.log").is_file()
    assert (out / "run_metadata.json").is_file()
    assert "elements: 24" in result.output


def test_run_window_from_overrides(tmp_path: Path) -> None:
    result = runner.invoke(
        app,
        ["run", "-o", str(tmp_path / "win"), "--set", "transition.t_start=0.2", "--set", "transition.t_end=0.4"],
    )
    assert result.exit_code == 0, result.output
    assert "window: [0.2, 0.4] s" in result.output


def test_run_reversed_window_override_fails(tmp_path: Path) -> None:
    result = runner.invoke(
        app,
        ["run", "-o", str(tmp_path / "rev"), "--set", "transition.t_start=0.9", "--set", "transition.t_end=0.1"],
    )
    assert result.exit_code == 1
    assert "reversed" in result.output


def test_run_rejects_misspelt_override(tmp_path: Path) -> None:
    result = runner.invoke(app, ["run", "-o", str(tmp_path / "typo"), "--set", "transition.t_strat=0.2"])
    assert result.exit_code != 0
    assert "t_strat" in result.output
