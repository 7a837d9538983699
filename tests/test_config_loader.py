from __future__ import annotations

import json
from pathlib import Path
import sys

sys.path.insert(0, "src")

import pytest
import yaml

from contact_switch.config.loader import (
    ConfigError,
    get_default_switch_params,
    load_switch_config,
    migrate_config_dict,
    normalize_config_dict,
)


def test_defaults() -> None:
    params = get_default_switch_params()
    assert params["force_law"]["table_scale"] == 1000.0
    assert params["force_law"]["baseline_force"] == 0.0
    assert params["time_grid"]["n_points"] == 101
    assert params["transition"]["mode"] == "midpoint"


def test_invalid_scale_validation() -> None:
    try:
        normalize_config_dict({"force_law": {"table_scale": -5.0}}, filename="bad.yml")
    except ConfigError as exc:
        assert "bad.yml" in str(exc)
        assert "table_scale" in str(exc)
    else:
        raise AssertionError("Expected ConfigError for negative table_scale")


def test_explicit_window_requires_both_ends() -> None:
    with pytest.raises(ConfigError, match="t_start and t_end"):
        normalize_config_dict({"transition": {"mode": "explicit", "t_start": 0.2}}, filename="x.yml")
    with pytest.raises(ConfigError, match="t_start and t_end"):
        normalize_config_dict({"transition": {"t_end": 0.2}}, filename="x.yml")


def test_nested_window_selects_explicit_mode() -> None:
    cfg = normalize_config_dict({"transition": {"t_start": 0.2, "t_end": 0.4}}, filename="x.yml")
    assert cfg["transition"]["mode"] == "explicit"
    assert (cfg["transition"]["t_start"], cfg["transition"]["t_end"]) == (0.2, 0.4)
    cfg = normalize_config_dict({"transition": {"width_steps": 6}}, filename="x.yml")
    assert cfg["transition"]["mode"] == "centred"


def test_mode_rejects_unused_window_keys() -> None:
    with pytest.raises(ConfigError, match="not used with mode 'midpoint'"):
        normalize_config_dict(
            {"transition": {"mode": "midpoint", "t_start": 0.2, "t_end": 0.4}}, filename="x.yml"
        )
    with pytest.raises(ConfigError, match="t_start/t_end are not used with mode 'centred'"):
        normalize_config_dict(
            {"transition": {"mode": "centred", "width_steps": 4, "t_start": 0.2}}, filename="x.yml"
        )
    with pytest.raises(ConfigError, match="width_steps is not used"):
        normalize_config_dict(
            {"transition": {"mode": "explicit", "t_start": 0.2, "t_end": 0.4, "width_steps": 4}},
            filename="x.yml",
        )


def test_unknown_keys_and_units_rejected() -> None:
    with pytest.raises(ConfigError):
        normalize_config_dict({"force_law": {"stiffness": 1.0}}, filename="x.yml")
    with pytest.raises(ConfigError, match="SI"):
        normalize_config_dict({"units": "imperial"}, filename="x.yml")
    with pytest.raises(ConfigError, match="distinct"):
        normalize_config_dict({"frames": {"hand": "a", "world": "a"}}, filename="x.yml")


def test_flat_keys_are_migrated() -> None:
    with pytest.warns(DeprecationWarning):
        migrated = migrate_config_dict({"t_start": 0.4, "t_end": 0.6, "table_scale": 500.0})
    assert migrated["transition"] == {"t_start": 0.4, "t_end": 0.6, "mode": "explicit"}
    assert migrated["force_law"] == {"table_scale": 500.0}
    assert "t_start" not in migrated


def test_load_yaml_and_json(tmp_path: Path) -> None:
    yml = tmp_path / "case.yml"
    yml.write_text(
        yaml.safe_dump({"time_grid": {"n_points": 51}, "transition": {"mode": "explicit", "t_start": 0.2, "t_end": 0.4}}),
        encoding="utf-8",
    )
    cfg = load_switch_config(yml)
    assert cfg.time_grid.n_points == 51
    assert cfg.transition.t_end == 0.4

    js = tmp_path / "case.json"
    js.write_text(json.dumps({"force_law": {"table_scale": 250.0}}), encoding="utf-8")
    assert load_switch_config(js).force_law.table_scale == 250.0

    empty = tmp_path / "empty.yml"
    empty.write_text("", encoding="utf-8")
    assert load_switch_config(empty).force_law.table_scale == 1000.0


def test_load_errors(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_switch_config(tmp_path / "missing.yml")
    txt = tmp_path / "case.txt"
    txt.write_text("a: 1", encoding="utf-8")
    with pytest.raises(ConfigError, match="Unsupported"):
        load_switch_config(txt)
    listy = tmp_path / "list.yml"
    listy.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_switch_config(listy)


def test_shipped_configs_load() -> None:
    root = Path(__file__).resolve().parents[1] / "configs"
    for path in sorted(root.glob("*.yml")):
        load_switch_config(path)


def test_nested_window_migration_without_flat_keys() -> None:
    migrated = migrate_config_dict({"transition": {"t_start": 0.2, "t_end": 0.4}})
    assert migrated["transition"]["mode"] == "explicit"


def test_flat_and_nested_conflict_rejected() -> None:
    with pytest.warns(DeprecationWarning):
        with pytest.raises(ConfigError, match="table_scale"):
            migrate_config_dict({"table_scale": 500.0, "force_law": {"table_scale": 250.0}})
    with pytest.warns(DeprecationWarning):
        migrated = migrate_config_dict({"n_points": 51, "time_grid": {"n_points": 51}})
    assert migrated["time_grid"] == {"n_points": 51}
