from __future__ import annotations

import json
import warnings
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import ValidationError

from .models import SwitchConfig, format_validation_error


class ConfigError(ValueError):
    pass


# flat parameter name -> (section, key)
_FLAT_KEYS = {
    "t_start": ("transition", "t_start"),
    "t_end": ("transition", "t_end"),
    "table_scale": ("force_law", "table_scale"),
    "baseline_force": ("force_law", "baseline_force"),
    "n_points": ("time_grid", "n_points"),
    "t0": ("time_grid", "t0"),
    "t1": ("time_grid", "t1"),
}


def get_default_switch_params() -> Dict[str, Any]:
    """
    Baseline configuration: 101 instants over one second, handoff at the
    grid midpoint, force coefficient 1000 with zero baseline.

    Returned as a plain dict so it can be updated from YAML/JSON configs.
    """
    return SwitchConfig().model_dump()


def load_switch_config(path: Path) -> SwitchConfig:
    raw = load_raw_config(path)
    normalized = normalize_config_dict(raw, filename=path.name)
    return SwitchConfig.model_validate(normalized)


def load_raw_config(path: Path) -> Dict[str, Any]:
    """Read a YAML/JSON config file as a plain dict, before migration and validation."""
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        data = yaml.safe_load(text)
    elif suffix == ".json":
        data = json.loads(text)
    else:
        raise ConfigError(f"Unsupported config extension '{path.suffix}'.")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path.name}: configuration must be a mapping")
    return data


def normalize_config_dict(config: Dict[str, Any], *, filename: str) -> Dict[str, Any]:
    """Migrate flat keys, validate, and return the full config with defaults."""
    raw = migrate_config_dict(config)
    try:
        cfg = SwitchConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(format_validation_error(exc, filename=filename)) from exc
    return cfg.model_dump()


def migrate_config_dict(config: Dict[str, Any]) -> Dict[str, Any]:
    """Move flat parameter keys (``t_start``, ``table_scale``, ...) into their sections."""
    data = deepcopy(config)
    flat = [key for key in _FLAT_KEYS if key in data]
    if flat:
        warnings.warn(
            f"Config uses flat keys {flat}; moving them into their sections.",
            DeprecationWarning,
        )
    for key in flat:
        section, field = _FLAT_KEYS[key]
        value = data.pop(key)
        block = data.setdefault(section, {})
        if not isinstance(block, dict):
            raise ConfigError(f"'{section}' must be a mapping")
        if field in block and block[field] != value:
            raise ConfigError(
                f"'{key}' is given both at top level ({value!r}) and in "
                f"'{section}' ({block[field]!r})"
            )
        block[field] = value
    transition = data.get("transition")
    if isinstance(transition, dict) and (
        transition.get("t_start") is not None or transition.get("t_end") is not None
    ):
        transition.setdefault("mode", "explicit")
    return data
