"""
Studies around the contact switch: config overrides, run metadata and
parameter sweeps.

Every study run is a plain config dict handed to
`contact_switch.core.engine.run_from_config`, so overrides are applied to
dicts by dotted path ("force_law.table_scale") before validation.
"""
from __future__ import annotations

import json
import re
import subprocess
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

_KEY_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def _split_path(path: str) -> List[str]:
    keys = [part.strip() for part in path.split(".")]
    for key in keys:
        if not _KEY_RE.fullmatch(key):
            raise ValueError(
                f"Invalid config path {path!r}: {key!r} is not a key name. "
                "Use dot notation, e.g. 'transition.t_start'."
            )
    return keys


def get_by_path(cfg: Mapping[str, Any], path: str) -> Any:
    """Look up a nested config value; raises ``KeyError`` naming the missing key."""
    node: Any = cfg
    for key in _split_path(path):
        if not isinstance(node, Mapping) or key not in node:
            raise KeyError(f"'{path}' has no key '{key}'")
        node = node[key]
    return node


def set_by_path(cfg: Dict[str, Any], path: str, value: Any) -> Dict[str, Any]:
    """Return a copy of ``cfg`` with ``path`` set, creating missing sections."""
    keys = _split_path(path)
    updated = deepcopy(cfg)
    node = updated
    for key in keys[:-1]:
        if not isinstance(node.get(key), dict):
            node[key] = {}
        node = node[key]
    node[keys[-1]] = value
    return updated


def parse_override(spec: str, *, known: Optional[Mapping[str, Any]] = None) -> Tuple[str, Any]:
    """
    Split ``'path=value'`` and parse the value as YAML, so ``51`` is an int
    and ``1e3`` a float.

    When ``known`` is given (a full default config), the path must already
    exist in it; a misspelt section or key is reported here instead of as a
    validation error on a key the user never meant to add.
    """
    if "=" not in spec:
        raise ValueError(f"Override {spec!r} must look like 'path=value'")
    path, raw = spec.split("=", 1)
    path = path.strip()
    if known is not None:
        try:
            get_by_path(known, path)
        except KeyError as exc:
            raise ValueError(f"Unknown config path in override {spec!r}: {exc.args[0]}") from exc
    value = yaml.safe_load(raw)
    if isinstance(value, str):
        # PyYAML reads '1e3' as a string (YAML 1.1 wants a dot)
        try:
            value = float(value)
        except ValueError:
            pass
    return path, value


def parse_widths(text: str) -> List[int]:
    """Parse '0,2 10' into transition widths; each must be a whole number of steps."""
    widths = []
    for part in re.split(r"[,\s]+", text.strip()):
        if not part:
            continue
        value = float(part)
        if not value.is_integer():
            raise ValueError(f"width {part!r} is not a whole number of grid steps")
        widths.append(int(value))
    return widths


# ----------------------------
# Run metadata
# ----------------------------

def get_git_hash() -> str:
    """Commit of the working tree, or 'unknown' outside a git checkout."""
    try:
        proc = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            capture_output=True,
            text=True,
            check=True,
            timeout=5,
        )
    except (OSError, subprocess.SubprocessError):
        return "unknown"
    return proc.stdout.strip()


def save_study_metadata(output_dir: Path, *, metadata: Dict[str, Any]) -> None:
    """Write ``run_metadata.json`` (git hash plus ``metadata``) into ``output_dir``."""
    output_dir.mkdir(parents=True, exist_ok=True)
    payload = {"git_hash": get_git_hash(), **metadata}
    (output_dir / "run_metadata.json").write_text(
        json.dumps(payload, indent=2, default=str),
        encoding="utf-8",
    )
