"""Strength tables: the transition weight sampled on the time grid."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .timegrid import TimeGrid
from .transition import TransitionWindow

logger = logging.getLogger(__name__)

HAND_TABLE = "hand"
WORLD_TABLE = "world"


@dataclass(frozen=True)
class StrengthTable:
    """Per-step strength values in [0, 1], aligned with a ``TimeGrid``."""

    name: str
    values: np.ndarray

    def __post_init__(self) -> None:
        values = np.array(self.values, dtype=float).reshape(-1)
        if values.size and (np.min(values) < 0.0 or np.max(values) > 1.0):
            raise ValueError(f"strength table '{self.name}' must lie in [0, 1]")
        values.flags.writeable = False
        object.__setattr__(self, "values", values)

    def __len__(self) -> int:
        return int(self.values.size)

    def __getitem__(self, step: int) -> float:
        return float(self.values[step])

    def complement(self, name: str) -> "StrengthTable":
        """Table holding ``1 - values``, the opposite regime."""
        return StrengthTable(name, 1.0 - self.values)

    def is_complement_of(self, other: "StrengthTable") -> bool:
        if len(self) != len(other):
            return False
        return bool(np.all(self.values + other.values == 1.0))


def build_strength_tables(
    grid: TimeGrid,
    window: TransitionWindow,
    *,
    down_name: str = HAND_TABLE,
    up_name: str = WORLD_TABLE,
) -> Tuple[StrengthTable, StrengthTable]:
    """Return ``(table_down, table_up)`` for the two contact regimes.

    ``table_up`` samples the transition weight; ``table_down`` is derived as
    ``1 - table_up`` so that the pair sums to one at every step.

    Raises
    ------
    InvalidTransitionWindow
        If the window does not lie inside the grid.
    """
    window.validate_against(grid)
    up = StrengthTable(up_name, window.weight(grid.t))
    down = up.complement(down_name)
    logger.info(
        "Built strength tables '%s'/'%s' on %d steps, window [%.6g, %.6g] s.",
        down_name,
        up_name,
        grid.n_steps,
        window.t_start,
        window.t_end,
    )
    return down, up
