"""Strength-driven contact force law."""

from __future__ import annotations

import operator
from dataclasses import dataclass

import numpy as np

from .errors import StepIndexOutOfRange
from .strength import StrengthTable

DEFAULT_TABLE_SCALE = 1000.0  # force coefficient at full strength
DEFAULT_BASELINE_FORCE = 0.0


@dataclass(frozen=True)
class ContactForceLaw:
    """Force magnitude looked up from a strength table at the current step.

    ``evaluate(step) = baseline_force + table[step] * table_scale``

    No interpolation happens here; the table already holds one value per
    grid instant.

    Examples
    --------
    >>> law = ContactForceLaw(StrengthTable("hand", [1.0, 0.5, 0.0]))
    >>> law.evaluate(0), law.evaluate(1)
    (1000.0, 500.0)
    """

    table: StrengthTable
    table_scale: float = DEFAULT_TABLE_SCALE
    baseline_force: float = DEFAULT_BASELINE_FORCE

    def __post_init__(self) -> None:
        if self.table_scale <= 0.0:
            raise ValueError("table_scale must be > 0")
        if self.baseline_force < 0.0:
            raise ValueError("baseline_force must be >= 0")

    @property
    def name(self) -> str:
        return self.table.name

    @property
    def n_steps(self) -> int:
        return len(self.table)

    def strength(self, step: int) -> float:
        """Table value at ``step``; raises ``StepIndexOutOfRange`` outside the table."""
        try:
            step = operator.index(step)
        except TypeError as exc:
            raise TypeError(
                f"step for strength table '{self.name}' must be an integer index, got {step!r}"
            ) from exc
        n = len(self.table)
        if step < 0 or step >= n:
            raise StepIndexOutOfRange(
                f"step {step} is outside strength table '{self.name}' range [0, {n - 1}]",
                step=step,
                n_steps=n,
                table=self.name,
            )
        return float(self.table.values[step])

    def evaluate(self, step: int) -> float:
        return float(self.baseline_force + self.strength(step) * self.table_scale)

    def evaluate_all(self) -> np.ndarray:
        return self.baseline_force + self.table.values * self.table_scale
