"""Discretized study timeline shared by every strength table."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass(frozen=True)
class TimeGrid:
    """Ordered, immutable sequence of simulation instants ``t[0..N-1]``.

    The grid is owned by the study that drives the simulation; tables and
    force laws only ever read from it.

    Examples
    --------
    >>> grid = TimeGrid.from_span(0.0, 1.0, 101)
    >>> grid.midpoint_window()
    (0.5, 0.51)
    """

    t: np.ndarray

    def __post_init__(self) -> None:
        t = np.array(self.t, dtype=float).reshape(-1)
        if t.size < 1:
            raise ValueError("TimeGrid needs at least one instant")
        if not np.all(np.isfinite(t)):
            raise ValueError("TimeGrid instants must be finite")
        if t.size > 1 and not np.all(np.diff(t) > 0.0):
            raise ValueError("TimeGrid instants must be strictly increasing")
        t.flags.writeable = False
        object.__setattr__(self, "t", t)

    @classmethod
    def from_span(cls, t0: float, t1: float, n_points: int) -> "TimeGrid":
        """Uniform grid of ``n_points`` instants over ``[t0, t1]``."""
        if n_points < 2:
            raise ValueError("n_points must be >= 2")
        if t1 <= t0:
            raise ValueError("t1 must be greater than t0")
        return cls(np.linspace(float(t0), float(t1), int(n_points)))

    def __len__(self) -> int:
        return int(self.t.size)

    @property
    def n_steps(self) -> int:
        return int(self.t.size)

    @property
    def t_min(self) -> float:
        return float(self.t[0])

    @property
    def t_max(self) -> float:
        return float(self.t[-1])

    def index_of(self, time_s: float) -> int:
        """Index of the grid instant nearest to ``time_s``."""
        idx = int(np.searchsorted(self.t, float(time_s)))
        if idx <= 0:
            return 0
        if idx >= self.t.size:
            return self.t.size - 1
        before, after = self.t[idx - 1], self.t[idx]
        return idx - 1 if (time_s - before) <= (after - time_s) else idx

    def midpoint_window(self) -> Tuple[float, float]:
        """Default handoff window: ``(t[floor(N/2)], t[ceil(N/2)])``.

        For an even number of instants both ends coincide, giving a
        degenerate (unit step) window.
        """
        n = self.t.size
        lo = min(n // 2, n - 1)
        hi = min(int(math.ceil(n / 2)), n - 1)
        return float(self.t[lo]), float(self.t[hi])

    def centred_window(self, width_steps: int) -> Tuple[float, float]:
        """Window spanning ``width_steps`` intervals around the grid midpoint."""
        if width_steps < 0:
            raise ValueError("width_steps must be >= 0")
        n = self.t.size
        start = max(0, n // 2 - width_steps // 2)
        end = min(n - 1, start + width_steps)
        return float(self.t[start]), float(self.t[end])
