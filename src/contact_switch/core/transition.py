"""Smooth transition weight for the hand-to-world handoff.

The weight moves from 0 to 1 across ``[t_start, t_end]`` using the quintic
smoothstep

    S(u) = 6u^5 - 15u^4 + 10u^3,    u = (t - t_start) / (t_end - t_start)

whose first and second derivatives vanish at both ends, so the force laws
built on it stay C² across the window boundaries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

import numpy as np

from .errors import InvalidTransitionWindow
from .timegrid import TimeGrid

logger = logging.getLogger(__name__)

ArrayLike = Union[float, np.ndarray]


def quintic_smoothstep(u: ArrayLike) -> ArrayLike:
    """Evaluate S(u) on ``u`` clipped to [0, 1] (Horner form)."""
    u = np.clip(np.asarray(u, dtype=float), 0.0, 1.0)
    s = u * u * u * (u * (6.0 * u - 15.0) + 10.0)
    s = np.clip(s, 0.0, 1.0)
    if s.ndim == 0:
        return float(s)
    return s


@dataclass(frozen=True)
class TransitionWindow:
    """Window ``[t_start, t_end]`` over which the weight rises from 0 to 1."""

    t_start: float
    t_end: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "t_start", float(self.t_start))
        object.__setattr__(self, "t_end", float(self.t_end))
        if not (np.isfinite(self.t_start) and np.isfinite(self.t_end)):
            raise InvalidTransitionWindow(
                f"transition window [{self.t_start}, {self.t_end}] must be finite",
                t_start=self.t_start,
                t_end=self.t_end,
            )
        if self.t_start > self.t_end:
            raise InvalidTransitionWindow(
                f"transition window is reversed: t_start={self.t_start} > t_end={self.t_end}",
                t_start=self.t_start,
                t_end=self.t_end,
            )

    @property
    def is_degenerate(self) -> bool:
        return self.t_start == self.t_end

    @property
    def duration(self) -> float:
        return self.t_end - self.t_start

    def validate_against(self, grid: TimeGrid) -> "TransitionWindow":
        """Raise ``InvalidTransitionWindow`` unless the window lies inside the grid."""
        if self.t_start < grid.t_min or self.t_end > grid.t_max:
            raise InvalidTransitionWindow(
                f"transition window [{self.t_start}, {self.t_end}] lies outside "
                f"the time grid range [{grid.t_min}, {grid.t_max}]",
                t_start=self.t_start,
                t_end=self.t_end,
            )
        if self.is_degenerate:
            logger.warning(
                "Degenerate transition window at t=%.6g s; handoff is a unit step.",
                self.t_start,
            )
        return self

    def weight(self, t: ArrayLike) -> ArrayLike:
        """Transition weight ``w(t)`` in [0, 1]; accepts scalars or arrays."""
        t_arr = np.asarray(t, dtype=float)
        if self.is_degenerate:
            w = np.where(t_arr < self.t_start, 0.0, 1.0)
        else:
            u = (t_arr - self.t_start) / (self.t_end - self.t_start)
            w = np.asarray(quintic_smoothstep(u), dtype=float)
            # endpoints are exact regardless of rounding in u
            w = np.where(t_arr <= self.t_start, 0.0, w)
            w = np.where(t_arr >= self.t_end, 1.0, w)
        if w.ndim == 0:
            return float(w)
        return w


def transition_weight(t: ArrayLike, t_start: float, t_end: float) -> ArrayLike:
    """Functional shortcut for ``TransitionWindow(t_start, t_end).weight(t)``."""
    return TransitionWindow(t_start, t_end).weight(t)
