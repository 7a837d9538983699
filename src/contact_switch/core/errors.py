"""Exceptions raised while building or evaluating a contact switch."""

from __future__ import annotations


class ContactSwitchError(ValueError):
    """Base class for build-time and evaluation errors of the contact switch."""


class InvalidTransitionWindow(ContactSwitchError):
    """Transition window is reversed or lies outside the time grid."""

    def __init__(self, message: str, *, t_start: float, t_end: float):
        super().__init__(message)
        self.t_start = float(t_start)
        self.t_end = float(t_end)


class StepIndexOutOfRange(ContactSwitchError, IndexError):
    """A force law was evaluated at a step the strength table does not cover.

    Signals a mismatch between the driving time grid and the tables; it is
    never clamped.
    """

    def __init__(self, message: str, *, step: int, n_steps: int, table: str):
        super().__init__(message)
        self.step = step
        self.n_steps = n_steps
        self.table = table
