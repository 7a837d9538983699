"""Push/pull force elements along a single relative-pose measure.

Physical actuators in this setting only act in one sense, so a bidirectional
restoring action along a measure is built from two elements sharing the
measure and the force law, one with ``direction=+1`` (push) and one with
``direction=-1`` (pull).

Each element reports

    generalized_force = direction * activation * law.evaluate(step)

conjugate to its measure's coordinate. The activation is the host's
tension-generation model; the default ``constant_activation`` is 1 so the
element contributes its full strength-scaled force.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

from .force_law import ContactForceLaw
from .measures import Pose, RelativePoseMeasure

PUSH = 1
PULL = -1

Activation = Callable[[float, int], float]


def constant_activation(deviation: float, direction: int) -> float:
    return 1.0


@dataclass(frozen=True)
class OneSidedActivation:
    """Smooth one-sided engagement: only the restoring element pulls.

    An element engages when ``direction * deviation < 0``; the tanh ramp of
    width ``smoothing`` keeps the activation differentiable through zero
    deviation, where both elements sit at one half.
    """

    smoothing: float = 1e-3

    def __post_init__(self) -> None:
        if self.smoothing <= 0.0:
            raise ValueError("smoothing must be > 0")

    def __call__(self, deviation: float, direction: int) -> float:
        return float(0.5 - 0.5 * np.tanh(direction * deviation / self.smoothing))


@dataclass(frozen=True)
class ForceElement:
    """Stateless uni-directional force element."""

    measure: RelativePoseMeasure
    law: ContactForceLaw
    direction: int
    activation: Activation = constant_activation

    def __post_init__(self) -> None:
        if self.direction not in (PUSH, PULL):
            raise ValueError(f"direction must be +1 or -1, got {self.direction}")

    @property
    def name(self) -> str:
        sense = "push" if self.direction == PUSH else "pull"
        return f"{self.law.name}_{self.measure.label}_{sense}"

    def generalized_force(
        self,
        step: int,
        pose: Optional[Pose] = None,
        *,
        deviation: Optional[float] = None,
    ) -> float:
        """Generalized force at ``step``.

        ``deviation`` may be passed in when the caller has already measured
        the pose; otherwise it is read from ``pose`` (identity if omitted).
        """
        magnitude = self.law.evaluate(step)
        if self.activation is constant_activation:
            return self.direction * magnitude
        if deviation is None:
            deviation = self.measure.value(pose if pose is not None else Pose.identity())
        return self.direction * self.activation(deviation, self.direction) * magnitude


def dof_force_pair(
    measure: RelativePoseMeasure,
    law: ContactForceLaw,
    activation: Activation = constant_activation,
) -> Tuple[ForceElement, ForceElement]:
    """The push and pull elements sharing one measure and one law."""
    return (
        ForceElement(measure, law, PUSH, activation),
        ForceElement(measure, law, PULL, activation),
    )
