"""Relative-pose measures between two rigid reference frames.

Thin adapter over the host kinematics: a ``Pose`` is a snapshot of frame
states (origin + orientation in world coordinates) and every measure reads a
single axis of either the relative position or the relative rotation vector.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Mapping, Optional, Tuple

import numpy as np
from scipy.spatial.transform import Rotation

AXES = (0, 1, 2)
DOF_LABELS = ("x", "y", "z", "rx", "ry", "rz")


class MeasureKind(str, Enum):
    LINEAR = "linear"
    ROTATIONAL = "rotational"


@dataclass(frozen=True)
class FrameState:
    """Origin and orientation of a reference frame in world coordinates."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    orientation: Rotation = field(default_factory=Rotation.identity)

    def __post_init__(self) -> None:
        pos = np.asarray(self.position, dtype=float).reshape(3)
        object.__setattr__(self, "position", pos)
        orient = self.orientation
        if not isinstance(orient, Rotation):
            orient = _as_rotation(orient)
        object.__setattr__(self, "orientation", orient)


def _as_rotation(orientation) -> Rotation:
    """Accept a Rotation, a 3x3 matrix, a quaternion (x, y, z, w) or a rotation vector."""
    arr = np.asarray(orientation, dtype=float)
    if arr.shape == (3, 3):
        return Rotation.from_matrix(arr)
    if arr.shape == (4,):
        return Rotation.from_quat(arr)
    if arr.shape == (3,):
        return Rotation.from_rotvec(arr)
    raise ValueError(f"Unsupported orientation shape {arr.shape}")


class Pose:
    """Instantaneous configuration: frame name -> ``FrameState``.

    Frames that are not listed sit at the world origin with identity
    orientation.
    """

    def __init__(self, frames: Optional[Mapping[str, FrameState]] = None):
        self._frames: Dict[str, FrameState] = dict(frames or {})

    def frame(self, name: str) -> FrameState:
        state = self._frames.get(name)
        return state if state is not None else FrameState()

    def names(self) -> Iterable[str]:
        return self._frames.keys()

    @classmethod
    def identity(cls) -> "Pose":
        return cls()


def relative_position(pose: Pose, frame_a: str, frame_b: str) -> np.ndarray:
    """Origin of ``frame_b`` relative to ``frame_a``, in ``frame_a``'s basis."""
    a = pose.frame(frame_a)
    b = pose.frame(frame_b)
    return a.orientation.inv().apply(b.position - a.position)


def relative_rotation_vector(pose: Pose, frame_a: str, frame_b: str) -> np.ndarray:
    """Rotation vector (axis * angle) of ``frame_b`` relative to ``frame_a``."""
    a = pose.frame(frame_a)
    b = pose.frame(frame_b)
    return (a.orientation.inv() * b.orientation).as_rotvec()


@dataclass(frozen=True)
class RelativePoseMeasure:
    """One scalar component of the relative pose between two frames."""

    frame_a: str
    frame_b: str
    axis: int
    kind: MeasureKind

    def __post_init__(self) -> None:
        if self.axis not in AXES:
            raise ValueError(f"axis must be one of {AXES}, got {self.axis}")
        object.__setattr__(self, "kind", MeasureKind(self.kind))

    @property
    def label(self) -> str:
        offset = 0 if self.kind is MeasureKind.LINEAR else 3
        return DOF_LABELS[offset + self.axis]

    @property
    def dof_index(self) -> int:
        return self.axis if self.kind is MeasureKind.LINEAR else 3 + self.axis

    def value(self, pose: Pose) -> float:
        if self.kind is MeasureKind.LINEAR:
            vec = relative_position(pose, self.frame_a, self.frame_b)
        else:
            vec = relative_rotation_vector(pose, self.frame_a, self.frame_b)
        return float(vec[self.axis])


def six_dof_measures(frame_a: str, frame_b: str) -> Tuple[RelativePoseMeasure, ...]:
    """The x/y/z linear and rotational measures between two frames, DOF order."""
    return tuple(
        RelativePoseMeasure(frame_a, frame_b, axis, kind)
        for kind in (MeasureKind.LINEAR, MeasureKind.ROTATIONAL)
        for axis in AXES
    )


def relative_pose_vector(pose: Pose, frame_a: str, frame_b: str) -> np.ndarray:
    """All six measures at once; each 3-vector is computed a single time."""
    return np.concatenate(
        [
            relative_position(pose, frame_a, frame_b),
            relative_rotation_vector(pose, frame_a, frame_b),
        ]
    )
