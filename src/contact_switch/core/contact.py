"""Contact groups and the two-group contact switch.

A ``ContactGroup`` is a virtual six-DOF joint between two frames: twelve
push/pull elements, all wired to one ``ContactForceLaw`` so that engaging or
releasing happens on every DOF at once.

A ``ContactSwitch`` holds two groups, the payload coupled to the hand and the
payload coupled to the world, whose strength tables are complementary. Both
groups are always active; there is no attached/detached state. Which one
dominates follows from the tables alone, and the crossover inside the
transition window is smooth.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from .elements import Activation, ForceElement, constant_activation, dof_force_pair
from .errors import ContactSwitchError
from .force_law import DEFAULT_BASELINE_FORCE, DEFAULT_TABLE_SCALE, ContactForceLaw
from .measures import Pose, RelativePoseMeasure, relative_pose_vector, six_dof_measures
from .strength import HAND_TABLE, WORLD_TABLE, build_strength_tables
from .timegrid import TimeGrid
from .transition import TransitionWindow

logger = logging.getLogger(__name__)

N_DOF = 6
ELEMENTS_PER_GROUP = 2 * N_DOF


class ContactGroup:
    """Twelve force elements between ``frame_a`` and ``frame_b`` sharing one law."""

    def __init__(
        self,
        name: str,
        frame_a: str,
        frame_b: str,
        law: ContactForceLaw,
        *,
        activation: Activation = constant_activation,
    ):
        self.name = name
        self.frame_a = frame_a
        self.frame_b = frame_b
        self.law = law
        self.measures: Tuple[RelativePoseMeasure, ...] = six_dof_measures(frame_a, frame_b)
        elements: List[ForceElement] = []
        for measure in self.measures:
            elements.extend(dof_force_pair(measure, law, activation))
        self.elements: Tuple[ForceElement, ...] = tuple(elements)

    def __len__(self) -> int:
        return len(self.elements)

    def measure_values(self, pose: Pose) -> np.ndarray:
        """Six relative-pose values, DOF order x, y, z, rx, ry, rz."""
        return relative_pose_vector(pose, self.frame_a, self.frame_b)

    def element_forces(self, step: int, pose: Optional[Pose] = None) -> np.ndarray:
        """Force of each of the twelve elements, in element order."""
        values = self.measure_values(pose if pose is not None else Pose.identity())
        return np.array(
            [
                el.generalized_force(step, deviation=float(values[el.measure.dof_index]))
                for el in self.elements
            ]
        )

    def generalized_forces(self, step: int, pose: Optional[Pose] = None) -> np.ndarray:
        """Net generalized force per DOF: the sum over each push/pull pair."""
        forces = self.element_forces(step, pose)
        return forces.reshape(N_DOF, 2).sum(axis=1)


class ContactSwitch:
    """Two complementary contact groups emulating a time-gated rigid joint.

    Parameters
    ----------
    grid : TimeGrid
        Study timeline; not owned, only referenced.
    window : TransitionWindow
        Handoff window.
    hand_group, world_group : ContactGroup
        Groups driven by the decaying and the rising table respectively.
    """

    def __init__(
        self,
        grid: TimeGrid,
        window: TransitionWindow,
        hand_group: ContactGroup,
        world_group: ContactGroup,
    ):
        for group in (hand_group, world_group):
            if group.law.n_steps != grid.n_steps:
                raise ContactSwitchError(
                    f"strength table '{group.law.name}' has {group.law.n_steps} steps, "
                    f"time grid has {grid.n_steps}"
                )
        if not hand_group.law.table.is_complement_of(world_group.law.table):
            raise ContactSwitchError(
                f"strength tables '{hand_group.law.name}' and '{world_group.law.name}' "
                "are not complementary"
            )
        self.grid = grid
        self.window = window
        self.hand = hand_group
        self.world = world_group

    @property
    def groups(self) -> Tuple[ContactGroup, ContactGroup]:
        return self.hand, self.world

    def actuators(self) -> Tuple[ForceElement, ...]:
        """All 24 elements, for registration with the host's force assembly."""
        return self.hand.elements + self.world.elements

    def strengths(self, step: int) -> Tuple[float, float]:
        return self.hand.law.strength(step), self.world.law.strength(step)

    def coupling(self, step: int) -> float:
        """Sum of both force-law outputs; constant across the sweep."""
        return self.hand.law.evaluate(step) + self.world.law.evaluate(step)

    def generalized_forces(self, step: int, pose: Optional[Pose] = None) -> Dict[str, np.ndarray]:
        return {
            self.hand.name: self.hand.generalized_forces(step, pose),
            self.world.name: self.world.generalized_forces(step, pose),
        }

    def net_generalized_forces(self, step: int, pose: Optional[Pose] = None) -> np.ndarray:
        """What the host sums per DOF across all registered elements."""
        forces = self.generalized_forces(step, pose)
        return forces[self.hand.name] + forces[self.world.name]


def build_contact_switch(
    grid: TimeGrid,
    window: Optional[TransitionWindow] = None,
    *,
    hand_frame: str = "hand",
    world_frame: str = "world",
    payload_frame: str = "dumbbell",
    table_scale: float = DEFAULT_TABLE_SCALE,
    baseline_force: float = DEFAULT_BASELINE_FORCE,
    activation: Activation = constant_activation,
) -> ContactSwitch:
    """Build both strength tables, laws and groups for one handoff.

    With ``window=None`` the handoff happens at the grid midpoint.

    Raises
    ------
    InvalidTransitionWindow
        If the window is reversed or lies outside ``grid``.
    """
    if window is None:
        window = TransitionWindow(*grid.midpoint_window())
    table_down, table_up = build_strength_tables(
        grid, window, down_name=HAND_TABLE, up_name=WORLD_TABLE
    )
    hand_law = ContactForceLaw(table_down, table_scale=table_scale, baseline_force=baseline_force)
    world_law = ContactForceLaw(table_up, table_scale=table_scale, baseline_force=baseline_force)
    hand = ContactGroup(HAND_TABLE, hand_frame, payload_frame, hand_law, activation=activation)
    world = ContactGroup(WORLD_TABLE, world_frame, payload_frame, world_law, activation=activation)
    switch = ContactSwitch(grid, window, hand, world)
    logger.info(
        "Contact switch ready: %d elements, handoff %s -> %s in [%.6g, %.6g] s, scale %.6g.",
        len(switch.actuators()),
        hand_frame,
        world_frame,
        window.t_start,
        window.t_end,
        table_scale,
    )
    return switch
