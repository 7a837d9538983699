from __future__ import annotations

import sys

sys.path.insert(0, "src")

from collections import Counter

import numpy as np
import pytest

from contact_switch.core.contact import ContactGroup, ContactSwitch, build_contact_switch
from contact_switch.core.elements import PULL, PUSH, ForceElement, OneSidedActivation
from contact_switch.core.errors import ContactSwitchError, InvalidTransitionWindow, StepIndexOutOfRange
from contact_switch.core.force_law import ContactForceLaw
from contact_switch.core.measures import FrameState, Pose
from contact_switch.core.strength import build_strength_tables
from contact_switch.core.timegrid import TimeGrid
from contact_switch.core.transition import TransitionWindow


def _switch(**kwargs) -> ContactSwitch:
    grid = TimeGrid.from_span(0.0, 1.0, 101)
    return build_contact_switch(grid, TransitionWindow(0.3, 0.7), **kwargs)


def test_switch_wiring() -> None:
    switch = _switch()
    assert len(switch.actuators()) == 24
    assert len(switch.hand) == len(switch.world) == 12
    assert switch.hand.law is not switch.world.law

    for group in switch.groups:
        assert all(el.law is group.law for el in group.elements)
        per_measure = Counter((el.measure, el.direction) for el in group.elements)
        assert len(per_measure) == 12
        assert sorted(Counter(el.direction for el in group.elements).values()) == [6, 6]

    assert switch.hand.frame_a == "hand"
    assert switch.world.frame_a == "world"
    assert switch.hand.frame_b == switch.world.frame_b == "dumbbell"
    assert len({el.name for el in switch.actuators()}) == 24


def test_initial_and_terminal_strengths() -> None:
    switch = _switch()
    assert switch.strengths(0) == (1.0, 0.0)
    assert switch.strengths(100) == (0.0, 1.0)
    hand_29, world_29 = switch.strengths(29)
    assert (hand_29, world_29) == (1.0, 0.0)
    hand_mid, world_mid = switch.strengths(50)
    assert hand_mid == pytest.approx(0.5, abs=1e-9)
    assert world_mid == pytest.approx(0.5, abs=1e-9)


def test_coupling_conserved_across_sweep() -> None:
    switch = _switch()
    total = np.array([switch.coupling(step) for step in range(switch.grid.n_steps)])
    np.testing.assert_allclose(total, 1000.0, rtol=0.0, atol=1e-9)
    with pytest.raises(StepIndexOutOfRange):
        switch.coupling(101)


def test_element_force_is_signed_law_output() -> None:
    switch = _switch()
    for el in switch.hand.elements:
        assert el.generalized_force(0) == el.direction * 1000.0
        assert el.generalized_force(100) == pytest.approx(0.0, abs=1e-9)
    with pytest.raises(ValueError):
        ForceElement(switch.hand.measures[0], switch.hand.law, 0)


def _net_forces(elements, laws, step, pose, negate=False):
    """Sum element forces per DOF the way the host assembles them."""
    net = np.zeros(6)
    for el in elements:
        law = laws[el.law.name]
        direction = -el.direction if negate else el.direction
        swapped = ForceElement(el.measure, law, direction, el.activation)
        net[el.measure.dof_index] += swapped.generalized_force(step, pose)
    return net


@pytest.mark.parametrize("activation", [None, OneSidedActivation(1e-2)])
def test_swapping_tables_and_directions_keeps_net_force(activation) -> None:
    kwargs = {} if activation is None else {"activation": activation}
    switch = _switch(**kwargs)
    # hand and world frames coincide so both groups measure the same deviation
    pose = Pose(
        {
            "hand": FrameState(position=[0.1, 0.2, 0.3]),
            "world": FrameState(position=[0.1, 0.2, 0.3]),
            "dumbbell": FrameState(position=[0.11, 0.19, 0.3], orientation=[0.0, 0.02, 0.0]),
        }
    )
    same = {"hand": switch.hand.law, "world": switch.world.law}
    swapped = {"hand": switch.world.law, "world": switch.hand.law}
    for step in (0, 35, 50, 65, 100):
        original = _net_forces(switch.actuators(), same, step, pose)
        mirrored = _net_forces(switch.actuators(), swapped, step, pose, negate=True)
        np.testing.assert_allclose(mirrored, original, atol=1e-9)
        np.testing.assert_allclose(switch.net_generalized_forces(step, pose), original, atol=1e-9)


def test_one_sided_activation_restores_deviation() -> None:
    switch = _switch(activation=OneSidedActivation(1e-3))
    pose = Pose({"dumbbell": FrameState(position=[0.01, 0.0, 0.0])})

    forces = switch.generalized_forces(0, pose)
    assert forces["hand"][0] == pytest.approx(-1000.0, rel=1e-6)
    np.testing.assert_allclose(forces["hand"][1:], 0.0, atol=1e-9)
    np.testing.assert_allclose(forces["world"], 0.0, atol=1e-9)

    forces = switch.generalized_forces(100, pose)
    assert forces["world"][0] == pytest.approx(-1000.0, rel=1e-6)


def test_constant_activation_pairs_cancel() -> None:
    switch = _switch()
    pose = Pose({"dumbbell": FrameState(position=[0.3, 0.0, -0.2])})
    for step in (0, 50, 100):
        element_forces = switch.hand.element_forces(step, pose)
        assert element_forces.shape == (12,)
        np.testing.assert_allclose(switch.hand.generalized_forces(step, pose), 0.0)


def test_non_complementary_tables_rejected() -> None:
    grid = TimeGrid.from_span(0.0, 1.0, 21)
    window = TransitionWindow(*grid.midpoint_window())
    down, _ = build_strength_tables(grid, window)
    hand = ContactGroup("hand", "hand", "dumbbell", ContactForceLaw(down))
    world = ContactGroup("world", "world", "dumbbell", ContactForceLaw(down))
    with pytest.raises(ContactSwitchError, match="not complementary"):
        ContactSwitch(grid, window, hand, world)

    other = TimeGrid.from_span(0.0, 1.0, 22)
    with pytest.raises(ContactSwitchError, match="steps"):
        ContactSwitch(other, window, hand, world)


def test_window_outside_grid_fails_at_build() -> None:
    grid = TimeGrid.from_span(0.0, 1.0, 101)
    with pytest.raises(InvalidTransitionWindow):
        build_contact_switch(grid, TransitionWindow(0.9, 1.2))


def test_default_window_is_grid_midpoint() -> None:
    grid = TimeGrid.from_span(0.0, 1.0, 101)
    switch = build_contact_switch(grid)
    assert (switch.window.t_start, switch.window.t_end) == grid.midpoint_window()
    assert switch.hand.law.evaluate(0) == 1000.0
    assert switch.hand.law.evaluate(100) == pytest.approx(0.0, abs=1e-9)
