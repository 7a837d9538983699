"""Strength-table contact switch: transition, tables, force law, groups."""

from .contact import ContactGroup, ContactSwitch, build_contact_switch
from .elements import PULL, PUSH, ForceElement, OneSidedActivation, dof_force_pair
from .errors import ContactSwitchError, InvalidTransitionWindow, StepIndexOutOfRange
from .force_law import ContactForceLaw
from .measures import FrameState, MeasureKind, Pose, RelativePoseMeasure
from .strength import StrengthTable, build_strength_tables
from .timegrid import TimeGrid
from .transition import TransitionWindow, quintic_smoothstep, transition_weight

__all__ = [
    "ContactForceLaw",
    "ContactGroup",
    "ContactSwitch",
    "ContactSwitchError",
    "ForceElement",
    "FrameState",
    "InvalidTransitionWindow",
    "MeasureKind",
    "OneSidedActivation",
    "PULL",
    "PUSH",
    "Pose",
    "RelativePoseMeasure",
    "StepIndexOutOfRange",
    "StrengthTable",
    "TimeGrid",
    "TransitionWindow",
    "build_contact_switch",
    "build_strength_tables",
    "dof_force_pair",
    "quintic_smoothstep",
    "transition_weight",
]
