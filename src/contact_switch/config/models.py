from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator


class ConfigBase(BaseModel):
    model_config = {"extra": "forbid"}


class TimeGridSpec(ConfigBase):
    t0: float = 0.0
    t1: float = 1.0
    n_points: int = 101

    @model_validator(mode="after")
    def _validate_span(self) -> "TimeGridSpec":
        if self.n_points < 2:
            raise ValueError("n_points must be >= 2")
        if self.t1 <= self.t0:
            raise ValueError("t1 must be greater than t0")
        return self


class TransitionSpec(ConfigBase):
    mode: Literal["midpoint", "explicit", "centred"] = "midpoint"
    t_start: Optional[float] = None
    t_end: Optional[float] = None
    width_steps: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _infer_mode(cls, data):
        # a window or a width without a mode selects the matching mode
        if isinstance(data, dict) and data.get("mode") is None:
            if data.get("t_start") is not None or data.get("t_end") is not None:
                data = {**data, "mode": "explicit"}
            elif data.get("width_steps") is not None:
                data = {**data, "mode": "centred"}
        return data

    @model_validator(mode="after")
    def _validate_mode(self) -> "TransitionSpec":
        has_window = self.t_start is not None or self.t_end is not None
        if self.mode == "explicit":
            if self.t_start is None or self.t_end is None:
                raise ValueError("explicit transition requires t_start and t_end")
        elif has_window:
            raise ValueError(f"t_start/t_end are not used with mode '{self.mode}'; set mode: explicit")
        if self.mode == "centred":
            if self.width_steps is None or self.width_steps < 0:
                raise ValueError("centred transition requires width_steps >= 0")
        elif self.width_steps is not None:
            raise ValueError(f"width_steps is not used with mode '{self.mode}'; set mode: centred")
        return self


class ForceLawSpec(ConfigBase):
    table_scale: float = 1000.0
    baseline_force: float = 0.0

    @field_validator("table_scale")
    @classmethod
    def _scale_positive(cls, value: float) -> float:
        if value <= 0.0:
            raise ValueError("table_scale must be > 0")
        return value

    @field_validator("baseline_force")
    @classmethod
    def _baseline_nonneg(cls, value: float) -> float:
        if value < 0.0:
            raise ValueError("baseline_force must be >= 0")
        return value


class FramesSpec(ConfigBase):
    hand: str = "hand"
    world: str = "world"
    payload: str = "dumbbell"

    @model_validator(mode="after")
    def _distinct(self) -> "FramesSpec":
        names = [self.hand, self.world, self.payload]
        if any(not n for n in names):
            raise ValueError("frame names must not be empty")
        if len(set(names)) != len(names):
            raise ValueError("hand, world and payload frames must be distinct")
        return self


class ActivationSpec(ConfigBase):
    type: Literal["constant", "one_sided"] = "constant"
    smoothing: float = 1e-3

    @field_validator("smoothing")
    @classmethod
    def _smoothing_positive(cls, value: float) -> float:
        if value <= 0.0:
            raise ValueError("smoothing must be > 0")
        return value


class SwitchConfig(ConfigBase):
    units: str = "SI"
    case_name: Optional[str] = None
    notes: Optional[str] = None
    time_grid: TimeGridSpec = Field(default_factory=TimeGridSpec)
    transition: TransitionSpec = Field(default_factory=TransitionSpec)
    force_law: ForceLawSpec = Field(default_factory=ForceLawSpec)
    frames: FramesSpec = Field(default_factory=FramesSpec)
    activation: ActivationSpec = Field(default_factory=ActivationSpec)

    @field_validator("units")
    @classmethod
    def _units_si(cls, value: str) -> str:
        if value != "SI":
            raise ValueError("Only SI units are supported currently")
        return value


def format_validation_error(exc: ValidationError, *, filename: str) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(item) for item in error.get("loc", []))
        msg = error.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}")
    details = "; ".join(parts) if parts else str(exc)
    return f"{filename}: invalid configuration: {details}"
