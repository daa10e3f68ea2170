from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class AdjustJoint:
    joint: str
    delta_deg: float


@dataclass(frozen=True)
class SetDirection:
    positive: bool


@dataclass(frozen=True)
class AdjustSpeed:
    delta: int


@dataclass(frozen=True)
class ResetSpeedAndDirection:
    pass


@dataclass(frozen=True)
class ToggleAnimation:
    pass


@dataclass(frozen=True)
class ScaleAssembly:
    factor: float


Command = Union[AdjustJoint, SetDirection, AdjustSpeed, ResetSpeedAndDirection, ToggleAnimation, ScaleAssembly]
