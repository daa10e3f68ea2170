# turbinekin/viewer/joints.py
from __future__ import annotations

import math
from typing import Dict, Iterable, List

from .matrix import mat4_chain, mat4_rotate, mat4_translate
from .types import JointSpec, Mat4, UnknownJointError


# spinning joints are rebased by whole turns once they drift this far
REBASE_LIMIT = 360.0 * 1e6


def normalize_deg(deg: float) -> float:
    """Map any finite angle into [0, 360)."""
    out = math.fmod(float(deg), 360.0)
    if out < 0.0:
        out += 360.0
    # fmod(-1e-17, 360) + 360 rounds to 360.0
    if out >= 360.0:
        out = 0.0
    return out


class JointModel:
    """
    Current angle per named joint plus the fixed geometry each joint rotates with.

    Local = T(offset) * T(pivot) * R(angle, axis) * T(-pivot)

    The local transform is rebuilt from the stored angle on every call, so the
    same angle always yields the same matrix regardless of call history.
    Spinning joints (wrap=True) keep their angle unwrapped so per-tick deltas
    stay exact; use normalize_deg() for display.
    """

    def __init__(self, specs: Iterable[JointSpec], *, wrap_spin: bool = True) -> None:
        self._specs: Dict[str, JointSpec] = {}
        self._angles: Dict[str, float] = {}
        self.wrap_spin = bool(wrap_spin)
        for spec in specs:
            self._specs[spec.name] = spec
            self._angles[spec.name] = self._store(spec, spec.initial_deg)

    def _spec(self, joint: str) -> JointSpec:
        try:
            return self._specs[joint]
        except KeyError:
            raise UnknownJointError(joint) from None

    def _store(self, spec: JointSpec, deg: float) -> float:
        deg = float(deg)
        if not math.isfinite(deg):
            raise ValueError(f"non-finite angle {deg!r} for joint {spec.name!r}")
        if spec.wrap and self.wrap_spin and abs(deg) >= REBASE_LIMIT:
            # exact for whole turns, so the transform does not jump
            return math.fmod(deg, 360.0)
        return deg

    # ---- queries ----
    def names(self) -> List[str]:
        return list(self._specs.keys())

    def has_joint(self, joint: str) -> bool:
        return joint in self._specs

    def spec(self, joint: str) -> JointSpec:
        return self._spec(joint)

    def angle(self, joint: str) -> float:
        self._spec(joint)
        return self._angles[joint]

    def snapshot(self) -> Dict[str, float]:
        return dict(self._angles)

    # ---- mutation ----
    def set_angle(self, joint: str, degrees: float) -> float:
        spec = self._spec(joint)
        self._angles[joint] = self._store(spec, degrees)
        return self._angles[joint]

    def adjust_angle(self, joint: str, delta: float) -> float:
        spec = self._spec(joint)
        self._angles[joint] = self._store(spec, self._angles[joint] + float(delta))
        return self._angles[joint]

    def reset(self) -> None:
        for name, spec in self._specs.items():
            self._angles[name] = self._store(spec, spec.initial_deg)

    # ---- transforms ----
    def local_transform(self, joint: str) -> Mat4:
        spec = self._spec(joint)
        px, py, pz = spec.pivot
        ox, oy, oz = spec.offset
        return mat4_chain(
            mat4_translate(ox, oy, oz),
            mat4_translate(px, py, pz),
            mat4_rotate(self._angles[joint], spec.axis),
            mat4_translate(-px, -py, -pz),
        )
