# turbinekin/viewer/scene.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from .joints import JointModel
from .matrix import mat4_identity, mat4_look_at, mat4_mul, mat4_perspective, mat4_scale
from .turbine_model import TURBINE_JOINTS, build_turbine_tree
from .types import HierarchyNode, Mat4, Vec3

EYE: Vec3 = (20.0, 20.0, 20.0)
LOOK_AT: Vec3 = (0.0, 0.0, 0.0)
UP: Vec3 = (0.0, 1.0, 0.0)
FOV_DEG = 60.0
Z_NEAR = 0.1
Z_FAR = 1000.0


@dataclass
class SceneState:
    """
    Everything a frame reads: the static part tree, the mutable joints, the
    assembly scale and the scene-root transforms (model / view / projection).
    """
    tree: HierarchyNode
    joints: JointModel
    assembly_scale: float = 1.0
    model: Mat4 = field(default_factory=mat4_identity)
    view: Mat4 = field(default_factory=lambda: mat4_look_at(EYE, LOOK_AT, UP))
    projection: Mat4 = field(default_factory=lambda: mat4_perspective(FOV_DEG, 1.5, Z_NEAR, Z_FAR))
    logger: Optional[logging.Logger] = None

    def __post_init__(self) -> None:
        if self.logger is None:
            self.logger = logging.getLogger("turbinekin")

    def shape_transform(self, node: HierarchyNode) -> Mat4:
        sx, sy, sz = node.shape_scale
        s = float(self.assembly_scale)
        if s == 1.0:
            return mat4_scale(sx, sy, sz)
        return mat4_mul(mat4_scale(sx, sy, sz), mat4_scale(s, s, s))

    def scale_assembly(self, factor: float) -> bool:
        try:
            f = float(factor)
        except (TypeError, ValueError):
            f = float("nan")
        if not math.isfinite(f) or f <= 0.0:
            self.logger.warning("ignoring assembly scale factor %r", factor)
            return False
        self.assembly_scale *= f
        return True

    def set_viewport(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            return
        self.projection = mat4_perspective(FOV_DEG, float(width) / float(height), Z_NEAR, Z_FAR)

    def view_projection(self) -> Mat4:
        return mat4_mul(self.projection, self.view)


def build_turbine_scene(*, wrap_spin: bool = True, logger: Optional[logging.Logger] = None) -> SceneState:
    return SceneState(
        tree=build_turbine_tree(),
        joints=JointModel(TURBINE_JOINTS, wrap_spin=wrap_spin),
        logger=logger,
    )
