from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


Vec3 = Tuple[float, float, float]
Mat4 = Tuple[
    Tuple[float, float, float, float],
    Tuple[float, float, float, float],
    Tuple[float, float, float, float],
    Tuple[float, float, float, float],
]  # 4x4 row-major, immutable


class UnknownJointError(KeyError):
    """A node or command referenced a joint id the JointModel does not hold."""


@dataclass(frozen=True)
class JointSpec:
    name: str
    offset: Vec3 = (0.0, 0.0, 0.0)   # attachment point in the parent's frame
    axis: Vec3 = (0.0, 1.0, 0.0)
    pivot: Vec3 = (0.0, 0.0, 0.0)    # rotation happens about this point
    initial_deg: float = 0.0
    wrap: bool = False               # rebase by whole turns past joints.REBASE_LIMIT


@dataclass(frozen=True)
class HierarchyNode:
    node_id: str
    joint: Optional[str] = None      # None: reuse the parent frame as is
    shape_scale: Vec3 = (1.0, 1.0, 1.0)
    mesh_id: str = "cube"
    children: Tuple["HierarchyNode", ...] = ()

    def iter_preorder(self):
        yield self
        for ch in self.children:
            yield from ch.iter_preorder()

    def count(self) -> int:
        return sum(1 for _ in self.iter_preorder())


@dataclass(frozen=True)
class DrawCall:
    node_id: str
    world: Mat4
    shape: Mat4
    mesh_id: str


@dataclass
class PassReport:
    draws: int = 0
    pushes: int = 0
    pops: int = 0
    underflows: int = 0
    imbalance: int = 0
    skipped: bool = False
    missing_joints: list[str] = field(default_factory=list)
    draw_errors: int = 0

    @property
    def ok(self) -> bool:
        return not self.skipped and self.underflows == 0 and self.imbalance == 0


@dataclass(frozen=True)
class SchedulerStatus:
    running: bool
    speed: int
    positive: bool
    frame: int
    driven_angle: Optional[float] = None
