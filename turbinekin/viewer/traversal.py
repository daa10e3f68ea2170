# turbinekin/viewer/traversal.py
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .joints import JointModel
from .matrix import mat4_identity, mat4_mul
from .render import NodeAwareRenderer, RecordingRenderer, Renderer
from .scene import SceneState
from .transform_stack import TransformStack
from .types import HierarchyNode, Mat4, PassReport, UnknownJointError


def validate_tree(tree: HierarchyNode, joints: JointModel) -> List[str]:
    """Joint ids referenced by the tree that the model does not hold, in visit order."""
    missing: List[str] = []
    for node in tree.iter_preorder():
        if node.joint is None:
            continue
        if not joints.has_joint(node.joint) and node.joint not in missing:
            missing.append(node.joint)
    return missing


class HierarchyTraversal:
    """
    Pre-order walk of the part tree. Per node:

        push(top * joint_local(node))     (root: joint_local(root))
        push(top)                         (node without a joint)
        renderer.draw(model * top, shape(node), mesh_id)
        visit children in declaration order
        pop()

    A fresh TransformStack is used for every pass and must be empty again at
    the end; anything left over is reported as an imbalance and dropped.
    """

    def __init__(self, scene: SceneState, *, logger: Optional[logging.Logger] = None) -> None:
        self.scene = scene
        self._log = logger or logging.getLogger("turbinekin")
        self.passes = 0
        self.last_report: Optional[PassReport] = None

        missing = validate_tree(scene.tree, scene.joints)
        if missing:
            raise UnknownJointError(f"hierarchy references unknown joints: {', '.join(missing)}")

    def render_pass(self, renderer: Renderer) -> PassReport:
        report = PassReport()
        self.passes += 1

        missing = validate_tree(self.scene.tree, self.scene.joints)
        if missing:
            self._log.error("render pass %d skipped; unknown joints: %s", self.passes, ", ".join(missing))
            report.skipped = True
            report.missing_joints = missing
            self.last_report = report
            return report

        stack = TransformStack(logger=self._log)
        joints = self.scene.joints

        def visit(node: HierarchyNode) -> None:
            if node.joint is None:
                # Mat4 is immutable, so top() is already a snapshot
                shared = None if stack.is_empty() else stack.top()
                stack.push(mat4_identity() if shared is None else shared)
            elif stack.is_empty():
                stack.push(joints.local_transform(node.joint))
            else:
                local = joints.local_transform(node.joint)
                parent = stack.top()
                stack.push(local if parent is None else mat4_mul(parent, local))

            current = stack.top()
            if current is not None:
                self._draw(renderer, node, current, report)

            for ch in node.children:
                visit(ch)

            stack.pop()

        visit(self.scene.tree)

        report.pushes = stack.pushes
        report.pops = stack.pops
        report.underflows = stack.underflows
        if not stack.is_empty():
            report.imbalance = stack.drain()
            self._log.warning(
                "render pass %d: pops do not match pushes (%d left on stack)", self.passes, report.imbalance
            )

        self.last_report = report
        return report

    def _draw(self, renderer: Renderer, node: HierarchyNode, current: Mat4, report: PassReport) -> None:
        world = mat4_mul(self.scene.model, current)
        shape = self.scene.shape_transform(node)

        if isinstance(renderer, NodeAwareRenderer):
            renderer.begin_node(node.node_id)

        try:
            renderer.draw(world, shape, node.mesh_id)
        except Exception:
            report.draw_errors += 1
            self._log.warning("draw failed for node %r (mesh %r)", node.node_id, node.mesh_id, exc_info=True)
            return
        report.draws += 1

    def world_transforms(self) -> Dict[str, Mat4]:
        """One headless pass; node_id -> world transform (without the shape scale)."""
        rec = RecordingRenderer()
        self.render_pass(rec)
        return {c.node_id: c.world for c in rec.calls}
