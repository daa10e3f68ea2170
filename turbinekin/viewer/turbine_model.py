# turbinekin/viewer/turbine_model.py
from __future__ import annotations

from typing import List

from .types import HierarchyNode, JointSpec


# Joint geometry. 'offset' is where the part attaches in its parent's frame,
# 'axis' is what the joint angle rotates about.
TURBINE_JOINTS: List[JointSpec] = [
    JointSpec("turbine", offset=(0.0, 0.0, 0.0), axis=(0.0, 1.0, 0.0)),
    JointSpec("base", offset=(0.0, -10.0, 0.0), axis=(0.0, 1.0, 0.0)),
    JointSpec("generator", offset=(0.0, 8.0, 0.0), axis=(0.0, 1.0, 0.0)),
    JointSpec("rotor", offset=(0.0, 0.0, 3.0), axis=(0.0, 0.0, 1.0), wrap=True),
    JointSpec("blade", offset=(0.0, 0.0, 0.0), axis=(0.0, 1.0, 0.0)),
    # arm rig joints; kept in the model but no part hangs off them
    JointSpec("shoulder", axis=(0.0, 0.0, 1.0), initial_deg=45.0),
    JointSpec("arm", axis=(0.0, 0.0, 1.0), initial_deg=45.0),
    JointSpec("hand", axis=(0.0, 1.0, 0.0)),
]

# Joint the animation loop spins.
DRIVEN_JOINT = "rotor"

# Joints the keyboard can nudge directly.
KEY_JOINTS = ("turbine", "generator")


def build_turbine_tree() -> HierarchyNode:
    """
    tower
      +- base
      +- generator
           +- rotor
                +- blade
    """
    blade = HierarchyNode("blade", joint="blade", shape_scale=(20.0, 0.8, 0.8))
    rotor = HierarchyNode("rotor", joint="rotor", shape_scale=(1.2, 1.2, 1.0), children=(blade,))
    generator = HierarchyNode("generator", joint="generator", shape_scale=(3.0, 3.0, 5.0), children=(rotor,))
    base = HierarchyNode("base", joint="base", shape_scale=(5.0, 1.0, 5.0))
    return HierarchyNode("turbine", joint="turbine", shape_scale=(2.0, 20.0, 2.0), children=(base, generator))
