from __future__ import annotations

import pytest

from turbinekin.viewer.joints import REBASE_LIMIT, JointModel, normalize_deg
from turbinekin.viewer.matrix import mat4_allclose, mat4_chain, mat4_rotate, mat4_translate, transform_point
from turbinekin.viewer.turbine_model import TURBINE_JOINTS
from turbinekin.viewer.types import JointSpec, UnknownJointError


def test_initial_angles() -> None:
    j = JointModel(TURBINE_JOINTS)
    snap = j.snapshot()
    assert snap["shoulder"] == 45.0
    assert snap["arm"] == 45.0
    for name in ("turbine", "base", "generator", "rotor", "blade", "hand"):
        assert snap[name] == 0.0


def test_local_transform_is_bit_identical_for_same_angle() -> None:
    j = JointModel(TURBINE_JOINTS)
    j.set_angle("rotor", 30.0)
    first = j.local_transform("rotor")
    assert j.local_transform("rotor") == first

    j.set_angle("rotor", 200.0)
    j.adjust_angle("rotor", -77.0)
    j.set_angle("rotor", 30.0)
    assert j.local_transform("rotor") == first


def test_local_transform_tracks_current_angle() -> None:
    j = JointModel(TURBINE_JOINTS)
    before = j.local_transform("generator")
    j.adjust_angle("generator", 15.0)
    assert j.local_transform("generator") != before


def test_direction_reversal_is_exactly_reproducible() -> None:
    j = JointModel(TURBINE_JOINTS)
    start = j.local_transform("turbine")
    for _ in range(12):
        j.adjust_angle("turbine", 15.0)
    for _ in range(12):
        j.adjust_angle("turbine", -15.0)
    assert j.angle("turbine") == 0.0
    assert j.local_transform("turbine") == start


def test_rotor_local_is_offset_then_spin_about_z() -> None:
    j = JointModel(TURBINE_JOINTS)
    j.set_angle("rotor", 90.0)
    expected = mat4_chain(mat4_translate(0.0, 0.0, 3.0), mat4_rotate(90.0, (0.0, 0.0, 1.0)))
    assert mat4_allclose(j.local_transform("rotor"), expected)


def test_pivot_rotation_keeps_pivot_fixed() -> None:
    spec = JointSpec("lever", offset=(0.0, 0.0, 0.0), axis=(0.0, 0.0, 1.0), pivot=(1.0, 0.0, 0.0))
    j = JointModel([spec])
    j.set_angle("lever", 90.0)
    M = j.local_transform("lever")
    px, py, pz = transform_point(M, (1.0, 0.0, 0.0))
    assert (px, py, pz) == pytest.approx((1.0, 0.0, 0.0))
    assert transform_point(M, (2.0, 0.0, 0.0)) == pytest.approx((1.0, 1.0, 0.0))


def test_spinning_joint_keeps_exact_deltas_across_zero() -> None:
    j = JointModel(TURBINE_JOINTS)
    assert j.set_angle("rotor", 0.0) == 0.0
    assert j.adjust_angle("rotor", -3.0) == -3.0
    assert j.set_angle("rotor", 725.0) == 725.0
    assert normalize_deg(j.angle("rotor")) == 5.0


def test_spinning_joint_is_rebased_past_the_limit() -> None:
    j = JointModel(TURBINE_JOINTS)
    far = REBASE_LIMIT + 90.0
    stored = j.set_angle("rotor", far)
    assert stored == 90.0
    assert j.set_angle("rotor", -far) == -90.0
    # below the limit nothing is touched
    assert j.set_angle("rotor", REBASE_LIMIT - 1.0) == REBASE_LIMIT - 1.0
    # non-spinning joints stay unconstrained
    assert j.set_angle("turbine", far) == far
    assert j.set_angle("generator", -30.0) == -30.0


def test_rebase_keeps_the_local_transform() -> None:
    j = JointModel(TURBINE_JOINTS)
    j.set_angle("rotor", REBASE_LIMIT - 2.0)
    before = j.local_transform("rotor")
    for _ in range(4):
        j.adjust_angle("rotor", 1.0)
    assert j.angle("rotor") == 2.0
    j.adjust_angle("rotor", -4.0)
    assert mat4_allclose(j.local_transform("rotor"), before, tol=1e-6)


def test_spin_is_stable_over_many_increments() -> None:
    j = JointModel(TURBINE_JOINTS)
    for _ in range(3600):
        j.adjust_angle("rotor", 7.0)
    assert j.angle("rotor") == 25200.0
    assert normalize_deg(j.angle("rotor")) == 0.0
    for _ in range(10000):
        j.adjust_angle("rotor", -1.0)
    assert j.angle("rotor") == 15200.0
    assert normalize_deg(j.angle("rotor")) == 80.0


def test_rebase_can_be_disabled() -> None:
    j = JointModel(TURBINE_JOINTS, wrap_spin=False)
    far = REBASE_LIMIT + 90.0
    assert j.set_angle("rotor", far) == far


def test_non_finite_angles_are_rejected() -> None:
    j = JointModel(TURBINE_JOINTS)
    j.set_angle("rotor", 12.0)
    with pytest.raises(ValueError):
        j.adjust_angle("rotor", float("inf"))
    with pytest.raises(ValueError):
        j.set_angle("generator", float("nan"))
    assert j.angle("rotor") == 12.0
    assert j.angle("generator") == 0.0


@pytest.mark.parametrize("deg, expected", [(0.0, 0.0), (360.0, 0.0), (720.0, 0.0), (-90.0, 270.0), (359.5, 359.5), (-1e-17, 0.0)])
def test_normalize_deg(deg: float, expected: float) -> None:
    out = normalize_deg(deg)
    assert 0.0 <= out < 360.0
    assert out == pytest.approx(expected)


def test_unknown_joint_raises() -> None:
    j = JointModel(TURBINE_JOINTS)
    with pytest.raises(UnknownJointError):
        j.set_angle("ghost", 1.0)
    with pytest.raises(UnknownJointError):
        j.adjust_angle("ghost", 1.0)
    with pytest.raises(KeyError):
        j.local_transform("ghost")
    assert not j.has_joint("ghost")


def test_reset_restores_initial_angles() -> None:
    j = JointModel(TURBINE_JOINTS)
    j.set_angle("shoulder", 0.0)
    j.set_angle("rotor", 123.0)
    j.reset()
    assert j.angle("shoulder") == 45.0
    assert j.angle("rotor") == 0.0
