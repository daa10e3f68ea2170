# turbinekin/viewer/matrix.py
from __future__ import annotations

import math
from typing import List, Optional

from .types import Mat4, Vec3


# ---------------------------
# Row-major 4x4 helpers
# ---------------------------
# Column-vector convention: translation lives in [0][3],[1][3],[2][3] and
# mat4_mul(A, B) applies B first. Every builder returns a fresh tuple so a
# matrix handed to the stack or the renderer can never change under it.

def _freeze(rows: List[List[float]]) -> Mat4:
    return tuple(tuple(float(v) for v in r) for r in rows)  # type: ignore[return-value]


def mat4_identity() -> Mat4:
    return (
        (1.0, 0.0, 0.0, 0.0),
        (0.0, 1.0, 0.0, 0.0),
        (0.0, 0.0, 1.0, 0.0),
        (0.0, 0.0, 0.0, 1.0),
    )


def mat4_translate(x: float, y: float, z: float) -> Mat4:
    return (
        (1.0, 0.0, 0.0, float(x)),
        (0.0, 1.0, 0.0, float(y)),
        (0.0, 0.0, 1.0, float(z)),
        (0.0, 0.0, 0.0, 1.0),
    )


def mat4_scale(x: float, y: float, z: float) -> Mat4:
    return (
        (float(x), 0.0,      0.0,      0.0),
        (0.0,      float(y), 0.0,      0.0),
        (0.0,      0.0,      float(z), 0.0),
        (0.0,      0.0,      0.0,      1.0),
    )


def mat4_rotate(angle_deg: float, axis: Vec3) -> Mat4:
    """
    Rotation of angle_deg degrees about an arbitrary axis (right-handed).
    The axis does not need to be unit length; a zero axis gives identity.
    """
    ax, ay, az = (float(axis[0]), float(axis[1]), float(axis[2]))
    n = math.sqrt(ax * ax + ay * ay + az * az)
    if n <= 1e-12:
        return mat4_identity()
    x, y, z = ax / n, ay / n, az / n

    rad = math.radians(float(angle_deg))
    c = math.cos(rad)
    s = math.sin(rad)
    t = 1.0 - c

    return (
        (t * x * x + c,     t * x * y - s * z, t * x * z + s * y, 0.0),
        (t * x * y + s * z, t * y * y + c,     t * y * z - s * x, 0.0),
        (t * x * z - s * y, t * y * z + s * x, t * z * z + c,     0.0),
        (0.0,               0.0,               0.0,               1.0),
    )


def mat4_mul(A: Mat4, B: Mat4) -> Mat4:
    # row-major multiply: C = A * B
    C = [[0.0] * 4 for _ in range(4)]
    for r in range(4):
        ar0, ar1, ar2, ar3 = A[r]
        for c in range(4):
            C[r][c] = ar0 * B[0][c] + ar1 * B[1][c] + ar2 * B[2][c] + ar3 * B[3][c]
    return _freeze(C)


def mat4_chain(*mats: Mat4) -> Mat4:
    """Left-to-right product: mat4_chain(A, B, C) == A * B * C."""
    out = mat4_identity()
    for m in mats:
        out = mat4_mul(out, m)
    return out


def mat4_transpose(M: Mat4) -> Mat4:
    return _freeze([[M[c][r] for c in range(4)] for r in range(4)])


def mat4_invert(M: Mat4) -> Optional[Mat4]:
    """
    Gauss-Jordan inverse with partial pivoting.
    Returns None for a singular matrix.
    """
    a = [list(map(float, M[r])) + [1.0 if r == c else 0.0 for c in range(4)] for r in range(4)]

    for col in range(4):
        pivot = max(range(col, 4), key=lambda r: abs(a[r][col]))
        if abs(a[pivot][col]) <= 1e-12:
            return None
        if pivot != col:
            a[col], a[pivot] = a[pivot], a[col]

        inv_p = 1.0 / a[col][col]
        a[col] = [v * inv_p for v in a[col]]

        for r in range(4):
            if r == col:
                continue
            f = a[r][col]
            if f != 0.0:
                a[r] = [rv - f * cv for rv, cv in zip(a[r], a[col])]

    return _freeze([row[4:] for row in a])


def mat4_perspective(fovy_deg: float, aspect: float, near: float, far: float) -> Mat4:
    if near <= 0.0 or far <= near or aspect <= 0.0:
        raise ValueError(f"bad perspective params fovy={fovy_deg} aspect={aspect} near={near} far={far}")
    f = 1.0 / math.tan(math.radians(float(fovy_deg)) * 0.5)
    rd = 1.0 / (near - far)
    return (
        (f / aspect, 0.0, 0.0,                  0.0),
        (0.0,        f,   0.0,                  0.0),
        (0.0,        0.0, (far + near) * rd,    2.0 * far * near * rd),
        (0.0,        0.0, -1.0,                 0.0),
    )


def mat4_ortho(left: float, right: float, bottom: float, top: float, near: float, far: float) -> Mat4:
    if left == right or bottom == top or near == far:
        raise ValueError("degenerate ortho volume")
    rw = 1.0 / (right - left)
    rh = 1.0 / (top - bottom)
    rd = 1.0 / (far - near)
    return (
        (2.0 * rw, 0.0,      0.0,       -(right + left) * rw),
        (0.0,      2.0 * rh, 0.0,       -(top + bottom) * rh),
        (0.0,      0.0,      -2.0 * rd, -(far + near) * rd),
        (0.0,      0.0,      0.0,       1.0),
    )


def _normalize(v: Vec3) -> Vec3:
    x, y, z = v
    n = math.sqrt(x * x + y * y + z * z) or 1.0
    return (x / n, y / n, z / n)


def _cross(a: Vec3, b: Vec3) -> Vec3:
    return (a[1] * b[2] - a[2] * b[1], a[2] * b[0] - a[0] * b[2], a[0] * b[1] - a[1] * b[0])


def mat4_look_at(eye: Vec3, at: Vec3, up: Vec3) -> Mat4:
    f = _normalize((at[0] - eye[0], at[1] - eye[1], at[2] - eye[2]))
    s = _normalize(_cross(f, up))
    u = _cross(s, f)
    ex, ey, ez = eye
    return (
        (s[0],  s[1],  s[2],  -(s[0] * ex + s[1] * ey + s[2] * ez)),
        (u[0],  u[1],  u[2],  -(u[0] * ex + u[1] * ey + u[2] * ez)),
        (-f[0], -f[1], -f[2], (f[0] * ex + f[1] * ey + f[2] * ez)),
        (0.0,   0.0,   0.0,   1.0),
    )


def transform_point(M: Mat4, v: Vec3) -> Vec3:
    # assumes v as (x,y,z,1) column vector; with row-major M
    x, y, z = v
    tx = M[0][0] * x + M[0][1] * y + M[0][2] * z + M[0][3]
    ty = M[1][0] * x + M[1][1] * y + M[1][2] * z + M[1][3]
    tz = M[2][0] * x + M[2][1] * y + M[2][2] * z + M[2][3]
    return (tx, ty, tz)


def transform_normal(N: Mat4, n: Vec3) -> Vec3:
    x, y, z = n
    return _normalize((
        N[0][0] * x + N[0][1] * y + N[0][2] * z,
        N[1][0] * x + N[1][1] * y + N[1][2] * z,
        N[2][0] * x + N[2][1] * y + N[2][2] * z,
    ))


def normal_matrix(model: Mat4, view: Mat4) -> Mat4:
    """
    Inverse-transpose of view*model, so normals stay perpendicular to surfaces
    under non-uniform scale. Singular input falls back to view*model.
    """
    mv = mat4_mul(view, model)
    inv = mat4_invert(mv)
    if inv is None:
        return mv
    return mat4_transpose(inv)


def mat4_to_gl(M: Mat4) -> List[float]:
    """Flatten to the column-major 16-float order glLoadMatrixf expects."""
    return [float(M[r][c]) for c in range(4) for r in range(4)]


def mat4_allclose(A: Mat4, B: Mat4, tol: float = 1e-9) -> bool:
    return all(abs(A[r][c] - B[r][c]) <= tol for r in range(4) for c in range(4))
