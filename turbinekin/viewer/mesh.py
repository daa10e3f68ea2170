#turbinekin/viewer/mesh.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

Vec3 = tuple[float, float, float]
Color = tuple[float, float, float, float]

CUBE_MESH_ID = "cube"


@dataclass(frozen=True)
class MeshData:
    """Flat triangle soup: one position, color and normal per vertex."""
    vertices: tuple[Vec3, ...]
    colors: tuple[Color, ...]
    normals: tuple[Vec3, ...]

    @property
    def num_vertices(self) -> int:
        return len(self.vertices)


_CUBE_CORNERS: tuple[Vec3, ...] = (
    (-0.5, -0.5, 0.5),
    (0.5, -0.5, 0.5),
    (0.5, 0.5, 0.5),
    (-0.5, 0.5, 0.5),
    (-0.5, -0.5, -0.5),
    (0.5, -0.5, -0.5),
    (0.5, 0.5, -0.5),
    (-0.5, 0.5, -0.5),
)

_FACE_COLORS: tuple[Color, ...] = (
    (1.0, 0.0, 0.0, 1.0),  # red
    (0.0, 1.0, 0.0, 1.0),  # green
    (0.0, 0.0, 1.0, 1.0),  # blue
    (1.0, 1.0, 0.0, 1.0),  # yellow
    (1.0, 0.0, 1.0, 1.0),  # magenta
    (0.0, 1.0, 1.0, 1.0),  # cyan
)

_FACE_NORMALS: tuple[Vec3, ...] = (
    (0.0, 0.0, 1.0),
    (1.0, 0.0, 0.0),
    (0.0, 0.0, -1.0),
    (-1.0, 0.0, 0.0),
    (0.0, 1.0, 0.0),
    (0.0, -1.0, 0.0),
)

_CUBE_INDICES = (
    0, 1, 2, 0, 2, 3,  # +z face
    1, 5, 6, 1, 6, 2,  # +x face
    5, 4, 7, 5, 7, 6,  # -z face
    4, 0, 3, 4, 3, 7,  # -x face
    3, 2, 6, 3, 6, 7,  # +y face
    4, 5, 1, 4, 1, 0,  # -y face
)


def build_cube_mesh() -> MeshData:
    """Unit cube centered at the origin, 36 vertices, flat per-face color and normal."""
    verts = []
    colors = []
    normals = []
    for i, idx in enumerate(_CUBE_INDICES):
        face = i // 6
        verts.append(_CUBE_CORNERS[idx])
        colors.append(_FACE_COLORS[face])
        normals.append(_FACE_NORMALS[face])
    return MeshData(vertices=tuple(verts), colors=tuple(colors), normals=tuple(normals))


def default_meshes() -> Dict[str, MeshData]:
    return {CUBE_MESH_ID: build_cube_mesh()}
