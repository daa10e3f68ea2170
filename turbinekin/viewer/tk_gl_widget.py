from __future__ import annotations

import logging
import math
import tkinter as tk
from typing import Callable, Dict, Optional, Tuple

from .matrix import mat4_mul, mat4_to_gl, normal_matrix, transform_normal, transform_point
from .mesh import MeshData
from .scene import SceneState
from .types import Mat4, Vec3


# Embed OpenGL in Tk via pyopengltk (Windows-friendly)
try:
    from pyopengltk import OpenGLFrame
except Exception as e:  # pragma: no cover
    OpenGLFrame = None  # type: ignore[assignment]
    _OPENGLFRAME_IMPORT_ERR = e
else:
    _OPENGLFRAME_IMPORT_ERR = None

try:
    from OpenGL.GL import (
        GL_BACK,
        GL_COLOR_BUFFER_BIT,
        GL_CULL_FACE,
        GL_DEPTH_BUFFER_BIT,
        GL_DEPTH_TEST,
        GL_MODELVIEW,
        GL_PROJECTION,
        GL_TRIANGLES,
        glBegin,
        glClear,
        glClearColor,
        glColor4f,
        glCullFace,
        glEnable,
        glEnd,
        glFlush,
        glGetError,
        glLoadMatrixf,
        glMatrixMode,
        glVertex3f,
        glViewport,
    )
except Exception as e:  # pragma: no cover
    _PYOPENGL_IMPORT_ERR = e
else:
    _PYOPENGL_IMPORT_ERR = None


LIGHT_POS: Vec3 = (5.0, 10.0, 5.0)
AMBIENT = 0.25


def shade(color: Tuple[float, float, float, float], n_eye: Vec3, p_eye: Vec3, light_eye: Vec3) -> Tuple[float, float, float, float]:
    lx, ly, lz = (light_eye[0] - p_eye[0], light_eye[1] - p_eye[1], light_eye[2] - p_eye[2])
    ln = math.sqrt(lx * lx + ly * ly + lz * lz) or 1.0
    d = (n_eye[0] * lx + n_eye[1] * ly + n_eye[2] * lz) / ln
    k = AMBIENT + (1.0 - AMBIENT) * max(0.0, d)
    r, g, b, a = color
    return (r * k, g * k, b * k, a)


class GLCubeRenderer:
    """
    Renderer for the fixed-function pipeline. Expects the projection matrix
    to be loaded already; loads view*world*shape per draw and emits the mesh
    as immediate-mode triangles, lit on the CPU with one point light.
    """
    def __init__(self, scene: SceneState, meshes: Dict[str, MeshData], *, logger: Optional[logging.Logger] = None) -> None:
        self.scene = scene
        self.meshes = meshes
        self._log = logger or logging.getLogger("turbinekin")

    def draw(self, world: Mat4, shape: Mat4, mesh_id: str) -> None:
        mesh = self.meshes.get(mesh_id)
        if mesh is None:
            raise KeyError(f"unknown mesh {mesh_id!r}")

        view = self.scene.view
        model = mat4_mul(world, shape)
        mv = mat4_mul(view, model)
        nmat = normal_matrix(model, view)
        light_eye = transform_point(view, LIGHT_POS)

        glMatrixMode(GL_MODELVIEW)
        glLoadMatrixf(mat4_to_gl(mv))

        glBegin(GL_TRIANGLES)
        for v, c, n in zip(mesh.vertices, mesh.colors, mesh.normals):
            r, g, b, a = shade(c, transform_normal(nmat, n), transform_point(mv, v), light_eye)
            glColor4f(r, g, b, a)
            glVertex3f(float(v[0]), float(v[1]), float(v[2]))
        glEnd()

        err = glGetError()
        if err != 0:
            self._log.warning("[gl] ERROR %s drawing %s", err, mesh_id)


class GLViewerFrame(tk.Frame):
    """
    Wrapper frame that either hosts the real OpenGL widget (OpenGLFrame),
    or shows a helpful error message if deps are missing.

    The frame does not walk the scene itself; every redraw clears, loads the
    projection, then hands a GLCubeRenderer to the on_render callback.
    """

    def __init__(
        self,
        master: tk.Misc,
        *,
        scene: SceneState,
        meshes: Dict[str, MeshData],
        on_render: Optional[Callable[[GLCubeRenderer], object]] = None,
        clear_color: Tuple[float, ...] = (0.9, 0.9, 0.9, 1.0),
        **kwargs,
    ) -> None:
        super().__init__(master, **kwargs)
        self.scene = scene

        if _PYOPENGL_IMPORT_ERR is not None or OpenGLFrame is None:
            msg = "OpenGL viewer unavailable.\n\n"
            if _PYOPENGL_IMPORT_ERR is not None:
                msg += f"PyOpenGL import error: {_PYOPENGL_IMPORT_ERR!r}\n\n"
            if OpenGLFrame is None:
                msg += f"pyopengltk import error: {_OPENGLFRAME_IMPORT_ERR!r}\n\n"
            msg += "Install:\n  pip install PyOpenGL PyOpenGL_accelerate pyopengltk\n"
            tk.Label(self, text=msg, justify="left").pack(fill="both", expand=True, padx=10, pady=10)
            self._impl = None
            return

        renderer = GLCubeRenderer(scene, meshes)
        rgba = tuple(clear_color) + (1.0,) * max(0, 4 - len(clear_color))

        class _Impl(OpenGLFrame):
            def initgl(self_inner) -> None:
                glClearColor(float(rgba[0]), float(rgba[1]), float(rgba[2]), float(rgba[3]))
                glEnable(GL_DEPTH_TEST)
                glEnable(GL_CULL_FACE)
                glCullFace(GL_BACK)

            def request_redraw(self_inner) -> None:
                if hasattr(self_inner, "_display"):
                    self_inner.after_idle(self_inner._display)  # type: ignore[attr-defined]
                elif hasattr(self_inner, "tkRedraw"):
                    self_inner.after_idle(self_inner.tkRedraw)  # type: ignore[attr-defined]
                else:
                    self_inner.after_idle(self_inner.redraw)

            def redraw(self_inner) -> None:
                w = int(self_inner.winfo_width())
                h = int(self_inner.winfo_height())
                if w <= 1 or h <= 1:
                    return
                glViewport(0, 0, w, h)
                scene.set_viewport(w, h)

                glClear(GL_COLOR_BUFFER_BIT | GL_DEPTH_BUFFER_BIT)

                glMatrixMode(GL_PROJECTION)
                glLoadMatrixf(mat4_to_gl(scene.projection))

                if on_render is not None:
                    on_render(renderer)

                glFlush()

        self._impl = _Impl(self, width=600, height=400)
        self._impl.pack(fill="both", expand=True)

        # the scheduler drives frames, not pyopengltk
        self._impl.animate = 0

    @property
    def available(self) -> bool:
        return self._impl is not None

    def request_redraw(self) -> None:
        if self._impl is None:
            return
        self._impl.request_redraw()

    def focus_canvas(self) -> None:
        if self._impl is None:
            self.focus_set()
            return
        self._impl.focus_set()
