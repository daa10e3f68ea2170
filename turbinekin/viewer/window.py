#turbinekin/viewer/window.py
from __future__ import annotations

import logging
import tkinter as tk
from tkinter import ttk
from typing import Optional

from ..config import AppConfig
from .joints import normalize_deg
from .keymap import event_to_command
from .mesh import default_meshes
from .render import Renderer
from .scene import SceneState, build_turbine_scene
from .scheduler import AnimationScheduler, TkFrameDriver
from .tk_gl_widget import GLViewerFrame
from .traversal import HierarchyTraversal


HELP_TEXT = (
    "t/T turbine  g/G generator  r/R direction  b/B speed  "
    "o reset  space pause  Up/Down scale"
)


class ViewerWindow(tk.Toplevel):
    """
    Turbine viewer:
      - keyboard joint control
      - play/pause of the rotor spin
      - speed / direction readout
    """

    def __init__(
        self,
        master: tk.Misc,
        *,
        cfg: AppConfig,
        scene: Optional[SceneState] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(master)
        self.title("Turbine Viewer")
        self.geometry(cfg.window_geometry)

        self.cfg = cfg
        self.logger = logger or logging.getLogger("turbinekin")
        self.scene = scene or build_turbine_scene(wrap_spin=cfg.wrap_spin, logger=self.logger)
        self.traversal = HierarchyTraversal(self.scene, logger=self.logger)

        # layout
        top = ttk.Frame(self)
        top.pack(fill="both", expand=True)

        self.gl = GLViewerFrame(
            top,
            scene=self.scene,
            meshes=default_meshes(),
            on_render=self._render_pass,
            clear_color=cfg.clear_color,
        )
        self.gl.pack(fill="both", expand=True, padx=8, pady=8)

        self.scheduler = AnimationScheduler(
            self.scene,
            on_frame=self._on_frame,
            tick_ms=cfg.tick_ms,
            logger=self.logger,
        )

        controls = ttk.Frame(top)
        controls.pack(fill="x", padx=8, pady=(0, 8))

        self.play_btn = ttk.Button(controls, text="Pause", command=self._on_toggle)
        self.play_btn.pack(side="left")

        self.status_var = tk.StringVar(value="")
        ttk.Label(controls, textvariable=self.status_var).pack(side="left", padx=(12, 0))
        ttk.Label(controls, text=HELP_TEXT).pack(side="right")

        self.bind("<Key>", self._on_key)
        self.protocol("WM_DELETE_WINDOW", self._on_close)

        self._refresh_status()
        self.gl.focus_canvas()
        self.scheduler.start(TkFrameDriver(self))

    # ---- frame ----
    def _on_frame(self) -> None:
        self._refresh_status()
        self.gl.request_redraw()

    def _render_pass(self, renderer: Renderer) -> None:
        report = self.traversal.render_pass(renderer)
        if not report.ok:
            self.logger.warning("render pass %d: %s", self.traversal.passes, report)

    def _refresh_status(self) -> None:
        st = self.scheduler.status()
        state = "running" if st.running else "paused"
        sign = "+" if st.positive else "-"
        self.status_var.set(
            f"{state}  speed {st.speed}  dir {sign}  rotor {normalize_deg(st.driven_angle):.1f}°  "
            f"scale {self.scene.assembly_scale:.2f}"
        )
        self.play_btn.configure(text="Pause" if st.running else "Play")

    # ---- input ----
    def _on_key(self, e: tk.Event) -> None:
        cmd = event_to_command(
            e,
            joint_step_deg=self.cfg.joint_step_deg,
            scale_up=self.cfg.scale_up,
            scale_down=self.cfg.scale_down,
        )
        if cmd is None:
            return
        self.logger.info("key %r -> %r", getattr(e, "keysym", ""), cmd)
        if self.scheduler.apply(cmd):
            self._refresh_status()
            self.gl.request_redraw()

    def _on_toggle(self) -> None:
        self.scheduler.toggle()
        self._refresh_status()

    def _on_close(self) -> None:
        self.scheduler.stop()
        self.logger.info("viewer closed; joints=%s", self.scene.joints.snapshot())
        self.destroy()
