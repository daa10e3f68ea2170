# turbinekin/viewer/scheduler.py
from __future__ import annotations

import enum
import logging
import math
from typing import Any, Callable, List, Optional, Protocol, Tuple

from .commands import (
    AdjustJoint,
    AdjustSpeed,
    ResetSpeedAndDirection,
    ScaleAssembly,
    SetDirection,
    ToggleAnimation,
)
from .scene import SceneState
from .turbine_model import DRIVEN_JOINT
from .types import SchedulerStatus, UnknownJointError


class AnimState(enum.Enum):
    RUNNING = "running"
    PAUSED = "paused"


# ---------------------------
# Frame drivers
# ---------------------------

class FrameDriver(Protocol):
    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        ...

    def cancel(self, handle: Any) -> None:
        ...


class TkFrameDriver:
    """Next-frame trigger on a Tk widget's after() timer."""
    def __init__(self, widget) -> None:
        self.widget = widget

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        return self.widget.after(int(delay_ms), callback)

    def cancel(self, handle: Any) -> None:
        try:
            self.widget.after_cancel(handle)
        except Exception:
            # widget already destroyed
            pass


class ManualFrameDriver:
    """
    Queues callbacks until run_pending() is called. Used for headless
    stepping; delay_ms is recorded but never waited on.
    """
    def __init__(self) -> None:
        self._next = 0
        self.pending: List[Tuple[int, int, Callable[[], None]]] = []

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> Any:
        self._next += 1
        self.pending.append((self._next, int(delay_ms), callback))
        return self._next

    def cancel(self, handle: Any) -> None:
        self.pending = [p for p in self.pending if p[0] != handle]

    def run_pending(self) -> int:
        batch, self.pending = self.pending, []
        for _h, _d, cb in batch:
            cb()
        return len(batch)


# ---------------------------
# Scheduler
# ---------------------------

class AnimationScheduler:
    """
    Per-frame joint update for the spinning part.

    Each tick: advance the driven joint by speed * direction (only while
    RUNNING), then call on_frame() to render. Commands from the input layer go
    through apply() and take effect immediately in either state.
    """

    MIN_SPEED = 1

    def __init__(
        self,
        scene: SceneState,
        *,
        driven_joint: str = DRIVEN_JOINT,
        on_frame: Optional[Callable[[], Any]] = None,
        tick_ms: int = 16,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if not scene.joints.has_joint(driven_joint):
            raise UnknownJointError(driven_joint)
        self.scene = scene
        self.driven_joint = driven_joint
        self.on_frame = on_frame
        self.tick_ms = max(1, int(tick_ms))
        self._log = logger or logging.getLogger("turbinekin")

        self.state = AnimState.RUNNING
        self.speed = self.MIN_SPEED
        self.positive = False
        self.frame = 0

        self._in_frame = False
        self._driver: Optional[FrameDriver] = None
        self._handle: Any = None
        self._stopped = True

    # ---- state ----
    @property
    def running(self) -> bool:
        return self.state is AnimState.RUNNING

    @property
    def direction_sign(self) -> int:
        return 1 if self.positive else -1

    @property
    def step_deg(self) -> int:
        return self.speed * self.direction_sign

    def toggle(self) -> AnimState:
        self.state = AnimState.PAUSED if self.running else AnimState.RUNNING
        self._log.info("animation %s", self.state.value)
        return self.state

    def set_direction(self, positive: bool) -> None:
        self.positive = bool(positive)

    def adjust_speed(self, delta: int) -> int:
        self.speed = max(self.MIN_SPEED, self.speed + int(delta))
        return self.speed

    def reset_speed_and_direction(self) -> None:
        self.speed = self.MIN_SPEED
        self.positive = False

    def status(self) -> SchedulerStatus:
        return SchedulerStatus(
            running=self.running,
            speed=self.speed,
            positive=self.positive,
            frame=self.frame,
            driven_angle=self.scene.joints.angle(self.driven_joint),
        )

    # ---- commands ----
    def apply(self, cmd: object) -> bool:
        """Apply one input command. Returns False for ignored/rejected commands."""
        if isinstance(cmd, AdjustJoint):
            if not math.isfinite(cmd.delta_deg):
                self._log.warning("ignoring non-finite adjust %r for joint %r", cmd.delta_deg, cmd.joint)
                return False
            try:
                self.scene.joints.adjust_angle(cmd.joint, cmd.delta_deg)
            except UnknownJointError:
                self._log.warning("ignoring adjust for unknown joint %r", cmd.joint)
                return False
            return True
        if isinstance(cmd, SetDirection):
            self.set_direction(cmd.positive)
            return True
        if isinstance(cmd, AdjustSpeed):
            self.adjust_speed(cmd.delta)
            return True
        if isinstance(cmd, ResetSpeedAndDirection):
            self.reset_speed_and_direction()
            return True
        if isinstance(cmd, ToggleAnimation):
            self.toggle()
            return True
        if isinstance(cmd, ScaleAssembly):
            return self.scene.scale_assembly(cmd.factor)

        self._log.debug("ignoring unrecognized command %r", cmd)
        return False

    # ---- frame loop ----
    def advance(self) -> bool:
        """Joint-state half of a tick. No-op while paused."""
        if not self.running:
            return False
        self.scene.joints.adjust_angle(self.driven_joint, self.step_deg)
        return True

    def tick(self) -> bool:
        """
        One frame: advance, then render. A tick that arrives while the
        previous frame is still rendering is dropped.
        """
        if self._in_frame:
            self._log.debug("tick dropped; frame %d still rendering", self.frame)
            return False

        self._in_frame = True
        try:
            self.advance()
            self.frame += 1
            if self.on_frame is not None:
                try:
                    self.on_frame()
                except Exception:
                    self._log.exception("frame %d render failed", self.frame)
        finally:
            self._in_frame = False
        return True

    @property
    def started(self) -> bool:
        return not self._stopped

    def start(self, driver: FrameDriver) -> None:
        if not self._stopped:
            return
        self._driver = driver
        self._stopped = False
        self._handle = driver.schedule(self.tick_ms, self._loop)

    def _loop(self) -> None:
        if self._stopped or self._driver is None:
            return
        self.tick()
        if not self._stopped:
            self._handle = self._driver.schedule(self.tick_ms, self._loop)

    def stop(self) -> None:
        self._stopped = True
        if self._driver is not None and self._handle is not None:
            self._driver.cancel(self._handle)
        self._handle = None
