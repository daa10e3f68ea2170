# turbinekin/viewer/keymap.py
from __future__ import annotations

from typing import Optional

from .commands import (
    AdjustJoint,
    AdjustSpeed,
    Command,
    ResetSpeedAndDirection,
    ScaleAssembly,
    SetDirection,
    ToggleAnimation,
)


def key_to_command(
    key: str,
    *,
    joint_step_deg: float = 15.0,
    scale_up: float = 1.1,
    scale_down: float = 0.9,
) -> Optional[Command]:
    """
    Translate a key name (Tk keysym or the typed character) into a command.
    Lower case nudges forward, upper case backward. Returns None for keys we
    don't bind.
    """
    step = float(joint_step_deg)
    if key == "t":
        return AdjustJoint("turbine", step)
    if key == "T":
        return AdjustJoint("turbine", -step)
    if key == "g":
        return AdjustJoint("generator", step)
    if key == "G":
        return AdjustJoint("generator", -step)
    if key == "r":
        return SetDirection(False)
    if key == "R":
        return SetDirection(True)
    if key == "b":
        return AdjustSpeed(-1)
    if key == "B":
        return AdjustSpeed(+1)
    if key == "o":
        return ResetSpeedAndDirection()
    if key in (" ", "space"):
        return ToggleAnimation()
    if key in ("Up", "ArrowUp"):
        return ScaleAssembly(scale_up)
    if key in ("Down", "ArrowDown"):
        return ScaleAssembly(scale_down)
    return None


def event_to_command(event, **kwargs) -> Optional[Command]:
    """Tk key event -> command. Prefers the keysym so arrows/space resolve."""
    keysym = getattr(event, "keysym", "") or ""
    if keysym in ("Up", "Down", "space"):
        return key_to_command(keysym, **kwargs)
    ch = getattr(event, "char", "") or keysym
    return key_to_command(ch, **kwargs)
