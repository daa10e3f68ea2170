#config.py
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple


def _as_bool(v) -> bool:
    # bool("false") is True, so only JSON booleans are accepted
    if isinstance(v, bool):
        return v
    raise ValueError(f"expected true or false, got {v!r}")


CONFIG_FIELDS = [
    ("log_path", Path, lambda: Path("logs/turbinekin.log")),
    ("tick_ms", int, 16),               # ~60fps frame trigger
    ("joint_step_deg", float, 15.0),    # t/T, g/G nudge
    ("scale_up", float, 1.1),
    ("scale_down", float, 0.9),
    ("wrap_spin", _as_bool, True),      # rebase the rotor angle by whole turns
    ("window_geometry", str, "900x640"),
    ("clear_color", lambda v: tuple(float(x) for x in v), (0.9, 0.9, 0.9, 1.0)),
]


@dataclass(frozen=True)
class AppConfig:
    log_path: Path
    tick_ms: int
    joint_step_deg: float
    scale_up: float
    scale_down: float
    wrap_spin: bool
    window_geometry: str
    clear_color: Tuple[float, ...]


def config_from_dict(raw: dict) -> AppConfig:
    values = {}
    for entry in CONFIG_FIELDS:
        key = entry[0]
        cast = entry[1]
        default = entry[2] if len(entry) > 2 else None

        if key in raw:
            value = raw[key]
        else:
            value = default() if callable(default) else default

        if value is not None and cast is not None:
            value = cast(value)

        values[key] = value

    return AppConfig(**values)


def load_config(config_path: Optional[Path]) -> AppConfig:
    if config_path is None or not config_path.exists():
        return config_from_dict({})
    raw = json.loads(config_path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError(f"config root must be an object: {config_path}")
    return config_from_dict(raw)
