from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace

import pytest

from turbinekin.config import AppConfig, config_from_dict, load_config
from turbinekin.viewer.commands import (
    AdjustJoint,
    AdjustSpeed,
    ResetSpeedAndDirection,
    ScaleAssembly,
    SetDirection,
    ToggleAnimation,
)
from turbinekin.viewer.keymap import event_to_command, key_to_command


@pytest.mark.parametrize("key, cmd", [
    ("t", AdjustJoint("turbine", 15.0)),
    ("T", AdjustJoint("turbine", -15.0)),
    ("g", AdjustJoint("generator", 15.0)),
    ("G", AdjustJoint("generator", -15.0)),
    ("r", SetDirection(False)),
    ("R", SetDirection(True)),
    ("b", AdjustSpeed(-1)),
    ("B", AdjustSpeed(1)),
    ("o", ResetSpeedAndDirection()),
    (" ", ToggleAnimation()),
    ("Up", ScaleAssembly(1.1)),
    ("ArrowDown", ScaleAssembly(0.9)),
])
def test_key_bindings(key, cmd) -> None:
    assert key_to_command(key) == cmd


def test_unbound_keys_give_no_command() -> None:
    assert key_to_command("x") is None
    assert key_to_command("") is None


def test_step_and_scale_come_from_arguments() -> None:
    assert key_to_command("t", joint_step_deg=5.0) == AdjustJoint("turbine", 5.0)
    assert key_to_command("Up", scale_up=2.0) == ScaleAssembly(2.0)


def test_tk_events_resolve_through_keysym() -> None:
    assert event_to_command(SimpleNamespace(keysym="space", char=" ")) == ToggleAnimation()
    assert event_to_command(SimpleNamespace(keysym="Up", char="")) == ScaleAssembly(1.1)
    assert event_to_command(SimpleNamespace(keysym="T", char="T")) == AdjustJoint("turbine", -15.0)
    assert event_to_command(SimpleNamespace(keysym="Shift_L", char="")) is None


def test_missing_config_gives_defaults(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "nope.json")
    assert isinstance(cfg, AppConfig)
    assert cfg.tick_ms == 16
    assert cfg.joint_step_deg == 15.0
    assert cfg.wrap_spin is True
    assert cfg.log_path == Path("logs/turbinekin.log")
    assert load_config(None) == cfg


def test_config_overrides_and_casts(tmp_path: Path) -> None:
    p = tmp_path / "config.json"
    p.write_text(json.dumps({
        "tick_ms": "33",
        "joint_step_deg": 5,
        "log_path": str(tmp_path / "x.log"),
        "clear_color": [0, 0, 0, 1],
        "wrap_spin": False,
    }), encoding="utf-8")
    cfg = load_config(p)
    assert cfg.tick_ms == 33
    assert cfg.joint_step_deg == 5.0
    assert cfg.log_path == tmp_path / "x.log"
    assert cfg.clear_color == (0.0, 0.0, 0.0, 1.0)
    assert cfg.wrap_spin is False
    assert cfg.scale_up == 1.1


def test_config_root_must_be_an_object(tmp_path: Path) -> None:
    p = tmp_path / "config.json"
    p.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(p)


@pytest.mark.parametrize("raw", ["false", "true", 0, 1])
def test_boolean_fields_only_accept_json_booleans(raw) -> None:
    with pytest.raises(ValueError):
        config_from_dict({"wrap_spin": raw})
    assert config_from_dict({"wrap_spin": False}).wrap_spin is False
