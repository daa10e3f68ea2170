from __future__ import annotations

import argparse
import logging
import tkinter as tk
from pathlib import Path
from typing import Optional

from .config import load_config
from .viewer.window import ViewerWindow


def _setup_logger(log_path: Path) -> logging.Logger:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger("turbinekin")
    logger.setLevel(logging.INFO)
    if not logger.handlers:
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setLevel(logging.INFO)
        fmt = logging.Formatter("%(asctime)s %(levelname)s %(message)s")
        fh.setFormatter(fmt)
        logger.addHandler(fh)
    return logger


def run_app(argv: Optional[list[str]] = None) -> None:
    here = Path(__file__).resolve().parent.parent

    ap = argparse.ArgumentParser(prog="turbinekin", description="Articulated turbine viewer")
    ap.add_argument("--config", type=Path, default=here / "config.json", help="JSON config (optional)")
    args = ap.parse_args(argv)

    cfg = load_config(args.config)
    logger = _setup_logger(cfg.log_path)
    logger.info("starting viewer (config=%s exists=%s)", args.config, args.config.exists())

    root = tk.Tk()
    root.withdraw()

    win = ViewerWindow(root, cfg=cfg, logger=logger)
    win.bind("<Destroy>", lambda e: root.destroy() if e.widget is win else None)

    root.mainloop()
