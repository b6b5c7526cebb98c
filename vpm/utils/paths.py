# Rev 0.2.0

"""Paths and XDG helpers (Rev 0.2.0)
- Uses XDG Base Directory spec
- DB lives under XDG data dir unless VPM_DB points elsewhere
- Logs under XDG state dir, settings.json under XDG config dir
- SQL migrations ship inside the package (vpm/migrations)
"""
from __future__ import annotations
import os
from pathlib import Path


APP_NAME = "vpm"


XDG_DATA_HOME = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))
XDG_STATE_HOME = Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state"))
XDG_CONFIG_HOME = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


DATA_DIR = XDG_DATA_HOME / APP_NAME
STATE_DIR = XDG_STATE_HOME / APP_NAME
LOGS_DIR = STATE_DIR / "logs"
CONFIG_DIR = XDG_CONFIG_HOME / APP_NAME


PACKAGE_ROOT = Path(__file__).resolve().parents[1]
MIGRATIONS_DIR = (PACKAGE_ROOT / "migrations").resolve()


DB_PATH = Path(os.environ.get("VPM_DB", DATA_DIR / "vpm.db")).expanduser()


def ensure_dirs() -> None:
    for p in (DATA_DIR, LOGS_DIR, CONFIG_DIR, DB_PATH.parent):
        p.mkdir(parents=True, exist_ok=True)


def config_dir() -> Path:
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return CONFIG_DIR
