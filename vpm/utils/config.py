# Rev 0.2.0

# vpm/utils/config.py
from __future__ import annotations
import copy
import json
from pathlib import Path
from typing import Any, Dict

from .logging_setup import get_logger
from .paths import config_dir

SETTINGS_FILE = config_dir() / "settings.json"

_DEFAULTS: Dict[str, Any] = {
    "identity": {
        "email": "",
    },
    "ui": {
        "last_viewed_project": None,
    },
}

_log = get_logger("config")


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(out.get(key), dict):
            if isinstance(value, dict):
                out[key] = _merge(out[key], value)
            else:
                # sections stay dicts; callers index into them
                _log.warning("Ignoring settings section %r: expected an object, got %r", key, value)
        else:
            out[key] = value
    return out


def load_settings(path: Path = SETTINGS_FILE) -> Dict[str, Any]:
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            _log.warning("Ignoring unreadable settings file %s: %s", path, e)
            return copy.deepcopy(_DEFAULTS)
        if not isinstance(data, dict):
            _log.warning("Ignoring settings file %s: top level is not an object", path)
            return copy.deepcopy(_DEFAULTS)
        return _merge(_DEFAULTS, data)
    return copy.deepcopy(_DEFAULTS)


def save_settings(data: Dict[str, Any], path: Path = SETTINGS_FILE) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
