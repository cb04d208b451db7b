# infra/path.py
from __future__ import annotations
import os
import sys
from pathlib import Path

APP_NAME = "PlanningEngineLite"
COMPANY_NAME = "TECHASH"
HOME_ENV_VAR = "PLANNING_ENGINE_HOME"


def _platform_base() -> Path:
    if sys.platform.startswith("win"):
        return Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    return Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share"))


def user_data_dir() -> Path:
    """
    Per-user directory for engine output (logs, exports).

    PLANNING_ENGINE_HOME wins when set; otherwise the platform location:
        Windows  %APPDATA%\\TECHASH\\PlanningEngineLite
        macOS    ~/Library/Application Support/TECHASH/PlanningEngineLite
        Linux    $XDG_DATA_HOME/TECHASH/PlanningEngineLite
    """
    override = (os.getenv(HOME_ENV_VAR) or "").strip()
    path = Path(override).expanduser() if override else _platform_base() / COMPANY_NAME / APP_NAME
    try:
        path.mkdir(parents=True, exist_ok=True)
        return path
    except OSError:
        fallback = Path.home() / f".{APP_NAME}"
        fallback.mkdir(parents=True, exist_ok=True)
        return fallback


def default_log_dir() -> Path:
    return user_data_dir() / "logs"


__all__ = ["APP_NAME", "user_data_dir", "default_log_dir"]
