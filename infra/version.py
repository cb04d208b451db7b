from __future__ import annotations

import os
from importlib import metadata


_DEFAULT_ENGINE_VERSION = "0.1.0"
_DISTRIBUTION = "planning-engine-lite"


def get_engine_version() -> str:
    env_override = (os.getenv("PLANNING_ENGINE_VERSION") or "").strip()
    if env_override:
        return env_override

    try:
        return metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return _DEFAULT_ENGINE_VERSION


__all__ = ["get_engine_version"]
