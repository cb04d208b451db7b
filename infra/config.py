# infra/config.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from core.config import CRITICAL_EPSILON
from core.exceptions import ValidationError


@dataclass(frozen=True)
class EngineSettings:
    critical_epsilon: float = CRITICAL_EPSILON
    max_workers: int | None = None
    log_level: int = logging.INFO


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationError(f"{name} must be an integer, got {raw!r}.", code="CONFIG_INVALID") from exc


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValidationError(f"{name} must be a number, got {raw!r}.", code="CONFIG_INVALID") from exc


def _env_log_level(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip().upper()
    if not raw:
        return default
    level = logging.getLevelName(raw)
    if not isinstance(level, int):
        raise ValidationError(f"{name} is not a logging level: {raw!r}.", code="CONFIG_INVALID")
    return level


def load_engine_settings() -> EngineSettings:
    """
    Engine settings from the environment.

    PLANNING_ENGINE_EPSILON      criticality tolerance (default 1e-6)
    PLANNING_ENGINE_MAX_WORKERS  thread pool size for batch runs (default: executor default)
    PLANNING_ENGINE_LOG_LEVEL    DEBUG / INFO / WARNING ...
    """
    epsilon = _env_float("PLANNING_ENGINE_EPSILON", CRITICAL_EPSILON)
    if epsilon < 0:
        raise ValidationError("PLANNING_ENGINE_EPSILON must not be negative.", code="CONFIG_INVALID")
    max_workers = _env_int("PLANNING_ENGINE_MAX_WORKERS", None)
    if max_workers is not None and max_workers <= 0:
        raise ValidationError("PLANNING_ENGINE_MAX_WORKERS must be positive.", code="CONFIG_INVALID")
    return EngineSettings(
        critical_epsilon=epsilon,
        max_workers=max_workers,
        log_level=_env_log_level("PLANNING_ENGINE_LOG_LEVEL", logging.INFO),
    )


__all__ = ["EngineSettings", "load_engine_settings"]
