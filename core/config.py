# core/config.py
from __future__ import annotations

# Working calendar: fixed 8h day, Saturday/Sunday off (date.weekday() numbering).
HOURS_PER_WORKDAY: float = 8.0
WEEKEND_DAYS: frozenset[int] = frozenset({5, 6})

# Slack at or below this is treated as zero (same unit as task durations).
CRITICAL_EPSILON: float = 1e-6

# Daily load must exceed capacity by more than this to count as a conflict.
CAPACITY_EPSILON: float = 1e-9


__all__ = [
    "HOURS_PER_WORKDAY",
    "WEEKEND_DAYS",
    "CRITICAL_EPSILON",
    "CAPACITY_EPSILON",
]
