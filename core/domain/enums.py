from __future__ import annotations

from enum import Enum


class DependencyType(str, Enum):
    FINISH_TO_START = "finish_to_start"
    START_TO_START = "start_to_start"
    FINISH_TO_FINISH = "finish_to_finish"
    START_TO_FINISH = "start_to_finish"

    @classmethod
    def parse(cls, value: "DependencyType | str") -> "DependencyType":
        """Accept an enum member, its value, or the short code (FS/SS/FF/SF)."""
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip()
        short = _SHORT_CODES.get(normalized.upper())
        if short is not None:
            return short
        return cls(normalized.lower())

    @property
    def short_code(self) -> str:
        return {v: k for k, v in _SHORT_CODES.items()}[self]


_SHORT_CODES = {
    "FS": DependencyType.FINISH_TO_START,
    "SS": DependencyType.START_TO_START,
    "FF": DependencyType.FINISH_TO_FINISH,
    "SF": DependencyType.START_TO_FINISH,
}


class DurationUnit(str, Enum):
    DAYS = "DAYS"
    HOURS = "HOURS"


__all__ = ["DependencyType", "DurationUnit"]
