from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from core.config import CAPACITY_EPSILON


@dataclass(frozen=True)
class ResourceConflict:
    resource_id: str
    conflict_date: date
    allocated_hours: float
    available_hours: float
    task_ids: list[str] = field(default_factory=list)

    @property
    def overallocated_hours(self) -> float:
        return self.allocated_hours - self.available_hours


@dataclass
class DailyResourceLoad:
    resource_id: str
    day: date
    hours: float = 0.0
    task_ids: list[str] = field(default_factory=list)

    def add(self, task_id: str, hours: float) -> None:
        self.hours += hours
        if task_id not in self.task_ids:
            self.task_ids.append(task_id)


@dataclass(frozen=True)
class ResourceUtilization:
    """Allocated vs. available hours of one resource over a date range."""

    resource_id: str
    start_date: date
    end_date: date
    allocated_hours: float
    available_hours: float
    task_ids: list[str] = field(default_factory=list)

    @property
    def utilization_percentage(self) -> float:
        if self.available_hours <= 0:
            return 0.0
        return round(self.allocated_hours / self.available_hours * 100.0, 1)

    @property
    def is_overallocated(self) -> bool:
        return self.allocated_hours > self.available_hours + CAPACITY_EPSILON


__all__ = ["ResourceConflict", "DailyResourceLoad", "ResourceUtilization"]
