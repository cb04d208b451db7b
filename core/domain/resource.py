from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from core.config import HOURS_PER_WORKDAY
from core.exceptions import ValidationError


@dataclass(frozen=True)
class Resource:
    id: str
    name: str = ""
    available_hours_per_day: float = HOURS_PER_WORKDAY


@dataclass(frozen=True)
class ResourceAllocation:
    """Hours per day a resource commits to a task on every date in [start_date, end_date]."""

    resource_id: str
    task_id: str
    start_date: date
    end_date: date
    hours_per_day: float

    def __post_init__(self) -> None:
        if self.end_date < self.start_date:
            raise ValidationError(
                f"Allocation of {self.resource_id!r} to {self.task_id!r} ends before it starts.",
                code="ALLOCATION_INVALID_RANGE",
            )
        if self.hours_per_day < 0:
            raise ValidationError(
                f"Allocation of {self.resource_id!r} to {self.task_id!r} has negative hours per day.",
                code="ALLOCATION_INVALID_HOURS",
            )


__all__ = ["Resource", "ResourceAllocation"]
