from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from core.domain.enums import DependencyType
from core.domain.identifiers import generate_id


@dataclass(frozen=True)
class Task:
    id: str
    duration: float
    start_date: Optional[date] = None
    name: str = ""

    @staticmethod
    def create(duration: float, name: str = "", start_date: Optional[date] = None) -> "Task":
        return Task(id=generate_id(), duration=duration, start_date=start_date, name=name)


@dataclass(frozen=True)
class TaskDependency:
    predecessor_task_id: str
    successor_task_id: str
    dependency_type: DependencyType = DependencyType.FINISH_TO_START
    lag_days: float = 0.0
    id: str = ""

    @staticmethod
    def create(
        predecessor_id: str,
        successor_id: str,
        dependency_type: DependencyType | str = DependencyType.FINISH_TO_START,
        lag_days: float = 0.0,
    ) -> "TaskDependency":
        return TaskDependency(
            predecessor_task_id=predecessor_id,
            successor_task_id=successor_id,
            dependency_type=DependencyType.parse(dependency_type),
            lag_days=lag_days,
            id=generate_id(),
        )


@dataclass(frozen=True)
class TaskAssignment:
    task_id: str
    resource_id: str
    hours_per_day: float


__all__ = ["Task", "TaskDependency", "TaskAssignment"]
