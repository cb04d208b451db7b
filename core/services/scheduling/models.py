from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Sequence

from core.config import CRITICAL_EPSILON
from core.exceptions import UnknownTaskReferenceError, ValidationError
from core.models import DurationUnit, Task, TaskDependency
from core.services.work_calendar.engine import WorkCalendarEngine


@dataclass(frozen=True)
class CPMResult:
    task_id: str
    earliest_start: float
    earliest_finish: float
    latest_start: float
    latest_finish: float
    slack: float
    is_critical: bool

    @property
    def finish_slack(self) -> float:
        return self.latest_finish - self.earliest_finish


@dataclass(frozen=True)
class TaskScheduleDates:
    task_id: str
    early_start: date
    early_finish: date
    late_start: date
    late_finish: date


@dataclass(frozen=True)
class ScheduleRequest:
    tasks: Sequence[Task]
    dependencies: Sequence[TaskDependency] = ()
    project_start: Optional[date] = None


@dataclass
class ScheduleResult:
    """
    CPM output for one project.

    Offsets are in the engine's duration unit, relative to `project_start`
    (a working day) when one is known.
    """

    results: Dict[str, CPMResult]
    topo_order: List[str]
    project_finish: float
    critical_task_ids: List[str]
    critical_chains: List[List[str]]
    project_start: Optional[date] = None
    duration_unit: DurationUnit = DurationUnit.DAYS
    calendar: WorkCalendarEngine = field(default_factory=WorkCalendarEngine, repr=False)
    # tolerance for both criticality and day rounding
    epsilon: float = CRITICAL_EPSILON

    def __getitem__(self, task_id: str) -> CPMResult:
        return self.results[task_id]

    def __contains__(self, task_id: object) -> bool:
        return task_id in self.results

    def __len__(self) -> int:
        return len(self.results)

    def critical_path(self) -> List[str]:
        """Critical tasks ordered by earliest start, then id."""
        critical = [self.results[task_id] for task_id in self.critical_task_ids]
        critical.sort(key=lambda r: (r.earliest_start, r.task_id))
        return [r.task_id for r in critical]

    def project_duration(self) -> float:
        if not self.results:
            return 0.0
        earliest = min(r.earliest_start for r in self.results.values())
        return self.project_finish - earliest

    def task_dates(self, task_id: str) -> TaskScheduleDates:
        if self.project_start is None:
            raise ValidationError(
                "Calendar dates need a project start date.",
                code="SCHEDULE_NO_START_DATE",
            )
        info = self.results.get(task_id)
        if info is None:
            raise UnknownTaskReferenceError(task_id)
        return TaskScheduleDates(
            task_id=task_id,
            early_start=self._start_date(info.earliest_start),
            early_finish=self._finish_date(info.earliest_start, info.earliest_finish),
            late_start=self._start_date(info.latest_start),
            late_finish=self._finish_date(info.latest_start, info.latest_finish),
        )

    def _in_days(self, offset: float) -> float:
        if self.duration_unit == DurationUnit.HOURS:
            return self.calendar.hours_to_days(offset)
        return offset

    def _start_date(self, start: float) -> date:
        days = math.floor(self._in_days(start) + self.epsilon)
        return self.calendar.add_working_days(self.project_start, days)

    def _finish_date(self, start: float, finish: float) -> date:
        # Finish offsets are exclusive; the task's last day is the one before.
        if finish - start <= self.epsilon:
            return self._start_date(start)
        days = math.ceil(self._in_days(finish) - self.epsilon) - 1
        return self.calendar.add_working_days(self.project_start, days)


__all__ = ["CPMResult", "TaskScheduleDates", "ScheduleRequest", "ScheduleResult"]
