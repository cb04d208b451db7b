from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Mapping, Optional

from core.models import PERTEstimate
from core.services.resource.models import ResourceConflict
from core.services.scheduling.models import ScheduleResult


@dataclass
class ScheduleBar:
    task_id: str
    name: str
    start: date
    end: date
    is_critical: bool
    late_end: Optional[date] = None
    is_milestone: bool = False


@dataclass
class ScheduleReportContext:
    schedule: ScheduleResult
    task_names: Dict[str, str] = field(default_factory=dict)
    conflicts: List[ResourceConflict] = field(default_factory=list)
    estimates: Optional[Mapping[str, PERTEstimate]] = None

    def name_of(self, task_id: str) -> str:
        return self.task_names.get(task_id) or task_id


def build_schedule_bars(ctx: ScheduleReportContext) -> List[ScheduleBar]:
    """Dated bars for every task; empty when the schedule has no project start."""
    schedule = ctx.schedule
    if schedule.project_start is None:
        return []
    bars: List[ScheduleBar] = []
    for task_id in schedule.topo_order:
        info = schedule[task_id]
        dates = schedule.task_dates(task_id)
        bars.append(
            ScheduleBar(
                task_id=task_id,
                name=ctx.name_of(task_id),
                start=dates.early_start,
                end=dates.early_finish,
                is_critical=info.is_critical,
                late_end=dates.late_finish,
                is_milestone=info.earliest_finish - info.earliest_start <= 0,
            )
        )
    return bars


__all__ = ["ScheduleBar", "ScheduleReportContext", "build_schedule_bars"]
