# core/services/scheduling/engine.py
from __future__ import annotations

import contextvars
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Dict, Hashable, Iterable, List, Mapping, Optional

from core.config import CRITICAL_EPSILON
from core.exceptions import DomainError, InvalidDurationError
from core.models import DurationUnit, Task, TaskDependency
from core.services.scheduling.critical_path import critical_chains, critical_task_ids
from core.services.scheduling.graph import DependencyGraph, build_dependency_graph
from core.services.scheduling.models import ScheduleRequest, ScheduleResult
from core.services.scheduling.passes import run_backward_pass, run_forward_pass
from core.services.scheduling.results import build_cpm_results
from core.services.work_calendar.engine import WorkCalendarEngine

logger = logging.getLogger(__name__)


class SchedulingEngine:
    """
    CPM scheduling engine:
    - Forward pass: ES/EF
    - Backward pass: LS/LF
    - FS, FF, SS, SF with lag_days (negative lag = lead)
    - Slack, critical set and critical chains
    - Uses WorkCalendarEngine to place fixed start dates and to convert lag
      when durations are in hours
    """

    def __init__(
        self,
        calendar: WorkCalendarEngine | None = None,
        duration_unit: DurationUnit = DurationUnit.DAYS,
        epsilon: float = CRITICAL_EPSILON,
        max_workers: int | None = None,
    ):
        self._calendar: WorkCalendarEngine = calendar or WorkCalendarEngine()
        self._duration_unit: DurationUnit = duration_unit
        self._epsilon: float = epsilon
        self._max_workers: int | None = max_workers

    @property
    def calendar(self) -> WorkCalendarEngine:
        return self._calendar

    @property
    def duration_unit(self) -> DurationUnit:
        return self._duration_unit

    def calculate(
        self,
        tasks: Iterable[Task],
        dependencies: Iterable[TaskDependency] = (),
        project_start: Optional[date] = None,
    ) -> ScheduleResult:
        """
        Full CPM calculation for one project.

        Validation (durations, unknown references, cycles) happens before any
        pass runs; on failure nothing is returned.
        """
        tasks = list(tasks)
        self._validate_durations(tasks)
        graph = build_dependency_graph(tasks, dependencies)

        anchor = self._resolve_anchor(tasks, project_start)
        start_offsets = self._fixed_start_offsets(graph, anchor)

        es, ef, project_finish = run_forward_pass(graph, start_offsets, self._lag_of)
        ls, lf = run_backward_pass(graph, project_finish, self._lag_of)
        results = build_cpm_results(graph.topo_order, es, ef, ls, lf, epsilon=self._epsilon)

        schedule = ScheduleResult(
            results=results,
            topo_order=list(graph.topo_order),
            project_finish=project_finish,
            critical_task_ids=critical_task_ids(results, graph.topo_order),
            critical_chains=critical_chains(graph, results, self._lag_of, epsilon=self._epsilon),
            project_start=anchor,
            duration_unit=self._duration_unit,
            calendar=self._calendar,
            epsilon=self._epsilon,
        )
        logger.info(
            "Schedule computed: %s tasks, project finish %s, %s critical",
            len(results),
            project_finish,
            len(schedule.critical_task_ids),
        )
        return schedule

    def calculate_request(self, request: ScheduleRequest) -> ScheduleResult:
        return self.calculate(request.tasks, request.dependencies, request.project_start)

    def calculate_many(
        self,
        projects: Mapping[Hashable, ScheduleRequest],
        max_workers: int | None = None,
    ) -> Dict[Hashable, ScheduleResult]:
        """
        Schedule independent projects in parallel.

        Each worker reads only its own request and returns its own result. The
        first failing project aborts the batch; its error is re-raised unchanged
        with the failing key in `project_key`.
        """
        if not projects:
            return {}
        workers = max_workers or self._max_workers
        keys = list(projects.keys())

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="cpm") as pool:
            futures = {
                key: pool.submit(contextvars.copy_context().run, self.calculate_request, projects[key])
                for key in keys
            }
            schedules: Dict[Hashable, ScheduleResult] = {}
            for key in keys:
                try:
                    schedules[key] = futures[key].result()
                except DomainError as exc:
                    logger.error("Scheduling failed for project %s: %s", key, exc)
                    exc.project_key = key
                    raise
        return schedules

    def _lag_of(self, dep: TaskDependency) -> float:
        lag = float(dep.lag_days or 0.0)
        if self._duration_unit == DurationUnit.HOURS:
            return self._calendar.days_to_hours(lag)
        return lag

    def _validate_durations(self, tasks: List[Task]) -> None:
        for task in tasks:
            duration = task.duration
            # `not >=` also rejects NaN
            if duration is None or not float(duration) >= 0:
                raise InvalidDurationError(task.id, duration)

    def _resolve_anchor(self, tasks: List[Task], project_start: Optional[date]) -> Optional[date]:
        if project_start is not None:
            return self._calendar.next_working_day(project_start)
        fixed = [task.start_date for task in tasks if task.start_date is not None]
        if not fixed:
            return None
        return self._calendar.next_working_day(min(fixed))

    def _fixed_start_offsets(self, graph: DependencyGraph, anchor: Optional[date]) -> Dict[str, float]:
        offsets: Dict[str, float] = {}
        if anchor is None:
            return offsets
        for task_id in graph.sources():
            task = graph.tasks_by_id[task_id]
            if task.start_date is None:
                continue
            aligned = self._calendar.next_working_day(task.start_date)
            days = float(self._calendar.signed_working_days(anchor, aligned))
            if self._duration_unit == DurationUnit.HOURS:
                days = self._calendar.days_to_hours(days)
            offsets[task_id] = days
        return offsets


__all__ = ["SchedulingEngine"]
