from __future__ import annotations

import logging
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import date, timedelta
from typing import Dict, Iterable, Iterator, List, Mapping, Sequence, Union

from core.config import CAPACITY_EPSILON
from core.exceptions import InvalidArgumentError, UnknownResourceError, UnknownTaskReferenceError
from core.models import Resource, ResourceAllocation, TaskAssignment
from core.services.resource.models import DailyResourceLoad, ResourceConflict, ResourceUtilization
from core.services.scheduling.models import ScheduleResult
from core.services.work_calendar.engine import WorkCalendarEngine

logger = logging.getLogger(__name__)

CapacityInput = Union[Mapping[str, float], Iterable[Resource]]


def detect_resource_conflicts(
    resources: CapacityInput,
    allocations: Iterable[ResourceAllocation],
    *,
    calendar: WorkCalendarEngine | None = None,
    working_days_only: bool = False,
    max_workers: int | None = None,
) -> list[ResourceConflict]:
    """
    Per-resource, per-day overallocation.

    Every date of an allocation's inclusive interval carries its full
    hours_per_day, weekends included unless `working_days_only` is set. A day
    is a conflict when the summed hours exceed the resource's capacity.
    Resources are independent, so `max_workers > 1` fans them out over a
    thread pool. Output is sorted by (date, resource id).
    """
    capacities = _capacity_map(resources)
    by_resource = _group_by_resource(allocations)

    missing = sorted(rid for rid in by_resource if rid not in capacities)
    if missing:
        raise UnknownResourceError(missing[0])

    calendar = calendar or WorkCalendarEngine()

    def scan(resource_id: str) -> list[ResourceConflict]:
        return _conflicts_for_resource(
            resource_id,
            capacities[resource_id],
            by_resource[resource_id],
            calendar,
            working_days_only,
        )

    resource_ids = sorted(by_resource)
    if max_workers is not None and max_workers > 1 and len(resource_ids) > 1:
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="conflicts") as pool:
            per_resource = list(pool.map(scan, resource_ids))
    else:
        per_resource = [scan(resource_id) for resource_id in resource_ids]

    conflicts = [conflict for chunk in per_resource for conflict in chunk]
    conflicts.sort(key=lambda c: (c.conflict_date, c.resource_id))
    logger.info(
        "Resource conflict scan: %s resources, %s conflicts",
        len(resource_ids),
        len(conflicts),
    )
    return conflicts


def daily_resource_load(
    allocations: Iterable[ResourceAllocation],
    *,
    calendar: WorkCalendarEngine | None = None,
    working_days_only: bool = False,
) -> dict[tuple[str, date], DailyResourceLoad]:
    """Summed hours and contributing tasks for every (resource, day) touched by an allocation."""
    calendar = calendar or WorkCalendarEngine()
    load: dict[tuple[str, date], DailyResourceLoad] = {}
    for allocation in allocations:
        for day in _iter_days(allocation.start_date, allocation.end_date, calendar, working_days_only):
            key = (allocation.resource_id, day)
            row = load.get(key)
            if row is None:
                row = load[key] = DailyResourceLoad(resource_id=allocation.resource_id, day=day)
            row.add(allocation.task_id, float(allocation.hours_per_day))
    return load


def allocations_from_schedule(
    schedule: ScheduleResult,
    assignments: Iterable[TaskAssignment],
) -> list[ResourceAllocation]:
    """Allocations spanning each assigned task's early start to early finish dates."""
    allocations: list[ResourceAllocation] = []
    for assignment in assignments:
        if assignment.task_id not in schedule:
            raise UnknownTaskReferenceError(assignment.task_id)
        dates = schedule.task_dates(assignment.task_id)
        allocations.append(
            ResourceAllocation(
                resource_id=assignment.resource_id,
                task_id=assignment.task_id,
                start_date=dates.early_start,
                end_date=dates.early_finish,
                hours_per_day=assignment.hours_per_day,
            )
        )
    return allocations


def resource_utilization(
    resources: CapacityInput,
    allocations: Iterable[ResourceAllocation],
    start: date,
    end: date,
    *,
    calendar: WorkCalendarEngine | None = None,
    working_days_only: bool = False,
) -> list[ResourceUtilization]:
    """
    Utilization of every resource over the inclusive range [start, end].

    Allocated hours count only the days of each allocation that fall inside
    the range. Available hours are the daily capacity times the days in the
    range (working days only when `working_days_only` is set). Resources
    without allocations are reported at 0%. Sorted by resource id.
    """
    if end < start:
        raise InvalidArgumentError(
            f"Utilization range ends before it starts: {start.isoformat()} > {end.isoformat()}.",
            code="UTILIZATION_INVALID_RANGE",
        )
    capacities = _capacity_map(resources)
    calendar = calendar or WorkCalendarEngine()

    in_range: list[ResourceAllocation] = []
    for allocation in allocations:
        if allocation.resource_id not in capacities:
            raise UnknownResourceError(allocation.resource_id)
        if allocation.end_date < start or allocation.start_date > end:
            continue
        in_range.append(
            replace(
                allocation,
                start_date=max(allocation.start_date, start),
                end_date=min(allocation.end_date, end),
            )
        )

    load = daily_resource_load(in_range, calendar=calendar, working_days_only=working_days_only)
    hours: Dict[str, float] = defaultdict(float)
    task_ids: Dict[str, List[str]] = defaultdict(list)
    for (resource_id, _day), row in sorted(load.items(), key=lambda item: (item[0][1], item[0][0])):
        hours[resource_id] += row.hours
        for task_id in row.task_ids:
            if task_id not in task_ids[resource_id]:
                task_ids[resource_id].append(task_id)

    span_days = sum(1 for _ in _iter_days(start, end, calendar, working_days_only))
    utilization = [
        ResourceUtilization(
            resource_id=resource_id,
            start_date=start,
            end_date=end,
            allocated_hours=hours.get(resource_id, 0.0),
            available_hours=capacity * span_days,
            task_ids=list(task_ids.get(resource_id, [])),
        )
        for resource_id, capacity in sorted(capacities.items())
    ]
    logger.info(
        "Resource utilization %s..%s: %s resources, %s overallocated",
        start,
        end,
        len(utilization),
        sum(1 for u in utilization if u.is_overallocated),
    )
    return utilization


def _conflicts_for_resource(
    resource_id: str,
    available_hours: float,
    allocations: Sequence[ResourceAllocation],
    calendar: WorkCalendarEngine,
    working_days_only: bool,
) -> list[ResourceConflict]:
    load = daily_resource_load(allocations, calendar=calendar, working_days_only=working_days_only)
    conflicts: list[ResourceConflict] = []
    for (_rid, day), row in sorted(load.items(), key=lambda item: item[0][1]):
        if row.hours <= available_hours + CAPACITY_EPSILON:
            continue
        conflicts.append(
            ResourceConflict(
                resource_id=resource_id,
                conflict_date=day,
                allocated_hours=row.hours,
                available_hours=available_hours,
                task_ids=list(row.task_ids),
            )
        )
    if conflicts:
        logger.debug("Resource %s overallocated on %s days", resource_id, len(conflicts))
    return conflicts


def _capacity_map(resources: CapacityInput) -> Dict[str, float]:
    if isinstance(resources, Mapping):
        return {rid: float(hours) for rid, hours in resources.items()}
    return {r.id: float(r.available_hours_per_day) for r in resources}


def _group_by_resource(allocations: Iterable[ResourceAllocation]) -> Dict[str, List[ResourceAllocation]]:
    grouped: Dict[str, List[ResourceAllocation]] = defaultdict(list)
    for allocation in allocations:
        grouped[allocation.resource_id].append(allocation)
    return grouped


def _iter_days(
    start: date,
    end: date,
    calendar: WorkCalendarEngine,
    working_days_only: bool,
) -> Iterator[date]:
    cur = start
    while cur <= end:
        if not working_days_only or calendar.is_working_day(cur):
            yield cur
        cur += timedelta(days=1)


__all__ = [
    "detect_resource_conflicts",
    "daily_resource_load",
    "allocations_from_schedule",
    "resource_utilization",
]
