from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Mapping

from core.exceptions import ValidationError
from core.models import (
    DependencyType,
    DurationUnit,
    PERTEstimate,
    PERTResult,
    Resource,
    ResourceAllocation,
    Task,
    TaskDependency,
)
from core.services.estimation import aggregate_pert, calculate_pert
from core.services.resource import ResourceConflict, detect_resource_conflicts
from core.services.scheduling import ScheduleResult, SchedulingEngine
from core.services.work_calendar import WorkCalendarEngine
from infra.config import EngineSettings, load_engine_settings
from infra.operational_support import bind_trace_id

logger = logging.getLogger(__name__)


def _parse_date(value: Any) -> date | None:
    if value in (None, ""):
        return None
    # datetime is a date subclass; drop the time part before comparing with plain dates
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError as exc:
            raise ValidationError(f"Invalid date value: {value!r}", code="RECORD_INVALID_DATE") from exc
    raise ValidationError(f"Unsupported date value: {value!r}", code="RECORD_INVALID_DATE")


def _parse_float(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number, got {value!r}", code="RECORD_INVALID_NUMBER")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(
            f"{field_name} must be a number, got {value!r}",
            code="RECORD_INVALID_NUMBER",
        ) from exc


def _as_dependency_type(value: Any) -> DependencyType:
    if value in (None, ""):
        return DependencyType.FINISH_TO_START
    try:
        return DependencyType.parse(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown dependency type: {value!r}", code="RECORD_INVALID_TYPE") from exc


def _required(record: Mapping[str, Any], key: str) -> Any:
    value = record.get(key)
    if value in (None, ""):
        raise ValidationError(f"Record is missing {key!r}: {dict(record)!r}", code="RECORD_MISSING_FIELD")
    return value


def _required_float(record: Mapping[str, Any], key: str) -> float:
    return _parse_float(_required(record, key), key)


def task_from_record(record: Mapping[str, Any]) -> Task:
    return Task(
        id=str(_required(record, "id")),
        duration=_required_float(record, "duration"),
        start_date=_parse_date(record.get("start_date")),
        name=str(record.get("name") or ""),
    )


def dependency_from_record(record: Mapping[str, Any]) -> TaskDependency:
    lag = record.get("lag_days")
    return TaskDependency(
        predecessor_task_id=str(_required(record, "predecessor_id")),
        successor_task_id=str(_required(record, "successor_id")),
        dependency_type=_as_dependency_type(record.get("type")),
        lag_days=0.0 if lag in (None, "") else _parse_float(lag, "lag_days"),
        id=str(record.get("id") or ""),
    )


def allocation_from_record(record: Mapping[str, Any]) -> ResourceAllocation:
    return ResourceAllocation(
        resource_id=str(_required(record, "resource_id")),
        task_id=str(_required(record, "task_id")),
        start_date=_parse_date(_required(record, "start_date")),
        end_date=_parse_date(_required(record, "end_date")),
        hours_per_day=_required_float(record, "hours_per_day"),
    )


def resource_from_record(record: Mapping[str, Any]) -> Resource:
    return Resource(
        id=str(_required(record, "id")),
        name=str(record.get("name") or ""),
        available_hours_per_day=_required_float(record, "available_hours_per_day"),
    )


def estimate_from_record(record: Mapping[str, Any]) -> PERTEstimate:
    return PERTEstimate(
        optimistic=_required_float(record, "optimistic"),
        most_likely=_required_float(record, "most_likely"),
        pessimistic=_required_float(record, "pessimistic"),
    )


@dataclass(frozen=True)
class ServiceGraph:
    settings: EngineSettings
    work_calendar_engine: WorkCalendarEngine
    scheduling_engine: SchedulingEngine


def build_services(
    settings: EngineSettings | None = None,
    duration_unit: DurationUnit = DurationUnit.DAYS,
) -> ServiceGraph:
    settings = settings or load_engine_settings()
    calendar = WorkCalendarEngine()
    engine = SchedulingEngine(
        calendar=calendar,
        duration_unit=duration_unit,
        epsilon=settings.critical_epsilon,
        max_workers=settings.max_workers,
    )
    return ServiceGraph(settings=settings, work_calendar_engine=calendar, scheduling_engine=engine)


def schedule_from_records(
    services: ServiceGraph,
    task_records: Iterable[Mapping[str, Any]],
    dependency_records: Iterable[Mapping[str, Any]] = (),
    project_start: Any = None,
    trace_id: str | None = None,
) -> ScheduleResult:
    with bind_trace_id(trace_id) as bound:
        tasks = [task_from_record(r) for r in task_records]
        deps = [dependency_from_record(r) for r in dependency_records]
        logger.info("Scheduling %s tasks / %s dependencies (trace %s)", len(tasks), len(deps), bound)
        return services.scheduling_engine.calculate(tasks, deps, _parse_date(project_start))


def conflicts_from_records(
    services: ServiceGraph,
    resource_records: Iterable[Mapping[str, Any]],
    allocation_records: Iterable[Mapping[str, Any]],
    working_days_only: bool = False,
    trace_id: str | None = None,
) -> list[ResourceConflict]:
    with bind_trace_id(trace_id):
        resources = [resource_from_record(r) for r in resource_records]
        allocations = [allocation_from_record(r) for r in allocation_records]
        return detect_resource_conflicts(
            resources,
            allocations,
            calendar=services.work_calendar_engine,
            working_days_only=working_days_only,
            max_workers=services.settings.max_workers,
        )


def pert_from_records(
    estimate_records: Iterable[Mapping[str, Any]],
    trace_id: str | None = None,
) -> tuple[dict[str, PERTResult], PERTResult]:
    """Per-task PERT results keyed by `task_id`, plus their independent total."""
    with bind_trace_id(trace_id):
        results: dict[str, PERTResult] = {}
        for record in estimate_records:
            task_id = str(_required(record, "task_id"))
            if task_id in results:
                raise ValidationError(f"Duplicate estimate for task {task_id!r}", code="RECORD_DUPLICATE_ESTIMATE")
            results[task_id] = calculate_pert(estimate_from_record(record))
        total = aggregate_pert(results.values())
        logger.info("PERT computed for %s tasks, expected total %.3f", len(results), total.expected)
        return results, total


__all__ = [
    "ServiceGraph",
    "build_services",
    "task_from_record",
    "dependency_from_record",
    "allocation_from_record",
    "resource_from_record",
    "estimate_from_record",
    "schedule_from_records",
    "conflicts_from_records",
    "pert_from_records",
]
