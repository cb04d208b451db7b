from .estimation import (
    aggregate_chain,
    aggregate_pert,
    apply_expected_durations,
    calculate_pert,
    completion_probability,
)
from .resource import (
    DailyResourceLoad,
    ResourceConflict,
    ResourceUtilization,
    allocations_from_schedule,
    daily_resource_load,
    detect_resource_conflicts,
    resource_utilization,
)
from .scheduling import CPMResult, ScheduleRequest, ScheduleResult, SchedulingEngine
from .work_calendar import WorkCalendarEngine

__all__ = [
    "WorkCalendarEngine",
    "SchedulingEngine",
    "CPMResult",
    "ScheduleRequest",
    "ScheduleResult",
    "calculate_pert",
    "aggregate_pert",
    "aggregate_chain",
    "apply_expected_durations",
    "completion_probability",
    "detect_resource_conflicts",
    "daily_resource_load",
    "allocations_from_schedule",
    "resource_utilization",
    "ResourceConflict",
    "DailyResourceLoad",
    "ResourceUtilization",
]
