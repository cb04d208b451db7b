from .engine import SchedulingEngine
from .graph import DependencyGraph, build_dependency_graph, find_cycle
from .models import CPMResult, ScheduleRequest, ScheduleResult, TaskScheduleDates

__all__ = [
    "SchedulingEngine",
    "DependencyGraph",
    "build_dependency_graph",
    "find_cycle",
    "CPMResult",
    "ScheduleRequest",
    "ScheduleResult",
    "TaskScheduleDates",
]
