# tests/conftest.py
import pytest

from core.models import DurationUnit, Task, TaskDependency
from core.services.scheduling import SchedulingEngine
from core.services.work_calendar import WorkCalendarEngine


@pytest.fixture
def services():
    work_calendar_engine = WorkCalendarEngine()
    scheduling_engine = SchedulingEngine(calendar=work_calendar_engine)
    hours_engine = SchedulingEngine(calendar=work_calendar_engine, duration_unit=DurationUnit.HOURS)

    return {
        "work_calendar_engine": work_calendar_engine,
        "scheduling_engine": scheduling_engine,
        "hours_scheduling_engine": hours_engine,
    }


@pytest.fixture
def make_task():
    def _make(task_id, duration, **extra):
        return Task(id=task_id, duration=duration, **extra)

    return _make


@pytest.fixture
def make_dep():
    def _make(pred, succ, dependency_type="FS", lag_days=0.0):
        return TaskDependency.create(pred, succ, dependency_type, lag_days)

    return _make


@pytest.fixture
def diamond(make_task, make_dep):
    """S -> X -> E and S -> Y -> E, both branches equally long, plus a short side task Z."""
    tasks = [
        make_task("S", 1),
        make_task("X", 2),
        make_task("Y", 2),
        make_task("Z", 1),
        make_task("E", 1),
    ]
    deps = [
        make_dep("S", "X"),
        make_dep("S", "Y"),
        make_dep("S", "Z"),
        make_dep("X", "E"),
        make_dep("Y", "E"),
        make_dep("Z", "E"),
    ]
    return tasks, deps
