from datetime import date

import pytest

from core.exceptions import CyclicDependencyError
from core.services.scheduling import ScheduleRequest


def _chain_request(make_task, make_dep, prefix, lengths, project_start=None):
    tasks = [make_task(f"{prefix}{i}", d) for i, d in enumerate(lengths)]
    deps = [make_dep(f"{prefix}{i}", f"{prefix}{i + 1}") for i in range(len(lengths) - 1)]
    return ScheduleRequest(tasks=tasks, dependencies=deps, project_start=project_start)


def test_calculate_many_matches_sequential_runs(services, make_task, make_dep):
    sched = services["scheduling_engine"]
    projects = {
        f"p{n}": _chain_request(make_task, make_dep, f"p{n}-", [1 + n, 2, 3])
        for n in range(8)
    }

    parallel = sched.calculate_many(projects, max_workers=4)

    assert set(parallel) == set(projects)
    for key, request in projects.items():
        sequential = sched.calculate_request(request)
        assert parallel[key].results == sequential.results
        assert parallel[key].project_finish == pytest.approx(sequential.project_finish)


def test_calculate_many_keeps_dated_requests(services, make_task, make_dep):
    sched = services["scheduling_engine"]
    projects = {
        "dated": _chain_request(make_task, make_dep, "d", [2, 1], project_start=date(2024, 1, 5)),
        "relative": _chain_request(make_task, make_dep, "r", [2, 1]),
    }
    result = sched.calculate_many(projects)
    assert result["dated"].project_start == date(2024, 1, 5)
    assert result["relative"].project_start is None


def test_calculate_many_reports_failing_project(services, make_task, make_dep):
    sched = services["scheduling_engine"]
    cyclic = ScheduleRequest(
        tasks=[make_task("A", 1), make_task("B", 1)],
        dependencies=[make_dep("A", "B"), make_dep("B", "A")],
    )
    projects = {
        "ok": _chain_request(make_task, make_dep, "ok", [1, 1]),
        "bad": cyclic,
    }

    with pytest.raises(CyclicDependencyError) as exc_info:
        sched.calculate_many(projects, max_workers=2)

    assert exc_info.value.project_key == "bad"
    assert str(exc_info.value) == "Circular dependency detected: A -> B -> A"
    assert exc_info.value.cycle == ["A", "B", "A"]


def test_calculate_many_empty(services):
    assert services["scheduling_engine"].calculate_many({}) == {}
