import pytest

from core.services.scheduling import build_dependency_graph
from core.services.scheduling.critical_path import critical_chains


def test_parallel_critical_branches_yield_two_chains(services, diamond):
    tasks, deps = diamond
    schedule = services["scheduling_engine"].calculate(tasks, deps)

    assert schedule.critical_chains == [["S", "X", "E"], ["S", "Y", "E"]]
    assert schedule.critical_path() == ["S", "X", "Y", "E"]


def test_disjoint_zero_slack_chains(services, make_task, make_dep):
    tasks = [make_task("A", 3), make_task("B", 3), make_task("C", 2), make_task("D", 2)]
    deps = [make_dep("A", "C"), make_dep("B", "D")]
    schedule = services["scheduling_engine"].calculate(tasks, deps)

    assert schedule.critical_task_ids == ["A", "B", "C", "D"]
    assert schedule.critical_chains == [["A", "C"], ["B", "D"]]


def test_non_driving_edge_between_critical_tasks_is_not_followed(services, make_task, make_dep):
    tasks = [make_task("A", 3), make_task("B", 2)]
    deps = [make_dep("A", "B", "FS"), make_dep("A", "B", "SS")]
    schedule = services["scheduling_engine"].calculate(tasks, deps)

    assert schedule.critical_chains == [["A", "B"]]


def test_chain_ignores_non_critical_side_branch(services, make_task, make_dep):
    tasks = [make_task("A", 2), make_task("B", 5), make_task("C", 1)]
    deps = [make_dep("A", "C"), make_dep("B", "C")]
    schedule = services["scheduling_engine"].calculate(tasks, deps)

    assert schedule.critical_chains == [["B", "C"]]


def test_chain_enumeration_is_capped(services, diamond):
    tasks, deps = diamond
    schedule = services["scheduling_engine"].calculate(tasks, deps)
    graph = build_dependency_graph(tasks, deps)

    chains = critical_chains(graph, schedule.results, lambda dep: dep.lag_days, max_chains=1)
    assert chains == [["S", "X", "E"]]


def test_critical_path_orders_by_earliest_start(services, make_task, make_dep):
    tasks = [make_task("Z", 1), make_task("A", 2)]
    schedule = services["scheduling_engine"].calculate(tasks, [make_dep("Z", "A")])
    assert schedule.critical_path() == ["Z", "A"]
    assert schedule.project_finish == pytest.approx(3)
