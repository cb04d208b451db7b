from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from core.exceptions import CyclicDependencyError, UnknownTaskReferenceError, ValidationError
from core.models import Task, TaskDependency

logger = logging.getLogger(__name__)


@dataclass
class DependencyGraph:
    tasks_by_id: Dict[str, Task]
    topo_order: List[str]
    deps_by_successor: Dict[str, List[TaskDependency]] = field(default_factory=dict)
    deps_by_predecessor: Dict[str, List[TaskDependency]] = field(default_factory=dict)

    def predecessors(self, task_id: str) -> List[TaskDependency]:
        return self.deps_by_successor.get(task_id, [])

    def successors(self, task_id: str) -> List[TaskDependency]:
        return self.deps_by_predecessor.get(task_id, [])

    def sources(self) -> List[str]:
        return [task_id for task_id in self.topo_order if not self.predecessors(task_id)]

    def sinks(self) -> List[str]:
        return [task_id for task_id in self.topo_order if not self.successors(task_id)]


def build_dependency_graph(
    tasks: Iterable[Task],
    deps: Iterable[TaskDependency],
) -> DependencyGraph:
    """
    Index tasks and dependencies in both directions and order them topologically.

    Raises ValidationError on duplicate task ids, UnknownTaskReferenceError when
    a dependency names a missing task and CyclicDependencyError when the graph
    is not a DAG.
    """
    tasks_by_id = _index_tasks(tasks)
    deps = list(deps)
    deps_by_successor, deps_by_predecessor = _index_dependencies(tasks_by_id, deps)

    topo_order, residual = _kahn_order(tasks_by_id, deps_by_predecessor, deps_by_successor)
    if residual:
        cycle = _extract_cycle(residual, deps_by_successor)
        logger.warning("Dependency cycle detected: %s", " -> ".join(cycle))
        raise CyclicDependencyError(cycle)

    logger.debug("Dependency graph built: %s tasks, %s dependencies", len(tasks_by_id), len(deps))
    return DependencyGraph(
        tasks_by_id=tasks_by_id,
        topo_order=topo_order,
        deps_by_successor=deps_by_successor,
        deps_by_predecessor=deps_by_predecessor,
    )


def find_cycle(tasks: Iterable[Task], deps: Iterable[TaskDependency]) -> Optional[List[str]]:
    """Non-raising cycle check; returns one cycle (first id repeated at the end) or None."""
    try:
        build_dependency_graph(tasks, deps)
    except CyclicDependencyError as exc:
        return exc.cycle
    return None


def _index_tasks(tasks: Iterable[Task]) -> Dict[str, Task]:
    tasks_by_id: Dict[str, Task] = {}
    for task in tasks:
        if task.id in tasks_by_id:
            raise ValidationError(
                f"Duplicate task id: {task.id!r}",
                code="DUPLICATE_TASK_ID",
            )
        tasks_by_id[task.id] = task
    return tasks_by_id


def _index_dependencies(
    tasks_by_id: Dict[str, Task],
    deps: List[TaskDependency],
) -> tuple[Dict[str, List[TaskDependency]], Dict[str, List[TaskDependency]]]:
    deps_by_successor: Dict[str, List[TaskDependency]] = {}
    deps_by_predecessor: Dict[str, List[TaskDependency]] = {}
    for dep in deps:
        for task_id in (dep.predecessor_task_id, dep.successor_task_id):
            if task_id not in tasks_by_id:
                raise UnknownTaskReferenceError(task_id, dependency=dep)
        deps_by_successor.setdefault(dep.successor_task_id, []).append(dep)
        deps_by_predecessor.setdefault(dep.predecessor_task_id, []).append(dep)
    return deps_by_successor, deps_by_predecessor


def _kahn_order(
    tasks_by_id: Dict[str, Task],
    deps_by_predecessor: Dict[str, List[TaskDependency]],
    deps_by_successor: Dict[str, List[TaskDependency]],
) -> tuple[List[str], set[str]]:
    indegree: Dict[str, int] = {
        task_id: len(deps_by_successor.get(task_id, [])) for task_id in tasks_by_id
    }

    # Min-heap on id keeps the order independent of input ordering.
    heap = [task_id for task_id, degree in indegree.items() if degree == 0]
    heapq.heapify(heap)

    topo_order: List[str] = []
    while heap:
        task_id = heapq.heappop(heap)
        topo_order.append(task_id)
        for dep in deps_by_predecessor.get(task_id, []):
            succ_id = dep.successor_task_id
            indegree[succ_id] -= 1
            if indegree[succ_id] == 0:
                heapq.heappush(heap, succ_id)

    residual = {task_id for task_id, degree in indegree.items() if degree > 0}
    return topo_order, residual


def _extract_cycle(
    residual: set[str],
    deps_by_successor: Dict[str, List[TaskDependency]],
) -> List[str]:
    # Every residual node keeps at least one residual predecessor, so walking
    # predecessors inside the residual set must revisit a node.
    current = min(residual)
    path: List[str] = [current]
    position: Dict[str, int] = {current: 0}
    while True:
        preds = sorted(
            dep.predecessor_task_id
            for dep in deps_by_successor.get(current, [])
            if dep.predecessor_task_id in residual
        )
        pred = preds[0]
        if pred in position:
            cycle = list(reversed(path[position[pred]:]))
            break
        position[pred] = len(path)
        path.append(pred)
        current = pred

    start = cycle.index(min(cycle))
    cycle = cycle[start:] + cycle[:start]
    return cycle + [cycle[0]]


__all__ = ["DependencyGraph", "build_dependency_graph", "find_cycle"]
