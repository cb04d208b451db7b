from __future__ import annotations

import logging
from typing import Callable, Dict, Mapping

from core.models import TaskDependency
from core.services.scheduling.constraints import (
    predecessor_finish_upper_bound,
    successor_start_lower_bound,
)
from core.services.scheduling.graph import DependencyGraph

logger = logging.getLogger(__name__)

LagFn = Callable[[TaskDependency], float]


def run_forward_pass(
    graph: DependencyGraph,
    start_offsets: Mapping[str, float],
    lag_of: LagFn,
) -> tuple[Dict[str, float], Dict[str, float], float]:
    """
    ES/EF for every task in topological order.

    Tasks without predecessors start at their entry in `start_offsets`
    (default 0). Returns (es, ef, project_finish) where project_finish is the
    max EF over sink tasks.
    """
    es: Dict[str, float] = {}
    ef: Dict[str, float] = {}

    for task_id in graph.topo_order:
        duration = float(graph.tasks_by_id[task_id].duration)
        incoming = graph.predecessors(task_id)
        if not incoming:
            est = float(start_offsets.get(task_id, 0.0))
        else:
            est = max(
                successor_start_lower_bound(
                    dep.dependency_type,
                    es[dep.predecessor_task_id],
                    ef[dep.predecessor_task_id],
                    duration,
                    lag_of(dep),
                )
                for dep in incoming
            )
        es[task_id] = est
        ef[task_id] = est + duration

    sinks = graph.sinks()
    project_finish = max((ef[task_id] for task_id in sinks), default=0.0)
    logger.debug("Forward pass done: %s tasks, project finish %s", len(es), project_finish)
    return es, ef, project_finish


def run_backward_pass(
    graph: DependencyGraph,
    project_finish: float,
    lag_of: LagFn,
) -> tuple[Dict[str, float], Dict[str, float]]:
    ls: Dict[str, float] = {}
    lf: Dict[str, float] = {}

    for task_id in reversed(graph.topo_order):
        duration = float(graph.tasks_by_id[task_id].duration)
        outgoing = graph.successors(task_id)
        if not outgoing:
            lft = project_finish
        else:
            lft = min(
                predecessor_finish_upper_bound(
                    dep.dependency_type,
                    ls[dep.successor_task_id],
                    lf[dep.successor_task_id],
                    duration,
                    lag_of(dep),
                )
                for dep in outgoing
            )
        lf[task_id] = lft
        ls[task_id] = lft - duration

    logger.debug("Backward pass done: %s tasks", len(ls))
    return ls, lf


__all__ = ["run_forward_pass", "run_backward_pass"]
