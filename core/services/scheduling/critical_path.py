from __future__ import annotations

import logging
from typing import Callable, Dict, List

from core.config import CRITICAL_EPSILON
from core.models import TaskDependency
from core.services.scheduling.constraints import successor_start_lower_bound
from core.services.scheduling.graph import DependencyGraph
from core.services.scheduling.models import CPMResult

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHAINS = 100


def critical_task_ids(results: Dict[str, CPMResult], topo_order: List[str]) -> List[str]:
    return [task_id for task_id in topo_order if results[task_id].is_critical]


def critical_chains(
    graph: DependencyGraph,
    results: Dict[str, CPMResult],
    lag_of: Callable[[TaskDependency], float],
    epsilon: float = CRITICAL_EPSILON,
    max_chains: int = DEFAULT_MAX_CHAINS,
) -> List[List[str]]:
    """
    Ordered zero-slack chains.

    Only driving critical-to-critical edges are followed: the edge's bound on
    the successor's start must equal that start within epsilon. Several
    parallel chains can coexist; at most `max_chains` are returned.
    """

    def driving(dep: TaskDependency) -> bool:
        pred = results[dep.predecessor_task_id]
        succ = results[dep.successor_task_id]
        if not (pred.is_critical and succ.is_critical):
            return False
        bound = successor_start_lower_bound(
            dep.dependency_type,
            pred.earliest_start,
            pred.earliest_finish,
            succ.earliest_finish - succ.earliest_start,
            lag_of(dep),
        )
        return abs(bound - succ.earliest_start) <= epsilon

    next_ids: Dict[str, List[str]] = {}
    has_driver: set[str] = set()
    for task_id in graph.topo_order:
        for dep in graph.successors(task_id):
            if driving(dep):
                next_ids.setdefault(task_id, []).append(dep.successor_task_id)
                has_driver.add(dep.successor_task_id)

    heads = [
        task_id
        for task_id in graph.topo_order
        if results[task_id].is_critical and task_id not in has_driver
    ]

    chains: List[List[str]] = []
    for head in heads:
        stack: List[List[str]] = [[head]]
        while stack:
            path = stack.pop()
            followers = sorted(set(next_ids.get(path[-1], [])), reverse=True)
            if not followers:
                chains.append(path)
                if len(chains) >= max_chains:
                    logger.warning("Critical chain enumeration stopped at %s chains", max_chains)
                    return chains
                continue
            for succ_id in followers:
                stack.append(path + [succ_id])
    return chains


__all__ = ["critical_task_ids", "critical_chains", "DEFAULT_MAX_CHAINS"]
