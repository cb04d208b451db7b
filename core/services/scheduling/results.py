from __future__ import annotations

from typing import Dict, List

from core.config import CRITICAL_EPSILON
from core.services.scheduling.models import CPMResult


def build_cpm_results(
    topo_order: List[str],
    es: Dict[str, float],
    ef: Dict[str, float],
    ls: Dict[str, float],
    lf: Dict[str, float],
    epsilon: float = CRITICAL_EPSILON,
) -> Dict[str, CPMResult]:
    result: Dict[str, CPMResult] = {}
    for task_id in topo_order:
        slack = ls[task_id] - es[task_id]
        result[task_id] = CPMResult(
            task_id=task_id,
            earliest_start=es[task_id],
            earliest_finish=ef[task_id],
            latest_start=ls[task_id],
            latest_finish=lf[task_id],
            slack=slack,
            is_critical=slack <= epsilon,
        )
    return result


__all__ = ["build_cpm_results"]
