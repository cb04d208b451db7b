from __future__ import annotations

import logging
import math
from dataclasses import replace
from statistics import NormalDist
from typing import Iterable, List, Mapping, Sequence

from core.exceptions import (
    InvalidEstimateError,
    InvalidEstimateOrderingError,
    UnknownTaskReferenceError,
)
from core.models import ConfidenceInterval, PERTEstimate, PERTResult, Task

logger = logging.getLogger(__name__)


def calculate_pert(estimate: PERTEstimate) -> PERTResult:
    """
    Three-point estimate for one task.

    Expected = (O + 4M + P) / 6, variance = ((P - O) / 6)^2. Confidence bands
    are expected +/- 1 and 2 standard deviations.
    """
    o, m, p = estimate.optimistic, estimate.most_likely, estimate.pessimistic
    # `not >=` also rejects NaN
    if not (o >= 0 and m >= 0 and p >= 0):
        raise InvalidEstimateError(estimate)
    if o > m or m > p:
        raise InvalidEstimateOrderingError(estimate)

    expected = (o + 4 * m + p) / 6
    variance = ((p - o) / 6) ** 2
    return _build_result(expected, variance)


def aggregate_pert(results: Iterable[PERTResult]) -> PERTResult:
    """
    Sum of independent PERT results.

    Variances add only because the tasks are assumed independent; correlated
    durations are not modelled. An empty input gives an all-zero result.
    """
    total_expected = 0.0
    total_variance = 0.0
    for result in results:
        total_expected += result.expected
        total_variance += result.variance
    return _build_result(total_expected, total_variance)


def aggregate_chain(
    estimates_by_task: Mapping[str, PERTEstimate],
    chain: Sequence[str],
) -> PERTResult:
    """Aggregate the estimates of the tasks along `chain` (e.g. a critical chain)."""
    results: List[PERTResult] = []
    for task_id in chain:
        estimate = estimates_by_task.get(task_id)
        if estimate is None:
            raise UnknownTaskReferenceError(
                task_id,
                message=f"No PERT estimate for task {task_id!r} in chain.",
            )
        results.append(calculate_pert(estimate))
    return aggregate_pert(results)


def apply_expected_durations(
    tasks: Iterable[Task],
    estimates_by_task: Mapping[str, PERTEstimate],
) -> List[Task]:
    """Copies of `tasks` whose duration is the PERT expected value, where an estimate exists."""
    updated: List[Task] = []
    for task in tasks:
        estimate = estimates_by_task.get(task.id)
        if estimate is None:
            updated.append(task)
            continue
        updated.append(replace(task, duration=calculate_pert(estimate).expected))
    logger.debug("Applied PERT durations to %s tasks", sum(1 for t in updated if t.id in estimates_by_task))
    return updated


def completion_probability(result: PERTResult, target: float) -> float:
    """Normal-approximation probability of finishing within `target`."""
    if result.std_dev <= 0:
        return 1.0 if target >= result.expected else 0.0
    return NormalDist(mu=result.expected, sigma=result.std_dev).cdf(target)


def _build_result(expected: float, variance: float) -> PERTResult:
    std_dev = math.sqrt(variance)
    return PERTResult(
        expected=expected,
        variance=variance,
        std_dev=std_dev,
        confidence_68=ConfidenceInterval(low=expected - std_dev, high=expected + std_dev),
        confidence_95=ConfidenceInterval(low=expected - 2 * std_dev, high=expected + 2 * std_dev),
    )


__all__ = [
    "calculate_pert",
    "aggregate_pert",
    "aggregate_chain",
    "apply_expected_durations",
    "completion_probability",
]
