import math

import pytest

from core.exceptions import (
    InvalidEstimateError,
    InvalidEstimateOrderingError,
    UnknownTaskReferenceError,
    ValidationError,
)
from core.models import PERTEstimate, Task
from core.services.estimation import (
    aggregate_chain,
    aggregate_pert,
    apply_expected_durations,
    calculate_pert,
    completion_probability,
)


def test_three_point_estimate():
    result = calculate_pert(PERTEstimate(1, 2, 9))

    assert result.expected == pytest.approx(3.0)
    assert result.variance == pytest.approx(16 / 9)
    assert result.std_dev == pytest.approx(4 / 3)
    assert result.confidence_68.low == pytest.approx(1.6667, abs=1e-4)
    assert result.confidence_68.high == pytest.approx(4.3333, abs=1e-4)
    assert result.confidence_95.low == pytest.approx(0.3333, abs=1e-4)
    assert result.confidence_95.high == pytest.approx(5.6667, abs=1e-4)


def test_aggregate_sums_expected_and_variance():
    first = calculate_pert(PERTEstimate(1, 2, 9))
    second = calculate_pert(PERTEstimate(2, 5, 8))
    assert second.expected == pytest.approx(5.0)
    assert second.variance == pytest.approx(1.0)

    total = aggregate_pert([first, second])

    assert total.expected == pytest.approx(8.0)
    assert total.variance == pytest.approx(2.778, abs=1e-3)
    assert total.std_dev == pytest.approx(math.sqrt(25 / 9))
    assert total.confidence_68.low == pytest.approx(8.0 - total.std_dev)
    assert total.confidence_95.high == pytest.approx(8.0 + 2 * total.std_dev)


def test_aggregate_order_does_not_matter():
    results = [calculate_pert(PERTEstimate(o, o + 1, o + 4)) for o in range(5)]
    forward = aggregate_pert(results)
    backward = aggregate_pert(reversed(results))
    assert forward.expected == pytest.approx(backward.expected)
    assert forward.variance == pytest.approx(backward.variance)


def test_aggregate_of_nothing_is_zero():
    total = aggregate_pert([])
    assert total.expected == 0
    assert total.variance == 0
    assert total.std_dev == 0
    assert (total.confidence_68.low, total.confidence_68.high) == (0, 0)
    assert (total.confidence_95.low, total.confidence_95.high) == (0, 0)


@pytest.mark.parametrize(
    "estimate",
    [PERTEstimate(-1, 2, 3), PERTEstimate(0, -2, 3), PERTEstimate(0, 0, -1), PERTEstimate(float("nan"), 1, 2)],
)
def test_negative_component_is_invalid(estimate):
    with pytest.raises(InvalidEstimateError) as exc_info:
        calculate_pert(estimate)
    assert exc_info.value.estimate is estimate
    assert isinstance(exc_info.value, ValidationError)


@pytest.mark.parametrize("estimate", [PERTEstimate(3, 2, 5), PERTEstimate(1, 6, 5)])
def test_misordered_estimate_is_invalid(estimate):
    with pytest.raises(InvalidEstimateOrderingError):
        calculate_pert(estimate)


def test_degenerate_estimate_has_no_spread():
    result = calculate_pert(PERTEstimate(2, 2, 2))
    assert result.expected == pytest.approx(2)
    assert result.std_dev == 0
    assert completion_probability(result, 2) == 1.0
    assert completion_probability(result, 1.9) == 0.0


def test_completion_probability_uses_normal_approximation():
    result = calculate_pert(PERTEstimate(1, 2, 9))
    assert completion_probability(result, result.expected) == pytest.approx(0.5)
    assert completion_probability(result, result.confidence_68.high) == pytest.approx(0.8413, abs=1e-4)


def test_aggregate_chain_and_missing_estimate():
    estimates = {"A": PERTEstimate(1, 2, 9), "B": PERTEstimate(2, 5, 8)}
    total = aggregate_chain(estimates, ["A", "B"])
    assert total.expected == pytest.approx(8.0)

    with pytest.raises(UnknownTaskReferenceError) as exc_info:
        aggregate_chain(estimates, ["A", "C"])
    assert exc_info.value.task_id == "C"


def test_expected_durations_feed_cpm(services, make_dep):
    tasks = [Task(id="A", duration=0), Task(id="B", duration=4)]
    estimates = {"A": PERTEstimate(1, 2, 9)}

    updated = apply_expected_durations(tasks, estimates)
    assert [t.duration for t in updated] == [pytest.approx(3.0), 4]
    assert tasks[0].duration == 0

    schedule = services["scheduling_engine"].calculate(updated, [make_dep("A", "B")])
    assert schedule.project_finish == pytest.approx(7.0)


def test_critical_chain_aggregation(services, diamond):
    tasks, deps = diamond
    estimates = {
        "S": PERTEstimate(1, 1, 1),
        "X": PERTEstimate(1, 2, 3),
        "Y": PERTEstimate(1, 2, 9),
        "Z": PERTEstimate(1, 1, 1),
        "E": PERTEstimate(1, 1, 1),
    }
    schedule = services["scheduling_engine"].calculate(apply_expected_durations(tasks, estimates), deps)

    assert schedule.critical_chains == [["S", "Y", "E"]]
    total = aggregate_chain(estimates, schedule.critical_chains[0])
    assert total.expected == pytest.approx(5.0)
    assert total.variance == pytest.approx(16 / 9)
