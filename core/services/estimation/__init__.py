from .pert import (
    aggregate_chain,
    aggregate_pert,
    apply_expected_durations,
    calculate_pert,
    completion_probability,
)

__all__ = [
    "calculate_pert",
    "aggregate_pert",
    "aggregate_chain",
    "apply_expected_durations",
    "completion_probability",
]
