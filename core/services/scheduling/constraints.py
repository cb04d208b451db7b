from __future__ import annotations

from core.exceptions import ValidationError
from core.models import DependencyType


def successor_start_lower_bound(
    dependency_type: DependencyType,
    pred_es: float,
    pred_ef: float,
    succ_duration: float,
    lag: float,
) -> float:
    """Earliest start the edge allows for its successor."""
    if dependency_type == DependencyType.FINISH_TO_START:
        return pred_ef + lag
    if dependency_type == DependencyType.START_TO_START:
        return pred_es + lag
    if dependency_type == DependencyType.FINISH_TO_FINISH:
        # EF_s >= EF_p + lag
        return pred_ef + lag - succ_duration
    if dependency_type == DependencyType.START_TO_FINISH:
        # EF_s >= ES_p + lag
        return pred_es + lag - succ_duration
    raise ValidationError(
        f"Unsupported dependency type: {dependency_type!r}",
        code="DEPENDENCY_TYPE_UNSUPPORTED",
    )


def predecessor_finish_upper_bound(
    dependency_type: DependencyType,
    succ_ls: float,
    succ_lf: float,
    pred_duration: float,
    lag: float,
) -> float:
    """Latest finish the edge allows for its predecessor."""
    if dependency_type == DependencyType.FINISH_TO_START:
        return succ_ls - lag
    if dependency_type == DependencyType.START_TO_START:
        # LS_p <= LS_s - lag
        return succ_ls - lag + pred_duration
    if dependency_type == DependencyType.FINISH_TO_FINISH:
        return succ_lf - lag
    if dependency_type == DependencyType.START_TO_FINISH:
        # LS_p <= LF_s - lag
        return succ_lf - lag + pred_duration
    raise ValidationError(
        f"Unsupported dependency type: {dependency_type!r}",
        code="DEPENDENCY_TYPE_UNSUPPORTED",
    )


__all__ = ["successor_start_lower_bound", "predecessor_finish_upper_bound"]
