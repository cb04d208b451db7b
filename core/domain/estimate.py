from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PERTEstimate:
    optimistic: float
    most_likely: float
    pessimistic: float


@dataclass(frozen=True)
class ConfidenceInterval:
    low: float
    high: float


@dataclass(frozen=True)
class PERTResult:
    expected: float
    variance: float
    std_dev: float
    confidence_68: ConfidenceInterval
    confidence_95: ConfidenceInterval


__all__ = ["PERTEstimate", "ConfidenceInterval", "PERTResult"]
