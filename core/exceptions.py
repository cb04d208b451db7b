# core/exceptions.py
from __future__ import annotations

from typing import Any, Sequence


class DomainError(Exception):
    """Base class for domain-level errors."""
    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__
        # set by batch runs to the key of the failing project
        self.project_key: Any = None


class ValidationError(DomainError):
    """Raised when data is invalid or violates constraints."""


class BusinessRuleError(DomainError):
    """Raised when business rules are violated (e.g., circular dependencies)."""


class CyclicDependencyError(BusinessRuleError):
    """Raised when the dependency graph is not acyclic."""

    def __init__(self, cycle: Sequence[str], message: str | None = None):
        self.cycle: list[str] = list(cycle)
        if message is None:
            if self.cycle:
                message = "Circular dependency detected: " + " -> ".join(self.cycle)
            else:
                message = "Circular dependency detected."
        super().__init__(message, code="SCHEDULE_CYCLE")


class UnknownTaskReferenceError(ValidationError):
    """Raised when a dependency (or chain) names a task that is not in the task set."""

    def __init__(self, task_id: str, *, dependency: Any = None, message: str | None = None):
        self.task_id = task_id
        self.dependency = dependency
        if message is None:
            message = f"Unknown task referenced: {task_id!r}"
            if dependency is not None:
                message += (
                    f" (dependency {dependency.predecessor_task_id!r} -> "
                    f"{dependency.successor_task_id!r})"
                )
        super().__init__(message, code="UNKNOWN_TASK")


class UnknownResourceError(ValidationError):
    """Raised when an allocation names a resource with no declared capacity."""

    def __init__(self, resource_id: str):
        self.resource_id = resource_id
        super().__init__(
            f"No capacity declared for resource {resource_id!r}.",
            code="UNKNOWN_RESOURCE",
        )


class InvalidDurationError(ValidationError):
    def __init__(self, task_id: str, duration: float):
        self.task_id = task_id
        self.duration = duration
        super().__init__(
            f"Task {task_id!r} has a negative duration ({duration}).",
            code="INVALID_DURATION",
        )


class InvalidEstimateError(ValidationError):
    """Raised when a three-point estimate has a negative component."""

    def __init__(self, estimate: Any, message: str = "All estimates must be non-negative."):
        self.estimate = estimate
        super().__init__(message, code="INVALID_ESTIMATE")


class InvalidEstimateOrderingError(ValidationError):
    """Raised when a three-point estimate violates optimistic <= most likely <= pessimistic."""

    def __init__(self, estimate: Any):
        self.estimate = estimate
        super().__init__(
            "Estimates must satisfy: optimistic <= most likely <= pessimistic "
            f"(got {estimate.optimistic}, {estimate.most_likely}, {estimate.pessimistic}).",
            code="INVALID_ESTIMATE_ORDERING",
        )


class InvalidArgumentError(ValidationError):
    """Raised when a utility function receives an argument it cannot handle."""


__all__ = [
    "DomainError",
    "ValidationError",
    "BusinessRuleError",
    "CyclicDependencyError",
    "UnknownTaskReferenceError",
    "UnknownResourceError",
    "InvalidDurationError",
    "InvalidEstimateError",
    "InvalidEstimateOrderingError",
    "InvalidArgumentError",
]
