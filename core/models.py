# core/models.py
# Flat import surface for callers that predate core.domain.
from core.domain import (
    ConfidenceInterval,
    DependencyType,
    DurationUnit,
    PERTEstimate,
    PERTResult,
    Resource,
    ResourceAllocation,
    Task,
    TaskAssignment,
    TaskDependency,
    generate_id,
)

__all__ = [
    "generate_id",
    "DependencyType",
    "DurationUnit",
    "Task",
    "TaskDependency",
    "TaskAssignment",
    "Resource",
    "ResourceAllocation",
    "PERTEstimate",
    "PERTResult",
    "ConfidenceInterval",
]
