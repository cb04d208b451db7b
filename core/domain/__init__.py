from core.domain.enums import DependencyType, DurationUnit
from core.domain.estimate import ConfidenceInterval, PERTEstimate, PERTResult
from core.domain.identifiers import generate_id
from core.domain.resource import Resource, ResourceAllocation
from core.domain.task import Task, TaskAssignment, TaskDependency

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
