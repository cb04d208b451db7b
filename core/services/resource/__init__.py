from .conflicts import (
    allocations_from_schedule,
    daily_resource_load,
    detect_resource_conflicts,
    resource_utilization,
)
from .models import DailyResourceLoad, ResourceConflict, ResourceUtilization

__all__ = [
    "detect_resource_conflicts",
    "daily_resource_load",
    "allocations_from_schedule",
    "resource_utilization",
    "ResourceConflict",
    "DailyResourceLoad",
    "ResourceUtilization",
]
