from .engine import (
    WorkCalendarEngine,
    add_working_days,
    subtract_working_days,
    days_to_hours,
    hours_to_days,
    working_days_between,
)

__all__ = [
    "WorkCalendarEngine",
    "add_working_days",
    "subtract_working_days",
    "working_days_between",
    "hours_to_days",
    "days_to_hours",
]
