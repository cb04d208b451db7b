# core/services/work_calendar/engine.py
from __future__ import annotations

import numbers
from datetime import date, timedelta

from core.config import HOURS_PER_WORKDAY, WEEKEND_DAYS
from core.exceptions import InvalidArgumentError


class WorkCalendarEngine:
    """
    Weekend-only working calendar (Mon-Fri, 8h/day).

    Stateless; one instance can be shared by any number of threads.
    """

    hours_per_day: float = HOURS_PER_WORKDAY

    def is_working_day(self, d: date) -> bool:
        return d.weekday() not in WEEKEND_DAYS

    def next_working_day(self, d: date, include_today: bool = True) -> date:
        current = d
        if not include_today:
            current += timedelta(days=1)
        while not self.is_working_day(current):
            current += timedelta(days=1)
        return current

    def add_working_days(self, start: date, working_days: int) -> date:
        """
        Move `working_days` working days away from `start`.

        Zero returns `start` unchanged, even on a weekend. Positive values walk
        forward (Friday + 1 = Monday), negative values walk backward
        (Monday - 1 = Friday).
        """
        steps = _as_whole_days(working_days)
        if steps == 0:
            return start

        direction = timedelta(days=1 if steps > 0 else -1)
        days_remaining = abs(steps)
        current = start
        while days_remaining > 0:
            current += direction
            if self.is_working_day(current):
                days_remaining -= 1
        return current

    def subtract_working_days(self, start: date, working_days: int) -> date:
        return self.add_working_days(start, -_as_whole_days(working_days))

    def working_days_between(self, start: date, end: date) -> int:
        """Working days in [start, end); 0 when end <= start."""
        if end <= start:
            return 0
        full_weeks, rest = divmod((end - start).days, 7)
        count = full_weeks * (7 - len(WEEKEND_DAYS))
        current = start + timedelta(days=full_weeks * 7)
        for _ in range(rest):
            if self.is_working_day(current):
                count += 1
            current += timedelta(days=1)
        return count

    def signed_working_days(self, origin: date, target: date) -> int:
        """Working-day offset of `target` from `origin`, negative when it lies before."""
        if target >= origin:
            return self.working_days_between(origin, target)
        return -self.working_days_between(target, origin)

    def hours_to_days(self, hours: float) -> float:
        return hours / self.hours_per_day

    def days_to_hours(self, days: float) -> float:
        return days * self.hours_per_day


def _as_whole_days(value) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidArgumentError(
            f"Working-day count must be a whole number, got {value!r}.",
            code="CALENDAR_INVALID_DAYS",
        )
    if isinstance(value, numbers.Integral):
        return int(value)
    if not float(value).is_integer():
        raise InvalidArgumentError(
            f"Working-day count must be a whole number, got {value!r}.",
            code="CALENDAR_INVALID_DAYS",
        )
    return int(value)


_default_calendar = WorkCalendarEngine()


def add_working_days(start: date, working_days: int) -> date:
    return _default_calendar.add_working_days(start, working_days)


def subtract_working_days(start: date, working_days: int) -> date:
    return _default_calendar.subtract_working_days(start, working_days)


def working_days_between(start: date, end: date) -> int:
    return _default_calendar.working_days_between(start, end)


def hours_to_days(hours: float) -> float:
    return _default_calendar.hours_to_days(hours)


def days_to_hours(days: float) -> float:
    return _default_calendar.days_to_hours(days)


__all__ = [
    "WorkCalendarEngine",
    "add_working_days",
    "subtract_working_days",
    "working_days_between",
    "hours_to_days",
    "days_to_hours",
]
