"""Day-by-day aggregation of team assignments for the team calendar."""

from dataclasses import dataclass
from dataclasses import field
from datetime import date
from datetime import timedelta
from typing import Any
from typing import Dict
from typing import List
from typing import Mapping
from typing import Optional
from typing import Sequence

# Longest window a single calendar request may cover
MAX_CALENDAR_DAYS = 366


@dataclass
class CalendarDay:
    """Assignments covering one calendar day."""

    day: date
    assignments: List[Dict[str, Any]] = field(default_factory=list)


def iter_days(start: date, end: date):
    """Yield every day in the closed range ``[start, end]``."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def validate_calendar_range(start: date, end: date) -> None:
    """Raise ValueError for a reversed window or one longer than ``MAX_CALENDAR_DAYS``."""
    if end < start:
        raise ValueError("End date cannot be before start date")
    if (end - start).days + 1 > MAX_CALENDAR_DAYS:
        raise ValueError(f"Calendar range cannot exceed {MAX_CALENDAR_DAYS} days")


def build_calendar(
    assignments: Sequence[Mapping[str, Any]],
    start: date,
    end: date,
) -> List[CalendarDay]:
    """
    Group assignments by the days they cover.

    Each assignment mapping must carry ``start_date`` and ``end_date``; it is copied
    unchanged into every day of ``[start, end]`` it covers.

    Raises
    ------
    ValueError
        If ``end`` is before ``start`` or the window exceeds ``MAX_CALENDAR_DAYS``
    """
    validate_calendar_range(start, end)

    days = {day: CalendarDay(day=day) for day in iter_days(start, end)}
    for assignment in assignments:
        first = max(assignment["start_date"], start)
        last = min(assignment["end_date"], end)
        for day in iter_days(first, last):
            days[day].assignments.append(dict(assignment))

    return list(days.values())


def count_active_on(assignments: Sequence[Mapping[str, Any]], day: Optional[date] = None) -> int:
    """Count assignments whose range covers ``day`` (defaults to today)."""
    day = day or date.today()
    return sum(1 for a in assignments if a["start_date"] <= day <= a["end_date"])
