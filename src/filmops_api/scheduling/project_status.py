"""Project status derived from start/end dates, honouring manual overrides."""

from datetime import date
from datetime import datetime
from typing import Optional
from typing import Union

from filmops_api.enums import MANUAL_OVERRIDE_STATUSES
from filmops_api.enums import ProjectStatus

DateLike = Union[date, datetime, str, None]


def to_date(value: DateLike) -> Optional[date]:
    """
    Reduce a date-like value to a calendar date.

    Accepts ``date``, ``datetime`` (time of day dropped) and ISO 8601 strings
    (``2024-01-10`` or ``2024-01-10T09:30:00``). Empty strings and ``None`` map to ``None``.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    value = value.strip()
    if not value:
        return None
    if len(value) > 10:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return date.fromisoformat(value)


def calculate_status(
    start_date: DateLike,
    end_date: DateLike,
    current_status: Optional[str] = None,
    today: Optional[date] = None,
) -> str:
    """
    Calculate a project's effective status.

    Parameters
    ----------
    start_date : date | datetime | str | None
        Project start date
    end_date : date | datetime | str | None
        Project end date
    current_status : str, optional
        Status currently stored or requested; Cancelled and On Hold are kept as-is
    today : date, optional
        Reference day, defaults to the current local date

    Returns
    -------
    str
        One of Planning, Planned, Active, Completed, or the manual override
    """
    if current_status in MANUAL_OVERRIDE_STATUSES:
        return current_status

    today = today or date.today()
    start = to_date(start_date)
    end = to_date(end_date)

    if start is None and end is None:
        return ProjectStatus.PLANNING.value

    if end is not None and end < today:
        return ProjectStatus.COMPLETED.value

    if start is not None and start > today:
        return ProjectStatus.PLANNED.value

    if start is not None and start <= today and (end is None or end >= today):
        return ProjectStatus.ACTIVE.value

    if start is None and end is not None and end > today:
        return ProjectStatus.PLANNED.value

    if start is not None and start <= today and end is None:
        return ProjectStatus.ACTIVE.value

    return ProjectStatus.PLANNING.value
