"""Closed date-interval overlap checks for team assignments."""

from datetime import date
from typing import Iterable
from typing import Tuple

DateRange = Tuple[date, date]


class InvalidDateRangeError(ValueError):
    """Raised when a range ends before it starts."""


def validate_range(start: date, end: date) -> DateRange:
    """Return ``(start, end)`` or raise if ``end`` is before ``start``."""
    if end < start:
        raise InvalidDateRangeError("End date cannot be before start date")
    return start, end


def ranges_overlap(first: DateRange, second: DateRange) -> bool:
    """
    Check whether two closed intervals share at least one day.

    ``[a, b]`` and ``[c, d]`` overlap iff ``a <= d and c <= b``, so ranges touching on a
    boundary day overlap.
    """
    (a, b), (c, d) = first, second
    return a <= d and c <= b


def has_overlap(existing_ranges: Iterable[DateRange], candidate: DateRange) -> bool:
    """Check whether ``candidate`` overlaps any of ``existing_ranges``."""
    return any(ranges_overlap(existing, candidate) for existing in existing_ranges)
