"""Scheduling rules: project status, assignment overlap and the team calendar."""

from filmops_api.scheduling.calendar import build_calendar
from filmops_api.scheduling.overlap import has_overlap
from filmops_api.scheduling.overlap import ranges_overlap
from filmops_api.scheduling.project_status import calculate_status

__all__ = [
    "build_calendar",
    "calculate_status",
    "has_overlap",
    "ranges_overlap",
]
