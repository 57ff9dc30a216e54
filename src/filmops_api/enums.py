"""
Domain Enums

Enum types shared by the scheduling logic, repositories and routes.
Values must match exactly with the strings stored in the database.
"""

from enum import Enum

# ════════════════════════════════════════════════════════════════════════════
# Project Enums
# ════════════════════════════════════════════════════════════════════════════


class ProjectStatus(str, Enum):
    """Project lifecycle status."""

    PLANNING = "Planning"  # No dates yet
    PLANNED = "Planned"  # Starts in the future
    ACTIVE = "Active"  # Running today
    COMPLETED = "Completed"  # Ended before today
    ON_HOLD = "On Hold"  # Manual override
    CANCELLED = "Cancelled"  # Manual override


# Statuses set by staff that date-based calculation must never replace
MANUAL_OVERRIDE_STATUSES = frozenset({ProjectStatus.CANCELLED.value, ProjectStatus.ON_HOLD.value})


# ════════════════════════════════════════════════════════════════════════════
# Permission Enums
# ════════════════════════════════════════════════════════════════════════════


class Permission(str, Enum):
    """Permission keys stored in the JSONB permission map of roles and user groups."""

    VIEW_PROJECTS = "view_projects"  # every project
    VIEW_ASSIGNED_PROJECTS = "view_assigned_projects"  # only projects the user is staffed on
    VIEW_KITS = "view_kits"  # every kit template


class KitSourceType(str, Enum):
    """Origin of a kit template."""

    TEMPLATE = "template"
    PROJECT = "project"
