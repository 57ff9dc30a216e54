"""
Project Team API Routes

Team assignments on a project, the project role vocabulary and the team calendar.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Query
from fastapi import status
from loguru import logger

from filmops_api.db.pool import DatabasePool
from filmops_api.db.repository_team import ProjectRoleRepository
from filmops_api.db.repository_team import TeamRepository
from filmops_api.dependencies import ProjectScope
from filmops_api.dependencies import ensure_project_access
from filmops_api.dependencies import get_current_user
from filmops_api.dependencies import get_db_pool
from filmops_api.dependencies import get_project_scope
from filmops_api.scheduling.calendar import build_calendar
from filmops_api.scheduling.calendar import count_active_on
from filmops_api.scheduling.calendar import validate_calendar_range
from filmops_api.schemas.schemas import AssignmentOut
from filmops_api.schemas.schemas import AssignmentResponse
from filmops_api.schemas.schemas import CalendarData
from filmops_api.schemas.schemas import CalendarResponse
from filmops_api.schemas.schemas import ErrorResponse
from filmops_api.schemas.schemas import MessageResponse
from filmops_api.schemas.schemas import ProjectRoleListResponse
from filmops_api.schemas.schemas import TeamAssignmentCreate
from filmops_api.schemas.schemas import TeamAssignmentUpdate
from filmops_api.schemas.schemas import TeamListResponse

ROUTER_TEAM = APIRouter(tags=["Team"], dependencies=[Depends(get_current_user)])

ASSIGNMENT_NOT_FOUND = "Project team member assignment not found"


@ROUTER_TEAM.get(
    "/projects/{project_id}/team",
    response_model=TeamListResponse,
    responses={status.HTTP_403_FORBIDDEN: {"model": ErrorResponse}},
)
async def list_project_team(
    project_id: int,
    scope: ProjectScope = Depends(get_project_scope),
    db_pool: DatabasePool = Depends(get_db_pool),
):
    """Team members ordered by assignment start date, then first and last name."""
    ensure_project_access(scope, project_id)
    rows = await TeamRepository(db_pool.pool).list_for_project(project_id)
    return {"success": True, "data": rows}


@ROUTER_TEAM.post(
    "/projects/{project_id}/team",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Missing field, reversed dates, overlapping or exclusive-usage conflict",
        },
        status.HTTP_403_FORBIDDEN: {"model": ErrorResponse},
    },
)
async def add_team_member(
    project_id: int,
    body: TeamAssignmentCreate,
    scope: ProjectScope = Depends(get_project_scope),
    db_pool: DatabasePool = Depends(get_db_pool),
):
    """
    Assign a user to the project for a closed date range.

    Rejected with 400 when the user already has an overlapping assignment on this
    project, or is marked for exclusive usage and is booked on another project.
    """
    ensure_project_access(scope, project_id)

    row = await TeamRepository(db_pool.pool).create_assignment(
        project_id=project_id,
        user_id=body.user_id,
        project_role_id=body.project_role_id,
        start_date=body.start_date,
        end_date=body.end_date,
        notes=body.notes,
    )
    return AssignmentResponse(data=AssignmentOut(**row))


@ROUTER_TEAM.put(
    "/projects/{project_id}/team/{assignment_id}",
    response_model=AssignmentResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def update_team_member(
    project_id: int,
    assignment_id: int,
    body: TeamAssignmentUpdate,
    scope: ProjectScope = Depends(get_project_scope),
    db_pool: DatabasePool = Depends(get_db_pool),
):
    """Change role, dates or notes of an assignment. The assignment itself is ignored by the overlap check."""
    ensure_project_access(scope, project_id)

    row = await TeamRepository(db_pool.pool).update_assignment(
        project_id=project_id,
        assignment_id=assignment_id,
        project_role_id=body.project_role_id,
        start_date=body.start_date,
        end_date=body.end_date,
        notes=body.notes,
    )
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ASSIGNMENT_NOT_FOUND)
    return AssignmentResponse(data=AssignmentOut(**row))


@ROUTER_TEAM.delete(
    "/projects/{project_id}/team/{assignment_id}",
    response_model=MessageResponse,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def remove_team_member(
    project_id: int,
    assignment_id: int,
    scope: ProjectScope = Depends(get_project_scope),
    db_pool: DatabasePool = Depends(get_db_pool),
):
    ensure_project_access(scope, project_id)

    deleted = await TeamRepository(db_pool.pool).delete_assignment(project_id, assignment_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ASSIGNMENT_NOT_FOUND)

    logger.info("Team member removed", project_id=project_id, assignment_id=assignment_id)
    return MessageResponse(message="Team member removed from project successfully")


@ROUTER_TEAM.get("/project-roles", response_model=ProjectRoleListResponse)
async def list_project_roles(db_pool: DatabasePool = Depends(get_db_pool)):
    rows = await ProjectRoleRepository(db_pool.pool).list_roles()
    return {"success": True, "data": rows}


@ROUTER_TEAM.get(
    "/team/calendar",
    response_model=CalendarResponse,
    summary="Team assignments grouped by day",
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def team_calendar(
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    user_id: Optional[int] = Query(None, alias="userId"),
    role_name: Optional[str] = Query(None, alias="roleName"),
    scope: ProjectScope = Depends(get_project_scope),
    db_pool: DatabasePool = Depends(get_db_pool),
):
    """
    For every day in ``[startDate, endDate]`` (at most 366 days), the assignments covering it.

    Only projects visible to the caller are included. ``userId`` and ``roleName`` narrow
    the days; ``activeToday`` counts every visible assignment covering today, whatever
    the window and filters.
    """
    try:
        validate_calendar_range(start_date, end_date)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    repo = TeamRepository(db_pool.pool)
    assignments = await repo.list_in_range(
        start_date, end_date, scope.filter_ids, user_id=user_id, role_name=role_name
    )
    days = build_calendar(assignments, start_date, end_date)

    today = date.today()
    active = await repo.list_in_range(today, today, scope.filter_ids)

    data = CalendarData(
        start_date=start_date,
        end_date=end_date,
        active_today=count_active_on(active, today),
        days=[{"day": day.day, "assignments": day.assignments} for day in days],
    )
    return CalendarResponse(data=data)
