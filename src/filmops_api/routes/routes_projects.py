"""
Project API Routes

CRUD for projects. Status is calculated from the dates before every write; reads
recalculate it for today and keep the stored value as ``originalStatus``.
"""

from typing import List

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import status
from loguru import logger

from filmops_api.db.pool import DatabasePool
from filmops_api.db.repository_project import ProjectRepository
from filmops_api.dependencies import ProjectScope
from filmops_api.dependencies import ensure_project_access
from filmops_api.dependencies import get_current_user
from filmops_api.dependencies import get_db_pool
from filmops_api.dependencies import get_project_scope
from filmops_api.enums import ProjectStatus
from filmops_api.schemas.schemas import ErrorResponse
from filmops_api.schemas.schemas import MessageResponse
from filmops_api.schemas.schemas import ProjectDetailResponse
from filmops_api.schemas.schemas import ProjectOut
from filmops_api.schemas.schemas import ProjectRequest
from filmops_api.schemas.schemas import ProjectResponse
from filmops_api.schemas.schemas import ProjectWriteOut

ROUTER_PROJECTS = APIRouter(tags=["Projects"], dependencies=[Depends(get_current_user)])

PROJECT_NOT_FOUND = "Project not found"


@ROUTER_PROJECTS.get(
    "/projects",
    response_model=List[ProjectOut],
    summary="List projects visible to the caller",
    responses={status.HTTP_403_FORBIDDEN: {"model": ErrorResponse}},
)
async def list_projects(
    scope: ProjectScope = Depends(get_project_scope),
    db_pool: DatabasePool = Depends(get_db_pool),
):
    """Every project for global viewers, otherwise only the projects the caller is staffed on."""
    rows = await ProjectRepository(db_pool.pool).list_projects(scope.filter_ids)
    logger.debug("Projects listed", count=len(rows), scoped=not scope.all_projects)
    return [ProjectOut.from_row(row) for row in rows]


@ROUTER_PROJECTS.get(
    "/projects/{project_id}",
    response_model=ProjectDetailResponse,
    responses={
        status.HTTP_403_FORBIDDEN: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def get_project(
    project_id: int,
    scope: ProjectScope = Depends(get_project_scope),
    db_pool: DatabasePool = Depends(get_db_pool),
):
    ensure_project_access(scope, project_id)

    row = await ProjectRepository(db_pool.pool).get_project(project_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PROJECT_NOT_FOUND)
    return ProjectDetailResponse(project=ProjectOut.from_row(row))


@ROUTER_PROJECTS.post(
    "/projects",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def create_project(
    body: ProjectRequest,
    db_pool: DatabasePool = Depends(get_db_pool),
):
    """Create a project. Without an explicit status the calculation starts from Planning."""
    fields = body.to_fields(default_status=ProjectStatus.PLANNING.value)
    row = await ProjectRepository(db_pool.pool).create_project(fields)

    logger.info("Project created", project_id=row["id"], status=row["status"])
    return ProjectResponse(project=ProjectWriteOut.from_row(row))


@ROUTER_PROJECTS.put(
    "/projects/{project_id}",
    response_model=ProjectResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def update_project(
    project_id: int,
    body: ProjectRequest,
    db_pool: DatabasePool = Depends(get_db_pool),
):
    """Replace a project's fields. Sending the same body twice leaves the same row."""
    row = await ProjectRepository(db_pool.pool).update_project(project_id, body.to_fields())
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PROJECT_NOT_FOUND)

    logger.info("Project updated", project_id=project_id, status=row["status"])
    return ProjectResponse(project=ProjectWriteOut.from_row(row))


@ROUTER_PROJECTS.delete(
    "/projects/{project_id}",
    response_model=MessageResponse,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def delete_project(
    project_id: int,
    db_pool: DatabasePool = Depends(get_db_pool),
):
    deleted = await ProjectRepository(db_pool.pool).delete_project(project_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PROJECT_NOT_FOUND)

    logger.info("Project deleted", project_id=project_id)
    return MessageResponse(message="Project deleted successfully")
