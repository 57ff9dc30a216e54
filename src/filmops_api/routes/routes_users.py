"""
User API Routes

Staff user management and the exclusive-usage conflict lookup used by the scheduling
screens before a user is booked.
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
from filmops_api.db.repository_team import TeamRepository
from filmops_api.db.repository_user import UserRepository
from filmops_api.dependencies import get_current_user
from filmops_api.dependencies import get_db_pool
from filmops_api.scheduling.overlap import InvalidDateRangeError
from filmops_api.scheduling.overlap import validate_range
from filmops_api.schemas.schemas import ErrorResponse
from filmops_api.schemas.schemas import MessageResponse
from filmops_api.schemas.schemas import UserConflictsResponse
from filmops_api.schemas.schemas import UserListResponse
from filmops_api.schemas.schemas import UserOut
from filmops_api.schemas.schemas import UserRequest
from filmops_api.schemas.schemas import UserResponse

ROUTER_USERS = APIRouter(tags=["Users"], dependencies=[Depends(get_current_user)])

USER_NOT_FOUND = "User not found"


@ROUTER_USERS.get("/users", response_model=UserListResponse)
async def list_users(db_pool: DatabasePool = Depends(get_db_pool)):
    rows = await UserRepository(db_pool.pool).list_users()
    return UserListResponse(count=len(rows), users=[UserOut.from_row(row) for row in rows])


@ROUTER_USERS.get(
    "/users/{user_id}",
    response_model=UserResponse,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def get_user(user_id: int, db_pool: DatabasePool = Depends(get_db_pool)):
    row = await UserRepository(db_pool.pool).get_user(user_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND)
    return UserResponse(user=UserOut.from_row(row))


@ROUTER_USERS.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Missing field or duplicate email"}},
)
async def create_user(body: UserRequest, db_pool: DatabasePool = Depends(get_db_pool)):
    """Create a user. ``isActive`` and ``exclusiveUsage`` default to true."""
    row = await UserRepository(db_pool.pool).create_user(body.to_fields())
    logger.info("User created", user_id=row["id"], exclusive_usage=row["exclusive_usage"])
    return UserResponse(user=UserOut.from_row(row))


@ROUTER_USERS.put(
    "/users/{user_id}",
    response_model=UserResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def update_user(user_id: int, body: UserRequest, db_pool: DatabasePool = Depends(get_db_pool)):
    row = await UserRepository(db_pool.pool).update_user(user_id, body.to_fields())
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND)
    logger.info("User updated", user_id=user_id)
    return UserResponse(user=UserOut.from_row(row))


@ROUTER_USERS.delete(
    "/users/{user_id}",
    response_model=MessageResponse,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def delete_user(user_id: int, db_pool: DatabasePool = Depends(get_db_pool)):
    deleted = await UserRepository(db_pool.pool).delete_user(user_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND)
    logger.info("User deleted", user_id=user_id)
    return MessageResponse(message="User deleted successfully")


@ROUTER_USERS.get(
    "/users/{user_id}/conflicts",
    response_model=UserConflictsResponse,
    summary="Assignments that would block an exclusive-usage booking",
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def list_user_conflicts(
    user_id: int,
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    exclude_project_id: Optional[int] = Query(None, alias="excludeProjectId"),
    db_pool: DatabasePool = Depends(get_db_pool),
):
    """
    The user's assignments overlapping ``[startDate, endDate]`` on other projects.

    Users without exclusive usage never conflict, so the list is empty for them.
    """
    try:
        validate_range(start_date, end_date)
    except InvalidDateRangeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    user = await UserRepository(db_pool.pool).get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=USER_NOT_FOUND)

    conflicts = []
    if user["exclusive_usage"]:
        conflicts = await TeamRepository(db_pool.pool).find_exclusive_conflicts(
            user_id, start_date, end_date, exclude_project_id=exclude_project_id
        )

    return UserConflictsResponse(
        user_id=user_id,
        exclusive_usage=user["exclusive_usage"],
        count=len(conflicts),
        conflicts=conflicts,
    )
