"""FastAPI dependencies: settings, database pool, authenticated user and access scopes."""

from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

from fastapi import Depends
from fastapi import Header
from fastapi import HTTPException
from fastapi import Request
from fastapi import status
from loguru import logger

from filmops_api.auth.permissions import PermissionMap
from filmops_api.auth.permissions import combine_role_permissions
from filmops_api.auth.permissions import has_permission
from filmops_api.auth.tokens import InvalidTokenError
from filmops_api.auth.tokens import extract_bearer_token
from filmops_api.auth.tokens import get_user_id_from_token
from filmops_api.db.pool import DatabasePool
from filmops_api.db.repository_team import TeamRepository
from filmops_api.db.repository_user import UserRepository
from filmops_api.enums import Permission
from filmops_api.settings import Settings

NOT_AUTHORIZED = "Not authorized to access this route"


def get_settings(request: Request) -> Settings:
    """
    Get application settings from request state.

    Parameters
    ----------
    request : Request
        FastAPI request object

    Returns
    -------
    Settings
        Application settings instance
    """
    return request.app.state.settings


def get_db_pool(request: Request) -> DatabasePool:
    """
    Get the database pool from app state.

    Raises
    ------
    HTTPException
        503 when the pool was never created
    """
    db_pool = getattr(request.app.state, "db_pool", None)
    if db_pool is None:
        logger.error("Database pool not available", url_path=str(request.url.path))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not available",
        )
    return db_pool


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None, description="Bearer <token>"),
    settings: Settings = Depends(get_settings),
    db_pool: DatabasePool = Depends(get_db_pool),
) -> Dict[str, Any]:
    """
    Verify the Bearer token and load the active user it was issued for.

    Raises
    ------
    HTTPException
        401 if the token is missing or invalid, or the user is unknown or inactive
    """
    try:
        token = extract_bearer_token(authorization)
        user_id = get_user_id_from_token(token, settings.jwt_secret, settings.jwt_algorithm)
    except InvalidTokenError as e:
        logger.warning("Rejected request without a valid token", reason=str(e), url_path=str(request.url.path))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=NOT_AUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    user = await UserRepository(db_pool.pool).get_active_user(user_id)
    if user is None:
        logger.warning("Token names an unknown or inactive user", user_id=user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
            headers={"WWW-Authenticate": "Bearer"},
        )

    request.state.user = user
    return user


async def get_user_permissions(
    request: Request,
    user: Dict[str, Any] = Depends(get_current_user),
    db_pool: DatabasePool = Depends(get_db_pool),
) -> PermissionMap:
    """
    Resolve the caller's combined role and user-group permissions.

    Resolved once per request and cached on ``request.state``.
    """
    cached = getattr(request.state, "permissions", None)
    if cached is not None:
        return cached

    permission_maps = await UserRepository(db_pool.pool).get_permission_maps(user["id"])
    permissions = combine_role_permissions(permission_maps)
    request.state.permissions = permissions
    return permissions


@dataclass
class ProjectScope:
    """Projects the caller may see: every project, or only those they are staffed on."""

    all_projects: bool
    project_ids: List[int] = field(default_factory=list)

    def allows(self, project_id: int) -> bool:
        return self.all_projects or project_id in self.project_ids

    @property
    def filter_ids(self) -> Optional[List[int]]:
        """Ids to pass to list queries; None means unrestricted."""
        return None if self.all_projects else self.project_ids


async def get_project_scope(
    user: Dict[str, Any] = Depends(get_current_user),
    permissions: PermissionMap = Depends(get_user_permissions),
    db_pool: DatabasePool = Depends(get_db_pool),
) -> ProjectScope:
    """
    Work out which projects the caller may see.

    Raises
    ------
    HTTPException
        403 when the caller holds neither project permission
    """
    if has_permission(permissions, Permission.VIEW_PROJECTS.value):
        return ProjectScope(all_projects=True)

    if has_permission(permissions, Permission.VIEW_ASSIGNED_PROJECTS.value):
        project_ids = await TeamRepository(db_pool.pool).get_assigned_project_ids(user["id"])
        return ProjectScope(all_projects=False, project_ids=project_ids)

    logger.warning("Caller has no project access permissions", user_id=user["id"])
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Access denied: No project access permissions",
    )


def ensure_project_access(scope: ProjectScope, project_id: int) -> None:
    """Raise 403 unless ``project_id`` is inside the caller's scope."""
    if not scope.allows(project_id):
        logger.warning("Caller is not assigned to project", project_id=project_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied: You are not assigned to this project",
        )


async def get_kit_scope(
    user: Dict[str, Any] = Depends(get_current_user),
    permissions: PermissionMap = Depends(get_user_permissions),
    db_pool: DatabasePool = Depends(get_db_pool),
) -> Optional[List[int]]:
    """
    Projects whose kits the caller may see.

    Returns
    -------
    list of int or None
        None with global kit access, otherwise the caller's assigned project ids
    """
    if has_permission(permissions, Permission.VIEW_KITS.value):
        return None
    return await TeamRepository(db_pool.pool).get_assigned_project_ids(user["id"])
