"""
User Repository

Repository for staff users and the permission maps attached to them through their
role and user group.
"""

from typing import Any
from typing import Dict
from typing import List
from typing import Optional

import asyncpg

from filmops_api.auth.permissions import PermissionMap
from filmops_api.auth.permissions import parse_permission_map
from filmops_api.db.repository_base import BaseRepository


class DuplicateEmailError(Exception):
    """Another user already has this email."""


USER_SELECT = """
    SELECT
        u.id,
        u.first_name,
        u.last_name,
        u.email,
        u.phone_number,
        u.address,
        u.is_active,
        u.exclusive_usage,
        u.role_id,
        u.user_group_id,
        u.created_at,
        u.updated_at,
        r.name AS role_name
    FROM filmops.users u
    LEFT JOIN filmops.roles r ON u.role_id = r.id
"""

USER_COLUMNS = (
    "first_name",
    "last_name",
    "email",
    "phone_number",
    "address",
    "role_id",
    "user_group_id",
    "is_active",
    "exclusive_usage",
)


def _user_values(fields: Dict[str, Any]) -> Dict[str, Any]:
    values = {column: fields.get(column) for column in USER_COLUMNS}
    values["is_active"] = values["is_active"] is not False
    values["exclusive_usage"] = values["exclusive_usage"] is not False
    return values


class UserRepository(BaseRepository):
    """User repository with permission lookups."""

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "users")

    async def list_users(self) -> List[Dict[str, Any]]:
        """Get every user, newest first."""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(f"{USER_SELECT} ORDER BY u.created_at DESC, u.id DESC")
            return [dict(row) for row in rows]

    async def get_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(f"{USER_SELECT} WHERE u.id = $1", user_id)
            return dict(row) if row else None

    async def get_active_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        """Get a user only if their account is active."""
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(f"{USER_SELECT} WHERE u.id = $1 AND u.is_active = true", user_id)
            return dict(row) if row else None

    async def create_user(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a user.

        Raises:
            DuplicateEmailError: The email is already in use
        """
        values = _user_values(fields)
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                if await self._email_taken(conn, values["email"]):
                    raise DuplicateEmailError("User with this email already exists")
                row = await self.insert(values, conn=conn)

        return await self.get_user(row["id"])

    async def update_user(self, user_id: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Update a user.

        Returns:
            The updated user, or None if no user has that id

        Raises:
            DuplicateEmailError: The email belongs to a different user
        """
        values = _user_values(fields)
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                if await self._email_taken(conn, values["email"], exclude_user_id=user_id):
                    raise DuplicateEmailError("Email already taken by another user")
                row = await self.update(user_id, values, conn=conn)

        if row is None:
            return None
        return await self.get_user(user_id)

    async def delete_user(self, user_id: int) -> bool:
        return await self.delete_by_id(user_id)

    async def get_permission_maps(self, user_id: int) -> List[PermissionMap]:
        """
        Get the permission maps attached to a user (role first, then user group).

        Missing role or group contributes an empty map.
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                SELECT r.permissions AS role_permissions, ug.permissions AS group_permissions
                FROM filmops.users u
                LEFT JOIN filmops.roles r ON u.role_id = r.id
                LEFT JOIN filmops.user_groups ug ON u.user_group_id = ug.id
                WHERE u.id = $1
                """,
                user_id,
            )
        if row is None:
            return []
        return [
            parse_permission_map(row["role_permissions"]),
            parse_permission_map(row["group_permissions"]),
        ]

    async def _email_taken(
        self,
        conn: asyncpg.Connection,
        email: str,
        exclude_user_id: Optional[int] = None,
    ) -> bool:
        return await conn.fetchval(
            """
            SELECT EXISTS (
                SELECT 1 FROM filmops.users
                WHERE lower(email) = lower($1) AND ($2::int IS NULL OR id != $2)
            )
            """,
            email,
            exclude_user_id,
        )
