"""
Project Repository

Repository for project CRUD operations. List and detail reads join the client and
project manager so the API can nest them.
"""

from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Sequence

import asyncpg

from filmops_api.db.repository_base import BaseRepository

PROJECT_SELECT = """
    SELECT
        p.*,
        c.name AS client_name,
        c.contact_person,
        c.email AS client_email,
        c.phone_number AS client_phone,
        u.first_name AS manager_first_name,
        u.last_name AS manager_last_name,
        u.email AS manager_email
    FROM filmops.projects p
    LEFT JOIN filmops.clients c ON p.client_id = c.id
    LEFT JOIN filmops.users u ON p.project_manager_user_id = u.id
"""

# Columns a create/update may write
PROJECT_COLUMNS = (
    "name",
    "description",
    "status",
    "location",
    "budget",
    "start_date",
    "end_date",
    "client_id",
    "project_manager_user_id",
    "contact_id",
)


class ProjectRepository(BaseRepository):
    """Project repository with domain-specific queries."""

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "projects")

    async def list_projects(self, project_ids: Optional[Sequence[int]] = None) -> List[Dict[str, Any]]:
        """
        Get projects ordered by name.

        Args:
            project_ids: Restrict to these ids (assigned-projects scope); None means all

        Returns:
            List of project dicts with client and manager columns
        """
        async with self.pool.acquire() as conn:
            if project_ids is None:
                rows = await conn.fetch(f"{PROJECT_SELECT} ORDER BY p.name")
            else:
                rows = await conn.fetch(
                    f"{PROJECT_SELECT} WHERE p.id = ANY($1::int[]) ORDER BY p.name",
                    list(project_ids),
                )
            return [dict(row) for row in rows]

    async def get_project(self, project_id: int) -> Optional[Dict[str, Any]]:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(f"{PROJECT_SELECT} WHERE p.id = $1", project_id)
            return dict(row) if row else None

    async def create_project(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a project.

        Args:
            fields: Column values; ``status`` must already be the calculated status
        """
        return await self.insert({column: fields.get(column) for column in PROJECT_COLUMNS})

    async def update_project(self, project_id: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Overwrite every writable column; returns None when the project does not exist."""
        return await self.update(project_id, {column: fields.get(column) for column in PROJECT_COLUMNS})

    async def delete_project(self, project_id: int) -> bool:
        return await self.delete_by_id(project_id)
