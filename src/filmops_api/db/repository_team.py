"""
Project Team Repository

Repository for project team assignments.

Every write runs the overlap check and the exclusive-usage check in the same
transaction as the INSERT/UPDATE, under transaction-scoped advisory locks, so two
concurrent requests for the same user cannot both pass the check.
"""

from datetime import date
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Sequence

import asyncpg
from loguru import logger

from filmops_api.db.repository_base import BaseRepository
from filmops_api.scheduling.overlap import has_overlap
from filmops_api.scheduling.overlap import ranges_overlap
from filmops_api.scheduling.overlap import validate_range


class AssignmentOverlapError(Exception):
    """The user already has an assignment on this project covering part of the range."""

    def __init__(self, overlapping_ids: Sequence[int]):
        super().__init__("Team member has overlapping assignments for this date range")
        self.overlapping_ids = list(overlapping_ids)


class ExclusiveUsageConflictError(Exception):
    """The user is exclusive and already booked on another project in the range."""

    def __init__(self, conflicts: Sequence[Dict[str, Any]]):
        names = sorted({c["project_name"] for c in conflicts})
        super().__init__(
            "Team member is marked for exclusive usage and is already assigned to "
            f"another project in this date range: {', '.join(names)}"
        )
        self.conflicts = list(conflicts)


TEAM_SELECT = """
    SELECT
        ptm.id,
        ptm.project_id,
        ptm.user_id,
        ptm.start_date,
        ptm.end_date,
        ptm.notes,
        u.first_name,
        u.last_name,
        u.email,
        pr.id AS role_id,
        pr.name AS role_name,
        pr.description AS role_description
    FROM filmops.project_team_members ptm
    JOIN filmops.users u ON ptm.user_id = u.id
    JOIN filmops.project_roles pr ON ptm.project_role_id = pr.id
"""

RETURNING_COLUMNS = "id, project_id, user_id, project_role_id, start_date, end_date, notes"


class TeamRepository(BaseRepository):
    """Project team assignment repository."""

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "project_team_members")

    async def list_for_project(self, project_id: int) -> List[Dict[str, Any]]:
        """
        Get a project's team, ordered by start date then member name.
        """
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                f"""
                {TEAM_SELECT}
                WHERE ptm.project_id = $1
                ORDER BY ptm.start_date, u.first_name, u.last_name
                """,
                project_id,
            )
            return [dict(row) for row in rows]

    async def create_assignment(
        self,
        project_id: int,
        user_id: int,
        project_role_id: int,
        start_date: date,
        end_date: date,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Add a user to a project for ``[start_date, end_date]``.

        Raises:
            InvalidDateRangeError: end_date before start_date
            AssignmentOverlapError: user already covers part of the range on this project
            ExclusiveUsageConflictError: exclusive user is booked elsewhere in the range
        """
        validate_range(start_date, end_date)

        async with self.pool.acquire() as conn:
            async with conn.transaction():
                await self._check_assignment(conn, project_id, user_id, start_date, end_date)

                row = await conn.fetchrow(
                    f"""
                    INSERT INTO filmops.project_team_members
                        (project_id, user_id, project_role_id, start_date, end_date, notes)
                    VALUES ($1, $2, $3, $4, $5, $6)
                    RETURNING {RETURNING_COLUMNS}
                    """,
                    project_id,
                    user_id,
                    project_role_id,
                    start_date,
                    end_date,
                    notes,
                )

        logger.info(
            "Team assignment created",
            assignment_id=row["id"],
            project_id=project_id,
            user_id=user_id,
        )
        return dict(row)

    async def update_assignment(
        self,
        project_id: int,
        assignment_id: int,
        project_role_id: int,
        start_date: date,
        end_date: date,
        notes: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Change an assignment's role, range and notes. The user stays the same.

        The assignment being edited is excluded from the overlap check.

        Returns:
            The updated row, or None if the assignment does not belong to the project
        """
        validate_range(start_date, end_date)

        async with self.pool.acquire() as conn:
            async with conn.transaction():
                existing = await conn.fetchrow(
                    """
                    SELECT id, user_id FROM filmops.project_team_members
                    WHERE id = $1 AND project_id = $2
                    FOR UPDATE
                    """,
                    assignment_id,
                    project_id,
                )
                if existing is None:
                    return None

                await self._check_assignment(
                    conn,
                    project_id,
                    existing["user_id"],
                    start_date,
                    end_date,
                    exclude_assignment_id=assignment_id,
                )

                row = await conn.fetchrow(
                    f"""
                    UPDATE filmops.project_team_members
                    SET project_role_id = $1, start_date = $2, end_date = $3, notes = $4,
                        updated_at = CURRENT_TIMESTAMP
                    WHERE id = $5 AND project_id = $6
                    RETURNING {RETURNING_COLUMNS}
                    """,
                    project_role_id,
                    start_date,
                    end_date,
                    notes,
                    assignment_id,
                    project_id,
                )

        logger.info("Team assignment updated", assignment_id=assignment_id, project_id=project_id)
        return dict(row)

    async def delete_assignment(self, project_id: int, assignment_id: int) -> bool:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                DELETE FROM filmops.project_team_members
                WHERE id = $1 AND project_id = $2
                RETURNING id
                """,
                assignment_id,
                project_id,
            )
            return row is not None

    async def _check_assignment(
        self,
        conn: asyncpg.Connection,
        project_id: int,
        user_id: int,
        start_date: date,
        end_date: date,
        exclude_assignment_id: Optional[int] = None,
    ) -> None:
        """
        Lock and validate a candidate range for ``user_id`` on ``project_id``.

        Must run inside the caller's transaction. Exclusive users take a per-user lock
        before the per-(project, user) lock so cross-project writes are serialized too.
        """
        exclusive = await conn.fetchval(
            "SELECT exclusive_usage FROM filmops.users WHERE id = $1",
            user_id,
        )
        if exclusive:
            await conn.execute("SELECT pg_advisory_xact_lock($1::bigint)", user_id)
        await conn.execute("SELECT pg_advisory_xact_lock($1::int, $2::int)", project_id, user_id)

        rows = await conn.fetch(
            """
            SELECT id, start_date, end_date FROM filmops.project_team_members
            WHERE project_id = $1 AND user_id = $2 AND ($3::int IS NULL OR id != $3)
            """,
            project_id,
            user_id,
            exclude_assignment_id,
        )
        candidate = (start_date, end_date)
        if has_overlap([(row["start_date"], row["end_date"]) for row in rows], candidate):
            overlapping_ids = [
                row["id"] for row in rows if ranges_overlap((row["start_date"], row["end_date"]), candidate)
            ]
            logger.warning(
                "Rejected overlapping team assignment",
                project_id=project_id,
                user_id=user_id,
                overlapping_ids=overlapping_ids,
            )
            raise AssignmentOverlapError(overlapping_ids)

        if exclusive:
            conflicts = await self.find_exclusive_conflicts(
                user_id, start_date, end_date, exclude_project_id=project_id, conn=conn
            )
            if conflicts:
                logger.warning(
                    "Rejected team assignment for exclusive user",
                    project_id=project_id,
                    user_id=user_id,
                    conflicting_projects=sorted({c["project_id"] for c in conflicts}),
                )
                raise ExclusiveUsageConflictError(conflicts)

    async def find_exclusive_conflicts(
        self,
        user_id: int,
        start_date: date,
        end_date: date,
        exclude_project_id: Optional[int] = None,
        conn: Optional[asyncpg.Connection] = None,
    ) -> List[Dict[str, Any]]:
        """
        Find the user's assignments on other projects that overlap ``[start_date, end_date]``.

        Args:
            user_id: User to scan
            start_date: Candidate range start
            end_date: Candidate range end
            exclude_project_id: Project being assigned to (its own rows are not conflicts)
            conn: Existing connection (inside a write transaction)
        """
        query = """
            SELECT
                ptm.id,
                ptm.project_id,
                p.name AS project_name,
                pr.name AS role_name,
                ptm.start_date,
                ptm.end_date
            FROM filmops.project_team_members ptm
            JOIN filmops.projects p ON ptm.project_id = p.id
            JOIN filmops.project_roles pr ON ptm.project_role_id = pr.id
            WHERE ptm.user_id = $1
              AND ptm.start_date <= $3
              AND ptm.end_date >= $2
              AND ($4::int IS NULL OR ptm.project_id != $4)
            ORDER BY ptm.start_date, p.name
        """
        args = (user_id, start_date, end_date, exclude_project_id)

        if conn is not None:
            rows = await conn.fetch(query, *args)
            return [dict(row) for row in rows]

        async with self.pool.acquire() as pooled:
            rows = await pooled.fetch(query, *args)
            return [dict(row) for row in rows]

    async def list_in_range(
        self,
        start_date: date,
        end_date: date,
        project_ids: Optional[Sequence[int]] = None,
        user_id: Optional[int] = None,
        role_name: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get every assignment touching ``[start_date, end_date]`` for the team calendar.

        Args:
            project_ids: Restrict to these projects; None means all
            user_id: Only this team member
            role_name: Only assignments held in this project role
        """
        query = """
            SELECT
                ptm.id,
                ptm.project_id,
                p.name AS project_name,
                ptm.user_id,
                u.first_name,
                u.last_name,
                pr.name AS role_name,
                ptm.start_date,
                ptm.end_date
            FROM filmops.project_team_members ptm
            JOIN filmops.projects p ON ptm.project_id = p.id
            JOIN filmops.users u ON ptm.user_id = u.id
            JOIN filmops.project_roles pr ON ptm.project_role_id = pr.id
            WHERE ptm.start_date <= $2 AND ptm.end_date >= $1
              AND ($3::int[] IS NULL OR ptm.project_id = ANY($3::int[]))
              AND ($4::int IS NULL OR ptm.user_id = $4)
              AND ($5::text IS NULL OR pr.name = $5)
            ORDER BY ptm.start_date, u.first_name, u.last_name
        """
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                query,
                start_date,
                end_date,
                list(project_ids) if project_ids is not None else None,
                user_id,
                role_name,
            )
            return [dict(row) for row in rows]

    async def get_assigned_project_ids(self, user_id: int) -> List[int]:
        """Projects the user is on the team of."""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                """
                SELECT DISTINCT project_id FROM filmops.project_team_members
                WHERE user_id = $1
                ORDER BY project_id
                """,
                user_id,
            )
            return [row["project_id"] for row in rows]


class ProjectRoleRepository(BaseRepository):
    """Fixed vocabulary of roles a team member can hold on a project."""

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "project_roles")

    async def list_roles(self) -> List[Dict[str, Any]]:
        return await self.list_all(order_by="name")
