"""
Base Repository

Base class providing plain CRUD operations over a single table in the filmops schema.
All concrete repositories inherit from this class and add domain-specific queries.
"""

from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Tuple

import asyncpg

SCHEMA = "filmops"


def build_set_clause(fields: Dict[str, Any], start: int = 1) -> Tuple[str, List[Any]]:
    """
    Build a ``col = $n`` list for an UPDATE.

    Args:
        fields: Column -> value mapping (column names come from code, never from input)
        start: First placeholder index

    Returns:
        (clause, values) ready to splice into the statement
    """
    assignments = []
    values = []
    for offset, (column, value) in enumerate(fields.items()):
        assignments.append(f"{column} = ${start + offset}")
        values.append(value)
    return ", ".join(assignments), values


class BaseRepository:
    """
    Base repository with common CRUD operations.

    All concrete repositories (ProjectRepository, ClientRepository, etc.) inherit from this.
    """

    def __init__(self, pool: asyncpg.Pool, table_name: str):
        """
        Initialize base repository.

        Args:
            pool: asyncpg connection pool
            table_name: Database table name (without schema prefix)
        """
        self.pool = pool
        self.table = table_name

    @property
    def qualified_table(self) -> str:
        return f"{SCHEMA}.{self.table}"

    async def get_by_id(self, entity_id: int) -> Optional[Dict[str, Any]]:
        """
        Get a single row by primary key.

        Returns:
            Dict of row data or None if not found
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT * FROM {self.qualified_table} WHERE id = $1",
                entity_id,
            )
            return dict(row) if row else None

    async def list_all(self, order_by: str = "id") -> List[Dict[str, Any]]:
        """Get every row ordered by ``order_by``."""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(f"SELECT * FROM {self.qualified_table} ORDER BY {order_by}")
            return [dict(row) for row in rows]

    async def insert(self, fields: Dict[str, Any], conn: Optional[asyncpg.Connection] = None) -> Dict[str, Any]:
        """
        Insert a row and return it.

        Args:
            fields: Column -> value mapping
            conn: Existing connection to run on (for callers inside a transaction)
        """
        columns = ", ".join(fields.keys())
        placeholders = ", ".join(f"${i}" for i in range(1, len(fields) + 1))
        query = f"INSERT INTO {self.qualified_table} ({columns}) VALUES ({placeholders}) RETURNING *"

        if conn is not None:
            row = await conn.fetchrow(query, *fields.values())
            return dict(row)

        async with self.pool.acquire() as pooled:
            row = await pooled.fetchrow(query, *fields.values())
            return dict(row)

    async def update(
        self,
        entity_id: int,
        fields: Dict[str, Any],
        conn: Optional[asyncpg.Connection] = None,
    ) -> Optional[Dict[str, Any]]:
        """
        Update a row by primary key and bump ``updated_at``.

        Returns:
            The updated row, or None if no row has that id
        """
        clause, values = build_set_clause(fields, start=2)
        clause = f"{clause}, updated_at = CURRENT_TIMESTAMP"
        query = f"UPDATE {self.qualified_table} SET {clause} WHERE id = $1 RETURNING *"

        if conn is not None:
            row = await conn.fetchrow(query, entity_id, *values)
            return dict(row) if row else None

        async with self.pool.acquire() as pooled:
            row = await pooled.fetchrow(query, entity_id, *values)
            return dict(row) if row else None

    async def delete_by_id(self, entity_id: int) -> bool:
        """
        Hard delete a row.

        Returns:
            True if a row was deleted, False otherwise
        """
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"DELETE FROM {self.qualified_table} WHERE id = $1 RETURNING id",
                entity_id,
            )
            return row is not None

