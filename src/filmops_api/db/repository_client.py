"""
Client and Contact Repositories
"""

from typing import Any
from typing import Dict
from typing import List
from typing import Optional

import asyncpg

from filmops_api.db.repository_base import BaseRepository

CLIENT_COLUMNS = ("name", "contact_person", "email", "phone_number", "address", "notes")

CONTACT_COLUMNS = (
    "client_id",
    "name",
    "email",
    "phone_number",
    "position",
    "department",
    "is_primary",
    "notes",
    "specialties",
    "website",
)

CONTACT_SELECT = """
    SELECT c.*, cl.name AS client_name
    FROM filmops.contacts c
    LEFT JOIN filmops.clients cl ON c.client_id = cl.id
"""


class ClientRepository(BaseRepository):
    """Client repository."""

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "clients")

    async def list_clients(self) -> List[Dict[str, Any]]:
        return await self.list_all(order_by="name")

    async def create_client(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        return await self.insert({column: fields.get(column) for column in CLIENT_COLUMNS})

    async def update_client(self, client_id: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await self.update(client_id, {column: fields.get(column) for column in CLIENT_COLUMNS})

    async def delete_client(self, client_id: int) -> bool:
        return await self.delete_by_id(client_id)


class ContactRepository(BaseRepository):
    """
    Contact repository.

    A client has at most one primary contact: writing a contact with ``is_primary`` set
    clears the flag on the client's other contacts in the same transaction.
    """

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "contacts")

    async def list_contacts(self) -> List[Dict[str, Any]]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(f"{CONTACT_SELECT} ORDER BY c.name")
            return [dict(row) for row in rows]

    async def list_for_client(self, client_id: int) -> List[Dict[str, Any]]:
        """Client's contacts with the primary contact first."""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                f"{CONTACT_SELECT} WHERE c.client_id = $1 ORDER BY c.is_primary DESC, c.name",
                client_id,
            )
            return [dict(row) for row in rows]

    async def get_contact(self, contact_id: int) -> Optional[Dict[str, Any]]:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(f"{CONTACT_SELECT} WHERE c.id = $1", contact_id)
            return dict(row) if row else None

    async def create_contact(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        values = {column: fields.get(column) for column in CONTACT_COLUMNS}
        values["is_primary"] = bool(values["is_primary"])

        async with self.pool.acquire() as conn:
            async with conn.transaction():
                if values["is_primary"] and values["client_id"] is not None:
                    await self._clear_primary(conn, values["client_id"])
                return await self.insert(values, conn=conn)

    async def update_contact(self, contact_id: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        values = {column: fields.get(column) for column in CONTACT_COLUMNS}
        values["is_primary"] = bool(values["is_primary"])

        async with self.pool.acquire() as conn:
            async with conn.transaction():
                if values["is_primary"] and values["client_id"] is not None:
                    await self._clear_primary(conn, values["client_id"], exclude_contact_id=contact_id)
                return await self.update(contact_id, values, conn=conn)

    async def delete_contact(self, contact_id: int) -> bool:
        return await self.delete_by_id(contact_id)

    async def _clear_primary(
        self,
        conn: asyncpg.Connection,
        client_id: int,
        exclude_contact_id: Optional[int] = None,
    ) -> None:
        await conn.execute(
            """
            UPDATE filmops.contacts SET is_primary = FALSE, updated_at = CURRENT_TIMESTAMP
            WHERE client_id = $1 AND is_primary AND ($2::int IS NULL OR id != $2)
            """,
            client_id,
            exclude_contact_id,
        )
