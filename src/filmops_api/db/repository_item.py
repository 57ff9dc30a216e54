"""
Inventory Repositories

Items plus the reference tables (categories, conditions, item locations) they point at.
"""

from typing import Any
from typing import Dict
from typing import List
from typing import Optional

import asyncpg

from filmops_api.db.repository_base import BaseRepository

ITEM_SELECT = """
    SELECT
        i.*,
        c.name AS category_name,
        c.description AS category_description,
        cond.name AS condition_name,
        cond.description AS condition_description,
        il.name AS location_name,
        il.description AS location_description
    FROM filmops.items i
    LEFT JOIN filmops.categories c ON i.category_id = c.id
    LEFT JOIN filmops.conditions cond ON i.current_condition_id = cond.id
    LEFT JOIN filmops.item_locations il ON i.item_location_id = il.id
"""

ITEM_COLUMNS = (
    "name",
    "make",
    "model",
    "serial_number",
    "category_id",
    "current_condition_id",
    "item_location_id",
    "notes",
    "acquisition_date",
    "purchase_price",
    "is_rentable",
    "is_active",
)

# API path segment -> reference table
REFERENCE_TABLES = {
    "categories": "categories",
    "conditions": "conditions",
    "locations": "item_locations",
}


def _item_values(fields: Dict[str, Any]) -> Dict[str, Any]:
    values = {column: fields.get(column) for column in ITEM_COLUMNS}
    if values["purchase_price"] is None:
        values["purchase_price"] = 0
    if values["is_rentable"] is None:
        values["is_rentable"] = True
    if values["is_active"] is None:
        values["is_active"] = True
    return values


class ItemRepository(BaseRepository):
    """Gear inventory repository."""

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "items")

    async def list_items(self) -> List[Dict[str, Any]]:
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(f"{ITEM_SELECT} ORDER BY i.name")
            return [dict(row) for row in rows]

    async def get_item(self, item_id: int) -> Optional[Dict[str, Any]]:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(f"{ITEM_SELECT} WHERE i.id = $1", item_id)
            return dict(row) if row else None

    async def create_item(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Insert an item and return it with its joined reference names."""
        row = await self.insert(_item_values(fields))
        return await self.get_item(row["id"])

    async def update_item(self, item_id: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        row = await self.update(item_id, _item_values(fields))
        if row is None:
            return None
        return await self.get_item(item_id)

    async def delete_item(self, item_id: int) -> bool:
        return await self.delete_by_id(item_id)


class ReferenceRepository(BaseRepository):
    """Read-only lookup tables (``categories``, ``conditions``, ``item_locations``)."""

    def __init__(self, pool: asyncpg.Pool, table_name: str):
        if table_name not in REFERENCE_TABLES.values():
            raise ValueError(f"Unknown reference table: {table_name}")
        super().__init__(pool, table_name)

    async def list_entries(self) -> List[Dict[str, Any]]:
        return await self.list_all(order_by="name")
