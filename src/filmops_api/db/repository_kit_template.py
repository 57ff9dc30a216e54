"""
Kit Template Repository

Kit templates are reusable bundles of items. Template rows and their item rows are
always written together in one transaction; deleting a template only deactivates it.
"""

from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Sequence

import asyncpg
from loguru import logger

from filmops_api.db.repository_base import BaseRepository
from filmops_api.enums import KitSourceType

TEMPLATE_LIST_SELECT = """
    SELECT
        kt.id,
        kt.name,
        kt.description,
        kt.created_by,
        kt.created_at,
        kt.updated_at,
        kt.is_active,
        kt.source_type,
        u.first_name AS creator_first_name,
        u.last_name AS creator_last_name,
        COUNT(kti.item_id) AS item_count
    FROM filmops.kit_templates kt
    LEFT JOIN filmops.users u ON kt.created_by = u.id
    LEFT JOIN filmops.kit_template_items kti ON kt.id = kti.kit_template_id
    WHERE kt.is_active = true
"""

TEMPLATE_GROUP_BY = """
    GROUP BY kt.id, u.first_name, u.last_name
    ORDER BY kt.created_at DESC
"""

TEMPLATE_COLUMNS = "id, name, description, created_by, created_at, updated_at, is_active, source_type"


class KitTemplateRepository(BaseRepository):
    """Kit template repository."""

    def __init__(self, pool: asyncpg.Pool):
        super().__init__(pool, "kit_templates")

    async def list_templates(self, project_ids: Optional[Sequence[int]] = None) -> List[Dict[str, Any]]:
        """
        Get active templates, newest first, with their item counts.

        Args:
            project_ids: Only templates linked to these projects through ``project_kits``;
                None means all templates
        """
        async with self.pool.acquire() as conn:
            if project_ids is None:
                rows = await conn.fetch(f"{TEMPLATE_LIST_SELECT} {TEMPLATE_GROUP_BY}")
            else:
                rows = await conn.fetch(
                    f"""
                    {TEMPLATE_LIST_SELECT}
                    AND kt.id IN (
                        SELECT DISTINCT pk.kit_template_id
                        FROM filmops.project_kits pk
                        WHERE pk.project_id = ANY($1::int[])
                    )
                    {TEMPLATE_GROUP_BY}
                    """,
                    list(project_ids),
                )
            return [dict(row) for row in rows]

    async def get_template(self, template_id: int) -> Optional[Dict[str, Any]]:
        """
        Get an active template with its items.

        Returns:
            Template dict with an ``items`` list, or None if missing or deactivated
        """
        async with self.pool.acquire() as conn:
            template = await conn.fetchrow(
                """
                SELECT
                    kt.*,
                    u.first_name AS creator_first_name,
                    u.last_name AS creator_last_name
                FROM filmops.kit_templates kt
                LEFT JOIN filmops.users u ON kt.created_by = u.id
                WHERE kt.id = $1 AND kt.is_active = true
                """,
                template_id,
            )
            if template is None:
                return None

            items = await conn.fetch(
                """
                SELECT
                    kti.id,
                    kti.quantity,
                    i.id AS item_id,
                    i.name,
                    i.make,
                    i.model,
                    i.serial_number,
                    c.name AS category_name,
                    cond.name AS condition_name,
                    loc.name AS location_name
                FROM filmops.kit_template_items kti
                JOIN filmops.items i ON kti.item_id = i.id
                LEFT JOIN filmops.categories c ON i.category_id = c.id
                LEFT JOIN filmops.conditions cond ON i.current_condition_id = cond.id
                LEFT JOIN filmops.item_locations loc ON i.item_location_id = loc.id
                WHERE kti.kit_template_id = $1
                ORDER BY i.name
                """,
                template_id,
            )

        result = dict(template)
        result["items"] = [dict(row) for row in items]
        return result

    async def create_template(
        self,
        name: str,
        description: Optional[str],
        items: Sequence[Dict[str, Any]],
        created_by: Optional[int],
    ) -> Dict[str, Any]:
        """
        Create a template and its item rows.

        Args:
            items: ``{"item_id": int, "quantity": int | None}`` dicts; quantity defaults to 1
        """
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                template = await conn.fetchrow(
                    f"""
                    INSERT INTO filmops.kit_templates (name, description, created_by, source_type)
                    VALUES ($1, $2, $3, $4)
                    RETURNING {TEMPLATE_COLUMNS}
                    """,
                    name,
                    description,
                    created_by,
                    KitSourceType.TEMPLATE.value,
                )
                await self._insert_items(conn, template["id"], items)

        logger.info("Kit template created", kit_template_id=template["id"], item_rows=len(items))
        return dict(template)

    async def update_template(
        self,
        template_id: int,
        name: str,
        description: Optional[str],
        items: Optional[Sequence[Dict[str, Any]]],
    ) -> Optional[Dict[str, Any]]:
        """
        Update an active template and replace its items.

        Returns:
            The updated template row, or None if missing or deactivated
        """
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                template = await conn.fetchrow(
                    f"""
                    UPDATE filmops.kit_templates
                    SET name = $1, description = $2, updated_at = CURRENT_TIMESTAMP
                    WHERE id = $3 AND is_active = true
                    RETURNING {TEMPLATE_COLUMNS}
                    """,
                    name,
                    description,
                    template_id,
                )
                if template is None:
                    return None

                await conn.execute(
                    "DELETE FROM filmops.kit_template_items WHERE kit_template_id = $1",
                    template_id,
                )
                await self._insert_items(conn, template_id, items or [])

        logger.info("Kit template updated", kit_template_id=template_id)
        return dict(template)

    async def deactivate_template(self, template_id: int) -> Optional[Dict[str, Any]]:
        """Soft delete. Returns ``{id, name}`` or None if already inactive or missing."""
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                """
                UPDATE filmops.kit_templates
                SET is_active = false, updated_at = CURRENT_TIMESTAMP
                WHERE id = $1 AND is_active = true
                RETURNING id, name
                """,
                template_id,
            )
            return dict(row) if row else None

    async def _insert_items(
        self,
        conn: asyncpg.Connection,
        template_id: int,
        items: Sequence[Dict[str, Any]],
    ) -> None:
        if not items:
            return
        await conn.executemany(
            """
            INSERT INTO filmops.kit_template_items (kit_template_id, item_id, quantity)
            VALUES ($1, $2, $3)
            """,
            [(template_id, item["item_id"], item.get("quantity") or 1) for item in items],
        )
