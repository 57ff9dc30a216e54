"""
Database Connection Pool

Manages the asyncpg connection pool for the back office database.
Automatically runs migrations on initialization.

Schema Evolution:
-----------------
When adding/removing/renaming tables in schema.sql:
1. Update the schema.sql file with new DDL
2. Update DatabasePool.EXPECTED_TABLES constant with new table names
3. For existing deployments, manually run the migration or drop/recreate the schema:
   DROP SCHEMA filmops CASCADE;
   (then restart app to auto-create)
"""

from pathlib import Path
from typing import Optional

import asyncpg
from loguru import logger

SCHEMA_NAME = "filmops"


class DatabasePool:
    """Back office database connection pool manager."""

    # Expected tables in the filmops schema
    # Update this set when schema evolves (add/remove/rename tables)
    EXPECTED_TABLES = {
        "roles",
        "user_groups",
        "users",
        "categories",
        "conditions",
        "item_locations",
        "items",
        "clients",
        "contacts",
        "projects",
        "project_roles",
        "project_team_members",
        "kit_templates",
        "kit_template_items",
        "project_kits",
    }

    def __init__(
        self,
        connection_string: str,
        min_size: int = 2,
        max_size: int = 10,
        command_timeout: float = 60.0,
    ):
        """
        Initialize the pool manager.

        Args:
            connection_string: PostgreSQL connection string
            min_size: Minimum pooled connections
            max_size: Maximum pooled connections
            command_timeout: Query timeout in seconds
        """
        self.connection_string = connection_string
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self.pool: Optional[asyncpg.Pool] = None
        self._pool_initialized = False

    async def initialize(self) -> None:
        """
        Initialize connection pool and run migrations.
        """
        if self._pool_initialized and self.pool is not None:
            logger.debug("Database pool already initialized")
            return

        try:
            logger.info("Initializing database pool")

            self.pool = await asyncpg.create_pool(
                self.connection_string,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=self.command_timeout,
                timeout=15,  # Connection timeout (15 seconds)
            )

            logger.info("Database pool created successfully")

            async with self.pool.acquire() as conn:
                result = await conn.fetchval("SELECT 1")
                if result != 1:
                    raise RuntimeError("Pool validation query failed")

            await self._run_migrations()

            self._pool_initialized = True
            logger.success("Database initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize database pool: {e}", exc_info=True)
            if self.pool:
                await self.pool.close()
                self.pool = None
            raise

    async def _fetch_existing_tables(self, conn: asyncpg.Connection) -> set:
        rows = await conn.fetch(
            """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = $1
            ORDER BY table_name
            """,
            SCHEMA_NAME,
        )
        return {row["table_name"] for row in rows}

    async def _run_migrations(self) -> None:
        """
        Create the schema from schema.sql when it does not exist yet.

        An existing schema must contain exactly EXPECTED_TABLES; anything else needs a
        manual migration and stops startup.
        """
        async with self.pool.acquire() as conn:
            schema_exists = await conn.fetchval(
                "SELECT EXISTS (SELECT 1 FROM information_schema.schemata WHERE schema_name = $1)",
                SCHEMA_NAME,
            )

            if schema_exists:
                existing_tables = await self._fetch_existing_tables(conn)

                if existing_tables == self.EXPECTED_TABLES:
                    logger.info(f"Schema {SCHEMA_NAME} verified with {len(existing_tables)} tables")
                    return

                if existing_tables:
                    missing_tables = self.EXPECTED_TABLES - existing_tables
                    extra_tables = existing_tables - self.EXPECTED_TABLES
                    logger.error(
                        "Schema mismatch detected",
                        missing_tables=sorted(missing_tables),
                        extra_tables=sorted(extra_tables),
                    )
                    raise RuntimeError(
                        f"Schema {SCHEMA_NAME} does not match schema.sql: missing {sorted(missing_tables)}, "
                        f"extra {sorted(extra_tables)}. Manual migration required."
                    )

                logger.warning(f"Schema {SCHEMA_NAME} exists but has no tables - running migrations")

            schema_path = Path(__file__).parent / "schema.sql"
            if not schema_path.exists():
                raise FileNotFoundError(f"schema.sql not found at {schema_path}")

            async with conn.transaction():
                await conn.execute(schema_path.read_text())

            existing_tables = await self._fetch_existing_tables(conn)
            if existing_tables != self.EXPECTED_TABLES:
                raise RuntimeError(
                    f"Migration incomplete: missing {sorted(self.EXPECTED_TABLES - existing_tables)}, "
                    f"extra {sorted(existing_tables - self.EXPECTED_TABLES)}"
                )

            logger.success(f"All {len(self.EXPECTED_TABLES)} tables created in schema {SCHEMA_NAME}")

    async def close(self) -> None:
        """Close the connection pool gracefully."""
        if self.pool:
            logger.info("Closing database pool")
            await self.pool.close()
            self.pool = None
            self._pool_initialized = False
            logger.info("Database pool closed")

    async def health_check(self) -> bool:
        """
        Check if database connection is healthy.

        Returns:
            True if connection is healthy, False otherwise
        """
        try:
            if not self.pool:
                return False

            async with self.pool.acquire() as conn:
                result = await conn.fetchval("SELECT 1")
                return result == 1
        except (asyncpg.PostgresError, OSError) as e:
            logger.error(f"Database health check failed: {e}")
            return False
