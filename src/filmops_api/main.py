from textwrap import dedent

import asyncpg
import pydantic
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from filmops_api.db.pool import DatabasePool
from filmops_api.errors import BUSINESS_RULE_ERRORS
from filmops_api.errors import handle_broad_exceptions
from filmops_api.errors import handle_business_rule_errors
from filmops_api.errors import handle_http_exception
from filmops_api.errors import handle_integrity_errors
from filmops_api.errors import handle_pydantic_validation_errors
from filmops_api.monitoring.logger import configure_logger
from filmops_api.monitoring.request_context import RequestContextMiddleware
from filmops_api.routes.routes_clients import ROUTER_CLIENTS
from filmops_api.routes.routes_clients import ROUTER_CONTACTS
from filmops_api.routes.routes_health import ROUTER_HEALTH
from filmops_api.routes.routes_items import ROUTER_ITEMS
from filmops_api.routes.routes_items import ROUTER_REFERENCE
from filmops_api.routes.routes_kit_templates import ROUTER_KIT_TEMPLATES
from filmops_api.routes.routes_projects import ROUTER_PROJECTS
from filmops_api.routes.routes_team import ROUTER_TEAM
from filmops_api.routes.routes_users import ROUTER_USERS
from filmops_api.settings import Settings


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create a FastAPI application.

    Configuration is loaded directly from environment variables via pydantic-settings.
    - Deployed: set variables in the process environment
    - Local development: use a .env file next to app.py
    """
    settings = settings or Settings()

    configure_logger(level=settings.log_level)

    logger.info(
        "Configuration loaded successfully",
        environment=settings.environment,
        frontend_url=settings.frontend_url,
        db_pool_size=f"{settings.db_min_pool_size}-{settings.db_max_pool_size}",
        jwt_algorithm=settings.jwt_algorithm,
    )

    app = FastAPI(
        title="FilmOps API",
        version="v1",
        description=dedent(
            """
        Back office API for equipment rental and production scheduling.

        | Area | Resources |
        | --- | --- |
        | Inventory | items, categories, conditions, locations, kit templates |
        | Customers | clients, contacts |
        | Productions | projects, project team, project roles, team calendar |
        | Staff | users, exclusive-usage conflicts |
        """
        ),
        generate_unique_id_function=custom_generate_unique_id,
        swagger_ui_parameters={
            "defaultModelsExpandDepth": -1,  # Hide schemas section
            "defaultModelExpandDepth": 1,
        },
    )
    app.state.settings = settings

    # One pool per process, opened on startup
    app.state.db_pool = DatabasePool(
        settings.database_url,
        min_size=settings.db_min_pool_size,
        max_size=settings.db_max_pool_size,
        command_timeout=settings.db_command_timeout,
    )

    @app.on_event("startup")
    async def startup_database():
        """Open the connection pool and apply the schema if it is missing."""
        await app.state.db_pool.initialize()
        logger.success("Database pool ready")

    @app.on_event("shutdown")
    async def shutdown_database():
        await app.state.db_pool.close()
        logger.info("Database pool closed")

    # Add request context middleware for tracking who/where requests come from
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(ROUTER_HEALTH, prefix="/api")
    app.include_router(ROUTER_PROJECTS, prefix="/api")
    app.include_router(ROUTER_TEAM, prefix="/api")
    app.include_router(ROUTER_CLIENTS, prefix="/api")
    app.include_router(ROUTER_CONTACTS, prefix="/api")
    app.include_router(ROUTER_ITEMS, prefix="/api")
    app.include_router(ROUTER_REFERENCE, prefix="/api")
    app.include_router(ROUTER_KIT_TEMPLATES, prefix="/api")
    app.include_router(ROUTER_USERS, prefix="/api")

    app.add_exception_handler(
        exc_class_or_status_code=RequestValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.add_exception_handler(
        exc_class_or_status_code=StarletteHTTPException,
        handler=handle_http_exception,
    )
    for exc_class in BUSINESS_RULE_ERRORS:
        app.add_exception_handler(
            exc_class_or_status_code=exc_class,
            handler=handle_business_rule_errors,
        )
    app.add_exception_handler(
        exc_class_or_status_code=asyncpg.IntegrityConstraintViolationError,
        handler=handle_integrity_errors,
    )

    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


if __name__ == "__main__":
    import uvicorn

    app = create_app()
    uvicorn.run(app, host="0.0.0.0", port=8000)
