"""
Kit Template API Routes

Reusable bundles of items. Callers without global kit access only see templates used
by projects they are staffed on.
"""

from typing import Any
from typing import Dict
from typing import List
from typing import Optional

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import status
from loguru import logger

from filmops_api.db.pool import DatabasePool
from filmops_api.db.repository_kit_template import KitTemplateRepository
from filmops_api.dependencies import get_current_user
from filmops_api.dependencies import get_db_pool
from filmops_api.dependencies import get_kit_scope
from filmops_api.schemas.schemas import ErrorResponse
from filmops_api.schemas.schemas_catalog import KitTemplateCreate
from filmops_api.schemas.schemas_catalog import KitTemplateDeleteResponse
from filmops_api.schemas.schemas_catalog import KitTemplateDetailOut
from filmops_api.schemas.schemas_catalog import KitTemplateDetailResponse
from filmops_api.schemas.schemas_catalog import KitTemplateListResponse
from filmops_api.schemas.schemas_catalog import KitTemplateResponse
from filmops_api.schemas.schemas_catalog import KitTemplateSummaryOut
from filmops_api.schemas.schemas_catalog import KitTemplateUpdate

ROUTER_KIT_TEMPLATES = APIRouter(tags=["Kit Templates"], dependencies=[Depends(get_current_user)])

TEMPLATE_NOT_FOUND = "Kit template not found"


@ROUTER_KIT_TEMPLATES.get("/kit-templates", response_model=KitTemplateListResponse)
async def list_kit_templates(
    project_ids: Optional[List[int]] = Depends(get_kit_scope),
    db_pool: DatabasePool = Depends(get_db_pool),
):
    """Active templates, newest first."""
    if project_ids is not None and not project_ids:
        return KitTemplateListResponse(count=0, templates=[])

    rows = await KitTemplateRepository(db_pool.pool).list_templates(project_ids)
    templates = [KitTemplateSummaryOut.from_row(row) for row in rows]
    return KitTemplateListResponse(count=len(templates), templates=templates)


@ROUTER_KIT_TEMPLATES.get(
    "/kit-templates/{template_id}",
    response_model=KitTemplateDetailResponse,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def get_kit_template(template_id: int, db_pool: DatabasePool = Depends(get_db_pool)):
    row = await KitTemplateRepository(db_pool.pool).get_template(template_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TEMPLATE_NOT_FOUND)
    return KitTemplateDetailResponse(kit_template=KitTemplateDetailOut.from_row(row))


@ROUTER_KIT_TEMPLATES.post(
    "/kit-templates",
    response_model=KitTemplateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def create_kit_template(
    body: KitTemplateCreate,
    user: Dict[str, Any] = Depends(get_current_user),
    db_pool: DatabasePool = Depends(get_db_pool),
):
    """Create a template and its items in one transaction. Item quantity defaults to 1."""
    row = await KitTemplateRepository(db_pool.pool).create_template(
        name=body.name,
        description=body.description,
        items=[item.model_dump() for item in body.items],
        created_by=user["id"],
    )
    return KitTemplateResponse(message="Kit template created successfully", kit_template=row)


@ROUTER_KIT_TEMPLATES.put(
    "/kit-templates/{template_id}",
    response_model=KitTemplateResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def update_kit_template(
    template_id: int,
    body: KitTemplateUpdate,
    db_pool: DatabasePool = Depends(get_db_pool),
):
    """Update name and description and replace the template's items."""
    row = await KitTemplateRepository(db_pool.pool).update_template(
        template_id,
        name=body.name,
        description=body.description,
        items=[item.model_dump() for item in body.items or []],
    )
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TEMPLATE_NOT_FOUND)
    return KitTemplateResponse(message="Kit template updated successfully", kit_template=row)


@ROUTER_KIT_TEMPLATES.delete(
    "/kit-templates/{template_id}",
    response_model=KitTemplateDeleteResponse,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def delete_kit_template(template_id: int, db_pool: DatabasePool = Depends(get_db_pool)):
    """Deactivate a template. It disappears from lists but its rows are kept."""
    row = await KitTemplateRepository(db_pool.pool).deactivate_template(template_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TEMPLATE_NOT_FOUND)
    logger.info("Kit template deactivated", kit_template_id=template_id)
    return KitTemplateDeleteResponse(message="Kit template deleted successfully", kit_template=row)
