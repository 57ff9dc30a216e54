"""
Inventory API Routes

Gear items and the reference lookups (categories, conditions, locations) used by the
item forms.
"""

from typing import List

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import status
from loguru import logger

from filmops_api.db.pool import DatabasePool
from filmops_api.db.repository_item import REFERENCE_TABLES
from filmops_api.db.repository_item import ItemRepository
from filmops_api.db.repository_item import ReferenceRepository
from filmops_api.dependencies import get_current_user
from filmops_api.dependencies import get_db_pool
from filmops_api.schemas.schemas import ErrorResponse
from filmops_api.schemas.schemas import MessageResponse
from filmops_api.schemas.schemas_catalog import ItemOut
from filmops_api.schemas.schemas_catalog import ItemRequest
from filmops_api.schemas.schemas_catalog import ItemResponse
from filmops_api.schemas.schemas_catalog import ReferenceOut

ROUTER_ITEMS = APIRouter(tags=["Items"], dependencies=[Depends(get_current_user)])
ROUTER_REFERENCE = APIRouter(tags=["Reference"], dependencies=[Depends(get_current_user)])

ITEM_NOT_FOUND = "Item not found"


@ROUTER_ITEMS.get("/items", response_model=List[ItemOut])
async def list_items(db_pool: DatabasePool = Depends(get_db_pool)):
    """Every item with its category, condition and location, ordered by name."""
    rows = await ItemRepository(db_pool.pool).list_items()
    return [ItemOut.from_row(row) for row in rows]


@ROUTER_ITEMS.get(
    "/items/{item_id}",
    response_model=ItemResponse,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def get_item(item_id: int, db_pool: DatabasePool = Depends(get_db_pool)):
    row = await ItemRepository(db_pool.pool).get_item(item_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ITEM_NOT_FOUND)
    return ItemResponse(item=ItemOut.from_row(row))


@ROUTER_ITEMS.post(
    "/items",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def create_item(body: ItemRequest, db_pool: DatabasePool = Depends(get_db_pool)):
    """Create an item. Price defaults to 0; rentable and active default to true."""
    row = await ItemRepository(db_pool.pool).create_item(body.to_fields())
    logger.info("Item created", item_id=row["id"])
    return ItemResponse(item=ItemOut.from_row(row))


@ROUTER_ITEMS.put(
    "/items/{item_id}",
    response_model=ItemResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    },
)
async def update_item(item_id: int, body: ItemRequest, db_pool: DatabasePool = Depends(get_db_pool)):
    row = await ItemRepository(db_pool.pool).update_item(item_id, body.to_fields())
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ITEM_NOT_FOUND)
    logger.info("Item updated", item_id=item_id)
    return ItemResponse(item=ItemOut.from_row(row))


@ROUTER_ITEMS.delete(
    "/items/{item_id}",
    response_model=MessageResponse,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
async def delete_item(item_id: int, db_pool: DatabasePool = Depends(get_db_pool)):
    deleted = await ItemRepository(db_pool.pool).delete_item(item_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=ITEM_NOT_FOUND)
    logger.info("Item deleted", item_id=item_id)
    return MessageResponse(message="Item deleted successfully")


@ROUTER_REFERENCE.get("/categories", response_model=List[ReferenceOut])
async def list_categories(db_pool: DatabasePool = Depends(get_db_pool)):
    return await ReferenceRepository(db_pool.pool, REFERENCE_TABLES["categories"]).list_entries()


@ROUTER_REFERENCE.get("/conditions", response_model=List[ReferenceOut])
async def list_conditions(db_pool: DatabasePool = Depends(get_db_pool)):
    return await ReferenceRepository(db_pool.pool, REFERENCE_TABLES["conditions"]).list_entries()


@ROUTER_REFERENCE.get("/locations", response_model=List[ReferenceOut])
async def list_locations(db_pool: DatabasePool = Depends(get_db_pool)):
    return await ReferenceRepository(db_pool.pool, REFERENCE_TABLES["locations"]).list_entries()
