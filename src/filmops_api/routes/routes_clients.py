"""
Client and Contact API Routes
"""

from typing import List

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import status
from loguru import logger

from filmops_api.db.pool import DatabasePool
from filmops_api.db.repository_client import ClientRepository
from filmops_api.db.repository_client import ContactRepository
from filmops_api.dependencies import get_current_user
from filmops_api.dependencies import get_db_pool
from filmops_api.schemas.schemas import ErrorResponse
from filmops_api.schemas.schemas import MessageResponse
from filmops_api.schemas.schemas_catalog import ClientOut
from filmops_api.schemas.schemas_catalog import ClientRequest
from filmops_api.schemas.schemas_catalog import ClientResponse
from filmops_api.schemas.schemas_catalog import ContactListResponse
from filmops_api.schemas.schemas_catalog import ContactOut
from filmops_api.schemas.schemas_catalog import ContactRequest
from filmops_api.schemas.schemas_catalog import ContactResponse

ROUTER_CLIENTS = APIRouter(tags=["Clients"], dependencies=[Depends(get_current_user)])
ROUTER_CONTACTS = APIRouter(tags=["Contacts"], dependencies=[Depends(get_current_user)])

CLIENT_NOT_FOUND = "Client not found"
CONTACT_NOT_FOUND = "Contact not found"

NOT_FOUND_RESPONSE = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}
WRITE_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
}


# ════════════════════════════════════════════════════════════════════════════
# Clients
# ════════════════════════════════════════════════════════════════════════════


@ROUTER_CLIENTS.get("/clients", response_model=List[ClientOut])
async def list_clients(db_pool: DatabasePool = Depends(get_db_pool)):
    return await ClientRepository(db_pool.pool).list_clients()


@ROUTER_CLIENTS.get("/clients/{client_id}", response_model=ClientResponse, responses=NOT_FOUND_RESPONSE)
async def get_client(client_id: int, db_pool: DatabasePool = Depends(get_db_pool)):
    row = await ClientRepository(db_pool.pool).get_by_id(client_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CLIENT_NOT_FOUND)
    return {"success": True, "client": row}


@ROUTER_CLIENTS.post(
    "/clients",
    response_model=ClientResponse,
    status_code=status.HTTP_201_CREATED,
    responses=WRITE_RESPONSES,
)
async def create_client(body: ClientRequest, db_pool: DatabasePool = Depends(get_db_pool)):
    row = await ClientRepository(db_pool.pool).create_client(body.model_dump())
    logger.info("Client created", client_id=row["id"])
    return {"success": True, "client": row}


@ROUTER_CLIENTS.put("/clients/{client_id}", response_model=ClientResponse, responses=WRITE_RESPONSES)
async def update_client(client_id: int, body: ClientRequest, db_pool: DatabasePool = Depends(get_db_pool)):
    row = await ClientRepository(db_pool.pool).update_client(client_id, body.model_dump())
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CLIENT_NOT_FOUND)
    logger.info("Client updated", client_id=client_id)
    return {"success": True, "client": row}


@ROUTER_CLIENTS.delete("/clients/{client_id}", response_model=MessageResponse, responses=NOT_FOUND_RESPONSE)
async def delete_client(client_id: int, db_pool: DatabasePool = Depends(get_db_pool)):
    deleted = await ClientRepository(db_pool.pool).delete_client(client_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CLIENT_NOT_FOUND)
    logger.info("Client deleted", client_id=client_id)
    return MessageResponse(message="Client deleted successfully")


@ROUTER_CLIENTS.get("/clients/{client_id}/contacts", response_model=List[ContactOut])
async def list_client_contacts(client_id: int, db_pool: DatabasePool = Depends(get_db_pool)):
    """A client's contacts, primary contact first."""
    return await ContactRepository(db_pool.pool).list_for_client(client_id)


# ════════════════════════════════════════════════════════════════════════════
# Contacts
# ════════════════════════════════════════════════════════════════════════════


@ROUTER_CONTACTS.get("/contacts", response_model=ContactListResponse)
async def list_contacts(db_pool: DatabasePool = Depends(get_db_pool)):
    rows = await ContactRepository(db_pool.pool).list_contacts()
    return {"success": True, "count": len(rows), "contacts": rows}


@ROUTER_CONTACTS.get("/contacts/{contact_id}", response_model=ContactResponse, responses=NOT_FOUND_RESPONSE)
async def get_contact(contact_id: int, db_pool: DatabasePool = Depends(get_db_pool)):
    row = await ContactRepository(db_pool.pool).get_contact(contact_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CONTACT_NOT_FOUND)
    return {"success": True, "contact": row}


@ROUTER_CONTACTS.post(
    "/contacts",
    response_model=ContactResponse,
    status_code=status.HTTP_201_CREATED,
    responses=WRITE_RESPONSES,
)
async def create_contact(body: ContactRequest, db_pool: DatabasePool = Depends(get_db_pool)):
    """Create a contact. A primary contact replaces the client's previous primary."""
    row = await ContactRepository(db_pool.pool).create_contact(body.model_dump())
    logger.info("Contact created", contact_id=row["id"], client_id=row["client_id"], is_primary=row["is_primary"])
    return {"success": True, "contact": row}


@ROUTER_CONTACTS.put("/contacts/{contact_id}", response_model=ContactResponse, responses=WRITE_RESPONSES)
async def update_contact(contact_id: int, body: ContactRequest, db_pool: DatabasePool = Depends(get_db_pool)):
    row = await ContactRepository(db_pool.pool).update_contact(contact_id, body.model_dump())
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CONTACT_NOT_FOUND)
    logger.info("Contact updated", contact_id=contact_id)
    return {"success": True, "contact": row}


@ROUTER_CONTACTS.delete("/contacts/{contact_id}", response_model=MessageResponse, responses=NOT_FOUND_RESPONSE)
async def delete_contact(contact_id: int, db_pool: DatabasePool = Depends(get_db_pool)):
    deleted = await ContactRepository(db_pool.pool).delete_contact(contact_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CONTACT_NOT_FOUND)
    logger.info("Contact deleted", contact_id=contact_id)
    return MessageResponse(message="Contact deleted successfully")
