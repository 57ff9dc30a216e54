"""
Catalog API Schemas

Pydantic models for clients, contacts, gear items, reference lookups and kit templates.
"""

from datetime import date
from datetime import datetime
from decimal import Decimal
from typing import Any
from typing import Dict
from typing import List
from typing import Mapping
from typing import Optional

from pydantic import Field
from pydantic import field_validator
from pydantic import model_validator

from filmops_api.schemas.schemas import CamelModel
from filmops_api.schemas.schemas import blank_to_none
from filmops_api.schemas.schemas import full_name

# ════════════════════════════════════════════════════════════════════════════
# Clients
# ════════════════════════════════════════════════════════════════════════════


class ClientRequest(CamelModel):
    """Body of POST/PUT /clients."""

    name: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("name", "contact_person", "email", "phone_number", "address", "notes", mode="before")
    @classmethod
    def strip_text(cls, v):
        return blank_to_none(v)

    @model_validator(mode="after")
    def validate_client(self):
        if not self.name:
            raise ValueError("Client name is required")
        return self


class ClientOut(CamelModel):
    id: int
    name: str
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ClientResponse(CamelModel):
    success: bool = True
    client: ClientOut


# ════════════════════════════════════════════════════════════════════════════
# Contacts
# ════════════════════════════════════════════════════════════════════════════


class ContactRequest(CamelModel):
    """Body of POST/PUT /contacts. ``clientId`` is optional: contacts can stand alone."""

    client_id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    position: Optional[str] = None
    department: Optional[str] = None
    is_primary: bool = False
    notes: Optional[str] = None
    specialties: Optional[str] = None
    website: Optional[str] = None

    @field_validator(
        "name", "email", "phone_number", "position", "department", "notes", "specialties", "website", mode="before"
    )
    @classmethod
    def strip_text(cls, v):
        return blank_to_none(v)

    @model_validator(mode="after")
    def validate_contact(self):
        if not self.name:
            raise ValueError("Contact name is required")
        return self


class ContactOut(CamelModel):
    id: int
    client_id: Optional[int] = None
    client_name: Optional[str] = None
    name: str
    email: Optional[str] = None
    phone_number: Optional[str] = None
    position: Optional[str] = None
    department: Optional[str] = None
    is_primary: bool = False
    notes: Optional[str] = None
    specialties: Optional[str] = None
    website: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ContactListResponse(CamelModel):
    success: bool = True
    count: int
    contacts: List[ContactOut]


class ContactResponse(CamelModel):
    success: bool = True
    contact: ContactOut


# ════════════════════════════════════════════════════════════════════════════
# Items and reference data
# ════════════════════════════════════════════════════════════════════════════


class ItemRequest(CamelModel):
    """Body of POST/PUT /items."""

    name: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    category_id: Optional[int] = None
    condition_id: Optional[int] = None
    location_id: Optional[int] = None
    notes: Optional[str] = None
    acquisition_date: Optional[date] = None
    purchase_price: Optional[Decimal] = Field(None, ge=0)
    is_rentable: Optional[bool] = None
    is_active: Optional[bool] = None

    @field_validator("name", "make", "model", "serial_number", "notes", mode="before")
    @classmethod
    def strip_text(cls, v):
        return blank_to_none(v)

    @model_validator(mode="after")
    def validate_item(self):
        if not self.name:
            raise ValueError("Name is required")
        return self

    def to_fields(self) -> Dict[str, Any]:
        """Column values for the items table (missing price/flags are defaulted by the repository)."""
        return {
            "name": self.name,
            "make": self.make,
            "model": self.model,
            "serial_number": self.serial_number,
            "category_id": self.category_id,
            "current_condition_id": self.condition_id,
            "item_location_id": self.location_id,
            "notes": self.notes,
            "acquisition_date": self.acquisition_date,
            "purchase_price": self.purchase_price,
            "is_rentable": self.is_rentable,
            "is_active": self.is_active,
        }


class ReferenceOut(CamelModel):
    """Category, condition or item location."""

    id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None


class ItemOut(CamelModel):
    id: int
    name: str
    make: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    category: ReferenceOut
    current_condition: ReferenceOut
    item_location: Optional[ReferenceOut] = None
    notes: Optional[str] = None
    acquisition_date: Optional[date] = None
    purchase_price: Optional[Decimal] = None
    is_rentable: bool
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ItemOut":
        location = None
        if row.get("item_location_id"):
            location = ReferenceOut(
                id=row["item_location_id"],
                name=row.get("location_name"),
                description=row.get("location_description"),
            )
        return cls(
            id=row["id"],
            name=row["name"],
            make=row.get("make"),
            model=row.get("model"),
            serial_number=row.get("serial_number"),
            category=ReferenceOut(
                id=row.get("category_id"),
                name=row.get("category_name"),
                description=row.get("category_description"),
            ),
            current_condition=ReferenceOut(
                id=row.get("current_condition_id"),
                name=row.get("condition_name"),
                description=row.get("condition_description"),
            ),
            item_location=location,
            notes=row.get("notes"),
            acquisition_date=row.get("acquisition_date"),
            purchase_price=row.get("purchase_price"),
            is_rentable=row["is_rentable"],
            is_active=row["is_active"],
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


class ItemResponse(CamelModel):
    success: bool = True
    item: ItemOut


# ════════════════════════════════════════════════════════════════════════════
# Kit templates
# ════════════════════════════════════════════════════════════════════════════


class KitTemplateItemInput(CamelModel):
    item_id: int
    quantity: Optional[int] = Field(None, ge=1)


class KitTemplateCreate(CamelModel):
    """Body of POST /kit-templates."""

    name: Optional[str] = None
    description: Optional[str] = None
    items: Optional[List[KitTemplateItemInput]] = None

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return blank_to_none(v)

    @model_validator(mode="after")
    def validate_template(self):
        if not self.name or self.items is None:
            raise ValueError("Name and items are required")
        return self


class KitTemplateUpdate(CamelModel):
    """Body of PUT /kit-templates/{id}. Omitting ``items`` clears the template's items."""

    name: Optional[str] = None
    description: Optional[str] = None
    items: Optional[List[KitTemplateItemInput]] = None

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return blank_to_none(v)

    @model_validator(mode="after")
    def validate_template(self):
        if not self.name:
            raise ValueError("Name is required")
        return self


class KitTemplateOut(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_active: bool
    source_type: str


class KitTemplateSummaryOut(KitTemplateOut):
    creator_name: Optional[str] = None
    item_count: int = 0

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "KitTemplateSummaryOut":
        data = dict(row)
        return cls(
            creator_name=full_name(data.pop("creator_first_name", None), data.pop("creator_last_name", None)),
            **data,
        )


class KitItemName(CamelModel):
    name: Optional[str] = None


class KitItemDetail(CamelModel):
    id: int
    name: str
    make: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    category: KitItemName
    current_condition: KitItemName
    item_location: KitItemName


class KitTemplateItemOut(CamelModel):
    id: int
    quantity: int
    item: KitItemDetail

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "KitTemplateItemOut":
        return cls(
            id=row["id"],
            quantity=row["quantity"],
            item=KitItemDetail(
                id=row["item_id"],
                name=row["name"],
                make=row.get("make"),
                model=row.get("model"),
                serial_number=row.get("serial_number"),
                category=KitItemName(name=row.get("category_name")),
                current_condition=KitItemName(name=row.get("condition_name")),
                item_location=KitItemName(name=row.get("location_name")),
            ),
        )


class KitTemplateDetailOut(KitTemplateOut):
    creator_name: Optional[str] = None
    items: List[KitTemplateItemOut]

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "KitTemplateDetailOut":
        data = dict(row)
        items = [KitTemplateItemOut.from_row(item) for item in data.pop("items", [])]
        return cls(
            creator_name=full_name(data.pop("creator_first_name", None), data.pop("creator_last_name", None)),
            items=items,
            **data,
        )


class KitTemplateListResponse(CamelModel):
    success: bool = True
    count: int
    templates: List[KitTemplateSummaryOut]


class KitTemplateDetailResponse(CamelModel):
    success: bool = True
    kit_template: KitTemplateDetailOut


class KitTemplateResponse(CamelModel):
    success: bool = True
    message: str
    kit_template: KitTemplateOut


class KitTemplateDeletedOut(CamelModel):
    id: int
    name: str


class KitTemplateDeleteResponse(CamelModel):
    success: bool = True
    message: str
    kit_template: KitTemplateDeletedOut
