####################################
# --- Request/response schemas --- #
####################################

from datetime import date
from datetime import datetime
from decimal import Decimal
from typing import Any
from typing import Dict
from typing import List
from typing import Mapping
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import field_validator
from pydantic import model_validator
from pydantic.alias_generators import to_camel

from filmops_api.enums import ProjectStatus
from filmops_api.scheduling.project_status import calculate_status


class CamelModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def blank_to_none(value: Any) -> Any:
    """Trim strings; empty strings become None."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def full_name(first_name: Optional[str], last_name: Optional[str]) -> Optional[str]:
    parts = [part for part in (first_name, last_name) if part]
    return " ".join(parts) if parts else None


class ErrorResponse(BaseModel):
    """Body of every error response."""

    success: bool = False
    error: str


class MessageResponse(BaseModel):
    success: bool = True
    message: str


# ════════════════════════════════════════════════════════════════════════════
# Projects
# ════════════════════════════════════════════════════════════════════════════


# create/update (CrUd)
class ProjectRequest(CamelModel):
    """Body of POST/PUT /projects."""

    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    location: Optional[str] = None
    budget: Optional[Decimal] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    client_id: Optional[int] = None
    project_manager_id: Optional[int] = None
    contact_id: Optional[int] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Spring campaign shoot",
                "clientId": 3,
                "projectManagerId": 7,
                "startDate": "2025-04-01",
                "endDate": "2025-04-12",
                "location": "Studio B",
                "budget": 25000,
            }
        }
    )

    @field_validator("name", "description", "location", mode="before")
    @classmethod
    def strip_text(cls, v):
        return blank_to_none(v)

    @model_validator(mode="after")
    def validate_project(self):
        """Require a name and a forward date range."""
        if not self.name:
            raise ValueError("Project name is required")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self

    def to_fields(self, default_status: Optional[str] = None, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Column values for the projects table, with the status already calculated.

        Args:
            default_status: Status to feed the calculator when the body has none
            today: Reference day for the calculator
        """
        requested = self.status.value if self.status else default_status
        return {
            "name": self.name,
            "description": self.description,
            "status": calculate_status(self.start_date, self.end_date, requested, today=today),
            "location": self.location,
            "budget": self.budget,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "client_id": self.client_id,
            "project_manager_user_id": self.project_manager_id,
            "contact_id": self.contact_id,
        }


class ClientSummary(CamelModel):
    id: Optional[int] = None
    name: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None


class ManagerSummary(CamelModel):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


# read (cRud)
class ProjectOut(CamelModel):
    """A project as listed, with its status recalculated for today."""

    id: int
    name: str
    client: ClientSummary
    project_manager: Optional[ManagerSummary] = None
    contact_id: Optional[int] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: str
    original_status: str
    location: Optional[str] = None
    budget: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any], today: Optional[date] = None) -> "ProjectOut":
        manager = None
        if row.get("project_manager_user_id"):
            manager = ManagerSummary(
                id=row["project_manager_user_id"],
                first_name=row.get("manager_first_name"),
                last_name=row.get("manager_last_name"),
                email=row.get("manager_email"),
            )
        return cls(
            id=row["id"],
            name=row["name"],
            client=ClientSummary(
                id=row.get("client_id"),
                name=row.get("client_name"),
                contact_person=row.get("contact_person"),
                email=row.get("client_email"),
                phone_number=row.get("client_phone"),
            ),
            project_manager=manager,
            contact_id=row.get("contact_id"),
            description=row.get("description"),
            start_date=row.get("start_date"),
            end_date=row.get("end_date"),
            status=calculate_status(row.get("start_date"), row.get("end_date"), row["status"], today=today),
            original_status=row["status"],
            location=row.get("location"),
            budget=row.get("budget"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


class ProjectWriteOut(CamelModel):
    """A project row as stored after a create or update."""

    id: int
    name: str
    description: Optional[str] = None
    status: str
    location: Optional[str] = None
    budget: Optional[Decimal] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    client_id: Optional[int] = None
    project_manager_id: Optional[int] = None
    contact_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ProjectWriteOut":
        return cls(project_manager_id=row.get("project_manager_user_id"), **dict(row))


class ProjectResponse(CamelModel):
    success: bool = True
    project: ProjectWriteOut


class ProjectDetailResponse(CamelModel):
    success: bool = True
    project: ProjectOut


# ════════════════════════════════════════════════════════════════════════════
# Project team
# ════════════════════════════════════════════════════════════════════════════


class TeamAssignmentCreate(CamelModel):
    """Body of POST /projects/{projectId}/team."""

    user_id: Optional[int] = None
    project_role_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "userId": 4,
                "projectRoleId": 1,
                "startDate": "2025-04-01",
                "endDate": "2025-04-05",
                "notes": "Day rate agreed",
            }
        }
    )

    @field_validator("notes", mode="before")
    @classmethod
    def strip_text(cls, v):
        return blank_to_none(v)

    @model_validator(mode="after")
    def validate_assignment(self):
        if not (self.user_id and self.project_role_id and self.start_date and self.end_date):
            raise ValueError("User ID, project role ID, start date, and end date are required")
        if self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self


class TeamAssignmentUpdate(CamelModel):
    """Body of PUT /projects/{projectId}/team/{assignmentId}. The assigned user cannot change."""

    project_role_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("notes", mode="before")
    @classmethod
    def strip_text(cls, v):
        return blank_to_none(v)

    @model_validator(mode="after")
    def validate_assignment(self):
        if not (self.project_role_id and self.start_date and self.end_date):
            raise ValueError("Project role ID, start date, and end date are required")
        if self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self


class TeamMemberOut(CamelModel):
    id: int
    project_id: int
    user_id: int
    start_date: date
    end_date: date
    notes: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    role_id: int
    role_name: str
    role_description: Optional[str] = None


class AssignmentOut(CamelModel):
    id: int
    project_id: int
    user_id: int
    project_role_id: int
    start_date: date
    end_date: date
    notes: Optional[str] = None


class TeamListResponse(CamelModel):
    success: bool = True
    data: List[TeamMemberOut]


class AssignmentResponse(CamelModel):
    success: bool = True
    data: AssignmentOut


class ProjectRoleOut(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProjectRoleListResponse(CamelModel):
    success: bool = True
    data: List[ProjectRoleOut]


# ════════════════════════════════════════════════════════════════════════════
# Team calendar
# ════════════════════════════════════════════════════════════════════════════


class CalendarAssignmentOut(CamelModel):
    id: int
    project_id: int
    project_name: str
    user_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role_name: str
    start_date: date
    end_date: date


class CalendarDayOut(CamelModel):
    day: date
    assignments: List[CalendarAssignmentOut]


class CalendarData(CamelModel):
    start_date: date
    end_date: date
    active_today: int
    days: List[CalendarDayOut]


class CalendarResponse(CamelModel):
    success: bool = True
    data: CalendarData


# ════════════════════════════════════════════════════════════════════════════
# Users
# ════════════════════════════════════════════════════════════════════════════


class UserRequest(CamelModel):
    """Body of POST/PUT /users."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    role_id: Optional[int] = None
    user_group_id: Optional[int] = None
    is_active: Optional[bool] = None
    exclusive_usage: Optional[bool] = None

    @field_validator("first_name", "last_name", "email", "phone_number", "address", mode="before")
    @classmethod
    def strip_text(cls, v):
        return blank_to_none(v)

    @model_validator(mode="after")
    def validate_user(self):
        if not (self.first_name and self.last_name and self.email):
            raise ValueError("First name, last name, and email are required")
        return self

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=False)


class RoleSummary(CamelModel):
    id: Optional[int] = None
    name: Optional[str] = None


class UserOut(CamelModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone_number: Optional[str] = None
    address: Optional[str] = None
    is_active: bool
    exclusive_usage: bool
    user_group_id: Optional[int] = None
    role: Optional[RoleSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "UserOut":
        data = dict(row)
        role = RoleSummary(id=data["role_id"], name=data.get("role_name")) if data.get("role_id") else None
        return cls(role=role, **{k: v for k, v in data.items() if k in cls.model_fields and k != "role"})


class UserListResponse(CamelModel):
    success: bool = True
    count: int
    users: List[UserOut]


class UserResponse(CamelModel):
    success: bool = True
    user: UserOut


class ConflictOut(CamelModel):
    id: int
    project_id: int
    project_name: str
    role_name: str
    start_date: date
    end_date: date


class UserConflictsResponse(CamelModel):
    success: bool = True
    user_id: int
    exclusive_usage: bool
    count: int
    conflicts: List[ConflictOut]
