"""Contacts API endpoints."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, EmailStr, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from master_agentes.api.deps import require_tenant_context
from master_agentes.domain.services.contact_service import ContactService
from master_agentes.persistence.database import get_db
from master_agentes.persistence.models.contact import DEFAULT_CONTACT_ORIGIN, Contact

router = APIRouter()


# ============== Request/Response Models ==============

class CreateContactRequest(BaseModel):
    """Create contact request. An empty email is treated as no email."""

    name: str = Field(min_length=2)
    email: EmailStr | None = None
    phone: str | None = None
    origin: str = DEFAULT_CONTACT_ORIGIN
    tags: list[str] = Field(default_factory=list)

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ContactResponse(BaseModel):
    id: int
    name: str
    email: str | None
    phone: str | None
    origin: str
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ContactsListResponse(BaseModel):
    contacts: list[ContactResponse]
    total: int


# ============== Endpoints ==============

@router.get("", response_model=ContactsListResponse)
async def list_contacts(
    tenant_id: Annotated[int, Depends(require_tenant_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 100,
) -> ContactsListResponse:
    """List the tenant's contacts, newest first."""
    contacts = await ContactService(db).list_contacts(tenant_id, skip=skip, limit=limit)
    return ContactsListResponse(
        contacts=[ContactResponse.model_validate(contact) for contact in contacts],
        total=len(contacts),
    )


@router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
async def create_contact(
    payload: CreateContactRequest,
    tenant_id: Annotated[int, Depends(require_tenant_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Contact:
    """Create a contact by hand."""
    return await ContactService(db).create_contact(
        tenant_id,
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        origin=payload.origin,
        tags=payload.tags,
    )


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact(
    contact_id: int,
    tenant_id: Annotated[int, Depends(require_tenant_context)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete a contact."""
    await ContactService(db).delete_contact(tenant_id, contact_id)
