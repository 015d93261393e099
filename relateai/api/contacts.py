"""
Contacts API routes.
"""
import uuid
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.database import get_session
from relateai.core.validation import validate
from relateai.services.contact_service import ContactService
from relateai.schemas.contact import (
    ContactCreate, ContactUpdate, ContactQuery, ContactRead, ActivityCreate
)
from relateai.api.deps import get_current_user
from relateai.models.user import User

router = APIRouter(prefix="/api/contacts", tags=["contacts"])


@router.get("")
async def list_contacts(
    query: ContactQuery = Depends(validate(ContactQuery, "query")),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """List contacts with filtering and pagination."""
    contacts, pagination = await ContactService(session).list(current_user.id, query)
    return {
        "success": True,
        "contacts": [ContactRead.model_validate(c) for c in contacts],
        "pagination": pagination
    }


@router.post("", status_code=201)
async def create_contact(
    data: ContactCreate = Depends(validate(ContactCreate)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    contact = await ContactService(session).create(current_user.id, data)
    return {"success": True, "message": "Contact created successfully", "contact": ContactRead.model_validate(contact)}


@router.get("/{contact_id}")
async def get_contact(
    contact_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    contact = await ContactService(session).get(current_user.id, contact_id)
    return {"success": True, "contact": ContactRead.model_validate(contact)}


@router.put("/{contact_id}")
async def update_contact(
    contact_id: uuid.UUID,
    data: ContactUpdate = Depends(validate(ContactUpdate)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    contact = await ContactService(session).update(current_user.id, contact_id, data)
    return {"success": True, "message": "Contact updated successfully", "contact": ContactRead.model_validate(contact)}


@router.post("/{contact_id}/activities")
async def add_activity(
    contact_id: uuid.UUID,
    data: ActivityCreate = Depends(validate(ActivityCreate)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Record an activity against a contact."""
    contact = await ContactService(session).add_activity(current_user.id, contact_id, data)
    return {"success": True, "message": "Activity added successfully", "contact": ContactRead.model_validate(contact)}


@router.delete("/{contact_id}")
async def delete_contact(
    contact_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    await ContactService(session).delete(current_user.id, contact_id)
    return {"success": True, "message": "Contact deleted successfully"}
