"""
Contact service.
"""
import uuid
from typing import Tuple, List

from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.core.exceptions import raise_already_exists, raise_not_found
from relateai.models.base import utcnow
from relateai.models.contact import Contact
from relateai.repositories.account_repo import AccountRepository
from relateai.repositories.contact_repo import ContactRepository
from relateai.schemas.contact import ActivityCreate, ContactCreate, ContactQuery, ContactUpdate


class ContactService:
    """Service for contact operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.contact_repo = ContactRepository(session)
        self.account_repo = AccountRepository(session)

    async def list(self, owner_id: uuid.UUID, query: ContactQuery) -> Tuple[List[Contact], dict]:
        return await self.contact_repo.search(
            owner_id,
            account_id=query.account_id,
            status=query.status,
            search=query.search,
            tags=query.tags,
            page=query.page or 1,
            limit=query.limit or 20,
            sort_by=query.sort_by or "created_at",
            sort_order=query.sort_order or "desc",
        )

    async def get(self, owner_id: uuid.UUID, contact_id: uuid.UUID) -> Contact:
        contact = await self.contact_repo.get(contact_id, owner_id)
        if not contact:
            raise_not_found("Contact", str(contact_id))
        return contact

    async def create(self, owner_id: uuid.UUID, data: ContactCreate) -> Contact:
        if not await self.account_repo.get(data.account_id, owner_id):
            raise_not_found("Account", str(data.account_id))

        values = data.model_dump(exclude_none=True)
        values["email"] = values["email"].lower()
        if await self.contact_repo.get_by_email(values["email"]):
            raise_already_exists("Contact", "email", values["email"])

        values["user_id"] = owner_id
        return await self.contact_repo.create(values)

    async def update(self, owner_id: uuid.UUID, contact_id: uuid.UUID, data: ContactUpdate) -> Contact:
        contact = await self.get(owner_id, contact_id)
        values = self.contact_repo.without_cleared(data.model_dump(mode="json", exclude_unset=True))

        if values.get("email"):
            values["email"] = values["email"].lower()
            existing = await self.contact_repo.get_by_email(values["email"])
            if existing and existing.id != contact.id:
                raise_already_exists("Contact", "email", values["email"])

        # Columns that are real datetimes, not JSON
        if data.last_contact_date is not None:
            values["last_contact_date"] = data.last_contact_date
        if "recent_activities" in values:
            values["recent_activities"] = [
                {**activity, "date": activity.get("date") or utcnow().isoformat()}
                for activity in values["recent_activities"] or []
            ]

        return await self.contact_repo.update(contact, values)

    async def add_activity(self, owner_id: uuid.UUID, contact_id: uuid.UUID, data: ActivityCreate) -> Contact:
        """Append an activity and bump the last contact date."""
        contact = await self.get(owner_id, contact_id)
        when = data.date or utcnow()
        entry = {"date": when.isoformat(), "description": data.description, "source": data.source}
        return await self.contact_repo.update(contact, {
            "recent_activities": [*(contact.recent_activities or []), entry],
            "last_contact_date": when,
        })

    async def delete(self, owner_id: uuid.UUID, contact_id: uuid.UUID) -> None:
        """Delete a contact with its messages and LinkedIn records."""
        contact = await self.get(owner_id, contact_id)
        await self.contact_repo.delete_cascade(contact)
