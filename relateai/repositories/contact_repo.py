"""
Contact repository.
"""
import uuid
from typing import Optional, List, Tuple

from sqlalchemy import delete
from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.models.contact import Contact
from relateai.models.linkedin import LinkedInConnection, LinkedInMessage
from relateai.models.message import Message
from relateai.repositories.base import BaseRepository, json_list_contains, text_search


class ContactRepository(BaseRepository[Contact]):
    """Repository for Contact operations."""
    owner_field = "user_id"

    def __init__(self, session: AsyncSession):
        super().__init__(Contact, session)

    async def get_by_email(self, email: str) -> Optional[Contact]:
        return await self.get_by_field("email", email.lower())

    async def search(
        self,
        owner_id: uuid.UUID,
        account_id: Optional[uuid.UUID] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
        tags: Optional[List[str]] = None,
        page: int = 1,
        limit: int = 20,
        sort_by: str = "created_at",
        sort_order: str = "desc"
    ) -> Tuple[List[Contact], dict]:
        """Filtered, sorted, paginated contact list."""
        query = self.scoped(owner_id)

        if account_id:
            query = query.where(Contact.account_id == account_id)
        if status:
            query = query.where(Contact.status == status)
        if search:
            query = query.where(text_search(
                search, Contact.first_name, Contact.last_name, Contact.email, Contact.company, Contact.title
            ))
        for tag in tags or []:
            query = query.where(json_list_contains(Contact.tags, tag))

        return await self.list_paginated(
            query, page, limit, order_by=sort_by, order_desc=sort_order == "desc"
        )

    async def delete_cascade(self, contact: Contact) -> None:
        """Delete a contact with its messages and LinkedIn records."""
        await self.session.exec(delete(LinkedInMessage).where(LinkedInMessage.contact_id == contact.id))
        await self.session.exec(delete(LinkedInConnection).where(LinkedInConnection.contact_id == contact.id))
        await self.session.exec(delete(Message).where(Message.contact_id == contact.id))
        await self.session.delete(contact)
        await self.session.commit()
