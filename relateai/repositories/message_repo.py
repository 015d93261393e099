"""
Message repository.
"""
import uuid
from typing import Optional, List, Tuple

from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.models.message import Message
from relateai.repositories.base import BaseRepository, text_search


class MessageRepository(BaseRepository[Message]):
    """Repository for Message operations."""
    owner_field = "user_id"

    def __init__(self, session: AsyncSession):
        super().__init__(Message, session)

    async def search(
        self,
        owner_id: uuid.UUID,
        filters: Optional[dict] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
        sort_by: str = "created_at",
        sort_order: str = "desc"
    ) -> Tuple[List[Message], dict]:
        """Filtered, sorted, paginated message list."""
        query = self._apply_filters(self.scoped(owner_id), filters)
        if search:
            query = query.where(text_search(search, Message.subject, Message.content))

        return await self.list_paginated(
            query, page, limit, order_by=sort_by, order_desc=sort_order == "desc"
        )

    async def get_by_contact(self, owner_id: uuid.UUID, contact_id: uuid.UUID) -> List[Message]:
        """All messages for a contact, oldest first."""
        return await self.list(
            owner_id, filters={"contact_id": contact_id}, order_by="created_at", order_desc=False
        )
