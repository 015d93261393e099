"""
LinkedIn repositories: integration, connections, messages.
"""
import uuid
from typing import Optional, List, Tuple

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.models.linkedin import LinkedInIntegration, LinkedInConnection, LinkedInMessage
from relateai.repositories.base import BaseRepository


class LinkedInIntegrationRepository(BaseRepository[LinkedInIntegration]):
    """One integration row per user."""
    owner_field = "user_id"

    def __init__(self, session: AsyncSession):
        super().__init__(LinkedInIntegration, session)

    async def get_by_user(self, user_id: uuid.UUID) -> Optional[LinkedInIntegration]:
        return await self.get_by_field("user_id", user_id)


class LinkedInConnectionRepository(BaseRepository[LinkedInConnection]):
    owner_field = "user_id"

    def __init__(self, session: AsyncSession):
        super().__init__(LinkedInConnection, session)

    async def get_by_contact(self, user_id: uuid.UUID, contact_id: uuid.UUID) -> Optional[LinkedInConnection]:
        query = select(LinkedInConnection).where(
            LinkedInConnection.user_id == user_id,
            LinkedInConnection.contact_id == contact_id
        )
        result = await self.session.exec(query)
        return result.first()

    async def list_for_user(
        self, user_id: uuid.UUID, page: int = 1, limit: int = 20
    ) -> Tuple[List[LinkedInConnection], dict]:
        return await self.list_paginated(self.scoped(user_id), page, limit, order_by="updated_at")


class LinkedInMessageRepository(BaseRepository[LinkedInMessage]):
    owner_field = "user_id"

    def __init__(self, session: AsyncSession):
        super().__init__(LinkedInMessage, session)

    async def list_for_contact(
        self, user_id: uuid.UUID, contact_id: uuid.UUID, page: int = 1, limit: int = 20
    ) -> Tuple[List[LinkedInMessage], dict]:
        query = self.scoped(user_id).where(LinkedInMessage.contact_id == contact_id)
        return await self.list_paginated(query, page, limit, order_by="sent_at")
