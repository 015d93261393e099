"""
Email template repository.
"""
import uuid
from typing import Optional, List, Tuple

from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.models.email_template import EmailTemplate
from relateai.repositories.base import BaseRepository, text_search


class EmailTemplateRepository(BaseRepository[EmailTemplate]):
    """Repository for EmailTemplate operations."""
    owner_field = "user_id"

    def __init__(self, session: AsyncSession):
        super().__init__(EmailTemplate, session)

    async def search(
        self,
        owner_id: uuid.UUID,
        category: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
        sort_order: str = "desc"
    ) -> Tuple[List[EmailTemplate], dict]:
        query = self.scoped(owner_id)
        if category:
            query = query.where(EmailTemplate.category == category)
        if search:
            query = query.where(text_search(
                search, EmailTemplate.name, EmailTemplate.description, EmailTemplate.subject, EmailTemplate.content
            ))
        return await self.list_paginated(
            query, page, limit, order_by="updated_at", order_desc=sort_order == "desc"
        )

    async def get_defaults(self, owner_id: uuid.UUID) -> List[EmailTemplate]:
        """Default template of each category."""
        query = self.scoped(owner_id).where(EmailTemplate.is_default == True).order_by(EmailTemplate.category)  # noqa: E712
        result = await self.session.exec(query)
        return list(result.all())

    async def clear_default(
        self,
        owner_id: uuid.UUID,
        category: str,
        keep_id: Optional[uuid.UUID] = None
    ) -> None:
        """Unset the default flag on every other template of a category (not committed)."""
        statement = (
            update(EmailTemplate)
            .where(EmailTemplate.user_id == owner_id)
            .where(EmailTemplate.category == category)
            .where(EmailTemplate.is_default == True)  # noqa: E712
        )
        if keep_id is not None:
            statement = statement.where(EmailTemplate.id != keep_id)
        await self.session.exec(statement.values(is_default=False))
