"""
Account repository with search and cascading delete.
"""
import uuid
from typing import Optional, List, Tuple

from sqlmodel import select
from sqlalchemy import delete, or_
from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.models.account import Account
from relateai.models.contact import Contact
from relateai.models.message import Message
from relateai.models.meddppicc import MeddppiccAssessment
from relateai.models.linkedin import LinkedInConnection, LinkedInMessage
from relateai.repositories.base import BaseRepository, json_list_contains, text_search


class AccountRepository(BaseRepository[Account]):
    """Repository for Account operations."""
    owner_field = "owner_id"

    def __init__(self, session: AsyncSession):
        super().__init__(Account, session)

    async def search(
        self,
        owner_id: uuid.UUID,
        search: Optional[str] = None,
        industry: Optional[str] = None,
        size: Optional[str] = None,
        tags: Optional[List[str]] = None,
        icp_score_min: Optional[int] = None,
        icp_score_max: Optional[int] = None,
        page: int = 1,
        limit: int = 20,
        sort_by: str = "created_at",
        sort_order: str = "desc"
    ) -> Tuple[List[Account], dict]:
        """Filtered, sorted, paginated account list."""
        query = self.scoped(owner_id)

        if search:
            query = query.where(or_(
                text_search(search, Account.name, Account.industry, Account.description),
                json_list_contains(Account.tags, search),
            ))
        if industry:
            query = query.where(Account.industry == industry)
        if size:
            query = query.where(Account.size == size)
        for tag in tags or []:
            query = query.where(json_list_contains(Account.tags, tag))
        if icp_score_min is not None:
            query = query.where(Account.icp_score >= icp_score_min)
        if icp_score_max is not None:
            query = query.where(Account.icp_score <= icp_score_max)

        return await self.list_paginated(
            query, page, limit, order_by=sort_by, order_desc=sort_order == "desc"
        )

    async def delete_cascade(self, account: Account) -> None:
        """
        Delete an account together with everything hanging off it:
        contacts, their messages and LinkedIn records, and the assessment.
        """
        contact_ids = select(Contact.id).where(Contact.account_id == account.id)

        await self.session.exec(delete(LinkedInMessage).where(LinkedInMessage.contact_id.in_(contact_ids)))
        await self.session.exec(delete(LinkedInConnection).where(LinkedInConnection.contact_id.in_(contact_ids)))
        await self.session.exec(delete(Message).where(or_(
            Message.account_id == account.id,
            Message.contact_id.in_(contact_ids),
        )))
        await self.session.exec(delete(MeddppiccAssessment).where(MeddppiccAssessment.account_id == account.id))
        await self.session.exec(delete(Contact).where(Contact.account_id == account.id))
        await self.session.delete(account)
        await self.session.commit()
