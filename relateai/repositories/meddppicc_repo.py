"""
MEDDPPICC assessment repository.
"""
import uuid
from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.models.meddppicc import MeddppiccAssessment
from relateai.repositories.base import BaseRepository


class MeddppiccRepository(BaseRepository[MeddppiccAssessment]):
    """Repository for MeddppiccAssessment operations."""
    owner_field = "owner_id"

    def __init__(self, session: AsyncSession):
        super().__init__(MeddppiccAssessment, session)

    async def get_by_account(self, account_id: uuid.UUID) -> Optional[MeddppiccAssessment]:
        query = select(MeddppiccAssessment).where(MeddppiccAssessment.account_id == account_id)
        result = await self.session.exec(query)
        return result.first()
