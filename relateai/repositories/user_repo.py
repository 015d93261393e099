"""
User repository.
"""
from typing import Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.models.user import User
from relateai.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""
    owner_field = "id"

    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        query = select(User).where(User.email == email.lower())
        result = await self.session.exec(query)
        return result.first()
