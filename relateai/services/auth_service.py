"""
Authentication service - registration and login.
"""
import logging

from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.core.security import get_password_hash, verify_password, create_access_token
from relateai.core.exceptions import raise_already_exists, raise_unauthorized
from relateai.models.base import utcnow
from relateai.models.user import User
from relateai.repositories.user_repo import UserRepository
from relateai.schemas.auth import RegisterRequest, LoginRequest

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)

    @staticmethod
    def issue_token(user: User) -> str:
        return create_access_token({"user_id": str(user.id), "email": user.email})

    async def register(self, data: RegisterRequest) -> tuple[User, str]:
        """Create a user and return it with an access token."""
        email = data.email.lower()
        if await self.user_repo.get_by_email(email):
            raise_already_exists("User", "email", email)

        user = await self.user_repo.create({
            "email": email,
            "password_hash": get_password_hash(data.password),
            "first_name": data.first_name,
            "last_name": data.last_name,
            "company": data.company,
        })
        logger.info("User %s registered", user.id)
        return user, self.issue_token(user)

    async def login(self, data: LoginRequest) -> tuple[User, str]:
        """Check credentials and return the user with an access token."""
        user = await self.user_repo.get_by_email(data.email)
        if not user or not verify_password(data.password, user.password_hash):
            raise_unauthorized("Invalid email or password")
        if not user.is_active:
            raise_unauthorized("User account is deactivated")

        user.last_login_at = utcnow()
        user = await self.user_repo.save(user)
        return user, self.issue_token(user)
