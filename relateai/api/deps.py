"""
API dependencies - shared across all routes.
"""
import uuid
from typing import AsyncIterator, Optional

from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.database import get_session
from relateai.config import settings
from relateai.core.security import verify_token
from relateai.core.exceptions import raise_unauthorized
from relateai.models.user import User
from relateai.repositories.user_repo import UserRepository
from relateai.services.ai_service import AIService, get_ai_service
from relateai.services.email_service import EmailService, get_email_service
from relateai.services.integrations.linkedin import LinkedInAPIClient, get_linkedin_client


auth_header = APIKeyHeader(name=settings.AUTH_HEADER, auto_error=False)


async def get_current_user(
    token: Optional[str] = Depends(auth_header),
    session: AsyncSession = Depends(get_session)
) -> User:
    """Get current authenticated user from the JWT in the auth header."""
    if not token:
        raise_unauthorized("No token, authorization denied")

    payload = verify_token(token, "access")
    if not payload:
        raise_unauthorized("Token is not valid")

    user_id = payload.get("user_id")
    if not user_id:
        raise_unauthorized("Token is not valid")

    user_repo = UserRepository(session)
    user = await user_repo.get(uuid.UUID(user_id))

    if not user:
        raise_unauthorized("User not found")

    if not user.is_active:
        raise_unauthorized("User account is deactivated")

    return user


def get_ai() -> AIService:
    return get_ai_service()


def get_email() -> EmailService:
    return get_email_service()


async def get_linkedin() -> AsyncIterator[LinkedInAPIClient]:
    """LinkedIn client for one request, closed afterwards."""
    client = get_linkedin_client()
    try:
        yield client
    finally:
        await client.close()
