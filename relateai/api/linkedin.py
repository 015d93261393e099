"""
LinkedIn API routes.
OAuth connection, contact linking, messaging and people search.
"""
import uuid
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.database import get_session
from relateai.core.validation import validate
from relateai.services.linkedin_service import LinkedInService
from relateai.services.integrations.linkedin import LinkedInAPIClient
from relateai.schemas.linkedin import (
    OAuthCallbackQuery, LinkProfileRequest, LinkedInMessageCreate, ProfileSearchQuery,
    LinkedInPageQuery, IntegrationRead, ConnectionRead, LinkedInMessageRead
)
from relateai.api.deps import get_current_user, get_linkedin
from relateai.models.user import User

router = APIRouter(prefix="/api/linkedin", tags=["linkedin"])


# =============================================================================
# OAUTH
# =============================================================================

@router.get("/auth")
async def get_auth_url(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    client: LinkedInAPIClient = Depends(get_linkedin)
):
    """Authorization URL for connecting the user's LinkedIn account."""
    return {"success": True, "auth_url": LinkedInService(session, client).auth_url(current_user.id)}


@router.get("/callback")
async def oauth_callback(
    query: OAuthCallbackQuery = Depends(validate(OAuthCallbackQuery, "query")),
    session: AsyncSession = Depends(get_session),
    client: LinkedInAPIClient = Depends(get_linkedin)
):
    """
    OAuth redirect target. The signed state identifies the user,
    so no auth header is needed here.
    """
    integration = await LinkedInService(session, client).complete_oauth(query.code, query.state)
    return {
        "success": True,
        "message": "LinkedIn integration successful",
        "integration": IntegrationRead.model_validate(integration)
    }


@router.get("/status")
async def integration_status(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    client: LinkedInAPIClient = Depends(get_linkedin)
):
    integration = await LinkedInService(session, client).status(current_user.id)
    if not integration:
        return {"success": True, "connected": False, "integration": None}
    return {
        "success": True,
        "connected": True,
        "token_expired": integration.is_token_expired(),
        "integration": IntegrationRead.model_validate(integration)
    }


@router.delete("/disconnect")
async def disconnect(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    client: LinkedInAPIClient = Depends(get_linkedin)
):
    await LinkedInService(session, client).disconnect(current_user.id)
    return {"success": True, "message": "LinkedIn integration disconnected successfully"}


@router.post("/sync")
async def sync(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    client: LinkedInAPIClient = Depends(get_linkedin)
):
    """Refresh the token if needed and re-read the LinkedIn profile."""
    integration = await LinkedInService(session, client).sync(current_user.id)
    return {
        "success": True,
        "message": "LinkedIn connections synced successfully",
        "integration": IntegrationRead.model_validate(integration)
    }


# =============================================================================
# CONNECTIONS
# =============================================================================

@router.get("/connections")
async def list_connections(
    query: LinkedInPageQuery = Depends(validate(LinkedInPageQuery, "query")),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    client: LinkedInAPIClient = Depends(get_linkedin)
):
    connections, pagination = await LinkedInService(session, client).list_connections(
        current_user.id, query.page, query.limit
    )
    return {
        "success": True,
        "connections": [ConnectionRead.model_validate(c) for c in connections],
        "pagination": pagination
    }


@router.get("/connections/{contact_id}")
async def get_connection(
    contact_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    client: LinkedInAPIClient = Depends(get_linkedin)
):
    connection = await LinkedInService(session, client).get_connection(current_user.id, contact_id)
    return {"success": True, "connection": ConnectionRead.model_validate(connection)}


@router.post("/connections/{contact_id}")
async def link_contact(
    contact_id: uuid.UUID,
    data: LinkProfileRequest = Depends(validate(LinkProfileRequest)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    client: LinkedInAPIClient = Depends(get_linkedin)
):
    """Link a contact to a LinkedIn profile."""
    connection = await LinkedInService(session, client).link_contact(current_user.id, contact_id, data)
    return {
        "success": True,
        "message": "Contact linked to LinkedIn profile successfully",
        "connection": ConnectionRead.model_validate(connection)
    }


# =============================================================================
# MESSAGES & SEARCH
# =============================================================================

@router.post("/messages/{contact_id}")
async def send_message(
    contact_id: uuid.UUID,
    data: LinkedInMessageCreate = Depends(validate(LinkedInMessageCreate)),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    client: LinkedInAPIClient = Depends(get_linkedin)
):
    message = await LinkedInService(session, client).send_message(current_user.id, contact_id, data.content)
    return {
        "success": True,
        "message": "LinkedIn message sent successfully",
        "message_data": LinkedInMessageRead.model_validate(message)
    }


@router.get("/messages/{contact_id}")
async def list_messages(
    contact_id: uuid.UUID,
    query: LinkedInPageQuery = Depends(validate(LinkedInPageQuery, "query")),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    client: LinkedInAPIClient = Depends(get_linkedin)
):
    messages, pagination = await LinkedInService(session, client).list_messages(
        current_user.id, contact_id, query.page, query.limit
    )
    return {
        "success": True,
        "messages": [LinkedInMessageRead.model_validate(m) for m in messages],
        "pagination": pagination
    }


@router.get("/search")
async def search_profiles(
    query: ProfileSearchQuery = Depends(validate(ProfileSearchQuery, "query")),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
    client: LinkedInAPIClient = Depends(get_linkedin)
):
    """Search LinkedIn people by keywords."""
    profiles = await LinkedInService(session, client).search(current_user.id, query.query)
    return {"success": True, "profiles": profiles}
