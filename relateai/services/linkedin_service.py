"""
LinkedIn service - OAuth connection, contact linking and messaging.
"""
import uuid
import logging
from datetime import timedelta
from typing import Tuple, List, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.core.exceptions import (
    ExternalServiceError,
    NotFoundError,
    raise_not_found,
    raise_unauthorized,
)
from relateai.core.security import create_oauth_state, verify_token
from relateai.models.base import utcnow
from relateai.models.linkedin import LinkedInConnection, LinkedInIntegration, LinkedInMessage
from relateai.repositories.contact_repo import ContactRepository
from relateai.repositories.linkedin_repo import (
    LinkedInConnectionRepository,
    LinkedInIntegrationRepository,
    LinkedInMessageRepository,
)
from relateai.schemas.linkedin import LinkProfileRequest
from relateai.services.integrations.linkedin import LinkedInAPIClient

logger = logging.getLogger(__name__)


class LinkedInService:
    """
    High-level service for LinkedIn operations.
    Wraps the API client with persistence and token handling.
    """

    def __init__(self, session: AsyncSession, client: LinkedInAPIClient):
        self.session = session
        self.client = client
        self.integration_repo = LinkedInIntegrationRepository(session)
        self.connection_repo = LinkedInConnectionRepository(session)
        self.message_repo = LinkedInMessageRepository(session)
        self.contact_repo = ContactRepository(session)

    # -------------------------------------------------------------------------
    # OAuth
    # -------------------------------------------------------------------------

    def auth_url(self, user_id: uuid.UUID) -> str:
        """Authorization URL carrying a signed state bound to the user."""
        return self.client.get_auth_url(create_oauth_state(user_id))

    async def complete_oauth(self, code: str, state: str) -> LinkedInIntegration:
        """Handle the OAuth callback: check state, store tokens and profile."""
        payload = verify_token(state, "oauth_state")
        if not payload:
            raise_unauthorized("Invalid or expired OAuth state")
        user_id = uuid.UUID(payload["user_id"])

        tokens = await self.client.exchange_code_for_token(code)
        profile = await self.client.get_current_profile(tokens["access_token"])
        now = utcnow()

        values = {
            **profile,
            "access_token": tokens["access_token"],
            "expires_at": now + timedelta(seconds=tokens["expires_in"]),
            "last_sync_at": now,
        }

        integration = await self.integration_repo.get_by_user(user_id)
        if integration:
            values["refresh_token"] = tokens.get("refresh_token") or integration.refresh_token
            integration = await self.integration_repo.update(integration, values)
        else:
            values["refresh_token"] = tokens.get("refresh_token")
            integration = await self.integration_repo.create({**values, "user_id": user_id})

        logger.info("LinkedIn connected for user %s", user_id)
        return integration

    async def status(self, user_id: uuid.UUID) -> Optional[LinkedInIntegration]:
        """The user's integration, or None when not connected."""
        return await self.integration_repo.get_by_user(user_id)

    async def disconnect(self, user_id: uuid.UUID) -> None:
        integration = await self._get_integration(user_id)
        await self.integration_repo.delete(integration)
        logger.info("LinkedIn disconnected for user %s", user_id)

    async def _get_integration(self, user_id: uuid.UUID) -> LinkedInIntegration:
        integration = await self.integration_repo.get_by_user(user_id)
        if not integration:
            raise NotFoundError("LinkedIn integration")
        return integration

    async def _fresh_integration(self, user_id: uuid.UUID) -> LinkedInIntegration:
        """Integration with a usable access token, refreshing it when expired."""
        integration = await self._get_integration(user_id)
        if not integration.is_token_expired():
            return integration

        if not integration.refresh_token:
            raise_unauthorized("LinkedIn access token expired and no refresh token available")
        try:
            tokens = await self.client.refresh_token(integration.refresh_token)
        except ExternalServiceError:
            raise_unauthorized("Failed to refresh LinkedIn access token")

        return await self.integration_repo.update(integration, {
            "access_token": tokens["access_token"],
            "refresh_token": tokens["refresh_token"],
            "expires_at": utcnow() + timedelta(seconds=tokens["expires_in"]),
        })

    async def sync(self, user_id: uuid.UUID) -> LinkedInIntegration:
        """Refresh tokens if needed and re-read the member profile."""
        integration = await self._fresh_integration(user_id)
        profile = await self.client.get_current_profile(integration.access_token)
        profile.pop("linkedin_id", None)
        return await self.integration_repo.update(integration, {**profile, "last_sync_at": utcnow()})

    # -------------------------------------------------------------------------
    # Connections
    # -------------------------------------------------------------------------

    async def list_connections(
        self, user_id: uuid.UUID, page: Optional[int] = None, limit: Optional[int] = None
    ) -> Tuple[List[LinkedInConnection], dict]:
        return await self.connection_repo.list_for_user(user_id, page or 1, limit or 20)

    async def get_connection(self, user_id: uuid.UUID, contact_id: uuid.UUID) -> LinkedInConnection:
        connection = await self.connection_repo.get_by_contact(user_id, contact_id)
        if not connection:
            raise NotFoundError("LinkedIn connection for this contact")
        return connection

    async def link_contact(
        self, user_id: uuid.UUID, contact_id: uuid.UUID, data: LinkProfileRequest
    ) -> LinkedInConnection:
        """Link a contact to a LinkedIn profile, replacing any earlier link."""
        contact = await self.contact_repo.get(contact_id, user_id)
        if not contact:
            raise_not_found("Contact", str(contact_id))

        values = data.model_dump()
        values["first_name"] = data.first_name or contact.first_name
        values["last_name"] = data.last_name or contact.last_name

        connection = await self.connection_repo.get_by_contact(user_id, contact_id)
        if connection:
            return await self.connection_repo.update(connection, values)

        return await self.connection_repo.create({
            **values,
            "user_id": user_id,
            "contact_id": contact_id,
            "connection_degree": 1,
            "connection_date": utcnow(),
        })

    # -------------------------------------------------------------------------
    # Messaging
    # -------------------------------------------------------------------------

    async def send_message(self, user_id: uuid.UUID, contact_id: uuid.UUID, content: str) -> LinkedInMessage:
        contact = await self.contact_repo.get(contact_id, user_id)
        if not contact:
            raise_not_found("Contact", str(contact_id))
        connection = await self.get_connection(user_id, contact_id)
        integration = await self._fresh_integration(user_id)

        result = await self.client.send_message(integration.access_token, connection.linkedin_id, content)
        now = utcnow()

        message = await self.message_repo.create({
            "user_id": user_id,
            "contact_id": contact_id,
            "connection_id": connection.id,
            "message_id": result["message_id"],
            "content": content,
            "direction": "outbound",
            "status": result.get("status", "sent"),
            "sent_at": now,
        })
        await self.connection_repo.update(connection, {
            "last_message_sent": now,
            "last_interaction_date": now,
        })

        logger.info("LinkedIn message %s sent to contact %s", message.id, contact_id)
        return message

    async def list_messages(
        self,
        user_id: uuid.UUID,
        contact_id: uuid.UUID,
        page: Optional[int] = None,
        limit: Optional[int] = None
    ) -> Tuple[List[LinkedInMessage], dict]:
        await self.get_connection(user_id, contact_id)
        return await self.message_repo.list_for_contact(user_id, contact_id, page or 1, limit or 20)

    async def search(self, user_id: uuid.UUID, query: str) -> List[dict]:
        integration = await self._fresh_integration(user_id)
        return await self.client.search_people(integration.access_token, query)
