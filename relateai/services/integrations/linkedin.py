"""
LinkedIn API integration.
Handles OAuth, profile lookups, people search and messaging.

Note: Messaging and people search require LinkedIn partner program access.
"""
import uuid
import logging
from urllib.parse import urlencode
from typing import Optional, Dict, Any, List

import httpx
from pydantic import BaseModel

from relateai.config import settings
from relateai.core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

class LinkedInConfig(BaseModel):
    """LinkedIn API configuration."""
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = "http://localhost:8000/api/linkedin/callback"
    scopes: List[str] = ["r_liteprofile", "r_emailaddress", "w_member_social"]

    @classmethod
    def from_settings(cls) -> "LinkedInConfig":
        return cls(
            client_id=settings.LINKEDIN_CLIENT_ID,
            client_secret=settings.LINKEDIN_CLIENT_SECRET,
            redirect_uri=settings.LINKEDIN_REDIRECT_URI,
        )


def normalize_profile(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten a /me style payload into integration fields."""
    linkedin_id = raw.get("id") or ""
    return {
        "linkedin_id": linkedin_id,
        "first_name": raw.get("localizedFirstName") or raw.get("firstName") or "",
        "last_name": raw.get("localizedLastName") or raw.get("lastName") or "",
        "headline": raw.get("headline"),
        "industry": raw.get("industry"),
        "email": raw.get("email"),
        "picture_url": (raw.get("profilePicture") or {}).get("displayImage") or raw.get("pictureUrl"),
        "profile_url": raw.get("profileUrl") or f"https://www.linkedin.com/in/{raw.get('vanityName') or linkedin_id}",
    }


# =============================================================================
# LINKEDIN API CLIENT
# =============================================================================

class LinkedInAPIClient:
    """
    Thin async client over the LinkedIn REST API.
    Every non-2xx answer or transport failure raises ExternalServiceError.
    """

    BASE_URL = "https://api.linkedin.com/v2"
    AUTH_URL = "https://www.linkedin.com/oauth/v2"

    def __init__(self, config: Optional[LinkedInConfig] = None, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config or LinkedInConfig.from_settings()
        self.client = http_client or httpx.AsyncClient()
        if not (self.config.client_id and self.config.client_secret):
            logger.warning("LinkedIn API credentials are not configured")

    @staticmethod
    def headers(access_token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
            "X-Restli-Protocol-Version": "2.0.0"
        }

    async def _request(self, method: str, url: str, action: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("LinkedIn %s failed: %s", action, e)
            raise ExternalServiceError("LinkedIn", f"{action} failed") from e

        if response.status_code not in (200, 201):
            logger.error("LinkedIn %s failed (%s): %s", action, response.status_code, response.text)
            raise ExternalServiceError("LinkedIn", f"{action} failed")
        return response.json() if response.content else {}

    # -------------------------------------------------------------------------
    # OAuth Flow
    # -------------------------------------------------------------------------

    def get_auth_url(self, state: str) -> str:
        """URL the user visits to authorize the app."""
        params = {
            "response_type": "code",
            "client_id": self.config.client_id,
            "redirect_uri": self.config.redirect_uri,
            "state": state,
            "scope": " ".join(self.config.scopes),
        }
        return f"{self.AUTH_URL}/authorization?{urlencode(params)}"

    async def _token_request(self, data: Dict[str, str], action: str) -> Dict[str, Any]:
        payload = await self._request(
            "POST",
            f"{self.AUTH_URL}/accessToken",
            action,
            data={**data, "client_id": self.config.client_id, "client_secret": self.config.client_secret},
            headers={"Content-Type": "application/x-www-form-urlencoded"}
        )
        return {
            "access_token": payload.get("access_token"),
            "expires_in": int(payload.get("expires_in") or 0),
            "refresh_token": payload.get("refresh_token"),
        }

    async def exchange_code_for_token(self, code: str) -> Dict[str, Any]:
        """Exchange the callback code for tokens."""
        return await self._token_request({
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.config.redirect_uri,
        }, "token exchange")

    async def refresh_token(self, refresh_token: str) -> Dict[str, Any]:
        tokens = await self._token_request({
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
        }, "token refresh")
        tokens["refresh_token"] = tokens["refresh_token"] or refresh_token
        return tokens

    # -------------------------------------------------------------------------
    # Profile Operations
    # -------------------------------------------------------------------------

    async def get_current_profile(self, access_token: str) -> Dict[str, Any]:
        """The authenticated member's profile, including primary email."""
        profile = await self._request("GET", f"{self.BASE_URL}/me", "profile lookup", headers=self.headers(access_token))
        emails = await self._request(
            "GET",
            f"{self.BASE_URL}/emailAddress",
            "email lookup",
            params={"q": "members", "projection": "(elements*(handle~))"},
            headers=self.headers(access_token)
        )
        elements = emails.get("elements") or [{}]
        profile["email"] = (elements[0].get("handle~") or {}).get("emailAddress")
        return normalize_profile(profile)

    async def search_people(self, access_token: str, keywords: str, start: int = 0, count: int = 10) -> List[Dict[str, Any]]:
        payload = await self._request(
            "GET",
            f"{self.BASE_URL}/search/blended",
            "people search",
            params={"q": "people", "keywords": keywords, "start": start, "count": count},
            headers=self.headers(access_token)
        )
        return [normalize_profile(element) for element in payload.get("elements", [])]

    # -------------------------------------------------------------------------
    # Messaging
    # -------------------------------------------------------------------------

    async def send_message(self, access_token: str, recipient_id: str, message: str) -> Dict[str, Any]:
        """
        Send a message to a connection.

        Args:
            access_token: Member access token
            recipient_id: LinkedIn member id
            message: Message body

        Returns:
            {"message_id": str, "status": "sent"}
        """
        payload = await self._request(
            "POST",
            f"{self.BASE_URL}/messages",
            "message send",
            json={
                "recipients": [f"urn:li:person:{recipient_id}"],
                "subject": "",
                "body": message,
                "messageType": "INMAIL"
            },
            headers=self.headers(access_token)
        )
        return {"message_id": payload.get("id") or f"msg_{uuid.uuid4().hex}", "status": "sent"}

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()


# =============================================================================
# MOCK CLIENT (For Development)
# =============================================================================

class MockLinkedInClient(LinkedInAPIClient):
    """
    Simulates LinkedIn responses without network calls.
    """

    async def exchange_code_for_token(self, code: str) -> Dict[str, Any]:
        logger.info("MOCK LinkedIn token exchange")
        return {"access_token": f"mock-access-{code}", "expires_in": 3600 * 24 * 60, "refresh_token": f"mock-refresh-{code}"}

    async def refresh_token(self, refresh_token: str) -> Dict[str, Any]:
        return {"access_token": f"mock-access-{uuid.uuid4().hex[:8]}", "expires_in": 3600 * 24 * 60, "refresh_token": refresh_token}

    async def get_current_profile(self, access_token: str) -> Dict[str, Any]:
        return normalize_profile({
            "id": "mock-member",
            "localizedFirstName": "Mock",
            "localizedLastName": "Member",
            "headline": "Account Executive",
            "email": "mock.member@relateai.com",
        })

    async def search_people(self, access_token: str, keywords: str, start: int = 0, count: int = 10) -> List[Dict[str, Any]]:
        profiles = [
            {
                "id": "profile-1",
                "firstName": "John",
                "lastName": "Doe",
                "headline": "Software Engineer at Acme Corp",
                "industry": "Technology",
                "profileUrl": "https://www.linkedin.com/in/johndoe",
            },
            {
                "id": "profile-2",
                "firstName": "Jane",
                "lastName": "Smith",
                "headline": "Marketing Manager at XYZ Inc",
                "industry": "Marketing",
                "profileUrl": "https://www.linkedin.com/in/janesmith",
            },
        ]
        return [normalize_profile(p) for p in profiles][start:start + count]

    async def send_message(self, access_token: str, recipient_id: str, message: str) -> Dict[str, Any]:
        logger.info("MOCK LinkedIn message to %s: %s", recipient_id, message[:100])
        return {"message_id": f"mock-msg-{uuid.uuid4().hex[:8]}", "status": "sent"}


# =============================================================================
# FACTORY
# =============================================================================

def get_linkedin_client() -> LinkedInAPIClient:
    """
    Get the appropriate LinkedIn client.
    Returns mock in development, real in production.
    """
    if settings.DEV_MODE:
        return MockLinkedInClient()
    return LinkedInAPIClient()
