"""
Tests for the LinkedIn integration: API client, OAuth flow, linking, messaging and search.
"""
import uuid
from datetime import timedelta
from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from httpx import AsyncClient

from relateai.core.exceptions import ExternalServiceError
from relateai.models.base import utcnow
from relateai.repositories.linkedin_repo import LinkedInIntegrationRepository
from relateai.services.integrations.linkedin import (
    LinkedInAPIClient,
    LinkedInConfig,
    MockLinkedInClient,
    normalize_profile,
)
from tests.utils import create_contact


CONFIG = LinkedInConfig(client_id="test-client", client_secret="test-secret")


def api_client(handler) -> LinkedInAPIClient:
    return LinkedInAPIClient(config=CONFIG, http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


async def connect(client: AsyncClient, headers: dict) -> dict:
    """Run the OAuth round trip against the mock client."""
    response = await client.get("/api/linkedin/auth", headers=headers)
    state = parse_qs(urlparse(response.json()["auth_url"]).query)["state"][0]
    response = await client.get("/api/linkedin/callback", params={"code": "abc", "state": state})
    assert response.status_code == 200, response.text
    return response.json()["integration"]


async def link(client: AsyncClient, headers: dict, contact_id: str) -> dict:
    response = await client.post(f"/api/linkedin/connections/{contact_id}", json={
        "linkedin_id": "profile-2",
        "profile_url": "https://www.linkedin.com/in/janesmith",
        "headline": "VP Sales at Acme"
    }, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["connection"]


# =============================================================================
# API CLIENT
# =============================================================================

def test_auth_url():
    url = api_client(lambda request: httpx.Response(200)).get_auth_url("state-123")
    params = parse_qs(urlparse(url).query)

    assert url.startswith("https://www.linkedin.com/oauth/v2/authorization?")
    assert params["client_id"] == ["test-client"]
    assert params["state"] == ["state-123"]
    assert params["response_type"] == ["code"]
    assert params["scope"] == ["r_liteprofile r_emailaddress w_member_social"]


def test_normalize_profile():
    profile = normalize_profile({"id": "abc", "localizedFirstName": "Ada", "localizedLastName": "L", "vanityName": "ada"})

    assert profile["linkedin_id"] == "abc"
    assert profile["first_name"] == "Ada"
    assert profile["profile_url"] == "https://www.linkedin.com/in/ada"
    assert profile["email"] is None


@pytest.mark.asyncio
async def test_token_exchange():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/oauth/v2/accessToken"
        assert b"grant_type=authorization_code" in request.content
        return httpx.Response(200, json={"access_token": "tok", "expires_in": 5184000})

    client = api_client(handler)
    tokens = await client.exchange_code_for_token("code-1")
    await client.close()

    assert tokens == {"access_token": "tok", "expires_in": 5184000, "refresh_token": None}


@pytest.mark.asyncio
async def test_current_profile_reads_email():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer tok"
        if request.url.path.endswith("/me"):
            return httpx.Response(200, json={"id": "m1", "localizedFirstName": "Ada", "localizedLastName": "Lovelace"})
        return httpx.Response(200, json={"elements": [{"handle~": {"emailAddress": "ada@example.com"}}]})

    client = api_client(handler)
    profile = await client.get_current_profile("tok")
    await client.close()

    assert profile["linkedin_id"] == "m1"
    assert profile["email"] == "ada@example.com"


@pytest.mark.asyncio
async def test_error_status_raises():
    client = api_client(lambda request: httpx.Response(403, json={"message": "nope"}))

    with pytest.raises(ExternalServiceError) as exc_info:
        await client.send_message("tok", "m1", "Hello")
    await client.close()

    assert str(exc_info.value) == "LinkedIn call failed: message send failed"


@pytest.mark.asyncio
async def test_transport_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    client = api_client(handler)
    with pytest.raises(ExternalServiceError):
        await client.search_people("tok", "sales")
    await client.close()


@pytest.mark.asyncio
async def test_mock_client_search():
    client = MockLinkedInClient(config=CONFIG)
    profiles = await client.search_people("tok", "anything", count=1)
    await client.close()

    assert [p["linkedin_id"] for p in profiles] == ["profile-1"]


# =============================================================================
# OAUTH FLOW
# =============================================================================

@pytest.mark.asyncio
async def test_status_not_connected(client: AsyncClient, auth_headers):
    response = await client.get("/api/linkedin/status", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"success": True, "connected": False, "integration": None}


@pytest.mark.asyncio
async def test_oauth_round_trip(client: AsyncClient, auth_headers):
    integration = await connect(client, auth_headers)

    assert integration["linkedin_id"] == "mock-member"
    assert integration["first_name"] == "Mock"
    assert integration["email"] == "mock.member@relateai.com"

    response = await client.get("/api/linkedin/status", headers=auth_headers)
    body = response.json()
    assert body["connected"] is True
    assert body["token_expired"] is False
    assert body["integration"]["id"] == integration["id"]


@pytest.mark.asyncio
async def test_reconnect_updates_existing(client: AsyncClient, auth_headers):
    first = await connect(client, auth_headers)
    second = await connect(client, auth_headers)

    assert second["id"] == first["id"]


@pytest.mark.asyncio
async def test_callback_rejects_bad_state(client: AsyncClient):
    response = await client.get("/api/linkedin/callback", params={"code": "abc", "state": "forged"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired OAuth state"


@pytest.mark.asyncio
async def test_callback_requires_code(client: AsyncClient):
    response = await client.get("/api/linkedin/callback", params={"state": "x"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["path"] == "code"


@pytest.mark.asyncio
async def test_disconnect(client: AsyncClient, auth_headers):
    await connect(client, auth_headers)

    response = await client.delete("/api/linkedin/disconnect", headers=auth_headers)
    assert response.status_code == 200

    response = await client.delete("/api/linkedin/disconnect", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "LinkedIn integration not found"


@pytest.mark.asyncio
async def test_sync(client: AsyncClient, auth_headers):
    await connect(client, auth_headers)

    response = await client.post("/api/linkedin/sync", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["integration"]["last_sync_at"] is not None


async def expire_token(session_factory, user_id: str, refresh_token=None) -> None:
    async with session_factory() as session:
        repo = LinkedInIntegrationRepository(session)
        integration = await repo.get_by_user(uuid.UUID(user_id))
        await repo.update(integration, {
            "expires_at": utcnow() - timedelta(minutes=1),
            "refresh_token": refresh_token,
        })


@pytest.mark.asyncio
async def test_expired_token_without_refresh(client: AsyncClient, user, auth_headers, session_factory):
    await connect(client, auth_headers)
    await expire_token(session_factory, user["user"]["id"])

    response = await client.get("/api/linkedin/status", headers=auth_headers)
    assert response.json()["token_expired"] is True

    response = await client.post("/api/linkedin/sync", headers=auth_headers)
    assert response.status_code == 401
    assert response.json()["message"] == "LinkedIn access token expired and no refresh token available"


@pytest.mark.asyncio
async def test_expired_token_is_refreshed(client: AsyncClient, user, auth_headers, session_factory):
    await connect(client, auth_headers)
    await expire_token(session_factory, user["user"]["id"], refresh_token="mock-refresh")

    response = await client.post("/api/linkedin/sync", headers=auth_headers)
    assert response.status_code == 200

    response = await client.get("/api/linkedin/status", headers=auth_headers)
    assert response.json()["token_expired"] is False


# =============================================================================
# CONNECTIONS, MESSAGES & SEARCH
# =============================================================================

@pytest.mark.asyncio
async def test_link_contact(client: AsyncClient, auth_headers, contact):
    connection = await link(client, auth_headers, contact["id"])

    assert connection["contact_id"] == contact["id"]
    assert connection["first_name"] == "Jane"
    assert connection["last_name"] == "Smith"
    assert connection["connection_degree"] == 1

    response = await client.get(f"/api/linkedin/connections/{contact['id']}", headers=auth_headers)
    assert response.json()["connection"]["id"] == connection["id"]

    relinked = await link(client, auth_headers, contact["id"])
    assert relinked["id"] == connection["id"]

    response = await client.get("/api/linkedin/connections", headers=auth_headers)
    assert response.json()["pagination"]["total"] == 1


@pytest.mark.asyncio
async def test_link_unknown_contact(client: AsyncClient, auth_headers):
    response = await client.post(f"/api/linkedin/connections/{uuid.uuid4()}", json={
        "linkedin_id": "x",
        "profile_url": "https://www.linkedin.com/in/x"
    }, headers=auth_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_send_message(client: AsyncClient, auth_headers, contact):
    await connect(client, auth_headers)
    await link(client, auth_headers, contact["id"])

    response = await client.post(
        f"/api/linkedin/messages/{contact['id']}", json={"content": "Great to connect!"}, headers=auth_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "LinkedIn message sent successfully"
    assert body["message_data"]["direction"] == "outbound"
    assert body["message_data"]["message_id"].startswith("mock-msg-")

    response = await client.get(f"/api/linkedin/connections/{contact['id']}", headers=auth_headers)
    assert response.json()["connection"]["last_message_sent"] is not None

    response = await client.get(f"/api/linkedin/messages/{contact['id']}", headers=auth_headers)
    assert [m["content"] for m in response.json()["messages"]] == ["Great to connect!"]


@pytest.mark.asyncio
async def test_send_message_without_connection(client: AsyncClient, auth_headers, contact):
    await connect(client, auth_headers)

    response = await client.post(
        f"/api/linkedin/messages/{contact['id']}", json={"content": "Hi"}, headers=auth_headers
    )

    assert response.status_code == 404
    assert response.json()["message"] == "LinkedIn connection for this contact not found"


@pytest.mark.asyncio
async def test_send_message_without_integration(client: AsyncClient, auth_headers, contact):
    await link(client, auth_headers, contact["id"])

    response = await client.post(
        f"/api/linkedin/messages/{contact['id']}", json={"content": "Hi"}, headers=auth_headers
    )

    assert response.status_code == 404
    assert response.json()["message"] == "LinkedIn integration not found"


@pytest.mark.asyncio
async def test_deleting_contact_removes_linkedin_records(client: AsyncClient, auth_headers, account):
    contact = await create_contact(client, auth_headers, account["id"])
    await connect(client, auth_headers)
    await link(client, auth_headers, contact["id"])

    await client.delete(f"/api/contacts/{contact['id']}", headers=auth_headers)

    response = await client.get("/api/linkedin/connections", headers=auth_headers)
    assert response.json()["connections"] == []


@pytest.mark.asyncio
async def test_search(client: AsyncClient, auth_headers):
    await connect(client, auth_headers)

    response = await client.get("/api/linkedin/search", params={"query": "sales"}, headers=auth_headers)

    assert response.status_code == 200
    names = [(p["first_name"], p["last_name"]) for p in response.json()["profiles"]]
    assert names == [("John", "Doe"), ("Jane", "Smith")]


@pytest.mark.asyncio
async def test_search_requires_query(client: AsyncClient, auth_headers):
    response = await client.get("/api/linkedin/search", headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["errors"][0]["path"] == "query"
