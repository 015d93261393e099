"""
Tests for the API client: auth header, error mapping and the 401 redirect.
"""
import json

import httpx
import pytest

from relateai.client.api import ApiClient, ApiError


def make_client(handler, **kwargs) -> ApiClient:
    return ApiClient(base_url="http://api.test/api", transport=httpx.MockTransport(handler), **kwargs)


@pytest.mark.asyncio
async def test_sends_auth_header():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["token"] = request.headers.get("x-auth-token")
        return httpx.Response(200, json={"success": True, "accounts": []})

    async with make_client(handler, token="tok-1") as api:
        payload = await api.get("/accounts", params={"page": 1})

    assert payload == {"success": True, "accounts": []}
    assert seen == {"path": "/api/accounts", "token": "tok-1"}


@pytest.mark.asyncio
async def test_no_header_without_token():
    def handler(request: httpx.Request) -> httpx.Response:
        assert "x-auth-token" not in request.headers
        return httpx.Response(200, json={})

    async with make_client(handler) as api:
        await api.get("/health")


@pytest.mark.asyncio
async def test_login_stores_token():
    def handler(request: httpx.Request) -> httpx.Response:
        assert json.loads(request.content) == {"email": "rep@acme.com", "password": "password123"}
        return httpx.Response(200, json={"success": True, "token": "fresh", "user": {}})

    async with make_client(handler) as api:
        await api.login("rep@acme.com", "password123")
        assert api.token == "fresh"
        api.logout()
        assert api.token is None


@pytest.mark.asyncio
async def test_unauthorized_clears_session():
    """A 401 drops the token and redirects to the login page."""
    async with make_client(
        lambda request: httpx.Response(401, json={"success": False, "message": "Token is not valid"}),
        token="stale"
    ) as api:
        with pytest.raises(ApiError) as exc_info:
            await api.me()

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Token is not valid"
        assert api.token is None
        assert api.redirect_to == "/login"


@pytest.mark.asyncio
async def test_custom_unauthorized_hook():
    calls = []

    async with make_client(
        lambda request: httpx.Response(401, json={}),
        token="stale",
        on_unauthorized=calls.append
    ) as api:
        with pytest.raises(ApiError):
            await api.get("/auth/me")

        assert calls == [api]
        assert api.redirect_to is None


@pytest.mark.asyncio
async def test_error_message_from_body():
    async with make_client(lambda request: httpx.Response(400, json={"success": False, "message": "Validation error", "errors": []})) as api:
        with pytest.raises(ApiError) as exc_info:
            await api.post("/accounts", {})

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Validation error"
    assert exc_info.value.payload["errors"] == []


@pytest.mark.asyncio
async def test_error_without_json_body():
    async with make_client(lambda request: httpx.Response(502, text="upstream down")) as api:
        with pytest.raises(ApiError) as exc_info:
            await api.delete("/accounts/1")

    assert exc_info.value.status_code == 502
    assert exc_info.value.message == "Bad Gateway"
