"""
Tests for registration, login and token-protected access.
"""
import uuid
from datetime import timedelta

import pytest
from httpx import AsyncClient

from relateai.core.security import (
    create_access_token,
    create_oauth_state,
    get_password_hash,
    verify_password,
    verify_token,
)
from tests.utils import register


def test_password_hashing():
    hashed = get_password_hash("password123")

    assert hashed != "password123"
    assert verify_password("password123", hashed)
    assert not verify_password("wrong", hashed)


def test_token_types_are_not_interchangeable():
    state = create_oauth_state(uuid.uuid4())
    access = create_access_token({"user_id": str(uuid.uuid4())})

    assert verify_token(state, "oauth_state")
    assert verify_token(state, "access") is None
    assert verify_token(access, "access")["type"] == "access"


def test_expired_token_rejected():
    token = create_access_token({"user_id": "x"}, expires_delta=timedelta(seconds=-1))
    assert verify_token(token) is None


@pytest.mark.asyncio
async def test_register_success(client: AsyncClient):
    """Registration returns a token and the public profile."""
    body = await register(client, email="Riley@Acme.com")

    assert body["success"] is True
    assert body["token"]
    assert body["user"]["email"] == "riley@acme.com"
    assert body["user"]["first_name"] == "Riley"
    assert "password_hash" not in body["user"]


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient):
    await register(client, email="dup@acme.com")

    response = await client.post("/api/auth/register", json={
        "email": "dup@acme.com",
        "password": "password123",
        "first_name": "Other",
        "last_name": "Person",
        "company": "Acme"
    })

    assert response.status_code == 400
    assert response.json()["message"] == "User with email 'dup@acme.com' already exists"


@pytest.mark.asyncio
async def test_register_short_password(client: AsyncClient):
    response = await client.post("/api/auth/register", json={
        "email": "short@acme.com",
        "password": "short",
        "first_name": "Riley",
        "last_name": "Rep",
        "company": "Acme"
    })

    assert response.status_code == 400
    assert [error["path"] for error in response.json()["errors"]] == ["password"]


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient):
    await register(client, email="login@acme.com")

    response = await client.post("/api/auth/login", json={"email": "LOGIN@acme.com", "password": "password123"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["token"]
    assert body["user"]["email"] == "login@acme.com"


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient):
    await register(client, email="wrong@acme.com")

    response = await client.post("/api/auth/login", json={"email": "wrong@acme.com", "password": "nope-nope"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid email or password"}


@pytest.mark.asyncio
async def test_me(client: AsyncClient, user, auth_headers):
    response = await client.get("/api/auth/me", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["user"]["id"] == user["user"]["id"]


@pytest.mark.asyncio
async def test_missing_token(client: AsyncClient):
    response = await client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["message"] == "No token, authorization denied"


@pytest.mark.asyncio
async def test_invalid_token(client: AsyncClient):
    response = await client.get("/api/auth/me", headers={"x-auth-token": "garbage"})

    assert response.status_code == 401
    assert response.json()["message"] == "Token is not valid"


@pytest.mark.asyncio
async def test_oauth_state_is_not_an_access_token(client: AsyncClient, user):
    state = create_oauth_state(user["user"]["id"])

    response = await client.get("/api/auth/me", headers={"x-auth-token": state})

    assert response.status_code == 401
