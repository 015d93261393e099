"""
HTTP client for the RelateAI API.

Sends the session token in the auth header. A 401 drops the token and
hands control to ``on_unauthorized`` (by default: remember a redirect to /login).
"""
import logging
from typing import Any, Callable, Dict, Optional

import httpx

from relateai.config import settings

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"


class ApiError(Exception):
    """Non-2xx answer from the API."""

    def __init__(self, status_code: int, message: str, payload: Optional[dict] = None):
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}
        super().__init__(f"{status_code}: {message}")


class ApiClient:
    """Async JSON client. No retries; httpx default timeout."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_unauthorized: Optional[Callable[["ApiClient"], None]] = None
    ):
        self.token = token
        self.redirect_to: Optional[str] = None
        self.on_unauthorized = on_unauthorized or self._redirect_to_login
        self._client = httpx.AsyncClient(
            base_url=base_url or f"{settings.BACKEND_URL}{settings.API_PREFIX}",
            headers={"Content-Type": "application/json"},
            transport=transport
        )

    def _redirect_to_login(self, client: "ApiClient") -> None:
        self.redirect_to = LOGIN_PATH

    @property
    def headers(self) -> Dict[str, str]:
        return {settings.AUTH_HEADER: self.token} if self.token else {}

    async def request(self, method: str, path: str, **kwargs: Any) -> dict:
        response = await self._client.request(method, path, headers=self.headers, **kwargs)

        if response.status_code == 401:
            logger.info("Unauthorized response from %s %s, clearing session", method, path)
            self.token = None
            self.on_unauthorized(self)

        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if response.is_error:
            message = payload.get("message") if isinstance(payload, dict) else None
            raise ApiError(response.status_code, message or response.reason_phrase, payload)
        return payload

    async def get(self, path: str, params: Optional[dict] = None) -> dict:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, data: Optional[dict] = None) -> dict:
        return await self.request("POST", path, json=data if data is not None else {})

    async def delete(self, path: str) -> dict:
        return await self.request("DELETE", path)

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    async def login(self, email: str, password: str) -> dict:
        payload = await self.post("/auth/login", {"email": email, "password": password})
        self.token = payload["token"]
        return payload

    async def register(self, data: dict) -> dict:
        payload = await self.post("/auth/register", data)
        self.token = payload["token"]
        return payload

    def logout(self) -> None:
        self.token = None

    async def me(self) -> dict:
        return await self.get("/auth/me")

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
