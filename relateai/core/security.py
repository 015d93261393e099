"""
Password hashing and signed tokens.

Three token kinds share one signing key: ``access`` tokens sent in the
``x-auth-token`` header, short-lived ``oauth_state`` tokens that carry the
user through the LinkedIn authorization redirect, and long-lived
``email_tracking`` ids embedded in outgoing emails.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Literal
import uuid

import jwt
import bcrypt

from relateai.config import settings


TokenType = Literal["access", "oauth_state", "email_tracking"]

OAUTH_STATE_EXPIRE_MINUTES = 10


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def _lifetime(token_type: TokenType) -> timedelta:
    if token_type == "oauth_state":
        return timedelta(minutes=OAUTH_STATE_EXPIRE_MINUTES)
    if token_type == "email_tracking":
        return timedelta(days=settings.EMAIL_TRACKING_EXPIRE_DAYS)
    return timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)


def create_token(
    claims: dict,
    token_type: TokenType = "access",
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Sign ``claims`` as a JWT of the given type.

    ``expires_delta`` overrides the default lifetime of the token type
    (access: ACCESS_TOKEN_EXPIRE_MINUTES, oauth_state: 10 minutes,
    email_tracking: EMAIL_TRACKING_EXPIRE_DAYS).
    """
    issued_at = datetime.now(timezone.utc)
    payload = {
        **claims,
        "type": token_type,
        "iat": issued_at,
        "exp": issued_at + (expires_delta if expires_delta is not None else _lifetime(token_type)),
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(claims: dict, expires_delta: Optional[timedelta] = None) -> str:
    return create_token(claims, "access", expires_delta)


def create_oauth_state(user_id: uuid.UUID) -> str:
    """The ``state`` parameter for the LinkedIn redirect, bound to ``user_id``."""
    return create_token({"user_id": str(user_id)}, "oauth_state")


def verify_token(token: str, token_type: TokenType = "access") -> Optional[dict]:
    """
    Return the payload of a valid, unexpired token of ``token_type``.

    Bad signatures, expired tokens and tokens of another type all yield None.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.InvalidTokenError:
        return None
    if payload.get("type") != token_type:
        return None
    return payload
