"""
Authentication API routes.
"""
from fastapi import APIRouter, Depends, Request
from sqlmodel.ext.asyncio.session import AsyncSession

from relateai.database import get_session
from relateai.core.exceptions import UnauthorizedError
from relateai.core.rate_limit import login_limiter
from relateai.core.validation import validate
from relateai.services.auth_service import AuthService
from relateai.schemas.auth import RegisterRequest, LoginRequest, UserRead
from relateai.api.deps import get_current_user
from relateai.models.user import User

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", status_code=201)
async def register(
    data: RegisterRequest = Depends(validate(RegisterRequest)),
    session: AsyncSession = Depends(get_session)
):
    """Register a new user and log them in."""
    auth_service = AuthService(session)
    user, token = await auth_service.register(data)
    return {
        "success": True,
        "message": "User registered successfully",
        "token": token,
        "user": UserRead.model_validate(user)
    }


@router.post("/login")
async def login(
    request: Request,
    data: LoginRequest = Depends(validate(LoginRequest)),
    session: AsyncSession = Depends(get_session)
):
    """Login and get an access token. Repeated failures are throttled."""
    client_host = request.client.host if request.client else "unknown"
    limit_key = f"{client_host}:{data.email.lower()}"
    await login_limiter.check(limit_key)

    auth_service = AuthService(session)
    try:
        user, token = await auth_service.login(data)
    except UnauthorizedError:
        await login_limiter.hit(limit_key)
        raise
    return {"success": True, "token": token, "user": UserRead.model_validate(user)}


@router.get("/me")
async def me(current_user: User = Depends(get_current_user)):
    """Current user profile."""
    return {"success": True, "user": UserRead.model_validate(current_user)}
