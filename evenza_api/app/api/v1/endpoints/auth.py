"""
Authentication endpoints for API v1.

Login issues a signed access token, returned in the body for API
clients and set as the http-only ``authToken`` cookie for browsers.
"""

from typing import Dict

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ....core.config import settings
from ....core.db import Database, get_db
from ....core.errors import to_http
from ....core.security import get_current_user, require_admin, token_for_user
from ....schemas.auth import Identity, LoginRequest, TokenResponse
from ....schemas.user import UserCreate, UserRead
from ....services.activity_service import ActivityService, ActivityType
from ....services.user_service import UserService

router = APIRouter()


def _identity(claims: Dict) -> Identity:
    return Identity(id=claims["user_id"], name=claims.get("name"), email=claims.get("email"), role=claims["role"])


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(data: UserCreate, db: Database = Depends(get_db)) -> UserRead:
    """Create a user account with the ``user`` role."""
    try:
        user = await UserService.create_user(db, data)
    except ValueError as e:
        raise to_http(e)
    await ActivityService.record(
        db, user["id"], ActivityType.REGISTER.value, "Created an account", resource_type="user", resource_id=user["id"]
    )
    return UserRead(**user)


@router.post("/login", response_model=TokenResponse)
async def login(data: LoginRequest, response: Response, db: Database = Depends(get_db)) -> TokenResponse:
    """Check credentials and issue a token.

    ``remember_me`` extends the token and cookie lifetime from one day
    to ``REMEMBER_ME_EXPIRE_DAYS`` days.
    """
    user = await UserService.authenticate(db, data.email, data.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    token = token_for_user(user, remember_me=data.remember_me)
    max_age = (
        settings.remember_me_expire_days * 24 * 60 * 60
        if data.remember_me
        else settings.access_token_expire_minutes * 60
    )
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        max_age=max_age,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
        path="/",
    )
    await ActivityService.record(db, user["id"], ActivityType.LOGIN.value, "Logged in")
    return TokenResponse(access_token=token, user=UserRead(**user))


@router.post("/logout")
async def logout(response: Response) -> dict:
    response.delete_cookie(key=settings.auth_cookie_name, path="/")
    return {"success": True, "message": "Logged out"}


@router.get("/me", response_model=Identity)
async def me(current_user: dict = Depends(get_current_user)) -> Identity:
    """Return the identity carried by the caller's token."""
    return _identity(current_user)


@router.get("/check-admin")
async def check_admin(current_user: dict = Depends(require_admin)) -> dict:
    return {"is_admin": True, "user": _identity(current_user)}
