"""Request and response bodies of the authentication routes."""

from typing import Optional

from pydantic import BaseModel, Field

from .user import UserRead


class LoginRequest(BaseModel):
    email: str = Field(..., example="ada@example.com")
    password: str
    remember_me: bool = False


class TokenResponse(BaseModel):
    success: bool = True
    access_token: str
    token_type: str = "bearer"
    user: UserRead


class Identity(BaseModel):
    """Claims carried by the access token."""

    id: int
    name: Optional[str] = None
    email: Optional[str] = None
    role: str
