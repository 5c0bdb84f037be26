"""
Pydantic models for user data.

``UserCreate`` is used by self-registration and ``AdminUserCreate`` by
the back-office.  Password hashes never leave the service layer;
``UserRead`` has no password field.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..core.states import UserRole


class UserBase(BaseModel):
    name: str = Field(..., min_length=1, example="Ada Lovelace")
    email: str = Field(..., example="ada@example.com")

    @field_validator("email")
    @classmethod
    def normalise_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value or value.startswith("@") or value.endswith("@"):
            raise ValueError("Invalid email address")
        return value


class UserCreate(UserBase):
    """Schema for self-registration."""

    password: str = Field(..., min_length=6, example="secret123")


class AdminUserCreate(UserCreate):
    role: UserRole = UserRole.USER
    phone: Optional[str] = None
    department: Optional[str] = None
    year: Optional[str] = None


class UserRead(UserBase):
    """Schema for reading a user from the API."""

    id: int
    role: str
    phone: Optional[str] = ""
    department: Optional[str] = ""
    year: Optional[str] = ""
    bio: Optional[str] = ""
    profile_picture: Optional[str] = ""
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile.

    All fields are optional; only provided fields will be updated.
    """

    name: Optional[str] = Field(None, min_length=1)
    phone: Optional[str] = None
    department: Optional[str] = None
    year: Optional[str] = None
    bio: Optional[str] = None
    profile_picture: Optional[str] = None


class AdminUserUpdate(ProfileUpdate):
    email: Optional[str] = None
    role: Optional[UserRole] = None


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


class UserDetail(UserRead):
    """A user together with their mirrored registrations."""

    registrations: List[dict] = []
