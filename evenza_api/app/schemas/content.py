"""Pydantic models for CMS content (pages, posts, legal text, FAQ)."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ..core.states import ContentStatus, ContentType


class ContentBase(BaseModel):
    title: str = Field(..., min_length=1, example="About us")
    slug: str = Field(..., min_length=1, example="about-us")
    type: ContentType = ContentType.PAGE
    body: str = Field(..., example="<p>Evenza brings people together.</p>")
    status: ContentStatus = ContentStatus.DRAFT
    is_homepage: bool = False
    author: Optional[str] = None

    @field_validator("slug")
    @classmethod
    def normalise_slug(cls, value: str) -> str:
        return value.strip().lower().replace(" ", "-")


class ContentCreate(ContentBase):
    pass


class ContentUpdate(BaseModel):
    """All fields are optional; only provided fields will be updated."""

    title: str | None = None
    slug: str | None = None
    type: ContentType | None = None
    body: str | None = None
    status: ContentStatus | None = None
    is_homepage: bool | None = None
    author: str | None = None

    @field_validator("slug")
    @classmethod
    def normalise_slug(cls, value: str | None) -> str | None:
        return value.strip().lower().replace(" ", "-") if value else value


class ContentRead(ContentBase):
    id: int
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
