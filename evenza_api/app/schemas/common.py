"""
Shared response envelopes.

Admin and self-service listings return a page of items together with
the total number of matching rows so clients can render pagination.
"""

from typing import Generic, List, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    items: List[T]
    total: int
    limit: int
    offset: int


class Message(BaseModel):
    success: bool = True
    message: str
