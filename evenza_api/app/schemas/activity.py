"""Activity log entries as returned by the admin and self-service routes."""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


class ActivityRead(BaseModel):
    id: int
    user_id: Optional[int] = None
    type: str
    description: str
    resource_type: Optional[str] = None
    resource_id: Optional[int] = None
    metadata: Optional[Any] = None
    created_at: Optional[datetime] = None
