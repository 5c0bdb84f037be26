"""
Pydantic models for site settings.

Settings are grouped by category and stored individually under the
key ``<category>.<name>``.  Values are arbitrary JSON.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field


class SettingsUpdate(BaseModel):
    category: str = Field(..., min_length=1, example="general")
    settings: Dict[str, Any] = Field(..., example={"siteName": "Evenza", "maintenance": False})
