"""
Admin settings endpoints.

``GET`` returns every setting as a flat ``{"category.key": value}``
map; ``POST`` upserts the keys of one category.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Path

from ....core.db import Database, get_db
from ....core.errors import to_http
from ....core.security import require_admin
from ....schemas.common import Message
from ....schemas.setting import SettingsUpdate
from ....services.settings_service import SettingsService

router = APIRouter()


@router.get("/", response_model=Dict[str, Any])
async def get_settings(category: Optional[str] = None, db: Database = Depends(get_db)) -> Dict[str, Any]:
    return await SettingsService.get_all(db, category)


@router.post("/", response_model=Dict[str, Any])
async def update_settings(
    data: SettingsUpdate,
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    return await SettingsService.upsert_category(db, data.category, data.settings, current_user)


@router.delete("/{key}", response_model=Message)
async def delete_setting(
    key: str = Path(..., description="Setting key, e.g. general.siteName"),
    current_user: dict = Depends(require_admin),
    db: Database = Depends(get_db),
) -> Message:
    try:
        await SettingsService.delete_setting(db, key, current_user)
    except ValueError as e:
        raise to_http(e)
    return Message(message="Setting deleted")
