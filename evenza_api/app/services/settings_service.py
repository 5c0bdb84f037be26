"""
Service layer for site settings.

Settings are grouped by category and stored one row per key as
``<category>.<name>`` with a JSON encoded value, so any JSON type
round-trips unchanged.  Use this service to centralize access to
values that admins change at runtime.
"""

import json
import logging
from typing import Any, Dict, Optional

from ..core.db import Database
from ..core.errors import NotFoundError
from .activity_service import ActivityService, ActivityType

logger = logging.getLogger(__name__)


class SettingsService:
    """Service for managing site settings."""

    @classmethod
    async def get_all(cls, db: Database, category: Optional[str] = None) -> Dict[str, Any]:
        """Return settings as a ``{key: value}`` map."""
        with db.connection() as conn:
            if category:
                rows = conn.execute(
                    "SELECT key, value FROM settings WHERE category = ? ORDER BY key", (category,)
                ).fetchall()
            else:
                rows = conn.execute("SELECT key, value FROM settings ORDER BY key").fetchall()
        return {row["key"]: json.loads(row["value"]) for row in rows}

    @classmethod
    async def upsert_category(
        cls, db: Database, category: str, values: Dict[str, Any], actor: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Insert or update every entry of ``values`` under ``category``.

        Returns the full settings of that category after the update.
        """
        category = category.strip()
        with db.transaction() as conn:
            for name, value in values.items():
                conn.execute(
                    "INSERT INTO settings (key, value, category) VALUES (?, ?, ?)"
                    " ON CONFLICT(key) DO UPDATE SET value = excluded.value,"
                    " category = excluded.category, updated_at = CURRENT_TIMESTAMP",
                    (f"{category}.{name}", json.dumps(value), category),
                )
        logger.info("Settings %s updated (%d keys)", category, len(values))
        await ActivityService.record(
            db,
            actor.get("user_id"),
            ActivityType.ADMIN_ACTION.value,
            f"Updated {category} settings",
            resource_type="setting",
            metadata={"keys": sorted(values)},
        )
        return await cls.get_all(db, category)

    @classmethod
    async def delete_setting(cls, db: Database, key: str, actor: Dict[str, Any]) -> None:
        with db.connection() as conn:
            cursor = conn.execute("DELETE FROM settings WHERE key = ?", (key,))
            if cursor.rowcount == 0:
                raise NotFoundError(f"Setting {key} not found")
        await ActivityService.record(
            db,
            actor.get("user_id"),
            ActivityType.ADMIN_ACTION.value,
            f"Deleted setting {key}",
            resource_type="setting",
        )
