"""
Business logic for users.

Users register themselves with the ``user`` role; administrators are
either created by the one-time setup route or promoted by a super
administrator.  Emails are stored lower-cased and are unique.
Password hashes never leave this module.
"""

import logging
import sqlite3
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..core.db import Database
from ..core.errors import ConflictError, ForbiddenError, NotFoundError
from ..core.filters import Op, SelectQuery
from ..core.security import hash_password, verify_password
from ..core.states import ADMIN_ROLES, UserRole
from ..schemas.user import AdminUserCreate, AdminUserUpdate, ProfileUpdate, UserCreate
from .activity_service import ActivityService, ActivityType

logger = logging.getLogger(__name__)

USER_COLUMNS = (
    "id, name, email, role, phone, department, year, bio, profile_picture, last_login, created_at"
)


class UserField(str, Enum):
    NAME = "name"
    EMAIL = "email"
    ROLE = "role"
    DEPARTMENT = "department"
    CREATED_AT = "created_at"


class UserService:
    """Service for managing user accounts."""

    @classmethod
    async def create_user(cls, db: Database, data: UserCreate, role: str = UserRole.USER.value) -> Dict[str, Any]:
        """Create a new user and return it without the password hash.

        Raises ``ConflictError`` when the email is already registered.
        """
        extra: Dict[str, Any] = {}
        if isinstance(data, AdminUserCreate):
            extra = data.model_dump(include={"phone", "department", "year"}, exclude_none=True)
        try:
            with db.connection() as conn:
                cursor = conn.execute(
                    "INSERT INTO users (name, email, password, role, phone, department, year) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?)",
                    (
                        data.name.strip(),
                        data.email,
                        hash_password(data.password),
                        role,
                        extra.get("phone", ""),
                        extra.get("department", ""),
                        extra.get("year", ""),
                    ),
                )
                user_id = cursor.lastrowid
        except sqlite3.IntegrityError:
            raise ConflictError("User with this email already exists") from None
        logger.info("Registered user %s with role %s", data.email, role)
        return await cls.get_user(db, user_id)

    @classmethod
    async def create_by_admin(cls, db: Database, actor: Dict[str, Any], data: AdminUserCreate) -> Dict[str, Any]:
        role = data.role.value
        if role != UserRole.USER.value and actor.get("role") != UserRole.SUPER_ADMIN.value:
            raise ForbiddenError("Only a super admin can create administrators")
        user = await cls.create_user(db, data, role=role)
        await ActivityService.record(
            db,
            actor.get("user_id"),
            ActivityType.ADMIN_ACTION.value,
            f"Created user {user['email']}",
            resource_type="user",
            resource_id=user["id"],
        )
        return user

    @classmethod
    async def authenticate(cls, db: Database, email: str, password: str) -> Optional[Dict[str, Any]]:
        """Return the user when the credentials match, otherwise ``None``.

        A successful login updates ``last_login``.
        """
        with db.connection() as conn:
            row = conn.execute(
                f"SELECT {USER_COLUMNS}, password FROM users WHERE email = ?",
                (email.strip().lower(),),
            ).fetchone()
            if not row or not verify_password(password, row["password"]):
                return None
            conn.execute("UPDATE users SET last_login = CURRENT_TIMESTAMP WHERE id = ?", (row["id"],))
        user = dict(row)
        user.pop("password")
        return user

    @classmethod
    async def get_user(cls, db: Database, user_id: int) -> Dict[str, Any]:
        with db.connection() as conn:
            row = conn.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,)).fetchone()
        if not row:
            raise NotFoundError("User not found")
        return dict(row)

    @classmethod
    async def admin_exists(cls, db: Database) -> bool:
        placeholders = ", ".join("?" for _ in ADMIN_ROLES)
        with db.connection() as conn:
            row = conn.execute(
                f"SELECT COUNT(*) FROM users WHERE role IN ({placeholders})", ADMIN_ROLES
            ).fetchone()
        return row[0] > 0

    @classmethod
    async def list_users(
        cls,
        db: Database,
        search: Optional[str] = None,
        role: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Dict[str, Any]], int]:
        query = (
            SelectQuery("users", UserField)
            .where_if(UserField.ROLE, Op.EQ, role)
            .search([UserField.NAME, UserField.EMAIL, UserField.DEPARTMENT], search)
            .order_by(UserField.CREATED_AT, descending=True)
        )
        sql, params = query.page(limit, offset, columns=USER_COLUMNS)
        with db.connection() as conn:
            total = conn.execute(*query.count()).fetchone()[0]
            rows = [dict(row) for row in conn.execute(sql, params).fetchall()]
        return rows, total

    @classmethod
    async def update_profile(cls, db: Database, user_id: int, data: ProfileUpdate) -> Dict[str, Any]:
        """Update the caller's own profile fields."""
        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        if fields:
            cls._apply_update(db, user_id, fields)
            await ActivityService.record(
                db, user_id, ActivityType.PROFILE_UPDATED.value, "Updated profile", resource_type="user", resource_id=user_id
            )
        return await cls.get_user(db, user_id)

    @classmethod
    async def update_by_admin(
        cls, db: Database, actor: Dict[str, Any], user_id: int, data: AdminUserUpdate
    ) -> Dict[str, Any]:
        """Update any user.  Only a super admin may change roles."""
        current = await cls.get_user(db, user_id)
        cls._check_super_admin_target(actor, current["role"], "modify")
        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        if "role" in fields:
            fields["role"] = fields["role"].value
            if fields["role"] != current["role"] and actor.get("role") != UserRole.SUPER_ADMIN.value:
                raise ForbiddenError("Only a super admin can change user roles")
        if "email" in fields:
            fields["email"] = fields["email"].strip().lower()
        if fields:
            try:
                cls._apply_update(db, user_id, fields)
            except sqlite3.IntegrityError:
                raise ConflictError("User with this email already exists") from None
            await ActivityService.record(
                db,
                actor.get("user_id"),
                ActivityType.ADMIN_ACTION.value,
                f"Updated user {current['email']}",
                resource_type="user",
                resource_id=user_id,
                metadata={"fields": sorted(fields)},
            )
        return await cls.get_user(db, user_id)

    @staticmethod
    def _check_super_admin_target(actor: Dict[str, Any], target_role: str, action: str) -> None:
        """Only a super admin may modify or delete another super admin."""
        if target_role == UserRole.SUPER_ADMIN.value and actor.get("role") != UserRole.SUPER_ADMIN.value:
            raise ForbiddenError(f"Cannot {action} super_admin user")

    @staticmethod
    def _apply_update(db: Database, user_id: int, fields: Dict[str, Any]) -> None:
        # Keys come from pydantic models, never from raw request input.
        assignments = ", ".join(f"{name} = ?" for name in fields)
        with db.connection() as conn:
            conn.execute(
                f"UPDATE users SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (*fields.values(), user_id),
            )

    @classmethod
    async def change_password(cls, db: Database, user_id: int, current_password: str, new_password: str) -> None:
        with db.connection() as conn:
            row = conn.execute("SELECT password FROM users WHERE id = ?", (user_id,)).fetchone()
            if not row:
                raise NotFoundError("User not found")
            if not verify_password(current_password, row["password"]):
                raise ValueError("Current password is incorrect")
            conn.execute(
                "UPDATE users SET password = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (hash_password(new_password), user_id),
            )
        logger.info("User %s changed password", user_id)
        await ActivityService.record(db, user_id, ActivityType.PASSWORD_CHANGED.value, "Changed password")

    @classmethod
    async def delete_user(cls, db: Database, actor: Dict[str, Any], user_id: int) -> None:
        """Delete a user together with their memberships and payments.

        Counters on the events, trips and interviews the user belonged
        to are decremented in the same transaction.
        """
        if actor.get("user_id") == user_id:
            raise ValueError("You cannot delete your own account")
        with db.transaction() as conn:
            row = conn.execute("SELECT email, role FROM users WHERE id = ?", (user_id,)).fetchone()
            if not row:
                raise NotFoundError("User not found")
            cls._check_super_admin_target(actor, row["role"], "delete")
            conn.execute(
                "UPDATE events SET attendee_count = MAX(attendee_count - 1, 0) "
                "WHERE id IN (SELECT event_id FROM event_attendees WHERE user_id = ?)",
                (user_id,),
            )
            conn.execute(
                "UPDATE trips SET enrollments = MAX(enrollments - 1, 0) "
                "WHERE id IN (SELECT trip_id FROM trip_participants WHERE user_id = ?)",
                (user_id,),
            )
            conn.execute(
                "UPDATE interviews SET registrations = MAX(registrations - 1, 0) "
                "WHERE id IN (SELECT interview_id FROM interview_submissions WHERE user_id = ?)",
                (user_id,),
            )
            conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
        logger.info("User %s deleted by %s", row["email"], actor.get("user_id"))
        await ActivityService.record(
            db,
            actor.get("user_id"),
            ActivityType.ADMIN_ACTION.value,
            f"Deleted user {row['email']}",
            resource_type="user",
            resource_id=user_id,
        )
