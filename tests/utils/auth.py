import uuid
from typing import Dict

from evenza_api.app.core.db import Database
from evenza_api.app.core.security import hash_password, token_for_user

DEFAULT_PASSWORD = "secret123"


def create_user(db: Database, role: str = "user", email: str = None, password: str = DEFAULT_PASSWORD) -> Dict:
    email = email or f"{role}-{uuid.uuid4().hex[:8]}@example.com"
    with db.connection() as conn:
        cursor = conn.execute(
            "INSERT INTO users (name, email, password, role, phone) VALUES (?, ?, ?, ?, ?)",
            (f"Test {role}", email, hash_password(password), role, "555-0100"),
        )
        row = conn.execute("SELECT * FROM users WHERE id = ?", (cursor.lastrowid,)).fetchone()
    return dict(row)


def auth_headers(user: Dict) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token_for_user(user)}"}


def user_headers(db: Database) -> Dict[str, str]:
    return auth_headers(create_user(db))


def admin_headers(db: Database) -> Dict[str, str]:
    return auth_headers(create_user(db, role="admin"))
