"""
SQLite database integration and simple migration system.

The ``Database`` class is the single application-lifetime handle on
the store.  ``create_app`` builds one instance, keeps it on
``app.state.db`` and route handlers receive it through the
``get_db`` dependency.  Schema migrations are applied lazily the
first time a connection is requested; a lock guarantees they run
exactly once even when several requests arrive during a cold start.

Every unit of work opens its own short-lived connection, either
through ``connection()`` (autocommit on success) or ``transaction()``
(an explicit ``BEGIN IMMEDIATE`` block used by multi-row writes such
as registrations).

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from fastapi import Request

logger = logging.getLogger(__name__)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            password TEXT NOT NULL,
            role TEXT NOT NULL DEFAULT 'user',
            phone TEXT DEFAULT '',
            department TEXT DEFAULT '',
            year TEXT DEFAULT '',
            bio TEXT DEFAULT '',
            profile_picture TEXT DEFAULT '',
            last_login TIMESTAMP,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS events (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            date TEXT NOT NULL,
            time TEXT DEFAULT '',
            location TEXT DEFAULT '',
            category TEXT DEFAULT 'Other',
            price REAL DEFAULT 0,
            max_attendees INTEGER DEFAULT 100,
            attendee_count INTEGER DEFAULT 0,
            is_featured INTEGER DEFAULT 0,
            image TEXT,
            is_published INTEGER DEFAULT 1,
            status TEXT DEFAULT 'active',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS event_attendees (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            event_id INTEGER NOT NULL REFERENCES events(id) ON DELETE CASCADE,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            phone TEXT DEFAULT '',
            tickets INTEGER DEFAULT 1,
            payment_status TEXT DEFAULT 'pending',
            special_requirements TEXT DEFAULT '',
            registered_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (event_id, user_id)
        );

        CREATE TABLE IF NOT EXISTS trips (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            date TEXT NOT NULL,
            location TEXT NOT NULL,
            price REAL DEFAULT 0,
            spots INTEGER DEFAULT 20,
            enrollments INTEGER DEFAULT 0,
            itinerary TEXT,
            requirements TEXT,
            image TEXT,
            is_published INTEGER DEFAULT 1,
            status TEXT DEFAULT 'active',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS trip_participants (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            trip_id INTEGER NOT NULL REFERENCES trips(id) ON DELETE CASCADE,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            phone TEXT DEFAULT '',
            payment_status TEXT DEFAULT 'pending',
            emergency_contact TEXT DEFAULT '',
            special_requirements TEXT DEFAULT '',
            enrolled_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (trip_id, user_id)
        );

        CREATE TABLE IF NOT EXISTS interviews (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            company TEXT NOT NULL,
            description TEXT NOT NULL,
            date TEXT NOT NULL,
            location TEXT NOT NULL,
            positions TEXT NOT NULL DEFAULT '[]',
            slots INTEGER,
            registrations INTEGER DEFAULT 0,
            image TEXT,
            is_published INTEGER DEFAULT 1,
            status TEXT DEFAULT 'active',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS interview_submissions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            interview_id INTEGER NOT NULL REFERENCES interviews(id) ON DELETE CASCADE,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            phone TEXT DEFAULT '',
            position TEXT DEFAULT '',
            education TEXT DEFAULT '',
            experience TEXT DEFAULT '',
            cover_letter TEXT DEFAULT '',
            resume TEXT DEFAULT '',
            portfolio_url TEXT DEFAULT '',
            linkedin_url TEXT DEFAULT '',
            github_url TEXT DEFAULT '',
            availability TEXT DEFAULT '',
            additional_info TEXT DEFAULT '',
            status TEXT DEFAULT 'pending',
            admin_notes TEXT,
            reviewed_by INTEGER REFERENCES users(id) ON DELETE SET NULL,
            reviewed_at TIMESTAMP,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (user_id, interview_id)
        );

        -- Mirror of a user's memberships, one row per registration.
        CREATE TABLE IF NOT EXISTS user_registrations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            kind TEXT NOT NULL,
            entity_id INTEGER NOT NULL,
            submission_id INTEGER,
            tickets INTEGER DEFAULT 1,
            payment_status TEXT DEFAULT 'not_required',
            status TEXT DEFAULT 'registered',
            registered_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            UNIQUE (user_id, kind, entity_id)
        );

        CREATE TABLE IF NOT EXISTS payments (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            payment_type TEXT NOT NULL,
            related_id INTEGER NOT NULL,
            related_title TEXT,
            amount REAL NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending',
            proof_url TEXT,
            notes TEXT,
            verified_by INTEGER REFERENCES users(id) ON DELETE SET NULL,
            verified_at TIMESTAMP,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS queries (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            subject TEXT NOT NULL,
            message TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'new',
            response TEXT,
            responded_by INTEGER REFERENCES users(id) ON DELETE SET NULL,
            responded_at TIMESTAMP,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS messages (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER REFERENCES users(id) ON DELETE SET NULL,
            query_id INTEGER REFERENCES queries(id) ON DELETE SET NULL,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            subject TEXT NOT NULL,
            message TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'new',
            notes TEXT DEFAULT '',
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS content (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            slug TEXT NOT NULL UNIQUE,
            type TEXT NOT NULL DEFAULT 'page',
            body TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'draft',
            is_homepage INTEGER DEFAULT 0,
            author TEXT,
            created_by INTEGER REFERENCES users(id) ON DELETE SET NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            category TEXT NOT NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS media (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT,
            type TEXT NOT NULL,
            url TEXT NOT NULL,
            category TEXT NOT NULL,
            related_event_id INTEGER REFERENCES events(id) ON DELETE SET NULL,
            related_trip_id INTEGER REFERENCES trips(id) ON DELETE SET NULL,
            uploaded_by INTEGER REFERENCES users(id) ON DELETE SET NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS activity_logs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER,
            type TEXT NOT NULL,
            description TEXT NOT NULL,
            resource_type TEXT,
            resource_id INTEGER,
            metadata TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """,
    ),
    # Migration 2: lookup indexes for the admin listings
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_payments_user ON payments (user_id);
        CREATE INDEX IF NOT EXISTS idx_payments_status ON payments (status);
        CREATE INDEX IF NOT EXISTS idx_queries_user ON queries (user_id);
        CREATE INDEX IF NOT EXISTS idx_activity_user ON activity_logs (user_id);
        CREATE INDEX IF NOT EXISTS idx_settings_category ON settings (category);
        """,
    ),
]


def resolve_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths are used as is; relative paths are resolved against
    the project root (the directory containing ``evenza_api``).
    """
    if os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / database_url).resolve())


class Database:
    """Application-lifetime handle on the SQLite store."""

    def __init__(self, path: str) -> None:
        self.path = path
        self._lock = threading.Lock()
        self._initialised = False

    def init(self) -> None:
        """Apply pending migrations once per process."""
        if self._initialised:
            return
        with self._lock:
            if self._initialised:
                return
            conn = self._open()
            try:
                apply_migrations(conn)
            finally:
                conn.close()
            self._initialised = True
            logger.info("Database ready at %s", self.path)

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.path, timeout=30)
        # Return rows as dict‑like objects keyed by column name
        conn.row_factory = sqlite3.Row
        # Foreign key support is off by default in SQLite and must be
        # enabled per connection.
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def connect(self) -> sqlite3.Connection:
        """Return a new connection, initialising the schema on first use."""
        self.init()
        return self._open()

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection that commits on success and always closes."""
        conn = self.connect()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection inside a ``BEGIN IMMEDIATE`` transaction.

        The write lock is taken up front so concurrent writers are
        serialised: two registrations for the same event cannot both
        pass a capacity check before either commits.
        """
        conn = self.connect()
        conn.isolation_level = None
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except Exception:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        finally:
            conn.close()


def apply_migrations(conn: sqlite3.Connection) -> None:
    """Create the ``migrations`` table and apply new migrations in order."""
    cursor = conn.cursor()
    cursor.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
    row = cursor.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
    current_version = row["version"] if row and row["version"] is not None else 0

    for version, sql in MIGRATIONS:
        if version > current_version:
            cursor.executescript(sql)
            cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
            conn.commit()
            logger.info("Applied migration %s", version)
            current_version = version


def get_db(request: Request) -> Database:
    """FastAPI dependency returning the application's ``Database``."""
    return request.app.state.db
