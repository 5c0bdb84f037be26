import json
from typing import Any, Dict

from evenza_api.app.core.db import Database


def _insert(db: Database, table: str, values: Dict[str, Any]) -> Dict:
    columns = ", ".join(values)
    placeholders = ", ".join("?" for _ in values)
    with db.connection() as conn:
        cursor = conn.execute(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", tuple(values.values()))
        row = conn.execute(f"SELECT * FROM {table} WHERE id = ?", (cursor.lastrowid,)).fetchone()
    return dict(row)


def create_event(db: Database, **overrides: Any) -> Dict:
    values = {
        "title": "Spring Hackathon",
        "description": "Build things for a day",
        "date": "2026-04-18",
        "time": "10:00",
        "location": "Main Hall",
        "category": "Technical",
        "price": 0,
        "max_attendees": 100,
    }
    values.update(overrides)
    return _insert(db, "events", values)


def create_trip(db: Database, **overrides: Any) -> Dict:
    values = {
        "title": "Himalayan Trek",
        "description": "Five days in the mountains",
        "date": "2026-05-02",
        "location": "Manali",
        "price": 0,
        "spots": 20,
    }
    values.update(overrides)
    return _insert(db, "trips", values)


def create_interview(db: Database, **overrides: Any) -> Dict:
    values = {
        "title": "Campus Placement Drive",
        "company": "Acme Corp",
        "description": "Graduate roles",
        "date": "2026-03-10",
        "location": "Placement Cell",
        "positions": json.dumps(["Backend Engineer"]),
    }
    values.update(overrides)
    return _insert(db, "interviews", values)


def count_rows(db: Database, table: str, where: str = "1 = 1", params: tuple = ()) -> int:
    with db.connection() as conn:
        return conn.execute(f"SELECT COUNT(*) FROM {table} WHERE {where}", params).fetchone()[0]


def fetch_one(db: Database, table: str, row_id: int) -> Dict:
    with db.connection() as conn:
        return dict(conn.execute(f"SELECT * FROM {table} WHERE id = ?", (row_id,)).fetchone())
