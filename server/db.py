"""FakeSO: database initialization and row helpers."""

from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone

# Columns holding JSON-encoded lists (id references or username sets)
LIST_FIELDS = {
    "accounts": ("questions", "answers", "threads"),
    "questions": ("tags", "answers", "views", "up_votes", "down_votes", "comments"),
    "answers": ("comments",),
    "comments": (),
    "tags": (),
    "threads": ("messages", "accounts"),
    "messages": ("views", "likes"),
    "forums": (),
}

COLUMNS = {
    "accounts": (
        "username", "email", "password", "bio", "created_at",
        "questions", "answers", "threads", "color_blindness", "low_vision",
    ),
    "questions": (
        "title", "text", "tags", "asked_by", "ask_date_time",
        "answers", "views", "up_votes", "down_votes", "comments",
    ),
    "answers": ("text", "ans_by", "ans_date_time", "comments"),
    "comments": ("text", "comment_by", "comment_date_time"),
    "tags": ("name", "description"),
    "threads": ("messages", "accounts", "thread_updated_date_time"),
    "messages": ("sender", "message_date_time", "content", "views", "likes"),
    "forums": ("name", "description", "thread"),
}


@contextmanager
def get_db(db_path):
    conn = sqlite3.connect(db_path, timeout=5)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path):
    with get_db(db_path) as conn:
        conn.execute("PRAGMA journal_mode = WAL")
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS accounts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                username TEXT NOT NULL UNIQUE,
                email TEXT NOT NULL UNIQUE,
                password TEXT DEFAULT '',
                bio TEXT DEFAULT '',
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                questions TEXT DEFAULT '[]',
                answers TEXT DEFAULT '[]',
                threads TEXT DEFAULT '[]',
                color_blindness TEXT DEFAULT 'none',
                low_vision INTEGER DEFAULT 0
            );
            CREATE TABLE IF NOT EXISTS questions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                text TEXT NOT NULL,
                tags TEXT DEFAULT '[]',
                asked_by TEXT NOT NULL,
                ask_date_time TIMESTAMP NOT NULL,
                answers TEXT DEFAULT '[]',
                views TEXT DEFAULT '[]',
                up_votes TEXT DEFAULT '[]',
                down_votes TEXT DEFAULT '[]',
                comments TEXT DEFAULT '[]'
            );
            CREATE TABLE IF NOT EXISTS answers (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                text TEXT NOT NULL,
                ans_by TEXT NOT NULL,
                ans_date_time TIMESTAMP NOT NULL,
                comments TEXT DEFAULT '[]'
            );
            CREATE TABLE IF NOT EXISTS comments (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                text TEXT NOT NULL,
                comment_by TEXT NOT NULL,
                comment_date_time TIMESTAMP NOT NULL
            );
            CREATE TABLE IF NOT EXISTS tags (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE,
                description TEXT DEFAULT ''
            );
            CREATE TABLE IF NOT EXISTS threads (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                messages TEXT DEFAULT '[]',
                accounts TEXT DEFAULT '[]',
                thread_updated_date_time TIMESTAMP NOT NULL
            );
            CREATE TABLE IF NOT EXISTS messages (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                sender TEXT NOT NULL,
                message_date_time TIMESTAMP NOT NULL,
                content TEXT NOT NULL,
                views TEXT DEFAULT '[]',
                likes TEXT DEFAULT '[]'
            );
            CREATE TABLE IF NOT EXISTS forums (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                description TEXT NOT NULL,
                thread INTEGER
            );
            CREATE INDEX IF NOT EXISTS idx_questions_asked_by
                ON questions(asked_by);
            CREATE INDEX IF NOT EXISTS idx_answers_ans_by ON answers(ans_by);
        """)
        conn.commit()


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_list(text) -> list:
    """Parse a JSON list column."""
    if not text:
        return []
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return []
    return value if isinstance(value, list) else []


def encode_fields(table: str, fields: dict) -> dict:
    """JSON-encode the list columns of a write."""
    lists = LIST_FIELDS[table]
    return {
        k: json.dumps(list(v)) if k in lists else v
        for k, v in fields.items()
    }


def row_to_doc(table: str, row) -> dict:
    """Turn a row into a plain document, decoding list columns."""
    doc = dict(row)
    for field in LIST_FIELDS[table]:
        doc[field] = parse_list(doc.get(field))
    if table == "accounts":
        doc["accessibility_settings"] = {
            "color_blindness": doc.pop("color_blindness") or "none",
            "low_vision": bool(doc.pop("low_vision")),
        }
    return doc
