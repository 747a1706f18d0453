"""SQLite CREATE TABLE statements."""

from __future__ import annotations

TABLES: list[str] = [
    """
    CREATE TABLE IF NOT EXISTS entries (
        reference TEXT PRIMARY KEY,
        user_key TEXT DEFAULT '',
        intent TEXT NOT NULL,
        item TEXT,
        decision TEXT,
        confidence REAL NOT NULL,
        notes TEXT DEFAULT '',
        raw_text TEXT DEFAULT '',
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS lexicon (
        user_id TEXT NOT NULL,
        phrase TEXT NOT NULL,
        intent TEXT NOT NULL,
        slots TEXT NOT NULL DEFAULT '{}',
        learned_at TEXT NOT NULL,
        PRIMARY KEY (user_id, phrase)
    )
    """,
]
