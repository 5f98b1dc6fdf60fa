"""
SQLite record store - canonical truth for thoughts, subjects and bots.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator

from .config import get_db_path, ensure_db_directory


@contextmanager
def get_db() -> Generator[sqlite3.Connection, None, None]:
    """Get a SQLite database connection."""
    ensure_db_directory()
    conn = sqlite3.connect(get_db_path())
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def init_db():
    """Initialize the database with required tables."""
    with get_db() as conn:
        cursor = conn.cursor()

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS bots (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                created_at TIMESTAMP NOT NULL
            )
        ''')

        # One table per subject kind
        for table in ('projects', 'people'):
            cursor.execute(f'''
                CREATE TABLE IF NOT EXISTS {table} (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL UNIQUE,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP NOT NULL
                )
            ''')

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS thoughts (
                id TEXT PRIMARY KEY,
                brief TEXT NOT NULL,
                content TEXT NOT NULL,  -- JSON document
                importance INTEGER NOT NULL DEFAULT 50,
                subject_type TEXT,
                type TEXT,              -- NULL for the base kind
                created_at TIMESTAMP NOT NULL,
                updated_at TIMESTAMP NOT NULL,
                bot_id TEXT NOT NULL,
                subject_id TEXT
            )
        ''')

        cursor.execute('CREATE INDEX IF NOT EXISTS index_thoughts_on_bot_id ON thoughts(bot_id)')
        cursor.execute('CREATE INDEX IF NOT EXISTS index_thoughts_on_brief ON thoughts(brief)')
        cursor.execute('CREATE INDEX IF NOT EXISTS index_thoughts_on_subject ON thoughts(subject_type, subject_id)')

        conn.commit()


def health_check():
    """Check database health."""
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type='table';")
            table_names = [row[0] for row in cursor.fetchall()]

            required_tables = ['bots', 'projects', 'people', 'thoughts']
            return all(table in table_names for table in required_tables)
    except sqlite3.Error:
        return False
