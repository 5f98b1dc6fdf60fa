"""
Record store access for thoughts, subjects and bots.

Every function opens its own connection and commits before returning, so a
write is durable by the time the caller moves on to the vector index.
"""

import json
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from .db import get_db
from .errors import CorruptThoughtError, ThoughtNotFoundError
from .schema import (
    Bot,
    SUBJECT_CLASSES,
    Subject,
    SubjectKind,
    SubjectRef,
    Thought,
    ThoughtKind,
)
from thoughtbank.util.logging import logger

THOUGHTS_TABLE = "thoughts"

_THOUGHT_COLUMNS = "id, brief, content, importance, subject_type, type, created_at, updated_at, bot_id, subject_id"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_ts(value) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _row_to_thought(row) -> Thought:
    try:
        kind = ThoughtKind.from_type(row["type"])
        subject = None
        if row["subject_type"] is not None and row["subject_id"] is not None:
            subject = SubjectRef(SubjectKind(row["subject_type"]), row["subject_id"])
    except ValueError as e:
        raise CorruptThoughtError(row["id"], str(e)) from e

    return Thought(
        id=row["id"],
        brief=row["brief"],
        content=json.loads(row["content"]),
        bot_id=row["bot_id"],
        created_at=_parse_ts(row["created_at"]),
        updated_at=_parse_ts(row["updated_at"]),
        importance=row["importance"],
        kind=kind,
        subject=subject,
    )


def _row_to_subject(kind: SubjectKind, row) -> Subject:
    return SUBJECT_CLASSES[kind](
        id=row["id"],
        name=row["name"],
        created_at=_parse_ts(row["created_at"]),
        updated_at=_parse_ts(row["updated_at"]),
    )


# Bots

def create_bot(name: str) -> Bot:
    bot = Bot(id=str(uuid.uuid4()), name=name, created_at=_now())
    with get_db() as conn:
        conn.execute(
            "INSERT INTO bots (id, name, created_at) VALUES (?, ?, ?)",
            (bot.id, bot.name, bot.created_at.isoformat())
        )
        conn.commit()
    return bot


def get_bot(bot_id: str) -> Optional[Bot]:
    if not bot_id or not bot_id.strip():
        return None

    with get_db() as conn:
        row = conn.execute("SELECT id, name, created_at FROM bots WHERE id = ?", (bot_id,)).fetchone()
    if row is None:
        return None
    return Bot(id=row["id"], name=row["name"], created_at=_parse_ts(row["created_at"]))


# Subjects

def get_subject(kind: SubjectKind, subject_id: str) -> Optional[Subject]:
    with get_db() as conn:
        row = conn.execute(
            f"SELECT id, name, created_at, updated_at FROM {kind.table} WHERE id = ?",
            (subject_id,)
        ).fetchone()
    return _row_to_subject(kind, row) if row else None


def find_subject_by_name(kind: SubjectKind, name: str) -> Optional[Subject]:
    with get_db() as conn:
        row = conn.execute(
            f"SELECT id, name, created_at, updated_at FROM {kind.table} WHERE name = ?",
            (name,)
        ).fetchone()
    return _row_to_subject(kind, row) if row else None


def find_or_create_subject(kind: SubjectKind, name: str) -> Tuple[Subject, bool]:
    """Find a subject of `kind` by name, creating it if missing.

    Returns the subject and whether it was created. A concurrent insert of the
    same name loses on the UNIQUE constraint and falls back to the existing row.
    """
    existing = find_subject_by_name(kind, name)
    if existing:
        return existing, False

    now = _now()
    subject_id = str(uuid.uuid4())
    try:
        with get_db() as conn:
            conn.execute(
                f"INSERT INTO {kind.table} (id, name, created_at, updated_at) VALUES (?, ?, ?, ?)",
                (subject_id, name, now.isoformat(), now.isoformat())
            )
            conn.commit()
    except sqlite3.IntegrityError:
        existing = find_subject_by_name(kind, name)
        if existing:
            return existing, False
        raise

    logger.log_subject_operation("created", kind.value, subject_id, name)
    return SUBJECT_CLASSES[kind](id=subject_id, name=name, created_at=now, updated_at=now), True


def count_subjects(kind: SubjectKind) -> int:
    with get_db() as conn:
        row = conn.execute(f"SELECT COUNT(*) FROM {kind.table}").fetchone()
    return row[0] if row else 0


# Thoughts

def insert_thought(brief: str, content: Dict[str, Any], bot_id: str, importance: int = 50,
                   kind: ThoughtKind = ThoughtKind.BASE, subject: Optional[SubjectRef] = None) -> Thought:
    """Insert a thought row and return the persisted record."""
    now = _now()
    thought = Thought(
        id=str(uuid.uuid4()),
        brief=brief,
        content=content,
        bot_id=bot_id,
        created_at=now,
        updated_at=now,
        importance=importance,
        kind=kind,
        subject=subject,
    )

    try:
        with get_db() as conn:
            conn.execute(
                f"INSERT INTO {THOUGHTS_TABLE} ({_THOUGHT_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    thought.id,
                    thought.brief,
                    json.dumps(thought.content),
                    thought.importance,
                    thought.subject_type,
                    thought.type,
                    now.isoformat(),
                    now.isoformat(),
                    thought.bot_id,
                    thought.subject_id,
                )
            )
            conn.commit()
    except sqlite3.Error as e:
        logger.error(f"Database error during insert_thought for bot '{bot_id}': {e}")
        raise

    return thought


def get_thought(thought_id: str) -> Optional[Thought]:
    if not thought_id or not thought_id.strip():
        return None

    with get_db() as conn:
        row = conn.execute(
            f"SELECT {_THOUGHT_COLUMNS} FROM {THOUGHTS_TABLE} WHERE id = ?",
            (thought_id.strip(),)
        ).fetchone()
    return _row_to_thought(row) if row else None


def update_thought(thought: Thought) -> Thought:
    """Write the mutable fields of `thought` back and bump updated_at."""
    thought.updated_at = _now()
    try:
        with get_db() as conn:
            cursor = conn.execute(
                f"""UPDATE {THOUGHTS_TABLE}
                    SET brief = ?, content = ?, importance = ?, type = ?,
                        subject_type = ?, subject_id = ?, updated_at = ?
                    WHERE id = ?""",
                (
                    thought.brief,
                    json.dumps(thought.content),
                    thought.importance,
                    thought.type,
                    thought.subject_type,
                    thought.subject_id,
                    thought.updated_at.isoformat(),
                    thought.id,
                )
            )
            conn.commit()
            updated = cursor.rowcount
    except sqlite3.Error as e:
        logger.error(f"Database error during update_thought for thought '{thought.id}': {e}")
        raise

    if updated == 0:
        raise ThoughtNotFoundError(thought.id)
    return thought


def delete_thought(thought_id: str) -> bool:
    """Delete a thought row. Returns False when no row matched."""
    try:
        with get_db() as conn:
            cursor = conn.execute(f"DELETE FROM {THOUGHTS_TABLE} WHERE id = ?", (thought_id,))
            conn.commit()
            deleted = cursor.rowcount
    except sqlite3.Error as e:
        logger.error(f"Database error during delete_thought for thought '{thought_id}': {e}")
        raise
    return deleted > 0


def list_thoughts(bot_id: str = None) -> List[Thought]:
    """List thoughts, newest first, optionally scoped to one bot."""
    with get_db() as conn:
        if bot_id and bot_id.strip():
            rows = conn.execute(
                f"SELECT {_THOUGHT_COLUMNS} FROM {THOUGHTS_TABLE} WHERE bot_id = ? ORDER BY created_at DESC",
                (bot_id.strip(),)
            ).fetchall()
        else:
            rows = conn.execute(
                f"SELECT {_THOUGHT_COLUMNS} FROM {THOUGHTS_TABLE} ORDER BY created_at DESC"
            ).fetchall()
    return [_row_to_thought(row) for row in rows]


def count_thoughts(bot_id: str = None) -> int:
    with get_db() as conn:
        if bot_id and bot_id.strip():
            row = conn.execute(f"SELECT COUNT(*) FROM {THOUGHTS_TABLE} WHERE bot_id = ?", (bot_id.strip(),)).fetchone()
        else:
            row = conn.execute(f"SELECT COUNT(*) FROM {THOUGHTS_TABLE}").fetchone()
    return row[0] if row else 0
