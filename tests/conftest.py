"""
Shared fixtures: every test gets its own SQLite file.
"""

import pytest

from thoughtbank.core.db import init_db


@pytest.fixture(autouse=True)
def temp_db(tmp_path, monkeypatch):
    """Point DB_PATH at a fresh database for each test."""
    db_path = tmp_path / "thoughts.db"
    monkeypatch.setenv("DB_PATH", str(db_path))
    init_db()
    return db_path


@pytest.fixture
def bot():
    from thoughtbank.core.dao import create_bot
    return create_bot("magma")
