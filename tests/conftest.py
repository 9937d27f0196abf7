"""Shared test fixtures for the field sales tracker test suite.

Provides:
- make_log: ActivityLog factory
- engine: in-memory SQLite engine with the store tables created/dropped
- seed_roles: a small team of user_roles rows
"""

import os

# Must be set before utils.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"

from datetime import datetime, timezone

import pytest
from sqlalchemy import text

from utils.db import get_db_engine
from utils.field_activity.models import ActivityLog


SCHEMA = [
    """
    CREATE TABLE activity_logs (
        id INTEGER PRIMARY KEY,
        user_id TEXT,
        user_email TEXT,
        activity_type TEXT,
        logged_at TEXT
    )
    """,
    """
    CREATE TABLE user_roles (
        id INTEGER PRIMARY KEY,
        user_id TEXT,
        first_name TEXT,
        last_name TEXT,
        role TEXT,
        team TEXT,
        name_abreviation TEXT
    )
    """,
    """
    CREATE TABLE users (
        id TEXT PRIMARY KEY,
        email TEXT NOT NULL,
        password_hash TEXT,
        password_salt TEXT,
        is_active INTEGER DEFAULT 1,
        last_login TEXT
    )
    """,
]


@pytest.fixture
def make_log():
    """Build an ActivityLog with sensible defaults."""
    counter = {'next_id': 1}

    def _make(email, tags=(), user_id=None, logged_at=None):
        log_id = counter['next_id']
        counter['next_id'] += 1
        return ActivityLog(
            id=log_id,
            user_id=user_id or f"user-{email}",
            user_email=email,
            activity_types=tuple(tags),
            logged_at=logged_at,
        )

    return _make


@pytest.fixture
def ts():
    """UTC datetime shortcut: ts(2024, 5, 1, 9)."""
    def _ts(*args):
        return datetime(*args, tzinfo=timezone.utc)
    return _ts


@pytest.fixture
def engine():
    """Create the store tables before each test, drop after."""
    eng = get_db_engine()
    with eng.begin() as conn:
        for ddl in SCHEMA:
            conn.execute(text(ddl))
    yield eng
    with eng.begin() as conn:
        for table in ("activity_logs", "user_roles", "users"):
            conn.execute(text(f"DROP TABLE IF EXISTS {table}"))


@pytest.fixture
def seed_roles(engine):
    """Two teams of role records. Returns the inserted rows."""
    rows = [
        {'id': 1, 'user_id': 'u-admin', 'first_name': 'Ada', 'last_name': 'Lane',
         'role': 'admin', 'team': 'North', 'name_abreviation': 'ADL'},
        {'id': 2, 'user_id': 'u-rep', 'first_name': 'Bo', 'last_name': 'Cruz',
         'role': 'rep', 'team': 'North', 'name_abreviation': 'BC'},
        {'id': 3, 'user_id': 'u-south', 'first_name': 'Cy', 'last_name': 'Moss',
         'role': 'manager', 'team': 'South', 'name_abreviation': None},
        {'id': 4, 'user_id': 'u-noteam', 'first_name': 'Di', 'last_name': 'Fox',
         'role': 'rep', 'team': None, 'name_abreviation': None},
    ]
    with engine.begin() as conn:
        conn.execute(
            text("""
                INSERT INTO user_roles (id, user_id, first_name, last_name, role, team, name_abreviation)
                VALUES (:id, :user_id, :first_name, :last_name, :role, :team, :name_abreviation)
            """),
            rows,
        )
    return rows
