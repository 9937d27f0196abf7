# utils/__init__.py
"""
Shared utilities for the Field Sales Tracker pages.

- config: settings from .env / Streamlit secrets
- db: shared SQLAlchemy engine and health check
- auth: e-mail sign in and page guards
- field_activity: leaderboard, activity table, role editor, commission

Usage:
    from utils import AuthManager, check_db_connection, config
"""

from .config import (
    config,
    Config,
    IS_RUNNING_ON_CLOUD,
    APP_CONFIG,
)

from .db import (
    get_db_engine,
    reset_db_engine,
    check_db_connection,
    get_connection_pool_status,
    execute_query,
    execute_update,
)

from .auth import AuthManager

__all__ = [
    'config',
    'Config',
    'IS_RUNNING_ON_CLOUD',
    'APP_CONFIG',
    'get_db_engine',
    'reset_db_engine',
    'check_db_connection',
    'get_connection_pool_status',
    'execute_query',
    'execute_update',
    'AuthManager',
]

__version__ = '1.0.0'
