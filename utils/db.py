# utils/db.py
"""
Database Engine for the Field Sales Tracker

One engine per process, built lazily from ``config.get_db_url()``:
- MySQL (pymysql) with a pre-pinged QueuePool in production
- SQLite on a single shared connection when DATABASE_URL says so

Also holds the health check shown on every page and two small
helpers used by authentication.
"""

from sqlalchemy import create_engine, text
from sqlalchemy.pool import QueuePool, StaticPool
from sqlalchemy.exc import OperationalError, SQLAlchemyError
import logging
import threading
from typing import Tuple, Optional, Dict, Any, List

from .config import config

logger = logging.getLogger(__name__)

# ==================== ENGINE ====================

_engine = None
_engine_lock = threading.Lock()


def get_db_engine():
    """
    Shared SQLAlchemy engine, created on first use.

    Every page, query class and the auth manager go through here so the
    app never holds more than one pool.
    """
    global _engine

    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = _build_engine(config.get_db_url())

    return _engine


def _build_engine(url: str):
    logger.info(f"🔌 Connecting to {config.get_masked_db_url()}")

    if url.startswith("sqlite"):
        # In-memory databases only live as long as their connection
        return create_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )

    settings = config.app_config
    engine = create_engine(
        url,
        poolclass=QueuePool,
        pool_size=settings.get("DB_POOL_SIZE", 5),
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=settings.get("DB_POOL_RECYCLE", 3600),
        pool_pre_ping=True,
    )
    logger.info(f"✅ Engine ready (pool_size={engine.pool.size()})")
    return engine


def reset_db_engine():
    """Dispose the shared engine; the next get_db_engine() reconnects."""
    global _engine

    with _engine_lock:
        if _engine is not None:
            _engine.dispose()
            _engine = None

    logger.info("🔄 Database engine reset")


# ==================== HEALTH ====================

def check_db_connection() -> Tuple[bool, Optional[str]]:
    """
    Run ``SELECT 1`` against the store.

    Returns:
        (True, None) when reachable, else (False, message for the page)
    """
    try:
        with get_db_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return True, None
    except OperationalError as e:
        logger.error(f"❌ Database unreachable: {e}")
        return False, "Cannot reach the sales database. Check your network connection."
    except SQLAlchemyError as e:
        logger.error(f"❌ Database error: {e}")
        return False, f"Database error: {e}"


def get_connection_pool_status() -> Dict[str, Any]:
    """Pool counters for the admin status panel."""
    if _engine is None:
        return {"status": "not_initialized"}

    pool = _engine.pool
    if not isinstance(pool, QueuePool):
        return {"status": "active", "pool": type(pool).__name__}

    return {
        "status": "active",
        "pool_size": pool.size(),
        "checked_in": pool.checkedin(),
        "checked_out": pool.checkedout(),
        "overflow": pool.overflow(),
    }


# ==================== HELPERS ====================

def execute_query(query: str, params: Dict = None) -> List[Dict]:
    """SELECT returning a list of dict rows."""
    with get_db_engine().connect() as conn:
        return [dict(row) for row in conn.execute(text(query), params or {}).mappings()]


def execute_update(query: str, params: Dict = None) -> int:
    """INSERT/UPDATE/DELETE in its own transaction; returns the row count."""
    with get_db_engine().begin() as conn:
        return conn.execute(text(query), params or {}).rowcount


__all__ = [
    'get_db_engine',
    'reset_db_engine',
    'check_db_connection',
    'get_connection_pool_status',
    'execute_query',
    'execute_update',
]
