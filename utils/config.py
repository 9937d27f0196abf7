# utils/config.py
"""
Settings for the Field Sales Tracker

Two sources, picked once at import:
- Streamlit Cloud: ``[DB_CONFIG]`` and ``[APP]`` tables in secrets.toml
- Local: a ``.env`` file (python-dotenv) plus the process environment

DATABASE_URL, when set, wins over the DB_* parts. Tests point it at
``sqlite://``.
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv
from typing import Dict, Any, Mapping, Optional
from dataclasses import dataclass, asdict
from urllib.parse import quote_plus

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "field_sales"


def is_running_on_streamlit_cloud() -> bool:
    """True when Streamlit secrets are available and non-empty."""
    try:
        import streamlit as st
        return len(st.secrets) > 0
    except Exception:
        # st.secrets raises when no secrets.toml exists
        return False


def _as_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    return str(value).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class DatabaseConfig:
    """Connection settings for the sales database."""
    host: str = ""
    port: int = 3306
    user: str = ""
    password: str = ""
    database: str = DEFAULT_DATABASE
    url: Optional[str] = None

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> 'DatabaseConfig':
        """Build from lower-case keys (host, port, user, password, database, url)."""
        return cls(
            host=values.get("host") or "",
            port=int(values.get("port") or 3306),
            user=values.get("user") or "",
            password=values.get("password") or "",
            database=values.get("database") or DEFAULT_DATABASE,
            url=values.get("url") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def is_configured(self) -> bool:
        return bool(self.url) or all([self.host, self.user, self.password])

    def get_url(self) -> str:
        if self.url:
            return self.url
        password = quote_plus(str(self.password))
        return f"mysql+pymysql://{self.user}:{password}@{self.host}:{self.port}/{self.database}"

    def masked_url(self) -> str:
        """Loggable form of the URL, credentials hidden."""
        if self.url:
            return f"{self.url.split('://', 1)[0]}://***"
        return f"mysql+pymysql://{self.user}:***@{self.host}:{self.port}/{self.database}"


class Config:
    """
    Process-wide settings (singleton).

    Usage:
        from utils.config import config

        url = config.get_db_url()
        timeout = config.get_app_setting("SESSION_TIMEOUT_HOURS", 8)
        if config.is_feature_enabled("COMMISSION_CALCULATOR"):
            ...
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self.is_cloud = is_running_on_streamlit_cloud()
        self._db_config = self._read_cloud_db() if self.is_cloud else self._read_local_db()

        if not self._db_config.is_configured():
            logger.error("Database settings are incomplete")
            raise ValueError(
                "Missing database settings. Set DATABASE_URL, or "
                "DB_HOST/DB_USER/DB_PASSWORD (.env or Streamlit secrets)."
            )

        self._app_config = self._read_app_settings()
        self._initialized = True

        logger.info(
            f"{'☁️ Cloud' if self.is_cloud else '💻 Local'} config loaded: "
            f"{self._db_config.masked_url()}, "
            f"session timeout {self._app_config['SESSION_TIMEOUT_HOURS']}h"
        )

    # ==================== SOURCES ====================

    def _read_cloud_db(self) -> DatabaseConfig:
        import streamlit as st

        # [APP] secrets act as environment defaults for _read_app_settings
        for key, value in dict(st.secrets.get("APP", {})).items():
            os.environ.setdefault(key, str(value))

        return DatabaseConfig.from_mapping(dict(st.secrets.get("DB_CONFIG", {})))

    def _read_local_db(self) -> DatabaseConfig:
        for env_path in (Path.cwd() / ".env", Path(__file__).parent.parent / ".env"):
            if env_path.exists():
                load_dotenv(env_path)
                logger.info(f"Loaded {env_path}")
                break

        return DatabaseConfig.from_mapping({
            "host": os.getenv("DB_HOST"),
            "port": os.getenv("DB_PORT"),
            "user": os.getenv("DB_USER"),
            "password": os.getenv("DB_PASSWORD"),
            "database": os.getenv("DB_NAME"),
            "url": os.getenv("DATABASE_URL"),
        })

    @staticmethod
    def _read_app_settings() -> Dict[str, Any]:
        return {
            "SESSION_TIMEOUT_HOURS": int(os.getenv("SESSION_TIMEOUT_HOURS", "8")),
            "DB_POOL_SIZE": int(os.getenv("DB_POOL_SIZE", "5")),
            "DB_POOL_RECYCLE": int(os.getenv("DB_POOL_RECYCLE", "3600")),
            "ENABLE_COMMISSION_CALCULATOR": _as_bool(os.getenv("ENABLE_COMMISSION_CALCULATOR"), True),
            "ENABLE_DEBUG_MODE": _as_bool(os.getenv("ENABLE_DEBUG_MODE"), False),
        }

    # ==================== GETTERS ====================

    def get_db_config(self) -> Dict[str, Any]:
        return self._db_config.to_dict()

    def get_db_url(self) -> str:
        return self._db_config.get_url()

    def get_masked_db_url(self) -> str:
        return self._db_config.masked_url()

    def get_app_setting(self, key: str, default: Any = None) -> Any:
        return self._app_config.get(key, default)

    def is_feature_enabled(self, feature: str) -> bool:
        """Flag lookup by short name, e.g. "COMMISSION_CALCULATOR"."""
        return bool(self._app_config.get(f"ENABLE_{feature.upper()}", True))

    @property
    def db_config(self) -> Dict[str, Any]:
        return self.get_db_config()

    @property
    def app_config(self) -> Dict[str, Any]:
        return dict(self._app_config)


config = Config()

IS_RUNNING_ON_CLOUD = config.is_cloud
APP_CONFIG = config.app_config

__all__ = [
    'config',
    'Config',
    'DatabaseConfig',
    'IS_RUNNING_ON_CLOUD',
    'APP_CONFIG',
]
