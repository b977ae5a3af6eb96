"""
Centralized configuration for the record store.

- dataclasses + stdlib env parsing, no Pydantic.
- Loads from OS env; a .env file next to the project root is read with python-dotenv.
- Validation in __post_init__.
- Immutable singleton via functools.lru_cache.
- The DSN is never logged in clear.
"""

from __future__ import annotations

import functools
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import structlog
from dotenv import load_dotenv

ENV_PREFIX = "RECORDSTORE_"


# ------------------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------------------
def _get_env_str(key: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(ENV_PREFIX + key)
    if v is None or v.strip() == "":
        return default
    return v.strip()


def _get_env_bool(key: str, default: bool = False) -> bool:
    v = os.getenv(ENV_PREFIX + key)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _get_env_int(key: str, default: int) -> int:
    v = os.getenv(ENV_PREFIX + key)
    if v is None or v.strip() == "":
        return default
    try:
        return int(v)
    except ValueError:
        raise ValueError(f"Env var {ENV_PREFIX}{key} must be an integer")


def _validate_postgres_dsn(value: Optional[str], *, key: str) -> Optional[str]:
    if not value:
        return None
    if not value.startswith("postgresql://") and not value.startswith("postgresql+asyncpg://"):
        raise ValueError(f"{key} must start with postgresql:// or postgresql+asyncpg://")
    return value


# ------------------------------------------------------------------------------
# Settings dataclass (immutable)
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class Settings:
    # Database (only used by DatabaseSessionFactory; the adapter borrows a connection)
    database_url: Optional[str] = None
    database_echo: bool = False
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # Observability
    log_level: str = "INFO"
    json_logs: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "database_url",
            _validate_postgres_dsn(self.database_url, key=f"{ENV_PREFIX}DATABASE_URL"),
        )

        if self.database_pool_size <= 0:
            raise ValueError(f"{ENV_PREFIX}POOL_SIZE must be > 0")
        if self.database_max_overflow < 0:
            raise ValueError(f"{ENV_PREFIX}MAX_OVERFLOW must be >= 0")

        if not re.fullmatch(r"(?i)DEBUG|INFO|WARNING|ERROR|CRITICAL", self.log_level.strip()):
            raise ValueError(f"{ENV_PREFIX}LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        object.__setattr__(self, "log_level", self.log_level.strip().upper())

    @property
    def async_database_url(self) -> Optional[str]:
        """DSN with the asyncpg driver selected."""
        if self.database_url and self.database_url.startswith("postgresql://"):
            return "postgresql+asyncpg://" + self.database_url[len("postgresql://"):]
        return self.database_url

    def safe_dict(self) -> dict:
        return {
            "database_url": "<masked>" if self.database_url else "<unset>",
            "database_echo": self.database_echo,
            "database_pool_size": self.database_pool_size,
            "database_max_overflow": self.database_max_overflow,
            "log_level": self.log_level,
            "json_logs": self.json_logs,
        }


# ------------------------------------------------------------------------------
# Loader (singleton)
# ------------------------------------------------------------------------------
_logger = structlog.get_logger(__name__)


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    env_file = Path.cwd() / ".env"
    if env_file.exists():
        load_dotenv(dotenv_path=str(env_file), override=False)

    settings = Settings(
        database_url=_get_env_str("DATABASE_URL"),
        database_echo=_get_env_bool("DATABASE_ECHO", False),
        database_pool_size=_get_env_int("POOL_SIZE", 5),
        database_max_overflow=_get_env_int("MAX_OVERFLOW", 10),
        log_level=_get_env_str("LOG_LEVEL", "INFO") or "INFO",
        json_logs=_get_env_bool("JSON_LOGS", True),
    )

    _logger.debug("Settings loaded", settings=settings.safe_dict())
    return settings
