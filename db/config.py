"""
Database settings for the defect store, read from the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

CLOUD_LIKE_ENVIRONMENTS = {"prod", "production", "staging", "cloud"}
DATABASE_URL_VARIABLES = ("DATABASE_URL", "CLOUD_DATABASE_URL", "LOCAL_DATABASE_URL")


@dataclass(frozen=True)
class DatabaseSettings:
    """
    Connection target and pool tuning for the defect store engine.
    """

    url: str
    echo: bool = False
    pool_recycle: int = 1800
    pool_size: int = 5
    max_overflow: int = 10


def load_env_files(project_root: Path | None = None) -> None:
    """
    Load KEY=VALUE pairs from `.env` and `.env.local` when present.

    Variables already set in the process environment win.
    """

    root = project_root or Path(__file__).resolve().parents[1]
    for env_path in (root / ".env", root / ".env.local"):
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            if key and key not in os.environ:
                os.environ[key] = value.strip().strip('"').strip("'")


def normalize_postgres_url(url: str) -> str:
    """
    Rewrite postgres URLs into SQLAlchemy's psycopg driver form.
    """

    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def is_postgres_url(url: str) -> bool:
    return url.startswith("postgresql")


def has_database_url() -> bool:
    """
    True when any of the supported database URL variables is set.
    """

    load_env_files()
    return any(os.getenv(name, "").strip() for name in DATABASE_URL_VARIABLES)


def resolve_database_url() -> str:
    """
    Resolve the defect database URL.

    Priority:
    1) DATABASE_URL
    2) CLOUD_DATABASE_URL when ENVIRONMENT is cloud-like
    3) LOCAL_DATABASE_URL
    """

    load_env_files()

    direct_url = os.getenv("DATABASE_URL", "").strip()
    if direct_url:
        return normalize_postgres_url(direct_url)

    environment = os.getenv("ENVIRONMENT", "local").strip().lower()
    cloud_url = os.getenv("CLOUD_DATABASE_URL", "").strip()
    if environment in CLOUD_LIKE_ENVIRONMENTS and cloud_url:
        return normalize_postgres_url(cloud_url)

    local_url = os.getenv("LOCAL_DATABASE_URL", "").strip()
    if local_url:
        return normalize_postgres_url(local_url)

    raise RuntimeError(
        "No database URL configured for the defect store. Set DATABASE_URL, "
        "or configure LOCAL_DATABASE_URL / CLOUD_DATABASE_URL."
    )


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_database_settings() -> DatabaseSettings:
    """
    Build engine settings from the resolved URL and the pool variables
    SQL_ECHO, DB_POOL_RECYCLE, DB_POOL_SIZE and DB_MAX_OVERFLOW.
    """

    url = resolve_database_url()
    echo = os.getenv("SQL_ECHO", "").strip().lower() in {"1", "true", "yes", "on"}
    return DatabaseSettings(
        url=url,
        echo=echo,
        pool_recycle=_int_env("DB_POOL_RECYCLE", 1800),
        pool_size=_int_env("DB_POOL_SIZE", 5),
        max_overflow=_int_env("DB_MAX_OVERFLOW", 10),
    )
