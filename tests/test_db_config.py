"""
tests/test_db_config.py

Database URL resolution, `.env` loading and engine settings.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from db.config import (
    DatabaseSettings,
    get_database_settings,
    has_database_url,
    load_env_files,
    normalize_postgres_url,
    resolve_database_url,
)
from db.session import create_db_engine

_VARIABLES = (
    "DATABASE_URL",
    "CLOUD_DATABASE_URL",
    "LOCAL_DATABASE_URL",
    "ENVIRONMENT",
    "SQL_ECHO",
    "DB_POOL_RECYCLE",
    "DB_POOL_SIZE",
    "DB_MAX_OVERFLOW",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so teardown also removes values written by load_env_files.
    for name in _VARIABLES:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


class TestResolveDatabaseURL:
    def test_direct_url_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATABASE_URL", "postgres://direct/defects")
        monkeypatch.setenv("LOCAL_DATABASE_URL", "postgresql://local/defects")

        assert resolve_database_url() == "postgresql+psycopg://direct/defects"

    def test_cloud_url_needs_cloud_like_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLOUD_DATABASE_URL", "postgresql://cloud/defects")
        monkeypatch.setenv("LOCAL_DATABASE_URL", "postgresql://local/defects")

        assert resolve_database_url() == "postgresql+psycopg://local/defects"

        monkeypatch.setenv("ENVIRONMENT", "Production")
        assert resolve_database_url() == "postgresql+psycopg://cloud/defects"

    def test_missing_configuration_raises(self) -> None:
        assert has_database_url() is False
        with pytest.raises(RuntimeError):
            resolve_database_url()

    def test_driver_form_is_left_alone(self) -> None:
        assert normalize_postgres_url("postgresql+psycopg://h/db") == "postgresql+psycopg://h/db"


def test_env_file_does_not_override_process_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / ".env").write_text(
        "# defect store\nDATABASE_URL='postgresql://from-file/defects'\nDB_POOL_SIZE=9\n",
        encoding="utf-8",
    )
    (tmp_path / ".env.local").write_text("DB_POOL_SIZE=3\n", encoding="utf-8")
    monkeypatch.setenv("DB_MAX_OVERFLOW", "4")

    load_env_files(tmp_path)

    assert os.environ["DATABASE_URL"] == "postgresql://from-file/defects"
    assert os.environ["DB_POOL_SIZE"] == "9"
    assert os.environ["DB_MAX_OVERFLOW"] == "4"


def test_engine_settings_read_pool_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql://h/defects")
    monkeypatch.setenv("SQL_ECHO", "yes")
    monkeypatch.setenv("DB_POOL_SIZE", "12")
    monkeypatch.setenv("DB_MAX_OVERFLOW", "not-a-number")

    settings = get_database_settings()

    assert settings == DatabaseSettings(
        url="postgresql+psycopg://h/defects",
        echo=True,
        pool_recycle=1800,
        pool_size=12,
        max_overflow=10,
    )


def test_engine_rejects_non_postgres_url() -> None:
    with pytest.raises(RuntimeError):
        create_db_engine(DatabaseSettings(url="sqlite:///defects.db"))
