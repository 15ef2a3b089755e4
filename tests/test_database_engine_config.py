"""Tests for series-store settings and engine construction."""

import pytest
from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

from eventseries.database.database import (
    DEFAULT_DATABASE_URL,
    DatabaseSettings,
    build_engine,
    get_engine_kwargs,
    init_db,
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "DATABASE_URL",
        "DEBUG",
        "EVENTSERIES_SQL_ECHO",
        "EVENTSERIES_DB_POOL_SIZE",
        "EVENTSERIES_DB_MAX_OVERFLOW",
        "EVENTSERIES_DB_POOL_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestDatabaseSettings:
    def test_defaults_without_env(self, clean_env):
        settings = DatabaseSettings.from_env()
        assert settings.url == DEFAULT_DATABASE_URL
        assert settings.echo is False
        assert (settings.pool_size, settings.max_overflow, settings.pool_timeout) == (5, 5, 30)

    def test_env_overrides(self, clean_env):
        clean_env.setenv("DATABASE_URL", "postgresql+psycopg://u:p@db:5432/events")
        clean_env.setenv("EVENTSERIES_DB_POOL_SIZE", "10")
        clean_env.setenv("EVENTSERIES_DB_MAX_OVERFLOW", "0")
        clean_env.setenv("EVENTSERIES_DB_POOL_TIMEOUT", "5")

        settings = DatabaseSettings.from_env()
        assert settings.is_sqlite is False
        assert (settings.pool_size, settings.max_overflow, settings.pool_timeout) == (10, 0, 5)

    def test_sql_echo_falls_back_to_debug(self, clean_env):
        clean_env.setenv("DEBUG", "true")
        assert DatabaseSettings.from_env().echo is True

        clean_env.setenv("EVENTSERIES_SQL_ECHO", "false")
        assert DatabaseSettings.from_env().echo is False

    @pytest.mark.parametrize(
        "url,is_memory",
        [
            ("sqlite://", True),
            ("sqlite:///:memory:", True),
            ("sqlite:///./eventseries.db", False),
            ("postgresql+psycopg://u:p@localhost/db", False),
        ],
    )
    def test_memory_detection(self, url, is_memory):
        assert DatabaseSettings(url=url).is_memory is is_memory


class TestEngineKwargs:
    def test_sqlite_file_shares_connections_across_threads(self):
        kwargs = get_engine_kwargs(DatabaseSettings(url="sqlite:///./eventseries.db"))
        assert kwargs["connect_args"] == {"check_same_thread": False}
        assert "poolclass" not in kwargs
        assert "pool_size" not in kwargs

    def test_sqlite_memory_uses_static_pool(self):
        kwargs = get_engine_kwargs(DatabaseSettings(url="sqlite:///:memory:"))
        assert kwargs["poolclass"] is StaticPool

    def test_server_database_uses_pool_settings(self):
        settings = DatabaseSettings(
            url="postgresql+psycopg://u:p@localhost:5432/db",
            echo=True,
            pool_size=8,
            max_overflow=2,
            pool_timeout=15,
        )
        kwargs = get_engine_kwargs(settings)
        assert "connect_args" not in kwargs
        assert kwargs == {
            "echo": True,
            "pool_pre_ping": True,
            "pool_size": 8,
            "max_overflow": 2,
            "pool_timeout": 15,
        }


class TestBuildEngine:
    def test_sqlite_enforces_foreign_keys(self):
        engine = build_engine(DatabaseSettings(url="sqlite://"))
        try:
            with engine.connect() as conn:
                assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1
        finally:
            engine.dispose()

    def test_init_db_creates_series_tables(self):
        engine = build_engine(DatabaseSettings(url="sqlite://"))
        try:
            init_db(bind=engine)
            assert {"series", "events"} <= set(inspect(engine).get_table_names())
        finally:
            engine.dispose()
