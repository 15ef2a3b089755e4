"""Engine and sessions for the series store.

Settings come from the environment (a local `.env` is loaded first):

- `DATABASE_URL`: SQLAlchemy URL; a SQLite file in the working directory by default
- `EVENTSERIES_SQL_ECHO`: log emitted SQL (falls back to `DEBUG`)
- `EVENTSERIES_DB_POOL_SIZE`, `EVENTSERIES_DB_MAX_OVERFLOW`,
  `EVENTSERIES_DB_POOL_TIMEOUT`: pooling for server databases (Postgres)

Events reference their series through a foreign key. SQLite leaves foreign keys
unenforced unless each connection opts in, so every SQLite engine built here does.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./eventseries.db"


def _env_flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() == "true"


class DatabaseSettings(BaseModel):
    """Connection settings for the series store."""

    url: str = DEFAULT_DATABASE_URL
    echo: bool = False
    pool_size: int = Field(5, ge=1)
    max_overflow: int = Field(5, ge=0)
    pool_timeout: int = Field(30, ge=1, description="Seconds to wait for a pooled connection")

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def is_memory(self) -> bool:
        # sqlite:// and sqlite:///:memory: both open a private in-memory database
        return self.is_sqlite and (self.url.rstrip("/") == "sqlite:" or ":memory:" in self.url)

    @classmethod
    def from_env(cls) -> "DatabaseSettings":
        return cls(
            url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            echo=_env_flag("EVENTSERIES_SQL_ECHO", os.getenv("DEBUG", "False")),
            pool_size=int(os.getenv("EVENTSERIES_DB_POOL_SIZE", "5")),
            max_overflow=int(os.getenv("EVENTSERIES_DB_MAX_OVERFLOW", "5")),
            pool_timeout=int(os.getenv("EVENTSERIES_DB_POOL_TIMEOUT", "30")),
        )


def get_engine_kwargs(settings: DatabaseSettings) -> dict:
    """create_engine kwargs for the given settings (no connection is opened)."""
    kwargs: dict = {"echo": settings.echo}

    if settings.is_sqlite:
        # One process serves requests from several threads.
        kwargs["connect_args"] = {"check_same_thread": False}
        if settings.is_memory:
            # Every session must see the same in-memory database.
            kwargs["poolclass"] = StaticPool
        return kwargs

    kwargs["pool_pre_ping"] = True
    kwargs["pool_size"] = settings.pool_size
    kwargs["max_overflow"] = settings.max_overflow
    kwargs["pool_timeout"] = settings.pool_timeout
    return kwargs


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: Optional[DatabaseSettings] = None) -> Engine:
    settings = settings or DatabaseSettings.from_env()
    engine = create_engine(settings.url, **get_engine_kwargs(settings))
    if settings.is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    logger.debug(f"Series store engine: {engine.url.render_as_string(hide_password=True)}")
    return engine


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


settings = DatabaseSettings.from_env()
engine = build_engine(settings)
SessionLocal = make_session_factory(engine)

# Base class for declarative models
Base = declarative_base()


def get_db() -> Session:
    """Get database session (dependency for FastAPI)."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Optional[Engine] = None) -> None:
    """Create the series and events tables if they do not exist yet."""
    from eventseries.database import models  # noqa: F401  (registers tables)

    target = bind or engine
    Base.metadata.create_all(bind=target)
    logger.info(f"Series store ready: {', '.join(sorted(Base.metadata.tables))}")
