"""
Database Configuration and Session Management

Wraps the SQLAlchemy engine and session factory in a Database object that
create_app() builds once and stores on app.state. Route dependencies pull
sessions from it through get_db(), so nothing here is a module-level
singleton and tests can point an app at their own database.
"""
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
import logging

logger = logging.getLogger(__name__)

# Base class for all models
Base = declarative_base()


class Database:
    """Owns the engine (and its connection pool) for one application."""

    def __init__(
        self,
        url: str,
        pool_size: int = 20,
        max_overflow: int = 40,
        echo: bool = False,
    ):
        self.url = url

        if url.startswith("sqlite"):
            # SQLite connections are used across the threadpool FastAPI runs
            # sync dependencies in; in-memory databases must share a single
            # connection or every session would see an empty schema.
            engine_kwargs = {"connect_args": {"check_same_thread": False}}
            if url in ("sqlite://", "sqlite:///:memory:"):
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs = {
                "pool_size": pool_size,
                "max_overflow": max_overflow,
                "pool_pre_ping": True,  # Handles stale connections
            }

        self.engine = create_engine(url, echo=echo, **engine_kwargs)

        # expire_on_commit=False lets handlers serialize objects after commit
        # without another round-trip.
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
            expire_on_commit=False,
        )

        if url.startswith("postgresql"):
            event.listen(self.engine, "connect", _set_utc_timezone)

    def session(self) -> Session:
        return self.session_factory()

    def ping(self) -> None:
        """Run a trivial query; raises if the database is unreachable."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def create_all(self) -> None:
        # Importing the models registers them on Base.metadata
        import notes_api.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def _set_utc_timezone(dbapi_connection, connection_record):
    """Keep timestamps in UTC for every pooled PostgreSQL connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("SET TIME ZONE 'UTC'")
    cursor.close()
    logger.debug("New database connection established")


def get_db(request: Request) -> Iterator[Session]:
    """
    Dependency function that provides a database session.

    The session is closed after the request completes. Tenant scoping is
    the caller's job: every query must filter by the identity's tenant_id.
    """
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()
