"""Mini README: SQLAlchemy engine and session management.

Structure:
    * Database - owns the engine and session factory for one database URL.

Usage:
    database = Database("sqlite:///data/fundtracker.db")
    database.init_db()
    with database.session_scope() as session:
        session.execute(...)

``session_scope`` commits when the block finishes and rolls back when it
raises, so a failed write never leaves partial changes behind.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator, List

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..logging_utils import get_logger
from .records import Base

LOGGER = get_logger(__name__)

_IN_MEMORY_SQLITE = {"sqlite://", "sqlite:///:memory:"}


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on."""

    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Engine plus session factory for the sql collection store."""

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self.url = url
        engine_options = {"echo": echo}
        if url.startswith("sqlite"):
            engine_options["connect_args"] = {"check_same_thread": False}
            if url in _IN_MEMORY_SQLITE:
                # One shared connection, otherwise every checkout sees an empty database.
                engine_options["poolclass"] = StaticPool
        else:
            engine_options.update(pool_pre_ping=True, pool_recycle=1800)

        self.engine = create_engine(url, **engine_options)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )
        LOGGER.debug("Database engine created for %s", self.engine.url.render_as_string(hide_password=True))

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Yield a session that commits on success and rolls back on error."""

        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_db(self) -> List[str]:
        """Create missing tables and return their names."""

        Base.metadata.create_all(bind=self.engine)
        tables = sorted(Base.metadata.tables)
        LOGGER.info("Database tables ready: %s", ", ".join(tables))
        return tables
