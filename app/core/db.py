"""
Database engine, session factory and the shared declarative base.

One engine is kept per process and reused by every request. The engine is
built lazily the first time somebody needs it; concurrent first callers
wait on a lock and all receive the same engine.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.core.config import settings
from app.core.errors import StorageError

logger = logging.getLogger(__name__)

Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores foreign keys unless asked per connection."""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class ConnectionManager:
    """Owns the process-wide engine and hands out sessions bound to it"""

    def __init__(self, url: Optional[str] = None, echo: Optional[bool] = None):
        self.url = url or settings.DATABASE_URL
        self.echo = settings.DATABASE_ECHO if echo is None else echo
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self._connected = False
        self._lock = threading.Lock()

    def get_engine(self) -> Engine:
        """Return the shared engine, building it on first use"""
        if self._engine is not None:
            return self._engine

        with self._lock:
            if self._engine is None:
                connect_args = {}
                if self.url.startswith("sqlite"):
                    connect_args["check_same_thread"] = False

                engine = create_engine(self.url, echo=self.echo, connect_args=connect_args)
                self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
                self._engine = engine
                logger.info("Database engine created for %s", engine.url.render_as_string(hide_password=True))
        return self._engine

    def connect(self) -> Engine:
        """Make sure the store is reachable. Safe to call any number of times."""
        engine = self.get_engine()
        if self._connected:
            return engine

        with self._lock:
            if not self._connected:
                try:
                    with engine.connect() as conn:
                        conn.execute(text("SELECT 1"))
                except SQLAlchemyError as exc:
                    logger.error("Database connection failed: %s", exc)
                    raise StorageError("Database is unavailable") from exc
                self._connected = True
                logger.info("Database connection established")
        return engine

    @property
    def connected(self) -> bool:
        return self._connected

    def session(self) -> Session:
        """Open a new session on the shared engine"""
        self.get_engine()
        return self._session_factory()

    def create_all(self) -> None:
        engine = self.connect()
        try:
            Base.metadata.create_all(bind=engine)
        except SQLAlchemyError as exc:
            logger.error("Creating tables failed: %s", exc)
            raise StorageError("Database is unavailable") from exc

    def dispose(self) -> None:
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
            self._engine = None
            self._session_factory = None
            self._connected = False


db_manager = ConnectionManager()


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding a request-scoped session"""
    db = db_manager.session()
    try:
        yield db
    finally:
        db.close()
