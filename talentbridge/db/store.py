"""
Entity store - the relational persistence handle.

An ``EntityStore`` is constructed explicitly, opened at application
startup and closed at shutdown. Services receive it at construction and
run every operation inside ``store.session()``.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from talentbridge.core.errors import StoreError
from talentbridge.db.tables import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class EntityStore:
    """Owns the SQLAlchemy engine and session factory."""

    def __init__(self, url: str, timeout_seconds: int = 10, echo: bool = False):
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.echo = echo
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    def _engine_options(self) -> dict:
        if self.is_sqlite:
            options = {
                "connect_args": {"check_same_thread": False, "timeout": self.timeout_seconds},
            }
            # In-memory databases live and die with a single connection
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                options["poolclass"] = StaticPool
            return options

        # pool_size=5: maintain 5 connections ready
        # max_overflow=10: allow 10 extra connections under load
        return {
            "pool_size": 5,
            "max_overflow": 10,
            "pool_pre_ping": True,
            "connect_args": {
                "connect_timeout": self.timeout_seconds,
                "options": f"-c statement_timeout={self.timeout_seconds * 1000}",
            },
        }

    def open(self) -> "EntityStore":
        if self.engine is not None:
            return self
        self.engine = create_engine(self.url, echo=self.echo, **self._engine_options())
        if self.is_sqlite:
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self._session_factory = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )
        logger.info("Entity store opened (%s)", self.engine.url.render_as_string(hide_password=True))
        return self

    def close(self) -> None:
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        self._session_factory = None
        logger.info("Entity store closed")

    def create_schema(self) -> None:
        """Create all tables and indexes that do not exist yet."""
        Base.metadata.create_all(self._require_engine())

    def drop_schema(self) -> None:
        Base.metadata.drop_all(self._require_engine())

    def _require_engine(self) -> Engine:
        if self.engine is None:
            raise StoreError("Entity store is not open")
        return self.engine

    @contextmanager
    def session(self) -> Iterator[Session]:
        """
        Unit of work: commit on success, roll back on any error.
        Usage:
            with store.session() as session:
                session.add(obj)

        Raw SQLAlchemy failures leave as ``StoreError``; domain errors
        raised inside the block propagate unchanged.
        """
        self._require_engine()
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            raise StoreError("Store operation failed", exc) from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def ping(self) -> bool:
        """
        Test if the store is reachable.
        Returns True if connection successful, False otherwise.
        """
        try:
            with self._require_engine().connect() as conn:
                return conn.execute(text("SELECT 1")).scalar() == 1
        except (SQLAlchemyError, StoreError) as exc:
            logger.warning("Store ping failed: %s", exc)
            return False
