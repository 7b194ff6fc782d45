"""Database handle for the pantry stores.

One `Database` is built per process and injected into each store. It owns
the engine and session factory between `connect()` and `dispose()`; there is
no lazily created global engine.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .errors import PersistenceError
from .settings import settings

logger = logging.getLogger("recipe_pantry.db")


class Base(DeclarativeBase):
    pass


class Database:
    def __init__(self, database_url: str | None = None, *, echo: bool | None = None):
        self.database_url = database_url or settings.database_url
        self.echo = settings.database_echo if echo is None else echo
        self._engine: Optional[Engine] = None
        self._SessionLocal: Optional[sessionmaker] = None

    def connect(self) -> Engine:
        if self._engine is not None:
            return self._engine

        kwargs = {"echo": self.echo}
        if self.database_url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            # In-memory databases live inside one connection; share it.
            if ":memory:" in self.database_url or self.database_url == "sqlite://":
                kwargs["poolclass"] = StaticPool
        else:
            kwargs["pool_pre_ping"] = True

        try:
            self._engine = create_engine(self.database_url, **kwargs)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create engine for {self.database_url}: {e}")
            raise PersistenceError("Could not connect to database", cause=e) from e

        self._SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self._engine)
        logger.info(f"Connected to {self._engine.url.render_as_string(hide_password=True)}")
        return self._engine

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise PersistenceError("Database is not connected; call connect() first")
        return self._engine

    def create_all(self) -> None:
        from . import models  # noqa: F401  (registers tables on Base.metadata)

        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise PersistenceError("Could not create schema", cause=e) from e

    def drop_all(self) -> None:
        try:
            Base.metadata.drop_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise PersistenceError("Could not drop schema", cause=e) from e

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Database disposed")
        self._engine = None
        self._SessionLocal = None

    def __enter__(self) -> "Database":
        self.connect()
        return self

    def __exit__(self, *exc) -> None:
        self.dispose()

    @contextmanager
    def session_scope(self, session: Session | None = None) -> Iterator[Session]:
        """Yield a session that commits on success and rolls back on failure.

        If `session` is given, it belongs to an outer unit of work: it is
        yielded untouched and the outer scope decides commit or rollback.
        """
        if session is not None:
            yield session
            return

        if self._SessionLocal is None:
            raise PersistenceError("Database is not connected; call connect() first")

        db = self._SessionLocal()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database operation failed: {e}")
            raise PersistenceError(f"Database operation failed: {e.__class__.__name__}", cause=e) from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
