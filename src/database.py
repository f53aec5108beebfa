"""Database configuration and session management."""

import logging
from collections.abc import Generator, Iterator
from contextlib import contextmanager
from typing import Any

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from src.config import Settings

logger = logging.getLogger(__name__)

Base: Any = declarative_base()


class Database:
    """Owns the engine and session factory for one application instance."""

    def __init__(self, settings: Settings):
        connect_args = {"check_same_thread": False} if settings.is_sqlite else {}
        engine_kwargs: dict[str, Any] = {"pool_pre_ping": True, "echo": settings.database_echo}
        if not settings.is_sqlite:
            engine_kwargs.update(pool_size=5, max_overflow=10)

        self.engine = create_engine(
            settings.database_url, connect_args=connect_args, **engine_kwargs
        )
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Provide a session that is always closed afterwards."""
        db = self.session_factory()
        try:
            yield db
        finally:
            db.close()

    def create_all(self) -> None:
        """Create all tables that do not exist yet."""
        # Import all models here so they are registered with Base.metadata
        from src import models  # noqa: F401

        logger.info("Creating database tables")
        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    database: Database = request.app.state.database
    with database.session() as db:
        yield db
