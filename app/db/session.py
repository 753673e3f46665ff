from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from fastapi import HTTPException
from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app.config.settings import settings

# Lazy initialization to avoid import-time database connections
_engine = None
_SessionLocal = None


def _get_engine():
    """Get or create the database engine (lazy initialization).

    The engine is only created when first accessed, not at import time.
    """
    global _engine
    if _engine is None:
        logger.info(f"Initializing database engine: {settings.database_url}")

        connect_args = {}
        if "sqlite" in settings.database_url.lower():
            connect_args = {"check_same_thread": False}
            logger.warning("Using SQLite database (local development only)")
        else:
            connect_args = {"connect_timeout": 10}

        _engine = create_engine(
            settings.database_url,
            connect_args=connect_args,
            echo=False,  # Set to True for SQL query logging
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        logger.info("Database engine initialized")
    return _engine


def get_engine():
    """Get or create the database engine (public API)."""
    return _get_engine()


def _get_session_local():
    """Get or create the session factory (lazy initialization)."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
        logger.info("Database session factory initialized")
    return _SessionLocal


def _handle_session_commit(session: Session) -> None:
    """Commit the open transaction, including changes that were already flushed."""
    if session.in_transaction():
        logger.debug(f"Committing session: dirty={len(session.dirty)}, new={len(session.new)}, deleted={len(session.deleted)}")
        session.commit()
    else:
        logger.debug("No open transaction, skipping commit")


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Get database session context manager.

    Handles database errors vs expected errors separately:
    - HTTPException: Re-raised without logging (expected API responses)
    - MaintenanceError / WorkOrderTransitionError: Re-raised without logging (business logic errors)
    - Other exceptions: Logged as database errors and rolled back
    """
    session = _get_session_local()()
    try:
        yield session
        _handle_session_commit(session)
    except HTTPException:
        session.rollback()
        raise
    except Exception as e:
        # Import here to avoid circular imports
        from app.maintenance.errors import MaintenanceError
        from app.work_orders.lifecycle import WorkOrderTransitionError

        if isinstance(e, (MaintenanceError, WorkOrderTransitionError)):
            logger.debug(f"{type(e).__name__} in session, rolling back (business logic error, not DB error)")
            session.rollback()
            raise
        logger.error(
            f"Database session error, rolling back: {e}. "
            f"Error type: {type(e).__name__}, session state: "
            f"dirty={len(session.dirty)}, new={len(session.new)}, deleted={len(session.deleted)}"
        )
        session.rollback()
        raise
    finally:
        session.close()
