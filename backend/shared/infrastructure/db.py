"""
Database configuration and session management.

The engine and session factory are created once per process. Services never
reach for them directly: routes receive a Session through get_db() and pass
it down, and the lifespan handler disposes the engine on shutdown.
"""

import os
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from shared.config.settings import settings, DATABASE_URL


def _calculate_pool_size() -> int:
    """
    Calculate pool size based on CPU cores.
    Formula: (2 * CPU cores) + 1, capped at 20.
    """
    cores = os.cpu_count() or 4
    return min(cores * 2 + 1, 20)


def _engine_options(url: str) -> dict[str, Any]:
    """Engine keyword arguments for the given database URL."""
    if url.startswith("sqlite"):
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live in one connection; share it across threads
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options

    return {
        "pool_pre_ping": True,  # Verify connections before using
        "pool_size": _calculate_pool_size(),
        "max_overflow": 15,
        "pool_timeout": 30,  # Wait max 30s for connection from pool
        "pool_recycle": 1800,  # Recycle connections after 30 minutes
        "connect_args": {"connect_timeout": 10},
    }


def create_db_engine(url: str = DATABASE_URL) -> Engine:
    """Create an engine; SQLite connections get foreign key enforcement."""
    db_engine = create_engine(url, echo=settings.database_echo, **_engine_options(url))

    if url.startswith("sqlite"):
        event.listen(db_engine, "connect", _enable_sqlite_foreign_keys)

    return db_engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


engine = create_db_engine()

# Session factory
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
)

# Session.info key counting open transaction_scope() blocks
_SCOPE_DEPTH_KEY = "transaction_scope_depth"


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency for database sessions.

    Usage:
        @router.get("/teams")
        def list_teams(db: Session = Depends(get_db)):
            return TeamService(db).get_all({})

    The session is automatically closed after the request completes.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Context manager for database sessions outside of FastAPI.

    Usage:
        with get_db_context() as db:
            TeamService(db).get_one(team_id)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def safe_commit(db: Session) -> None:
    """
    Commit with automatic rollback on failure.

    Raises the original exception after rolling back.
    """
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise


@contextmanager
def transaction_scope(db: Session) -> Generator[Session, None, None]:
    """
    Run a block of work as one atomic unit on the given session.

    Everything flushed inside the block is committed together when it exits
    normally and rolled back when it raises. Work issued inside the block must
    not commit on its own.

    Scopes nest: an inner scope joins the unit of the outermost one, which
    alone commits or rolls back.

    Usage:
        with transaction_scope(db):
            db.add(team)
            db.add(player)
    """
    depth = db.info.get(_SCOPE_DEPTH_KEY, 0)
    db.info[_SCOPE_DEPTH_KEY] = depth + 1
    try:
        yield db
        if depth == 0:
            db.commit()
    except Exception:
        if depth == 0:
            db.rollback()
        raise
    finally:
        db.info[_SCOPE_DEPTH_KEY] = depth


def dispose_engine() -> None:
    """Release every pooled connection. Called on application shutdown."""
    engine.dispose()
