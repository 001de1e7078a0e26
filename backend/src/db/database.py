"""
Database engine and session factory.

PostgreSQL in production, SQLite for local development and tests. Schema
changes go through Alembic (backend/src/db/migrations).
"""

import os
from pathlib import Path
from typing import Any, Dict, Generator

from dotenv import load_dotenv
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session


# backend/.env, next to src/
_dotenv = Path(__file__).resolve().parents[2] / '.env'
if _dotenv.exists():
    load_dotenv(dotenv_path=_dotenv)

DATABASE_URL = os.environ.get("DAILYPULSE_DB_URL", "sqlite:///./dailypulse.db")


def _engine_options(url: str) -> Dict[str, Any]:
    if url.startswith("sqlite"):
        # No pooling knobs for SQLite; FastAPI hands sessions across threads
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": 10,
        "max_overflow": 10,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


def build_engine(url: str) -> Engine:
    """Create an engine for `url`, enforcing foreign keys on SQLite."""
    new_engine = create_engine(url, echo=False, future=True, **_engine_options(url))

    if new_engine.dialect.name == "sqlite":
        @event.listens_for(new_engine, "connect")
        def _sqlite_foreign_keys(dbapi_conn, connection_record):
            dbapi_conn.execute("pragma foreign_keys=ON")

    return new_engine


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency yielding a request-scoped session.

    The session is closed after the response; endpoints commit explicitly.
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
