"""Engine construction and table creation for the SQL stores."""

from __future__ import annotations

import structlog
from sqlalchemy import Engine
from sqlalchemy.pool import NullPool, StaticPool
from sqlmodel import SQLModel, create_engine

# Registers the table models on SQLModel.metadata
import tier_rating.models  # noqa: F401

logger = structlog.get_logger()


def create_db_engine(url: str) -> Engine:
    """Create an engine and make sure every table exists.

    In-memory SQLite shares one connection across worker threads; file
    databases open a fresh connection per session.

    Args:
        url: SQLAlchemy database URL.

    Returns:
        Engine with all tables created.
    """
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            engine = create_engine(url, connect_args=connect_args, poolclass=StaticPool)
        else:
            engine = create_engine(url, connect_args=connect_args, poolclass=NullPool)
    else:
        engine = create_engine(url)
    SQLModel.metadata.create_all(engine)
    logger.info("database_ready", url=engine.url.render_as_string(hide_password=True))
    return engine
