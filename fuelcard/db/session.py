"""Database engine construction.

This module centralizes database connectivity primitives to enforce the db-layer
boundary for all SQLAlchemy usage.
"""

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool


def db_create_engine(database_url: str) -> Engine:
    """Create the SQLAlchemy engine for application database access.

    SQLite URLs get thread-shared connections so the engine can be used from
    FastAPI worker threads; in-memory SQLite additionally keeps one static
    connection so the schema survives between checkouts.

    Args:
        database_url: SQLAlchemy database URL.

    Returns:
        Engine: Configured SQLAlchemy engine.

    Raises:
        ValueError: Raised when the database URL is blank.
    """

    normalized_url = database_url.strip()
    if not normalized_url:
        raise ValueError("database_url must not be blank")

    parsed_url = make_url(normalized_url)
    if parsed_url.get_backend_name() != "sqlite":
        return create_engine(normalized_url, pool_pre_ping=True)

    if parsed_url.database in (None, "", ":memory:"):
        return create_engine(
            normalized_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(normalized_url, connect_args={"check_same_thread": False})
